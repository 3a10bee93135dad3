"""Storage infrastructure implementations."""

from zycle.infrastructure.storage.documents import (
    DocumentInvoiceStore,
    DocumentLoanStore,
    DocumentMaterialStore,
    get_invoice_store,
    get_loan_store,
    get_material_store,
)
from zycle.infrastructure.storage.sqlite import (
    SQLiteDocumentStore,
    close_pool,
    get_document_store,
    get_pool,
)

__all__ = [
    # Typed stores
    "DocumentInvoiceStore",
    "DocumentLoanStore",
    "DocumentMaterialStore",
    "get_invoice_store",
    "get_loan_store",
    "get_material_store",
    # Document store
    "SQLiteDocumentStore",
    "get_document_store",
    # Connection pool
    "get_pool",
    "close_pool",
]
