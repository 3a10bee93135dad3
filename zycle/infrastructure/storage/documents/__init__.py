"""Typed stores over the document store."""

from zycle.infrastructure.storage.documents.invoice_store import DocumentInvoiceStore
from zycle.infrastructure.storage.documents.loan_store import DocumentLoanStore
from zycle.infrastructure.storage.documents.material_store import DocumentMaterialStore
from zycle.infrastructure.storage.documents.paths import (
    invoices_path,
    loans_path,
    materials_path,
)
from zycle.infrastructure.storage.sqlite import get_document_store

# Singleton instances
_material_store: DocumentMaterialStore | None = None
_invoice_store: DocumentInvoiceStore | None = None
_loan_store: DocumentLoanStore | None = None


async def get_material_store() -> DocumentMaterialStore:
    """Get singleton material store instance."""
    global _material_store
    if _material_store is None:
        _material_store = DocumentMaterialStore(await get_document_store())
    return _material_store


async def get_invoice_store() -> DocumentInvoiceStore:
    """Get singleton invoice store instance."""
    global _invoice_store
    if _invoice_store is None:
        _invoice_store = DocumentInvoiceStore(await get_document_store())
    return _invoice_store


async def get_loan_store() -> DocumentLoanStore:
    """Get singleton loan store instance."""
    global _loan_store
    if _loan_store is None:
        _loan_store = DocumentLoanStore(await get_document_store())
    return _loan_store


__all__ = [
    "DocumentInvoiceStore",
    "DocumentLoanStore",
    "DocumentMaterialStore",
    "get_invoice_store",
    "get_loan_store",
    "get_material_store",
    "invoices_path",
    "loans_path",
    "materials_path",
]
