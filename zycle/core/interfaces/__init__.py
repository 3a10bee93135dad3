"""Core interfaces (ports) for the back office."""

from zycle.core.interfaces.document_store import (
    SERVER_TIMESTAMP,
    ArrayUnionWrite,
    CollectionEmpty,
    DeleteWrite,
    DocumentSnapshot,
    FieldFilter,
    FieldTotalEquals,
    IDocumentStore,
    IncrementWrite,
    SetWrite,
    UpdateWrite,
    WriteBatch,
)
from zycle.core.interfaces.invoice_store import IInvoiceStore
from zycle.core.interfaces.loan_store import ILoanStore
from zycle.core.interfaces.material_store import IMaterialStore

__all__ = [
    "SERVER_TIMESTAMP",
    "ArrayUnionWrite",
    "CollectionEmpty",
    "DeleteWrite",
    "DocumentSnapshot",
    "FieldFilter",
    "FieldTotalEquals",
    "IDocumentStore",
    "IInvoiceStore",
    "ILoanStore",
    "IMaterialStore",
    "IncrementWrite",
    "SetWrite",
    "UpdateWrite",
    "WriteBatch",
]
