"""Document-store implementation of purchase and sale invoice storage."""

from zycle.core.entities.invoice import Invoice, InvoiceType
from zycle.core.interfaces.document_store import (
    SERVER_TIMESTAMP,
    DocumentSnapshot,
    IDocumentStore,
    WriteBatch,
)
from zycle.core.interfaces.invoice_store import IInvoiceStore
from zycle.infrastructure.storage.documents.paths import invoices_path

# Written on every update. number, invoice_type, loan_payment and loan_id
# are fixed at creation.
UPDATABLE_FIELDS = (
    "invoice_date",
    "counterparty_name",
    "counterparty_identification",
    "payment_method",
    "items",
    "total",
    "notes",
    "net_paid",
)


class DocumentInvoiceStore(IInvoiceStore):
    """Invoices stored under ``tenants/{tenant}/{purchase|sale}_invoices``."""

    def __init__(self, document_store: IDocumentStore):
        self._documents = document_store

    async def get(
        self, tenant_id: str, invoice_type: InvoiceType, invoice_id: str
    ) -> Invoice | None:
        snapshot = await self._documents.get_document(
            invoices_path(tenant_id, invoice_type), invoice_id
        )
        return self._snapshot_to_invoice(snapshot) if snapshot else None

    async def get_last_number(self, tenant_id: str, invoice_type: InvoiceType) -> int | None:
        snapshots = await self._documents.query_collection(
            invoices_path(tenant_id, invoice_type),
            order_by="number",
            descending=True,
            limit=1,
        )
        if not snapshots:
            return None
        return int(snapshots[0].data["number"])

    async def list_recent(
        self, tenant_id: str, invoice_type: InvoiceType, limit: int = 5
    ) -> list[Invoice]:
        snapshots = await self._documents.query_collection(
            invoices_path(tenant_id, invoice_type),
            order_by="invoice_date",
            then_by="number",
            descending=True,
            limit=limit,
        )
        return [self._snapshot_to_invoice(s) for s in snapshots]

    def stage_create(self, batch: WriteBatch, tenant_id: str, invoice: Invoice) -> str:
        invoice_id = invoice.id or self._documents.new_id()
        fields = invoice.model_dump(mode="json", exclude={"id", "created_at", "updated_at"})
        fields["created_at"] = SERVER_TIMESTAMP
        fields["updated_at"] = SERVER_TIMESTAMP
        batch.set(invoices_path(tenant_id, invoice.invoice_type), invoice_id, fields)
        return invoice_id

    def stage_update(self, batch: WriteBatch, tenant_id: str, invoice: Invoice) -> None:
        if not invoice.id:
            raise ValueError("Cannot update an invoice without an id")
        dumped = invoice.model_dump(mode="json", include=set(UPDATABLE_FIELDS))
        fields = {name: dumped[name] for name in UPDATABLE_FIELDS}
        fields["updated_at"] = SERVER_TIMESTAMP
        batch.set(invoices_path(tenant_id, invoice.invoice_type), invoice.id, fields, merge=True)

    def _snapshot_to_invoice(self, snapshot: DocumentSnapshot) -> Invoice:
        data = dict(snapshot.data)
        data.setdefault("created_at", snapshot.created_at)
        data.setdefault("updated_at", snapshot.updated_at)
        return Invoice.model_validate({**data, "id": snapshot.id})
