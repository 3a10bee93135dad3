"""Abstract interface for purchase and sale invoice storage."""

from abc import ABC, abstractmethod

from zycle.core.entities.invoice import Invoice, InvoiceType
from zycle.core.interfaces.document_store import WriteBatch


class IInvoiceStore(ABC):
    """Interface for invoice reads and staged invoice writes."""

    @abstractmethod
    async def get(
        self, tenant_id: str, invoice_type: InvoiceType, invoice_id: str
    ) -> Invoice | None:
        """Get invoice by ID."""
        pass

    @abstractmethod
    async def get_last_number(self, tenant_id: str, invoice_type: InvoiceType) -> int | None:
        """Get the highest invoice number of this type, or None if there are none."""
        pass

    @abstractmethod
    async def list_recent(
        self, tenant_id: str, invoice_type: InvoiceType, limit: int = 5
    ) -> list[Invoice]:
        """List the latest invoices by invoice date, newest first."""
        pass

    @abstractmethod
    def stage_create(self, batch: WriteBatch, tenant_id: str, invoice: Invoice) -> str:
        """Stage a new invoice document with server timestamps. Returns its ID."""
        pass

    @abstractmethod
    def stage_update(self, batch: WriteBatch, tenant_id: str, invoice: Invoice) -> None:
        """Stage a merge of the editable invoice fields onto the stored document."""
        pass
