"""
Sequential invoice numbering.

Purchase and sale invoices are numbered independently, starting at 1.
The next number is read from the highest stored number. Two concurrent
creations can read the same value; the store's unique number index rejects
the second commit with DuplicateInvoiceNumberError.
"""

from zycle.config import get_logger
from zycle.core.entities.invoice import InvoiceType
from zycle.core.interfaces.invoice_store import IInvoiceStore

logger = get_logger(__name__)


class InvoiceNumberingService:
    """Pure service; the invoice store is injected via constructor."""

    def __init__(self, invoice_store: IInvoiceStore) -> None:
        self._invoice_store = invoice_store

    async def next_number(self, tenant_id: str, invoice_type: InvoiceType) -> int:
        """Return the number the next invoice of this type should carry."""
        last = await self._invoice_store.get_last_number(tenant_id, invoice_type)
        number = 1 if last is None else last + 1
        logger.debug(
            "invoice_number_assigned",
            tenant_id=tenant_id,
            invoice_type=invoice_type.value,
            number=number,
        )
        return number
