"""Update Invoice Use Case: edit lines and header, reconcile stock by delta."""

from zycle.application.dto.requests import UpdateInvoiceRequest
from zycle.application.dto.responses import InvoiceResponse
from zycle.application.use_cases.create_invoice import InvoiceMutationResult
from zycle.config import get_logger
from zycle.core.entities.invoice import Invoice, InvoiceType
from zycle.core.exceptions import (
    InvoiceNotFoundError,
    LoanPaymentError,
    MaterialNotFoundError,
)
from zycle.core.interfaces.document_store import IDocumentStore, WriteBatch
from zycle.core.interfaces.invoice_store import IInvoiceStore
from zycle.core.interfaces.material_store import IMaterialStore
from zycle.core.services.invoice_validation import (
    build_line_items,
    check_line_requests,
    check_payment_method,
    check_sale_stock,
    materials_to_resolve,
)
from zycle.core.services.stock_reconciliation import DELTA_EPSILON, compute_stock_deltas

logger = get_logger(__name__)


class UpdateInvoiceUseCase:
    """
    Update an existing invoice.

    The stored line items are always re-read and diffed against the new
    ones; only the net difference per material is applied to stock, in the
    same batch as the invoice merge. Saving unchanged lines touches no stock.
    """

    def __init__(
        self,
        document_store: IDocumentStore | None = None,
        material_store: IMaterialStore | None = None,
        invoice_store: IInvoiceStore | None = None,
    ):
        self._document_store = document_store
        self._material_store = material_store
        self._invoice_store = invoice_store

    async def _get_document_store(self) -> IDocumentStore:
        if self._document_store is None:
            from zycle.infrastructure.storage.sqlite import get_document_store

            self._document_store = await get_document_store()
        return self._document_store

    async def _get_material_store(self) -> IMaterialStore:
        if self._material_store is None:
            from zycle.infrastructure.storage.documents import get_material_store

            self._material_store = await get_material_store()
        return self._material_store

    async def _get_invoice_store(self) -> IInvoiceStore:
        if self._invoice_store is None:
            from zycle.infrastructure.storage.documents import get_invoice_store

            self._invoice_store = await get_invoice_store()
        return self._invoice_store

    async def execute(
        self,
        tenant_id: str,
        invoice_type: InvoiceType,
        invoice_id: str,
        request: UpdateInvoiceRequest,
    ) -> InvoiceMutationResult:
        """Execute update invoice use case."""
        logger.info(
            "update_invoice_started",
            tenant_id=tenant_id,
            invoice_type=invoice_type.value,
            invoice_id=invoice_id,
            items=len(request.items),
        )

        check_line_requests(request.items)
        check_payment_method(invoice_type, request.payment_method)

        # 1. Previous items come from the store, never from the caller
        invoice_store = await self._get_invoice_store()
        existing = await invoice_store.get(tenant_id, invoice_type, invoice_id)
        if existing is None:
            raise InvoiceNotFoundError(invoice_type.value, invoice_id)

        # Kept lines hold their snapshot; only new lines and materials whose
        # stock moves are read from the catalog
        request_deltas = compute_stock_deltas(existing.items, request.items, invoice_type)
        material_store = await self._get_material_store()
        materials = await material_store.get_many(
            tenant_id, materials_to_resolve(request.items, existing.items, request_deltas)
        )
        for material_id in request_deltas:
            if material_id not in materials:
                raise MaterialNotFoundError(material_id)
        items = build_line_items(request.items, materials, existing.items)
        if invoice_type is InvoiceType.SALE:
            check_sale_stock(items, existing.items, materials)

        # The withheld loan payment is fixed, so the lines must still cover it
        total = sum(item.subtotal for item in items)
        if existing.loan_payment > total + DELTA_EPSILON:
            raise LoanPaymentError(
                f"invoice total {total:g} is below the withheld loan payment",
                existing.loan_payment,
            )

        # 2. Deltas against what was stored
        deltas = compute_stock_deltas(existing.items, items, invoice_type)

        updated = Invoice.model_validate(
            {
                **existing.model_dump(),
                "invoice_date": request.invoice_date or existing.invoice_date,
                "counterparty_name": request.counterparty_name,
                "counterparty_identification": (
                    request.counterparty_identification
                    if invoice_type is InvoiceType.PURCHASE
                    else None
                ),
                "payment_method": request.payment_method,
                "items": [item.model_dump() for item in items],
                "notes": request.notes,
            }
        )

        # 3. One batch: invoice merge plus net stock increments
        batch = WriteBatch()
        invoice_store.stage_update(batch, tenant_id, updated)
        for material_id, delta in deltas.items():
            material_store.stage_stock_increment(batch, tenant_id, material_id, delta)

        document_store = await self._get_document_store()
        await document_store.commit_batch(batch)

        saved = await invoice_store.get(tenant_id, invoice_type, invoice_id)
        if saved is None:
            raise InvoiceNotFoundError(invoice_type.value, invoice_id)

        logger.info(
            "update_invoice_complete",
            tenant_id=tenant_id,
            invoice_id=invoice_id,
            invoice_type=invoice_type.value,
            number=saved.number,
            total=saved.total,
            deltas=deltas,
        )
        return InvoiceMutationResult(invoice=saved, stock_deltas=deltas)

    def to_response(self, result: InvoiceMutationResult) -> InvoiceResponse:
        """Convert result to API response."""
        return InvoiceResponse.from_entity(result.invoice, stock_deltas=result.stock_deltas)
