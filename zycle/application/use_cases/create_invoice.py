"""Create Invoice Use Case: new purchase or sale with atomic stock update."""

from dataclasses import dataclass, field
from datetime import date

from zycle.application.dto.requests import CreateInvoiceRequest
from zycle.application.dto.responses import InvoiceResponse
from zycle.config import get_logger
from zycle.core.entities.invoice import Invoice, InvoiceType
from zycle.core.entities.loan import LoanPayment
from zycle.core.exceptions import (
    DuplicateInvoiceNumberError,
    InvoiceNotFoundError,
    LoanPaymentError,
    UniqueConstraintError,
)
from zycle.core.interfaces.document_store import IDocumentStore, WriteBatch
from zycle.core.interfaces.invoice_store import IInvoiceStore
from zycle.core.interfaces.loan_store import ILoanStore
from zycle.core.interfaces.material_store import IMaterialStore
from zycle.core.services.invoice_numbering import InvoiceNumberingService
from zycle.core.services.invoice_validation import (
    build_line_items,
    check_line_requests,
    check_payment_method,
    check_sale_stock,
)
from zycle.core.services.stock_reconciliation import DELTA_EPSILON, compute_stock_deltas

logger = get_logger(__name__)


@dataclass
class InvoiceMutationResult:
    """Result of saving an invoice."""

    invoice: Invoice
    stock_deltas: dict[str, float] = field(default_factory=dict)


class CreateInvoiceUseCase:
    """
    Create a purchase or sale invoice.

    The invoice document, one stock increment per affected material and,
    for purchases, the loan payment are committed in a single batch.
    """

    def __init__(
        self,
        document_store: IDocumentStore | None = None,
        material_store: IMaterialStore | None = None,
        invoice_store: IInvoiceStore | None = None,
        loan_store: ILoanStore | None = None,
    ):
        self._document_store = document_store
        self._material_store = material_store
        self._invoice_store = invoice_store
        self._loan_store = loan_store

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

    async def _get_loan_store(self) -> ILoanStore:
        if self._loan_store is None:
            from zycle.infrastructure.storage.documents import get_loan_store

            self._loan_store = await get_loan_store()
        return self._loan_store

    async def execute(
        self,
        tenant_id: str,
        invoice_type: InvoiceType,
        request: CreateInvoiceRequest,
    ) -> InvoiceMutationResult:
        """Execute create invoice use case."""
        logger.info(
            "create_invoice_started",
            tenant_id=tenant_id,
            invoice_type=invoice_type.value,
            items=len(request.items),
        )

        # 1. Local checks, no store access
        check_line_requests(request.items)
        check_payment_method(invoice_type, request.payment_method)
        if invoice_type is InvoiceType.SALE and request.loan_payment:
            raise LoanPaymentError(
                "only purchase invoices can carry a loan payment", request.loan_payment
            )
        if request.loan_payment < 0:
            raise LoanPaymentError("loan payment cannot be negative", request.loan_payment)

        # 2. Resolve materials and check sale stock
        material_store = await self._get_material_store()
        materials = await material_store.get_many(
            tenant_id, [item.material_id for item in request.items]
        )
        items = build_line_items(request.items, materials)
        if invoice_type is InvoiceType.SALE:
            check_sale_stock(items, [], materials)

        total = sum(item.subtotal for item in items)
        if request.loan_payment > 0:
            await self._check_loan_payment(tenant_id, request, total)

        # 3. Number and deltas
        invoice_store = await self._get_invoice_store()
        number = await InvoiceNumberingService(invoice_store).next_number(tenant_id, invoice_type)
        deltas = compute_stock_deltas([], items, invoice_type)

        invoice = Invoice(
            invoice_type=invoice_type,
            number=number,
            invoice_date=request.invoice_date or date.today(),
            counterparty_name=request.counterparty_name,
            counterparty_identification=(
                request.counterparty_identification
                if invoice_type is InvoiceType.PURCHASE
                else None
            ),
            payment_method=request.payment_method,
            items=items,
            notes=request.notes,
            loan_payment=request.loan_payment,
            loan_id=request.loan_id if request.loan_payment > 0 else None,
        )

        # 4. One batch: invoice, stock increments, loan payment
        batch = WriteBatch()
        invoice_id = invoice_store.stage_create(batch, tenant_id, invoice)
        for material_id, delta in deltas.items():
            material_store.stage_stock_increment(batch, tenant_id, material_id, delta)
        if invoice.loan_id:
            loan_store = await self._get_loan_store()
            loan_store.stage_payment(
                batch,
                tenant_id,
                invoice.loan_id,
                LoanPayment(
                    amount=invoice.loan_payment,
                    paid_on=invoice.invoice_date,
                    note=f"Withheld on purchase invoice #{number}",
                    invoice_id=invoice_id,
                ),
            )

        document_store = await self._get_document_store()
        try:
            await document_store.commit_batch(batch)
        except UniqueConstraintError as e:
            logger.warning(
                "invoice_number_collision",
                tenant_id=tenant_id,
                invoice_type=invoice_type.value,
                number=number,
            )
            raise DuplicateInvoiceNumberError(invoice_type.value, number) from e

        # 5. Return what was persisted
        saved = await invoice_store.get(tenant_id, invoice_type, invoice_id)
        if saved is None:
            raise InvoiceNotFoundError(invoice_type.value, invoice_id)

        logger.info(
            "create_invoice_complete",
            tenant_id=tenant_id,
            invoice_id=invoice_id,
            invoice_type=invoice_type.value,
            number=number,
            total=saved.total,
            deltas=deltas,
        )
        return InvoiceMutationResult(invoice=saved, stock_deltas=deltas)

    async def _check_loan_payment(
        self, tenant_id: str, request: CreateInvoiceRequest, total: float
    ) -> None:
        if not request.loan_id:
            raise LoanPaymentError("a loan payment needs a loan_id", request.loan_payment)

        loan_store = await self._get_loan_store()
        loan = await loan_store.get(tenant_id, request.loan_id)
        if loan is None:
            raise LoanPaymentError(f"loan not found: {request.loan_id}", request.loan_id)
        if request.loan_payment > loan.outstanding_balance + DELTA_EPSILON:
            raise LoanPaymentError(
                f"payment exceeds the outstanding balance of {loan.outstanding_balance:g}",
                request.loan_payment,
            )
        if request.loan_payment > total + DELTA_EPSILON:
            raise LoanPaymentError(
                f"payment exceeds the invoice total of {total:g}",
                request.loan_payment,
            )

    def to_response(self, result: InvoiceMutationResult) -> InvoiceResponse:
        """Convert result to API response."""
        return InvoiceResponse.from_entity(result.invoice, stock_deltas=result.stock_deltas)
