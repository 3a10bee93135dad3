"""Register Loan Payment Use Case: standalone repayment outside an invoice."""

from datetime import date

from zycle.application.dto.requests import LoanPaymentRequest
from zycle.application.dto.responses import LoanResponse
from zycle.config import get_logger
from zycle.core.entities.loan import Loan, LoanPayment
from zycle.core.exceptions import LoanNotFoundError, LoanPaymentError
from zycle.core.interfaces.document_store import IDocumentStore, WriteBatch
from zycle.core.interfaces.loan_store import ILoanStore
from zycle.core.services.stock_reconciliation import DELTA_EPSILON

logger = get_logger(__name__)


class RegisterLoanPaymentUseCase:
    """
    Record a payment against a loan.

    The balance is decremented with an atomic increment and the payment is
    appended to the loan's history in the same batch.
    """

    def __init__(
        self,
        document_store: IDocumentStore | None = None,
        loan_store: ILoanStore | None = None,
    ):
        self._document_store = document_store
        self._loan_store = loan_store

    async def _get_document_store(self) -> IDocumentStore:
        if self._document_store is None:
            from zycle.infrastructure.storage.sqlite import get_document_store

            self._document_store = await get_document_store()
        return self._document_store

    async def _get_loan_store(self) -> ILoanStore:
        if self._loan_store is None:
            from zycle.infrastructure.storage.documents import get_loan_store

            self._loan_store = await get_loan_store()
        return self._loan_store

    async def execute(
        self, tenant_id: str, loan_id: str, request: LoanPaymentRequest
    ) -> Loan:
        """Execute register loan payment use case."""
        logger.info(
            "register_loan_payment_started",
            tenant_id=tenant_id,
            loan_id=loan_id,
            amount=request.amount,
        )

        if request.amount <= 0:
            raise LoanPaymentError("payment must be greater than zero", request.amount)

        loan_store = await self._get_loan_store()
        loan = await loan_store.get(tenant_id, loan_id)
        if loan is None:
            raise LoanNotFoundError(loan_id)
        if request.amount > loan.outstanding_balance + DELTA_EPSILON:
            raise LoanPaymentError(
                f"payment exceeds the outstanding balance of {loan.outstanding_balance:g}",
                request.amount,
            )

        payment = LoanPayment(
            amount=request.amount,
            paid_on=request.paid_on or date.today(),
            note=request.note,
        )
        batch = WriteBatch()
        loan_store.stage_payment(batch, tenant_id, loan_id, payment)
        document_store = await self._get_document_store()
        await document_store.commit_batch(batch)

        saved = await loan_store.get(tenant_id, loan_id)
        if saved is None:
            raise LoanNotFoundError(loan_id)

        logger.info(
            "register_loan_payment_complete",
            tenant_id=tenant_id,
            loan_id=loan_id,
            outstanding_balance=saved.outstanding_balance,
            status=saved.status.value,
        )
        return saved

    def to_response(self, loan: Loan) -> LoanResponse:
        """Convert result to API response."""
        return LoanResponse.from_entity(loan)
