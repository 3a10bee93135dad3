"""Create Loan Use Case."""

from datetime import date

from zycle.application.dto.requests import CreateLoanRequest
from zycle.application.dto.responses import LoanResponse
from zycle.config import get_logger
from zycle.core.entities.loan import Loan
from zycle.core.exceptions import LoanNotFoundError
from zycle.core.interfaces.document_store import IDocumentStore, WriteBatch
from zycle.core.interfaces.loan_store import ILoanStore

logger = get_logger(__name__)


class CreateLoanUseCase:
    """Register a loan; the outstanding balance starts at the full amount."""

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

    async def execute(self, tenant_id: str, request: CreateLoanRequest) -> Loan:
        """Execute create loan use case."""
        logger.info(
            "create_loan_started",
            tenant_id=tenant_id,
            beneficiary_type=request.beneficiary_type.value,
            amount=request.amount,
        )

        loan = Loan(
            beneficiary_type=request.beneficiary_type,
            beneficiary_id=request.beneficiary_id,
            beneficiary_name=request.beneficiary_name,
            amount=request.amount,
            loan_date=request.loan_date or date.today(),
            outstanding_balance=request.amount,
            notes=request.notes,
        )

        loan_store = await self._get_loan_store()
        batch = WriteBatch()
        loan_id = loan_store.stage_create(batch, tenant_id, loan)
        document_store = await self._get_document_store()
        await document_store.commit_batch(batch)

        saved = await loan_store.get(tenant_id, loan_id)
        if saved is None:
            raise LoanNotFoundError(loan_id)

        logger.info("create_loan_complete", tenant_id=tenant_id, loan_id=loan_id)
        return saved

    def to_response(self, loan: Loan) -> LoanResponse:
        """Convert result to API response."""
        return LoanResponse.from_entity(loan)
