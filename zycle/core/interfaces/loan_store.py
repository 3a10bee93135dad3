"""Abstract interface for loan storage."""

from abc import ABC, abstractmethod

from zycle.core.entities.loan import Loan, LoanPayment
from zycle.core.interfaces.document_store import WriteBatch


class ILoanStore(ABC):
    """Interface for loan reads and staged loan writes."""

    @abstractmethod
    async def get(self, tenant_id: str, loan_id: str) -> Loan | None:
        """Get loan by ID."""
        pass

    @abstractmethod
    async def list_loans(self, tenant_id: str, pending_only: bool = False) -> list[Loan]:
        """List loans, newest first."""
        pass

    @abstractmethod
    def stage_create(self, batch: WriteBatch, tenant_id: str, loan: Loan) -> str:
        """Stage a new loan document. Returns its ID."""
        pass

    @abstractmethod
    def stage_payment(
        self, batch: WriteBatch, tenant_id: str, loan_id: str, payment: LoanPayment
    ) -> None:
        """Stage an atomic balance decrement and append the payment record."""
        pass
