"""Document-store implementation of loan storage."""

from zycle.core.entities.loan import Loan, LoanPayment
from zycle.core.interfaces.document_store import (
    SERVER_TIMESTAMP,
    DocumentSnapshot,
    FieldFilter,
    IDocumentStore,
    WriteBatch,
)
from zycle.core.interfaces.loan_store import ILoanStore
from zycle.infrastructure.storage.documents.paths import loans_path


class DocumentLoanStore(ILoanStore):
    """Loans stored under ``tenants/{tenant}/loans``."""

    def __init__(self, document_store: IDocumentStore):
        self._documents = document_store

    async def get(self, tenant_id: str, loan_id: str) -> Loan | None:
        snapshot = await self._documents.get_document(loans_path(tenant_id), loan_id)
        return self._snapshot_to_loan(snapshot) if snapshot else None

    async def list_loans(self, tenant_id: str, pending_only: bool = False) -> list[Loan]:
        filters = (FieldFilter("outstanding_balance", ">", 0),) if pending_only else ()
        snapshots = await self._documents.query_collection(
            loans_path(tenant_id),
            order_by="loan_date",
            descending=True,
            filters=filters,
        )
        return [self._snapshot_to_loan(s) for s in snapshots]

    def stage_create(self, batch: WriteBatch, tenant_id: str, loan: Loan) -> str:
        loan_id = loan.id or self._documents.new_id()
        fields = loan.model_dump(mode="json", exclude={"id", "created_at", "updated_at"})
        fields["created_at"] = SERVER_TIMESTAMP
        fields["updated_at"] = SERVER_TIMESTAMP
        batch.set(loans_path(tenant_id), loan_id, fields)
        return loan_id

    def stage_payment(
        self, batch: WriteBatch, tenant_id: str, loan_id: str, payment: LoanPayment
    ) -> None:
        path = loans_path(tenant_id)
        batch.increment(path, loan_id, "outstanding_balance", -payment.amount)
        batch.array_union(path, loan_id, "payments", [payment.model_dump(mode="json")])

    def _snapshot_to_loan(self, snapshot: DocumentSnapshot) -> Loan:
        data = dict(snapshot.data)
        data.setdefault("created_at", snapshot.created_at)
        data.setdefault("updated_at", snapshot.updated_at)
        return Loan.model_validate({**data, "id": snapshot.id})
