"""Loan endpoints for associates and collaborators."""

from fastapi import APIRouter, Depends, status

from zycle.api.dependencies import (
    get_create_loan_use_case,
    get_ln_store,
    get_register_loan_payment_use_case,
    get_tenant_id,
)
from zycle.application.dto.requests import CreateLoanRequest, LoanPaymentRequest
from zycle.application.dto.responses import ErrorResponse, LoanListResponse, LoanResponse
from zycle.application.use_cases import CreateLoanUseCase, RegisterLoanPaymentUseCase
from zycle.core.exceptions import LoanNotFoundError
from zycle.infrastructure.storage.documents import DocumentLoanStore

router = APIRouter(prefix="/api/loans", tags=["loans"])


@router.get("", response_model=LoanListResponse)
async def list_loans(
    pending_only: bool = False,
    tenant_id: str = Depends(get_tenant_id),
    store: DocumentLoanStore = Depends(get_ln_store),
) -> LoanListResponse:
    """List loans, newest first. ``pending_only`` hides fully paid loans."""
    loans = await store.list_loans(tenant_id, pending_only=pending_only)
    return LoanListResponse(
        loans=[LoanResponse.from_entity(loan) for loan in loans],
        total=len(loans),
    )


@router.post(
    "",
    response_model=LoanResponse,
    status_code=status.HTTP_201_CREATED,
    responses={422: {"model": ErrorResponse}},
)
async def create_loan(
    request: CreateLoanRequest,
    tenant_id: str = Depends(get_tenant_id),
    use_case: CreateLoanUseCase = Depends(get_create_loan_use_case),
) -> LoanResponse:
    """Register a loan. The outstanding balance starts at the full amount."""
    loan = await use_case.execute(tenant_id, request)
    return use_case.to_response(loan)


@router.get(
    "/{loan_id}",
    response_model=LoanResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_loan(
    loan_id: str,
    tenant_id: str = Depends(get_tenant_id),
    store: DocumentLoanStore = Depends(get_ln_store),
) -> LoanResponse:
    """Get a loan with its payment history."""
    loan = await store.get(tenant_id, loan_id)
    if loan is None:
        raise LoanNotFoundError(loan_id)
    return LoanResponse.from_entity(loan)


@router.post(
    "/{loan_id}/payments",
    response_model=LoanResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def register_loan_payment(
    loan_id: str,
    request: LoanPaymentRequest,
    tenant_id: str = Depends(get_tenant_id),
    use_case: RegisterLoanPaymentUseCase = Depends(get_register_loan_payment_use_case),
) -> LoanResponse:
    """Record a payment against a loan's outstanding balance."""
    loan = await use_case.execute(tenant_id, loan_id, request)
    return use_case.to_response(loan)
