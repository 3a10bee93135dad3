"""API tests for loan endpoints."""

from datetime import date
from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient

from zycle.api.dependencies import (
    get_create_loan_use_case,
    get_ln_store,
    get_register_loan_payment_use_case,
)
from zycle.api.main import app
from zycle.application.use_cases import CreateLoanUseCase, RegisterLoanPaymentUseCase
from zycle.core.entities import BeneficiaryType, Loan, LoanPayment
from zycle.core.exceptions import LoanNotFoundError, LoanPaymentError

HEADERS = {"X-Tenant-ID": "acme"}


def _loan(balance: float = 300) -> Loan:
    paid = 300 - balance
    return Loan(
        id="loan-1",
        beneficiary_type=BeneficiaryType.COLLABORATOR,
        beneficiary_name="Luis",
        amount=300,
        loan_date=date(2024, 2, 1),
        outstanding_balance=balance,
        payments=[LoanPayment(amount=paid, paid_on=date(2024, 3, 1))] if paid else [],
    )


@pytest.fixture
def mock_loan_store():
    store = AsyncMock()
    store.list_loans.return_value = [_loan()]
    store.get.return_value = _loan()
    return store


@pytest.fixture
def mock_create_loan_use_case():
    uc = AsyncMock(spec=CreateLoanUseCase)
    loan = _loan()
    uc.execute.return_value = loan
    uc.to_response.return_value = CreateLoanUseCase().to_response(loan)
    return uc


@pytest.fixture
def mock_payment_use_case():
    uc = AsyncMock(spec=RegisterLoanPaymentUseCase)
    loan = _loan(balance=0)
    uc.execute.return_value = loan
    uc.to_response.return_value = RegisterLoanPaymentUseCase().to_response(loan)
    return uc


@pytest.fixture
async def loan_client(mock_loan_store, mock_create_loan_use_case, mock_payment_use_case):
    app.dependency_overrides[get_ln_store] = lambda: mock_loan_store
    app.dependency_overrides[get_create_loan_use_case] = lambda: mock_create_loan_use_case
    app.dependency_overrides[get_register_loan_payment_use_case] = lambda: mock_payment_use_case
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.pop(get_ln_store, None)
    app.dependency_overrides.pop(get_create_loan_use_case, None)
    app.dependency_overrides.pop(get_register_loan_payment_use_case, None)


class TestLoansAPI:
    async def test_list_pending_only(self, loan_client: AsyncClient, mock_loan_store):
        response = await loan_client.get("/api/loans?pending_only=true", headers=HEADERS)
        assert response.status_code == 200
        assert response.json()["loans"][0]["status"] == "pending"
        mock_loan_store.list_loans.assert_awaited_once_with("acme", pending_only=True)

    async def test_create_returns_201(self, loan_client: AsyncClient):
        response = await loan_client.post(
            "/api/loans",
            json={"beneficiary_type": "collaborator", "beneficiary_name": "Luis", "amount": 300},
            headers=HEADERS,
        )
        assert response.status_code == 201
        assert response.json()["outstanding_balance"] == 300

    async def test_create_rejects_unknown_beneficiary_type(self, loan_client: AsyncClient):
        response = await loan_client.post(
            "/api/loans",
            json={"beneficiary_type": "supplier", "beneficiary_name": "Luis", "amount": 300},
            headers=HEADERS,
        )
        assert response.status_code == 422

    async def test_get_missing(self, loan_client: AsyncClient, mock_loan_store):
        mock_loan_store.get.return_value = None
        response = await loan_client.get("/api/loans/nope", headers=HEADERS)
        assert response.status_code == 404
        assert response.json()["error_code"] == "LOAN_NOT_FOUND"

    async def test_payment_settles(self, loan_client: AsyncClient):
        response = await loan_client.post(
            "/api/loans/loan-1/payments", json={"amount": 300}, headers=HEADERS
        )
        assert response.status_code == 201
        body = response.json()
        assert body["status"] == "paid"
        assert body["total_paid"] == 300

    async def test_payment_over_balance(self, loan_client: AsyncClient, mock_payment_use_case):
        mock_payment_use_case.execute.side_effect = LoanPaymentError("too much", 500)
        response = await loan_client.post(
            "/api/loans/loan-1/payments", json={"amount": 500}, headers=HEADERS
        )
        assert response.status_code == 400
        assert response.json()["error_code"] == "INVALID_LOAN_PAYMENT"

    async def test_payment_unknown_loan(self, loan_client: AsyncClient, mock_payment_use_case):
        mock_payment_use_case.execute.side_effect = LoanNotFoundError("nope")
        response = await loan_client.post(
            "/api/loans/nope/payments", json={"amount": 5}, headers=HEADERS
        )
        assert response.status_code == 404
