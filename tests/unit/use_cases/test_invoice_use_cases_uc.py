"""Tests for CreateInvoiceUseCase and UpdateInvoiceUseCase with mocked stores."""

from datetime import date
from unittest.mock import AsyncMock, MagicMock

import pytest

from zycle.application.dto.requests import (
    CreateInvoiceRequest,
    LineItemRequest,
    UpdateInvoiceRequest,
)
from zycle.application.use_cases.create_invoice import CreateInvoiceUseCase
from zycle.application.use_cases.update_invoice import UpdateInvoiceUseCase
from zycle.core.entities import (
    BeneficiaryType,
    Invoice,
    InvoiceType,
    LineItem,
    Loan,
    Material,
    PaymentMethod,
)
from zycle.core.exceptions import (
    DuplicateInvoiceNumberError,
    EmptyInvoiceError,
    InvalidLineItemError,
    InvoiceNotFoundError,
    LoanPaymentError,
    MaterialNotFoundError,
    UniqueConstraintError,
    ValidationError,
)


@pytest.fixture
def mock_document_store():
    store = AsyncMock()
    store.commit_batch.return_value = None
    return store


@pytest.fixture
def mock_material_store():
    store = AsyncMock()
    store.stage_stock_increment = MagicMock()
    store.get_many.return_value = {
        "m1": Material(id="m1", name="PET", price=900, stock=10),
    }
    return store


@pytest.fixture
def mock_invoice_store():
    store = AsyncMock()
    store.stage_create = MagicMock(return_value="inv-1")
    store.stage_update = MagicMock()
    store.get_last_number.return_value = 4
    return store


@pytest.fixture
def mock_loan_store():
    store = AsyncMock()
    store.stage_payment = MagicMock()
    return store


@pytest.fixture
def create_use_case(mock_document_store, mock_material_store, mock_invoice_store, mock_loan_store):
    return CreateInvoiceUseCase(
        document_store=mock_document_store,
        material_store=mock_material_store,
        invoice_store=mock_invoice_store,
        loan_store=mock_loan_store,
    )


@pytest.fixture
def update_use_case(mock_document_store, mock_material_store, mock_invoice_store):
    return UpdateInvoiceUseCase(
        document_store=mock_document_store,
        material_store=mock_material_store,
        invoice_store=mock_invoice_store,
    )


def stored_invoice(invoice_type: InvoiceType, weight: float, **kwargs) -> Invoice:
    return Invoice(
        id="inv-1",
        invoice_type=invoice_type,
        number=5,
        invoice_date=date(2024, 5, 1),
        items=[LineItem(material_id="m1", material_name="PET", weight=weight, unit_price=900)],
        **kwargs,
    )


class TestCreateInvoiceUseCase:
    async def test_purchase_stages_invoice_and_increment(
        self, create_use_case, mock_invoice_store, mock_material_store, mock_document_store
    ):
        mock_invoice_store.get.return_value = stored_invoice(InvoiceType.PURCHASE, 3)

        result = await create_use_case.execute(
            "acme",
            InvoiceType.PURCHASE,
            CreateInvoiceRequest(items=[LineItemRequest(material_id="m1", weight=3)]),
        )

        staged = mock_invoice_store.stage_create.call_args[0][2]
        assert staged.number == 5
        assert staged.items[0].unit_price == 900
        mock_material_store.stage_stock_increment.assert_called_once()
        assert mock_material_store.stage_stock_increment.call_args[0][2:] == ("m1", 3)
        mock_document_store.commit_batch.assert_awaited_once()
        assert result.stock_deltas == {"m1": 3}

    async def test_empty_invoice_never_touches_store(
        self, create_use_case, mock_material_store, mock_document_store
    ):
        with pytest.raises(EmptyInvoiceError):
            await create_use_case.execute(
                "acme", InvoiceType.PURCHASE, CreateInvoiceRequest(items=[])
            )
        mock_material_store.get_many.assert_not_awaited()
        mock_document_store.commit_batch.assert_not_awaited()

    async def test_negative_weight(self, create_use_case):
        with pytest.raises(InvalidLineItemError):
            await create_use_case.execute(
                "acme",
                InvoiceType.SALE,
                CreateInvoiceRequest(items=[LineItemRequest(material_id="m1", weight=-1)]),
            )

    async def test_cheque_purchase_rejected(self, create_use_case):
        with pytest.raises(ValidationError):
            await create_use_case.execute(
                "acme",
                InvoiceType.PURCHASE,
                CreateInvoiceRequest(
                    payment_method=PaymentMethod.CHEQUE,
                    items=[LineItemRequest(material_id="m1", weight=1)],
                ),
            )

    async def test_unknown_material(self, create_use_case, mock_material_store):
        mock_material_store.get_many.return_value = {}
        with pytest.raises(MaterialNotFoundError):
            await create_use_case.execute(
                "acme",
                InvoiceType.PURCHASE,
                CreateInvoiceRequest(items=[LineItemRequest(material_id="m1", weight=1)]),
            )

    async def test_loan_payment_on_sale_rejected(self, create_use_case):
        with pytest.raises(LoanPaymentError):
            await create_use_case.execute(
                "acme",
                InvoiceType.SALE,
                CreateInvoiceRequest(
                    items=[LineItemRequest(material_id="m1", weight=1)],
                    loan_payment=100,
                    loan_id="loan-1",
                ),
            )

    async def test_loan_payment_needs_loan_id(self, create_use_case):
        with pytest.raises(LoanPaymentError):
            await create_use_case.execute(
                "acme",
                InvoiceType.PURCHASE,
                CreateInvoiceRequest(
                    items=[LineItemRequest(material_id="m1", weight=1)], loan_payment=100
                ),
            )

    async def test_loan_payment_over_total_rejected(self, create_use_case, mock_loan_store):
        mock_loan_store.get.return_value = Loan(
            id="loan-1",
            beneficiary_type=BeneficiaryType.ASSOCIATE,
            beneficiary_name="Ana",
            amount=100000,
            outstanding_balance=100000,
        )
        with pytest.raises(LoanPaymentError):
            await create_use_case.execute(
                "acme",
                InvoiceType.PURCHASE,
                CreateInvoiceRequest(
                    items=[LineItemRequest(material_id="m1", weight=1)],
                    loan_payment=5000,
                    loan_id="loan-1",
                ),
            )
        mock_loan_store.stage_payment.assert_not_called()

    async def test_number_collision_translated(self, create_use_case, mock_document_store):
        mock_document_store.commit_batch.side_effect = UniqueConstraintError(
            "tenants/acme/purchase_invoices", "inv-1", "UNIQUE constraint failed"
        )
        with pytest.raises(DuplicateInvoiceNumberError) as exc_info:
            await create_use_case.execute(
                "acme",
                InvoiceType.PURCHASE,
                CreateInvoiceRequest(items=[LineItemRequest(material_id="m1", weight=1)]),
            )
        assert exc_info.value.details["number"] == 5


class TestUpdateInvoiceUseCase:
    async def test_missing_invoice(self, update_use_case, mock_invoice_store):
        mock_invoice_store.get.return_value = None
        with pytest.raises(InvoiceNotFoundError):
            await update_use_case.execute(
                "acme",
                InvoiceType.PURCHASE,
                "inv-1",
                UpdateInvoiceRequest(items=[LineItemRequest(material_id="m1", weight=1)]),
            )

    async def test_unchanged_items_stage_no_increments(
        self, update_use_case, mock_invoice_store, mock_material_store
    ):
        mock_invoice_store.get.return_value = stored_invoice(InvoiceType.SALE, 4)

        result = await update_use_case.execute(
            "acme",
            InvoiceType.SALE,
            "inv-1",
            UpdateInvoiceRequest(
                items=[LineItemRequest(material_id="m1", weight=4, unit_price=900)]
            ),
        )

        assert result.stock_deltas == {}
        mock_material_store.stage_stock_increment.assert_not_called()
        mock_invoice_store.stage_update.assert_called_once()

    async def test_number_is_kept(self, update_use_case, mock_invoice_store):
        mock_invoice_store.get.return_value = stored_invoice(InvoiceType.PURCHASE, 4)

        await update_use_case.execute(
            "acme",
            InvoiceType.PURCHASE,
            "inv-1",
            UpdateInvoiceRequest(items=[LineItemRequest(material_id="m1", weight=2)]),
        )

        staged = mock_invoice_store.stage_update.call_args[0][2]
        assert staged.number == 5
        assert staged.id == "inv-1"
        assert staged.invoice_date == date(2024, 5, 1)

    async def test_total_below_withheld_payment(self, update_use_case, mock_invoice_store):
        mock_invoice_store.get.return_value = stored_invoice(
            InvoiceType.PURCHASE, 4, loan_payment=3000, loan_id="loan-1"
        )
        with pytest.raises(LoanPaymentError):
            await update_use_case.execute(
                "acme",
                InvoiceType.PURCHASE,
                "inv-1",
                UpdateInvoiceRequest(items=[LineItemRequest(material_id="m1", weight=1)]),
            )

    async def test_kept_line_skips_catalog(
        self, update_use_case, mock_invoice_store, mock_material_store
    ):
        mock_invoice_store.get.return_value = stored_invoice(InvoiceType.PURCHASE, 4)
        mock_material_store.get_many.return_value = {}

        result = await update_use_case.execute(
            "acme",
            InvoiceType.PURCHASE,
            "inv-1",
            UpdateInvoiceRequest(
                items=[LineItemRequest(material_id="m1", weight=4)], notes="header only"
            ),
        )

        mock_material_store.get_many.assert_awaited_once_with("acme", [])
        staged = mock_invoice_store.stage_update.call_args[0][2]
        assert staged.items[0].material_name == "PET"
        assert staged.items[0].unit_price == 900
        assert result.stock_deltas == {}

    async def test_moved_stock_on_missing_material(
        self, update_use_case, mock_invoice_store, mock_material_store, mock_document_store
    ):
        mock_invoice_store.get.return_value = stored_invoice(InvoiceType.PURCHASE, 4)
        mock_material_store.get_many.return_value = {}

        with pytest.raises(MaterialNotFoundError):
            await update_use_case.execute(
                "acme",
                InvoiceType.PURCHASE,
                "inv-1",
                UpdateInvoiceRequest(items=[LineItemRequest(material_id="m1", weight=6)]),
            )
        mock_document_store.commit_batch.assert_not_called()
