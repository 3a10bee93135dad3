"""Tests for invoice pre-commit checks and numbering."""

from unittest.mock import AsyncMock

import pytest

from zycle.application.dto.requests import LineItemRequest
from zycle.core.entities import InvoiceType, LineItem, Material, PaymentMethod
from zycle.core.exceptions import (
    EmptyInvoiceError,
    InsufficientStockError,
    InvalidLineItemError,
    MaterialNotFoundError,
    ValidationError,
)
from zycle.core.services.invoice_numbering import InvoiceNumberingService
from zycle.core.services.invoice_validation import (
    build_line_items,
    check_line_requests,
    check_payment_method,
    check_sale_stock,
    materials_to_resolve,
)
from zycle.core.services.stock_reconciliation import compute_stock_deltas


class TestCheckLineRequests:
    def test_empty_invoice(self):
        with pytest.raises(EmptyInvoiceError):
            check_line_requests([])

    def test_zero_weight(self):
        with pytest.raises(InvalidLineItemError) as exc_info:
            check_line_requests(
                [
                    LineItemRequest(material_id="a", weight=1),
                    LineItemRequest(material_id="a", weight=0),
                ]
            )
        assert exc_info.value.details["index"] == 1

    def test_negative_price(self):
        with pytest.raises(InvalidLineItemError):
            check_line_requests([LineItemRequest(material_id="a", weight=1, unit_price=-1)])

    def test_missing_price_is_allowed(self):
        check_line_requests([LineItemRequest(material_id="a", weight=1)])

    @pytest.mark.parametrize("value", [float("inf"), float("nan")])
    def test_non_finite_weight(self, value):
        with pytest.raises(InvalidLineItemError):
            check_line_requests([LineItemRequest(material_id="a", weight=value)])

    @pytest.mark.parametrize("value", [float("inf"), float("nan")])
    def test_non_finite_price(self, value):
        with pytest.raises(InvalidLineItemError) as exc_info:
            check_line_requests([LineItemRequest(material_id="a", weight=1, unit_price=value)])
        assert exc_info.value.details["field"] == "items[0].unit_price"


class TestCheckPaymentMethod:
    def test_cheque_rejected_on_purchase(self):
        with pytest.raises(ValidationError):
            check_payment_method(InvoiceType.PURCHASE, PaymentMethod.CHEQUE)

    def test_cheque_accepted_on_sale(self):
        check_payment_method(InvoiceType.SALE, PaymentMethod.CHEQUE)


class TestBuildLineItems:
    def test_denormalizes_material_and_defaults_price(self, copper):
        lines = build_line_items(
            [LineItemRequest(material_id=copper.id, weight=2)],
            {copper.id: copper},
        )
        assert lines[0].material_name == "COBRE #1"
        assert lines[0].material_code == "103"
        assert lines[0].unit_price == 30000
        assert lines[0].subtotal == 60000

    def test_explicit_price_wins(self, copper):
        lines = build_line_items(
            [LineItemRequest(material_id=copper.id, weight=2, unit_price=28000)],
            {copper.id: copper},
        )
        assert lines[0].unit_price == 28000

    def test_unknown_material(self):
        with pytest.raises(MaterialNotFoundError):
            build_line_items([LineItemRequest(material_id="nope", weight=1)], {})

    def test_kept_line_keeps_stored_snapshot(self, copper):
        stored = LineItem(
            material_id=copper.id,
            material_name="COBRE",
            material_code="100",
            weight=2,
            unit_price=25000,
        )
        lines = build_line_items(
            [LineItemRequest(material_id=copper.id, weight=3)], {copper.id: copper}, [stored]
        )
        assert (lines[0].material_name, lines[0].material_code) == ("COBRE", "100")
        assert lines[0].unit_price == 25000
        assert lines[0].weight == 3

    def test_kept_line_needs_no_material(self):
        stored = LineItem(material_id="gone", material_name="LATA", weight=1, unit_price=700)
        lines = build_line_items([LineItemRequest(material_id="gone", weight=1)], {}, [stored])
        assert lines[0].material_name == "LATA"

    def test_repointed_line_reads_catalog(self, copper):
        stored = LineItem(material_id="other", material_name="LATA", weight=1, unit_price=700)
        lines = build_line_items(
            [LineItemRequest(material_id=copper.id, weight=1)], {copper.id: copper}, [stored]
        )
        assert lines[0].material_name == "COBRE #1"
        assert lines[0].unit_price == 30000


class TestMaterialsToResolve:
    def test_only_new_lines_and_moved_stock(self):
        stored = [
            LineItem(material_id="a", weight=1, unit_price=1),
            LineItem(material_id="b", weight=2, unit_price=1),
        ]
        requested = [
            LineItemRequest(material_id="a", weight=1),
            LineItemRequest(material_id="b", weight=5),
            LineItemRequest(material_id="c", weight=1),
        ]
        deltas = compute_stock_deltas(stored, requested, InvoiceType.PURCHASE)
        assert materials_to_resolve(requested, stored, deltas) == ["c", "b"]


class TestCheckSaleStock:
    def _line(self, material_id: str, weight: float) -> LineItem:
        return LineItem(material_id=material_id, weight=weight, unit_price=1)

    def test_sums_lines_per_material(self):
        materials = {"a": Material(id="a", name="ACERO", price=1, stock=10)}
        with pytest.raises(InsufficientStockError):
            check_sale_stock([self._line("a", 6), self._line("a", 5)], [], materials)

    def test_previous_weight_is_returned_first(self):
        materials = {"a": Material(id="a", name="ACERO", price=1, stock=2)}
        check_sale_stock([self._line("a", 10)], [self._line("a", 8)], materials)

    def test_exact_stock_is_allowed(self):
        materials = {"a": Material(id="a", name="ACERO", price=1, stock=10)}
        check_sale_stock([self._line("a", 10)], [], materials)

    def test_deleted_material_with_kept_weight(self):
        check_sale_stock([self._line("a", 3)], [self._line("a", 3)], {})

    def test_deleted_material_with_more_weight(self):
        with pytest.raises(MaterialNotFoundError):
            check_sale_stock([self._line("a", 4)], [self._line("a", 3)], {})


class TestInvoiceNumberingService:
    async def test_first_number_is_one(self):
        store = AsyncMock()
        store.get_last_number.return_value = None
        number = await InvoiceNumberingService(store).next_number("acme", InvoiceType.SALE)
        assert number == 1

    async def test_increments_last_number(self):
        store = AsyncMock()
        store.get_last_number.return_value = 41
        number = await InvoiceNumberingService(store).next_number("acme", InvoiceType.PURCHASE)
        assert number == 42
        store.get_last_number.assert_awaited_once_with("acme", InvoiceType.PURCHASE)
