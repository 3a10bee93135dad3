"""
Pre-commit checks for invoice line items.

Every check here runs before any write is staged. The first violation
raises and the invoice is not saved.
"""

import math
from collections.abc import Sequence
from typing import Protocol

from zycle.core.entities.invoice import PAYMENT_METHODS, InvoiceType, LineItem, PaymentMethod
from zycle.core.entities.material import Material
from zycle.core.exceptions import (
    EmptyInvoiceError,
    InsufficientStockError,
    InvalidLineItemError,
    MaterialNotFoundError,
    ValidationError,
)
from zycle.core.services.stock_reconciliation import DELTA_EPSILON, weights_by_material


class LineRequest(Protocol):
    material_id: str
    weight: float
    unit_price: float | None


def check_line_requests(items: Sequence[LineRequest]) -> None:
    """Reject an empty invoice and any non-positive or non-finite weight or price."""
    if not items:
        raise EmptyInvoiceError()
    for index, item in enumerate(items):
        if item.weight is None or not math.isfinite(item.weight) or item.weight <= 0:
            raise InvalidLineItemError(index, "weight", item.weight)
        if item.unit_price is not None and (
            not math.isfinite(item.unit_price) or item.unit_price <= 0
        ):
            raise InvalidLineItemError(index, "unit_price", item.unit_price)


def check_payment_method(invoice_type: InvoiceType, method: PaymentMethod) -> None:
    allowed = PAYMENT_METHODS[invoice_type]
    if method not in allowed:
        raise ValidationError(
            "payment_method",
            f"{invoice_type.value} invoices accept {sorted(m.value for m in allowed)}",
            method.value,
        )


def build_line_items(
    items: Sequence[LineRequest],
    materials: dict[str, Material],
    previous_items: Sequence[LineItem] = (),
) -> list[LineItem]:
    """
    Resolve requested lines against the catalog.

    Material name and code are copied onto each line as they are now. A
    line without a unit price takes the material's base price.

    On an edit, a line at the same position and for the same material as a
    stored line keeps that line's name and code snapshot, and its stored
    unit price when none is sent. Such lines need no catalog entry.

    Raises:
        MaterialNotFoundError: If a new line references a material not in ``materials``
    """
    lines = []
    for index, item in enumerate(items):
        stored = matching_stored_line(index, item, previous_items)
        if stored is not None:
            lines.append(
                LineItem(
                    material_id=item.material_id,
                    material_name=stored.material_name,
                    material_code=stored.material_code,
                    weight=item.weight,
                    unit_price=stored.unit_price if item.unit_price is None else item.unit_price,
                )
            )
            continue

        material = materials.get(item.material_id)
        if material is None:
            raise MaterialNotFoundError(item.material_id)
        lines.append(
            LineItem(
                material_id=item.material_id,
                material_name=material.name,
                material_code=material.code,
                weight=item.weight,
                unit_price=material.price if item.unit_price is None else item.unit_price,
            )
        )
    return lines


def matching_stored_line(
    index: int, item: LineRequest, previous_items: Sequence[LineItem]
) -> LineItem | None:
    """The stored line at ``index`` when it is for the same material."""
    if index < len(previous_items) and previous_items[index].material_id == item.material_id:
        return previous_items[index]
    return None


def materials_to_resolve(
    items: Sequence[LineRequest],
    previous_items: Sequence[LineItem],
    stock_deltas: dict[str, float],
) -> list[str]:
    """
    Material ids an edit has to read from the catalog.

    New or re-pointed lines need the material for their snapshot, and every
    material whose stock changes must still exist. Kept lines with no stock
    change are left alone, even if their material was since deleted.
    """
    needed = [
        item.material_id
        for index, item in enumerate(items)
        if matching_stored_line(index, item, previous_items) is None
    ]
    needed += [material_id for material_id in stock_deltas if material_id not in needed]
    return needed


def check_sale_stock(
    new_items: Sequence[LineItem],
    previous_items: Sequence[LineItem],
    materials: dict[str, Material],
) -> None:
    """
    Check that each material has enough stock for a sale.

    Weight the invoice already held is returned to stock before comparing,
    so re-saving an unchanged sale never fails. Stock is read once with no
    lock; concurrent sales may still oversell.

    Raises:
        InsufficientStockError: If a material's requested weight exceeds stock
        MaterialNotFoundError: If a material that takes more weight than the
            invoice held is not in ``materials``
    """
    requested = weights_by_material(new_items)
    held = weights_by_material(previous_items)
    for material_id, weight in requested.items():
        material = materials.get(material_id)
        if material is None:
            # Kept weight on a deleted material moves no stock
            if weight <= held.get(material_id, 0.0) + DELTA_EPSILON:
                continue
            raise MaterialNotFoundError(material_id)
        available = material.stock + held.get(material_id, 0.0)
        if weight > available + DELTA_EPSILON:
            raise InsufficientStockError(material_id, weight, available)
