"""
Sale cart validation.

A sale cart is the caller-held list of candidate line items assembled before
a sale invoice is saved. It is never persisted; the check here is advisory
and reads stock once without any lock.
"""

from collections.abc import Sequence
from typing import Protocol
from uuid import uuid4

from pydantic import Field

from zycle.config import get_logger
from zycle.core.entities.invoice import LineItem
from zycle.core.entities.material import Material
from zycle.core.exceptions import InvalidLineItemError, InsufficientStockError, ValidationError
from zycle.core.services.stock_reconciliation import DELTA_EPSILON

logger = get_logger(__name__)


class CartLine(Protocol):
    id: str
    material_id: str
    weight: float


class CartItem(LineItem):
    """A line item held in a cart, addressable for editing."""

    id: str = Field(default_factory=lambda: uuid4().hex)


def reserved_weight(
    cart: Sequence[CartLine], material_id: str, excluding: str | None = None
) -> float:
    """Weight of ``material_id`` already in the cart, ignoring item ``excluding``."""
    return sum(
        item.weight
        for item in cart
        if item.material_id == material_id and item.id != excluding
    )


def can_add(
    material: Material,
    requested_weight: float,
    cart: Sequence[CartLine],
    editing_item_id: str | None = None,
) -> bool:
    """
    Check whether ``requested_weight`` of a material fits in the cart.

    When editing an existing cart item its current weight is not counted
    as reserved, so shrinking or keeping an item's weight is always allowed
    while the remaining stock covers it.
    """
    reserved = reserved_weight(cart, material.id or "", excluding=editing_item_id)
    return requested_weight + reserved <= material.stock + DELTA_EPSILON


class SaleCart:
    """
    Ordered, in-memory sale cart.

    Every mutation re-checks the material's stock against what the cart
    already holds and raises InsufficientStockError when it does not fit.
    """

    def __init__(self, items: Sequence[CartItem] | None = None):
        self._items: list[CartItem] = list(items or [])

    @property
    def items(self) -> list[CartItem]:
        return list(self._items)

    @property
    def total(self) -> float:
        return sum(item.subtotal for item in self._items)

    def reserved_weight(self, material_id: str, excluding: str | None = None) -> float:
        return reserved_weight(self._items, material_id, excluding)

    def _build_item(
        self,
        material: Material,
        weight: float,
        unit_price: float | None,
        editing_item_id: str | None = None,
    ) -> CartItem:
        index = len(self._items) if editing_item_id is None else self._index_of(editing_item_id)
        if weight <= 0:
            raise InvalidLineItemError(index, "weight", weight)
        price = material.price if unit_price is None else unit_price
        if price <= 0:
            raise InvalidLineItemError(index, "unit_price", price)

        if not can_add(material, weight, self._items, editing_item_id):
            available = material.stock - self.reserved_weight(material.id or "", editing_item_id)
            logger.info(
                "cart_item_rejected",
                material_id=material.id,
                requested=weight,
                available=available,
            )
            raise InsufficientStockError(material.id or "", weight, available)

        item = CartItem(
            material_id=material.id or "",
            material_name=material.name,
            material_code=material.code,
            weight=weight,
            unit_price=price,
        )
        if editing_item_id is not None:
            item = item.model_copy(update={"id": editing_item_id})
        return item

    def add(self, material: Material, weight: float, unit_price: float | None = None) -> CartItem:
        """Append a line for ``material``; the price defaults to the material's base price."""
        item = self._build_item(material, weight, unit_price)
        self._items.append(item)
        return item

    def replace(
        self,
        item_id: str,
        material: Material,
        weight: float,
        unit_price: float | None = None,
    ) -> CartItem:
        """Replace an existing cart line in place."""
        index = self._index_of(item_id)
        item = self._build_item(material, weight, unit_price, editing_item_id=item_id)
        self._items[index] = item
        return item

    def remove(self, item_id: str) -> CartItem:
        return self._items.pop(self._index_of(item_id))

    def clear(self) -> None:
        self._items.clear()

    def to_line_items(self) -> list[LineItem]:
        """Plain line items in cart order, ready for a sale invoice."""
        return [LineItem(**item.model_dump(exclude={"id"})) for item in self._items]

    def _index_of(self, item_id: str) -> int:
        for index, item in enumerate(self._items):
            if item.id == item_id:
                return index
        raise ValidationError("item_id", "not in cart", item_id)

    def __len__(self) -> int:
        return len(self._items)
