"""
Stock delta calculation.

Turns the before/after line items of an invoice into the net stock change
per material. Creating an invoice is the special case with no previous
items; re-saving an invoice with identical items yields no deltas.
"""

from collections.abc import Iterable
from typing import Protocol

from zycle.core.entities.invoice import InvoiceType

# Net deltas smaller than this are float noise from summing weights
DELTA_EPSILON = 1e-9


class WeightedItem(Protocol):
    material_id: str
    weight: float


def weights_by_material(items: Iterable[WeightedItem]) -> dict[str, float]:
    """Total weight per material across the items."""
    totals: dict[str, float] = {}
    for item in items:
        totals[item.material_id] = totals.get(item.material_id, 0.0) + item.weight
    return totals


def compute_stock_deltas(
    previous_items: Iterable[WeightedItem],
    new_items: Iterable[WeightedItem],
    invoice_type: InvoiceType,
) -> dict[str, float]:
    """
    Compute the stock increment to apply per material.

    For every material in either list the delta is
    ``sign * new_weight - sign * previous_weight``, where sign is +1 for
    purchases and -1 for sales. Materials whose net change is zero are
    omitted. Keys follow first appearance in ``new_items`` then
    ``previous_items``.

    Args:
        previous_items: Items persisted before this change ([] on create)
        new_items: Items being saved
        invoice_type: Purchase or sale

    Returns:
        Mapping of material ID to signed stock delta in kg
    """
    sign = invoice_type.sign
    previous = weights_by_material(previous_items)
    new = weights_by_material(new_items)

    deltas: dict[str, float] = {}
    for material_id in [*new, *(m for m in previous if m not in new)]:
        delta = sign * new.get(material_id, 0.0) - sign * previous.get(material_id, 0.0)
        if abs(delta) > DELTA_EPSILON:
            deltas[material_id] = delta
    return deltas
