"""
Core business logic services.

Layer-pure services that depend only on:
- zycle/core/entities/*
- zycle/core/interfaces/*
- zycle/core/exceptions.py

NO infrastructure imports. All dependencies injected via constructor.
"""

from zycle.core.services.cart import CartItem, SaleCart, can_add, reserved_weight
from zycle.core.services.default_materials import (
    DEFAULT_MATERIALS,
    DefaultMaterial,
    default_catalog,
)
from zycle.core.services.invoice_numbering import InvoiceNumberingService
from zycle.core.services.invoice_validation import (
    build_line_items,
    check_line_requests,
    check_payment_method,
    check_sale_stock,
    matching_stored_line,
    materials_to_resolve,
)
from zycle.core.services.stock_reconciliation import (
    compute_stock_deltas,
    weights_by_material,
)

__all__ = [
    # Stock reconciliation
    "compute_stock_deltas",
    "weights_by_material",
    # Cart
    "CartItem",
    "SaleCart",
    "can_add",
    "reserved_weight",
    # Invoice validation
    "build_line_items",
    "check_line_requests",
    "check_payment_method",
    "check_sale_stock",
    "matching_stored_line",
    "materials_to_resolve",
    # Numbering
    "InvoiceNumberingService",
    # Default catalog
    "DEFAULT_MATERIALS",
    "DefaultMaterial",
    "default_catalog",
]
