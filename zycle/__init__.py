"""Zycle back office: material purchases, sales and stock reconciliation."""

__version__ = "1.0.0"
