"""API route modules."""

from zycle.api.routes.health import router as health_router
from zycle.api.routes.inventory import router as inventory_router
from zycle.api.routes.invoices import router as invoices_router
from zycle.api.routes.loans import router as loans_router
from zycle.api.routes.materials import router as materials_router

__all__ = [
    "health_router",
    "inventory_router",
    "invoices_router",
    "loans_router",
    "materials_router",
]
