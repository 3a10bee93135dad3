"""
Dependency injection container for FastAPI.

Provides stores, use cases and the request tenant to route handlers.
"""

from functools import lru_cache

from fastapi import Request

from zycle.application.use_cases import (
    CheckCartUseCase,
    CreateInvoiceUseCase,
    CreateLoanUseCase,
    CreateMaterialUseCase,
    DeleteMaterialUseCase,
    GetInventoryReportUseCase,
    ListMaterialsUseCase,
    RegisterLoanPaymentUseCase,
    SeedDefaultMaterialsUseCase,
    SetInitialInventoryUseCase,
    UpdateInvoiceUseCase,
    UpdateMaterialUseCase,
)
from zycle.config import Settings, get_settings
from zycle.core.exceptions import TenantRequiredError
from zycle.infrastructure.storage.documents import (
    DocumentInvoiceStore,
    DocumentLoanStore,
    DocumentMaterialStore,
    get_invoice_store,
    get_loan_store,
    get_material_store,
)


@lru_cache
def get_app_settings() -> Settings:
    """Get cached application settings."""
    return get_settings()


# Tenant dependency
def get_tenant_id(request: Request) -> str:
    """
    Resolve the tenant for a request.

    Reads the configured tenant header, falling back to the configured
    default tenant. Raises TenantRequiredError when neither is present.
    """
    tenant_settings = get_app_settings().tenant
    tenant_id = request.headers.get(tenant_settings.header_name, "").strip()
    if tenant_id:
        return tenant_id
    if tenant_settings.default_id:
        return tenant_settings.default_id
    raise TenantRequiredError(tenant_settings.header_name)


# Store dependencies
async def get_mat_store() -> DocumentMaterialStore:
    """Get material store."""
    return await get_material_store()


async def get_inv_store() -> DocumentInvoiceStore:
    """Get invoice store."""
    return await get_invoice_store()


async def get_ln_store() -> DocumentLoanStore:
    """Get loan store."""
    return await get_loan_store()


# Material use case dependencies
def get_list_materials_use_case() -> ListMaterialsUseCase:
    """Get list materials use case."""
    return ListMaterialsUseCase()


def get_create_material_use_case() -> CreateMaterialUseCase:
    """Get create material use case."""
    return CreateMaterialUseCase()


def get_update_material_use_case() -> UpdateMaterialUseCase:
    """Get update material use case."""
    return UpdateMaterialUseCase()


def get_delete_material_use_case() -> DeleteMaterialUseCase:
    """Get delete material use case."""
    return DeleteMaterialUseCase()


def get_seed_default_materials_use_case() -> SeedDefaultMaterialsUseCase:
    """Get seed default materials use case."""
    return SeedDefaultMaterialsUseCase()


# Inventory use case dependencies
def get_inventory_report_use_case() -> GetInventoryReportUseCase:
    """Get inventory report use case."""
    return GetInventoryReportUseCase()


def get_set_initial_inventory_use_case() -> SetInitialInventoryUseCase:
    """Get set initial inventory use case."""
    return SetInitialInventoryUseCase()


# Invoice use case dependencies
def get_create_invoice_use_case() -> CreateInvoiceUseCase:
    """Get create invoice use case."""
    return CreateInvoiceUseCase()


def get_update_invoice_use_case() -> UpdateInvoiceUseCase:
    """Get update invoice use case."""
    return UpdateInvoiceUseCase()


def get_check_cart_use_case() -> CheckCartUseCase:
    """Get sale cart check use case."""
    return CheckCartUseCase()


# Loan use case dependencies
def get_create_loan_use_case() -> CreateLoanUseCase:
    """Get create loan use case."""
    return CreateLoanUseCase()


def get_register_loan_payment_use_case() -> RegisterLoanPaymentUseCase:
    """Get register loan payment use case."""
    return RegisterLoanPaymentUseCase()
