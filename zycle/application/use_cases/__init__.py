"""Application use cases."""

from zycle.application.use_cases.check_cart import CartCheckResult, CheckCartUseCase
from zycle.application.use_cases.create_invoice import (
    CreateInvoiceUseCase,
    InvoiceMutationResult,
)
from zycle.application.use_cases.create_loan import CreateLoanUseCase
from zycle.application.use_cases.inventory_report import (
    GetInventoryReportUseCase,
    InventoryReport,
)
from zycle.application.use_cases.manage_materials import (
    CreateMaterialUseCase,
    DeleteMaterialUseCase,
    ListMaterialsUseCase,
    UpdateMaterialUseCase,
)
from zycle.application.use_cases.register_loan_payment import RegisterLoanPaymentUseCase
from zycle.application.use_cases.seed_default_materials import SeedDefaultMaterialsUseCase
from zycle.application.use_cases.set_initial_inventory import (
    InitialInventoryResult,
    SetInitialInventoryUseCase,
)
from zycle.application.use_cases.update_invoice import UpdateInvoiceUseCase

__all__ = [
    "CartCheckResult",
    "CheckCartUseCase",
    "CreateInvoiceUseCase",
    "CreateLoanUseCase",
    "CreateMaterialUseCase",
    "DeleteMaterialUseCase",
    "GetInventoryReportUseCase",
    "InitialInventoryResult",
    "InventoryReport",
    "InvoiceMutationResult",
    "ListMaterialsUseCase",
    "RegisterLoanPaymentUseCase",
    "SeedDefaultMaterialsUseCase",
    "SetInitialInventoryUseCase",
    "UpdateInvoiceUseCase",
]
