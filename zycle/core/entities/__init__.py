"""Core domain entities."""

from zycle.core.entities.invoice import (
    PAYMENT_METHODS,
    Invoice,
    InvoiceType,
    LineItem,
    PaymentMethod,
)
from zycle.core.entities.loan import (
    BeneficiaryType,
    Loan,
    LoanPayment,
    LoanStatus,
)
from zycle.core.entities.material import Material

__all__ = [
    "BeneficiaryType",
    "Invoice",
    "InvoiceType",
    "LineItem",
    "Loan",
    "LoanPayment",
    "LoanStatus",
    "Material",
    "PAYMENT_METHODS",
    "PaymentMethod",
]
