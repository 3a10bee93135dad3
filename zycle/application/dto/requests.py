"""Request DTOs for API endpoints.

Pydantic v2 models for API request validation.
These are the ONLY contracts between API and use cases.

Line weights, prices and loan payment amounts are deliberately unconstrained
here: the use cases reject them with domain errors before anything is
written.
"""

from datetime import date

from pydantic import BaseModel, Field

from zycle.core.entities.invoice import PaymentMethod
from zycle.core.entities.loan import BeneficiaryType

# --- Materials ---


class CreateMaterialRequest(BaseModel):
    """Request to add a material to the catalog. Stock always starts at zero."""

    name: str = Field(..., min_length=2, max_length=100, examples=["PET TRANSPARENTE"])
    code: str | None = Field(default=None, max_length=50, examples=["303"])
    price: float = Field(..., gt=0, description="Base purchase price per kg")


class UpdateMaterialRequest(BaseModel):
    """Request to edit catalog fields. Omitted fields are left unchanged."""

    name: str | None = Field(default=None, min_length=2, max_length=100)
    code: str | None = Field(default=None, max_length=50)
    price: float | None = Field(default=None, gt=0)


class InitialInventoryRequest(BaseModel):
    """Opening stock per material ID in kg. Null or zero entries are skipped."""

    quantities: dict[str, float | None] = Field(
        ...,
        description="Material ID to opening quantity",
        examples=[{"mat_cobre_1": 120.5, "mat_carton": None}],
    )


# --- Invoices ---


class LineItemRequest(BaseModel):
    """A requested invoice line."""

    material_id: str = Field(..., description="Material catalog ID")
    weight: float = Field(..., description="Weight in kg, must be positive")
    unit_price: float | None = Field(
        default=None,
        description="Price per kg (defaults to the material's base price)",
    )
    subtotal: float | None = Field(
        default=None,
        description="Ignored; always recomputed as weight * unit_price",
    )


class CreateInvoiceRequest(BaseModel):
    """Request to create a purchase or sale invoice."""

    invoice_date: date | None = Field(default=None, description="Defaults to today")
    counterparty_name: str | None = Field(default=None, max_length=100)
    counterparty_identification: str | None = Field(
        default=None,
        max_length=50,
        description="Supplier identification (purchases only)",
    )
    payment_method: PaymentMethod = PaymentMethod.CASH
    items: list[LineItemRequest] = Field(default_factory=list)
    notes: str | None = Field(default=None, max_length=500)
    loan_payment: float = Field(
        default=0.0,
        description="Amount withheld to repay a loan (purchases only)",
    )
    loan_id: str | None = Field(default=None, description="Loan the payment applies to")


class UpdateInvoiceRequest(BaseModel):
    """Request to edit an invoice. Number, type and loan payment are fixed at creation."""

    invoice_date: date | None = Field(default=None, description="Keeps the stored date if omitted")
    counterparty_name: str | None = Field(default=None, max_length=100)
    counterparty_identification: str | None = Field(default=None, max_length=50)
    payment_method: PaymentMethod = PaymentMethod.CASH
    items: list[LineItemRequest] = Field(default_factory=list)
    notes: str | None = Field(default=None, max_length=500)


class CartItemRequest(BaseModel):
    """A line already held in the caller's sale cart."""

    id: str = Field(..., description="Cart line ID")
    material_id: str
    weight: float
    unit_price: float | None = None


class CartCheckRequest(BaseModel):
    """Check whether a weight of a material can be added to (or edited in) a sale cart."""

    material_id: str
    weight: float = Field(..., description="Requested weight in kg")
    cart: list[CartItemRequest] = Field(default_factory=list)
    editing_item_id: str | None = Field(
        default=None,
        description="Cart line being edited; its current weight is not counted",
    )


# --- Loans ---


class CreateLoanRequest(BaseModel):
    """Request to register a loan to an associate or collaborator."""

    beneficiary_type: BeneficiaryType
    beneficiary_id: str | None = None
    beneficiary_name: str = Field(..., min_length=1, max_length=100)
    amount: float = Field(..., gt=0)
    loan_date: date | None = Field(default=None, description="Defaults to today")
    notes: str | None = Field(default=None, max_length=500)


class LoanPaymentRequest(BaseModel):
    """Request to register a standalone loan payment."""

    amount: float = Field(..., description="Must be positive and at most the outstanding balance")
    paid_on: date | None = Field(default=None, description="Defaults to today")
    note: str | None = Field(default=None, max_length=500)
