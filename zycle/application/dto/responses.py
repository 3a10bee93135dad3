"""Response DTOs for API endpoints.

Pydantic v2 models for API response serialization.
These are the ONLY contracts between use cases and API layer.
"""

from datetime import date, datetime

from pydantic import BaseModel, Field

from zycle.core.entities.invoice import Invoice
from zycle.core.entities.loan import Loan
from zycle.core.entities.material import Material


class ProviderHealthResponse(BaseModel):
    """Backing service health status."""

    name: str
    available: bool
    latency_ms: float | None = None
    error: str | None = None


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str = "1.0.0"
    uptime_seconds: float
    database: ProviderHealthResponse | None = None


class ErrorResponse(BaseModel):
    """Standardized error response DTO.

    Every error response includes:
    - error_code: machine-readable code (e.g. INSUFFICIENT_STOCK)
    - message: human-readable description
    - hint: suggested recovery action
    - path: request path that triggered the error
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error description")
    hint: str | None = Field(default=None, description="Suggested recovery action")
    detail: str | None = Field(default=None, description="Additional details")
    path: str | None = Field(default=None, description="Request path")
    timestamp: datetime = Field(default_factory=datetime.now)


# --- Materials ---


class MaterialResponse(BaseModel):
    """Material catalog entry response."""

    id: str
    name: str
    code: str | None = None
    price: float
    stock: float
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_entity(cls, material: Material) -> "MaterialResponse":
        return cls(
            id=material.id or "",
            name=material.name,
            code=material.code,
            price=material.price,
            stock=material.stock,
            created_at=material.created_at,
            updated_at=material.updated_at,
        )


class MaterialListResponse(BaseModel):
    """List of catalog materials."""

    materials: list[MaterialResponse]
    total: int


class SeedMaterialsResponse(BaseModel):
    """Result of loading the default catalog."""

    created: int = Field(..., description="Materials created; 0 if the catalog was not empty")


class InventoryReportResponse(BaseModel):
    """Stock on hand across the catalog."""

    materials: list[MaterialResponse] = Field(description="Ordered by stock, largest first")
    total_weight: float
    top_materials: list[MaterialResponse]
    recent_purchases: list["InvoiceResponse"] = Field(default_factory=list)
    recent_sales: list["InvoiceResponse"] = Field(default_factory=list)


class InitialInventoryResponse(BaseModel):
    """Opening stock that was applied."""

    applied: dict[str, float]
    total_weight: float


# --- Invoices ---


class LineItemResponse(BaseModel):
    """Invoice line in response."""

    material_id: str
    material_name: str
    material_code: str | None = None
    weight: float
    unit_price: float
    subtotal: float


class InvoiceResponse(BaseModel):
    """Purchase or sale invoice response."""

    id: str
    invoice_type: str
    number: int
    invoice_date: date
    counterparty_name: str | None = None
    counterparty_identification: str | None = None
    payment_method: str
    items: list[LineItemResponse]
    total: float
    total_weight: float
    notes: str | None = None
    loan_payment: float = 0.0
    loan_id: str | None = None
    net_paid: float
    created_at: datetime | None = None
    updated_at: datetime | None = None
    stock_deltas: dict[str, float] | None = Field(
        default=None,
        description="Stock change applied per material by this save",
    )

    @classmethod
    def from_entity(
        cls, invoice: Invoice, stock_deltas: dict[str, float] | None = None
    ) -> "InvoiceResponse":
        return cls(
            id=invoice.id or "",
            invoice_type=invoice.invoice_type.value,
            number=invoice.number,
            invoice_date=invoice.invoice_date,
            counterparty_name=invoice.counterparty_name,
            counterparty_identification=invoice.counterparty_identification,
            payment_method=invoice.payment_method.value,
            items=[LineItemResponse(**item.model_dump()) for item in invoice.items],
            total=invoice.total,
            total_weight=invoice.total_weight,
            notes=invoice.notes,
            loan_payment=invoice.loan_payment,
            loan_id=invoice.loan_id,
            net_paid=invoice.net_paid,
            created_at=invoice.created_at,
            updated_at=invoice.updated_at,
            stock_deltas=stock_deltas,
        )


class InvoiceListResponse(BaseModel):
    """List of invoices, newest first."""

    invoices: list[InvoiceResponse]
    total: int


class NextNumberResponse(BaseModel):
    invoice_type: str
    number: int


class CartCheckResponse(BaseModel):
    """Outcome of a sale cart stock check."""

    allowed: bool
    material_id: str
    requested: float
    reserved: float = Field(..., description="Weight of the material already in the cart")
    stock: float
    available: float = Field(..., description="stock - reserved")


# --- Loans ---


class LoanPaymentResponse(BaseModel):
    id: str
    amount: float
    paid_on: date
    note: str | None = None
    invoice_id: str | None = None


class LoanResponse(BaseModel):
    """Loan response with derived status."""

    id: str
    beneficiary_type: str
    beneficiary_id: str | None = None
    beneficiary_name: str
    amount: float
    loan_date: date
    payments: list[LoanPaymentResponse]
    outstanding_balance: float
    total_paid: float
    status: str
    notes: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_entity(cls, loan: Loan) -> "LoanResponse":
        return cls(
            id=loan.id or "",
            beneficiary_type=loan.beneficiary_type.value,
            beneficiary_id=loan.beneficiary_id,
            beneficiary_name=loan.beneficiary_name,
            amount=loan.amount,
            loan_date=loan.loan_date,
            payments=[LoanPaymentResponse(**p.model_dump()) for p in loan.payments],
            outstanding_balance=loan.outstanding_balance,
            total_paid=loan.total_paid,
            status=loan.status.value,
            notes=loan.notes,
            created_at=loan.created_at,
            updated_at=loan.updated_at,
        )


class LoanListResponse(BaseModel):
    loans: list[LoanResponse]
    total: int


InventoryReportResponse.model_rebuild()
