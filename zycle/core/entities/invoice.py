"""Purchase and sale invoice domain entities."""

from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, Field, model_validator


class InvoiceType(str, Enum):
    """Direction of an invoice. Purchases add stock, sales remove it."""

    PURCHASE = "purchase"
    SALE = "sale"

    @property
    def sign(self) -> int:
        return 1 if self is InvoiceType.PURCHASE else -1


class PaymentMethod(str, Enum):
    CASH = "cash"
    NEQUI = "nequi"
    CHEQUE = "cheque"


PAYMENT_METHODS: dict[InvoiceType, frozenset[PaymentMethod]] = {
    InvoiceType.PURCHASE: frozenset({PaymentMethod.CASH, PaymentMethod.NEQUI}),
    InvoiceType.SALE: frozenset(
        {PaymentMethod.CASH, PaymentMethod.NEQUI, PaymentMethod.CHEQUE}
    ),
}


class LineItem(BaseModel):
    """A single material line on an invoice."""

    material_id: str
    material_name: str = ""  # denormalized at write time
    material_code: str | None = None
    weight: float = Field(..., gt=0)  # kg
    unit_price: float = Field(..., gt=0)
    subtotal: float = 0.0

    @model_validator(mode="after")
    def compute_subtotal(self) -> "LineItem":
        """Subtotal is always weight * unit_price; a supplied value is ignored."""
        self.subtotal = self.weight * self.unit_price
        return self


class Invoice(BaseModel):
    """
    A purchase or sale invoice.

    Totals are derived from the line items. ``number`` is assigned once at
    creation and is independent per invoice type. Purchase invoices may carry
    a loan payment that is withheld from what is paid out to the supplier.
    """

    id: str | None = None
    invoice_type: InvoiceType
    number: int = Field(..., ge=1)
    invoice_date: date = Field(default_factory=date.today)
    counterparty_name: str | None = Field(default=None, max_length=100)
    counterparty_identification: str | None = Field(default=None, max_length=50)
    payment_method: PaymentMethod = PaymentMethod.CASH
    items: list[LineItem] = Field(default_factory=list)
    total: float = 0.0
    notes: str | None = Field(default=None, max_length=500)
    loan_payment: float = Field(default=0.0, ge=0)
    loan_id: str | None = None
    net_paid: float = 0.0
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @model_validator(mode="after")
    def compute_totals(self) -> "Invoice":
        """Compute total and net_paid from items and loan payment."""
        self.total = sum(item.subtotal for item in self.items)
        self.net_paid = self.total - self.loan_payment
        return self

    @property
    def total_weight(self) -> float:
        return sum(item.weight for item in self.items)
