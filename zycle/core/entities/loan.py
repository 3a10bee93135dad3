"""Loan domain entities for associates and collaborators."""

from datetime import date, datetime
from enum import Enum
from uuid import uuid4

from pydantic import BaseModel, Field


class BeneficiaryType(str, Enum):
    ASSOCIATE = "associate"
    COLLABORATOR = "collaborator"


class LoanStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"


class LoanPayment(BaseModel):
    """A single repayment recorded against a loan."""

    id: str = Field(default_factory=lambda: uuid4().hex)
    amount: float = Field(..., gt=0)
    paid_on: date = Field(default_factory=date.today)
    note: str | None = Field(default=None, max_length=500)
    invoice_id: str | None = None  # set when withheld from a purchase invoice


class Loan(BaseModel):
    """
    Money advanced to an associate or collaborator.

    ``outstanding_balance`` is decremented atomically by each payment;
    ``status`` is derived from it and never persisted.
    """

    id: str | None = None
    beneficiary_type: BeneficiaryType
    beneficiary_id: str | None = None
    beneficiary_name: str = Field(..., min_length=1, max_length=100)
    amount: float = Field(..., gt=0)
    loan_date: date = Field(default_factory=date.today)
    payments: list[LoanPayment] = Field(default_factory=list)
    outstanding_balance: float = 0.0
    notes: str | None = Field(default=None, max_length=500)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def status(self) -> LoanStatus:
        return LoanStatus.PAID if self.outstanding_balance <= 0 else LoanStatus.PENDING

    @property
    def total_paid(self) -> float:
        return sum(p.amount for p in self.payments)
