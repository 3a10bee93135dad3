"""
Material domain entity for the recyclable-material catalog.

A material carries its purchase base price and the running stock on hand
(kilograms). Stock is only ever moved by invoice commits and the one-time
initial inventory load.
"""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator


class Material(BaseModel):
    """A recyclable material in the tenant catalog."""

    id: str | None = None
    name: str = Field(..., min_length=2, max_length=100)
    code: str | None = Field(default=None, max_length=50)
    price: float = Field(..., gt=0)
    stock: float = 0.0  # kg, signed: oversold sales may drive it negative
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 2:
            raise ValueError("name must have at least 2 characters")
        return v

    @field_validator("code")
    @classmethod
    def blank_code_is_none(cls, v: str | None) -> str | None:
        if v is None:
            return None
        v = v.strip()
        return v or None

    @field_validator("price")
    @classmethod
    def round_price(cls, v: float) -> float:
        return round(v, 2)

    @property
    def in_stock(self) -> bool:
        return self.stock > 0
