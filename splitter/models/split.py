"""Split model"""
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, field_validator

from splitter.core.money import Money, normalize_currency
from splitter.utils.decimal_utils import to_decimal


class Split(BaseModel):
    """One member's share of a payment"""

    member_id: UUID
    amount: Decimal = Decimal("0")
    percentage: Optional[Decimal] = None
    currency: str

    model_config = ConfigDict(frozen=True)

    @field_validator("amount", "percentage", mode="before")
    @classmethod
    def convert_to_decimal(cls, v):
        """Convert numeric values to Decimal"""
        if v is None:
            return v
        return to_decimal(v)

    @field_validator("currency", mode="before")
    @classmethod
    def normalize_currency_code(cls, v):
        """Upper-case and validate the currency code"""
        return normalize_currency(v)

    def money(self) -> Money:
        return Money.from_decimal(self.amount, self.currency)

    def __repr__(self) -> str:
        return f"<Split(member_id={self.member_id}, amount={self.amount}, percentage={self.percentage})>"
