"""Payment model"""
import enum
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from splitter.core.money import Money, normalize_currency
from splitter.utils.decimal_utils import to_decimal


class SplitMode(str, enum.Enum):
    """Enum for split modes"""
    EQUAL = "EQUAL"
    UNEQUAL = "UNEQUAL"
    PERCENTAGE = "PERCENTAGE"


class PaymentType(str, enum.Enum):
    """Enum for payment types"""
    SPENT = "SPENT"
    RECEIVED = "RECEIVED"
    TRANSFERRED = "TRANSFERRED"


class Payment(BaseModel):
    """A payment being split between group members.

    Amounts are signed: money received by the group is negative, the same
    convention the splits use. The amount is held at the precision of its
    currency, so 10.005 GBP is stored as 10.01.
    """

    id: Optional[UUID] = None
    amount: Decimal
    currency: str
    split_mode: SplitMode = SplitMode.EQUAL
    payment_type: PaymentType = PaymentType.SPENT
    payer_id: UUID
    recipient_id: Optional[UUID] = None

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="before")
    @classmethod
    def round_amount_to_currency(cls, data):
        """Bring the amount to the precision of its currency (HALF_UP)"""
        if isinstance(data, dict) and data.get("amount") is not None and data.get("currency"):
            money = Money.from_decimal(data["amount"], data["currency"])
            data = {**data, "amount": money.to_decimal()}
        return data

    @field_validator("amount", mode="before")
    @classmethod
    def convert_amount(cls, v):
        """Convert amount to Decimal"""
        return to_decimal(v)

    @field_validator("currency", mode="before")
    @classmethod
    def normalize_currency_code(cls, v):
        """Upper-case and validate the currency code"""
        return normalize_currency(v)

    @property
    def is_transfer(self) -> bool:
        return self.payment_type == PaymentType.TRANSFERRED

    def total(self) -> Money:
        """Payment amount as fixed-point Money"""
        return Money.from_decimal(self.amount, self.currency)

    def __repr__(self) -> str:
        return f"<Payment(id={self.id}, amount={self.amount} {self.currency}, mode={self.split_mode.value}, type={self.payment_type.value})>"
