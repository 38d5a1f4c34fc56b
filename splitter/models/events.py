"""Edit events consumed by the recalculation controller"""
from decimal import Decimal
from typing import Annotated, Literal, Optional, Tuple, Union
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from splitter.core.money import normalize_currency
from splitter.models.payment import PaymentType, SplitMode
from splitter.utils.decimal_utils import to_decimal


class _Event(BaseModel):
    model_config = ConfigDict(frozen=True)


class AmountChanged(_Event):
    kind: Literal["amount_changed"] = "amount_changed"
    amount: Decimal

    @field_validator("amount", mode="before")
    @classmethod
    def convert_amount(cls, v):
        return to_decimal(v)


class SplitModeChanged(_Event):
    kind: Literal["split_mode_changed"] = "split_mode_changed"
    split_mode: SplitMode


class CurrencyChanged(_Event):
    """New currency, with the converted amount when a conversion produced one"""

    kind: Literal["currency_changed"] = "currency_changed"
    currency: str
    amount: Optional[Decimal] = None

    @field_validator("currency", mode="before")
    @classmethod
    def normalize_currency_code(cls, v):
        return normalize_currency(v)

    @field_validator("amount", mode="before")
    @classmethod
    def convert_amount(cls, v):
        if v is None:
            return v
        return to_decimal(v)


class ParticipantsChanged(_Event):
    kind: Literal["participants_changed"] = "participants_changed"
    participants: Tuple[UUID, ...]


class SplitAmountEdited(_Event):
    kind: Literal["split_amount_edited"] = "split_amount_edited"
    member_id: UUID
    amount: Decimal

    @field_validator("amount", mode="before")
    @classmethod
    def convert_amount(cls, v):
        return to_decimal(v)


class SplitPercentageEdited(_Event):
    kind: Literal["split_percentage_edited"] = "split_percentage_edited"
    member_id: UUID
    percentage: Decimal

    @field_validator("percentage", mode="before")
    @classmethod
    def convert_percentage(cls, v):
        return to_decimal(v)


class PaymentTypeChanged(_Event):
    kind: Literal["payment_type_changed"] = "payment_type_changed"
    payment_type: PaymentType


class RecipientChanged(_Event):
    kind: Literal["recipient_changed"] = "recipient_changed"
    recipient_id: UUID


class PayerChanged(_Event):
    kind: Literal["payer_changed"] = "payer_changed"
    payer_id: UUID


EditEvent = Annotated[
    Union[
        AmountChanged,
        SplitModeChanged,
        CurrencyChanged,
        ParticipantsChanged,
        SplitAmountEdited,
        SplitPercentageEdited,
        PaymentTypeChanged,
        RecipientChanged,
        PayerChanged,
    ],
    Field(discriminator="kind"),
]
