"""Split calculation schemas"""

from decimal import Decimal
from typing import Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from splitter.models.events import EditEvent
from splitter.models.payment import Payment, PaymentType, SplitMode
from splitter.models.session import PaymentEditSession
from splitter.models.split import Split
from splitter.utils.decimal_utils import to_decimal


class SplitInput(BaseModel):
    """Prior split supplied by the caller"""

    member_id: UUID
    amount: Decimal = Decimal("0")
    percentage: Optional[Decimal] = None

    @field_validator("amount", "percentage", mode="before")
    @classmethod
    def convert_to_decimal(cls, v):
        """Convert numeric values to Decimal"""
        if v is None:
            return v
        return to_decimal(v)


class CalculateSplitsRequest(BaseModel):
    """One-shot split calculation for a payment"""

    payment_id: Optional[UUID] = None
    total_amount: Decimal
    currency: Optional[str] = Field(default=None, min_length=3, max_length=3)
    split_mode: SplitMode = SplitMode.EQUAL
    payment_type: PaymentType = PaymentType.SPENT
    payer_id: UUID
    recipient_id: Optional[UUID] = None
    participants: List[UUID] = Field(default_factory=list)
    prior_splits: List[SplitInput] = Field(default_factory=list)

    @field_validator("total_amount", mode="before")
    @classmethod
    def convert_total_amount(cls, v):
        """Convert total_amount to Decimal"""
        return to_decimal(v)


class SplitListResponse(BaseModel):
    """Response schema for a calculated split list"""

    total_amount: Decimal
    currency: str
    splits: List[Split]

    model_config = ConfigDict(from_attributes=True)


class SessionCreateRequest(BaseModel):
    """Start an edit session for a new or loaded payment"""

    payment: Payment
    participants: List[UUID] = Field(default_factory=list)
    group_members: List[UUID] = Field(default_factory=list)
    splits: Optional[List[Split]] = None
    default_percentages: Dict[UUID, Decimal] = Field(default_factory=dict)


class SessionEventRequest(BaseModel):
    """Apply one edit event to a session snapshot"""

    session: PaymentEditSession
    event: EditEvent


class SessionValidationResponse(BaseModel):
    """Result of save-time validation"""

    valid: bool
