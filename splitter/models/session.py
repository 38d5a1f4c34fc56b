"""Payment edit session model"""
from datetime import datetime
from decimal import Decimal
from typing import Dict, Optional, Tuple
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from splitter.core.exceptions import InvalidInputError
from splitter.models.payment import Payment
from splitter.models.split import Split


class PaymentEditSession(BaseModel):
    """
    Immutable snapshot of a payment being edited.

    Every edit produces a new session; nothing here is mutated in place.
    `edit_order` records when each member's split was last touched by hand
    and is only used for display. `held_percentages` keeps members'
    percentages while the payment is in another split mode.
    """

    payment: Payment
    participants: Tuple[UUID, ...] = ()
    group_members: Tuple[UUID, ...] = ()
    splits: Tuple[Split, ...] = ()
    edit_order: Dict[UUID, datetime] = Field(default_factory=dict)
    default_percentages: Dict[UUID, Decimal] = Field(default_factory=dict)
    held_percentages: Dict[UUID, Decimal] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True)

    @field_validator("participants", "group_members")
    @classmethod
    def deduplicate_members(cls, v):
        """Drop repeated member ids, keeping first occurrence order"""
        return tuple(dict.fromkeys(v))

    @field_validator("splits")
    @classmethod
    def validate_unique_members(cls, v):
        """Each member may hold at most one split"""
        seen = set()
        for split in v:
            if split.member_id in seen:
                raise InvalidInputError(
                    f"Duplicate split for member {split.member_id}"
                )
            seen.add(split.member_id)
        return v

    @property
    def members_pool(self) -> Tuple[UUID, ...]:
        """All members that can be selected; the participants when no group is known"""
        return self.group_members or self.participants

    def split_for(self, member_id: UUID) -> Optional[Split]:
        for split in self.splits:
            if split.member_id == member_id:
                return split
        return None
