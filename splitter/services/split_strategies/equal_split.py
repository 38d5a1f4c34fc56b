"""Equal split strategy"""

import logging
from typing import Dict, List, Optional, Sequence
from uuid import UUID

from splitter.core.exceptions import InvalidInputError
from splitter.core.money import Money
from splitter.models.split import Split
from splitter.services.split_strategies.base import BaseSplitStrategy

logger = logging.getLogger(__name__)


def rotation_offset(payment_id: Optional[UUID], count: int) -> int:
    """Stable starting position for remainder units, derived from the payment id"""
    if payment_id is None or count == 0:
        return 0
    return payment_id.int % count


def divide_evenly(
    total_units: int, member_ids: Sequence[UUID], offset: int = 0
) -> Dict[UUID, int]:
    """
    Divide a signed integer amount across members as evenly as possible.

    Members are ordered by id and rotated by `offset`; the first
    `remainder` members in that order receive one extra unit carrying the
    total's sign. Shares always add up to `total_units`.

    Raises:
        InvalidInputError: If there are no members
    """
    count = len(member_ids)
    if count == 0:
        raise InvalidInputError("Cannot split an amount between zero participants")

    sign = -1 if total_units < 0 else 1
    base, remainder = divmod(abs(total_units), count)

    ordered = sorted(member_ids)
    start = offset % count
    rotated = ordered[start:] + ordered[:start]
    extra = set(rotated[:remainder])

    return {
        member_id: sign * (base + (1 if member_id in extra else 0))
        for member_id in member_ids
    }


class EqualSplitStrategy(BaseSplitStrategy):
    """Strategy for splitting a payment equally among participants"""

    def calculate_splits(
        self,
        total: Money,
        participants: Sequence[Split],
        payment_id: Optional[UUID] = None,
    ) -> List[Split]:
        """
        Calculate equal split for all participants.

        Prior amounts and percentages are ignored; the returned splits carry
        no percentage.

        Raises:
            InvalidInputError: If there are no participants
        """
        member_ids = [p.member_id for p in participants]
        offset = rotation_offset(payment_id, len(member_ids))
        shares = divide_evenly(total.minor_units, member_ids, offset)

        logger.debug(
            "Equal split of %s across %d members (offset %d)",
            total, len(member_ids), offset,
        )

        return [
            self.build_split(p.member_id, total.with_minor_units(shares[p.member_id]))
            for p in participants
        ]
