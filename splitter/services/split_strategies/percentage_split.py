"""Percentage split strategy"""

import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import List, Optional, Sequence
from uuid import UUID

from splitter.core.exceptions import InvalidInputError
from splitter.core.money import Money
from splitter.models.split import Split
from splitter.services.split_strategies.base import BaseSplitStrategy, distribute_residual

logger = logging.getLogger(__name__)

HUNDRED = Decimal("100")


def validate_percentage(percentage: Optional[Decimal]) -> Decimal:
    """
    Check a single percentage and return it as a Decimal (missing counts as 0).

    Raises:
        InvalidInputError: If the percentage is outside [0, 100]
    """
    value = Decimal("0") if percentage is None else Decimal(percentage)
    if value < 0 or value > HUNDRED:
        raise InvalidInputError(
            f"Percentage must be between 0 and 100, got {value}"
        )
    return value


def percentage_amount(total: Money, percentage: Decimal) -> Money:
    """Share of `total` for one percentage, rounded HALF_UP to the minor unit"""
    raw = Decimal(total.minor_units) * percentage / HUNDRED
    return total.with_minor_units(int(raw.quantize(Decimal("1"), rounding=ROUND_HALF_UP)))


def _integer_weights(percentages: Sequence[Decimal]) -> List[int]:
    """Scale percentages to integers sharing one power of ten"""
    scale = max((-p.as_tuple().exponent for p in percentages), default=0)
    scale = max(scale, 0)
    return [int(p.scaleb(scale)) for p in percentages]


class PercentageSplitStrategy(BaseSplitStrategy):
    """Strategy for splitting a payment by percentage"""

    def __init__(self, apply_correction: bool = True):
        self.apply_correction = apply_correction

    def calculate_splits(
        self,
        total: Money,
        participants: Sequence[Split],
        payment_id: Optional[UUID] = None,
    ) -> List[Split]:
        """
        Calculate percentage-based split for participants.

        Amounts are allocated against the sum of the percentages, so a set
        that adds up to 100 gives `total * p / 100` per member. Each share is
        floored to the minor unit and the leftover units go to the largest
        shares first, which keeps the sum equal to the total. With
        `apply_correction=False` every share is rounded on its own instead
        and the sum may drift by up to half a minor unit per member.

        Args:
            total: Signed payment total
            participants: Splits carrying each member's percentage
            payment_id: Unused; accepted for interface compatibility

        Returns:
            Splits in participant order with amounts filled in and
            percentages preserved

        Raises:
            InvalidInputError: If there are no participants or a percentage
                is outside [0, 100]
        """
        if not participants:
            raise InvalidInputError("Cannot split an amount between zero participants")

        percentages = [validate_percentage(p.percentage) for p in participants]

        if not self.apply_correction:
            return [
                self.build_split(p.member_id, percentage_amount(total, pct), p.percentage)
                for p, pct in zip(participants, percentages)
            ]

        weights = _integer_weights(percentages)
        weight_total = sum(weights)

        if weight_total == 0:
            logger.debug("All percentages are zero, assigning zero amounts")
            return [
                self.build_split(p.member_id, total.with_minor_units(0), p.percentage)
                for p in participants
            ]

        target = abs(total.minor_units)
        floored = {
            p.member_id: (weight * target) // weight_total
            for p, weight in zip(participants, weights)
        }
        weight_by_member = {
            p.member_id: weight for p, weight in zip(participants, weights)
        }
        residual = target - sum(floored.values())

        logger.debug(
            "Percentage split of %s over %d members (percent total %s), residual %d",
            total, len(participants), sum(percentages, Decimal("0")), residual,
        )

        shares = distribute_residual(
            floored,
            residual,
            priority=lambda member_id: (
                -floored[member_id], -weight_by_member[member_id], member_id
            ),
        )

        sign = total.sign() or 1
        return [
            self.build_split(
                p.member_id,
                total.with_minor_units(sign * shares[p.member_id]),
                p.percentage,
            )
            for p in participants
        ]
