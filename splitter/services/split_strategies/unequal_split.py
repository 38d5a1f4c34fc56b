"""Unequal (manual) split strategy"""
import logging
from typing import List, Optional, Sequence
from uuid import UUID

from splitter.core.money import Money
from splitter.models.split import Split
from splitter.services.split_strategies.base import BaseSplitStrategy, distribute_residual
from splitter.services.split_strategies.equal_split import EqualSplitStrategy

logger = logging.getLogger(__name__)


class UnequalSplitStrategy(BaseSplitStrategy):
    """Strategy for manually entered amounts, rescaled to the payment total"""

    def calculate_splits(
        self,
        total: Money,
        participants: Sequence[Split],
        payment_id: Optional[UUID] = None,
    ) -> List[Split]:
        """
        Rescale existing amounts to a new total, keeping their proportions.

        Each share is floored to the minor unit; the leftover units go to the
        largest shares first (ties by member id) so the result adds up to
        the total exactly. With no prior amounts to go on, falls back to an
        equal split.

        Args:
            total: New signed payment total
            participants: Splits carrying the amounts to preserve
            payment_id: Passed through to the equal-split fallback

        Returns:
            Rescaled splits in participant order, without percentages

        Raises:
            InvalidInputError: If there are no participants
        """
        priors = {
            p.member_id: abs(p.money().minor_units)
            for p in participants
        }
        basis = sum(priors.values())

        if basis == 0:
            logger.debug("No prior amounts to rescale, falling back to equal split")
            return EqualSplitStrategy().calculate_splits(total, participants, payment_id)

        target = abs(total.minor_units)
        floored = {
            member_id: (prior * target) // basis
            for member_id, prior in priors.items()
        }
        residual = target - sum(floored.values())

        logger.debug(
            "Rescaling %d splits from basis %d to %s, residual %d",
            len(floored), basis, total, residual,
        )

        shares = distribute_residual(
            floored, residual, priority=lambda member_id: (-floored[member_id], member_id)
        )

        sign = total.sign() or 1
        return [
            self.build_split(
                p.member_id,
                total.with_minor_units(sign * shares[p.member_id]),
            )
            for p in participants
        ]
