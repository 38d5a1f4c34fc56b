"""Base strategy interface"""

from abc import ABC, abstractmethod
from typing import Callable, Dict, List, Optional, Sequence
from uuid import UUID

from splitter.core.money import Money
from splitter.models.split import Split


def distribute_residual(
    shares: Dict[UUID, int],
    residual: int,
    priority: Callable[[UUID], tuple],
) -> Dict[UUID, int]:
    """
    Hand out leftover minor units one at a time until none remain.

    Members are visited in ascending `priority` order, cycling when the
    residual is larger than the number of members. A negative residual takes
    units away in the same order.

    Args:
        shares: Member id to unsigned share in minor units
        residual: Signed number of minor units still to assign
        priority: Sort key; smaller keys absorb rounding first

    Returns:
        New mapping with the residual applied
    """
    result = dict(shares)
    if residual == 0 or not result:
        return result

    order = sorted(result, key=priority)
    step = 1 if residual > 0 else -1
    for index in range(abs(residual)):
        result[order[index % len(order)]] += step
    return result


class BaseSplitStrategy(ABC):
    """Base class for split strategies"""

    @abstractmethod
    def calculate_splits(
        self,
        total: Money,
        participants: Sequence[Split],
        payment_id: Optional[UUID] = None,
    ) -> List[Split]:
        """
        Calculate split amounts for participants.

        Args:
            total: Signed payment total in the target currency
            participants: One entry per selected member, carrying any prior
                amount or percentage the strategy needs
            payment_id: Stable payment identifier, used for tie-breaking

        Returns:
            New Split objects in participant order, in the total's currency
        """
        pass

    @staticmethod
    def build_split(member_id: UUID, share: Money, percentage=None) -> Split:
        return Split(
            member_id=member_id,
            amount=share.to_decimal(),
            percentage=percentage,
            currency=share.currency,
        )
