"""Split calculation strategies"""

from splitter.core.exceptions import ValidationError
from splitter.models.payment import SplitMode
from splitter.services.split_strategies.base import (BaseSplitStrategy,
                                                     distribute_residual)
from splitter.services.split_strategies.equal_split import (EqualSplitStrategy,
                                                            divide_evenly)
from splitter.services.split_strategies.percentage_split import \
    PercentageSplitStrategy
from splitter.services.split_strategies.unequal_split import \
    UnequalSplitStrategy


def get_split_strategy(split_mode: SplitMode) -> BaseSplitStrategy:
    """
    Get appropriate split strategy based on split mode.

    Args:
        split_mode: Mode of split (EQUAL, UNEQUAL, or PERCENTAGE)

    Returns:
        Instance of appropriate strategy

    Raises:
        ValidationError: If split_mode is not recognized
    """
    strategies = {
        SplitMode.EQUAL: EqualSplitStrategy(),
        SplitMode.UNEQUAL: UnequalSplitStrategy(),
        SplitMode.PERCENTAGE: PercentageSplitStrategy(),
    }

    strategy = strategies.get(split_mode)
    if strategy is None:
        raise ValidationError(f"Unknown split mode: {split_mode}")

    return strategy


__all__ = [
    "BaseSplitStrategy",
    "EqualSplitStrategy",
    "PercentageSplitStrategy",
    "UnequalSplitStrategy",
    "distribute_residual",
    "divide_evenly",
    "get_split_strategy",
]
