"""Split verification and save-time validation"""
import logging
from decimal import Decimal
from typing import Sequence

from splitter.core.exceptions import InconsistentStateError, InvalidInputError
from splitter.core.money import Money
from splitter.models.payment import SplitMode
from splitter.models.session import PaymentEditSession
from splitter.models.split import Split
from splitter.services.split_strategies.percentage_split import HUNDRED
from splitter.utils.decimal_utils import sum_decimals

logger = logging.getLogger(__name__)

DEFAULT_PERCENTAGE_TOLERANCE = Decimal("0.01")


def verify_splits(splits: Sequence[Split], target: Money) -> bool:
    """True when the split amounts add up to `target` exactly, without rounding."""
    return sum_decimals([s.amount for s in splits]) == target.to_decimal()


def finer_than_currency(split: Split) -> bool:
    """True when a split amount has more decimals than its currency allows."""
    return split.money().to_decimal() != split.amount


def verify_equal_distribution(splits: Sequence[Split]) -> bool:
    """True when no two splits differ by more than one minor unit."""
    if not splits:
        return True
    units = [s.money().minor_units for s in splits]
    return max(units) - min(units) <= 1


def validate_for_save(
    session: PaymentEditSession,
    percentage_tolerance: Decimal = DEFAULT_PERCENTAGE_TOLERANCE,
) -> None:
    """
    Check that a session is safe to hand to persistence.

    Args:
        session: Session about to be saved
        percentage_tolerance: Allowed distance of the percentage total from 100

    Raises:
        InvalidInputError: If a transfer has no recipient or pays the payer
        InconsistentStateError: If the splits do not match the payment
    """
    payment = session.payment

    if payment.is_transfer:
        if payment.recipient_id is None:
            raise InvalidInputError("Please select a recipient for the transfer")
        if payment.recipient_id == payment.payer_id:
            raise InvalidInputError("Cannot transfer money to and from the same person")

    mismatched = [s.member_id for s in session.splits if s.currency != payment.currency]
    if mismatched:
        raise InconsistentStateError(
            f"Split currency does not match payment currency {payment.currency}",
            details={"member_ids": [str(m) for m in mismatched]},
        )

    expected_members = {payment.recipient_id} if payment.is_transfer else set(session.participants)
    split_members = {s.member_id for s in session.splits}
    if split_members != expected_members:
        raise InconsistentStateError(
            "Splits do not cover exactly the selected members",
            details={
                "missing": sorted(str(m) for m in expected_members - split_members),
                "unexpected": sorted(str(m) for m in split_members - expected_members),
            },
        )

    if payment.split_mode == SplitMode.PERCENTAGE and not payment.is_transfer:
        total_percentage = sum_decimals([s.percentage or Decimal("0") for s in session.splits])
        if abs(total_percentage - HUNDRED) > percentage_tolerance:
            raise InconsistentStateError(
                f"Percentages must sum to 100%, got {total_percentage}%",
                details={"total_percentage": str(total_percentage)},
            )

    too_precise = [s.member_id for s in session.splits if finer_than_currency(s)]
    if too_precise:
        raise InconsistentStateError(
            f"Split amounts must be whole minor units of {payment.currency}",
            details={"member_ids": [str(m) for m in too_precise]},
        )

    assigned = sum_decimals([s.amount for s in session.splits])
    if assigned != payment.amount:
        raise InconsistentStateError(
            f"Sum of split amounts ({assigned}) must equal total amount ({payment.amount})",
            details={"assigned": str(assigned), "total": str(payment.amount)},
        )

    logger.debug("Payment %s passed save validation", payment.id)
