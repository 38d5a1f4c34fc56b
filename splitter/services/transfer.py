"""Transfer override"""
import logging
from typing import List, Optional, Sequence
from uuid import UUID

from splitter.core.exceptions import InvalidInputError
from splitter.models.payment import Payment
from splitter.models.split import Split

logger = logging.getLogger(__name__)


def pick_default_recipient(
    payer_id: UUID,
    participants: Sequence[UUID],
    group_members: Sequence[UUID] = (),
    current: Optional[UUID] = None,
) -> UUID:
    """
    Choose who receives a transfer.

    Keeps `current` when it is set and is not the payer; otherwise the first
    participant other than the payer, then the first such group member.

    Raises:
        InvalidInputError: If nobody other than the payer is available
    """
    if current is not None and current != payer_id:
        return current

    for member_id in list(participants) + list(group_members):
        if member_id != payer_id:
            return member_id

    raise InvalidInputError("A transfer needs a recipient other than the payer")


def transfer_splits(payment: Payment) -> List[Split]:
    """
    Single split giving the whole signed amount to the recipient.

    Raises:
        InvalidInputError: If the payment has no recipient
    """
    if payment.recipient_id is None:
        raise InvalidInputError("Please select a recipient for the transfer")

    logger.debug("Transfer of %s %s to %s", payment.amount, payment.currency, payment.recipient_id)
    total = payment.total()
    return [
        Split(
            member_id=payment.recipient_id,
            amount=total.to_decimal(),
            currency=total.currency,
        )
    ]
