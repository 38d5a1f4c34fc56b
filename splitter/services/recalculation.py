"""Split recalculation controller

Turns edit events into new payment edit sessions. Structural edits (amount,
mode, currency, payment type, participant set) regenerate the whole split
list; per-member edits patch a single entry. Every function here is pure and
returns a new session.
"""
import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Dict, Iterable, List, Mapping, Optional, Sequence
from uuid import UUID

from splitter.core.exceptions import InvalidInputError
from splitter.core.money import Money
from splitter.models.events import (AmountChanged, CurrencyChanged, EditEvent,
                                    ParticipantsChanged, PayerChanged,
                                    PaymentTypeChanged, RecipientChanged,
                                    SplitAmountEdited, SplitModeChanged,
                                    SplitPercentageEdited)
from splitter.models.payment import Payment, PaymentType, SplitMode
from splitter.models.session import PaymentEditSession
from splitter.models.split import Split
from splitter.services.split_strategies import divide_evenly, get_split_strategy
from splitter.services.split_strategies.percentage_split import (
    HUNDRED, percentage_amount, validate_percentage)
from splitter.services.transfer import pick_default_recipient, transfer_splits
from splitter.utils.decimal_utils import from_minor_units, sum_decimals, to_minor_units

logger = logging.getLogger(__name__)


def spread_percentage(remaining: Decimal, member_ids: Sequence[UUID]) -> Dict[UUID, Decimal]:
    """
    Share a percentage between members in hundredths of a percent.

    The shares add up exactly to `remaining` (rounded to two places);
    a negative remainder is treated as nothing left to give.
    """
    hundredths = max(to_minor_units(remaining, 2), 0)
    shares = divide_evenly(hundredths, member_ids)
    return {member_id: from_minor_units(units, 2) for member_id, units in shares.items()}


def remembered_percentages(session: PaymentEditSession) -> Dict[UUID, Decimal]:
    """Percentages set aside outside percentage mode, overridden by those on the splits"""
    held = dict(session.held_percentages)
    held.update(
        (split.member_id, split.percentage)
        for split in session.splits
        if split.percentage is not None
    )
    return held


def assign_percentages(session: PaymentEditSession) -> Dict[UUID, Decimal]:
    """
    Percentage for every participant before a percentage-mode recompute.

    Members that already hold a percentage, on their split or remembered
    from an earlier stay in percentage mode, keep it. Newcomers split whatever
    is left of 100% between them. When nobody holds a percentage yet, the
    group's default percentages are used if they cover every participant,
    otherwise everyone gets an equal share.
    """
    participants = session.participants
    held = remembered_percentages(session)

    if not held:
        defaults = session.default_percentages
        if participants and all(member_id in defaults for member_id in participants):
            return {member_id: defaults[member_id] for member_id in participants}
        return spread_percentage(HUNDRED, participants)

    kept = {member_id: held[member_id] for member_id in participants if member_id in held}
    newcomers = [member_id for member_id in participants if member_id not in kept]
    if not newcomers:
        return kept

    remaining = HUNDRED - sum_decimals(list(kept.values()))
    assigned = dict(kept)
    assigned.update(spread_percentage(remaining, newcomers))
    return {member_id: assigned[member_id] for member_id in participants}


def _strategy_inputs(session: PaymentEditSession) -> List[Split]:
    """One input split per participant, carrying what the current mode needs"""
    payment = session.payment
    prior = {split.member_id: split for split in session.splits}

    if payment.split_mode == SplitMode.PERCENTAGE:
        percentages = assign_percentages(session)
        return [
            Split(member_id=member_id, percentage=percentages[member_id], currency=payment.currency)
            for member_id in session.participants
        ]

    inputs = []
    for member_id in session.participants:
        existing = prior.get(member_id)
        if existing is not None and payment.split_mode == SplitMode.UNEQUAL:
            inputs.append(existing)
        else:
            inputs.append(Split(member_id=member_id, currency=payment.currency))
    return inputs


def recompute(session: PaymentEditSession) -> PaymentEditSession:
    """
    Regenerate the whole split list for the session's current state.

    Transfers collapse to a single split for the recipient; every other
    payment is split between the participants using the strategy for its
    split mode. Only percentage-mode splits carry percentages; in the other
    modes they are kept in `held_percentages` until percentage mode comes
    back. Calling this twice gives the same session as calling it once.

    Raises:
        InvalidInputError: If there are no participants, a percentage is out
            of range, or a transfer has no possible recipient
        ArithmeticOverflowError: If the amount is out of range
    """
    payment = session.payment

    if payment.is_transfer:
        recipient_id = pick_default_recipient(
            payment.payer_id,
            session.participants,
            session.group_members,
            current=payment.recipient_id,
        )
        payment = payment.model_copy(update={"recipient_id": recipient_id})
        return session.model_copy(update={
            "payment": payment,
            "participants": (recipient_id,),
            "splits": tuple(transfer_splits(payment)),
            "held_percentages": remembered_percentages(session),
        })

    if not session.participants:
        raise InvalidInputError("Select at least one member to split the payment with")

    strategy = get_split_strategy(payment.split_mode)
    splits = strategy.calculate_splits(payment.total(), _strategy_inputs(session), payment.id)

    if payment.split_mode == SplitMode.PERCENTAGE:
        held = {}
    else:
        held = remembered_percentages(session)
    return session.model_copy(update={"splits": tuple(splits), "held_percentages": held})


def initialize_session(
    payment: Payment,
    participants: Iterable[UUID],
    group_members: Iterable[UUID] = (),
    splits: Optional[Iterable[Split]] = None,
    default_percentages: Optional[Mapping[UUID, Decimal]] = None,
) -> PaymentEditSession:
    """
    Start editing a payment.

    A new payment gets a freshly computed split list. A loaded payment
    (`splits` supplied) keeps the splits it was saved with.
    """
    loaded = tuple(splits or ())
    session = PaymentEditSession(
        payment=payment,
        participants=tuple(participants),
        group_members=tuple(group_members),
        splits=loaded,
        default_percentages=dict(default_percentages or {}),
    )
    if loaded:
        return session
    return recompute(session)


def _update_payment(session: PaymentEditSession, **changes) -> PaymentEditSession:
    # Rebuilt rather than copied so the amount is re-rounded to the currency
    payment = Payment(**{**session.payment.model_dump(), **changes})
    return session.model_copy(update={"payment": payment})


def _patch_split(
    session: PaymentEditSession, member_id: UUID, now: datetime, **changes
) -> PaymentEditSession:
    if session.payment.is_transfer:
        raise InvalidInputError("Transfer splits cannot be edited individually")

    if session.split_for(member_id) is None:
        raise InvalidInputError(f"Member {member_id} has no split on this payment")

    splits = tuple(
        split.model_copy(update=changes) if split.member_id == member_id else split
        for split in session.splits
    )
    edit_order = {**session.edit_order, member_id: now}
    return session.model_copy(update={"splits": splits, "edit_order": edit_order})


def _on_amount_changed(session, event: AmountChanged, now):
    return recompute(_update_payment(session, amount=event.amount))


def _on_split_mode_changed(session, event: SplitModeChanged, now):
    return recompute(_update_payment(session, split_mode=event.split_mode))


def _on_currency_changed(session, event: CurrencyChanged, now):
    changes = {"currency": event.currency}
    if event.amount is not None:
        changes["amount"] = event.amount
    return recompute(_update_payment(session, **changes))


def _on_participants_changed(session, event: ParticipantsChanged, now):
    participants = tuple(dict.fromkeys(event.participants))
    return recompute(session.model_copy(update={"participants": participants}))


def _on_split_amount_edited(session, event: SplitAmountEdited, now):
    amount = Money.from_decimal(event.amount, session.payment.currency)
    return _patch_split(
        session,
        event.member_id,
        now,
        amount=amount.to_decimal(),
        currency=amount.currency,
    )


def _on_split_percentage_edited(session, event: SplitPercentageEdited, now):
    percentage = validate_percentage(event.percentage)
    share = percentage_amount(session.payment.total(), percentage)
    return _patch_split(
        session,
        event.member_id,
        now,
        percentage=percentage,
        amount=share.to_decimal(),
        currency=share.currency,
    )


def _on_payment_type_changed(session, event: PaymentTypeChanged, now):
    payment = session.payment
    leaving_transfer = payment.is_transfer and event.payment_type != PaymentType.TRANSFERRED

    if event.payment_type == PaymentType.TRANSFERRED:
        recipient_id = pick_default_recipient(
            payment.payer_id,
            session.participants,
            session.group_members,
            current=payment.recipient_id,
        )
        logger.info("Payment %s switched to transfer, recipient %s", payment.id, recipient_id)
        session = _update_payment(
            session, payment_type=event.payment_type, recipient_id=recipient_id
        )
        session = session.model_copy(update={
            "participants": (recipient_id,),
            "splits": (),
            "held_percentages": remembered_percentages(session),
        })
        return recompute(session)

    if leaving_transfer:
        logger.info("Payment %s is no longer a transfer, reselecting all members", payment.id)
        session = _update_payment(session, payment_type=event.payment_type, recipient_id=None)
        session = session.model_copy(update={
            "participants": session.members_pool,
            "splits": (),
            "edit_order": {},
        })
        return recompute(session)

    return recompute(_update_payment(session, payment_type=event.payment_type))


def _on_recipient_changed(session, event: RecipientChanged, now):
    payment = session.payment
    if event.recipient_id == payment.payer_id:
        raise InvalidInputError("Cannot transfer money to and from the same person")

    session = _update_payment(session, recipient_id=event.recipient_id)
    if not payment.is_transfer:
        return session
    return recompute(session.model_copy(update={"participants": (event.recipient_id,)}))


def _on_payer_changed(session, event: PayerChanged, now):
    session = _update_payment(session, payer_id=event.payer_id)
    if not session.payment.is_transfer:
        return session
    return recompute(session)


_HANDLERS = {
    AmountChanged: _on_amount_changed,
    SplitModeChanged: _on_split_mode_changed,
    CurrencyChanged: _on_currency_changed,
    ParticipantsChanged: _on_participants_changed,
    SplitAmountEdited: _on_split_amount_edited,
    SplitPercentageEdited: _on_split_percentage_edited,
    PaymentTypeChanged: _on_payment_type_changed,
    RecipientChanged: _on_recipient_changed,
    PayerChanged: _on_payer_changed,
}


def apply_event(
    session: PaymentEditSession,
    event: EditEvent,
    now: Optional[datetime] = None,
) -> PaymentEditSession:
    """
    Apply one edit event and return the resulting session.

    Args:
        session: Current session snapshot
        event: The edit to apply
        now: Timestamp recorded for per-member edits (defaults to UTC now)

    Returns:
        New session; the input is left untouched

    Raises:
        InvalidInputError: If the edit is not valid for the session
        ArithmeticOverflowError: If an amount is out of range
    """
    handler = _HANDLERS.get(type(event))
    if handler is None:
        raise InvalidInputError(f"Unsupported edit event: {type(event).__name__}")

    logger.debug("Applying %s to payment %s", event.kind, session.payment.id)
    return handler(session, event, now or datetime.now(timezone.utc))
