"""Split calculation service used by the HTTP layer"""
import logging
from decimal import Decimal
from typing import Optional

from splitter.config import get_settings
from splitter.core.exceptions import InconsistentStateError
from splitter.models.events import EditEvent
from splitter.models.payment import Payment, SplitMode
from splitter.models.session import PaymentEditSession
from splitter.models.split import Split
from splitter.schemas.split import (CalculateSplitsRequest, SessionCreateRequest,
                                    SplitListResponse)
from splitter.services.recalculation import apply_event, initialize_session, recompute
from splitter.services.validation import (validate_for_save,
                                          verify_equal_distribution,
                                          verify_splits)

logger = logging.getLogger(__name__)


class SplitService:
    """Service for split calculation operations"""

    @staticmethod
    def verify_session(session: PaymentEditSession) -> None:
        """
        Double-check a freshly recomputed split list.

        Raises:
            InconsistentStateError: If the splits do not add up to the total,
                or an equal split is uneven by more than one minor unit
        """
        payment = session.payment
        if not verify_splits(session.splits, payment.total()):
            raise InconsistentStateError("Split verification failed")

        if (
            payment.split_mode == SplitMode.EQUAL
            and not payment.is_transfer
            and not verify_equal_distribution(session.splits)
        ):
            raise InconsistentStateError("Equal distribution verification failed")

    @staticmethod
    def calculate_splits(request: CalculateSplitsRequest) -> SplitListResponse:
        """
        Compute a split list in one call.

        Args:
            request: Payment fields, participants and any prior splits

        Returns:
            The split list together with the total it adds up to

        Raises:
            InvalidInputError: If the input cannot be split
            InconsistentStateError: If verification of the result fails
        """
        currency = request.currency or get_settings().default_currency
        payment = Payment(
            id=request.payment_id,
            amount=request.total_amount,
            currency=currency,
            split_mode=request.split_mode,
            payment_type=request.payment_type,
            payer_id=request.payer_id,
            recipient_id=request.recipient_id,
        )
        prior = [
            Split(
                member_id=p.member_id,
                amount=p.amount,
                percentage=p.percentage,
                currency=currency,
            )
            for p in request.prior_splits
        ]
        session = PaymentEditSession(
            payment=payment,
            participants=tuple(request.participants),
            splits=tuple(prior),
        )
        session = recompute(session)
        SplitService.verify_session(session)

        logger.debug("Calculated %d splits for payment %s", len(session.splits), payment.id)
        return SplitListResponse(
            total_amount=session.payment.total().to_decimal(),
            currency=session.payment.currency,
            splits=list(session.splits),
        )

    @staticmethod
    def create_session(request: SessionCreateRequest) -> PaymentEditSession:
        """Start an edit session for a new or loaded payment"""
        return initialize_session(
            request.payment,
            request.participants,
            group_members=request.group_members,
            splits=request.splits,
            default_percentages=request.default_percentages,
        )

    @staticmethod
    def apply_event(session: PaymentEditSession, event: EditEvent) -> PaymentEditSession:
        """Apply one edit event to a session snapshot"""
        return apply_event(session, event)

    @staticmethod
    def validate_session(
        session: PaymentEditSession, tolerance: Optional[Decimal] = None
    ) -> None:
        """
        Save-time validation using the configured percentage tolerance.

        Raises:
            InvalidInputError: If a transfer is missing a valid recipient
            InconsistentStateError: If the splits do not match the payment
        """
        if tolerance is None:
            tolerance = get_settings().percentage_tolerance
        validate_for_save(session, tolerance)
