"""Split calculation endpoints"""
from fastapi import APIRouter, status

from splitter.models.session import PaymentEditSession
from splitter.schemas.split import (CalculateSplitsRequest, SessionCreateRequest,
                                    SessionEventRequest, SessionValidationResponse,
                                    SplitListResponse)
from splitter.services.split_service import SplitService

router = APIRouter(prefix="/splits", tags=["Splits"])


@router.post("/calculate", response_model=SplitListResponse)
async def calculate_splits(request: CalculateSplitsRequest):
    """
    Calculate the split list for a payment.

    Prior splits carry manually entered amounts (unequal mode) or
    percentages (percentage mode) that should be preserved.

    Returns:
        Splits that add up exactly to the total amount

    Raises:
        400: If the participants or percentages are invalid
        409: If the result fails verification
        422: If the amount is out of range
    """
    return SplitService.calculate_splits(request)


@router.post("/sessions", response_model=PaymentEditSession, status_code=status.HTTP_201_CREATED)
async def create_session(request: SessionCreateRequest):
    """
    Start an edit session for a payment.

    A new payment gets computed splits; a loaded payment keeps its splits.
    """
    return SplitService.create_session(request)


@router.post("/sessions/events", response_model=PaymentEditSession)
async def apply_session_event(request: SessionEventRequest):
    """
    Apply one edit event to a session snapshot and return the new session.

    Raises:
        400: If the edit is not valid for the session
    """
    return SplitService.apply_event(request.session, request.event)


@router.post("/sessions/validate", response_model=SessionValidationResponse)
async def validate_session(session: PaymentEditSession):
    """
    Check that a session can be saved.

    Raises:
        400: If a transfer has no valid recipient
        409: If splits do not match the payment
    """
    SplitService.validate_session(session)
    return SessionValidationResponse(valid=True)
