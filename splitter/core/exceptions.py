"""Custom exception classes"""
from typing import Any, Optional


class AppException(Exception):
    """Base exception for application errors"""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        error_type: str = "AppError",
        details: Optional[Any] = None
    ):
        self.message = message
        self.status_code = status_code
        self.error_type = error_type
        self.details = details
        super().__init__(self.message)


class ValidationError(AppException):
    """Validation error exception"""

    def __init__(
        self,
        message: str,
        details: Optional[Any] = None,
        error_type: str = "ValidationError"
    ):
        super().__init__(
            message=message,
            status_code=400,
            error_type=error_type,
            details=details
        )


class InvalidInputError(ValidationError):
    """Structurally invalid input to a split calculation.

    Raised for an empty participant set, a percentage outside [0, 100],
    an edit for a member that has no split, and similar caller mistakes.
    """

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message=message, details=details, error_type="InvalidInput")


class ArithmeticOverflowError(AppException):
    """Amount exceeds the representable minor-unit range"""

    def __init__(self, message: str = "Amount out of range", details: Optional[Any] = None):
        super().__init__(
            message=message,
            status_code=422,
            error_type="ArithmeticOverflow",
            details=details
        )


class InconsistentStateError(AppException):
    """Split state that cannot be saved (e.g. percentages not summing to 100)"""

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(
            message=message,
            status_code=409,
            error_type="InconsistentState",
            details=details
        )
