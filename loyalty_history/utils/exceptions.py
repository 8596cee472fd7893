"""
Custom exceptions for loyalty history business logic.

These exceptions provide more specific error handling than generic Exception,
allowing for better error messages and appropriate HTTP status codes.
"""
from enum import Enum


class ValidationReason(str, Enum):
    """Why a client-supplied value was rejected."""

    MISSING_REQUIRED_FIELD = "MISSING_REQUIRED_FIELD"
    NO_UPDATABLE_FIELDS = "NO_UPDATABLE_FIELDS"
    UNKNOWN_TABLE = "UNKNOWN_TABLE"
    INVALID_FIELD = "INVALID_FIELD"


class LoyaltyHistoryError(Exception):
    """Base exception for all loyalty history errors."""

    def __init__(self, message: str, code: str = "LOYALTY_HISTORY_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)


class ValidationError(LoyaltyHistoryError):
    """Invalid input data."""

    def __init__(self, message: str, reason: ValidationReason = ValidationReason.INVALID_FIELD,
                 field: str = None):
        self.reason = reason
        self.field = field
        super().__init__(message, reason.value)


class NotFoundError(LoyaltyHistoryError):
    """Resource not found."""

    def __init__(self, resource: str, identifier=None):
        message = f"{resource} not found"
        if identifier is not None:
            message = f"{resource} with ID {identifier} not found"
        super().__init__(message, "NOT_FOUND")


class StoreError(LoyaltyHistoryError):
    """The record store failed to run a statement."""

    def __init__(self, message: str, original_error: Exception = None):
        self.original_error = original_error
        super().__init__(message, "DATABASE_ERROR")
