"""
Standardized error response utilities for the loyalty history API.

Provides consistent error response format across all endpoints:
{
    "error": {
        "message": "User-friendly error message",
        "code": "ERROR_CODE"
    }
}

Usage:
    from loyalty_history.utils.errors import error_response, ErrorCode

    return error_response("Record not found", ErrorCode.NOT_FOUND, 404)
"""
import logging
from enum import Enum
from flask import jsonify
from typing import Optional

logger = logging.getLogger(__name__)


class ErrorCode(str, Enum):
    """Standardized error codes for API responses."""

    # Validation Errors (400)
    INVALID_REQUEST = "INVALID_REQUEST"
    MISSING_REQUIRED_FIELD = "MISSING_REQUIRED_FIELD"
    NO_UPDATABLE_FIELDS = "NO_UPDATABLE_FIELDS"
    UNKNOWN_TABLE = "UNKNOWN_TABLE"
    INVALID_FIELD = "INVALID_FIELD"

    # Not Found (404)
    NOT_FOUND = "NOT_FOUND"

    # Method Not Allowed (405)
    METHOD_NOT_ALLOWED = "METHOD_NOT_ALLOWED"

    # Server Errors (500)
    INTERNAL_ERROR = "INTERNAL_ERROR"
    DATABASE_ERROR = "DATABASE_ERROR"


def error_response(
    message: str,
    code: ErrorCode = ErrorCode.INTERNAL_ERROR,
    status_code: int = 500,
    log_error: bool = True,
    details: Optional[dict] = None
) -> tuple:
    """
    Create a standardized error response.

    Args:
        message: User-friendly error message
        code: Error code from ErrorCode enum
        status_code: HTTP status code
        log_error: Whether to log the error (default True for 500s)
        details: Optional additional details (only logged, not returned to user)

    Returns:
        Tuple of (response, status_code) for Flask
    """
    if log_error and status_code >= 500:
        logger.error(f"API Error [{code}]: {message}", extra={"details": details})
    elif log_error and status_code >= 400:
        logger.warning(f"API Error [{code}]: {message}", extra={"details": details})

    response = {
        "error": {
            "message": message,
            "code": code.value if isinstance(code, ErrorCode) else code
        }
    }

    return jsonify(response), status_code


# Convenience functions for common error types
def bad_request(message: str, code: ErrorCode = ErrorCode.INVALID_REQUEST) -> tuple:
    """400 Bad Request error."""
    return error_response(message, code, 400)


def not_found(message: str, code: ErrorCode = ErrorCode.NOT_FOUND) -> tuple:
    """404 Not Found error."""
    return error_response(message, code, 404, log_error=False)


def method_not_allowed(message: str = "Method not allowed") -> tuple:
    """405 Method Not Allowed error."""
    return error_response(message, ErrorCode.METHOD_NOT_ALLOWED, 405, log_error=False)


def internal_error(message: str = "An unexpected error occurred", details: Optional[dict] = None,
                   code: ErrorCode = ErrorCode.INTERNAL_ERROR) -> tuple:
    """500 Internal Server Error."""
    return error_response(message, code, 500, log_error=True, details=details)
