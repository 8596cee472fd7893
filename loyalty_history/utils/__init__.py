"""
Utility modules for the loyalty history service.
"""
from .logging_config import setup_logging
from .errors import (
    ErrorCode,
    error_response,
    bad_request,
    not_found,
    method_not_allowed,
    internal_error
)
from .exceptions import (
    LoyaltyHistoryError,
    ValidationReason,
    ValidationError,
    NotFoundError,
    StoreError
)
