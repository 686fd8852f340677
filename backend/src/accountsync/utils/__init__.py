"""Utility modules for the account functions."""

from accountsync.utils.responses import (
    callable_error,
    callable_result,
    json_response,
    parse_callable_data,
    text_response,
)
from accountsync.utils.validators import (
    sanitize_string,
    validate_email,
    validate_string_field,
)
from accountsync.utils.logging import (
    configure_logging,
    get_logger,
    hash_for_correlation,
    mask_email,
    set_request_context,
    clear_request_context,
)

__all__ = [
    "callable_error",
    "callable_result",
    "clear_request_context",
    "configure_logging",
    "get_logger",
    "hash_for_correlation",
    "json_response",
    "mask_email",
    "parse_callable_data",
    "sanitize_string",
    "set_request_context",
    "text_response",
    "validate_email",
    "validate_string_field",
]
