"""Utility modules for the image relay."""

from .client_identity import client_key_from_request, first_forwarded_address
from .logging import (
    configure_logging,
    get_logger,
    log_exception,
    redact_sensitive,
    set_correlation_id,
    get_correlation_id,
    clear_correlation_id,
)

__all__ = [
    "client_key_from_request",
    "first_forwarded_address",
    "configure_logging",
    "get_logger",
    "log_exception",
    "redact_sensitive",
    "set_correlation_id",
    "get_correlation_id",
    "clear_correlation_id",
]
