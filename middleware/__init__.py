"""HTTP middleware for the image relay."""

from .body_limit import BodySizeLimitMiddleware, RequestBodyTooLarge, body_too_large_handler
from .correlation import CorrelationMiddleware

__all__ = [
    "BodySizeLimitMiddleware",
    "CorrelationMiddleware",
    "RequestBodyTooLarge",
    "body_too_large_handler",
]
