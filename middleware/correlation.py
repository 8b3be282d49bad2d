"""Middleware for handling correlation IDs in FastAPI requests."""

import uuid
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from utils import clear_correlation_id, get_logger, set_correlation_id

logger = get_logger(__name__)


class CorrelationMiddleware(BaseHTTPMiddleware):
    """Middleware to handle correlation IDs for requests."""

    def __init__(self, app, correlation_header: str = "X-Correlation-ID"):
        super().__init__(app)
        self.correlation_header = correlation_header

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Set correlation ID for the request context."""
        correlation_id = request.headers.get(self.correlation_header) or str(uuid.uuid4())
        set_correlation_id(correlation_id)
        request.state.correlation_id = correlation_id

        logger.info(
            f"HTTP request received: {request.method} {request.url.path}",
            method=request.method,
            path=request.url.path,
            user_agent=request.headers.get("user-agent"),
            client_ip=request.client.host if request.client else None,
        )

        try:
            response = await call_next(request)
            response.headers[self.correlation_header] = correlation_id

            logger.info(
                f"HTTP request completed: {request.method} {request.url.path}",
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
                success=200 <= response.status_code < 400,
            )
            return response
        finally:
            clear_correlation_id()
