"""Middleware rejecting request bodies above the configured size.

Declared sizes are rejected up front. Bodies without a Content-Length
(chunked uploads) are counted as they are received, and reading stops with a
413 as soon as the running total passes the limit.
"""

from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse
from starlette.datastructures import Headers
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from utils import get_logger

logger = get_logger(__name__)


class RequestBodyTooLarge(HTTPException):
    """Raised from the receive channel once a body passes the size limit.

    Subclasses FastAPI's HTTPException so body parsing re-raises it untouched.
    """

    def __init__(self, max_body_bytes: int) -> None:
        super().__init__(status_code=413, detail=f"Request body exceeds {max_body_bytes} bytes")
        self.max_body_bytes = max_body_bytes


async def body_too_large_handler(request: Request, exc: RequestBodyTooLarge) -> JSONResponse:
    return JSONResponse(status_code=413, content={"error": exc.detail})


class BodySizeLimitMiddleware:
    """Enforce max_body_bytes on declared and streamed request bodies."""

    def __init__(self, app: ASGIApp, max_body_bytes: int) -> None:
        self.app = app
        self.max_body_bytes = max_body_bytes

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        content_length = Headers(scope=scope).get("content-length")
        if content_length is not None:
            try:
                declared = int(content_length)
            except ValueError:
                response = JSONResponse(status_code=400, content={"error": "Invalid Content-Length header"})
                await response(scope, receive, send)
                return

            if declared > self.max_body_bytes:
                self._log_rejection(scope, declared)
                await self._reject(scope, receive, send)
                return

        received = 0
        response_started = False

        async def limited_receive() -> Message:
            nonlocal received
            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body", b""))
                if received > self.max_body_bytes:
                    self._log_rejection(scope, received)
                    raise RequestBodyTooLarge(self.max_body_bytes)
            return message

        async def tracking_send(message: Message) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await self.app(scope, limited_receive, tracking_send)
        except RequestBodyTooLarge:
            # Only reached when the body was read outside the app's exception handlers.
            if response_started:
                raise
            await self._reject(scope, receive, send)

    async def _reject(self, scope: Scope, receive: Receive, send: Send) -> None:
        response = JSONResponse(
            status_code=413,
            content={"error": f"Request body exceeds {self.max_body_bytes} bytes"},
        )
        await response(scope, receive, send)

    def _log_rejection(self, scope: Scope, size: int) -> None:
        logger.warning(
            "Request body too large",
            path=scope.get("path"),
            body_bytes=size,
            max_body_bytes=self.max_body_bytes,
        )
