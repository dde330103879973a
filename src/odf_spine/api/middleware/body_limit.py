"""
Request-size middleware: rejects oversized bodies with 413.

The body is buffered here, up to ``max_bytes``, before any route runs, so an
oversized payload is refused before parsing or normalization starts. Bodies
within the limit are replayed to the application unchanged.
"""

from __future__ import annotations

from starlette.types import ASGIApp, Message, Receive, Scope, Send

from odf_spine.api.middleware.errors import problem_response
from odf_spine.core.errors import PayloadTooLargeError
from odf_spine.core.logging import get_logger

logger = get_logger(__name__)

_BODY_METHODS = frozenset({"POST", "PUT", "PATCH", "DELETE"})


class BodySizeLimitMiddleware:
    """Pure ASGI middleware bounding request body size."""

    def __init__(self, app: ASGIApp, *, max_bytes: int) -> None:
        self.app = app
        self.max_bytes = max_bytes

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http" or scope["method"] not in _BODY_METHODS:
            await self.app(scope, receive, send)
            return

        declared = self._declared_length(scope)
        if declared is not None and declared > self.max_bytes:
            await self._reject(scope, receive, send, declared)
            return

        messages: list[Message] = []
        size = 0
        while True:
            message = await receive()
            messages.append(message)
            if message["type"] != "http.request":
                break
            size += len(message.get("body", b""))
            if size > self.max_bytes:
                await self._reject(scope, receive, send, size)
                return
            if not message.get("more_body", False):
                break

        pending = iter(messages)

        async def replay() -> Message:
            try:
                return next(pending)
            except StopIteration:
                return await receive()

        await self.app(scope, replay, send)

    @staticmethod
    def _declared_length(scope: Scope) -> int | None:
        for name, value in scope.get("headers", []):
            if name == b"content-length":
                try:
                    return int(value)
                except ValueError:
                    return None
        return None

    async def _reject(self, scope: Scope, receive: Receive, send: Send, received: int) -> None:
        error = PayloadTooLargeError(self.max_bytes, received)
        logger.warning("payload_rejected", path=scope.get("path"), limit=self.max_bytes, received=received)
        response = problem_response(
            status=413,
            title=error.message,
            code=error.code,
            instance=scope.get("path", ""),
        )
        await response(scope, receive, send)
