"""Request-ID middleware.

Every response carries ``X-Request-ID``: the caller's value when it is a
sane token, otherwise a fresh one. The ID, method and path are bound to the
structlog context for the duration of the request, so ops-layer log lines
can be joined to the request that caused them; one ``request_completed``
line records status and duration.
"""

from __future__ import annotations

import re
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from odf_spine.core.logging import LogContext, get_logger

logger = get_logger(__name__)

HEADER = "X-Request-ID"
_VALID_ID = re.compile(r"^[A-Za-z0-9._:-]{1,128}$")


def resolve_request_id(incoming: str | None) -> str:
    if incoming and _VALID_ID.match(incoming):
        return incoming
    return uuid.uuid4().hex


class RequestIDMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = resolve_request_id(request.headers.get(HEADER))
        request.state.request_id = request_id
        started = time.perf_counter()

        async with LogContext(request_id=request_id, method=request.method, path=request.url.path):
            response = await call_next(request)
            logger.debug(
                "request_completed",
                status=response.status_code,
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
            )

        response.headers[HEADER] = request_id
        return response


__all__ = ["HEADER", "RequestIDMiddleware", "resolve_request_id"]
