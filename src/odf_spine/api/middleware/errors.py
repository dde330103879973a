"""Problem+json rendering and the app-wide exception handlers."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from odf_spine.api.schemas.common import ErrorDetail, ProblemDetail
from odf_spine.core.logging import get_logger

logger = get_logger(__name__)

PROBLEM_MEDIA_TYPE = "application/problem+json"

_CLIENT_STATUS = {
    "VALIDATION_FAILED": 400,
    "NOT_FOUND": 404,
    "PAYLOAD_TOO_LARGE": 413,
}


def status_for_error_code(code: str) -> int:
    """HTTP status for an operation error code; unknown codes are server errors."""
    return _CLIENT_STATUS.get(code, 500)


def problem_response(
    *,
    status: int,
    title: str,
    code: str = "",
    detail: str = "",
    instance: str = "",
    errors: Iterable[Mapping[str, Any]] = (),
) -> JSONResponse:
    problem = ProblemDetail(
        title=title,
        status=status,
        code=code,
        detail=detail,
        instance=instance,
        errors=[ErrorDetail.model_validate(dict(item)) for item in errors],
    )
    return JSONResponse(problem.model_dump(), status_code=status, media_type=PROBLEM_MEDIA_TYPE)


def _field_path(loc: Iterable[Any]) -> str | None:
    parts = [str(part) for part in loc if part != "body"]
    return ".".join(parts) or None


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Request bodies FastAPI could not parse are reported as 400 Invalid payload."""
    return problem_response(
        status=400,
        title="Invalid payload",
        code="VALIDATION_FAILED",
        instance=str(request.url),
        errors=(
            {"code": "VALIDATION_FAILED", "message": str(err.get("msg", "")), "field": _field_path(err.get("loc", ()))}
            for err in exc.errors()
        ),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled_exception", path=request.url.path, error=str(exc))
    debug = request.app.state.settings.debug
    return problem_response(
        status=500,
        title="Server error",
        code="INTERNAL",
        detail=str(exc) if debug else "An unexpected error occurred.",
        instance=str(request.url),
    )


__all__ = [
    "PROBLEM_MEDIA_TYPE",
    "problem_response",
    "status_for_error_code",
    "unhandled_exception_handler",
    "validation_exception_handler",
]
