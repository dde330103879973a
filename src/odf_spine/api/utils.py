"""
Shared API router utilities.

- ``handle_error()`` renders a failed OperationResult as a problem response
- ``unwrap()`` returns a successful result's payload, or that response
"""

from __future__ import annotations

from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse

from odf_spine.api.middleware.errors import problem_response, status_for_error_code
from odf_spine.ops.result import OperationResult


def handle_error(result: OperationResult[Any], request: Request | None = None) -> JSONResponse:
    """Convert a failed ``OperationResult`` into a Problem Details response."""
    error = result.error
    code = error.code if error else "INTERNAL"
    errors = []
    if error and error.details:
        errors = [{"code": code, "message": f"{k}={v}", "field": k} for k, v in error.details.items()]
    return problem_response(
        status=status_for_error_code(code),
        title=error.message if error else "Operation failed",
        code=code,
        instance=str(request.url) if request is not None else "",
        errors=errors,
    )


def unwrap(result: OperationResult[Any], request: Request | None = None) -> Any:
    if not result.success:
        return handle_error(result, request)
    return result.data
