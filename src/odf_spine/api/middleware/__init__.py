"""API middleware: request IDs, body size limit, problem responses."""

from odf_spine.api.middleware.body_limit import BodySizeLimitMiddleware
from odf_spine.api.middleware.errors import problem_response, status_for_error_code
from odf_spine.api.middleware.request_id import RequestIDMiddleware

__all__ = [
    "BodySizeLimitMiddleware",
    "RequestIDMiddleware",
    "problem_response",
    "status_for_error_code",
]
