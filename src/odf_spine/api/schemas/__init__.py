"""API request and response schemas."""

from odf_spine.api.schemas.common import ErrorDetail, HealthResponse, ProblemDetail
from odf_spine.api.schemas.frames import FramePayload, SubregionPayload

__all__ = [
    "ErrorDetail",
    "HealthResponse",
    "ProblemDetail",
    "FramePayload",
    "SubregionPayload",
]
