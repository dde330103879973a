"""Health endpoint at root level for container healthchecks."""

from __future__ import annotations

from fastapi import APIRouter

from odf_spine import __version__
from odf_spine.api.deps import Store
from odf_spine.api.schemas.common import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
def health(store: Store) -> HealthResponse:
    return HealthResponse(version=__version__, backend=store.backend)
