"""HTTP transport for odf-spine (FastAPI)."""

from odf_spine.api.app import create_app

__all__ = ["create_app"]
