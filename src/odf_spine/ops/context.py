"""What every operation runs against: a store, the settings, and who asked."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Any

from odf_spine.core.settings import OdfSettings
from odf_spine.storage.base import FrameStore


@dataclass
class OperationContext:
    """Per-call context handed to each operation function.

    The API builds one per request (``caller="api"``, ``request_id`` from the
    ``X-Request-ID`` header); the CLI builds one per command around a store
    it opens and closes itself.
    """

    store: FrameStore
    settings: OdfSettings = field(default_factory=OdfSettings)
    request_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    caller: str = "sdk"
    metadata: dict[str, Any] = field(default_factory=dict)

    def log_fields(self) -> dict[str, Any]:
        """Fields identifying this call in structured logs."""
        return {"request_id": self.request_id, "caller": self.caller, **self.metadata}
