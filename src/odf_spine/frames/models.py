"""
Frame entry record model.

Canonical wire shape of a distribution frame entry and its ports, plus the
small deterministic helpers every other frames module relies on: port labels,
storage keys, status coercion, and default records for roster-created frames.

Records travel as plain dicts keyed by the wire names below; the field names
are a compatibility contract with existing clients and must not change.

Architecture:
    ::

        FrameEntry (dict)
        ├── region, sub              key = storage_key(region, sub)
        ├── displayCount             == len(ports)
        ├── extraFieldDefs           ordered unique labels
        ├── lastSave                 ISO-8601 timestamp
        └── ports: [PortRecord]
              ├── id                 1-based position
              ├── label              "PORT-" + zero-pad(id, 3)
              ├── status             ACTIVE | INACTIVE | FAULTY
              ├── fiberType … notes  cleaned text
              ├── lastMaintained     YYYY-MM-DD
              └── customFields       {label: text} keyed by extraFieldDefs

Examples:
    >>> port_label(7)
    'PORT-007'
    >>> storage_key("North", "A")
    'North||A'
    >>> split_storage_key("North||A||B")
    ('North', 'A||B')
    >>> coerce_status(" faulty ")
    'FAULTY'

Tags:
    model, frame-entry, port, wire-format, odf-spine
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from enum import Enum
from typing import Any

KEY_SEPARATOR = "||"

DEFAULT_PORT_COUNT = 96
DEFAULT_FIBER_TYPE = "Single-mode OS2"
DEFAULT_CONNECTOR_TYPE = "LC/UPC"

ENTRY_FIELDS = ("region", "sub", "ports", "displayCount", "extraFieldDefs", "lastSave")

PORT_FIELDS = (
    "id",
    "label",
    "status",
    "fiberType",
    "connectorType",
    "destination",
    "otdrDistance",
    "otdrDistanceValue",
    "lastMaintained",
    "branchingJoint",
    "cxLocation",
    "notes",
    "customFields",
)

# Free-text port fields, cleaned to strings on every normalization pass
PORT_TEXT_FIELDS = (
    "fiberType",
    "connectorType",
    "destination",
    "otdrDistance",
    "otdrDistanceValue",
    "branchingJoint",
    "cxLocation",
    "notes",
)

PORT_DATE_FIELDS = ("lastMaintained",)

# Historical custom-field containers, dropped once resolved into customFields
LEGACY_FIELD_CONTAINERS = ("extraFieldValues", "extraFields")


class PortStatus(str, Enum):
    """Operational status of a port."""

    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    FAULTY = "FAULTY"


def coerce_status(value: Any) -> str:
    """Return a valid status string; anything unrecognised becomes INACTIVE."""
    if isinstance(value, PortStatus):
        return value.value
    text = "" if value is None else str(value).strip().upper()
    if text in PortStatus.__members__:
        return text
    return PortStatus.INACTIVE.value


def port_label(number: int) -> str:
    return f"PORT-{number:03d}"


def storage_key(region: str, sub: str) -> str:
    return f"{region}{KEY_SEPARATOR}{sub}"


def split_storage_key(key: Any) -> tuple[str, str]:
    """Split ``region||sub``; everything after the first separator is the sub."""
    raw = "" if key is None else str(key)
    region, _, sub = raw.partition(KEY_SEPARATOR)
    return region, sub


def today_iso(today: date | None = None) -> str:
    return (today or datetime.now(timezone.utc).date()).isoformat()


def utc_now_iso() -> str:
    """Current UTC time as ISO-8601 with millisecond precision and a ``Z`` suffix."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def default_port(number: int, *, today: date | None = None, field_defs: list[str] | None = None) -> dict[str, Any]:
    """Blank port as created for a brand-new frame."""
    return {
        "id": number,
        "label": port_label(number),
        "status": PortStatus.INACTIVE.value,
        "fiberType": DEFAULT_FIBER_TYPE,
        "connectorType": DEFAULT_CONNECTOR_TYPE,
        "destination": "",
        "otdrDistance": "",
        "otdrDistanceValue": "",
        "lastMaintained": today_iso(today),
        "branchingJoint": "",
        "cxLocation": "",
        "notes": "",
        "customFields": {label: "" for label in field_defs or []},
    }


def default_entry(
    region: str,
    sub: str,
    *,
    port_count: int = DEFAULT_PORT_COUNT,
    today: date | None = None,
    last_save: str | None = None,
) -> dict[str, Any]:
    """Frame entry created when a subregion is added to the roster."""
    return {
        "region": region,
        "sub": sub,
        "ports": [default_port(n, today=today) for n in range(1, port_count + 1)],
        "displayCount": port_count,
        "extraFieldDefs": [],
        "lastSave": last_save or utc_now_iso(),
    }


__all__ = [
    "KEY_SEPARATOR",
    "DEFAULT_PORT_COUNT",
    "DEFAULT_FIBER_TYPE",
    "DEFAULT_CONNECTOR_TYPE",
    "ENTRY_FIELDS",
    "PORT_FIELDS",
    "PORT_TEXT_FIELDS",
    "PORT_DATE_FIELDS",
    "LEGACY_FIELD_CONTAINERS",
    "PortStatus",
    "coerce_status",
    "port_label",
    "storage_key",
    "split_storage_key",
    "today_iso",
    "utc_now_iso",
    "default_port",
    "default_entry",
]
