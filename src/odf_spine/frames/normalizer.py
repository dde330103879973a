"""
Frame entry normalization.

Turns whatever was stored or submitted for a frame (older file layouts,
spreadsheet imports, partial UI payloads) into the canonical entry shape.

Manifesto:
    - **Never raise for data:** malformed values degrade to defaults;
      only a missing entry or a non-list ``ports`` yields ``None``
    - **Only grow, never lose data:** ``displayCount`` follows the real port
      list and is never allowed to cut it short
    - **Identity is derived:** port ``id`` and ``label`` are regenerated from
      position on every pass
    - **Idempotent:** ``normalize_entry(normalize_entry(e)) == normalize_entry(e)``

Architecture:
    ::

        raw entry
           │  ports not a list? ──► None
           ▼
        desired count = max(numeric displayCount, len(ports))
           │
           ▼
        field defs = explicit extraFieldDefs
                     or keys of first port with a customFields map
                     or []
           │
           ▼
        per port: drop legacy containers, id/label from position,
                  status coerced, text/date fields cleaned,
                  customFields = resolve_custom_fields(port, defs)
           │
           ▼
        {**raw, ports, displayCount=len(ports), extraFieldDefs}

Examples:
    >>> entry = normalize_entry({"region": "North", "sub": "A", "displayCount": 5,
    ...                          "ports": [{} for _ in range(8)]})
    >>> entry["displayCount"], entry["ports"][7]["label"]
    (8, 'PORT-008')
    >>> normalize_entry({"region": "North", "sub": "A"}) is None
    True

Tags:
    normalization, schema-drift, idempotent, frame-entry, odf-spine
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any

from odf_spine.frames.custom_fields import (
    clean_field_defs,
    is_sequence,
    map_field_keys,
    resolve_custom_fields,
)
from odf_spine.frames.models import (
    LEGACY_FIELD_CONTAINERS,
    PORT_DATE_FIELDS,
    PORT_FIELDS,
    PORT_TEXT_FIELDS,
    coerce_status,
    port_label,
)
from odf_spine.frames.text import clean_date, clean_text


def parse_number(value: Any) -> float | None:
    """Finite number parsed from ``value``, else ``None``."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def desired_port_count(display_count: Any, actual: int) -> int:
    """Submitted count, but never below the number of ports actually present."""
    parsed = parse_number(display_count)
    if parsed is None:
        return actual
    return max(int(parsed), actual)


def derive_field_defs(raw_defs: Any, ports: list[Any]) -> list[Any]:
    """Definition list in force for an entry, before label cleaning.

    An explicit non-empty list wins; otherwise the keys of the first port
    that carries a ``customFields`` map are adopted as the schema.
    """
    if is_sequence(raw_defs) and len(raw_defs) > 0:
        return list(raw_defs)
    for port in ports:
        keys = map_field_keys(port)
        if keys is not None:
            return keys
    return []


def normalize_port(port: Any, position: int, field_defs: list[Any]) -> dict[str, Any]:
    """Canonical port for 0-based ``position``."""
    source: Mapping[str, Any] = port if isinstance(port, Mapping) else {}
    number = position + 1

    normalized: dict[str, Any] = {
        "id": number,
        "label": port_label(number),
        "status": coerce_status(source.get("status")),
    }
    for name in PORT_TEXT_FIELDS:
        normalized[name] = clean_text(source.get(name))
    for name in PORT_DATE_FIELDS:
        normalized[name] = clean_date(source.get(name))
    normalized["customFields"] = resolve_custom_fields(source, field_defs)

    # Canonical key order first, then any keys this model does not know about
    ordered = {name: normalized[name] for name in PORT_FIELDS}
    for key, value in source.items():
        if key not in ordered and key not in LEGACY_FIELD_CONTAINERS:
            ordered[key] = value
    return ordered


def normalize_entry(raw: Any) -> dict[str, Any] | None:
    """Canonical frame entry, or ``None`` when ``raw`` has no port list."""
    if not isinstance(raw, Mapping):
        return None
    ports = raw.get("ports")
    if not is_sequence(ports):
        return None

    count = desired_port_count(raw.get("displayCount"), len(ports))
    kept = list(ports[:count])

    raw_defs = derive_field_defs(raw.get("extraFieldDefs"), kept)
    normalized_ports = [normalize_port(port, i, raw_defs) for i, port in enumerate(kept)]

    entry = dict(raw)
    entry["ports"] = normalized_ports
    entry["displayCount"] = len(normalized_ports)
    entry["extraFieldDefs"] = clean_field_defs(raw_defs)
    return entry


def needs_persist(original: Any, normalized: Mapping[str, Any] | None) -> bool:
    """Whether a re-normalized entry differs materially from what is stored.

    True when there was no stored entry, or when the port count or any port's
    ``(id, label)`` pair changed. Used to skip redundant writes on reads.
    """
    if normalized is None:
        return False
    if not isinstance(original, Mapping):
        return True
    if original.get("displayCount") != normalized["displayCount"]:
        return True

    stored_ports = original.get("ports")
    if not is_sequence(stored_ports) or len(stored_ports) != len(normalized["ports"]):
        return True

    for stored, fresh in zip(stored_ports, normalized["ports"]):
        if not isinstance(stored, Mapping):
            return True
        if stored.get("id") != fresh["id"] or stored.get("label") != fresh["label"]:
            return True
    return False


__all__ = [
    "parse_number",
    "desired_port_count",
    "derive_field_defs",
    "normalize_port",
    "normalize_entry",
    "needs_persist",
]
