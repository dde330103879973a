"""
Frame entry engine.

Normalization, custom-field resolution, roster reconciliation and keyword
search over distribution frame entries. Everything here is a pure function of
its input plus, for the roster, the storage collaborator it is given.
"""

from odf_spine.frames.custom_fields import clean_field_defs, resolve_custom_fields
from odf_spine.frames.models import (
    DEFAULT_PORT_COUNT,
    ENTRY_FIELDS,
    PORT_FIELDS,
    PortStatus,
    default_entry,
    default_port,
    port_label,
    split_storage_key,
    storage_key,
    utc_now_iso,
)
from odf_spine.frames.normalizer import needs_persist, normalize_entry
from odf_spine.frames.roster import RosterReconciler, RosterResult, normalize_roster, plan_roster
from odf_spine.frames.search import KeywordLocator, SearchMatch, search_entries, search_response

__all__ = [
    "DEFAULT_PORT_COUNT",
    "ENTRY_FIELDS",
    "PORT_FIELDS",
    "PortStatus",
    "default_entry",
    "default_port",
    "port_label",
    "split_storage_key",
    "storage_key",
    "utc_now_iso",
    "clean_field_defs",
    "resolve_custom_fields",
    "normalize_entry",
    "needs_persist",
    "RosterReconciler",
    "RosterResult",
    "normalize_roster",
    "plan_roster",
    "KeywordLocator",
    "SearchMatch",
    "search_entries",
    "search_response",
]
