"""
Data maintenance routines used by ``keyhost-maintenance``.
"""

from keyhost.maintenance.encoding import ENCODING_COLUMNS, fix_property_encoding
from keyhost.maintenance.orphans import find_orphans, fix_orphan_properties, resolve_fallback_owner
from keyhost.maintenance.diagnostics import check_schema, check_settings, compare_schema

__all__ = [
    "ENCODING_COLUMNS",
    "fix_property_encoding",
    "find_orphans",
    "fix_orphan_properties",
    "resolve_fallback_owner",
    "check_schema",
    "check_settings",
    "compare_schema",
]
