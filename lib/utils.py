# =============================================================================
# lib/utils.py - Shared Utilities
# =============================================================================
# Common utilities used across the application.
# =============================================================================

import re
from typing import Any, Iterable
from uuid import UUID


# =============================================================================
# UUID Utilities
# =============================================================================

def normalize_uuid(value: str | UUID) -> str:
    """
    Normalize a UUID to string format.

    Handles both string and UUID objects, ensuring consistent string output.

    Example:
        campground_id = normalize_uuid(uuid_obj)  # "550e8400-..."
        campground_id = normalize_uuid("550e8400-...")  # "550e8400-..."
    """
    return str(value) if isinstance(value, UUID) else value


# =============================================================================
# Form Utilities
# =============================================================================

# Matches "campground[title]" -> ("campground", "title")
_NESTED_KEY = re.compile(r"^(?P<group>[A-Za-z_][A-Za-z0-9_]*)\[(?P<field>[^\[\]]+)\]$")


def sanitize_form_keys(items: Iterable[tuple[str, Any]]) -> list[tuple[str, Any]]:
    """
    Drop keys that could be read as query operators.

    Any key starting with "$" or containing "." is removed, including
    nested keys such as "campground[$gt]".

    Example:
        sanitize_form_keys([("title", "A"), ("$where", "1")])
        # [("title", "A")]
    """
    clean = []
    for key, value in items:
        match = _NESTED_KEY.match(key)
        parts = [match.group("group"), match.group("field")] if match else [key]
        if any(p.startswith("$") or "." in p for p in parts):
            continue
        clean.append((key, value))
    return clean


def extract_form_group(items: Iterable[tuple[str, Any]], group: str) -> dict[str, Any]:
    """
    Collect the fields of one nested form group.

    Accepts both the nested layout used by the templates
    ("campground[title]") and plain field names ("title"). Nested names win
    when both are present.

    Args:
        items: Form (key, value) pairs
        group: Group prefix, e.g. "campground" or "review"

    Returns:
        Dict of field -> value for the group
    """
    plain: dict[str, Any] = {}
    nested: dict[str, Any] = {}

    for key, value in items:
        match = _NESTED_KEY.match(key)
        if match:
            if match.group("group") == group:
                nested[match.group("field")] = value
        elif not key.startswith("_"):
            plain[key] = value

    return {**plain, **nested}
