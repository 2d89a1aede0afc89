"""JQL construction for fingerprint searches.

Pure string building. The duplicate-filter fragment comes from trusted
configuration and is appended verbatim without sanitization.
"""
from __future__ import annotations

from typing import List

# Jira field name (display name) holding the alert fingerprint
FINGERPRINT_FIELD_NAME = "graylog_md5"

BASE_ATTRIBUTES = ("id", "key", "summary")

# Only need to tell 0 / 1 / many apart on the live path
DEDUP_SEARCH_LIMIT = 2


def fingerprint_predicate(fingerprint: str, fingerprint_field: str = FINGERPRINT_FIELD_NAME) -> str:
    """Match the fingerprint in its field, or inlined in the description
    for tickets created without a fingerprint field."""
    return f'({fingerprint_field} ~ "{fingerprint}" OR description ~ "{fingerprint}")'


def build_dedup_query(
    project: str,
    filter_fragment: str,
    fingerprint: str,
    fingerprint_field: str = FINGERPRINT_FIELD_NAME,
) -> str:
    """Query for open tickets of ``project`` carrying ``fingerprint``,
    restricted by the configured duplicate filter."""
    parts = [f"project = {project}"]
    fragment = (filter_fragment or "").strip()
    if fragment:
        parts.append(fragment)
    parts.append("AND " + fingerprint_predicate(fingerprint, fingerprint_field))
    return " ".join(parts)


def build_history_query(
    project: str,
    fingerprint: str,
    fingerprint_field: str = FINGERPRINT_FIELD_NAME,
) -> str:
    """Same as the dedup query but never filtered, so every past ticket
    for the fingerprint is returned."""
    return build_dedup_query(project, "", fingerprint, fingerprint_field)


def search_attributes(counter_field: str = "") -> List[str]:
    attrs = list(BASE_ATTRIBUTES)
    if counter_field:
        attrs.append(counter_field)
    return attrs
