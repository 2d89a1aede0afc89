"""History of past tickets for a fingerprint.

The history search ignores the duplicate-filter fragment so tickets that
are closed or otherwise excluded from live deduplication still show up.
"""
from __future__ import annotations

from collections import OrderedDict
from typing import Dict, Iterable, Mapping, Optional, Tuple

from jirabridge.jira.counter import parse_count
from jirabridge.jira.errors import HistoryQueryFailed
from jirabridge.jira.query import build_history_query, search_attributes
from jirabridge.jira.repository import TicketRepository
from jirabridge.utils.logger import log_error, log_info

HISTORY_HEADER = "\n\nHistory : "


def sort_history(entries: Iterable[Tuple[str, Optional[int]]]) -> "OrderedDict[str, Optional[int]]":
    """Order entries by ticket key text, so ``OPS-10`` sorts before ``OPS-9``."""
    return OrderedDict(sorted(entries, key=lambda item: item[0]))


def build_history(
    repository: TicketRepository,
    project: str,
    fingerprint: str,
    counter_field: str = "",
) -> "OrderedDict[str, Optional[int]]":
    """Map every ticket carrying ``fingerprint`` to its occurrence count.

    Counts are ``None`` when no counter field is configured.
    """
    query = build_history_query(project, fingerprint)
    try:
        tickets = repository.search(project, query, search_attributes(counter_field), None)
    except Exception as e:
        log_error("Error querying Jira ticket history", project=project, jql=query, error=str(e))
        raise HistoryQueryFailed(
            "Failed searching for ticket history",
            project=project, fingerprint=fingerprint, query=query,
        ) from e

    if not tickets:
        log_info("No previous Jira tickets for fingerprint", fingerprint=fingerprint, jql=query)
        return OrderedDict()

    entries: Dict[str, Optional[int]] = {}
    for ticket in tickets:
        entries[ticket.key] = parse_count(ticket.get_field(counter_field)).value if counter_field else None
    return sort_history(entries.items())


def render_history(entries: Mapping[str, Optional[int]]) -> str:
    """Render the history block appended to a new ticket's description."""
    if not entries:
        return ""
    parts = [HISTORY_HEADER]
    for key, count in sort_history(entries.items()).items():
        if count is None:
            parts.append(f"{key} ")
        else:
            parts.append(f"{key} [{count}] ")
    return "".join(parts)
