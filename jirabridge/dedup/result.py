"""Data classes for duplicate detection results."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from jirabridge.jira.models import TicketRef


@dataclass
class DuplicateCheckResult:
    """Result of a duplicate detection check.

    Attributes:
        is_duplicate: Whether an open ticket already covers the fingerprint.
        existing_ticket: The ticket to update (first match in tracker order).
        match_count: Number of matches returned by the capped search.
        query: JQL used for the search, ``None`` when no search ran.
        message: Human-readable explanation of the result.
    """

    is_duplicate: bool
    existing_ticket: Optional[TicketRef] = None
    match_count: int = 0
    query: Optional[str] = None
    message: Optional[str] = None

    @property
    def existing_ticket_key(self) -> Optional[str]:
        return self.existing_ticket.key if self.existing_ticket else None
