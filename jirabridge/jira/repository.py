"""Capability interface the engine needs from an issue tracker.

Implementations raise ``TrackerError`` on any transport or API failure;
retry and timeout policy belong to the implementation, not the engine.
"""

from __future__ import annotations

import abc
from typing import Any, Dict, List, Optional, Sequence

from jirabridge.jira.models import FieldMeta, TicketRef


class TicketRepository(abc.ABC):
    """Abstract issue tracker used by the decision engine."""

    @abc.abstractmethod
    def search(
        self,
        project: str,
        query: str,
        attributes: Sequence[str],
        max_results: Optional[int] = None,
    ) -> List[TicketRef]:
        """Run a query and return matches in tracker order.

        ``max_results=None`` means no cap.
        """

    @abc.abstractmethod
    def create(self, project: str, issue_type: str, fields: Dict[str, Any]) -> TicketRef:
        """Create a ticket from logical field values and return its reference."""

    @abc.abstractmethod
    def add_comment(self, ticket: TicketRef, text: str) -> None:
        """Append a comment to a ticket."""

    @abc.abstractmethod
    def update_field(self, ticket: TicketRef, field_name: str, value: Any) -> None:
        """Set a single field on an existing ticket."""

    @abc.abstractmethod
    def get_field_metadata(self, project: str, issue_type: str) -> Dict[str, FieldMeta]:
        """Return create metadata keyed by field key."""

    @abc.abstractmethod
    def get_field(self, ticket: TicketRef, field_name: str) -> Any:
        """Fetch the current value of one field, or ``None`` when unset."""
