"""Search for an open ticket matching an alert fingerprint.

When several tickets match, the first one in tracker order wins. This is a
tie-break, not a guarantee; duplicates that slip through (for example two
concurrent firings that both create a ticket) are accepted.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from jirabridge.context import AlertContext
from jirabridge.dedup.result import DuplicateCheckResult
from jirabridge.engine_config import EngineConfig
from jirabridge.jira.errors import SearchFailed
from jirabridge.jira.models import TicketRef
from jirabridge.jira.query import DEDUP_SEARCH_LIMIT, build_dedup_query, search_attributes
from jirabridge.jira.repository import TicketRepository
from jirabridge.utils.logger import log_debug, log_duplicate_detection, log_error, log_info


class DuplicateDetector:
    """Find the existing ticket for an alert.

    Args:
        config: Engine configuration (project, filter, counter field).
        repository: Tracker to search.

    Usage::

        detector = DuplicateDetector(config, repository)
        result = detector.check(context)
        if result.is_duplicate:
            # update result.existing_ticket
            ...
    """

    def __init__(self, config: EngineConfig, repository: TicketRepository):
        self.config = config
        self.repository = repository

    def find_existing_ticket(
        self,
        query: str,
        attributes: Sequence[str],
        limit: Optional[int] = DEDUP_SEARCH_LIMIT,
        *,
        fingerprint: Optional[str] = None,
    ) -> Optional[TicketRef]:
        """Run ``query`` and return the first match, or ``None``.

        Raises ``SearchFailed`` on any tracker error so that a failed search
        is never mistaken for "no match".
        """
        return self._first(self._search(query, attributes, limit, fingerprint), query, fingerprint)

    def check(self, context: AlertContext) -> DuplicateCheckResult:
        """Run the live dedup search for an alert."""
        if not context.has_fingerprint:
            log_debug("No fingerprint; skipping duplicate search", stream=context.stream_id)
            return DuplicateCheckResult(is_duplicate=False, message="Deduplication disabled (blank fingerprint)")

        fingerprint = context.fingerprint
        query = build_dedup_query(self.config.project_key, self.config.duplicate_filter_query, fingerprint)
        matches = self._search(query, search_attributes(self.config.counter_field), DEDUP_SEARCH_LIMIT, fingerprint)
        ticket = self._first(matches, query, fingerprint)
        if ticket is None:
            return DuplicateCheckResult(is_duplicate=False, query=query, message="No existing open ticket")
        return DuplicateCheckResult(
            is_duplicate=True,
            existing_ticket=ticket,
            match_count=len(matches),
            query=query,
            message=f"Existing ticket {ticket.key}",
        )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _search(
        self,
        query: str,
        attributes: Sequence[str],
        limit: Optional[int],
        fingerprint: Optional[str],
    ) -> List[TicketRef]:
        project = self.config.project_key
        try:
            return list(self.repository.search(project, query, list(attributes), limit) or [])
        except Exception as e:
            log_error("Error searching for Jira issue", project=project, jql=query, error=str(e))
            raise SearchFailed(
                "Failed searching for duplicate issue",
                project=project, fingerprint=fingerprint, query=query,
            ) from e

    @staticmethod
    def _first(matches: List[TicketRef], query: str, fingerprint: Optional[str]) -> Optional[TicketRef]:
        if not matches:
            log_info("No existing open Jira issue for fingerprint", fingerprint=fingerprint, jql=query)
            return None
        ticket = matches[0]
        log_duplicate_detection(ticket.key, len(matches), fingerprint=fingerprint, jql=query)
        return ticket
