"""Error taxonomy for the Jira bridge.

The transport raises ``TrackerError``. Each engine stage wraps it, or any
other exception raised by the repository, into one ``JiraBridgeError``
subclass carrying enough context for an operator to diagnose the failure,
and the trigger call is aborted.
"""

from typing import Any, Dict, Optional


class TrackerError(Exception):
    """Raised by a ticket repository when the tracker call fails."""

    def __init__(self, message: str, status_code: Optional[int] = None, response: Optional[str] = None):
        self.message = message
        self.status_code = status_code
        self.response = response
        super().__init__(self.message)


class JiraBridgeError(Exception):
    """Base class for failures surfaced to the alerting host."""

    kind = "bridge_error"

    def __init__(
        self,
        message: str,
        *,
        project: Optional[str] = None,
        fingerprint: Optional[str] = None,
        query: Optional[str] = None,
        ticket_key: Optional[str] = None,
    ):
        self.message = message
        self.project = project
        self.fingerprint = fingerprint
        self.query = query
        self.ticket_key = ticket_key
        super().__init__(self.message)

    def context(self) -> Dict[str, Any]:
        """Diagnostic context for logging, without empty entries."""
        ctx = {
            "kind": self.kind,
            "project": self.project,
            "fingerprint": self.fingerprint,
            "query": self.query,
            "ticket_key": self.ticket_key,
        }
        if self.__cause__ is not None:
            ctx["cause"] = str(self.__cause__)
        return {k: v for k, v in ctx.items() if v is not None}


class SearchFailed(JiraBridgeError):
    kind = "search_failed"


class CreateFailed(JiraBridgeError):
    kind = "create_failed"


class CommentFailed(JiraBridgeError):
    kind = "comment_failed"


class CounterUpdateFailed(JiraBridgeError):
    kind = "counter_update_failed"


class FieldDiscoveryFailed(JiraBridgeError):
    kind = "field_discovery_failed"


class HistoryQueryFailed(JiraBridgeError):
    kind = "history_query_failed"
