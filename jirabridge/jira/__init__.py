"""Public Jira API for the bridge.

Re-exports the pieces the engine and the host need, while the
implementation lives in the client, query, payload and updater submodules.
"""
from __future__ import annotations

from .client import JiraRestClient
from .comment import maybe_add_comment
from .counter import CountResult, increment_and_apply, parse_count
from .errors import (
    CommentFailed,
    CounterUpdateFailed,
    CreateFailed,
    FieldDiscoveryFailed,
    HistoryQueryFailed,
    JiraBridgeError,
    SearchFailed,
    TrackerError,
)
from .history import build_history, render_history
from .metadata import discover_fingerprint_field_name
from .models import FieldMeta, TicketRef
from .payload import TicketBuilder, TicketPayload, split_csv
from .query import build_dedup_query, build_history_query
from .repository import TicketRepository

__all__ = [
    "JiraRestClient",
    "TicketRepository",
    "TicketRef",
    "FieldMeta",
    "TicketBuilder",
    "TicketPayload",
    "split_csv",
    "build_dedup_query",
    "build_history_query",
    "build_history",
    "render_history",
    "discover_fingerprint_field_name",
    "CountResult",
    "parse_count",
    "increment_and_apply",
    "maybe_add_comment",
    "JiraBridgeError",
    "TrackerError",
    "SearchFailed",
    "CreateFailed",
    "CommentFailed",
    "CounterUpdateFailed",
    "FieldDiscoveryFailed",
    "HistoryQueryFailed",
]
