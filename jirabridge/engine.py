"""Alert → Jira decision engine.

One ``trigger`` call per alert firing:

    SEARCH --no match--> CREATE
    SEARCH --match-----> COMMENT -> COUNT_UPDATE

The search always completes before any mutation is issued, and every
tracker failure aborts the call with a ``JiraBridgeError``. No state is
kept between calls; the tracker is re-queried every time.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Optional

from jirabridge.context import AlertContext
from jirabridge.dedup import DuplicateDetector
from jirabridge.engine_config import EngineConfig
from jirabridge.jira.comment import maybe_add_comment
from jirabridge.jira.counter import increment_and_apply
from jirabridge.jira.errors import JiraBridgeError
from jirabridge.jira.history import build_history, render_history
from jirabridge.jira.payload import TicketBuilder
from jirabridge.jira.repository import TicketRepository
from jirabridge.utils.lazy import LazyHandle
from jirabridge.utils.logger import log_error, log_info

ACTION_CREATED = "created"
ACTION_UPDATED = "updated"


def _stream_context(context: AlertContext) -> Dict[str, str]:
    """Stream identification for log lines, without empty entries."""
    ctx = {"stream": context.stream_id, "stream_title": context.stream_title}
    return {k: v for k, v in ctx.items() if v}


@dataclass(frozen=True)
class TriggerResult:
    """What a trigger call did. Hosts may ignore it."""

    action: str
    ticket_key: str
    occurrence_count: Optional[int] = None
    commented: bool = False


class AlarmEngine:
    """Attach alert firings to Jira tickets.

    Parameters
    ----------
    config:
        Immutable engine configuration shared by all trigger calls.
    repository_factory:
        Builds the tracker client. Called at most once, on first use.
    """

    def __init__(self, config: EngineConfig, repository_factory: Callable[[], TicketRepository]):
        self.config = config
        self._repository = LazyHandle(repository_factory, name="jira-client")

    @classmethod
    def from_config(cls, config) -> AlarmEngine:
        """Build an engine backed by ``JiraRestClient`` from the global ``Config``."""
        from jirabridge.jira.client import JiraRestClient

        return cls(EngineConfig.from_config(config), lambda: JiraRestClient.from_config(config))

    @property
    def repository(self) -> TicketRepository:
        return self._repository.get()

    def trigger(self, context: AlertContext) -> TriggerResult:
        """Handle one alert firing; raises ``JiraBridgeError`` on failure."""
        try:
            repository = self.repository
            detection = DuplicateDetector(self.config, repository).check(context)
            if detection.is_duplicate:
                return self._update_existing(repository, detection.existing_ticket, context)
            return self._create(repository, context)
        except JiraBridgeError as e:
            log_error(f"Error in trigger: {e.message}", **_stream_context(context), **e.context())
            raise

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _create(self, repository: TicketRepository, context: AlertContext) -> TriggerResult:
        cfg = self.config
        history = ""
        if cfg.history_enabled and context.has_fingerprint:
            history = render_history(
                build_history(repository, cfg.project_key, context.fingerprint, cfg.counter_field)
            )

        ticket = TicketBuilder(cfg, repository).build_new_ticket(
            context.fingerprint,
            history,
            title=context.resolve_title(cfg),
            description=context.resolve_description(cfg),
        )
        log_info("Created new issue", ticket_key=ticket.key, project=cfg.project_key, **_stream_context(context))
        return TriggerResult(
            action=ACTION_CREATED,
            ticket_key=ticket.key,
            occurrence_count=1 if cfg.counting_enabled else None,
        )

    def _update_existing(self, repository: TicketRepository, ticket, context: AlertContext) -> TriggerResult:
        cfg = self.config
        commented = maybe_add_comment(
            repository,
            ticket,
            context.resolve_description(cfg),
            cfg.description_as_comment,
            project=cfg.project_key,
            fingerprint=context.fingerprint,
        )
        count = increment_and_apply(
            repository,
            ticket,
            cfg.counter_field,
            project=cfg.project_key,
            fingerprint=context.fingerprint,
        )
        log_info("Updated existing issue", ticket_key=ticket.key, project=cfg.project_key,
                 occurrences=count, **_stream_context(context))
        return TriggerResult(action=ACTION_UPDATED, ticket_key=ticket.key, occurrence_count=count, commented=commented)
