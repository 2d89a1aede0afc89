"""Jira ticket builder.

Assembles the field set for a new ticket from an ``EngineConfig``. Field
values are logical (``priority`` is a name, ``components`` a list of
names); the repository maps them onto the tracker's wire format.

Description mutations happen in a fixed order: base description, then the
inlined fingerprint (only when no fingerprint field is available), then
the history block.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from jirabridge.engine_config import EngineConfig
from jirabridge.jira.errors import CreateFailed
from jirabridge.jira.metadata import discover_fingerprint_field_name
from jirabridge.jira.models import TicketRef
from jirabridge.jira.query import FINGERPRINT_FIELD_NAME
from jirabridge.jira.repository import TicketRepository
from jirabridge.utils.logger import log_debug, log_error, log_info, log_ticket_operation, log_warning


def split_csv(value: Optional[str]) -> List[str]:
    """Split a comma-separated setting into trimmed, non-empty tokens."""
    if not value or not value.strip():
        return []
    return [token.strip() for token in value.split(",") if token.strip()]


def inline_fingerprint(fingerprint: str) -> str:
    return f"\n\n{FINGERPRINT_FIELD_NAME}={fingerprint}\n\n"


@dataclass
class TicketPayload:
    """Fields for a new ticket with the decisions taken to build them."""

    fields: Dict[str, Any]
    title: str
    description: str
    labels: List[str] = field(default_factory=list)
    components: List[str] = field(default_factory=list)
    fingerprint_field: Optional[str] = None
    fingerprint_inlined: bool = False


class TicketBuilder:
    """Builds and submits new Jira tickets.

    Parameters
    ----------
    config:
        Immutable engine configuration.
    repository:
        Tracker used for field discovery and ticket creation.
    """

    def __init__(self, config: EngineConfig, repository: TicketRepository) -> None:
        self.config = config
        self.repository = repository

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def build(
        self,
        fingerprint: str,
        history: str = "",
        *,
        title: Optional[str] = None,
        description: Optional[str] = None,
    ) -> TicketPayload:
        """Assemble the complete field set for a new ticket.

        Parameters
        ----------
        fingerprint:
            Alert fingerprint; blank means the ticket carries none.
        history:
            Rendered history block (may be empty).
        title, description:
            Per-alert overrides of the configured templates.
        """
        cfg = self.config
        title = title if title is not None else cfg.title
        base_description = description if description is not None else cfg.description
        labels = split_csv(cfg.labels)
        components = split_csv(cfg.components)

        fields: Dict[str, Any] = {
            "priority": cfg.priority,
            "summary": title,
        }
        if labels:
            fields["labels"] = labels
        if components:
            fields["components"] = components

        fp_field: Optional[str] = None
        inlined = False
        if fingerprint and fingerprint.strip():
            fp_field = self.resolve_fingerprint_field()
            if fp_field:
                fields[fp_field] = fingerprint
            else:
                inlined = True
                log_warning("No fingerprint field available; inlining the fingerprint into the description. "
                            "Configure JIRA_MD5_CUSTOM_FIELD instead.", project=cfg.project_key)

        full_description = self.compose_description(base_description, fingerprint if inlined else None, history)
        fields["description"] = full_description

        if cfg.counter_field:
            fields[cfg.counter_field] = 1
        else:
            log_info("No counter field configured; occurrences of this problem are not tracked")

        self.apply_auto_map(fields)

        return TicketPayload(
            fields=fields,
            title=title,
            description=full_description,
            labels=labels,
            components=components,
            fingerprint_field=fp_field,
            fingerprint_inlined=inlined,
        )

    def build_new_ticket(
        self,
        fingerprint: str,
        history: str = "",
        *,
        title: Optional[str] = None,
        description: Optional[str] = None,
    ) -> TicketRef:
        """Build the ticket and submit it to the tracker."""
        payload = self.build(fingerprint, history, title=title, description=description)
        cfg = self.config
        try:
            ticket = self.repository.create(cfg.project_key, cfg.issue_type, payload.fields)
        except Exception as e:
            log_error("Error creating Jira issue", project=cfg.project_key, error=str(e))
            raise CreateFailed(
                "Failed creating new issue", project=cfg.project_key, fingerprint=fingerprint or None,
            ) from e

        log_ticket_operation("create", ticket.key, project=cfg.project_key, summary=payload.title)
        return ticket

    # ------------------------------------------------------------------
    # Formatting helpers
    # ------------------------------------------------------------------

    def resolve_fingerprint_field(self) -> Optional[str]:
        """Configured field first, then create-metadata discovery."""
        if self.config.fingerprint_field:
            return self.config.fingerprint_field
        return discover_fingerprint_field_name(self.repository, self.config.project_key, self.config.issue_type)

    @staticmethod
    def compose_description(base: str, inlined_fingerprint: Optional[str], history: str) -> str:
        description = base or ""
        if inlined_fingerprint:
            description += inline_fingerprint(inlined_fingerprint)
        return description + (history or "")

    def apply_auto_map(self, fields: Dict[str, Any]) -> None:
        """Add auto-mapped fields in configuration order; a later entry for
        the same field replaces an earlier one."""
        for entry in self.config.auto_map:
            if entry.is_blank():
                continue
            value = entry.submitted_value()
            log_debug("Auto-mapped Jira field", field=entry.field_name, value=value)
            fields[entry.field_name] = value
