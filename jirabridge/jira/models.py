"""Typed views of Jira data used by the engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional


@dataclass(frozen=True)
class TicketRef:
    """A Jira issue plus a snapshot of the attributes requested when it
    was fetched (e.g. the counter field).

    The engine never owns tickets; the snapshot is only valid for the
    trigger call that fetched it.
    """

    key: str
    id: Optional[str] = None
    summary: Optional[str] = None
    fields: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))

    def has_field(self, name: str) -> bool:
        return name in self.fields

    def get_field(self, name: str, default: Any = None) -> Any:
        return self.fields.get(name, default)

    @classmethod
    def from_issue(cls, issue: Dict[str, Any]) -> TicketRef:
        """Build a reference from a Jira REST issue document."""
        fields = dict(issue.get("fields") or {})
        return cls(
            key=issue.get("key", ""),
            id=issue.get("id"),
            summary=fields.get("summary"),
            fields=fields,
        )


@dataclass(frozen=True)
class FieldMeta:
    """Create-metadata entry for a single Jira field."""

    key: str
    display_name: str = ""

    @property
    def is_custom(self) -> bool:
        return self.key.startswith("customfield_")
