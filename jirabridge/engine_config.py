"""Immutable per-engine configuration.

``EngineConfig`` captures every setting the decision engine reads while
handling an alert. It is built once when the engine is constructed and is
shared read-only by all trigger calls, so nothing in the alert path needs
to touch the global ``Config`` singleton or ``os.environ``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional, Tuple, TYPE_CHECKING

if TYPE_CHECKING:
    from jirabridge.config import Config

LIST_SUFFIX = "#i"


@dataclass(frozen=True)
class AutoMapEntry:
    """A Jira field populated verbatim on ticket creation.

    ``is_list`` marks fields whose Jira type is an array; the value is then
    submitted as a single-element list.
    """

    field_name: str
    value: str
    is_list: bool = False

    @classmethod
    def parse(cls, key: str, value: str) -> AutoMapEntry:
        """Build an entry from the external ``name`` / ``name#i`` form."""
        if key.endswith(LIST_SUFFIX):
            return cls(field_name=key[: -len(LIST_SUFFIX)], value=value, is_list=True)
        return cls(field_name=key, value=value)

    def is_blank(self) -> bool:
        return not self.field_name.strip() or not str(self.value).strip()

    def submitted_value(self):
        return [self.value] if self.is_list else self.value


@dataclass(frozen=True)
class EngineConfig:
    """Immutable settings for one project / issue type target."""

    project_key: str
    title: str = ""
    description: str = ""
    description_as_comment: bool = False
    issue_type: str = "Bug"
    priority: str = "Minor"
    labels: str = ""
    components: str = ""
    duplicate_filter_query: str = ""
    fingerprint_field: str = ""
    counter_field: str = ""
    history_enabled: bool = False
    auto_map: Tuple[AutoMapEntry, ...] = ()

    def __post_init__(self):
        # frozen: normalise through object.__setattr__
        object.__setattr__(self, "duplicate_filter_query", (self.duplicate_filter_query or "").strip())
        object.__setattr__(self, "fingerprint_field", (self.fingerprint_field or "").strip())
        object.__setattr__(self, "counter_field", (self.counter_field or "").strip())
        object.__setattr__(self, "auto_map", tuple(self.auto_map))

    @property
    def counting_enabled(self) -> bool:
        return bool(self.counter_field)

    @staticmethod
    def parse_auto_map(mapping: Optional[Mapping[str, str]]) -> Tuple[AutoMapEntry, ...]:
        """Convert an ordered ``name -> value`` mapping into entries."""
        if not mapping:
            return ()
        return tuple(AutoMapEntry.parse(key, value) for key, value in mapping.items())

    # ------------------------------------------------------------------
    # Factory helpers
    # ------------------------------------------------------------------

    @classmethod
    def from_config(cls, config: Config) -> EngineConfig:
        """Build an ``EngineConfig`` snapshot from the global ``Config``."""
        return cls(
            project_key=config.jira_project_key,
            title=config.jira_title,
            description=config.jira_description,
            description_as_comment=config.jira_description_as_comment,
            issue_type=config.jira_issue_type,
            priority=config.jira_priority,
            labels=config.jira_labels,
            components=config.jira_components,
            duplicate_filter_query=config.jira_duplicate_filter_query,
            fingerprint_field=config.jira_md5_custom_field,
            counter_field=config.jira_counter_custom_field,
            history_enabled=config.jira_md5_history,
            auto_map=cls.parse_auto_map(config.get_field_mapping()),
        )
