"""Per-alert input handed to the engine by the alerting host."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from typing import Any, Optional

from jirabridge.engine_config import EngineConfig


def compute_fingerprint(*parts: Any) -> str:
    """Compute a stable MD5 fingerprint from alert content.

    Parts are joined with ``|`` after ``None`` values are dropped, so the
    same stream/condition/message always yields the same digest.
    """
    source = "|".join(str(p) for p in parts if p is not None)
    return hashlib.md5(source.encode("utf-8")).hexdigest()


@dataclass(frozen=True)
class AlertContext:
    """A single alert firing.

    ``title`` and ``description`` are already rendered by the host; when
    empty the engine falls back to the configured defaults, and a blank
    description falls back to the condition result. A blank
    ``fingerprint`` disables deduplication for this firing.
    """

    stream_id: str = ""
    stream_title: str = ""
    condition_result: Optional[str] = None
    title: str = ""
    description: str = ""
    fingerprint: str = ""

    @property
    def has_fingerprint(self) -> bool:
        return bool((self.fingerprint or "").strip())

    def resolve_title(self, config: EngineConfig) -> str:
        return self.title or config.title

    def resolve_description(self, config: EngineConfig) -> str:
        return self.description or config.description or (self.condition_result or "")
