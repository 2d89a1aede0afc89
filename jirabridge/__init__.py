"""Graylog alert → Jira ticket bridge.

Each alert firing either updates the open ticket carrying the same
fingerprint or creates a new one.
"""

from jirabridge.context import AlertContext, compute_fingerprint
from jirabridge.engine import AlarmEngine, TriggerResult
from jirabridge.engine_config import AutoMapEntry, EngineConfig
from jirabridge.jira.errors import JiraBridgeError

__all__ = [
    "AlarmEngine",
    "AlertContext",
    "AutoMapEntry",
    "EngineConfig",
    "JiraBridgeError",
    "TriggerResult",
    "compute_fingerprint",
]
