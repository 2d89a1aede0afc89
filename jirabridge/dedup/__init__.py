"""Duplicate detection for the Jira bridge.

Finds the open ticket an alert firing should be attached to.
"""

from jirabridge.dedup.result import DuplicateCheckResult
from jirabridge.dedup.detector import DuplicateDetector

__all__ = ["DuplicateCheckResult", "DuplicateDetector"]
