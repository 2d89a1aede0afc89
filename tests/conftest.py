"""Pytest configuration and fixtures for jirabridge tests."""

import pytest
from unittest.mock import MagicMock

# Add the project root to the Python path
import sys
from pathlib import Path

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from jirabridge.context import AlertContext
from jirabridge.engine_config import AutoMapEntry, EngineConfig
from jirabridge.jira.models import FieldMeta, TicketRef
from jirabridge.jira.repository import TicketRepository


def make_engine_config(**overrides) -> EngineConfig:
    """Build an EngineConfig with test defaults."""
    defaults = {
        "project_key": "OPS",
        "title": "[Graylog] Disk full on web-01",
        "description": "Stream 'web' matched 12 messages in the last 5 minutes.",
        "description_as_comment": True,
        "issue_type": "Bug",
        "priority": "Major",
        "labels": "graylog,alert",
        "components": "",
        "duplicate_filter_query": "AND status not in (Closed, Done)",
        "fingerprint_field": "customfield_10100",
        "counter_field": "customfield_10200",
        "history_enabled": False,
        "auto_map": (),
    }
    defaults.update(overrides)
    return EngineConfig(**defaults)


@pytest.fixture
def engine_config():
    return make_engine_config()


@pytest.fixture
def config_factory():
    """Factory for EngineConfig variants: ``config_factory(counter_field="")``."""
    return make_engine_config


@pytest.fixture
def mock_repository():
    """Tracker double with no matches and a successful create."""
    repo = MagicMock(spec=TicketRepository)
    repo.search.return_value = []
    repo.create.return_value = TicketRef(key="OPS-101", id="10101", summary="created")
    repo.add_comment.return_value = None
    repo.update_field.return_value = None
    repo.get_field.return_value = None
    repo.get_field_metadata.return_value = {
        "summary": FieldMeta(key="summary", display_name="Summary"),
        "customfield_10100": FieldMeta(key="customfield_10100", display_name="graylog_md5"),
    }
    return repo


@pytest.fixture
def sample_context():
    return AlertContext(
        stream_id="5a1b2c",
        stream_title="web",
        condition_result="Stream had 12 messages in the last 5 minutes with trigger condition more than 10 messages.",
        fingerprint="d41d8cd98f00b204e9800998ecf8427e",
    )


@pytest.fixture
def existing_ticket():
    return TicketRef(
        key="OPS-42",
        id="10042",
        summary="[Graylog] Disk full on web-01",
        fields={"summary": "[Graylog] Disk full on web-01", "customfield_10200": 5},
    )


@pytest.fixture
def auto_map_entries():
    return (
        AutoMapEntry.parse("customfield_10300", "web"),
        AutoMapEntry.parse("customfield_10400#i", "Team Vega"),
    )
