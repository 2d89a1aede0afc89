"""Unit tests for EngineConfig and AutoMapEntry (jirabridge/engine_config.py)."""

import dataclasses
from types import SimpleNamespace

import pytest

from jirabridge.engine_config import AutoMapEntry, EngineConfig


class TestAutoMapEntry:
    def test_plain_key(self):
        entry = AutoMapEntry.parse("customfield_1", "x")

        assert entry == AutoMapEntry("customfield_1", "x", is_list=False)
        assert entry.submitted_value() == "x"

    def test_list_suffix(self):
        entry = AutoMapEntry.parse("customfield_1#i", "x")

        assert entry.field_name == "customfield_1"
        assert entry.is_list is True
        assert entry.submitted_value() == ["x"]

    def test_suffix_only_at_end(self):
        entry = AutoMapEntry.parse("field#ix", "x")

        assert entry.field_name == "field#ix"
        assert entry.is_list is False

    @pytest.mark.parametrize("key, value", [("", "x"), ("  ", "x"), ("f", ""), ("f", "  ")])
    def test_blank(self, key, value):
        assert AutoMapEntry.parse(key, value).is_blank() is True


class TestEngineConfig:
    def test_immutable(self, engine_config):
        with pytest.raises(dataclasses.FrozenInstanceError):
            engine_config.project_key = "OTHER"

    def test_normalises_optional_strings(self):
        cfg = EngineConfig(
            project_key="OPS",
            duplicate_filter_query="  AND status = Open  ",
            fingerprint_field=" customfield_1 ",
            counter_field="   ",
        )

        assert cfg.duplicate_filter_query == "AND status = Open"
        assert cfg.fingerprint_field == "customfield_1"
        assert cfg.counter_field == ""
        assert cfg.counting_enabled is False

    def test_parse_auto_map_preserves_order(self):
        entries = EngineConfig.parse_auto_map({"b": "1", "a#i": "2", "c": "3"})

        assert [e.field_name for e in entries] == ["b", "a", "c"]
        assert entries[1].is_list is True

    def test_parse_auto_map_empty(self):
        assert EngineConfig.parse_auto_map(None) == ()
        assert EngineConfig.parse_auto_map({}) == ()

    def test_from_config(self):
        config = SimpleNamespace(
            jira_project_key="OPS",
            jira_title="Alert",
            jira_description="Body",
            jira_description_as_comment=True,
            jira_issue_type="Task",
            jira_priority="Major",
            jira_labels="graylog",
            jira_components="web",
            jira_duplicate_filter_query="AND status != Done",
            jira_md5_custom_field="customfield_1",
            jira_counter_custom_field="customfield_2",
            jira_md5_history=True,
            get_field_mapping=lambda: {"customfield_3#i": "Team Vega"},
        )

        cfg = EngineConfig.from_config(config)

        assert cfg.project_key == "OPS"
        assert cfg.issue_type == "Task"
        assert cfg.fingerprint_field == "customfield_1"
        assert cfg.counter_field == "customfield_2"
        assert cfg.history_enabled is True
        assert cfg.description_as_comment is True
        assert cfg.auto_map == (AutoMapEntry("customfield_3", "Team Vega", is_list=True),)
