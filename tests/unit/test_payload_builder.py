"""Unit tests for the TicketBuilder (jirabridge/jira/payload.py).

Discovery and creation go through a mocked repository; everything else is
pure formatting.
"""

import logging

import pytest

from jirabridge.engine_config import AutoMapEntry
from jirabridge.jira.errors import CreateFailed, FieldDiscoveryFailed, TrackerError
from jirabridge.jira.payload import TicketBuilder, TicketPayload, inline_fingerprint, split_csv

FP = "abc123"


# -----------------------------------------------------------------------
# split_csv
# -----------------------------------------------------------------------


class TestSplitCsv:
    def test_simple_list(self):
        assert split_csv("a,b,c") == ["a", "b", "c"]

    def test_tokens_are_trimmed_and_empties_dropped(self):
        assert split_csv(" a , ,b,, c ") == ["a", "b", "c"]

    @pytest.mark.parametrize("value", ["", "   ", None, " , , "])
    def test_blank_gives_empty_list(self, value):
        assert split_csv(value) == []


# -----------------------------------------------------------------------
# build
# -----------------------------------------------------------------------


class TestBuildFields:
    def test_basic_fields(self, engine_config, mock_repository):
        payload = TicketBuilder(engine_config, mock_repository).build(FP)

        assert isinstance(payload, TicketPayload)
        assert payload.fields["summary"] == engine_config.title
        assert payload.fields["priority"] == "Major"
        assert payload.fields["description"] == engine_config.description
        assert payload.fields["customfield_10100"] == FP
        assert payload.fingerprint_field == "customfield_10100"
        assert payload.fingerprint_inlined is False

    def test_labels_split(self, config_factory, mock_repository):
        payload = TicketBuilder(config_factory(labels="a,b,c"), mock_repository).build(FP)

        assert payload.fields["labels"] == ["a", "b", "c"]

    @pytest.mark.parametrize("labels", ["", "   "])
    def test_blank_labels_omitted(self, config_factory, mock_repository, labels):
        payload = TicketBuilder(config_factory(labels=labels), mock_repository).build(FP)

        assert "labels" not in payload.fields

    def test_components(self, config_factory, mock_repository):
        builder = TicketBuilder(config_factory(components="web, db"), mock_repository)

        assert builder.build(FP).fields["components"] == ["web", "db"]
        assert "components" not in TicketBuilder(config_factory(components=""), mock_repository).build(FP).fields

    def test_counter_initialised_to_integer_one(self, engine_config, mock_repository):
        payload = TicketBuilder(engine_config, mock_repository).build(FP)

        assert payload.fields["customfield_10200"] == 1
        assert isinstance(payload.fields["customfield_10200"], int)

    def test_no_counter_field(self, config_factory, mock_repository):
        payload = TicketBuilder(config_factory(counter_field=""), mock_repository).build(FP)

        assert "customfield_10200" not in payload.fields
        assert 1 not in payload.fields.values()

    def test_title_and_description_overrides(self, engine_config, mock_repository):
        payload = TicketBuilder(engine_config, mock_repository).build(FP, title="T", description="D")

        assert payload.fields["summary"] == "T"
        assert payload.fields["description"] == "D"


class TestFingerprintResolution:
    def test_configured_field_skips_discovery(self, engine_config, mock_repository):
        TicketBuilder(engine_config, mock_repository).build(FP)

        mock_repository.get_field_metadata.assert_not_called()

    def test_discovered_field(self, config_factory, mock_repository):
        payload = TicketBuilder(config_factory(fingerprint_field=""), mock_repository).build(FP)

        mock_repository.get_field_metadata.assert_called_once_with("OPS", "Bug")
        assert payload.fields["customfield_10100"] == FP
        assert payload.fingerprint_inlined is False

    def test_inlined_when_nothing_found(self, config_factory, mock_repository, caplog):
        mock_repository.get_field_metadata.return_value = {}
        cfg = config_factory(fingerprint_field="")

        with caplog.at_level(logging.WARNING, logger="jirabridge"):
            payload = TicketBuilder(cfg, mock_repository).build(FP)

        assert payload.fingerprint_inlined is True
        assert payload.fields["description"] == cfg.description + "\n\ngraylog_md5=abc123\n\n"
        assert "JIRA_MD5_CUSTOM_FIELD" in caplog.text

    def test_blank_fingerprint_is_not_stored(self, config_factory, mock_repository):
        cfg = config_factory(fingerprint_field="")
        payload = TicketBuilder(cfg, mock_repository).build("")

        mock_repository.get_field_metadata.assert_not_called()
        assert payload.fields["description"] == cfg.description
        assert payload.fingerprint_field is None

    def test_discovery_failure_propagates(self, config_factory, mock_repository):
        mock_repository.get_field_metadata.side_effect = TrackerError("HTTP 403")

        with pytest.raises(FieldDiscoveryFailed):
            TicketBuilder(config_factory(fingerprint_field=""), mock_repository).build(FP)


class TestDescriptionOrdering:
    def test_base_then_inline_then_history(self, config_factory, mock_repository):
        mock_repository.get_field_metadata.return_value = {}
        history = "\n\nHistory : OPS-1 [2] "

        payload = TicketBuilder(config_factory(fingerprint_field="", description="base"), mock_repository).build(
            FP, history
        )

        assert payload.description == "base" + inline_fingerprint(FP) + history

    def test_history_appended_last(self, engine_config, mock_repository):
        payload = TicketBuilder(engine_config, mock_repository).build(FP, "\n\nHistory : OPS-1 ")

        assert payload.description.endswith("\n\nHistory : OPS-1 ")
        assert payload.description.startswith(engine_config.description)


class TestAutoMap:
    def test_list_suffix_wraps_value(self, config_factory, mock_repository, auto_map_entries):
        payload = TicketBuilder(config_factory(auto_map=auto_map_entries), mock_repository).build(FP)

        assert payload.fields["customfield_10300"] == "web"
        assert payload.fields["customfield_10400"] == ["Team Vega"]
        assert "customfield_10400#i" not in payload.fields

    def test_blank_entries_skipped(self, config_factory, mock_repository):
        entries = (AutoMapEntry.parse("", "x"), AutoMapEntry.parse("customfield_1", "  "))

        payload = TicketBuilder(config_factory(auto_map=entries), mock_repository).build(FP)

        assert "" not in payload.fields
        assert "customfield_1" not in payload.fields

    def test_later_entry_overrides(self, config_factory, mock_repository):
        entries = (AutoMapEntry.parse("customfield_1", "first"), AutoMapEntry.parse("customfield_1#i", "second"))

        payload = TicketBuilder(config_factory(auto_map=entries), mock_repository).build(FP)

        assert payload.fields["customfield_1"] == ["second"]


class TestBuildNewTicket:
    def test_submits_and_returns_ticket(self, engine_config, mock_repository):
        ticket = TicketBuilder(engine_config, mock_repository).build_new_ticket(FP)

        assert ticket.key == "OPS-101"
        project, issue_type, fields = mock_repository.create.call_args[0]
        assert (project, issue_type) == ("OPS", "Bug")
        assert fields["customfield_10100"] == FP

    def test_tracker_rejection_raises_create_failed(self, engine_config, mock_repository):
        mock_repository.create.side_effect = TrackerError("HTTP 400: priority invalid")

        with pytest.raises(CreateFailed) as exc_info:
            TicketBuilder(engine_config, mock_repository).build_new_ticket(FP)

        assert exc_info.value.project == "OPS"
        assert exc_info.value.fingerprint == FP
