"""Tests for pi.rofi.events."""

from __future__ import annotations

import json
import logging

import pytest

from pi.rofi.errors import ProtocolError
from pi.rofi.events import Event, EventDecoder, EventName, parse_events
from pi.rofi.types import Value


def ev(name: str, value: str = "", index: str = "") -> str:
    return json.dumps({"name": name, "value": value, "index": index})


# ---------------------------------------------------------------------------
# Event validity
# ---------------------------------------------------------------------------


class TestEventValidity:
    def test_select_requires_value(self) -> None:
        assert Event(name="SELECT_ENTRY", value="a||x").is_valid()
        assert not Event(name="SELECT_ENTRY").is_valid()

    def test_active_requires_value(self) -> None:
        assert Event(name="ACTIVE_ENTRY", value="a||x").is_valid()
        assert not Event(name="ACTIVE_ENTRY").is_valid()

    def test_custom_key_requires_positive_index(self) -> None:
        assert Event(name="CUSTOM_KEY", index="1").is_valid()
        assert not Event(name="CUSTOM_KEY", index="0").is_valid()
        assert not Event(name="CUSTOM_KEY", index="abc").is_valid()
        assert not Event(name="CUSTOM_KEY").is_valid()

    @pytest.mark.parametrize("index", ["1_0", " 2", "+2", "\u0662", "2.0"])
    def test_custom_key_index_must_be_plain_digits(self, index: str) -> None:
        assert not Event(name="CUSTOM_KEY", index=index).is_valid()

    def test_custom_key_multi_digit_index(self) -> None:
        assert Event(name="CUSTOM_KEY", index="12").index_number() == 12

    def test_unknown_name(self) -> None:
        assert not Event(name="INPUT_CHANGE", value="x").is_valid()

    def test_null_fields_read_as_empty(self) -> None:
        event = Event.model_validate({"name": "SELECT_ENTRY", "value": None, "index": None})
        assert event.value == ""
        assert event.index == ""

    def test_event_name_values(self) -> None:
        assert EventName.CUSTOM_KEY == "CUSTOM_KEY"


# ---------------------------------------------------------------------------
# parse_events
# ---------------------------------------------------------------------------


class TestParseEvents:
    def test_blank_line(self) -> None:
        assert list(parse_events("   \n")) == []

    def test_several_objects_on_one_line(self) -> None:
        events = list(parse_events(ev("SELECT_ENTRY", "a||x") + " " + ev("SELECT_ENTRY", "b||y")))
        assert [e.value for e in events] == ["a||x", "b||y"]

    def test_extra_keys_ignored(self) -> None:
        (event,) = parse_events('{"name": "SELECT_ENTRY", "value": "a||x", "extra": 1}')
        assert event.index == ""

    def test_malformed_json_is_fatal(self) -> None:
        with pytest.raises(ProtocolError, match="Could not decode event"):
            list(parse_events('{"name": "SELECT'))

    def test_non_object_is_fatal(self) -> None:
        with pytest.raises(ProtocolError):
            list(parse_events("[1, 2]"))

    def test_wrong_field_type_is_fatal(self) -> None:
        with pytest.raises(ProtocolError):
            list(parse_events('{"name": "CUSTOM_KEY", "index": 2}'))

    def test_deeply_nested_json_is_fatal(self) -> None:
        with pytest.raises(ProtocolError, match="Could not decode event"):
            list(parse_events("[" * 100_000))


# ---------------------------------------------------------------------------
# EventDecoder
# ---------------------------------------------------------------------------


class TestEventDecoder:
    def test_select_entry(self) -> None:
        decoder = EventDecoder()
        values = decoder.feed('{"name":"SELECT_ENTRY","value":"a||cmd1||cmd2","index":""}\n')
        assert values == [Value(cmd="cmd1", value="a")]

    def test_active_entry_then_custom_key(self) -> None:
        decoder = EventDecoder()
        assert decoder.feed('{"name":"ACTIVE_ENTRY","value":"a||cmd1||cmd2"}\n') == []
        assert decoder.pending is not None
        values = decoder.feed('{"name":"CUSTOM_KEY","index":"2"}\n')
        assert values == [Value(cmd="cmd2", value="a")]
        assert decoder.pending is None

    def test_custom_key_out_of_range_falls_back(self, caplog) -> None:
        decoder = EventDecoder()
        decoder.feed(ev("ACTIVE_ENTRY", "a||cmd1||cmd2"))
        with caplog.at_level(logging.WARNING):
            values = decoder.feed(ev("CUSTOM_KEY", index="7"))
        assert values == [Value(cmd="cmd1", value="a")]
        assert "Selecting first command" in caplog.text

    def test_invalid_event_dropped(self, caplog) -> None:
        decoder = EventDecoder()
        with caplog.at_level(logging.WARNING):
            assert decoder.feed(ev("SELECT_ENTRY")) == []
        assert "not valid" in caplog.text
        assert decoder.feed(ev("SELECT_ENTRY", "b||go")) == [Value(cmd="go", value="b")]

    def test_invalid_follow_up_drops_selection(self) -> None:
        decoder = EventDecoder()
        decoder.feed(ev("ACTIVE_ENTRY", "a||cmd1"))
        assert decoder.feed(ev("CUSTOM_KEY", index="0")) == []
        assert decoder.pending is None

    def test_non_custom_follow_up_drops_selection(self) -> None:
        decoder = EventDecoder()
        decoder.feed(ev("ACTIVE_ENTRY", "a||cmd1"))
        assert decoder.feed(ev("SELECT_ENTRY", "b||cmd1")) == []
        assert decoder.pending is None

    def test_stray_custom_key_dropped(self) -> None:
        decoder = EventDecoder()
        assert decoder.feed(ev("CUSTOM_KEY", index="1")) == []

    def test_payload_without_commands_is_fatal(self) -> None:
        decoder = EventDecoder()
        with pytest.raises(ProtocolError, match="at least one command"):
            decoder.feed(ev("SELECT_ENTRY", "lonely"))

    def test_decode_stream_keeps_order(self) -> None:
        lines = [
            ev("SELECT_ENTRY", "a||x") + "\n",
            ev("ACTIVE_ENTRY", "b||x||y") + "\n",
            ev("CUSTOM_KEY", index="2") + "\n",
            ev("SELECT_ENTRY", "c||z") + "\n",
        ]
        assert list(EventDecoder().decode(lines)) == [
            Value(cmd="x", value="a"),
            Value(cmd="y", value="b"),
            Value(cmd="z", value="c"),
        ]

    def test_pending_at_end_of_input_dropped(self, caplog) -> None:
        decoder = EventDecoder()
        with caplog.at_level(logging.WARNING):
            assert list(decoder.decode([ev("ACTIVE_ENTRY", "a||x")])) == []
        assert decoder.pending is None
        assert "waiting for a custom key" in caplog.text

    def test_iter_values_yields_before_later_fatal_object(self) -> None:
        decoder = EventDecoder()
        values = decoder.iter_values(
            '{"name":"SELECT_ENTRY","value":"a||x"} {"name":"SELECT_ENTRY","value":"lonely"}'
        )
        assert next(values) == Value(cmd="x", value="a")
        with pytest.raises(ProtocolError):
            next(values)
