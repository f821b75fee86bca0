"""Tests for script-mode selection state."""

import os
from unittest.mock import patch

import pytest

from pi.rofi.errors import ProtocolError
from pi.rofi.state import read_selection, read_state
from pi.rofi.types import Value


def test_state_defaults_to_zero():
    assert read_state({}) == 0


def test_state_non_integer_is_zero():
    assert read_state({"ROFI_RETV": "abc"}) == 0


def test_no_selection_yet():
    assert read_selection({"ROFI_RETV": "0", "ROFI_INFO": "x|c1"}) is None


def test_missing_info():
    assert read_selection({"ROFI_RETV": "1"}) is None


def test_first_command():
    env = {"ROFI_RETV": "1", "ROFI_INFO": "x|c1|c2"}
    assert read_selection(env) == Value(cmd="c1", value="x")


def test_direct_index():
    env = {"ROFI_RETV": "2", "ROFI_INFO": "x|c1|c2"}
    assert read_selection(env) == Value(cmd="c2", value="x")


def test_shifted_index():
    env = {"ROFI_RETV": "10", "ROFI_INFO": "x|c1|c2"}
    assert read_selection(env) == Value(cmd="c2", value="x")


def test_shifted_first_command():
    env = {"ROFI_RETV": "9", "ROFI_INFO": "x|c1|c2"}
    assert read_selection(env) == Value(cmd="c1", value="x")


def test_out_of_range_falls_back_to_first(caplog):
    env = {"ROFI_RETV": "5", "ROFI_INFO": "x|c1|c2"}
    assert read_selection(env) == Value(cmd="c1", value="x")
    assert "Selecting first command" in caplog.text


def test_info_without_commands():
    with pytest.raises(ProtocolError):
        read_selection({"ROFI_RETV": "1", "ROFI_INFO": "x"})


def test_reads_process_environment():
    with patch.dict(os.environ, {"ROFI_RETV": "1", "ROFI_INFO": "id|run"}):
        assert read_selection() == Value(cmd="run", value="id")
