"""pi-rofi: drive rofi through its script mode and rofi-blocks JSON protocol."""

# Blocks mode
from pi.rofi.blocks import EVENT_FORMAT, RofiBlocks, ValueStream, render_line

# Configuration and logging
from pi.rofi.config import RofiConfig, user_cache_dir
from pi.rofi.errors import CacheDirError, ProtocolError, RofiError
from pi.rofi.events import Event, EventDecoder, EventName

# History
from pi.rofi.history import MAX_HISTORY_COUNT, HistoryStore, reorder
from pi.rofi.log import configure_logging

# Script mode
from pi.rofi.script import ScriptWriter, encode_directive, encode_option, sort_options
from pi.rofi.state import read_selection, read_state

# Types
from pi.rofi.types import Model, Option, Value

__all__ = [
    "EVENT_FORMAT",
    "MAX_HISTORY_COUNT",
    "CacheDirError",
    "Event",
    "EventDecoder",
    "EventName",
    "HistoryStore",
    "Model",
    "Option",
    "ProtocolError",
    "RofiBlocks",
    "RofiConfig",
    "RofiError",
    "ScriptWriter",
    "Value",
    "ValueStream",
    "configure_logging",
    "encode_directive",
    "encode_option",
    "read_selection",
    "read_state",
    "render_line",
    "reorder",
    "sort_options",
    "user_cache_dir",
]
