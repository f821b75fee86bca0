"""Script-mode selection state passed back by rofi through the environment."""

from __future__ import annotations

import os
from collections.abc import Mapping

from pi.rofi.payload import SCRIPT_SEPARATOR, resolve_value
from pi.rofi.types import Value

STATE_ENV = "ROFI_RETV"
INFO_ENV = "ROFI_INFO"

# Signals above this are the shifted hotkey variant of commands 1-8
SHIFTED_OFFSET = 8


def read_state(environ: Mapping[str, str] | None = None) -> int:
    env = os.environ if environ is None else environ
    try:
        return int(env.get(STATE_ENV, "0"))
    except ValueError:
        return 0


def read_selection(environ: Mapping[str, str] | None = None) -> Value | None:
    """Return the selection rofi reported for this invocation, if any.

    The state signal is a one-based command index; 9 and above select the
    same commands through the shifted hotkeys.
    """
    env = os.environ if environ is None else environ
    state = read_state(env)
    info = env.get(INFO_ENV, "")
    if state <= 0 or not info:
        return None

    if state > SHIFTED_OFFSET:
        state -= SHIFTED_OFFSET
    return resolve_value(info, state - 1, SCRIPT_SEPARATOR)
