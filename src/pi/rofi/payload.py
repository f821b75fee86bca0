"""Splitting of ``value<sep>cmd<sep>cmd...`` payloads into a Value."""

from __future__ import annotations

import logging

from pi.rofi.errors import ProtocolError
from pi.rofi.types import Value

logger = logging.getLogger(__name__)

SCRIPT_SEPARATOR = "|"
BLOCKS_SEPARATOR = "||"


def resolve_value(payload: str, index: int, separator: str) -> Value:
    """Pick the command at ``index`` from a joined payload.

    An out-of-range index falls back to the first command. A payload
    without any command cannot have come from our own encoder, so it is
    a protocol violation.
    """
    parts = payload.split(separator)
    if len(parts) < 2:
        raise ProtocolError(
            f"Invalid value, needs a value and at least one command: {payload!r}"
        )

    value, cmds = parts[0], parts[1:]
    if not 0 <= index < len(cmds):
        logger.warning(
            "Index %d did not result in a valid command. Selecting first command", index
        )
        index = 0
    return Value(cmd=cmds[index], value=value)
