"""Script-mode protocol: directive and option lines on stdout.

Directive lines are ``\\0<key>\\x1f<value>``. Option lines are
``<text>\\0info\\x1f<value>|<cmd>...`` with an optional ``\\x1ficon\\x1f<icon>``.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Sequence
from typing import TextIO

from pi.rofi.config import RofiConfig
from pi.rofi.history import HistoryStore
from pi.rofi.payload import SCRIPT_SEPARATOR
from pi.rofi.types import Option

logger = logging.getLogger(__name__)

NUL = "\x00"
UNIT_SEP = "\x1f"

# Directive keys understood by rofi's script mode
PROMPT = "prompt"
MESSAGE = "message"
ACTIVE = "active"
USE_HOT_KEYS = "use-hot-keys"
MARKUP_ROWS = "markup-rows"
NO_CUSTOM = "no-custom"


def encode_directive(key: str, value: str) -> str:
    return f"{NUL}{key}{UNIT_SEP}{value}"


def encode_option(option: Option) -> str | None:
    """Encode one option row, or return None if it cannot be printed."""
    if not option.is_printable():
        return None

    line = f"{option.display_text()}{NUL}info{UNIT_SEP}{option.payload(SCRIPT_SEPARATOR)}"
    if option.icon:
        line = f"{line}{UNIT_SEP}icon{UNIT_SEP}{option.icon}"
    return line


def sort_options(options: Sequence[Option]) -> list[Option]:
    """Case-insensitive sort by display name."""
    return sorted(options, key=lambda opt: opt.name.lower())


def _bool(flag: bool) -> str:
    return "true" if flag else "false"


class ScriptWriter:
    """Writes script-mode lines, flushing after each one."""

    def __init__(
        self,
        config: RofiConfig | None = None,
        stream: TextIO | None = None,
        history: HistoryStore | None = None,
    ) -> None:
        self._config = config or RofiConfig()
        self._stream = stream if stream is not None else sys.stdout
        self._history = history or HistoryStore(self._config)

    def _write(self, line: str) -> None:
        self._stream.write(line + "\n")
        self._stream.flush()

    # ── Directives ───────────────────────────────────────────────────

    def directive(self, key: str, value: str) -> None:
        self._write(encode_directive(key, value))

    def write_header(self) -> None:
        self.directive(NO_CUSTOM, _bool(not self._config.allow_custom))

    def set_prompt(self, prompt: str) -> None:
        self.directive(PROMPT, prompt)

    def set_message(self, message: str) -> None:
        self.directive(MESSAGE, message)

    def set_active(self, active_rows: str) -> None:
        """Mark rows active, e.g. ``"0,2"`` or ``"1:3"``."""
        self.directive(ACTIVE, active_rows)

    def enable_hotkeys(self) -> None:
        if self._config.verbosity > 3:
            logger.debug("Enabled hotkeys")
        self.directive(USE_HOT_KEYS, "true")

    def enable_markup(self) -> None:
        if self._config.verbosity > 3:
            logger.debug("Enabled markup")
        self.directive(MARKUP_ROWS, "true")

    def enable_custom(self) -> None:
        if self._config.verbosity > 3:
            logger.debug("Enabled custom entries")
        self.directive(NO_CUSTOM, "false")

    def disable_custom(self) -> None:
        self.directive(NO_CUSTOM, "true")

    # ── Options ──────────────────────────────────────────────────────

    def print_option(self, option: Option) -> bool:
        """Write one option row. Returns False if the option was skipped."""
        line = encode_option(option)
        if line is None:
            if not option.name:
                if self._config.verbosity >= 5:
                    logger.debug("Option was empty")
            else:
                logger.warning("Can't print option %r with no commands", option.name)
            return False

        if self._config.verbosity >= 5:
            logger.debug("Option: %r", line)
        self._write(line)
        return True

    def print_all(self, options: Sequence[Option]) -> None:
        """Write every option, history-promoted when a namespace is configured."""
        namespace = self._config.history_namespace
        if namespace:
            options = self._history.reorder(options, namespace)

        for option in options:
            self.print_option(option)
