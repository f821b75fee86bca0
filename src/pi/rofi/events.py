"""Blocks-mode event decoding.

rofi-blocks writes one JSON object per event to our stdin. A plain
selection arrives as a single SELECT_ENTRY; a hotkey on an entry arrives
as ACTIVE_ENTRY followed by a CUSTOM_KEY carrying the one-based command
index. Undecodable input is fatal; invalid events are dropped.
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Iterable, Iterator
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from pi.rofi.config import RofiConfig
from pi.rofi.errors import ProtocolError
from pi.rofi.payload import BLOCKS_SEPARATOR, resolve_value
from pi.rofi.types import Value

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s*")
_INTEGER = re.compile(r"-?[0-9]+")


class EventName(StrEnum):
    SELECT_ENTRY = "SELECT_ENTRY"
    ACTIVE_ENTRY = "ACTIVE_ENTRY"
    CUSTOM_KEY = "CUSTOM_KEY"


class Event(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str = ""
    value: str = ""
    index: str = ""

    @field_validator("name", "value", "index", mode="before")
    @classmethod
    def _null_as_empty(cls, v: Any) -> Any:
        return "" if v is None else v

    def index_number(self) -> int | None:
        if not _INTEGER.fullmatch(self.index):
            return None
        return int(self.index)

    def is_valid(self) -> bool:
        match self.name:
            case EventName.SELECT_ENTRY | EventName.ACTIVE_ENTRY:
                return self.value != ""
            case EventName.CUSTOM_KEY:
                index = self.index_number()
                return index is not None and index >= 1
            case _:
                return False


def parse_events(data: str) -> Iterator[Event]:
    """Yield every whitespace-separated JSON event object in ``data``."""
    decoder = json.JSONDecoder()
    pos = _WHITESPACE.match(data).end()
    while pos < len(data):
        try:
            obj, pos = decoder.raw_decode(data, pos)
        except (json.JSONDecodeError, RecursionError) as exc:
            raise ProtocolError(f"Could not decode event: {exc}") from exc
        try:
            yield Event.model_validate(obj)
        except ValidationError as exc:
            raise ProtocolError(f"Could not decode event: {exc}") from exc
        pos = _WHITESPACE.match(data, pos).end()


class EventDecoder:
    """Turns the event stream into resolved selections.

    Stateful: an ACTIVE_ENTRY is held until the next event arrives.
    """

    def __init__(self, config: RofiConfig | None = None) -> None:
        self._config = config or RofiConfig()
        self._pending: Event | None = None

    @property
    def pending(self) -> Event | None:
        return self._pending

    def iter_values(self, data: str) -> Iterator[Value]:
        """Yield each resolved value as soon as its event is handled."""
        for event in parse_events(data):
            value = self.handle(event)
            if value is not None:
                yield value

    def feed(self, data: str) -> list[Value]:
        return list(self.iter_values(data))

    def decode(self, lines: Iterable[str]) -> Iterator[Value]:
        for line in lines:
            yield from self.iter_values(line)
        self.finish()

    def finish(self) -> None:
        if self._pending is not None:
            logger.warning("Input ended while waiting for a custom key: %r", self._pending)
            self._pending = None

    def handle(self, event: Event) -> Value | None:
        if self._config.verbosity >= 5:
            logger.debug("Event: %r", event)

        if self._pending is not None:
            entry, self._pending = self._pending, None
            if event.name != EventName.CUSTOM_KEY or not event.is_valid():
                logger.warning("Event with index was not valid: %r", event)
                return None
            return resolve_value(entry.value, event.index_number() - 1, BLOCKS_SEPARATOR)

        if not event.is_valid():
            logger.warning("Event was not valid: %r", event)
            return None

        match event.name:
            case EventName.SELECT_ENTRY:
                return resolve_value(event.value, 0, BLOCKS_SEPARATOR)
            case EventName.ACTIVE_ENTRY:
                self._pending = event
                return None
            case _:
                logger.warning("Custom key without an active entry: %r", event)
                return None
