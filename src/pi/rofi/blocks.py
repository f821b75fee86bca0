"""Blocks-mode protocol: one JSON screen per render, selections read from stdin.

Each render writes a single JSON object understood by rofi-blocks. The
``event format`` template tells rofi-blocks how to shape the events it
writes back, which :class:`~pi.rofi.events.EventDecoder` then resolves.
"""

from __future__ import annotations

import asyncio
import logging
import sys
from collections.abc import AsyncIterator, Sequence
from dataclasses import replace
from typing import Any, TextIO

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    SerializerFunctionWrapHandler,
    ValidationError,
    model_serializer,
)
from pydantic_core import PydanticSerializationError

from pi.rofi.config import RofiConfig
from pi.rofi.errors import ProtocolError
from pi.rofi.events import EventDecoder
from pi.rofi.history import HistoryStore
from pi.rofi.payload import BLOCKS_SEPARATOR
from pi.rofi.types import Model, Option, Value

logger = logging.getLogger(__name__)

EVENT_FORMAT = '{"index":"{{value_escaped}}","name":"{{name_enum}}","value":"{{data}}"}'

_OMIT_EMPTY = ("input action", "event format", "active entry", "lines")


class BlockLine(BaseModel):
    text: str = ""
    icon: str = ""
    data: str = ""
    urgent: bool = False
    highlight: bool = False
    markup: bool = False

    @model_serializer(mode="wrap")
    def _omit_empty(self, handler: SerializerFunctionWrapHandler) -> dict[str, Any]:
        return {key: value for key, value in handler(self).items() if value}


class BlockModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str = ""
    overlay: str = ""
    prompt: str = ""
    input: str = ""
    input_action: str = Field(default="", alias="input action")
    event_format: str = Field(default="", alias="event format")
    active_entry: int = Field(default=0, alias="active entry")
    lines: list[BlockLine] = Field(default_factory=list)

    @model_serializer(mode="wrap")
    def _omit_empty(self, handler: SerializerFunctionWrapHandler) -> dict[str, Any]:
        data = handler(self)
        for key in _OMIT_EMPTY:
            if key in data and not data[key]:
                del data[key]
        return data


def map_options(options: Sequence[Option], verbosity: int = 0) -> list[BlockLine]:
    lines: list[BlockLine] = []
    for opt in options:
        if not opt.name:
            if verbosity >= 5:
                logger.debug("Option was empty")
            continue
        if not opt.cmds:
            logger.warning("Can't print option %r with no commands", opt.name)
            continue

        lines.append(
            BlockLine(
                text=opt.display_text(),
                icon=opt.icon,
                data=opt.payload(BLOCKS_SEPARATOR),
                urgent=opt.is_urgent,
                highlight=opt.is_highlighted,
                markup=opt.use_markup,
            )
        )
    return lines


def render_line(model: Model, active_entry: int | None = None, verbosity: int = 0) -> str:
    """Serialize ``model`` to one rofi-blocks JSON line.

    ``active_entry`` overrides ``model.active_entry`` when given.
    """
    try:
        block = BlockModel(
            message=model.message,
            overlay=model.overlay,
            prompt=model.prompt,
            input=model.input,
            input_action=model.input_action,
            event_format=EVENT_FORMAT,
            active_entry=model.active_entry if active_entry is None else active_entry,
            lines=map_options(model.options, verbosity),
        )
        return block.model_dump_json(by_alias=True)
    except (ValidationError, PydanticSerializationError) as exc:
        raise ProtocolError(f"Could not marshal render model: {exc}") from exc


_SENTINEL = object()


class ValueStream:
    """Async iterator over resolved selections, handed over one at a time."""

    def __init__(self) -> None:
        self._queue: asyncio.Queue[Value | object] = asyncio.Queue(maxsize=1)
        self._error: BaseException | None = None

    async def push(self, value: Value) -> None:
        await self._queue.put(value)

    async def end(self) -> None:
        await self._queue.put(_SENTINEL)

    async def fail(self, error: BaseException) -> None:
        self._error = error
        await self._queue.put(_SENTINEL)

    async def __aiter__(self) -> AsyncIterator[Value]:
        while True:
            item = await self._queue.get()
            if item is _SENTINEL:
                if self._error is not None:
                    raise self._error
                return
            yield item  # type: ignore[misc]


class RofiBlocks:
    """A rofi-blocks session bound to a pair of streams (stdin/stdout by default)."""

    def __init__(
        self,
        config: RofiConfig | None = None,
        *,
        stdin: TextIO | None = None,
        stdout: TextIO | None = None,
        history: HistoryStore | None = None,
    ) -> None:
        self._config = config or RofiConfig()
        self._stdin = stdin if stdin is not None else sys.stdin
        self._stdout = stdout if stdout is not None else sys.stdout
        self._history = history or HistoryStore(self._config)
        self._reader: asyncio.Task[None] | None = None
        self.model = Model()

    def render(self, active_entry: int | None = None) -> None:
        model = self.model
        namespace = self._config.history_namespace
        if namespace:
            model = replace(model, options=self._history.reorder(model.options, namespace))

        line = render_line(model, active_entry, self._config.verbosity)
        self._stdout.write(line + "\n")
        self._stdout.flush()

    def remember(self, value: Value) -> None:
        """Record a selection in the configured history namespace, if any."""
        namespace = self._config.history_namespace
        if namespace:
            self._history.save(namespace, value.value)

    def listen(self) -> ValueStream:
        """Start reading events in the background. Must be called from a running loop."""
        stream = ValueStream()
        self._reader = asyncio.create_task(self._read_events(stream))
        return stream

    async def _read_events(self, stream: ValueStream) -> None:
        decoder = EventDecoder(self._config)
        try:
            while True:
                line = await asyncio.to_thread(self._stdin.readline)
                if not line:
                    break
                for value in decoder.iter_values(line):
                    await stream.push(value)
            decoder.finish()
        except ProtocolError as exc:
            logger.critical("Could not decode event stream: %s", exc)
            await stream.fail(exc)
            return
        except (OSError, ValueError) as exc:
            logger.critical("Could not read event stream: %s", exc)
            await stream.fail(ProtocolError(f"Could not read event stream: {exc}"))
            return
        except Exception as exc:
            logger.exception("Event reader stopped unexpectedly")
            await stream.fail(ProtocolError(f"Event reader stopped unexpectedly: {exc}"))
            return
        await stream.end()
