"""HistoryStore: bounded, most-recent-first record of chosen values per namespace.

Each namespace is one JSON array of strings at
``<cache>/rofi/<namespace>.json``. History is best-effort: every failure is
logged and the caller carries on as if there were no history.
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Sequence
from pathlib import Path

from pi.rofi.config import RofiConfig
from pi.rofi.errors import CacheDirError
from pi.rofi.types import Option

logger = logging.getLogger(__name__)

MAX_HISTORY_COUNT = 5


def reorder(options: Sequence[Option], history: Sequence[str]) -> list[Option]:
    """Promote options whose value appears in ``history`` to the front.

    Promoted options follow history order; options sharing a value keep
    their original relative order. Everything else keeps its position
    relative to the rest.
    """
    promoted: list[Option] = []
    remaining = list(options)

    for value in history:
        matched = [opt for opt in remaining if opt.value == value]
        if not matched:
            continue
        promoted.extend(matched)
        remaining = [opt for opt in remaining if opt.value != value]

    return promoted + remaining


def push(history: Sequence[str], value: str) -> list[str]:
    """Return ``history`` with ``value`` moved to the front, bounded to MAX_HISTORY_COUNT."""
    rest = [item for item in history if item != value]
    return [value, *rest][:MAX_HISTORY_COUNT]


def _parse_history(content: str) -> list[str]:
    if not content.strip():
        return []
    data = json.loads(content)
    if not isinstance(data, list) or not all(isinstance(item, str) for item in data):
        raise ValueError("history must be a JSON array of strings")
    return data


class HistoryStore:
    def __init__(self, config: RofiConfig | None = None) -> None:
        self._config = config or RofiConfig()

    def path(self, namespace: str) -> Path:
        return self._config.history_path(namespace)

    def load(self, namespace: str) -> list[str]:
        """Return the namespace's history, or an empty list if it is missing or unreadable."""
        try:
            path = self.path(namespace)
        except CacheDirError as exc:
            logger.warning("Error while finding cache: %s", exc)
            return []

        try:
            return _parse_history(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return []
        except OSError as exc:
            logger.warning("Error while opening cache %s: %s", path, exc)
            return []
        except ValueError as exc:
            logger.warning("Error while reading history %s: %s", path, exc)
            return []

    def save(self, namespace: str, value: str) -> None:
        """Record ``value`` as the most recent choice for ``namespace``.

        The file is rewritten in place through a single handle. A malformed
        file is replaced; I/O errors abandon the save.
        """
        try:
            path = self.path(namespace)
        except CacheDirError as exc:
            logger.warning("Error while finding cache: %s", exc)
            return

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            logger.warning("Error while creating path %s: %s", path.parent, exc)
            return

        try:
            fd = os.open(path, os.O_RDWR | os.O_CREAT, 0o666)
            with open(fd, "r+", encoding="utf-8") as fh:
                try:
                    history = _parse_history(fh.read())
                except ValueError as exc:
                    logger.warning("Error while reading history %s: %s", path, exc)
                    history = []

                updated = push(history, value)
                fh.seek(0)
                fh.truncate()
                fh.write(json.dumps(updated, indent=2))
        except OSError as exc:
            logger.warning("Error while saving history %s: %s", path, exc)
            return

        if self._config.verbosity >= 4:
            logger.debug("Saved %r to history %s", value, namespace)

    def reorder(self, options: Sequence[Option], namespace: str) -> list[Option]:
        return reorder(options, self.load(namespace))
