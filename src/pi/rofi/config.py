"""Configuration for pi-rofi. History lives under <cache>/rofi/<namespace>.json."""

from __future__ import annotations

import os
import sys
from collections.abc import Mapping
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

from pi.rofi.errors import CacheDirError

DEBUG_ENV = "ROFI_DEBUG"
HISTORY_DIR_NAME = "rofi"


def user_cache_dir(environ: Mapping[str, str] | None = None) -> Path:
    """Return the per-user cache root (XDG on Linux, ~/Library/Caches on macOS)."""
    env = os.environ if environ is None else environ
    cache_home = env.get("XDG_CACHE_HOME")
    if cache_home:
        return Path(cache_home)
    try:
        home = Path.home()
    except RuntimeError as exc:
        raise CacheDirError(f"could not resolve home directory: {exc}") from exc
    if sys.platform == "darwin":
        return home / "Library" / "Caches"
    return home / ".cache"


@dataclass
class RofiConfig:
    """Settings shared by the script writer, blocks session and history store."""

    verbosity: int = 0  # 0 = off, 1-5 = diagnostic detail
    history_namespace: str | None = None
    cache_dir: Path | None = None
    log_file: str = "rofi-debug.log"
    allow_custom: bool = False

    @classmethod
    def from_env(
        cls, environ: Mapping[str, str] | None = None, **overrides: Any
    ) -> RofiConfig:
        env = os.environ if environ is None else environ
        config = cls()
        raw = env.get(DEBUG_ENV, "")
        if raw:
            try:
                config.verbosity = int(raw)
            except ValueError:
                pass
        return replace(config, **overrides)

    def cache_root(self) -> Path:
        if self.cache_dir is not None:
            return Path(self.cache_dir)
        return user_cache_dir()

    def history_path(self, namespace: str) -> Path:
        return self.cache_root() / HISTORY_DIR_NAME / f"{namespace}.json"
