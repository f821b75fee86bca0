import pytest

from pi.rofi.config import RofiConfig
from pi.rofi.history import HistoryStore


@pytest.fixture
def config(tmp_path) -> RofiConfig:
    """Config whose cache root is an isolated temporary directory."""
    return RofiConfig(cache_dir=tmp_path / "cache")


@pytest.fixture
def store(config: RofiConfig) -> HistoryStore:
    return HistoryStore(config)
