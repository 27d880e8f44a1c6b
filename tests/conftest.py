"""Shared pytest configuration for the test suite."""

from __future__ import annotations

import os
import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest

SRC = Path(__file__).resolve().parent.parent / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Point the user config dir at a temp dir and drop petiteplatypus settings.

    No test may touch the real ``~/.config/obsidian/obsidian.json``.
    """
    for key in [k for k in os.environ if k.startswith("PETITEPLATYPUS_")]:
        monkeypatch.delenv(key)

    home = tmp_path / "home"
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(home / ".config"))
    monkeypatch.setenv("APPDATA", str(home / "AppData"))
    # Keep a stray .env in the working directory from leaking into settings
    monkeypatch.chdir(tmp_path)

    from petiteplatypus.observability.loguru_config import configure_loguru

    configure_loguru(verbosity=0)

    yield


@pytest.fixture
def config_dir(tmp_path: Path) -> Path:
    """User configuration directory holding the registry."""
    path = tmp_path / "config"
    path.mkdir()
    return path


@pytest.fixture
def registry_file(config_dir: Path) -> Path:
    """Location of the registry inside ``config_dir``."""
    return config_dir / "obsidian" / "obsidian.json"


@pytest.fixture
def fixed_clock():
    """Clock returning 2025-09-06T15:50:20.641Z (1757173820641 ms)."""
    moment = datetime(2025, 9, 6, 15, 50, 20, 641000, tzinfo=timezone.utc)
    return lambda: moment


@pytest.fixture
def counting_random():
    """Deterministic randomness: 8 bytes 00..07, then 01..08, and so on."""
    state = {"calls": 0}

    def random_bytes(n: int) -> bytes:
        start = state["calls"]
        state["calls"] += 1
        return bytes((start + i) % 256 for i in range(n))

    return random_bytes
