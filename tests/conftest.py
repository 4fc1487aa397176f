# tests/conftest.py

"""Shared pytest fixtures for all estate_predict tests."""

from collections.abc import Generator
from pathlib import Path
from unittest.mock import patch

import pytest

from src.config.settings import Settings


@pytest.fixture(autouse=True)
def isolated_paths(tmp_path: Path) -> Generator[None, None, None]:
    """Point the history file and logs at a per-test temp directory."""
    with patch.object(
        Settings, "HISTORY_PATH", tmp_path / "data" / "history.json"
    ), patch.object(Settings, "LOGS_DIR", tmp_path / "logs"):
        yield
