"""Shared test configuration and fixtures."""

from collections.abc import Generator
from pathlib import Path

import pytest

from calrecur.config.settings import reset_settings


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Keep tests away from the user's config directory and environment."""
    for name in (
        "CALRECUR_DEFAULT_TIMEZONE",
        "CALRECUR_STRICT_PARSING",
        "CALRECUR_MAX_OCCURRENCES",
        "CALRECUR_CONFIG_FILE",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("CALRECUR_CONFIG_DIR", str(tmp_path / "config"))
    monkeypatch.chdir(tmp_path)
    reset_settings()
    yield
    reset_settings()
