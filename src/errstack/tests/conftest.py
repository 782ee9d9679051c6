"""Shared fixtures: every test starts from default settings and unconfigured logging."""

import os

import pytest

from errstack.logging import reset_logging
from errstack.settings import clear_settings_cache


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch: pytest.MonkeyPatch) -> object:
    """Drop ERRSTACK_* variables and cached settings/logging around each test."""
    for key in list(os.environ):
        if key.startswith("ERRSTACK_"):
            monkeypatch.delenv(key)
    clear_settings_cache()
    reset_logging()
    yield
    clear_settings_cache()
    reset_logging()
