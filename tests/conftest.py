"""Shared fixtures and mocks for all tests."""

from __future__ import annotations

from io import StringIO
from unittest.mock import AsyncMock

import pytest
from rich.console import Console

from shellgate.config.settings import Settings
from shellgate.policy.consent import ConsentSession
from shellgate.policy.permission_gate import PermissionGate


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in (
        "SKIP_BASH_PERMISSIONS",
        "SHELLGATE_SKIP_PERMISSIONS",
        "SHELLGATE_DEFAULT_TIMEOUT",
        "SHELLGATE_MAX_OUTPUT_BYTES",
        "SHELLGATE_PROMPT_TIMEOUT",
        "SHELLGATE_LOG_LEVEL",
        "SHELLGATE_DISPLAY_MAX_LINES",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def mock_settings(monkeypatch):
    monkeypatch.setenv("SHELLGATE_LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("SHELLGATE_DEFAULT_TIMEOUT", "10")
    return Settings()


@pytest.fixture
def console_buffer():
    return StringIO()


@pytest.fixture
def quiet_console(console_buffer):
    return Console(file=console_buffer, force_terminal=False, width=120)


@pytest.fixture
def session():
    return ConsentSession()


@pytest.fixture
def gate(session, quiet_console):
    return PermissionGate(session=session, console=quiet_console)


@pytest.fixture
def make_prompter():
    def _make(answer=None, side_effect=None):
        return AsyncMock(return_value=answer, side_effect=side_effect)
    return _make
