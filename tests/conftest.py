"""Shared fixtures for the gmwrap test suite."""
from __future__ import annotations

from typing import Any

import pytest

from gmwrap import executor
from gmwrap.config import BINARY_ENV_VAR, Settings


class FakeExecutor:
    """Stands in for ``executor.run_command`` and records every command."""

    def __init__(self) -> None:
        self.commands: list[str] = []
        self.output = ""
        self.returncode = 0

    def __call__(self, command: str, env: Any = None) -> dict[str, Any]:
        self.commands.append(command)
        return {"command": command, "returncode": self.returncode, "output": self.output}

    @property
    def last(self) -> str:
        return self.commands[-1]


@pytest.fixture(autouse=True)
def isolated_binary(monkeypatch):
    monkeypatch.delenv(BINARY_ENV_VAR, raising=False)
    monkeypatch.setattr("gmwrap.config.shutil.which", lambda name: None)


@pytest.fixture
def fake_executor(monkeypatch):
    fake = FakeExecutor()
    monkeypatch.setattr(executor, "run_command", fake)
    return fake


@pytest.fixture
def settings():
    return Settings()
