"""Shared pytest fixtures for atlasconvert tests."""

from __future__ import annotations

import json
import socket
from pathlib import Path
from typing import Any, Dict

import pytest


@pytest.fixture(autouse=True)
def _disable_network(monkeypatch: pytest.MonkeyPatch) -> None:
    """Prevent network access during the test suite.

    The converters are pure functions; any socket use is a bug, so the most
    common socket entry points raise a helpful error if triggered.
    """

    def _guard(*args: object, **kwargs: object) -> socket.socket:  # type: ignore[override]
        raise RuntimeError("Network access is disabled during tests.")

    monkeypatch.setattr(socket, "socket", _guard)
    monkeypatch.setattr(socket, "create_connection", _guard)


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the path to the shared fixtures directory."""

    return Path(__file__).resolve().parent / "fixtures"


@pytest.fixture
def load_json() -> "LoadJSONFn":
    """Helper fixture to load JSON fixtures by filename."""

    def _loader(path: str | Path) -> Dict[str, Any]:
        file_path = Path(path)
        with file_path.open("r", encoding="utf-8") as handle:
            return json.load(handle)

    return _loader


@pytest.fixture
def load_text() -> "LoadTextFn":
    """Helper fixture to read markup fixtures as text."""

    def _loader(path: str | Path) -> str:
        return Path(path).read_text(encoding="utf-8")

    return _loader


class LoadJSONFn:
    """Protocol-like helper for typing the ``load_json`` fixture."""

    def __call__(
        self, path: str | Path
    ) -> Dict[str, Any]:  # pragma: no cover - documentation only
        ...


class LoadTextFn:
    """Protocol-like helper for typing the ``load_text`` fixture."""

    def __call__(self, path: str | Path) -> str:  # pragma: no cover - documentation only
        ...
