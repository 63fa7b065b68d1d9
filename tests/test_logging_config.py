from __future__ import annotations

import importlib
import json
import logging
import sys
from types import ModuleType
from typing import Iterator

import pytest


@pytest.fixture(autouse=True)
def _restore_package_logger() -> Iterator[None]:
    package_logger = logging.getLogger("atlasconvert")
    saved = (list(package_logger.handlers), package_logger.level, package_logger.propagate)
    package_logger.handlers = []
    package_logger.setLevel(logging.NOTSET)
    package_logger.propagate = True
    yield
    package_logger.handlers = saved[0]
    package_logger.setLevel(saved[1])
    package_logger.propagate = saved[2]


def _reload_logging(monkeypatch: pytest.MonkeyPatch, **env: str) -> ModuleType:
    for key, value in env.items():
        monkeypatch.setenv(key, value)
    for name in list(sys.modules):
        if name.startswith("atlasconvert"):
            sys.modules.pop(name)
    return importlib.import_module("atlasconvert.logging_config")


def test_structured_logging_includes_correlation_id(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    monkeypatch.setenv("ATLASCONVERT_CORR_ID", "test-corr-id")
    monkeypatch.delenv("ATLASCONVERT_LOG_JSON", raising=False)
    logging_module = _reload_logging(monkeypatch)
    logging_module.configure_logging("INFO")
    logger = logging_module.get_logger("atlasconvert.test")

    logger.info("hello world")

    output = capsys.readouterr().out.strip()
    assert "hello world" in output
    assert "test-corr-id" in output
    assert output.startswith("20")


def test_json_logging_mode(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    logging_module = _reload_logging(monkeypatch, ATLASCONVERT_LOG_JSON="true")
    logging_module.configure_logging("INFO")
    logger = logging_module.get_logger("atlasconvert.json")

    logger.info("structured message", extra={"chars_in": 12})

    payload = json.loads(capsys.readouterr().out.strip())
    assert payload["message"] == "structured message"
    assert payload["chars_in"] == 12
    assert payload["correlation_id"] == logging_module.get_correlation_id()


def test_long_extras_are_shortened(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    logging_module = _reload_logging(monkeypatch, ATLASCONVERT_LOG_JSON="true", ATLASCONVERT_LOG_EXCERPT="10")
    logging_module.configure_logging("DEBUG")
    logger = logging_module.get_logger("atlasconvert.excerpt")

    logger.debug("markup", extra={"body": "<p>" + "x" * 500 + "</p>"})

    payload = json.loads(capsys.readouterr().out.strip())
    assert payload["body"].startswith("<p>xxxxxxx...")
    assert payload["body"].endswith("(507 chars)")


def test_default_level_comes_from_environment(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    monkeypatch.delenv("ATLASCONVERT_LOG_JSON", raising=False)
    logging_module = _reload_logging(monkeypatch, ATLASCONVERT_LOG_LEVEL="ERROR")
    logging_module.configure_logging()
    logger = logging_module.get_logger("atlasconvert.level")

    logger.warning("quiet")
    logger.error("loud")

    output = capsys.readouterr().out
    assert "quiet" not in output
    assert "loud" in output


def test_root_logger_is_left_alone(monkeypatch: pytest.MonkeyPatch) -> None:
    root_handlers = list(logging.getLogger().handlers)
    logging_module = _reload_logging(monkeypatch)
    logging_module.configure_logging("DEBUG")

    assert logging.getLogger().handlers == root_handlers
    assert logging.getLogger("atlasconvert").propagate is False


def test_import_leaves_records_to_host_handlers(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str], caplog: pytest.LogCaptureFixture) -> None:
    _reload_logging(monkeypatch)
    nodes = importlib.import_module("atlasconvert.adf.nodes")
    deep: dict = {"type": "text", "text": "x"}
    for _ in range(300):
        deep = {"type": "blockquote", "content": [deep]}

    with caplog.at_level(logging.WARNING):
        nodes.parse_document({"type": "doc", "content": [deep]})

    package_logger = logging.getLogger("atlasconvert")
    assert package_logger.propagate is True
    assert all(isinstance(handler, logging.NullHandler) for handler in package_logger.handlers)
    assert "truncated 1 subtree" in caplog.text
    assert capsys.readouterr().out == ""


def test_malformed_excerpt_length_falls_back_to_default(monkeypatch: pytest.MonkeyPatch) -> None:
    logging_module = _reload_logging(monkeypatch, ATLASCONVERT_LOG_EXCERPT="lots")

    assert logging_module._MAX_EXTRA_CHARS == 200
