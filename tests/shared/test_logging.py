"""Tests for process-wide logging setup."""

import logging

import pytest
import structlog
from shared.logging import (
    ERROR_LOG_FILE,
    LOG_FILE,
    build_handlers,
    configure_logging,
    log_level,
    renderer_processors,
)


@pytest.fixture()
def restore_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers = handlers
    root.setLevel(level)
    structlog.reset_defaults()


class TestLevels:
    def test_level_follows_environment(self, monkeypatch):
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        assert log_level("production") == "INFO"
        assert log_level("development") == "DEBUG"
        assert log_level("test") == "WARNING"
        assert log_level("unknown") == "INFO"

    def test_explicit_level_wins(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "error")
        assert log_level("development") == "ERROR"


class TestRendering:
    def test_production_renders_json(self):
        assert isinstance(renderer_processors("production")[-1], structlog.processors.JSONRenderer)

    def test_development_renders_for_the_console(self):
        assert isinstance(renderer_processors("development")[-1], structlog.dev.ConsoleRenderer)


class TestHandlers:
    def test_console_only_without_log_dir(self):
        handlers = build_handlers("test", "WARNING")
        assert len(handlers) == 1
        assert isinstance(handlers[0].formatter, structlog.stdlib.ProcessorFormatter)

    def test_log_dir_adds_rotating_files(self, tmp_path):
        handlers = build_handlers("test", "WARNING", str(tmp_path / "logs"))
        try:
            assert len(handlers) == 3
            assert handlers[2].level == logging.ERROR
            assert (tmp_path / "logs").is_dir()
        finally:
            for handler in handlers:
                handler.close()


def test_stdlib_and_structlog_records_reach_the_log_files(tmp_path, monkeypatch, restore_logging):
    monkeypatch.setenv("PROTEAN_ENV", "production")
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    configure_logging(str(tmp_path))

    logging.getLogger("bakery.stdlib").warning("stdlib record")
    structlog.get_logger("bakery.test").error("order_failed", order_id="ord-1")
    for handler in logging.getLogger().handlers:
        handler.flush()

    everything = (tmp_path / LOG_FILE).read_text(encoding="utf-8")
    errors = (tmp_path / ERROR_LOG_FILE).read_text(encoding="utf-8")
    assert '"event": "stdlib record"' in everything
    assert '"order_id": "ord-1"' in everything
    assert "order_failed" in errors
    assert "stdlib record" not in errors
