"""Tests for logging configuration helpers."""

import logging

import pytest
import structlog
from canteen.utils.logging import (
    bind_request_context,
    clear_request_context,
    configure_logging,
    get_log_level,
)


@pytest.fixture(autouse=True)
def _clean_context():
    clear_request_context()
    yield
    clear_request_context()


class TestLogLevel:
    @pytest.mark.parametrize(
        "env, level",
        [("production", "INFO"), ("staging", "INFO"), ("development", "DEBUG"), ("test", "WARNING")],
    )
    def test_level_follows_environment(self, monkeypatch, env, level):
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        monkeypatch.delenv("ENVIRONMENT", raising=False)
        monkeypatch.setenv("PROTEAN_ENV", env)
        assert get_log_level() == level

    def test_explicit_level_wins(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "error")
        assert get_log_level() == "ERROR"


class TestRequestContext:
    def test_bound_values_are_merged(self):
        bind_request_context(path="/orders", actor_id="stu-001")
        assert structlog.contextvars.get_contextvars() == {"path": "/orders", "actor_id": "stu-001"}

    def test_none_values_are_skipped(self):
        bind_request_context(path="/orders", actor_id=None)
        assert structlog.contextvars.get_contextvars() == {"path": "/orders"}

    def test_clear(self):
        bind_request_context(path="/orders")
        clear_request_context()
        assert structlog.contextvars.get_contextvars() == {}


class TestConfigureLogging:
    def test_writes_rotating_files(self, tmp_path, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "WARNING")
        configure_logging(log_dir=str(tmp_path), log_file_prefix="canteen_test")

        logging.getLogger("canteen.rotation").error("boom")
        for handler in logging.getLogger().handlers:
            handler.flush()

        assert "boom" in (tmp_path / "canteen_test.log").read_text()
        assert "boom" in (tmp_path / "canteen_test_error.log").read_text()

        configure_logging()
