"""Tests for structlog configuration."""

from __future__ import annotations

import io
import json
import logging
from collections.abc import Generator

import pytest
import structlog

from weaveplan.config.logging import HANDLER_NAME, configure_logging


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """Restore root logger state after each test."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    weave = logging.getLogger("weaveplan")
    weave_level = weave.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    weave.setLevel(weave_level)


class TestConfigureLogging:
    def test_verbose_enables_debug(self) -> None:
        configure_logging(verbose=True, log_json=False)
        assert logging.getLogger("weaveplan").level == logging.DEBUG
        assert logging.getLogger().level == logging.WARNING

    def test_non_verbose_sets_warning(self) -> None:
        configure_logging(verbose=False, log_json=False)
        assert logging.getLogger("weaveplan").level == logging.WARNING

    def test_json_mode_output(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        log = structlog.get_logger("weaveplan.test")
        log.warning("json test", answer=42)
        captured = capfd.readouterr()
        parsed = json.loads(captured.err.strip())
        assert parsed["event"] == "json test"
        assert parsed["answer"] == 42
        assert parsed["level"] == "warning"
        assert parsed["logger"] == "weaveplan.test"
        assert "timestamp" in parsed

    def test_stdlib_logger_gets_structured_fields(
        self, capfd: pytest.CaptureFixture[str]
    ) -> None:
        configure_logging(verbose=True, log_json=True)

        logging.getLogger("weaveplan.plugins.manager").debug("Registered plugin: sample")

        captured = capfd.readouterr()
        parsed = json.loads(captured.err.strip())
        assert parsed["event"] == "Registered plugin: sample"
        assert parsed["level"] == "debug"
        assert parsed["logger"] == "weaveplan.plugins.manager"

    def test_idempotent_calls(self) -> None:
        """Multiple configure_logging calls don't stack handlers."""
        configure_logging(verbose=True, log_json=False)
        configure_logging(verbose=True, log_json=True)
        ours = [h for h in logging.getLogger().handlers if h.get_name() == HANDLER_NAME]
        assert len(ours) == 1

    def test_foreign_handlers_kept(self) -> None:
        foreign = logging.NullHandler()
        logging.getLogger().addHandler(foreign)
        configure_logging()
        assert foreign in logging.getLogger().handlers

    def test_explicit_stream(self) -> None:
        buffer = io.StringIO()
        configure_logging(log_json=True, stream=buffer)
        logging.getLogger("weaveplan.services.plan").warning("to buffer")
        assert json.loads(buffer.getvalue())["event"] == "to buffer"

    def test_bound_context_merged(self) -> None:
        buffer = io.StringIO()
        configure_logging(verbose=True, log_json=True, stream=buffer)
        with structlog.contextvars.bound_contextvars(target="com.mongodb.DBCollection"):
            logging.getLogger("weaveplan.services.plan").debug("Planned")
        assert json.loads(buffer.getvalue())["target"] == "com.mongodb.DBCollection"

    def test_pluggy_stays_quiet(self) -> None:
        configure_logging(verbose=True)
        assert logging.getLogger("pluggy").level == logging.WARNING
