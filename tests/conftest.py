"""Shared pytest fixtures and test helpers for weaveplan tests."""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator
from pathlib import Path

import pytest
from click.testing import CliRunner

from weaveplan.config.logging import HANDLER_NAME
from weaveplan.domain.elements import TypeDescription, constructor, method
from weaveplan.plugins.builtins.mongodb import ENHANCE_CLASS


class CountingResolver:
    """Resolver that records every call; resolves names in *present*."""

    def __init__(self, present: set[str] | None = None, *, delay: float = 0.0) -> None:
        self.present = present or set()
        self.delay = delay
        self.calls: list[str] = []
        self._lock = threading.Lock()

    def __call__(self, type_name: str) -> bool:
        with self._lock:
            self.calls.append(type_name)
        if self.delay:
            threading.Event().wait(self.delay)
        return type_name in self.present


@pytest.fixture(autouse=True)
def _drop_cli_log_handler() -> Iterator[None]:
    """CLI runs install a handler bound to the runner's stderr; remove it."""
    weave = logging.getLogger("weaveplan")
    level = weave.level
    yield
    root = logging.getLogger()
    for handler in [h for h in root.handlers if h.get_name() == HANDLER_NAME]:
        root.removeHandler(handler)
    weave.setLevel(level)


@pytest.fixture
def counting_resolver() -> type[CountingResolver]:
    """The CountingResolver class, for tests that build their own."""
    return CountingResolver


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def project_root(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolated CWD with no weaveplan.toml and no config env override."""
    monkeypatch.delenv("WEAVEPLAN_CONFIG", raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def dbcollection() -> TypeDescription:
    """A trimmed ``com.mongodb.DBCollection`` with overloaded operations."""
    return TypeDescription(
        name=ENHANCE_CLASS,
        constructors=(constructor("com.mongodb.DB", "java.lang.String"),),
        methods=(
            method("find"),
            method("find", "com.mongodb.DBObject"),
            method("insert", "java.util.List", "com.mongodb.WriteConcern"),
            method(
                "insert",
                "java.util.List",
                "com.mongodb.WriteConcern",
                "com.mongodb.DBEncoder",
            ),
            method("group", "com.mongodb.DBObject", "boolean"),
            method("group", "com.mongodb.GroupCommand", "com.mongodb.DBObject"),
            method("getName"),
        ),
    )
