"""Shared pytest fixtures for socialgraph tests."""

from __future__ import annotations

import logging
from collections.abc import Generator
from pathlib import Path

import pytest
import structlog
from click.testing import CliRunner

from socialgraph.infrastructure.memory import MemoryGraphStore
from socialgraph.infrastructure.sql import SqlGraphStore
from socialgraph.infrastructure.store import GraphStore
from socialgraph.services.facade import SocialGraph
from socialgraph.services.telemetry import disable_telemetry


@pytest.fixture(autouse=True)
def _reset_global_state() -> Generator[None]:
    """Undo the logging and telemetry setup a CLI invocation leaves behind."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    app_level = logging.getLogger("socialgraph").level
    yield
    disable_telemetry()
    structlog.contextvars.clear_contextvars()
    root.handlers = handlers
    root.setLevel(level)
    logging.getLogger("socialgraph").setLevel(app_level)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def sql_store(tmp_path: Path) -> Generator[SqlGraphStore]:
    """SQLite store on a fresh database file."""
    store = SqlGraphStore(tmp_path / "graph.db")
    try:
        yield store
    finally:
        store.close()


@pytest.fixture
def memory_store() -> MemoryGraphStore:
    return MemoryGraphStore()


@pytest.fixture(params=["sqlite", "memory"])
def store(request: pytest.FixtureRequest, tmp_path: Path) -> Generator[GraphStore]:
    """Each backend in turn; tests using it run once per backend."""
    backend: GraphStore
    if request.param == "sqlite":
        backend = SqlGraphStore(tmp_path / "graph.db")
    else:
        backend = MemoryGraphStore()
    try:
        yield backend
    finally:
        backend.close()


@pytest.fixture
def graph(store: GraphStore) -> SocialGraph:
    """Façade over the parametrized store."""
    return SocialGraph(store)


@pytest.fixture
def _isolated_project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Run the CLI from an empty temp directory with no inherited config.

    Use via ``@pytest.mark.usefixtures("_isolated_project")`` on command
    test classes.
    """
    for var in ("SOCIALGRAPH_CONFIG", "SOCIALGRAPH_STORE__BACKEND", "SOCIALGRAPH_STORE__PATH"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)


def make_user(graph: SocialGraph, name: str, age: int = 30) -> str:
    """Create a user via the façade, asserting success, and return its id."""
    result = graph.create_user(name, age)
    assert result.ok, result.error
    return result.data["id"]
