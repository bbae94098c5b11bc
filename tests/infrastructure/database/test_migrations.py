"""Tests for the Alembic migration helpers."""

from pathlib import Path

from sqlalchemy import create_engine, inspect

from socialgraph.infrastructure.database.engine import init_database
from socialgraph.infrastructure.database.migrations import (
    current_revision,
    stamp_head,
    upgrade_head,
)


class TestMigrations:
    def test_fresh_file_is_unversioned(self, tmp_path: Path) -> None:
        db_path = tmp_path / "graph.db"
        init_database(db_path).dispose()
        assert current_revision(db_path) is None

    def test_stamp_head(self, tmp_path: Path) -> None:
        db_path = tmp_path / "graph.db"
        init_database(db_path).dispose()
        stamp_head(db_path)
        assert current_revision(db_path) == "001_baseline"

    def test_upgrade_creates_schema(self, tmp_path: Path) -> None:
        db_path = tmp_path / "empty.db"
        upgrade_head(db_path)
        assert current_revision(db_path) == "001_baseline"
        engine = create_engine(f"sqlite:///{db_path}")
        tables = set(inspect(engine).get_table_names())
        engine.dispose()
        assert {"users", "hobbies", "user_hobbies", "friendships"} <= tables

    def test_upgrade_is_idempotent(self, tmp_path: Path) -> None:
        db_path = tmp_path / "empty.db"
        upgrade_head(db_path)
        upgrade_head(db_path)
        assert current_revision(db_path) == "001_baseline"
