"""Tests for the SQLite backend's error translation and lifecycle."""

import sqlite3
from pathlib import Path

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from socialgraph.infrastructure.errors import (
    CheckViolationError,
    ConstraintViolationError,
    DuplicateKeyError,
    ForeignKeyViolationError,
    StoreBusyError,
    StoreUnavailableError,
    UniqueViolationError,
)
from socialgraph.infrastructure.sql import (
    SqlGraphStore,
    translate_integrity_error,
    translate_operational_error,
)


def _integrity(message: str) -> IntegrityError:
    return IntegrityError("INSERT ...", {}, Exception(message))


class TestTranslateIntegrityError:
    def test_single_column_unique(self) -> None:
        err = translate_integrity_error(_integrity("UNIQUE constraint failed: users.name"))
        assert type(err) is DuplicateKeyError
        assert err.constraint == "users.name"

    def test_multi_column_unique(self) -> None:
        err = translate_integrity_error(
            _integrity("UNIQUE constraint failed: friendships.user_lo, friendships.user_hi")
        )
        assert isinstance(err, UniqueViolationError)

    def test_foreign_key(self) -> None:
        err = translate_integrity_error(_integrity("FOREIGN KEY constraint failed"))
        assert isinstance(err, ForeignKeyViolationError)

    def test_check(self) -> None:
        err = translate_integrity_error(_integrity("CHECK constraint failed: ck_users_age_range"))
        assert isinstance(err, CheckViolationError)
        assert err.constraint == "ck_users_age_range"

    def test_other(self) -> None:
        err = translate_integrity_error(_integrity("NOT NULL constraint failed: users.age"))
        assert type(err) is ConstraintViolationError


class TestSqlGraphStore:
    def test_backend_and_path(self, sql_store: SqlGraphStore, tmp_path: Path) -> None:
        assert sql_store.backend == "sqlite"
        assert sql_store.db_path == tmp_path / "graph.db"

    def test_persists_across_instances(self, tmp_path: Path) -> None:
        first = SqlGraphStore(tmp_path / "graph.db")
        with first.transaction() as txn:
            txn.insert_user("a", "alice", 30, "t")
        first.close()

        second = SqlGraphStore(tmp_path / "graph.db")
        with second.transaction() as txn:
            assert txn.get_user("a") is not None
        second.close()

    def test_unopenable_path(self, tmp_path: Path) -> None:
        blocker = tmp_path / "file"
        blocker.write_text("not a directory")
        with pytest.raises(StoreUnavailableError):
            SqlGraphStore(blocker / "graph.db")


class TestTranslateOperationalError:
    def test_locked_is_busy(self) -> None:
        exc = OperationalError("INSERT ...", {}, Exception("database is locked"))
        assert isinstance(translate_operational_error(exc), StoreBusyError)

    def test_other_is_unavailable(self) -> None:
        exc = OperationalError("SELECT ...", {}, Exception("unable to open database file"))
        assert isinstance(translate_operational_error(exc), StoreUnavailableError)


class TestWriteTransactions:
    def _try_reserve(self, db_path: Path) -> bool:
        """Attempt to take the write lock from an independent connection."""
        other = sqlite3.connect(db_path, timeout=0, isolation_level=None)
        try:
            other.execute("BEGIN IMMEDIATE")
            other.execute("ROLLBACK")
            return True
        except sqlite3.OperationalError:
            return False
        finally:
            other.close()

    def test_write_takes_lock_before_first_statement(self, sql_store: SqlGraphStore) -> None:
        with sql_store.transaction(write=True) as txn:
            assert txn.get_user("a") is None
            assert not self._try_reserve(sql_store.db_path)
        assert self._try_reserve(sql_store.db_path)

    def test_read_leaves_lock_free(self, sql_store: SqlGraphStore) -> None:
        with sql_store.transaction() as txn:
            assert txn.get_user("a") is None
            assert self._try_reserve(sql_store.db_path)
