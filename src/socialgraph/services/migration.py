"""MigrationService: database schema versioning with Alembic.

Only the SQLite backend has a schema; every operation fails with
``UNAVAILABLE`` on the in-memory store.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from alembic import command
from alembic.script import ScriptDirectory
from alembic.util import CommandError
from sqlalchemy import inspect
from sqlalchemy.exc import SQLAlchemyError

from socialgraph.domain.errors import ErrorCode
from socialgraph.infrastructure.database.migrations import build_config, current_revision
from socialgraph.services.base import BaseService
from socialgraph.services.result import ServiceResult
from socialgraph.services.telemetry import traced

if TYPE_CHECKING:
    from socialgraph.infrastructure.sql import SqlGraphStore

logger = logging.getLogger(__name__)


class MigrationService(BaseService):
    """Handles database schema migrations via Alembic."""

    def _sql_store(self) -> SqlGraphStore | None:
        from socialgraph.infrastructure.sql import SqlGraphStore

        return self._store if isinstance(self._store, SqlGraphStore) else None

    def _memory_refusal(self, op: str) -> ServiceResult:
        return self._fail(
            op,
            ErrorCode.UNAVAILABLE,
            "Database commands need the sqlite backend",
            backend=self._store.backend,
        )

    @staticmethod
    def _head(db_url: str) -> str | None:
        return ScriptDirectory.from_config(build_config(db_url)).get_current_head()

    @traced
    def status(self) -> ServiceResult:
        """Report the stamped revision against the newest available one."""
        op = "db_status"
        store = self._sql_store()
        if store is None:
            return self._memory_refusal(op)

        try:
            current = current_revision(store.db_path)
            head = self._head(f"sqlite:///{store.db_path}")
        except (SQLAlchemyError, CommandError) as exc:
            return self._fail(op, ErrorCode.UNAVAILABLE, f"Failed to read revision: {exc}")

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "path": str(store.db_path),
                "current": current,
                "head": head,
                "up_to_date": current == head,
            },
        )

    @traced
    def init(self) -> ServiceResult:
        """Stamp a freshly created database at the head revision.

        Opening the store already created the tables; an existing,
        versioned database is left as it is.
        """
        op = "db_init"
        store = self._sql_store()
        if store is None:
            return self._memory_refusal(op)

        db_url = f"sqlite:///{store.db_path}"
        try:
            current = current_revision(store.db_path)
            stamped = current is None
            if stamped:
                command.stamp(build_config(db_url), "head")
                current = self._head(db_url)
        except (SQLAlchemyError, CommandError) as exc:
            return self._fail(op, ErrorCode.UNAVAILABLE, f"Failed to stamp database: {exc}")

        logger.debug("Initialized database at %s (revision %s)", store.db_path, current)
        return ServiceResult(
            ok=True,
            op=op,
            data={"path": str(store.db_path), "current": current, "stamped": stamped},
        )

    @traced
    def upgrade(self) -> ServiceResult:
        """Apply pending migrations.

        A database whose tables exist but carry no version is stamped at
        head instead of migrated.
        """
        op = "db_upgrade"
        store = self._sql_store()
        if store is None:
            return self._memory_refusal(op)

        db_url = f"sqlite:///{store.db_path}"
        cfg = build_config(db_url)
        try:
            before = current_revision(store.db_path)
            head = self._head(db_url)
            if before == head:
                return ServiceResult(
                    ok=True,
                    op=op,
                    data={
                        "path": str(store.db_path),
                        "applied": False,
                        "current": head,
                        "message": "Database is already up to date",
                    },
                )
            if before is None and "users" in inspect(store.engine).get_table_names():
                command.stamp(cfg, "head")
            else:
                command.upgrade(cfg, "head")
        except (SQLAlchemyError, CommandError) as exc:
            return self._fail(op, ErrorCode.UNAVAILABLE, f"Migration failed: {exc}")

        data: dict[str, Any] = {
            "path": str(store.db_path),
            "applied": True,
            "previous": before,
            "current": head,
        }
        return ServiceResult(ok=True, op=op, data=data)
