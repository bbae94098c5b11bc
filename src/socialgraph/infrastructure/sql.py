"""SqlGraphStore: the SQLite backend of the persistence contract.

SQLAlchemy Core (not ORM): every primitive is one or two statements on
the transaction's connection. Driver errors are translated once, at the
transaction boundary, so primitives stay free of try/except noise.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

from sqlalchemy import delete, func, insert, or_, select, update
from sqlalchemy.exc import IntegrityError, OperationalError

from socialgraph.domain.ids import new_id
from socialgraph.infrastructure.database.engine import BEGIN_MODE_OPTION, init_database
from socialgraph.infrastructure.database.schema import (
    friendships,
    hobbies,
    user_hobbies,
    users,
)
from socialgraph.infrastructure.errors import (
    CheckViolationError,
    ConstraintViolationError,
    DuplicateKeyError,
    ForeignKeyViolationError,
    RecordNotFoundError,
    StoreBusyError,
    StoreUnavailableError,
    UniqueViolationError,
)
from socialgraph.infrastructure.store import (
    FriendshipRecord,
    GraphSnapshot,
    GraphStore,
    HobbyRecord,
    StoreTransaction,
    UserRecord,
)

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

    from sqlalchemy import Connection
    from sqlalchemy.engine import Engine

logger = logging.getLogger(__name__)


def translate_integrity_error(exc: IntegrityError) -> ConstraintViolationError:
    """Map a SQLite integrity failure onto the store's error types.

    SQLite reports the violated columns in the message, e.g.
    ``UNIQUE constraint failed: friendships.user_lo, friendships.user_hi``.
    """
    message = str(exc.orig) if exc.orig is not None else str(exc)
    _, _, detail = message.partition(":")
    detail = detail.strip()

    if message.startswith("UNIQUE constraint failed"):
        if "," in detail:
            return UniqueViolationError(message, constraint=detail)
        return DuplicateKeyError(message, constraint=detail)
    if message.startswith("FOREIGN KEY constraint failed"):
        return ForeignKeyViolationError(message)
    if message.startswith("CHECK constraint failed"):
        return CheckViolationError(message, constraint=detail)
    return ConstraintViolationError(message, constraint=detail)


def translate_operational_error(exc: OperationalError) -> StoreBusyError | StoreUnavailableError:
    """Split SQLite runtime failures into lock contention and an unreachable store."""
    message = str(exc.orig) if exc.orig is not None else str(exc)
    if "locked" in message or "busy" in message:
        logger.info("Store busy, transaction rolled back: %s", message)
        return StoreBusyError(message)
    return StoreUnavailableError(message)


def _user(row: Any) -> UserRecord:
    return UserRecord(id=row.id, name=row.name, age=row.age, created_at=row.created_at)


def _friendship(row: Any) -> FriendshipRecord:
    return FriendshipRecord(
        id=row.id,
        user_lo=row.user_lo,
        user_hi=row.user_hi,
        created_at=row.created_at,
    )


class SqlStoreTransaction(StoreTransaction):
    """Primitives bound to one open SQLAlchemy connection."""

    def __init__(self, conn: Connection) -> None:
        self.conn = conn

    # -- users ---------------------------------------------------------

    def insert_user(self, user_id: str, name: str, age: int, created_at: str) -> None:
        self.conn.execute(
            insert(users).values(id=user_id, name=name, age=age, created_at=created_at)
        )

    def get_user(self, user_id: str) -> UserRecord | None:
        row = self.conn.execute(select(users).where(users.c.id == user_id)).first()
        return _user(row) if row is not None else None

    def find_user_by_name(self, name: str) -> UserRecord | None:
        row = self.conn.execute(select(users).where(users.c.name == name)).first()
        return _user(row) if row is not None else None

    def update_user(self, user_id: str, fields: dict[str, Any]) -> None:
        allowed = {k: v for k, v in fields.items() if k in ("name", "age")}
        if not allowed:
            if self.get_user(user_id) is None:
                raise RecordNotFoundError(f"users.id={user_id}")
            return
        result = self.conn.execute(update(users).where(users.c.id == user_id).values(**allowed))
        if result.rowcount == 0:
            raise RecordNotFoundError(f"users.id={user_id}")

    def delete_user(self, user_id: str) -> None:
        result = self.conn.execute(delete(users).where(users.c.id == user_id))
        if result.rowcount == 0:
            raise RecordNotFoundError(f"users.id={user_id}")

    def list_all_users(self) -> list[UserRecord]:
        rows = self.conn.execute(select(users).order_by(users.c.created_at, users.c.id))
        return [_user(r) for r in rows]

    # -- friendships ---------------------------------------------------

    def insert_friendship(
        self, friendship_id: str, user_lo: str, user_hi: str, created_at: str
    ) -> None:
        self.conn.execute(
            insert(friendships).values(
                id=friendship_id,
                user_lo=user_lo,
                user_hi=user_hi,
                created_at=created_at,
            )
        )

    def get_friendship(self, user_lo: str, user_hi: str) -> FriendshipRecord | None:
        row = self.conn.execute(
            select(friendships).where(
                friendships.c.user_lo == user_lo,
                friendships.c.user_hi == user_hi,
            )
        ).first()
        return _friendship(row) if row is not None else None

    def delete_friendship(self, user_lo: str, user_hi: str) -> int:
        result = self.conn.execute(
            delete(friendships).where(
                friendships.c.user_lo == user_lo,
                friendships.c.user_hi == user_hi,
            )
        )
        return int(result.rowcount)

    def list_friends_for_user(self, user_id: str) -> list[str]:
        rows = self.conn.execute(
            select(friendships.c.user_lo, friendships.c.user_hi).where(
                or_(friendships.c.user_lo == user_id, friendships.c.user_hi == user_id)
            )
        )
        others = {r.user_hi if r.user_lo == user_id else r.user_lo for r in rows}
        return sorted(others)

    def list_all_friendships(self) -> list[FriendshipRecord]:
        rows = self.conn.execute(
            select(friendships).order_by(friendships.c.user_lo, friendships.c.user_hi)
        )
        return [_friendship(r) for r in rows]

    # -- hobbies -------------------------------------------------------

    def find_hobby_by_name(self, name: str) -> HobbyRecord | None:
        row = self.conn.execute(select(hobbies).where(hobbies.c.name == name)).first()
        return HobbyRecord(id=row.id, name=row.name) if row is not None else None

    def find_or_create_hobby(self, name: str) -> tuple[str, bool]:
        existing = self.find_hobby_by_name(name)
        if existing is not None:
            return existing.id, False
        hobby_id = new_id()
        self.conn.execute(insert(hobbies).values(id=hobby_id, name=name))
        return hobby_id, True

    def upsert_user_hobby(self, user_id: str, hobby_id: str) -> bool:
        existing = self.conn.execute(
            select(user_hobbies.c.user_id).where(
                user_hobbies.c.user_id == user_id,
                user_hobbies.c.hobby_id == hobby_id,
            )
        ).first()
        if existing is not None:
            return False
        self.conn.execute(insert(user_hobbies).values(user_id=user_id, hobby_id=hobby_id))
        return True

    def delete_user_hobby(self, user_id: str, hobby_id: str) -> int:
        result = self.conn.execute(
            delete(user_hobbies).where(
                user_hobbies.c.user_id == user_id,
                user_hobbies.c.hobby_id == hobby_id,
            )
        )
        return int(result.rowcount)

    def delete_user_hobbies(self, user_id: str) -> int:
        result = self.conn.execute(delete(user_hobbies).where(user_hobbies.c.user_id == user_id))
        return int(result.rowcount)

    def list_hobbies_for_user(self, user_id: str) -> list[str]:
        rows = self.conn.execute(
            select(hobbies.c.name)
            .select_from(hobbies.join(user_hobbies, hobbies.c.id == user_hobbies.c.hobby_id))
            .where(user_hobbies.c.user_id == user_id)
            .order_by(hobbies.c.name)
        )
        return [r.name for r in rows]

    def hobby_ids_for_users(self, user_ids: Iterable[str]) -> dict[str, set[str]]:
        wanted = set(user_ids)
        result: dict[str, set[str]] = {uid: set() for uid in wanted}
        if not wanted:
            return result
        rows = self.conn.execute(
            select(user_hobbies.c.user_id, user_hobbies.c.hobby_id).where(
                user_hobbies.c.user_id.in_(wanted)
            )
        )
        for r in rows:
            result[r.user_id].add(r.hobby_id)
        return result

    def list_all_hobbies(self) -> list[tuple[HobbyRecord, int]]:
        user_count = func.count(user_hobbies.c.user_id).label("user_count")
        rows = self.conn.execute(
            select(hobbies.c.id, hobbies.c.name, user_count)
            .select_from(
                hobbies.outerjoin(user_hobbies, hobbies.c.id == user_hobbies.c.hobby_id)
            )
            .group_by(hobbies.c.id, hobbies.c.name)
            .order_by(hobbies.c.name)
        )
        return [(HobbyRecord(id=r.id, name=r.name), int(r.user_count)) for r in rows]

    # -- projections ---------------------------------------------------

    def load_snapshot(self) -> GraphSnapshot:
        """Read every record set on this connection (one BEGIN, one snapshot)."""
        user_rows = self.list_all_users()
        hobby_names = {r.id: r.name for r in self.conn.execute(select(hobbies))}
        links: dict[str, set[str]] = {}
        for r in self.conn.execute(select(user_hobbies)):
            links.setdefault(r.user_id, set()).add(r.hobby_id)
        # Only edges whose endpoints are both visible in this snapshot.
        lo_user = users.alias("lo_user")
        hi_user = users.alias("hi_user")
        edge_rows = self.conn.execute(
            select(friendships)
            .select_from(
                friendships.join(lo_user, lo_user.c.id == friendships.c.user_lo).join(
                    hi_user, hi_user.c.id == friendships.c.user_hi
                )
            )
            .order_by(friendships.c.user_lo, friendships.c.user_hi)
        )
        return GraphSnapshot(
            users=user_rows,
            hobby_names=hobby_names,
            user_hobbies=links,
            friendships=[_friendship(r) for r in edge_rows],
        )


class SqlGraphStore(GraphStore):
    """SQLite-backed store. One engine per store, one connection per transaction."""

    backend = "sqlite"

    def __init__(self, db_path: Path) -> None:
        self._db_path = db_path
        try:
            self._engine: Engine = init_database(db_path)
        except (OperationalError, OSError) as exc:
            raise StoreUnavailableError(f"Cannot open database at {db_path}: {exc}") from exc
        logger.debug("Opened SQLite store at %s", db_path)

    @property
    def engine(self) -> Engine:
        """The underlying SQLAlchemy engine (for direct access when needed)."""
        return self._engine

    @property
    def db_path(self) -> Path:
        return self._db_path

    @contextmanager
    def transaction(self, *, write: bool = False) -> Iterator[SqlStoreTransaction]:
        """Run the block inside one SQLite transaction.

        Writers open with ``BEGIN IMMEDIATE``. Commits on normal exit;
        rolls back and re-raises as a store error on
        :class:`IntegrityError` or :class:`OperationalError`.
        """
        try:
            with self._engine.connect() as conn:
                if write:
                    conn.execution_options(**{BEGIN_MODE_OPTION: "IMMEDIATE"})
                with conn.begin():
                    yield SqlStoreTransaction(conn)
        except IntegrityError as exc:
            translated = translate_integrity_error(exc)
            logger.debug("Integrity error translated to %s: %s", type(translated).__name__, exc)
            raise translated from exc
        except OperationalError as exc:
            raise translate_operational_error(exc) from exc

    def close(self) -> None:
        self._engine.dispose()


