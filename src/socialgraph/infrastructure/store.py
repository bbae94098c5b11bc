"""GraphStore: the persistence contract the graph services depend on.

A store hands out transactions; every primitive lives on the
:class:`StoreTransaction` it yields, so a service that needs several reads
and writes gets them all inside one consistent unit:

- On normal exit the transaction commits.
- On any exception it rolls back and the exception propagates, translated
  into a :mod:`socialgraph.infrastructure.errors` type.

Two backends implement the contract: :class:`~socialgraph.infrastructure.sql.SqlGraphStore`
(SQLite via SQLAlchemy Core) and
:class:`~socialgraph.infrastructure.memory.MemoryGraphStore` (in-process,
degraded mode). Stores hold no business rules.
"""

from __future__ import annotations

import abc
from contextlib import AbstractContextManager
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Iterable

    from socialgraph.config.settings import SocialGraphSettings


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class UserRecord:
    """A stored user row."""

    id: str
    name: str
    age: int
    created_at: str


@dataclass(frozen=True)
class HobbyRecord:
    """A stored hobby row."""

    id: str
    name: str


@dataclass(frozen=True)
class FriendshipRecord:
    """A stored friendship row, always in canonical ``(lo, hi)`` orientation."""

    id: str
    user_lo: str
    user_hi: str
    created_at: str


@dataclass(frozen=True)
class GraphSnapshot:
    """Every record set read at one consistent point in time."""

    users: list[UserRecord] = field(default_factory=list)
    hobby_names: dict[str, str] = field(default_factory=dict)
    user_hobbies: dict[str, set[str]] = field(default_factory=dict)
    friendships: list[FriendshipRecord] = field(default_factory=list)

    def hobbies_of(self, user_id: str) -> list[str]:
        """Sorted hobby names attached to *user_id*."""
        ids = self.user_hobbies.get(user_id, set())
        return sorted(self.hobby_names[h] for h in ids if h in self.hobby_names)


# ---------------------------------------------------------------------------
# Contract
# ---------------------------------------------------------------------------


class StoreTransaction(abc.ABC):
    """Set-oriented primitives available inside one store transaction.

    Keyed lookups return ``None`` when nothing matches. Keyed writes raise
    :class:`~socialgraph.infrastructure.errors.RecordNotFoundError` when
    nothing matches, and a
    :class:`~socialgraph.infrastructure.errors.ConstraintViolationError`
    subtype when a constraint rejects them.
    """

    # -- users ---------------------------------------------------------

    @abc.abstractmethod
    def insert_user(self, user_id: str, name: str, age: int, created_at: str) -> None: ...

    @abc.abstractmethod
    def get_user(self, user_id: str) -> UserRecord | None: ...

    @abc.abstractmethod
    def find_user_by_name(self, name: str) -> UserRecord | None: ...

    @abc.abstractmethod
    def update_user(self, user_id: str, fields: dict[str, Any]) -> None: ...

    @abc.abstractmethod
    def delete_user(self, user_id: str) -> None: ...

    @abc.abstractmethod
    def list_all_users(self) -> list[UserRecord]: ...

    # -- friendships ---------------------------------------------------

    @abc.abstractmethod
    def insert_friendship(
        self, friendship_id: str, user_lo: str, user_hi: str, created_at: str
    ) -> None: ...

    @abc.abstractmethod
    def get_friendship(self, user_lo: str, user_hi: str) -> FriendshipRecord | None: ...

    @abc.abstractmethod
    def delete_friendship(self, user_lo: str, user_hi: str) -> int: ...

    @abc.abstractmethod
    def list_friends_for_user(self, user_id: str) -> list[str]: ...

    @abc.abstractmethod
    def list_all_friendships(self) -> list[FriendshipRecord]: ...

    # -- hobbies -------------------------------------------------------

    @abc.abstractmethod
    def find_hobby_by_name(self, name: str) -> HobbyRecord | None: ...

    @abc.abstractmethod
    def find_or_create_hobby(self, name: str) -> tuple[str, bool]:
        """Return ``(hobby_id, created)`` for *name*, inserting it if absent."""

    @abc.abstractmethod
    def upsert_user_hobby(self, user_id: str, hobby_id: str) -> bool:
        """Link a user to a hobby. Returns False if the link already existed."""

    @abc.abstractmethod
    def delete_user_hobby(self, user_id: str, hobby_id: str) -> int: ...

    @abc.abstractmethod
    def delete_user_hobbies(self, user_id: str) -> int: ...

    @abc.abstractmethod
    def list_hobbies_for_user(self, user_id: str) -> list[str]: ...

    @abc.abstractmethod
    def hobby_ids_for_users(self, user_ids: Iterable[str]) -> dict[str, set[str]]:
        """Map each requested user id to its hobby ids (empty set if none)."""

    @abc.abstractmethod
    def list_all_hobbies(self) -> list[tuple[HobbyRecord, int]]:
        """Every hobby with the number of users attached to it."""

    # -- projections ---------------------------------------------------

    @abc.abstractmethod
    def load_snapshot(self) -> GraphSnapshot: ...


class GraphStore(abc.ABC):
    """A backend that hands out :class:`StoreTransaction` units."""

    backend: str = ""

    @abc.abstractmethod
    def transaction(self, *, write: bool = False) -> AbstractContextManager[StoreTransaction]:
        """Open a transaction; commit on normal exit, roll back on error.

        Pass ``write=True`` when the block may mutate: the backend then
        serializes it against other writers from its first read.
        """

    def close(self) -> None:  # noqa: B027
        """Release backend resources. No-op by default."""


def open_store(settings: SocialGraphSettings) -> GraphStore:
    """Build the backend selected by ``settings.store.backend``."""
    if settings.store.backend == "memory":
        from socialgraph.infrastructure.memory import MemoryGraphStore

        return MemoryGraphStore()

    from socialgraph.infrastructure.sql import SqlGraphStore

    return SqlGraphStore(settings.db_path)
