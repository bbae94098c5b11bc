"""MemoryGraphStore: in-process backend for degraded mode and tests.

Same contract as the SQL store, same error types. State lives on the
store instance, never at module level. A transaction takes the store
lock, works on a private copy of the state, and publishes the copy only
when the block exits normally, so a failed block leaves nothing behind.

Constraints mirrored from the SQL schema:

- ``users.id`` and ``users.name`` unique; ``hobbies.id`` and ``hobbies.name`` unique
- ``friendships (user_lo, user_hi)`` unique, ``user_lo < user_hi``
- friendship endpoints and link rows must reference existing rows
- deleting a user cascades its hobby links but fails while an edge references it
"""

from __future__ import annotations

import threading
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any

from socialgraph.domain.ids import new_id
from socialgraph.infrastructure.errors import (
    CheckViolationError,
    DuplicateKeyError,
    ForeignKeyViolationError,
    RecordNotFoundError,
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


@dataclass
class _MemoryState:
    users: dict[str, UserRecord] = field(default_factory=dict)
    hobbies: dict[str, HobbyRecord] = field(default_factory=dict)
    links: set[tuple[str, str]] = field(default_factory=set)  # (user_id, hobby_id)
    edges: dict[tuple[str, str], FriendshipRecord] = field(default_factory=dict)

    def copy(self) -> _MemoryState:
        # Records are frozen, so shallow container copies are enough.
        return _MemoryState(
            users=dict(self.users),
            hobbies=dict(self.hobbies),
            links=set(self.links),
            edges=dict(self.edges),
        )


class MemoryStoreTransaction(StoreTransaction):
    """Primitives over a private working copy of the store state."""

    def __init__(self, state: _MemoryState) -> None:
        self._state = state

    # -- users ---------------------------------------------------------

    def insert_user(self, user_id: str, name: str, age: int, created_at: str) -> None:
        if user_id in self._state.users:
            raise DuplicateKeyError(f"duplicate users.id={user_id}", constraint="users.id")
        if self.find_user_by_name(name) is not None:
            raise DuplicateKeyError(f"duplicate users.name={name}", constraint="users.name")
        if not 0 < age < 150:
            raise CheckViolationError(f"age out of range: {age}", constraint="ck_users_age_range")
        self._state.users[user_id] = UserRecord(
            id=user_id, name=name, age=age, created_at=created_at
        )

    def get_user(self, user_id: str) -> UserRecord | None:
        return self._state.users.get(user_id)

    def find_user_by_name(self, name: str) -> UserRecord | None:
        for record in self._state.users.values():
            if record.name == name:
                return record
        return None

    def update_user(self, user_id: str, fields: dict[str, Any]) -> None:
        current = self._state.users.get(user_id)
        if current is None:
            raise RecordNotFoundError(f"users.id={user_id}")
        changes = {k: v for k, v in fields.items() if k in ("name", "age")}
        if "name" in changes:
            holder = self.find_user_by_name(changes["name"])
            if holder is not None and holder.id != user_id:
                raise DuplicateKeyError(
                    f"duplicate users.name={changes['name']}", constraint="users.name"
                )
        self._state.users[user_id] = replace(current, **changes)

    def delete_user(self, user_id: str) -> None:
        if user_id not in self._state.users:
            raise RecordNotFoundError(f"users.id={user_id}")
        if any(user_id in pair for pair in self._state.edges):
            raise ForeignKeyViolationError(f"friendships reference users.id={user_id}")
        self._state.links = {link for link in self._state.links if link[0] != user_id}
        del self._state.users[user_id]

    def list_all_users(self) -> list[UserRecord]:
        return sorted(self._state.users.values(), key=lambda u: (u.created_at, u.id))

    # -- friendships ---------------------------------------------------

    def insert_friendship(
        self, friendship_id: str, user_lo: str, user_hi: str, created_at: str
    ) -> None:
        if not user_lo < user_hi:
            raise CheckViolationError(
                f"non-canonical pair ({user_lo}, {user_hi})",
                constraint="ck_friendships_canonical",
            )
        if (user_lo, user_hi) in self._state.edges:
            raise UniqueViolationError(
                f"duplicate friendship ({user_lo}, {user_hi})",
                constraint="friendships.user_lo, friendships.user_hi",
            )
        if user_lo not in self._state.users or user_hi not in self._state.users:
            raise ForeignKeyViolationError(f"friendship endpoint missing: {user_lo}, {user_hi}")
        self._state.edges[(user_lo, user_hi)] = FriendshipRecord(
            id=friendship_id, user_lo=user_lo, user_hi=user_hi, created_at=created_at
        )

    def get_friendship(self, user_lo: str, user_hi: str) -> FriendshipRecord | None:
        return self._state.edges.get((user_lo, user_hi))

    def delete_friendship(self, user_lo: str, user_hi: str) -> int:
        return 1 if self._state.edges.pop((user_lo, user_hi), None) is not None else 0

    def list_friends_for_user(self, user_id: str) -> list[str]:
        others: set[str] = set()
        for lo, hi in self._state.edges:
            if lo == user_id:
                others.add(hi)
            elif hi == user_id:
                others.add(lo)
        return sorted(others)

    def list_all_friendships(self) -> list[FriendshipRecord]:
        return [self._state.edges[k] for k in sorted(self._state.edges)]

    # -- hobbies -------------------------------------------------------

    def find_hobby_by_name(self, name: str) -> HobbyRecord | None:
        for record in self._state.hobbies.values():
            if record.name == name:
                return record
        return None

    def find_or_create_hobby(self, name: str) -> tuple[str, bool]:
        existing = self.find_hobby_by_name(name)
        if existing is not None:
            return existing.id, False
        hobby_id = new_id()
        self._state.hobbies[hobby_id] = HobbyRecord(id=hobby_id, name=name)
        return hobby_id, True

    def upsert_user_hobby(self, user_id: str, hobby_id: str) -> bool:
        if user_id not in self._state.users or hobby_id not in self._state.hobbies:
            raise ForeignKeyViolationError(f"user_hobbies reference missing: {user_id}, {hobby_id}")
        if (user_id, hobby_id) in self._state.links:
            return False
        self._state.links.add((user_id, hobby_id))
        return True

    def delete_user_hobby(self, user_id: str, hobby_id: str) -> int:
        if (user_id, hobby_id) not in self._state.links:
            return 0
        self._state.links.discard((user_id, hobby_id))
        return 1

    def delete_user_hobbies(self, user_id: str) -> int:
        doomed = {link for link in self._state.links if link[0] == user_id}
        self._state.links -= doomed
        return len(doomed)

    def list_hobbies_for_user(self, user_id: str) -> list[str]:
        return sorted(
            self._state.hobbies[hobby_id].name
            for uid, hobby_id in self._state.links
            if uid == user_id
        )

    def hobby_ids_for_users(self, user_ids: Iterable[str]) -> dict[str, set[str]]:
        result: dict[str, set[str]] = {uid: set() for uid in user_ids}
        for uid, hobby_id in self._state.links:
            if uid in result:
                result[uid].add(hobby_id)
        return result

    def list_all_hobbies(self) -> list[tuple[HobbyRecord, int]]:
        counts: dict[str, int] = {}
        for _, hobby_id in self._state.links:
            counts[hobby_id] = counts.get(hobby_id, 0) + 1
        records = sorted(self._state.hobbies.values(), key=lambda h: h.name)
        return [(h, counts.get(h.id, 0)) for h in records]

    # -- projections ---------------------------------------------------

    def load_snapshot(self) -> GraphSnapshot:
        links: dict[str, set[str]] = {}
        for uid, hobby_id in self._state.links:
            links.setdefault(uid, set()).add(hobby_id)
        return GraphSnapshot(
            users=self.list_all_users(),
            hobby_names={h.id: h.name for h in self._state.hobbies.values()},
            user_hobbies=links,
            friendships=self.list_all_friendships(),
        )


class MemoryGraphStore(GraphStore):
    """In-process store guarded by one re-entrant lock."""

    backend = "memory"

    def __init__(self) -> None:
        self._state = _MemoryState()
        self._lock = threading.RLock()

    @contextmanager
    def transaction(self, *, write: bool = False) -> Iterator[MemoryStoreTransaction]:
        """Hold the lock, mutate a copy, publish it on success.

        Readers and writers share one lock, so *write* changes nothing here.
        """
        with self._lock:
            working = self._state.copy()
            yield MemoryStoreTransaction(working)
            self._state = working
