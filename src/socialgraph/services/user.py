"""UserService: user lifecycle and the aggregated user view.

Pipeline per mutation: VALIDATE → CHECK → APPLY → RESPOND, all inside
one store transaction. Deletion never cascades friendships: a user with
any incident edge is refused with ``HAS_ACTIVE_EDGES``.
"""

from __future__ import annotations

import logging
from typing import Any

from socialgraph.domain.errors import ErrorCode
from socialgraph.domain.ids import new_id
from socialgraph.domain.validation import check_user_fields
from socialgraph.infrastructure.errors import (
    DuplicateKeyError,
    ForeignKeyViolationError,
    RecordNotFoundError,
    StoreError,
)
from socialgraph.infrastructure.graph.engine import GraphEngine
from socialgraph.services._helpers import now_iso, user_view, user_view_from_graph
from socialgraph.services.base import BaseService
from socialgraph.services.result import ServiceResult
from socialgraph.services.telemetry import trace_span, traced

logger = logging.getLogger(__name__)


def _is_name_collision(exc: DuplicateKeyError) -> bool:
    return exc.constraint.endswith("users.name")


class UserService(BaseService):
    """Create, read, update, delete, and list users."""

    # ------------------------------------------------------------------
    # create
    # ------------------------------------------------------------------

    @traced
    def create(self, name: str, age: int) -> ServiceResult:
        """Create a user and return its aggregated view.

        A new user has no friends, no hobbies, and a score of 0.0.
        """
        op = "create_user"
        issue = check_user_fields(name=name, age=age, require_all=True)
        if issue is not None:
            return self._invalid(op, issue)

        try:
            with self._store.transaction(write=True) as txn:
                if txn.find_user_by_name(name) is not None:
                    return self._duplicate_name(op, name)

                user_id = new_id()
                txn.insert_user(user_id, name, age, now_iso())
                record = txn.get_user(user_id)
                assert record is not None
                view = user_view(txn, record)
        except DuplicateKeyError as exc:
            if _is_name_collision(exc):
                return self._duplicate_name(op, name)
            return self._store_failure(op, exc)
        except StoreError as exc:
            return self._store_failure(op, exc)

        logger.debug("Created user %s (%s)", view["id"], name)
        return ServiceResult(ok=True, op=op, data=view)

    # ------------------------------------------------------------------
    # get
    # ------------------------------------------------------------------

    @traced
    def get(self, user_id: str) -> ServiceResult:
        """Return the aggregated view of one user."""
        op = "get_user"
        try:
            with self._store.transaction() as txn:
                record = txn.get_user(user_id)
                if record is None:
                    return self._not_found(op, user_id)
                view = user_view(txn, record)
        except StoreError as exc:
            return self._store_failure(op, exc)
        return ServiceResult(ok=True, op=op, data=view)

    # ------------------------------------------------------------------
    # update
    # ------------------------------------------------------------------

    @traced
    def update(
        self,
        user_id: str,
        *,
        name: str | None = None,
        age: int | None = None,
    ) -> ServiceResult:
        """Apply the supplied fields and return the refreshed view.

        Omitted fields are left unchanged. Renaming a user to the name it
        already holds is not a collision.
        """
        op = "update_user"
        fields: dict[str, Any] = {}
        if name is not None:
            fields["name"] = name
        if age is not None:
            fields["age"] = age

        try:
            with self._store.transaction(write=True) as txn:
                if txn.get_user(user_id) is None:
                    return self._not_found(op, user_id)

                issue = check_user_fields(name=name, age=age)
                if issue is not None:
                    return self._invalid(op, issue)

                if name is not None:
                    holder = txn.find_user_by_name(name)
                    if holder is not None and holder.id != user_id:
                        return self._duplicate_name(op, name)

                if fields:
                    txn.update_user(user_id, fields)
                record = txn.get_user(user_id)
                assert record is not None
                view = user_view(txn, record)
        except DuplicateKeyError as exc:
            if _is_name_collision(exc) and name is not None:
                return self._duplicate_name(op, name)
            return self._store_failure(op, exc)
        except RecordNotFoundError:
            return self._not_found(op, user_id)
        except StoreError as exc:
            return self._store_failure(op, exc)

        return ServiceResult(
            ok=True,
            op=op,
            data={**view, "fields_changed": sorted(fields)},
        )

    # ------------------------------------------------------------------
    # delete
    # ------------------------------------------------------------------

    @traced
    def delete(self, user_id: str) -> ServiceResult:
        """Delete a user that has no friendships.

        Hobby links are removed in the same transaction as the user row.
        If a friendship appears between the check and the delete, the
        store's foreign key rejects the delete and the whole transaction
        rolls back.
        """
        op = "delete_user"
        try:
            with self._store.transaction(write=True) as txn:
                record = txn.get_user(user_id)
                if record is None:
                    return self._not_found(op, user_id)

                friends = txn.list_friends_for_user(user_id)
                if friends:
                    return self._has_edges(op, user_id, len(friends))

                removed_links = txn.delete_user_hobbies(user_id)
                txn.delete_user(user_id)
        except ForeignKeyViolationError:
            logger.info("Delete of %s lost a race with a new friendship", user_id)
            return self._has_edges(op, user_id, None)
        except RecordNotFoundError:
            return self._not_found(op, user_id)
        except StoreError as exc:
            return self._store_failure(op, exc)

        logger.debug("Deleted user %s (%d hobby links)", user_id, removed_links)
        return ServiceResult(
            ok=True,
            op=op,
            data={"id": user_id, "name": record.name, "removed_hobby_links": removed_links},
        )

    # ------------------------------------------------------------------
    # list
    # ------------------------------------------------------------------

    @traced
    def list_all(self) -> ServiceResult:
        """Aggregated views of every user, newest first, from one snapshot."""
        op = "list_users"
        try:
            with trace_span("load_snapshot") as span:
                with self._store.transaction() as txn:
                    snapshot = txn.load_snapshot()
                if span:
                    span.annotate("users", len(snapshot.users))
        except StoreError as exc:
            return self._store_failure(op, exc)

        engine = GraphEngine(snapshot)
        ordered = sorted(snapshot.users, key=lambda u: (u.created_at, u.id), reverse=True)
        items = [user_view_from_graph(engine, u.id) for u in ordered]
        return ServiceResult(ok=True, op=op, data={"count": len(items), "items": items})

    # ------------------------------------------------------------------
    # Error helpers
    # ------------------------------------------------------------------

    @classmethod
    def _not_found(cls, op: str, user_id: str) -> ServiceResult:
        return cls._fail(op, ErrorCode.NOT_FOUND, f"User not found: {user_id}", id=user_id)

    @classmethod
    def _duplicate_name(cls, op: str, name: str) -> ServiceResult:
        return cls._fail(
            op,
            ErrorCode.DUPLICATE_NAME,
            f"Name already taken: {name}",
            name=name,
        )

    @classmethod
    def _has_edges(cls, op: str, user_id: str, count: int | None) -> ServiceResult:
        detail: dict[str, Any] = {"id": user_id}
        if count is not None:
            detail["friendship_count"] = count
        return cls._fail(
            op,
            ErrorCode.HAS_ACTIVE_EDGES,
            "Cannot delete user with active friendships. Remove friendships first.",
            **detail,
        )
