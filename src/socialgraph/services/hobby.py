"""HobbyService: attaching hobbies to users and listing them.

Hobbies are created lazily: the first attach of an unknown name inserts
the hobby row. Attaching a hobby a user already has succeeds without
writing anything (``attached`` is False in the result).
"""

from __future__ import annotations

import logging
from typing import Any

from socialgraph.domain.errors import ErrorCode
from socialgraph.domain.validation import check_hobby_name, normalize_hobby_name
from socialgraph.infrastructure.errors import ForeignKeyViolationError, StoreError
from socialgraph.services._helpers import user_view
from socialgraph.services.base import BaseService
from socialgraph.services.result import ServiceResult
from socialgraph.services.telemetry import traced

logger = logging.getLogger(__name__)


class HobbyService(BaseService):
    """Handles user-hobby links and the hobby catalogue."""

    @traced
    def attach(self, user_id: str, hobby_name: str) -> ServiceResult:
        """Attach *hobby_name* to a user, creating the hobby if needed."""
        op = "attach_hobby"
        try:
            with self._store.transaction(write=True) as txn:
                if txn.get_user(user_id) is None:
                    return self._user_not_found(op, user_id)

                issue = check_hobby_name(hobby_name)
                if issue is not None:
                    return self._invalid(op, issue)
                name = normalize_hobby_name(hobby_name)

                hobby_id, created = txn.find_or_create_hobby(name)
                attached = txn.upsert_user_hobby(user_id, hobby_id)
                record = txn.get_user(user_id)
                assert record is not None
                view = user_view(txn, record)
        except ForeignKeyViolationError:
            return self._user_not_found(op, user_id)
        except StoreError as exc:
            return self._store_failure(op, exc)

        if created:
            logger.debug("Created hobby %s (%s)", hobby_id, name)
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "user_id": user_id,
                "hobby_id": hobby_id,
                "hobby": name,
                "created_hobby": created,
                "attached": attached,
                "user": view,
            },
        )

    @traced
    def detach(self, user_id: str, hobby_name: str) -> ServiceResult:
        """Remove the link between a user and *hobby_name*.

        Fails with ``NOT_FOUND`` if the hobby is unknown or the user does
        not have it. The hobby row itself is kept.
        """
        op = "detach_hobby"
        name = normalize_hobby_name(hobby_name)
        try:
            with self._store.transaction(write=True) as txn:
                hobby = txn.find_hobby_by_name(name)
                if hobby is None:
                    return self._fail(
                        op,
                        ErrorCode.NOT_FOUND,
                        f"Hobby not found: {name}",
                        hobby=name,
                    )
                if txn.delete_user_hobby(user_id, hobby.id) == 0:
                    return self._fail(
                        op,
                        ErrorCode.NOT_FOUND,
                        f"User {user_id} does not have hobby: {name}",
                        user_id=user_id,
                        hobby=name,
                    )
                record = txn.get_user(user_id)
                view = user_view(txn, record) if record is not None else None
        except StoreError as exc:
            return self._store_failure(op, exc)

        data: dict[str, Any] = {"user_id": user_id, "hobby_id": hobby.id, "hobby": name}
        if view is not None:
            data["user"] = view
        return ServiceResult(ok=True, op=op, data=data)

    @traced
    def list_all(self) -> ServiceResult:
        """Every known hobby with the number of users practising it."""
        op = "list_hobbies"
        try:
            with self._store.transaction() as txn:
                rows = txn.list_all_hobbies()
        except StoreError as exc:
            return self._store_failure(op, exc)

        items = [{"id": h.id, "name": h.name, "user_count": count} for h, count in rows]
        return ServiceResult(ok=True, op=op, data={"count": len(items), "items": items})

    @classmethod
    def _user_not_found(cls, op: str, user_id: str) -> ServiceResult:
        return cls._fail(op, ErrorCode.NOT_FOUND, f"User not found: {user_id}", id=user_id)
