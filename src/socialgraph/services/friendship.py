"""FriendshipService: creating and removing undirected edges.

INVARIANT: No self-loops. ``link(a, a)`` is refused before any I/O.
INVARIANT: Every edge is stored once, as ``(lo, hi)`` with ``lo < hi``.
INVARIANT: At most one edge per unordered pair. The pre-check gives the
common case a clean error; the store's unique constraint settles races
between ``link(a, b)`` and ``link(b, a)``, and the loser is translated to
``ALREADY_LINKED`` as well.
"""

from __future__ import annotations

import logging

from socialgraph.domain.errors import ErrorCode
from socialgraph.domain.ids import canonical_pair, new_id
from socialgraph.infrastructure.errors import (
    DuplicateKeyError,
    ForeignKeyViolationError,
    StoreError,
)
from socialgraph.services._helpers import now_iso
from socialgraph.services.base import BaseService
from socialgraph.services.result import ServiceResult
from socialgraph.services.telemetry import traced

logger = logging.getLogger(__name__)


class FriendshipService(BaseService):
    """Handles friendship edges between users."""

    @traced
    def link(self, user_a: str, user_b: str) -> ServiceResult:
        """Create the friendship between *user_a* and *user_b*.

        Returns the edge id and its canonical endpoints.
        """
        op = "link"
        if user_a == user_b:
            return self._fail(
                op,
                ErrorCode.SELF_LINK,
                "Cannot create friendship with yourself",
                id=user_a,
            )

        lo, hi = canonical_pair(user_a, user_b)
        try:
            with self._store.transaction(write=True) as txn:
                missing = [uid for uid in (user_a, user_b) if txn.get_user(uid) is None]
                if missing:
                    return self._missing_users(op, missing)

                if txn.get_friendship(lo, hi) is not None:
                    return self._already_linked(op, lo, hi)

                edge_id = new_id()
                created_at = now_iso()
                txn.insert_friendship(edge_id, lo, hi, created_at)
        except DuplicateKeyError:
            logger.info("Concurrent link of (%s, %s) resolved as already linked", lo, hi)
            return self._already_linked(op, lo, hi)
        except ForeignKeyViolationError:
            return self._missing_users(op, [user_a, user_b])
        except StoreError as exc:
            return self._store_failure(op, exc)

        logger.debug("Linked %s <-> %s as %s", lo, hi, edge_id)
        return ServiceResult(
            ok=True,
            op=op,
            data={"id": edge_id, "user_lo": lo, "user_hi": hi, "created_at": created_at},
        )

    @traced
    def unlink(self, user_a: str, user_b: str) -> ServiceResult:
        """Remove the friendship between *user_a* and *user_b*.

        The users themselves need not exist; only a missing edge is an
        error.
        """
        op = "unlink"
        lo, hi = canonical_pair(user_a, user_b)
        try:
            with self._store.transaction(write=True) as txn:
                removed = txn.delete_friendship(lo, hi)
        except StoreError as exc:
            return self._store_failure(op, exc)

        if removed == 0:
            return self._fail(
                op,
                ErrorCode.NOT_FOUND,
                f"Friendship not found: {lo} <-> {hi}",
                user_lo=lo,
                user_hi=hi,
            )
        return ServiceResult(ok=True, op=op, data={"user_lo": lo, "user_hi": hi})

    # ------------------------------------------------------------------
    # Error helpers
    # ------------------------------------------------------------------

    @classmethod
    def _missing_users(cls, op: str, missing: list[str]) -> ServiceResult:
        return cls._fail(
            op,
            ErrorCode.NOT_FOUND,
            f"User not found: {', '.join(missing)}",
            missing=missing,
        )

    @classmethod
    def _already_linked(cls, op: str, lo: str, hi: str) -> ServiceResult:
        return cls._fail(
            op,
            ErrorCode.ALREADY_LINKED,
            f"Friendship already exists: {lo} <-> {hi}",
            user_lo=lo,
            user_hi=hi,
        )
