"""BaseService: abstract foundation for all socialgraph services.

Every service receives a :class:`GraphStore` at construction time and
owns its transaction boundaries via ``self._store.transaction()``.
Services keep no state between calls.

Failure results are built only through the helpers here so that every
error carries a code from :class:`ErrorCode`.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from socialgraph.domain.errors import ErrorCode
from socialgraph.infrastructure.errors import StoreUnavailableError
from socialgraph.services.result import ServiceError, ServiceResult

if TYPE_CHECKING:
    from socialgraph.domain.validation import ValidationIssue
    from socialgraph.infrastructure.errors import StoreError
    from socialgraph.infrastructure.store import GraphStore

logger = logging.getLogger(__name__)


class BaseService:
    """Abstract base for all service-layer classes.

    Usage::

        class UserService(BaseService):
            def get(self, user_id: str) -> ServiceResult:
                with self._store.transaction() as txn:
                    ...
    """

    def __init__(self, store: GraphStore) -> None:
        self._store = store

    @staticmethod
    def _fail(op: str, code: ErrorCode, message: str, **detail: Any) -> ServiceResult:
        """Return a failed result with a structured error."""
        return ServiceResult(
            ok=False,
            op=op,
            error=ServiceError(code=code.value, message=message, detail=detail),
        )

    @classmethod
    def _invalid(cls, op: str, issue: ValidationIssue) -> ServiceResult:
        """Return ``VALIDATION_FAILED`` for a rejected field."""
        return cls._fail(
            op,
            ErrorCode.VALIDATION_FAILED,
            f"{issue.field} {issue.reason}",
            field=issue.field,
            reason=issue.reason,
        )

    @classmethod
    def _store_failure(cls, op: str, exc: StoreError) -> ServiceResult:
        """Fallback for store errors no invariant accounts for.

        An unreachable store is ``UNAVAILABLE``; anything else is a
        ``CONFLICT`` the caller may retry.
        """
        if isinstance(exc, StoreUnavailableError):
            logger.warning("Store unavailable during %s: %s", op, exc)
            return cls._fail(op, ErrorCode.UNAVAILABLE, f"Store unavailable: {exc}")
        logger.warning("Unattributed store error during %s: %s", op, exc)
        return cls._fail(op, ErrorCode.CONFLICT, f"Concurrent modification conflict: {exc}")
