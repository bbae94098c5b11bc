"""Low-level persistence failures.

Backends raise only these; the service layer decides which domain error
each one means. Nothing here knows about users or friendships beyond the
name of the constraint that fired.
"""

from __future__ import annotations


class StoreError(Exception):
    """Base class for every persistence failure."""


class StoreUnavailableError(StoreError):
    """The backing store could not be reached or opened."""


class StoreBusyError(StoreError):
    """Another writer held the store past the lock timeout.

    The transaction was rolled back and may be retried.
    """


class RecordNotFoundError(StoreError):
    """A keyed lookup or keyed write matched no row."""


class ConstraintViolationError(StoreError):
    """A storage constraint rejected a write.

    Attributes:
        constraint: Best-effort name of the violated constraint or the
            table/column it guards (e.g. ``"users.name"``). Empty when the
            backend cannot tell.
    """

    def __init__(self, message: str, *, constraint: str = "") -> None:
        super().__init__(message)
        self.constraint = constraint


class DuplicateKeyError(ConstraintViolationError):
    """A primary-key or unique column already holds the value."""


class UniqueViolationError(DuplicateKeyError):
    """A multi-column uniqueness constraint already holds the tuple."""


class ForeignKeyViolationError(ConstraintViolationError):
    """A write would leave a reference dangling."""


class CheckViolationError(ConstraintViolationError):
    """A CHECK constraint rejected the row."""
