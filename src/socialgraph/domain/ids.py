"""Identifier generation and canonical edge orientation.

INVARIANT: IDs are permanent. Once generated, an ID never changes.
INVARIANT: A friendship is always stored as ``(lo, hi)`` with ``lo < hi``.
"""

from __future__ import annotations

import uuid


def new_id() -> str:
    """Allocate an opaque unique identifier (UUID4, canonical text form)."""
    return str(uuid.uuid4())


def canonical_pair(a: str, b: str) -> tuple[str, str]:
    """Order two user ids so the smaller one comes first.

    ``(a, b)`` and ``(b, a)`` always normalize to the same tuple.

    Examples:
        >>> canonical_pair("b", "a")
        ('a', 'b')
        >>> canonical_pair("a", "b")
        ('a', 'b')
    """
    return (a, b) if a <= b else (b, a)
