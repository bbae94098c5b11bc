"""Domain error kinds surfaced in ``ServiceError.code``."""

from __future__ import annotations

from enum import StrEnum


class ErrorCode(StrEnum):
    """Every failure a graph operation can report to its caller."""

    NOT_FOUND = "NOT_FOUND"
    DUPLICATE_NAME = "DUPLICATE_NAME"
    SELF_LINK = "SELF_LINK"
    ALREADY_LINKED = "ALREADY_LINKED"
    HAS_ACTIVE_EDGES = "HAS_ACTIVE_EDGES"
    VALIDATION_FAILED = "VALIDATION_FAILED"
    CONFLICT = "CONFLICT"
    UNAVAILABLE = "UNAVAILABLE"
