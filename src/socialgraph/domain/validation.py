"""Field rules for users and hobbies.

Each check returns ``None`` when the value is acceptable, otherwise a
:class:`ValidationIssue` naming the offending field and why. Services turn
issues into ``VALIDATION_FAILED`` results; nothing here raises.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

USER_NAME_MIN = 2
USER_NAME_MAX = 50
USER_NAME_PATTERN = re.compile(r"^[A-Za-z0-9_]+$")

AGE_MIN = 1
AGE_MAX = 149

HOBBY_NAME_MIN = 2
HOBBY_NAME_MAX = 100


@dataclass(frozen=True)
class ValidationIssue:
    """A single rejected field."""

    field: str
    reason: str


def check_user_name(name: Any) -> ValidationIssue | None:
    """Display names are 2-50 characters of letters, digits, or underscore."""
    if not isinstance(name, str):
        return ValidationIssue("name", "must be a string")
    if len(name) < USER_NAME_MIN:
        return ValidationIssue("name", f"must be at least {USER_NAME_MIN} characters")
    if len(name) > USER_NAME_MAX:
        return ValidationIssue("name", f"must be at most {USER_NAME_MAX} characters")
    if USER_NAME_PATTERN.match(name) is None:
        return ValidationIssue("name", "may only contain letters, numbers, and underscores")
    return None


def check_age(age: Any) -> ValidationIssue | None:
    """Ages are whole numbers from 1 to 149 inclusive."""
    # bool is an int subclass; True is not an age.
    if isinstance(age, bool) or not isinstance(age, int):
        return ValidationIssue("age", "must be a whole number")
    if age < AGE_MIN or age > AGE_MAX:
        return ValidationIssue("age", f"must be between {AGE_MIN} and {AGE_MAX}")
    return None


def normalize_hobby_name(name: str) -> str:
    """Strip surrounding whitespace from a hobby name."""
    return name.strip()


def check_hobby_name(name: Any) -> ValidationIssue | None:
    """Hobby names are 2-100 characters once surrounding whitespace is removed."""
    if not isinstance(name, str):
        return ValidationIssue("hobby_name", "must be a string")
    stripped = normalize_hobby_name(name)
    if len(stripped) < HOBBY_NAME_MIN:
        return ValidationIssue("hobby_name", f"must be at least {HOBBY_NAME_MIN} characters")
    if len(stripped) > HOBBY_NAME_MAX:
        return ValidationIssue("hobby_name", f"must be at most {HOBBY_NAME_MAX} characters")
    return None


def check_user_fields(
    *,
    name: Any = None,
    age: Any = None,
    require_all: bool = False,
) -> ValidationIssue | None:
    """Validate the supplied user fields, name first.

    With ``require_all`` (creation), a missing field is itself an issue.
    Otherwise ``None`` means "not supplied" and is skipped.
    """
    if name is not None or require_all:
        if name is None:
            return ValidationIssue("name", "is required")
        issue = check_user_name(name)
        if issue is not None:
            return issue
    if age is not None or require_all:
        if age is None:
            return ValidationIssue("age", "is required")
        issue = check_age(age)
        if issue is not None:
            return issue
    return None
