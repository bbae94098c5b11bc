"""SQLAlchemy Core table definitions for the social graph database.

Four record sets: users, hobbies, the user-hobby link table, and
friendships. Constraints here are a backstop; the service layer checks
every invariant before writing.
"""

from __future__ import annotations

from sqlalchemy import (
    CheckConstraint,
    Column,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    Table,
    Text,
    UniqueConstraint,
)

metadata = MetaData()

users = Table(
    "users",
    metadata,
    Column("id", Text, primary_key=True),
    Column("name", Text, nullable=False, unique=True),
    Column("age", Integer, nullable=False),
    Column("created_at", Text, nullable=False),
    CheckConstraint("age > 0 AND age < 150", name="ck_users_age_range"),
)

hobbies = Table(
    "hobbies",
    metadata,
    Column("id", Text, primary_key=True),
    Column("name", Text, nullable=False, unique=True),
)

user_hobbies = Table(
    "user_hobbies",
    metadata,
    Column("user_id", Text, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("hobby_id", Text, ForeignKey("hobbies.id", ondelete="CASCADE"), primary_key=True),
)

# Endpoint FKs carry no ON DELETE action: deleting a user that still has
# an edge fails at the store instead of dropping the edge.
friendships = Table(
    "friendships",
    metadata,
    Column("id", Text, primary_key=True),
    Column("user_lo", Text, ForeignKey("users.id"), nullable=False),
    Column("user_hi", Text, ForeignKey("users.id"), nullable=False),
    Column("created_at", Text, nullable=False),
    UniqueConstraint("user_lo", "user_hi", name="uq_friendships_pair"),
    CheckConstraint("user_lo < user_hi", name="ck_friendships_canonical"),
)

# ---------------------------------------------------------------------------
# Indexes for frequently filtered columns
# ---------------------------------------------------------------------------

Index("ix_user_hobbies_hobby", user_hobbies.c.hobby_id)
Index("ix_friendships_lo", friendships.c.user_lo)
Index("ix_friendships_hi", friendships.c.user_hi)
