"""Baseline schema: users, hobbies, user_hobbies, friendships.

Revision ID: 001_baseline
Revises: None
Create Date: 2026-10-19

Databases created by ``init_database`` get stamped at this revision
without running it; an empty database gets it applied by
``socialgraph db upgrade``.
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision: str = "001_baseline"
down_revision: str | None = None
branch_labels: tuple[str, ...] | None = None
depends_on: tuple[str, ...] | None = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Text, primary_key=True),
        sa.Column("name", sa.Text, nullable=False, unique=True),
        sa.Column("age", sa.Integer, nullable=False),
        sa.Column("created_at", sa.Text, nullable=False),
        sa.CheckConstraint("age > 0 AND age < 150", name="ck_users_age_range"),
    )

    op.create_table(
        "hobbies",
        sa.Column("id", sa.Text, primary_key=True),
        sa.Column("name", sa.Text, nullable=False, unique=True),
    )

    op.create_table(
        "user_hobbies",
        sa.Column(
            "user_id",
            sa.Text,
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column(
            "hobby_id",
            sa.Text,
            sa.ForeignKey("hobbies.id", ondelete="CASCADE"),
            primary_key=True,
        ),
    )
    op.create_index("ix_user_hobbies_hobby", "user_hobbies", ["hobby_id"])

    op.create_table(
        "friendships",
        sa.Column("id", sa.Text, primary_key=True),
        sa.Column("user_lo", sa.Text, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("user_hi", sa.Text, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("created_at", sa.Text, nullable=False),
        sa.UniqueConstraint("user_lo", "user_hi", name="uq_friendships_pair"),
        sa.CheckConstraint("user_lo < user_hi", name="ck_friendships_canonical"),
    )
    op.create_index("ix_friendships_lo", "friendships", ["user_lo"])
    op.create_index("ix_friendships_hi", "friendships", ["user_hi"])


def downgrade() -> None:
    op.drop_table("friendships")
    op.drop_table("user_hobbies")
    op.drop_table("hobbies")
    op.drop_table("users")
