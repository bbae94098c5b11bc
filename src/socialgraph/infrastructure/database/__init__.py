"""SQLite database engine and schema via SQLAlchemy Core."""

from socialgraph.infrastructure.database.engine import create_db_engine, init_database
from socialgraph.infrastructure.database.schema import (
    friendships,
    hobbies,
    metadata,
    user_hobbies,
    users,
)

__all__ = [
    "create_db_engine",
    "friendships",
    "hobbies",
    "init_database",
    "metadata",
    "user_hobbies",
    "users",
]
