"""Shared service-layer helper functions."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from socialgraph.domain.scoring import popularity_score

if TYPE_CHECKING:
    from socialgraph.infrastructure.graph.engine import GraphEngine
    from socialgraph.infrastructure.store import StoreTransaction, UserRecord


def now_iso() -> str:
    """Current UTC time as standard ISO 8601 (creation timestamps)."""
    return datetime.now(UTC).isoformat()


def user_view(txn: StoreTransaction, record: UserRecord) -> dict[str, Any]:
    """Aggregated view of one user, read inside the caller's transaction.

    Friend hobbies are fetched in one batched query rather than one
    round-trip per friend.
    """
    friends = txn.list_friends_for_user(record.id)
    hobby_ids = txn.hobby_ids_for_users([record.id, *friends])
    return {
        "id": record.id,
        "name": record.name,
        "age": record.age,
        "created_at": record.created_at,
        "friends": friends,
        "hobbies": txn.list_hobbies_for_user(record.id),
        "popularity_score": popularity_score(friends, hobby_ids[record.id], hobby_ids),
    }


def user_view_from_graph(engine: GraphEngine, user_id: str) -> dict[str, Any]:
    """Aggregated view of one user taken from a snapshot graph."""
    attrs = engine.graph.nodes[user_id]
    return {
        "id": user_id,
        "name": attrs["name"],
        "age": attrs["age"],
        "created_at": attrs["created_at"],
        "friends": engine.friends_of(user_id),
        "hobbies": engine.snapshot.hobbies_of(user_id),
        "popularity_score": engine.popularity(user_id),
    }
