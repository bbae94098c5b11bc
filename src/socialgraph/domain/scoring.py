"""Popularity score: the derived metric surfaced on every user view.

    score(U) = |F(U)| + 0.5 * |⋃ over f in F(U) of (H(U) ∩ H(f))|

``F(U)`` is the set of direct friends and ``H(x)`` the set of hobby ids
attached to ``x``. A hobby shared with several friends counts once.

INVARIANT: The score is recomputed on every read; it is never stored.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Set

SHARED_HOBBY_WEIGHT = 0.5


def shared_hobbies(
    own_hobbies: Set[str],
    friend_ids: Iterable[str],
    hobbies_by_user: Mapping[str, Set[str]],
) -> set[str]:
    """Hobby ids the user shares with at least one friend."""
    shared: set[str] = set()
    if not own_hobbies:
        return shared
    for friend_id in friend_ids:
        shared |= own_hobbies & hobbies_by_user.get(friend_id, frozenset())
    return shared


def popularity_score(
    friend_ids: Iterable[str],
    own_hobbies: Set[str],
    hobbies_by_user: Mapping[str, Set[str]],
) -> float:
    """Compute the popularity score for one user.

    Args:
        friend_ids: Direct friends of the user (duplicates are ignored).
        own_hobbies: Hobby ids attached to the user.
        hobbies_by_user: Hobby ids for (at least) every friend.

    A user without friends scores 0.0 whatever their hobbies.
    """
    friends = set(friend_ids)
    if not friends:
        return 0.0
    shared = shared_hobbies(own_hobbies, friends, hobbies_by_user)
    return float(len(friends)) + SHARED_HOBBY_WEIGHT * len(shared)
