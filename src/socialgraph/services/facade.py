"""SocialGraph: the single entry point transport adapters talk to.

Each method maps 1:1 to a graph operation and returns a
:class:`ServiceResult`; no method raises for a domain failure.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from socialgraph.services.friendship import FriendshipService
from socialgraph.services.graph import GraphService
from socialgraph.services.hobby import HobbyService
from socialgraph.services.user import UserService

if TYPE_CHECKING:
    from socialgraph.infrastructure.store import GraphStore
    from socialgraph.services.result import ServiceResult


class SocialGraph:
    """Façade over the user, friendship, hobby, and graph services."""

    def __init__(self, store: GraphStore) -> None:
        self._store = store
        self._users = UserService(store)
        self._friendships = FriendshipService(store)
        self._hobbies = HobbyService(store)
        self._graph = GraphService(store)

    @property
    def store(self) -> GraphStore:
        return self._store

    # -- users ---------------------------------------------------------

    def create_user(self, name: str, age: int) -> ServiceResult:
        return self._users.create(name, age)

    def get_user(self, user_id: str) -> ServiceResult:
        return self._users.get(user_id)

    def update_user(
        self,
        user_id: str,
        *,
        name: str | None = None,
        age: int | None = None,
    ) -> ServiceResult:
        return self._users.update(user_id, name=name, age=age)

    def delete_user(self, user_id: str) -> ServiceResult:
        return self._users.delete(user_id)

    def list_users(self) -> ServiceResult:
        return self._users.list_all()

    # -- friendships ---------------------------------------------------

    def link(self, user_a: str, user_b: str) -> ServiceResult:
        return self._friendships.link(user_a, user_b)

    def unlink(self, user_a: str, user_b: str) -> ServiceResult:
        return self._friendships.unlink(user_a, user_b)

    # -- hobbies -------------------------------------------------------

    def attach_hobby(self, user_id: str, hobby_name: str) -> ServiceResult:
        return self._hobbies.attach(user_id, hobby_name)

    def detach_hobby(self, user_id: str, hobby_name: str) -> ServiceResult:
        return self._hobbies.detach(user_id, hobby_name)

    def list_hobbies(self) -> ServiceResult:
        return self._hobbies.list_all()

    # -- projections ---------------------------------------------------

    def graph_view(self) -> ServiceResult:
        return self._graph.view()
