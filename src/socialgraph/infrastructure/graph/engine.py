"""GraphEngine: an undirected NetworkX graph built from one snapshot.

Built per call, never cached across calls: any edge or hobby-link
mutation invalidates every derived score, so the graph is rebuilt from a
fresh :class:`GraphSnapshot` each time a projection is requested.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, TypeAlias

import networkx as nx

from socialgraph.domain.scoring import popularity_score

if TYPE_CHECKING:
    from socialgraph.infrastructure.store import GraphSnapshot

logger = logging.getLogger(__name__)

_Graph: TypeAlias = nx.Graph


class GraphEngine:
    """Lazy-built graph over a single :class:`GraphSnapshot`.

    Nodes carry ``name``, ``age``, ``created_at`` and ``hobbies`` (a set of
    hobby ids). Edges carry the friendship ``id`` and keep the canonical
    ``(user_lo, user_hi)`` orientation in ``lo``/``hi`` attributes, since
    ``nx.Graph`` itself does not remember endpoint order.
    """

    def __init__(self, snapshot: GraphSnapshot) -> None:
        self._snapshot = snapshot
        self._graph: _Graph | None = None
        self.dropped_edges: list[str] = []

    @property
    def snapshot(self) -> GraphSnapshot:
        return self._snapshot

    @property
    def graph(self) -> _Graph:
        """Return the graph, building it on first access."""
        if self._graph is None:
            self._graph = self._build()
        return self._graph

    def _build(self) -> _Graph:
        """Add every user first (isolated users stay visible), then edges.

        An edge whose endpoint is missing from the snapshot is skipped and
        recorded in :attr:`dropped_edges` instead of failing the build.
        """
        g: _Graph = nx.Graph()
        for user in self._snapshot.users:
            g.add_node(
                user.id,
                name=user.name,
                age=user.age,
                created_at=user.created_at,
                hobbies=frozenset(self._snapshot.user_hobbies.get(user.id, ())),
            )

        for edge in self._snapshot.friendships:
            if edge.user_lo not in g or edge.user_hi not in g:
                logger.warning(
                    "Dropping friendship %s: endpoint missing from snapshot (%s, %s)",
                    edge.id,
                    edge.user_lo,
                    edge.user_hi,
                )
                self.dropped_edges.append(edge.id)
                continue
            g.add_edge(edge.user_lo, edge.user_hi, id=edge.id, lo=edge.user_lo, hi=edge.user_hi)
        return g

    def friends_of(self, user_id: str) -> list[str]:
        """Sorted direct neighbours of *user_id*."""
        return sorted(self.graph.neighbors(user_id))

    def popularity(self, user_id: str) -> float:
        """Popularity score of *user_id* evaluated on this graph."""
        g = self.graph
        hobbies_by_user = {n: g.nodes[n]["hobbies"] for n in g.neighbors(user_id)}
        return popularity_score(g.neighbors(user_id), g.nodes[user_id]["hobbies"], hobbies_by_user)

    def popularity_all(self) -> dict[str, float]:
        """Popularity score for every node."""
        return {node: self.popularity(node) for node in self.graph.nodes}
