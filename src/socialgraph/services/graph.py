"""GraphService: the full-graph read model for visualization.

One snapshot in, one ``{nodes, edges}`` projection out. The snapshot is
read in a single store transaction; any edge whose endpoint is missing
from it is dropped with a warning instead of failing the projection.
"""

from __future__ import annotations

from typing import Any

from socialgraph.infrastructure.errors import StoreError
from socialgraph.infrastructure.graph.engine import GraphEngine
from socialgraph.services.base import BaseService
from socialgraph.services.result import ServiceResult
from socialgraph.services.telemetry import trace_span, traced


class GraphService(BaseService):
    """Handles graph-wide projections."""

    @traced
    def view(self) -> ServiceResult:
        """Every user as a node and every friendship as an edge.

        Nodes are ``{id, name, age, popularity_score, hobbies}`` sorted by
        id. Edges are ``{id, source, target}`` in canonical stored
        orientation (``source < target``), sorted by endpoints.
        """
        op = "graph_view"
        try:
            with trace_span("load_snapshot"):
                with self._store.transaction() as txn:
                    snapshot = txn.load_snapshot()
        except StoreError as exc:
            return self._store_failure(op, exc)

        with trace_span("build_graph") as span:
            engine = GraphEngine(snapshot)
            g = engine.graph
            if span:
                span.annotate("nodes", g.number_of_nodes())
                span.annotate("edges", g.number_of_edges())

        scores = engine.popularity_all()
        nodes: list[dict[str, Any]] = [
            {
                "id": node_id,
                "name": g.nodes[node_id]["name"],
                "age": g.nodes[node_id]["age"],
                "popularity_score": scores[node_id],
                "hobbies": snapshot.hobbies_of(node_id),
            }
            for node_id in sorted(g.nodes)
        ]
        edges: list[dict[str, Any]] = sorted(
            (
                {"id": attrs["id"], "source": attrs["lo"], "target": attrs["hi"]}
                for _, _, attrs in g.edges(data=True)
            ),
            key=lambda e: (e["source"], e["target"]),
        )

        warnings = [
            f"Dropped friendship {edge_id}: endpoint missing" for edge_id in engine.dropped_edges
        ]
        return ServiceResult(
            ok=True,
            op=op,
            data={"nodes": nodes, "edges": edges},
            warnings=warnings,
        )
