"""
Street Graph Construction
=========================

Two modes, selected by data availability:

1. **Street mode** -- explicit directed edges from the dataset.  Weights
   and direction are kept exactly as given; edges pointing at unknown
   node ids are dropped.
2. **Proximity mode** -- no edges available.  Each node is linked to its
   nearest neighbours within ``max_radius_m``, at most one per compass
   quadrant (NE / NW / SE / SW) and at most ``max_connections`` in total,
   which approximates street intersections instead of a dense mesh.

Proximity links are chosen per node independently, so A -> B does not
imply B -> A.  That asymmetry is part of the heuristic and is kept.

Complexity
----------
* Street mode:    O(N + E)
* Proximity mode: O(N^2 log N) -- every pair is measured; fine for the
  ~1000 nodes this service targets, no spatial index is used.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional, Sequence

from .entities import Graph, GraphEntry, GraphStats, GeoNode, Neighbor, StreetEdge
from .enums import GraphMode
from .geo import node_distance_m, quadrant

logger = logging.getLogger(__name__)

DEFAULT_MAX_RADIUS_M = 100.0
DEFAULT_MAX_CONNECTIONS = 4


def _empty_graph(nodes: Iterable[GeoNode]) -> Graph:
    """One entry per node id; the first node seen with an id wins."""
    graph: Graph = {}
    duplicates = 0
    for node in nodes:
        if node.id in graph:
            duplicates += 1
            continue
        graph[node.id] = GraphEntry(node=node)
    if duplicates:
        logger.debug("Ignored %d nodes with repeated ids", duplicates)
    return graph


def build_street_graph(
    nodes: Iterable[GeoNode], edges: Iterable[StreetEdge]
) -> Graph:
    """Adjacency graph from explicit, directed street edges."""
    graph = _empty_graph(nodes)

    skipped = 0
    for edge in edges:
        from_entry = graph.get(edge.from_id)
        to_entry = graph.get(edge.to_id)
        if from_entry is None or to_entry is None:
            skipped += 1
            continue
        from_entry.neighbors.append(
            Neighbor(
                node=to_entry.node,
                distance=edge.weight,
                street_name=edge.street_name,
            )
        )

    if skipped:
        logger.debug("Skipped %d edges referencing unknown nodes", skipped)
    return graph


def build_proximity_graph(
    nodes: Sequence[GeoNode],
    max_radius_m: float = DEFAULT_MAX_RADIUS_M,
    max_connections: int = DEFAULT_MAX_CONNECTIONS,
) -> Graph:
    """
    Fallback graph linking each node to nearby nodes in distinct quadrants.

    Nodes with nothing inside the radius stay disconnected.
    """
    if max_radius_m < 0:
        raise ValueError("max_radius_m must be non-negative")
    if max_connections < 0:
        raise ValueError("max_connections must be non-negative")

    graph = _empty_graph(nodes)
    unique = [entry.node for entry in graph.values()]

    for node in unique:
        entry = graph[node.id]

        nearby = []
        for other in unique:
            if other.id == node.id:
                continue
            d = node_distance_m(node, other)
            if d <= max_radius_m:
                nearby.append((d, other))
        nearby.sort(key=lambda item: item[0])

        taken: set[str] = set()
        for d, other in nearby:
            if len(entry.neighbors) >= max_connections:
                break
            direction = quadrant(node, other)
            if direction in taken:
                continue
            entry.neighbors.append(Neighbor(node=other, distance=d))
            taken.add(direction)

    return graph


def build_graph(
    nodes: Sequence[GeoNode],
    edges: Optional[Sequence[StreetEdge]] = None,
    *,
    max_radius_m: float = DEFAULT_MAX_RADIUS_M,
    max_connections: int = DEFAULT_MAX_CONNECTIONS,
) -> tuple[Graph, GraphMode]:
    """Pick street mode when edges are supplied, proximity mode otherwise."""
    if edges:
        graph, mode = build_street_graph(nodes, edges), GraphMode.STREET
    else:
        graph = build_proximity_graph(nodes, max_radius_m, max_connections)
        mode = GraphMode.PROXIMITY

    stats = graph_stats(graph)
    logger.info(
        "Built %s graph: %d nodes, %d edges, %.2f avg connections",
        mode.value,
        stats.nodes,
        stats.edges,
        stats.avg_connections,
    )
    return graph, mode


def graph_stats(graph: Graph) -> GraphStats:
    edges = sum(len(entry.neighbors) for entry in graph.values())
    avg = edges / len(graph) if graph else 0.0
    return GraphStats(nodes=len(graph), edges=edges, avg_connections=avg)
