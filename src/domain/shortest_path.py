"""
Instrumented Dijkstra Search
============================

Classic, uninformed Dijkstra over a ``Graph`` built by
``graph_builder``.  Besides the route, every observable state change is
recorded as an ``AlgorithmStep`` so a client can replay the search:

1. ``initialize``   -- source distance 0, every other node unreached.
2. ``select_min``   -- the unvisited node with the smallest finite
   distance is chosen (linear scan, ties go to the first node in graph
   order so traces are reproducible).
3. ``found_target`` -- the chosen node is the target; search stops.
4. ``explore``      -- the chosen node is finalised and at least one
   unvisited neighbour got a shorter distance.  Iterations that improve
   nothing emit no ``explore`` step.

Snapshots only ever contain finite distances.  ``explored_nodes`` lists
finalised nodes in visit order; ``frontier`` lists every node not yet
finalised (reached or not) in graph order.

Complexity: O(V^2 + E) time for the search, plus O(V) per recorded step
for the snapshots.  Weights must be non-negative; negative weights give
undefined routes but the loop still terminates because every iteration
finalises one node.
"""

from __future__ import annotations

import logging
import math
import time
from typing import Optional, Sequence

from .entities import (
    AlgorithmStep,
    GeoNode,
    Graph,
    RouteInputError,
    RouteMetrics,
    RouteResult,
    StreetEdge,
)
from .enums import StepAction
from .graph_builder import (
    DEFAULT_MAX_CONNECTIONS,
    DEFAULT_MAX_RADIUS_M,
    build_graph,
    graph_stats,
)
from .geo import route_length_m

logger = logging.getLogger(__name__)


class _StepRecorder:
    """Append-only step trace with sequential 1-based numbering."""

    def __init__(self) -> None:
        self.steps: list[AlgorithmStep] = []

    def record(
        self,
        action: StepAction,
        current_node: int,
        explored: list[int],
        frontier: list[int],
        distances: dict[int, float],
        description: str,
    ) -> None:
        self.steps.append(
            AlgorithmStep(
                step=len(self.steps) + 1,
                action=action,
                current_node=current_node,
                explored_nodes=list(explored),
                frontier=list(frontier),
                distances=distances,
                description=description,
            )
        )


def _finite(distances: dict[int, float]) -> dict[int, float]:
    return {nid: d for nid, d in distances.items() if d != math.inf}


def _select_min(
    unvisited: dict[int, None], distances: dict[int, float]
) -> Optional[int]:
    best_id: Optional[int] = None
    best = math.inf
    for nid in unvisited:
        if distances[nid] < best:
            best, best_id = distances[nid], nid
    return best_id


def _reconstruct(
    graph: Graph, previous: dict[int, int], source_id: int, target_id: int
) -> list[GeoNode]:
    path: list[GeoNode] = []
    node_id: Optional[int] = target_id
    while node_id is not None:
        path.append(graph[node_id].node)
        node_id = previous.get(node_id)
    path.reverse()

    if path[0].id != source_id:
        return []
    return path


def find_route(
    graph: Graph, source_id: int, target_id: int
) -> tuple[list[GeoNode], list[AlgorithmStep], dict[int, float]]:
    """
    Run Dijkstra from *source_id* to *target_id*.

    Returns ``(route, steps, distances)`` where *route* is empty when the
    target is unreachable and *distances* holds the final finite distances.
    Raises ``RouteInputError`` before recording anything if either id is
    not a key of *graph*.
    """
    missing = [nid for nid in dict.fromkeys((source_id, target_id)) if nid not in graph]
    if missing:
        raise RouteInputError(missing)

    recorder = _StepRecorder()

    if source_id == target_id:
        recorder.record(
            StepAction.INITIALIZE,
            source_id,
            [],
            [source_id],
            {source_id: 0.0},
            f"Source and target are the same node ({source_id}): route cost is 0",
        )
        return [graph[source_id].node], recorder.steps, {source_id: 0.0}

    distances: dict[int, float] = {nid: math.inf for nid in graph}
    distances[source_id] = 0.0
    previous: dict[int, int] = {}
    # dict as an insertion-ordered set keeps selection deterministic
    unvisited: dict[int, None] = dict.fromkeys(graph)
    explored: list[int] = []

    recorder.record(
        StepAction.INITIALIZE,
        source_id,
        explored,
        [source_id],
        {source_id: 0.0},
        "Initialising: source distance = 0, every other node = infinity",
    )

    while unvisited:
        current_id = _select_min(unvisited, distances)
        if current_id is None:
            break

        recorder.record(
            StepAction.SELECT_MIN,
            current_id,
            explored,
            list(unvisited),
            _finite(distances),
            f"Selecting node with the smallest distance: {current_id} "
            f"(distance: {round(distances[current_id])}m)",
        )

        if current_id == target_id:
            recorder.record(
                StepAction.FOUND_TARGET,
                current_id,
                explored + [current_id],
                [],
                _finite(distances),
                "Target reached! Reconstructing the optimal path",
            )
            break

        del unvisited[current_id]
        explored.append(current_id)

        updated: list[int] = []
        for neighbor in graph[current_id].neighbors:
            neighbor_id = neighbor.node.id
            if neighbor_id not in unvisited:
                continue
            candidate = distances[current_id] + neighbor.distance
            if candidate < distances[neighbor_id]:
                distances[neighbor_id] = candidate
                previous[neighbor_id] = current_id
                updated.append(neighbor_id)

        if updated:
            recorder.record(
                StepAction.EXPLORE,
                current_id,
                explored,
                list(unvisited),
                _finite(distances),
                f"Exploring node {current_id}: updated {len(updated)} neighbours",
            )

    route = _reconstruct(graph, previous, source_id, target_id)
    return route, recorder.steps, _finite(distances)


def compute_route(
    nodes: Sequence[GeoNode],
    edges: Optional[Sequence[StreetEdge]],
    source_id: int,
    target_id: int,
    *,
    max_radius_m: float = DEFAULT_MAX_RADIUS_M,
    max_connections: int = DEFAULT_MAX_CONNECTIONS,
) -> RouteResult:
    """
    Build the graph and run the instrumented search.

    This is the single computational entry point used by the API.  The
    ids are checked against *nodes* first so an unknown id is refused
    without building a graph or producing a partial trace.
    """
    known = {node.id for node in nodes}
    missing = [nid for nid in dict.fromkeys((source_id, target_id)) if nid not in known]
    if missing:
        raise RouteInputError(missing)

    started = time.perf_counter()
    graph, mode = build_graph(
        nodes,
        edges,
        max_radius_m=max_radius_m,
        max_connections=max_connections,
    )
    route, steps, distances = find_route(graph, source_id, target_id)
    elapsed_ms = (time.perf_counter() - started) * 1000

    stats = graph_stats(graph)
    total = distances[target_id] if route else 0.0

    if route:
        logger.info(
            "Route %d -> %d found: %d nodes, %.1fm, %d steps (%.1fms)",
            source_id,
            target_id,
            len(route),
            total,
            len(steps),
            elapsed_ms,
        )
    else:
        logger.info(
            "No route %d -> %d after %d steps", source_id, target_id, len(steps)
        )

    return RouteResult(
        route=route,
        steps=steps,
        total_distance_m=total,
        geometric_length_m=route_length_m(route),
        mode=mode,
        metrics=RouteMetrics(
            execution_time_ms=elapsed_ms,
            nodes_explored=sum(
                1 for s in steps if s.action is StepAction.SELECT_MIN
            ),
            graph_nodes=stats.nodes,
            graph_edges=stats.edges,
            avg_connections=stats.avg_connections,
        ),
    )
