"""
Domain entities shared by the graph builder, the shortest-path engine and
the playback model.

* ``GeoNode`` / ``StreetEdge`` are immutable input records.
* ``Graph`` is a plain ``dict`` of node id -> ``GraphEntry``; every
  neighbour target is guaranteed to be a key.
* ``AlgorithmStep`` is an immutable snapshot appended to the step trace.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

from .enums import GraphMode, StepAction


class RouteInputError(ValueError):
    """Raised when the source or target id is not part of the node set."""

    def __init__(self, missing_ids: list[int]):
        self.missing_ids = missing_ids
        ids = ", ".join(str(i) for i in missing_ids)
        super().__init__(f"Unknown node id(s): {ids}")


class InvalidStepIndex(IndexError):
    """Raised when playback jumps outside the step trace."""


# ── Value Objects ─────────────────────────────────────────────────────


@dataclass(frozen=True)
class GeoNode:
    id: int
    lat: float
    lon: float
    elevation: Optional[float] = None


@dataclass(frozen=True)
class StreetEdge:
    from_id: int
    to_id: int
    weight: float  # metres
    street_name: str = ""


@dataclass(frozen=True)
class Neighbor:
    node: GeoNode
    distance: float
    street_name: Optional[str] = None


@dataclass
class GraphEntry:
    node: GeoNode
    neighbors: list[Neighbor] = field(default_factory=list)


Graph = dict[int, GraphEntry]


# ── Step trace ────────────────────────────────────────────────────────


@dataclass(frozen=True)
class AlgorithmStep:
    step: int
    action: StepAction
    current_node: int
    explored_nodes: list[int]
    frontier: list[int]
    distances: dict[int, float]
    description: str
    timestamp: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc)
    )


# ── Results ───────────────────────────────────────────────────────────


@dataclass(frozen=True)
class GraphStats:
    nodes: int
    edges: int
    avg_connections: float


@dataclass(frozen=True)
class RouteMetrics:
    execution_time_ms: float
    nodes_explored: int
    graph_nodes: int
    graph_edges: int
    avg_connections: float


@dataclass
class RouteResult:
    route: list[GeoNode]
    steps: list[AlgorithmStep]
    total_distance_m: float
    geometric_length_m: float
    mode: GraphMode
    metrics: RouteMetrics

    @property
    def found(self) -> bool:
        return bool(self.route)

    @property
    def node_ids(self) -> list[int]:
        return [n.id for n in self.route]
