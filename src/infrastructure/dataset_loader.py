"""
City dataset files.

Two JSON shapes are accepted:

* street dataset -- ``{"nodes": [...], "edges": [...]}`` exported from
  OpenStreetMap, edges as ``{from, to, weight, street_name}``;
* node list      -- a bare ``[{id, lat, lon, elevation?}, ...]``; routes
  over it fall back to the proximity graph.

Malformed items, and nodes repeating an id already seen (the first one
wins), are skipped and counted rather than raised, so one bad record does
not take the whole map down.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from src.domain.entities import GeoNode, StreetEdge

logger = logging.getLogger(__name__)


class DatasetFormatError(ValueError):
    """Raised when a payload is neither a street dataset nor a node list."""


@dataclass
class CityDataset:
    nodes: list[GeoNode]
    edges: list[StreetEdge] = field(default_factory=list)
    skipped_nodes: int = 0
    skipped_edges: int = 0

    @property
    def has_street_edges(self) -> bool:
        return bool(self.edges)


def _parse_node(item: Any) -> Optional[GeoNode]:
    try:
        elevation = item.get("elevation")
        return GeoNode(
            id=int(item["id"]),
            lat=float(item["lat"]),
            lon=float(item["lon"]),
            elevation=float(elevation) if elevation is not None else None,
        )
    except (AttributeError, KeyError, TypeError, ValueError):
        return None


def _parse_edge(item: Any) -> Optional[StreetEdge]:
    try:
        weight = float(item["weight"])
        if weight < 0:
            return None
        return StreetEdge(
            from_id=int(item["from"]),
            to_id=int(item["to"]),
            weight=weight,
            street_name=str(item.get("street_name") or ""),
        )
    except (AttributeError, KeyError, TypeError, ValueError):
        return None


def parse_dataset(payload: Any) -> CityDataset:
    if isinstance(payload, dict) and "nodes" in payload:
        raw_nodes = payload["nodes"]
        raw_edges = payload.get("edges") or []
    elif isinstance(payload, list):
        raw_nodes, raw_edges = payload, []
    else:
        raise DatasetFormatError(
            "Expected {'nodes': [...], 'edges': [...]} or a list of nodes"
        )
    if not isinstance(raw_nodes, list) or not isinstance(raw_edges, list):
        raise DatasetFormatError("'nodes' and 'edges' must be lists")

    nodes: list[GeoNode] = []
    seen: set[int] = set()
    duplicates = 0
    for node in map(_parse_node, raw_nodes):
        if node is None:
            continue
        if node.id in seen:
            duplicates += 1
            continue
        seen.add(node.id)
        nodes.append(node)
    if duplicates:
        logger.warning("Dropped %d nodes with repeated ids", duplicates)

    edges = [e for e in map(_parse_edge, raw_edges) if e is not None]

    dataset = CityDataset(
        nodes=nodes,
        edges=edges,
        skipped_nodes=len(raw_nodes) - len(nodes),
        skipped_edges=len(raw_edges) - len(edges),
    )
    if dataset.skipped_nodes or dataset.skipped_edges:
        logger.warning(
            "Skipped %d malformed nodes and %d malformed edges",
            dataset.skipped_nodes,
            dataset.skipped_edges,
        )
    return dataset


def load_dataset_file(path: str | Path) -> CityDataset:
    with open(path, encoding="utf-8") as fh:
        payload = json.load(fh)
    dataset = parse_dataset(payload)
    logger.info(
        "Loaded %d city nodes with %d street connections from %s",
        len(dataset.nodes),
        len(dataset.edges),
        path,
    )
    return dataset
