"""
Geographic helpers built on the Haversine formula.

Every distance in the project -- proximity edges of the fallback graph,
nearby-node search and reported route lengths -- goes through
``haversine_m`` so the figures stay comparable.

Complexity: O(1) per distance, O(N log N) for ``find_nearby_nodes``.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Sequence

from .entities import GeoNode

EARTH_RADIUS_M = 6_371_000.0

# Culiacan, Sinaloa: centre of the bundled street dataset
CULIACAN_CENTER = (24.7841, -107.3866)


def haversine_m(
    lat1: float, lon1: float, lat2: float, lon2: float
) -> float:
    """Return the great-circle distance in **metres** between two points."""
    lat1_r, lat2_r = math.radians(lat1), math.radians(lat2)
    dlat = math.radians(lat2 - lat1)
    dlon = math.radians(lon2 - lon1)

    a = (
        math.sin(dlat / 2) ** 2
        + math.cos(lat1_r) * math.cos(lat2_r) * math.sin(dlon / 2) ** 2
    )
    return 2 * EARTH_RADIUS_M * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def node_distance_m(a: GeoNode, b: GeoNode) -> float:
    return haversine_m(a.lat, a.lon, b.lat, b.lon)


def route_length_m(nodes: Sequence[GeoNode]) -> float:
    """Sum of the great-circle hops along *nodes* (0 for fewer than two)."""
    total = 0.0
    for prev, cur in zip(nodes, nodes[1:]):
        total += node_distance_m(prev, cur)
    return total


def quadrant(origin: GeoNode, other: GeoNode) -> str:
    """
    Compass quadrant of *other* as seen from *origin*.

    Zero deltas count as north / east, so a point due east is ``"NE"``.
    """
    lat_part = "N" if other.lat - origin.lat >= 0 else "S"
    lon_part = "E" if other.lon - origin.lon >= 0 else "W"
    return lat_part + lon_part


def find_nearby_nodes(
    nodes: Iterable[GeoNode],
    lat: float,
    lon: float,
    radius_m: float,
    limit: int = 10,
) -> list[GeoNode]:
    """Nodes within *radius_m* of a point, closest first, at most *limit*."""
    candidates = []
    for node in nodes:
        d = haversine_m(lat, lon, node.lat, node.lon)
        if d <= radius_m:
            candidates.append((d, node))
    candidates.sort(key=lambda item: item[0])
    return [node for _, node in candidates[:limit]]


# ── Map bounds ────────────────────────────────────────────────────────


@dataclass(frozen=True)
class CityBounds:
    min_lat: float
    max_lat: float
    min_lon: float
    max_lon: float
    center_lat: float
    center_lon: float
    zoom: int


def _zoom_for_range(max_range: float) -> int:
    if max_range < 0.01:
        return 15
    if max_range < 0.05:
        return 14
    if max_range < 0.1:
        return 13
    if max_range < 0.2:
        return 12
    return 11


def compute_bounds(nodes: Sequence[GeoNode]) -> CityBounds | None:
    """Bounding box, centre and a suggested map zoom; ``None`` if empty."""
    if not nodes:
        return None

    lats = [n.lat for n in nodes]
    lons = [n.lon for n in nodes]
    min_lat, max_lat = min(lats), max(lats)
    min_lon, max_lon = min(lons), max(lons)

    return CityBounds(
        min_lat=min_lat,
        max_lat=max_lat,
        min_lon=min_lon,
        max_lon=max_lon,
        center_lat=(min_lat + max_lat) / 2,
        center_lon=(min_lon + max_lon) / 2,
        zoom=_zoom_for_range(max(max_lat - min_lat, max_lon - min_lon)),
    )
