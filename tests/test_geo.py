"""Unit tests for the Haversine helpers, nearby search and map bounds."""

import pytest

from src.domain.entities import GeoNode
from src.domain.geo import (
    EARTH_RADIUS_M,
    compute_bounds,
    find_nearby_nodes,
    haversine_m,
    quadrant,
    route_length_m,
)


class TestHaversine:
    def test_same_point_is_zero(self):
        assert haversine_m(24.78, -107.38, 24.78, -107.38) == 0.0

    def test_one_degree_of_latitude(self):
        # pi * R / 180 ~= 111.19 km
        d = haversine_m(0.0, 0.0, 1.0, 0.0)
        assert d == pytest.approx(3.141592653589793 * EARTH_RADIUS_M / 180, rel=1e-9)

    def test_known_distance(self):
        # Culiacan cathedral -> Jardin Botanico, roughly 2.5 km
        d = haversine_m(24.8069, -107.3938, 24.8162, -107.3739)
        assert 2000 < d < 2600

    def test_symmetric(self):
        d1 = haversine_m(24.0, -107.0, 25.0, -106.0)
        d2 = haversine_m(25.0, -106.0, 24.0, -107.0)
        assert abs(d1 - d2) < 1e-6

    def test_antipodal_points_are_half_circumference(self):
        d = haversine_m(0.0, 0.0, 0.0, 180.0)
        assert d == pytest.approx(3.141592653589793 * EARTH_RADIUS_M, rel=1e-9)


class TestRouteLength:
    def test_empty_and_single_node_are_zero(self):
        assert route_length_m([]) == 0.0
        assert route_length_m([GeoNode(1, 0.0, 0.0)]) == 0.0

    def test_sums_consecutive_hops(self):
        a, b, c = GeoNode(1, 0.0, 0.0), GeoNode(2, 0.0, 0.001), GeoNode(3, 0.001, 0.001)
        expected = haversine_m(0.0, 0.0, 0.0, 0.001) + haversine_m(0.0, 0.001, 0.001, 0.001)
        assert route_length_m([a, b, c]) == pytest.approx(expected)


class TestQuadrant:
    origin = GeoNode(0, 10.0, 10.0)

    @pytest.mark.parametrize(
        "lat, lon, expected",
        [
            (10.1, 10.1, "NE"),
            (10.1, 9.9, "NW"),
            (9.9, 10.1, "SE"),
            (9.9, 9.9, "SW"),
            (10.0, 10.1, "NE"),  # due east counts as north
            (10.1, 10.0, "NE"),  # due north counts as east
        ],
    )
    def test_quadrants(self, lat, lon, expected):
        assert quadrant(self.origin, GeoNode(1, lat, lon)) == expected


class TestNearbyNodes:
    def test_filters_by_radius_and_sorts(self, grid_nodes):
        origin = grid_nodes[5]
        found = find_nearby_nodes(grid_nodes, origin.lat, origin.lon, radius_m=60)
        assert found[0].id == origin.id
        assert {n.id for n in found[1:]} == {2, 5, 7, 10}
        dists = [haversine_m(origin.lat, origin.lon, n.lat, n.lon) for n in found]
        assert dists == sorted(dists)

    def test_limit(self, grid_nodes):
        found = find_nearby_nodes(grid_nodes, 24.78, -107.39, radius_m=10_000, limit=3)
        assert len(found) == 3
        assert found[0].id == 1

    def test_nothing_in_range(self, grid_nodes):
        assert find_nearby_nodes(grid_nodes, 0.0, 0.0, radius_m=1000) == []


class TestBounds:
    def test_empty(self):
        assert compute_bounds([]) is None

    def test_box_and_center(self, grid_nodes):
        b = compute_bounds(grid_nodes)
        assert b.min_lat == pytest.approx(24.78)
        assert b.max_lat == pytest.approx(24.7815)
        assert b.center_lon == pytest.approx((-107.39 + -107.3885) / 2)
        assert b.zoom == 15  # range < 0.01 deg

    def test_zoom_shrinks_with_range(self):
        nodes = [GeoNode(1, 24.0, -107.0), GeoNode(2, 24.3, -107.0)]
        assert compute_bounds(nodes).zoom == 11
