"""Tests for shape sizes, anchors and bezier waypoints."""

import math

import pytest

from schemas.flow_graph import FlowNode
from services.geometry import (
    Point, get_node_size, get_source_anchor, get_target_anchor,
    generate_bezier_waypoints, round_coordinate,
)


def _node(node_type, x=100, y=100):
    return FlowNode(id="n", type=node_type, position={"x": x, "y": y})


class TestNodeSize:

    @pytest.mark.parametrize("node_type,expected", [
        ("start", (36, 36)),
        ("end", (36, 36)),
        ("if", (50, 50)),
        ("exclusiveGateway", (50, 50)),
        ("inclusiveGateway", (50, 50)),
        ("task", (100, 80)),
        ("subProcess", (100, 80)),
        (None, (100, 80)),
    ])
    def test_sizes_by_type(self, node_type, expected):
        assert tuple(get_node_size(node_type)) == expected


class TestAnchors:
    """Test where edges attach to nodes."""

    def test_if_node_handles(self):
        node = _node("if")

        assert get_source_anchor(node, "if") == Point(150, 117.5)
        assert get_source_anchor(node, "else") == Point(150, 132.5)
        assert get_source_anchor(node, None) == Point(150, 125)
        assert get_source_anchor(node, "top") == Point(150, 125)

    @pytest.mark.parametrize("node_type", ["exclusiveGateway", "inclusiveGateway"])
    def test_gateway_handles(self, node_type):
        node = _node(node_type)

        assert get_source_anchor(node, "right") == Point(150, 125)
        assert get_source_anchor(node, "top") == Point(125, 100)
        assert get_source_anchor(node, "bottom") == Point(125, 150)
        assert get_source_anchor(node, "unknown") == Point(150, 125)
        assert get_source_anchor(node) == Point(150, 125)

    def test_other_nodes_ignore_handle(self):
        node = _node("task", x=0, y=0)

        assert get_source_anchor(node, "top") == Point(100, 40)
        assert get_source_anchor(node, "else") == Point(100, 40)

    def test_target_anchor_is_left_center(self):
        assert get_target_anchor(_node("task", x=10, y=20)) == Point(10, 60)
        assert get_target_anchor(_node("end", x=10, y=20)) == Point(10, 38)


class TestRoundCoordinate:

    def test_rounds_half_up(self):
        assert round_coordinate(2.5) == 3
        assert round_coordinate(3.5) == 4
        assert round_coordinate(-2.5) == -2
        assert round_coordinate(117.4) == 117


class TestBezierWaypoints:
    """Test curve sampling between two anchors."""

    def test_short_distance_is_straight(self):
        """Test anchors under 50 units apart produce just the endpoints."""
        waypoints = generate_bezier_waypoints(Point(0, 0), Point(30, 30.4))

        assert waypoints == [Point(0, 0), Point(30, 30)]

    def test_horizontal_curve_samples(self):
        waypoints = generate_bezier_waypoints(Point(0, 0), Point(100, 0))

        assert [p.x for p in waypoints] == [0, 27, 50, 73, 100]
        assert all(p.y == 0 for p in waypoints)

    def test_endpoints_match_anchors(self):
        start, end = Point(36, 18), Point(200, 40)

        waypoints = generate_bezier_waypoints(start, end)

        assert waypoints[0] == start
        assert waypoints[-1] == end

    def test_sample_count_grows_with_distance(self):
        waypoints = generate_bezier_waypoints(Point(0, 0), Point(700, 0))

        assert len(waypoints) == math.ceil(700 / 35)

    @pytest.mark.parametrize("end", [
        Point(50, 0), Point(0, 60), Point(120, 90), Point(500, -300), Point(3000, 2000),
    ])
    def test_sample_count_bounds(self, end):
        """Test every curve has between 5 and 30 points."""
        waypoints = generate_bezier_waypoints(Point(0, 0), end)

        assert 5 <= len(waypoints) <= 30
        assert waypoints[0] == Point(0, 0)
        assert waypoints[-1] == Point(round_coordinate(end.x), round_coordinate(end.y))

    def test_coordinates_are_integers(self):
        waypoints = generate_bezier_waypoints(Point(10.3, 20.7), Point(333.3, 111.1))

        assert all(isinstance(p.x, int) and isinstance(p.y, int) for p in waypoints)
