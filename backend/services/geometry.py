"""
Diagram Geometry

Fixed BPMN shape sizes per node type, connection anchor points and
Bezier sampling for sequence-flow waypoints.
"""

from typing import List, NamedTuple, Optional
import math

from schemas.flow_graph import FlowNode, NodeType, GATEWAY_TYPES

STRAIGHT_EDGE_DISTANCE = 50
MAX_CONTROL_OFFSET = 150
CONTROL_OFFSET_RATIO = 0.4
SAMPLE_SPACING = 35
MIN_SAMPLES = 5
MAX_SAMPLES = 30

IF_HANDLE_RATIOS = {"if": 0.35, "else": 0.65}


class NodeSize(NamedTuple):
    width: int
    height: int


class Point(NamedTuple):
    x: float
    y: float


EVENT_SIZE = NodeSize(36, 36)
GATEWAY_SIZE = NodeSize(50, 50)
TASK_SIZE = NodeSize(100, 80)

_NODE_SIZES = {
    NodeType.START.value: EVENT_SIZE,
    NodeType.END.value: EVENT_SIZE,
    NodeType.IF.value: GATEWAY_SIZE,
    NodeType.EXCLUSIVE_GATEWAY.value: GATEWAY_SIZE,
    NodeType.INCLUSIVE_GATEWAY.value: GATEWAY_SIZE,
    NodeType.TASK.value: TASK_SIZE,
}


def round_coordinate(value: float) -> int:
    """Round half up, matching the editor's Math.round (Python's round() is half-even)."""
    return int(math.floor(value + 0.5))


def get_node_size(node_type: Optional[str]) -> NodeSize:
    """Bounding box for a node type; unknown types are sized like tasks."""
    return _NODE_SIZES.get(node_type, TASK_SIZE)


def get_source_anchor(node: FlowNode, handle: Optional[str] = None) -> Point:
    """
    Point where an outgoing edge leaves the node.

    If nodes have two outputs on the right edge ("if" at 35%, "else" at 65%
    of the height); gateways can leave right, top or bottom; everything else
    leaves from the right-centre.
    """
    width, height = get_node_size(node.type)
    x, y = node.position.x, node.position.y

    if node.type == NodeType.IF.value:
        ratio = IF_HANDLE_RATIOS.get(handle, 0.5)
        return Point(x + width, y + height * ratio)

    if node.type in GATEWAY_TYPES:
        if handle == "top":
            return Point(x + width / 2, y)
        if handle == "bottom":
            return Point(x + width / 2, y + height)

    return Point(x + width, y + height / 2)


def get_target_anchor(node: FlowNode) -> Point:
    """Incoming edges always attach at the left-centre."""
    width, height = get_node_size(node.type)
    return Point(node.position.x, node.position.y + height / 2)


def _cubic_bezier(t: float, p0: float, p1: float, p2: float, p3: float) -> float:
    mt = 1 - t
    return mt ** 3 * p0 + 3 * mt ** 2 * t * p1 + 3 * mt * t ** 2 * p2 + t ** 3 * p3


def generate_bezier_waypoints(start: Point, end: Point) -> List[Point]:
    """
    Approximate the editor's bezier edge with a polyline.

    Anchors closer than STRAIGHT_EDGE_DISTANCE give a straight two-point
    segment. Otherwise the curve has horizontal tangents at both ends and is
    sampled at evenly spaced t, between MIN_SAMPLES and MAX_SAMPLES points
    including both endpoints. Coordinates are rounded to integers.
    """
    dx = end.x - start.x
    dy = end.y - start.y
    distance = math.sqrt(dx * dx + dy * dy)

    if distance < STRAIGHT_EDGE_DISTANCE:
        return [
            Point(round_coordinate(start.x), round_coordinate(start.y)),
            Point(round_coordinate(end.x), round_coordinate(end.y)),
        ]

    offset = min(distance * CONTROL_OFFSET_RATIO, MAX_CONTROL_OFFSET)
    control1 = Point(start.x + offset, start.y)
    control2 = Point(end.x - offset, end.y)

    samples = max(MIN_SAMPLES, min(MAX_SAMPLES, math.ceil(distance / SAMPLE_SPACING)))

    waypoints = []
    for i in range(samples):
        t = i / (samples - 1)
        x = _cubic_bezier(t, start.x, control1.x, control2.x, end.x)
        y = _cubic_bezier(t, start.y, control1.y, control2.y, end.y)
        waypoints.append(Point(round_coordinate(x), round_coordinate(y)))

    return waypoints
