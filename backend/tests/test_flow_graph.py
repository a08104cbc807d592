"""Tests for the editor graph schema."""

import pytest
from pydantic import ValidationError

from schemas.flow_graph import (
    FlowGraph, FlowNode, NodeData, TaskNodeData, IfNodeData, ExclusiveGatewayNodeData,
    InclusiveGatewayNodeData, StartNodeData, CombineOperation, GatewayType, Position, validate_flow_references,
)


class TestFlowNode:
    """Test node data variant selection."""

    def test_data_variant_follows_type(self):
        graph = FlowGraph.model_validate({
            "nodes": [
                {"id": "s", "type": "start", "data": {"label": "Go"}},
                {"id": "t", "type": "task", "data": {"label": "Do", "assignee": "kim"}},
                {"id": "i", "type": "if", "data": {"rule": {"conditions": [], "combineOperation": "OR"}}},
                {"id": "x", "type": "exclusiveGateway", "data": {"defaultPath": "e1", "rules": []}},
                {"id": "o", "type": "inclusiveGateway", "data": {"label": "Fork"}},
                {"id": "u", "type": "custom", "data": {"label": "?"}},
            ],
        })
        s, t, i, x, o, u = graph.nodes

        assert isinstance(s.data, StartNodeData)
        assert isinstance(t.data, TaskNodeData) and t.data.assignee == "kim"
        assert isinstance(i.data, IfNodeData) and i.data.rule.combine_operation == CombineOperation.OR
        assert isinstance(x.data, ExclusiveGatewayNodeData) and x.data.default_path == "e1"
        assert x.data.gateway_type == GatewayType.EXCLUSIVE
        assert isinstance(o.data, InclusiveGatewayNodeData)
        assert type(u.data) is NodeData

    def test_missing_type_and_data_defaults(self):
        node = FlowNode.model_validate({"id": "n"})

        assert node.type == "task"
        assert isinstance(node.data, TaskNodeData)
        assert node.position.x == 0 and node.position.y == 0

    def test_data_instance_converted_to_variant(self):
        node = FlowNode(id="t", type="task", data=NodeData(label="Plain"))

        assert isinstance(node.data, TaskNodeData)
        assert node.data.label == "Plain"

    def test_condition_value_types_preserved(self):
        graph = FlowGraph.model_validate({
            "nodes": [{"id": "i", "type": "if", "data": {"rule": {"conditions": [
                {"field": "a", "operator": "equal", "value": 100},
                {"field": "b", "operator": "equal", "value": "100"},
                {"field": "c", "operator": "equal", "value": True},
                {"field": "d", "operator": "equal", "value": 1.5},
            ]}}}],
        })
        values = [c.value for c in graph.nodes[0].data.rule.conditions]

        assert values == [100, "100", True, 1.5]
        assert [type(v) for v in values] == [int, str, bool, float]

    def test_edge_handles_from_camel_case(self):
        graph = FlowGraph.model_validate({
            "nodes": [],
            "edges": [{"id": "e", "source": "a", "target": "b", "sourceHandle": "else", "targetHandle": None}],
        })

        assert graph.edges[0].source_handle == "else"
        assert graph.edges[0].target_handle is None


class TestValidateFlowReferences:

    def test_clean_graph_has_no_warnings(self, linear_graph):
        assert validate_flow_references(linear_graph) == []

    def test_reports_duplicates_and_dangling_edges(self):
        graph = FlowGraph.model_validate({
            "nodes": [{"id": "a"}, {"id": "a"}],
            "edges": [
                {"id": "e", "source": "a", "target": "b"},
                {"id": "e", "source": "c", "target": "a"},
            ],
        })

        warnings = validate_flow_references(graph)

        assert "Node id 'a' is used 2 times" in warnings
        assert "Edge id 'e' is used 2 times" in warnings
        assert "Edge 'e' target 'b' not found" in warnings
        assert "Edge 'e' source 'c' not found" in warnings


class TestPosition:
    """Test coordinate validation."""

    @pytest.mark.parametrize("x", [float("nan"), float("inf"), float("-inf")])
    def test_non_finite_coordinates_rejected(self, x):
        with pytest.raises(ValidationError):
            FlowNode.model_validate({"id": "n", "type": "task", "position": {"x": x, "y": 0}})

    def test_finite_coordinates_accepted(self):
        assert Position(x=-12.5, y=1e6).x == -12.5
