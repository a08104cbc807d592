"""
Flow Builder

Constructs editor graphs the way the canvas does (drop a node, connect
handles, attach conditions) without any UI. Node ids come from an id
generator owned by the builder, so each editing session counts on its own.
"""

from typing import List, Dict, Optional, Any, Union
import copy

from schemas.flow_graph import (
    FlowGraph, FlowNode, FlowEdge, EdgeData, Position, NodeData, NodeType,
    TaskNodeData, ConditionExpression, Rule, data_model_for,
)


class FlowBuilderError(Exception):
    """Raised when a builder operation references a missing node or edge"""
    pass


class NodeIdGenerator:
    """Monotonic node id source scoped to one editing session: node_0, node_1, ..."""

    def __init__(self, prefix: str = "node_", start: int = 0):
        self.prefix = prefix
        self._next = start

    def __call__(self) -> str:
        node_id = f"{self.prefix}{self._next}"
        self._next += 1
        return node_id


DEFAULT_NODE_DATA: Dict[str, Dict[str, Any]] = {
    NodeType.START.value: {"label": "开始"},
    NodeType.END.value: {"label": "结束"},
    NodeType.TASK.value: {"label": "新任务"},
    NodeType.IF.value: {"label": "IF 条件"},
    NodeType.EXCLUSIVE_GATEWAY.value: {"label": "排他网关", "gatewayType": "exclusive"},
    NodeType.INCLUSIVE_GATEWAY.value: {"label": "包容网关", "gatewayType": "inclusive"},
}


def default_node_data(node_type: str) -> NodeData:
    """Initial data for a freshly dropped node; unknown types start out as tasks"""
    if node_type not in DEFAULT_NODE_DATA:
        return TaskNodeData(label=DEFAULT_NODE_DATA[NodeType.TASK.value]["label"])
    return data_model_for(node_type).model_validate(DEFAULT_NODE_DATA[node_type])


def edge_id_for(source: str, target: str, source_handle: Optional[str], target_handle: Optional[str]) -> str:
    return f"reactflow__edge-{source}{source_handle or ''}-{target}{target_handle or ''}"


class FlowBuilder:
    """
    Mutable working copy of a graph for one editing session.
    Hand snapshot() results to the exporter; they never alias builder state.
    """

    def __init__(self, id_generator: Optional[NodeIdGenerator] = None):
        self.id_generator = id_generator or NodeIdGenerator()
        self.nodes: List[FlowNode] = []
        self.edges: List[FlowEdge] = []

    def add_node(
        self,
        node_type: Union[NodeType, str],
        position: Optional[Union[Position, Dict[str, float]]] = None,
        data: Optional[Union[NodeData, Dict[str, Any]]] = None,
    ) -> FlowNode:
        """Add a node with a generated id and per-type default data."""
        if isinstance(node_type, NodeType):
            node_type = node_type.value
        if data is None:
            data = default_node_data(node_type)

        node = FlowNode(
            id=self.id_generator(),
            type=node_type,
            position=position or Position(),
            data=data,
        )
        self.nodes.append(node)
        return node

    def connect(
        self,
        source: str,
        target: str,
        source_handle: Optional[str] = None,
        target_handle: Optional[str] = None,
    ) -> FlowEdge:
        """Connect two nodes; repeating an existing connection returns the existing edge."""
        self._require_node(source)
        self._require_node(target)

        for edge in self.edges:
            if (edge.source, edge.target, edge.source_handle, edge.target_handle) == (
                source, target, source_handle, target_handle
            ):
                return edge

        edge = FlowEdge(
            id=edge_id_for(source, target, source_handle, target_handle),
            source=source,
            target=target,
            source_handle=source_handle,
            target_handle=target_handle,
            data=EdgeData(),
        )
        self.edges.append(edge)
        return edge

    def update_node_data(self, node_id: str, data: Union[NodeData, Dict[str, Any]]) -> FlowNode:
        """Replace a node's data, validated against the node's type."""
        index = self._node_index(node_id)
        existing = self.nodes[index]
        node = FlowNode(id=existing.id, type=existing.type, position=existing.position, data=data)
        self.nodes[index] = node
        return node

    def set_edge_condition(
        self,
        edge_id: str,
        condition: Optional[ConditionExpression] = None,
        rule: Optional[Rule] = None,
    ) -> FlowEdge:
        """Attach a legacy expression and/or a rule to an edge; passing neither clears both."""
        index = self._edge_index(edge_id)
        edge = self.edges[index]
        data = edge.data.model_copy() if edge.data else EdgeData()
        data.condition = condition
        data.rule = rule
        edge = edge.model_copy(update={"data": data})
        self.edges[index] = edge
        return edge

    def remove_node(self, node_id: str) -> None:
        """Remove a node together with every edge attached to it."""
        index = self._node_index(node_id)
        del self.nodes[index]
        self.edges = [e for e in self.edges if e.source != node_id and e.target != node_id]

    def remove_edge(self, edge_id: str) -> None:
        del self.edges[self._edge_index(edge_id)]

    def clear(self) -> None:
        """Empty the canvas; the id generator keeps counting."""
        self.nodes = []
        self.edges = []

    def snapshot(self) -> FlowGraph:
        """Independent copy of the current graph."""
        return FlowGraph(nodes=copy.deepcopy(self.nodes), edges=copy.deepcopy(self.edges))

    def _require_node(self, node_id: str) -> None:
        self._node_index(node_id)

    def _node_index(self, node_id: str) -> int:
        for i, node in enumerate(self.nodes):
            if node.id == node_id:
                return i
        raise FlowBuilderError(f"Node with ID '{node_id}' not found")

    def _edge_index(self, edge_id: str) -> int:
        for i, edge in enumerate(self.edges):
            if edge.id == edge_id:
                return i
        raise FlowBuilderError(f"Edge with ID '{edge_id}' not found")
