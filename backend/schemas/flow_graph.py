# schemas/flow_graph.py
from __future__ import annotations
from typing import List, Optional, Dict, Any, Union, Type
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field, model_validator

# ---------- Core Enums ----------

class NodeType(str, Enum):
    START = "start"
    END = "end"
    TASK = "task"
    IF = "if"
    EXCLUSIVE_GATEWAY = "exclusiveGateway"
    INCLUSIVE_GATEWAY = "inclusiveGateway"

class GatewayType(str, Enum):
    EXCLUSIVE = "exclusive"
    INCLUSIVE = "inclusive"

class OperatorType(str, Enum):
    EQUAL = "equal"
    NOT_EQUAL = "not_equal"
    GREATER_THAN = "greater_than"
    GREATER_THAN_OR_EQUAL = "greater_than_or_equal"
    LESS_THAN = "less_than"
    LESS_THAN_OR_EQUAL = "less_than_or_equal"
    CONTAINS = "contains"
    NOT_CONTAINS = "not_contains"
    STARTS_WITH = "starts_with"
    ENDS_WITH = "ends_with"
    IS_EMPTY = "is_empty"
    IS_NOT_EMPTY = "is_not_empty"
    IS_TRUE = "is_true"
    IS_FALSE = "is_false"

class CombineOperation(str, Enum):
    AND = "AND"
    OR = "OR"

GATEWAY_TYPES = (NodeType.EXCLUSIVE_GATEWAY.value, NodeType.INCLUSIVE_GATEWAY.value)

class FlowModel(BaseModel):
    """Base for models exchanged with the editor (camelCase keys on the wire)."""
    model_config = ConfigDict(populate_by_name=True)

# ---------- Rule Models ----------

class Condition(FlowModel):
    field: str
    # Kept as a plain string: unrecognised operators compile with the equality template
    operator: str = Field(default=OperatorType.EQUAL.value)
    value: Union[bool, int, float, str, None] = None

class Rule(FlowModel):
    conditions: List[Condition] = Field(default_factory=list)
    combine_operation: CombineOperation = Field(default=CombineOperation.AND, alias="combineOperation")

class ConditionExpression(FlowModel):
    """Legacy free-text condition entered before structured rules existed."""
    expression: str = ""

# ---------- Node Data Variants ----------

class NodeData(FlowModel):
    label: str = ""

class StartNodeData(NodeData):
    pass

class EndNodeData(NodeData):
    pass

class TaskNodeData(NodeData):
    assignee: Optional[str] = None

class IfNodeData(NodeData):
    rule: Optional[Rule] = None

class ExclusiveGatewayNodeData(NodeData):
    gateway_type: GatewayType = Field(default=GatewayType.EXCLUSIVE, alias="gatewayType")
    default_path: Optional[str] = Field(default=None, alias="defaultPath")
    rules: Optional[List[Rule]] = None

class InclusiveGatewayNodeData(NodeData):
    gateway_type: GatewayType = Field(default=GatewayType.INCLUSIVE, alias="gatewayType")

NODE_DATA_MODELS: Dict[str, Type[NodeData]] = {
    NodeType.START.value: StartNodeData,
    NodeType.END.value: EndNodeData,
    NodeType.TASK.value: TaskNodeData,
    NodeType.IF.value: IfNodeData,
    NodeType.EXCLUSIVE_GATEWAY.value: ExclusiveGatewayNodeData,
    NodeType.INCLUSIVE_GATEWAY.value: InclusiveGatewayNodeData,
}

AnyNodeData = Union[
    StartNodeData,
    EndNodeData,
    TaskNodeData,
    IfNodeData,
    ExclusiveGatewayNodeData,
    InclusiveGatewayNodeData,
    NodeData,
]

def data_model_for(node_type: str) -> Type[NodeData]:
    """Return the data variant for a node type; unknown types get the generic one."""
    return NODE_DATA_MODELS.get(node_type, NodeData)

# ---------- Graph Models ----------

class Position(FlowModel):
    # Non-finite coordinates cannot be placed on the diagram
    x: float = Field(default=0.0, allow_inf_nan=False)
    y: float = Field(default=0.0, allow_inf_nan=False)

class FlowNode(FlowModel):
    id: str
    # Free string so unknown node types reach the exporter's fallbacks
    type: str = Field(default=NodeType.TASK.value)
    position: Position = Field(default_factory=Position)
    data: AnyNodeData = Field(default_factory=NodeData)

    @model_validator(mode="before")
    @classmethod
    def _select_data_variant(cls, values: Any) -> Any:
        if not isinstance(values, dict):
            return values

        values = dict(values)
        node_type = values.get("type") or NodeType.TASK.value
        values["type"] = node_type
        model = data_model_for(node_type)

        raw = values.get("data")
        if raw is None:
            values["data"] = model()
        elif isinstance(raw, BaseModel) and not isinstance(raw, model):
            values["data"] = model.model_validate(raw.model_dump(by_alias=True))
        elif isinstance(raw, dict):
            values["data"] = model.model_validate(raw)
        return values

class EdgeData(FlowModel):
    label: Optional[str] = None
    rule: Optional[Rule] = None
    condition: Optional[ConditionExpression] = None

class FlowEdge(FlowModel):
    id: str
    source: str
    target: str
    source_handle: Optional[str] = Field(default=None, alias="sourceHandle")
    target_handle: Optional[str] = Field(default=None, alias="targetHandle")
    data: Optional[EdgeData] = None

class FlowGraph(FlowModel):
    nodes: List[FlowNode] = Field(default_factory=list)
    edges: List[FlowEdge] = Field(default_factory=list)

    def get_node(self, node_id: str) -> Optional[FlowNode]:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def get_edge(self, edge_id: str) -> Optional[FlowEdge]:
        for edge in self.edges:
            if edge.id == edge_id:
                return edge
        return None

# ---------- Validation Helpers ----------

def validate_flow_references(graph: FlowGraph) -> List[str]:
    """
    Lenient reference check for an exported graph:
    - node ids unique
    - edge ids unique
    - edge source/target point at existing nodes

    Returns human-readable warnings; never raises. Dangling edges are still
    exported (as placeholder diagram edges).
    """
    warnings: List[str] = []

    seen_nodes: Dict[str, int] = {}
    for n in graph.nodes:
        seen_nodes[n.id] = seen_nodes.get(n.id, 0) + 1
    for node_id, count in seen_nodes.items():
        if count > 1:
            warnings.append(f"Node id '{node_id}' is used {count} times")

    seen_edges: Dict[str, int] = {}
    for e in graph.edges:
        seen_edges[e.id] = seen_edges.get(e.id, 0) + 1
    for edge_id, count in seen_edges.items():
        if count > 1:
            warnings.append(f"Edge id '{edge_id}' is used {count} times")

    for e in graph.edges:
        if e.source not in seen_nodes:
            warnings.append(f"Edge '{e.id}' source '{e.source}' not found")
        if e.target not in seen_nodes:
            warnings.append(f"Edge '{e.id}' target '{e.target}' not found")

    return warnings
