"""
BPMN Translator

Converts a FlowGraph into a Camunda 8 BPMN 2.0 XML document
(process model + diagram interchange).
Pure and deterministic: the only varying input is the process id.
"""

from typing import Dict, List, Optional

from schemas.flow_graph import (
    FlowGraph, FlowNode, FlowEdge, NodeType,
    TaskNodeData, IfNodeData, ExclusiveGatewayNodeData,
)
from services.geometry import (
    Point, get_node_size, get_source_anchor, get_target_anchor,
    generate_bezier_waypoints, round_coordinate,
)
from services.rule_compiler import compile_rule, negate_expression
from utils.xml_text import sanitize_id, escape_xml_text, escape_xml_attr

NAMESPACES = {
    "bpmn": "http://www.omg.org/spec/BPMN/20100524/MODEL",
    "bpmndi": "http://www.omg.org/spec/BPMN/20100524/DI",
    "dc": "http://www.omg.org/spec/DD/20100524/DC",
    "di": "http://www.omg.org/spec/DD/20100524/DI",
    "xsi": "http://www.w3.org/2001/XMLSchema-instance",
    "zeebe": "http://camunda.org/schema/zeebe/1.0",
    "modeler": "http://camunda.org/schema/modeler/1.0",
}

TARGET_NAMESPACE = "http://bpmn.io/schema/bpmn"

PLACEHOLDER_WAYPOINTS = [Point(0, 0), Point(100, 100)]


class BpmnTranslator:
    """
    Deterministic translator from FlowGraph to BPMN XML.
    Node and edge order in the output follows the input collections.
    """

    def __init__(
        self,
        exporter: str = "ReactFlow to Camunda",
        exporter_version: str = "1.0",
        execution_platform: str = "Camunda Cloud",
        execution_platform_version: str = "8.0.0",
    ):
        self.exporter = exporter
        self.exporter_version = exporter_version
        self.execution_platform = execution_platform
        self.execution_platform_version = execution_platform_version

        # Simple node types: element name only, no extra content
        self.simple_elements = {
            NodeType.START.value: "startEvent",
            NodeType.END.value: "endEvent",
            NodeType.IF.value: "exclusiveGateway",
            NodeType.INCLUSIVE_GATEWAY.value: "inclusiveGateway",
        }

    def translate(self, graph: FlowGraph, process_id: str, process_name: str = "ReactFlow Process") -> str:
        """
        Convert a FlowGraph to a complete BPMN document.

        Args:
            graph: Nodes and edges snapshot from the editor (not modified)
            process_id: Id of the bpmn:process element, also bound by the diagram plane
            process_name: Human-readable process name

        Returns:
            str: The XML document
        """
        process = self._build_process(graph, process_id, process_name)
        diagram = self._build_diagram(graph, process_id)

        xmlns = "\n  ".join(f'xmlns:{prefix}="{uri}"' for prefix, uri in NAMESPACES.items())

        return f"""<?xml version="1.0" encoding="UTF-8"?>
<bpmn:definitions {xmlns}
  id="Definitions_1"
  targetNamespace="{TARGET_NAMESPACE}"
  exporter="{escape_xml_attr(self.exporter)}"
  exporterVersion="{escape_xml_attr(self.exporter_version)}"
  modeler:executionPlatform="{escape_xml_attr(self.execution_platform)}"
  modeler:executionPlatformVersion="{escape_xml_attr(self.execution_platform_version)}">
  {process}
  {diagram}
</bpmn:definitions>"""

    # ------------------------------------------------------------------
    # Process body
    # ------------------------------------------------------------------

    def _build_process(self, graph: FlowGraph, process_id: str, process_name: str) -> str:
        nodes_by_id = self._index_nodes(graph)
        elements = [self._convert_node(node) for node in graph.nodes]
        elements += [self._convert_sequence_flow(edge, nodes_by_id) for edge in graph.edges]
        body = "\n    ".join(elements)

        return f"""<bpmn:process id="{sanitize_id(process_id)}" name="{escape_xml_attr(process_name)}" isExecutable="true">
    {body}
  </bpmn:process>"""

    def _convert_node(self, node: FlowNode) -> str:
        """Convert one node to its BPMN flow element"""
        node_id = sanitize_id(node.id)
        name = escape_xml_attr(node.data.label)
        data = node.data

        if node.type in self.simple_elements:
            element = self.simple_elements[node.type]
            return f'<bpmn:{element} id="{node_id}" name="{name}" />'

        if node.type == NodeType.TASK.value:
            assignee = data.assignee if isinstance(data, TaskNodeData) else None
            extension = ""
            if assignee:
                extension = f"""
      <bpmn:extensionElements>
        <zeebe:assignmentDefinition assignee="{escape_xml_attr(assignee)}" />
      </bpmn:extensionElements>"""
            return f"""<bpmn:serviceTask id="{node_id}" name="{name}">{extension}
    </bpmn:serviceTask>"""

        if node.type == NodeType.EXCLUSIVE_GATEWAY.value:
            default_path = data.default_path if isinstance(data, ExclusiveGatewayNodeData) else None
            default_attr = f' default="{sanitize_id(default_path)}"' if default_path else ""
            return f'<bpmn:exclusiveGateway id="{node_id}" name="{name}"{default_attr} />'

        return f'<bpmn:task id="{node_id}" name="{name}" />'

    def _convert_sequence_flow(self, edge: FlowEdge, nodes_by_id: Dict[str, FlowNode]) -> str:
        """Convert one edge to a sequence flow; references are emitted even if unresolved"""
        edge_id = sanitize_id(edge.id)
        source_ref = sanitize_id(edge.source)
        target_ref = sanitize_id(edge.target)
        name = escape_xml_attr(edge.data.label) if edge.data and edge.data.label else ""

        condition = self._resolve_condition(edge, nodes_by_id.get(edge.source))
        condition_element = ""
        if condition is not None:
            condition_element = (
                '\n      <bpmn:conditionExpression xsi:type="bpmn:tFormalExpression">'
                f"{escape_xml_text(condition)}</bpmn:conditionExpression>"
            )

        return (
            f'<bpmn:sequenceFlow id="{edge_id}" name="{name}" '
            f'sourceRef="{source_ref}" targetRef="{target_ref}">{condition_element}\n'
            f"    </bpmn:sequenceFlow>"
        )

    def _resolve_condition(self, edge: FlowEdge, source_node: Optional[FlowNode]) -> Optional[str]:
        """
        Pick the condition expression for an edge, first match wins:
        1. source is an If node: "if" -> rule, "else" -> not(rule); nothing
           when the node has no rule or the handle is neither branch
        2. rule on the edge
        3. legacy free-text expression on the edge
        """
        if source_node is not None and source_node.type == NodeType.IF.value:
            rule = source_node.data.rule if isinstance(source_node.data, IfNodeData) else None
            if rule is None:
                return None
            expression = compile_rule(rule)
            if edge.source_handle == "if":
                return expression
            if edge.source_handle == "else":
                return negate_expression(expression)
            return None

        if edge.data is None:
            return None
        if edge.data.rule is not None:
            return compile_rule(edge.data.rule)
        if edge.data.condition is not None and edge.data.condition.expression:
            return edge.data.condition.expression
        return None

    # ------------------------------------------------------------------
    # Diagram body
    # ------------------------------------------------------------------

    def _build_diagram(self, graph: FlowGraph, process_id: str) -> str:
        nodes_by_id = self._index_nodes(graph)
        elements = [self._convert_shape(node) for node in graph.nodes]
        elements += [self._convert_edge_shape(edge, nodes_by_id) for edge in graph.edges]
        body = "\n      ".join(elements)

        return f"""<bpmndi:BPMNDiagram id="BPMNDiagram_1">
    <bpmndi:BPMNPlane id="BPMNPlane_1" bpmnElement="{sanitize_id(process_id)}">
      {body}
    </bpmndi:BPMNPlane>
  </bpmndi:BPMNDiagram>"""

    def _convert_shape(self, node: FlowNode) -> str:
        node_id = sanitize_id(node.id)
        width, height = get_node_size(node.type)
        x = round_coordinate(node.position.x)
        y = round_coordinate(node.position.y)

        return f"""<bpmndi:BPMNShape id="Shape_{node_id}" bpmnElement="{node_id}">
        <dc:Bounds x="{x}" y="{y}" width="{width}" height="{height}" />
      </bpmndi:BPMNShape>"""

    def _convert_edge_shape(self, edge: FlowEdge, nodes_by_id: Dict[str, FlowNode]) -> str:
        edge_id = sanitize_id(edge.id)
        waypoints = self._compute_waypoints(edge, nodes_by_id)
        points = "\n        ".join(
            f'<di:waypoint x="{round_coordinate(p.x)}" y="{round_coordinate(p.y)}" />' for p in waypoints
        )

        return f"""<bpmndi:BPMNEdge id="Edge_{edge_id}" bpmnElement="{edge_id}">
        {points}
      </bpmndi:BPMNEdge>"""

    def _compute_waypoints(self, edge: FlowEdge, nodes_by_id: Dict[str, FlowNode]) -> List[Point]:
        """Bezier waypoints between the edge's anchors, or a placeholder if an endpoint is missing"""
        source_node = nodes_by_id.get(edge.source)
        target_node = nodes_by_id.get(edge.target)
        if source_node is None or target_node is None:
            return list(PLACEHOLDER_WAYPOINTS)

        start = get_source_anchor(source_node, edge.source_handle)
        end = get_target_anchor(target_node)
        return generate_bezier_waypoints(start, end)

    @staticmethod
    def _index_nodes(graph: FlowGraph) -> Dict[str, FlowNode]:
        # First occurrence wins for duplicate ids, like a linear search would
        index: Dict[str, FlowNode] = {}
        for node in graph.nodes:
            index.setdefault(node.id, node)
        return index
