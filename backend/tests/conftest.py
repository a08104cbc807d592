"""Pytest fixtures for the BPMN exporter tests."""

import xml.etree.ElementTree as ET

import pytest

from schemas.flow_graph import FlowGraph
from services.bpmn_export_service import BpmnExportService
from services.flow_builder import FlowBuilder
from translators.bpmn_translator import BpmnTranslator

BPMN_NS = {
    "bpmn": "http://www.omg.org/spec/BPMN/20100524/MODEL",
    "bpmndi": "http://www.omg.org/spec/BPMN/20100524/DI",
    "dc": "http://www.omg.org/spec/DD/20100524/DC",
    "di": "http://www.omg.org/spec/DD/20100524/DI",
    "zeebe": "http://camunda.org/schema/zeebe/1.0",
}


@pytest.fixture
def ns():
    return BPMN_NS


@pytest.fixture
def parse_bpmn():
    """Parse an exported document into an ElementTree root."""
    def _parse(xml: str) -> ET.Element:
        return ET.fromstring(xml.encode("utf-8"))
    return _parse


@pytest.fixture
def translator():
    return BpmnTranslator()


@pytest.fixture
def export_service(translator):
    return BpmnExportService(translator)


@pytest.fixture
def builder():
    return FlowBuilder()


@pytest.fixture
def linear_graph():
    """Start "Begin" -> Task "Review" -> End "Done", no conditions."""
    return FlowGraph.model_validate({
        "nodes": [
            {"id": "node_0", "type": "start", "position": {"x": 0, "y": 100}, "data": {"label": "Begin"}},
            {"id": "node_1", "type": "task", "position": {"x": 200, "y": 80}, "data": {"label": "Review"}},
            {"id": "node_2", "type": "end", "position": {"x": 450, "y": 102}, "data": {"label": "Done"}},
        ],
        "edges": [
            {"id": "e0-1", "source": "node_0", "target": "node_1"},
            {"id": "e1-2", "source": "node_1", "target": "node_2"},
        ],
    })


@pytest.fixture
def if_graph():
    """If node with rule amount > 100 branching to two tasks."""
    return FlowGraph.model_validate({
        "nodes": [
            {
                "id": "check",
                "type": "if",
                "position": {"x": 100, "y": 100},
                "data": {
                    "label": "Large amount?",
                    "rule": {
                        "conditions": [{"field": "amount", "operator": "greater_than", "value": 100}],
                        "combineOperation": "AND",
                    },
                },
            },
            {"id": "approve", "type": "task", "position": {"x": 400, "y": 0}, "data": {"label": "Approve"}},
            {"id": "archive", "type": "task", "position": {"x": 400, "y": 250}, "data": {"label": "Archive"}},
        ],
        "edges": [
            {"id": "yes", "source": "check", "target": "approve", "sourceHandle": "if"},
            {"id": "no", "source": "check", "target": "archive", "sourceHandle": "else"},
        ],
    })
