"""
BPMN Export Service

Turns an editor graph snapshot into a downloadable BPMN document.
The XML itself comes from BpmnTranslator; this layer owns the
preconditions, the time-derived process id and the suggested filename.
"""

import logging
import time
from dataclasses import dataclass
from typing import Optional

from schemas.flow_graph import FlowGraph, validate_flow_references
from translators.bpmn_translator import BpmnTranslator

logger = logging.getLogger(__name__)

BPMN_MEDIA_TYPE = "application/xml"


class BpmnExportError(Exception):
    """Raised when a graph cannot be exported"""
    pass


@dataclass(frozen=True)
class BpmnDocument:
    xml: str
    filename: str
    process_id: str
    media_type: str = BPMN_MEDIA_TYPE


class BpmnExportService:
    """
    Orchestrates one export: check the graph, compile it, name the file.
    Holds no state between exports.
    """

    def __init__(self, translator: Optional[BpmnTranslator] = None, process_name: str = "ReactFlow Process"):
        self.translator = translator or BpmnTranslator()
        self.process_name = process_name

    def export(
        self,
        graph: FlowGraph,
        filename: Optional[str] = None,
        timestamp_ms: Optional[int] = None,
    ) -> BpmnDocument:
        """
        Compile a graph into a BPMN document.

        Args:
            graph: Editor snapshot; must contain at least one node
            filename: Suggested download name, defaults to process_<timestamp>.bpmn
            timestamp_ms: Epoch milliseconds used for the process id and default
                filename; the current time when omitted

        Returns:
            BpmnDocument with the XML string and suggested filename
        """
        if not graph.nodes:
            raise BpmnExportError("Canvas is empty, nothing to export")

        if timestamp_ms is None:
            timestamp_ms = int(time.time() * 1000)

        for warning in validate_flow_references(graph):
            logger.warning(f"BPMN export: {warning}")

        process_id = f"Process_{timestamp_ms}"
        xml = self.translator.translate(graph, process_id, self.process_name)

        document = BpmnDocument(
            xml=xml,
            filename=filename or f"process_{timestamp_ms}.bpmn",
            process_id=process_id,
        )
        logger.info(
            f"Exported BPMN {document.filename}: {len(graph.nodes)} nodes, "
            f"{len(graph.edges)} edges, {len(xml)} characters"
        )
        return document
