"""
Deterministic Translator Layer

Converts the editor's FlowGraph to BPMN 2.0 XML.
All layout and serialization logic is deterministic.
"""

from .bpmn_translator import BpmnTranslator

__all__ = ['BpmnTranslator']
