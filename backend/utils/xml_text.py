"""
XML text helpers for the BPMN exporter.
"""

import re
from typing import Optional
from xml.sax.saxutils import escape

_INVALID_ID_CHARS = re.compile(r"[^A-Za-z0-9_-]")

# escape() always handles &, <, > first, in that order
_ATTR_ENTITIES = {'"': "&quot;", "'": "&apos;"}


def sanitize_id(raw_id: Optional[str]) -> str:
    """
    Make an editor id usable as an XML id/reference.

    Every character outside [A-Za-z0-9_-] becomes "_". Distinct ids can
    collide after sanitizing (e.g. "a.b" and "a_b"); collisions are not
    detected.
    """
    return _INVALID_ID_CHARS.sub("_", raw_id or "")


def escape_xml_text(value: Optional[str]) -> str:
    """Escape text placed in element content."""
    return escape(value or "")


def escape_xml_attr(value: Optional[str]) -> str:
    """Escape text placed inside a double-quoted attribute."""
    return escape(value or "", _ATTR_ENTITIES)
