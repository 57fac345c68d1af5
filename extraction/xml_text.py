"""
Flatten XML report exports to text: every attribute value and text node, in document order.
"""
from __future__ import annotations

import logging

import lxml.etree

from core.exceptions import SourceReadError

logger = logging.getLogger(__name__)


def _safe_parser() -> lxml.etree.XMLParser:
    return lxml.etree.XMLParser(
        resolve_entities=False,
        no_network=True,
        remove_comments=True,
        remove_pis=True,
        huge_tree=False,
    )


def extract_text_from_xml(data: bytes | str) -> str:
    """
    Parse XML and return its values one per line (multi-line text nodes keep their lines).
    Raises SourceReadError on malformed XML.
    """
    raw = data.encode("utf-8") if isinstance(data, str) else data
    try:
        root = lxml.etree.fromstring(raw, parser=_safe_parser())
    except lxml.etree.XMLSyntaxError as e:
        raise SourceReadError(f"XML parsing failed: {e}") from e
    if root is None:
        raise SourceReadError("XML parsing failed: empty document")
    parts: list[str] = []
    for element in root.iter():
        if not isinstance(element.tag, str):
            continue
        for value in element.attrib.values():
            if value.strip():
                parts.append(value)
        if element.text and element.text.strip():
            parts.append(element.text.strip("\r\n"))
        if element is not root and element.tail and element.tail.strip():
            parts.append(element.tail.strip("\r\n"))
    logger.debug("XML flattened to %s text parts", len(parts))
    return "\n".join(parts)
