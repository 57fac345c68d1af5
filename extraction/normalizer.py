"""
Source normalizer: raw bytes/text + declared format -> numbered line stream.
TXT is decoded directly; PDF and XML are first reduced to text, then normalized the same way.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from core.exceptions import SourceReadError
from core.models import SourceLine
from core.schema import ReportFormat
from extraction.pdf_text import extract_text_from_pdf_bytes, is_pdf_bytes
from extraction.xml_text import extract_text_from_xml

logger = logging.getLogger(__name__)

# C0/C1 control characters except tab; tabs are expanded before stripping.
CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b-\x1f\x7f-\x9f]")
TAB_SIZE = 4
DEFAULT_FALLBACK_ENCODING = "cp1252"


@dataclass(frozen=True)
class NormalizedReport:
    """Normalized line stream of one report."""

    lines: tuple[SourceLine, ...]
    report_format: ReportFormat
    text: str

    def __len__(self) -> int:
        return len(self.lines)


def decode_bytes(data: bytes, fallback_encoding: str = DEFAULT_FALLBACK_ENCODING) -> str:
    """UTF-8 (BOM tolerated); Windows scanner exports fall back to cp1252 with replacement."""
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError:
        logger.debug("Report is not UTF-8; decoding as %s", fallback_encoding)
        return data.decode(fallback_encoding, errors="replace")


def normalize_line(text: str) -> str:
    """Expand tabs, drop control characters, trim trailing whitespace."""
    return CONTROL_CHARS.sub("", text.expandtabs(TAB_SIZE)).rstrip()


def split_lines(text: str) -> tuple[SourceLine, ...]:
    """Split on any line break; keep blank lines; number from 1."""
    return tuple(
        SourceLine(number=i, text=normalize_line(raw))
        for i, raw in enumerate(text.splitlines(), start=1)
    )


def _to_text(content: bytes | str, report_format: ReportFormat, fallback_encoding: str) -> str:
    if report_format is ReportFormat.PDF:
        if isinstance(content, bytes) and is_pdf_bytes(content):
            return extract_text_from_pdf_bytes(content)
        # Already-extracted PDF text
        return content if isinstance(content, str) else decode_bytes(content, fallback_encoding)
    if report_format is ReportFormat.XML:
        return extract_text_from_xml(content)
    return content if isinstance(content, str) else decode_bytes(content, fallback_encoding)


def normalize(
    content: bytes | str | None,
    declared_format: ReportFormat | str,
    *,
    fallback_encoding: str = DEFAULT_FALLBACK_ENCODING,
) -> NormalizedReport:
    """
    Decode content by declared format into a NormalizedReport.

    Raises:
        UnsupportedFormatError: declared_format is not TXT/XML/PDF.
        SourceReadError: content is missing, empty, or the PDF/XML container cannot be read.
    """
    report_format = ReportFormat.parse(declared_format)
    if content is None:
        raise SourceReadError("No report content provided")
    if not isinstance(content, (bytes, str)):
        raise SourceReadError(f"Report content must be bytes or str, got {type(content).__name__}")
    if not content.strip():
        raise SourceReadError("Report content is empty")
    text = _to_text(content, report_format, fallback_encoding)
    lines = split_lines(text)
    if not any(not line.is_blank for line in lines):
        raise SourceReadError(f"No readable text in {report_format.value} report")
    return NormalizedReport(lines=lines, report_format=report_format, text=text)
