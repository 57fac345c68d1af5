"""
Extract native text from PDF report exports (scanner "print to PDF" output).
Only the embedded text layer is read; image-only PDFs yield no text.
"""
from __future__ import annotations

import io
import logging

from pypdf import PdfReader
from pypdf.errors import PyPdfError

from core.exceptions import SourceReadError

logger = logging.getLogger(__name__)

PDF_MAGIC = b"%PDF"


def is_pdf_bytes(data: bytes) -> bool:
    """True if data starts with the PDF header (leading whitespace tolerated)."""
    return data.lstrip()[:4] == PDF_MAGIC


def extract_text_from_pdf_bytes(data: bytes) -> str:
    """
    Extract text from all pages of an in-memory PDF using pypdf.
    Pages are joined with a blank line. Raises SourceReadError if the document cannot be opened.
    """
    try:
        reader = PdfReader(io.BytesIO(data))
        pages = list(reader.pages)
    except (PyPdfError, ValueError, OSError) as e:
        raise SourceReadError(f"PDF text extraction failed: {e}") from e
    parts: list[str] = []
    for index, page in enumerate(pages, start=1):
        try:
            text = page.extract_text()
        except (PyPdfError, ValueError, KeyError) as e:
            logger.warning("PDF page %s text extraction failed: %s", index, e)
            continue
        if text and isinstance(text, str):
            parts.append(text.rstrip())
    return "\n\n".join(parts)
