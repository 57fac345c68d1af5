"""
Report discovery: walks an input root and yields report files with their format.
Layout is free-form (e.g. root/<workshop>/<vehicle>/scan.txt); hidden files are skipped.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator

from core.schema import ReportFormat

logger = logging.getLogger(__name__)

REPORT_EXTENSIONS = {
    ".txt": ReportFormat.TXT,
    ".log": ReportFormat.TXT,
    ".xml": ReportFormat.XML,
    ".pdf": ReportFormat.PDF,
}


def format_for_path(path: str | Path) -> ReportFormat | None:
    """Report format from the file suffix, or None when the suffix is not a report type."""
    return REPORT_EXTENSIONS.get(Path(path).suffix.lower())


def iter_reports(root_folder: str | Path) -> Iterator[tuple[Path, ReportFormat]]:
    """Yield (file_path, format) for every report under root_folder, sorted by path."""
    root = Path(root_folder).resolve()
    if root.is_file():
        fmt = format_for_path(root)
        if fmt is not None:
            yield root, fmt
        return
    if not root.is_dir():
        logger.warning("Input root is not a directory: %s", root)
        return
    for file_path in sorted(root.rglob("*")):
        if not file_path.is_file() or file_path.name.startswith("."):
            continue
        fmt = format_for_path(file_path)
        if fmt is None:
            continue
        yield file_path, fmt
