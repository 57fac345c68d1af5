"""
Diagnostic report pipeline: parse(content, declared_format) or parse_report(RawReport) -> ParseResult.
Flow: normalize -> scan sections -> extract faults -> classify -> cost -> summarize.
Hard failures (unsupported format, unreadable source) become success=False results;
recoverable issues accumulate in parse_errors.
"""

from __future__ import annotations

import logging
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Sequence
from urllib.parse import urlparse

from analysis.summary import summarize
from classification.classifier import RuleBasedClassifier
from classification.cost_estimator import CostEstimator
from core.exceptions import DiagnosticReportError, InputTooLargeError
from core.interfaces import IClassifier, ICostEstimator, ISourceReader
from core.models import ClassifiedFault, RawFault, RawReport
from core.schema import ErrorCodeEntry, ParseResult, ReportFormat, SoftParseWarning
from extraction.discovery import format_for_path
from extraction.fault_extractor import extract_faults
from extraction.header import read_diagnostic_info, read_vehicle_info
from extraction.normalizer import normalize
from extraction.scanner import SectionScanner
from extraction.source_reader import SourceReader, is_url
from utils.config import AppConfig
from utils.logger import log_structured

logger = logging.getLogger(__name__)


def _content_size(content: bytes | str) -> int:
    return len(content) if isinstance(content, bytes) else len(content.encode("utf-8", errors="replace"))


def _file_type(declared_format: object) -> str:
    if isinstance(declared_format, ReportFormat):
        return declared_format.value.lower()
    return str(declared_format or "").strip().lstrip(".").lower()


def _to_entry(classified: ClassifiedFault, estimated_cost: int) -> ErrorCodeEntry:
    fault = classified.fault
    return ErrorCodeEntry(
        code=fault.code,
        description=fault.description,
        category=classified.category,
        severity=classified.severity,
        estimated_cost=estimated_cost,
        status_flags=fault.status_flags,
        module=fault.module_label,
        sub_code=fault.sub_code,
        detail=fault.detail,
        freeze_frame=dict(fault.freeze_frame),
        line_number=fault.line_number,
    )


class DiagnosticReportParser:
    """
    Production pipeline: parse(content, format) -> ParseResult.
    Holds only immutable collaborators; safe to share across threads.
    """

    def __init__(
        self,
        classifier: IClassifier | None = None,
        cost_estimator: ICostEstimator | None = None,
        source_reader: ISourceReader | None = None,
        *,
        config: AppConfig | None = None,
    ) -> None:
        self._config = config or AppConfig()
        self._classifier = classifier or RuleBasedClassifier()
        self._costs = cost_estimator or CostEstimator.from_config(self._config.costs)
        self._reader = source_reader or SourceReader(
            max_input_bytes=self._config.parser.max_input_bytes,
            source_config=self._config.source,
        )
        self._scanner = SectionScanner()

    def _failure(self, exc: DiagnosticReportError, declared_format: object) -> ParseResult:
        log_structured(
            logger,
            logging.WARNING,
            f"Report parse failed: {exc}",
            report_source=exc.source or "",
            error_kind=type(exc).__name__,
        )
        return ParseResult(
            success=False,
            file_type=_file_type(declared_format),
            parsed_at=datetime.now(timezone.utc),
            error=str(exc),
        )

    def classify_faults(self, faults: Sequence[RawFault]) -> list[ClassifiedFault]:
        classified: list[ClassifiedFault] = []
        for fault in faults:
            result = self._classifier.classify(
                fault.code,
                fault.description,
                fault.context,
                module_name=fault.module_name,
            )
            classified.append(ClassifiedFault(fault=fault, category=result.category, severity=result.severity))
        return classified

    def parse(self, content: bytes | str | None, declared_format: ReportFormat | str, source: str = "") -> ParseResult:
        """
        Parse one report. Never raises for bad input: unsupported format, empty or
        oversized content return success=False with error populated.
        """
        return self.parse_report(RawReport(content=content, declared_format=declared_format, source=source))

    def parse_report(self, report: RawReport) -> ParseResult:
        """Parse a caller-owned RawReport; same failure semantics as parse()."""
        try:
            return self._parse(report)
        except DiagnosticReportError as e:
            if report.source and not e.source:
                e.source = report.source
            return self._failure(e, report.declared_format)

    def _parse(self, raw: RawReport) -> ParseResult:
        start = time.perf_counter()
        content, source = raw.content, raw.source
        parser_cfg = self._config.parser
        report_format = ReportFormat.parse(raw.declared_format)
        if isinstance(content, (bytes, str)) and parser_cfg.max_input_bytes:
            size = _content_size(content)
            if size > parser_cfg.max_input_bytes:
                raise InputTooLargeError(
                    f"Input too large: {size} bytes exceeds limit of {parser_cfg.max_input_bytes}",
                    source=source,
                )

        report = normalize(content, report_format, fallback_encoding=parser_cfg.fallback_encoding)
        scan = self._scanner.scan(report.lines)

        warnings: list[SoftParseWarning] = list(scan.warnings)
        raw_faults: list[RawFault] = []
        extracted_counts: dict[str, int] = {}
        for module in scan.modules:
            faults, module_warnings = extract_faults(module)
            raw_faults.extend(faults)
            warnings.extend(module_warnings)
            extracted_counts[module.label] = len(faults)

        entries = [
            _to_entry(c, self._costs.estimate(c.category, c.severity))
            for c in self.classify_faults(raw_faults)
        ]
        vehicle_info = read_vehicle_info(scan.header_lines)
        diagnostic_info = read_diagnostic_info(
            scan.header_lines,
            report.lines,
            scan.modules,
            total_errors=len(entries),
            extracted_counts=extracted_counts,
        )
        summary = summarize(entries, vehicle_info, diagnostic_info)

        elapsed = time.perf_counter() - start
        log_structured(
            logger,
            logging.INFO,
            f"Parsed report: {len(entries)} faults, {len(warnings)} warnings in {elapsed:.3f}s",
            report_source=source,
            fault_count=len(entries),
            warning_count=len(warnings),
        )
        return ParseResult(
            success=True,
            error_codes=entries,
            vehicle_info=vehicle_info,
            diagnostic_info=diagnostic_info,
            analysis_summary=summary,
            file_type=report_format.value.lower(),
            parsed_at=datetime.now(timezone.utc),
            parse_errors=warnings,
            raw_excerpt=report.text[: parser_cfg.raw_excerpt_chars] if parser_cfg.raw_excerpt_chars else None,
        )

    def infer_format(self, source: str | Path) -> ReportFormat | str:
        """Format from the path or URL suffix; falls back to the configured default."""
        path = urlparse(source).path if is_url(source) else source
        fmt = format_for_path(path)
        if fmt is not None:
            return fmt
        suffix = Path(path).suffix
        return suffix.lstrip(".") if suffix else self._config.parser.default_format

    def parse_file(self, source: str | Path, declared_format: ReportFormat | str | None = None) -> ParseResult:
        """Read a local path or http(s) URL and parse it. Missing/unreadable sources return success=False."""
        fmt = declared_format if declared_format is not None else self.infer_format(source)
        try:
            content = self._reader.read(source)
        except DiagnosticReportError as e:
            return self._failure(e, fmt)
        return self.parse(content, fmt, source=str(source))


def parse(content: bytes | str | None, declared_format: ReportFormat | str) -> ParseResult:
    """Parse with default classifier, cost table and limits."""
    return DiagnosticReportParser().parse(content, declared_format)
