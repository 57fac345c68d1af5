"""
Batch processor: list of report sources -> parse each, collect metrics.
Does not duplicate pipeline logic; uses DiagnosticReportParser.parse_file().
Supports parallel execution via max_workers (ThreadPoolExecutor); results keep input order.
"""

from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Sequence

from core.models import BatchMetrics
from core.schema import ParseResult, ReportFormat
from pipeline.report_pipeline import DiagnosticReportParser

logger = logging.getLogger(__name__)

BatchItem = str | Path | tuple[str | Path, ReportFormat | str | None]


def _update_metrics(metrics: BatchMetrics, result: ParseResult) -> None:
    """Update counts from a single ParseResult."""
    metrics.total_processed += 1
    if not result.success:
        metrics.failed_count += 1
        return
    metrics.succeeded_count += 1
    if result.is_partial:
        metrics.partial_count += 1
    metrics.total_faults += len(result.error_codes)
    if result.analysis_summary is not None:
        metrics.total_estimated_cost += result.analysis_summary.estimated_total_cost


def _split_item(item: BatchItem) -> tuple[str | Path, ReportFormat | str | None]:
    if isinstance(item, tuple):
        return item[0], item[1] if len(item) > 1 else None
    return item, None


class BatchProcessor:
    """
    Process multiple reports in parallel (or sequentially when max_workers=1). Collects metrics.
    A failing report yields a success=False result; it never stops the batch.
    """

    def __init__(self, parser: DiagnosticReportParser, max_workers: int = 1) -> None:
        self._parser = parser
        self._max_workers = max(1, int(max_workers))

    def _process_one(self, item: BatchItem) -> ParseResult:
        source, fmt = _split_item(item)
        logger.info("Processing report %s", source)
        return self._parser.parse_file(source, fmt)

    def process_batch(self, items: Sequence[BatchItem]) -> tuple[list[tuple[str, ParseResult]], BatchMetrics]:
        """
        Parse every item: a path/URL, or (path/URL, format). Returns ([(source, result)], metrics)
        in input order.
        """
        metrics = BatchMetrics()
        start = time.perf_counter()
        if self._max_workers > 1 and len(items) > 1:
            with ThreadPoolExecutor(max_workers=self._max_workers) as executor:
                results = list(executor.map(self._process_one, items))
        else:
            results = [self._process_one(item) for item in items]

        paired: list[tuple[str, ParseResult]] = []
        for item, result in zip(items, results):
            _update_metrics(metrics, result)
            paired.append((str(_split_item(item)[0]), result))
        metrics.total_time_sec = time.perf_counter() - start
        logger.info(
            "Batch done: processed=%s succeeded=%s partial=%s failed=%s faults=%s",
            metrics.total_processed,
            metrics.succeeded_count,
            metrics.partial_count,
            metrics.failed_count,
            metrics.total_faults,
        )
        return paired, metrics
