"""Pipeline: single-report parsing and batch processing."""

from pipeline.report_pipeline import DiagnosticReportParser, parse
from pipeline.batch_processor import BatchProcessor

__all__ = [
    "DiagnosticReportParser",
    "parse",
    "BatchProcessor",
]
