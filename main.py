"""
Diagnostic Report Pipeline: entry point.

Parses VCDS / OBD-II scanner reports (TXT, XML, PDF) into classified, costed fault lists.

Usage:
  python main.py [PATHS...] [--input ROOT] [--format FMT] [--output-dir DIR] [--workers N]
                 [--config FILE] [--log-level LEVEL]

- PATHS: report files or http(s) URLs. Without PATHS, every report under ROOT is parsed.
- Output: parse_results.json (camelCase ParseResult per report) and error_codes.csv (one row per fault).
- Exit code 1 when any report failed hard (unsupported format, unreadable source).
"""
from __future__ import annotations

import argparse
import csv
import json
import logging
import sys
from pathlib import Path
from typing import Any

from core.exceptions import ConfigError
from core.models import BatchMetrics
from core.schema import ParseResult
from extraction.discovery import iter_reports
from pipeline.batch_processor import BatchItem, BatchProcessor
from pipeline.report_pipeline import DiagnosticReportParser
from utils.config import load_config
from utils.logger import setup_logging

RESULTS_JSON = "parse_results.json"
ERROR_CODES_CSV = "error_codes.csv"

CSV_FIELDS = (
    "source",
    "module",
    "code",
    "description",
    "category",
    "severity",
    "estimated_cost",
    "status_flags",
    "sub_code",
    "detail",
    "line_number",
)


def save_results_json(results: list[tuple[str, ParseResult]], path: Path) -> None:
    """Save every ParseResult (camelCase JSON) with its source."""
    path.parent.mkdir(parents=True, exist_ok=True)
    out = [{"source": source, **result.to_dict()} for source, result in results]
    with open(path, "w", encoding="utf-8") as f:
        json.dump(out, f, indent=2)
    logging.getLogger(__name__).info("Saved parse results to %s", path)


def error_code_rows(results: list[tuple[str, ParseResult]]) -> list[dict[str, Any]]:
    rows = []
    for source, result in results:
        for entry in result.error_codes:
            rows.append({
                "source": source,
                "module": entry.module or "",
                "code": entry.code,
                "description": entry.description,
                "category": entry.category.value,
                "severity": entry.severity.value,
                "estimated_cost": entry.estimated_cost,
                "status_flags": "|".join(entry.model_dump(mode="json")["status_flags"]),
                "sub_code": entry.sub_code or "",
                "detail": entry.detail or "",
                "line_number": entry.line_number if entry.line_number is not None else "",
            })
    return rows


def save_error_codes_csv(results: list[tuple[str, ParseResult]], path: Path) -> None:
    """Export each fault occurrence to CSV."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=CSV_FIELDS)
        w.writeheader()
        w.writerows(error_code_rows(results))
    logging.getLogger(__name__).info("Saved error codes CSV to %s", path)


def collect_items(paths: list[str], input_root: str, fmt: str | None) -> list[BatchItem]:
    """Explicit paths/URLs (with optional forced format), else every report under input_root."""
    if paths:
        return [(p, fmt) for p in paths]
    return [(p, fmt or report_format) for p, report_format in iter_reports(input_root)]


def print_summary(metrics: BatchMetrics, out_json: Path, out_csv: Path) -> None:
    print("Batch complete.")
    print(f"  total_processed: {metrics.total_processed}")
    print(f"  succeeded: {metrics.succeeded_count} (partial: {metrics.partial_count})")
    print(f"  failed: {metrics.failed_count}")
    print(f"  faults: {metrics.total_faults}")
    print(f"  estimated_total_cost: {metrics.total_estimated_cost}")
    print(f"  output: {out_json}, {out_csv}")


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Parse vehicle diagnostic scanner reports into classified, costed fault lists",
    )
    parser.add_argument("paths", nargs="*", help="Report files or http(s) URLs")
    parser.add_argument(
        "--input",
        "-i",
        default=None,
        help="Root folder searched for .txt/.xml/.pdf reports when no PATHS are given (default: INPUT_ROOT or reports)",
    )
    parser.add_argument(
        "--format",
        "-f",
        default=None,
        help="Declared format for every report (TXT, XML, PDF). Default: inferred from the file suffix",
    )
    parser.add_argument(
        "--output-dir",
        "-o",
        default=None,
        help="Directory for outputs (default: OUTPUT_DIR or output)",
    )
    parser.add_argument(
        "--workers",
        "-w",
        type=int,
        default=None,
        help="Number of parallel workers (default: 1)",
    )
    parser.add_argument("--config", "-c", default=None, help="Path to config.yaml")
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_arg_parser().parse_args(argv)
    try:
        config = load_config(args.config)
    except ConfigError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 2
    config = config.with_overrides(
        input_root=args.input,
        output_dir=args.output_dir,
        max_workers=args.workers,
        log_level=args.log_level,
    )
    setup_logging(config.log_level)
    log = logging.getLogger(__name__)

    items = collect_items(args.paths, config.input_root, args.format)
    if not items:
        log.warning("No reports found under %s", config.input_root)

    processor = BatchProcessor(DiagnosticReportParser(config=config), max_workers=config.max_workers)
    results, metrics = processor.process_batch(items)

    out_dir = Path(config.output_dir)
    out_json = out_dir / RESULTS_JSON
    out_csv = out_dir / ERROR_CODES_CSV
    save_results_json(results, out_json)
    save_error_codes_csv(results, out_csv)

    for source, result in results:
        if not result.success:
            log.error("Failed: %s: %s", source, result.error)
    print_summary(metrics, out_json, out_csv)
    return 1 if metrics.failed_count else 0


if __name__ == "__main__":
    sys.exit(main())
