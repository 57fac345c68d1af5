"""Logging setup for the CLI and tests; no global state beyond the logging tree."""

from __future__ import annotations

import logging
import sys
from typing import Any

# Keys passed through log_structured(); rendered as key=value after the message.
REPORT_KEYS = ("report_source", "fault_count", "warning_count", "error_kind")

QUIET_LOGGERS = ("urllib3", "pypdf")

DEFAULT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


class ReportContextFormatter(logging.Formatter):
    """Append per-report context keys to the formatted line when a record carries them."""

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        pairs = [
            f"{key}={getattr(record, key)}"
            for key in REPORT_KEYS
            if getattr(record, key, None) not in (None, "")
        ]
        return f"{line} [{' '.join(pairs)}]" if pairs else line


def setup_logging(
    level: str = "INFO",
    format_string: str | None = None,
    stream: Any = None,
) -> None:
    """
    Configure the root logger with a ReportContextFormatter. Safe to call more than once.
    HTTP pool and PDF text-layer loggers are held at WARNING.
    """
    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(
        ReportContextFormatter(format_string or DEFAULT_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S")
    )
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        handlers=[handler],
        force=True,
    )
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def log_structured(logger: logging.Logger, level: int, msg: str, **kwargs: Any) -> None:
    """Emit a record whose extra keys (report_source, fault_count, ...) survive into handlers."""
    logger.log(level, msg, extra=kwargs)
