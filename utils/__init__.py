"""Shared utilities: config, logger, retry."""

from utils.config import AppConfig, CostConfig, ParserConfig, SourceConfig, load_config
from utils.logger import ReportContextFormatter, log_structured, setup_logging
from utils.retry import with_retry

__all__ = [
    "AppConfig",
    "CostConfig",
    "ParserConfig",
    "SourceConfig",
    "load_config",
    "ReportContextFormatter",
    "log_structured",
    "setup_logging",
    "with_retry",
]
