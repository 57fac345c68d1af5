"""
Configuration loader: YAML + .env + env overrides.
No hardcoded limits in components; all from config.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from core.exceptions import ConfigError

DEFAULT_MAX_INPUT_BYTES = 10 * 1024 * 1024


def _coerce_bool(s: Any) -> bool:
    if isinstance(s, bool):
        return s
    return (str(s).strip().lower() in ("1", "true", "yes")) if s else False


def _coerce_float(s: Any, default: float = 0.0) -> float:
    if s is None or s == "":
        return default
    try:
        return float(s)
    except (TypeError, ValueError):
        return default


def _coerce_int(s: Any, default: int = 0) -> int:
    if s is None or s == "":
        return default
    try:
        return int(s)
    except (TypeError, ValueError):
        return default


@dataclass(frozen=True)
class ParserConfig:
    """Input limits and decoding."""

    max_input_bytes: int = DEFAULT_MAX_INPUT_BYTES
    default_format: str = "TXT"
    fallback_encoding: str = "cp1252"
    raw_excerpt_chars: int = 1000


@dataclass(frozen=True)
class SourceConfig:
    """Reading reports from paths or URLs."""

    timeout_sec: float = 30.0
    max_retries: int = 3
    retry_delay_sec: float = 1.0


@dataclass(frozen=True)
class CostConfig:
    """Per-category base cost overrides, keyed by category name (e.g. 'Engine')."""

    base_costs: dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True)
class AppConfig:
    """Immutable application configuration. Built from YAML + env."""

    input_root: str = "reports"
    output_dir: str = "output"
    log_level: str = "INFO"
    max_workers: int = 1
    parser: ParserConfig = field(default_factory=ParserConfig)
    source: SourceConfig = field(default_factory=SourceConfig)
    costs: CostConfig = field(default_factory=CostConfig)

    def with_overrides(self, **overrides: Any) -> AppConfig:
        """Return new config with replaced top-level keys; None values are ignored."""
        known = {k: v for k, v in overrides.items() if v is not None and hasattr(self, k)}
        if "max_workers" in known:
            known["max_workers"] = max(1, _coerce_int(known["max_workers"], 1))
        return replace(self, **known)


def _load_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}", source=str(path)) from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config {path} must be a mapping", source=str(path))
    return data


def _base_costs_from(data: Any) -> dict[str, int]:
    if not isinstance(data, dict):
        return {}
    out: dict[str, int] = {}
    for name, value in data.items():
        cost = _coerce_int(value, -1)
        if cost < 0:
            raise ConfigError(f"Invalid base cost for {name!r}: {value!r}")
        out[str(name)] = cost
    return out


def _config_from_dict(data: dict[str, Any]) -> AppConfig:
    """Build AppConfig from nested dict. Env overrides applied in load_config."""
    parser_data = data.get("parser") or {}
    source_data = data.get("source") or {}
    cost_data = data.get("costs") or {}
    return AppConfig(
        input_root=str(data.get("input_root", "reports")),
        output_dir=str(data.get("output_dir", "output")),
        log_level=str(data.get("log_level", "INFO")),
        max_workers=max(1, _coerce_int(data.get("max_workers", 1), 1)),
        parser=ParserConfig(
            max_input_bytes=_coerce_int(parser_data.get("max_input_bytes"), DEFAULT_MAX_INPUT_BYTES),
            default_format=str(parser_data.get("default_format", "TXT")).upper(),
            fallback_encoding=str(parser_data.get("fallback_encoding", "cp1252")),
            raw_excerpt_chars=_coerce_int(parser_data.get("raw_excerpt_chars"), 1000),
        ),
        source=SourceConfig(
            timeout_sec=_coerce_float(source_data.get("timeout_sec"), 30.0),
            max_retries=max(1, _coerce_int(source_data.get("max_retries"), 3)),
            retry_delay_sec=_coerce_float(source_data.get("retry_delay_sec"), 1.0),
        ),
        costs=CostConfig(base_costs=_base_costs_from(cost_data.get("base_costs"))),
    )


def load_config(config_path: str | Path | None = None) -> AppConfig:
    """
    Load config from YAML file, then apply env overrides (.env is loaded first).
    Env vars: INPUT_ROOT, OUTPUT_DIR, LOG_LEVEL, MAX_WORKERS, MAX_INPUT_BYTES,
    SOURCE_TIMEOUT_SEC, SOURCE_MAX_RETRIES.
    """
    load_dotenv()
    path = Path(config_path) if config_path else Path("config.yaml")
    cfg = _config_from_dict(_load_yaml(path))
    overrides: dict[str, Any] = {}
    if os.getenv("INPUT_ROOT"):
        overrides["input_root"] = os.getenv("INPUT_ROOT")
    if os.getenv("OUTPUT_DIR"):
        overrides["output_dir"] = os.getenv("OUTPUT_DIR")
    if os.getenv("LOG_LEVEL"):
        overrides["log_level"] = os.getenv("LOG_LEVEL")
    if os.getenv("MAX_WORKERS"):
        overrides["max_workers"] = _coerce_int(os.getenv("MAX_WORKERS"), cfg.max_workers)
    if os.getenv("MAX_INPUT_BYTES"):
        overrides["parser"] = replace(
            cfg.parser,
            max_input_bytes=_coerce_int(os.getenv("MAX_INPUT_BYTES"), cfg.parser.max_input_bytes),
        )
    timeout = os.getenv("SOURCE_TIMEOUT_SEC")
    retries = os.getenv("SOURCE_MAX_RETRIES")
    if timeout or retries:
        overrides["source"] = replace(
            cfg.source,
            timeout_sec=_coerce_float(timeout, cfg.source.timeout_sec),
            max_retries=max(1, _coerce_int(retries, cfg.source.max_retries)),
        )
    if not overrides:
        return cfg
    return cfg.with_overrides(**overrides)
