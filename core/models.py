"""
Data models for the parse pipeline.
Uses frozen dataclasses for intermediate values; Pydantic output schemas (ParseResult, etc.) in core.schema.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from core.schema import Category, ReportFormat, Severity, SoftParseWarning, StatusFlag


@dataclass(frozen=True)
class RawReport:
    """Report as handed over by the caller. Never mutated."""

    content: bytes | str | None
    declared_format: ReportFormat | str
    source: str = ""


@dataclass(frozen=True)
class SourceLine:
    """One normalized line with its 1-based position in the source."""

    number: int
    text: str

    @property
    def is_blank(self) -> bool:
        return not self.text.strip()

    @property
    def is_indented(self) -> bool:
        return bool(self.text) and self.text[0].isspace()


@dataclass(frozen=True)
class ModuleSection:
    """One control-unit section of a report. Exists only during scanning."""

    address: str
    name: str
    start_line: int
    component: str | None = None
    part_numbers: dict[str, str] = field(default_factory=dict)
    declared_fault_count: int | None = None
    fault_lines: tuple[SourceLine, ...] = ()

    @property
    def label(self) -> str:
        """Display label, e.g. '01-Engine'."""
        return f"{self.address}-{self.name}" if self.address else self.name


@dataclass(frozen=True)
class ScanResult:
    """Section scanner output: header region, module sections, soft warnings."""

    header_lines: tuple[SourceLine, ...]
    modules: tuple[ModuleSection, ...]
    warnings: tuple[SoftParseWarning, ...] = ()
    implicit_module: bool = False


@dataclass(frozen=True)
class FaultBlock:
    """Text span of one fault occurrence: a leading line plus indented lines."""

    lines: tuple[SourceLine, ...]

    @property
    def head(self) -> SourceLine:
        return self.lines[0]

    @property
    def body(self) -> tuple[SourceLine, ...]:
        return self.lines[1:]


@dataclass(frozen=True)
class RawFault:
    """Fault as extracted from a block, before classification."""

    code: str
    description: str
    status_flags: frozenset[StatusFlag] = frozenset()
    sub_code: str | None = None
    detail: str | None = None
    freeze_frame: dict[str, str] = field(default_factory=dict)
    module_address: str = ""
    module_name: str = ""
    line_number: int | None = None
    context: str = ""

    @property
    def module_label(self) -> str | None:
        if not self.module_name:
            return None
        return f"{self.module_address}-{self.module_name}" if self.module_address else self.module_name


@dataclass(frozen=True)
class Classification:
    category: Category
    severity: Severity


@dataclass(frozen=True)
class ClassifiedFault:
    """RawFault plus its (category, severity)."""

    fault: RawFault
    category: Category
    severity: Severity


@dataclass
class BatchMetrics:
    """Metrics collected during batch processing."""

    total_processed: int = 0
    succeeded_count: int = 0
    partial_count: int = 0
    failed_count: int = 0
    total_faults: int = 0
    total_estimated_cost: int = 0
    total_time_sec: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        """Export for logging/serialization."""
        return {
            "total_processed": self.total_processed,
            "succeeded_count": self.succeeded_count,
            "partial_count": self.partial_count,
            "failed_count": self.failed_count,
            "total_faults": self.total_faults,
            "total_estimated_cost": self.total_estimated_cost,
            "total_time_sec": round(self.total_time_sec, 4),
        }
