"""
Pydantic schemas for the parse output. Used by pipeline, analysis, main.
All models are frozen and serialise with camelCase aliases (errorCodes, vehicleInfo, ...).
"""
from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator
from pydantic.alias_generators import to_camel

from core.exceptions import UnsupportedFormatError


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class ReportFormat(str, Enum):
    """Declared format of an uploaded report."""

    TXT = "TXT"
    XML = "XML"
    PDF = "PDF"

    @classmethod
    def parse(cls, value: Any) -> ReportFormat:
        """Case-insensitive lookup; raises UnsupportedFormatError for anything else."""
        if isinstance(value, cls):
            return value
        key = str(value or "").strip().lstrip(".").upper()
        try:
            return cls(key)
        except ValueError:
            raise UnsupportedFormatError(value) from None


class Category(str, Enum):
    ENGINE = "Engine"
    TRANSMISSION = "Transmission"
    BRAKES = "Brakes"
    ELECTRICAL = "Electrical"
    SUSPENSION = "Suspension"
    FUEL_SYSTEM = "FuelSystem"
    OTHER = "Other"

    @classmethod
    def coerce(cls, value: Any) -> Category | None:
        """Category for a value or name ("Engine", "FuelSystem"); None when unknown."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value))
        except ValueError:
            return None


class Severity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]

    @classmethod
    def coerce(cls, value: Any) -> Severity | None:
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return None


_SEVERITY_RANK = {Severity.LOW: 0, Severity.MEDIUM: 1, Severity.HIGH: 2}


class StatusFlag(str, Enum):
    CONFIRMED = "confirmed"
    INTERMITTENT = "intermittent"
    MIL_ON = "milOn"


STATUS_FLAG_ORDER = (StatusFlag.CONFIRMED, StatusFlag.INTERMITTENT, StatusFlag.MIL_ON)


class MileageUnit(str, Enum):
    KM = "km"
    MILES = "miles"


# ---------------------------------------------------------------------------
# Base
# ---------------------------------------------------------------------------


class _Frozen(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


# ---------------------------------------------------------------------------
# Vehicle / diagnostic metadata
# ---------------------------------------------------------------------------


class VehicleInfo(_Frozen):
    """Vehicle metadata from the report header. Absent fields stay None."""

    vin: str | None = None
    mileage: int | None = None
    mileage_unit: MileageUnit | None = None
    chassis_type: str | None = None


class ModuleSummary(_Frozen):
    """One scanned control module."""

    address: str
    name: str
    component: str | None = None
    part_numbers: dict[str, str] = Field(default_factory=dict)
    fault_count: int = 0


class DiagnosticInfo(_Frozen):
    """Scan-level information: scanner software, readiness, modules."""

    total_errors: int = 0
    readiness_status: str | None = None
    has_freeze_frame: bool = False
    scan_date: str | None = None
    scanner_version: str | None = None
    data_version: str | None = None
    scanned_addresses: list[str] = Field(default_factory=list)
    module_status: dict[str, str] = Field(default_factory=dict)
    modules: list[ModuleSummary] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Fault entries
# ---------------------------------------------------------------------------


class ErrorCodeEntry(_Frozen):
    """One fault occurrence: classified and costed."""

    code: str
    description: str
    category: Category
    severity: Severity
    estimated_cost: int
    status_flags: frozenset[StatusFlag] = Field(default_factory=frozenset)
    module: str | None = None
    sub_code: str | None = None
    detail: str | None = None
    freeze_frame: dict[str, str] = Field(default_factory=dict)
    line_number: int | None = None

    @field_validator("code")
    @classmethod
    def code_not_empty(cls, v: str) -> str:
        v = (v or "").strip()
        if not v:
            raise ValueError("code must not be empty")
        return v

    @field_validator("estimated_cost")
    @classmethod
    def cost_non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("estimated_cost must be >= 0")
        return v

    @field_serializer("status_flags")
    def serialize_status_flags(self, flags: frozenset[StatusFlag]) -> list[str]:
        return [f.value for f in STATUS_FLAG_ORDER if f in flags]


class CategoryBreakdown(_Frozen):
    count: int = 0
    subtotal_cost: int = 0
    codes: list[str] = Field(default_factory=list)


class AnalysisSummary(_Frozen):
    """Derived counts, costs, priority and recommendations for one report."""

    total_errors: int = 0
    critical_errors: int = 0
    medium_errors: int = 0
    low_errors: int = 0
    estimated_total_cost: int = 0
    priority: Severity = Severity.LOW
    categories: dict[str, CategoryBreakdown] = Field(default_factory=dict)
    recommendations: list[str] = Field(default_factory=list)


class SoftParseWarning(_Frozen):
    """Recoverable issue found while parsing; never fails the call."""

    kind: str
    message: str
    line_number: int | None = None
    module: str | None = None


# ---------------------------------------------------------------------------
# Top-level result
# ---------------------------------------------------------------------------


class ParseResult(_Frozen):
    """Single public output of the pipeline."""

    success: bool
    error_codes: list[ErrorCodeEntry] = Field(default_factory=list)
    vehicle_info: VehicleInfo | None = None
    diagnostic_info: DiagnosticInfo | None = None
    analysis_summary: AnalysisSummary | None = None
    file_type: str = ""
    parsed_at: datetime
    error: str | None = None
    parse_errors: list[SoftParseWarning] = Field(default_factory=list)
    raw_excerpt: str | None = None

    @property
    def is_partial(self) -> bool:
        """Usable-but-imperfect: parsed, with soft warnings."""
        return self.success and bool(self.parse_errors)

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready dict with camelCase keys."""
        return self.model_dump(mode="json", by_alias=True)
