"""Core layer: interfaces, models, schemas, exceptions."""

from core.interfaces import (
    ISourceReader,
    IClassifier,
    ICostEstimator,
)
from core.models import (
    RawReport,
    SourceLine,
    ModuleSection,
    ScanResult,
    FaultBlock,
    RawFault,
    Classification,
    ClassifiedFault,
    BatchMetrics,
)
from core.schema import (
    ReportFormat,
    Category,
    Severity,
    StatusFlag,
    MileageUnit,
    VehicleInfo,
    DiagnosticInfo,
    ModuleSummary,
    ErrorCodeEntry,
    CategoryBreakdown,
    AnalysisSummary,
    SoftParseWarning,
    ParseResult,
)
from core.exceptions import (
    DiagnosticReportError,
    UnsupportedFormatError,
    SourceReadError,
    InputTooLargeError,
    ConfigError,
)

__all__ = [
    "ISourceReader",
    "IClassifier",
    "ICostEstimator",
    "RawReport",
    "SourceLine",
    "ModuleSection",
    "ScanResult",
    "FaultBlock",
    "RawFault",
    "Classification",
    "ClassifiedFault",
    "BatchMetrics",
    "ReportFormat",
    "Category",
    "Severity",
    "StatusFlag",
    "MileageUnit",
    "VehicleInfo",
    "DiagnosticInfo",
    "ModuleSummary",
    "ErrorCodeEntry",
    "CategoryBreakdown",
    "AnalysisSummary",
    "SoftParseWarning",
    "ParseResult",
    "DiagnosticReportError",
    "UnsupportedFormatError",
    "SourceReadError",
    "InputTooLargeError",
    "ConfigError",
]
