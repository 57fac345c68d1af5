"""
End-to-end tests for DiagnosticReportParser.
Uses fake readers/classifiers implementing the core interfaces; no network or disk beyond fixtures.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from core.exceptions import SourceReadError
from core.interfaces import IClassifier, ICostEstimator, ISourceReader
from core.models import Classification, RawReport
from core.schema import Category, MileageUnit, Severity
from pipeline.report_pipeline import DiagnosticReportParser, parse
from utils.config import AppConfig, ParserConfig


# ---------------------------------------------------------------------------
# Fake implementations (test doubles)
# ---------------------------------------------------------------------------


class FakeSourceReader(ISourceReader):
    """Serves fixed bytes per source; unknown sources are unreadable."""

    def __init__(self, files: dict[str, bytes]) -> None:
        self.files = files
        self.requested: list[str] = []

    def read(self, source: str | Path) -> bytes:
        self.requested.append(str(source))
        try:
            return self.files[str(source)]
        except KeyError:
            raise SourceReadError(f"File not found: {source}", source=str(source)) from None


class FixedClassifier(IClassifier):
    """Everything is a low-severity electrical fault."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, str, str, str]] = []

    def classify(self, code: str, description: str, surrounding_text: str = "", module_name: str = "") -> Classification:
        self.calls.append((code, description, surrounding_text, module_name))
        return Classification(category=Category.ELECTRICAL, severity=Severity.LOW)


class FlatCostEstimator(ICostEstimator):
    def estimate(self, category, severity) -> int:
        return 100


# ---------------------------------------------------------------------------
# Sample report
# ---------------------------------------------------------------------------


def test_parse_sample_report(sample_report_text: str, sample_codes: list[str]) -> None:
    result = parse(sample_report_text, "txt")
    assert result.success is True
    assert result.error is None
    assert result.file_type == "txt"
    assert result.parsed_at is not None
    assert [e.code for e in result.error_codes] == sample_codes
    assert result.parse_errors == []
    assert result.is_partial is False


def test_sample_vehicle_and_diagnostic_info(sample_report_text: str) -> None:
    result = parse(sample_report_text, "TXT")
    assert result.vehicle_info.mileage == 22291
    assert result.vehicle_info.mileage_unit is MileageUnit.KM
    assert result.vehicle_info.vin is None
    assert result.diagnostic_info.total_errors == 9
    assert result.diagnostic_info.scan_date == "2016-04-16"
    assert len(result.diagnostic_info.modules) == 3


def test_sample_entries_carry_module_and_cost(sample_report_text: str) -> None:
    result = parse(sample_report_text, "txt")
    first = result.error_codes[0]
    assert first.description == "Databus"
    assert first.module == "01-Engine"
    assert first.category is Category.ELECTRICAL
    assert first.estimated_cost == 6000
    brake = result.error_codes[3]
    assert (brake.code, brake.category, brake.severity, brake.estimated_cost) == (
        "4716",
        Category.BRAKES,
        Severity.HIGH,
        25000,
    )


def test_summary_invariants(sample_report_text: str) -> None:
    result = parse(sample_report_text, "txt")
    summary = result.analysis_summary
    assert summary.total_errors == len(result.error_codes)
    assert summary.estimated_total_cost == sum(e.estimated_cost for e in result.error_codes)
    assert summary.critical_errors + summary.medium_errors + summary.low_errors == 9
    assert summary.priority is Severity.HIGH
    assert summary.recommendations[0] == "Immediate attention required - critical errors detected"


def test_to_dict_uses_camel_case(sample_report_text: str) -> None:
    data = parse(sample_report_text, "txt").to_dict()
    assert set(data) >= {"success", "errorCodes", "vehicleInfo", "diagnosticInfo", "analysisSummary", "fileType", "parsedAt", "parseErrors"}
    entry = data["errorCodes"][0]
    assert entry["estimatedCost"] == 6000
    assert entry["statusFlags"] == ["confirmed"]
    assert entry["subCode"] == "U1123"
    assert data["vehicleInfo"]["mileageUnit"] == "km"
    assert data["analysisSummary"]["categories"]["Electrical"]["subtotalCost"] >= 6000


def test_parse_report_takes_a_raw_report(sample_report_text: str, sample_codes: list[str]) -> None:
    raw = RawReport(content=sample_report_text, declared_format="txt", source="golf.txt")
    result = DiagnosticReportParser().parse_report(raw)
    assert [e.code for e in result.error_codes] == sample_codes
    assert raw.content == sample_report_text


def test_raw_excerpt_is_truncated(sample_report_text: str) -> None:
    config = AppConfig(parser=ParserConfig(raw_excerpt_chars=40))
    result = DiagnosticReportParser(config=config).parse(sample_report_text, "txt")
    assert result.raw_excerpt == sample_report_text[:40]


def test_xml_wrapped_report(sample_report_text: str, sample_codes: list[str]) -> None:
    xml = f'<?xml version="1.0" encoding="UTF-8"?>\n<vcdsReport><scan>{sample_report_text}</scan></vcdsReport>'
    result = parse(xml.encode("utf-8"), "XML")
    assert result.success is True
    assert result.file_type == "xml"
    assert [e.code for e in result.error_codes] == sample_codes


def test_obd_export(obd_export_text: str) -> None:
    result = parse(obd_export_text, "TXT")
    assert result.success is True
    assert [e.code for e in result.error_codes] == ["P0300", "P0171", "C3298", "B1168", "U1123"]
    assert [e.category for e in result.error_codes] == [
        Category.ENGINE,
        Category.FUEL_SYSTEM,
        Category.BRAKES,
        Category.SUSPENSION,
        Category.ELECTRICAL,
    ]
    assert result.error_codes[0].module == "OBD-II"
    assert result.vehicle_info.mileage == 120500
    assert result.diagnostic_info.scan_date == "2024-03-01"


def test_bare_airbag_code_is_described_and_high() -> None:
    entry = parse("C0000", "txt").error_codes[0]
    assert entry.description == "Airbag System Component Error"
    assert (entry.category, entry.severity, entry.estimated_cost) == (Category.ELECTRICAL, Severity.HIGH, 7500)


def test_sample_sub_code_outranks_module_name(sample_report_text: str) -> None:
    entry = parse(sample_report_text, "txt").error_codes[1]
    assert (entry.code, entry.module, entry.sub_code) == ("5250", "01-Engine", "U1113")
    assert entry.category is Category.ELECTRICAL


def test_deindented_text_keeps_fault_blocks(sample_report_text: str, sample_codes: list[str]) -> None:
    flat = "\n".join(line.lstrip() for line in sample_report_text.splitlines())
    result = parse(flat, "PDF")
    assert [e.code for e in result.error_codes] == sample_codes
    assert result.parse_errors == []
    first = result.error_codes[0]
    assert first.sub_code == "U1123"
    assert first.freeze_frame["Fault Frequency"] == "3"
    assert [e.estimated_cost for e in result.error_codes] == [
        e.estimated_cost for e in parse(sample_report_text, "txt").error_codes
    ]


def test_pdf_report(pdf_report_bytes: bytes) -> None:
    result = parse(pdf_report_bytes, "PDF")
    assert result.success is True
    assert result.file_type == "pdf"
    assert [(e.code, e.sub_code) for e in result.error_codes] == [("17158", "U1123"), ("8299", "U1121")]
    assert result.parse_errors == []


# ---------------------------------------------------------------------------
# Failure semantics
# ---------------------------------------------------------------------------


def test_unsupported_format_is_hard_failure(sample_report_text: str) -> None:
    result = parse(sample_report_text, "unsupported")
    assert result.success is False
    assert "Unsupported file type" in result.error
    assert result.error_codes == []
    assert result.file_type == "unsupported"


def test_corrupt_pdf_is_hard_failure() -> None:
    result = parse(b"%PDF-1.4\n garbage", "PDF")
    assert result.success is False
    assert "PDF text extraction failed" in result.error
    assert result.file_type == "pdf"


def test_empty_content_is_hard_failure() -> None:
    result = parse("", "txt")
    assert result.success is False
    assert result.error


def test_oversized_content_is_rejected() -> None:
    config = AppConfig(parser=ParserConfig(max_input_bytes=10))
    result = DiagnosticReportParser(config=config).parse("17158 - Databus and more", "txt")
    assert result.success is False
    assert "too large" in result.error


def test_malformed_block_is_partial_success() -> None:
    text = "\n".join([
        "Address 01: Engine (J623)",
        "2 Faults Found:",
        "17158 - Databus",
        "          U1123 00 [047] - Received Error Message",
        "Garbled ### line",
        "          Confirmed - Tested Since Memory Clear",
    ])
    result = parse(text, "txt")
    assert result.success is True
    assert [e.code for e in result.error_codes] == ["17158"]
    assert [w.kind for w in result.parse_errors] == ["malformed_fault_block"]
    assert result.is_partial is True


def test_unexpected_errors_propagate() -> None:
    class BrokenClassifier(IClassifier):
        def classify(self, code, description, surrounding_text="", module_name=""):
            raise RuntimeError("bug")

    with pytest.raises(RuntimeError):
        DiagnosticReportParser(classifier=BrokenClassifier()).parse("P0300 - Misfire", "txt")


# ---------------------------------------------------------------------------
# Injected collaborators and file/URL sources
# ---------------------------------------------------------------------------


def test_injected_classifier_and_costs(sample_report_text: str) -> None:
    classifier = FixedClassifier()
    parser = DiagnosticReportParser(classifier=classifier, cost_estimator=FlatCostEstimator())
    result = parser.parse(sample_report_text, "txt")
    assert len(classifier.calls) == 9
    assert classifier.calls[0][3] == "Engine"
    assert "U1123" in classifier.calls[0][2]
    assert result.analysis_summary.estimated_total_cost == 900
    assert result.analysis_summary.priority is Severity.LOW


def test_parse_file_from_path(sample_report_path: Path, sample_codes: list[str]) -> None:
    result = DiagnosticReportParser().parse_file(sample_report_path)
    assert result.success is True
    assert result.file_type == "txt"
    assert [e.code for e in result.error_codes] == sample_codes


def test_parse_file_unsupported_type(sample_report_path: Path) -> None:
    result = DiagnosticReportParser().parse_file(sample_report_path, "unsupported")
    assert result.success is False
    assert "Unsupported file type" in result.error


def test_parse_file_missing_source(tmp_path: Path) -> None:
    result = DiagnosticReportParser().parse_file(tmp_path / "nonexistent.txt", "txt")
    assert result.success is False
    assert "not found" in result.error


def test_parse_file_from_url_infers_format(sample_report_text: str) -> None:
    url = "https://reports.example.com/scans/vcds.txt?download=1"
    reader = FakeSourceReader({url: sample_report_text.encode("utf-8")})
    result = DiagnosticReportParser(source_reader=reader).parse_file(url)
    assert reader.requested == [url]
    assert result.success is True
    assert len(result.error_codes) == 9


def test_parse_file_unreadable_url() -> None:
    reader = FakeSourceReader({})
    result = DiagnosticReportParser(source_reader=reader).parse_file("https://reports.example.com/missing.txt")
    assert result.success is False
    assert result.error.startswith("File not found")
