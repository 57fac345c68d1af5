"""Tests for fault block splitting and raw fault extraction."""

from __future__ import annotations

from core.models import ModuleSection
from core.schema import StatusFlag
from extraction.fault_extractor import (
    WARNING_COUNT_MISMATCH,
    WARNING_MALFORMED_BLOCK,
    extract_faults,
    split_fault_blocks,
    status_flags_from,
)
from extraction.normalizer import split_lines
from extraction.scanner import scan_sections


def _module(fault_text: str, declared: int | None = None) -> ModuleSection:
    return ModuleSection(
        address="01",
        name="Engine",
        start_line=1,
        declared_fault_count=declared,
        fault_lines=split_lines(fault_text),
    )


def test_blocks_split_on_unindented_lines() -> None:
    text = "\n".join([
        "17158 - Databus",
        "          U1123 00 [047] - Received Error Message",
        "",
        "5250 - Function Restriction",
        "          Confirmed - Tested Since Memory Clear",
    ])
    blocks = split_fault_blocks(split_lines(text))
    assert [b.head.text for b in blocks] == ["17158 - Databus", "5250 - Function Restriction"]
    assert len(blocks[0].body) == 1


def test_vag_code_with_detail_and_status(sample_report_text: str) -> None:
    scan = scan_sections(split_lines(sample_report_text))
    faults, warnings = extract_faults(scan.modules[0])
    assert warnings == []
    first = faults[0]
    assert first.code == "17158"
    assert first.description == "Databus"
    assert first.sub_code == "U1123"
    assert first.detail == "Received Error Message"
    assert first.status_flags == frozenset({StatusFlag.CONFIRMED})
    assert first.module_label == "01-Engine"


def test_freeze_frame_values(sample_report_text: str) -> None:
    scan = scan_sections(split_lines(sample_report_text))
    faults, _ = extract_faults(scan.modules[0])
    frame = faults[0].freeze_frame
    assert frame["Fault Status"] == "00000001"
    assert frame["Mileage"] == "22291 km"
    assert frame["Time"] == "09:45:42"
    assert faults[1].freeze_frame == {}


def test_dash_detail_means_no_detail(sample_report_text: str) -> None:
    scan = scan_sections(split_lines(sample_report_text))
    faults, _ = extract_faults(scan.modules[0])
    second = faults[1]
    assert second.code == "5250"
    assert second.sub_code == "U1113"
    assert second.detail is None
    assert second.status_flags == frozenset({StatusFlag.CONFIRMED, StatusFlag.INTERMITTENT})


def test_mil_on_flag(sample_report_text: str) -> None:
    scan = scan_sections(split_lines(sample_report_text))
    faults, _ = extract_faults(scan.modules[2])
    assert faults[0].code == "0295"
    assert StatusFlag.MIL_ON in faults[0].status_flags


def test_not_confirmed_is_not_confirmed() -> None:
    flags = status_flags_from(["Not Confirmed - Intermittent"])
    assert flags == frozenset({StatusFlag.INTERMITTENT})


def test_readiness_trailer_is_not_a_fault(sample_report_text: str) -> None:
    scan = scan_sections(split_lines(sample_report_text))
    faults, warnings = extract_faults(scan.modules[0])
    assert [f.code for f in faults] == ["17158", "5250", "7150", "4716"]
    assert warnings == []


def test_obd_code_lines() -> None:
    faults, warnings = extract_faults(_module("P0300 - Random/Multiple Cylinder Misfire Detected\nU1123 - Databus - Received Error Message"))
    assert [(f.code, f.description) for f in faults] == [
        ("P0300", "Random/Multiple Cylinder Misfire Detected"),
        ("U1123", "Databus - Received Error Message"),
    ]
    assert warnings == []


def test_bare_code_gets_reference_or_generic_description() -> None:
    faults, _ = extract_faults(_module("P0420\n99999"))
    assert faults[0].description == "Catalyst System Efficiency Below Threshold (Bank 1)"
    assert faults[1].description == "Error Code 99999"


def test_malformed_block_is_skipped_with_warning() -> None:
    text = "\n".join([
        "17158 - Databus",
        "          U1123 00 [047] - Received Error Message",
        "Garbled ### line",
        "          Confirmed - Tested Since Memory Clear",
        "8299 - Databus",
    ])
    faults, warnings = extract_faults(_module(text, declared=3))
    assert [f.code for f in faults] == ["17158", "8299"]
    assert [w.kind for w in warnings] == [WARNING_MALFORMED_BLOCK]
    assert warnings[0].line_number == 3
    assert warnings[0].module == "01-Engine"


def test_declared_count_mismatch_is_reported() -> None:
    faults, warnings = extract_faults(_module("17158 - Databus\n8299 - Databus", declared=3))
    assert len(faults) == 2
    assert [w.kind for w in warnings] == [WARNING_COUNT_MISMATCH]


def test_duplicate_codes_are_kept_in_order() -> None:
    faults, _ = extract_faults(_module("17158 - Databus\n8299 - Databus\n17158 - Databus"))
    assert [(f.code, f.line_number) for f in faults] == [("17158", 1), ("8299", 2), ("17158", 3)]


def test_unindented_detail_and_status_lines_stay_in_their_block() -> None:
    text = "\n".join([
        "17158 - Databus",
        "U1123 00 [047] - Received Error Message",
        "Confirmed - Tested Since Memory Clear",
        "Freeze Frame:",
        "Fault Status: 00000001",
        "Mileage: 22291 km",
        "",
        "5250 - Function Restriction due to Faults in Other Modules",
        "U1113 00 [040] - -",
        "Intermittent - Confirmed - Tested Since Memory Clear",
        "",
        "Readiness: 0000 0000",
    ])
    faults, warnings = extract_faults(_module(text, declared=2))
    assert warnings == []
    assert [(f.code, f.sub_code) for f in faults] == [("17158", "U1123"), ("5250", "U1113")]
    assert faults[0].status_flags == frozenset({StatusFlag.CONFIRMED})
    assert faults[0].freeze_frame == {"Fault Status": "00000001", "Mileage": "22291 km"}
    assert faults[1].status_flags == frozenset({StatusFlag.CONFIRMED, StatusFlag.INTERMITTENT})


def test_code_line_mentioning_a_status_word_starts_a_new_fault() -> None:
    faults, _ = extract_faults(_module("P0300 - Misfire\nP0301 - Intermittent Misfire Cylinder 1"))
    assert [f.code for f in faults] == ["P0300", "P0301"]
