"""Tests for vehicle and scan metadata read from the report header."""

from __future__ import annotations

from datetime import date

import pytest

from core.schema import MileageUnit
from extraction.header import parse_scan_date, read_diagnostic_info, read_mileage, read_vehicle_info
from extraction.normalizer import split_lines
from extraction.scanner import scan_sections


def test_sample_vehicle_info(sample_report_text: str) -> None:
    scan = scan_sections(split_lines(sample_report_text))
    info = read_vehicle_info(scan.header_lines)
    assert info.vin is None
    assert info.mileage == 22291
    assert info.mileage_unit is MileageUnit.KM
    assert info.chassis_type == "AU (5Q0)"


def test_full_vin_is_read() -> None:
    info = read_vehicle_info(split_lines("VIN: WVWZZZAUZGW123456   License Plate: B-XY 123"))
    assert info.vin == "WVWZZZAUZGW123456"
    assert info.mileage is None
    assert info.mileage_unit is None


@pytest.mark.parametrize(
    "line, expected",
    [
        ("Mileage: 13850 miles", (13850, MileageUnit.MILES)),
        ("Mileage: 120,500 km", (120500, MileageUnit.KM)),
        ("Odometer 22291km-13850miles", (22291, MileageUnit.KM)),
        ("Odometer reading 48000 km", (48000, MileageUnit.KM)),
        ("No odometer here", (None, None)),
    ],
)
def test_mileage_forms(line: str, expected: tuple) -> None:
    assert read_mileage([line]) == expected


@pytest.mark.parametrize(
    "text, expected",
    [
        ("Saturday,16,April,2016,10:26:15:03521", date(2016, 4, 16)),
        ("Date: 2024-03-01", date(2024, 3, 1)),
        ("Date: 03/15/2023", date(2023, 3, 15)),
        ("Date: unknown", None),
    ],
)
def test_scan_dates(text: str, expected: date | None) -> None:
    assert parse_scan_date(text) == expected


def test_sample_diagnostic_info(sample_report_text: str) -> None:
    lines = split_lines(sample_report_text)
    scan = scan_sections(lines)
    info = read_diagnostic_info(scan.header_lines, lines, scan.modules, total_errors=9)
    assert info.total_errors == 9
    assert info.scan_date == "2016-04-16"
    assert info.scanner_version == "16.3.1.1 (x64)"
    assert info.data_version == "20160325"
    assert info.scanned_addresses[:3] == ["01", "02", "03"]
    assert info.scanned_addresses[-1] == "5F"
    assert info.module_status["02-Auto Trans"] == "Malfunction 0010"
    assert info.readiness_status == "0000 0000"
    assert info.has_freeze_frame is True
    assert [(m.address, m.name, m.fault_count) for m in info.modules] == [
        ("01", "Engine", 4),
        ("02", "Auto Trans", 2),
        ("03", "ABS Brakes", 3),
    ]
    assert info.modules[0].part_numbers == {"SW": "04E 906 016 G", "HW": "04E 907 309 A"}


def test_missing_metadata_stays_empty() -> None:
    lines = split_lines("Some header\nP0300 - Misfire")
    info = read_diagnostic_info(lines[:1], lines)
    assert info.scan_date is None
    assert info.readiness_status is None
    assert info.has_freeze_frame is False
    assert info.modules == []
