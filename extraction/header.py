"""
Header reader: vehicle identity and scan metadata from the report header region.
Missing fields stay None; nothing here raises for absent data.
"""
from __future__ import annotations

import logging
import re
from datetime import date, datetime
from typing import Iterable, Sequence

from core.models import ModuleSection, SourceLine
from core.schema import DiagnosticInfo, MileageUnit, ModuleSummary, VehicleInfo
from extraction.patterns import (
    CHASSIS_TYPE,
    DATA_VERSION,
    FREEZE_FRAME_ANY,
    MILEAGE_ANY,
    MILEAGE_FIELD,
    MILEAGE_PAIR,
    MODULE_STATUS,
    NUMERIC_DATE,
    READINESS,
    SCAN_LIST,
    SCANNER_VERSION,
    VCDS_TIMESTAMP,
    VIN_FIELD,
)

logger = logging.getLogger(__name__)

_MILE_UNITS = {"mi", "mile", "miles"}
_NUMERIC_DATE_FORMATS = ("%Y-%m-%d", "%Y.%m.%d", "%Y/%m/%d", "%m/%d/%Y", "%d.%m.%Y", "%d-%m-%Y", "%m/%d/%y")


def _unit(raw: str) -> MileageUnit:
    return MileageUnit.MILES if raw.lower() in _MILE_UNITS else MileageUnit.KM


def _to_int(raw: str) -> int | None:
    digits = re.sub(r"[,.\s]", "", raw)
    return int(digits) if digits.isdigit() else None


def read_mileage(lines: Iterable[str]) -> tuple[int | None, MileageUnit | None]:
    """First mileage in the header: 'Mileage: N unit', then 'Nkm-Mmiles', then any 'N km'."""
    texts = list(lines)
    for text in texts:
        m = MILEAGE_FIELD.search(text)
        if m:
            value = _to_int(m.group("value"))
            if value is not None:
                return value, _unit(m.group("unit"))
    for text in texts:
        m = MILEAGE_PAIR.search(text)
        if m:
            return int(m.group("km")), MileageUnit.KM
    for text in texts:
        m = MILEAGE_ANY.search(text)
        if m:
            value = _to_int(m.group("value"))
            if value is not None:
                return value, _unit(m.group("unit"))
    return None, None


def read_vehicle_info(header_lines: Sequence[SourceLine]) -> VehicleInfo:
    """VIN (17 chars, masked VINs ignored), mileage and chassis type from the header."""
    texts = [line.text for line in header_lines]
    vin = None
    chassis = None
    for text in texts:
        if vin is None:
            m = VIN_FIELD.search(text)
            if m:
                vin = m.group("vin").upper()
        if chassis is None:
            m = CHASSIS_TYPE.search(text)
            if m:
                chassis = m.group("value")
    mileage, unit = read_mileage(texts)
    if vin is None:
        logger.debug("No readable VIN in header")
    return VehicleInfo(vin=vin, mileage=mileage, mileage_unit=unit, chassis_type=chassis)


def parse_scan_date(text: str) -> date | None:
    """'Saturday,16,April,2016,10:26:15:03521' or a numeric date -> date."""
    m = VCDS_TIMESTAMP.match(text.strip())
    if m:
        for fmt in ("%d %B %Y", "%d %b %Y"):
            try:
                return datetime.strptime(f"{m.group('day')} {m.group('month')} {m.group('year')}", fmt).date()
            except ValueError:
                continue
    m = NUMERIC_DATE.search(text)
    if m:
        raw = m.group("date")
        for fmt in _NUMERIC_DATE_FORMATS:
            try:
                return datetime.strptime(raw, fmt).date()
            except ValueError:
                continue
    return None


def _module_summary(module: ModuleSection, extracted: int) -> ModuleSummary:
    count = module.declared_fault_count if module.declared_fault_count is not None else extracted
    return ModuleSummary(
        address=module.address,
        name=module.name,
        component=module.component,
        part_numbers=dict(module.part_numbers),
        fault_count=count,
    )


def read_diagnostic_info(
    header_lines: Sequence[SourceLine],
    all_lines: Sequence[SourceLine],
    modules: Sequence[ModuleSection] = (),
    total_errors: int = 0,
    extracted_counts: dict[str, int] | None = None,
) -> DiagnosticInfo:
    """
    Scan metadata: date, scanner/data version, scanned addresses, per-module status,
    readiness (first occurrence anywhere) and whether any freeze frame was stored.
    """
    extracted_counts = extracted_counts or {}
    scan_date: date | None = None
    scanner_version = None
    data_version = None
    scanned: list[str] = []
    module_status: dict[str, str] = {}
    for line in header_lines:
        text = line.text.strip()
        if scan_date is None and (VCDS_TIMESTAMP.match(text) or text.lower().startswith("date")):
            scan_date = parse_scan_date(text)
        m = SCANNER_VERSION.match(text)
        if m and scanner_version is None:
            scanner_version = m.group("value")
            continue
        m = DATA_VERSION.match(text)
        if m and data_version is None:
            data_version = m.group("value")
            continue
        m = SCAN_LIST.match(text)
        if m and not scanned:
            scanned = [a.upper() for a in m.group("value").split()]
            continue
        m = MODULE_STATUS.match(text)
        if m:
            module_status[m.group("label").strip()] = m.group("status")

    readiness = None
    has_freeze_frame = False
    for line in all_lines:
        if readiness is None:
            m = READINESS.search(line.text)
            if m:
                readiness = m.group("value")
        if not has_freeze_frame and FREEZE_FRAME_ANY.search(line.text):
            has_freeze_frame = True

    return DiagnosticInfo(
        total_errors=total_errors,
        readiness_status=readiness,
        has_freeze_frame=has_freeze_frame,
        scan_date=scan_date.isoformat() if scan_date else None,
        scanner_version=scanner_version,
        data_version=data_version,
        scanned_addresses=scanned,
        module_status=module_status,
        modules=[_module_summary(m, extracted_counts.get(m.label, 0)) for m in modules],
    )
