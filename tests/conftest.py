"""Shared fixtures: sample scanner exports."""

from __future__ import annotations

from pathlib import Path

import pytest

FIXTURES = Path(__file__).parent / "fixtures"

OBD_EXPORT = """OBD-II Scan Report
Date: 2024-03-01
Mileage: 120500 km

P0300 - Random/Multiple Cylinder Misfire Detected
P0171 - System Too Lean (Bank 1)
C3298 - ESC Component Error
B1168 - Steering Angle Sensor Error
U1123 - Databus - Received Error Message
"""


@pytest.fixture
def sample_report_path() -> Path:
    """VCDS auto-scan: 3 modules, 9 faults, masked VIN, mileage 22291 km."""
    return FIXTURES / "vcds_autoscan.txt"


@pytest.fixture
def sample_report_text(sample_report_path: Path) -> str:
    return sample_report_path.read_text(encoding="utf-8")


@pytest.fixture
def sample_codes() -> list[str]:
    return ["17158", "5250", "7150", "4716", "25472", "21221", "0295", "8299", "16390"]


@pytest.fixture
def obd_export_text() -> str:
    return OBD_EXPORT


PDF_REPORT_LINES = (
    "Address 01: Engine",
    "2 Faults Found:",
    "17158 - Databus",
    "U1123 00 [047] - Received Error Message",
    "Confirmed - Tested Since Memory Clear",
    "8299 - Databus",
    "U1121 00 [009] - Missing Message",
)


def _single_page_pdf(lines: tuple[str, ...]) -> bytes:
    """Minimal one-page PDF whose text layer holds lines, one per text row."""
    rows = " ".join(f"({line}) Tj T*" for line in lines)
    content = f"BT /F1 10 Tf 14 TL 72 720 Td {rows} ET"
    objects = [
        "<< /Type /Catalog /Pages 2 0 R >>",
        "<< /Type /Pages /Kids [3 0 R] /Count 1 >>",
        "<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] "
        "/Resources << /Font << /F1 4 0 R >> >> /Contents 5 0 R >>",
        "<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
        f"<< /Length {len(content)} >>\nstream\n{content}\nendstream",
    ]
    out = b"%PDF-1.4\n"
    offsets = []
    for number, body in enumerate(objects, start=1):
        offsets.append(len(out))
        out += f"{number} 0 obj\n{body}\nendobj\n".encode("latin-1")
    xref_at = len(out)
    out += f"xref\n0 {len(objects) + 1}\n0000000000 65535 f \n".encode("latin-1")
    for offset in offsets:
        out += f"{offset:010d} 00000 n \n".encode("latin-1")
    out += f"trailer\n<< /Size {len(objects) + 1} /Root 1 0 R >>\nstartxref\n{xref_at}\n%%EOF\n".encode("latin-1")
    return out


@pytest.fixture
def pdf_report_bytes() -> bytes:
    """Printed-to-PDF scan: one module, two faults, no indentation in the text layer."""
    return _single_page_pdf(PDF_REPORT_LINES)
