"""
Line patterns for VCDS-style auto-scan exports and plain OBD-II listings.
Shared by the section scanner, fault extractor and header reader.
"""
from __future__ import annotations

import re

# ---------------------------------------------------------------------------
# Structure
# ---------------------------------------------------------------------------

# "Address 01: Engine (J623-CHPA)       Labels: 04E-907-309-V1.clb"
ADDRESS_LINE = re.compile(r"^Address\s+(?P<address>[0-9A-F]{2})\s*:\s*(?P<rest>.+)$", re.IGNORECASE)
LABELS_SUFFIX = re.compile(r"\s+Labels?\s*:.*$", re.IGNORECASE)
COMPONENT_IN_PARENS = re.compile(r"\((?P<component>[^)]*)\)")
NAME_END = re.compile(r"\s{2,}|\(")

SEPARATOR_LINE = re.compile(r"^\s*-{5,}\s*$")
# "End-------------------------(Elapsed Time: 03:13)--------------------------"
END_LINE = re.compile(r"^End-{3,}", re.IGNORECASE)

FAULTS_FOUND = re.compile(r"^\s*(?P<count>\d+)\s+Faults?\s+Found\s*:?\s*$", re.IGNORECASE)
NO_FAULTS_FOUND = re.compile(r"^\s*No\s+fault\s+codes?\s+found\.?\s*$", re.IGNORECASE)

# "   Part No SW: 04E 906 016 G    HW: 04E 907 309 A"
PART_NO_LINE = re.compile(r"^\s*Part\s+No\.?(?P<rest>.*)$", re.IGNORECASE)
PART_NO_PAIR = re.compile(r"\b(?P<kind>SW|HW)\s*:\s*(?P<value>.+?)(?=\s{2,}\S+\s*:|\s*$)", re.IGNORECASE)
COMPONENT_LINE = re.compile(r"^\s*Component\s*:\s*(?P<value>.+?)\s*$", re.IGNORECASE)

# ---------------------------------------------------------------------------
# Fault blocks
# ---------------------------------------------------------------------------

# Bare VAG decimal code (4-8 digits, e.g. 17158, 0295, 12658704) or OBD-II P/B/C/U code.
# A hyphen glued to a digit ("2016-04-16") is a date, not a code.
CODE_LINE = re.compile(
    r"^(?P<code>[PBCU]\d{4}|\d{4,8})(?![\w.:/])(?!-\d)\s*(?:-\s*)?(?P<description>.*?)\s*$",
    re.IGNORECASE,
)
OBD_CODE_LINE = re.compile(r"^[PBCU]\d{4}(?![\w.:/])", re.IGNORECASE)
OBD_CODE_TOKEN = re.compile(r"\b[PBCU]\d{4}\b", re.IGNORECASE)

# "U1123 00 [047] - Received Error Message"
DETAIL_LINE = re.compile(
    r"^(?P<sub_code>[PBCU][0-9A-F]{4})\s+(?P<fault_type>[0-9A-F]{2,3})\s*(?:\[(?P<priority>\d+)\])?\s*-\s*(?P<detail>.*?)\s*$",
    re.IGNORECASE,
)
FREEZE_FRAME_LINE = re.compile(r"^Freeze\s+Frame\s*:?\s*$", re.IGNORECASE)
KEY_VALUE_LINE = re.compile(r"^(?P<key>[A-Za-z][\w ./()-]*?)\s*:\s*(?P<value>.*?)\s*$")

# ---------------------------------------------------------------------------
# Header metadata
# ---------------------------------------------------------------------------

VIN_FIELD = re.compile(r"\bVIN\s*:\s*(?P<vin>[A-HJ-NPR-Z0-9]{17})\b", re.IGNORECASE)
MILEAGE_FIELD = re.compile(
    r"\bMileage\s*:\s*(?P<value>\d[\d,.]*)\s*(?P<unit>km|kilometers|kilometres|mi|miles)\b",
    re.IGNORECASE,
)
# "22291km-13850miles" without a Mileage: label
MILEAGE_PAIR = re.compile(r"\b(?P<km>\d+)\s*km\s*-\s*(?P<miles>\d+)\s*miles\b", re.IGNORECASE)
MILEAGE_ANY = re.compile(r"\b(?P<value>\d[\d,.]*)\s*(?P<unit>km|kilometers|kilometres|miles)\b", re.IGNORECASE)
CHASSIS_TYPE = re.compile(r"\bChassis\s+Type\s*:\s*(?P<value>.+?)\s*$", re.IGNORECASE)

SCANNER_VERSION = re.compile(r"^VCDS\s+Version\s*:\s*(?P<value>.+?)\s*$", re.IGNORECASE)
DATA_VERSION = re.compile(r"^Data\s+version\s*:\s*(?P<value>.+?)\s*$", re.IGNORECASE)
SCAN_LIST = re.compile(r"^Scan\s*:\s*(?P<value>(?:[0-9A-F]{2}\s*)+)$", re.IGNORECASE)
# "01-Engine -- Status: Malfunction 0010"
MODULE_STATUS = re.compile(r"^(?P<label>[0-9A-F]{2}-\S.*?)\s+--\s+Status\s*:\s*(?P<status>.+?)\s*$", re.IGNORECASE)
# "Saturday,16,April,2016,10:26:15:03521"
VCDS_TIMESTAMP = re.compile(
    r"^\w+,\s*(?P<day>\d{1,2}),\s*(?P<month>[A-Za-z]+),\s*(?P<year>\d{4}),\s*(?P<time>\d{1,2}:\d{2}:\d{2})"
)
NUMERIC_DATE = re.compile(r"\b(?P<date>\d{1,2}[/-]\d{1,2}[/-]\d{2,4}|\d{4}[./-]\d{2}[./-]\d{2})\b")
READINESS = re.compile(r"\breadiness\s*:\s*(?P<value>.+?)\s*$", re.IGNORECASE)
FREEZE_FRAME_ANY = re.compile(r"freeze\s+frame", re.IGNORECASE)
