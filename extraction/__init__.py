"""Extraction: source reading, normalization, section scanning, fault and header extraction."""

from extraction.normalizer import NormalizedReport, normalize, decode_bytes
from extraction.scanner import SectionScanner, scan_sections, parse_address_line
from extraction.fault_extractor import split_fault_blocks, parse_fault_block, extract_faults
from extraction.header import read_vehicle_info, read_diagnostic_info
from extraction.source_reader import SourceReader, is_url
from extraction.discovery import iter_reports, format_for_path

__all__ = [
    "NormalizedReport",
    "normalize",
    "decode_bytes",
    "SectionScanner",
    "scan_sections",
    "parse_address_line",
    "split_fault_blocks",
    "parse_fault_block",
    "extract_faults",
    "read_vehicle_info",
    "read_diagnostic_info",
    "SourceReader",
    "is_url",
    "iter_reports",
    "format_for_path",
]
