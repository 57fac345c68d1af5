"""
Section scanner: partitions normalized lines into a header region and per-module sections.

State machine:
    HEADER         -> IN_MODULE       on "Address NN: <Module> (...)"
    IN_MODULE      -> IN_FAULT_BLOCK  on "<N> Faults Found:"
    IN_FAULT_BLOCK -> HEADER          on a dashed separator (next module expected), or end of stream
A "Faults Found" section with no Address header is skipped (SKIPPING) with a soft warning.
Documents with no Address markers at all (plain OBD-II exports) are read as one implicit module.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Sequence

from core.models import ModuleSection, ScanResult, SourceLine
from core.schema import SoftParseWarning
from extraction.patterns import (
    ADDRESS_LINE,
    COMPONENT_IN_PARENS,
    COMPONENT_LINE,
    END_LINE,
    FAULTS_FOUND,
    LABELS_SUFFIX,
    NAME_END,
    NO_FAULTS_FOUND,
    OBD_CODE_LINE,
    PART_NO_LINE,
    PART_NO_PAIR,
    SEPARATOR_LINE,
)

logger = logging.getLogger(__name__)

IMPLICIT_MODULE_NAME = "OBD-II"
WARNING_MISSING_MODULE_HEADER = "missing_module_header"


class ScanState(str, Enum):
    HEADER = "header"
    IN_MODULE = "in_module"
    IN_FAULT_BLOCK = "in_fault_block"
    SKIPPING = "skipping"


@dataclass(frozen=True)
class AddressMarker:
    address: str
    name: str
    component: str | None


def parse_address_line(text: str) -> AddressMarker | None:
    """Parse 'Address 01: Engine (J623-CHPA)  Labels: ...'; None if not a module marker."""
    m = ADDRESS_LINE.match(text)
    if not m:
        return None
    rest = LABELS_SUFFIX.sub("", m.group("rest")).strip()
    comp = COMPONENT_IN_PARENS.search(rest)
    end = NAME_END.search(rest)
    name = (rest[: end.start()] if end else rest).strip()
    if not name:
        return None
    component = comp.group("component").strip() if comp else None
    return AddressMarker(address=m.group("address").upper(), name=name, component=component or None)


def parse_part_numbers(text: str) -> dict[str, str]:
    """'Part No SW: 04E 906 016 G    HW: 04E 907 309 A' -> {'SW': ..., 'HW': ...}."""
    m = PART_NO_LINE.match(text)
    if not m:
        return {}
    rest = m.group("rest")
    pairs = {p.group("kind").upper(): p.group("value").strip() for p in PART_NO_PAIR.finditer(rest)}
    if pairs:
        return pairs
    value = rest.strip().lstrip(":").strip()
    return {"Part No": value} if value else {}


@dataclass
class _ModuleBuilder:
    """Mutable accumulator, local to one scan; frozen into ModuleSection on close."""

    address: str
    name: str
    start_line: int
    component: str | None = None
    part_numbers: dict[str, str] = field(default_factory=dict)
    declared_fault_count: int | None = None
    fault_lines: list[SourceLine] = field(default_factory=list)

    def add_declared(self, count: int) -> None:
        self.declared_fault_count = (self.declared_fault_count or 0) + count

    def build(self) -> ModuleSection:
        return ModuleSection(
            address=self.address,
            name=self.name,
            start_line=self.start_line,
            component=self.component,
            part_numbers=dict(self.part_numbers),
            declared_fault_count=self.declared_fault_count,
            fault_lines=tuple(self.fault_lines),
        )


class SectionScanner:
    """Stateless between calls: each scan() owns its builders and warnings."""

    def scan(self, lines: Sequence[SourceLine]) -> ScanResult:
        if any(ADDRESS_LINE.match(line.text) for line in lines):
            return self._scan_modules(lines)
        return self._scan_implicit(lines)

    def _scan_modules(self, lines: Sequence[SourceLine]) -> ScanResult:
        state = ScanState.HEADER
        header_open = True
        builder: _ModuleBuilder | None = None
        header: list[SourceLine] = []
        modules: list[ModuleSection] = []
        warnings: list[SoftParseWarning] = []

        def close() -> None:
            nonlocal builder
            if builder is not None:
                modules.append(builder.build())
                builder = None

        for line in lines:
            text = line.text
            if END_LINE.match(text):
                break
            marker = parse_address_line(text)
            if marker is not None:
                close()
                builder = _ModuleBuilder(
                    address=marker.address,
                    name=marker.name,
                    start_line=line.number,
                    component=marker.component,
                )
                state = ScanState.IN_MODULE
                header_open = False
                continue
            if SEPARATOR_LINE.match(text):
                close()
                state = ScanState.HEADER
                header_open = False
                continue

            if state is ScanState.HEADER:
                if FAULTS_FOUND.match(text):
                    msg = f"Fault list at line {line.number} has no Address header; section skipped"
                    logger.warning(msg)
                    warnings.append(
                        SoftParseWarning(kind=WARNING_MISSING_MODULE_HEADER, message=msg, line_number=line.number)
                    )
                    state = ScanState.SKIPPING
                elif header_open:
                    header.append(line)
            elif state is ScanState.SKIPPING:
                continue
            elif state is ScanState.IN_MODULE:
                found = FAULTS_FOUND.match(text)
                if found:
                    builder.add_declared(int(found.group("count")))
                    state = ScanState.IN_FAULT_BLOCK
                else:
                    self._module_line(builder, line)
            else:
                builder.fault_lines.append(line)
        close()
        logger.debug("Scanned %s module sections, %s header lines", len(modules), len(header))
        return ScanResult(header_lines=tuple(header), modules=tuple(modules), warnings=tuple(warnings))

    def _module_line(self, builder: _ModuleBuilder, line: SourceLine) -> None:
        """Module metadata before the fault list: part numbers, component, 'No fault code found'."""
        text = line.text
        if NO_FAULTS_FOUND.match(text):
            builder.add_declared(0)
            return
        parts = parse_part_numbers(text)
        if parts:
            builder.part_numbers.update(parts)
            return
        comp = COMPONENT_LINE.match(text)
        if comp and not builder.component:
            builder.component = comp.group("value")

    def _scan_implicit(self, lines: Sequence[SourceLine]) -> ScanResult:
        """No Address markers: header until the first fault list or OBD-II code line."""
        state = ScanState.HEADER
        header: list[SourceLine] = []
        builder = _ModuleBuilder(
            address="",
            name=IMPLICIT_MODULE_NAME,
            start_line=lines[0].number if lines else 1,
        )
        for line in lines:
            text = line.text
            if END_LINE.match(text):
                break
            found = FAULTS_FOUND.match(text)
            if found:
                if state is ScanState.HEADER:
                    builder.start_line = line.number
                builder.add_declared(int(found.group("count")))
                state = ScanState.IN_FAULT_BLOCK
                continue
            if state is ScanState.HEADER:
                if NO_FAULTS_FOUND.match(text):
                    builder.add_declared(0)
                elif OBD_CODE_LINE.match(text):
                    builder.start_line = line.number
                    builder.fault_lines.append(line)
                    state = ScanState.IN_FAULT_BLOCK
                else:
                    header.append(line)
                continue
            builder.fault_lines.append(line)

        modules: tuple[ModuleSection, ...] = ()
        if builder.fault_lines or builder.declared_fault_count is not None:
            modules = (builder.build(),)
        return ScanResult(header_lines=tuple(header), modules=modules, implicit_module=True)


def scan_sections(lines: Sequence[SourceLine]) -> ScanResult:
    """Convenience wrapper around SectionScanner().scan()."""
    return SectionScanner().scan(lines)
