"""
Fault extractor: module fault region -> fault blocks -> raw faults.

A block starts at every non-blank unindented line and takes the indented lines below it
(blank lines inside a block are dropped). Detail, status and freeze frame lines stay with
their block even when unindented. A block led by a code yields one RawFault;
a block with indented detail but no parseable code is malformed and reported as a warning.
"""
from __future__ import annotations

import logging
import re
from typing import Sequence

from classification.known_codes import fallback_description
from core.models import FaultBlock, ModuleSection, RawFault, SourceLine
from core.schema import SoftParseWarning, StatusFlag
from extraction.patterns import CODE_LINE, DETAIL_LINE, FREEZE_FRAME_LINE, KEY_VALUE_LINE

logger = logging.getLogger(__name__)

WARNING_MALFORMED_BLOCK = "malformed_fault_block"
WARNING_COUNT_MISMATCH = "fault_count_mismatch"

# Case-insensitive substring rules. Unlike a plain substring test, "Not Confirmed"
# does not set confirmed (negative lookbehind on "not ").
STATUS_KEYWORDS: tuple[tuple[StatusFlag, re.Pattern[str]], ...] = (
    (StatusFlag.CONFIRMED, re.compile(r"(?<!not )confirmed", re.IGNORECASE)),
    (StatusFlag.INTERMITTENT, re.compile(r"intermittent", re.IGNORECASE)),
    (StatusFlag.MIL_ON, re.compile(r"mil on", re.IGNORECASE)),
)

NO_DETAIL = {"", "-"}


def status_flags_from(lines: Sequence[str]) -> frozenset[StatusFlag]:
    flags: set[StatusFlag] = set()
    for text in lines:
        for flag, pattern in STATUS_KEYWORDS:
            if pattern.search(text):
                flags.add(flag)
    return frozenset(flags)


def continues_block(text: str, in_freeze_frame: bool) -> bool:
    """
    True for an unindented line that still belongs to the open block: a sub-code detail line,
    a status line, a freeze frame marker, or a freeze frame value. Text pulled from a PDF
    often loses its indentation, so these are recognised by shape.
    """
    text = text.strip()
    if DETAIL_LINE.match(text) or FREEZE_FRAME_LINE.match(text):
        return True
    if CODE_LINE.match(text):
        return False
    if any(pattern.search(text) for _, pattern in STATUS_KEYWORDS):
        return True
    return in_freeze_frame and bool(KEY_VALUE_LINE.match(text))


def split_fault_blocks(lines: Sequence[SourceLine]) -> list[FaultBlock]:
    """Group a fault region into blocks; leading indented lines form a headless block."""
    blocks: list[FaultBlock] = []
    current: list[SourceLine] = []
    in_freeze_frame = False
    for line in lines:
        if line.is_blank:
            in_freeze_frame = False
            continue
        if current and not line.is_indented and not continues_block(line.text, in_freeze_frame):
            blocks.append(FaultBlock(lines=tuple(current)))
            current = []
            in_freeze_frame = False
        if FREEZE_FRAME_LINE.match(line.text.strip()):
            in_freeze_frame = True
        current.append(line)
    if current:
        blocks.append(FaultBlock(lines=tuple(current)))
    return blocks


def parse_fault_block(block: FaultBlock, module: ModuleSection | None = None) -> RawFault | None:
    """RawFault for a code-led block; None when the head carries no code."""
    head = block.head
    if head.is_indented:
        return None
    m = CODE_LINE.match(head.text)
    if not m:
        return None
    code = m.group("code").upper()
    description = m.group("description").strip() or fallback_description(code)

    sub_code: str | None = None
    detail: str | None = None
    freeze_frame: dict[str, str] = {}
    status_lines: list[str] = []
    in_freeze_frame = False
    for line in block.body:
        text = line.text.strip()
        if FREEZE_FRAME_LINE.match(text):
            in_freeze_frame = True
            continue
        if in_freeze_frame:
            kv = KEY_VALUE_LINE.match(text)
            if kv:
                freeze_frame[kv.group("key").strip()] = kv.group("value")
            continue
        if sub_code is None:
            dm = DETAIL_LINE.match(text)
            if dm:
                sub_code = dm.group("sub_code").upper()
                detail_text = dm.group("detail").strip()
                detail = None if detail_text in NO_DETAIL else detail_text
        status_lines.append(text)

    return RawFault(
        code=code,
        description=description,
        status_flags=status_flags_from(status_lines),
        sub_code=sub_code,
        detail=detail,
        freeze_frame=freeze_frame,
        module_address=module.address if module else "",
        module_name=module.name if module else "",
        line_number=head.number,
        context="\n".join(status_lines),
    )


def extract_faults(module: ModuleSection) -> tuple[list[RawFault], list[SoftParseWarning]]:
    """
    Extract raw faults from one module section, in document order.
    Malformed blocks and count mismatches become warnings; extraction never aborts.
    """
    faults: list[RawFault] = []
    warnings: list[SoftParseWarning] = []
    fault_like_blocks = 0
    for block in split_fault_blocks(module.fault_lines):
        fault = parse_fault_block(block, module)
        if fault is not None:
            faults.append(fault)
            fault_like_blocks += 1
            continue
        if block.head.is_indented or block.body:
            fault_like_blocks += 1
            msg = f"No parseable fault code in block at line {block.head.number}: {block.head.text.strip()[:60]!r}"
            logger.warning("%s (module %s)", msg, module.label)
            warnings.append(
                SoftParseWarning(
                    kind=WARNING_MALFORMED_BLOCK,
                    message=msg,
                    line_number=block.head.number,
                    module=module.label,
                )
            )
        else:
            logger.debug("Module %s trailer line %s: %s", module.label, block.head.number, block.head.text)

    declared = module.declared_fault_count
    if declared is not None and declared != fault_like_blocks:
        msg = f"Module {module.label} declares {declared} faults, found {fault_like_blocks}"
        logger.warning(msg)
        warnings.append(
            SoftParseWarning(
                kind=WARNING_COUNT_MISMATCH,
                message=msg,
                line_number=module.start_line,
                module=module.label,
            )
        )
    return faults, warnings
