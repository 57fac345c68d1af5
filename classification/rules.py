"""
Classification rule tables. Ordered; the first matching rule wins.
Per-code rules come first, then keyword/code-range rules.

Keywords match as whole words, case-insensitively, with an optional plural suffix
("brake" matches "Brakes", "communication" matches "Communications").
"""
from __future__ import annotations

import re
from dataclasses import dataclass

from core.schema import Category, Severity

DEFAULT_SEVERITY = Severity.MEDIUM


def keyword_pattern(keywords: tuple[str, ...]) -> re.Pattern[str] | None:
    """One alternation for all keywords; multi-word keywords allow any whitespace run."""
    if not keywords:
        return None
    alts = [r"\s+".join(re.escape(part) for part in kw.split()) for kw in keywords]
    return re.compile(r"\b(?:" + "|".join(alts) + r")(?:s|es)?\b", re.IGNORECASE)


@dataclass(frozen=True)
class CodeRule:
    """A specific code whose category and severity do not depend on the report text."""

    code: str
    category: Category
    severity: Severity

    def matches(self, code: str) -> bool:
        return (code or "").strip().upper() == self.code


@dataclass(frozen=True)
class CategoryRule:
    category: Category
    keywords: tuple[str, ...] = ()
    code_pattern: re.Pattern[str] | None = None
    text_pattern: re.Pattern[str] | None = None

    @classmethod
    def of(cls, category: Category, keywords: tuple[str, ...], code: str | None = None) -> CategoryRule:
        return cls(
            category=category,
            keywords=keywords,
            code_pattern=re.compile(code) if code else None,
            text_pattern=keyword_pattern(keywords),
        )

    def matches_code(self, code: str) -> bool:
        return bool(self.code_pattern and self.code_pattern.match(code.upper()))

    def matches_text(self, text: str) -> bool:
        return bool(self.text_pattern and text and self.text_pattern.search(text))


@dataclass(frozen=True)
class SeverityRule:
    severity: Severity
    keywords: tuple[str, ...] = ()
    categories: frozenset[Category] = frozenset()
    text_pattern: re.Pattern[str] | None = None

    @classmethod
    def of(
        cls,
        severity: Severity,
        keywords: tuple[str, ...],
        categories: tuple[Category, ...] = (),
    ) -> SeverityRule:
        return cls(
            severity=severity,
            keywords=keywords,
            categories=frozenset(categories),
            text_pattern=keyword_pattern(keywords),
        )

    def matches(self, text: str, category: Category | None) -> bool:
        if category is not None and category in self.categories:
            return True
        return bool(self.text_pattern and text and self.text_pattern.search(text))


# Safety-critical codes (restraints, steering angle, stability control). Checked before
# any keyword rule, for the fault's own code and for OBD-II sub-codes on its detail lines.
# Airbag electronics have no category of their own and are filed under Electrical.
SAFETY_CRITICAL_CODES: tuple[CodeRule, ...] = (
    CodeRule("C0000", Category.ELECTRICAL, Severity.HIGH),
    CodeRule("C8000", Category.ELECTRICAL, Severity.HIGH),
    CodeRule("C2136", Category.ELECTRICAL, Severity.HIGH),
    CodeRule("C4008", Category.ELECTRICAL, Severity.HIGH),
    CodeRule("B1168", Category.SUSPENSION, Severity.HIGH),
    CodeRule("U0428", Category.SUSPENSION, Severity.HIGH),
    CodeRule("0295", Category.SUSPENSION, Severity.HIGH),
    CodeRule("7150", Category.SUSPENSION, Severity.HIGH),
    CodeRule("15873", Category.SUSPENSION, Severity.HIGH),
    CodeRule("C3298", Category.BRAKES, Severity.HIGH),
    CodeRule("C0608", Category.BRAKES, Severity.HIGH),
    CodeRule("C1146", Category.BRAKES, Severity.HIGH),
)

# FuelSystem sits before Engine so fuel-trim and injector codes inside P00xx-P05xx
# are not swallowed by the generic powertrain range.
CATEGORY_RULES: tuple[CategoryRule, ...] = (
    CategoryRule.of(
        Category.FUEL_SYSTEM,
        (
            "fuel pump",
            "fuel pressure",
            "fuel level",
            "fuel tank",
            "fuel rail",
            "injector",
            "too lean",
            "too rich",
            "evap",
            "fuel trim",
        ),
        code=r"^P0(?:08[7-9]|09[0-3]|17[0-5]|18\d|19[0-3]|20\d|21[0-2]|4[4-5]\d|46[0-4])$",
    ),
    CategoryRule.of(
        Category.ENGINE,
        (
            "misfire",
            "fuel",
            "cylinder",
            "engine",
            "ignition",
            "knock",
            "camshaft",
            "crankshaft",
            "throttle",
            "boost",
            "turbo",
            "lambda",
            "oxygen sensor",
            "catalyst",
            "egr",
            "coolant",
            "thermostat",
            "idle",
        ),
        code=r"^P0[0-5]\d\d$",
    ),
    CategoryRule.of(
        Category.TRANSMISSION,
        ("transmission", "gearbox", "gear", "clutch", "shift", "torque converter", "mechatronic", "selector"),
        code=r"^P0[7-9]\d\d$",
    ),
    CategoryRule.of(
        Category.BRAKES,
        (
            "brake",
            "abs",
            "esc",
            "traction",
            "stability",
            "wheel speed",
            "tire pressure",
            "tyre pressure",
            "tpms",
        ),
    ),
    CategoryRule.of(
        Category.ELECTRICAL,
        (
            "databus",
            "communication",
            "can bus",
            "gateway",
            "voltage",
            "battery",
            "alternator",
            "wiring",
            "fuse",
            "relay",
        ),
        code=r"^U\d{4}$",
    ),
    CategoryRule.of(
        Category.SUSPENSION,
        (
            "steering",
            "suspension",
            "shock",
            "strut",
            "ride height",
            "level control",
            "damper",
            "control arm",
            "g85",
        ),
    ),
)

SAFETY_KEYWORDS = ("airbag", "steering", "crash", "belt tensioner")

SEVERITY_RULES: tuple[SeverityRule, ...] = (
    SeverityRule.of(Severity.HIGH, ("critical", "failure", "severe", "broken", "damaged", "misfire")),
    SeverityRule.of(Severity.HIGH, SAFETY_KEYWORDS, categories=(Category.BRAKES,)),
    SeverityRule.of(Severity.MEDIUM, ("performance", "efficiency", "threshold", "range", "circuit", "implausible")),
    SeverityRule.of(Severity.LOW, ("idle", "thermostat", "comfort", "convenience", "bulb")),
)
