"""
Summary aggregator: classified, costed error codes -> AnalysisSummary.
Recomputed from scratch on every call; the input list is never modified.
"""
from __future__ import annotations

import logging
from typing import Sequence

from core.schema import (
    AnalysisSummary,
    Category,
    CategoryBreakdown,
    DiagnosticInfo,
    ErrorCodeEntry,
    Severity,
    StatusFlag,
    VehicleInfo,
)

logger = logging.getLogger(__name__)

CRITICAL_RECOMMENDATION = "Immediate attention required - critical errors detected"
NO_FAULTS_RECOMMENDATION = "No fault codes stored - no action required"
INTERMITTENT_RECOMMENDATION = "Clear intermittent fault codes and re-scan to confirm they return"
READINESS_RECOMMENDATION = "Readiness tests incomplete - complete a drive cycle before emissions testing"

# Most safety-relevant first; ties on severity are broken by this order.
CATEGORY_RANKING: tuple[Category, ...] = (
    Category.BRAKES,
    Category.SUSPENSION,
    Category.ENGINE,
    Category.TRANSMISSION,
    Category.FUEL_SYSTEM,
    Category.ELECTRICAL,
    Category.OTHER,
)

# (category, highest severity in that category) -> recommendation.
# Categories without a high entry use their medium text for every severity.
RECOMMENDATIONS: dict[tuple[Category, Severity], str] = {
    (Category.BRAKES, Severity.HIGH): "Do not drive - critical brake system fault detected",
    (Category.BRAKES, Severity.MEDIUM): "Brake system inspection recommended",
    (Category.SUSPENSION, Severity.HIGH): "Steering and suspension inspection required before driving",
    (Category.SUSPENSION, Severity.MEDIUM): "Suspension and steering check recommended",
    (Category.ENGINE, Severity.HIGH): "Engine diagnostics required - risk of engine damage",
    (Category.ENGINE, Severity.MEDIUM): "Engine diagnostics recommended",
    (Category.TRANSMISSION, Severity.HIGH): "Transmission inspection required",
    (Category.TRANSMISSION, Severity.MEDIUM): "Transmission inspection recommended",
    (Category.FUEL_SYSTEM, Severity.HIGH): "Fuel system inspection required",
    (Category.FUEL_SYSTEM, Severity.MEDIUM): "Fuel system check recommended",
    (Category.ELECTRICAL, Severity.HIGH): "Electrical system and databus diagnostics required",
    (Category.ELECTRICAL, Severity.MEDIUM): "Check wiring and control module communication",
    (Category.OTHER, Severity.MEDIUM): "General inspection recommended for unclassified faults",
}


def recommendation_for(category: Category, severity: Severity) -> str:
    return RECOMMENDATIONS.get((category, severity)) or RECOMMENDATIONS[(category, Severity.MEDIUM)]


def priority_for(critical: int, medium: int) -> Severity:
    if critical > 0:
        return Severity.HIGH
    if medium > 0:
        return Severity.MEDIUM
    return Severity.LOW


def _readiness_incomplete(diagnostic_info: DiagnosticInfo | None) -> bool:
    """VCDS readiness bits: 0 = test complete, 1 = not yet run."""
    status = diagnostic_info.readiness_status if diagnostic_info else None
    if not status:
        return False
    bits = status.replace(" ", "")
    return bits.isdigit() and set(bits) <= {"0", "1"} and "1" in bits


def _recommendations(
    error_codes: Sequence[ErrorCodeEntry],
    worst: dict[Category, Severity],
    diagnostic_info: DiagnosticInfo | None,
) -> list[str]:
    if not error_codes:
        recs = [NO_FAULTS_RECOMMENDATION]
    else:
        recs = []
        if worst and max(s.rank for s in worst.values()) == Severity.HIGH.rank:
            recs.append(CRITICAL_RECOMMENDATION)
        ordered = sorted(worst.items(), key=lambda kv: (-kv[1].rank, CATEGORY_RANKING.index(kv[0])))
        recs.extend(recommendation_for(cat, sev) for cat, sev in ordered)
        if any(
            StatusFlag.INTERMITTENT in e.status_flags and StatusFlag.CONFIRMED not in e.status_flags
            for e in error_codes
        ):
            recs.append(INTERMITTENT_RECOMMENDATION)
    if _readiness_incomplete(diagnostic_info):
        recs.append(READINESS_RECOMMENDATION)
    return recs


def summarize(
    error_codes: Sequence[ErrorCodeEntry],
    vehicle_info: VehicleInfo | None = None,
    diagnostic_info: DiagnosticInfo | None = None,
) -> AnalysisSummary:
    """
    Counts by severity, cost per category and overall, priority and recommendations.
    Categories appear in enum order; only categories with at least one fault are listed.
    """
    counts = {Severity.HIGH: 0, Severity.MEDIUM: 0, Severity.LOW: 0}
    total_cost = 0
    per_category: dict[Category, list[ErrorCodeEntry]] = {}
    worst: dict[Category, Severity] = {}
    for entry in error_codes:
        counts[entry.severity] += 1
        total_cost += entry.estimated_cost
        per_category.setdefault(entry.category, []).append(entry)
        current = worst.get(entry.category)
        if current is None or entry.severity.rank > current.rank:
            worst[entry.category] = entry.severity

    categories = {
        cat.value: CategoryBreakdown(
            count=len(per_category[cat]),
            subtotal_cost=sum(e.estimated_cost for e in per_category[cat]),
            codes=[e.code for e in per_category[cat]],
        )
        for cat in Category
        if cat in per_category
    }
    if vehicle_info is not None and vehicle_info.vin:
        logger.debug("Summarizing %s faults for VIN %s", len(error_codes), vehicle_info.vin)

    return AnalysisSummary(
        total_errors=len(error_codes),
        critical_errors=counts[Severity.HIGH],
        medium_errors=counts[Severity.MEDIUM],
        low_errors=counts[Severity.LOW],
        estimated_total_cost=total_cost,
        priority=priority_for(counts[Severity.HIGH], counts[Severity.MEDIUM]),
        categories=categories,
        recommendations=_recommendations(error_codes, worst, diagnostic_info),
    )
