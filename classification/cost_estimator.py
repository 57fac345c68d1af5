"""
Repair cost estimator: per-category base cost scaled by a severity multiplier.
Integer arithmetic only; amounts are in minor currency units.
"""
from __future__ import annotations

import logging
from typing import Mapping

from core.interfaces import ICostEstimator
from core.schema import Category, Severity
from utils.config import CostConfig

logger = logging.getLogger(__name__)

# Fixed fallback for categories outside the enum; not configurable.
DEFAULT_COST = 10000

BASE_COSTS: dict[Category, int] = {
    Category.ENGINE: 12000,
    Category.TRANSMISSION: 18000,
    Category.BRAKES: 20000,
    Category.ELECTRICAL: 6000,
    Category.SUSPENSION: 25000,
    Category.FUEL_SYSTEM: 8000,
    Category.OTHER: 10000,
}

SEVERITY_MULTIPLIER_PCT: dict[Severity, int] = {
    Severity.HIGH: 125,
    Severity.MEDIUM: 100,
    Severity.LOW: 80,
}


class CostEstimator(ICostEstimator):
    """Lookup table estimator. Unknown severity is priced as medium."""

    def __init__(self, base_costs: Mapping[Category, int] | None = None) -> None:
        self._base_costs = dict(BASE_COSTS)
        if base_costs:
            self._base_costs.update(base_costs)

    @classmethod
    def from_config(cls, config: CostConfig | None) -> CostEstimator:
        """Apply base cost overrides keyed by category name; unknown names are ignored."""
        overrides: dict[Category, int] = {}
        for name, cost in ((config.base_costs if config else None) or {}).items():
            category = Category.coerce(name)
            if category is None:
                logger.warning("Ignoring base cost for unknown category %r", name)
                continue
            overrides[category] = int(cost)
        return cls(overrides)

    def estimate(self, category: Category | str, severity: Severity | str) -> int:
        cat = Category.coerce(category)
        if cat is None:
            return DEFAULT_COST
        sev = Severity.coerce(severity) or Severity.MEDIUM
        return self._base_costs[cat] * SEVERITY_MULTIPLIER_PCT[sev] // 100


_default_estimator = CostEstimator()


def estimate_cost(category: Category | str, severity: Severity | str) -> int:
    """Estimate with the default cost table."""
    return _default_estimator.estimate(category, severity)
