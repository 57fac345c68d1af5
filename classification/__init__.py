"""Classification: category/severity rules, reference descriptions and repair cost table."""

from classification.rules import (
    CATEGORY_RULES,
    SEVERITY_RULES,
    SAFETY_CRITICAL_CODES,
    DEFAULT_SEVERITY,
    CategoryRule,
    CodeRule,
    SeverityRule,
)
from classification.classifier import RuleBasedClassifier, classify
from classification.cost_estimator import (
    BASE_COSTS,
    DEFAULT_COST,
    SEVERITY_MULTIPLIER_PCT,
    CostEstimator,
    estimate_cost,
)
from classification.known_codes import KNOWN_CODE_DESCRIPTIONS, describe, fallback_description

__all__ = [
    "CATEGORY_RULES",
    "SEVERITY_RULES",
    "SAFETY_CRITICAL_CODES",
    "DEFAULT_SEVERITY",
    "CategoryRule",
    "CodeRule",
    "SeverityRule",
    "RuleBasedClassifier",
    "classify",
    "BASE_COSTS",
    "DEFAULT_COST",
    "SEVERITY_MULTIPLIER_PCT",
    "CostEstimator",
    "estimate_cost",
    "KNOWN_CODE_DESCRIPTIONS",
    "describe",
    "fallback_description",
]
