"""
Rule-based fault classifier: (code, description, surrounding text) -> (category, severity).
Pure and deterministic; holds only its immutable rule tables.
"""
from __future__ import annotations

import logging
from typing import Sequence

from classification.rules import (
    CATEGORY_RULES,
    DEFAULT_SEVERITY,
    SAFETY_CRITICAL_CODES,
    SEVERITY_RULES,
    CategoryRule,
    CodeRule,
    SeverityRule,
)
from core.interfaces import IClassifier
from core.models import Classification
from core.schema import Category, Severity
from extraction.patterns import OBD_CODE_TOKEN

logger = logging.getLogger(__name__)


def _join(*parts: str) -> str:
    return "\n".join(p for p in parts if p)


def _sub_codes(surrounding_text: str) -> list[str]:
    return [c.upper() for c in OBD_CODE_TOKEN.findall(surrounding_text or "")]


class RuleBasedClassifier(IClassifier):
    """
    A code listed in the per-code table decides category and severity outright.
    Otherwise category is decided in three passes over the ordered rule table:
      1. the fault's own code and description;
      2. the surrounding text and any OBD-II sub-codes found there;
      3. the module name.
    Only when all three miss is the fault Other. Severity reads description + surrounding text.
    """

    def __init__(
        self,
        category_rules: Sequence[CategoryRule] = CATEGORY_RULES,
        severity_rules: Sequence[SeverityRule] = SEVERITY_RULES,
        default_severity: Severity = DEFAULT_SEVERITY,
        code_rules: Sequence[CodeRule] = SAFETY_CRITICAL_CODES,
    ) -> None:
        self._category_rules = tuple(category_rules)
        self._severity_rules = tuple(severity_rules)
        self._default_severity = default_severity
        self._code_rules = tuple(code_rules)

    def code_rule(self, codes: Sequence[str]) -> CodeRule | None:
        """First per-code rule matching any of codes, in table order."""
        for rule in self._code_rules:
            if any(rule.matches(c) for c in codes):
                return rule
        return None

    def _first_match(self, codes: Sequence[str], text: str) -> Category | None:
        for rule in self._category_rules:
            if any(rule.matches_code(c) for c in codes) or rule.matches_text(text):
                return rule.category
        return None

    def categorize(self, code: str, description: str, surrounding_text: str = "", module_name: str = "") -> Category:
        code = (code or "").strip().upper()
        own = [code] if code else []
        sub_codes = _sub_codes(surrounding_text)
        known = self.code_rule(own) or self.code_rule(sub_codes)
        if known is not None:
            return known.category
        passes = ((own, description or ""), (sub_codes, surrounding_text or ""), ([], module_name or ""))
        for codes, text in passes:
            category = self._first_match(codes, text)
            if category is not None:
                return category
        logger.debug("No category rule matched code %s", code)
        return Category.OTHER

    def severity(
        self,
        description: str,
        category: Category | None = None,
        surrounding_text: str = "",
        code: str = "",
    ) -> Severity:
        known = self.code_rule([code] if code else []) or self.code_rule(_sub_codes(surrounding_text))
        if known is not None:
            return known.severity
        text = _join(description or "", surrounding_text)
        for rule in self._severity_rules:
            if rule.matches(text, category):
                return rule.severity
        return self._default_severity

    def classify(
        self,
        code: str,
        description: str,
        surrounding_text: str = "",
        module_name: str = "",
    ) -> Classification:
        category = self.categorize(code, description, surrounding_text, module_name)
        severity = self.severity(description, category, surrounding_text, code=code)
        return Classification(category=category, severity=severity)


_default_classifier = RuleBasedClassifier()


def classify(code: str, description: str, surrounding_text: str = "", module_name: str = "") -> Classification:
    """Classify with the default rule tables."""
    return _default_classifier.classify(code, description, surrounding_text, module_name)
