"""
Abstract interfaces for the diagnostic report pipeline.
The pipeline depends on these, not on concrete readers, classifiers or cost tables.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

from core.models import Classification
from core.schema import Category, Severity


class ISourceReader(ABC):
    """Abstract source access: local path or URL -> raw bytes."""

    @abstractmethod
    def read(self, source: str | Path) -> bytes:
        """Return report bytes. Raises SourceReadError when missing or unreadable."""
        ...


class IClassifier(ABC):
    """Abstract fault classification: code + text -> (category, severity)."""

    @abstractmethod
    def classify(
        self,
        code: str,
        description: str,
        surrounding_text: str = "",
        module_name: str = "",
    ) -> Classification:
        """
        Deterministic: identical inputs always give identical output.
        module_name only informs the category when code and text say nothing.
        """
        ...


class ICostEstimator(ABC):
    """Abstract repair cost lookup."""

    @abstractmethod
    def estimate(self, category: Category | str, severity: Severity | str) -> int:
        """Return a non-negative integer estimate in minor currency units."""
        ...
