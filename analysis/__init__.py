"""Analysis: per-report summary (counts, costs, priority, recommendations)."""

from analysis.summary import summarize, priority_for, recommendation_for, RECOMMENDATIONS, CATEGORY_RANKING

__all__ = [
    "summarize",
    "priority_for",
    "recommendation_for",
    "RECOMMENDATIONS",
    "CATEGORY_RANKING",
]
