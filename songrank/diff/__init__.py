"""Ranking diff engine for comparing two finished orderings."""

from songrank.diff.compare import compare_rankings, rank_correlation, similarity_percent
from songrank.diff.models import DiffResult, Direction, SharedItemComparison


__all__ = [
    "DiffResult",
    "Direction",
    "SharedItemComparison",
    "compare_rankings",
    "rank_correlation",
    "similarity_percent",
]
