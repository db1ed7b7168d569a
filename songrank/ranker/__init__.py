"""Comparison-based ranking engine.

This module turns a sequence of human pairwise answers into a total order
by binary insertion. Its state is a plain value that can be saved as a
draft and resumed later without re-asking answered questions.
"""

from songrank.ranker.errors import (
    InvalidSnapshotError,
    RankingCompleteError,
    RankingError,
    StaleComparisonError,
)
from songrank.ranker.metrics import RankerMetrics
from songrank.ranker.models import (
    ComparisonAnswer,
    PendingComparison,
    RankerPhase,
    RankingState,
)
from songrank.ranker.ranker import Ranker, start_ranking, submit_answer
from songrank.ranker.state_machine import (
    RankerPhaseTransitionError,
    RankerStateMachine,
)


__all__ = [
    "ComparisonAnswer",
    "InvalidSnapshotError",
    "PendingComparison",
    "Ranker",
    "RankerMetrics",
    "RankerPhase",
    "RankerPhaseTransitionError",
    "RankerStateMachine",
    "RankingCompleteError",
    "RankingError",
    "RankingState",
    "StaleComparisonError",
    "start_ranking",
    "submit_answer",
]
