"""Errors raised by the ranking engine."""

from songrank.ranker.models import PendingComparison


class RankingError(Exception):
    """Base class for ranking engine errors."""


class StaleComparisonError(RankingError):
    """Raised when a submitted comparison is not the engine's pending one.

    Usually caused by a duplicate or concurrent submission. The caller should
    retry from the engine's current state.
    """

    def __init__(
        self,
        session_id: str,
        expected: PendingComparison | None,
        received: PendingComparison | None,
    ) -> None:
        """Initialize the error.

        Args:
            session_id: Ranking session identifier.
            expected: The engine's current pending comparison.
            received: The comparison submitted by the caller.
        """
        self.session_id = session_id
        self.expected = expected
        self.received = received
        super().__init__(
            f"Stale comparison for session '{session_id}': "
            f"expected {_describe(expected)}, received {_describe(received)}"
        )


class RankingCompleteError(RankingError):
    """Raised when an answer is submitted to a completed ranking."""

    def __init__(self, session_id: str) -> None:
        """Initialize the error.

        Args:
            session_id: Ranking session identifier.
        """
        self.session_id = session_id
        super().__init__(f"Ranking session '{session_id}' is already complete")


class InvalidSnapshotError(RankingError):
    """Raised when a restored ranking state is internally inconsistent."""

    def __init__(self, reason: str) -> None:
        """Initialize the error.

        Args:
            reason: What is inconsistent.
        """
        self.reason = reason
        super().__init__(f"Invalid ranking snapshot: {reason}")


def _describe(pending: PendingComparison | None) -> str:
    if pending is None:
        return "no comparison"
    return (
        f"'{pending.new_item.id}' vs '{pending.probe_item.id}' "
        f"at {pending.probe_position} in [{pending.low_bound}, {pending.high_bound}]"
    )
