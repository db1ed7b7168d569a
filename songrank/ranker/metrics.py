"""Metrics collection for the ranker module."""

from dataclasses import dataclass
from typing import ClassVar


@dataclass
class RankerMetrics:
    """Metrics for ranking sessions.

    Attributes:
        sessions_started: Rankers constructed from scratch or an extension.
        sessions_resumed: Rankers restored from a snapshot.
        sessions_completed: Sessions that reached COMPLETE.
        comparisons_total: Better/Worse answers consumed.
        unknown_total: Unknown answers consumed.
        items_placed: Items inserted into an order.
        duplicates_dropped: Pooled items dropped by the identity rule.
        stale_rejected: Submissions rejected as stale.
        probe_ceiling_trips: Items placed by the probe-ceiling guard.
    """

    sessions_started: int = 0
    sessions_resumed: int = 0
    sessions_completed: int = 0
    comparisons_total: int = 0
    unknown_total: int = 0
    items_placed: int = 0
    duplicates_dropped: int = 0
    stale_rejected: int = 0
    probe_ceiling_trips: int = 0

    _instance: ClassVar["RankerMetrics | None"] = None

    @classmethod
    def get_instance(cls) -> "RankerMetrics":
        """Get singleton metrics instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset metrics (primarily for testing)."""
        cls._instance = None

    def record_session_started(self, resumed: bool = False) -> None:
        """Record a new or resumed session.

        Args:
            resumed: Whether the session was restored from a snapshot.
        """
        if resumed:
            self.sessions_resumed += 1
        else:
            self.sessions_started += 1

    def record_session_completed(self) -> None:
        """Record a session reaching COMPLETE."""
        self.sessions_completed += 1

    def record_comparison(self) -> None:
        """Record a Better/Worse answer."""
        self.comparisons_total += 1

    def record_unknown(self) -> None:
        """Record an Unknown answer."""
        self.unknown_total += 1

    def record_placed(self) -> None:
        """Record an item insertion."""
        self.items_placed += 1

    def record_duplicates(self, count: int) -> None:
        """Record pooled items dropped as duplicates.

        Args:
            count: Number of items dropped.
        """
        self.duplicates_dropped += count

    def record_stale(self) -> None:
        """Record a rejected stale submission."""
        self.stale_rejected += 1

    def record_probe_ceiling(self) -> None:
        """Record a placement forced by the probe ceiling."""
        self.probe_ceiling_trips += 1

    def to_dict(self) -> dict[str, int]:
        """Convert metrics to dictionary.

        Returns:
            Dictionary of metric name to value.
        """
        return {
            "sessions_started": self.sessions_started,
            "sessions_resumed": self.sessions_resumed,
            "sessions_completed": self.sessions_completed,
            "comparisons_total": self.comparisons_total,
            "unknown_total": self.unknown_total,
            "items_placed": self.items_placed,
            "duplicates_dropped": self.duplicates_dropped,
            "stale_rejected": self.stale_rejected,
            "probe_ceiling_trips": self.probe_ceiling_trips,
        }
