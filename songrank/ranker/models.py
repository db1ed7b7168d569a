"""Data models for the ranking engine."""

import math
from enum import Enum
from typing import Annotated

from pydantic import Field

from songrank.data_model.base import CamelModel
from songrank.items.models import Item
from songrank.ranker.constants import LEGACY_ANSWER_ALIASES


class ComparisonAnswer(str, Enum):
    """Answer to a pending comparison.

    - BETTER: the new item ranks above the probe
    - WORSE: the new item ranks below the probe
    - UNKNOWN: the caller cannot judge; the new item is dropped from the run
    """

    BETTER = "better"
    WORSE = "worse"
    UNKNOWN = "unknown"

    @classmethod
    def _missing_(cls, value: object) -> "ComparisonAnswer | None":
        if isinstance(value, str):
            normalized = value.strip().lower()
            alias = LEGACY_ANSWER_ALIASES.get(normalized, normalized)
            for member in cls:
                if member.value == alias:
                    return member
        return None


class RankerPhase(str, Enum):
    """Phase of a ranking run.

    - BOOTSTRAPPING: nothing ranked yet, a seed pair awaits an answer
    - INSERTING: a pooled item is being binary-searched into the order
    - COMPLETE: the pool is empty
    """

    BOOTSTRAPPING = "BOOTSTRAPPING"
    INSERTING = "INSERTING"
    COMPLETE = "COMPLETE"


class PendingComparison(CamelModel):
    """The question the engine needs answered before it can proceed.

    For a seed comparison (``ranked`` still empty) the position and bounds
    are all zero and carry no search meaning.

    Attributes:
        new_item: Item being placed.
        probe_item: Item it is compared against.
        probe_position: Index of ``probe_item`` in ``ranked``.
        low_bound: Lower bound of the current search window.
        high_bound: Upper bound of the current search window.
        iteration: Probe count for ``new_item`` including this one.
    """

    new_item: Item
    probe_item: Item
    probe_position: Annotated[int, Field(ge=0)]
    low_bound: Annotated[int, Field(ge=0)]
    high_bound: Annotated[int, Field(ge=0)]
    iteration: Annotated[int, Field(ge=0)] = 0


class RankingState(CamelModel):
    """Externally observable snapshot of a ranking run.

    Every field is plain data, so the model round-trips through JSON and is
    the draft format consumed by resume.

    Attributes:
        ranked: Placed items, best first.
        remaining: Items not yet placed; the head is the one in flight.
        pending_comparison: Question awaiting an answer, if any.
        comparison_count: Better/Worse answers consumed so far.
    """

    ranked: list[Item] = Field(default_factory=list)
    remaining: list[Item] = Field(default_factory=list)
    pending_comparison: PendingComparison | None = None
    comparison_count: Annotated[int, Field(ge=0)] = 0

    @property
    def is_complete(self) -> bool:
        """True once no items remain to be placed."""
        return not self.remaining

    @property
    def is_seed(self) -> bool:
        """True while the pending question is the bootstrap seed pair."""
        return self.pending_comparison is not None and not self.ranked

    @property
    def phase(self) -> RankerPhase:
        """Phase implied by this snapshot."""
        if self.is_complete:
            return RankerPhase.COMPLETE
        if not self.ranked:
            return RankerPhase.BOOTSTRAPPING
        return RankerPhase.INSERTING

    @property
    def estimated_remaining(self) -> int:
        """Rough number of comparisons still to be asked."""
        if not self.remaining or not self.ranked:
            return 0
        per_item = math.ceil(math.log2(len(self.ranked) + 1))
        return len(self.remaining) * per_item

    @property
    def progress(self) -> float:
        """Fraction of the expected comparisons already answered."""
        if self.is_complete:
            return 1.0
        expected = self.comparison_count + self.estimated_remaining
        if expected == 0:
            return 0.0
        return self.comparison_count / expected

    def to_json(self) -> str:
        """Serialize to a JSON string with camelCase keys."""
        return self.model_dump_json(by_alias=True)

    @classmethod
    def from_json(cls, data: str | bytes) -> "RankingState":
        """Parse a snapshot produced by :meth:`to_json`.

        Args:
            data: JSON text.

        Returns:
            Parsed snapshot.
        """
        return cls.model_validate_json(data)
