"""Data models for the ranking diff engine."""

from enum import Enum
from typing import Annotated

from pydantic import Field

from songrank.data_model.base import CamelModel
from songrank.items.models import Item


class Direction(str, Enum):
    """Movement of a shared item from side A to side B.

    - UP: ranked higher (smaller rank) in B
    - DOWN: ranked lower (greater rank) in B
    - SAME: same rank on both sides
    """

    UP = "up"
    DOWN = "down"
    SAME = "same"

    @classmethod
    def from_ranks(cls, rank_a: int, rank_b: int) -> "Direction":
        """Classify the move from ``rank_a`` to ``rank_b``."""
        if rank_b > rank_a:
            return cls.DOWN
        if rank_b < rank_a:
            return cls.UP
        return cls.SAME


class SharedItemComparison(CamelModel):
    """An item present on both sides with its rank on each.

    Attributes:
        item: The item as it appears in A.
        other_item: The matching item as it appears in B.
        rank_a: 1-based rank in A.
        rank_b: 1-based rank in B.
        shared_rank_a: 1-based rank in A counting shared items only.
        shared_rank_b: 1-based rank in B counting shared items only.
        position_diff: ``rank_b - rank_a``; positive means lower in B.
        diff_amount: ``abs(rank_a - rank_b)``.
        direction: Movement from A to B.
    """

    item: Item
    other_item: Item
    rank_a: Annotated[int, Field(ge=1)]
    rank_b: Annotated[int, Field(ge=1)]
    shared_rank_a: Annotated[int, Field(ge=1)]
    shared_rank_b: Annotated[int, Field(ge=1)]
    position_diff: int
    diff_amount: Annotated[int, Field(ge=0)]
    direction: Direction


class DiffResult(CamelModel):
    """Comparison of two finished orderings A ("yours") and B ("theirs").

    Attributes:
        shared_items: Items on both sides, in ascending rank in A.
        only_in_a: Items only in A, in A's order.
        only_in_b: Items only in B, in B's order.
        similarity: ``round(100 * shared / max(len(A), len(B)))``.
        rank_correlation: Spearman correlation of the shared items mapped
            to a 0-100 percentage.
    """

    shared_items: list[SharedItemComparison] = Field(default_factory=list)
    only_in_a: list[Item] = Field(default_factory=list)
    only_in_b: list[Item] = Field(default_factory=list)
    similarity: Annotated[int, Field(ge=0, le=100)] = 0
    rank_correlation: Annotated[int, Field(ge=0, le=100)] = 0

    def sorted_by_a(self) -> list[SharedItemComparison]:
        """Shared items in ascending rank in A."""
        return sorted(self.shared_items, key=lambda s: s.rank_a)

    def sorted_by_b(self) -> list[SharedItemComparison]:
        """Shared items in ascending rank in B."""
        return sorted(self.shared_items, key=lambda s: s.rank_b)
