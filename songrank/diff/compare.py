"""Comparison of two finished rankings."""

import math
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

import structlog

from songrank.diff.models import DiffResult, Direction, SharedItemComparison
from songrank.items.identity import IdentityIndex, IndexedItem
from songrank.items.models import Item
from songrank.items.records import items_from_records


logger = structlog.get_logger()


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def similarity_percent(shared: int, size_a: int, size_b: int) -> int:
    """Share of the larger list that is common to both, as a percentage.

    Args:
        shared: Number of shared items.
        size_a: Number of distinct items in A.
        size_b: Number of distinct items in B.

    Returns:
        Integer percentage, 0 when both lists are empty.
    """
    denominator = max(size_a, size_b)
    if denominator == 0:
        return 0
    return _round_half_up(100 * shared / denominator)


def rank_correlation(shared_ranks: Sequence[tuple[int, int]]) -> int:
    """Spearman's rank correlation mapped from [-1, 1] to [0, 100].

    Args:
        shared_ranks: ``(rank_a, rank_b)`` per shared item, each side
            re-ranked 1..n over the shared items only.

    Returns:
        Integer percentage; 0 with no shared items, 100 with exactly one.
    """
    n = len(shared_ranks)
    if n == 0:
        return 0
    if n == 1:
        return 100

    sum_diff_squared = sum((a - b) ** 2 for a, b in shared_ranks)
    rho = 1 - (6 * sum_diff_squared) / (n * (n * n - 1))
    return _round_half_up((rho + 1) / 2 * 100)


def _match_entries(
    entries_a: list[IndexedItem],
    index_b: IdentityIndex,
) -> tuple[list[tuple[IndexedItem, IndexedItem]], list[Item], set[int]]:
    """Pair each A entry with at most one unclaimed B entry.

    Id matches are paired first on both sides; only then are the leftovers
    matched on title, artist and album in A's rank order. Pairs come back in
    A's rank order.
    """
    matched: dict[int, IndexedItem] = {}
    claimed: set[int] = set()

    def current_id(item: Item, exclude: set[int]) -> IndexedItem | None:
        entry = index_b.find_by_id(item, exclude)
        return entry if entry is not None and entry.item.id == item.id else None

    for finder in (current_id, index_b.find_by_key):
        for entry_a in entries_a:
            if id(entry_a) in matched:
                continue
            entry_b = finder(entry_a.item, exclude=claimed)
            if entry_b is not None:
                claimed.add(id(entry_b))
                matched[id(entry_a)] = entry_b

    pairs = [(e, matched[id(e)]) for e in entries_a if id(e) in matched]
    only_in_a = [e.item for e in entries_a if id(e) not in matched]
    return pairs, only_in_a, claimed


def compare_rankings(
    ordering_a: Iterable[Item | Mapping[str, Any]],
    ordering_b: Iterable[Item | Mapping[str, Any]],
) -> DiffResult:
    """Compare two finished orderings.

    Both inputs are in rank order (index 0 = best). Items are matched by the
    identity rule; within one side a later duplicate overwrites the rank of
    an earlier one.

    Args:
        ordering_a: "Your" ordering.
        ordering_b: "Their" ordering.

    Returns:
        DiffResult with per-item ranks on both sides.
    """
    index_a = IdentityIndex.from_ordering(items_from_records(ordering_a))
    index_b = IdentityIndex.from_ordering(items_from_records(ordering_b))

    entries_a = sorted(index_a, key=lambda e: e.rank)
    entries_b = sorted(index_b, key=lambda e: e.rank)

    pairs, only_in_a, claimed = _match_entries(entries_a, index_b)
    only_in_b = [e.item for e in entries_b if id(e) not in claimed]

    shared_rank_b = {
        id(entry_b): position
        for position, (_, entry_b) in enumerate(
            sorted(pairs, key=lambda p: p[1].rank), start=1
        )
    }

    shared_items: list[SharedItemComparison] = []
    for shared_rank_a, (entry_a, entry_b) in enumerate(pairs, start=1):
        position_diff = entry_b.rank - entry_a.rank
        shared_items.append(
            SharedItemComparison(
                item=entry_a.item,
                other_item=entry_b.item,
                rank_a=entry_a.rank,
                rank_b=entry_b.rank,
                shared_rank_a=shared_rank_a,
                shared_rank_b=shared_rank_b[id(entry_b)],
                position_diff=position_diff,
                diff_amount=abs(position_diff),
                direction=Direction.from_ranks(entry_a.rank, entry_b.rank),
            )
        )

    result = DiffResult(
        shared_items=shared_items,
        only_in_a=only_in_a,
        only_in_b=only_in_b,
        similarity=similarity_percent(len(pairs), len(index_a), len(index_b)),
        rank_correlation=rank_correlation(
            [(s.shared_rank_a, s.shared_rank_b) for s in shared_items]
        ),
    )

    logger.info(
        "rankings_compared",
        component="diff",
        size_a=len(index_a),
        size_b=len(index_b),
        shared=len(shared_items),
        similarity=result.similarity,
    )
    return result
