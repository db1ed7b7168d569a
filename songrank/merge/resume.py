"""Seeding the ranker from a finished order or a saved draft."""

from collections.abc import Iterable, Mapping
from typing import Any

import structlog

from songrank.items.identity import split_new_items
from songrank.items.models import Item
from songrank.items.records import items_from_records
from songrank.merge.models import DraftEnvelope, Partition
from songrank.ranker.constants import MAX_PROBE_ITERATIONS
from songrank.ranker.models import RankingState
from songrank.ranker.ranker import Ranker


logger = structlog.get_logger()

RecordLike = Item | Mapping[str, Any]


def partition_new_items(
    new_items: Iterable[RecordLike],
    ranked: Iterable[RecordLike],
) -> Partition:
    """Split newly selected items into those to rank and those already placed.

    Matching follows the identity rule: same id, or the same trimmed,
    case-insensitive title and artist with album only compared when both
    sides name one.

    Args:
        new_items: Newly selected items or records.
        ranked: The finished order being extended.

    Returns:
        Partition of the new items.
    """
    split = split_new_items(items_from_records(new_items), items_from_records(ranked))
    partition = Partition(
        to_rank=split.to_rank,
        already_ranked=split.already_ranked,
        duplicates=split.duplicates,
    )
    logger.info(
        "extension_partitioned",
        component="merge",
        to_rank=len(partition.to_rank),
        already_ranked=len(partition.already_ranked),
        duplicates=len(partition.duplicates),
    )
    return partition


def extend_ranking(
    ranked: Iterable[RecordLike],
    new_items: Iterable[RecordLike],
    *,
    session_id: str | None = None,
    max_probe_iterations: int = MAX_PROBE_ITERATIONS,
) -> Ranker:
    """Start a run that inserts new items into a finished order.

    Args:
        ranked: The finished order, best first.
        new_items: Newly selected items or records.
        session_id: Identifier used in logs.
        max_probe_iterations: Per-item probe ceiling.

    Returns:
        Ranker whose first question probes the existing order.
    """
    existing = items_from_records(ranked)
    partition = partition_new_items(new_items, existing)
    return Ranker(
        partition.to_rank,
        existing,
        session_id=session_id,
        max_probe_iterations=max_probe_iterations,
    )


def resume_draft(
    snapshot: RankingState | Mapping[str, Any] | str | bytes,
    *,
    session_id: str | None = None,
    max_probe_iterations: int = MAX_PROBE_ITERATIONS,
) -> Ranker:
    """Resume a saved draft exactly where it stopped.

    The ranked and remaining lists and the pending comparison are restored
    as stored rather than re-derived, so no answered question is asked again.

    Args:
        snapshot: Stored draft snapshot.
        session_id: Identifier used in logs.
        max_probe_iterations: Per-item probe ceiling.

    Returns:
        Restored ranker.

    Raises:
        InvalidSnapshotError: If the snapshot is inconsistent.
    """
    ranker = Ranker.from_state(
        snapshot,
        session_id=session_id,
        max_probe_iterations=max_probe_iterations,
    )
    logger.info(
        "draft_resumed",
        component="merge",
        session_id=ranker.session_id,
        phase=ranker.phase.value,
    )
    return ranker


def resume_from_envelope(
    envelope: DraftEnvelope | Mapping[str, Any],
    *,
    session_id: str | None = None,
    max_probe_iterations: int = MAX_PROBE_ITERATIONS,
) -> Ranker:
    """Resume from a stored draft row payload.

    Uses the captured engine state when present. Without one, the session is
    restarted by extending ``existing_ranked_songs`` with ``songs``.

    Args:
        envelope: Draft payload as a model or camelCase mapping.
        session_id: Identifier used in logs.
        max_probe_iterations: Per-item probe ceiling.

    Returns:
        Ranker for the draft.
    """
    draft = (
        envelope
        if isinstance(envelope, DraftEnvelope)
        else DraftEnvelope.model_validate(envelope)
    )
    if draft.state is not None:
        return resume_draft(
            draft.state,
            session_id=session_id,
            max_probe_iterations=max_probe_iterations,
        )

    logger.info(
        "draft_restarted_without_state",
        component="merge",
        songs=len(draft.songs),
        existing_ranked=len(draft.existing_ranked_songs),
    )
    return extend_ranking(
        draft.existing_ranked_songs,
        draft.songs,
        session_id=session_id,
        max_probe_iterations=max_probe_iterations,
    )
