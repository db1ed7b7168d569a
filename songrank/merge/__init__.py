"""Extending finished rankings and resuming drafts."""

from songrank.merge.models import DraftEnvelope, Partition
from songrank.merge.resume import (
    extend_ranking,
    partition_new_items,
    resume_draft,
    resume_from_envelope,
)


__all__ = [
    "DraftEnvelope",
    "Partition",
    "extend_ranking",
    "partition_new_items",
    "resume_draft",
    "resume_from_envelope",
]
