"""Data models for the merge/resume layer."""

from typing import Any

from pydantic import Field

from songrank.data_model.base import CamelModel
from songrank.items.models import Item
from songrank.ranker.models import RankingState


class Partition(CamelModel):
    """Newly selected items split against an existing order.

    Attributes:
        to_rank: Items fed to the engine, in selection order.
        already_ranked: Items dropped because the order already holds them.
        duplicates: Items dropped because they repeat an earlier selection.
    """

    to_rank: list[Item] = Field(default_factory=list)
    already_ranked: list[Item] = Field(default_factory=list)
    duplicates: list[Item] = Field(default_factory=list)


class DraftEnvelope(CamelModel):
    """Stored draft row payload.

    ``songs`` and ``existing_ranked_songs`` hold raw records in whichever
    naming convention the client used when the draft was saved.

    Attributes:
        state: Engine snapshot at save time, if one was captured.
        songs: Newly selected songs of the session.
        existing_ranked_songs: The finished order being extended, if any.
    """

    state: RankingState | None = None
    songs: list[dict[str, Any]] = Field(default_factory=list)
    existing_ranked_songs: list[dict[str, Any]] = Field(default_factory=list)
