"""Data model for a ranked item."""

from typing import Annotated

from pydantic import Field

from songrank.data_model.base import CamelModel


class Item(CamelModel):
    """An opaque ranked entity (a song).

    Attributes:
        id: Stable identifier, unique within one ranking run. Catalog id when
            one exists, otherwise a ``"<title>|<artist>[|<album>]"`` composite.
        title: Display title, used for duplicate matching.
        artist: Display artist, used for duplicate matching.
        album_title: Album title, only used to disambiguate duplicates.
        cover_url: Cover art URL, carried through unchanged.
        album_id: Catalog album id, carried through unchanged.
    """

    id: Annotated[str, Field(min_length=1)]
    title: str
    artist: str
    album_title: str | None = None
    cover_url: str | None = None
    album_id: str | None = None

    @property
    def label(self) -> str:
        """Human-readable ``title - artist`` label."""
        return f"{self.title} - {self.artist}"
