"""Conversion between persisted song records and the canonical Item shape.

Freshly fetched catalog items use camelCase keys (``coverArtUrl``,
``albumTitle``) while stored ranking rows use snake_case keys
(``cover_art_url``, ``album_title``, ``musicbrainz_id``). Both shapes, and
drafts that mix them, map onto a single :class:`Item`.
"""

from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from songrank.items.identity import normalize_text
from songrank.items.models import Item


ID_KEYS = ("id", "musicbrainz_id", "musicbrainzId", "spotify_id", "spotifyId")
ALBUM_TITLE_KEYS = ("album_title", "albumTitle")
COVER_KEYS = ("cover_art_url", "coverArtUrl", "coverUrl", "cover_url", "albumCoverArt")
ALBUM_ID_KEYS = ("album_musicbrainz_id", "albumId", "album_id")


class RecordError(ValueError):
    """Raised when a record cannot be converted into an Item."""

    def __init__(self, message: str, record: Mapping[str, Any]) -> None:
        """Initialize the error.

        Args:
            message: Description of the problem.
            record: The offending record.
        """
        self.record = dict(record)
        super().__init__(message)


def _first_present(record: Mapping[str, Any], keys: Sequence[str]) -> str | None:
    """Return the first non-empty string value among ``keys``."""
    for key in keys:
        value = record.get(key)
        if value is None:
            continue
        text = str(value).strip()
        if text:
            return text
    return None


def fallback_id(title: str, artist: str, album_title: str | None = None) -> str:
    """Build the composite id used when a record has no catalog id.

    The album is part of the id when known, so that same-named songs on
    different albums stay distinct.

    Args:
        title: Song title.
        artist: Song artist.
        album_title: Album title, if any.

    Returns:
        ``"<title>|<artist>"`` or ``"<title>|<artist>|<album>"``, normalized.
    """
    parts = [normalize_text(title), normalize_text(artist)]
    if normalize_text(album_title):
        parts.append(normalize_text(album_title))
    return "|".join(parts)


def item_from_record(record: Mapping[str, Any] | Item) -> Item:
    """Convert a catalog item or stored ranking row into an Item.

    Args:
        record: Mapping in either naming convention, or an Item.

    Returns:
        Canonical Item.

    Raises:
        RecordError: If the record has no title or no artist.
    """
    if isinstance(record, Item):
        return record

    title = _first_present(record, ("title", "name"))
    artist = _first_present(record, ("artist", "artist_name", "artistName"))
    if title is None or artist is None:
        raise RecordError("record requires both a title and an artist", record)

    album_title = _first_present(record, ALBUM_TITLE_KEYS)
    return Item(
        id=_first_present(record, ID_KEYS) or fallback_id(title, artist, album_title),
        title=title,
        artist=artist,
        album_title=album_title,
        cover_url=_first_present(record, COVER_KEYS),
        album_id=_first_present(record, ALBUM_ID_KEYS),
    )


def items_from_records(records: Iterable[Mapping[str, Any] | Item]) -> list[Item]:
    """Convert records in order.

    Args:
        records: Records in either naming convention.

    Returns:
        Items in the same order.
    """
    return [item_from_record(record) for record in records]


def item_to_row(item: Item, rank: int) -> dict[str, Any]:
    """Convert an item into a stored ranking row.

    Args:
        item: Ranked item.
        rank: 1-based rank.

    Returns:
        Row with snake_case keys as stored by the persistence layer.
    """
    return {
        "musicbrainz_id": item.id,
        "title": item.title,
        "artist": item.artist,
        "cover_art_url": item.cover_url,
        "album_title": item.album_title,
        "album_musicbrainz_id": item.album_id,
        "rank": rank,
    }


def items_to_rows(
    ranked: Sequence[Item],
    existing_rows: Iterable[Mapping[str, Any]] = (),
) -> list[dict[str, Any]]:
    """Convert a finished ordering into stored rows numbered from 1.

    When an item has no album id, the ``album_musicbrainz_id`` of a stored
    row with the same normalized title and artist is carried over.

    Args:
        ranked: Items best first.
        existing_rows: Rows of the ranking being extended, if any.

    Returns:
        Stored rows in rank order.
    """
    album_ids: dict[tuple[str, str], str] = {}
    for row in existing_rows:
        album_id = row.get("album_musicbrainz_id")
        if album_id:
            key = (normalize_text(row.get("title")), normalize_text(row.get("artist")))
            album_ids.setdefault(key, album_id)

    rows: list[dict[str, Any]] = []
    for rank, item in enumerate(ranked, start=1):
        row = item_to_row(item, rank)
        if not row["album_musicbrainz_id"]:
            key = (normalize_text(item.title), normalize_text(item.artist))
            row["album_musicbrainz_id"] = album_ids.get(key)
        rows.append(row)
    return rows
