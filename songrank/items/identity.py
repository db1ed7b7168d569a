"""Identity rule for deciding whether two items are the same song.

Two items are the same song iff their ids match, or their normalized
``(title, artist)`` pairs match and, when both sides carry an album title,
the normalized album titles match too. A missing album on either side is no
constraint.
"""

import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from songrank.items.models import Item


_WHITESPACE = re.compile(r"\s+")


def normalize_text(value: str | None) -> str:
    """Lowercase, trim, and collapse internal whitespace.

    Args:
        value: Raw display string.

    Returns:
        Normalized string, empty for None.
    """
    return _WHITESPACE.sub(" ", (value or "").lower()).strip()


def title_artist_key(item: Item) -> tuple[str, str]:
    """Return the normalized ``(title, artist)`` key of an item."""
    return normalize_text(item.title), normalize_text(item.artist)


def albums_compatible(a: Item, b: Item) -> bool:
    """Check the album constraint of the identity rule.

    Args:
        a: First item.
        b: Second item.

    Returns:
        False only when both items name an album and the names differ.
    """
    album_a = normalize_text(a.album_title)
    album_b = normalize_text(b.album_title)
    if not album_a or not album_b:
        return True
    return album_a == album_b


def same_song(a: Item, b: Item) -> bool:
    """Apply the identity rule to two items.

    Args:
        a: First item.
        b: Second item.

    Returns:
        True if both items represent the same underlying song.
    """
    if a.id == b.id:
        return True
    return title_artist_key(a) == title_artist_key(b) and albums_compatible(a, b)


@dataclass
class IndexedItem:
    """An item together with its 1-based rank in one ordering.

    Attributes:
        item: The indexed item.
        rank: 1-based position in the ordering.
    """

    item: Item
    rank: int


class IdentityIndex:
    """Index of one ordering keyed by the identity rule.

    Lookups go through the item id first and fall back to the normalized
    ``(title, artist)`` key filtered by the album constraint. Adding an item
    that matches an existing entry overwrites that entry's item and rank, so
    the later duplicate wins.
    """

    def __init__(self) -> None:
        """Initialize an empty index."""
        self._entries: list[IndexedItem] = []
        self._by_id: dict[str, IndexedItem] = {}
        self._by_key: dict[tuple[str, str], list[IndexedItem]] = {}

    @classmethod
    def from_ordering(cls, ordering: Iterable[Item]) -> "IdentityIndex":
        """Build an index from an ordering, best first.

        Args:
            ordering: Items in rank order (index 0 = best).

        Returns:
            Populated index.
        """
        index = cls()
        for position, item in enumerate(ordering, start=1):
            index.add(item, position)
        return index

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[IndexedItem]:
        return iter(self._entries)

    def add(self, item: Item, rank: int) -> IndexedItem:
        """Add an item, overwriting a matching entry if one exists.

        Args:
            item: Item to index.
            rank: 1-based rank of the item.

        Returns:
            The entry now holding the item.
        """
        entry = self.find(item)
        if entry is None:
            entry = IndexedItem(item=item, rank=rank)
            self._entries.append(entry)
        else:
            entry.item = item
            entry.rank = rank

        self._by_id[item.id] = entry
        bucket = self._by_key.setdefault(title_artist_key(item), [])
        if all(existing is not entry for existing in bucket):
            bucket.append(entry)
        return entry

    def find(
        self,
        item: Item,
        exclude: set[int] | None = None,
    ) -> IndexedItem | None:
        """Find the entry that is the same song as ``item``.

        Args:
            item: Item to look up.
            exclude: ``id()`` values of entries that may not be returned.

        Returns:
            Matching entry or None.
        """
        return self.find_by_id(item, exclude) or self.find_by_key(item, exclude)

    def find_by_id(
        self,
        item: Item,
        exclude: set[int] | None = None,
    ) -> IndexedItem | None:
        """Find the entry sharing the id of ``item``."""
        entry = self._by_id.get(item.id)
        if entry is None or id(entry) in (exclude or ()):
            return None
        return entry

    def find_by_key(
        self,
        item: Item,
        exclude: set[int] | None = None,
    ) -> IndexedItem | None:
        """Find the first entry matching ``item`` on title, artist and album."""
        skip = exclude or set()
        for entry in self._by_key.get(title_artist_key(item), []):
            if id(entry) in skip:
                continue
            if albums_compatible(entry.item, item):
                return entry
        return None

    def __contains__(self, item: object) -> bool:
        return isinstance(item, Item) and self.find(item) is not None


@dataclass
class PoolSplit:
    """Result of splitting new items against an existing order.

    Attributes:
        to_rank: Items still to be ranked, first occurrence order.
        already_ranked: New items matching an item of the existing order.
        duplicates: New items matching an earlier new item.
    """

    to_rank: list[Item]
    already_ranked: list[Item]
    duplicates: list[Item]


def split_new_items(new_items: Iterable[Item], ranked: Iterable[Item]) -> PoolSplit:
    """Split new items into those to rank and those already placed.

    Args:
        new_items: Newly selected items, in selection order.
        ranked: Existing order the new items extend.

    Returns:
        PoolSplit with every new item in exactly one list.
    """
    ranked_index = IdentityIndex.from_ordering(ranked)
    pool_index = IdentityIndex()
    split = PoolSplit(to_rank=[], already_ranked=[], duplicates=[])

    for item in new_items:
        if item in ranked_index:
            split.already_ranked.append(item)
        elif item in pool_index:
            split.duplicates.append(item)
        else:
            pool_index.add(item, len(split.to_rank) + 1)
            split.to_rank.append(item)

    return split
