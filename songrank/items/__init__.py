"""Item model, identity rule, and record conversion."""

from songrank.items.identity import (
    IdentityIndex,
    IndexedItem,
    PoolSplit,
    normalize_text,
    same_song,
    split_new_items,
)
from songrank.items.models import Item
from songrank.items.records import (
    RecordError,
    item_from_record,
    item_to_row,
    items_from_records,
    items_to_rows,
)


__all__ = [
    "IdentityIndex",
    "IndexedItem",
    "Item",
    "PoolSplit",
    "RecordError",
    "item_from_record",
    "item_to_row",
    "items_from_records",
    "items_to_rows",
    "normalize_text",
    "same_song",
    "split_new_items",
]
