"""Unit tests for item file loading."""

import json
from pathlib import Path

import pytest

from songrank.items.loader import (
    ItemsValidationError,
    load_items,
    load_ordering,
    parse_items,
)


class TestLoadItems:
    """Tests for load_items function."""

    def test_yaml_list(self, tmp_path: Path) -> None:
        """A YAML list of songs loads in order."""
        path = tmp_path / "songs.yaml"
        path.write_text(
            "- {id: a, title: One, artist: Band}\n- {id: b, title: Two, artist: Band}\n",
            encoding="utf-8",
        )
        items = load_items(path)
        assert [i.id for i in items] == ["a", "b"]

    def test_json_mapping_with_songs(self, tmp_path: Path) -> None:
        """A JSON mapping with a songs list loads."""
        path = tmp_path / "songs.json"
        path.write_text(
            json.dumps({"songs": [{"title": "One", "artist": "Band"}]}),
            encoding="utf-8",
        )
        items = load_items(path)
        assert items[0].id == "one|band"

    def test_empty_file(self, tmp_path: Path) -> None:
        """An empty file is an empty list."""
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")
        assert load_items(path) == []

    def test_missing_file(self, tmp_path: Path) -> None:
        """A missing file is reported as a validation error."""
        with pytest.raises(ItemsValidationError) as exc_info:
            load_items(tmp_path / "absent.yaml")
        assert exc_info.value.errors[0]["type"] == "file_not_found"

    def test_bad_yaml(self, tmp_path: Path) -> None:
        """Unparseable YAML is reported."""
        path = tmp_path / "bad.yaml"
        path.write_text("- {id: a, title: [", encoding="utf-8")
        with pytest.raises(ItemsValidationError) as exc_info:
            load_items(path)
        assert exc_info.value.errors[0]["type"] == "yaml_parse_error"

    def test_scalar_document(self, tmp_path: Path) -> None:
        """A document that is not a list is rejected."""
        path = tmp_path / "scalar.yaml"
        path.write_text("just text\n", encoding="utf-8")
        with pytest.raises(ItemsValidationError) as exc_info:
            load_items(path)
        assert exc_info.value.errors[0]["type"] == "list_type"


class TestParseItems:
    """Tests for parse_items function."""

    def test_collects_all_errors(self) -> None:
        """Every invalid record is reported with its index."""
        with pytest.raises(ItemsValidationError) as exc_info:
            parse_items([{"title": "No artist"}, "not a mapping", {"title": "T", "artist": "A"}])

        locs = [e["loc"] for e in exc_info.value.errors]
        assert locs == ["0", "1"]

    def test_non_string_fields_are_coerced(self) -> None:
        """Scalar YAML values such as numeric titles load as text."""
        items = parse_items([{"id": 42, "title": 1999, "artist": "Prince"}])
        assert items[0].id == "42"
        assert items[0].title == "1999"


class TestLoadOrdering:
    """Tests for load_ordering function."""

    def test_sorts_by_rank(self, tmp_path: Path) -> None:
        """Stored rows are ordered by their rank field."""
        path = tmp_path / "ranking.json"
        path.write_text(
            json.dumps(
                [
                    {"musicbrainz_id": "b", "title": "B", "artist": "X", "rank": 2},
                    {"musicbrainz_id": "a", "title": "A", "artist": "X", "rank": 1},
                ]
            ),
            encoding="utf-8",
        )
        assert [i.id for i in load_ordering(path)] == ["a", "b"]

    def test_keeps_file_order_without_ranks(self, tmp_path: Path) -> None:
        """File order is kept when ranks are missing."""
        path = tmp_path / "ranking.yaml"
        path.write_text(
            "- {id: b, title: B, artist: X}\n- {id: a, title: A, artist: X, rank: 1}\n",
            encoding="utf-8",
        )
        assert [i.id for i in load_ordering(path)] == ["b", "a"]
