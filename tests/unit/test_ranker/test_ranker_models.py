"""Unit tests for ranker data models."""

import json

import pytest
from pydantic import ValidationError

from songrank.ranker.models import (
    ComparisonAnswer,
    PendingComparison,
    RankerPhase,
    RankingState,
)
from tests.helpers.songs import make_item, make_items


class TestComparisonAnswer:
    """Tests for ComparisonAnswer enum."""

    def test_values(self) -> None:
        """Answers serialize as lowercase words."""
        assert ComparisonAnswer.BETTER.value == "better"
        assert ComparisonAnswer.WORSE.value == "worse"
        assert ComparisonAnswer.UNKNOWN.value == "unknown"

    def test_case_insensitive(self) -> None:
        """Mixed case spellings resolve."""
        assert ComparisonAnswer("Better") is ComparisonAnswer.BETTER

    def test_legacy_alias(self) -> None:
        """Older drafts used dont_know."""
        assert ComparisonAnswer("dont_know") is ComparisonAnswer.UNKNOWN

    def test_invalid_value(self) -> None:
        """Unknown spellings are rejected."""
        with pytest.raises(ValueError):
            ComparisonAnswer("maybe")


class TestRankingState:
    """Tests for RankingState model."""

    def test_empty_state_is_complete(self) -> None:
        """No items at all is trivially complete."""
        state = RankingState()
        assert state.is_complete
        assert state.phase == RankerPhase.COMPLETE
        assert state.progress == 1.0

    def test_phase_bootstrapping(self) -> None:
        """Remaining items with nothing ranked is bootstrapping."""
        a, b = make_items("a", "b")
        pending = PendingComparison(
            new_item=a, probe_item=b, probe_position=0, low_bound=0, high_bound=0
        )
        state = RankingState(remaining=[a, b], pending_comparison=pending)
        assert state.phase == RankerPhase.BOOTSTRAPPING
        assert state.is_seed
        assert state.estimated_remaining == 0

    def test_estimated_remaining(self) -> None:
        """Each remaining item costs about log2(len(ranked) + 1) comparisons."""
        state = RankingState(
            ranked=make_items("a", "b", "c"),
            remaining=make_items("d", "e"),
            comparison_count=3,
        )
        assert state.phase == RankerPhase.INSERTING
        assert state.estimated_remaining == 4
        assert state.progress == pytest.approx(3 / 7)

    def test_json_uses_camel_case_keys(self) -> None:
        """The snapshot serializes with the draft contract keys."""
        state = RankingState(ranked=[make_item("a", album_title="LP")], comparison_count=1)
        data = json.loads(state.to_json())
        assert set(data) == {"ranked", "remaining", "pendingComparison", "comparisonCount"}
        assert data["ranked"][0]["albumTitle"] == "LP"

    def test_json_round_trip(self) -> None:
        """A serialized snapshot parses back to an equal value."""
        a, b = make_items("a", "b")
        pending = PendingComparison(
            new_item=b, probe_item=a, probe_position=0, low_bound=0, high_bound=0, iteration=1
        )
        state = RankingState(ranked=[a], remaining=[b], pending_comparison=pending)
        assert RankingState.from_json(state.to_json()) == state

    def test_accepts_snake_case_input(self) -> None:
        """Field names are accepted as well as aliases."""
        state = RankingState.model_validate({"comparison_count": 2})
        assert state.comparison_count == 2

    def test_rejects_negative_count(self) -> None:
        """Counts cannot be negative."""
        with pytest.raises(ValidationError):
            RankingState(comparison_count=-1)

    def test_rejects_unknown_fields(self) -> None:
        """Snapshots are strict."""
        with pytest.raises(ValidationError):
            RankingState.model_validate({"ranked": [], "isComplete": True})
