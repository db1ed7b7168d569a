"""Binary-insertion ranking driven by human pairwise answers."""

import uuid
from collections.abc import Iterable, Mapping
from typing import Any

import structlog

from songrank.items.identity import split_new_items
from songrank.items.models import Item
from songrank.items.records import item_from_record
from songrank.ranker.constants import MAX_PROBE_ITERATIONS
from songrank.ranker.errors import (
    InvalidSnapshotError,
    RankingCompleteError,
    StaleComparisonError,
)
from songrank.ranker.metrics import RankerMetrics
from songrank.ranker.models import (
    ComparisonAnswer,
    PendingComparison,
    RankerPhase,
    RankingState,
)
from songrank.ranker.state_machine import RankerStateMachine


logger = structlog.get_logger()

ItemLike = Item | Mapping[str, Any]


class Ranker:
    """Ranks items by inserting them one at a time with binary search.

    Each probe of the search is a question put to the caller. The ranker
    holds the ordered list, the pool of unplaced items, and the single
    pending comparison; every answer advances it synchronously.

    Phases:
        BOOTSTRAPPING -> INSERTING -> COMPLETE

    With no existing order, the first two pooled items form a seed pair
    whose answer yields a two-item order. Every later item is searched into
    the order, narrowing ``[low, high]`` around the probed position until
    ``low > high`` and the item is inserted at ``low``. An UNKNOWN answer
    drops the item in flight from the run.
    """

    def __init__(
        self,
        items: Iterable[ItemLike],
        existing_ranked: Iterable[ItemLike] | None = None,
        *,
        session_id: str | None = None,
        max_probe_iterations: int = MAX_PROBE_ITERATIONS,
        metrics: RankerMetrics | None = None,
    ) -> None:
        """Start a ranking run.

        Args:
            items: Items to rank, in pool order.
            existing_ranked: Previously completed order to extend, best first.
            session_id: Identifier used in logs.
            max_probe_iterations: Per-item probe ceiling.
            metrics: Optional metrics instance.
        """
        self._setup(session_id, max_probe_iterations, metrics)

        ranked = [item_from_record(item) for item in existing_ranked or ()]
        split = split_new_items((item_from_record(item) for item in items), ranked)
        dropped = len(split.already_ranked) + len(split.duplicates)
        if dropped:
            self._metrics.record_duplicates(dropped)

        self._ranked = ranked
        self._remaining = split.to_rank
        self._open_next_question()
        self._start_machine(resumed=False)

        self._log.info(
            "ranker_started",
            existing_ranked=len(ranked),
            pool_size=len(self._remaining),
            already_ranked_dropped=len(split.already_ranked),
            duplicates_dropped=len(split.duplicates),
            phase=self.phase.value,
        )

    @classmethod
    def from_state(
        cls,
        state: RankingState | Mapping[str, Any] | str | bytes,
        *,
        session_id: str | None = None,
        max_probe_iterations: int = MAX_PROBE_ITERATIONS,
        metrics: RankerMetrics | None = None,
        record_session: bool = True,
    ) -> "Ranker":
        """Restore a ranker from a snapshot, pending comparison included.

        Args:
            state: Snapshot as a model, a camelCase mapping, or JSON text.
            session_id: Identifier used in logs.
            max_probe_iterations: Per-item probe ceiling.
            metrics: Optional metrics instance.
            record_session: Count this restore as a resumed session. Single
                steps of the pure API pass False.

        Returns:
            Ranker continuing exactly where the snapshot left off.

        Raises:
            InvalidSnapshotError: If the snapshot is inconsistent.
        """
        snapshot = _coerce_state(state)
        ranker = cls.__new__(cls)
        ranker._setup(session_id, max_probe_iterations, metrics)
        ranker._ranked = list(snapshot.ranked)
        ranker._remaining = list(snapshot.remaining)
        ranker._comparison_count = snapshot.comparison_count

        if snapshot.pending_comparison is None:
            ranker._open_next_question()
        else:
            ranker._validate_pending(snapshot.pending_comparison)
            ranker._pending = snapshot.pending_comparison

        ranker._start_machine(resumed=True, record_session=record_session)
        ranker._log.info(
            "ranker_restored",
            ranked=len(ranker._ranked),
            remaining=len(ranker._remaining),
            comparison_count=ranker._comparison_count,
            phase=ranker.phase.value,
        )
        return ranker

    def _setup(
        self,
        session_id: str | None,
        max_probe_iterations: int,
        metrics: RankerMetrics | None,
    ) -> None:
        self._session_id = session_id or uuid.uuid4().hex[:12]
        self._max_probe_iterations = max_probe_iterations
        self._metrics = metrics or RankerMetrics.get_instance()
        self._ranked: list[Item] = []
        self._remaining: list[Item] = []
        self._pending: PendingComparison | None = None
        self._comparison_count = 0
        self._log = logger.bind(
            component="ranker",
            session_id=self._session_id,
        )

    def _start_machine(self, resumed: bool, record_session: bool = True) -> None:
        self._state_machine = RankerStateMachine(
            self._session_id,
            initial_phase=self._current_phase(),
        )
        if not record_session:
            return
        self._metrics.record_session_started(resumed=resumed)
        if self._state_machine.is_terminal and not resumed:
            self._metrics.record_session_completed()

    @property
    def session_id(self) -> str:
        """Get the session identifier."""
        return self._session_id

    @property
    def phase(self) -> RankerPhase:
        """Get the current phase."""
        return self._state_machine.phase

    @property
    def is_complete(self) -> bool:
        """True once every pooled item is placed or dropped."""
        return not self._remaining

    @property
    def pending_comparison(self) -> PendingComparison | None:
        """The question awaiting an answer, if any."""
        return self._pending

    @property
    def state(self) -> RankingState:
        """Snapshot of the run, safe to serialize and restore."""
        return RankingState(
            ranked=list(self._ranked),
            remaining=list(self._remaining),
            pending_comparison=self._pending,
            comparison_count=self._comparison_count,
        )

    def submit_answer(
        self,
        answer: ComparisonAnswer | str,
        pending: PendingComparison | Mapping[str, Any] | None,
    ) -> RankingState:
        """Apply one answer to the pending comparison.

        Args:
            answer: BETTER, WORSE or UNKNOWN (legacy spellings accepted).
            pending: The exact comparison the answer responds to.

        Returns:
            The state after applying the answer.

        Raises:
            RankingCompleteError: If the run is already complete.
            StaleComparisonError: If ``pending`` is not the current question.
        """
        resolved = ComparisonAnswer(answer)
        if self.is_complete:
            self._log.error("answer_after_completion", answer=resolved.value)
            raise RankingCompleteError(self._session_id)

        received = _coerce_pending(pending)
        current = self._pending
        if current is None or received != current:
            self._metrics.record_stale()
            self._log.error(
                "stale_comparison_rejected",
                answer=resolved.value,
                expected_probe=current.probe_position if current else None,
                received_probe=received.probe_position if received else None,
            )
            raise StaleComparisonError(self._session_id, current, received)

        if self.state.is_seed:
            self._resolve_seed(resolved)
        else:
            self._resolve_probe(resolved, current)

        self._advance_phase()
        return self.state

    def _resolve_seed(self, answer: ComparisonAnswer) -> None:
        """Apply an answer to the seed pair."""
        first, second = self._remaining[0], self._remaining[1]

        if answer is ComparisonAnswer.UNKNOWN:
            self._drop_head(stage="seed")
            return

        del self._remaining[:2]
        self._ranked = [first, second] if answer is ComparisonAnswer.BETTER else [second, first]
        self._record_comparison()
        self._metrics.record_placed()
        self._metrics.record_placed()
        self._log.debug(
            "seed_comparison_resolved",
            answer=answer.value,
            leader=self._ranked[0].id,
        )
        self._open_next_question()

    def _resolve_probe(self, answer: ComparisonAnswer, pending: PendingComparison) -> None:
        """Apply an answer to a binary-search probe."""
        if answer is ComparisonAnswer.UNKNOWN:
            self._drop_head(stage="insertion")
            return

        self._record_comparison()
        if answer is ComparisonAnswer.BETTER:
            low, high = pending.low_bound, pending.probe_position - 1
        else:
            low, high = pending.probe_position + 1, pending.high_bound

        if low > high:
            self._place_head(low)
            return

        if pending.iteration >= self._max_probe_iterations:
            self._metrics.record_probe_ceiling()
            self._log.warning(
                "probe_ceiling_reached",
                item_id=pending.new_item.id,
                iteration=pending.iteration,
                low=low,
                high=high,
            )
            self._place_head(low)
            return

        self._pending = self._probe(pending.new_item, low, high, pending.iteration + 1)

    def _open_next_question(self) -> None:
        """Pose the next question for the head of the pool, if any."""
        self._pending = None
        if not self._remaining:
            return

        if not self._ranked:
            if len(self._remaining) == 1:
                self._ranked = [self._remaining.pop(0)]
                self._metrics.record_placed()
                self._log.debug("single_item_ranked", item_id=self._ranked[0].id)
                return
            self._pending = PendingComparison(
                new_item=self._remaining[0],
                probe_item=self._remaining[1],
                probe_position=0,
                low_bound=0,
                high_bound=0,
            )
            return

        self._pending = self._probe(self._remaining[0], 0, len(self._ranked) - 1, 1)

    def _probe(self, item: Item, low: int, high: int, iteration: int) -> PendingComparison:
        mid = (low + high) // 2
        return PendingComparison(
            new_item=item,
            probe_item=self._ranked[mid],
            probe_position=mid,
            low_bound=low,
            high_bound=high,
            iteration=iteration,
        )

    def _place_head(self, index: int) -> None:
        item = self._remaining.pop(0)
        self._ranked.insert(index, item)
        self._metrics.record_placed()
        self._log.debug("item_placed", item_id=item.id, position=index)
        self._open_next_question()

    def _drop_head(self, stage: str) -> None:
        item = self._remaining.pop(0)
        self._metrics.record_unknown()
        self._log.debug("item_skipped", item_id=item.id, stage=stage)
        self._open_next_question()

    def _record_comparison(self) -> None:
        self._comparison_count += 1
        self._metrics.record_comparison()

    def _current_phase(self) -> RankerPhase:
        return self.state.phase

    def _advance_phase(self) -> None:
        target = self._current_phase()
        if target == self._state_machine.phase:
            return
        self._state_machine.advance_to(target)
        if target == RankerPhase.COMPLETE:
            self._metrics.record_session_completed()
            self._log.info(
                "ranker_complete",
                ranked=len(self._ranked),
                comparison_count=self._comparison_count,
            )

    def _validate_pending(self, pending: PendingComparison) -> None:
        """Check that a restored comparison matches the restored lists.

        Raises:
            InvalidSnapshotError: If the comparison cannot belong to them.
        """
        if not self._remaining or self._remaining[0] != pending.new_item:
            raise InvalidSnapshotError("pending item is not at the head of remaining")

        if not self._ranked:
            if len(self._remaining) < 2 or self._remaining[1] != pending.probe_item:
                raise InvalidSnapshotError("seed comparison does not match remaining")
            return

        if not (
            pending.low_bound <= pending.probe_position <= pending.high_bound < len(self._ranked)
        ):
            raise InvalidSnapshotError(
                f"probe {pending.probe_position} outside "
                f"[{pending.low_bound}, {pending.high_bound}] of {len(self._ranked)} ranked"
            )
        if self._ranked[pending.probe_position] != pending.probe_item:
            raise InvalidSnapshotError("probe item does not match ranked position")


def _coerce_state(state: RankingState | Mapping[str, Any] | str | bytes) -> RankingState:
    if isinstance(state, RankingState):
        return state
    if isinstance(state, str | bytes):
        return RankingState.from_json(state)
    return RankingState.model_validate(state)


def _coerce_pending(
    pending: PendingComparison | Mapping[str, Any] | None,
) -> PendingComparison | None:
    if pending is None or isinstance(pending, PendingComparison):
        return pending
    return PendingComparison.model_validate(pending)


def start_ranking(
    items: Iterable[ItemLike],
    existing_ranked: Iterable[ItemLike] | None = None,
    *,
    max_probe_iterations: int = MAX_PROBE_ITERATIONS,
) -> RankingState:
    """Pure function API for starting a ranking run.

    Args:
        items: Items to rank.
        existing_ranked: Previously completed order to extend.
        max_probe_iterations: Per-item probe ceiling.

    Returns:
        Initial state, with the first question pending if any.
    """
    ranker = Ranker(
        items,
        existing_ranked,
        session_id="pure",
        max_probe_iterations=max_probe_iterations,
    )
    return ranker.state


def submit_answer(
    state: RankingState | Mapping[str, Any] | str | bytes,
    answer: ComparisonAnswer | str,
    pending: PendingComparison | Mapping[str, Any] | None,
    *,
    max_probe_iterations: int = MAX_PROBE_ITERATIONS,
) -> RankingState:
    """Pure function API for one ranking step.

    Args:
        state: Current snapshot.
        answer: Answer to the pending comparison.
        pending: The exact comparison being answered.
        max_probe_iterations: Per-item probe ceiling.

    Returns:
        Next snapshot. ``state`` is not modified.
    """
    ranker = Ranker.from_state(
        state,
        session_id="pure",
        max_probe_iterations=max_probe_iterations,
        record_session=False,
    )
    return ranker.submit_answer(answer, pending)
