"""State machine for ranking run phases."""

import structlog

from songrank.ranker.errors import RankingError
from songrank.ranker.models import RankerPhase


logger = structlog.get_logger()


# Valid phase transitions
_VALID_TRANSITIONS: dict[RankerPhase, set[RankerPhase]] = {
    RankerPhase.BOOTSTRAPPING: {RankerPhase.INSERTING, RankerPhase.COMPLETE},
    RankerPhase.INSERTING: {RankerPhase.COMPLETE},
    RankerPhase.COMPLETE: set(),  # Terminal state
}


class RankerPhaseTransitionError(RankingError):
    """Raised when an illegal phase transition is attempted."""

    def __init__(
        self,
        session_id: str,
        from_phase: RankerPhase,
        to_phase: RankerPhase,
    ) -> None:
        """Initialize the transition error.

        Args:
            session_id: Identifier of the ranking session.
            from_phase: Current phase.
            to_phase: Attempted target phase.
        """
        self.session_id = session_id
        self.from_phase = from_phase
        self.to_phase = to_phase
        super().__init__(
            f"Illegal ranker phase transition for session '{session_id}': "
            f"{from_phase.value} -> {to_phase.value}"
        )


class RankerStateMachine:
    """Manages phase transitions for a ranking run.

    Enforces valid transitions and logs all phase changes.
    """

    def __init__(
        self,
        session_id: str,
        initial_phase: RankerPhase = RankerPhase.BOOTSTRAPPING,
    ) -> None:
        """Initialize the state machine.

        Args:
            session_id: Identifier for the ranking session.
            initial_phase: Starting phase.
        """
        self._session_id = session_id
        self._phase = initial_phase
        self._log = logger.bind(
            component="ranker",
            session_id=session_id,
        )

    @property
    def session_id(self) -> str:
        """Get the session identifier."""
        return self._session_id

    @property
    def phase(self) -> RankerPhase:
        """Get the current phase."""
        return self._phase

    @property
    def is_terminal(self) -> bool:
        """Check if current phase is terminal."""
        return self._phase == RankerPhase.COMPLETE

    def can_transition_to(self, target: RankerPhase) -> bool:
        """Check if a transition to the target phase is valid.

        Args:
            target: The target phase.

        Returns:
            True if the transition is valid.
        """
        return target in _VALID_TRANSITIONS.get(self._phase, set())

    def transition_to(self, target: RankerPhase) -> None:
        """Transition to a new phase.

        Args:
            target: The target phase.

        Raises:
            RankerPhaseTransitionError: If the transition is invalid.
        """
        if not self.can_transition_to(target):
            self._log.error(
                "illegal_ranker_phase_transition",
                from_phase=self._phase.value,
                to_phase=target.value,
            )
            raise RankerPhaseTransitionError(
                session_id=self._session_id,
                from_phase=self._phase,
                to_phase=target,
            )

        old_phase = self._phase
        self._phase = target

        self._log.info(
            "ranker_phase_transition",
            from_phase=old_phase.value,
            to_phase=target.value,
        )

    def advance_to(self, target: RankerPhase) -> None:
        """Move to ``target`` unless already there.

        Args:
            target: The phase the run is now in.
        """
        if target != self._phase:
            self.transition_to(target)

