"""
Spin phase state machine for the selection wheel.

Phases:
    IDLE: Wheel at rest, accepts spins
    SPINNING: Spin animation in flight, resolving against a snapshot
"""

from enum import Enum, auto
from typing import Callable
import logging

logger = logging.getLogger(__name__)


class SpinPhase(Enum):
    """Wheel animation phases."""
    IDLE = auto()
    SPINNING = auto()


PhaseListener = Callable[[SpinPhase, SpinPhase], None]


class PhaseMachine:
    """
    Holds the wheel's current phase and guards transitions.

    Exactly one phase holds at any time. Listeners are notified after
    every successful transition; a failing listener is logged and does
    not block the others.
    """

    VALID_TRANSITIONS: list[tuple[SpinPhase, SpinPhase]] = [
        (SpinPhase.IDLE, SpinPhase.SPINNING),    # Spin started
        (SpinPhase.SPINNING, SpinPhase.IDLE),    # Resolved or cancelled
    ]

    def __init__(self, initial_phase: SpinPhase = SpinPhase.IDLE) -> None:
        self._phase = initial_phase
        self._listeners: list[PhaseListener] = []
        self._valid_transitions = set(self.VALID_TRANSITIONS)
        logger.debug(f"PhaseMachine initialized with phase: {initial_phase.name}")

    @property
    def phase(self) -> SpinPhase:
        """Get current phase."""
        return self._phase

    @property
    def is_idle(self) -> bool:
        return self._phase == SpinPhase.IDLE

    @property
    def is_spinning(self) -> bool:
        return self._phase == SpinPhase.SPINNING

    def can_transition(self, to_phase: SpinPhase) -> bool:
        """Check if transition to given phase is valid."""
        return (self._phase, to_phase) in self._valid_transitions

    def transition(self, to_phase: SpinPhase) -> bool:
        """
        Attempt to move to a new phase.

        Args:
            to_phase: Target phase

        Returns:
            True if transition successful, False otherwise
        """
        if not self.can_transition(to_phase):
            logger.debug(
                f"Ignored transition: {self._phase.name} -> {to_phase.name}"
            )
            return False

        old_phase = self._phase
        self._phase = to_phase
        logger.debug(f"Phase transition: {old_phase.name} -> {to_phase.name}")

        for listener in list(self._listeners):
            try:
                listener(old_phase, to_phase)
            except Exception as e:
                logger.error(f"Error in phase listener: {e}")

        return True

    def add_listener(self, callback: PhaseListener) -> None:
        """Add a phase change listener."""
        self._listeners.append(callback)

    def remove_listener(self, callback: PhaseListener) -> None:
        """Remove a phase change listener."""
        if callback in self._listeners:
            self._listeners.remove(callback)
