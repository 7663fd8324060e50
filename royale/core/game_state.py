"""
Match lifecycle states and the state holder.

State order:
WAITING -> STARTING -> ACTIVE -> DEATHMATCH -> ENDING
"""

from enum import Enum
from typing import List, Optional, Tuple

from .clock import SystemClock
from .exceptions import InvalidStateError


class GameState(Enum):
    """Current state of a match."""
    WAITING = "waiting"        # Lobby open, participants joining
    STARTING = "starting"      # Countdown running, lobby closed
    ACTIVE = "active"          # Zone shrinking, normal gameplay
    DEATHMATCH = "deathmatch"  # Zone collapsed (or time limit), forced combat
    ENDING = "ending"          # Winner decided, results being published

    @property
    def ordinal(self) -> int:
        """Position of the state in the lifecycle order."""
        return _ORDER.index(self)

    @property
    def can_join(self) -> bool:
        """Check if participants can join."""
        return self is GameState.WAITING

    @property
    def is_in_progress(self) -> bool:
        """Check if the match is in active gameplay."""
        return self in (GameState.ACTIVE, GameState.DEATHMATCH)

    @property
    def has_started(self) -> bool:
        """Check if the match has left the lobby and countdown."""
        return self in (GameState.ACTIVE, GameState.DEATHMATCH, GameState.ENDING)

    def __lt__(self, other):
        if not isinstance(other, GameState):
            return NotImplemented
        return self.ordinal < other.ordinal

    def __le__(self, other):
        if not isinstance(other, GameState):
            return NotImplemented
        return self.ordinal <= other.ordinal

    def __gt__(self, other):
        if not isinstance(other, GameState):
            return NotImplemented
        return self.ordinal > other.ordinal

    def __ge__(self, other):
        if not isinstance(other, GameState):
            return NotImplemented
        return self.ordinal >= other.ordinal


_ORDER = list(GameState)


class GameStateMachine:
    """
    Passive holder of the match state.

    The machine does not check transition order; deciding whether a trigger
    is valid belongs to the MatchDirector. Admin tooling may set any state.
    """

    def __init__(self, initial: GameState = GameState.WAITING, clock=None):
        self._validate(initial)
        self._state = initial
        self.clock = clock or SystemClock()
        self.history: List[Tuple[GameState, GameState, float]] = []

    @staticmethod
    def _validate(state: Optional[GameState]) -> None:
        if not isinstance(state, GameState):
            raise InvalidStateError(state)

    @property
    def state(self) -> GameState:
        return self._state

    def get_state(self) -> GameState:
        return self._state

    def set_state(self, new_state: GameState) -> GameState:
        """Set the state unconditionally and return the previous one."""
        self._validate(new_state)
        previous = self._state
        self._state = new_state
        self.history.append((previous, new_state, self.clock.now()))
        return previous

    def is_forward(self, new_state: GameState) -> bool:
        """Check if `new_state` comes later in the lifecycle than the current state."""
        self._validate(new_state)
        return new_state.ordinal > self._state.ordinal
