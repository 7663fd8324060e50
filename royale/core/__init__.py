"""
Core match engine components: lifecycle state, participants, clocks and scheduling.
"""

from .exceptions import MatchEngineError, InvalidStateError, ConfigurationError
from .game_state import GameState, GameStateMachine
from .participant import Participant, ParticipantStatus, Position
from .provider import ParticipantProvider, LocalParticipantProvider
from .clock import SystemClock, ManualClock
from .scheduler import TickScheduler, TICKS_PER_SECOND
from .match import Match

__all__ = [
    'MatchEngineError',
    'InvalidStateError',
    'ConfigurationError',
    'GameState',
    'GameStateMachine',
    'Participant',
    'ParticipantStatus',
    'Position',
    'ParticipantProvider',
    'LocalParticipantProvider',
    'SystemClock',
    'ManualClock',
    'TickScheduler',
    'TICKS_PER_SECOND',
    'Match',
]
