"""
Match manager: registry of running matches and participant membership.

Each participant belongs to at most one match. Finished matches and lobbies
that stayed empty are removed by cleanup().
"""

import logging
from threading import RLock
from typing import TYPE_CHECKING, Dict, List, Optional

from ..config.game_config import GameConfig, default_config
from .clock import SystemClock
from .director import MatchDirector
from .game_state import GameState
from .participant import Position

if TYPE_CHECKING:
    from ..web.event_emitter import EventEmitter

logger = logging.getLogger(__name__)

# Seconds an ENDING match is kept for result display
ENDED_RETENTION = 15.0
# Seconds an empty lobby is kept before removal
EMPTY_LOBBY_TIMEOUT = 300.0
# Seconds between cleanup passes run from tick()
CLEANUP_INTERVAL = 5.0


class MatchManager:
    """Creates, tracks and removes MatchDirectors."""

    def __init__(self,
                 clock=None,
                 event_emitter: Optional['EventEmitter'] = None,
                 ended_retention: float = ENDED_RETENTION,
                 empty_lobby_timeout: float = EMPTY_LOBBY_TIMEOUT,
                 cleanup_interval: float = CLEANUP_INTERVAL):
        self.clock = clock or SystemClock()
        self.event_emitter = event_emitter
        self.ended_retention = ended_retention
        self.empty_lobby_timeout = empty_lobby_timeout
        self.cleanup_interval = cleanup_interval

        self._matches: Dict[str, MatchDirector] = {}
        self._participant_matches: Dict[str, str] = {}
        self._counter = 0
        self._last_cleanup = self.clock.now()
        self._lock = RLock()

    # ===== MATCHES =====

    def create_match(self, config: Optional[GameConfig] = None) -> MatchDirector:
        """Create a match in WAITING with its own scheduler."""
        config = config or default_config
        with self._lock:
            self._counter += 1
            match_id = f"match-{self._counter}"
            director = MatchDirector(config, match_id=match_id, clock=self.clock,
                                     event_emitter=self.event_emitter)
            self._matches[match_id] = director

        logger.info("Created match %s (min: %d, max: %d)", match_id, config.min_players, config.max_players)
        return director

    def delete_match(self, match_id: str) -> bool:
        """Forget a match and release its participants."""
        with self._lock:
            director = self._matches.pop(match_id, None)
            if director is None:
                return False
            for participant_id in list(director.participants):
                if self._participant_matches.get(participant_id) == match_id:
                    del self._participant_matches[participant_id]

        logger.info("Deleted match %s", match_id)
        return True

    def get_match(self, match_id: str) -> Optional[MatchDirector]:
        with self._lock:
            return self._matches.get(match_id)

    @property
    def matches(self) -> Dict[str, MatchDirector]:
        with self._lock:
            return dict(self._matches)

    @property
    def match_count(self) -> int:
        with self._lock:
            return len(self._matches)

    def find_joinable_match(self) -> Optional[MatchDirector]:
        """First match whose lobby is open and not full."""
        with self._lock:
            for director in self._matches.values():
                if director.state.can_join and len(director.participants) < director.config.max_players:
                    return director
        return None

    # ===== PARTICIPANTS =====

    def join_match(self, participant_id: str, match_id: str, name: Optional[str] = None,
                   position: Optional[Position] = None) -> bool:
        """
        Add a participant to a match.
        Returns False if they are already in a match or the match refuses them.
        """
        with self._lock:
            if participant_id in self._participant_matches:
                return False
            director = self._matches.get(match_id)
            if director is None:
                return False
            if not director.add_participant(participant_id, name=name, position=position):
                return False
            self._participant_matches[participant_id] = match_id
            return True

    def leave_match(self, participant_id: str) -> bool:
        """Remove a participant from their match (an elimination if it is running)."""
        with self._lock:
            match_id = self._participant_matches.pop(participant_id, None)
            if match_id is None:
                return False
            director = self._matches.get(match_id)
        if director is not None:
            director.remove_participant(participant_id)
        return True

    def get_participant_match(self, participant_id: str) -> Optional[MatchDirector]:
        with self._lock:
            match_id = self._participant_matches.get(participant_id)
            return self._matches.get(match_id) if match_id else None

    def is_in_match(self, participant_id: str) -> bool:
        with self._lock:
            return participant_id in self._participant_matches

    # ===== TICK / CLEANUP =====

    def tick(self) -> None:
        """Tick every match; every `cleanup_interval` seconds also run cleanup()."""
        for director in list(self.matches.values()):
            director.tick()

        now = self.clock.now()
        if now - self._last_cleanup >= self.cleanup_interval:
            self._last_cleanup = now
            self.cleanup()

    def cleanup(self) -> List[str]:
        """
        Remove matches that ended more than `ended_retention` seconds ago and
        lobbies that have been empty for `empty_lobby_timeout` seconds.

        Returns:
            Ids of the removed matches
        """
        now = self.clock.now()
        expired = []
        for match_id, director in self.matches.items():
            match = director.match
            if director.state is GameState.ENDING:
                if match.ended_at is not None and now - match.ended_at >= self.ended_retention:
                    logger.info("Auto-removing ended match %s (ended %.0fs ago)", match_id, now - match.ended_at)
                    expired.append(match_id)
            elif director.state is GameState.WAITING and not director.participants:
                if now - match.created_at >= self.empty_lobby_timeout:
                    logger.info("Auto-removing empty match %s", match_id)
                    expired.append(match_id)

        for match_id in expired:
            self.delete_match(match_id)
        return expired

    def shutdown(self) -> None:
        """End every running match and clear the registry."""
        for director in list(self.matches.values()):
            if director.state.is_in_progress:
                director.end_match("shutdown")

        with self._lock:
            self._matches.clear()
            self._participant_matches.clear()
        logger.info("Match manager shut down")
