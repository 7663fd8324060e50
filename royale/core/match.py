"""
Match record: participants, timestamps and result.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, TYPE_CHECKING

from .participant import Participant

if TYPE_CHECKING:
    from ..config.game_config import GameConfig


@dataclass
class Match:
    """Everything the match owns apart from its engines."""
    match_id: str
    config: 'GameConfig'
    participants: Dict[str, Participant] = field(default_factory=dict)
    winner_id: Optional[str] = None
    end_reason: Optional[str] = None

    created_at: float = 0.0
    started_at: Optional[float] = None
    deathmatch_started_at: Optional[float] = None
    ended_at: Optional[float] = None

    def get_participant(self, participant_id: str) -> Optional[Participant]:
        return self.participants.get(participant_id)

    def all_participants(self) -> List[Participant]:
        return list(self.participants.values())

    def alive_participants(self) -> List[Participant]:
        """Get all participants not yet eliminated."""
        return [p for p in self.participants.values() if p.alive]

    def alive_count(self) -> int:
        return sum(1 for p in self.participants.values() if p.alive)

    def standings(self) -> List[Participant]:
        """Participants ordered by placement; unplaced survivors first."""
        return sorted(self.participants.values(), key=lambda p: (p.placement, p.participant_id))

    def get_summary(self) -> Dict[str, Any]:
        """Get a summary of the current match."""
        return {
            "match_id": self.match_id,
            "participants": len(self.participants),
            "alive": self.alive_count(),
            "winner_id": self.winner_id,
            "end_reason": self.end_reason,
            "started_at": self.started_at,
            "ended_at": self.ended_at,
        }
