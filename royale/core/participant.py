"""
Participant class representing a player in a match.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional


class ParticipantStatus(Enum):
    """Participant status within the match."""
    WAITING = "waiting"            # In the lobby
    PLAYING = "playing"            # Alive and fighting
    SPECTATING = "spectating"      # Eliminated
    DISCONNECTED = "disconnected"  # Left the match

    @property
    def can_take_damage(self) -> bool:
        return self is ParticipantStatus.PLAYING

    @property
    def can_deal_damage(self) -> bool:
        return self is ParticipantStatus.PLAYING

    @property
    def is_playable(self) -> bool:
        return self is ParticipantStatus.PLAYING


@dataclass(frozen=True)
class Position:
    """A point in a named world (reference frame)."""
    world: str = "world"
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def distance_to(self, other: "Position") -> float:
        """Euclidean distance; positions in different worlds are infinitely far apart."""
        if self.world != other.world:
            return math.inf
        return math.sqrt((self.x - other.x) ** 2 + (self.y - other.y) ** 2 + (self.z - other.z) ** 2)

    def offset(self, dx: float = 0.0, dy: float = 0.0, dz: float = 0.0) -> "Position":
        return Position(self.world, self.x + dx, self.y + dy, self.z + dz)


@dataclass
class Participant:
    """Represents a participant in the match."""
    participant_id: str
    name: str = ""
    status: ParticipantStatus = ParticipantStatus.WAITING
    alive: bool = True
    health: float = 20.0
    max_health: float = 20.0
    position: Position = field(default_factory=Position)

    # Final rank, 0 = not yet placed
    placement: int = 0

    # Cumulative statistics
    kills: int = 0
    assists: int = 0
    damage_dealt: float = 0.0
    damage_taken: float = 0.0

    joined_at: float = 0.0
    survival_time: Optional[float] = None

    def __post_init__(self):
        if not self.name:
            self.name = str(self.participant_id)

    def __str__(self) -> str:
        return f"{self.name} ({self.status.value})"

    @property
    def is_alive(self) -> bool:
        return self.alive

    def eliminate(self, placement: int, now: float) -> bool:
        """
        Mark the participant eliminated with a final placement.
        Returns False if already eliminated.
        """
        if not self.alive:
            return False
        self.alive = False
        self.placement = placement
        if self.status is not ParticipantStatus.DISCONNECTED:
            self.status = ParticipantStatus.SPECTATING
        self.survival_time = max(0.0, now - self.joined_at)
        return True

    def add_kill(self) -> None:
        self.kills += 1

    def add_assist(self) -> None:
        self.assists += 1

    def add_damage_dealt(self, amount: float) -> None:
        self.damage_dealt += amount

    def add_damage_taken(self, amount: float) -> None:
        self.damage_taken += amount

    @property
    def kda(self) -> str:
        """Kill/death/assist summary for display."""
        return f"{self.kills}/{0 if self.alive else 1}/{self.assists}"

    def to_dict(self) -> Dict[str, Any]:
        """Stats snapshot for the notification sink and external persistence."""
        return {
            "id": self.participant_id,
            "name": self.name,
            "status": self.status.value,
            "alive": self.alive,
            "health": round(self.health, 2),
            "placement": self.placement,
            "kills": self.kills,
            "assists": self.assists,
            "damage_dealt": round(self.damage_dealt, 2),
            "damage_taken": round(self.damage_taken, 2),
            "survival_time": self.survival_time,
        }
