"""
Base agent interface for simulated match participants.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from ..config.game_config import GameConfig, default_config
from ..core.participant import Participant, Position


@dataclass
class AgentContext:
    """What an agent can see on its turn."""
    participant: Participant
    position: Position
    zone_center: Position
    zone_radius: float
    enemies: List[Tuple[str, Position]] = field(default_factory=list)  # alive opponents


@dataclass
class AgentAction:
    """Movement for this tick plus an optional attack."""
    dx: float = 0.0
    dz: float = 0.0
    attack_target: Optional[str] = None
    damage: float = 0.0


class BaseAgent(ABC):
    """
    Abstract base class for all simulated participants.

    Agents stand in for the host's players: they move and attack, the
    match engine decides what that means.
    """

    def __init__(self, participant: Participant, config: GameConfig = default_config):
        """
        Initialize the agent.

        Args:
            participant: The participant this agent controls
            config: Match configuration
        """
        self.participant = participant
        self.config = config

    @abstractmethod
    def decide(self, context: AgentContext) -> AgentAction:
        """
        Choose this tick's action.

        Args:
            context: Current view of the match

        Returns:
            The action to perform
        """
        pass
