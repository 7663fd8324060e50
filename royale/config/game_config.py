"""
Match configuration and constants.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..combat.attribution import DEFAULT_COMBAT_WINDOW
from ..zone.phase import ZonePhaseTable, default_phase_table


@dataclass
class GameConfig:
    """Configuration for a single match. Read at match creation."""

    # Participants
    min_players: int = 25
    max_players: int = 100
    auto_start: bool = True  # Start the countdown as soon as min_players have joined
    countdown_seconds: int = 30
    max_health: float = 20.0

    # Timing
    game_duration: int = 3600  # seconds of ACTIVE play before deathmatch is forced

    # World / arena
    world_name: str = "world"
    world_size: int = 2000  # blocks (radius), caps the starting zone radius
    zone_center: List[float] = field(default_factory=lambda: [0.0, 0.0])  # x, z

    # Zone
    initial_zone_radius: Optional[float] = None  # None = first phase's target radius
    zone_phases: Optional[int] = None  # Number of phases to use, None = all
    zone_grace_period: int = 120  # seconds without zone damage after the zone starts
    phases: Optional[List[Dict[str, Any]]] = None  # Custom phase table, None = default

    # Deathmatch
    deathmatch_enabled: bool = True
    deathmatch_time_limit: int = 3600  # seconds

    # Teams (reserved, attribution is solo only)
    teams_enabled: bool = False
    team_size: int = 1

    # Combat
    combat_window: float = DEFAULT_COMBAT_WINDOW  # seconds

    log_level: str = "INFO"
    random_seed: Optional[int] = None  # Seed for simulated agents

    def build_phase_table(self) -> ZonePhaseTable:
        """Zone phase table for this configuration."""
        table = ZonePhaseTable(self.phases) if self.phases else default_phase_table()
        return table.truncated(self.zone_phases)

    def resolve_initial_radius(self, table: ZonePhaseTable) -> float:
        """
        Starting zone radius: the explicit `initial_zone_radius` if set,
        otherwise the first phase's target radius. Never larger than the world.
        """
        if self.initial_zone_radius is not None:
            radius = float(self.initial_zone_radius)
        else:
            radius = table[0].target_radius
        return max(0.0, min(radius, float(self.world_size)))


# Default configuration instance
default_config = GameConfig()
