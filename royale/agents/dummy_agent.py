"""
Dummy agent with simple, seedable behavior.
"""

import math
import random

from .base_agent import AgentAction, AgentContext, BaseAgent
from ..config.game_config import GameConfig, default_config
from ..core.participant import Participant


class DummyAgent(BaseAgent):
    """
    Simple random agent:
    - Outside (or close to the edge of) the zone: run toward the center
    - Otherwise: wander in a random direction
    - Attack the nearest enemy in range with a fixed probability
    """

    def __init__(self, participant: Participant, config: GameConfig = default_config,
                 speed: float = 0.25, attack_range: float = 4.0,
                 attack_chance: float = 0.15, attack_damage: float = 3.0,
                 edge_margin: float = 10.0):
        super().__init__(participant, config)
        # Combine seed with participant id so each agent is different but reproducible
        seed = config.random_seed
        if seed is not None:
            self.random = random.Random(f"{seed}:{participant.participant_id}")
        else:
            self.random = random.Random()
        self.speed = speed
        self.attack_range = attack_range
        self.attack_chance = attack_chance
        self.attack_damage = attack_damage
        self.edge_margin = edge_margin
        self.heading = self.random.uniform(0, 2 * math.pi)

    def decide(self, context: AgentContext) -> AgentAction:
        dx, dz = self._move(context)
        action = AgentAction(dx=dx, dz=dz)

        target = self._nearest_enemy(context)
        if target is not None and self.random.random() < self.attack_chance:
            action.attack_target = target
            action.damage = self.attack_damage
        return action

    def _move(self, context: AgentContext):
        to_center_x = context.zone_center.x - context.position.x
        to_center_z = context.zone_center.z - context.position.z
        distance = math.hypot(to_center_x, to_center_z)

        if distance > 0 and distance >= context.zone_radius - self.edge_margin:
            step = min(self.speed, distance)
            return to_center_x / distance * step, to_center_z / distance * step

        # Wander, occasionally changing direction
        if self.random.random() < 0.05:
            self.heading += self.random.uniform(-math.pi / 2, math.pi / 2)
        return math.cos(self.heading) * self.speed, math.sin(self.heading) * self.speed

    def _nearest_enemy(self, context: AgentContext):
        best = None
        best_distance = self.attack_range
        for enemy_id, position in context.enemies:
            distance = context.position.distance_to(position)
            if distance <= best_distance:
                best, best_distance = enemy_id, distance
        return best
