"""
The shrinking safe zone.

Participants inside the zone are safe; participants outside take damage
on the zone engine's damage cadence.
"""

from ..core.participant import Position
from .phase import ZonePhase

# Radius tolerance for treating a shrink as finished
SHRINK_EPSILON = 0.1


class Zone:
    """A circular safe area that shrinks linearly toward a target radius."""

    def __init__(self, center: Position, initial_radius: float, phase: ZonePhase):
        self.world = center.world
        self.center = center
        self.current_radius = max(0.0, float(initial_radius))
        self.target_radius = self.current_radius
        self.start_radius = self.current_radius
        self.phase = phase

        self.shrink_started_at = 0.0
        self.shrink_duration = 0.0
        self.shrinking = False

    def __repr__(self) -> str:
        return (f"Zone(center={self.center}, current_radius={self.current_radius:.1f}, "
                f"target_radius={self.target_radius:.1f}, shrinking={self.shrinking}, "
                f"phase={self.phase.phase_id})")

    def start_shrink(self, new_radius: float, duration_seconds: float, now: float) -> None:
        """
        Start shrinking toward `new_radius` over `duration_seconds`.

        The zone never grows: a target larger than the current radius is
        treated as the current radius.
        """
        self.start_radius = self.current_radius
        self.target_radius = min(max(0.0, float(new_radius)), self.current_radius)
        self.shrink_started_at = now
        self.shrink_duration = max(1.0, float(duration_seconds))
        self.shrinking = True

    def tick(self, now: float) -> None:
        """Update the current radius from shrink progress."""
        if not self.shrinking:
            return

        elapsed = now - self.shrink_started_at
        if elapsed >= self.shrink_duration:
            self.current_radius = self.target_radius
            self.shrinking = False
            return

        progress = max(0.0, elapsed / self.shrink_duration)
        radius = self.start_radius - (self.start_radius - self.target_radius) * progress
        self.current_radius = min(self.current_radius, radius)

    def contains(self, position: Position) -> bool:
        """Check if a position is inside the safe zone (the edge counts as inside)."""
        if position.world != self.world:
            return False
        return self.center.distance_to(position) <= self.current_radius

    def distance_to_edge(self, position: Position) -> float:
        """Distance to the zone edge: positive inside, negative outside."""
        if position.world != self.world:
            return -1000.0
        return self.current_radius - self.center.distance_to(position)

    def is_shrink_complete(self) -> bool:
        return not self.shrinking and abs(self.current_radius - self.target_radius) < SHRINK_EPSILON

    def shrink_progress(self, now: float) -> float:
        """Shrink progress from 0.0 to 1.0; 1.0 when not shrinking."""
        if not self.shrinking:
            return 1.0
        elapsed = now - self.shrink_started_at
        return min(1.0, max(0.0, elapsed / self.shrink_duration))

    def remaining_seconds(self, now: float) -> int:
        if not self.shrinking:
            return 0
        remaining = self.shrink_duration - (now - self.shrink_started_at)
        return max(0, int(remaining))
