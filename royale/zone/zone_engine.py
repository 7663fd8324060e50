"""
Zone engine: shrink schedule, phase advancement and out-of-zone damage.
"""

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, Dict, Iterable, List, Optional, Tuple

from ..core.clock import SystemClock
from ..core.participant import Participant, Position
from ..core.provider import LocalParticipantProvider, ParticipantProvider
from ..core.scheduler import TICKS_PER_SECOND, TickScheduler
from .phase import ZonePhase, ZonePhaseTable, default_phase_table
from .zone import Zone

if TYPE_CHECKING:
    from ..web.event_emitter import EventEmitter

logger = logging.getLogger(__name__)

ZONE_TICK_TASK = "zone-tick"
ZONE_DAMAGE_TASK = "zone-damage"
ZONE_DISPLAY_TASK = "zone-display"


@dataclass
class ZoneStatus:
    """Snapshot of the zone shown to participants (boss-bar equivalent)."""
    phase: int
    radius: float
    target_radius: float
    shrinking: bool
    progress: float
    remaining_seconds: int
    next_shrink_in: int
    distances: Dict[str, float] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, object]:
        return {
            "phase": self.phase,
            "radius": round(self.radius, 2),
            "target_radius": round(self.target_radius, 2),
            "shrinking": self.shrinking,
            "progress": round(self.progress, 3),
            "remaining_seconds": self.remaining_seconds,
            "next_shrink_in": self.next_shrink_in,
            "distances": {pid: round(d, 1) for pid, d in self.distances.items()},
        }


class ZoneEngine:
    """Owns the current zone and advances it through the phase table."""

    def __init__(self,
                 phases: Optional[ZonePhaseTable] = None,
                 clock=None,
                 scheduler: Optional[TickScheduler] = None,
                 participants: Optional[Callable[[], Iterable[Participant]]] = None,
                 on_damage: Optional[Callable[[str, float], None]] = None,
                 provider: Optional[ParticipantProvider] = None,
                 event_emitter: Optional['EventEmitter'] = None,
                 match_id: str = "",
                 grace_period: float = 0.0):
        self.phases = phases or default_phase_table()
        self.clock = clock or SystemClock()
        self.scheduler = scheduler or TickScheduler()
        self.participants = participants or (lambda: [])
        self.on_damage = on_damage
        self.provider = provider or LocalParticipantProvider()
        self.event_emitter = event_emitter
        self.match_id = match_id
        self.grace_period = max(0.0, grace_period)

        self.current_zone: Optional[Zone] = None
        self.current_phase_index = 0
        self.phase_started_at = 0.0
        self.started_at = 0.0
        self.active = False

        # Last status shown to each participant, cleared on stop
        self.displayed: Dict[str, ZoneStatus] = {}

    # ===== LIFECYCLE =====

    def start(self, center: Position, initial_radius: float) -> bool:
        """
        Start the zone with the first phase.
        Returns False if the zone is already running.
        """
        if self.active:
            return False

        now = self.clock.now()
        self.current_phase_index = 0
        self.current_zone = Zone(center, initial_radius, self.phases[0])
        self.phase_started_at = now
        self.started_at = now
        self.active = True

        self.scheduler.schedule(ZONE_TICK_TASK, self.tick, 1)
        self.scheduler.schedule(ZONE_DAMAGE_TASK, self.apply_zone_damage, self.phases[0].tick_interval)
        self.scheduler.schedule(ZONE_DISPLAY_TASK, self.refresh_display, TICKS_PER_SECOND, delay=0)

        logger.info("Zone system started for match %s (radius %.1f, %d phases)",
                    self.match_id, initial_radius, len(self.phases))
        return True

    def stop(self) -> None:
        """Cancel all zone tasks and clear display state. Safe to call repeatedly."""
        was_active = self.active
        self.active = False

        self.scheduler.cancel(ZONE_TICK_TASK)
        self.scheduler.cancel(ZONE_DAMAGE_TASK)
        self.scheduler.cancel(ZONE_DISPLAY_TASK)
        self.displayed.clear()

        if was_active:
            logger.info("Zone system stopped for match %s", self.match_id)

    # ===== PHASES =====

    def tick(self) -> None:
        """Advance the shrink and move to the next phase once the wait is over."""
        if not self.active or self.current_zone is None:
            return

        now = self.clock.now()
        self.current_zone.tick(now)

        if self.current_zone.shrinking or self.phases.is_last(self.current_phase_index):
            return

        if now - self.phase_started_at >= self.get_current_phase().wait_duration:
            self.next_phase()

    def next_phase(self) -> bool:
        """
        Advance to the next zone phase and start its shrink.
        Returns False if already at the last phase.
        """
        if self.current_zone is None:
            logger.warning("Zone for match %s has not been started", self.match_id)
            return False

        if self.phases.is_last(self.current_phase_index):
            logger.warning("No more zone phases available for match %s", self.match_id)
            return False

        self.current_phase_index += 1
        phase = self.phases[self.current_phase_index]
        now = self.clock.now()

        self.current_zone.phase = phase
        self.current_zone.start_shrink(phase.target_radius, phase.shrink_duration, now)
        self.phase_started_at = now
        self.scheduler.reschedule(ZONE_DAMAGE_TASK, phase.tick_interval)

        logger.info("Zone advanced to phase %d for match %s (shrinking to %.0f over %ds)",
                    self.current_phase_index + 1, self.match_id, phase.target_radius, phase.shrink_duration)

        if self.event_emitter:
            self.event_emitter.emit_phase_change(
                self.current_phase_index + 1,
                phase.target_radius,
                phase.shrink_duration,
                phase.damage_per_tick,
            )
        return True

    # ===== DAMAGE =====

    def in_grace_period(self) -> bool:
        return self.clock.now() - self.started_at < self.grace_period

    def apply_zone_damage(self) -> List[Tuple[str, float]]:
        """
        Hit every alive participant outside the zone once.

        Returns:
            List of (participant_id, damage) hits emitted
        """
        if not self.active or self.current_zone is None or self.in_grace_period():
            return []

        damage = self.get_current_phase().damage_per_tick
        if damage <= 0:
            return []

        hits = []
        for participant in list(self.participants()):
            if not participant.alive:
                continue
            position = self.provider.get_position(participant)
            if self.current_zone.contains(position):
                continue
            hits.append((participant.participant_id, damage))

        for participant_id, amount in hits:
            # A hit may end the match and stop the zone
            if not self.active:
                break
            if self.on_damage:
                self.on_damage(participant_id, amount)
        return hits

    # ===== DISPLAY =====

    def build_status(self) -> Optional[ZoneStatus]:
        if self.current_zone is None:
            return None

        now = self.clock.now()
        zone = self.current_zone
        next_shrink_in = 0
        if not zone.shrinking and not self.phases.is_last(self.current_phase_index):
            waited = int(now - self.phase_started_at)
            next_shrink_in = max(0, self.get_current_phase().wait_duration - waited)

        distances = {}
        for participant in list(self.participants()):
            if participant.alive:
                position = self.provider.get_position(participant)
                distances[participant.participant_id] = zone.distance_to_edge(position)

        return ZoneStatus(
            phase=self.current_phase_index + 1,
            radius=zone.current_radius,
            target_radius=zone.target_radius,
            shrinking=zone.shrinking,
            progress=zone.shrink_progress(now),
            remaining_seconds=zone.remaining_seconds(now),
            next_shrink_in=next_shrink_in,
            distances=distances,
        )

    def refresh_display(self) -> None:
        """Push the current zone status to every alive participant's display."""
        if not self.active:
            return
        status = self.build_status()
        if status is None:
            return

        for participant_id in status.distances:
            self.displayed[participant_id] = status
        for participant_id in [pid for pid in self.displayed if pid not in status.distances]:
            del self.displayed[participant_id]

        if self.event_emitter:
            self.event_emitter.emit_zone_status(status.to_dict())

    # ===== GETTERS =====

    def get_current_zone(self) -> Optional[Zone]:
        return self.current_zone

    def get_current_phase_index(self) -> int:
        return self.current_phase_index

    def get_current_phase(self) -> ZonePhase:
        return self.phases[self.current_phase_index]

    def is_active(self) -> bool:
        return self.active

    def should_trigger_deathmatch(self) -> bool:
        """Check if the last phase has finished shrinking."""
        return (self.phases.is_last(self.current_phase_index)
                and self.current_zone is not None
                and self.current_zone.is_shrink_complete())
