"""
Event emitter: the notification sink for match events.

Events are recorded to the run directory and handed to any registered
listeners. Delivery is fire-and-forget; a failing recorder or listener never
interrupts the match.
"""

import logging
from threading import Lock
from typing import Any, Callable, Dict, List, Optional

from .run_recorder import RunRecorder

logger = logging.getLogger(__name__)

Listener = Callable[[str, Dict[str, Any]], None]


class EventEmitter:
    """Event emitter that records match events and notifies listeners."""

    def __init__(self, run_recorder: Optional[RunRecorder] = None):
        self.run_recorder = run_recorder
        self._listeners: List[Listener] = []
        self._lock = Lock()

    def register_listener(self, listener: Listener) -> None:
        """Subscribe a callback receiving (event_type, data) for every event."""
        with self._lock:
            self._listeners.append(listener)

    def unregister_listener(self, listener: Listener) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    def _emit(self, event_type: str, data: Dict[str, Any]) -> None:
        """Emit an event by recording it and passing it to listeners."""
        if self.run_recorder:
            try:
                self.run_recorder.record_event(event_type, data)
            except Exception as e:
                logger.warning("Error recording event %s: %s", event_type, e)

        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(event_type, data)
            except Exception as e:
                logger.warning("Event listener failed on %s: %s", event_type, e)

    def emit_match_start(self, match_id: str, participants: List[str], zone_radius: float) -> None:
        """Emit match start event."""
        self._emit("match_start", {
            "match_id": match_id,
            "participants": participants,
            "zone_radius": zone_radius
        })

    def emit_participant_joined(self, participant_id: str, name: str, count: int, max_players: int) -> None:
        self._emit("participant_joined", {
            "participant_id": participant_id,
            "name": name,
            "count": count,
            "max_players": max_players
        })

    def emit_state_change(self, previous: str, state: str, alive_count: int) -> None:
        """Emit match state change event."""
        self._emit("state_change", {
            "previous": previous,
            "state": state,
            "alive_count": alive_count
        })

    def emit_countdown(self, seconds: int) -> None:
        self._emit("countdown", {"seconds": seconds})

    def emit_phase_change(self, phase: int, target_radius: float, shrink_duration: int, damage_per_tick: float) -> None:
        """Emit zone phase change event."""
        self._emit("phase_change", {
            "phase": phase,
            "target_radius": target_radius,
            "shrink_duration": shrink_duration,
            "damage_per_tick": damage_per_tick
        })

    def emit_zone_status(self, status: Dict[str, Any]) -> None:
        """Emit periodic zone status (radius, progress, per-participant distance to edge)."""
        self._emit("zone_status", status)

    def emit_zone_damage(self, participant_id: str, amount: float, health: float) -> None:
        self._emit("zone_damage", {
            "participant_id": participant_id,
            "amount": amount,
            "health": round(health, 2)
        })

    def emit_damage(self, victim_id: str, attacker_id: str, amount: float, health: float) -> None:
        """Emit player-caused damage event."""
        self._emit("damage", {
            "victim_id": victim_id,
            "attacker_id": attacker_id,
            "amount": amount,
            "health": round(health, 2)
        })

    def emit_elimination(self, participant_id: str, cause: str, placement: int,
                         killer_id: Optional[str] = None, assister_ids: Optional[List[str]] = None,
                         remaining: int = 0) -> None:
        """Emit participant elimination event."""
        self._emit("elimination", {
            "participant_id": participant_id,
            "cause": cause,
            "placement": placement,
            "killer_id": killer_id,
            "assister_ids": assister_ids or [],
            "remaining": remaining
        })

    def emit_deathmatch(self, alive: List[str], reason: str) -> None:
        self._emit("deathmatch", {
            "alive": alive,
            "reason": reason
        })

    def emit_match_over(self, winner_id: Optional[str], reason: str, standings: List[Dict[str, Any]]) -> None:
        """Emit match over event."""
        self._emit("match_over", {
            "winner_id": winner_id,
            "reason": reason,
            "standings": standings
        })
