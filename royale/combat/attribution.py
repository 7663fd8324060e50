"""
Combat attribution: kill, assist and in-combat tracking from damage events.

Kill, assist and in-combat facts only consider events inside a rolling
window (10 seconds by default). Damage totals are kept for the whole match.
Expiry is evaluated when read; there is no background sweep.
"""

from collections import defaultdict, deque
from dataclasses import dataclass
from threading import Lock
from typing import Deque, Dict, List, Optional

from ..core.clock import SystemClock

DEFAULT_COMBAT_WINDOW = 10.0


@dataclass(frozen=True)
class CombatRecord:
    """One damage event. `attacker_id` is None for environmental damage."""
    victim_id: str
    attacker_id: Optional[str]
    amount: float
    timestamp: float

    @property
    def is_environmental(self) -> bool:
        return self.attacker_id is None


class CombatAttributionEngine:
    """Tracks damage events and derives killer, assist and combat facts."""

    def __init__(self, clock=None, window: float = DEFAULT_COMBAT_WINDOW):
        self.clock = clock or SystemClock()
        self.window = float(window)

        # victim -> records against them, oldest first
        self._records: Dict[str, Deque[CombatRecord]] = {}
        self._damage_dealt: Dict[str, float] = defaultdict(float)
        self._damage_taken: Dict[str, float] = defaultdict(float)
        self._lock = Lock()

    def _in_window(self, record: CombatRecord, now: float) -> bool:
        return now - record.timestamp <= self.window

    def record_damage(self, victim_id: str, attacker_id: Optional[str], amount: float) -> CombatRecord:
        """
        Record damage dealt to `victim_id`.

        Args:
            victim_id: Participant who took damage
            attacker_id: Participant who dealt it, or None for environmental damage
            amount: Damage amount

        Returns:
            The stored record

        Raises:
            ValueError: If victim_id is None
        """
        if victim_id is None:
            raise ValueError("victim_id is required")

        with self._lock:
            now = self.clock.now()
            record = CombatRecord(victim_id, attacker_id, float(amount), now)

            log = self._records.setdefault(victim_id, deque())
            while log and not self._in_window(log[0], now):
                log.popleft()
            log.append(record)

            if attacker_id is not None:
                self._damage_dealt[attacker_id] += record.amount
            self._damage_taken[victim_id] += record.amount
        return record

    def get_killer(self, victim_id: str) -> Optional[str]:
        """
        Attacker of the most recent in-window hit on `victim_id`.
        None if there is no hit, it expired, or it was environmental.
        """
        with self._lock:
            log = self._records.get(victim_id)
            if not log:
                return None
            record = log[-1]
            if not self._in_window(record, self.clock.now()):
                return None
            return record.attacker_id

    def get_assisters(self, victim_id: str, killer_id: Optional[str] = None) -> List[str]:
        """
        Distinct attackers who hit `victim_id` inside the window, excluding the killer.
        Ordered by first hit.
        """
        with self._lock:
            log = self._records.get(victim_id)
            if not log:
                return []
            now = self.clock.now()
            assisters: List[str] = []
            for record in log:
                if record.attacker_id is None or record.attacker_id == killer_id:
                    continue
                if not self._in_window(record, now):
                    continue
                if record.attacker_id not in assisters:
                    assisters.append(record.attacker_id)
            return assisters

    def is_in_combat(self, participant_id: str) -> bool:
        """Check if the participant hit or was hit by anything inside the window."""
        with self._lock:
            now = self.clock.now()
            for victim_id, log in self._records.items():
                for record in reversed(log):
                    if not self._in_window(record, now):
                        break
                    if victim_id == participant_id or record.attacker_id == participant_id:
                        return True
            return False

    def get_recent_records(self, victim_id: str) -> List[CombatRecord]:
        """In-window records against `victim_id`, oldest first."""
        with self._lock:
            now = self.clock.now()
            return [r for r in self._records.get(victim_id, ()) if self._in_window(r, now)]

    def get_damage_dealt(self, participant_id: str) -> float:
        with self._lock:
            return self._damage_dealt.get(participant_id, 0.0)

    def get_damage_taken(self, participant_id: str) -> float:
        with self._lock:
            return self._damage_taken.get(participant_id, 0.0)

    def clear_player(self, participant_id: str) -> None:
        """Remove every record involving the participant and reset their totals."""
        with self._lock:
            self._records.pop(participant_id, None)
            for victim_id in list(self._records):
                log = self._records[victim_id]
                kept = deque(r for r in log if r.attacker_id != participant_id)
                if kept:
                    self._records[victim_id] = kept
                else:
                    del self._records[victim_id]
            self._damage_dealt.pop(participant_id, None)
            self._damage_taken.pop(participant_id, None)

    def clear_all(self) -> None:
        with self._lock:
            self._records.clear()
            self._damage_dealt.clear()
            self._damage_taken.clear()
