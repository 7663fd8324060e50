"""
Match director: coordinates the state machine, zone and combat attribution.

The director is driven by an external tick. It routes zone and player damage
into eliminations, credits kills and assists, and moves the match through its
lifecycle from zone and alive-count signals.
"""

import logging
import uuid
from dataclasses import dataclass, field
from threading import RLock
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from ..combat.attribution import CombatAttributionEngine
from ..config.game_config import GameConfig, default_config
from ..zone.zone_engine import ZoneEngine
from .clock import SystemClock
from .game_state import GameState, GameStateMachine
from .match import Match
from .participant import Participant, ParticipantStatus, Position
from .provider import LocalParticipantProvider, ParticipantProvider
from .scheduler import TICKS_PER_SECOND, TickScheduler

if TYPE_CHECKING:
    from ..web.event_emitter import EventEmitter

logger = logging.getLogger(__name__)

COUNTDOWN_TASK = "countdown"
COUNTDOWN_ANNOUNCEMENTS = (30, 15, 10, 5, 4, 3, 2, 1)


@dataclass
class EliminationResult:
    """Outcome of one elimination."""
    participant_id: str
    killer_id: Optional[str]
    assister_ids: List[str] = field(default_factory=list)
    placement: int = 0
    cause: str = "player"  # player, zone, disconnect, admin


class MatchDirector:
    """Runs one match: lifecycle, zone, damage routing and eliminations."""

    def __init__(self,
                 config: GameConfig = default_config,
                 match_id: Optional[str] = None,
                 clock=None,
                 scheduler: Optional[TickScheduler] = None,
                 provider: Optional[ParticipantProvider] = None,
                 event_emitter: Optional['EventEmitter'] = None):
        self.config = config
        self.clock = clock or SystemClock()
        self.scheduler = scheduler or TickScheduler()
        self.provider = provider or LocalParticipantProvider()
        self.event_emitter = event_emitter

        self.match = Match(
            match_id=match_id or uuid.uuid4().hex[:8],
            config=config,
            created_at=self.clock.now(),
        )
        self.state_machine = GameStateMachine(clock=self.clock)
        self.combat = CombatAttributionEngine(clock=self.clock, window=config.combat_window)
        self.phases = config.build_phase_table()
        self.zone = ZoneEngine(
            phases=self.phases,
            clock=self.clock,
            scheduler=self.scheduler,
            participants=self.match.all_participants,
            on_damage=self.apply_environmental_damage,
            provider=self.provider,
            event_emitter=event_emitter,
            match_id=self.match.match_id,
            grace_period=config.zone_grace_period,
        )

        self.countdown_remaining = 0
        self.eliminations: List[EliminationResult] = []
        self._deathmatch_reason = "zone"
        self._lock = RLock()

    # ===== READS =====

    @property
    def match_id(self) -> str:
        return self.match.match_id

    @property
    def state(self) -> GameState:
        return self.state_machine.state

    @property
    def winner_id(self) -> Optional[str]:
        return self.match.winner_id

    @property
    def participants(self) -> Dict[str, Participant]:
        return self.match.participants

    @property
    def alive_count(self) -> int:
        return self.match.alive_count()

    def get_participant(self, participant_id: str) -> Optional[Participant]:
        return self.match.get_participant(participant_id)

    def alive_participants(self) -> List[Participant]:
        return self.match.alive_participants()

    def standings(self) -> List[Dict[str, Any]]:
        """Placement-ordered stats for every participant."""
        return [p.to_dict() for p in self.match.standings()]

    @property
    def zone_center(self) -> Position:
        center = list(self.config.zone_center) + [0.0, 0.0]
        return Position(self.config.world_name, float(center[0]), 0.0, float(center[1]))

    # ===== PARTICIPANTS =====

    def add_participant(self, participant_id: str, name: Optional[str] = None,
                        position: Optional[Position] = None) -> bool:
        """
        Add a participant to the lobby.
        Returns False if the lobby is closed, full, or the id is taken.
        """
        with self._lock:
            if not self.state.can_join:
                return False
            if participant_id in self.match.participants:
                return False
            if len(self.match.participants) >= self.config.max_players:
                return False

            participant = Participant(
                participant_id=participant_id,
                name=name or str(participant_id),
                health=self.config.max_health,
                max_health=self.config.max_health,
                position=position or self.zone_center,
                joined_at=self.clock.now(),
            )
            self.match.participants[participant_id] = participant
            count = len(self.match.participants)

            logger.info("Participant %s joined match %s (%d/%d)",
                        participant.name, self.match_id, count, self.config.max_players)
            if self.event_emitter:
                self.event_emitter.emit_participant_joined(participant_id, participant.name,
                                                           count, self.config.max_players)

            if self.config.auto_start and count >= self.config.min_players:
                self.request_start()
            return True

    def remove_participant(self, participant_id: str) -> bool:
        """
        Remove a participant. Leaving a running match counts as an elimination.
        """
        with self._lock:
            participant = self.match.participants.get(participant_id)
            if participant is None:
                return False

            if self.state.has_started:
                participant.status = ParticipantStatus.DISCONNECTED
                if participant.alive and self.state.is_in_progress:
                    self.eliminate(participant_id, cause="disconnect")
            else:
                del self.match.participants[participant_id]

            logger.info("Participant %s left match %s", participant.name, self.match_id)
            return True

    # ===== LIFECYCLE =====

    def set_state(self, new_state: GameState) -> GameState:
        """
        Set any state directly (admin/debug override) and run its entry actions.
        Returns the previous state.
        """
        with self._lock:
            return self._change_state(new_state)

    def _change_state(self, new_state: GameState) -> GameState:
        previous = self.state_machine.set_state(new_state)
        logger.info("Match %s state: %s -> %s", self.match_id, previous.name, new_state.name)

        if self.event_emitter:
            self.event_emitter.emit_state_change(previous.value, new_state.value, self.alive_count)

        self._on_enter(new_state)
        return previous

    def _on_enter(self, state: GameState) -> None:
        now = self.clock.now()

        if state is not GameState.STARTING:
            self.scheduler.cancel(COUNTDOWN_TASK)
        if not state.is_in_progress:
            self.zone.stop()

        if state is GameState.STARTING:
            self.countdown_remaining = self.config.countdown_seconds
            self.scheduler.schedule(COUNTDOWN_TASK, self._countdown_tick, TICKS_PER_SECOND, delay=0)
            logger.info("Match %s starting countdown (%d seconds)", self.match_id, self.countdown_remaining)

        elif state.is_in_progress:
            if self.match.started_at is None:
                self.match.started_at = now
            for participant in self.match.alive_participants():
                if participant.status is ParticipantStatus.WAITING:
                    participant.status = ParticipantStatus.PLAYING

            initial_radius = self.config.resolve_initial_radius(self.phases)
            if self.zone.start(self.zone_center, initial_radius) and self.event_emitter:
                self.event_emitter.emit_match_start(
                    self.match_id, list(self.match.participants), initial_radius)

            if state is GameState.DEATHMATCH:
                self.match.deathmatch_started_at = now
                logger.info("Match %s entering DEATHMATCH (%s)", self.match_id, self._deathmatch_reason)
                if self.event_emitter:
                    self.event_emitter.emit_deathmatch(
                        [p.participant_id for p in self.match.alive_participants()],
                        self._deathmatch_reason)

        elif state is GameState.ENDING:
            self._finish(now)

    def _finish(self, now: float) -> None:
        self.match.ended_at = now
        winner = self.match.get_participant(self.match.winner_id) if self.match.winner_id else None
        if winner is not None:
            winner.placement = 1

        for participant in self.match.alive_participants():
            participant.survival_time = max(0.0, now - participant.joined_at)

        logger.info("Match %s is ENDING. Winner: %s (%s)", self.match_id,
                    winner.name if winner else "NONE", self.match.end_reason or "admin")
        if self.event_emitter:
            self.event_emitter.emit_match_over(self.match.winner_id,
                                               self.match.end_reason or "admin",
                                               self.standings())

    def _can_advance(self, required: GameState, target: GameState) -> bool:
        """Normal triggers only move forward, and only from their own state."""
        return self.state is required and self.state_machine.is_forward(target)

    def request_start(self) -> bool:
        """WAITING -> STARTING once enough participants have joined."""
        with self._lock:
            if not self._can_advance(GameState.WAITING, GameState.STARTING):
                return False
            if len(self.match.participants) < self.config.min_players:
                return False
            self._change_state(GameState.STARTING)
            return True

    def begin_match(self) -> bool:
        """STARTING -> ACTIVE when the countdown has elapsed."""
        with self._lock:
            if not self._can_advance(GameState.STARTING, GameState.ACTIVE):
                return False
            self._change_state(GameState.ACTIVE)
            return True

    def _countdown_tick(self) -> None:
        if self.state is not GameState.STARTING:
            self.scheduler.cancel(COUNTDOWN_TASK)
            return

        if self.countdown_remaining <= 0:
            self.scheduler.cancel(COUNTDOWN_TASK)
            self.begin_match()
            return

        if self.countdown_remaining in COUNTDOWN_ANNOUNCEMENTS and self.event_emitter:
            self.event_emitter.emit_countdown(self.countdown_remaining)
        self.countdown_remaining -= 1

    def trigger_deathmatch(self, reason: str = "zone") -> bool:
        """ACTIVE -> DEATHMATCH while more than one participant is alive."""
        with self._lock:
            if not self._can_advance(GameState.ACTIVE, GameState.DEATHMATCH) or self.alive_count <= 1:
                return False
            self._deathmatch_reason = reason
            self._change_state(GameState.DEATHMATCH)
            return True

    def end_match(self, reason: str = "admin", winner_id: Optional[str] = None) -> bool:
        """Move to ENDING with an optional winner."""
        with self._lock:
            if not self.state_machine.is_forward(GameState.ENDING):
                return False
            self.match.winner_id = winner_id
            self.match.end_reason = reason
            self._change_state(GameState.ENDING)
            return True

    def tick(self) -> None:
        """Advance one scheduler tick and check time-based transitions."""
        self.scheduler.tick()
        with self._lock:
            if self.state.is_in_progress:
                self._check_time_limits()

    def _check_time_limits(self) -> None:
        now = self.clock.now()
        started_at = self.match.started_at

        if self.state is GameState.ACTIVE:
            duration_over = started_at is not None and now - started_at >= self.config.game_duration
            if self.config.deathmatch_enabled:
                if self.zone.should_trigger_deathmatch():
                    self.trigger_deathmatch("zone")
                elif duration_over:
                    self.trigger_deathmatch("time_limit")
            elif duration_over:
                self.end_match("time_limit")

        elif self.state is GameState.DEATHMATCH:
            deathmatch_at = self.match.deathmatch_started_at
            if deathmatch_at is not None and now - deathmatch_at >= self.config.deathmatch_time_limit:
                self.end_match("deathmatch_time_limit")

    # ===== DAMAGE =====

    def record_hit(self, victim_id: str, attacker_id: str, amount: float) -> Optional[EliminationResult]:
        """
        Route player-caused damage.

        The hit is recorded for attribution before health is reduced, so a
        lethal hit is always visible to the killer lookup.

        Returns:
            The elimination caused by this hit, if any
        """
        with self._lock:
            if not self.state.is_in_progress or amount <= 0:
                return None

            victim = self.match.get_participant(victim_id)
            attacker = self.match.get_participant(attacker_id)
            if victim is not None and not (victim.alive and victim.status.can_take_damage):
                return None
            if attacker is not None and not (attacker.alive and attacker.status.can_deal_damage):
                return None

            self.combat.record_damage(victim_id, attacker_id, amount)
            if attacker is not None:
                attacker.add_damage_dealt(amount)
            if victim is None:
                return None

            victim.add_damage_taken(amount)
            health = self.provider.apply_damage(victim, amount)
            if self.event_emitter:
                self.event_emitter.emit_damage(victim_id, attacker_id, amount, health)

            if health <= 0:
                return self.eliminate(victim_id, cause="player")
            return None

    def apply_environmental_damage(self, participant_id: str, amount: float) -> Optional[EliminationResult]:
        """
        Route zone damage. Recorded without an attacker, so a zone death has no killer.
        """
        with self._lock:
            if not self.state.is_in_progress:
                return None
            participant = self.match.get_participant(participant_id)
            if participant is None or not participant.alive or not participant.status.can_take_damage:
                return None

            self.combat.record_damage(participant_id, None, amount)
            participant.add_damage_taken(amount)
            health = self.provider.apply_damage(participant, amount)
            if self.event_emitter:
                self.event_emitter.emit_zone_damage(participant_id, amount, health)

            if health <= 0:
                return self.eliminate(participant_id, cause="zone")
            return None

    # ===== ELIMINATION =====

    def eliminate(self, participant_id: str, cause: str = "admin") -> Optional[EliminationResult]:
        """
        Eliminate a participant: credit kill and assists, record placement,
        clear their combat data and check for a winner or deathmatch.

        Returns:
            None if the participant is unknown or already eliminated
        """
        with self._lock:
            participant = self.match.get_participant(participant_id)
            if participant is None or not participant.alive:
                return None

            killer_id = self.combat.get_killer(participant_id)
            if killer_id == participant_id:
                killer_id = None
            assister_ids = [a for a in self.combat.get_assisters(participant_id, killer_id)
                            if a != participant_id]

            killer = self.match.get_participant(killer_id) if killer_id else None
            if killer is not None:
                killer.add_kill()
            for assister_id in assister_ids:
                assister = self.match.get_participant(assister_id)
                if assister is not None:
                    assister.add_assist()

            placement = self.alive_count
            participant.eliminate(placement, self.clock.now())
            self.combat.clear_player(participant_id)

            result = EliminationResult(participant_id, killer_id, assister_ids, placement, cause)
            self.eliminations.append(result)
            remaining = self.alive_count

            logger.info("Participant %s eliminated (%s) by %s. Placement #%d, remaining: %d",
                        participant.name, cause, killer_id or "nobody", placement, remaining)
            if self.event_emitter:
                self.event_emitter.emit_elimination(participant_id, cause, placement,
                                                    killer_id, assister_ids, remaining)

            self._check_match_end()
            return result

    def _check_match_end(self) -> None:
        if not self.state.is_in_progress:
            return

        alive = self.match.alive_participants()
        if len(alive) == 1:
            self.end_match("last_standing", winner_id=alive[0].participant_id)
        elif not alive:
            self.end_match("no_survivors")
        elif (self.config.deathmatch_enabled and self.state is GameState.ACTIVE
              and self.zone.should_trigger_deathmatch()):
            self.trigger_deathmatch("zone")

    def get_summary(self) -> Dict[str, Any]:
        """Get final match summary as dictionary."""
        summary = self.match.get_summary()
        summary.update({
            "state": self.state.value,
            "zone_phase": self.zone.get_current_phase_index() + 1,
            "eliminations": len(self.eliminations),
        })
        return summary
