"""
Match runner: simulates a battle royale match with dummy agents.
"""

import argparse
import logging
import math
import random
from typing import Dict, Optional

from royale.agents import AgentContext, BaseAgent, DummyAgent
from royale.config import GameConfig, default_config, load_config
from royale.core import GameState, ManualClock, Position, TICKS_PER_SECOND
from royale.core.director import MatchDirector
from royale.web import EventEmitter, RunRecorder


class RoyaleMatch:
    """Main match controller for simulated runs."""

    def __init__(self, config: Optional[GameConfig] = None, event_emitter: Optional[EventEmitter] = None,
                 run_name: Optional[str] = None, players: Optional[int] = None):
        self.config = config or default_config

        # Create run recorder and event emitter
        if event_emitter is None:
            run_recorder = RunRecorder()
            run_name = run_recorder.create_run(run_name)
            self.event_emitter = EventEmitter(run_recorder)
            self.run_recorder = run_recorder
            print(f"Recording match to: runs/{run_name}/")
        else:
            self.event_emitter = event_emitter
            self.run_recorder = event_emitter.run_recorder

        # Generate seed if not provided
        if self.config.random_seed is None:
            self.config.random_seed = random.randint(0, 2**31 - 1)
        self.random = random.Random(self.config.random_seed)

        self.clock = ManualClock()
        self.director = MatchDirector(self.config, clock=self.clock, event_emitter=self.event_emitter)
        self.agents: Dict[str, BaseAgent] = {}
        self.player_count = players or self.config.min_players
        self.ticks = 0

        self._initialize_agents()

    def _initialize_agents(self) -> None:
        """Join one dummy agent per player, spread around the zone center."""
        center = self.director.zone_center
        spawn_radius = self.config.resolve_initial_radius(self.director.phases) * 0.8
        for index in range(self.player_count):
            participant_id = f"bot-{index + 1:02d}"
            angle = self.random.uniform(0, 2 * math.pi)
            distance = spawn_radius * math.sqrt(self.random.random())
            position = center.offset(dx=math.cos(angle) * distance, dz=math.sin(angle) * distance)
            if not self.director.add_participant(participant_id, position=position):
                break
            participant = self.director.get_participant(participant_id)
            self.agents[participant_id] = DummyAgent(participant, self.config)

    def _agent_turn(self) -> None:
        zone = self.director.zone.get_current_zone()
        if zone is None:
            return

        alive = self.director.alive_participants()
        positions = {p.participant_id: self.director.provider.get_position(p) for p in alive}

        for participant in alive:
            if not participant.alive:
                continue
            agent = self.agents.get(participant.participant_id)
            if agent is None:
                continue

            context = AgentContext(
                participant=participant,
                position=positions[participant.participant_id],
                zone_center=zone.center,
                zone_radius=zone.current_radius,
                enemies=[(pid, pos) for pid, pos in positions.items()
                         if pid != participant.participant_id and self.director.get_participant(pid).alive],
            )
            action = agent.decide(context)

            moved = context.position.offset(dx=action.dx, dz=action.dz)
            participant.position = moved
            positions[participant.participant_id] = moved

            if action.attack_target:
                self.director.record_hit(action.attack_target, participant.participant_id, action.damage)

            if self.director.state is GameState.ENDING:
                return

    def run_match(self, max_ticks: int = 200_000) -> Optional[str]:
        """
        Run the match until it ends or `max_ticks` is reached.
        Returns the winner's participant id, if any.
        """
        participants = list(self.director.participants)

        if self.run_recorder:
            self.run_recorder.save_metadata({
                "match_id": self.director.match_id,
                "participants": participants,
                "config": {
                    "min_players": self.config.min_players,
                    "max_players": self.config.max_players,
                    "zone_phases": len(self.director.phases),
                    "combat_window": self.config.combat_window,
                    "random_seed": self.config.random_seed
                }
            })

        print("=" * 60)
        print("BATTLE ROYALE - Starting")
        print("=" * 60)
        print(f"Match: {self.director.match_id}")
        print(f"Participants: {len(participants)}")
        print(f"Zone phases: {len(self.director.phases)}")
        print("=" * 60)
        print()

        # Fewer bots than min_players: start anyway
        if not self.director.request_start() and self.director.state is GameState.WAITING:
            self.director.set_state(GameState.STARTING)

        while self.director.state is not GameState.ENDING and self.ticks < max_ticks:
            self.clock.advance(1.0 / TICKS_PER_SECOND)
            if self.director.state.is_in_progress:
                self._agent_turn()
            self.director.tick()
            self.ticks += 1

        if self.director.state is not GameState.ENDING:
            self.director.end_match("tick_limit")

        self._print_match_summary()
        return self.director.winner_id

    def _print_match_summary(self) -> None:
        """Print a formatted match summary."""
        print("\n📊 MATCH SUMMARY")
        print("-" * 60)
        print(f"Winner: {self.director.winner_id or 'None'}")
        print(f"Reason: {self.director.match.end_reason}")
        print(f"Simulated time: {self.clock.now():.1f}s ({self.ticks} ticks)")
        print(f"Zone phase reached: {self.director.zone.get_current_phase_index() + 1}")
        print(f"Random Seed: {self.config.random_seed}")

        print("\nStandings:")
        for entry in self.director.standings():
            placement = f"#{entry['placement']}" if entry['placement'] else "alive"
            print(f"  • {placement:>6} {entry['name']}: K/A {entry['kills']}/{entry['assists']}, "
                  f"dealt {entry['damage_dealt']}, taken {entry['damage_taken']}")

    def get_match_summary(self) -> Dict:
        """Get final match summary as dictionary."""
        summary = self.director.get_summary()
        summary["standings"] = self.director.standings()
        summary["ticks"] = self.ticks
        return summary


def main():
    """Entry point for running a simulated match."""
    parser = argparse.ArgumentParser(
        description="Run a simulated battle royale match",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py                                   # Use default config
  python main.py --config configs/quick_match.yaml # Short zone schedule
  python main.py --players 12 --seed 42            # Reproducible 12-player match
        """
    )
    parser.add_argument(
        "--config",
        "-c",
        type=str,
        default=None,
        help="Path to YAML configuration file (default: use default config)"
    )
    parser.add_argument(
        "--seed",
        "-s",
        type=int,
        default=None,
        help="Random seed for reproducible behavior (if not provided, a random seed will be generated and shown)"
    )
    parser.add_argument(
        "--players",
        "-p",
        type=int,
        default=None,
        help="Number of simulated participants (default: config min_players)"
    )
    parser.add_argument(
        "--run-name",
        "-r",
        type=str,
        default=None,
        help="Custom name for this run (default: auto-generated timestamp)"
    )
    parser.add_argument(
        "--max-ticks",
        type=int,
        default=200_000,
        help="Stop the simulation after this many ticks (default: 200000)"
    )

    args = parser.parse_args()

    config = load_config(args.config) if args.config else GameConfig()
    config.random_seed = args.seed

    logging.basicConfig(
        level=getattr(logging, str(config.log_level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    print("Battle Royale Match Simulation")
    print("=" * 60)
    if args.config:
        print(f"Using config: {args.config}")
    print("=" * 60)

    match = RoyaleMatch(config=config, run_name=args.run_name, players=args.players)
    match.run_match(max_ticks=args.max_ticks)

    if match.run_recorder:
        run_path = match.run_recorder.get_run_path()
        if run_path:
            print(f"\nMatch events saved to: {run_path}")


if __name__ == "__main__":
    main()
