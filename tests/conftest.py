"""
Pytest fixtures for match engine tests.
"""

import pytest
from dataclasses import replace
from unittest.mock import Mock
from typing import Iterable

from royale.config.game_config import GameConfig
from royale.core import ManualClock, TickScheduler, Position
from royale.core.director import MatchDirector
from royale.web.event_emitter import EventEmitter
from royale.zone import ZonePhase, ZonePhaseTable


SMALL_PHASES = [
    {"id": 1, "wait_duration": 10, "shrink_duration": 5, "target_radius": 100, "damage_per_tick": 1.0, "tick_interval": 20},
    {"id": 2, "wait_duration": 10, "shrink_duration": 10, "target_radius": 50, "damage_per_tick": 2.0, "tick_interval": 20},
    {"id": 3, "wait_duration": 5, "shrink_duration": 5, "target_radius": 10, "damage_per_tick": 5.0, "tick_interval": 10},
]


@pytest.fixture
def clock():
    """Deterministic clock starting at t=0."""
    return ManualClock()


@pytest.fixture
def scheduler():
    return TickScheduler()


@pytest.fixture
def small_phases():
    """Three-phase table: radius 100 -> 50 -> 10."""
    return ZonePhaseTable(ZonePhase.from_dict(p) for p in SMALL_PHASES)


@pytest.fixture
def game_config():
    """Test match configuration."""
    return GameConfig(
        min_players=2,
        max_players=10,
        auto_start=False,
        countdown_seconds=3,
        game_duration=3600,
        zone_grace_period=0,
        deathmatch_time_limit=600,
        phases=[dict(p) for p in SMALL_PHASES],
    )


@pytest.fixture
def emitter():
    """Mock notification sink."""
    return Mock(spec=EventEmitter)


@pytest.fixture
def make_director(game_config, clock, scheduler, emitter):
    """Factory for directors whose config differs from the test defaults."""
    def factory(**overrides):
        config = replace(game_config, **overrides)
        return MatchDirector(config, match_id="test", clock=clock, scheduler=scheduler, event_emitter=emitter)
    return factory


@pytest.fixture
def director(make_director):
    """Director for a fresh match in WAITING."""
    return make_director()


def _start_match(director: MatchDirector, participant_ids: Iterable[str]) -> MatchDirector:
    for participant_id in participant_ids:
        assert director.add_participant(participant_id, position=Position("world", 0.0, 0.0, 0.0))
    assert director.request_start()
    assert director.begin_match()
    return director


@pytest.fixture
def start_match():
    """Join participants at the zone center and move the match straight to ACTIVE."""
    return _start_match


@pytest.fixture
def active_director(director):
    """Director with p1..p4 joined and the match ACTIVE."""
    return _start_match(director, ["p1", "p2", "p3", "p4"])
