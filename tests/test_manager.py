"""
Tests for the match manager: registry, membership and cleanup.
"""

import pytest
from dataclasses import replace

from royale.core import GameState
from royale.core.manager import MatchManager


@pytest.fixture
def manager(clock, emitter):
    return MatchManager(clock=clock, event_emitter=emitter)


def test_create_match_ids(manager, game_config):
    first = manager.create_match(game_config)
    second = manager.create_match(game_config)

    assert first.match_id == "match-1"
    assert second.match_id == "match-2"
    assert first.scheduler is not second.scheduler
    assert manager.match_count == 2
    assert manager.get_match("match-2") is second
    assert manager.get_match("match-3") is None


def test_matches_is_a_copy(manager, game_config):
    manager.create_match(game_config)
    manager.matches.clear()
    assert manager.match_count == 1


def test_one_match_per_participant(manager, game_config):
    """Test a participant cannot join a second match while in one."""
    first = manager.create_match(game_config)
    second = manager.create_match(game_config)

    assert manager.join_match("p1", first.match_id, name="Alice")
    assert not manager.join_match("p1", second.match_id)
    assert second.get_participant("p1") is None

    assert manager.is_in_match("p1")
    assert manager.get_participant_match("p1") is first
    assert first.get_participant("p1").name == "Alice"


def test_join_refused(manager, game_config):
    director = manager.create_match(replace(game_config, max_players=1))

    assert not manager.join_match("p1", "missing")
    assert manager.join_match("p1", director.match_id)
    assert not manager.join_match("p2", director.match_id)
    assert not manager.is_in_match("p2")
    assert manager.get_participant_match("p2") is None


def test_leave_match(manager, game_config):
    director = manager.create_match(game_config)
    manager.join_match("p1", director.match_id)

    assert manager.leave_match("p1")
    assert not manager.is_in_match("p1")
    assert director.get_participant("p1") is None
    assert not manager.leave_match("p1")


def test_leave_running_match_eliminates(manager, game_config):
    director = manager.create_match(game_config)
    for participant_id in ["p1", "p2", "p3"]:
        manager.join_match(participant_id, director.match_id)
    director.request_start()
    director.begin_match()

    assert manager.leave_match("p1")
    assert not director.get_participant("p1").alive
    assert director.eliminations[-1].cause == "disconnect"


def test_find_joinable_match(manager, game_config):
    """Test the search skips full lobbies and started matches."""
    full = manager.create_match(replace(game_config, max_players=1))
    started = manager.create_match(game_config)
    open_match = manager.create_match(game_config)

    manager.join_match("p1", full.match_id)
    manager.join_match("p2", started.match_id)
    manager.join_match("p3", started.match_id)
    started.request_start()

    assert manager.find_joinable_match() is open_match

    manager.delete_match(open_match.match_id)
    assert manager.find_joinable_match() is None


def test_delete_match_releases_participants(manager, game_config):
    director = manager.create_match(game_config)
    manager.join_match("p1", director.match_id)

    assert manager.delete_match(director.match_id)
    assert not manager.is_in_match("p1")
    assert manager.match_count == 0
    assert not manager.delete_match(director.match_id)


def test_cleanup_removes_ended_match(manager, game_config, clock):
    """Test ended matches stay visible for 15 seconds."""
    director = manager.create_match(game_config)
    manager.join_match("p1", director.match_id)
    manager.join_match("p2", director.match_id)
    director.request_start()
    director.begin_match()

    clock.set(100.0)
    director.end_match("admin")

    clock.set(114.0)
    assert manager.cleanup() == []
    assert manager.get_match(director.match_id) is director

    clock.set(115.0)
    assert manager.cleanup() == [director.match_id]
    assert manager.match_count == 0
    assert not manager.is_in_match("p1")


def test_cleanup_removes_empty_lobby(manager, game_config, clock):
    """Test lobbies left empty for 300 seconds are removed, occupied ones are kept."""
    empty = manager.create_match(game_config)
    occupied = manager.create_match(game_config)
    manager.join_match("p1", occupied.match_id)

    clock.set(299.0)
    assert manager.cleanup() == []

    clock.set(300.0)
    assert manager.cleanup() == [empty.match_id]
    assert manager.get_match(occupied.match_id) is occupied


def test_tick_drives_matches(manager, game_config):
    """Test manager ticks run each match's countdown."""
    director = manager.create_match(game_config)
    manager.join_match("p1", director.match_id)
    manager.join_match("p2", director.match_id)
    director.request_start()

    for _ in range(61):
        manager.tick()

    assert director.state is GameState.ACTIVE


def test_tick_runs_cleanup_every_five_seconds(clock, game_config):
    """Test tick() only runs the cleanup pass once per cleanup interval."""
    manager = MatchManager(clock=clock, ended_retention=1.0)
    director = manager.create_match(game_config)
    manager.join_match("p1", director.match_id)
    manager.join_match("p2", director.match_id)
    director.request_start()
    director.begin_match()
    director.end_match("admin")

    clock.set(4.0)
    manager.tick()
    assert manager.get_match(director.match_id) is director

    clock.set(5.0)
    manager.tick()
    assert manager.match_count == 0


def test_shutdown(manager, game_config):
    """Test shutdown ends running matches and clears the registry."""
    running = manager.create_match(game_config)
    lobby = manager.create_match(game_config)
    manager.join_match("p1", running.match_id)
    manager.join_match("p2", running.match_id)
    manager.join_match("p3", lobby.match_id)
    running.request_start()
    running.begin_match()

    manager.shutdown()

    assert running.state is GameState.ENDING
    assert running.match.end_reason == "shutdown"
    assert lobby.state is GameState.WAITING
    assert manager.match_count == 0
    assert not manager.is_in_match("p1")
