"""
Tests for match lifecycle states.
"""

import pytest
from royale.core import GameState, GameStateMachine, InvalidStateError, ManualClock


def test_state_order():
    """Test lifecycle order WAITING -> STARTING -> ACTIVE -> DEATHMATCH -> ENDING."""
    order = [GameState.WAITING, GameState.STARTING, GameState.ACTIVE, GameState.DEATHMATCH, GameState.ENDING]
    assert list(GameState) == order
    assert [s.ordinal for s in order] == [0, 1, 2, 3, 4]
    assert GameState.WAITING < GameState.ACTIVE
    assert GameState.ENDING > GameState.DEATHMATCH
    assert GameState.STARTING <= GameState.STARTING


@pytest.mark.parametrize("state,can_join,in_progress,has_started", [
    (GameState.WAITING, True, False, False),
    (GameState.STARTING, False, False, False),
    (GameState.ACTIVE, False, True, True),
    (GameState.DEATHMATCH, False, True, True),
    (GameState.ENDING, False, False, True),
])
def test_state_predicates(state, can_join, in_progress, has_started):
    """Test can_join / is_in_progress / has_started per state."""
    assert state.can_join is can_join
    assert state.is_in_progress is in_progress
    assert state.has_started is has_started


def test_predicate_invariants():
    """Joining and in-progress never overlap; in progress implies started."""
    for state in GameState:
        assert not (state.can_join and state.is_in_progress)
        if state.is_in_progress:
            assert state.has_started


def test_machine_starts_waiting():
    machine = GameStateMachine()
    assert machine.get_state() is GameState.WAITING
    assert machine.state is GameState.WAITING
    assert machine.history == []


def test_set_state_returns_previous():
    """Test set_state returns the previous state and records history."""
    machine = GameStateMachine()
    assert machine.set_state(GameState.STARTING) is GameState.WAITING
    assert machine.set_state(GameState.ACTIVE) is GameState.STARTING
    assert machine.get_state() is GameState.ACTIVE

    transitions = [(prev, new) for prev, new, _ in machine.history]
    assert transitions == [(GameState.WAITING, GameState.STARTING), (GameState.STARTING, GameState.ACTIVE)]


def test_set_state_allows_any_transition():
    """The holder does not police order: admin tooling may go backwards."""
    machine = GameStateMachine(GameState.ENDING)
    assert machine.set_state(GameState.WAITING) is GameState.ENDING
    assert machine.state is GameState.WAITING
    # Setting the same state is also allowed
    machine.set_state(GameState.WAITING)
    assert machine.state is GameState.WAITING


@pytest.mark.parametrize("value", [None, "active", 2])
def test_set_state_rejects_undefined_state(value):
    """Test undefined states raise InvalidStateError and leave the state unchanged."""
    machine = GameStateMachine()
    with pytest.raises(InvalidStateError) as exc_info:
        machine.set_state(value)
    assert exc_info.value.value == value
    assert machine.state is GameState.WAITING


def test_invalid_initial_state():
    with pytest.raises(InvalidStateError):
        GameStateMachine(None)


def test_is_forward():
    machine = GameStateMachine(GameState.ACTIVE)
    assert machine.is_forward(GameState.DEATHMATCH)
    assert not machine.is_forward(GameState.ACTIVE)
    assert not machine.is_forward(GameState.STARTING)


def test_history_uses_clock():
    """Test history timestamps come from the injected clock."""
    clock = ManualClock(5.0)
    machine = GameStateMachine(clock=clock)
    machine.set_state(GameState.STARTING)
    clock.set(8.0)
    machine.set_state(GameState.ACTIVE)

    assert [at for _, _, at in machine.history] == [5.0, 8.0]
