"""
Tests for combat attribution: killer, assists, in-combat and damage totals.
"""

import threading

import pytest
from royale.combat import CombatAttributionEngine


@pytest.fixture
def combat(clock):
    return CombatAttributionEngine(clock=clock)


def test_killer_and_assists(combat, clock):
    """Test p3 then p2 hit p1 within the window: p2 kills, p3 assists."""
    clock.set(0.0)
    combat.record_damage("p1", "p3", 3)
    clock.set(1.0)
    combat.record_damage("p1", "p2", 4)
    clock.set(2.0)
    combat.record_damage("p1", "p3", 2)
    clock.set(3.0)
    combat.record_damage("p1", "p2", 5)

    clock.set(4.0)
    assert combat.get_killer("p1") == "p2"
    assert combat.get_assisters("p1", "p2") == ["p3"]
    assert combat.get_damage_dealt("p2") == 9
    assert combat.get_damage_dealt("p3") == 5
    assert combat.get_damage_taken("p1") == 14


def test_queries_do_not_consume(combat):
    combat.record_damage("p1", "p2", 1)
    assert combat.get_killer("p1") == "p2"
    assert combat.get_killer("p1") == "p2"
    assert len(combat.get_recent_records("p1")) == 1


def test_killer_expires(combat, clock):
    """Test a hit older than the window no longer counts as the killer."""
    combat.record_damage("p1", "p2", 5)

    clock.set(10.0)
    assert combat.get_killer("p1") == "p2"

    clock.set(10.5)
    assert combat.get_killer("p1") is None
    assert combat.get_assisters("p1") == []
    # Totals are kept for the whole match
    assert combat.get_damage_dealt("p2") == 5


def test_assisters_only_in_window(combat, clock):
    combat.record_damage("p1", "p4", 1)
    clock.set(8.0)
    combat.record_damage("p1", "p3", 1)
    clock.set(12.0)
    combat.record_damage("p1", "p2", 1)

    assert combat.get_killer("p1") == "p2"
    assert combat.get_assisters("p1", "p2") == ["p3"]


def test_assisters_without_killer(combat):
    """Test that without a killer every distinct attacker is an assister."""
    combat.record_damage("p1", "p2", 1)
    combat.record_damage("p1", "p3", 1)
    combat.record_damage("p1", "p2", 1)

    assert combat.get_assisters("p1") == ["p2", "p3"]


def test_environmental_damage(combat):
    """Test zone damage has no attacker and takes over the last hit."""
    combat.record_damage("p1", "p2", 4)
    combat.record_damage("p1", None, 2)

    assert combat.get_killer("p1") is None
    assert combat.get_assisters("p1") == ["p2"]
    assert combat.get_damage_taken("p1") == 6
    assert combat.get_damage_dealt("p2") == 4


def test_unknown_participant(combat):
    assert combat.get_killer("nobody") is None
    assert combat.get_assisters("nobody") == []
    assert not combat.is_in_combat("nobody")
    assert combat.get_damage_dealt("nobody") == 0.0
    assert combat.get_damage_taken("nobody") == 0.0


def test_victim_required(combat):
    with pytest.raises(ValueError):
        combat.record_damage(None, "p2", 1)


def test_in_combat_both_sides(combat, clock):
    """Test attacker and victim are both in combat until the window passes."""
    combat.record_damage("p1", "p2", 1)

    assert combat.is_in_combat("p1")
    assert combat.is_in_combat("p2")
    assert not combat.is_in_combat("p3")

    clock.set(11.0)
    assert not combat.is_in_combat("p1")
    assert not combat.is_in_combat("p2")


def test_clear_player(combat):
    """Test clearing removes the participant as victim and as attacker."""
    combat.record_damage("p1", "p2", 3)
    combat.record_damage("p2", "p3", 4)
    combat.record_damage("p3", "p1", 5)

    combat.clear_player("p1")

    assert combat.get_killer("p1") is None
    assert combat.get_damage_taken("p1") == 0.0
    assert combat.get_damage_dealt("p1") == 0.0
    assert combat.get_killer("p3") is None
    assert combat.get_killer("p2") == "p3"
    assert not combat.is_in_combat("p1")
    # Totals of others are untouched
    assert combat.get_damage_dealt("p2") == 3


def test_clear_all(combat):
    combat.record_damage("p1", "p2", 3)
    combat.clear_all()
    assert combat.get_killer("p1") is None
    assert combat.get_damage_dealt("p2") == 0.0


def test_custom_window(clock):
    combat = CombatAttributionEngine(clock=clock, window=2.0)
    combat.record_damage("p1", "p2", 1)
    clock.set(3.0)
    assert combat.get_killer("p1") is None


def test_concurrent_recording(combat):
    """Test totals stay exact when many threads record at once."""
    def worker(attacker_id):
        for _ in range(500):
            combat.record_damage("target", attacker_id, 1.0)

    threads = [threading.Thread(target=worker, args=(f"p{i}",)) for i in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert combat.get_damage_taken("target") == 4000.0
    for i in range(8):
        assert combat.get_damage_dealt(f"p{i}") == 500.0
    assert len(combat.get_assisters("target")) == 8
