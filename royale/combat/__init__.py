"""Combat attribution for kills, assists and damage totals."""

from .attribution import CombatAttributionEngine, CombatRecord, DEFAULT_COMBAT_WINDOW

__all__ = ['CombatAttributionEngine', 'CombatRecord', 'DEFAULT_COMBAT_WINDOW']
