"""
Shrinking safe zone: phase table, zone geometry and the zone engine.
"""

from .phase import ZonePhase, ZonePhaseTable, DEFAULT_PHASES, default_phase_table
from .zone import Zone
from .zone_engine import ZoneEngine, ZoneStatus

__all__ = [
    'ZonePhase',
    'ZonePhaseTable',
    'DEFAULT_PHASES',
    'default_phase_table',
    'Zone',
    'ZoneEngine',
    'ZoneStatus',
]
