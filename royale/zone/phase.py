"""
Zone phase definitions.

Each phase defines how long the zone waits, how long it takes to shrink,
the radius it shrinks to and how hard it hits participants left outside.
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple, Union

from ..core.exceptions import ConfigurationError


@dataclass(frozen=True)
class ZonePhase:
    """One step of the zone's shrink schedule."""
    phase_id: int
    wait_duration: int = 180       # seconds to wait before the next shrink
    shrink_duration: int = 60      # seconds for the shrink to complete
    target_radius: float = 500.0   # radius after the shrink
    damage_per_tick: float = 1.0   # damage dealt outside the zone per damage tick
    tick_interval: int = 20        # scheduler ticks between damage applications

    def __post_init__(self):
        # Out-of-range values are normalised, never rejected
        object.__setattr__(self, "wait_duration", max(0, int(self.wait_duration)))
        object.__setattr__(self, "shrink_duration", max(1, int(self.shrink_duration)))
        object.__setattr__(self, "target_radius", max(0.0, float(self.target_radius)))
        object.__setattr__(self, "damage_per_tick", max(0.0, float(self.damage_per_tick)))
        object.__setattr__(self, "tick_interval", max(1, int(self.tick_interval)))

    def __str__(self) -> str:
        return (f"ZonePhase {self.phase_id} (wait={self.wait_duration}s, shrink={self.shrink_duration}s, "
                f"radius={self.target_radius}, damage={self.damage_per_tick})")

    @property
    def total_duration(self) -> int:
        """Wait plus shrink time, in seconds."""
        return self.wait_duration + self.shrink_duration

    @property
    def is_final_phase(self) -> bool:
        """Check if the radius is small enough to count as a final circle."""
        return self.target_radius <= 20.0

    @classmethod
    def create_default(cls, phase_id: int) -> "ZonePhase":
        return cls(phase_id=phase_id)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], phase_id: Optional[int] = None) -> "ZonePhase":
        """
        Build a phase from a configuration mapping.

        Raises:
            ConfigurationError: If a value is not numeric, a key is unknown
                or the id is missing or not an integer
        """
        values: Dict[str, Any] = {}
        for key in ("wait_duration", "shrink_duration", "target_radius", "damage_per_tick", "tick_interval"):
            if key not in data:
                continue
            try:
                values[key] = float(data[key])
            except (TypeError, ValueError):
                raise ConfigurationError(key, f"Zone phase value '{key}' must be numeric, got {data[key]!r}")

        unknown = sorted(str(k) for k in set(data) - set(values) - {"id", "phase_id"})
        if unknown:
            raise ConfigurationError(unknown[0], f"Unknown zone phase keys: {unknown}")

        raw_id = data.get("phase_id", data.get("id", phase_id))
        if raw_id is None:
            raise ConfigurationError("phase_id", "Zone phase requires an id")
        try:
            parsed_id = int(raw_id)
        except (TypeError, ValueError):
            raise ConfigurationError("phase_id", f"Zone phase id must be an integer, got {raw_id!r}")
        return cls(phase_id=parsed_id, **values)


# Default shrink schedule: radius 750 -> 20, damage 1.0 -> 10.0
DEFAULT_PHASES: Tuple[ZonePhase, ...] = (
    ZonePhase(1, wait_duration=120, shrink_duration=60, target_radius=750, damage_per_tick=1.0, tick_interval=20),
    ZonePhase(2, wait_duration=120, shrink_duration=60, target_radius=500, damage_per_tick=2.0, tick_interval=20),
    ZonePhase(3, wait_duration=90, shrink_duration=45, target_radius=300, damage_per_tick=3.0, tick_interval=20),
    ZonePhase(4, wait_duration=90, shrink_duration=45, target_radius=150, damage_per_tick=4.0, tick_interval=20),
    ZonePhase(5, wait_duration=60, shrink_duration=30, target_radius=75, damage_per_tick=5.0, tick_interval=20),
    ZonePhase(6, wait_duration=60, shrink_duration=30, target_radius=40, damage_per_tick=7.0, tick_interval=20),
    ZonePhase(7, wait_duration=45, shrink_duration=30, target_radius=20, damage_per_tick=10.0, tick_interval=10),
)


class ZonePhaseTable:
    """Immutable ordered list of zone phases."""

    def __init__(self, phases: Iterable[Union[ZonePhase, Mapping[str, Any]]]):
        built: List[ZonePhase] = []
        for index, phase in enumerate(phases):
            if not isinstance(phase, ZonePhase):
                if not isinstance(phase, Mapping):
                    raise ConfigurationError("phases", f"Zone phase {index + 1} must be a mapping, got {phase!r}")
                phase = ZonePhase.from_dict(phase, phase_id=index + 1)
            built.append(phase)
        if not built:
            raise ConfigurationError("phases", "Zone phase table cannot be empty")
        self._phases: Tuple[ZonePhase, ...] = tuple(built)

    def __len__(self) -> int:
        return len(self._phases)

    def __getitem__(self, index: int) -> ZonePhase:
        return self._phases[index]

    def __iter__(self) -> Iterator[ZonePhase]:
        return iter(self._phases)

    def __repr__(self) -> str:
        return f"ZonePhaseTable({len(self._phases)} phases)"

    @property
    def last_index(self) -> int:
        return len(self._phases) - 1

    def is_last(self, index: int) -> bool:
        return index >= self.last_index

    def truncated(self, count: Optional[int]) -> "ZonePhaseTable":
        """Table limited to the first `count` phases (all phases if None)."""
        if count is None or count >= len(self._phases):
            return self
        return ZonePhaseTable(self._phases[:max(1, count)])


def default_phase_table() -> ZonePhaseTable:
    return ZonePhaseTable(DEFAULT_PHASES)
