"""Simulation settings — workload shape, clock, and pacing.

A ``SimulationConfig`` gathers every knob the driver needs in one frozen
record.  The defaults reproduce the classic classroom demo: four
processes with bursts in ``[500, 1000)``, priorities in ``[0, 10)``,
100-unit ticks, and a Round-Robin quantum of 200.

Settings can also come from a JSON file; missing keys fall back to the
defaults::

    {"process_count": 3, "quantum": 100, "seed": 7}
"""

from __future__ import annotations

import json
from dataclasses import dataclass, fields, replace
from typing import TYPE_CHECKING, Any

from py_sched.scheduler import DEFAULT_QUANTUM, DEFAULT_TICK
from py_sched.workload import (
    DEFAULT_BURST_RANGE,
    DEFAULT_COUNT,
    DEFAULT_PRIORITY_RANGE,
    WorkloadGenerator,
)

if TYPE_CHECKING:
    from pathlib import Path

_RANGE_FIELDS = ("burst_range", "priority_range")


class ConfigError(ValueError):
    """Raise when a configuration file cannot be read or makes no sense."""


@dataclass(frozen=True)
class SimulationConfig:
    """Settings for one simulation session.

    Attributes:
        process_count: Processes per generated workload.
        burst_range: Half-open range for generated burst times.
        priority_range: Half-open range for generated priorities.
        tick: Simulated time per progress step.
        quantum: Round-Robin time quantum.
        pace_delay: Wall-clock seconds the REPL waits per tick (0 = no wait).
        type_delay: Wall-clock seconds per character of typed-out text.
        seed: RNG seed for reproducible workloads, or None.

    """

    process_count: int = DEFAULT_COUNT
    burst_range: tuple[int, int] = DEFAULT_BURST_RANGE
    priority_range: tuple[int, int] = DEFAULT_PRIORITY_RANGE
    tick: int = DEFAULT_TICK
    quantum: int = DEFAULT_QUANTUM
    pace_delay: float = 0.1
    type_delay: float = 0.01
    seed: int | None = None

    def __post_init__(self) -> None:
        """Reject settings no run could use.

        Raises:
            ConfigError: If a count, clock or range is out of bounds.

        """
        if self.process_count < 0:
            msg = f"process_count must be >= 0, got {self.process_count}"
            raise ConfigError(msg)
        for key in ("tick", "quantum"):
            value = getattr(self, key)
            if value <= 0:
                msg = f"{key} must be > 0, got {value}"
                raise ConfigError(msg)
        for key in ("pace_delay", "type_delay"):
            value = getattr(self, key)
            if value < 0:
                msg = f"{key} must be >= 0, got {value}"
                raise ConfigError(msg)
        for key in _RANGE_FIELDS:
            low, high = getattr(self, key)
            if low >= high:
                msg = f"{key} must be a non-empty [low, high) range, got {(low, high)}"
                raise ConfigError(msg)
        if self.burst_range[0] < 0:
            msg = f"burst_range must not be negative, got {self.burst_range}"
            raise ConfigError(msg)

    def workload_generator(self) -> WorkloadGenerator:
        """Return a generator that builds workloads with these settings."""
        return WorkloadGenerator(
            count=self.process_count,
            burst_range=self.burst_range,
            priority_range=self.priority_range,
            seed=self.seed,
        )

    def with_overrides(self, **changes: Any) -> SimulationConfig:
        """Return a copy with *changes* applied, ignoring ``None`` values."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SimulationConfig:
        """Build a config from a plain dict, rejecting unknown keys.

        Raises:
            ConfigError: On unknown keys or malformed ranges.

        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            msg = f"Unknown config keys: {', '.join(unknown)}"
            raise ConfigError(msg)
        values = dict(data)
        for key in _RANGE_FIELDS:
            if key in values:
                bounds = values[key]
                if not isinstance(bounds, (list, tuple)) or len(bounds) != 2:  # noqa: PLR2004
                    msg = f"{key} must be a [low, high] pair, got {bounds!r}"
                    raise ConfigError(msg)
                try:
                    values[key] = (int(bounds[0]), int(bounds[1]))
                except (TypeError, ValueError) as e:
                    msg = f"{key} bounds must be integers, got {bounds!r}"
                    raise ConfigError(msg) from e
        return cls(**values)

    @classmethod
    def from_json(cls, path: Path) -> SimulationConfig:
        """Load a config from a JSON file.

        Raises:
            ConfigError: If the file cannot be read or parsed.

        """
        try:
            data = json.loads(path.read_text())
        except (OSError, json.JSONDecodeError) as e:
            msg = f"Cannot load config: {e}"
            raise ConfigError(msg) from e
        if not isinstance(data, dict):
            msg = f"Config must be a JSON object, got {type(data).__name__}"
            raise ConfigError(msg)
        return cls.from_dict(data)
