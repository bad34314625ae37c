"""Workload generator — builds the processes a simulation runs on.

The generator is the only source of randomness in the package.  Pass a
``seed`` (or your own ``random.Random``) to make a run reproducible;
leave both out and every run gets a fresh workload.
"""

from __future__ import annotations

import random
from typing import TYPE_CHECKING

from py_sched.process import Process

if TYPE_CHECKING:
    from collections.abc import Sequence

DEFAULT_COUNT = 4
DEFAULT_BURST_RANGE = (500, 1000)
DEFAULT_PRIORITY_RANGE = (0, 10)


def _check_range(name: str, bounds: tuple[int, int]) -> None:
    low, high = bounds
    if low >= high:
        msg = f"{name} must be a non-empty [low, high) range, got {bounds}"
        raise ValueError(msg)


class WorkloadGenerator:
    """Generate a fixed-size list of READY processes.

    PIDs are assigned ``1..count`` in order; that order is the arrival
    order every scheduler respects.
    """

    def __init__(
        self,
        *,
        count: int = DEFAULT_COUNT,
        burst_range: tuple[int, int] = DEFAULT_BURST_RANGE,
        priority_range: tuple[int, int] = DEFAULT_PRIORITY_RANGE,
        seed: int | None = None,
        rng: random.Random | None = None,
    ) -> None:
        """Create a generator.

        Args:
            count: Number of processes per workload.
            burst_range: Half-open ``[low, high)`` range for burst times.
            priority_range: Half-open ``[low, high)`` range for priorities.
            seed: Seed for a private RNG (ignored when *rng* is given).
            rng: Random source to draw from.

        Raises:
            ValueError: On a negative count or an empty/negative range.

        """
        if count < 0:
            msg = f"count must be >= 0, got {count}"
            raise ValueError(msg)
        _check_range("burst_range", burst_range)
        _check_range("priority_range", priority_range)
        if burst_range[0] < 0:
            msg = f"burst times cannot be negative, got {burst_range}"
            raise ValueError(msg)
        self._count = count
        self._burst_range = burst_range
        self._priority_range = priority_range
        self._rng = rng if rng is not None else random.Random(seed)  # noqa: S311

    @property
    def count(self) -> int:
        """Return the number of processes per workload."""
        return self._count

    def generate(self) -> list[Process]:
        """Return a new workload of READY processes."""
        return [
            Process(
                pid=pid,
                burst_time=self._rng.randrange(*self._burst_range),
                priority=self._rng.randrange(*self._priority_range),
            )
            for pid in range(1, self._count + 1)
        ]


def workload_from_bursts(
    bursts: Sequence[int],
    priorities: Sequence[int] | None = None,
) -> list[Process]:
    """Build a deterministic workload from explicit burst times.

    Args:
        bursts: Burst time for each process, in arrival order.
        priorities: Matching priorities (all 0 when omitted).

    Raises:
        ValueError: If the two sequences differ in length.

    """
    if priorities is None:
        priorities = [0] * len(bursts)
    if len(priorities) != len(bursts):
        msg = f"got {len(bursts)} bursts but {len(priorities)} priorities"
        raise ValueError(msg)
    return [
        Process(pid=pid, burst_time=burst, priority=priority)
        for pid, (burst, priority) in enumerate(zip(bursts, priorities, strict=True), start=1)
    ]
