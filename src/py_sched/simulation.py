"""Simulation driver — pick an algorithm, run it, collect the results.

This is the seam the REPL and the web API talk to.  Everything here is
a thin layer over ``Scheduler.run``:

- ``make_policy`` maps an algorithm name to a policy instance.
- ``simulate`` consumes the whole event stream and wraps it in a
  ``SimulationResult`` with convenient views (orders, slices, metrics).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from functools import cached_property
from typing import TYPE_CHECKING

from py_sched.events import (
    ProgressEvent,
    RunCompletedEvent,
    SchedulerEvent,
    SliceEvent,
    SnapshotEvent,
)
from py_sched.metrics import RunMetrics, compute_metrics
from py_sched.scheduler import (
    DEFAULT_QUANTUM,
    DEFAULT_TICK,
    FIFOPolicy,
    PriorityPolicy,
    RoundRobinPolicy,
    Scheduler,
    SchedulingPolicy,
)

if TYPE_CHECKING:
    from collections.abc import Iterable

    from py_sched.logging import Logger
    from py_sched.process import Process, ProcessState


class Algorithm(StrEnum):
    """The scheduling algorithms a user can choose from."""

    FIFO = "fifo"
    ROUND_ROBIN = "round-robin"
    PRIORITY = "priority"


def make_policy(algorithm: str, *, quantum: int = DEFAULT_QUANTUM) -> SchedulingPolicy:
    """Return the policy for *algorithm*.

    Args:
        algorithm: One of the ``Algorithm`` values (``"fifo"``, ...).
        quantum: Time quantum, used only by Round-Robin.

    Raises:
        ValueError: If the algorithm name is unknown.
        InvalidQuantumError: If Round-Robin is chosen with quantum <= 0.

    """
    match algorithm:
        case Algorithm.FIFO:
            return FIFOPolicy()
        case Algorithm.ROUND_ROBIN:
            return RoundRobinPolicy(quantum=quantum)
        case Algorithm.PRIORITY:
            return PriorityPolicy()
        case _:
            msg = f"Unknown scheduling algorithm: {algorithm}"
            raise ValueError(msg)


@dataclass(frozen=True)
class SimulationResult:
    """Everything that happened during one run."""

    algorithm: str
    events: tuple[SchedulerEvent, ...]

    @property
    def slices(self) -> tuple[SliceEvent, ...]:
        """Return every execution slice in order."""
        return tuple(e for e in self.events if isinstance(e, SliceEvent))

    @property
    def execution_order(self) -> tuple[int, ...]:
        """Return the PID that held the CPU for each slice."""
        return tuple(s.pid for s in self.slices)

    @property
    def progress(self) -> tuple[int, ...]:
        """Return every progress percentage reported, tick by tick."""
        return tuple(e.percent for e in self.events if isinstance(e, ProgressEvent))

    @property
    def completion(self) -> RunCompletedEvent:
        """Return the run's final event."""
        last = self.events[-1]
        if not isinstance(last, RunCompletedEvent):
            msg = "Run did not finish"
            raise RuntimeError(msg)
        return last

    @property
    def completion_order(self) -> tuple[int, ...]:
        """Return PIDs in the order they completed."""
        return self.completion.completion_order

    @property
    def elapsed(self) -> int:
        """Return the total simulated time of the run."""
        return self.completion.elapsed

    @property
    def final_states(self) -> dict[int, ProcessState]:
        """Return each PID's state in the last snapshot."""
        snapshots = [e for e in self.events if isinstance(e, SnapshotEvent)]
        return {s.pid: s.state for s in snapshots[-1].processes}

    @cached_property
    def metrics(self) -> RunMetrics:
        """Return timing metrics derived from the events."""
        return compute_metrics(self.events)


def simulate(
    policy: SchedulingPolicy,
    processes: Iterable[Process],
    *,
    tick: int = DEFAULT_TICK,
    logger: Logger | None = None,
) -> SimulationResult:
    """Run *processes* to completion under *policy* and collect the events."""
    scheduler = Scheduler(policy=policy, tick=tick, logger=logger)
    events = tuple(scheduler.run(processes))
    return SimulationResult(algorithm=policy.name, events=events)
