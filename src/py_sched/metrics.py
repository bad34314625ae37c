"""Timing metrics — how long each process waited, and how long it took.

Every process in a workload arrives at time 0, so for each one:

- **response time** — when it first got the CPU.
- **turnaround time** — when it completed.
- **waiting time** — turnaround minus the CPU time it actually used.

The numbers are derived purely from a run's events, so they can be
computed after the fact for any algorithm.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from py_sched.events import (
    RunCompletedEvent,
    SliceEvent,
    SnapshotEvent,
    TransitionEvent,
)
from py_sched.process import ProcessState

if TYPE_CHECKING:
    from collections.abc import Iterable

    from py_sched.events import SchedulerEvent


@dataclass(frozen=True)
class ProcessMetrics:
    """Timing figures for one process."""

    pid: int
    burst_time: int
    response_time: int
    turnaround_time: int
    waiting_time: int
    slices: int


@dataclass(frozen=True)
class RunMetrics:
    """Timing figures for a whole run."""

    processes: tuple[ProcessMetrics, ...]
    elapsed: int
    context_switches: int

    def _average(self, values: list[int]) -> float:
        if not values:
            return 0.0
        return sum(values) / len(values)

    @property
    def avg_waiting_time(self) -> float:
        """Return the mean waiting time (0.0 for an empty run)."""
        return self._average([p.waiting_time for p in self.processes])

    @property
    def avg_turnaround_time(self) -> float:
        """Return the mean turnaround time (0.0 for an empty run)."""
        return self._average([p.turnaround_time for p in self.processes])

    @property
    def avg_response_time(self) -> float:
        """Return the mean response time (0.0 for an empty run)."""
        return self._average([p.response_time for p in self.processes])

    def as_dict(self) -> dict[str, float | int]:
        """Return the run-level summary as a flat dict."""
        return {
            "elapsed": self.elapsed,
            "context_switches": self.context_switches,
            "avg_waiting_time": self.avg_waiting_time,
            "avg_turnaround_time": self.avg_turnaround_time,
            "avg_response_time": self.avg_response_time,
        }


def compute_metrics(events: Iterable[SchedulerEvent]) -> RunMetrics:
    """Aggregate a finished run's events into timing metrics.

    Processes that never completed (e.g. a run that stopped on an ERROR
    state) are left out of the per-process figures.
    """
    bursts: dict[int, int] = {}
    first_dispatch: dict[int, int] = {}
    finished_at: dict[int, int] = {}
    slices: dict[int, int] = {}
    switches = 0
    last_pid: int | None = None
    elapsed = 0

    for event in events:
        match event:
            case SnapshotEvent(processes=snapshots, time=0) if not bursts:
                bursts = {s.pid: s.burst_time for s in snapshots}
            case TransitionEvent(pid=pid, new_state=ProcessState.RUNNING, time=time):
                if last_pid is not None and pid != last_pid:
                    switches += 1
                last_pid = pid
                first_dispatch.setdefault(pid, time)
            case TransitionEvent(pid=pid, new_state=ProcessState.COMPLETED, time=time):
                finished_at[pid] = time
            case SliceEvent(pid=pid):
                slices[pid] = slices.get(pid, 0) + 1
            case RunCompletedEvent(elapsed=total):
                elapsed = total
            case _:
                pass

    per_process = tuple(
        ProcessMetrics(
            pid=pid,
            burst_time=burst,
            response_time=first_dispatch[pid],
            turnaround_time=finished_at[pid],
            waiting_time=finished_at[pid] - burst,
            slices=slices.get(pid, 0),
        )
        for pid, burst in bursts.items()
        if pid in finished_at
    )
    return RunMetrics(
        processes=per_process,
        elapsed=elapsed,
        context_switches=switches,
    )
