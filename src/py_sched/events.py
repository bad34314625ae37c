"""Events the scheduler emits while a run progresses.

A run is a lazy sequence of these records.  They are frozen dataclasses
so a consumer (renderer, web API, test) can hold on to them without
worrying that the scheduler will change them later.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass

from py_sched.process import ProcessSnapshot, ProcessState


@dataclass(frozen=True)
class TransitionEvent:
    """A process moved from one state to another."""

    pid: int
    old_state: ProcessState
    new_state: ProcessState
    algorithm: str
    time: int


@dataclass(frozen=True)
class SnapshotEvent:
    """The full process list, taken right after a transition."""

    processes: tuple[ProcessSnapshot, ...]
    time: int


@dataclass(frozen=True)
class ProgressEvent:
    """One tick of CPU time went to *pid*.

    ``percent`` is the share of the run's total work done so far,
    ``elapsed * 100 // total`` clamped to 100.
    """

    pid: int
    executed: int
    elapsed: int
    percent: int


@dataclass(frozen=True)
class SliceEvent:
    """A process gave up the CPU after running for *duration*.

    ``state`` is where the slice left it: PAUSED or COMPLETED.
    """

    pid: int
    duration: int
    remaining: int
    state: ProcessState


@dataclass(frozen=True)
class RunCompletedEvent:
    """Every process has finished; emitted exactly once per run."""

    algorithm: str
    elapsed: int
    completion_order: tuple[int, ...]


SchedulerEvent = TransitionEvent | SnapshotEvent | ProgressEvent | SliceEvent | RunCompletedEvent

_EVENT_TYPES: dict[type, str] = {
    TransitionEvent: "transition",
    SnapshotEvent: "snapshot",
    ProgressEvent: "progress",
    SliceEvent: "slice",
    RunCompletedEvent: "completed",
}


def event_to_dict(event: SchedulerEvent) -> dict[str, object]:
    """Return a JSON-ready dict for *event*, tagged with a ``type`` key."""
    data: dict[str, object] = {"type": _EVENT_TYPES[type(event)]}
    data.update(asdict(event))
    return data
