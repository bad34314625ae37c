"""CPU scheduler — decides which process gets the CPU, and for how long.

The scheduler owns the ready queue and delegates the *ordering* decision
to a pluggable SchedulingPolicy.  Three policies ship out of the box:

- **FIFOPolicy** (First Come, First Served): processes run in arrival
  order, each one to completion.  Simple, but a long process makes
  everyone behind it wait (convoy effect).
- **RoundRobinPolicy**: each process gets a fixed time quantum, then is
  paused and sent to the back of the queue.  Fairer, at the cost of more
  context switches.
- **PriorityPolicy**: processes are sorted once by priority (lower
  number first, ties keep arrival order) and then run like FIFO.  A
  low-priority process can wait a long time.

Design: Strategy pattern
    The Scheduler is the *context*; SchedulingPolicy is the *strategy*.
    The scheduler never sleeps or prints.  ``Scheduler.run`` returns a
    lazy stream of events and the caller decides how fast to consume it.
"""

from __future__ import annotations

from collections import deque
from typing import TYPE_CHECKING, Protocol

from py_sched.events import (
    ProgressEvent,
    RunCompletedEvent,
    SchedulerEvent,
    SliceEvent,
    SnapshotEvent,
    TransitionEvent,
)
from py_sched.logging import Logger, LogLevel
from py_sched.process import InvariantViolationError, Process, ProcessState

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Iterator, Sequence

DEFAULT_TICK = 100
DEFAULT_QUANTUM = 200


class SchedulingError(Exception):
    """Base class for input the scheduler refuses to run."""


class InvalidQuantumError(SchedulingError, ValueError):
    """Raise when a Round-Robin quantum is not a positive number."""


class InvalidWorkloadError(SchedulingError, ValueError):
    """Raise when a workload cannot be scheduled (duplicate PIDs, bad states)."""


class SchedulingPolicy(Protocol):
    """Interface that every scheduling algorithm must satisfy.

    - arrange: put the workload into initial queue order.
    - select: pick the next process from the ready queue.
    - time_slice: how long the selected process may run this turn.
    - on_preempt: decide where to re-insert a paused process.
    """

    @property
    def name(self) -> str:
        """Return the algorithm name used in events and logs."""
        ...  # pragma: no cover

    def arrange(self, processes: Sequence[Process]) -> list[Process]:
        """Return the processes in the order they enter the ready queue."""
        ...  # pragma: no cover

    def select(self, ready_queue: deque[Process]) -> Process | None:
        """Remove and return the next process to run, or None if empty."""
        ...  # pragma: no cover

    def time_slice(self, process: Process) -> int:
        """Return how much CPU time *process* gets this turn."""
        ...  # pragma: no cover

    def on_preempt(self, ready_queue: deque[Process], process: Process) -> None:
        """Re-insert a paused process into the ready queue."""
        ...  # pragma: no cover


class FIFOPolicy:
    """First Come, First Served — processes run in arrival order.

    Whatever arrived first gets dispatched first and keeps the CPU
    until it is done.  No process is ever paused.
    """

    name = "FIFO"

    def arrange(self, processes: Sequence[Process]) -> list[Process]:
        """Keep arrival order."""
        return list(processes)

    def select(self, ready_queue: deque[Process]) -> Process | None:
        """Pop the front of the queue (oldest arrival)."""
        if not ready_queue:
            return None
        return ready_queue.popleft()

    def time_slice(self, process: Process) -> int:
        """Run to completion."""
        return process.burst_time

    def on_preempt(self, ready_queue: deque[Process], process: Process) -> None:
        """Append to the back (never happens for a run-to-completion slice)."""
        ready_queue.append(process)


class RoundRobinPolicy:
    """Round Robin — each process gets a fixed time quantum.

    Behaves like FIFO for ordering, but a process only keeps the CPU for
    ``quantum`` time units.  If it still has work left it is paused and
    rejoins the queue behind everyone currently waiting.
    """

    name = "Round-Robin"

    def __init__(self, *, quantum: int = DEFAULT_QUANTUM) -> None:
        """Create a Round Robin policy with the given time quantum.

        Args:
            quantum: Time units per slice.

        Raises:
            InvalidQuantumError: If quantum is not positive.

        """
        if quantum <= 0:
            msg = f"Round-Robin quantum must be > 0, got {quantum}"
            raise InvalidQuantumError(msg)
        self._quantum = quantum

    @property
    def quantum(self) -> int:
        """Return the time quantum."""
        return self._quantum

    def arrange(self, processes: Sequence[Process]) -> list[Process]:
        """Keep arrival order."""
        return list(processes)

    def select(self, ready_queue: deque[Process]) -> Process | None:
        """Pop the front of the queue — same as FIFO for selection."""
        if not ready_queue:
            return None
        return ready_queue.popleft()

    def time_slice(self, process: Process) -> int:
        """Return ``min(burst_time, quantum)``."""
        return min(process.burst_time, self._quantum)

    def on_preempt(self, ready_queue: deque[Process], process: Process) -> None:
        """Append the paused process to the back — round-robin cycle."""
        ready_queue.append(process)


class PriorityPolicy:
    """Static priority scheduling — lower priority number runs first.

    The workload is sorted once, up front.  ``sorted`` is stable, so
    equal priorities keep their arrival order.  After that it is plain
    FIFO: non-preemptive, no re-queueing.
    """

    name = "Priority"

    def arrange(self, processes: Sequence[Process]) -> list[Process]:
        """Sort by ascending priority, arrival order breaking ties."""
        return sorted(processes, key=lambda p: p.priority)

    def select(self, ready_queue: deque[Process]) -> Process | None:
        """Pop the front of the (already sorted) queue."""
        if not ready_queue:
            return None
        return ready_queue.popleft()

    def time_slice(self, process: Process) -> int:
        """Run to completion."""
        return process.burst_time

    def on_preempt(self, ready_queue: deque[Process], process: Process) -> None:
        """Append to the back (never happens for a run-to-completion slice)."""
        ready_queue.append(process)


def progress_percent(elapsed: int, total: int) -> int:
    """Return ``elapsed * 100 // total`` clamped to 100 (100 when total is 0)."""
    if total <= 0:
        return 100
    return min(elapsed * 100 // total, 100)


class Scheduler:
    """The CPU scheduler — runs a workload under a policy.

    The scheduler does not *decide* the ordering — that's the policy's
    job.  It orchestrates: it takes its own copies of the processes,
    calls the policy, advances simulated time tick by tick, and reports
    every change as an event.
    """

    def __init__(
        self,
        *,
        policy: SchedulingPolicy,
        tick: int = DEFAULT_TICK,
        logger: Logger | None = None,
    ) -> None:
        """Create a scheduler with the given scheduling policy.

        Args:
            policy: The algorithm that determines dispatch order.
            tick: Simulated time per progress step.
            logger: Where to record transitions, if anywhere.

        Raises:
            ValueError: If tick is not positive.

        """
        if tick <= 0:
            msg = f"tick must be > 0, got {tick}"
            raise ValueError(msg)
        self._policy = policy
        self._tick = tick
        self._logger = logger

    @property
    def policy(self) -> SchedulingPolicy:
        """Return the scheduling policy."""
        return self._policy

    @property
    def tick(self) -> int:
        """Return the simulated time per progress step."""
        return self._tick

    def run(self, processes: Iterable[Process]) -> Iterator[SchedulerEvent]:
        """Validate *processes* and return the event stream of a full run.

        Validation happens immediately; the run itself only advances as
        the returned iterator is consumed.  The caller's process objects
        are copied and never modified.

        Raises:
            InvalidWorkloadError: On duplicate PIDs or a process that is
                not READY.

        """
        owned = [p.clone() for p in processes]
        seen: set[int] = set()
        for process in owned:
            if process.pid in seen:
                msg = f"Duplicate pid {process.pid} in workload"
                raise InvalidWorkloadError(msg)
            if process.state is not ProcessState.READY:
                msg = f"Process {process.pid} is {process.state}, expected ready"
                raise InvalidWorkloadError(msg)
            seen.add(process.pid)
        return self._execute(self._policy.arrange(owned))

    def _log(self, message: str, *, time: int, level: LogLevel = LogLevel.INFO) -> None:
        if self._logger is not None:
            self._logger.log(level, message, source=self._policy.name, time=time)

    def _transition(
        self,
        process: Process,
        change: Callable[[], None],
        roster: list[Process],
        elapsed: int,
    ) -> Iterator[SchedulerEvent]:
        """Apply *change* to *process* and report it."""
        old_state = process.state
        change()
        self._log(f"P{process.pid} {old_state} -> {process.state}", time=elapsed)
        yield TransitionEvent(
            pid=process.pid,
            old_state=old_state,
            new_state=process.state,
            algorithm=self._policy.name,
            time=elapsed,
        )
        yield SnapshotEvent(processes=tuple(p.snapshot() for p in roster), time=elapsed)

    def _execute(self, roster: list[Process]) -> Iterator[SchedulerEvent]:
        """Drive the run to completion, one tick at a time."""
        total = sum(p.total_time for p in roster)
        ready: deque[Process] = deque(roster)
        elapsed = 0
        completed: list[int] = []

        self._log(f"Run started: {len(roster)} process(es), {total} time units", time=0)
        yield SnapshotEvent(processes=tuple(p.snapshot() for p in roster), time=0)

        while (process := self._policy.select(ready)) is not None:
            yield from self._transition(process, process.dispatch, roster, elapsed)

            budget = min(self._policy.time_slice(process), process.burst_time)
            if budget <= 0 < process.burst_time:
                msg = f"{self._policy.name} gave P{process.pid} an empty time slice"
                raise InvariantViolationError(msg)
            ran = 0
            while ran < budget:
                consumed = process.execute(min(self._tick, budget - ran))
                ran += consumed
                elapsed += consumed
                self._log(f"P{process.pid} ran {consumed}", time=elapsed, level=LogLevel.DEBUG)
                yield ProgressEvent(
                    pid=process.pid,
                    executed=consumed,
                    elapsed=elapsed,
                    percent=progress_percent(elapsed, total),
                )
            if budget == 0:
                # No work to do: still report where the run stands.
                yield ProgressEvent(
                    pid=process.pid,
                    executed=0,
                    elapsed=elapsed,
                    percent=progress_percent(elapsed, total),
                )

            if process.burst_time > 0:
                yield from self._transition(process, process.pause, roster, elapsed)
                self._policy.on_preempt(ready, process)
            else:
                yield from self._transition(process, process.complete, roster, elapsed)
                completed.append(process.pid)
            yield SliceEvent(
                pid=process.pid,
                duration=ran,
                remaining=process.burst_time,
                state=process.state,
            )

        self._log(f"Run completed in {elapsed} time units", time=elapsed)
        yield RunCompletedEvent(
            algorithm=self._policy.name,
            elapsed=elapsed,
            completion_order=tuple(completed),
        )
