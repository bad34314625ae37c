"""Process model — the unit of work the scheduler hands the CPU to.

Each process carries a PID, a remaining burst time, and a priority.
Processes follow a small state machine — each transition method
(dispatch, pause, complete, fail) checks that the process is in the
right source state before moving it.

State machine::

    READY → RUNNING → COMPLETED
              ↓  ↑
             PAUSED
    RUNNING → ERROR

Nothing ever moves back to READY.  PAUSED → RUNNING only happens under
Round-Robin, when a preempted process gets its next slice.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class ProcessState(StrEnum):
    """Lifecycle states of a simulated process.

    - READY: generated, waiting for its first turn on the CPU.
    - RUNNING: currently holding the (single) CPU.
    - PAUSED: preempted at the end of a time slice, waiting for more.
    - COMPLETED: burst time used up — finished normally.
    - ERROR: finished abnormally (reserved for fault modelling).
    """

    READY = "ready"
    RUNNING = "running"
    PAUSED = "paused"
    COMPLETED = "completed"
    ERROR = "error"

    @property
    def is_terminal(self) -> bool:
        """Return True for states a process never leaves."""
        return self in TERMINAL_STATES


TERMINAL_STATES = frozenset({ProcessState.COMPLETED, ProcessState.ERROR})


class InvariantViolationError(RuntimeError):
    """Raise when the process model is driven into an impossible state.

    This is a programmer error (a scheduler bug), never bad user input,
    so nothing in the package catches it.
    """


@dataclass(frozen=True)
class ProcessSnapshot:
    """A read-only view of a process at one instant.

    Snapshots are what leaves the scheduler; the live ``Process``
    objects never do.
    """

    pid: int
    burst_time: int
    priority: int
    state: ProcessState


class Process:
    """A simulated process.

    ``burst_time`` is the *remaining* CPU time.  It starts at the total
    required time, shrinks as the process executes, and never drops
    below zero.  ``executed + burst_time == total_time`` holds at every
    point in the lifecycle.
    """

    def __init__(self, *, pid: int, burst_time: int, priority: int = 0) -> None:
        """Create a process in the READY state.

        Args:
            pid: Unique positive identifier within a run.
            burst_time: Total CPU time required (abstract milliseconds).
            priority: Scheduling priority (lower = more important).

        Raises:
            ValueError: If pid is not positive or burst_time is negative.

        """
        if pid <= 0:
            msg = f"pid must be positive, got {pid}"
            raise ValueError(msg)
        if burst_time < 0:
            msg = f"burst_time must be >= 0, got {burst_time}"
            raise ValueError(msg)
        self._pid: int = pid
        self._total_time: int = burst_time
        self._burst_time: int = burst_time
        self._priority: int = priority
        self._state: ProcessState = ProcessState.READY

    @property
    def pid(self) -> int:
        """Return the unique process identifier."""
        return self._pid

    @property
    def burst_time(self) -> int:
        """Return the remaining CPU time."""
        return self._burst_time

    @property
    def total_time(self) -> int:
        """Return the CPU time the process needed when it was created."""
        return self._total_time

    @property
    def executed(self) -> int:
        """Return the CPU time consumed so far."""
        return self._total_time - self._burst_time

    @property
    def priority(self) -> int:
        """Return the scheduling priority (immutable)."""
        return self._priority

    @property
    def state(self) -> ProcessState:
        """Return the current process state."""
        return self._state

    def _transition(
        self,
        action: str,
        expected: frozenset[ProcessState],
        target: ProcessState,
    ) -> None:
        """Enforce a state transition.

        Args:
            action: Name of the transition (for error messages).
            expected: The states the process may be in.
            target: The state to move to.

        Raises:
            InvariantViolationError: If the process is not in an expected state.

        """
        if self._state not in expected:
            allowed = " or ".join(sorted(expected))
            msg = f"Cannot {action}: process {self._pid} is {self._state}, expected {allowed}"
            raise InvariantViolationError(msg)
        self._state = target

    def dispatch(self) -> None:
        """Transition READY/PAUSED → RUNNING. Give the process the CPU."""
        self._transition(
            "dispatch",
            frozenset({ProcessState.READY, ProcessState.PAUSED}),
            ProcessState.RUNNING,
        )

    def pause(self) -> None:
        """Transition RUNNING → PAUSED at the end of a time slice."""
        if self._burst_time == 0:
            msg = f"Cannot pause: process {self._pid} has no time left"
            raise InvariantViolationError(msg)
        self._transition("pause", frozenset({ProcessState.RUNNING}), ProcessState.PAUSED)

    def complete(self) -> None:
        """Transition RUNNING → COMPLETED once the burst is used up."""
        if self._burst_time != 0:
            msg = f"Cannot complete: process {self._pid} still needs {self._burst_time}"
            raise InvariantViolationError(msg)
        self._transition("complete", frozenset({ProcessState.RUNNING}), ProcessState.COMPLETED)

    def fail(self) -> None:
        """Transition RUNNING → ERROR. End the process abnormally."""
        self._transition("fail", frozenset({ProcessState.RUNNING}), ProcessState.ERROR)

    def execute(self, time_units: int) -> int:
        """Run on the CPU for up to *time_units*.

        Args:
            time_units: How long to run (must be positive).

        Returns:
            The time actually consumed, which is less than *time_units*
            when the process finishes early.

        Raises:
            ValueError: If time_units is not positive.
            InvariantViolationError: If the process is not RUNNING.

        """
        if time_units <= 0:
            msg = f"time_units must be positive, got {time_units}"
            raise ValueError(msg)
        if self._state is not ProcessState.RUNNING:
            msg = f"Cannot execute: process {self._pid} is {self._state}, expected running"
            raise InvariantViolationError(msg)
        consumed = min(time_units, self._burst_time)
        self._burst_time -= consumed
        return consumed

    def snapshot(self) -> ProcessSnapshot:
        """Return an immutable view of the current state."""
        return ProcessSnapshot(
            pid=self._pid,
            burst_time=self._burst_time,
            priority=self._priority,
            state=self._state,
        )

    def clone(self) -> Process:
        """Return an independent copy with the same PID, times, and state."""
        copy = Process(pid=self._pid, burst_time=self._total_time, priority=self._priority)
        copy._burst_time = self._burst_time
        copy._state = self._state
        return copy

    def __repr__(self) -> str:
        """Return a debug-friendly representation."""
        return (
            f"Process(pid={self._pid}, burst_time={self._burst_time}, "
            f"priority={self._priority}, state={self._state})"
        )
