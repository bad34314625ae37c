"""Text rendering for the terminal — tables, legends, and progress bars.

Every function here is pure: it takes data and returns a string.  The
REPL decides when (and how slowly) to print them, which keeps this
module trivially testable.  Colour is optional; pass ``color=False``
for plain text (tests, logs, the web API).
"""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING

from py_sched.events import (
    ProgressEvent,
    RunCompletedEvent,
    SliceEvent,
    SnapshotEvent,
    TransitionEvent,
)
from py_sched.process import ProcessState
from py_sched.simulation import Algorithm

if TYPE_CHECKING:
    from collections.abc import Iterable

    from py_sched.events import SchedulerEvent
    from py_sched.metrics import RunMetrics
    from py_sched.process import ProcessSnapshot

BAR_WIDTH = 50
_RULE_WIDTH = 58
_YELLOW_ABOVE = 50
_GREEN_ABOVE = 75


class Color(StrEnum):
    """ANSI escape codes used by the terminal output."""

    RESET = "\033[0m"
    CYAN = "\033[36m"
    GREEN = "\033[32m"
    RED = "\033[31m"
    YELLOW = "\033[33m"
    PURPLE = "\033[35m"
    BLUE = "\033[34m"


STATE_COLORS: dict[ProcessState, Color] = {
    ProcessState.READY: Color.BLUE,
    ProcessState.RUNNING: Color.YELLOW,
    ProcessState.PAUSED: Color.PURPLE,
    ProcessState.COMPLETED: Color.GREEN,
    ProcessState.ERROR: Color.RED,
}

_LEGEND: dict[ProcessState, str] = {
    ProcessState.READY: "The process is ready to run.",
    ProcessState.RUNNING: "The process is currently running.",
    ProcessState.PAUSED: "The process was paused and is waiting for another turn.",
    ProcessState.COMPLETED: "The process has finished.",
    ProcessState.ERROR: "The process hit an error.",
}

_EXPLANATIONS: dict[Algorithm, tuple[str, str]] = {
    Algorithm.FIFO: (
        "FIFO Scheduler",
        "FIFO (First-Come, First-Served) runs processes in the order they arrive.",
    ),
    Algorithm.ROUND_ROBIN: (
        "Round-Robin Scheduler",
        "Round-Robin shares the CPU equally: each process runs for one quantum, "
        "then goes to the back of the queue.",
    ),
    Algorithm.PRIORITY: (
        "Priority Scheduler",
        "Priority scheduling runs processes by priority; a lower number runs first.",
    ),
}

# Short reminder appended to each transition line.
_HINTS: dict[str, str] = {
    "FIFO": "FIFO: runs in arrival order",
    "Round-Robin": "Round-Robin: every process gets a time slice",
    "Priority": "Priority: runs by priority",
}


def paint(text: str, color: Color, *, enabled: bool = True) -> str:
    """Wrap *text* in *color* when colouring is enabled."""
    if not enabled:
        return text
    return f"{color}{text}{Color.RESET}"


def _rule(title: str = "") -> str:
    if not title:
        return "=" * _RULE_WIDTH
    return f" {title} ".center(_RULE_WIDTH, "=")


def format_process_table(snapshots: Iterable[ProcessSnapshot], *, color: bool = True) -> str:
    """Render the process list as ``ID | Time | Priority | State`` rows."""
    lines = [
        paint(_rule("Process List"), Color.CYAN, enabled=color),
        "ID | Time  | Priority | State",
    ]
    for snap in snapshots:
        state = paint(str(snap.state), STATE_COLORS[snap.state], enabled=color)
        lines.append(f"{snap.pid:2d} | {snap.burst_time:5d} | {snap.priority:8d} | {state}")
    lines.append(paint(_rule(), Color.CYAN, enabled=color))
    return "\n".join(lines)


def format_legend(*, color: bool = True) -> str:
    """Explain what each process state means."""
    lines = [paint(_rule("Legend"), Color.CYAN, enabled=color)]
    for state, meaning in _LEGEND.items():
        lines.append(f"{paint(str(state), STATE_COLORS[state], enabled=color)}: {meaning}")
    lines.append(paint(_rule(), Color.CYAN, enabled=color))
    return "\n".join(lines)


def format_progress_bar(percent: int, *, color: bool = True) -> str:
    """Render a 50-cell bar; red up to 50%, yellow up to 75%, then green."""
    percent = max(0, min(percent, 100))
    filled = percent // 2
    bar = "[" + "=" * filled + " " * (BAR_WIDTH - filled) + "]"
    if percent > _GREEN_ABOVE:
        shade = Color.GREEN
    elif percent > _YELLOW_ABOVE:
        shade = Color.YELLOW
    else:
        shade = Color.RED
    return paint(f"{bar} {percent}%", shade, enabled=color)


def explain(algorithm: str, *, color: bool = True) -> str:
    """Return a short explanation of *algorithm*.

    Raises:
        ValueError: If the algorithm name is unknown.

    """
    title, text = _EXPLANATIONS[Algorithm(algorithm)]
    return f"{paint(f'[{title}]', Color.CYAN, enabled=color)}\n{text}"


def _format_transition(event: TransitionEvent, *, color: bool) -> str:
    hint = _HINTS.get(event.algorithm, event.algorithm)
    match event.new_state:
        case ProcessState.RUNNING:
            text = f"Process {event.pid} is running. ({hint})"
        case ProcessState.PAUSED:
            text = f"Process {event.pid} paused! (moved to the back of the queue)"
        case ProcessState.COMPLETED:
            text = f"Process {event.pid} finished! ({hint})"
        case _:
            text = f"Process {event.pid}: {event.old_state} -> {event.new_state}"
    return paint(text, STATE_COLORS[event.new_state], enabled=color)


def format_event(event: SchedulerEvent, *, color: bool = True) -> str:
    """Render any scheduler event as one or more lines of text."""
    match event:
        case TransitionEvent():
            return _format_transition(event, color=color)
        case SnapshotEvent(processes=snapshots):
            return format_process_table(snapshots, color=color)
        case ProgressEvent(percent=percent):
            return format_progress_bar(percent, color=color)
        case SliceEvent(pid=pid, duration=duration, remaining=remaining):
            return f"  P{pid} ran {duration} ms, {remaining} ms left"
        case RunCompletedEvent(elapsed=elapsed, completion_order=order):
            finished = ", ".join(str(pid) for pid in order) or "none"
            text = f"All processes completed in {elapsed} ms. Completion order: {finished}"
            return paint(text, Color.GREEN, enabled=color)
    msg = f"Unknown event: {event!r}"
    raise TypeError(msg)


def format_metrics(metrics: RunMetrics) -> str:
    """Render per-process timing and run averages as a small table."""
    lines = ["PID | Burst | Response | Turnaround | Waiting | Slices"]
    lines.extend(
        f"{p.pid:3d} | {p.burst_time:5d} | {p.response_time:8d} | "
        f"{p.turnaround_time:10d} | {p.waiting_time:7d} | {p.slices:6d}"
        for p in metrics.processes
    )
    lines.append(
        f"avg waiting {metrics.avg_waiting_time:.1f} ms, "
        f"avg turnaround {metrics.avg_turnaround_time:.1f} ms, "
        f"context switches {metrics.context_switches}"
    )
    return "\n".join(lines)
