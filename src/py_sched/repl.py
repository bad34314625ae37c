"""Interactive menu for the scheduling simulator.

The REPL is the terminal front end.  It loops over a simple menu:

    1. **Choose** — FIFO, Round-Robin, Priority, or exit.
    2. **Explain** — show what the algorithm does and ask to continue.
    3. **Run** — generate a workload and print the run's events,
       pausing briefly on every tick so the progress bar animates.
    4. **Quiz** — optionally answer a couple of questions, or watch
       the same algorithm again on a fresh workload.

The scheduler itself never sleeps or prints; pacing lives here, in
``play_events`` and ``typewriter``.  Input and output are injected (``read``/``write``)
so the whole session can be driven from tests.
"""

from __future__ import annotations

import argparse
import time
from pathlib import Path
from typing import TYPE_CHECKING

from py_sched.config import ConfigError, SimulationConfig
from py_sched.events import ProgressEvent, TransitionEvent
from py_sched.logging import Logger, LogLevel
from py_sched.quiz import Quiz
from py_sched.render import (
    Color,
    explain,
    format_event,
    format_legend,
    format_metrics,
    paint,
)
from py_sched.scheduler import Scheduler, SchedulingError
from py_sched.simulation import Algorithm, SimulationResult, make_policy

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from py_sched.events import SchedulerEvent

MENU_CHOICES: dict[str, Algorithm] = {
    "1": Algorithm.FIFO,
    "2": Algorithm.ROUND_ROBIN,
    "3": Algorithm.PRIORITY,
}
EXIT_CHOICE = "4"


def format_menu(*, quantum: int, color: bool = True) -> str:
    """Return the main menu text."""
    return "\n".join(
        [
            paint("===== Scheduling Menu =====", Color.YELLOW, enabled=color),
            "1. FIFO",
            f"2. Round Robin (Quantum = {quantum}ms)",
            "3. Priority",
            "4. Exit",
        ]
    )


def parse_menu_choice(text: str) -> Algorithm | None:
    """Map a menu answer to an algorithm; ``None`` means exit.

    Raises:
        ValueError: If the answer is not a menu option.

    """
    choice = text.strip()
    if choice == EXIT_CHOICE:
        return None
    if choice not in MENU_CHOICES:
        msg = f"Invalid option: {choice!r}"
        raise ValueError(msg)
    return MENU_CHOICES[choice]


def typewriter(
    text: str,
    *,
    write: Callable[[str], None],
    sleep: Callable[[float], None] = time.sleep,
    delay: float = 0.0,
) -> None:
    """Write *text* line by line, pausing *delay* seconds per character.

    Each line appears after roughly the time it would take to type it,
    so longer messages take longer to show up.
    """
    for line in text.splitlines() or [""]:
        if delay > 0:
            sleep(delay * len(line))
        write(line)


def play_events(
    events: Iterable[SchedulerEvent],
    *,
    write: Callable[[str], None],
    sleep: Callable[[float], None] = time.sleep,
    pace_delay: float = 0.0,
    type_delay: float = 0.0,
    color: bool = True,
) -> list[SchedulerEvent]:
    """Print each event as it arrives, waiting *pace_delay* per tick.

    State changes are typed out at *type_delay* seconds per character.

    Returns:
        The events that were played, in order.

    """
    played: list[SchedulerEvent] = []
    for event in events:
        text = format_event(event, color=color)
        if isinstance(event, TransitionEvent):
            typewriter(text, write=write, sleep=sleep, delay=type_delay)
        else:
            write(text)
        if isinstance(event, ProgressEvent) and pace_delay > 0:
            sleep(pace_delay)
        played.append(event)
    return played


def ask_quiz(
    quiz: Quiz,
    *,
    read: Callable[[str], str],
    write: Callable[[str], None],
    color: bool = True,
) -> int:
    """Ask every question in *quiz* and return how many were right."""
    correct = 0
    for question in quiz.questions():
        write(question.prompt)
        write("\n".join(f"{i}. {option}" for i, option in enumerate(question.options, start=1)))
        try:
            right = question.check(int(read("Answer: ")))
        except ValueError:
            right = False
        if right:
            correct += 1
            write(paint("Correct!", Color.GREEN, enabled=color))
        else:
            write(paint(f"Wrong. The correct answer is: {question.answer}", Color.RED, enabled=color))
    return correct


class Session:
    """One interactive session: the menu loop and everything it drives."""

    def __init__(
        self,
        *,
        config: SimulationConfig | None = None,
        read: Callable[[str], str] | None = None,
        write: Callable[[str], None] | None = None,
        sleep: Callable[[float], None] | None = None,
        color: bool = True,
    ) -> None:
        """Create a session.

        Args:
            config: Simulation settings (defaults when omitted).
            read: Prompt-and-read function (``input`` by default).
            write: Line output function (``print`` by default).
            sleep: Pacing function (``time.sleep`` by default).
            color: Whether to emit ANSI colours.

        """
        self._config = config if config is not None else SimulationConfig()
        self._generator = self._config.workload_generator()
        self._read = read if read is not None else input
        self._write = write if write is not None else print
        self._sleep = sleep if sleep is not None else time.sleep
        self._color = color
        self._logger = Logger(min_level=LogLevel.INFO)

    @property
    def logger(self) -> Logger:
        """Return the log of every run in this session."""
        return self._logger

    def confirm(self, algorithm: Algorithm) -> bool:
        """Explain *algorithm* and ask whether to go ahead."""
        typewriter(
            explain(algorithm, color=self._color),
            write=self._write,
            sleep=self._sleep,
            delay=self._config.type_delay,
        )
        answer = self._read("Press 1 to run it or 2 to go back to the menu: ")
        return answer.strip() == "1"

    def run_algorithm(self, algorithm: Algorithm) -> SimulationResult:
        """Generate a workload, run *algorithm* on it, and print the run."""
        policy = make_policy(algorithm, quantum=self._config.quantum)
        processes = self._generator.generate()
        self._write(format_legend(color=self._color))
        scheduler = Scheduler(policy=policy, tick=self._config.tick, logger=self._logger)
        played = play_events(
            scheduler.run(processes),
            write=self._write,
            sleep=self._sleep,
            pace_delay=self._config.pace_delay,
            type_delay=self._config.type_delay,
            color=self._color,
        )
        result = SimulationResult(algorithm=policy.name, events=tuple(played))
        self._write(format_metrics(result.metrics))
        return result

    def offer_quiz(self, algorithm: Algorithm) -> bool:
        """Offer the quiz after a run.

        Returns:
            True if the user asked to watch the algorithm run again.

        """
        self._write(paint("===== Quiz =====", Color.GREEN, enabled=self._color))
        self._write(
            "1. Answer questions about the algorithm\n2. Skip the quiz\n3. Watch the run again"
        )
        match self._read("Choose an option: ").strip():
            case "1":
                score = ask_quiz(
                    Quiz(algorithm), read=self._read, write=self._write, color=self._color
                )
                self._write(f"You got {score} right.")
            case "2":
                self._write(paint("Quiz skipped.", Color.GREEN, enabled=self._color))
            case "3":
                return True
            case choice:
                self._write(paint(f"Invalid option: {choice!r}", Color.RED, enabled=self._color))
        return False

    def loop(self) -> None:
        """Show the menu until the user chooses to exit."""
        while True:
            self._write(format_menu(quantum=self._config.quantum, color=self._color))
            try:
                algorithm = parse_menu_choice(self._read("Choose an option: "))
            except ValueError as e:
                self._write(paint(str(e), Color.RED, enabled=self._color))
                continue
            if algorithm is None:
                self._write(paint("Exiting...", Color.GREEN, enabled=self._color))
                return
            if not self.confirm(algorithm):
                continue
            self.play(algorithm)

    def play(self, algorithm: Algorithm) -> int:
        """Run *algorithm*, then offer the quiz, replaying on request.

        Returns:
            How many runs were shown.

        """
        runs = 0
        replay = True
        while replay:
            try:
                self.run_algorithm(algorithm)
            except SchedulingError as e:
                self._write(paint(str(e), Color.RED, enabled=self._color))
                return runs
            runs += 1
            replay = self.offer_quiz(algorithm)
        return runs


def build_parser() -> argparse.ArgumentParser:
    """Return the command-line parser for ``py-sched``."""
    parser = argparse.ArgumentParser(prog="py-sched", description="CPU scheduling simulator")
    parser.add_argument("--config", type=Path, help="JSON file with simulation settings")
    parser.add_argument("--seed", type=int, help="seed for reproducible workloads")
    parser.add_argument("--quantum", type=int, help="Round-Robin time quantum")
    parser.add_argument("--fast", action="store_true", help="no pauses: ticks and text appear at once")
    parser.add_argument("--no-color", action="store_true", help="plain text output")
    return parser


def load_config(args: argparse.Namespace) -> SimulationConfig:
    """Combine the optional config file with command-line overrides."""
    config = SimulationConfig.from_json(args.config) if args.config else SimulationConfig()
    return config.with_overrides(
        seed=args.seed,
        quantum=args.quantum,
        pace_delay=0.0 if args.fast else None,
        type_delay=0.0 if args.fast else None,
    )


def run(argv: list[str] | None = None) -> None:
    """Parse arguments and run the interactive menu.

    This is the ``py-sched`` console entry point.  Ctrl+C and Ctrl+D
    end the session cleanly.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        config = load_config(args)
    except ConfigError as e:
        parser.error(str(e))

    session = Session(config=config, color=not args.no_color)
    try:
        session.loop()
    except EOFError:
        # Ctrl+D
        print()  # noqa: T201
    except KeyboardInterrupt:
        print("\nInterrupted.")  # noqa: T201
