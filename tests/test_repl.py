"""Tests for the interactive menu.

The REPL takes its input and output as callables, so a session can be
scripted: a list of answers goes in, a list of printed lines comes out.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING
from unittest.mock import patch

import pytest

from py_sched.config import SimulationConfig
from py_sched.events import ProgressEvent, TransitionEvent
from py_sched.quiz import QUESTIONS, Quiz
from py_sched.repl import (
    Session,
    ask_quiz,
    build_parser,
    format_menu,
    load_config,
    parse_menu_choice,
    play_events,
    run,
    typewriter,
)
from py_sched.scheduler import FIFOPolicy, InvalidQuantumError, Scheduler
from py_sched.simulation import Algorithm
from py_sched.workload import workload_from_bursts

if TYPE_CHECKING:
    from pathlib import Path

_FAST = SimulationConfig(seed=3, pace_delay=0.0, type_delay=0.0)


class _Script:
    """Feed canned answers to ``read`` and collect everything written."""

    def __init__(self, answers: list[str]) -> None:
        """Queue up *answers* in order."""
        self._answers = iter(answers)
        self.prompts: list[str] = []
        self.lines: list[str] = []

    def read(self, prompt: str) -> str:
        """Record *prompt* and return the next answer."""
        self.prompts.append(prompt)
        return next(self._answers)

    def write(self, text: str) -> None:
        """Record one chunk of output."""
        self.lines.append(text)

    @property
    def text(self) -> str:
        """Return everything written, joined by newlines."""
        return "\n".join(self.lines)


class TestMenuHelpers:
    """Verify the pure menu helpers."""

    def test_menu_lists_options(self) -> None:
        """The menu shows the algorithms, the quantum, and exit."""
        menu = format_menu(quantum=200, color=False)
        assert "1. FIFO" in menu
        assert "2. Round Robin (Quantum = 200ms)" in menu
        assert "3. Priority" in menu
        assert "4. Exit" in menu

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("1", Algorithm.FIFO),
            (" 2 ", Algorithm.ROUND_ROBIN),
            ("3", Algorithm.PRIORITY),
            ("4", None),
        ],
    )
    def test_parse_choice(self, text: str, expected: Algorithm | None) -> None:
        """Menu numbers map to algorithms; 4 means exit."""
        assert parse_menu_choice(text) == expected

    @pytest.mark.parametrize("text", ["", "5", "fifo"])
    def test_parse_invalid(self, text: str) -> None:
        """Anything else is an invalid option."""
        with pytest.raises(ValueError, match="Invalid option"):
            parse_menu_choice(text)


class TestPlayEvents:
    """Verify downstream pacing."""

    def test_sleeps_once_per_tick(self) -> None:
        """Pacing happens only on progress events."""
        sleeps: list[float] = []
        lines: list[str] = []
        events = Scheduler(policy=FIFOPolicy()).run(workload_from_bursts([300]))
        played = play_events(
            events, write=lines.append, sleep=sleeps.append, pace_delay=0.5, color=False
        )
        ticks = [e for e in played if isinstance(e, ProgressEvent)]
        assert sleeps == [0.5] * len(ticks)
        assert len(lines) == len(played)

    def test_no_pacing_when_zero(self) -> None:
        """A zero delay never sleeps."""
        sleeps: list[float] = []
        events = Scheduler(policy=FIFOPolicy()).run(workload_from_bursts([300]))
        play_events(events, write=lambda _: None, sleep=sleeps.append, color=False)
        assert sleeps == []


class TestTypewriter:
    """Verify typed-out text."""

    def test_writes_each_line(self) -> None:
        """Every line is written, and the pause grows with its length."""
        lines: list[str] = []
        sleeps: list[float] = []
        typewriter("ab\ncdef", write=lines.append, sleep=sleeps.append, delay=0.5)
        assert lines == ["ab", "cdef"]
        assert sleeps == [1.0, 2.0]

    def test_no_delay_never_sleeps(self) -> None:
        """A zero delay writes straight away."""
        sleeps: list[float] = []
        lines: list[str] = []
        typewriter("hello", write=lines.append, sleep=sleeps.append)
        assert lines == ["hello"]
        assert sleeps == []

    def test_transitions_are_typed(self) -> None:
        """play_events types out state changes but not other events."""
        sleeps: list[float] = []
        events = Scheduler(policy=FIFOPolicy()).run(workload_from_bursts([100]))
        played = play_events(
            events, write=lambda _: None, sleep=sleeps.append, type_delay=0.01, color=False
        )
        transitions = [e for e in played if isinstance(e, TransitionEvent)]
        assert len(sleeps) == len(transitions)


class TestAskQuiz:
    """Verify the quiz dialogue."""

    def test_all_correct(self) -> None:
        """Answering with the right option numbers scores full marks."""
        quiz = Quiz("fifo")
        asked = quiz.questions()
        answers = [str(q.options.index(q.answer) + 1) for q in asked]
        script = _Script(answers)
        with patch.object(quiz, "questions", return_value=asked):
            score = ask_quiz(quiz, read=script.read, write=script.write, color=False)
        assert score == len(QUESTIONS[Algorithm.FIFO])
        assert "Correct!" in script.text

    def test_garbage_answers_are_wrong(self) -> None:
        """Non-numeric or out-of-range answers count as wrong."""
        script = _Script(["abc", "99"])
        score = ask_quiz(Quiz("priority"), read=script.read, write=script.write, color=False)
        assert score == 0
        assert "The correct answer is" in script.text


class TestSession:
    """Drive whole sessions with scripted input."""

    def test_exit_immediately(self) -> None:
        """Choosing 4 ends the session."""
        script = _Script(["4"])
        Session(config=_FAST, read=script.read, write=script.write, color=False).loop()
        assert "Exiting..." in script.text

    def test_invalid_then_exit(self) -> None:
        """An invalid option is reported and the menu shown again."""
        script = _Script(["9", "4"])
        Session(config=_FAST, read=script.read, write=script.write, color=False).loop()
        assert "Invalid option: '9'" in script.text
        assert script.text.count("1. FIFO") == 2  # noqa: PLR2004

    def test_back_to_menu_without_running(self) -> None:
        """Declining the explanation returns to the menu (no recursion)."""
        script = _Script(["1", "2", "4"])
        session = Session(config=_FAST, read=script.read, write=script.write, color=False)
        session.loop()
        assert "FIFO Scheduler" in script.text
        assert "All processes completed" not in script.text
        assert session.logger.entries == []

    def test_full_run_and_skip_quiz(self) -> None:
        """Run Round-Robin, skip the quiz, then exit."""
        script = _Script(["2", "1", "2", "4"])
        session = Session(config=_FAST, read=script.read, write=script.write, color=False)
        session.loop()
        assert "Round-Robin Scheduler" in script.text
        assert "All processes completed" in script.text
        assert "Quiz skipped." in script.text
        assert "] 100%" in script.text
        assert session.logger.filter(source="Round-Robin")

    def test_run_algorithm_returns_result(self) -> None:
        """run_algorithm gives back the finished result."""
        script = _Script([])
        session = Session(config=_FAST, read=script.read, write=script.write, color=False)
        result = session.run_algorithm(Algorithm.PRIORITY)
        assert len(result.completion_order) == _FAST.process_count
        assert "avg waiting" in script.text

    def test_run_paces_with_injected_sleep(self) -> None:
        """The configured pace delay is applied per tick."""
        sleeps: list[float] = []
        config = SimulationConfig(seed=1, pace_delay=0.01, type_delay=0.0)
        session = Session(
            config=config, read=lambda _: "", write=lambda _: None, sleep=sleeps.append, color=False
        )
        result = session.run_algorithm(Algorithm.FIFO)
        assert len(sleeps) == len(result.progress)

    def test_quiz_taken(self) -> None:
        """Choosing 1 at the quiz prompt asks the questions."""
        script = _Script(["1", "1", "1"])
        session = Session(config=_FAST, read=script.read, write=script.write, color=False)
        replay = session.offer_quiz(Algorithm.ROUND_ROBIN)
        assert not replay
        assert "You got" in script.text

    def test_watch_again_replays_on_fresh_workload(self) -> None:
        """Option 3 runs the same algorithm again, then the quiz is offered again."""
        script = _Script(["3", "2"])
        session = Session(config=_FAST, read=script.read, write=script.write, color=False)
        runs = session.play(Algorithm.FIFO)
        expected_runs = 2
        assert runs == expected_runs
        assert script.text.count("All processes completed") == expected_runs
        assert script.text.count("3. Watch the run again") == expected_runs
        assert script.text.endswith("Quiz skipped.")

    def test_watch_again_from_menu(self) -> None:
        """Replaying inside a session returns to the menu afterwards."""
        script = _Script(["3", "1", "3", "2", "4"])
        Session(config=_FAST, read=script.read, write=script.write, color=False).loop()
        assert script.text.count("Priority Scheduler") == 1
        assert script.text.count("All processes completed") == 2  # noqa: PLR2004
        assert "Exiting..." in script.text

    def test_invalid_quiz_option(self) -> None:
        """An unknown answer at the quiz prompt is reported and ends the round."""
        script = _Script(["7"])
        session = Session(config=_FAST, read=script.read, write=script.write, color=False)
        assert not session.offer_quiz(Algorithm.FIFO)
        assert "Invalid option: '7'" in script.text

    def test_scheduling_error_is_reported(self) -> None:
        """A run the scheduler refuses is reported, not raised."""
        script = _Script([])
        session = Session(config=_FAST, read=script.read, write=script.write, color=False)
        error = InvalidQuantumError("Round-Robin quantum must be > 0, got 0")
        with patch.object(session, "run_algorithm", side_effect=error):
            assert session.play(Algorithm.ROUND_ROBIN) == 0
        assert "quantum must be > 0" in script.text

    def test_explanation_is_typed(self) -> None:
        """The explanation is written out with the configured typing delay."""
        sleeps: list[float] = []
        script = _Script(["2"])
        config = SimulationConfig(pace_delay=0.0, type_delay=0.01)
        session = Session(
            config=config, read=script.read, write=script.write, sleep=sleeps.append, color=False
        )
        assert not session.confirm(Algorithm.FIFO)
        assert sleeps
        assert "[FIFO Scheduler]" in script.text


class TestCommandLine:
    """Verify argument parsing and the entry point."""

    def test_overrides(self) -> None:
        """Command-line flags override the defaults."""
        args = build_parser().parse_args(["--seed", "5", "--quantum", "50", "--fast"])
        config = load_config(args)
        expected_quantum = 50
        assert config.seed == 5  # noqa: PLR2004
        assert config.quantum == expected_quantum
        assert config.pace_delay == 0.0
        assert config.type_delay == 0.0

    def test_config_file(self, tmp_path: Path) -> None:
        """--config loads a JSON file first."""
        path = tmp_path / "sim.json"
        path.write_text(json.dumps({"quantum": 300}))
        config = load_config(build_parser().parse_args(["--config", str(path)]))
        expected_quantum = 300
        assert config.quantum == expected_quantum

    def test_bad_config_exits(self, tmp_path: Path) -> None:
        """A broken config file is a usage error."""
        with pytest.raises(SystemExit):
            run(["--config", str(tmp_path / "missing.json")])

    def test_zero_quantum_is_a_usage_error(self) -> None:
        """--quantum 0 is refused before the menu is shown."""
        with pytest.raises(SystemExit), patch("builtins.input") as read:
            run(["--fast", "--no-color", "--quantum", "0"])
        read.assert_not_called()

    def test_empty_range_in_config_is_a_usage_error(self, tmp_path: Path) -> None:
        """A config with an empty burst range exits with a usage message."""
        path = tmp_path / "sim.json"
        path.write_text(json.dumps({"burst_range": [1000, 500]}))
        with pytest.raises(SystemExit):
            run(["--config", str(path)])

    def test_run_exits_on_eof(self) -> None:
        """Ctrl+D ends the program cleanly."""
        with patch("builtins.input", side_effect=EOFError), patch("builtins.print"):
            run(["--fast", "--no-color"])

    def test_run_exits_on_interrupt(self) -> None:
        """Ctrl+C ends the program cleanly."""
        with patch("builtins.input", side_effect=KeyboardInterrupt), patch("builtins.print") as out:
            run(["--fast"])
        out.assert_any_call("\nInterrupted.")
