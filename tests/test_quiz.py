"""Tests for the end-of-run quiz."""

import random

import pytest

from py_sched.quiz import QUESTIONS, AskedQuestion, Question, Quiz
from py_sched.simulation import Algorithm


class TestQuestionBank:
    """Verify the built-in questions."""

    def test_every_algorithm_has_questions(self) -> None:
        """Each algorithm gets at least one question."""
        for algorithm in Algorithm:
            assert QUESTIONS[algorithm]

    def test_answer_must_be_an_option(self) -> None:
        """A question whose answer is missing from its options is rejected."""
        with pytest.raises(ValueError, match="not one of the options"):
            Question("Q?", ("a", "b"), "c")


class TestAskedQuestion:
    """Verify answer checking."""

    def test_check_correct(self) -> None:
        """Picking the right option (1-based) is correct."""
        asked = AskedQuestion("Q?", ("a", "b", "c"), "b")
        assert asked.check(2)
        assert not asked.check(1)

    @pytest.mark.parametrize("choice", [0, 4])
    def test_out_of_range(self, choice: int) -> None:
        """Choices outside the list are rejected."""
        asked = AskedQuestion("Q?", ("a", "b", "c"), "b")
        with pytest.raises(ValueError, match="Choose between"):
            asked.check(choice)


class TestQuiz:
    """Verify quizzes."""

    def test_questions_keep_content(self) -> None:
        """Shuffling changes order, never the set of options."""
        quiz = Quiz("fifo", rng=random.Random(1))
        for asked, original in zip(quiz.questions(), QUESTIONS[Algorithm.FIFO], strict=True):
            assert asked.prompt == original.prompt
            assert sorted(asked.options) == sorted(original.options)
            assert asked.answer == original.answer

    def test_seeded_shuffle_is_reproducible(self) -> None:
        """The same RNG seed gives the same option order."""
        first = Quiz("priority", rng=random.Random(5)).questions()
        second = Quiz("priority", rng=random.Random(5)).questions()
        assert first == second

    def test_algorithm_property(self) -> None:
        """The quiz knows its algorithm."""
        assert Quiz("round-robin").algorithm is Algorithm.ROUND_ROBIN

    def test_unknown_algorithm(self) -> None:
        """Unknown algorithms are rejected."""
        with pytest.raises(ValueError, match="sjf"):
            Quiz("sjf")
