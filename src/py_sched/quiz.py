"""End-of-run quiz — a couple of questions per algorithm.

After watching a scheduler run, the learner can check what stuck.
Each question has a fixed list of options and one correct answer; the
options are shuffled every time the quiz is taken so the answer is
never "always option 1".

The ``Quiz`` class is I/O-free: the REPL asks, the quiz checks.
"""

from __future__ import annotations

import random
from dataclasses import dataclass

from py_sched.simulation import Algorithm


@dataclass(frozen=True)
class Question:
    """A multiple-choice question.

    Attributes:
        prompt: The question text.
        options: Possible answers in their canonical order.
        answer: The correct option text.

    """

    prompt: str
    options: tuple[str, ...]
    answer: str

    def __post_init__(self) -> None:
        """Reject a question whose answer is not among its options."""
        if self.answer not in self.options:
            msg = f"Answer {self.answer!r} is not one of the options"
            raise ValueError(msg)


QUESTIONS: dict[Algorithm, tuple[Question, ...]] = {
    Algorithm.FIFO: (
        Question(
            "What does FIFO stand for?",
            ("First In First Out", "First In First Over", "Fast In Fast Out"),
            "First In First Out",
        ),
        Question(
            "What is the main drawback of FIFO?",
            ("Starvation", "Overhead", "Long processes can delay short ones"),
            "Long processes can delay short ones",
        ),
    ),
    Algorithm.ROUND_ROBIN: (
        Question(
            "What is a quantum in Round-Robin?",
            ("The total execution time", "The time slice each process gets", "The process priority"),
            "The time slice each process gets",
        ),
        Question(
            "What is the main advantage of Round-Robin?",
            ("Simplicity", "It avoids starvation", "Lower overhead"),
            "It avoids starvation",
        ),
    ),
    Algorithm.PRIORITY: (
        Question(
            "How does Priority scheduling decide the execution order?",
            ("By arrival order", "By burst time", "By priority"),
            "By priority",
        ),
        Question(
            "What is the main drawback of Priority scheduling?",
            ("Starvation of low-priority processes", "Overhead", "Complexity"),
            "Starvation of low-priority processes",
        ),
    ),
}


@dataclass(frozen=True)
class AskedQuestion:
    """A question as presented: options in shuffled order."""

    prompt: str
    options: tuple[str, ...]
    answer: str

    def check(self, choice: int) -> bool:
        """Return True if the 1-based *choice* picks the correct option.

        Raises:
            ValueError: If choice is outside ``1..len(options)``.

        """
        if not 1 <= choice <= len(self.options):
            msg = f"Choose between 1 and {len(self.options)}, got {choice}"
            raise ValueError(msg)
        return self.options[choice - 1] == self.answer


class Quiz:
    """The questions for one algorithm, ready to be asked."""

    def __init__(self, algorithm: str, *, rng: random.Random | None = None) -> None:
        """Create a quiz for *algorithm*.

        Args:
            algorithm: An ``Algorithm`` value.
            rng: Random source for shuffling options.

        Raises:
            ValueError: If the algorithm name is unknown.

        """
        self._algorithm = Algorithm(algorithm)
        self._rng = rng if rng is not None else random.Random()  # noqa: S311

    @property
    def algorithm(self) -> Algorithm:
        """Return the algorithm this quiz is about."""
        return self._algorithm

    def questions(self) -> list[AskedQuestion]:
        """Return the questions with freshly shuffled options."""
        asked: list[AskedQuestion] = []
        for question in QUESTIONS[self._algorithm]:
            options = list(question.options)
            self._rng.shuffle(options)
            asked.append(AskedQuestion(question.prompt, tuple(options), question.answer))
        return asked
