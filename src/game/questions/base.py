"""
Base protocol and types for question handlers.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol

from rich.console import Console


@dataclass
class AnswerResult:
    """Result of checking an answer."""
    correct: bool
    feedback: str
    user_answer: int | str | None
    correct_answer: int | str
    timed_out: bool = False  # True when no answer was given


# Inputs that mean "skip this one"
SKIP_INPUTS = {"?", "skip", "pass", "idk"}


def is_skip(user_input: str) -> bool:
    """Check if input means the kid wants to skip the question."""
    return user_input.strip().lower() in SKIP_INPUTS


def unanswered(correct_answer: int | str) -> AnswerResult:
    return AnswerResult(
        correct=False,
        feedback="Time's up! Let's learn this one.",
        user_answer=None,
        correct_answer=correct_answer,
        timed_out=True,
    )


class QuestionHandler(Protocol):
    """Protocol for question type handlers."""

    def expected_answer(self, question: Any) -> int | str:
        """Answer representation echoed into GameAnswer.correct_answer."""
        ...

    def present(self, question: Any, console: Console) -> None:
        """Display the question."""
        ...

    def get_input(self, question: Any, console: Console) -> int | str | None:
        """Ask for an answer. Returns None when the kid skips."""
        ...

    def check(self, question: Any, answer: Any) -> AnswerResult:
        """Grade the answer."""
        ...
