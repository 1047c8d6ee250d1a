"""
Writing question handler.

Exact match grading, case-insensitive with surrounding whitespace ignored.
"""

from __future__ import annotations

from typing import Any

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt

from src.game.models import WritingQuestion
from src.game.types import QuestionType, WritingSkill

from . import register
from .base import AnswerResult, is_skip, unanswered


@register(QuestionType.WRITING)
class WritingHandler:
    """Handler for draw/type writing questions."""

    def expected_answer(self, question: WritingQuestion) -> str:
        return question.correct_answer

    def present(self, question: WritingQuestion, console: Console) -> None:
        title = "DRAW" if question.skill == WritingSkill.DRAW else "TYPE"
        panel = Panel(
            question.prompt,
            title=f"[bold cyan]{title}[/bold cyan]",
            border_style="cyan",
            box=box.HEAVY,
            padding=(1, 2),
        )
        console.print(panel)

    def get_input(self, question: WritingQuestion, console: Console) -> str | None:
        console.print("[dim]Type your answer, or '?' to skip[/dim]")
        user_input = Prompt.ask("[cyan]>[/cyan]")
        if is_skip(user_input):
            return None
        return user_input

    def check(self, question: WritingQuestion, answer: Any) -> AnswerResult:
        """Check if the answer matches (case-insensitive, trimmed)."""
        if answer is None:
            return unanswered(question.correct_answer)

        user_answer = str(answer).strip()
        is_correct = self._grade(user_answer, question.correct_answer)

        return AnswerResult(
            correct=is_correct,
            feedback="Correct!" if is_correct else f"Expected: {question.correct_answer}",
            user_answer=user_answer,
            correct_answer=question.correct_answer,
        )

    def _grade(self, user_answer: str, correct: str) -> bool:
        return user_answer.lower().strip() == correct.lower().strip()
