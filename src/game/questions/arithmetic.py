"""
Math question handler.

Answers are compared by numeric equality. Typed answers are normalized
first ("  12 ", "+12", "12.0" all equal 12); anything that is not a number
is graded incorrect rather than rejected.
"""

from __future__ import annotations

from typing import Any

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt

from src.game.models import MathQuestion
from src.game.types import MATH_SYMBOLS, QuestionType

from . import register
from .base import AnswerResult, is_skip, unanswered


def normalize_number(raw: Any) -> int | float | None:
    """Parse an answer into a number. Returns None if it is not numeric."""
    if isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        return raw
    value = str(raw).strip().replace(" ", "").replace("_", "")
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        pass
    try:
        return float(value)
    except ValueError:
        return None


@register(QuestionType.MATH)
class MathHandler:
    """Handler for arithmetic questions."""

    def expected_answer(self, question: MathQuestion) -> int:
        return question.correct_answer

    def present(self, question: MathQuestion, console: Console) -> None:
        """Display the equation."""
        symbol = MATH_SYMBOLS[question.operation]
        panel = Panel(
            f"[bold]{question.num1} {symbol} {question.num2} = ?[/bold]",
            title="[bold cyan]CALCULATE[/bold cyan]",
            border_style="cyan",
            box=box.HEAVY,
            padding=(1, 2),
        )
        console.print(panel)

    def get_input(self, question: MathQuestion, console: Console) -> int | str | None:
        """Ask until the kid types a number or '?' to skip."""
        console.print("[dim]Type your answer, or '?' to skip[/dim]")
        while True:
            user_input = Prompt.ask("[cyan]>[/cyan]")
            if is_skip(user_input):
                return None
            value = normalize_number(user_input)
            if value is None:
                console.print("[yellow]Numbers only, please![/yellow]")
                continue
            return user_input.strip()

    def check(self, question: MathQuestion, answer: Any) -> AnswerResult:
        """Check numeric equality."""
        if answer is None:
            return unanswered(question.correct_answer)

        value = normalize_number(answer)
        is_correct = value is not None and value == question.correct_answer

        return AnswerResult(
            correct=is_correct,
            feedback="Correct!" if is_correct else f"Not quite. The answer is {question.correct_answer}",
            user_answer=answer if isinstance(answer, (int, str)) else str(answer),
            correct_answer=question.correct_answer,
        )
