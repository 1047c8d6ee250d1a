"""
Choice question handlers (reading, listening, logical).

- Presents the question with numbered options.
- The kid picks one option; the answer is its 0-based index.
- Graded by index equality with ``correct_answer_index``.
"""

from __future__ import annotations

from typing import Any

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table

from src.game.errors import InvalidAnswerError
from src.game.models import ListeningQuestion, LogicalQuestion, ReadingQuestion
from src.game.types import QuestionType

from . import register
from .base import AnswerResult, is_skip, unanswered


def parse_choice(answer: Any, option_count: int) -> int:
    """
    Interpret an answer as a 0-based option index.

    Accepts an int or a digit string ("2" -> index 2), so an index that
    arrives as text grades the same as the int.

    Raises:
        InvalidAnswerError: not an index, or out of range
    """
    if isinstance(answer, bool):
        raise InvalidAnswerError(f"Option index must be an integer, got {answer!r}")
    if isinstance(answer, int):
        index = answer
    elif isinstance(answer, str) and answer.strip().isdigit():
        index = int(answer.strip())
    else:
        raise InvalidAnswerError(f"Option index must be an integer, got {answer!r}")
    if not 0 <= index < option_count:
        raise InvalidAnswerError(f"Option index {index} out of range 0..{option_count - 1}")
    return index
    if isinstance(answer, int):
        index = answer
    else:
        text = str(answer).strip()
        if not text.isdigit():
            return None
        index = int(text) - 1
    if 0 <= index < option_count:
        return index
    return None


class ChoiceHandler:
    """Shared behaviour of single-answer multiple choice questions."""

    title = "CHOOSE"

    def expected_answer(self, question: Any) -> int:
        return question.correct_answer_index

    def body(self, question: Any) -> str:
        return question.question

    def present(self, question: Any, console: Console) -> None:
        table = Table(box=box.MINIMAL, show_header=False)
        table.add_column("Index", style="cyan", justify="right", width=4)
        table.add_column("Option", style="white")
        for i, option in enumerate(question.options):
            table.add_row(f"[{i + 1}]", option)

        console.print(
            Panel(
                self.body(question),
                title=f"[bold cyan]{self.title}[/bold cyan]",
                border_style="cyan",
                box=box.HEAVY,
                padding=(1, 2),
            )
        )
        console.print(table)

    def get_input(self, question: Any, console: Console) -> int | None:
        """Returns the 0-based index of the chosen option, None to skip."""
        count = len(question.options)
        console.print(f"[dim]Enter choice [1-{count}], or '?' to skip[/dim]")
        while True:
            choice = Prompt.ask("[cyan]>[/cyan]")
            if is_skip(choice):
                return None
            typed = choice.strip()
            if not typed.isdigit() or not 1 <= int(typed) <= count:
                console.print(f"[yellow]Pick a number from 1 to {count}[/yellow]")
                continue
            # Options are numbered from 1 on screen
            return int(typed) - 1

    def check(self, question: Any, answer: Any) -> AnswerResult:
        """Check the chosen 0-based index."""
        correct_text = question.correct_option
        if answer is None:
            return unanswered(question.correct_answer_index)

        index = parse_choice(answer, len(question.options))
        is_correct = index == question.correct_answer_index

        return AnswerResult(
            correct=is_correct,
            feedback="Correct!" if is_correct else f"The answer is: {correct_text}",
            user_answer=index,
            correct_answer=question.correct_answer_index,
        )


@register(QuestionType.READING)
class ReadingHandler(ChoiceHandler):
    title = "READ"

    def body(self, question: ReadingQuestion) -> str:
        return f"[bold]{question.text}[/bold]\n\n{question.question}"


@register(QuestionType.LISTENING)
class ListeningHandler(ChoiceHandler):
    title = "LISTEN"

    def body(self, question: ListeningQuestion) -> str:
        # Terminal stand-in for the speech collaborator
        return f"[italic]Listen: \"{question.spoken_text}\"[/italic]\n\n{question.question}"


@register(QuestionType.LOGICAL)
class LogicalHandler(ChoiceHandler):
    title = "THINK"

    def body(self, question: LogicalQuestion) -> str:
        return f"[dim]{question.sub_type.value.upper()}[/dim]\n\n{question.question}"
