"""
Question type handlers.

Each question type (writing, reading, listening, math, logical) has a
handler with:
- present(): Display the question in the terminal
- get_input(): Ask for an answer
- check(): Grade the answer immediately
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from src.game.types import QuestionType

if TYPE_CHECKING:
    from .base import AnswerResult, QuestionHandler


# Handler registry - populated by @register decorator
HANDLERS: dict[QuestionType, "QuestionHandler"] = {}


def register(question_type: QuestionType):
    """Decorator to register a question handler."""
    def decorator(cls):
        HANDLERS[question_type] = cls()
        return cls
    return decorator


def get_handler(question_type: str | QuestionType) -> "QuestionHandler | None":
    """Get the handler for a question type."""
    if isinstance(question_type, str) and not isinstance(question_type, QuestionType):
        try:
            question_type = QuestionType(question_type.lower())
        except ValueError:
            return None
    return HANDLERS.get(question_type)


def handler_for(question: Any) -> "QuestionHandler":
    """Handler for a question model. Every QuestionType is registered."""
    handler = get_handler(question.type)
    if handler is None:
        raise LookupError(f"No handler registered for question type {question.type!r}")
    return handler


def check_answer(question: Any, answer: Any) -> "AnswerResult":
    """Grade an answer with the question's type-specific comparison."""
    return handler_for(question).check(question, answer)


# Import handlers to trigger registration
from . import arithmetic  # noqa: E402
from . import choice  # noqa: E402
from . import writing  # noqa: E402

__all__ = [
    "HANDLERS",
    "check_answer",
    "get_handler",
    "handler_for",
    "register",
]
