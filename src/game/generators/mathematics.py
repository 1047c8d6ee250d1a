"""
Mathematics domain.

Level 1-5: Addition (operands below level + 3)
Level 6-10: Subtraction (non-negative results)
Level 11-15: Multiplication (tables up to 10)
Level 16+: Division (exact) followed by mixed operations
"""

from __future__ import annotations

import random

from loguru import logger

from src.game.models import MathQuestion
from src.game.types import Difficulty, MathOperation

from .base import QUESTIONS_PER_LEVEL

DIVISION_PER_LEVEL = 3
MIXED_OPERATIONS = (
    MathOperation.ADDITION,
    MathOperation.SUBTRACTION,
    MathOperation.MULTIPLICATION,
)


def apply_operation(operation: MathOperation, num1: int, num2: int) -> int:
    if operation == MathOperation.ADDITION:
        return num1 + num2
    if operation == MathOperation.SUBTRACTION:
        return num1 - num2
    if operation == MathOperation.MULTIPLICATION:
        return num1 * num2
    return num1 // num2


def _addition(level: int, i: int, rng: random.Random) -> MathQuestion:
    num1 = rng.randrange(level + 3)
    num2 = rng.randrange(level + 3)
    return MathQuestion(
        question_id=f"math-{level}-addition-{i}",
        difficulty=Difficulty.MEDIUM if level > 3 else Difficulty.EASY,
        time_limit_seconds=30,
        operation=MathOperation.ADDITION,
        num1=num1,
        num2=num2,
        correct_answer=num1 + num2,
    )


def _subtraction(level: int, i: int, rng: random.Random) -> MathQuestion:
    num1 = rng.randrange(20) + (level - 5)
    num2 = rng.randrange(min(num1, 10)) if num1 > 0 else 0
    return MathQuestion(
        question_id=f"math-{level}-subtraction-{i}",
        difficulty=Difficulty.MEDIUM,
        time_limit_seconds=35,
        operation=MathOperation.SUBTRACTION,
        num1=num1,
        num2=num2,
        correct_answer=num1 - num2,
    )


def _multiplication(level: int, i: int, rng: random.Random) -> MathQuestion:
    num1 = rng.randint(1, 10)
    num2 = min(rng.randrange(level - 10) + 1, 10)
    return MathQuestion(
        question_id=f"math-{level}-multiplication-{i}",
        difficulty=Difficulty.HARD,
        time_limit_seconds=40,
        operation=MathOperation.MULTIPLICATION,
        num1=num1,
        num2=num2,
        correct_answer=num1 * num2,
    )


def _division(level: int, i: int, rng: random.Random) -> MathQuestion:
    # Dividend is derived so the quotient is always a whole number
    divisor = rng.randint(1, 9)
    quotient = rng.randint(1, 9)
    return MathQuestion(
        question_id=f"math-{level}-division-{i}",
        difficulty=Difficulty.HARD,
        time_limit_seconds=45,
        operation=MathOperation.DIVISION,
        num1=divisor * quotient,
        num2=divisor,
        correct_answer=quotient,
    )


def _mixed(level: int, i: int, rng: random.Random) -> MathQuestion:
    operation = MIXED_OPERATIONS[i % len(MIXED_OPERATIONS)]
    num1 = rng.randint(1, 20)
    num2 = rng.randint(1, 10)
    if operation == MathOperation.SUBTRACTION and num2 > num1:
        num1, num2 = num2, num1
    return MathQuestion(
        question_id=f"math-{level}-mixed-{i}",
        difficulty=Difficulty.HARD,
        time_limit_seconds=50,
        operation=operation,
        num1=num1,
        num2=num2,
        correct_answer=apply_operation(operation, num1, num2),
    )


def generate_math_questions(level: int, rng: random.Random) -> list[MathQuestion]:
    if level <= 5:
        questions = [_addition(level, i, rng) for i in range(QUESTIONS_PER_LEVEL)]
    elif level <= 10:
        questions = [_subtraction(level, i, rng) for i in range(QUESTIONS_PER_LEVEL)]
    elif level <= 15:
        questions = [_multiplication(level, i, rng) for i in range(QUESTIONS_PER_LEVEL)]
    else:
        questions = [
            _division(level, i, rng) if i < DIVISION_PER_LEVEL else _mixed(level, i, rng)
            for i in range(QUESTIONS_PER_LEVEL)
        ]

    logger.debug(
        f"Math level {level}: {', '.join(sorted({q.operation.value for q in questions}))}"
    )
    return questions
