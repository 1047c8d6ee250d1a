"""
Logical thinking domain.

Five questions per level cycling pattern, sequence, puzzle, memory and
pattern again. Each bank item carries its own difficulty; a level draws
from the items at or below its band and rotates through them by level
number, so consecutive levels see different items.

The banks are language neutral enough (emoji, digits, Latin letters) to
serve every locale.
"""

from __future__ import annotations

import random
from dataclasses import dataclass

from loguru import logger

from src.game.models import LogicalQuestion
from src.game.types import DIFFICULTY_RANK, Difficulty, LogicalSubType

from .base import QUESTIONS_PER_LEVEL, band_difficulty, shuffle_fixed


@dataclass(frozen=True)
class LogicalItem:
    question: str
    options: tuple[str, ...]
    answer: str
    difficulty: Difficulty


E, M, H = Difficulty.EASY, Difficulty.MEDIUM, Difficulty.HARD

LOGICAL_BANK: dict[LogicalSubType, tuple[LogicalItem, ...]] = {
    LogicalSubType.PATTERN: (
        LogicalItem("Which shape comes next? 🔴 🟡 🟢 ?", ("🔵", "🟡", "🔴", "⭐"), "🔵", E),
        LogicalItem("Complete the pattern: AB AB AB ?", ("AB", "BA", "AC", "BB"), "AB", E),
        LogicalItem(
            "Which color pattern continues? Red Blue Red Blue ?",
            ("Blue", "Red", "Green", "Yellow"),
            "Red",
            M,
        ),
        LogicalItem(
            "What comes next? 🟠 🟠🟠 🟠🟠🟠 ?",
            ("🟠", "🟠🟠🟠🟠", "🟡🟡", "⭐"),
            "🟠🟠🟠🟠",
            M,
        ),
        LogicalItem("Find the pattern: 2 4 6 8 ?", ("10", "9", "12", "14"), "10", H),
    ),
    LogicalSubType.SEQUENCE: (
        LogicalItem("Continue the sequence: 1 2 3 4 ?", ("5", "6", "3", "2"), "5", E),
        LogicalItem("Find next: 5 10 15 20 ?", ("25", "30", "22", "24"), "25", E),
        LogicalItem("What number is missing? 2 4 6 ? 10", ("7", "8", "5", "9"), "8", M),
        LogicalItem("What comes next? Z Y X W ?", ("V", "U", "T", "S"), "V", M),
        LogicalItem("Next in sequence: 1 1 2 3 5 8 ?", ("10", "13", "12", "11"), "13", H),
    ),
    LogicalSubType.PUZZLE: (
        LogicalItem(
            "A dog has 4 legs. How many legs do 2 dogs have?",
            ("6", "8", "2", "4"),
            "8",
            E,
        ),
        LogicalItem(
            "If you have 3 apples and add 2 more, how many do you have?",
            ("1", "5", "2", "6"),
            "5",
            E,
        ),
        LogicalItem(
            "If today is Monday, what day will it be in 2 days?",
            ("Tuesday", "Wednesday", "Thursday", "Friday"),
            "Wednesday",
            M,
        ),
        LogicalItem(
            "What has a face and hands but no legs? (Hint: tells time)",
            ("A person", "A clock", "A doll", "A book"),
            "A clock",
            H,
        ),
        LogicalItem(
            "Which weighs more: a pound of feathers or a pound of rocks?",
            ("Rocks", "Feathers", "They weigh the same", "Can't tell"),
            "They weigh the same",
            H,
        ),
    ),
    LogicalSubType.MEMORY: (
        LogicalItem(
            "You saw these items for 5 seconds: 🍎 🍌 🍊. Which was NOT there?",
            ("🍎", "🍌", "🍇", "🍊"),
            "🍇",
            E,
        ),
        LogicalItem(
            "Remember the order: Cat Dog Bird. Which comes after Dog?",
            ("Cat", "Dog", "Bird", "Fish"),
            "Bird",
            E,
        ),
        LogicalItem(
            "Remember these: 🎈 🎀 🎁 🎉. Which is missing from: 🎀 🎁 🎉?",
            ("🎈", "🎀", "🎁", "🎉"),
            "🎈",
            M,
        ),
        LogicalItem("You saw: A B C D E. What was in position 3?", ("A", "B", "C", "D"), "C", M),
        LogicalItem(
            "Recall the shapes: 🔴 🟡 🔵 🟢. Pick the one you remember:",
            ("🟡", "🟪", "🟠", "⭐"),
            "🟡",
            H,
        ),
    ),
}

SUB_TYPE_CYCLE = (
    LogicalSubType.PATTERN,
    LogicalSubType.SEQUENCE,
    LogicalSubType.PUZZLE,
    LogicalSubType.MEMORY,
)

TIME_LIMITS: dict[LogicalSubType, int] = {
    LogicalSubType.PATTERN: 30,
    LogicalSubType.SEQUENCE: 35,
    LogicalSubType.PUZZLE: 40,
    LogicalSubType.MEMORY: 45,
}


def candidates_for(sub_type: LogicalSubType, difficulty: Difficulty) -> list[LogicalItem]:
    """Bank items of a sub-type at or below ``difficulty``."""
    ceiling = DIFFICULTY_RANK[difficulty]
    return [item for item in LOGICAL_BANK[sub_type] if DIFFICULTY_RANK[item.difficulty] <= ceiling]


def generate_logical_questions(level: int, rng: random.Random) -> list[LogicalQuestion]:
    difficulty = band_difficulty(level)
    questions: list[LogicalQuestion] = []
    seen: dict[LogicalSubType, int] = {}

    for i in range(QUESTIONS_PER_LEVEL):
        sub_type = SUB_TYPE_CYCLE[i % len(SUB_TYPE_CYCLE)]
        occurrence = seen.get(sub_type, 0)
        seen[sub_type] = occurrence + 1

        pool = candidates_for(sub_type, difficulty)
        item = pool[(level - 1 + occurrence) % len(pool)]
        options, index = shuffle_fixed(item.options, item.answer, rng)

        questions.append(
            LogicalQuestion(
                question_id=f"logical-{level}-{sub_type.value}-{i}",
                difficulty=difficulty,
                time_limit_seconds=TIME_LIMITS[sub_type],
                sub_type=sub_type,
                question=item.question,
                options=options,
                correct_answer_index=index,
            )
        )

    logger.debug(f"Logical level {level}: {len(questions)} questions ({difficulty.value})")
    return questions
