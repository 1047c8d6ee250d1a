"""
Enumerations shared by the level engine.

String-valued enums so every persisted shape stays plain JSON.
"""

from __future__ import annotations

from enum import Enum


class GameDomain(str, Enum):
    """Learning subjects."""

    LANGUAGE = "language"
    MATHEMATICS = "mathematics"
    LOGICAL = "logical"


class Locale(str, Enum):
    """Content locales with a bundled content bank."""

    EN = "en"
    HI = "hi"
    ZH = "zh"


DEFAULT_LOCALE = Locale.EN


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


DIFFICULTY_RANK: dict[Difficulty, int] = {
    Difficulty.EASY: 0,
    Difficulty.MEDIUM: 1,
    Difficulty.HARD: 2,
}


class QuestionType(str, Enum):
    """Question variants. Each one has a registered handler."""

    WRITING = "writing"
    READING = "reading"
    LISTENING = "listening"
    MATH = "math"
    LOGICAL = "logical"


class WritingSkill(str, Enum):
    DRAW = "draw"
    TYPE = "type"


class MathOperation(str, Enum):
    ADDITION = "addition"
    SUBTRACTION = "subtraction"
    MULTIPLICATION = "multiplication"
    DIVISION = "division"


MATH_SYMBOLS: dict[MathOperation, str] = {
    MathOperation.ADDITION: "+",
    MathOperation.SUBTRACTION: "-",
    MathOperation.MULTIPLICATION: "×",
    MathOperation.DIVISION: "÷",
}


class LogicalSubType(str, Enum):
    PATTERN = "pattern"
    SEQUENCE = "sequence"
    PUZZLE = "puzzle"
    MEMORY = "memory"


class EnginePhase(str, Enum):
    """States of the session state machine."""

    IDLE = "idle"
    LEVEL_SELECTED = "level-selected"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
