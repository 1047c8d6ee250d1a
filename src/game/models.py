"""
Data model for the level engine.

Every shape here is a pydantic model so it round-trips through JSON:
questions (discriminated on ``type``), sessions and answers, results,
spaced-repetition completion records, awards and kid progress.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, model_validator

from .types import (
    Difficulty,
    GameDomain,
    LogicalSubType,
    MathOperation,
    WritingSkill,
)

MAX_STARS = 5


def make_level_id(domain: GameDomain | str, level_number: int) -> str:
    """Stable identifier of a level, e.g. ``mathematics-level-4``."""
    domain_value = domain.value if isinstance(domain, GameDomain) else domain
    return f"{domain_value}-level-{level_number}"


# =============================================================================
# Questions
# =============================================================================


class BaseQuestion(BaseModel):
    """Fields shared by every question variant."""

    model_config = ConfigDict(frozen=True)

    question_id: str
    difficulty: Difficulty
    time_limit_seconds: int = Field(gt=0)


class ChoiceQuestionMixin(BaseModel):
    """Options list with the index of the single correct option."""

    options: list[str] = Field(min_length=2)
    correct_answer_index: int = Field(ge=0)

    @model_validator(mode="after")
    def _check_options(self):
        if len(set(self.options)) != len(self.options):
            raise ValueError(f"options contain duplicates: {self.options}")
        if self.correct_answer_index >= len(self.options):
            raise ValueError(
                f"correct_answer_index {self.correct_answer_index} out of range "
                f"for {len(self.options)} options"
            )
        return self

    @property
    def correct_option(self) -> str:
        return self.options[self.correct_answer_index]


class WritingQuestion(BaseQuestion):
    type: Literal["writing"] = "writing"
    prompt: str
    skill: WritingSkill
    correct_answer: str = Field(min_length=1)


class ReadingQuestion(ChoiceQuestionMixin, BaseQuestion):
    type: Literal["reading"] = "reading"
    text: str
    question: str
    image_url: str | None = None


class ListeningQuestion(ChoiceQuestionMixin, BaseQuestion):
    type: Literal["listening"] = "listening"
    spoken_text: str  # handed to the text-to-speech collaborator
    question: str
    audio_url: str | None = None


class MathQuestion(BaseQuestion):
    type: Literal["math"] = "math"
    operation: MathOperation
    num1: int
    num2: int
    correct_answer: int

    @model_validator(mode="after")
    def _check_arithmetic(self):
        op = self.operation
        if op == MathOperation.ADDITION:
            expected = self.num1 + self.num2
        elif op == MathOperation.SUBTRACTION:
            expected = self.num1 - self.num2
        elif op == MathOperation.MULTIPLICATION:
            expected = self.num1 * self.num2
        else:
            if self.num2 == 0 or self.num1 % self.num2 != 0:
                raise ValueError(f"{self.num1} is not evenly divisible by {self.num2}")
            expected = self.num1 // self.num2
        if expected != self.correct_answer:
            raise ValueError(
                f"correct_answer {self.correct_answer} does not match "
                f"{self.num1} {op.value} {self.num2}"
            )
        if expected < 0:
            raise ValueError("math questions must have a non-negative result")
        return self


class LogicalQuestion(ChoiceQuestionMixin, BaseQuestion):
    type: Literal["logical"] = "logical"
    sub_type: LogicalSubType
    question: str
    image_urls: list[str] | None = None


Question = Annotated[
    Union[WritingQuestion, ReadingQuestion, ListeningQuestion, MathQuestion, LogicalQuestion],
    Field(discriminator="type"),
]

QUESTION_ADAPTER: TypeAdapter[Question] = TypeAdapter(Question)


def parse_question(data: dict) -> Question:
    """Build the right question variant from its JSON shape."""
    return QUESTION_ADAPTER.validate_python(data)


# =============================================================================
# Levels
# =============================================================================


class GameLevel(BaseModel):
    level_id: str
    domain: GameDomain
    level_number: int = Field(ge=1)
    difficulty: Difficulty
    title: str
    description: str
    max_stars: int = MAX_STARS
    created_at: datetime
    is_available: bool = True


class GeneratedLevel(GameLevel):
    """Level metadata plus its question set."""

    questions: list[Question]

    @property
    def total_time_limit_seconds(self) -> int:
        return sum(q.time_limit_seconds for q in self.questions)


# =============================================================================
# Sessions
# =============================================================================


class GameAnswer(BaseModel):
    """One graded answer. ``user_answer`` is None when the question timed out."""

    model_config = ConfigDict(frozen=True)

    question_id: str
    user_answer: int | str | None
    correct_answer: int | str
    is_correct: bool
    time_taken_seconds: float = Field(ge=0)


class GameSession(BaseModel):
    session_id: str
    kid_id: str
    level_id: str
    domain: GameDomain
    level_number: int = Field(ge=1)
    started_at: datetime
    completed_at: datetime | None = None
    answers: list[GameAnswer] = Field(default_factory=list)
    score: int = 0
    stars_earned: int = 0
    time_taken_seconds: float = 0
    is_completed: bool = False

    @property
    def correct_count(self) -> int:
        return sum(1 for a in self.answers if a.is_correct)


class GameSessionResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    session_id: str
    level_id: str
    domain: GameDomain
    level_number: int
    is_completed: bool
    stars_earned: int = Field(ge=0, le=MAX_STARS)
    score: int
    percentage: int = Field(ge=0, le=100)
    time_taken_seconds: float
    feedback: str
    next_level_available: bool
    points_awarded: int = Field(ge=0)


# =============================================================================
# Spaced repetition
# =============================================================================


class LevelCompletion(BaseModel):
    """SM-2 state of one (kid, domain, level). Overwritten on every attempt."""

    domain: GameDomain
    level_number: int = Field(ge=1)
    completed_at: datetime
    stars_earned: int = Field(ge=0, le=MAX_STARS)
    quality: int = Field(ge=0, le=5)
    repetitions: int = Field(ge=0)
    interval: int = Field(ge=1)
    ease_factor: float = Field(default=2.5, ge=1.3)
    next_review_at: datetime | None = None

    @property
    def level_id(self) -> str:
        return make_level_id(self.domain, self.level_number)


class LevelLockStatus(BaseModel):
    model_config = ConfigDict(frozen=True)

    is_locked: bool
    next_unlock_at: datetime | None = None
    days_until_unlock: int | None = None
    hours_until_unlock: int | None = None
    minutes_until_unlock: int | None = None


# =============================================================================
# Awards & progress
# =============================================================================


class LevelAward(BaseModel):
    model_config = ConfigDict(frozen=True)

    award_id: str
    kid_id: str
    level_id: str
    domain: GameDomain
    level_number: int
    stars_earned: int
    points_awarded: int
    completed_at: datetime
    reason: str


def _per_domain_zero() -> dict[GameDomain, int]:
    return {domain: 0 for domain in GameDomain}


class KidProgress(BaseModel):
    """Aggregate progress of one kid across domains."""

    kid_id: str
    max_level_completed: dict[GameDomain, int] = Field(default_factory=_per_domain_zero)
    total_stars: dict[GameDomain, int] = Field(default_factory=_per_domain_zero)
    completed_levels: dict[str, int] = Field(default_factory=dict)  # level_id -> best stars
    sessions_completed: int = 0
    last_played: datetime | None = None

    def best_stars(self, domain: GameDomain, level_number: int) -> int:
        return self.completed_levels.get(make_level_id(domain, level_number), 0)

    @property
    def grand_total_stars(self) -> int:
        return sum(self.total_stars.values())
