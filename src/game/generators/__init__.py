"""
Question generators.

Difficulty and subject matter are a pure function of (domain, level,
locale); randomness comes only from the injected ``random.Random``.

Usage:
    from src.game.generators import generate_level

    level = generate_level(GameDomain.MATHEMATICS, 4, rng=random.Random(7))
"""

from __future__ import annotations

import random

from loguru import logger

from src.game.clock import Clock, SystemClock
from src.game.models import GeneratedLevel, Question, make_level_id
from src.game.types import GameDomain, Locale

from .base import band_difficulty, resolve_locale, validate_level
from .language import generate_language_questions
from .logical import generate_logical_questions
from .mathematics import generate_math_questions

DOMAIN_TITLES: dict[GameDomain, str] = {
    GameDomain.LANGUAGE: "Language",
    GameDomain.MATHEMATICS: "Math",
    GameDomain.LOGICAL: "Logic",
}

DOMAIN_DESCRIPTIONS: dict[GameDomain, dict[str, str]] = {
    GameDomain.LANGUAGE: {
        "early": "Learn letters and basic words",
        "intermediate": "Practice reading and writing",
        "advanced": "Master sentences and comprehension",
    },
    GameDomain.MATHEMATICS: {
        "early": "Discover numbers and simple addition",
        "intermediate": "Practice multiplication and division",
        "advanced": "Solve complex math problems",
    },
    GameDomain.LOGICAL: {
        "early": "Recognize patterns and sequences",
        "intermediate": "Solve puzzles and remember patterns",
        "advanced": "Master complex logic challenges",
    },
}


def level_stage(level: int) -> str:
    if level <= 5:
        return "early"
    if level <= 15:
        return "intermediate"
    return "advanced"


def level_title(domain: GameDomain, level: int) -> str:
    return f"{DOMAIN_TITLES[domain]} Level {level}"


def level_description(domain: GameDomain, level: int) -> str:
    return DOMAIN_DESCRIPTIONS[domain][level_stage(level)]


def generate_questions(
    domain: GameDomain | str,
    level: int,
    locale: Locale | str | None = None,
    rng: random.Random | None = None,
) -> list[Question]:
    """
    Generate the question set of one level.

    Args:
        domain: Learning domain
        level: Level number (positive int)
        locale: Content locale, only used by the language domain
        rng: Random source for operands, distractors and shuffles

    Raises:
        InvalidLevelError: level is not a positive int
        UnsupportedLocaleError: locale has no content bank
    """
    level = validate_level(level)
    domain = GameDomain(domain)
    resolved = resolve_locale(locale)
    rng = rng or random.Random()

    if domain == GameDomain.LANGUAGE:
        return generate_language_questions(level, resolved, rng)
    if domain == GameDomain.MATHEMATICS:
        return generate_math_questions(level, rng)
    return generate_logical_questions(level, rng)


def generate_level(
    domain: GameDomain | str,
    level: int,
    locale: Locale | str | None = None,
    rng: random.Random | None = None,
    clock: Clock | None = None,
) -> GeneratedLevel:
    """Level metadata plus its generated question set."""
    questions = generate_questions(domain, level, locale=locale, rng=rng)
    domain = GameDomain(domain)
    clock = clock or SystemClock()

    generated = GeneratedLevel(
        level_id=make_level_id(domain, level),
        domain=domain,
        level_number=level,
        difficulty=band_difficulty(level, easy_max=5, medium_max=15),
        title=level_title(domain, level),
        description=level_description(domain, level),
        created_at=clock.now(),
        questions=questions,
    )
    logger.debug(f"Generated {generated.level_id} with {len(questions)} questions")
    return generated


__all__ = [
    "generate_level",
    "generate_questions",
    "level_description",
    "level_title",
]
