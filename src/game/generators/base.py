"""
Shared helpers for the domain question generators.

- Level/locale validation at the generator boundary
- Multiple choice option building (target once + distinct distractors,
  then a uniform shuffle so the correct index carries no positional bias)
- Cycling through short content banks
"""

from __future__ import annotations

import random
from collections.abc import Sequence
from typing import TypeVar

from src.game.errors import InvalidLevelError, UnsupportedLocaleError
from src.game.types import DEFAULT_LOCALE, Difficulty, Locale

T = TypeVar("T")

QUESTIONS_PER_LEVEL = 5
DISTRACTOR_COUNT = 3


def validate_level(level: object) -> int:
    """Return the level if it is a positive int, else raise InvalidLevelError."""
    if isinstance(level, bool) or not isinstance(level, int) or level < 1:
        raise InvalidLevelError(level)
    return level


def resolve_locale(locale: Locale | str | None, default: Locale = DEFAULT_LOCALE) -> Locale:
    """Map a locale argument onto the Locale enum. None means the default."""
    if locale is None:
        return default
    if isinstance(locale, Locale):
        return locale
    try:
        return Locale(str(locale).strip().lower())
    except ValueError:
        raise UnsupportedLocaleError(locale) from None


def band_difficulty(level: int, easy_max: int = 5, medium_max: int = 10) -> Difficulty:
    if level <= easy_max:
        return Difficulty.EASY
    if level <= medium_max:
        return Difficulty.MEDIUM
    return Difficulty.HARD


def shuffled(items: Sequence[T], rng: random.Random) -> list[T]:
    """Uniformly shuffled copy (Fisher-Yates via Random.shuffle)."""
    result = list(items)
    rng.shuffle(result)
    return result


def build_options(
    target: str,
    pool: Sequence[str],
    rng: random.Random,
    distractor_count: int = DISTRACTOR_COUNT,
) -> tuple[list[str], int]:
    """
    Build a shuffled options list containing ``target`` exactly once.

    Distractors are drawn without replacement from ``pool`` after removing
    the target and any repeated entries.

    Returns:
        (options, index of target)
    """
    candidates = list(dict.fromkeys(p for p in pool if p != target))
    if len(candidates) < distractor_count:
        raise ValueError(
            f"Distractor pool for {target!r} has {len(candidates)} entries, "
            f"need {distractor_count}"
        )
    options = shuffled([target, *rng.sample(candidates, distractor_count)], rng)
    return options, options.index(target)


def shuffle_fixed(
    options: Sequence[str],
    answer: str,
    rng: random.Random,
) -> tuple[list[str], int]:
    """Shuffle an authored options list and locate its answer."""
    if list(options).count(answer) != 1:
        raise ValueError(f"Answer {answer!r} must appear exactly once in {list(options)}")
    result = shuffled(options, rng)
    return result, result.index(answer)


def take_cycled(items: Sequence[T], count: int, offset: int = 0) -> list[T]:
    """Take ``count`` items starting at ``offset``, wrapping around the bank."""
    if not items:
        raise ValueError("Cannot cycle through an empty content bank")
    return [items[(offset + i) % len(items)] for i in range(count)]
