"""
Session scoring.

Turns a finished session into percentage, stars, points and feedback.

Star thresholds (percentage correct, first match wins):
5 - 100%
4 - 90%
3 - 80%
2 - 70%
1 - 60%
0 - below 60%
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import ROUND_FLOOR, ROUND_HALF_UP, Decimal

from src.game.errors import EmptySessionError
from src.game.models import MAX_STARS, GameSession, GameSessionResult


def _default_thresholds() -> dict[int, int]:
    return {5: 100, 4: 90, 3: 80, 2: 70, 1: 60}


def _default_points() -> dict[int, int]:
    return {1: 5, 2: 10, 3: 15, 4: 20, 5: 25}


FEEDBACK: dict[int, str] = {
    5: "🌟 Perfect! You're a superstar!",
    4: "⭐ Excellent work!",
    3: "Good job! Keep practicing!",
    2: "Nice try! You can do better!",
    1: "✨ You passed! Try again to improve!",
    0: "Keep practicing! You'll get it next time!",
}


@dataclass
class ScoringConfig:
    """Configuration for session scoring."""

    star_thresholds: dict[int, int] = field(default_factory=_default_thresholds)  # stars -> min %
    points_per_star: dict[int, int] = field(default_factory=_default_points)
    time_bonus_enabled: bool = True
    time_bonus_points_per_second: float = 0.1
    unlock_star_threshold: int = 3  # stars needed to open the next level
    points_per_correct_answer: int = 10  # running session score


def round_half_up(value: Decimal | float) -> int:
    return int(Decimal(str(value)).quantize(Decimal(1), rounding=ROUND_HALF_UP))


def percentage_correct(correct: int, total: int) -> int:
    if total <= 0:
        raise ValueError("total must be positive")
    return round_half_up(Decimal(100 * correct) / Decimal(total))


def stars_for(correct: int, total: int, config: ScoringConfig | None = None) -> int:
    """Stars for ``correct`` out of ``total``, compared on the exact ratio."""
    config = config or ScoringConfig()
    for stars in sorted(config.star_thresholds, reverse=True):
        if correct * 100 >= config.star_thresholds[stars] * total:
            return min(stars, MAX_STARS)
    return 0


def time_bonus(
    time_limit_seconds: float,
    time_taken_seconds: float,
    config: ScoringConfig | None = None,
) -> int:
    config = config or ScoringConfig()
    if not config.time_bonus_enabled:
        return 0
    saved = max(0.0, float(time_limit_seconds) - float(time_taken_seconds))
    bonus = Decimal(str(saved)) * Decimal(str(config.time_bonus_points_per_second))
    return int(bonus.to_integral_value(rounding=ROUND_FLOOR))


def feedback_for(stars: int) -> str:
    return FEEDBACK.get(stars, FEEDBACK[0])


def calculate_result(
    session: GameSession,
    total_time_limit_seconds: float,
    config: ScoringConfig | None = None,
) -> GameSessionResult:
    """
    Grade a finished session.

    Args:
        session: Session with at least one answer
        total_time_limit_seconds: Sum of the level's question time limits
        config: Scoring configuration (defaults if None)

    Raises:
        EmptySessionError: the session has no answers
    """
    config = config or ScoringConfig()
    total = len(session.answers)
    if total == 0:
        raise EmptySessionError(session.session_id)

    correct = session.correct_count
    stars = stars_for(correct, total, config)

    # Zero stars means zero points: the time bonus only tops up a passing
    # session's star points, however much time was left over
    points = 0
    if stars >= 1:
        points = config.points_per_star.get(stars, 0) + time_bonus(
            total_time_limit_seconds, session.time_taken_seconds, config
        )

    return GameSessionResult(
        session_id=session.session_id,
        level_id=session.level_id,
        domain=session.domain,
        level_number=session.level_number,
        is_completed=stars >= 1,
        stars_earned=stars,
        score=session.score,
        percentage=percentage_correct(correct, total),
        time_taken_seconds=session.time_taken_seconds,
        feedback=feedback_for(stars),
        next_level_available=stars >= config.unlock_star_threshold,
        points_awarded=points,
    )
