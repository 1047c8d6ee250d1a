"""
Progress derivation.

Unlock rules, next-level selection, achievement badges and folding a
finished session into a kid's KidProgress and award history.
"""

from __future__ import annotations

import uuid
from datetime import datetime

from loguru import logger

from src.game.models import GameSessionResult, KidProgress, LevelAward
from src.game.types import GameDomain

UNLOCK_STAR_THRESHOLD = 3
MAX_SCANNED_LEVEL = 50

STAR_BADGES: tuple[tuple[int, str], ...] = (
    (10, "🌟 Star Collector (10 stars)"),
    (50, "⭐ Star Master (50 stars)"),
    (100, "✨ Star Legend (100 stars)"),
)

DOMAIN_BADGES: dict[GameDomain, str] = {
    GameDomain.LANGUAGE: "📚 Language Learner (5 levels)",
    GameDomain.MATHEMATICS: "🔢 Math Genius (5 levels)",
    GameDomain.LOGICAL: "🧩 Logic Master (5 levels)",
}

DOMAIN_BADGE_LEVELS = 5
ULTIMATE_BADGE_LEVELS = 15
ULTIMATE_BADGE = "🏆 Ultimate Learner (15 levels)"


class ProgressTracker:
    """Pure rules over KidProgress."""

    def __init__(self, unlock_star_threshold: int = UNLOCK_STAR_THRESHOLD):
        self.unlock_star_threshold = unlock_star_threshold

    def is_level_unlocked(self, progress: KidProgress, domain: GameDomain, level_number: int) -> bool:
        """Level 1 is always open; level n needs enough stars on level n-1."""
        if level_number <= 1:
            return True
        return progress.best_stars(domain, level_number - 1) >= self.unlock_star_threshold

    def get_max_unlocked_level(self, progress: KidProgress, domain: GameDomain) -> int:
        """Highest reachable level, walking up from level 1 until a level is not yet passed."""
        max_level = 1
        for level in range(1, MAX_SCANNED_LEVEL):
            if progress.best_stars(domain, level) < self.unlock_star_threshold:
                break
            max_level = level + 1
        return max_level

    def get_next_level(self, max_level_completed: int, stars_on_current_level: int) -> int:
        if stars_on_current_level >= self.unlock_star_threshold:
            return max_level_completed + 1
        return max_level_completed

    @staticmethod
    def get_achievements(total_stars: int, levels_by_domain: dict[GameDomain, int]) -> list[str]:
        achievements = [badge for threshold, badge in STAR_BADGES if total_stars >= threshold]

        for domain, badge in DOMAIN_BADGES.items():
            if levels_by_domain.get(domain, 0) >= DOMAIN_BADGE_LEVELS:
                achievements.append(badge)

        if sum(levels_by_domain.values()) >= ULTIMATE_BADGE_LEVELS:
            achievements.append(ULTIMATE_BADGE)

        return achievements

    def achievements_for(self, progress: KidProgress) -> list[str]:
        return self.get_achievements(progress.grand_total_stars, progress.max_level_completed)

    def apply_result(
        self,
        progress: KidProgress,
        result: GameSessionResult,
        played_at: datetime,
    ) -> KidProgress:
        """
        Fold a completed session into progress. Returns a new KidProgress.

        Stars accumulate per domain; best stars per level only go up.
        """
        domain = result.domain
        max_levels = dict(progress.max_level_completed)
        totals = dict(progress.total_stars)
        completed = dict(progress.completed_levels)

        max_levels[domain] = max(max_levels.get(domain, 0), result.level_number)
        totals[domain] = totals.get(domain, 0) + result.stars_earned
        completed[result.level_id] = max(completed.get(result.level_id, 0), result.stars_earned)

        updated = progress.model_copy(
            update={
                "max_level_completed": max_levels,
                "total_stars": totals,
                "completed_levels": completed,
                "sessions_completed": progress.sessions_completed + 1,
                "last_played": played_at,
            }
        )
        logger.debug(
            f"Progress {progress.kid_id}: {result.level_id} best={completed[result.level_id]}★, "
            f"{domain.value} total={totals[domain]}★"
        )
        return updated


def build_award(
    kid_id: str,
    result: GameSessionResult,
    reason: str,
    completed_at: datetime,
) -> LevelAward:
    return LevelAward(
        award_id=f"award-{uuid.uuid4().hex[:12]}",
        kid_id=kid_id,
        level_id=result.level_id,
        domain=result.domain,
        level_number=result.level_number,
        stars_earned=result.stars_earned,
        points_awarded=result.points_awarded,
        completed_at=completed_at,
        reason=reason,
    )
