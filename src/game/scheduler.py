"""
SM-2 Level Review Scheduler.

After a successful completion a level is locked for a cooldown so the kid
spaces out repeat attempts. The cooldown grows with each good review.

Quality scale (stars earned map 1:1 onto quality):
0-2 - Failed, interval resets to 1 day and ease factor to 2.5
3   - Passed with difficulty, ease factor shrinks by 0.14
4   - Good, ease factor unchanged
5   - Perfect, ease factor grows by 0.1

Intervals: 1 day after the first review, 3 days after the second, then
ceil(previous interval * ease factor).
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import NamedTuple

from loguru import logger

from src.game.clock import Clock, SystemClock
from src.game.models import LevelCompletion, LevelLockStatus
from src.game.scoring import round_half_up
from src.game.types import GameDomain

MS_PER_MINUTE = 60 * 1000
MS_PER_HOUR = 60 * MS_PER_MINUTE
MS_PER_DAY = 24 * MS_PER_HOUR


@dataclass
class SM2Config:
    """Configuration for the SM-2 variant."""

    initial_ease_factor: float = 2.5
    minimum_ease_factor: float = 1.3
    first_interval: int = 1  # Days after the first review
    second_interval: int = 3  # Days after the second review
    minimum_interval: int = 1


class IntervalResult(NamedTuple):
    interval: int
    ease_factor: float


def clamp_quality(quality: float) -> int:
    """Round half-up and clamp to the 0-5 scale."""
    return max(0, min(5, round_half_up(quality)))


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class ReviewScheduler:
    """
    Computes review intervals and lock status for level completions.

    Each (kid, domain, level) has one LevelCompletion:
    - Ease Factor (EF): how easily the kid clears the level (2.5 default, min 1.3)
    - Interval: days until the level unlocks again
    - Repetitions: number of recorded completions
    """

    def __init__(self, config: SM2Config | None = None, clock: Clock | None = None):
        self.config = config or SM2Config()
        self.clock = clock or SystemClock()

    def next_interval(
        self,
        quality: float,
        previous_interval: int = 0,
        previous_ease_factor: float | None = None,
    ) -> IntervalResult:
        """
        Calculate the next interval and ease factor.

        Args:
            quality: Review quality (rounded half-up, clamped to 0-5)
            previous_interval: Current interval in days (0 for never reviewed)
            previous_ease_factor: Current ease factor

        Returns:
            IntervalResult(interval, ease_factor)
        """
        if previous_ease_factor is None:
            previous_ease_factor = self.config.initial_ease_factor
        q = clamp_quality(quality)

        if q < 3:
            # Failed - restart from the beginning
            return IntervalResult(self.config.minimum_interval, self.config.initial_ease_factor)

        # EF' = EF + (0.1 - (5 - q) * (0.08 + (5 - q) * 0.02))
        # EF only moves in 0.02 steps, so rounding drops float drift
        ef_delta = 0.1 - (5 - q) * (0.08 + (5 - q) * 0.02)
        ease_factor = round(max(self.config.minimum_ease_factor, previous_ease_factor + ef_delta), 2)

        if previous_interval <= 0:
            interval = self.config.first_interval
        elif previous_interval == 1:
            interval = self.config.second_interval
        else:
            interval = math.ceil(round(previous_interval * ease_factor, 6))

        return IntervalResult(max(self.config.minimum_interval, interval), ease_factor)

    def create_completion(
        self,
        domain: GameDomain,
        level_number: int,
        stars_earned: int,
    ) -> LevelCompletion:
        """First completion of a level: locked for one day."""
        now = self.clock.now()
        quality = clamp_quality(stars_earned)
        completion = LevelCompletion(
            domain=domain,
            level_number=level_number,
            completed_at=now,
            stars_earned=quality,
            quality=quality,
            repetitions=1,
            interval=self.config.first_interval,
            ease_factor=self.config.initial_ease_factor,
            next_review_at=now + timedelta(days=self.config.first_interval),
        )
        logger.debug(
            f"New completion {completion.level_id}: quality={quality}, "
            f"next review {completion.next_review_at.isoformat()}"
        )
        return completion

    def review_completion(self, completion: LevelCompletion, quality: float) -> LevelCompletion:
        """Record another completion of a level. Returns a new record."""
        interval, ease_factor = self.next_interval(
            quality, completion.interval, completion.ease_factor
        )
        q = clamp_quality(quality)
        now = self.clock.now()

        reviewed = completion.model_copy(
            update={
                "completed_at": now,
                "stars_earned": q,
                "quality": q,
                "repetitions": completion.repetitions + 1,
                "interval": interval,
                "ease_factor": ease_factor,
                "next_review_at": now + timedelta(days=interval),
            }
        )
        logger.debug(
            f"Reviewed {reviewed.level_id}: q={q} interval={interval}d "
            f"EF={ease_factor:.2f} reps={reviewed.repetitions}"
        )
        return reviewed

    def get_lock_status(self, completion: LevelCompletion | None = None) -> LevelLockStatus:
        """Whether the level is cooling down, with the remaining time."""
        if completion is None or completion.next_review_at is None:
            return LevelLockStatus(is_locked=False)

        next_unlock = _as_utc(completion.next_review_at)
        now = self.clock.now()
        if now >= next_unlock:
            return LevelLockStatus(is_locked=False)

        remaining_ms = (next_unlock - now) // timedelta(milliseconds=1)
        return LevelLockStatus(
            is_locked=True,
            next_unlock_at=next_unlock,
            days_until_unlock=remaining_ms // MS_PER_DAY,
            hours_until_unlock=(remaining_ms % MS_PER_DAY) // MS_PER_HOUR,
            minutes_until_unlock=(remaining_ms % MS_PER_HOUR) // MS_PER_MINUTE,
        )

    def reset_level(self, completion: LevelCompletion) -> LevelCompletion:
        """Unlock a level immediately (parent/admin override)."""
        logger.info(f"Lock override for {completion.level_id}")
        return completion.model_copy(update={"next_review_at": self.clock.now()})


def format_time_until_unlock(lock: LevelLockStatus) -> str:
    """Human readable countdown: "12 min", "3h 5m" or "2d 4h"."""
    if not lock.is_locked:
        return ""
    if not lock.days_until_unlock and not lock.hours_until_unlock:
        return f"{lock.minutes_until_unlock or 0} min"
    if not lock.days_until_unlock:
        return f"{lock.hours_until_unlock}h {lock.minutes_until_unlock or 0}m"
    return f"{lock.days_until_unlock}d {lock.hours_until_unlock or 0}h"
