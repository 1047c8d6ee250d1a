"""
Unit tests for the SM-2 level review scheduler.

Run: pytest tests/unit/test_scheduler.py -v
"""

from datetime import timedelta

import pytest

from src.game.models import LevelCompletion, LevelLockStatus
from src.game.scheduler import (
    ReviewScheduler,
    SM2Config,
    clamp_quality,
    format_time_until_unlock,
)
from src.game.types import GameDomain


@pytest.fixture
def scheduler(clock):
    return ReviewScheduler(clock=clock)


class TestNextInterval:
    def test_first_review(self, scheduler):
        assert scheduler.next_interval(5, previous_interval=0) == (1, 2.6)

    def test_two_perfect_reviews(self, scheduler):
        first = scheduler.next_interval(5, previous_interval=0, previous_ease_factor=2.5)
        second = scheduler.next_interval(5, first.interval, first.ease_factor)

        assert first == (1, 2.6)
        assert second == (3, 2.7)

    def test_second_review(self, scheduler):
        interval, ease = scheduler.next_interval(4, previous_interval=1, previous_ease_factor=2.5)
        assert interval == 3
        assert ease == 2.5

    def test_later_review_uses_ceil(self, scheduler):
        interval, ease = scheduler.next_interval(5, previous_interval=6, previous_ease_factor=2.5)
        assert ease == 2.6
        assert interval == 16  # ceil(6 * 2.6 = 15.6)

    def test_exact_product_is_not_bumped(self, scheduler):
        interval, ease = scheduler.next_interval(5, previous_interval=5, previous_ease_factor=2.5)
        assert ease == 2.6
        assert interval == 13

    def test_quality_three_shrinks_ease(self, scheduler):
        _, ease = scheduler.next_interval(3, previous_interval=3, previous_ease_factor=2.5)
        assert ease == 2.36

    @pytest.mark.parametrize("quality", [0, 1, 2, 2.4])
    def test_failure_resets(self, scheduler, quality):
        assert scheduler.next_interval(quality, previous_interval=30, previous_ease_factor=1.8) == (1, 2.5)

    def test_ease_floor(self, scheduler):
        _, ease = scheduler.next_interval(3, previous_interval=10, previous_ease_factor=1.3)
        assert ease == 1.3

    def test_quality_rounded_half_up(self, scheduler):
        # 2.5 rounds to 3, a pass
        interval, ease = scheduler.next_interval(2.5, previous_interval=1, previous_ease_factor=2.5)
        assert interval == 3
        assert ease == 2.36

    @pytest.mark.parametrize("raw,expected", [(-3, 0), (7, 5), (4.5, 5), (4.49, 4)])
    def test_clamp_quality(self, raw, expected):
        assert clamp_quality(raw) == expected

    def test_interval_never_decreases_on_passing_reviews(self, scheduler):
        interval, ease = 0, 2.5
        seen = []
        for quality in [3, 4, 5, 3, 3, 3, 3, 4]:
            interval, ease = scheduler.next_interval(quality, interval, ease)
            seen.append(interval)
            assert ease >= 1.3
        assert seen == sorted(seen)

    @pytest.mark.parametrize("ease", [1.3, 2.5, 3.0])
    @pytest.mark.parametrize("quality", [3, 4, 5])
    def test_interval_monotonic_in_previous_interval(self, scheduler, quality, ease):
        intervals = [scheduler.next_interval(quality, previous, ease).interval for previous in range(61)]

        assert intervals == sorted(intervals)
        assert intervals[0] == 1

    def test_custom_config(self, clock):
        scheduler = ReviewScheduler(SM2Config(initial_ease_factor=2.0, second_interval=6), clock)
        assert scheduler.next_interval(4, previous_interval=1) == (6, 2.0)
        assert scheduler.next_interval(0, previous_interval=1) == (1, 2.0)


class TestCompletions:
    def test_create_completion(self, scheduler, clock):
        completion = scheduler.create_completion(GameDomain.MATHEMATICS, 4, 3)

        assert completion.level_id == "mathematics-level-4"
        assert completion.quality == 3
        assert completion.stars_earned == 3
        assert completion.repetitions == 1
        assert completion.interval == 1
        assert completion.ease_factor == 2.5
        assert completion.completed_at == clock.now()
        assert completion.next_review_at == clock.now() + timedelta(days=1)

    def test_review_completion(self, scheduler, clock):
        first = scheduler.create_completion(GameDomain.LOGICAL, 2, 4)
        clock.advance(days=2)

        second = scheduler.review_completion(first, 5)

        assert second.repetitions == 2
        assert second.interval == 3
        assert second.ease_factor == 2.6
        assert second.quality == 5
        assert second.stars_earned == 5
        assert second.completed_at == clock.now()
        assert second.next_review_at == clock.now() + timedelta(days=3)
        # Original record untouched
        assert first.repetitions == 1

    def test_review_failure_resets_but_counts(self, scheduler, clock):
        completion = scheduler.create_completion(GameDomain.LOGICAL, 2, 5)
        for _ in range(3):
            clock.advance(days=30)
            completion = scheduler.review_completion(completion, 5)
        clock.advance(days=60)

        failed = scheduler.review_completion(completion, 1)

        assert failed.interval == 1
        assert failed.ease_factor == 2.5
        assert failed.repetitions == completion.repetitions + 1

    def test_completion_json_round_trip(self, scheduler):
        completion = scheduler.create_completion(GameDomain.LANGUAGE, 7, 4)

        restored = LevelCompletion.model_validate_json(completion.model_dump_json())

        assert restored == completion


class TestLockStatus:
    def test_no_record_is_unlocked(self, scheduler):
        assert scheduler.get_lock_status(None) == LevelLockStatus(is_locked=False)

    def test_missing_review_time_is_unlocked(self, scheduler, clock):
        completion = scheduler.create_completion(GameDomain.MATHEMATICS, 1, 3)
        completion = completion.model_copy(update={"next_review_at": None})
        assert scheduler.get_lock_status(completion).is_locked is False

    def test_locked_breakdown(self, scheduler, clock):
        completion = scheduler.create_completion(GameDomain.MATHEMATICS, 1, 3)
        clock.advance(hours=1, minutes=30)

        lock = scheduler.get_lock_status(completion)

        assert lock.is_locked is True
        assert lock.next_unlock_at == completion.next_review_at
        assert lock.days_until_unlock == 0
        assert lock.hours_until_unlock == 22
        assert lock.minutes_until_unlock == 30

    def test_multi_day_breakdown(self, scheduler, clock):
        completion = scheduler.create_completion(GameDomain.MATHEMATICS, 1, 3)
        completion = completion.model_copy(
            update={"next_review_at": clock.now() + timedelta(days=2, hours=4, minutes=5, seconds=59)}
        )

        lock = scheduler.get_lock_status(completion)

        assert (lock.days_until_unlock, lock.hours_until_unlock, lock.minutes_until_unlock) == (2, 4, 5)

    def test_unlocks_exactly_at_review_time(self, scheduler, clock):
        completion = scheduler.create_completion(GameDomain.MATHEMATICS, 1, 3)
        clock.advance(days=1)
        assert scheduler.get_lock_status(completion).is_locked is False

    def test_idempotent_for_fixed_clock(self, scheduler):
        completion = scheduler.create_completion(GameDomain.MATHEMATICS, 1, 3)
        assert scheduler.get_lock_status(completion) == scheduler.get_lock_status(completion)

    def test_reset_level(self, scheduler, clock):
        completion = scheduler.create_completion(GameDomain.MATHEMATICS, 1, 3)

        reset = scheduler.reset_level(completion)

        assert reset.next_review_at == clock.now()
        assert scheduler.get_lock_status(reset).is_locked is False
        assert reset.repetitions == completion.repetitions
        assert reset.ease_factor == completion.ease_factor


class TestFormatTimeUntilUnlock:
    def test_unlocked(self):
        assert format_time_until_unlock(LevelLockStatus(is_locked=False)) == ""

    def test_minutes_only(self):
        lock = LevelLockStatus(is_locked=True, days_until_unlock=0, hours_until_unlock=0, minutes_until_unlock=12)
        assert format_time_until_unlock(lock) == "12 min"

    def test_hours_and_minutes(self):
        lock = LevelLockStatus(is_locked=True, days_until_unlock=0, hours_until_unlock=3, minutes_until_unlock=5)
        assert format_time_until_unlock(lock) == "3h 5m"

    def test_days_and_hours(self):
        lock = LevelLockStatus(is_locked=True, days_until_unlock=2, hours_until_unlock=4, minutes_until_unlock=59)
        assert format_time_until_unlock(lock) == "2d 4h"
