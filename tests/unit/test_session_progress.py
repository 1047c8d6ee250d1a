"""
Unit tests for session records, progress rules and achievements.

Run: pytest tests/unit/test_session_progress.py -v
"""

from datetime import timedelta

import pytest

from src.game.errors import SessionCompletedError
from src.game.models import GameAnswer, GameSessionResult, KidProgress
from src.game.progress import ProgressTracker, build_award
from src.game.scoring import calculate_result
from src.game.session import GameSessionManager
from src.game.types import GameDomain


@pytest.fixture
def manager(clock):
    return GameSessionManager(clock=clock)


@pytest.fixture
def tracker():
    return ProgressTracker()


def answer(correct: bool, seconds: float = 5.0) -> GameAnswer:
    return GameAnswer(
        question_id="q",
        user_answer=1 if correct else 0,
        correct_answer=1,
        is_correct=correct,
        time_taken_seconds=seconds,
    )


def result_for(domain: GameDomain, level: int, stars: int) -> GameSessionResult:
    return GameSessionResult(
        session_id="s",
        level_id=f"{domain.value}-level-{level}",
        domain=domain,
        level_number=level,
        is_completed=stars >= 1,
        stars_earned=stars,
        score=10,
        percentage=100,
        time_taken_seconds=10,
        feedback="",
        next_level_available=stars >= 3,
        points_awarded=stars * 5,
    )


def progress_with(**best: int) -> KidProgress:
    """KidProgress with best stars for math levels, e.g. progress_with(l1=3, l2=4)."""
    completed = {f"mathematics-level-{key[1:]}": stars for key, stars in best.items()}
    return KidProgress(kid_id="kid-1", completed_levels=completed)


# =============================================================================
# Session manager
# =============================================================================


class TestSessionManager:
    def test_create_session(self, manager, clock):
        session = manager.create_session("kid-1", GameDomain.LOGICAL, 3)

        assert session.session_id.startswith("session-kid-1-")
        assert session.level_id == "logical-level-3"
        assert session.started_at == clock.now()
        assert session.answers == []
        assert session.is_completed is False

    def test_session_ids_are_unique(self, manager):
        ids = {manager.create_session("kid-1", GameDomain.LOGICAL, 1).session_id for _ in range(20)}
        assert len(ids) == 20

    def test_record_answer_returns_new_value(self, manager):
        session = manager.create_session("kid-1", GameDomain.MATHEMATICS, 1)

        updated = manager.record_answer(session, answer(True, 4.5))
        updated = manager.record_answer(updated, answer(False, 2.0))

        assert session.answers == []
        assert len(updated.answers) == 2
        assert updated.score == 10
        assert updated.time_taken_seconds == 6.5
        assert updated.correct_count == 1

    def test_complete_once(self, manager, clock):
        session = manager.record_answer(
            manager.create_session("kid-1", GameDomain.MATHEMATICS, 1), answer(True)
        )
        clock.advance(minutes=2)

        done = manager.complete_session(session, stars_earned=5)

        assert done.is_completed is True
        assert done.completed_at == clock.now()
        assert done.stars_earned == 5
        with pytest.raises(SessionCompletedError):
            manager.complete_session(done)
        with pytest.raises(SessionCompletedError):
            manager.record_answer(done, answer(True))

    def test_calculate_result_uses_config(self, manager):
        session = manager.create_session("kid-1", GameDomain.MATHEMATICS, 1)
        for _ in range(5):
            session = manager.record_answer(session, answer(True, 30))

        assert manager.calculate_result(session, 150) == calculate_result(session, 150)

    @pytest.mark.parametrize(
        "domain,level,stars,expected",
        [
            (GameDomain.MATHEMATICS, 4, 3, "Mathematics Level 4 (3★)"),
            (GameDomain.LANGUAGE, 1, 5, "Language Level 1 (5★)"),
            (GameDomain.LOGICAL, 12, 1, "Logical Level 12 (1★)"),
        ],
    )
    def test_generate_reason(self, domain, level, stars, expected):
        assert GameSessionManager.generate_reason(domain, level, stars) == expected


# =============================================================================
# Unlock rules
# =============================================================================


class TestUnlocking:
    def test_level_one_always_open(self, tracker):
        assert tracker.is_level_unlocked(KidProgress(kid_id="kid-1"), GameDomain.MATHEMATICS, 1)

    @pytest.mark.parametrize("stars,unlocked", [(0, False), (2, False), (3, True), (5, True)])
    def test_previous_level_threshold(self, tracker, stars, unlocked):
        progress = progress_with(l1=stars)
        assert tracker.is_level_unlocked(progress, GameDomain.MATHEMATICS, 2) is unlocked

    def test_domains_are_independent(self, tracker):
        progress = progress_with(l1=5)
        assert tracker.is_level_unlocked(progress, GameDomain.LOGICAL, 2) is False

    def test_custom_threshold(self):
        assert ProgressTracker(unlock_star_threshold=5).is_level_unlocked(
            progress_with(l1=4), GameDomain.MATHEMATICS, 2
        ) is False

    def test_max_unlocked_level_fresh(self, tracker):
        assert tracker.get_max_unlocked_level(KidProgress(kid_id="kid-1"), GameDomain.MATHEMATICS) == 1

    def test_max_unlocked_level_frontier(self, tracker):
        progress = progress_with(l1=3, l2=5, l3=2, l4=5)
        assert tracker.get_max_unlocked_level(progress, GameDomain.MATHEMATICS) == 3

    def test_max_unlocked_level_capped(self, tracker):
        progress = progress_with(**{f"l{n}": 5 for n in range(1, 80)})
        assert tracker.get_max_unlocked_level(progress, GameDomain.MATHEMATICS) == 50

    @pytest.mark.parametrize("stars,expected", [(5, 5), (3, 5), (2, 4), (0, 4)])
    def test_next_level(self, tracker, stars, expected):
        assert tracker.get_next_level(4, stars) == expected


# =============================================================================
# Achievements
# =============================================================================


class TestAchievements:
    def test_none(self):
        assert ProgressTracker.get_achievements(9, {}) == []

    def test_star_badges(self):
        badges = ProgressTracker.get_achievements(50, {})
        assert badges == ["🌟 Star Collector (10 stars)", "⭐ Star Master (50 stars)"]

    def test_domain_and_ultimate_badges(self):
        levels = {GameDomain.LANGUAGE: 5, GameDomain.MATHEMATICS: 6, GameDomain.LOGICAL: 4}

        badges = ProgressTracker.get_achievements(100, levels)

        assert "✨ Star Legend (100 stars)" in badges
        assert "📚 Language Learner (5 levels)" in badges
        assert "🔢 Math Genius (5 levels)" in badges
        assert "🧩 Logic Master (5 levels)" not in badges
        assert badges[-1] == "🏆 Ultimate Learner (15 levels)"

    def test_achievements_for_progress(self, tracker):
        progress = KidProgress(
            kid_id="kid-1",
            total_stars={GameDomain.LANGUAGE: 4, GameDomain.MATHEMATICS: 8, GameDomain.LOGICAL: 0},
        )
        assert tracker.achievements_for(progress) == ["🌟 Star Collector (10 stars)"]


# =============================================================================
# Folding results into progress
# =============================================================================


class TestApplyResult:
    def test_first_result(self, tracker, clock):
        progress = KidProgress(kid_id="kid-1")

        updated = tracker.apply_result(progress, result_for(GameDomain.LANGUAGE, 1, 4), clock.now())

        assert updated.total_stars[GameDomain.LANGUAGE] == 4
        assert updated.max_level_completed[GameDomain.LANGUAGE] == 1
        assert updated.best_stars(GameDomain.LANGUAGE, 1) == 4
        assert updated.sessions_completed == 1
        assert updated.last_played == clock.now()
        assert progress.sessions_completed == 0

    def test_stars_accumulate_and_best_only_rises(self, tracker, clock):
        progress = KidProgress(kid_id="kid-1")
        progress = tracker.apply_result(progress, result_for(GameDomain.LANGUAGE, 1, 5), clock.now())
        progress = tracker.apply_result(
            progress, result_for(GameDomain.LANGUAGE, 1, 2), clock.now() + timedelta(days=1)
        )

        assert progress.total_stars[GameDomain.LANGUAGE] == 7
        assert progress.best_stars(GameDomain.LANGUAGE, 1) == 5
        assert progress.sessions_completed == 2

    def test_max_level_never_decreases(self, tracker, clock):
        progress = KidProgress(kid_id="kid-1")
        progress = tracker.apply_result(progress, result_for(GameDomain.LOGICAL, 3, 3), clock.now())
        progress = tracker.apply_result(progress, result_for(GameDomain.LOGICAL, 1, 3), clock.now())

        assert progress.max_level_completed[GameDomain.LOGICAL] == 3

    def test_progress_json_round_trip(self, tracker, clock):
        progress = tracker.apply_result(
            KidProgress(kid_id="kid-1"), result_for(GameDomain.MATHEMATICS, 2, 3), clock.now()
        )

        assert KidProgress.model_validate_json(progress.model_dump_json()) == progress

    def test_build_award(self, clock):
        award = build_award(
            "kid-1", result_for(GameDomain.MATHEMATICS, 4, 3), "Mathematics Level 4 (3★)", clock.now()
        )

        assert award.award_id.startswith("award-")
        assert award.level_id == "mathematics-level-4"
        assert award.points_awarded == 15
        assert award.reason == "Mathematics Level 4 (3★)"
