"""
Unit tests for the SQLite state store and the in-memory store.

Both implement the same ProgressStore contract, so the contract tests
run against each.

Run: pytest tests/unit/test_state_store.py -v
"""

from datetime import timedelta

import pytest

from src.delivery.state_store import StateStore
from src.game.models import KidProgress, LevelAward
from src.game.scheduler import ReviewScheduler
from src.game.store import InMemoryProgressStore
from src.game.types import GameDomain


@pytest.fixture(params=["sqlite", "memory"])
def store(request, tmp_path):
    if request.param == "memory":
        yield InMemoryProgressStore(award_limit=5)
        return
    sqlite_store = StateStore(tmp_path / "state.db", award_limit=5)
    yield sqlite_store
    sqlite_store.close()


@pytest.fixture
def scheduler(clock):
    return ReviewScheduler(clock=clock)


def award(n: int, when, kid_id: str = "kid-1") -> LevelAward:
    return LevelAward(
        award_id=f"award-{kid_id}-{n}",
        kid_id=kid_id,
        level_id=f"mathematics-level-{n}",
        domain=GameDomain.MATHEMATICS,
        level_number=n,
        stars_earned=3,
        points_awarded=15,
        completed_at=when,
        reason=f"Mathematics Level {n} (3★)",
    )


class TestCompletions:
    def test_missing_completion(self, store):
        assert store.get_completion("kid-1", GameDomain.MATHEMATICS, 1) is None

    def test_save_and_get(self, store, scheduler):
        completion = scheduler.create_completion(GameDomain.MATHEMATICS, 2, 4)

        store.save_completion("kid-1", completion)

        assert store.get_completion("kid-1", GameDomain.MATHEMATICS, 2) == completion
        assert store.get_completion("kid-2", GameDomain.MATHEMATICS, 2) is None

    def test_save_overwrites(self, store, scheduler, clock):
        first = scheduler.create_completion(GameDomain.LOGICAL, 1, 3)
        store.save_completion("kid-1", first)
        clock.advance(days=2)

        second = scheduler.review_completion(first, 5)
        store.save_completion("kid-1", second)

        stored = store.get_completion("kid-1", GameDomain.LOGICAL, 1)
        assert stored.repetitions == 2
        assert stored.next_review_at == clock.now() + timedelta(days=3)
        assert len(store.list_completions("kid-1")) == 1

    def test_list_completions_filters_domain(self, store, scheduler):
        for domain, level in [
            (GameDomain.MATHEMATICS, 2),
            (GameDomain.MATHEMATICS, 1),
            (GameDomain.LANGUAGE, 1),
        ]:
            store.save_completion("kid-1", scheduler.create_completion(domain, level, 3))

        math = store.list_completions("kid-1", GameDomain.MATHEMATICS)

        assert [c.level_number for c in math] == [1, 2]
        assert len(store.list_completions("kid-1")) == 3


class TestProgress:
    def test_unknown_kid_gets_fresh_progress(self, store):
        progress = store.get_progress("kid-9")
        assert progress.kid_id == "kid-9"
        assert progress.sessions_completed == 0

    def test_save_replaces(self, store, clock):
        store.save_progress(KidProgress(kid_id="kid-1", sessions_completed=1))
        store.save_progress(
            KidProgress(
                kid_id="kid-1",
                sessions_completed=2,
                completed_levels={"language-level-1": 4},
                total_stars={GameDomain.LANGUAGE: 4, GameDomain.MATHEMATICS: 0, GameDomain.LOGICAL: 0},
                last_played=clock.now(),
            )
        )

        progress = store.get_progress("kid-1")

        assert progress.sessions_completed == 2
        assert progress.best_stars(GameDomain.LANGUAGE, 1) == 4
        assert progress.total_stars[GameDomain.LANGUAGE] == 4
        assert progress.last_played == clock.now()


class TestAwards:
    def test_oldest_first(self, store, clock):
        for n in range(1, 4):
            store.record_award(award(n, when=clock.now()))

        assert [a.level_number for a in store.list_awards("kid-1")] == [1, 2, 3]

    def test_history_is_capped(self, store, clock):
        for n in range(1, 9):
            store.record_award(award(n, when=clock.now()))
        store.record_award(award(1, kid_id="kid-2", when=clock.now()))

        awards = store.list_awards("kid-1")

        assert [a.level_number for a in awards] == [4, 5, 6, 7, 8]
        assert len(store.list_awards("kid-2")) == 1

    def test_limit_returns_most_recent(self, store, clock):
        for n in range(1, 5):
            store.record_award(award(n, when=clock.now()))

        assert [a.level_number for a in store.list_awards("kid-1", limit=2)] == [3, 4]


class TestClearKid:
    def test_clear_only_that_kid(self, store, scheduler, clock):
        store.save_completion("kid-1", scheduler.create_completion(GameDomain.MATHEMATICS, 1, 3))
        store.save_progress(KidProgress(kid_id="kid-1", sessions_completed=1))
        store.record_award(award(1, when=clock.now()))
        store.save_progress(KidProgress(kid_id="kid-2", sessions_completed=4))

        removed = store.clear_kid("kid-1")

        assert removed == 3
        assert store.get_completion("kid-1", GameDomain.MATHEMATICS, 1) is None
        assert store.get_progress("kid-1").sessions_completed == 0
        assert store.list_awards("kid-1") == []
        assert store.get_progress("kid-2").sessions_completed == 4


class TestSQLiteSpecifics:
    def test_persists_across_instances(self, tmp_path, scheduler):
        path = tmp_path / "nested" / "state.db"
        first = StateStore(path)
        first.save_completion("kid-1", scheduler.create_completion(GameDomain.LANGUAGE, 3, 5))
        first.close()

        second = StateStore(path)
        try:
            completion = second.get_completion("kid-1", GameDomain.LANGUAGE, 3)
            assert completion is not None
            assert completion.stars_earned == 5
            assert completion.completed_at.tzinfo is not None
        finally:
            second.close()

    def test_stats(self, tmp_path, clock):
        store = StateStore(tmp_path / "state.db")
        try:
            store.record_award(award(1, when=clock.now()))
            assert store.get_stats() == {"level_completion": 0, "kid_progress": 0, "level_award": 1}
        finally:
            store.close()
