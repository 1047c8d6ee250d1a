"""
Game Engine - session state machine for one kid.

Phases:
    IDLE -> LEVEL_SELECTED -> IN_PROGRESS -> COMPLETED

Usage:
    engine = GameEngine("kid-1", store=StateStore())
    engine.start_game(GameDomain.MATHEMATICS, 1)
    while engine.phase == EnginePhase.IN_PROGRESS:
        engine.submit_answer(ask(engine.current_question))
    print(engine.result.stars_earned)

Grading happens on every answer. On completion with at least one star the
level's review record, the kid's progress and the award history are
written to the store, then the points are pushed to the sync client.
"""

from __future__ import annotations

import random
from typing import Any

from loguru import logger

from src.game.clock import Clock, SystemClock
from src.game.errors import (
    EmptyQuestionSetError,
    InvalidAnswerError,
    InvalidTransitionError,
    LevelLockedError,
    LevelNotUnlockedError,
    NoActiveSessionError,
    SessionCompletedError,
)
from src.game.generators import generate_questions
from src.game.generators.base import validate_level
from src.game.models import (
    GameAnswer,
    GameSession,
    GameSessionResult,
    KidProgress,
    LevelCompletion,
    LevelLockStatus,
    Question,
)
from src.game.progress import ProgressTracker, build_award
from src.game.questions import check_answer, handler_for
from src.game.scheduler import ReviewScheduler, format_time_until_unlock
from src.game.scoring import ScoringConfig
from src.game.session import GameSessionManager
from src.game.store import ProgressStore, SyncClient
from src.game.types import DEFAULT_LOCALE, EnginePhase, GameDomain, Locale


class GameEngine:
    """
    Drives level sessions for a single kid.

    Collaborators are injected: the progress store, the review scheduler,
    an optional points sync client, the clock and the random source.
    """

    def __init__(
        self,
        kid_id: str,
        store: ProgressStore,
        scheduler: ReviewScheduler | None = None,
        sync_client: SyncClient | None = None,
        clock: Clock | None = None,
        rng: random.Random | None = None,
        default_locale: Locale = DEFAULT_LOCALE,
        scoring: ScoringConfig | None = None,
    ):
        self.kid_id = kid_id
        self.store = store
        self.clock = clock or SystemClock()
        self.scheduler = scheduler or ReviewScheduler(clock=self.clock)
        self.sync_client = sync_client
        self.rng = rng or random.Random()
        self.default_locale = default_locale
        self.scoring = scoring or ScoringConfig()

        self.sessions = GameSessionManager(clock=self.clock, scoring=self.scoring)
        self.tracker = ProgressTracker(self.scoring.unlock_star_threshold)

        self._phase = EnginePhase.IDLE
        self._domain: GameDomain | None = None
        self._level_number: int | None = None
        self._locale: Locale | str | None = None
        self._questions: list[Question] = []
        self._index = 0
        self._session: GameSession | None = None
        self._result: GameSessionResult | None = None

    # =========================================================================
    # State
    # =========================================================================

    @property
    def phase(self) -> EnginePhase:
        return self._phase

    @property
    def domain(self) -> GameDomain | None:
        return self._domain

    @property
    def level_number(self) -> int | None:
        return self._level_number

    @property
    def session(self) -> GameSession | None:
        return self._session

    @property
    def result(self) -> GameSessionResult | None:
        return self._result

    @property
    def questions(self) -> tuple[Question, ...]:
        return tuple(self._questions)

    @property
    def current_question_index(self) -> int:
        return self._index

    @property
    def current_question(self) -> Question | None:
        if self._phase != EnginePhase.IN_PROGRESS:
            return None
        return self._questions[self._index]

    @property
    def total_time_limit_seconds(self) -> int:
        return sum(q.time_limit_seconds for q in self._questions)

    # =========================================================================
    # Transitions
    # =========================================================================

    def select_level(self, domain: GameDomain | str, level_number: int) -> None:
        if self._phase == EnginePhase.IN_PROGRESS:
            raise InvalidTransitionError("Finish or reset the current session before selecting a level")

        self._domain = GameDomain(domain)
        self._level_number = validate_level(level_number)
        self._questions = []
        self._index = 0
        self._session = None
        self._result = None
        self._phase = EnginePhase.LEVEL_SELECTED

    def start(self, locale: Locale | str | None = None) -> GameSession:
        """
        Start the selected level.

        Raises:
            InvalidTransitionError: no level selected
            LevelNotUnlockedError: previous level lacks enough stars
            LevelLockedError: level is cooling down after a recent completion
            EmptyQuestionSetError: generator returned no questions
        """
        if self._phase != EnginePhase.LEVEL_SELECTED:
            raise InvalidTransitionError(f"Cannot start from phase {self._phase.value}")

        domain, level_number = self._domain, self._level_number

        if not self.is_level_unlocked(domain, level_number):
            logger.warning(f"{self.kid_id}: {domain.value} level {level_number} not unlocked")
            raise LevelNotUnlockedError(domain.value, level_number)

        lock = self.get_level_lock_status(domain, level_number)
        if lock.is_locked:
            logger.warning(
                f"{self.kid_id}: {domain.value} level {level_number} locked "
                f"for {format_time_until_unlock(lock)}"
            )
            raise LevelLockedError(domain.value, level_number, lock)

        locale = locale if locale is not None else self.default_locale
        questions = generate_questions(domain, level_number, locale=locale, rng=self.rng)
        if not questions:
            raise EmptyQuestionSetError(f"No questions for {domain.value} level {level_number}")

        self._locale = locale
        self._questions = list(questions)
        self._index = 0
        self._result = None
        self._session = self.sessions.create_session(self.kid_id, domain, level_number)
        self._phase = EnginePhase.IN_PROGRESS

        logger.debug(f"Started {self._session.session_id} with {len(questions)} questions")
        return self._session

    def start_game(
        self,
        domain: GameDomain | str,
        level_number: int,
        locale: Locale | str | None = None,
    ) -> GameSession:
        self.select_level(domain, level_number)
        return self.start(locale)

    def submit_answer(self, answer: Any, time_taken_seconds: float | None = None) -> GameAnswer:
        """
        Grade and record an answer to the current question.

        Args:
            answer: Raw answer (0-based option index, int or digit string, for choice questions)
            time_taken_seconds: Seconds spent; defaults to the question's limit

        Returns:
            The recorded GameAnswer
        """
        self._require_in_progress()
        question = self._questions[self._index]

        if time_taken_seconds is None:
            time_taken_seconds = question.time_limit_seconds
        if time_taken_seconds < 0:
            raise InvalidAnswerError(f"time_taken_seconds must be >= 0, got {time_taken_seconds}")

        checked = check_answer(question, answer)
        recorded = self._record(question, checked.user_answer, checked.correct, time_taken_seconds)
        logger.debug(f"{question.question_id}: {'correct' if checked.correct else 'wrong'}")
        return recorded

    def time_up(self) -> GameSessionResult | None:
        """
        Record the current question as unanswered.

        Returns:
            The session result if that was the last question, else None
        """
        self._require_in_progress()
        question = self._questions[self._index]
        self._record(question, None, False, question.time_limit_seconds)
        return self._result

    def complete(self) -> GameSessionResult:
        """Finish now; remaining questions count as unanswered."""
        self._require_in_progress()
        while self._phase == EnginePhase.IN_PROGRESS:
            question = self._questions[self._index]
            self._record(question, None, False, question.time_limit_seconds)
        return self._result

    def retry_level(self, locale: Locale | str | None = None) -> GameSession:
        """Play the same level again (same unlock and lock checks)."""
        if self._domain is None or self._level_number is None:
            raise InvalidTransitionError("No level to retry")
        self.select_level(self._domain, self._level_number)
        return self.start(locale if locale is not None else self._locale)

    def reset(self) -> None:
        self._phase = EnginePhase.IDLE
        self._domain = None
        self._level_number = None
        self._locale = None
        self._questions = []
        self._index = 0
        self._session = None
        self._result = None

    # =========================================================================
    # Internals
    # =========================================================================

    def _require_in_progress(self) -> None:
        if self._phase == EnginePhase.IN_PROGRESS:
            return
        if self._phase == EnginePhase.COMPLETED and self._session is not None:
            raise SessionCompletedError(self._session.session_id)
        raise NoActiveSessionError("No session in progress")

    def _record(
        self,
        question: Question,
        user_answer: int | str | None,
        is_correct: bool,
        time_taken_seconds: float,
    ) -> GameAnswer:
        answer = GameAnswer(
            question_id=question.question_id,
            user_answer=user_answer,
            correct_answer=handler_for(question).expected_answer(question),
            is_correct=is_correct,
            time_taken_seconds=time_taken_seconds,
        )
        self._session = self.sessions.record_answer(self._session, answer)
        self._index += 1
        if self._index >= len(self._questions):
            self._finish()
        return answer

    def _finish(self) -> GameSessionResult:
        result = self.sessions.calculate_result(self._session, self.total_time_limit_seconds)
        self._session = self.sessions.complete_session(self._session, result.stars_earned)
        self._result = result
        self._phase = EnginePhase.COMPLETED

        logger.info(
            f"{self.kid_id} finished {result.level_id}: {result.percentage}% "
            f"{result.stars_earned}★ +{result.points_awarded} points"
        )

        if result.stars_earned >= 1:
            self._record_completion(result)
        return result

    def _record_completion(self, result: GameSessionResult) -> None:
        now = self.clock.now()

        existing = self.store.get_completion(self.kid_id, result.domain, result.level_number)
        if existing is None:
            completion = self.scheduler.create_completion(
                result.domain, result.level_number, result.stars_earned
            )
        else:
            completion = self.scheduler.review_completion(existing, result.stars_earned)
        self.store.save_completion(self.kid_id, completion)

        progress = self.tracker.apply_result(self.store.get_progress(self.kid_id), result, now)
        self.store.save_progress(progress)

        reason = self.sessions.generate_reason(result.domain, result.level_number, result.stars_earned)
        self.store.record_award(build_award(self.kid_id, result, reason, now))

        self._sync_points(result.points_awarded, reason)

    def _sync_points(self, points: int, reason: str) -> None:
        if self.sync_client is None:
            return
        try:
            synced = self.sync_client.award_points(self.kid_id, points, reason)
        except Exception as e:
            # Local state is already committed; the caller owns retries
            logger.warning(f"Points sync raised for {self.kid_id}: {e}")
            return
        if not synced:
            logger.warning(f"Points sync failed for {self.kid_id} ({reason})")

    # =========================================================================
    # Progress queries
    # =========================================================================

    @property
    def progress(self) -> KidProgress:
        return self.store.get_progress(self.kid_id)

    def is_level_unlocked(self, domain: GameDomain | str, level_number: int) -> bool:
        return self.tracker.is_level_unlocked(self.progress, GameDomain(domain), level_number)

    def get_level_completion(self, domain: GameDomain | str, level_number: int) -> LevelCompletion | None:
        return self.store.get_completion(self.kid_id, GameDomain(domain), level_number)

    def get_level_lock_status(self, domain: GameDomain | str, level_number: int) -> LevelLockStatus:
        return self.scheduler.get_lock_status(self.get_level_completion(domain, level_number))

    def can_play_level(self, domain: GameDomain | str, level_number: int) -> bool:
        return (
            self.is_level_unlocked(domain, level_number)
            and not self.get_level_lock_status(domain, level_number).is_locked
        )

    def get_time_until_unlock(self, domain: GameDomain | str, level_number: int) -> str:
        return format_time_until_unlock(self.get_level_lock_status(domain, level_number))

    def get_max_unlocked_level(self, domain: GameDomain | str) -> int:
        return self.tracker.get_max_unlocked_level(self.progress, GameDomain(domain))

    def reset_level_lock(self, domain: GameDomain | str, level_number: int) -> LevelCompletion | None:
        """Parent/admin override: unlock a cooling-down level now."""
        completion = self.get_level_completion(domain, level_number)
        if completion is None:
            return None
        unlocked = self.scheduler.reset_level(completion)
        self.store.save_completion(self.kid_id, unlocked)
        return unlocked

    def get_achievements(self) -> list[str]:
        return self.tracker.achievements_for(self.progress)

    def export_progress(self) -> dict[str, Any]:
        """JSON-ready snapshot of everything stored for this kid."""
        awards = self.store.list_awards(self.kid_id)
        domain_stats = {domain.value: 0 for domain in GameDomain}
        for award in awards:
            domain_stats[award.domain.value] += award.stars_earned

        return {
            "kid_id": self.kid_id,
            "export_date": self.clock.now().isoformat(),
            "progress": self.progress.model_dump(mode="json"),
            "completions": [c.model_dump(mode="json") for c in self.store.list_completions(self.kid_id)],
            "awards": [a.model_dump(mode="json") for a in awards],
            "sessions_count": len(awards),
            "domain_stats": domain_stats,
            "achievements": self.get_achievements(),
        }

    def clear_progress(self) -> int:
        """Delete all stored progress for this kid."""
        if self._phase == EnginePhase.IN_PROGRESS:
            raise InvalidTransitionError("Cannot clear progress during a session")
        return self.store.clear_kid(self.kid_id)
