"""
Session record operations.

Sessions are treated as values: every operation returns an updated copy,
the answers list only ever grows, and completion happens exactly once.
"""

from __future__ import annotations

import uuid

from loguru import logger

from src.game.clock import Clock, SystemClock
from src.game.errors import SessionCompletedError
from src.game.models import GameAnswer, GameSession, GameSessionResult, make_level_id
from src.game.scoring import ScoringConfig, calculate_result
from src.game.types import GameDomain

DOMAIN_DISPLAY_NAMES: dict[GameDomain, str] = {
    GameDomain.LANGUAGE: "Language",
    GameDomain.MATHEMATICS: "Mathematics",
    GameDomain.LOGICAL: "Logical",
}


class GameSessionManager:
    """Creates, records and finalizes GameSession values."""

    def __init__(self, clock: Clock | None = None, scoring: ScoringConfig | None = None):
        self.clock = clock or SystemClock()
        self.scoring = scoring or ScoringConfig()

    def create_session(
        self,
        kid_id: str,
        domain: GameDomain,
        level_number: int,
        level_id: str | None = None,
    ) -> GameSession:
        session = GameSession(
            session_id=f"session-{kid_id}-{uuid.uuid4().hex[:12]}",
            kid_id=kid_id,
            level_id=level_id or make_level_id(domain, level_number),
            domain=domain,
            level_number=level_number,
            started_at=self.clock.now(),
        )
        logger.debug(f"Created {session.session_id} for {session.level_id}")
        return session

    def record_answer(self, session: GameSession, answer: GameAnswer) -> GameSession:
        """
        Append one answer.

        Correct answers add to the running score; time taken accumulates.

        Raises:
            SessionCompletedError: the session is already completed
        """
        if session.is_completed:
            raise SessionCompletedError(session.session_id)

        bonus = self.scoring.points_per_correct_answer if answer.is_correct else 0
        return session.model_copy(
            update={
                "answers": [*session.answers, answer],
                "score": session.score + bonus,
                "time_taken_seconds": session.time_taken_seconds + answer.time_taken_seconds,
            }
        )

    def complete_session(self, session: GameSession, stars_earned: int = 0) -> GameSession:
        """Finalize a session. Allowed once per session."""
        if session.is_completed:
            raise SessionCompletedError(session.session_id)
        return session.model_copy(
            update={
                "is_completed": True,
                "completed_at": self.clock.now(),
                "stars_earned": stars_earned,
            }
        )

    def calculate_result(
        self,
        session: GameSession,
        total_time_limit_seconds: float,
    ) -> GameSessionResult:
        return calculate_result(session, total_time_limit_seconds, self.scoring)

    @staticmethod
    def generate_reason(domain: GameDomain, level_number: int, stars_earned: int) -> str:
        """Reason string sent along with awarded points."""
        return f"{DOMAIN_DISPLAY_NAMES[GameDomain(domain)]} Level {level_number} ({stars_earned}★)"
