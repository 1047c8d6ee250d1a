"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import random
import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from src.game.clock import FixedClock  # noqa: E402
from src.game.engine import GameEngine  # noqa: E402
from src.game.models import GameAnswer, GameSession  # noqa: E402
from src.game.questions import handler_for  # noqa: E402
from src.game.store import InMemoryProgressStore  # noqa: E402
from src.game.types import EnginePhase, GameDomain  # noqa: E402

START = datetime(2024, 1, 1, 9, 0, tzinfo=timezone.utc)


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests (engine + SQLite store)")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")
    config.addinivalue_line("markers", "slow: Slow tests")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        # Mark based on test file location
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
        elif "smoke" in str(item.fspath):
            item.add_marker(pytest.mark.smoke)


class RecordingSyncClient:
    """Sync collaborator that records calls instead of sending them."""

    def __init__(self, succeed: bool = True, raise_error: Exception | None = None):
        self.succeed = succeed
        self.raise_error = raise_error
        self.calls: list[tuple[str, int, str]] = []

    def award_points(self, kid_id: str, points: int, reason: str) -> bool:
        self.calls.append((kid_id, points, reason))
        if self.raise_error is not None:
            raise self.raise_error
        return self.succeed


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def clock():
    """Clock pinned to 2024-01-01 09:00 UTC."""
    return FixedClock(START)


@pytest.fixture
def rng():
    return random.Random(42)


@pytest.fixture
def memory_store():
    return InMemoryProgressStore()


@pytest.fixture
def sync_client():
    return RecordingSyncClient()


@pytest.fixture
def engine(memory_store, clock, rng, sync_client):
    """Engine for kid-1 over an in-memory store."""
    return GameEngine(
        kid_id="kid-1",
        store=memory_store,
        sync_client=sync_client,
        clock=clock,
        rng=rng,
    )


@pytest.fixture
def make_sync_client():
    """Factory for recording sync clients, e.g. make_sync_client(raise_error=...)."""
    return RecordingSyncClient


def wrong_answer(question):
    """An answer the question's handler grades as incorrect."""
    expected = handler_for(question).expected_answer(question)
    if question.type == "math":
        return expected + 1
    if question.type == "writing":
        return f"{expected}-nope"
    return (expected + 1) % len(question.options)


@pytest.fixture
def play_answers():
    """
    Answer the rest of the current session.

    The first ``correct`` questions are answered right, the rest wrong.
    ``seconds`` is passed as time taken (None means the question's limit).
    """

    def _play(engine, correct: int, seconds: float | None = None):
        answered = 0
        while engine.phase == EnginePhase.IN_PROGRESS:
            question = engine.current_question
            if answered < correct:
                value = handler_for(question).expected_answer(question)
            else:
                value = wrong_answer(question)
            engine.submit_answer(value, time_taken_seconds=seconds)
            answered += 1
        return engine.result

    return _play


@pytest.fixture
def make_session():
    """Build a session with ``correct`` of ``total`` answers correct."""

    def _make(
        correct: int,
        total: int,
        time_taken: float = 0.0,
        domain: GameDomain = GameDomain.MATHEMATICS,
        level_number: int = 1,
    ) -> GameSession:
        per_answer = time_taken / total if total else 0.0
        answers = [
            GameAnswer(
                question_id=f"q-{i}",
                user_answer=1 if i < correct else 0,
                correct_answer=1,
                is_correct=i < correct,
                time_taken_seconds=per_answer,
            )
            for i in range(total)
        ]
        return GameSession(
            session_id="session-test",
            kid_id="kid-1",
            level_id=f"{domain.value}-level-{level_number}",
            domain=domain,
            level_number=level_number,
            started_at=START,
            answers=answers,
            score=10 * correct,
            time_taken_seconds=time_taken,
        )

    return _make
