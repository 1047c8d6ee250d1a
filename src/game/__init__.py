"""
KidQuest game engine.

Components:
- generators: Question generation per domain, level and locale
- questions: Per-type answer checking and terminal rendering
- scoring: Stars, points and feedback for a finished session
- scheduler: SM-2 cooldowns between replays of a level
- progress: Unlock rules, achievements and progress updates
- engine: Session state machine tying it all together
"""

from .clock import Clock, FixedClock, SystemClock
from .engine import GameEngine
from .errors import (
    GameEngineError,
    InputError,
    LevelLockedError,
    LevelNotUnlockedError,
    SessionCompletedError,
    StateError,
)
from .generators import generate_level, generate_questions
from .models import (
    GameAnswer,
    GameLevel,
    GameSession,
    GameSessionResult,
    GeneratedLevel,
    KidProgress,
    LevelAward,
    LevelCompletion,
    LevelLockStatus,
    Question,
)
from .scheduler import ReviewScheduler, SM2Config, format_time_until_unlock
from .scoring import ScoringConfig, calculate_result
from .session import GameSessionManager
from .store import InMemoryProgressStore, ProgressStore, SyncClient
from .types import EnginePhase, GameDomain, Locale, QuestionType

__all__ = [
    # Collaborators
    "Clock",
    "FixedClock",
    "SystemClock",
    "ProgressStore",
    "InMemoryProgressStore",
    "SyncClient",
    # Engine
    "GameEngine",
    "GameSessionManager",
    "ReviewScheduler",
    "SM2Config",
    "ScoringConfig",
    "calculate_result",
    "format_time_until_unlock",
    "generate_level",
    "generate_questions",
    # Models
    "GameAnswer",
    "GameLevel",
    "GameSession",
    "GameSessionResult",
    "GeneratedLevel",
    "KidProgress",
    "LevelAward",
    "LevelCompletion",
    "LevelLockStatus",
    "Question",
    # Types
    "EnginePhase",
    "GameDomain",
    "Locale",
    "QuestionType",
    # Errors
    "GameEngineError",
    "InputError",
    "StateError",
    "LevelLockedError",
    "LevelNotUnlockedError",
    "SessionCompletedError",
]
