"""
Error taxonomy for the level engine.

- InputError: bad arguments rejected at the boundary
- StateError: operation not allowed in the current session/level state
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import LevelLockStatus


class GameEngineError(Exception):
    """Base class for all engine errors."""


# =============================================================================
# Input errors
# =============================================================================


class InputError(GameEngineError, ValueError):
    """Raised when an argument is invalid."""


class InvalidLevelError(InputError):
    """Raised when a level number is not a positive integer."""

    def __init__(self, level: object):
        self.level = level
        super().__init__(f"Invalid level number: {level!r} (must be a positive integer)")


class UnsupportedLocaleError(InputError):
    """Raised when a locale has no content bank."""

    def __init__(self, locale: object):
        self.locale = locale
        super().__init__(f"Unsupported locale: {locale!r}")


class EmptySessionError(InputError):
    """Raised when scoring a session that has no answers."""

    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__(f"Session {session_id} has no answers to score")


class EmptyQuestionSetError(InputError):
    """Raised when a session would start without questions."""


class InvalidAnswerError(InputError):
    """Raised when an answer cannot be interpreted for its question type."""


# =============================================================================
# State errors
# =============================================================================


class StateError(GameEngineError):
    """Raised when an operation is not allowed in the current state."""


class LevelNotUnlockedError(StateError):
    """The previous level has not been completed with enough stars."""

    def __init__(self, domain: str, level_number: int):
        self.domain = domain
        self.level_number = level_number
        super().__init__(
            f"{domain} level {level_number} is not unlocked yet. Complete the previous level!"
        )


class LevelLockedError(StateError):
    """The level is cooling down after a recent completion."""

    def __init__(self, domain: str, level_number: int, lock_status: LevelLockStatus):
        self.domain = domain
        self.level_number = level_number
        self.lock_status = lock_status
        super().__init__(
            f"{domain} level {level_number} is locked until {lock_status.next_unlock_at}"
        )


class SessionCompletedError(StateError):
    """The session already completed; no more answers are accepted."""

    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__(f"Session {session_id} is already completed")


class NoActiveSessionError(StateError):
    """No session is in progress."""


class InvalidTransitionError(StateError):
    """The requested transition is not valid from the current phase."""
