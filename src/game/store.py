"""
Collaborator protocols.

The engine reads and writes progress only through a ProgressStore (every
save replaces the whole record, last write wins) and pushes awarded points
through a SyncClient.
"""

from __future__ import annotations

from typing import Protocol

from src.game.models import KidProgress, LevelAward, LevelCompletion
from src.game.types import GameDomain

AWARD_HISTORY_LIMIT = 100


class ProgressStore(Protocol):
    def get_completion(
        self, kid_id: str, domain: GameDomain, level_number: int
    ) -> LevelCompletion | None: ...

    def save_completion(self, kid_id: str, completion: LevelCompletion) -> None: ...

    def list_completions(
        self, kid_id: str, domain: GameDomain | None = None
    ) -> list[LevelCompletion]: ...

    def get_progress(self, kid_id: str) -> KidProgress:
        """Stored progress, or a fresh KidProgress for an unknown kid."""
        ...

    def save_progress(self, progress: KidProgress) -> None: ...

    def record_award(self, award: LevelAward) -> None:
        """Append an award, keeping only the most recent ones."""
        ...

    def list_awards(self, kid_id: str, limit: int | None = None) -> list[LevelAward]:
        """Awards oldest first."""
        ...

    def clear_kid(self, kid_id: str) -> int:
        """Delete everything stored for a kid. Returns rows removed."""
        ...


class InMemoryProgressStore:
    """Dict-backed ProgressStore for tests and throwaway sessions."""

    def __init__(self, award_limit: int = AWARD_HISTORY_LIMIT):
        self.award_limit = award_limit
        self._completions: dict[tuple[str, GameDomain, int], LevelCompletion] = {}
        self._progress: dict[str, KidProgress] = {}
        self._awards: dict[str, list[LevelAward]] = {}

    def get_completion(self, kid_id, domain, level_number):
        return self._completions.get((kid_id, GameDomain(domain), level_number))

    def save_completion(self, kid_id, completion):
        self._completions[(kid_id, completion.domain, completion.level_number)] = completion

    def list_completions(self, kid_id, domain=None):
        found = [
            c
            for (kid, d, _), c in self._completions.items()
            if kid == kid_id and (domain is None or d == GameDomain(domain))
        ]
        return sorted(found, key=lambda c: (c.domain.value, c.level_number))

    def get_progress(self, kid_id):
        return self._progress.get(kid_id) or KidProgress(kid_id=kid_id)

    def save_progress(self, progress):
        self._progress[progress.kid_id] = progress

    def record_award(self, award):
        history = self._awards.setdefault(award.kid_id, [])
        history.append(award)
        del history[: max(0, len(history) - self.award_limit)]

    def list_awards(self, kid_id, limit=None):
        history = list(self._awards.get(kid_id, []))
        return history[-limit:] if limit else history

    def clear_kid(self, kid_id):
        keys = [k for k in self._completions if k[0] == kid_id]
        for key in keys:
            del self._completions[key]
        removed = len(keys)
        removed += 1 if self._progress.pop(kid_id, None) is not None else 0
        removed += len(self._awards.pop(kid_id, []))
        return removed


class SyncClient(Protocol):
    def award_points(self, kid_id: str, points: int, reason: str) -> bool:
        """Push awarded points to the remote backend. False on failure."""
        ...
