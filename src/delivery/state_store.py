"""
SQLite State Store for KidQuest.

Provides portable persistence for:
- SM-2 level completion state per (kid, domain, level)
- Aggregate kid progress
- Level award history (most recent 100 per kid)

Database location: ~/.kidquest/state.db
"""

from __future__ import annotations

import json
import sqlite3
from datetime import datetime
from pathlib import Path

from loguru import logger

from src.game.models import KidProgress, LevelAward, LevelCompletion
from src.game.store import AWARD_HISTORY_LIMIT
from src.game.types import GameDomain


def _to_text(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def _from_text(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None


class StateStore:
    """
    SQLite-backed ProgressStore.

    Each save is a single upsert committed on its own, so a record is
    never left half written.
    """

    DEFAULT_DB_PATH = Path.home() / ".kidquest" / "state.db"

    def __init__(self, db_path: Path | str | None = None, award_limit: int = AWARD_HISTORY_LIMIT):
        """
        Initialize the state store.

        Args:
            db_path: Custom database path (defaults to ~/.kidquest/state.db)
            award_limit: Awards kept per kid
        """
        self.db_path = Path(db_path) if db_path else self.DEFAULT_DB_PATH
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self.award_limit = award_limit

        self._conn: sqlite3.Connection | None = None
        self._init_schema()

        logger.info(f"StateStore initialized at {self.db_path}")

    @property
    def conn(self) -> sqlite3.Connection:
        """Get or create database connection."""
        if self._conn is None:
            self._conn = sqlite3.connect(str(self.db_path))
            self._conn.row_factory = sqlite3.Row
        return self._conn

    def _init_schema(self) -> None:
        """Initialize database schema."""
        cursor = self.conn.cursor()

        # SM-2 state per kid and level
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS level_completion (
                kid_id TEXT NOT NULL,
                domain TEXT NOT NULL,
                level_number INTEGER NOT NULL,
                completed_at TEXT NOT NULL,
                stars_earned INTEGER NOT NULL,
                quality INTEGER NOT NULL,
                repetitions INTEGER NOT NULL,
                interval_days INTEGER NOT NULL DEFAULT 1,
                ease_factor REAL NOT NULL DEFAULT 2.5,
                next_review_at TEXT,
                PRIMARY KEY (kid_id, domain, level_number)
            )
        """)

        # Aggregate progress, stored as the model's JSON
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS kid_progress (
                kid_id TEXT PRIMARY KEY,
                data TEXT NOT NULL,
                updated_at TEXT
            )
        """)

        # Award history
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS level_award (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                award_id TEXT UNIQUE NOT NULL,
                kid_id TEXT NOT NULL,
                level_id TEXT NOT NULL,
                domain TEXT NOT NULL,
                level_number INTEGER NOT NULL,
                stars_earned INTEGER NOT NULL,
                points_awarded INTEGER NOT NULL,
                completed_at TEXT NOT NULL,
                reason TEXT NOT NULL
            )
        """)

        cursor.execute("""
            CREATE INDEX IF NOT EXISTS idx_level_award_kid
            ON level_award(kid_id, id)
        """)

        self.conn.commit()

    # =========================================================================
    # Level completions
    # =========================================================================

    def _row_to_completion(self, row: sqlite3.Row) -> LevelCompletion:
        return LevelCompletion(
            domain=GameDomain(row["domain"]),
            level_number=row["level_number"],
            completed_at=_from_text(row["completed_at"]),
            stars_earned=row["stars_earned"],
            quality=row["quality"],
            repetitions=row["repetitions"],
            interval=row["interval_days"],
            ease_factor=row["ease_factor"],
            next_review_at=_from_text(row["next_review_at"]),
        )

    def get_completion(
        self,
        kid_id: str,
        domain: GameDomain,
        level_number: int,
    ) -> LevelCompletion | None:
        """
        Get the completion record of one level.

        Returns:
            LevelCompletion, or None if the level was never completed
        """
        cursor = self.conn.cursor()
        cursor.execute(
            """
            SELECT * FROM level_completion
            WHERE kid_id = ? AND domain = ? AND level_number = ?
        """,
            (kid_id, GameDomain(domain).value, level_number),
        )
        row = cursor.fetchone()
        return self._row_to_completion(row) if row else None

    def save_completion(self, kid_id: str, completion: LevelCompletion) -> None:
        """Save or replace the completion record of one level."""
        cursor = self.conn.cursor()
        cursor.execute(
            """
            INSERT INTO level_completion (
                kid_id, domain, level_number, completed_at, stars_earned,
                quality, repetitions, interval_days, ease_factor, next_review_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT(kid_id, domain, level_number) DO UPDATE SET
                completed_at = excluded.completed_at,
                stars_earned = excluded.stars_earned,
                quality = excluded.quality,
                repetitions = excluded.repetitions,
                interval_days = excluded.interval_days,
                ease_factor = excluded.ease_factor,
                next_review_at = excluded.next_review_at
        """,
            (
                kid_id,
                completion.domain.value,
                completion.level_number,
                _to_text(completion.completed_at),
                completion.stars_earned,
                completion.quality,
                completion.repetitions,
                completion.interval,
                completion.ease_factor,
                _to_text(completion.next_review_at),
            ),
        )
        self.conn.commit()

    def list_completions(
        self,
        kid_id: str,
        domain: GameDomain | None = None,
    ) -> list[LevelCompletion]:
        cursor = self.conn.cursor()
        if domain is None:
            cursor.execute(
                "SELECT * FROM level_completion WHERE kid_id = ? ORDER BY domain, level_number",
                (kid_id,),
            )
        else:
            cursor.execute(
                """
                SELECT * FROM level_completion
                WHERE kid_id = ? AND domain = ?
                ORDER BY level_number
            """,
                (kid_id, GameDomain(domain).value),
            )
        return [self._row_to_completion(row) for row in cursor.fetchall()]

    # =========================================================================
    # Progress
    # =========================================================================

    def get_progress(self, kid_id: str) -> KidProgress:
        """Stored progress, or a fresh KidProgress for an unknown kid."""
        cursor = self.conn.cursor()
        cursor.execute("SELECT data FROM kid_progress WHERE kid_id = ?", (kid_id,))
        row = cursor.fetchone()
        if row is None:
            return KidProgress(kid_id=kid_id)
        return KidProgress.model_validate(json.loads(row["data"]))

    def save_progress(self, progress: KidProgress) -> None:
        cursor = self.conn.cursor()
        cursor.execute(
            """
            INSERT INTO kid_progress (kid_id, data, updated_at)
            VALUES (?, ?, ?)
            ON CONFLICT(kid_id) DO UPDATE SET
                data = excluded.data,
                updated_at = excluded.updated_at
        """,
            (progress.kid_id, progress.model_dump_json(), _to_text(progress.last_played)),
        )
        self.conn.commit()

    # =========================================================================
    # Awards
    # =========================================================================

    def record_award(self, award: LevelAward) -> None:
        """Append an award and drop the oldest beyond the history limit."""
        cursor = self.conn.cursor()
        cursor.execute(
            """
            INSERT INTO level_award (
                award_id, kid_id, level_id, domain, level_number,
                stars_earned, points_awarded, completed_at, reason
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
        """,
            (
                award.award_id,
                award.kid_id,
                award.level_id,
                award.domain.value,
                award.level_number,
                award.stars_earned,
                award.points_awarded,
                _to_text(award.completed_at),
                award.reason,
            ),
        )
        cursor.execute(
            """
            DELETE FROM level_award
            WHERE kid_id = ? AND id NOT IN (
                SELECT id FROM level_award WHERE kid_id = ?
                ORDER BY id DESC LIMIT ?
            )
        """,
            (award.kid_id, award.kid_id, self.award_limit),
        )
        self.conn.commit()

    def list_awards(self, kid_id: str, limit: int | None = None) -> list[LevelAward]:
        """Awards oldest first, optionally only the most recent ``limit``."""
        cursor = self.conn.cursor()
        cursor.execute(
            """
            SELECT * FROM level_award WHERE kid_id = ?
            ORDER BY id DESC LIMIT ?
        """,
            (kid_id, limit if limit else -1),
        )
        rows = list(reversed(cursor.fetchall()))
        return [
            LevelAward(
                award_id=row["award_id"],
                kid_id=row["kid_id"],
                level_id=row["level_id"],
                domain=GameDomain(row["domain"]),
                level_number=row["level_number"],
                stars_earned=row["stars_earned"],
                points_awarded=row["points_awarded"],
                completed_at=_from_text(row["completed_at"]),
                reason=row["reason"],
            )
            for row in rows
        ]

    # =========================================================================
    # Maintenance
    # =========================================================================

    def clear_kid(self, kid_id: str) -> int:
        """Delete everything stored for a kid. Returns rows removed."""
        cursor = self.conn.cursor()
        removed = 0
        for table in ("level_completion", "kid_progress", "level_award"):
            cursor.execute(f"DELETE FROM {table} WHERE kid_id = ?", (kid_id,))
            removed += cursor.rowcount
        self.conn.commit()
        logger.info(f"Cleared {removed} rows for kid {kid_id}")
        return removed

    def get_stats(self) -> dict:
        """Row counts per table."""
        cursor = self.conn.cursor()
        stats = {}
        for table in ("level_completion", "kid_progress", "level_award"):
            cursor.execute(f"SELECT COUNT(*) AS n FROM {table}")
            stats[table] = cursor.fetchone()["n"]
        return stats

    def close(self) -> None:
        """Close the database connection."""
        if self._conn:
            self._conn.close()
            self._conn = None
