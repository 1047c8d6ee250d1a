"""
Points Platform Client

HTTP client that pushes awarded points to the family points backend.
Calls are best effort: failures are logged and reported as False, never
raised, and never retried here.

Usage:
    with PlatformClient(SyncConfig(base_url="https://points.example")) as client:
        client.award_points("kid-1", 20, "Mathematics Level 4 (3★)")
"""

from __future__ import annotations

from typing import Any

import httpx
from loguru import logger
from pydantic import BaseModel


class SyncConfig(BaseModel):
    """Configuration for the points backend."""

    base_url: str = "http://localhost:8000"
    api_key: str | None = None
    actor_id: str = "game-engine"
    timeout_seconds: float = 10.0

    # Endpoints
    points_endpoint: str = "/api/points"


class PlatformClient:
    """
    HTTP client for the points backend.

    Supports:
    - API key authentication
    - Awarding points (POST {kid_id, points, reason, action, actor_id})
    """

    def __init__(self, config: SyncConfig | None = None, transport: httpx.BaseTransport | None = None):
        self.config = config or SyncConfig()
        self._transport = transport
        self._client: httpx.Client | None = None

    def __enter__(self) -> "PlatformClient":
        self._ensure_client()
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def _ensure_client(self) -> httpx.Client:
        if self._client is None:
            headers = {"Content-Type": "application/json"}
            if self.config.api_key:
                headers["X-API-Key"] = self.config.api_key

            self._client = httpx.Client(
                base_url=self.config.base_url,
                headers=headers,
                timeout=self.config.timeout_seconds,
                transport=self._transport,
            )
        return self._client

    def close(self) -> None:
        if self._client:
            self._client.close()
            self._client = None

    # =========================================================================
    # Points
    # =========================================================================

    def award_points(self, kid_id: str, points: int, reason: str) -> bool:
        """
        Add points to a kid's balance.

        Args:
            kid_id: Kid identifier on the backend
            points: Points to add (sign is ignored)
            reason: Human readable reason shown in the ledger

        Returns:
            True if the backend accepted the award
        """
        payload = {
            "kid_id": kid_id,
            "points": abs(points),
            "reason": reason,
            "action": "ADD",
            "actor_id": self.config.actor_id,
        }

        try:
            client = self._ensure_client()
            response = client.post(self.config.points_endpoint, json=payload)
        except httpx.HTTPError as e:
            logger.warning(f"Connection error awarding points to {kid_id}: {e}")
            return False

        if not response.is_success:
            logger.warning(f"Failed to award points to {kid_id}: HTTP {response.status_code}")
            return False

        try:
            body = response.json()
        except ValueError:
            body = None

        # The backend may answer 200 with {"success": false, "message": ...}
        if isinstance(body, dict) and body.get("success") is False:
            logger.warning(f"Backend rejected award for {kid_id}: {body.get('message', 'unknown error')}")
            return False

        logger.info(f"Awarded {abs(points)} points to {kid_id} ({reason})")
        return True


class NullSyncClient:
    """Sync collaborator used when syncing is disabled."""

    def award_points(self, kid_id: str, points: int, reason: str) -> bool:
        logger.debug(f"Sync disabled, not sending {points} points for {kid_id}")
        return False
