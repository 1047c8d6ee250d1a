"""
Core Module - integrations shared by the engine's front ends.

Components:
- platform_client: Points backend client (httpx)
"""

from src.core.platform_client import NullSyncClient, PlatformClient, SyncConfig

__all__ = [
    "NullSyncClient",
    "PlatformClient",
    "SyncConfig",
]
