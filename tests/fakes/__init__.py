"""Shared test doubles — re-export memory backends."""

from __future__ import annotations

from vigil.platform.memory_backend import (
    MemoryAudioPlayer,
    MemoryNotificationHandle,
    MemoryNotificationPlatform,
    MemoryTitleResource,
)

__all__ = [
    "MemoryAudioPlayer",
    "MemoryNotificationHandle",
    "MemoryNotificationPlatform",
    "MemoryTitleResource",
]
