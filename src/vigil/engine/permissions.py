"""PermissionGateway — push and audio permission as granted by the user."""

from __future__ import annotations

import logging
from typing import Optional

from vigil.core.protocols import INotificationPlatform
from vigil.engine.preferences import PreferenceStore
from vigil.models.notifications import PermissionState, PushPermission

logger = logging.getLogger(__name__)


class PermissionGateway:
    """Tracks push and audio permission for one session.

    Both start at their most restrictive value and only move toward granted
    through ``request_push_permission()`` / ``grant_audio_permission()``.
    There is no revoke operation; ``refresh()`` picks up a revocation made
    at the platform level.
    """

    def __init__(self, platform: Optional[INotificationPlatform], preferences: PreferenceStore) -> None:
        self._platform = platform
        self._preferences = preferences
        self._push = PushPermission.DEFAULT
        self._audio = False

    @property
    def push_permission(self) -> PushPermission:
        return self._push

    @property
    def audio_permission(self) -> bool:
        return self._audio

    @property
    def state(self) -> PermissionState:
        return PermissionState(push=self._push, audio=self._audio)

    @property
    def push_available(self) -> bool:
        return self._platform is not None and self._platform.available

    async def request_push_permission(self) -> bool:
        """Prompt the user for notification permission.

        Returns True only when the platform grants it, in which case the
        push tier is switched on as well.
        """
        if not self.push_available:
            logger.info("Push notifications unavailable on this platform")
            return False
        try:
            result = PushPermission(await self._platform.request_permission())
        except Exception:
            logger.warning("Notification permission request failed", exc_info=True)
            return False

        self._push = result
        if result is not PushPermission.GRANTED:
            logger.info("Notification permission %s", result)
            return False
        self._preferences.enable_tier("push")
        logger.info("Notification permission granted")
        return True

    def grant_audio_permission(self) -> None:
        """Record that a user gesture unlocked audio playback."""
        self._audio = True
        self._preferences.enable_tier("sound")
        logger.info("Audio notifications enabled")

    def refresh(self) -> PushPermission:
        """Re-read platform permission, downgrading if it was revoked."""
        if self._push is not PushPermission.GRANTED:
            return self._push
        if not self.push_available:
            return self._push
        try:
            current = PushPermission(self._platform.current_permission())
        except Exception:
            logger.warning("Could not read platform notification permission", exc_info=True)
            return self._push
        if current is not PushPermission.GRANTED:
            logger.info("Notification permission revoked at platform level (%s)", current)
            self._push = current
        return self._push

    def reset(self) -> None:
        self._push = PushPermission.DEFAULT
        self._audio = False
