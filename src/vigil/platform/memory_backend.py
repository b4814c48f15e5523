"""In-memory platform backends — used by the HTTP host and unit tests.

The HTTP host has no window of its own: the renderer polls the title,
the shown notifications and the sound cue count from these objects.
"""

from __future__ import annotations

from typing import Callable, Optional

from vigil.models.notifications import PushMessage, PushPermission


class MemoryTitleResource:
    """String-backed ITitleResource."""

    def __init__(self, title: str = "") -> None:
        self._title = title
        self.history: list[str] = []

    def get(self) -> str:
        return self._title

    def set(self, title: str) -> None:
        self._title = title
        self.history.append(title)


class MemoryAudioPlayer:
    """Counts rewinds and plays instead of producing sound."""

    def __init__(self, asset_path: str = "", volume: float = 0.7) -> None:
        self.asset_path = asset_path
        self.volume = volume
        self.position = 0.0
        self.play_count = 0
        self.released = False
        self.fail_with: Optional[Exception] = None

    def rewind(self) -> None:
        self.position = 0.0

    def play(self) -> None:
        if self.released:
            raise RuntimeError("audio player already released")
        if self.fail_with is not None:
            raise self.fail_with
        self.play_count += 1

    def release(self) -> None:
        self.released = True


class MemoryNotificationHandle:
    def __init__(self, message: PushMessage) -> None:
        self.message = message
        self.closed = False
        self._on_action: Optional[Callable[[Optional[str]], None]] = None

    def close(self) -> None:
        self.closed = True

    def set_action_handler(self, handler: Callable[[Optional[str]], None]) -> None:
        self._on_action = handler

    def click(self, action: Optional[str] = None) -> None:
        """Simulate the user clicking the body (None) or an action button."""
        if self._on_action is not None:
            self._on_action(action)


class MemoryNotificationPlatform:
    """Scripted INotificationPlatform.

    ``prompt_result`` is what the next permission prompt resolves to; the
    platform permission can be changed afterwards with ``set_permission``
    to simulate a revocation from OS settings.
    """

    def __init__(
        self,
        *,
        available: bool = True,
        prompt_result: PushPermission = PushPermission.GRANTED,
    ) -> None:
        self._available = available
        self._permission = PushPermission.DEFAULT
        self.prompt_result = prompt_result
        self.prompt_error: Optional[Exception] = None
        self.show_error: Optional[Exception] = None
        self.shown: list[MemoryNotificationHandle] = []

    @property
    def available(self) -> bool:
        return self._available

    def current_permission(self) -> PushPermission:
        return self._permission

    def set_permission(self, permission: PushPermission) -> None:
        self._permission = permission

    async def request_permission(self) -> PushPermission:
        if self.prompt_error is not None:
            raise self.prompt_error
        self._permission = self.prompt_result
        return self._permission

    def show(self, message: PushMessage) -> MemoryNotificationHandle:
        if self.show_error is not None:
            raise self.show_error
        handle = MemoryNotificationHandle(message)
        self.shown.append(handle)
        return handle
