"""Protocol interfaces for the host platform and engine seams.

The host owns a single window title, one audio output and the OS
notification center. The engine only ever sees them through these
Protocols, so tests and the HTTP host can supply their own.
"""

from __future__ import annotations

from typing import Callable, Optional, Protocol, runtime_checkable

from vigil.models.notifications import PushMessage, PushPermission


# ---------------------------------------------------------------------------
# Window title
# ---------------------------------------------------------------------------

@runtime_checkable
class ITitleResource(Protocol):
    """Mutable "current window title" owned by the host."""

    def get(self) -> str: ...

    def set(self, title: str) -> None: ...


# ---------------------------------------------------------------------------
# Audio
# ---------------------------------------------------------------------------

@runtime_checkable
class IAudioPlayer(Protocol):
    """Audio playback primitive supporting rewind-and-play."""

    def rewind(self) -> None: ...

    def play(self) -> None: ...

    def release(self) -> None: ...


# ---------------------------------------------------------------------------
# Push notifications
# ---------------------------------------------------------------------------

@runtime_checkable
class INotificationHandle(Protocol):
    """A notification currently on screen.

    The platform calls the action handler with the action id the user
    picked, or None for a click on the notification body.
    """

    def close(self) -> None: ...

    def set_action_handler(self, handler: Callable[[Optional[str]], None]) -> None: ...


@runtime_checkable
class INotificationPlatform(Protocol):
    """OS/browser notification permission and display API."""

    @property
    def available(self) -> bool: ...

    def current_permission(self) -> PushPermission: ...

    async def request_permission(self) -> PushPermission: ...

    def show(self, message: PushMessage) -> INotificationHandle: ...


# ---------------------------------------------------------------------------
# Tab alert
# ---------------------------------------------------------------------------

@runtime_checkable
class ITabAlert(Protocol):
    """Something that can blink the tab title and be silenced."""

    @property
    def is_active(self) -> bool: ...

    def start(self, message: str) -> None: ...

    def stop(self) -> None: ...
