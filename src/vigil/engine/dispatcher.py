"""EscalationDispatcher — fires the tab, push and sound tiers for urgent items.

Each tier is gated on its own preference toggle (and permission, where one
applies) and fails on its own: a rejected sound or a throwing notification
API is logged and skipped, never raised to the caller. The visual tier has
no dispatch step; renderers read ``requires_attention`` directly.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Optional, Sequence

from vigil.core.config import PushConfig
from vigil.core.protocols import IAudioPlayer, INotificationHandle, INotificationPlatform, ITabAlert
from vigil.engine.permissions import PermissionGateway
from vigil.engine.preferences import PreferenceStore
from vigil.models.notifications import DispatchResult, PushAction, PushMessage, PushPermission
from vigil.models.work_item import WorkItem

logger = logging.getLogger(__name__)

DEFAULT_ACTIONS = (
    PushAction(action="view", title="View Now"),
    PushAction(action="acknowledge", title="Acknowledge"),
)


def attention_message(count: int) -> str:
    """'1 urgent item requires attention' / 'N urgent items require attention'."""
    if count == 1:
        return "1 urgent item requires attention"
    return f"{count} urgent items require attention"


class EscalationDispatcher:
    """Drives one escalation cycle across the non-visual tiers."""

    def __init__(
        self,
        *,
        preferences: PreferenceStore,
        permissions: PermissionGateway,
        tab_alert: ITabAlert,
        notifier: Optional[INotificationPlatform] = None,
        audio: Optional[IAudioPlayer] = None,
        push_config: PushConfig | None = None,
        on_acknowledge: Optional[Callable[[list[str]], None]] = None,
        on_view: Optional[Callable[[], None]] = None,
    ) -> None:
        self._preferences = preferences
        self._permissions = permissions
        self._tab_alert = tab_alert
        self._notifier = notifier
        self._audio = audio
        self._push_config = push_config or PushConfig()
        self._on_acknowledge = on_acknowledge
        self._on_view = on_view
        # id(handle) -> (handle, auto-dismiss timer)
        self._shown: dict[int, tuple[INotificationHandle, Optional[asyncio.TimerHandle]]] = {}

    @property
    def open_notifications(self) -> list[INotificationHandle]:
        return [handle for handle, _ in self._shown.values()]

    def trigger(self, urgent_items: Sequence[WorkItem]) -> DispatchResult:
        prefs = self._preferences.get()
        if not prefs.enabled or not urgent_items:
            return DispatchResult()

        message = attention_message(len(urgent_items))
        result = DispatchResult(message=message)

        if prefs.tiers.tab:
            result.tab = self._start_tab_alert(message)
        result.push = self.send_push_notification(
            self._push_config.title,
            body=message,
            actions=DEFAULT_ACTIONS,
            item_ids=[item.id for item in urgent_items],
        )
        result.sound = self.play_notification_sound()

        logger.info(
            "Escalated %d urgent item(s): tab=%s push=%s sound=%s",
            len(urgent_items), result.tab, result.push, result.sound,
        )
        return result

    def _start_tab_alert(self, message: str) -> bool:
        try:
            self._tab_alert.start(message)
        except Exception:
            logger.warning("Tab alert failed to start", exc_info=True)
            return False
        return True

    def send_push_notification(
        self,
        title: str,
        *,
        body: str = "",
        actions: Sequence[PushAction] = (),
        item_ids: Sequence[str] = (),
    ) -> bool:
        """Show a platform notification if the push tier is on and permitted.

        Clicking the "acknowledge" action acknowledges ``item_ids``; any
        other click brings the host to the front. Either way the
        notification is closed.
        """
        prefs = self._preferences.get()
        if not prefs.enabled or not prefs.tiers.push:
            return False
        if self._notifier is None or not self._notifier.available:
            return False
        if self._permissions.refresh() is not PushPermission.GRANTED:
            return False

        cfg = self._push_config
        message = PushMessage(
            title=title,
            body=body,
            icon=cfg.icon,
            badge=cfg.badge,
            tag=cfg.tag,
            require_interaction=cfg.require_interaction,
            actions=list(actions),
        )
        try:
            handle = self._notifier.show(message)
        except Exception:
            logger.warning("Push notification failed", exc_info=True)
            return False

        ids = list(item_ids)
        try:
            handle.set_action_handler(lambda action: self._on_action(handle, action, ids))
        except Exception:
            logger.warning("Failed to attach notification action handler", exc_info=True)

        timer: Optional[asyncio.TimerHandle] = None
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("No running loop; notification will not auto-dismiss")
        else:
            timer = loop.call_later(cfg.auto_close_seconds, self._dismiss, handle)
        self._shown[id(handle)] = (handle, timer)
        return True

    def _on_action(self, handle: INotificationHandle, action: Optional[str], item_ids: list[str]) -> None:
        self._dismiss(handle)
        try:
            if action == "acknowledge":
                if self._on_acknowledge is not None:
                    self._on_acknowledge(item_ids)
            elif self._on_view is not None:
                self._on_view()
        except Exception:
            logger.warning("Notification action %r failed", action, exc_info=True)

    def _dismiss(self, handle: INotificationHandle) -> None:
        entry = self._shown.pop(id(handle), None)
        if entry is not None and entry[1] is not None:
            entry[1].cancel()
        try:
            handle.close()
        except Exception:
            logger.warning("Failed to dismiss notification", exc_info=True)

    def close(self) -> None:
        """Cancel pending auto-dismiss timers and close open notifications."""
        for handle in self.open_notifications:
            self._dismiss(handle)

    def play_notification_sound(self) -> bool:
        """Replay the alert sound from the start if the sound tier is on and permitted."""
        prefs = self._preferences.get()
        if not prefs.enabled or not prefs.tiers.sound:
            return False
        if self._audio is None or not self._permissions.audio_permission:
            return False
        try:
            self._audio.rewind()
            self._audio.play()
        except Exception:
            logger.warning("Audio playback failed", exc_info=True)
            return False
        return True
