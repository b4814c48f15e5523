"""AttentionEngine — the session-scoped facade a renderer talks to."""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, Mapping, Optional, Sequence, Union

from vigil.core.config import AppSettings
from vigil.core.protocols import IAudioPlayer, INotificationPlatform, ITitleResource
from vigil.engine.classifier import UrgencyClassifier
from vigil.engine.currency import CurrencyNormalizer
from vigil.engine.dispatcher import DEFAULT_ACTIONS, EscalationDispatcher
from vigil.engine.ledger import AcknowledgmentLedger
from vigil.engine.permissions import PermissionGateway
from vigil.engine.preferences import PreferenceStore
from vigil.engine.tab_alert import TabAlertTimer
from vigil.models.notifications import (
    DispatchResult,
    EngineState,
    NotificationPreferences,
    NotificationTiers,
    PreferencesUpdate,
    PushAction,
    PushPermission,
    UrgencyReport,
)
from vigil.models.work_item import WorkItem

logger = logging.getLogger(__name__)

ItemLike = Union[WorkItem, Mapping[str, Any]]


class AttentionEngine:
    """Wires classifier, ledger, preferences, permissions and dispatcher.

    All methods run on the event loop thread. Call ``close()`` at session
    teardown so the tab title is restored and the audio player released.
    """

    def __init__(
        self,
        *,
        classifier: UrgencyClassifier,
        ledger: AcknowledgmentLedger,
        preferences: PreferenceStore,
        permissions: PermissionGateway,
        dispatcher: EscalationDispatcher,
        tab_alert: TabAlertTimer,
        audio: Optional[IAudioPlayer] = None,
    ) -> None:
        self._classifier = classifier
        self._ledger = ledger
        self._preferences = preferences
        self._permissions = permissions
        self._dispatcher = dispatcher
        self._tab_alert = tab_alert
        self._audio = audio
        self._closed = False

    # -- observable state ---------------------------------------------------

    @property
    def permission(self) -> PushPermission:
        return self._permissions.push_permission

    @property
    def audio_permission(self) -> bool:
        return self._permissions.audio_permission

    @property
    def acknowledged_items(self) -> frozenset[str]:
        return self._ledger.snapshot()

    @property
    def preferences(self) -> NotificationPreferences:
        return self._preferences.get()

    @property
    def tab_alert(self) -> TabAlertTimer:
        return self._tab_alert

    def state(self) -> EngineState:
        return EngineState(
            permission=self.permission,
            audio_permission=self.audio_permission,
            acknowledged_items=sorted(self._ledger),
            preferences=self.preferences,
        )

    # -- permissions --------------------------------------------------------

    async def request_notification_permission(self) -> bool:
        return await self._permissions.request_push_permission()

    def enable_audio_notifications(self) -> None:
        self._permissions.grant_audio_permission()

    # -- classification and dispatch ----------------------------------------

    def check_for_urgent_items(self, items: Iterable[ItemLike]) -> UrgencyReport:
        return self._classifier.classify(items, self._ledger)

    def trigger_urgent_notifications(self, urgent_items: Sequence[WorkItem]) -> DispatchResult:
        return self._dispatcher.trigger(urgent_items)

    def evaluate(self, items: Iterable[ItemLike]) -> tuple[UrgencyReport, DispatchResult]:
        """Run one escalation cycle: classify, then trigger on the urgent set."""
        report = self.check_for_urgent_items(items)
        return report, self.trigger_urgent_notifications(report.urgent_items)

    def play_notification_sound(self) -> bool:
        return self._dispatcher.play_notification_sound()

    def send_push_notification(
        self,
        title: str,
        *,
        body: str = "",
        actions: Sequence[PushAction] = DEFAULT_ACTIONS,
    ) -> bool:
        return self._dispatcher.send_push_notification(title, body=body, actions=actions)

    def start_tab_alert(self, message: str) -> None:
        prefs = self._preferences.get()
        if prefs.enabled and prefs.tiers.tab:
            self._tab_alert.start(message)

    def stop_tab_alert(self) -> None:
        self._tab_alert.stop()

    # -- acknowledgment -----------------------------------------------------

    def acknowledge_item(self, item_id: str) -> None:
        self._ledger.acknowledge(item_id)

    def acknowledge_all(self, items: Iterable[ItemLike | str]) -> None:
        ids = [_item_id(item) for item in items]
        self._ledger.acknowledge_all(ids)

    def reset_acknowledged_items(self) -> None:
        self._ledger.reset()

    # -- preferences --------------------------------------------------------

    def update_preferences(self, partial: PreferencesUpdate | Mapping[str, Any]) -> NotificationPreferences:
        return self._preferences.update(partial)

    # -- lifecycle ----------------------------------------------------------

    def close(self) -> None:
        """Stop the timer, release audio and drop session state.

        Safe to call again: the tab alert is always stopped.
        """
        self._tab_alert.close()
        if self._closed:
            return
        self._dispatcher.close()
        if self._audio is not None:
            try:
                self._audio.release()
            except Exception:
                logger.warning("Failed to release audio player", exc_info=True)
        self._ledger.reset()
        self._preferences.reset()
        self._permissions.reset()
        self._closed = True
        logger.debug("Attention engine closed")


def _item_id(item: ItemLike | str) -> str:
    if isinstance(item, str):
        return item
    if isinstance(item, WorkItem):
        return item.id
    return str(item["id"])


def create_engine(
    settings: AppSettings | None = None,
    *,
    title: ITitleResource,
    audio: Optional[IAudioPlayer] = None,
    notifier: Optional[INotificationPlatform] = None,
    on_view: Optional[Callable[[], None]] = None,
) -> AttentionEngine:
    """Create a wired-up AttentionEngine from application settings.

    ``on_view`` is called when the user clicks a push notification
    anywhere other than its "acknowledge" action.
    """
    if settings is None:
        settings = AppSettings()

    tab_alert = TabAlertTimer(
        title,
        interval=settings.tab_alert.interval_seconds,
        marker=settings.tab_alert.marker,
    )
    defaults = settings.preferences
    preferences = PreferenceStore(
        NotificationPreferences(
            enabled=defaults.enabled,
            tiers=NotificationTiers(
                visual=defaults.visual, tab=defaults.tab, push=defaults.push, sound=defaults.sound,
            ),
        ),
        tab_alert=tab_alert,
    )
    permissions = PermissionGateway(notifier, preferences)
    classifier = UrgencyClassifier(
        CurrencyNormalizer(settings.urgency.fallback_rates),
        threshold=settings.urgency.threshold,
        reference_currency=settings.urgency.reference_currency,
        high_priority=settings.urgency.high_priority,
        eligible_status=settings.urgency.eligible_status,
    )
    ledger = AcknowledgmentLedger(tab_alert)
    dispatcher = EscalationDispatcher(
        preferences=preferences,
        permissions=permissions,
        tab_alert=tab_alert,
        notifier=notifier,
        audio=audio,
        push_config=settings.push,
        on_acknowledge=ledger.acknowledge_all,
        on_view=on_view,
    )
    return AttentionEngine(
        classifier=classifier,
        ledger=ledger,
        preferences=preferences,
        permissions=permissions,
        dispatcher=dispatcher,
        tab_alert=tab_alert,
        audio=audio,
    )
