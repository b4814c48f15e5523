"""Tests for EscalationDispatcher tier gating and failure isolation."""

from __future__ import annotations

import asyncio

import pytest

from tests.fakes import MemoryAudioPlayer, MemoryNotificationPlatform, MemoryTitleResource
from vigil.core.config import PushConfig
from vigil.engine.dispatcher import EscalationDispatcher, attention_message
from vigil.engine.permissions import PermissionGateway
from vigil.engine.preferences import PreferenceStore
from vigil.engine.tab_alert import TabAlertTimer
from vigil.models.notifications import PushPermission
from vigil.models.work_item import WorkItem

ORIGINAL = "Queue Dashboard"


class Harness:
    def __init__(self, auto_close_seconds: float = 30.0) -> None:
        self.title = MemoryTitleResource(ORIGINAL)
        self.timer = TabAlertTimer(self.title, interval=60)
        self.preferences = PreferenceStore(tab_alert=self.timer)
        self.platform = MemoryNotificationPlatform()
        self.permissions = PermissionGateway(self.platform, self.preferences)
        self.audio = MemoryAudioPlayer()
        self.dispatcher = EscalationDispatcher(
            preferences=self.preferences,
            permissions=self.permissions,
            tab_alert=self.timer,
            notifier=self.platform,
            audio=self.audio,
            push_config=PushConfig(auto_close_seconds=auto_close_seconds),
        )

    async def grant_everything(self) -> None:
        await self.permissions.request_push_permission()
        self.permissions.grant_audio_permission()


def _urgent(n: int) -> list[WorkItem]:
    return [WorkItem(id=str(i), priority="high") for i in range(n)]


@pytest.fixture
def harness():
    h = Harness()
    yield h
    h.timer.stop()


def test_attention_message_pluralizes():
    assert attention_message(1) == "1 urgent item requires attention"
    assert attention_message(2) == "2 urgent items require attention"
    assert attention_message(0) == "0 urgent items require attention"


class TestNoOp:
    @pytest.mark.asyncio
    async def test_empty_urgent_set(self, harness):
        await harness.grant_everything()
        result = harness.dispatcher.trigger([])
        assert not result.fired
        assert harness.title.get() == ORIGINAL
        assert harness.platform.shown == []
        assert harness.audio.play_count == 0

    @pytest.mark.asyncio
    async def test_master_switch_off(self, harness):
        await harness.grant_everything()
        harness.dispatcher.trigger(_urgent(2))
        assert harness.timer.is_active

        harness.preferences.update({"enabled": False})
        assert not harness.timer.is_active
        assert harness.title.get() == ORIGINAL

        shown = len(harness.platform.shown)
        plays = harness.audio.play_count
        result = harness.dispatcher.trigger(_urgent(3))
        assert not result.fired
        assert not harness.timer.is_active
        assert len(harness.platform.shown) == shown
        assert harness.audio.play_count == plays


class TestTiers:
    @pytest.mark.asyncio
    async def test_default_preferences_fire_tab_only(self, harness):
        result = harness.dispatcher.trigger(_urgent(1))
        assert result.message == "1 urgent item requires attention"
        assert (result.tab, result.push, result.sound) == (True, False, False)
        assert harness.title.get() == harness.timer.alert_title(result.message)

    @pytest.mark.asyncio
    async def test_all_tiers_fire_when_granted(self, harness):
        await harness.grant_everything()
        result = harness.dispatcher.trigger(_urgent(2))
        assert (result.tab, result.push, result.sound) == (True, True, True)

        message = harness.platform.shown[0].message
        assert message.body == "2 urgent items require attention"
        assert [a.action for a in message.actions] == ["view", "acknowledge"]
        assert message.tag == "urgent-queue-item"
        assert harness.audio.play_count == 1

    @pytest.mark.asyncio
    async def test_tab_tier_off(self, harness):
        harness.preferences.update({"tiers": {"tab": False}})
        result = harness.dispatcher.trigger(_urgent(1))
        assert result.tab is False
        assert not harness.timer.is_active

    @pytest.mark.asyncio
    async def test_push_needs_permission(self, harness):
        harness.preferences.update({"tiers": {"push": True}})
        result = harness.dispatcher.trigger(_urgent(1))
        assert result.push is False
        assert harness.platform.shown == []

    @pytest.mark.asyncio
    async def test_push_skipped_after_platform_revocation(self, harness):
        await harness.grant_everything()
        harness.platform.set_permission(PushPermission.DENIED)
        result = harness.dispatcher.trigger(_urgent(1))
        assert result.push is False
        assert harness.permissions.push_permission is PushPermission.DENIED

    @pytest.mark.asyncio
    async def test_sound_needs_audio_permission(self, harness):
        harness.preferences.update({"tiers": {"sound": True}})
        assert harness.dispatcher.trigger(_urgent(1)).sound is False
        assert harness.audio.play_count == 0

    @pytest.mark.asyncio
    async def test_sound_replays_from_start_each_trigger(self, harness):
        await harness.grant_everything()
        harness.audio.position = 3.2
        harness.dispatcher.trigger(_urgent(1))
        harness.audio.position = 1.0
        harness.dispatcher.trigger(_urgent(1))
        assert harness.audio.play_count == 2
        assert harness.audio.position == 0.0


class TestFailureIsolation:
    @pytest.mark.asyncio
    async def test_push_failure_does_not_block_sound(self, harness):
        await harness.grant_everything()
        harness.platform.show_error = RuntimeError("notification center gone")
        result = harness.dispatcher.trigger(_urgent(1))
        assert (result.tab, result.push, result.sound) == (True, False, True)

    @pytest.mark.asyncio
    async def test_sound_failure_is_swallowed(self, harness):
        await harness.grant_everything()
        harness.audio.fail_with = RuntimeError("autoplay blocked")
        result = harness.dispatcher.trigger(_urgent(1))
        assert (result.tab, result.push, result.sound) == (True, True, False)

    def test_tab_failure_without_loop_is_swallowed(self, harness):
        result = harness.dispatcher.trigger(_urgent(1))
        assert result.tab is False
        assert harness.title.get() == ORIGINAL


@pytest.mark.asyncio
async def test_push_auto_dismisses():
    h = Harness(auto_close_seconds=0.05)
    await h.grant_everything()
    h.dispatcher.trigger(_urgent(1))
    handle = h.platform.shown[0]
    assert not handle.closed
    await asyncio.sleep(0.1)
    assert handle.closed
    h.timer.stop()


def test_dispatcher_without_platform_skips_push():
    preferences = PreferenceStore()
    preferences.update({"tiers": {"push": True, "tab": False}})
    timer = TabAlertTimer(MemoryTitleResource(ORIGINAL))
    dispatcher = EscalationDispatcher(
        preferences=preferences,
        permissions=PermissionGateway(None, preferences),
        tab_alert=timer,
    )
    result = dispatcher.trigger(_urgent(1))
    assert not result.fired


class TestNotificationLifecycle:
    @pytest.mark.asyncio
    async def test_close_cancels_auto_dismiss_and_closes_open_notifications(self):
        h = Harness(auto_close_seconds=3600)
        await h.grant_everything()
        h.dispatcher.trigger(_urgent(1))
        handle = h.platform.shown[0]
        assert h.dispatcher.open_notifications == [handle]

        h.dispatcher.close()
        assert handle.closed
        assert h.dispatcher.open_notifications == []
        h.timer.stop()

    @pytest.mark.asyncio
    async def test_auto_dismiss_forgets_notification(self):
        h = Harness(auto_close_seconds=0.05)
        await h.grant_everything()
        h.dispatcher.trigger(_urgent(1))
        await asyncio.sleep(0.1)
        assert h.dispatcher.open_notifications == []
        h.timer.stop()


class TestNotificationActions:
    def _harness(self, acknowledged: list, views: list) -> Harness:
        h = Harness(auto_close_seconds=3600)
        h.dispatcher = EscalationDispatcher(
            preferences=h.preferences,
            permissions=h.permissions,
            tab_alert=h.timer,
            notifier=h.platform,
            push_config=PushConfig(auto_close_seconds=3600),
            on_acknowledge=acknowledged.extend,
            on_view=lambda: views.append(True),
        )
        return h

    @pytest.mark.asyncio
    async def test_acknowledge_action_passes_urgent_ids(self):
        acknowledged: list[str] = []
        views: list[bool] = []
        h = self._harness(acknowledged, views)
        await h.grant_everything()
        h.dispatcher.trigger(_urgent(2))

        handle = h.platform.shown[0]
        handle.click("acknowledge")
        assert acknowledged == ["0", "1"]
        assert views == []
        assert handle.closed
        assert h.dispatcher.open_notifications == []
        h.timer.stop()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("action", [None, "view"])
    async def test_other_clicks_focus_host(self, action):
        acknowledged: list[str] = []
        views: list[bool] = []
        h = self._harness(acknowledged, views)
        await h.grant_everything()
        h.dispatcher.trigger(_urgent(1))

        handle = h.platform.shown[0]
        handle.click(action)
        assert views == [True]
        assert acknowledged == []
        assert handle.closed
        h.timer.stop()

    @pytest.mark.asyncio
    async def test_failing_callback_is_swallowed(self):
        def focus_host() -> None:
            raise RuntimeError("window gone")

        h = Harness(auto_close_seconds=3600)
        h.dispatcher = EscalationDispatcher(
            preferences=h.preferences,
            permissions=h.permissions,
            tab_alert=h.timer,
            notifier=h.platform,
            on_view=focus_host,
        )
        await h.grant_everything()
        h.dispatcher.trigger(_urgent(1))
        handle = h.platform.shown[0]
        handle.click()
        assert handle.closed
        h.timer.stop()
