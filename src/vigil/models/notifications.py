"""Preference, permission and dispatch models."""

from __future__ import annotations

from enum import StrEnum
from typing import Optional

from pydantic import BaseModel, Field

from vigil.models.work_item import WorkItem

TIER_NAMES = ("visual", "tab", "push", "sound")


class PushPermission(StrEnum):
    DEFAULT = "default"
    GRANTED = "granted"
    DENIED = "denied"


class NotificationTiers(BaseModel):
    """The four independent alert channels."""

    visual: bool = True
    tab: bool = True
    push: bool = False
    sound: bool = False


class NotificationPreferences(BaseModel):
    """Master switch plus per-tier toggles.

    Tier flags only matter while ``enabled`` is true.
    """

    enabled: bool = True
    tiers: NotificationTiers = Field(default_factory=NotificationTiers)


class TierUpdate(BaseModel):
    """Partial tier toggles; omitted keys keep their current value."""

    visual: Optional[bool] = None
    tab: Optional[bool] = None
    push: Optional[bool] = None
    sound: Optional[bool] = None


class PreferencesUpdate(BaseModel):
    """Partial preferences update accepted by the preference store."""

    enabled: Optional[bool] = None
    tiers: Optional[TierUpdate] = None


class PermissionState(BaseModel):
    """Push and audio permission as the engine currently believes them."""

    push: PushPermission = PushPermission.DEFAULT
    audio: bool = False


class PushAction(BaseModel):
    action: str
    title: str


class PushMessage(BaseModel):
    """Payload handed to the platform notification API."""

    title: str
    body: str = ""
    icon: str = ""
    badge: str = ""
    tag: str = ""
    require_interaction: bool = True
    silent: bool = False
    actions: list[PushAction] = Field(default_factory=list)


class UrgencyReport(BaseModel):
    """Result of one classification pass.

    ``high_priority_count`` and ``large_amount_count`` are independent: an
    item that is both high priority and over the threshold counts in each.
    """

    urgent_items: list[WorkItem] = Field(default_factory=list)
    requires_attention: bool = False
    high_priority_count: int = 0
    large_amount_count: int = 0

    @property
    def urgent_ids(self) -> list[str]:
        return [item.id for item in self.urgent_items]


class DispatchResult(BaseModel):
    """Which tiers fired during one escalation trigger."""

    message: str = ""
    tab: bool = False
    push: bool = False
    sound: bool = False

    @property
    def fired(self) -> bool:
        return self.tab or self.push or self.sound


class EngineState(BaseModel):
    """Observable engine state exposed to the rendering layer."""

    permission: PushPermission = PushPermission.DEFAULT
    audio_permission: bool = False
    acknowledged_items: list[str] = Field(default_factory=list)
    preferences: NotificationPreferences = Field(default_factory=NotificationPreferences)
