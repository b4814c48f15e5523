"""PreferenceStore — master switch and per-tier toggles for the session."""

from __future__ import annotations

import logging
from typing import Any, Mapping

from vigil.core.protocols import ITabAlert
from vigil.core.types import TierName
from vigil.models.notifications import (
    TIER_NAMES,
    NotificationPreferences,
    PreferencesUpdate,
)

logger = logging.getLogger(__name__)


class PreferenceStore:
    """Holds notification preferences and keeps the tab alert in step.

    Whenever an update leaves the master switch or the tab tier off, the
    running tab alert is stopped before ``update()`` returns.
    """

    def __init__(
        self,
        initial: NotificationPreferences | None = None,
        *,
        tab_alert: ITabAlert | None = None,
    ) -> None:
        self._initial = (initial or NotificationPreferences()).model_copy(deep=True)
        self._prefs = self._initial.model_copy(deep=True)
        self._tab_alert = tab_alert

    def get(self) -> NotificationPreferences:
        return self._prefs.model_copy(deep=True)

    def update(self, partial: PreferencesUpdate | Mapping[str, Any]) -> NotificationPreferences:
        """Merge ``partial`` into the current preferences and return the result."""
        if not isinstance(partial, PreferencesUpdate):
            partial = PreferencesUpdate.model_validate(partial)

        enabled = self._prefs.enabled if partial.enabled is None else partial.enabled
        tiers = self._prefs.tiers.model_dump()
        if partial.tiers is not None:
            tiers.update(partial.tiers.model_dump(exclude_none=True))

        self._prefs = NotificationPreferences.model_validate({"enabled": enabled, "tiers": tiers})
        logger.debug("Preferences updated: %s", self._prefs.model_dump())

        if not self._prefs.enabled or not self._prefs.tiers.tab:
            if self._tab_alert is not None:
                self._tab_alert.stop()
        return self.get()

    def enable_tier(self, tier: TierName) -> NotificationPreferences:
        if tier not in TIER_NAMES:
            raise ValueError(f"Unknown notification tier: {tier!r}")
        return self.update({"tiers": {tier: True}})

    def reset(self) -> None:
        self._prefs = self._initial.model_copy(deep=True)
