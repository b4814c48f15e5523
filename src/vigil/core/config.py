"""Application configuration using pydantic-settings with grouped env prefixes."""

from __future__ import annotations

from decimal import Decimal
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings


class UrgencyConfig(BaseSettings):
    """Urgency classification thresholds."""

    model_config = {"env_prefix": "VIGIL_URGENCY_"}

    threshold: Decimal = Decimal("500")  # reference-currency units, strict >
    reference_currency: str = "USD"
    high_priority: str = "high"
    eligible_status: str = "pending"
    # units per 1 reference unit
    fallback_rates: dict[str, Decimal] = Field(
        default_factory=lambda: {
            "USD": Decimal("1"),
            "KES": Decimal("150"),
            "SSP": Decimal("1000"),
        }
    )


class TabAlertConfig(BaseSettings):
    """Blinking tab-title configuration."""

    model_config = {"env_prefix": "VIGIL_TAB_"}

    interval_seconds: float = 1.0
    marker: str = "\U0001F6A8"


class PushConfig(BaseSettings):
    """Platform push notification configuration."""

    model_config = {"env_prefix": "VIGIL_PUSH_"}

    title: str = "Attention Required"
    icon: str = "/logo.png"
    badge: str = "/logo.png"
    tag: str = "urgent-queue-item"
    require_interaction: bool = True
    auto_close_seconds: float = 30.0


class SoundConfig(BaseSettings):
    """Audible alert configuration."""

    model_config = {"env_prefix": "VIGIL_SOUND_"}

    asset_path: str = "/notification-alert.mp3"
    volume: float = 0.7


class PreferenceDefaults(BaseSettings):
    """Preferences a new session starts with."""

    model_config = {"env_prefix": "VIGIL_PREFS_"}

    enabled: bool = True
    visual: bool = True
    tab: bool = True
    push: bool = False
    sound: bool = False


class AppSettings(BaseSettings):
    """Root application settings aggregating all sub-configs."""

    model_config = {"env_prefix": "VIGIL_"}

    environment: Literal["dev", "uat", "prod"] = "dev"
    log_level: str = "INFO"

    urgency: UrgencyConfig = UrgencyConfig()
    tab_alert: TabAlertConfig = TabAlertConfig()
    push: PushConfig = PushConfig()
    sound: SoundConfig = SoundConfig()
    preferences: PreferenceDefaults = PreferenceDefaults()
