"""Type aliases used across Vigil."""

from __future__ import annotations

ItemId = str
CurrencyCode = str
TierName = str
