"""Vigil exception hierarchy."""

from __future__ import annotations


class VigilError(Exception):
    """Base exception for all Vigil errors."""


class UnknownCurrencyError(VigilError):
    """Currency code has no entry in the rate table."""

    def __init__(self, currency: str) -> None:
        self.currency = currency
        super().__init__(f"No conversion rate for currency {currency!r}")


class TimerError(VigilError):
    """Tab alert timer could not be scheduled."""
