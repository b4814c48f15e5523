"""CurrencyNormalizer — static-rate conversion into the reference currency."""

from __future__ import annotations

from decimal import Decimal
from typing import Mapping

from vigil.core.exceptions import UnknownCurrencyError
from vigil.core.types import CurrencyCode

DEFAULT_RATES: dict[str, Decimal] = {
    "USD": Decimal("1"),
    "KES": Decimal("150"),
    "SSP": Decimal("1000"),
}


class CurrencyNormalizer:
    """Converts amounts between currencies using a fixed rate table.

    Rates are "units per 1 reference unit". No live lookups: the result
    depends only on the arguments and the table, which keeps timer-driven
    re-classification deterministic.
    """

    def __init__(self, rates: Mapping[str, Decimal | int | float | str] | None = None) -> None:
        source = DEFAULT_RATES if rates is None else rates
        self._rates = {code.upper(): Decimal(str(rate)) for code, rate in source.items()}

    @property
    def currencies(self) -> frozenset[str]:
        return frozenset(self._rates)

    def supports(self, currency: CurrencyCode) -> bool:
        return currency.upper() in self._rates

    def rate(self, currency: CurrencyCode) -> Decimal:
        try:
            return self._rates[currency.upper()]
        except KeyError:
            raise UnknownCurrencyError(currency) from None

    def normalize(self, amount: Decimal | int | float, from_currency: CurrencyCode,
                  to_currency: CurrencyCode) -> Decimal:
        """Convert ``amount`` from one currency to another.

        Same-currency conversion returns ``amount`` untouched. Raises
        UnknownCurrencyError when either side is missing from the table.
        """
        if from_currency.upper() == to_currency.upper():
            return amount  # type: ignore[return-value]
        value = amount if isinstance(amount, Decimal) else Decimal(str(amount))
        return value / self.rate(from_currency) * self.rate(to_currency)
