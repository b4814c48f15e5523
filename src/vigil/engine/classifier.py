"""UrgencyClassifier — selects the work items that need attention."""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any, Container, Iterable, Mapping

from vigil.core.exceptions import UnknownCurrencyError
from vigil.engine.currency import CurrencyNormalizer
from vigil.models.notifications import UrgencyReport
from vigil.models.work_item import WorkItem

logger = logging.getLogger(__name__)


class UrgencyClassifier:
    """Pure classification over a snapshot of work items.

    An item is urgent when it is eligible (in the eligible status, which
    defaults to "pending", and not deleted), not acknowledged, and either
    its normalized amount exceeds the threshold or its priority is the
    high-priority marker.
    """

    def __init__(
        self,
        normalizer: CurrencyNormalizer,
        *,
        threshold: Decimal | int | float = Decimal("500"),
        reference_currency: str = "USD",
        high_priority: str = "high",
        eligible_status: str = "pending",
    ) -> None:
        self._normalizer = normalizer
        self._threshold = Decimal(str(threshold))
        self._reference = reference_currency
        self._high_priority = high_priority
        self._eligible_status = eligible_status

    @property
    def threshold(self) -> Decimal:
        return self._threshold

    def is_high_priority(self, item: WorkItem) -> bool:
        return item.priority == self._high_priority

    def is_large_amount(self, item: WorkItem) -> bool:
        if item.amount is None:
            return False
        try:
            normalized = self._normalizer.normalize(item.amount, item.currency, self._reference)
        except UnknownCurrencyError as exc:
            logger.warning("Item %s: %s; amount trigger skipped", item.id, exc)
            return False
        return normalized > self._threshold

    def is_urgent(self, item: WorkItem, acknowledged: Container[str] = ()) -> bool:
        if not item.is_eligible_for(self._eligible_status) or item.id in acknowledged:
            return False
        return self.is_large_amount(item) or self.is_high_priority(item)

    def classify(
        self,
        items: Iterable[WorkItem | Mapping[str, Any]],
        acknowledged: Container[str] = (),
    ) -> UrgencyReport:
        """Classify ``items``; order of ``urgent_items`` follows the input."""
        urgent: list[WorkItem] = []
        high_priority = 0
        large_amount = 0
        for raw in items:
            item = raw if isinstance(raw, WorkItem) else WorkItem.model_validate(raw)
            if not item.is_eligible_for(self._eligible_status) or item.id in acknowledged:
                continue
            is_high = self.is_high_priority(item)
            is_large = self.is_large_amount(item)
            if not (is_high or is_large):
                continue
            urgent.append(item)
            high_priority += is_high
            large_amount += is_large

        return UrgencyReport(
            urgent_items=urgent,
            requires_attention=bool(urgent),
            high_priority_count=high_priority,
            large_amount_count=large_amount,
        )
