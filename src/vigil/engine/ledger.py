"""AcknowledgmentLedger — ids of items the user has already dismissed."""

from __future__ import annotations

import logging
from typing import Iterable, Iterator

from vigil.core.protocols import ITabAlert
from vigil.core.types import ItemId

logger = logging.getLogger(__name__)


class AcknowledgmentLedger:
    """Session-scoped set of acknowledged item ids.

    Grows monotonically until ``reset()``. Bulk acknowledgment is the
    "seen everything" action and silences the tab alert it was given.
    """

    def __init__(self, tab_alert: ITabAlert | None = None) -> None:
        self._ids: set[ItemId] = set()
        self._tab_alert = tab_alert

    def acknowledge(self, item_id: ItemId) -> None:
        if item_id not in self._ids:
            self._ids.add(item_id)
            logger.debug("Acknowledged item %s", item_id)

    def acknowledge_all(self, item_ids: Iterable[ItemId]) -> None:
        for item_id in item_ids:
            self.acknowledge(item_id)
        if self._tab_alert is not None:
            self._tab_alert.stop()

    def reset(self) -> None:
        self._ids.clear()
        logger.debug("Acknowledgment ledger cleared")

    def contains(self, item_id: ItemId) -> bool:
        return item_id in self._ids

    def snapshot(self) -> frozenset[ItemId]:
        return frozenset(self._ids)

    def __contains__(self, item_id: object) -> bool:
        return item_id in self._ids

    def __iter__(self) -> Iterator[ItemId]:
        return iter(sorted(self._ids))

    def __len__(self) -> int:
        return len(self._ids)
