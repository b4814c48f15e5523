"""TabAlertTimer — blinks the window title between an alert and the original.

State machine::

    IDLE --start(msg)--> BLINKING(ALERT) <--tick--> BLINKING(ORIGINAL)
      ^                        |                          |
      +--------stop()----------+--------------------------+

``start()`` while blinking cancels the running tick before installing a new
one, so at most one ticker ever writes to the title.
"""

from __future__ import annotations

import asyncio
import logging
from enum import StrEnum
from typing import Optional

from vigil.core.exceptions import TimerError
from vigil.core.protocols import ITitleResource

logger = logging.getLogger(__name__)


class TabAlertState(StrEnum):
    IDLE = "IDLE"
    BLINKING = "BLINKING"


class TabAlertPhase(StrEnum):
    ALERT = "ALERT"
    ORIGINAL = "ORIGINAL"


class TabAlertTimer:
    """Cancellable periodic title toggler bound to one title resource."""

    def __init__(self, title: ITitleResource, *, interval: float = 1.0, marker: str = "\U0001F6A8") -> None:
        if interval <= 0:
            raise ValueError("interval must be positive")
        self._title = title
        self._interval = interval
        self._marker = marker
        self._task: Optional[asyncio.Task[None]] = None
        self._state = TabAlertState.IDLE
        self._phase: Optional[TabAlertPhase] = None
        self._message = ""
        self._original_title: Optional[str] = None

    @property
    def state(self) -> TabAlertState:
        return self._state

    @property
    def phase(self) -> Optional[TabAlertPhase]:
        return self._phase

    @property
    def message(self) -> str:
        return self._message

    @property
    def is_active(self) -> bool:
        return self._state is TabAlertState.BLINKING

    @property
    def original_title(self) -> Optional[str]:
        return self._original_title

    def alert_title(self, message: str) -> str:
        return f"{self._marker} {message} {self._marker}" if self._marker else message

    def start(self, message: str) -> None:
        """Begin blinking ``message``; restarts from the alert phase if already running."""
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            raise TimerError("tab alert requires a running event loop") from None

        if self.is_active:
            self.stop()
        if self._original_title is None:
            self._original_title = self._title.get()

        self._message = message
        self._state = TabAlertState.BLINKING
        self._phase = TabAlertPhase.ALERT
        self._title.set(self.alert_title(message))
        self._task = loop.create_task(self._tick())
        logger.debug("Tab alert started: %s", message)

    def stop(self) -> None:
        """Cancel the ticker and restore the original title. No-op when idle."""
        if not self.is_active:
            return
        if self._task is not None:
            # a closed loop has already dropped the ticker
            if not self._task.get_loop().is_closed():
                self._task.cancel()
            self._task = None
        self._state = TabAlertState.IDLE
        self._phase = None
        self._message = ""
        if self._original_title is not None:
            self._title.set(self._original_title)
        logger.debug("Tab alert stopped")

    def close(self) -> None:
        self.stop()

    async def _tick(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            if self._phase is TabAlertPhase.ALERT:
                self._phase = TabAlertPhase.ORIGINAL
                self._title.set(self._original_title or "")
            else:
                self._phase = TabAlertPhase.ALERT
                self._title.set(self.alert_title(self._message))
