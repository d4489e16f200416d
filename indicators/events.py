from __future__ import annotations

import asyncio
from typing import Any, Callable, Optional

SEARCH_DEBOUNCE_SECONDS = 0.2


class Debouncer:
    """Single-slot delayed trigger.

    Each ``trigger`` cancels the pending call (if any) and schedules a new one
    ``delay`` seconds later, so a burst of calls runs the callback once with
    the last arguments.
    """

    def __init__(
        self,
        callback: Callable[..., Any],
        delay: float = SEARCH_DEBOUNCE_SECONDS,
        *,
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ):
        self.callback = callback
        self.delay = delay
        self._loop = loop
        self._handle: Optional[asyncio.TimerHandle] = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def trigger(self, *args: Any) -> None:
        self.cancel()
        loop = self._loop or asyncio.get_running_loop()
        self._handle = loop.call_later(self.delay, self._fire, args)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self, args: tuple) -> None:
        self._handle = None
        self.callback(*args)
