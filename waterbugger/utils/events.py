"""Minimal observer hook for async listeners."""

import logging
from typing import Any, Awaitable, Callable, List

logger = logging.getLogger(__name__)

Listener = Callable[..., Awaitable[Any]]


class EventHook:
    """An event that listeners subscribe to explicitly.

    Listeners are awaited one at a time in subscription order, so each
    emit is delivered exactly once to every listener before emit returns.
    """

    def __init__(self, name: str):
        self.name = name
        self._listeners: List[Listener] = []

    def subscribe(self, listener: Listener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    async def emit(self, *args: Any) -> None:
        logger.debug(f"Emitting {self.name}{args} to {len(self._listeners)} listener(s)")
        for listener in list(self._listeners):
            await listener(*args)
