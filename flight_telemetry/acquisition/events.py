"""
Event channel - explicit subscriber list for core notifications.
"""

import logging
from typing import Callable, Generic, List, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class EventChannel(Generic[T]):
    """
    Ordered list of single-argument callbacks.

    A callback that raises is logged and skipped; delivery to the
    remaining subscribers continues. When a copier is given, every
    subscriber receives its own copy of the payload.
    """

    def __init__(self, name: str, copier: Optional[Callable[[T], T]] = None):
        self.name = name
        self._copier = copier
        self._subscribers: List[Callable[[T], None]] = []

    def subscribe(self, callback: Callable[[T], None]):
        if callback not in self._subscribers:
            self._subscribers.append(callback)

    def unsubscribe(self, callback: Callable[[T], None]):
        if callback in self._subscribers:
            self._subscribers.remove(callback)

    def emit(self, payload: T):
        for callback in list(self._subscribers):
            try:
                callback(self._copier(payload) if self._copier else payload)
            except Exception:
                logger.exception(f"Subscriber {callback!r} failed on '{self.name}'")

    def clear(self):
        self._subscribers.clear()

    def __len__(self) -> int:
        return len(self._subscribers)
