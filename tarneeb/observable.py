"""Observable single-value slot shared between the engine and its observers."""

from __future__ import annotations

import threading
from typing import Callable, Generic, List, Optional, TypeVar

T = TypeVar("T")

Callback = Callable[[T], None]


class StateSlot(Generic[T]):
    """Hold the latest published value; later values replace earlier ones.

    Every ``set`` bumps ``version`` and calls subscribers synchronously, in
    publish order. Subscribers added later only see values from then on,
    starting with the current one.
    """

    def __init__(self, initial: Optional[T] = None) -> None:
        self._lock = threading.RLock()
        self._value: Optional[T] = initial
        self._version = 0
        self._subscribers: List[Callback] = []

    def get(self) -> Optional[T]:
        with self._lock:
            return self._value

    @property
    def version(self) -> int:
        with self._lock:
            return self._version

    def set(self, value: Optional[T]) -> None:
        with self._lock:
            self._value = value
            self._version += 1
            subscribers = list(self._subscribers)
            for callback in subscribers:
                callback(value)

    def subscribe(self, callback: Callback, *, replay: bool = True) -> Callable[[], None]:
        """Register ``callback``; return a function that unsubscribes it."""
        with self._lock:
            self._subscribers.append(callback)
            if replay:
                callback(self._value)

        def unsubscribe() -> None:
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return unsubscribe
