# core/reactive.py
"""
TrackLens - Reactive Primitives
Framework-agnostic publish/subscribe used to re-run chart pipelines.

- `Observable`: a value holder that notifies subscribers on change
- `Subscription`: handle returned by `subscribe`; `unsubscribe()` detaches
- `Debouncer`: coalesces bursts of calls (resize events) on the asyncio loop

Everything runs on one thread. Callbacks execute synchronously inside
`Observable.set`, so a recomputation is atomic with respect to the event loop.
"""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Generic, List, Optional, Tuple, TypeVar

from loguru import logger

__all__ = ["Observable", "Subscription", "Debouncer"]

T = TypeVar("T")


class Subscription:
    """Handle for one observer registration."""

    def __init__(self, detach: Callable[["Subscription"], None]) -> None:
        self._detach: Optional[Callable[["Subscription"], None]] = detach

    @property
    def active(self) -> bool:
        return self._detach is not None

    def unsubscribe(self) -> None:
        """Detach; calling twice is harmless."""
        if self._detach is not None:
            detach, self._detach = self._detach, None
            detach(self)


class Observable(Generic[T]):
    """
    Value holder with change notification.

    `set` notifies subscribers only when the new value differs from the
    current one, by identity or by equality.
    """

    def __init__(self, initial: T) -> None:
        self._value: T = initial
        self._observers: List[Tuple[Subscription, Callable[[T], None]]] = []

    @property
    def value(self) -> T:
        return self._value

    def subscribe(self, callback: Callable[[T], None]) -> Subscription:
        subscription = Subscription(self._remove)
        self._observers.append((subscription, callback))
        return subscription

    def set(self, value: T, *, force: bool = False) -> bool:
        """Publish `value`; returns True when observers were notified."""
        if not force and self._same(value):
            return False
        self._value = value
        for _, callback in list(self._observers):
            callback(value)
        return True

    @property
    def observer_count(self) -> int:
        return len(self._observers)

    def _same(self, value: T) -> bool:
        if value is self._value:
            return True
        try:
            return bool(value == self._value)
        except (TypeError, ValueError):
            return False

    def _remove(self, subscription: Subscription) -> None:
        self._observers = [(s, cb) for s, cb in self._observers if s is not subscription]


class Debouncer:
    """
    Trailing-edge debounce on the running asyncio loop.

    Each `trigger` cancels the pending call and schedules a new one with the
    latest arguments. With `delay_s == 0`, or when no loop is running, the
    callback runs synchronously.
    """

    def __init__(self, delay_s: float, callback: Callable[..., Any]) -> None:
        if delay_s < 0:
            raise ValueError("delay_s must be >= 0")
        self.delay_s = delay_s
        self._callback = callback
        self._handle: Optional[asyncio.TimerHandle] = None
        self._pending_args: Optional[Tuple[Any, ...]] = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def trigger(self, *args: Any) -> None:
        self.cancel()
        if self.delay_s == 0:
            self._callback(*args)
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("Debouncer triggered outside an event loop; calling immediately")
            self._callback(*args)
            return
        self._pending_args = args
        self._handle = loop.call_later(self.delay_s, self._fire)

    def flush(self) -> None:
        """Run the pending call now, if any."""
        if self._handle is not None:
            self._handle.cancel()
            self._fire()

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
        self._handle = None
        self._pending_args = None

    def _fire(self) -> None:
        args = self._pending_args or ()
        self._handle = None
        self._pending_args = None
        self._callback(*args)
