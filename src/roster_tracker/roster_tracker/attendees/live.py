"""In-process live queries and in-flight mutation tracking.

Observer Pattern: a subscriber registers a query callable and a listener.
After every mutation the service publishes, and each query is re-run and
its fresh result pushed to the listener.
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Callable, Generic, Iterable, Iterator, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Subscription(Generic[T]):
    def __init__(self, hub: "LiveQueryHub", query: Callable[[], T], listener: Callable[[T], None]):
        self._hub = hub
        self.query = query
        self.listener = listener

    def cancel(self) -> None:
        self._hub.unsubscribe(self)


class LiveQueryHub:
    def __init__(self):
        self._lock = threading.Lock()
        self._subscriptions: list[Subscription] = []

    def subscribe(
        self,
        query: Callable[[], T],
        listener: Callable[[T], None],
        *,
        initial: bool = True,
    ) -> Subscription[T]:
        """Register a live query; by default the current result is pushed at once."""
        sub = Subscription(self, query, listener)
        with self._lock:
            self._subscriptions.append(sub)
        if initial:
            self._deliver(sub)
        return sub

    def unsubscribe(self, sub: Subscription) -> None:
        with self._lock:
            if sub in self._subscriptions:
                self._subscriptions.remove(sub)

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscriptions)

    def publish(self) -> None:
        with self._lock:
            subs = list(self._subscriptions)
        for sub in subs:
            self._deliver(sub)

    def _deliver(self, sub: Subscription) -> None:
        # One failing subscriber must not starve the others.
        try:
            sub.listener(sub.query())
        except Exception:
            logger.exception("Live query delivery failed")


class PendingMutations:
    """Advisory per-record in-flight markers, so a UI can disable a control.

    The store stays the source of truth; this is never used for correctness.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._counts: dict[int, int] = {}

    @contextmanager
    def track(self, attendee_ids: Iterable[int]) -> Iterator[None]:
        ids = [int(i) for i in attendee_ids]
        with self._lock:
            for i in ids:
                self._counts[i] = self._counts.get(i, 0) + 1
        try:
            yield
        finally:
            with self._lock:
                for i in ids:
                    left = self._counts.get(i, 0) - 1
                    if left > 0:
                        self._counts[i] = left
                    else:
                        self._counts.pop(i, None)

    def is_pending(self, attendee_id: int) -> bool:
        with self._lock:
            return int(attendee_id) in self._counts

    def snapshot(self) -> frozenset[int]:
        with self._lock:
            return frozenset(self._counts)
