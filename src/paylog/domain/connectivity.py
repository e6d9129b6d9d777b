"""Connectivity change notifications."""

import threading
from typing import Callable

ConnectivityCallback = Callable[[bool], None]


class ConnectivitySignal:
    """Fan out connectivity changes to subscribers.

    Subscribers only see changes emitted after they subscribe.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._subscribers: list[ConnectivityCallback] = []

    def subscribe(self, callback: ConnectivityCallback) -> Callable[[], None]:
        """Register a callback.

        Returns:
            Callable removing the subscription; safe to call more than once
        """
        with self._lock:
            self._subscribers.append(callback)

        def unsubscribe() -> None:
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return unsubscribe

    def emit(self, has_connection: bool) -> None:
        with self._lock:
            subscribers = list(self._subscribers)
        for callback in subscribers:
            callback(has_connection)

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers)
