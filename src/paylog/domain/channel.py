"""Message hand-off between the ingestion side and the pipeline."""

import queue
from typing import Callable, Iterator, Optional

from paylog.domain.entities import RawMessage

_CLOSED = object()


class ChannelClosed(Exception):
    """Raised when publishing to a closed channel."""


class MessageChannel:
    """Thread-safe FIFO of raw messages.

    The ingestion collaborator publishes; the pipeline consumes. Closing the
    channel lets consumers finish the messages already published and stop.
    """

    def __init__(self, maxsize: int = 0):
        self._queue: queue.Queue = queue.Queue(maxsize=maxsize)
        self._closed = False

    def publish(self, message: RawMessage) -> None:
        if self._closed:
            raise ChannelClosed("Cannot publish to a closed channel")
        self._queue.put(message)

    def close(self) -> None:
        """Stop accepting messages and wake one waiting consumer."""
        if not self._closed:
            self._closed = True
            self._queue.put(_CLOSED)

    @property
    def closed(self) -> bool:
        return self._closed

    def pending(self) -> int:
        """Approximate number of undelivered messages."""
        size = self._queue.qsize()
        return max(size - 1, 0) if self._closed else size

    def consume(self, timeout: Optional[float] = None) -> Iterator[RawMessage]:
        """Yield messages in publish order until the channel is closed.

        Args:
            timeout: Stop after waiting this many seconds for a message
        """
        while True:
            try:
                item = self._queue.get(timeout=timeout)
            except queue.Empty:
                return
            if item is _CLOSED:
                # Leave the marker for any other consumer
                self._queue.put(_CLOSED)
                return
            yield item

    def __iter__(self) -> Iterator[RawMessage]:
        return self.consume()

    def drain(self, handler: Callable[[RawMessage], object]) -> int:
        """Hand every already published message to ``handler`` without blocking.

        Returns:
            Number of messages handled
        """
        handled = 0
        while True:
            try:
                item = self._queue.get_nowait()
            except queue.Empty:
                return handled
            if item is _CLOSED:
                self._queue.put(_CLOSED)
                return handled
            handler(item)
            handled += 1
