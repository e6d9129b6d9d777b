"""Content-hash duplicate suppression."""

from datetime import datetime, timedelta, UTC
from typing import Callable, Optional
import hashlib
import threading

import structlog

from paylog.database.base import DedupStore
from paylog.domain.entities import RawMessage

logger = structlog.get_logger()

EPOCH = datetime(1970, 1, 1, tzinfo=UTC)
DEFAULT_MAX_AGE = timedelta(days=90)


def epoch_millis(value: datetime) -> int:
    """Milliseconds since the Unix epoch. Naive datetimes are taken as UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return (value - EPOCH) // timedelta(milliseconds=1)


def message_hash(message: RawMessage) -> str:
    """SHA-256 hex digest over sender, content and receipt time."""
    payload = f"{message.sender}|{message.content}|{epoch_millis(message.received_at)}"
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


class DuplicateDetector:
    """Service remembering which messages were already processed.

    Check, reserve, mark and cleanup are serialized by one lock. A reservation
    claims a hash for a message that is still being processed so a second
    delivery of the same message is reported as a duplicate before the first
    one finishes.
    """

    def __init__(self, store: DedupStore, clock: Optional[Callable[[], datetime]] = None):
        """Initialize duplicate detector.

        Args:
            store: Durable hash store
            clock: Callable returning the current time (aware UTC)
        """
        self.store = store
        self._clock = clock or (lambda: datetime.now(UTC))
        self._lock = threading.Lock()
        self._in_flight: set[str] = set()

    def hash(self, message: RawMessage) -> str:
        return message_hash(message)

    def is_duplicate(self, message: RawMessage) -> bool:
        """Check if a message was processed or is being processed."""
        dedup_hash = message_hash(message)
        with self._lock:
            return dedup_hash in self._in_flight or self.store.contains(dedup_hash)

    def reserve(self, message: RawMessage) -> bool:
        """Claim a message for processing.

        Returns:
            False if the message is a duplicate, True if it is now reserved
        """
        dedup_hash = message_hash(message)
        with self._lock:
            if dedup_hash in self._in_flight or self.store.contains(dedup_hash):
                return False
            self._in_flight.add(dedup_hash)
            return True

    def release(self, message: RawMessage) -> None:
        """Drop a reservation without recording the message."""
        with self._lock:
            self._in_flight.discard(message_hash(message))

    def mark_processed(self, message: RawMessage) -> None:
        """Record a message as processed. Idempotent."""
        dedup_hash = message_hash(message)
        with self._lock:
            if not self.store.contains(dedup_hash):
                self.store.put(dedup_hash, self._clock())
            self._in_flight.discard(dedup_hash)

    def cleanup(self, max_age: timedelta = DEFAULT_MAX_AGE) -> int:
        """Evict hashes first seen more than ``max_age`` ago.

        Returns:
            Number of hashes removed
        """
        cutoff = self._clock() - max_age
        with self._lock:
            removed = self.store.delete_older_than(cutoff)
        logger.info("dedup_cleanup", removed=removed, cutoff=cutoff.isoformat())
        return removed

    def count(self) -> int:
        with self._lock:
            return self.store.count()

    def clear(self) -> None:
        with self._lock:
            self.store.clear()
            self._in_flight.clear()
