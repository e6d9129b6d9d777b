"""Abstract storage interfaces."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Iterator, Optional

# Import entities directly to avoid circular import through domain/__init__.py
from paylog.domain.entities import PersistedTransaction


class DedupStore(ABC):
    """Durable mapping of dedup hash to first-seen time."""

    @abstractmethod
    def contains(self, dedup_hash: str) -> bool:
        """Check if a hash has been recorded."""
        pass

    @abstractmethod
    def get(self, dedup_hash: str) -> Optional[datetime]:
        """Get when a hash was first seen, or None."""
        pass

    @abstractmethod
    def put(self, dedup_hash: str, first_seen_at: datetime) -> None:
        """Record a hash."""
        pass

    @abstractmethod
    def delete(self, dedup_hash: str) -> None:
        """Remove a hash."""
        pass

    @abstractmethod
    def delete_older_than(self, cutoff: datetime) -> int:
        """Remove hashes first seen before ``cutoff``. Returns count removed."""
        pass

    @abstractmethod
    def items(self) -> list[tuple[str, datetime]]:
        """List (hash, first_seen_at) pairs, oldest first."""
        pass

    @abstractmethod
    def count(self) -> int:
        """Number of recorded hashes."""
        pass

    @abstractmethod
    def clear(self) -> None:
        """Remove all hashes."""
        pass


class QueueStore(ABC):
    """Durable keyed table of transactions awaiting remote persistence."""

    @abstractmethod
    def put(self, transaction: PersistedTransaction) -> None:
        """Insert or replace a queued transaction keyed by its ID."""
        pass

    @abstractmethod
    def list_queued(self) -> list[PersistedTransaction]:
        """List queued transactions, oldest first."""
        pass

    @abstractmethod
    def remove(self, transaction_id: str) -> None:
        """Remove a transaction from the queue."""
        pass

    @abstractmethod
    def contains(self, transaction_id: str) -> bool:
        """Check if a transaction is queued."""
        pass

    @abstractmethod
    def count(self) -> int:
        """Number of queued transactions."""
        pass

    @abstractmethod
    def clear(self) -> None:
        """Remove all queued transactions."""
        pass


class RemoteStore(ABC):
    """Durable transaction store the pipeline persists to.

    ``save`` raises a ``paylog.domain.errors.RemoteStoreError`` subclass
    (``Unavailable``, ``AuthFailure``, ``QuotaExceeded``) on failure.
    """

    @abstractmethod
    def save(self, transaction: PersistedTransaction) -> str:
        """Save a transaction. Returns its ID."""
        pass

    @abstractmethod
    def query(self, owner_id: str) -> Iterator[PersistedTransaction]:
        """Lazily iterate an owner's transactions, newest first."""
        pass
