"""Durable offline queue and its connectivity-driven sync loop."""

import threading
from typing import Callable, Optional

import structlog

from paylog.database.base import QueueStore, RemoteStore
from paylog.domain.connectivity import ConnectivitySignal
from paylog.domain.entities import PersistedTransaction
from paylog.domain.errors import RemoteStoreError

logger = structlog.get_logger()


class OfflineSyncQueue:
    """Service holding transactions until the remote store confirms them.

    A record leaves the queue only after a successful remote save. Sync runs
    coalesce: a sync requested while one is running returns immediately.
    """

    def __init__(
        self,
        queue_store: QueueStore,
        remote_store: RemoteStore,
        connectivity: Optional[ConnectivitySignal] = None,
    ):
        """Initialize offline sync queue.

        Args:
            queue_store: Durable queue table
            remote_store: Store receiving synced transactions
            connectivity: Signal that triggers a sync when connection returns
        """
        self.queue_store = queue_store
        self.remote_store = remote_store
        self.connectivity = connectivity
        self._sync_lock = threading.Lock()
        self._state_lock = threading.Lock()
        self._unsubscribe: Optional[Callable[[], None]] = None

    def enqueue(self, transaction: PersistedTransaction) -> None:
        """Add or replace a transaction in the queue."""
        self.queue_store.put(transaction)
        logger.info("transaction_queued", transaction_id=transaction.id, queue_size=self.queue_size())

    def queue_size(self) -> int:
        return self.queue_store.count()

    @property
    def is_syncing(self) -> bool:
        return self._sync_lock.locked()

    @property
    def is_monitoring(self) -> bool:
        with self._state_lock:
            return self._unsubscribe is not None

    def sync_now(self) -> int:
        """Push every queued transaction to the remote store.

        Failed records stay queued and the batch continues, whatever the
        remote store raised. Returns 0 without
        touching the queue when another sync is already running.

        Returns:
            Number of transactions synced by this run
        """
        if not self._sync_lock.acquire(blocking=False):
            logger.debug("sync_skipped", reason="already_syncing")
            return 0

        try:
            pending = self.queue_store.list_queued()
            if not pending:
                return 0

            logger.info("sync_started", pending=len(pending))
            synced = 0
            failed = 0
            for transaction in pending:
                try:
                    self.remote_store.save(transaction)
                except RemoteStoreError as e:
                    failed += 1
                    logger.warning(
                        "sync_record_failed",
                        transaction_id=transaction.id,
                        error=str(e),
                        error_type=type(e).__name__,
                    )
                    continue
                except Exception:
                    failed += 1
                    logger.exception("sync_record_failed", transaction_id=transaction.id)
                    continue
                self.queue_store.remove(transaction.id)
                synced += 1

            logger.info("sync_finished", synced=synced, failed=failed, remaining=self.queue_size())
            return synced
        finally:
            self._sync_lock.release()

    def start_monitoring(self) -> None:
        """Sync whenever the connectivity signal reports a connection."""
        if self.connectivity is None:
            raise ValueError("No connectivity signal configured")
        with self._state_lock:
            if self._unsubscribe is not None:
                return
            self._unsubscribe = self.connectivity.subscribe(self._on_connectivity_changed)
        logger.info("sync_monitoring_started")

    def stop_monitoring(self) -> None:
        """Unsubscribe from connectivity changes. A running sync is not interrupted."""
        with self._state_lock:
            unsubscribe, self._unsubscribe = self._unsubscribe, None
        if unsubscribe is not None:
            unsubscribe()
            logger.info("sync_monitoring_stopped")

    def _on_connectivity_changed(self, has_connection: bool) -> None:
        logger.debug("connectivity_changed", has_connection=has_connection)
        if not has_connection:
            return
        try:
            self.sync_now()
        except Exception:
            # Failures stay out of ConnectivitySignal.emit; records remain queued
            logger.exception("sync_failed", trigger="connectivity")
