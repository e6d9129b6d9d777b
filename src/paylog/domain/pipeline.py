"""Message to persisted transaction pipeline."""

from collections import Counter
from datetime import datetime, UTC
from typing import Callable, Optional
import threading
import time
import uuid

import structlog

from paylog.database.base import RemoteStore
from paylog.domain import errors
from paylog.domain.channel import MessageChannel
from paylog.domain.duplicates import DuplicateDetector
from paylog.domain.entities import (
    PersistedTransaction,
    PipelineStatistics,
    ProcessOutcome,
    OutcomeStatus,
    RawMessage,
    RejectionReason,
)
from paylog.domain.errors import RemoteStoreError
from paylog.domain.parser import TransactionParser
from paylog.domain.sync_queue import OfflineSyncQueue
from paylog.domain.validator import TransactionValidator

logger = structlog.get_logger()

DEFAULT_SAVE_RETRIES = 3
DEFAULT_BACKOFF_BASE = 1.0


def _new_id() -> str:
    return str(uuid.uuid4())


class TransactionPipeline:
    """Service taking raw messages through parse, validate and persist.

    Flow for one message:
    1. reject blank content or sender
    2. financial-context gate
    3. claim the message in the duplicate detector
    4. parse, build the record, validate
    5. save to the remote store with retry, or hand it to the offline queue
    6. record the message as processed

    Every outcome is returned as a ProcessOutcome; unexpected failures are
    logged and counted, never raised.
    """

    def __init__(
        self,
        parser: TransactionParser,
        validator: TransactionValidator,
        duplicate_detector: DuplicateDetector,
        remote_store: RemoteStore,
        sync_queue: OfflineSyncQueue,
        owner_id: str,
        save_retries: int = DEFAULT_SAVE_RETRIES,
        backoff_base: float = DEFAULT_BACKOFF_BASE,
        sleep: Callable[[float], None] = time.sleep,
        id_factory: Callable[[], str] = _new_id,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """Initialize transaction pipeline.

        Args:
            parser: Message parser
            validator: Transaction validator
            duplicate_detector: Processed-message store
            remote_store: Primary transaction store
            sync_queue: Queue for transactions the remote store could not take
            owner_id: Owner stamped on every transaction
            save_retries: Total save attempts for retryable failures
            backoff_base: Seconds to wait before the second attempt, doubling after
            sleep: Callable used to wait between attempts
            id_factory: Callable producing transaction IDs
            clock: Callable returning the current time (aware UTC)
        """
        self.parser = parser
        self.validator = validator
        self.duplicate_detector = duplicate_detector
        self.remote_store = remote_store
        self.sync_queue = sync_queue
        self.owner_id = owner_id
        self.save_retries = max(save_retries, 1)
        self.backoff_base = backoff_base
        self._sleep = sleep
        self._id_factory = id_factory
        self._clock = clock or (lambda: datetime.now(UTC))
        self._stats: Counter = Counter()
        self._stats_lock = threading.Lock()

    def process_incoming(self, message: RawMessage) -> ProcessOutcome:
        """Process a message delivered by the ingestion collaborator."""
        return self._process(message, manual_entry=False)

    def manual_entry(
        self, text: str, sender: str, received_at: Optional[datetime] = None
    ) -> ProcessOutcome:
        """Process message text typed in by the user.

        Args:
            text: Message content
            sender: Message sender
            received_at: Receipt time (now if omitted)
        """
        message = RawMessage(
            sender=(sender or "").strip(),
            content=(text or "").strip(),
            received_at=received_at or self._clock(),
        )
        return self._process(message, manual_entry=True)

    def consume(self, channel: MessageChannel, timeout: Optional[float] = None) -> int:
        """Process messages from a channel until it is closed.

        Returns:
            Number of messages processed
        """
        processed = 0
        for message in channel.consume(timeout=timeout):
            self.process_incoming(message)
            processed += 1
        return processed

    def get_queue_size(self) -> int:
        return self.sync_queue.queue_size()

    def trigger_sync(self) -> int:
        """Sync the offline queue now. Returns the number of records synced."""
        return self.sync_queue.sync_now()

    def get_statistics(self) -> PipelineStatistics:
        with self._stats_lock:
            return PipelineStatistics(**self._stats)

    def _count(self, key: str) -> None:
        with self._stats_lock:
            self._stats[key] += 1

    def _process(self, message: RawMessage, manual_entry: bool) -> ProcessOutcome:
        self._count("total_received")

        invalid = self._invalid_field(message)
        if invalid is not None:
            reason = errors.invalid_message(invalid)
            logger.warning("message_rejected", reason=RejectionReason.INVALID_MESSAGE.value, detail=reason)
            return ProcessOutcome.rejected(RejectionReason.INVALID_MESSAGE, (reason,))

        reserved = False
        try:
            context = self.parser.detector.classify(message.content)
            if not context.is_financial:
                logger.info(
                    "message_rejected",
                    reason=RejectionReason.NOT_FINANCIAL.value,
                    sender=message.sender,
                    confidence=context.confidence,
                )
                return ProcessOutcome.rejected(
                    RejectionReason.NOT_FINANCIAL, (errors.not_financial(context.confidence),)
                )
            self._count("financial_messages")

            if not self.duplicate_detector.reserve(message):
                self._count("duplicates")
                logger.info("message_duplicate", sender=message.sender)
                return ProcessOutcome.duplicate()
            reserved = True

            parsed = self.parser.parse(message)
            if parsed is None:
                logger.warning(
                    "message_rejected",
                    reason=RejectionReason.EXTRACTION_FAILED.value,
                    sender=message.sender,
                    content=message.content,
                )
                self.duplicate_detector.release(message)
                reserved = False
                return ProcessOutcome.rejected(
                    RejectionReason.EXTRACTION_FAILED, (errors.amount_not_found(),)
                )
            self._count("parsed")

            transaction = PersistedTransaction.from_parsed(
                parsed,
                id=self._id_factory(),
                owner_id=self.owner_id,
                created_at=self._clock(),
                dedup_hash=self.duplicate_detector.hash(message),
                manual_entry=manual_entry,
            )

            validation = self.validator.validate(transaction)
            if not validation.valid:
                logger.warning(
                    "message_rejected",
                    reason=RejectionReason.VALIDATION_FAILED.value,
                    transaction_id=transaction.id,
                    errors=list(validation.errors),
                )
                self.duplicate_detector.release(message)
                reserved = False
                return ProcessOutcome(
                    status=OutcomeStatus.REJECTED,
                    reason=RejectionReason.VALIDATION_FAILED,
                    transaction=transaction,
                    errors=validation.errors,
                    warnings=validation.warnings,
                )
            self._count("validated")
            if validation.warnings:
                logger.info(
                    "transaction_warnings",
                    transaction_id=transaction.id,
                    warnings=list(validation.warnings),
                )

            saved = self._save_or_enqueue(transaction)
            self.duplicate_detector.mark_processed(message)
            reserved = False

            if saved:
                self._count("saved")
                transaction = transaction.mark_synced()
            else:
                self._count("queued")
            logger.info(
                "transaction_accepted",
                transaction_id=transaction.id,
                amount=str(transaction.amount),
                type=transaction.type.value,
                queued=not saved,
                manual_entry=manual_entry,
            )
            return ProcessOutcome(
                status=OutcomeStatus.ACCEPTED,
                transaction=transaction,
                warnings=validation.warnings,
                queued=not saved,
            )
        except Exception as e:
            self._count("errors")
            logger.exception("message_processing_failed", sender=message.sender, error=str(e))
            if reserved:
                self.duplicate_detector.release(message)
            return ProcessOutcome.rejected(RejectionReason.PROCESSING_ERROR, (str(e),))

    @staticmethod
    def _invalid_field(message: RawMessage) -> Optional[str]:
        if not message.content or not message.content.strip():
            return "content"
        if not message.sender or not message.sender.strip():
            return "sender"
        return None

    def _save_or_enqueue(self, transaction: PersistedTransaction) -> bool:
        """Save with retry; enqueue when the remote store keeps failing.

        Returns:
            True if the remote store confirmed the save, False if queued
        """
        attempt = 0
        while True:
            try:
                self.remote_store.save(transaction)
                return True
            except RemoteStoreError as e:
                attempt += 1
                if not e.retryable or attempt >= self.save_retries:
                    logger.warning(
                        "remote_save_failed",
                        transaction_id=transaction.id,
                        attempts=attempt,
                        error=str(e),
                        error_type=type(e).__name__,
                    )
                    self.sync_queue.enqueue(transaction)
                    return False
                delay = self.backoff_base * (2 ** (attempt - 1))
                logger.info(
                    "remote_save_retry",
                    transaction_id=transaction.id,
                    attempt=attempt,
                    delay=delay,
                    error_type=type(e).__name__,
                )
                self._sleep(delay)
