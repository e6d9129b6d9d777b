"""Tests for the transaction pipeline."""

import threading
from decimal import Decimal

from paylog.domain.channel import MessageChannel
from paylog.domain.entities import OutcomeStatus, RejectionReason, TransactionType
from paylog.domain.errors import AuthFailure, QuotaExceeded, Unavailable
from paylog.domain.parser import TransactionParser

BANK_MESSAGE = "Your a/c XXXX2323 debited with Rs.1,500.00 on 15-Dec-2024"


class ExplodingParser(TransactionParser):
    """Parser failing after the context gate."""

    def parse(self, message):
        raise RuntimeError("boom")


def test_accepts_bank_message(pipeline, remote_store, make_message):
    """Test a bank message is parsed, validated and saved."""
    outcome = pipeline.process_incoming(make_message(BANK_MESSAGE))

    assert outcome.status == OutcomeStatus.ACCEPTED
    assert outcome.accepted
    assert not outcome.queued
    transaction = outcome.transaction
    assert transaction.amount == Decimal("1500.00")
    assert transaction.type == TransactionType.DEBIT
    assert transaction.account == "XXXX2323"
    assert transaction.date == "2024-12-15"
    assert transaction.owner_id == "user-1"
    assert transaction.id == "txn-1"
    assert transaction.synced
    assert not transaction.manual_entry
    assert len(transaction.dedup_hash) == 64
    assert "txn-1" in remote_store.saved


def test_rejects_casual_message(pipeline, remote_store, make_message):
    """Test a chat message is rejected as not financial."""
    outcome = pipeline.process_incoming(make_message("Hey, dinner at 8?"))

    assert outcome.status == OutcomeStatus.REJECTED
    assert outcome.reason == RejectionReason.NOT_FINANCIAL
    assert remote_store.save_calls == 0
    assert pipeline.get_statistics().financial_messages == 0


def test_same_message_twice_is_duplicate(pipeline, remote_store, make_message):
    """Test redelivery of an identical message."""
    message = make_message(BANK_MESSAGE)

    first = pipeline.process_incoming(message)
    second = pipeline.process_incoming(message)

    assert first.status == OutcomeStatus.ACCEPTED
    assert second.status == OutcomeStatus.DUPLICATE
    assert remote_store.save_calls == 1
    assert pipeline.get_statistics().duplicates == 1


def test_worded_amount_without_date(pipeline, make_message, clock):
    """Test a worded amount uses the receipt date."""
    outcome = pipeline.process_incoming(make_message("Rs. One Thousand credited"))

    assert outcome.accepted
    assert outcome.transaction.amount == Decimal("1000")
    assert outcome.transaction.type == TransactionType.CREDIT
    assert outcome.transaction.date == clock().date().isoformat()


def test_outage_queues_then_syncs(pipeline, remote_store, make_message, sleeps):
    """Test three failed saves queue the record and a later sync delivers it."""
    remote_store.online = False

    outcome = pipeline.process_incoming(make_message(BANK_MESSAGE))

    assert outcome.accepted
    assert outcome.queued
    assert not outcome.transaction.synced
    assert remote_store.save_calls == 3
    assert sleeps == [1.0, 2.0]
    assert pipeline.get_queue_size() == 1

    remote_store.online = True
    assert pipeline.trigger_sync() == 1
    assert pipeline.get_queue_size() == 0
    assert outcome.transaction.id in remote_store.saved


def test_outage_recovered_by_connectivity(pipeline, remote_store, connectivity, make_message):
    """Test the queue drains when connectivity returns."""
    pipeline.sync_queue.start_monitoring()
    remote_store.online = False
    pipeline.process_incoming(make_message(BANK_MESSAGE))
    assert pipeline.get_queue_size() == 1

    remote_store.online = True
    connectivity.emit(True)
    assert pipeline.get_queue_size() == 0


def test_retry_succeeds_before_exhaustion(pipeline, remote_store, make_message, sleeps):
    """Test a transient failure is retried and the save succeeds."""
    remote_store.failures = [QuotaExceeded("slow down")]

    outcome = pipeline.process_incoming(make_message(BANK_MESSAGE))

    assert outcome.accepted
    assert not outcome.queued
    assert remote_store.save_calls == 2
    assert sleeps == [1.0]


def test_non_retryable_failure_queues_immediately(pipeline, remote_store, make_message, sleeps):
    """Test auth failures skip the retries."""
    remote_store.failures = [AuthFailure("bad token")]

    outcome = pipeline.process_incoming(make_message(BANK_MESSAGE))

    assert outcome.accepted
    assert outcome.queued
    assert remote_store.save_calls == 1
    assert sleeps == []


def test_queued_message_is_not_reprocessed(pipeline, remote_store, make_message):
    """Test a queued message still counts as processed."""
    remote_store.failures = [Unavailable("down")] * 3
    message = make_message(BANK_MESSAGE)

    pipeline.process_incoming(message)
    assert pipeline.process_incoming(message).status == OutcomeStatus.DUPLICATE


def test_extraction_failure(pipeline, make_message):
    """Test financial messages without an amount."""
    outcome = pipeline.process_incoming(make_message("Your account has been debited"))

    assert outcome.status == OutcomeStatus.REJECTED
    assert outcome.reason == RejectionReason.EXTRACTION_FAILED
    assert pipeline.get_statistics().financial_messages == 1
    assert pipeline.get_statistics().parsed == 0


def test_validation_failure_is_not_marked_processed(pipeline, duplicate_detector, make_message):
    """Test invalid transactions are rejected and may be processed again."""
    message = make_message("Rs.500 debited from A/c XX1234 on 01-01-2020")

    outcome = pipeline.process_incoming(message)

    assert outcome.reason == RejectionReason.VALIDATION_FAILED
    assert any("more than 90 days" in e for e in outcome.errors)
    assert outcome.transaction is not None
    assert not duplicate_detector.is_duplicate(message)


def test_invalid_message(pipeline, make_message):
    """Test blank content or sender."""
    assert pipeline.process_incoming(make_message("   ")).reason == RejectionReason.INVALID_MESSAGE
    assert pipeline.process_incoming(make_message(BANK_MESSAGE, sender="")).reason == RejectionReason.INVALID_MESSAGE


def test_processing_error_is_contained(pipeline, duplicate_detector, make_message):
    """Test unexpected failures are counted, logged and never raised."""
    pipeline.parser = ExplodingParser()
    message = make_message(BANK_MESSAGE)

    outcome = pipeline.process_incoming(message)

    assert outcome.reason == RejectionReason.PROCESSING_ERROR
    assert "boom" in outcome.errors[0]
    assert pipeline.get_statistics().errors == 1
    assert not duplicate_detector.is_duplicate(message)


def test_manual_entry(pipeline, clock):
    """Test manually entered text is trimmed and flagged."""
    outcome = pipeline.manual_entry("  Rs.250 paid to Swiggy via UPI  ", " BANK ")

    assert outcome.accepted
    transaction = outcome.transaction
    assert transaction.manual_entry
    assert transaction.source_content == "Rs.250 paid to Swiggy via UPI"
    assert transaction.source_sender == "BANK"
    assert transaction.amount == Decimal("250")
    assert transaction.date == clock().date().isoformat()


def test_manual_entry_rejects_blank(pipeline):
    """Test blank manual entries."""
    assert pipeline.manual_entry("", "BANK").reason == RejectionReason.INVALID_MESSAGE


def test_statistics(pipeline, remote_store, make_message):
    """Test counters across a mixed batch."""
    pipeline.process_incoming(make_message(BANK_MESSAGE))
    pipeline.process_incoming(make_message(BANK_MESSAGE))
    pipeline.process_incoming(make_message("Hey, dinner at 8?"))
    remote_store.online = False
    pipeline.process_incoming(make_message("INR 250 credited to a/c XX9876"))

    assert pipeline.get_statistics().as_dict() == {
        "total_received": 4,
        "financial_messages": 3,
        "parsed": 2,
        "validated": 2,
        "saved": 1,
        "queued": 1,
        "duplicates": 1,
        "errors": 0,
    }


def test_concurrent_delivery_of_same_message(pipeline, remote_store, make_message):
    """Test concurrent deliveries produce one transaction."""
    message = make_message(BANK_MESSAGE)
    barrier = threading.Barrier(6)
    statuses = []
    lock = threading.Lock()

    def deliver():
        barrier.wait()
        outcome = pipeline.process_incoming(message)
        with lock:
            statuses.append(outcome.status)

    threads = [threading.Thread(target=deliver) for _ in range(6)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert statuses.count(OutcomeStatus.ACCEPTED) == 1
    assert statuses.count(OutcomeStatus.DUPLICATE) == 5
    assert len(remote_store.saved) == 1


def test_consume_channel(pipeline, make_message):
    """Test messages published to a channel are processed in order."""
    channel = MessageChannel()
    channel.publish(make_message(BANK_MESSAGE))
    channel.publish(make_message("INR 250 credited to a/c XX9876"))
    channel.close()

    assert pipeline.consume(channel) == 2
    assert pipeline.get_statistics().saved == 2
