"""Shared pytest fixtures for paylog tests."""

import itertools
import tempfile
import os
from datetime import date, datetime, timedelta, UTC

import pytest

from paylog.database.base import RemoteStore
from paylog.database.factories import create_sqlite_database
from paylog.domain.connectivity import ConnectivitySignal
from paylog.domain.duplicates import DuplicateDetector
from paylog.domain.entities import RawMessage
from paylog.domain.errors import Unavailable
from paylog.domain.parser import TransactionParser
from paylog.domain.pipeline import TransactionPipeline
from paylog.domain.sync_queue import OfflineSyncQueue
from paylog.domain.validator import TransactionValidator

FIXED_NOW = datetime(2024, 12, 20, 10, 0, 0, tzinfo=UTC)


class FakeClock:
    """Settable clock returning aware UTC datetimes."""

    def __init__(self, now: datetime = FIXED_NOW):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now = self.now + delta


class FakeRemoteStore(RemoteStore):
    """In-memory remote store with scriptable failures.

    ``failures`` are raised one per save call before anything else; when it
    is empty, ``online`` decides between success and ``Unavailable``.
    """

    def __init__(self):
        self.saved = {}
        self.online = True
        self.failures = []
        self.save_calls = 0
        self.before_save = None

    def save(self, transaction):
        self.save_calls += 1
        if self.before_save is not None:
            self.before_save(transaction)
        if self.failures:
            raise self.failures.pop(0)
        if not self.online:
            raise Unavailable("remote store offline")
        self.saved[transaction.id] = transaction.mark_synced()
        return transaction.id

    def query(self, owner_id):
        ordered = sorted(self.saved.values(), key=lambda t: t.created_at, reverse=True)
        for transaction in ordered:
            if transaction.owner_id == owner_id:
                yield transaction


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def clock():
    """A clock frozen at 2024-12-20 10:00 UTC."""
    return FakeClock()


@pytest.fixture
def remote_store():
    """Create an in-memory remote store."""
    return FakeRemoteStore()


@pytest.fixture
def connectivity():
    """Create a connectivity signal."""
    return ConnectivitySignal()


@pytest.fixture
def duplicate_detector(temp_db, clock):
    """Create a DuplicateDetector over the temporary database."""
    return DuplicateDetector(temp_db.dedup_store, clock=clock)


@pytest.fixture
def sync_queue(temp_db, remote_store, connectivity):
    """Create an OfflineSyncQueue over the temporary database."""
    return OfflineSyncQueue(temp_db.queue_store, remote_store, connectivity)


@pytest.fixture
def sleeps():
    """Record of backoff delays requested by the pipeline."""
    return []


@pytest.fixture
def pipeline(duplicate_detector, remote_store, sync_queue, clock, sleeps):
    """Create a TransactionPipeline with deterministic time and IDs."""
    counter = itertools.count(1)
    return TransactionPipeline(
        parser=TransactionParser(),
        validator=TransactionValidator(today=lambda: date(2024, 12, 20)),
        duplicate_detector=duplicate_detector,
        remote_store=remote_store,
        sync_queue=sync_queue,
        owner_id="user-1",
        sleep=sleeps.append,
        id_factory=lambda: f"txn-{next(counter)}",
        clock=clock,
    )


@pytest.fixture
def make_message():
    """Factory for raw messages received at the fixed test time."""

    def _make(content: str, sender: str = "VM-HDFCBK", received_at: datetime = FIXED_NOW) -> RawMessage:
        return RawMessage(sender=sender, content=content, received_at=received_at)

    return _make


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
