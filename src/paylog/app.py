"""Wiring of the pipeline from settings and a database."""

from typing import Optional

from paylog.config import Settings
from paylog.database.sqlalchemy_db import SQLAlchemyDatabase
from paylog.domain.connectivity import ConnectivitySignal
from paylog.domain.duplicates import DuplicateDetector
from paylog.domain.parser import TransactionParser
from paylog.domain.pipeline import TransactionPipeline
from paylog.domain.sync_queue import OfflineSyncQueue
from paylog.domain.validator import TransactionValidator, ValidatorConfig


def create_pipeline(
    db: SQLAlchemyDatabase,
    settings: Settings,
    connectivity: Optional[ConnectivitySignal] = None,
) -> TransactionPipeline:
    """Build a pipeline over the database's stores.

    Args:
        db: Database providing the dedup, queue and transaction stores
        settings: Runtime settings
        connectivity: Optional signal driving automatic queue sync

    Returns:
        Ready to use TransactionPipeline
    """
    validator = TransactionValidator(
        ValidatorConfig(max_amount=settings.max_amount, retention_days=settings.retention_days)
    )
    sync_queue = OfflineSyncQueue(db.queue_store, db.transaction_store, connectivity)
    return TransactionPipeline(
        parser=TransactionParser(),
        validator=validator,
        duplicate_detector=DuplicateDetector(db.dedup_store),
        remote_store=db.transaction_store,
        sync_queue=sync_queue,
        owner_id=settings.owner_id,
        save_retries=settings.save_retries,
        backoff_base=settings.backoff_base,
    )
