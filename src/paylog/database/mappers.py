"""Mapper functions to convert between domain models and SQLAlchemy models.

Datetimes are stored as naive UTC and handed back to the domain as aware UTC.
"""

from datetime import date, datetime, UTC
from decimal import Decimal
from typing import Optional

from paylog.domain import entities as domain
from paylog.database.models import TransactionColumns


def to_storage_datetime(value: Optional[datetime]) -> Optional[datetime]:
    """Convert a datetime to naive UTC for storage."""
    if value is None:
        return None
    if value.tzinfo is not None:
        value = value.astimezone(UTC)
    return value.replace(tzinfo=None)


def from_storage_datetime(value: Optional[datetime]) -> Optional[datetime]:
    """Convert a stored naive UTC datetime back to aware UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def transaction_to_domain(orm_transaction: TransactionColumns) -> domain.PersistedTransaction:
    """Convert a stored or queued transaction row to a domain entity."""
    return domain.PersistedTransaction(
        amount=Decimal(orm_transaction.amount),
        type=domain.parse_transaction_type(orm_transaction.transaction_type),
        account=orm_transaction.account,
        date=orm_transaction.date.isoformat(),
        time=orm_transaction.time,
        source_content=orm_transaction.source_content,
        source_sender=orm_transaction.source_sender,
        confidence=orm_transaction.confidence,
        id=orm_transaction.id,
        owner_id=orm_transaction.owner_id,
        created_at=from_storage_datetime(orm_transaction.created_at),
        synced=orm_transaction.synced,
        dedup_hash=orm_transaction.dedup_hash,
        manual_entry=orm_transaction.manual_entry,
    )


def transaction_to_columns(transaction: domain.PersistedTransaction) -> dict:
    """Convert a domain transaction to column values for either table."""
    return {
        "id": transaction.id,
        "owner_id": transaction.owner_id,
        "amount": transaction.amount,
        "transaction_type": transaction.type.value,
        "account": transaction.account,
        "date": date.fromisoformat(transaction.date),
        "time": transaction.time,
        "source_content": transaction.source_content,
        "source_sender": transaction.source_sender,
        "confidence": transaction.confidence,
        "created_at": to_storage_datetime(transaction.created_at or datetime.now(UTC)),
        "synced": transaction.synced,
        "dedup_hash": transaction.dedup_hash,
        "manual_entry": transaction.manual_entry,
    }
