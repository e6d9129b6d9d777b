"""SQLAlchemy models for paylog database."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    String,
    DateTime,
    Date,
    Numeric,
    Float,
    Boolean,
    Index,
    create_engine,
)
from sqlalchemy.orm import declarative_base, sessionmaker, Session

Base = declarative_base()


class TransactionColumns:
    """Columns shared by stored and queued transactions."""

    id = Column(String, primary_key=True)
    owner_id = Column(String, nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    transaction_type = Column(String, nullable=False)
    account = Column(String, nullable=True)
    date = Column(Date, nullable=False)
    time = Column(String(8), nullable=False)
    source_content = Column(String, nullable=False)
    source_sender = Column(String, nullable=False)
    confidence = Column(Float, nullable=False)
    created_at = Column(DateTime, nullable=False)
    synced = Column(Boolean, default=False, nullable=False)
    dedup_hash = Column(String(64), nullable=False)
    manual_entry = Column(Boolean, default=False, nullable=False)


class Transaction(TransactionColumns, Base):
    """Persisted transaction model."""

    __tablename__ = "transactions"

    __table_args__ = (Index("ix_transactions_owner_created", "owner_id", "created_at"),)


class QueuedTransaction(TransactionColumns, Base):
    """Transaction waiting for a confirmed remote save."""

    __tablename__ = "queued_transactions"

    enqueued_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)


class DedupRecord(Base):
    """Hash of an already processed message."""

    __tablename__ = "dedup_records"

    dedup_hash = Column(String(64), primary_key=True)
    first_seen_at = Column(DateTime, nullable=False, index=True)


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    connect_args = {}
    if database_url.startswith("sqlite"):
        # Stores are shared between the pipeline and the sync loop
        connect_args["check_same_thread"] = False
    engine = create_engine(database_url, echo=False, connect_args=connect_args)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine, expire_on_commit=False)
