"""Domain model entities for paylog.

These are pure data classes describing messages and the transactions derived
from them, independent of how they are stored. Persistence layers convert to
and from these through mapper functions.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional


class TransactionType(str, Enum):
    """Direction of money movement."""

    DEBIT = "debit"
    CREDIT = "credit"
    UNKNOWN = "unknown"


def parse_transaction_type(value: Optional[str]) -> TransactionType:
    """Map a stored string back to a TransactionType, defaulting to unknown."""
    if value is None:
        return TransactionType.UNKNOWN
    try:
        return TransactionType(value.strip().lower())
    except ValueError:
        return TransactionType.UNKNOWN


def signed_amount(amount: Decimal, transaction_type: TransactionType) -> Decimal:
    """Return the amount negated for debits, as used for running balances."""
    if transaction_type is TransactionType.DEBIT:
        return -amount
    return amount


@dataclass(frozen=True)
class RawMessage:
    """A message as delivered by the ingestion collaborator."""

    sender: str
    content: str
    received_at: datetime


@dataclass(frozen=True)
class ParsedTransaction:
    """Transaction fields extracted from a single message."""

    amount: Decimal
    type: TransactionType
    account: Optional[str]
    date: str
    time: str
    source_content: str
    source_sender: str
    confidence: float


@dataclass(frozen=True)
class PersistedTransaction(ParsedTransaction):
    """A parsed transaction with ownership and storage metadata."""

    id: str = ""
    owner_id: str = ""
    created_at: Optional[datetime] = None
    synced: bool = False
    dedup_hash: str = ""
    manual_entry: bool = False

    @classmethod
    def from_parsed(
        cls,
        parsed: ParsedTransaction,
        id: str,
        owner_id: str,
        created_at: datetime,
        dedup_hash: str,
        manual_entry: bool = False,
    ) -> "PersistedTransaction":
        """Attach storage metadata to a parsed transaction."""
        return cls(
            amount=parsed.amount,
            type=parsed.type,
            account=parsed.account,
            date=parsed.date,
            time=parsed.time,
            source_content=parsed.source_content,
            source_sender=parsed.source_sender,
            confidence=parsed.confidence,
            id=id,
            owner_id=owner_id,
            created_at=created_at,
            synced=False,
            dedup_hash=dedup_hash,
            manual_entry=manual_entry,
        )

    def mark_synced(self) -> "PersistedTransaction":
        """Return a copy flagged as confirmed by the remote store."""
        return replace(self, synced=True)


@dataclass(frozen=True)
class ValidationOutcome:
    """Result of validating a transaction before persistence."""

    valid: bool
    errors: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()


class OutcomeStatus(str, Enum):
    """Result category of pushing one message through the pipeline."""

    ACCEPTED = "accepted"
    REJECTED = "rejected"
    DUPLICATE = "duplicate"


class RejectionReason(str, Enum):
    """Why a message did not produce a persisted transaction."""

    NOT_FINANCIAL = "not_financial"
    EXTRACTION_FAILED = "extraction_failed"
    VALIDATION_FAILED = "validation_failed"
    INVALID_MESSAGE = "invalid_message"
    PROCESSING_ERROR = "processing_error"


@dataclass(frozen=True)
class ProcessOutcome:
    """Outcome of processing one incoming or manually entered message."""

    status: OutcomeStatus
    reason: Optional[RejectionReason] = None
    transaction: Optional[PersistedTransaction] = None
    errors: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()
    queued: bool = False

    @property
    def accepted(self) -> bool:
        return self.status is OutcomeStatus.ACCEPTED

    @classmethod
    def rejected(cls, reason: RejectionReason, errors: tuple[str, ...] = ()) -> "ProcessOutcome":
        return cls(status=OutcomeStatus.REJECTED, reason=reason, errors=errors)

    @classmethod
    def duplicate(cls) -> "ProcessOutcome":
        return cls(status=OutcomeStatus.DUPLICATE)


@dataclass(frozen=True)
class ParsingStatistics:
    """Counts produced by parsing a batch of messages."""

    total: int
    parsed: int
    failed: int
    not_financial: int

    @property
    def success_rate(self) -> str:
        """Percentage of messages that parsed, formatted to two decimals."""
        if self.total == 0:
            return "0.00%"
        return f"{self.parsed / self.total * 100:.2f}%"


@dataclass(frozen=True)
class PipelineStatistics:
    """Running counters kept by the transaction pipeline."""

    total_received: int = 0
    financial_messages: int = 0
    parsed: int = 0
    validated: int = 0
    saved: int = 0
    queued: int = 0
    duplicates: int = 0
    errors: int = 0

    def as_dict(self) -> dict[str, int]:
        return {
            "total_received": self.total_received,
            "financial_messages": self.financial_messages,
            "parsed": self.parsed,
            "validated": self.validated,
            "saved": self.saved,
            "queued": self.queued,
            "duplicates": self.duplicates,
            "errors": self.errors,
        }


@dataclass(frozen=True)
class FinancialContext:
    """Result of the financial-context gate."""

    is_financial: bool
    confidence: float
    matched_keywords: frozenset[str] = field(default_factory=frozenset)
