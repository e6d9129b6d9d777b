"""Domain layer for paylog application."""

from paylog.domain.entities import (
    RawMessage,
    ParsedTransaction,
    PersistedTransaction,
    TransactionType,
    ValidationOutcome,
    ProcessOutcome,
)

__all__ = [
    "RawMessage",
    "ParsedTransaction",
    "PersistedTransaction",
    "TransactionType",
    "ValidationOutcome",
    "ProcessOutcome",
]
