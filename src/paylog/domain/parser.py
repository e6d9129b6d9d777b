"""Message to transaction parsing service."""

from typing import Iterable, Optional

import structlog

from paylog.domain import errors
from paylog.domain.entities import (
    ParsedTransaction,
    ParsingStatistics,
    RawMessage,
    TransactionType,
)
from paylog.domain.financial_context import FinancialContextDetector
from paylog.utils import type_classifier
from paylog.utils.account_extractor import extract_account
from paylog.utils.amount_parser import find_primary_amount
from paylog.utils.date_parser import extract_date_time

logger = structlog.get_logger()

CONTEXT_WEIGHT = 0.4
CUED_AMOUNT_SCORE = 0.3
UNCUED_AMOUNT_SCORE = 0.2
TYPE_WEIGHT = 0.2
ACCOUNT_SCORE = 0.1


class TransactionParser:
    """Service turning raw messages into parsed transactions."""

    def __init__(self, detector: Optional[FinancialContextDetector] = None):
        """Initialize transaction parser.

        Args:
            detector: Financial context gate (a default detector if omitted)
        """
        self.detector = detector or FinancialContextDetector()

    def parse(self, message: RawMessage) -> Optional[ParsedTransaction]:
        """Parse a message into a transaction.

        Steps short-circuit on failure:
        1. financial-context gate
        2. amount extraction (the only required field)
        3. type classification (unknown is allowed)
        4. account extraction (optional)
        5. date and time extraction (falls back to receipt time)

        Args:
            message: Raw message

        Returns:
            Parsed transaction, or None if the message is not a transaction
        """
        context = self.detector.classify(message.content)
        if not context.is_financial:
            self._log_rejection(message, errors.not_financial(context.confidence))
            return None

        amount = find_primary_amount(message.content)
        if amount is None:
            self._log_rejection(message, errors.amount_not_found(), content=message.content)
            return None

        transaction_type = type_classifier.classify(message.content)
        account = extract_account(message.content)
        txn_date, txn_time = extract_date_time(message.content, message.received_at)

        score = CONTEXT_WEIGHT * context.confidence
        score += CUED_AMOUNT_SCORE if amount.cued else UNCUED_AMOUNT_SCORE
        if transaction_type is not TransactionType.UNKNOWN:
            score += TYPE_WEIGHT * type_classifier.confidence(message.content, transaction_type)
        if account:
            score += ACCOUNT_SCORE

        return ParsedTransaction(
            amount=amount.value,
            type=transaction_type,
            account=account,
            date=txn_date,
            time=txn_time,
            source_content=message.content,
            source_sender=message.sender,
            confidence=round(min(max(score, 0.0), 1.0), 4),
        )

    def _log_rejection(self, message: RawMessage, reason: str, **extra) -> None:
        logger.info(
            "message_unparseable",
            sender=message.sender,
            received_at=message.received_at.isoformat(),
            reason=reason,
            **extra,
        )

    def can_parse(self, message: RawMessage) -> bool:
        """Cheap check: financial and carries an amount."""
        if not self.detector.is_financial(message.content):
            return False
        return find_primary_amount(message.content) is not None

    def parse_all(self, messages: Iterable[RawMessage]) -> list[ParsedTransaction]:
        """Parse a batch, silently dropping messages that do not parse."""
        parsed = []
        for message in messages:
            transaction = self.parse(message)
            if transaction is not None:
                parsed.append(transaction)
        return parsed

    def parsing_statistics(self, messages: Iterable[RawMessage]) -> ParsingStatistics:
        """Count parsed, failed and non-financial messages in a batch."""
        total = parsed = failed = not_financial = 0
        for message in messages:
            total += 1
            if not self.detector.is_financial(message.content):
                not_financial += 1
                continue
            if self.parse(message) is not None:
                parsed += 1
            else:
                failed += 1
        return ParsingStatistics(
            total=total, parsed=parsed, failed=failed, not_financial=not_financial
        )
