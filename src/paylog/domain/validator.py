"""Transaction validation before persistence."""

from dataclasses import dataclass
from datetime import date, datetime, UTC
from decimal import Decimal
from typing import Callable, Optional
import re

from paylog.domain import errors
from paylog.domain.entities import PersistedTransaction, ValidationOutcome

_TIME_FORMAT = re.compile(r"^([01][0-9]|2[0-3]):([0-5][0-9]):([0-5][0-9])$")
_DIGIT_OR_MASK = re.compile(r"[0-9xX*]")


@dataclass(frozen=True)
class ValidatorConfig:
    """Bounds applied by TransactionValidator."""

    max_amount: Decimal = Decimal("10000000")
    retention_days: int = 90
    boundary_warning_days: int = 7
    low_confidence: float = 0.5


class TransactionValidator:
    """Service checking transactions against domain sanity bounds.

    Errors block persistence; warnings are informational only.
    """

    def __init__(
        self,
        config: Optional[ValidatorConfig] = None,
        today: Optional[Callable[[], date]] = None,
    ):
        """Initialize transaction validator.

        Args:
            config: Validation bounds (defaults if omitted)
            today: Callable returning the current date (UTC by default)
        """
        self.config = config or ValidatorConfig()
        self._today = today or (lambda: datetime.now(UTC).date())

    def validate(self, transaction: PersistedTransaction, today: Optional[date] = None) -> ValidationOutcome:
        """Validate a transaction.

        Args:
            transaction: Transaction to check
            today: Override for the reference date

        Returns:
            ValidationOutcome, valid iff no errors were found
        """
        today = today or self._today()
        errors_found: list[str] = []
        warnings: list[str] = []

        self._check_amount(transaction.amount, errors_found, warnings)
        self._check_date(transaction.date, today, errors_found, warnings)
        self._check_account(transaction.account, warnings)
        self._check_required_fields(transaction, errors_found)
        self._check_confidence(transaction.confidence, errors_found, warnings)

        return ValidationOutcome(
            valid=not errors_found,
            errors=tuple(errors_found),
            warnings=tuple(warnings),
        )

    def _check_amount(self, amount: Decimal, errors_found: list[str], warnings: list[str]) -> None:
        if amount <= 0:
            errors_found.append(errors.amount_not_positive(amount))
        if amount > self.config.max_amount:
            errors_found.append(errors.amount_above_ceiling(amount, self.config.max_amount))
        if 0 < amount < 1:
            warnings.append(errors.amount_below_one(amount))

    def _check_date(self, value: str, today: date, errors_found: list[str], warnings: list[str]) -> None:
        try:
            txn_date = date.fromisoformat(value)
        except (TypeError, ValueError):
            errors_found.append(errors.invalid_date(value))
            return

        if txn_date > today:
            errors_found.append(errors.date_in_future(value))
            return

        retention = self.config.retention_days
        days_ago = (today - txn_date).days
        if days_ago > retention:
            errors_found.append(errors.date_too_old(value, days_ago, retention))
        elif days_ago > retention - self.config.boundary_warning_days:
            warnings.append(errors.date_near_retention_limit(days_ago, retention))

    def _check_account(self, account: Optional[str], warnings: list[str]) -> None:
        # Account is optional; a present but odd-looking one only warns
        if not account:
            return
        if len(account) < 4:
            warnings.append(errors.account_too_short(account))
        if not _DIGIT_OR_MASK.search(account):
            warnings.append(errors.account_without_digits(account))

    def _check_required_fields(self, transaction: PersistedTransaction, errors_found: list[str]) -> None:
        required = (
            (transaction.id, "Transaction ID"),
            (transaction.owner_id, "Owner ID"),
            (transaction.source_content, "Message content"),
            (transaction.source_sender, "Message sender"),
        )
        for value, label in required:
            if not value or not value.strip():
                errors_found.append(errors.field_required(label))

        if not self.is_valid_time(transaction.time):
            errors_found.append(errors.invalid_time(transaction.time))

    def _check_confidence(self, confidence: float, errors_found: list[str], warnings: list[str]) -> None:
        if confidence < 0.0 or confidence > 1.0:
            errors_found.append(errors.confidence_out_of_range(confidence))
        elif confidence < self.config.low_confidence:
            warnings.append(errors.low_confidence(confidence))

    def is_valid_amount(self, amount: Decimal) -> bool:
        return 0 < amount <= self.config.max_amount

    def is_valid_date(self, value: str, today: Optional[date] = None) -> bool:
        today = today or self._today()
        try:
            txn_date = date.fromisoformat(value)
        except (TypeError, ValueError):
            return False
        return txn_date <= today and (today - txn_date).days <= self.config.retention_days

    def is_valid_account(self, account: Optional[str]) -> bool:
        if not account:
            return True
        return len(account) >= 4 and bool(_DIGIT_OR_MASK.search(account))

    @staticmethod
    def is_valid_time(value: Optional[str]) -> bool:
        return bool(value) and bool(_TIME_FORMAT.match(value))
