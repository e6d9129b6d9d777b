"""Shared domain error messages and error types."""

from decimal import Decimal


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class RemoteStoreError(Exception):
    """Base class for failures reported by the remote transaction store.

    ``retryable`` tells the save caller whether another attempt can succeed.
    """

    retryable = False


class Unavailable(RemoteStoreError):
    """Remote store could not be reached."""

    retryable = True


class AuthFailure(RemoteStoreError):
    """Remote store rejected the caller's credentials."""


class QuotaExceeded(RemoteStoreError):
    """Remote store is throttling writes."""

    retryable = True


def not_financial(confidence: float) -> str:
    """Return reason for a message without financial context."""
    return f"Not a financial message (confidence {confidence:.2f})"


def amount_not_found() -> str:
    """Return reason for a financial message without an extractable amount."""
    return "Failed to extract transaction amount"


def invalid_message(field: str) -> str:
    """Return reason for a message missing content or sender."""
    return f"Message {field} is empty"


def amount_not_positive(amount: Decimal) -> str:
    """Return message for a zero or negative amount."""
    return f"Amount must be positive (got: {amount})"


def amount_above_ceiling(amount: Decimal, ceiling: Decimal) -> str:
    """Return message for an amount above the configured ceiling."""
    return f"Amount exceeds maximum threshold of {ceiling} (got: {amount})"


def amount_below_one(amount: Decimal) -> str:
    """Return warning for fractional amounts."""
    return f"Amount is less than 1 (got: {amount})"


def invalid_date(value: str) -> str:
    """Return message for a malformed transaction date."""
    return f"Invalid date format (expected YYYY-MM-DD, got: {value})"


def date_in_future(value: str) -> str:
    """Return message for a transaction dated after today."""
    return f"Transaction date cannot be in the future (got: {value})"


def date_too_old(value: str, days_ago: int, retention_days: int) -> str:
    """Return message for a transaction older than the retention window."""
    return (
        f"Transaction date is more than {retention_days} days in the past "
        f"(got: {value}, {days_ago} days ago)"
    )


def date_near_retention_limit(days_ago: int, retention_days: int) -> str:
    """Return warning for a date close to the retention boundary."""
    return f"Transaction date is close to the {retention_days} day limit ({days_ago} days ago)"


def account_too_short(account: str) -> str:
    """Return warning for a suspiciously short account identifier."""
    return f"Account number seems too short (got: {account})"


def account_without_digits(account: str) -> str:
    """Return warning for an account identifier with no digits or mask characters."""
    return f"Account number does not contain expected digits or mask characters (got: {account})"


def field_required(label: str) -> str:
    """Return message for a missing required field."""
    return f"{label} is required"


def invalid_time(value: str) -> str:
    """Return message for a malformed time of day."""
    return f"Invalid time format (expected HH:MM:SS, got: {value})"


def confidence_out_of_range(confidence: float) -> str:
    """Return message for a confidence score outside [0, 1]."""
    return f"Confidence score must be between 0.0 and 1.0 (got: {confidence})"


def low_confidence(confidence: float) -> str:
    """Return warning for a low confidence score."""
    return f"Low confidence score: {confidence}"
