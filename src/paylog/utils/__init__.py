"""Text extraction utilities for paylog."""

from paylog.utils.amount_parser import extract_amount, parse_amount
from paylog.utils.account_extractor import extract_account
from paylog.utils.date_parser import extract_date_time, parse_timestamp

__all__ = [
    "extract_amount",
    "parse_amount",
    "extract_account",
    "extract_date_time",
    "parse_timestamp",
]
