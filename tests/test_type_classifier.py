"""Tests for debit/credit classification."""

import pytest

from paylog.domain.entities import TransactionType
from paylog.utils import type_classifier


def test_debit():
    """Test debit keywords."""
    assert type_classifier.classify("Rs.500 debited from your account") == TransactionType.DEBIT
    assert type_classifier.classify("You paid Rs.250 to Swiggy") == TransactionType.DEBIT


def test_credit():
    """Test credit keywords."""
    assert type_classifier.classify("Rs.500 credited to your account") == TransactionType.CREDIT
    assert type_classifier.classify("Refund of Rs.99 processed") == TransactionType.CREDIT


def test_unknown():
    """Test messages without direction keywords."""
    assert type_classifier.classify("Your balance is Rs.500") == TransactionType.UNKNOWN
    assert type_classifier.classify("") == TransactionType.UNKNOWN


def test_keywords_match_whole_words():
    """Test that 'debit' does not match inside 'debited' twice over."""
    assert type_classifier.matched_keywords("Rs.500 debited") == ["debited"]


def test_ambiguous_resolved_by_score():
    """Test that the side mentioned early in the message outscores the other."""
    text = "Rs.500 debited from A/c XX1234 and credited to A/c XX5678"
    assert type_classifier.classify(text) == TransactionType.DEBIT


def test_ambiguous_tie_resolved_by_position():
    """Test that on equal scores the first mentioned side wins."""
    assert type_classifier.classify("paid refund at the store counter today") == TransactionType.DEBIT
    assert type_classifier.classify("refund paid at the store counter today") == TransactionType.CREDIT


@pytest.mark.parametrize(
    "text,expected",
    [
        ("Rs.500 debited", 0.7),
        ("Rs.500 debited and charged", 0.85),
        ("You paid Rs.500, debited and charged", 0.95),
    ],
)
def test_confidence_by_keyword_count(text, expected):
    """Test confidence steps with the number of matching keywords."""
    assert type_classifier.confidence(text, TransactionType.DEBIT) == expected


def test_confidence_unknown_is_zero():
    """Test unknown classification has zero confidence."""
    assert type_classifier.confidence("Rs.500 debited", TransactionType.UNKNOWN) == 0.0
    assert type_classifier.confidence("Rs.500 debited", TransactionType.CREDIT) == 0.0


def test_has_type_keywords():
    """Test keyword presence check."""
    assert type_classifier.has_type_keywords("Amount received")
    assert not type_classifier.has_type_keywords("Your OTP is 1234")


def test_classification_is_idempotent():
    """Test repeated classification of the same text agrees."""
    text = "INR 1,200 spent on card XX9012; cashback credited"
    assert type_classifier.classify(text) == type_classifier.classify(text)
