"""Tests for the financial context gate."""

import pytest

from paylog.domain.financial_context import FinancialContextDetector


@pytest.fixture
def detector():
    return FinancialContextDetector()


def test_full_score(detector):
    """Test a typical bank message hits every scoring component."""
    context = detector.classify("Rs.500 debited from A/c XX1234")
    assert context.is_financial
    assert context.confidence == 1.0
    assert {"debited", "rs", "a/c"} <= context.matched_keywords


def test_empty_text(detector):
    """Test empty and whitespace text."""
    for text in ("", "   "):
        context = detector.classify(text)
        assert not context.is_financial
        assert context.confidence == 0.0
        assert context.matched_keywords == frozenset()


def test_casual_message(detector):
    """Test a chat message is not financial."""
    assert not detector.is_financial("Hey, dinner at 8?")
    assert detector.matched_keywords("Hello, how are you?") == frozenset()


def test_number_without_keyword_is_not_financial(detector):
    """Test a numeric amount alone does not pass the gate."""
    context = detector.classify("Meeting at 5")
    assert not context.is_financial
    assert context.confidence == 0.3


def test_keyword_inside_word_does_not_match(detector):
    """Test 'rs' inside 'hours' is not a currency keyword."""
    assert "rs" not in detector.matched_keywords("Call me in 2 hours")
    assert not detector.is_financial("Call me in 2 hours")


def test_general_and_account_keywords(detector):
    """Test general plus account keywords reach the threshold."""
    context = detector.classify("Your UPI payment was successful")
    assert context.is_financial
    assert context.confidence == pytest.approx(0.4)


def test_below_threshold(detector):
    """Test a single general keyword stays below the threshold."""
    context = detector.classify("Meet me at the atm")
    assert not context.is_financial
    assert context.confidence == pytest.approx(0.2)


def test_custom_threshold():
    """Test the threshold is configurable."""
    strict = FinancialContextDetector(min_confidence=0.9)
    assert not strict.is_financial("Your UPI payment was successful")
    assert strict.is_financial("Rs.500 debited from A/c XX1234")
