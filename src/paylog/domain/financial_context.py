"""Financial context detection for incoming messages."""

import re

from paylog.domain.entities import FinancialContext
from paylog.utils.keywords import matching_keywords

CREDIT_KEYWORDS = (
    "credited",
    "received",
    "deposited",
    "transferred in",
    "added",
    "credit",
    "deposit",
    "refund",
    "cashback",
)

DEBIT_KEYWORDS = (
    "debited",
    "withdrawn",
    "transferred",
    "paid",
    "deducted",
    "debit",
    "withdrawal",
    "purchase",
    "spent",
    "charged",
)

AMOUNT_KEYWORDS = (
    "rupees",
    "rs",
    "₹",
    "amount",
    "inr",
    "balance",
    "sum",
    "total",
)

ACCOUNT_KEYWORDS = (
    "account",
    "ac no",
    "a/c",
    "account number",
    "acc",
    "bank",
    "card",
    "upi",
)

GENERAL_KEYWORDS = (
    "transaction",
    "payment",
    "transfer",
    "bank",
    "atm",
    "pos",
    "online",
    "mobile banking",
    "net banking",
    "wallet",
    "paytm",
    "gpay",
    "phonepe",
    "bhim",
    "imps",
    "neft",
    "rtgs",
    "upi",
)

MIN_CONFIDENCE = 0.3

_NUMERIC_AMOUNT = re.compile(r"\d{1,3}(?:,\d{2,3})*(?:\.\d{1,2})?|\d+(?:\.\d{1,2})?")


class FinancialContextDetector:
    """Decide whether a message describes a monetary transaction.

    Scoring:
    - 0.2 if any keyword from any set is present
    - 0.3 if a debit or credit keyword is present
    - 0.3 if an amount keyword or a numeric amount is present
    - 0.2 if an account keyword is present

    A message is financial when it matched at least one keyword and scores
    at least ``MIN_CONFIDENCE``.
    """

    def __init__(self, min_confidence: float = MIN_CONFIDENCE):
        self.min_confidence = min_confidence
        self._all_keywords = tuple(
            dict.fromkeys(
                CREDIT_KEYWORDS + DEBIT_KEYWORDS + AMOUNT_KEYWORDS + ACCOUNT_KEYWORDS + GENERAL_KEYWORDS
            )
        )

    def classify(self, text: str) -> FinancialContext:
        """Classify text, returning the verdict, score and matched keywords."""
        if not text or not text.strip():
            return FinancialContext(is_financial=False, confidence=0.0)

        matched = frozenset(kw.lower() for kw in matching_keywords(text, self._all_keywords))
        score = self._score(text, matched)
        return FinancialContext(
            is_financial=bool(matched) and score >= self.min_confidence,
            confidence=score,
            matched_keywords=matched,
        )

    def _score(self, text: str, matched: frozenset[str]) -> float:
        score = 0.0
        if matched:
            score += 0.2
        if matched.intersection(CREDIT_KEYWORDS) or matched.intersection(DEBIT_KEYWORDS):
            score += 0.3
        if matched.intersection(AMOUNT_KEYWORDS) or _NUMERIC_AMOUNT.search(text):
            score += 0.3
        if matched.intersection(ACCOUNT_KEYWORDS):
            score += 0.2
        return round(min(score, 1.0), 4)

    def is_financial(self, text: str) -> bool:
        return self.classify(text).is_financial

    def confidence(self, text: str) -> float:
        return self.classify(text).confidence

    def matched_keywords(self, text: str) -> frozenset[str]:
        return self.classify(text).matched_keywords
