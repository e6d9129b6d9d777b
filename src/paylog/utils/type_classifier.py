"""Transaction direction classification from keyword evidence."""

from paylog.domain.entities import TransactionType
from paylog.utils.keywords import find_keyword, matching_keywords

DEBIT_KEYWORDS = (
    "debited",
    "withdrawn",
    "transferred out",
    "paid",
    "deducted",
    "spent",
    "purchase",
    "payment",
    "debit",
    "withdraw",
    "sent",
    "transfer to",
    "transferred to",
    "used",
    "charged",
)

CREDIT_KEYWORDS = (
    "credited",
    "received",
    "deposited",
    "transferred in",
    "added",
    "credit",
    "deposit",
    "refund",
    "refunded",
    "cashback",
    "transfer from",
    "transferred from",
    "received from",
)

KEYWORD_POINTS = 10
FIRST_HALF_BONUS = 5


def classify(text: str) -> TransactionType:
    """Classify message text as debit, credit or unknown.

    If only one keyword set matches, that set decides. If both match, the
    ambiguity is resolved by scoring each side (see ``_resolve_ambiguous``).
    """
    if not text or not text.strip():
        return TransactionType.UNKNOWN

    has_debit = bool(matching_keywords(text, DEBIT_KEYWORDS))
    has_credit = bool(matching_keywords(text, CREDIT_KEYWORDS))

    if has_debit and has_credit:
        return _resolve_ambiguous(text)
    if has_debit:
        return TransactionType.DEBIT
    if has_credit:
        return TransactionType.CREDIT
    return TransactionType.UNKNOWN


def _side_score(text: str, keywords) -> tuple[int, int]:
    """Return (score, first index) for one keyword set; index is -1 if absent."""
    score = 0
    first_index = -1
    half = len(text) / 2
    for keyword in keywords:
        index = find_keyword(text, keyword)
        if index == -1:
            continue
        score += KEYWORD_POINTS
        if index < half:
            score += FIRST_HALF_BONUS
        if first_index == -1 or index < first_index:
            first_index = index
    return score, first_index


def _resolve_ambiguous(text: str) -> TransactionType:
    debit_score, debit_index = _side_score(text, DEBIT_KEYWORDS)
    credit_score, credit_index = _side_score(text, CREDIT_KEYWORDS)

    if debit_score > credit_score:
        return TransactionType.DEBIT
    if credit_score > debit_score:
        return TransactionType.CREDIT

    # Tied: the side mentioned first wins
    if debit_index != -1 and credit_index != -1:
        if debit_index < credit_index:
            return TransactionType.DEBIT
        if credit_index < debit_index:
            return TransactionType.CREDIT
        return TransactionType.UNKNOWN
    if debit_index != -1:
        return TransactionType.DEBIT
    if credit_index != -1:
        return TransactionType.CREDIT
    return TransactionType.UNKNOWN


def confidence(text: str, transaction_type: TransactionType) -> float:
    """Confidence in a classification, from the chosen side's keyword count."""
    if not text or not text.strip() or transaction_type is TransactionType.UNKNOWN:
        return 0.0

    keywords = DEBIT_KEYWORDS if transaction_type is TransactionType.DEBIT else CREDIT_KEYWORDS
    count = len(matching_keywords(text, keywords))
    if count == 0:
        return 0.0
    if count == 1:
        return 0.7
    if count == 2:
        return 0.85
    return 0.95


def matched_keywords(text: str) -> list[str]:
    """All debit and credit keywords present in the text."""
    if not text or not text.strip():
        return []
    return matching_keywords(text, DEBIT_KEYWORDS + CREDIT_KEYWORDS)


def has_type_keywords(text: str) -> bool:
    return bool(matched_keywords(text))
