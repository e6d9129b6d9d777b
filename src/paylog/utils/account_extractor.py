"""Utility for extracting account identifiers from message text."""

from dataclasses import dataclass
from typing import Optional
import re

from paylog.utils.keywords import find_keyword

# Identifier written right after an account keyword: "A/C *9999", "A/c no. 45217", "Acct 4521"
_ACCOUNT_WITH_CONTEXT = re.compile(
    r"(?<![a-z])(?:a/c|ac\s*no|account|acct)\.?\s*(?:no\.?|number)?[:\s]*"
    r"([xX*0-9][-xX*0-9]{3,})(?![\w*])",
    re.IGNORECASE,
)

# "XXXX2323", "xxxxxx2323", "******5678", "XX-XX-1234"
_MASKED_ACCOUNT = re.compile(r"(?<![A-Za-z0-9*])((?:[xX*]{2,}[-\s]?)+[0-9]{2,6})(?![0-9])")

# "card ending 9012", "a/c ending with 4455"
_ACCOUNT_ENDING = re.compile(r"\bending\s+(?:with\s+|in\s+)?([0-9]{4})\b", re.IGNORECASE)

# Unmasked identifiers, either contiguous or grouped in fours
_FULL_ACCOUNT = re.compile(
    r"(?<![\w*.,])([0-9]{4}[-\s][0-9]{4}[-\s][0-9]{4,10}|[0-9]{8,18})(?![\w]|[.,][0-9])"
)

# Keywords that introduce the account the transaction touched, in priority order
ACCOUNT_CONTEXT_KEYWORDS = (
    "a/c",
    "account",
    "acct",
    "ac no",
    "acc",
)

# Candidates before the keyword are penalised so "a/c XXXX1234" beats "XXXX9999 a/c"
_BEFORE_KEYWORD_PENALTY = 50
_MAX_KEYWORD_DISTANCE = 100
_CARD_KEYWORD_WINDOW = 30


@dataclass(frozen=True)
class AccountCandidate:
    """An account identifier as written in the message, with its position."""

    value: str
    start: int
    end: int


def _is_card_number(text: str, start: int, value: str) -> bool:
    """Heuristic: 16 digit numbers, or numbers right after "card", are cards."""
    digits = re.sub(r"[-\s]", "", value)
    if len(digits) == 16:
        return True
    window = text[max(0, start - _CARD_KEYWORD_WINDOW):start].lower()
    return "card" in window


_DATE_LIKE = re.compile(r"[0-9]{1,2}-[0-9]{1,2}-[0-9]{2,4}")


def _is_plausible_context_account(value: str) -> bool:
    """Keyword-adjacent identifiers need two digits and must not be a date or card."""
    digits = re.sub(r"[^0-9]", "", value)
    if len(digits) < 2 or len(digits) == 16:
        return False
    return not _DATE_LIKE.fullmatch(value)


def _is_plausible_account(value: str) -> bool:
    digits = re.sub(r"[^0-9]", "", value)
    if len(digits) < 2:
        return False
    # All-same-digit strings ("0000000000") are placeholders
    return len(set(digits)) > 1


def extract_all_accounts(text: str) -> list[AccountCandidate]:
    """Find account candidates, verbatim, from the first tier that yields any.

    Tiers: identifiers written right after an account keyword, then masked
    identifiers, then "ending NNNN" forms, then full numbers that do not look
    like card numbers.
    """
    if not text or not text.strip():
        return []

    candidates = []
    for m in _ACCOUNT_WITH_CONTEXT.finditer(text):
        value = m.group(1).rstrip("-")
        if _is_plausible_context_account(value):
            candidates.append(AccountCandidate(value, m.start(1), m.start(1) + len(value)))
    if candidates:
        return candidates

    candidates = [
        AccountCandidate(m.group(1).strip(), m.start(1), m.start(1) + len(m.group(1).strip()))
        for m in _MASKED_ACCOUNT.finditer(text)
    ]
    if candidates:
        return candidates

    candidates = [
        AccountCandidate(m.group(1), m.start(1), m.end(1))
        for m in _ACCOUNT_ENDING.finditer(text)
    ]
    if candidates:
        return candidates

    return [
        AccountCandidate(m.group(1), m.start(1), m.end(1))
        for m in _FULL_ACCOUNT.finditer(text)
        if not _is_card_number(text, m.start(1), m.group(1)) and _is_plausible_account(m.group(1))
    ]


def _primary_account(text: str, candidates: list[AccountCandidate]) -> AccountCandidate:
    if len(candidates) == 1:
        return candidates[0]

    for keyword in ACCOUNT_CONTEXT_KEYWORDS:
        keyword_index = find_keyword(text, keyword)
        if keyword_index == -1:
            continue
        best = None
        best_distance = None
        for candidate in candidates:
            distance = abs(candidate.start - keyword_index)
            if distance >= _MAX_KEYWORD_DISTANCE:
                continue
            if candidate.start < keyword_index:
                distance += _BEFORE_KEYWORD_PENALTY
            if best_distance is None or distance < best_distance:
                best, best_distance = candidate, distance
        if best is not None:
            return best

    return candidates[0]


def extract_account(text: str) -> Optional[str]:
    """Extract the primary account identifier from message text.

    The identifier is returned exactly as written, masking included. Returns
    None when nothing resembling an account is present.
    """
    candidates = extract_all_accounts(text)
    if not candidates:
        return None
    return _primary_account(text, candidates).value
