"""Amount parsing utilities."""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Optional
import re

from paylog.utils.keywords import find_keyword

_NUMBER = r"[0-9]+(?:,[0-9]+)*(?:\.[0-9]{1,2})?"
_CURRENCY = r"(?:₹|\brs\.?|\binr|\brupees?\b)"

# Currency before or after the number: "Rs.1,500.00", "INR 250", "500 rupees".
_CURRENCY_AMOUNT = re.compile(
    rf"{_CURRENCY}\s*({_NUMBER})(?![0-9])|(?<![0-9.,/:-])({_NUMBER})\s*(?:₹|rs\b\.?|inr\b|rupees?\b)",
    re.IGNORECASE,
)

# A bare number that is not a piece of a date, time or masked identifier.
_STANDALONE_AMOUNT = re.compile(
    rf"(?<![\w./:*-])({_NUMBER})(?![\w/:*-]|\.[0-9])"
)

_WORD_VALUES = {
    "zero": 0, "one": 1, "two": 2, "three": 3, "four": 4,
    "five": 5, "six": 6, "seven": 7, "eight": 8, "nine": 9,
    "ten": 10, "eleven": 11, "twelve": 12, "thirteen": 13,
    "fourteen": 14, "fifteen": 15, "sixteen": 16, "seventeen": 17,
    "eighteen": 18, "nineteen": 19, "twenty": 20, "thirty": 30,
    "forty": 40, "fifty": 50, "sixty": 60, "seventy": 70,
    "eighty": 80, "ninety": 90,
    "hundred": 100,
    "thousand": 1_000,
    "lakh": 100_000, "lakhs": 100_000, "lac": 100_000, "lacs": 100_000,
    "million": 1_000_000,
    "crore": 10_000_000, "crores": 10_000_000,
    "billion": 1_000_000_000,
}

_NUMBER_WORD = "|".join(sorted(_WORD_VALUES, key=len, reverse=True))
_WORD_AMOUNT = re.compile(
    rf"\b(?:{_NUMBER_WORD})(?:[\s-]+(?:and[\s-]+)?(?:{_NUMBER_WORD}))*\b(?:\s+rupees?\b)?",
    re.IGNORECASE,
)
_CURRENCY_SUFFIX = re.compile(r"\s+rupees?$", re.IGNORECASE)
_CURRENCY_BEFORE = re.compile(r"(?:₹|\brs\.?|\binr)\s*$", re.IGNORECASE)

# Words that usually sit next to the amount that actually moved.
PRIMARY_AMOUNT_CUES = (
    "debited",
    "credited",
    "paid",
    "received",
    "withdrawn",
    "deposited",
    "transferred",
    "spent",
)

MIN_STANDALONE_AMOUNT = Decimal("1")
MAX_STANDALONE_AMOUNT = Decimal("100000000")


@dataclass(frozen=True)
class AmountCandidate:
    """An amount found in text, with its position and currency evidence."""

    value: Decimal
    start: int
    end: int
    cued: bool


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a Decimal.

    Handles various formats:
    - "123.45"
    - "₹123.45"
    - "Rs. 1,234.56"
    - "INR 1,00,000"
    - "500 rupees"

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount

    Raises:
        ValueError: If amount string cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    # Remove currency symbols and abbreviations
    cleaned = re.sub(r"₹|\brs\.?|\binr|\brupees?\b", "", amount_str.strip(), flags=re.IGNORECASE)

    # Remove commas (both western and lakh grouping)
    cleaned = cleaned.replace(",", "").strip()

    try:
        return Decimal(cleaned)
    except InvalidOperation as e:
        raise ValueError(f"Could not parse amount '{amount_str}': {e}")


def words_to_number(words: str) -> Optional[int]:
    """Convert a worded number such as "One Lakh Fifty Thousand" to an int.

    Scale words of a thousand or more close the current group; "hundred"
    multiplies within a group. Returns None when nothing positive is found.
    """
    total = 0
    current = 0
    for word in re.split(r"[\s-]+", words.lower()):
        value = _WORD_VALUES.get(word)
        if value is None:
            continue
        if value >= 100:
            current = max(current, 1) * value
            if value >= 1000:
                total += current
                current = 0
        else:
            current += value
    total += current
    return total if total > 0 else None


def extract_all_amounts(text: str) -> list[AmountCandidate]:
    """Find every amount candidate in ``text``.

    Candidates come from the first tier that yields anything: amounts with a
    currency marker, then worded amounts, then bare numbers in a plausible
    transaction range.
    """
    if not text or not text.strip():
        return []

    candidates = []
    for match in _CURRENCY_AMOUNT.finditer(text):
        group = 1 if match.group(1) is not None else 2
        try:
            value = parse_amount(match.group(group))
        except ValueError:
            continue
        candidates.append(AmountCandidate(value, match.start(group), match.end(group), cued=True))
    if candidates:
        return candidates

    for match in _WORD_AMOUNT.finditer(text):
        words = _CURRENCY_SUFFIX.sub("", match.group(0))
        number = words_to_number(words)
        if number is None:
            continue
        cued = bool(_CURRENCY_SUFFIX.search(match.group(0))) or bool(
            _CURRENCY_BEFORE.search(text[: match.start()])
        )
        # A lone uncued word ("one time password") is not an amount.
        if not cued and len(re.split(r"[\s-]+", words.strip())) < 2:
            continue
        candidates.append(AmountCandidate(Decimal(number), match.start(), match.end(), cued=cued))
    if candidates:
        return candidates

    for match in _STANDALONE_AMOUNT.finditer(text):
        try:
            value = parse_amount(match.group(1))
        except ValueError:
            continue
        if MIN_STANDALONE_AMOUNT <= value <= MAX_STANDALONE_AMOUNT:
            candidates.append(AmountCandidate(value, match.start(1), match.end(1), cued=False))
    return candidates


def find_primary_amount(text: str) -> Optional[AmountCandidate]:
    """Pick the amount most strongly tied to the transaction.

    With several candidates, the one closest to the first cue word found (in
    PRIMARY_AMOUNT_CUES order) wins, provided it is within 100 characters;
    otherwise, and on equal distance, the leftmost candidate wins.
    """
    candidates = extract_all_amounts(text)
    if not candidates:
        return None
    if len(candidates) == 1:
        return candidates[0]

    for cue in PRIMARY_AMOUNT_CUES:
        cue_index = find_keyword(text, cue)
        if cue_index == -1:
            continue
        best = None
        best_distance = None
        for candidate in candidates:
            distance = abs(candidate.start - cue_index)
            if distance >= 100:
                continue
            if best_distance is None or distance < best_distance:
                best, best_distance = candidate, distance
        if best is not None:
            return best

    return candidates[0]


def extract_amount(text: str) -> Optional[Decimal]:
    """Extract the primary transaction amount from message text.

    Returns None if no numeric or worded amount is present.
    """
    candidate = find_primary_amount(text)
    return candidate.value if candidate else None
