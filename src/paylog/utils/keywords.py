"""Keyword matching helpers shared by the classifiers."""

import re
from functools import lru_cache
from typing import Iterable


@lru_cache(maxsize=None)
def keyword_pattern(keyword: str) -> re.Pattern[str]:
    """Compile a case-insensitive pattern matching ``keyword`` as a whole term.

    A keyword may not be glued to surrounding letters ("rs" does not match
    inside "hours"), but digits and punctuation are allowed next to it so
    "Rs.500" and "INR500" still match.
    """
    return re.compile(
        r"(?<![a-z])" + re.escape(keyword.lower()) + r"(?![a-z])",
        re.IGNORECASE,
    )


def find_keyword(text: str, keyword: str) -> int:
    """Return the index of the first occurrence of ``keyword``, or -1."""
    match = keyword_pattern(keyword).search(text)
    return match.start() if match else -1


def contains_keyword(text: str, keyword: str) -> bool:
    """Return True if ``keyword`` occurs in ``text`` as a whole term."""
    return find_keyword(text, keyword) != -1


def matching_keywords(text: str, keywords: Iterable[str]) -> list[str]:
    """Return the keywords from ``keywords`` present in ``text``, in order."""
    return [kw for kw in keywords if contains_keyword(text, kw)]
