"""Keyword extraction for trend titles."""
from __future__ import annotations

import re
from typing import List

STOPWORDS = frozenset(
    {
        "the", "and", "for", "are", "but", "not", "you", "all", "can",
        "had", "her", "was", "one", "our", "out", "day", "get", "has",
        "him", "his", "how", "its", "new", "now", "old", "see", "two",
        "who", "boy", "did", "may", "say", "she", "use", "way", "will",
        "with", "today",
    }
)

MAX_KEYWORDS = 5
MIN_TOKEN_LENGTH = 3

_NON_WORD = re.compile(r"[^\w\s]")


def extract_keywords(title: str) -> List[str]:
    """Return up to five salient lowercase tokens from *title*, in order.

    Tokens shorter than three characters and common English stopwords are
    dropped. The result is empty when nothing survives the filter.
    """
    tokens = _NON_WORD.sub(" ", title.lower()).split()
    keywords = [
        token for token in tokens
        if len(token) >= MIN_TOKEN_LENGTH and token not in STOPWORDS
    ]
    return keywords[:MAX_KEYWORDS]
