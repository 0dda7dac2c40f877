"""
Text normalization and similarity for description matching.

Descriptions are reduced to lowercase alphanumeric tokens with short
tokens and noise words removed, then compared with Jaccard similarity.
"""

import re
from collections.abc import Iterable, Sequence

from .config import DEFAULT_STOP_WORDS

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def normalize_text(
    text: str | None,
    stop_words: Iterable[str] = DEFAULT_STOP_WORDS,
    min_token_length: int = 3,
) -> list[str]:
    """
    Tokenize text for comparison.

    Examples:
        "The Pokemon Booster Box (ENG)" -> ["pokemon", "eng"]
        "A4 paper, 80gsm" -> ["paper", "80gsm"]

    Returns:
        Tokens in original order (duplicates kept)
    """
    if not text:
        return []

    stop = stop_words if isinstance(stop_words, (set, frozenset)) else set(stop_words)
    tokens = _NON_ALNUM.sub(" ", text.lower()).split()
    return [t for t in tokens if len(t) >= min_token_length and t not in stop]


def token_similarity(a_tokens: Sequence[str], b_tokens: Sequence[str]) -> float:
    """
    Jaccard similarity of two token sequences.

    Returns 0-1 score; 0 when either side is empty.
    """
    if not a_tokens or not b_tokens:
        return 0.0

    a_set = set(a_tokens)
    b_set = set(b_tokens)
    union = len(a_set | b_set)
    return len(a_set & b_set) / union if union > 0 else 0.0
