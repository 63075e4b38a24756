from __future__ import annotations

import re
from typing import Any

# Anything that is neither a word character nor whitespace becomes a separator
_NON_WORD = re.compile(r"[^\w\s]")
MIN_TOKEN_LENGTH = 3


def tokenize(text: Any) -> list[str]:
    """Lowercase, strip punctuation, split on whitespace, drop tokens of 1-2 chars.

    Deliberately crude: no stemming and no stopword list.
    """
    if not isinstance(text, str) or not text:
        return []
    cleaned = _NON_WORD.sub(" ", text.lower())
    return [tok for tok in cleaned.split() if len(tok) >= MIN_TOKEN_LENGTH]


def jaccard_similarity(a: Any, b: Any) -> float:
    """Jaccard index of the token sets of ``a`` and ``b``, in [0, 1].

    Two token-less inputs score 0.0: no evidence of similarity rather than a
    guaranteed match.
    """
    set_a = set(tokenize(a))
    set_b = set(tokenize(b))
    union = set_a | set_b
    if not union:
        return 0.0
    return len(set_a & set_b) / len(union)


def title_similarity(title_a: Any, title_b: Any) -> float:
    return jaccard_similarity(title_a, title_b)
