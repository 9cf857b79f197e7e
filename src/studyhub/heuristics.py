"""Naive text heuristics: sentence truncation and keyword picking."""
import re

_SENTENCE_BOUNDARY = re.compile(r"(?<=[.!?])\s+")
_NON_ALNUM = re.compile(r"[^a-z0-9\s]")


def summarize(text: str, max_sentences: int = 4) -> str:
    """Return the first ``max_sentences`` sentences of ``text`` joined by a space."""
    if not text:
        return ""
    flattened = re.sub(r"\n+", " ", text)
    sentences = [s for s in _SENTENCE_BOUNDARY.split(flattened) if s]
    return " ".join(sentences[:max_sentences])


def extract_topics(text: str, limit: int = 6) -> list[str]:
    """Return the longest unique words (over 3 characters), longest first.

    Words of equal length keep the order in which they first appear.
    """
    if not text:
        return []
    words = [w for w in _NON_ALNUM.sub(" ", text.lower()).split() if len(w) > 3]
    unique = list(dict.fromkeys(words))
    unique.sort(key=len, reverse=True)
    return unique[:limit]
