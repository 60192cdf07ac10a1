"""Query normalization for the search cascade.

normalize_query turns raw user input into lowercase tokens:
camelCase is split, "_", "-" and "." become spaces, other punctuation
(except apostrophes) becomes a space, and tokens shorter than two
characters are dropped. exact_terms further prepares tokens for the exact
full-text strategy.
"""

import re

from docvault.application.dtos.search import NormalizedQuery

MIN_TOKEN_LENGTH = 2

STOP_WORDS: frozenset[str] = frozenset(
    {"the", "and", "or", "but", "in", "on", "at", "to", "a", "an", "is", "it"}
)

_CAMEL_BOUNDARY_RE = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")
_SEPARATOR_RE = re.compile(r"[_\-.]+")
_PUNCTUATION_RE = re.compile(r"[^\w\s']+")
_LEXEME_RE = re.compile(r"[^\w]+")


def normalize_query(raw: str | None) -> NormalizedQuery:
    """Normalize a raw query string into tokens."""
    raw = (raw or "").strip()
    is_phrase = len(raw) > 2 and raw.startswith('"') and raw.endswith('"')
    text = _CAMEL_BOUNDARY_RE.sub(" ", raw)
    text = _SEPARATOR_RE.sub(" ", text)
    text = _PUNCTUATION_RE.sub(" ", text)
    tokens = tuple(
        token
        for token in (t.strip("'") for t in text.lower().split())
        if len(token) >= MIN_TOKEN_LENGTH
    )
    return NormalizedQuery(
        raw=raw, text=" ".join(tokens), tokens=tokens, is_phrase=is_phrase
    )


def to_lexeme(token: str) -> str:
    """Strip everything but word characters (safe inside a tsquery)."""
    return _LEXEME_RE.sub("", token)


def exact_terms(tokens: tuple[str, ...], max_tokens: int) -> list[str]:
    """Lexemes for the exact strategy.

    Drops stop words and tokens that are purely numeric or have no word
    characters, de-duplicates preserving order, and caps at max_tokens.
    """
    terms: list[str] = []
    for token in tokens:
        if token in STOP_WORDS:
            continue
        lexeme = to_lexeme(token)
        if not lexeme or lexeme.isdigit() or lexeme in terms:
            continue
        terms.append(lexeme)
        if len(terms) >= max_tokens:
            break
    return terms


def prefix_terms(tokens: tuple[str, ...], min_length: int = 3) -> list[str]:
    """Lexemes of at least min_length characters for the prefix strategy."""
    terms: list[str] = []
    for token in tokens:
        lexeme = to_lexeme(token)
        if len(lexeme) >= min_length and lexeme not in terms:
            terms.append(lexeme)
    return terms
