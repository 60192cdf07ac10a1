"""Builders for to_tsquery input strings.

Lexemes come from query_normalizer.to_lexeme (word characters only), so
no tsquery operator can be injected through user input.
"""


def exact_tsquery(terms: list[str]) -> str:
    """All terms must match: 'invoice & march'."""
    return " & ".join(terms)


def prefix_tsquery(terms: list[str]) -> str:
    """Any term may match as a prefix: 'invoic:* | mar:*'."""
    return " | ".join(f"{term}:*" for term in terms)
