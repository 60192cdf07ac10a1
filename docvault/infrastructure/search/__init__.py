"""Search cascade strategies and the plain listing over the document table."""

from docvault.infrastructure.search.listing import DocumentListing
from docvault.infrastructure.search.strategies import (
    ExactStrategy,
    PatternStrategy,
    PrefixStrategy,
    TrigramStrategy,
    build_cascade,
)

__all__ = [
    "DocumentListing",
    "ExactStrategy",
    "PatternStrategy",
    "PrefixStrategy",
    "TrigramStrategy",
    "build_cascade",
]
