"""Project-wide identifier census.

The census counts every identifier-shaped token regardless of what it
refers to. A class ``Foo`` and a method ``Foo`` therefore share one count,
so an extra occurrence of either name keeps both declarations alive.
Whether that cross-kind masking is desirable is undecided; it is kept as-is
and isolated here so an alternative counting policy can replace this table.
"""
import re
from collections import Counter

from tree_sitter import Node

IDENTIFIER_PATTERN = re.compile(r'[A-Za-z_]\w*', re.ASCII)


def is_identifier(lexeme: str) -> bool:
    return IDENTIFIER_PATTERN.fullmatch(lexeme) is not None


class IdentifierCensus:
    """Kind-agnostic lexeme -> occurrence count table."""

    def __init__(self, counts: Counter = None):
        self._counts: Counter = Counter(counts or ())

    def add(self, lexeme: str):
        self._counts[lexeme] += 1

    def merge(self, other: 'IdentifierCensus'):
        """Add another census' counts to this one (exact summation)."""
        self._counts.update(other._counts)

    def count(self, lexeme: str) -> int:
        return self._counts.get(lexeme, 0)


class CensusCollector:
    """Counts identifier-shaped leaf tokens of one file's tree."""

    def __init__(self, source_code: bytes):
        self.source_code = source_code
        self.census = IdentifierCensus()

    def visit_token(self, node: Node):
        parent = node.parent
        # Quote and raw-prefix tokens of a string are not code tokens
        if parent is not None and parent.type == 'string_literal':
            return
        lexeme = self.source_code[node.start_byte:node.end_byte].decode('utf-8', errors='ignore')
        if is_identifier(lexeme):
            self.census.add(lexeme)
