"""Tree-sitter parser for Dart sources."""
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from tree_sitter import Language, Node, Parser, Tree
from tree_sitter_language_pack import get_language


@dataclass
class ParseResult:
    """A syntax tree plus the diagnostics tree-sitter recovered from.

    Diagnostics are informational only: the tree is always usable.
    """
    tree: Tree
    source: bytes
    diagnostics: List[int] = field(default_factory=list)  # 1-based lines


class DartParser:
    """Dart parser using the tree-sitter v0.22+ API."""

    def __init__(self):
        self.parser = self._create_parser()

    @staticmethod
    def _create_parser() -> Parser:
        """Build a Parser bound to the Dart grammar from the language pack."""
        lang = get_language('dart')
        if not isinstance(lang, Language):
            lang = Language(lang)
        return Parser(lang)

    def parse_source(self, source_code: bytes) -> ParseResult:
        """Parse Dart source, tolerating syntax errors.

        Args:
            source_code: UTF-8 encoded source

        Returns:
            ParseResult; error recovery never raises
        """
        tree = self.parser.parse(source_code)
        return ParseResult(
            tree=tree,
            source=source_code,
            diagnostics=self._collect_diagnostics(tree.root_node),
        )

    def parse_file(self, file_path: str | Path) -> Optional[ParseResult]:
        """Parse file and return its ParseResult.

        Args:
            file_path: Path to a .dart file

        Returns:
            ParseResult, or None if the file can't be read as UTF-8
        """
        try:
            source_code = Path(file_path).read_text(encoding='utf-8')
        except (UnicodeDecodeError, OSError):
            return None
        return self.parse_source(source_code.encode('utf-8'))

    @staticmethod
    def _collect_diagnostics(root: Node) -> List[int]:
        if not root.has_error:
            return []

        lines = []
        stack = [root]
        while stack:
            node = stack.pop()
            if node.is_error or node.is_missing:
                lines.append(node.start_point[0] + 1)
                continue
            if node.has_error:
                stack.extend(reversed(node.children))
        return lines
