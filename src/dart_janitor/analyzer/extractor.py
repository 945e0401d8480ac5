"""Declaration and import extraction from parsed Dart syntax trees."""
from typing import Dict, FrozenSet, Iterable, List, Optional

from tree_sitter import Node

from .literals import string_value
from .models import Declaration, DeclarationKind
from .walker import traverse

# Methods the Flutter/Dart runtime invokes implicitly. Nothing in user code
# calls them by name, so reference counting would always flag them.
FRAMEWORK_CALLBACKS: FrozenSet[str] = frozenset({
    'build',
    'createState',
    'initState',
    'dispose',
    'deactivate',
    'reassemble',
    'didChangeDependencies',
    'didUpdateWidget',
    'debugFillProperties',
    'toString',
    'hashCode',
    'noSuchMethod',
    'main',
})

PACKAGE_SCHEME = 'package:'


def node_text(node: Node, source_code: bytes) -> str:
    return source_code[node.start_byte:node.end_byte].decode('utf-8', errors='ignore')


def extract_name_node(node: Node) -> Optional[Node]:
    """Find the name token of a declaration node.

    Prefers the grammar's 'name' field, falling back to the first identifier child.
    """
    name_node = node.child_by_field_name('name')
    if name_node is not None:
        return name_node
    for child in node.children:
        if child.type == 'identifier':
            return child
    return None


def package_name(uri: str) -> Optional[str]:
    """Package referenced by a 'package:' URI.

    Examples:
        'package:http/http.dart' -> 'http'
        'dart:io'                -> None
    """
    if not uri.startswith(PACKAGE_SCHEME):
        return None
    rest = uri[len(PACKAGE_SCHEME):]
    return rest.split('/', 1)[0]


class DeclarationExtractor:
    """Collect class and method/function declaration sites of one file."""

    def __init__(self, source_code: bytes, file_path: str,
                 excluded_methods: Iterable[str] = FRAMEWORK_CALLBACKS):
        """Initialize extractor for one file.

        Args:
            source_code: Source bytes the tree was parsed from
            file_path: Absolute path recorded on each declaration
            excluded_methods: Method names that are never recorded
        """
        self.source_code = source_code
        self.file_path = file_path
        self.excluded_methods = frozenset(excluded_methods)
        self.declarations: List[Declaration] = []

    def visit_class(self, node: Node):
        self._record(node, DeclarationKind.CLASS)

    def visit_function(self, node: Node):
        self._record(node, DeclarationKind.METHOD)

    def _record(self, node: Node, kind: DeclarationKind):
        name_node = extract_name_node(node)
        if name_node is None:
            return
        name = node_text(name_node, self.source_code)
        if not name:
            return
        if kind is DeclarationKind.METHOD and name in self.excluded_methods:
            return
        self.declarations.append(Declaration(
            kind=kind,
            name=name,
            file_path=self.file_path,
            line=name_node.start_point[0] + 1,
        ))


class ImportExtractor:
    """Collect URIs of import and export directives of one file.

    Directive wrappers nest (import_or_export > library_import >
    import_specification), so URIs are keyed by the literal's offset.
    """

    def __init__(self, source_code: bytes):
        self.source_code = source_code
        self._uris: Dict[int, str] = {}

    @property
    def uris(self) -> List[str]:
        return [self._uris[offset] for offset in sorted(self._uris)]

    @property
    def packages(self) -> List[str]:
        names = (package_name(uri) for uri in self.uris)
        return [name for name in names if name]

    def visit_directive(self, node: Node):
        literal = self._primary_uri_literal(node)
        if literal is None:
            return
        uri = string_value(node_text(literal, self.source_code))
        if uri is not None:
            self._uris[literal.start_byte] = uri

    @staticmethod
    def _primary_uri_literal(node: Node) -> Optional[Node]:
        """First URI literal of a directive; conditional URIs come after it."""
        for descendant in traverse(node):
            if descendant.type == 'uri':
                for child in descendant.children:
                    if child.type == 'string_literal':
                        return child
                return descendant
            if descendant.type == 'string_literal':
                return descendant
        return None
