"""Generic syntax-tree traversal with callbacks keyed by node kind."""
from collections import defaultdict
from enum import Enum
from typing import Callable, Dict, Iterator, List, Optional

from tree_sitter import Node


class NodeKind(Enum):
    """Tagged node categories the extractors care about."""
    CLASS = "class"
    FUNCTION = "function"
    DIRECTIVE = "directive"
    STRING = "string"
    TOKEN = "token"


# Dart grammar node types per kind
NODE_TYPES = {
    NodeKind.CLASS: {'class_definition'},
    NodeKind.FUNCTION: {'function_signature', 'getter_signature', 'setter_signature'},
    NodeKind.DIRECTIVE: {'import_or_export', 'library_import', 'library_export', 'import_specification'},
    NodeKind.STRING: {'string_literal'},
}

_KIND_BY_TYPE = {
    node_type: kind
    for kind, node_types in NODE_TYPES.items()
    for node_type in node_types
}

Callback = Callable[[Node], None]


def classify(node: Node) -> Optional[NodeKind]:
    """Map a node to its kind; childless nodes are tokens."""
    kind = _KIND_BY_TYPE.get(node.type)
    if kind is not None:
        return kind
    if node.child_count == 0:
        return NodeKind.TOKEN
    return None


def traverse(node: Node) -> Iterator[Node]:
    """Iteratively traverse tree using a stack and yield all nodes in source order."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children))


class TreeWalker:
    """Single-pass walker dispatching each node to the callbacks of its kind."""

    def __init__(self):
        self._callbacks: Dict[NodeKind, List[Callback]] = defaultdict(list)

    def on(self, kind: NodeKind, callback: Callback) -> 'TreeWalker':
        """Register a callback for a node kind. Returns self for chaining."""
        self._callbacks[kind].append(callback)
        return self

    def walk(self, root: Node):
        for node in traverse(root):
            kind = classify(node)
            if kind is None:
                continue
            for callback in self._callbacks.get(kind, ()):
                callback(node)
