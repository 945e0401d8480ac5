"""String literal decoding and fragment collection.

A ``string_literal`` node may hold several adjacent quoted parts
(``'a' 'b'``). Each part is decoded into its literal segments; a part with
interpolations (``'$dir/logo.png'``) has one segment more than it has
``$name``/``${expr}`` boundaries, and a segment may be empty.
"""
import re
from dataclasses import dataclass
from typing import List, Optional, Set, Tuple

from tree_sitter import Node

_IDENT_START = re.compile(r'[A-Za-z_]')
_IDENT = re.compile(r'[A-Za-z_][A-Za-z0-9_]*')
_HEX = re.compile(r'[0-9A-Fa-f]+')
_LEADING_BLANK_LINE = re.compile(r'[ \t]*(\r\n|\n|\r)')

_SIMPLE_ESCAPES = {
    'n': '\n',
    'r': '\r',
    't': '\t',
    'b': '\b',
    'f': '\f',
    'v': '\v',
}


@dataclass(frozen=True)
class StringPart:
    """One quoted part of a string literal."""
    segments: Tuple[str, ...]

    @property
    def is_interpolated(self) -> bool:
        return len(self.segments) > 1

    @property
    def value(self) -> Optional[str]:
        """Static value, or None when the part interpolates expressions."""
        return None if self.is_interpolated else self.segments[0]


def decode_string_literal(text: str) -> List[StringPart]:
    """Split literal source text into decoded quoted parts.

    Tolerant of malformed input: an unterminated part runs to the end of text.
    """
    parts = []
    pos = _skip_trivia(text, 0)
    while pos < len(text):
        part, pos = _scan_part(text, pos)
        if part is None:
            break
        parts.append(part)
        pos = _skip_trivia(text, pos)
    return parts


def string_value(text: str) -> Optional[str]:
    """Static value of a literal: adjacent parts joined, None if interpolated."""
    parts = decode_string_literal(text)
    if not parts or any(part.is_interpolated for part in parts):
        return None
    return ''.join(part.value for part in parts)


def literal_fragments(parts: List[StringPart]) -> List[str]:
    """Fragments a string literal contributes to the project corpus.

    - a lone simple part contributes its value;
    - adjacent parts contribute every simple part plus the concatenation
      of the simple parts;
    - an interpolated part contributes each segment, and the run of
      segments accumulated since the last interpolation boundary.
    """
    fragments = []
    if len(parts) > 1:
        joined = []
        for part in parts:
            if not part.is_interpolated:
                fragments.append(part.value)
                joined.append(part.value)
        fragments.append(''.join(joined))

    for part in parts:
        if not part.is_interpolated:
            fragments.append(part.value)
            continue
        run = ''
        for index, segment in enumerate(part.segments):
            if index > 0 and run:
                fragments.append(run)
                run = ''
            fragments.append(segment)
            run += segment
        if run:
            fragments.append(run)
    return fragments


class StringLiteralCollector:
    """Collects literal fragments from one file's string_literal nodes."""

    def __init__(self, source_code: bytes):
        self.source_code = source_code
        self.literals: Set[str] = set()

    def visit_string(self, node: Node):
        text = self.source_code[node.start_byte:node.end_byte].decode('utf-8', errors='replace')
        self.literals.update(literal_fragments(decode_string_literal(text)))


# --- Scanner ---

def _skip_trivia(text: str, pos: int) -> int:
    """Skip whitespace and comments between adjacent string parts."""
    while pos < len(text):
        if text[pos].isspace():
            pos += 1
        elif text.startswith('//', pos):
            end = text.find('\n', pos)
            pos = len(text) if end == -1 else end + 1
        elif text.startswith('/*', pos):
            end = text.find('*/', pos + 2)
            pos = len(text) if end == -1 else end + 2
        else:
            break
    return pos


def _scan_part(text: str, pos: int) -> Tuple[Optional[StringPart], int]:
    raw = False
    if text[pos] in 'rR':
        raw = True
        pos += 1
    if pos >= len(text) or text[pos] not in '\'"':
        return None, len(text)

    quote = text[pos]
    if text.startswith(quote * 3, pos):
        delimiter = quote * 3
    else:
        delimiter = quote
    pos += len(delimiter)
    multiline = len(delimiter) == 3

    if multiline:
        # A first line holding only whitespace is not part of the value
        match = _LEADING_BLANK_LINE.match(text, pos)
        if match:
            pos = match.end()

    segments = []
    buffer = []
    while pos < len(text):
        if text.startswith(delimiter, pos):
            pos += len(delimiter)
            break
        char = text[pos]
        if not multiline and char in '\r\n':
            # Unterminated single-line string
            break
        if char == '\\' and not raw:
            decoded, pos = _scan_escape(text, pos)
            buffer.append(decoded)
        elif char == '$' and not raw and pos + 1 < len(text) and text[pos + 1] == '{':
            segments.append(''.join(buffer))
            buffer = []
            pos = _skip_braced_expression(text, pos + 2)
        elif char == '$' and not raw and _IDENT_START.match(text, pos + 1):
            segments.append(''.join(buffer))
            buffer = []
            pos = _IDENT.match(text, pos + 1).end()
        else:
            buffer.append(char)
            pos += 1
    segments.append(''.join(buffer))
    return StringPart(tuple(segments)), pos


def _scan_escape(text: str, pos: int) -> Tuple[str, int]:
    """Decode the escape sequence starting at the backslash at pos."""
    if pos + 1 >= len(text):
        return '', len(text)
    char = text[pos + 1]
    if char in _SIMPLE_ESCAPES:
        return _SIMPLE_ESCAPES[char], pos + 2
    if char == 'x':
        digits = text[pos + 2:pos + 4]
        if len(digits) == 2 and _HEX.fullmatch(digits):
            return chr(int(digits, 16)), pos + 4
        return 'x', pos + 2
    if char == 'u':
        if text.startswith('{', pos + 2):
            end = text.find('}', pos + 3)
            digits = text[pos + 3:end] if end != -1 else ''
            if digits and _HEX.fullmatch(digits) and int(digits, 16) <= 0x10FFFF:
                return chr(int(digits, 16)), end + 1
            return 'u', pos + 2
        digits = text[pos + 2:pos + 6]
        if len(digits) == 4 and _HEX.fullmatch(digits):
            return chr(int(digits, 16)), pos + 6
        return 'u', pos + 2
    if char == '\r' and text.startswith('\r\n', pos + 1):
        return '\r\n', pos + 3
    return char, pos + 2


def _starts_raw_string(text: str, pos: int) -> bool:
    if text[pos] not in 'rR' or text[pos + 1:pos + 2] not in ('"', "'"):
        return False
    # `bar'...` is not a raw string
    return pos == 0 or not (text[pos - 1].isalnum() or text[pos - 1] in '_$')


def _skip_braced_expression(text: str, pos: int) -> int:
    """Return the position just past the '}' closing a ${...} expression."""
    depth = 1
    while pos < len(text):
        char = text[pos]
        if char in '\'"' or _starts_raw_string(text, pos):
            _, pos = _scan_part(text, pos)
            continue
        if text.startswith('//', pos):
            end = text.find('\n', pos)
            pos = len(text) if end == -1 else end + 1
            continue
        if text.startswith('/*', pos):
            end = text.find('*/', pos + 2)
            pos = len(text) if end == -1 else end + 2
            continue
        if char == '{':
            depth += 1
        elif char == '}':
            depth -= 1
            if depth == 0:
                return pos + 1
        pos += 1
    return pos
