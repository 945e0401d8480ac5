"""Tests for Dart string literal decoding and fragment reconstruction."""
from dart_janitor.analyzer.literals import (
    StringPart,
    decode_string_literal,
    literal_fragments,
    string_value,
)


class TestDecode:
    """Splitting literal source text into parts and segments."""

    def test_simple_single_and_double_quotes(self):
        assert decode_string_literal("'assets/logo.png'") == [StringPart(("assets/logo.png",))]
        assert decode_string_literal('"hello"') == [StringPart(("hello",))]

    def test_escape_sequences_are_decoded(self):
        [part] = decode_string_literal(r"'a\nb\t\'c\' \$x \x41\u0042\u{1F600}'")
        assert part.value == "a\nb\t'c' $x AB\U0001F600"

    def test_raw_string_is_verbatim(self):
        [part] = decode_string_literal(r"r'C:\new\$dir'")
        assert part.value == r"C:\new\$dir"
        assert not part.is_interpolated

    def test_simple_interpolation(self):
        [part] = decode_string_literal("'$basePath/logo.png'")
        assert part.segments == ("", "/logo.png")
        assert part.is_interpolated
        assert part.value is None

    def test_braced_interpolation_with_nested_string_and_braces(self):
        [part] = decode_string_literal("'assets/${map['}'] ?? {'a': 1}}/logo.png'")
        assert part.segments == ("assets/", "/logo.png")

    def test_dollar_without_identifier_is_literal(self):
        [part] = decode_string_literal("'costs $5'")
        assert part.value == "costs $5"

    def test_adjacent_parts_with_comment_between(self):
        parts = decode_string_literal("'assets/'\n  // folder\n  'images/logo.png'")
        assert [p.value for p in parts] == ["assets/", "images/logo.png"]

    def test_multiline_drops_blank_first_line(self):
        [part] = decode_string_literal("'''\nline one\nline two'''")
        assert part.value == "line one\nline two"

    def test_multiline_keeps_non_blank_first_line(self):
        [part] = decode_string_literal('"""first\nsecond"""')
        assert part.value == "first\nsecond"

    def test_unterminated_literal_is_tolerated(self):
        [part] = decode_string_literal("'assets/logo.png")
        assert part.value == "assets/logo.png"

    def test_string_value_joins_adjacent_and_rejects_interpolation(self):
        assert string_value("'package:http/' 'http.dart'") == "package:http/http.dart"
        assert string_value("'package:$name/x.dart'") is None


class TestFragments:
    """Fragments each literal shape contributes to the corpus."""

    def test_simple_literal(self):
        assert literal_fragments(decode_string_literal("'logo.png'")) == ["logo.png"]

    def test_adjacent_literals_yield_parts_and_concatenation(self):
        fragments = literal_fragments(decode_string_literal("'assets/' 'logo.png'"))
        assert "assets/" in fragments
        assert "logo.png" in fragments
        assert "assets/logo.png" in fragments

    def test_adjacent_concatenation_skips_interpolated_parts(self):
        fragments = literal_fragments(decode_string_literal("'a/' '$x' 'b.png'"))
        assert "a/b.png" in fragments
        assert "" in fragments

    def test_interpolation_records_each_segment(self):
        fragments = literal_fragments(decode_string_literal("'assets/${folder}/logo.png'"))
        assert fragments == ["assets/", "assets/", "/logo.png", "/logo.png"]

    def test_interpolation_prefix_segment_is_empty(self):
        fragments = set(literal_fragments(decode_string_literal("'$basePath/ic_survey_report'")))
        assert fragments == {"", "/ic_survey_report"}
