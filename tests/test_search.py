"""Tests for field pattern search."""

from hksave.core.fields import get_field
from hksave.core.search import field_pattern, find_field, find_field_spans


class TestFieldPattern:
    """Tests for compiled field patterns."""

    def test_patterns_cached(self):
        spec = get_field("geo")
        assert field_pattern(spec) is field_pattern(spec)
        assert field_pattern(spec) is not field_pattern(spec, for_patch=True)

    def test_read_pattern_integer_literal(self):
        assert find_field('"geo":12.5', get_field("geo")) == "12"

    def test_read_pattern_float_literal(self):
        assert find_field('"completionPercentage":12.5', get_field("completionPercentage")) == "12.5"

    def test_ascii_digits_only(self):
        assert find_field('"geo":٣', get_field("geo")) is None

    def test_name_is_literal_text(self):
        assert find_field('"geo":1', get_field("maxSoul")) is None


class TestFindFieldSpans:
    """Tests for byte spans used by the hex view."""

    def test_spans_cover_literals(self):
        data = b'{"geo":120,"soul":7}'
        spans = find_field_spans(data)

        assert [(span.name, span.position, span.length) for span in spans] == [
            ("geo", 7, 3),
            ("soul", 18, 1),
        ]
        assert all(data[s.position:s.position + s.length] == s.literal for s in spans)

    def test_byte_offsets_with_invalid_utf8(self):
        data = b'\xff\xff"geo":5'
        spans = find_field_spans(data)

        assert len(spans) == 1
        assert spans[0].position == 8

    def test_prefix_key_ignored(self):
        assert find_field_spans(b'"geography":5') == []

    def test_malformed_literal_ignored(self):
        assert find_field_spans(b'"geo":1.2.3') == []
        assert find_field_spans(b'"completionPercentage":3..5') == []
