"""Tests for description field parsing."""

from calendar_site.parsing.description import (
    first_field,
    normalize_markup,
    parse_description,
)


class TestNormalizeMarkup:
    """Tests for markup normalization."""

    def test_break_tags_become_newlines(self):
        """Test all <br> variants, in any case, become newlines."""
        assert normalize_markup("a<br>b<BR/>c<br />d") == "a\nb\nc\nd"

    def test_other_tags_are_stripped(self):
        """Test non-break tags are removed but their text kept."""
        assert normalize_markup("<b>Speaker:</b> <a href='x'>Jane</a>") == "Speaker: Jane"

    def test_entities_are_unescaped(self):
        """Test the four standard entities are unescaped."""
        assert normalize_markup("A &amp; B &lt;C&gt; &quot;D&quot;") == 'A & B <C> "D"'

    def test_double_escaped_ampersand(self):
        """Test &amp; is decoded before the other entities."""
        assert normalize_markup("&amp;lt;") == "<"

    def test_other_entities_untouched(self):
        """Test entities outside the standard four are left alone."""
        assert normalize_markup("caf&eacute;&nbsp;") == "caf&eacute;&nbsp;"

    def test_windows_line_endings(self):
        """Test CRLF and CR line endings become LF."""
        assert normalize_markup("a\r\nb\rc") == "a\nb\nc"


class TestParseDescription:
    """Tests for the "Key: Value" field scanner."""

    def test_empty_and_none(self):
        """Test empty input yields no fields."""
        assert parse_description(None) == {}
        assert parse_description("") == {}

    def test_simple_fields(self):
        """Test one field per line."""
        fields = parse_description(
            "Speaker: Jane Doe\nAffiliation: Example University\nURL: https://example.org"
        )
        assert fields == {
            "speaker": "Jane Doe",
            "affiliation": "Example University",
            "url": "https://example.org",
        }

    def test_keys_are_lowercased_and_values_trimmed(self):
        """Test key case and surrounding whitespace are normalized."""
        fields = parse_description("FACILITATOR:    Sam Lee   ")
        assert fields == {"facilitator": "Sam Lee"}

    def test_multiline_value(self):
        """Test lines without a label continue the previous field."""
        fields = parse_description(
            "Abstract: First line.\nSecond line.\n\nThird paragraph.\nBio: Short bio"
        )
        assert fields["abstract"] == "First line.\nSecond line.\n\nThird paragraph."
        assert fields["bio"] == "Short bio"

    def test_value_may_start_on_next_line(self):
        """Test an empty value on the label line picks up following lines."""
        fields = parse_description("Summary:\nWe will draft section 2.")
        assert fields["summary"] == "We will draft section 2."

    def test_text_before_first_field_is_dropped(self):
        """Test preamble lines are ignored."""
        fields = parse_description("Join us for this week's talk!\nSpeaker: Jane")
        assert fields == {"speaker": "Jane"}

    def test_no_fields(self):
        """Test free text without labels yields no fields."""
        assert parse_description("Just a note about the room change.") == {}

    def test_last_duplicate_wins(self):
        """Test repeated labels keep the last value."""
        fields = parse_description("Speaker: First\nSpeaker: Second")
        assert fields == {"speaker": "Second"}

    def test_numeric_label_is_continuation(self):
        """Test "2024: results" is not a field start."""
        fields = parse_description("Summary: Review of\n2024: results")
        assert fields == {"summary": "Review of\n2024: results"}

    def test_numeric_label_before_any_field_is_dropped(self):
        """Test a non-field line with no active field is discarded."""
        assert parse_description("2024: results") == {}

    def test_label_must_be_letters_only(self):
        """Test labels with spaces, digits or dashes are not fields."""
        fields = parse_description("Paper: Title\nReading List: later\nCo-Author: X")
        assert fields == {"paper": "Title\nReading List: later\nCo-Author: X"}

    def test_url_value_keeps_colons(self):
        """Test only the first colon separates label and value."""
        fields = parse_description("Link: https://doi.org/10.1145/123")
        assert fields["link"] == "https://doi.org/10.1145/123"

    def test_html_description(self):
        """Test descriptions edited in the calendar web UI."""
        description = (
            "<b>Paper:</b> Attention Is All You Need<br>"
            "Authors: Vaswani et al.<br/>"
            "Summary: Transformers &amp; why they work<br>second line"
        )
        fields = parse_description(description)
        assert fields == {
            "paper": "Attention Is All You Need",
            "authors": "Vaswani et al.",
            "summary": "Transformers & why they work\nsecond line",
        }

    def test_parsing_is_idempotent(self):
        """Test parsing the same description twice gives equal results."""
        description = "Speaker: Jane<br>Abstract: One\ntwo\nBio: Three"
        assert parse_description(description) == parse_description(description)


class TestFirstField:
    """Tests for priority lookup of fields."""

    def test_priority_order(self):
        """Test the first present name wins."""
        fields = {"lead": "B", "leader": "C"}
        assert first_field(fields, "facilitator", "lead", "leader") == "B"

    def test_empty_values_are_skipped(self):
        """Test empty values fall through to the next name."""
        fields = {"facilitator": "", "leader": "C"}
        assert first_field(fields, "facilitator", "lead", "leader") == "C"

    def test_none_when_missing(self):
        """Test None when no name is present."""
        assert first_field({}, "summary", "goal") is None
