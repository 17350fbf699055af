"""
Unit tests for the METADATA.pb parser.

Includes property-based testing with hypothesis for first-wins lookups.
"""

import pytest
from hypothesis import given
from hypothesis import strategies as st

from fontcatalog.core.models import FontBasics
from fontcatalog.core.parsing import MetadataParser
from fontcatalog.core.parsing.metadata_parser import unquote

VALUES = st.from_regex(r"[A-Za-z0-9][A-Za-z0-9 .,()-]{0,30}[A-Za-z0-9]", fullmatch=True)
KEYS = st.from_regex(r"[a-z][a-z_]{0,15}", fullmatch=True)


@pytest.mark.unit
class TestParseRaw:
    """Tests for MetadataParser.parse_raw"""

    def test_pairs_in_document_order(self):
        """Test that key/value pairs keep file order and lose their quotes"""
        raw = MetadataParser().parse_raw('name: "Aclonica"\ndesigner: \'Astigmatic\'\nweight: 400\n')

        assert raw.fields == [("name", "Aclonica"), ("designer", "Astigmatic"), ("weight", "400")]

    def test_skips_blank_and_comment_lines(self):
        """Test that blank lines and # comments are ignored"""
        raw = MetadataParser().parse_raw('# header comment\n\n   \nname: "Lobster"\n')

        assert raw.fields == [("name", "Lobster")]

    def test_value_keeps_inner_colons(self):
        """Test that only the first colon splits key and value"""
        raw = MetadataParser().parse_raw('copyright: "Copyright 2011 https://example.com: all rights"\n')

        assert raw.get("copyright") == "Copyright 2011 https://example.com: all rights"

    def test_escaped_quotes_are_resolved(self):
        """Test that an escaped quote at the end of a value survives unquoting"""
        raw = MetadataParser().parse_raw(
            'copyright: "Copyright 2011 with Reserved Font Name \\"Bar\\""\n'
            'description: "C:\\\\fonts"\n'
        )

        assert raw.get("copyright") == 'Copyright 2011 with Reserved Font Name "Bar"'
        assert raw.get("description") == "C:\\fonts"

    @pytest.mark.parametrize(
        "value,expected",
        [
            ('"Lobster"', "Lobster"),
            ("'Lobster'", "Lobster"),
            ('""', ""),
            ('"\'quoted\'"', "'quoted'"),
            ("400", "400"),
            ('"unbalanced', '"unbalanced'),
        ],
    )
    def test_unquote(self, value, expected):
        assert unquote(value) == expected

    def test_blocks_are_collected(self):
        """Test that brace-delimited sub-blocks are captured with their fields"""
        content = (
            'name: "Roboto"\n'
            "fonts {\n"
            '  filename: "Roboto-Regular.ttf"\n'
            "}\n"
            "fonts {\n"
            '  filename: "Roboto-Bold.ttf"\n'
            "}\n"
        )
        raw = MetadataParser().parse_raw(content)

        assert len(raw.blocks) == 2
        assert raw.block_values("fonts", "filename") == ["Roboto-Regular.ttf", "Roboto-Bold.ttf"]

    def test_unterminated_block_is_kept(self):
        """Test that a block without a closing brace still yields its fields"""
        raw = MetadataParser().parse_raw('fonts {\n  filename: "A.ttf"\n')

        assert raw.block_values("fonts", "filename") == ["A.ttf"]

    def test_subsets_accumulate(self):
        """Test that every subsets value is kept"""
        raw = MetadataParser().parse_raw('subsets: "latin"\nsubsets: "latin-ext"\nsubsets: "menu"\n')

        assert raw.subsets == ["latin", "latin-ext", "menu"]
        assert raw.get("subsets") == "latin"

    def test_lines_without_colon_are_ignored(self):
        """Test that stray lines do not produce pairs"""
        raw = MetadataParser().parse_raw('garbage line\nname: "Ok"\n')

        assert raw.fields == [("name", "Ok")]

    @given(key=KEYS, first=VALUES, second=VALUES)
    def test_first_occurrence_wins(self, key, first, second):
        """Property: a repeated key resolves to its first value"""
        raw = MetadataParser().parse_raw(f'{key}: "{first}"\n{key}: "{second}"\n')

        assert raw.get(key) == first


@pytest.mark.unit
class TestParse:
    """Tests for MetadataParser.parse"""

    def test_parses_basics(self):
        """Test deriving FontBasics from a typical file"""
        content = (
            'name: "Aclonica"\n'
            'designer: "Astigmatic"\n'
            'license: "APACHE2"\n'
            'category: "DISPLAY"\n'
            'date_added: "2011-05-04"\n'
            "fonts {\n"
            '  name: "Aclonica"\n'
            '  copyright: "Copyright (c) 2010, Astigmatic"\n'
            "}\n"
            'stroke: "SANS_SERIF"\n'
        )
        basics = MetadataParser().parse(content)

        assert basics == FontBasics(
            name="Aclonica",
            category="DISPLAY",
            copyright="Copyright (c) 2010, Astigmatic",
            designer="Astigmatic",
            license="APACHE2",
            stroke="SANS_SERIF",
            year=2011,
        )

    def test_block_name_does_not_override_family_name(self):
        """Test that the top-level name wins over names inside font blocks"""
        content = 'name: "Family"\nfonts {\n  name: "Family Bold"\n}\n'

        assert MetadataParser().parse(content).name == "Family"

    def test_missing_name_returns_none(self):
        """Test that a record without a name is rejected"""
        assert MetadataParser().parse('designer: "Someone"\n') is None

    def test_empty_name_returns_none(self):
        """Test that an empty name is rejected"""
        assert MetadataParser().parse('name: ""\n') is None

    def test_empty_content_returns_none(self):
        """Test that empty content is rejected"""
        assert MetadataParser().parse("") is None

    @pytest.mark.parametrize(
        "date_value,expected",
        [
            ("2011-05-04", 2011),
            ("1999", 1999),
            ("20", None),
            ("unknown", None),
        ],
    )
    def test_year_from_date_prefix(self, date_value, expected):
        """Test that the year is the four-digit prefix of the date field"""
        basics = MetadataParser().parse(f'name: "X"\ndate_added: "{date_value}"\n')

        assert basics.year == expected

    def test_missing_date_gives_no_year(self):
        """Test that the year is None without a date field"""
        assert MetadataParser().parse('name: "X"\n').year is None

    def test_custom_date_field(self):
        """Test reading the year from a configured key"""
        basics = MetadataParser(date_field="released").parse('name: "X"\nreleased: "2020-02-02"\n')

        assert basics.year == 2020

    @given(first=VALUES, second=VALUES)
    def test_name_first_wins(self, first, second):
        """Property: the first name line is the family name"""
        basics = MetadataParser().parse(f'name: "{first}"\nname: "{second}"\n')

        assert basics.name == first
