"""Tests for DM type mapping and facet parsing."""

import pytest

from dmschema.database import DamengTypeMapper, GeneratedExpression, MalformedFacetError, PortableType
from dmschema.database.type_mappers import parse_facet


@pytest.fixture
def mapper():
    return DamengTypeMapper()


class TestPortableTypeClassification:
    """Test raw type to portable type mapping."""

    @pytest.mark.parametrize("db_type,scale,expected", [
        ("FLOAT", None, PortableType.DOUBLE),
        ("DOUBLE PRECISION", None, PortableType.DOUBLE),
        ("NUMBER", 0, PortableType.INTEGER),
        ("NUMBER", None, PortableType.INTEGER),
        ("NUMBER", 2, PortableType.DECIMAL),
        ("INTEGER", None, PortableType.INTEGER),
        ("BLOB", None, PortableType.BINARY),
        ("CLOB", None, PortableType.TEXT),
        ("TIMESTAMP", None, PortableType.TIMESTAMP),
        ("TIMESTAMP WITH TIME ZONE", None, PortableType.TIMESTAMP),
        ("VARCHAR2", None, PortableType.STRING),
        ("DATE", None, PortableType.STRING),
    ])
    def test_classification(self, mapper, db_type, scale, expected):
        assert mapper.to_portable_type(db_type, scale) == expected

    def test_number_wins_over_timestamp(self, mapper):
        """A type naming both NUMBER and TIMESTAMP is numeric."""
        assert mapper.to_portable_type("NUMBER_TIMESTAMP", 0) == PortableType.INTEGER
        assert mapper.to_portable_type("TIMESTAMP_NUMBER", 3) == PortableType.DECIMAL

    def test_float_wins_over_number(self, mapper):
        assert mapper.to_portable_type("FLOAT_NUMBER", 2) == PortableType.DOUBLE

    def test_clob_checked_after_blob(self, mapper):
        assert mapper.to_portable_type("BLOB_CLOB", None) == PortableType.BINARY

    def test_matching_is_case_sensitive(self, mapper):
        """Catalog type names are upper case; lower-case text falls through."""
        assert mapper.to_portable_type("number", 2) == PortableType.STRING


class TestMapType:
    """Test the full (type, size, precision, scale) mapping."""

    def test_string_facets_are_parsed(self, mapper):
        mapped = mapper.map_type("NUMBER", "12", "2", "22")
        assert mapped.type == PortableType.DECIMAL
        assert mapped.size == 22
        assert mapped.precision == 12
        assert mapped.scale == 2

    def test_blank_facets_are_absent(self, mapper):
        mapped = mapper.map_type("VARCHAR2", " ", "", "100")
        assert mapped.type == PortableType.STRING
        assert mapped.size == 100
        assert mapped.precision is None
        assert mapped.scale is None

    def test_int_facets_pass_through(self, mapper):
        mapped = mapper.map_type("NUMBER", 10, 0, 22)
        assert mapped == (PortableType.INTEGER, 22, 10, 0)

    def test_malformed_facet_raises(self, mapper):
        with pytest.raises(MalformedFacetError) as exc_info:
            mapper.map_type("NUMBER", "ten", "0", "22")
        assert exc_info.value.code == "MALFORMED_FACET"
        assert exc_info.value.facet == "precision"


class TestParseFacet:
    """Test facet parsing edge cases."""

    def test_none(self):
        assert parse_facet(None) is None

    def test_whitespace_only(self):
        assert parse_facet("   ") is None

    def test_surrounding_whitespace(self):
        assert parse_facet(" 7 ") == 7

    def test_negative_values_are_not_validated(self):
        assert parse_facet("-84") == -84

    def test_decimal_text_is_malformed(self):
        with pytest.raises(MalformedFacetError):
            parse_facet("12.5", "length")


class TestTypecast:
    """Test conversion of default literals to portable values."""

    def test_integer(self, mapper):
        assert mapper.typecast(PortableType.INTEGER, "42") == 42

    def test_double(self, mapper):
        assert mapper.typecast(PortableType.DOUBLE, "1.5") == 1.5

    def test_decimal_stays_text(self, mapper):
        assert mapper.typecast(PortableType.DECIMAL, "0.10") == "0.10"

    def test_empty_string_is_null_for_numbers(self, mapper):
        assert mapper.typecast(PortableType.INTEGER, "") is None
        assert mapper.typecast(PortableType.TIMESTAMP, "") is None

    def test_empty_string_kept_for_strings(self, mapper):
        assert mapper.typecast(PortableType.STRING, "") == ""
        assert mapper.typecast(PortableType.TEXT, "") == ""

    def test_none(self, mapper):
        assert mapper.typecast(PortableType.STRING, None) is None

    def test_non_numeric_integer_default_is_expression(self, mapper):
        """Sequence calls and arithmetic are evaluated by the database."""
        assert mapper.typecast(PortableType.INTEGER, "SEQ.NEXTVAL") == GeneratedExpression("SEQ.NEXTVAL")
        assert mapper.typecast(PortableType.DOUBLE, "1+1") == GeneratedExpression("1+1")
