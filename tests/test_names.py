"""Tests for table name resolution and quoting."""

import pytest

from dmschema.database import NameResolver, ResolvedName, quote_simple_table_name
from dmschema.database.names import default_schema_for


class TestResolve:
    """Test splitting names into schema and table."""

    def test_bare_name_uses_default_schema(self):
        resolver = NameResolver("ADMIN")
        assert resolver.resolve("T") == ResolvedName(schema_name="ADMIN", name="T", full_name="T")

    def test_qualified_name(self):
        resolver = NameResolver("ADMIN")
        assert resolver.resolve("OTHER.T") == ResolvedName(
            schema_name="OTHER", name="T", full_name="OTHER.T"
        )

    def test_qualified_with_default_schema_displays_bare(self):
        resolver = NameResolver("ADMIN")
        resolved = resolver.resolve("ADMIN.T")
        assert resolved.schema_name == "ADMIN"
        assert resolved.full_name == "T"

    def test_quotes_are_stripped(self):
        resolver = NameResolver("ADMIN")
        resolved = resolver.resolve('"SALES"."Orders"')
        assert resolved.schema_name == "SALES"
        assert resolved.name == "Orders"

    def test_quoted_bare_name(self):
        resolver = NameResolver("ADMIN")
        assert resolver.resolve('"Orders"').name == "Orders"

    def test_splits_on_first_dot(self):
        resolver = NameResolver("ADMIN")
        resolved = resolver.resolve("A.B.C")
        assert resolved.schema_name == "A"
        assert resolved.name == "B.C"

    def test_empty_default_schema(self):
        resolver = NameResolver("")
        resolved = resolver.resolve("T")
        assert resolved.schema_name == ""
        assert resolved.full_name == "T"

    def test_resolvers_with_different_defaults_are_independent(self):
        first = NameResolver("ADMIN")
        second = NameResolver("OTHER")
        assert first.resolve("OTHER.T").full_name == "OTHER.T"
        assert second.resolve("OTHER.T").full_name == "T"


class TestDisplayName:

    def test_display_name(self):
        resolver = NameResolver("ADMIN")
        assert resolver.display_name(ResolvedName("ADMIN", "T", "T")) == "T"
        assert resolver.display_name(ResolvedName("OTHER", "T", "OTHER.T")) == "OTHER.T"


class TestDefaultSchema:
    """Test default schema derivation from session identity."""

    def test_identity_is_upper_cased(self):
        assert default_schema_for("admin") == "ADMIN"

    def test_configured_schema_wins(self):
        assert default_schema_for("admin", "SALES") == "SALES"

    @pytest.mark.parametrize("identity", [None, ""])
    def test_missing_identity_gives_empty_schema(self, identity):
        assert default_schema_for(identity) == ""


class TestQuoting:

    def test_quotes_plain_name(self):
        assert quote_simple_table_name("ORDERS") == '"ORDERS"'

    def test_already_quoted(self):
        assert quote_simple_table_name('"ORDERS"') == '"ORDERS"'
