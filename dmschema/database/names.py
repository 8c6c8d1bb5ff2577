"""Qualified table name resolution."""

from typing import Optional

from .models import ResolvedName


def default_schema_for(identity: Optional[str], configured: Optional[str] = None) -> str:
    """Derive the default schema for a session.

    An explicitly configured schema wins. Otherwise the session user,
    upper-cased, is the schema; with no identity the default is empty and
    callers have to qualify every name.
    """
    if configured:
        return configured
    if not identity:
        return ""
    return identity.upper()


class NameResolver:
    """Resolves `schema.table` or bare `table` names against a default schema."""

    def __init__(self, default_schema: str = ""):
        self.default_schema = default_schema

    def resolve(self, raw_name: str) -> ResolvedName:
        """Split a possibly qualified name into schema and local name."""
        stripped = raw_name.replace('"', "")
        parts = stripped.split(".", 1)
        if len(parts) == 2:
            schema_name, name = parts
        else:
            schema_name, name = self.default_schema, stripped

        full_name = self.display_name_for(schema_name, name)
        return ResolvedName(schema_name=schema_name, name=name, full_name=full_name)

    def display_name(self, resolved: ResolvedName) -> str:
        """Build the display form of a resolved name."""
        return self.display_name_for(resolved.schema_name, resolved.name)

    def display_name_for(self, schema_name: str, name: str) -> str:
        if schema_name != self.default_schema:
            return f"{schema_name}.{name}"
        return name


def quote_simple_table_name(name: str) -> str:
    """Quote a table name unless it already contains quotes."""
    return name if '"' in name else f'"{name}"'
