"""Catalog introspection module for dmschema.

This module turns DM catalog rows into Table descriptors: columns with
portable types, primary and foreign keys, unique and check constraints,
and indexes.
"""

from .models import (
    PortableType,
    GeneratedExpression,
    GENERATED_EXPRESSION,
    ResolvedName,
    Column,
    PrimaryKeyConstraint,
    ForeignKeyConstraint,
    UniqueConstraint,
    CheckConstraint,
    Constraint,
    ConstraintSet,
    Index,
    Table,
)
from .errors import (
    SchemaError,
    CatalogQueryFailedError,
    IntegrityError,
    MalformedFacetError,
    AmbiguousPrimaryKeyError,
    InconsistentForeignKeyError,
    UnsupportedOperationError,
    IntrospectionCancelledError,
)
from .rows import RowCase
from .names import NameResolver, quote_simple_table_name
from .type_mappers import TypeMapper, DamengTypeMapper
from .executor import QueryExecutor, DBAPIExecutor, connect_dm
from .base import DatabaseIntrospector
from .dameng import DamengIntrospector
from .cache import SchemaCache

__all__ = [
    # Data models
    "PortableType",
    "GeneratedExpression",
    "GENERATED_EXPRESSION",
    "ResolvedName",
    "Column",
    "PrimaryKeyConstraint",
    "ForeignKeyConstraint",
    "UniqueConstraint",
    "CheckConstraint",
    "Constraint",
    "ConstraintSet",
    "Index",
    "Table",
    # Errors
    "SchemaError",
    "CatalogQueryFailedError",
    "IntegrityError",
    "MalformedFacetError",
    "AmbiguousPrimaryKeyError",
    "InconsistentForeignKeyError",
    "UnsupportedOperationError",
    "IntrospectionCancelledError",
    # Names and rows
    "RowCase",
    "NameResolver",
    "quote_simple_table_name",
    # Type mappers
    "TypeMapper",
    "DamengTypeMapper",
    # Execution
    "QueryExecutor",
    "DBAPIExecutor",
    "connect_dm",
    # Introspectors
    "DatabaseIntrospector",
    "DamengIntrospector",
    "SchemaCache",
]
