"""Abstract base class for catalog introspection."""

import logging
import threading
from abc import ABC, abstractmethod
from dataclasses import replace
from typing import Dict, List, Optional, Tuple

from .errors import IntrospectionCancelledError, UnsupportedOperationError
from .executor import QueryExecutor
from .models import (
    CheckConstraint,
    Column,
    ConstraintSet,
    ForeignKeyConstraint,
    Index,
    PrimaryKeyConstraint,
    ResolvedName,
    Table,
    UniqueConstraint,
)
from .names import NameResolver, default_schema_for
from .rows import Row, make_row_normalizer, normalize_rows

logger = logging.getLogger(__name__)


class DatabaseIntrospector(ABC):
    """Abstract base class for catalog introspection.

    Subclasses implement the catalog queries; this class assembles their
    results into Table descriptors. No state is kept between calls apart
    from the default schema and the row-case normalizer, both fixed at
    construction.
    """

    # Override in subclasses to exclude system schemas
    EXCLUDED_SCHEMAS: set = set()

    def __init__(self, executor: QueryExecutor, default_schema: Optional[str] = None):
        """Initialize the introspector.

        Args:
            executor: Query executor bound to the catalog connection
            default_schema: Schema for unqualified names. Defaults to the
                session user, upper-cased.
        """
        self.executor = executor
        self.default_schema = default_schema_for(executor.session_identity(), default_schema)
        self.resolver = NameResolver(self.default_schema)
        self._normalize_row = make_row_normalizer(executor.active_row_case())

    def _query(self, sql: str, params: Optional[dict] = None) -> List[Row]:
        """Run a catalog query and normalize the row keys."""
        return normalize_rows(self.executor.execute(sql, params), self._normalize_row)

    def resolve_table_name(self, name: str) -> ResolvedName:
        return self.resolver.resolve(name)

    @abstractmethod
    def get_schemas(self) -> List[str]:
        """Get all user schemas.

        Returns:
            List of schema names (excluding system schemas)
        """
        pass

    @abstractmethod
    def get_tables(self, schema: str = "") -> List[str]:
        """Get all tables, views and materialized views in a schema.

        Args:
            schema: Schema name; empty for the session's own objects

        Returns:
            List of table names
        """
        pass

    @abstractmethod
    def find_columns(self, resolved: ResolvedName) -> Optional[List[Column]]:
        """Get the columns of a table in ordinal order.

        Returns:
            List of Column objects, or None if the table does not exist
        """
        pass

    @abstractmethod
    def find_constraints(self, resolved: ResolvedName) -> ConstraintSet:
        """Get primary key, foreign keys, uniques and checks of a table."""
        pass

    @abstractmethod
    def find_indexes(self, resolved: ResolvedName) -> List[Index]:
        """Get the indexes of a table."""
        pass

    @abstractmethod
    def find_sequence_name(self, table_name: str) -> Optional[str]:
        """Get the sequence feeding a table's auto-increment key, if any."""
        pass

    def _check_cancelled(self, cancel: Optional[threading.Event], resolved: ResolvedName, stage: str):
        if cancel is not None and cancel.is_set():
            raise IntrospectionCancelledError(resolved.full_name, stage)

    def load_table(self, name: str, cancel: Optional[threading.Event] = None) -> Optional[Table]:
        """Introspect one table.

        Args:
            name: Table name, optionally qualified as `schema.table`
            cancel: Event checked before each catalog query

        Returns:
            Table descriptor, or None if the table does not exist

        Raises:
            IntrospectionCancelledError: if cancel is set mid-way
        """
        resolved = self.resolve_table_name(name)
        logger.debug("Loading table %s (schema=%s)", resolved.full_name, resolved.schema_name)

        self._check_cancelled(cancel, resolved, "columns")
        columns = self.find_columns(resolved)
        if columns is None:
            logger.debug("Table %s not found", resolved.full_name)
            return None

        self._check_cancelled(cancel, resolved, "constraints")
        constraints = self.find_constraints(resolved)
        column_map = annotate_primary_key(
            {column.name: column for column in columns}, constraints.primary_key
        )

        sequence_name = None
        if constraints.primary_key is not None:
            self._check_cancelled(cancel, resolved, "sequence")
            sequence_name = self.find_sequence_name(resolved.name)

        self._check_cancelled(cancel, resolved, "indexes")
        indexes = self.find_indexes(resolved)

        pk = constraints.primary_key
        return Table(
            schema_name=resolved.schema_name,
            name=resolved.name,
            full_name=resolved.full_name,
            columns=column_map,
            primary_key=pk.column_names if pk else (),
            foreign_keys={fk.name: fk for fk in constraints.foreign_keys},
            sequence_name=sequence_name,
            primary_key_constraint=pk,
            uniques=constraints.uniques,
            checks=constraints.checks,
            indexes=tuple(indexes),
        )

    def introspect_schema(self, schema: str = "") -> List[Table]:
        """Introspect every table of a schema.

        Tables that disappear between listing and loading are skipped.
        """
        tables = []
        for table_name in self.get_tables(schema):
            qualified = f"{schema}.{table_name}" if schema else table_name
            table = self.load_table(qualified)
            if table is not None:
                tables.append(table)
        return tables

    # Constraint finder API

    def get_table_primary_key(self, name: str) -> Optional[PrimaryKeyConstraint]:
        return self.find_constraints(self.resolve_table_name(name)).primary_key

    def get_table_foreign_keys(self, name: str) -> Tuple[ForeignKeyConstraint, ...]:
        return self.find_constraints(self.resolve_table_name(name)).foreign_keys

    def get_table_uniques(self, name: str) -> Tuple[UniqueConstraint, ...]:
        return self.find_constraints(self.resolve_table_name(name)).uniques

    def get_table_checks(self, name: str) -> Tuple[CheckConstraint, ...]:
        return self.find_constraints(self.resolve_table_name(name)).checks

    def get_table_indexes(self, name: str) -> List[Index]:
        return self.find_indexes(self.resolve_table_name(name))

    def get_table_default_values(self, name: str):
        """Default value constraints are not supported by default."""
        raise UnsupportedOperationError(
            f"{type(self).__name__} does not support default value constraints.",
            details={"table": name},
        )

    def close(self):
        """Close the executor if it owns a connection."""
        close = getattr(self.executor, "close", None)
        if close is not None:
            close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


def annotate_primary_key(
    columns: Dict[str, Column], primary_key: Optional[PrimaryKeyConstraint]
) -> Dict[str, Column]:
    """Mark primary key columns, dropping any default they carried.

    Returns a new ordered mapping; columns missing from the mapping are
    ignored.
    """
    if primary_key is None:
        return dict(columns)

    annotated = dict(columns)
    for column_name in primary_key.column_names:
        column = annotated.get(column_name)
        if column is None:
            logger.warning("Primary key %s names unknown column %s", primary_key.name, column_name)
            continue
        if not column.is_primary_key or column.default_value is not None:
            annotated[column_name] = replace(column, is_primary_key=True, default_value=None)
    return annotated
