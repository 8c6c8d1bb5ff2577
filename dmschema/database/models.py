"""Database data models for catalog introspection."""

from typing import Optional, List, Dict, Tuple, Union, Any
from dataclasses import dataclass, field
from enum import Enum


class PortableType(str, Enum):
    """Dialect-independent column type categories."""
    INTEGER = "integer"
    DOUBLE = "double"
    DECIMAL = "decimal"
    STRING = "string"
    TEXT = "text"
    BINARY = "binary"
    TIMESTAMP = "timestamp"


class GeneratedExpression:
    """Default value computed by the database at write time."""

    def __init__(self, expression: str):
        self.expression = expression

    def __eq__(self, other):
        return isinstance(other, GeneratedExpression) and other.expression == self.expression

    def __hash__(self):
        return hash(("GeneratedExpression", self.expression))

    def __repr__(self):
        return f"GeneratedExpression({self.expression!r})"

    def __str__(self):
        return self.expression


GENERATED_EXPRESSION = GeneratedExpression("CURRENT_TIMESTAMP")


@dataclass(frozen=True)
class ResolvedName:
    """A table name split into schema and local name."""
    schema_name: str
    name: str
    full_name: str


@dataclass(frozen=True)
class Column:
    """Represents a table column as described by the catalog."""
    name: str
    type: PortableType
    db_type: str
    size: Optional[int] = None
    precision: Optional[int] = None
    scale: Optional[int] = None
    allow_null: bool = True
    is_primary_key: bool = False
    auto_increment: bool = False
    default_value: Any = None
    comment: str = ""


@dataclass(frozen=True)
class PrimaryKeyConstraint:
    """Primary key of a table."""
    name: str
    column_names: Tuple[str, ...] = ()


@dataclass(frozen=True)
class ForeignKeyConstraint:
    """Foreign key; column_names[i] references foreign_column_names[i].

    The referenced side is None when the catalog hides the referenced
    constraint from this session.
    """
    name: str
    column_names: Tuple[str, ...] = ()
    foreign_schema_name: Optional[str] = None
    foreign_table_name: Optional[str] = None
    foreign_column_names: Tuple[Optional[str], ...] = ()
    on_delete: Optional[str] = None
    on_update: Optional[str] = None


@dataclass(frozen=True)
class UniqueConstraint:
    """Unique constraint over one or more columns."""
    name: str
    column_names: Tuple[str, ...] = ()


@dataclass(frozen=True)
class CheckConstraint:
    """Check constraint with its search condition."""
    name: str
    column_names: Tuple[str, ...] = ()
    expression: Optional[str] = None


Constraint = Union[PrimaryKeyConstraint, ForeignKeyConstraint, UniqueConstraint, CheckConstraint]


@dataclass(frozen=True)
class ConstraintSet:
    """All constraints of a table, classified by kind."""
    primary_key: Optional[PrimaryKeyConstraint] = None
    foreign_keys: Tuple[ForeignKeyConstraint, ...] = ()
    uniques: Tuple[UniqueConstraint, ...] = ()
    checks: Tuple[CheckConstraint, ...] = ()


@dataclass(frozen=True)
class Index:
    """Represents an index on a table."""
    name: str
    column_names: Tuple[str, ...] = ()
    is_unique: bool = False
    is_primary: bool = False


@dataclass(frozen=True)
class Table:
    """Represents a fully introspected table or view."""
    schema_name: str
    name: str
    full_name: str
    columns: Dict[str, Column] = field(default_factory=dict)
    primary_key: Tuple[str, ...] = ()
    foreign_keys: Dict[str, ForeignKeyConstraint] = field(default_factory=dict)
    sequence_name: Optional[str] = None
    primary_key_constraint: Optional[PrimaryKeyConstraint] = None
    uniques: Tuple[UniqueConstraint, ...] = ()
    checks: Tuple[CheckConstraint, ...] = ()
    indexes: Tuple[Index, ...] = ()

    def get_column(self, name: str) -> Optional[Column]:
        """Find a column by name."""
        return self.columns.get(name)

    @property
    def column_names(self) -> List[str]:
        return list(self.columns)

    def to_dict(self) -> Dict[str, Any]:
        """Convert the table description to a JSON-friendly dictionary."""

        def _default(value):
            if isinstance(value, GeneratedExpression):
                return {"expression": value.expression}
            return value

        return {
            "schema": self.schema_name,
            "name": self.name,
            "full_name": self.full_name,
            "sequence_name": self.sequence_name,
            "primary_key": list(self.primary_key),
            "columns": [
                {
                    "name": c.name,
                    "type": c.type.value,
                    "db_type": c.db_type,
                    "size": c.size,
                    "precision": c.precision,
                    "scale": c.scale,
                    "allow_null": c.allow_null,
                    "is_primary_key": c.is_primary_key,
                    "auto_increment": c.auto_increment,
                    "default_value": _default(c.default_value),
                    "comment": c.comment,
                }
                for c in self.columns.values()
            ],
            "foreign_keys": [
                {
                    "name": fk.name,
                    "columns": list(fk.column_names),
                    "foreign_schema": fk.foreign_schema_name,
                    "foreign_table": fk.foreign_table_name,
                    "foreign_columns": list(fk.foreign_column_names),
                    "on_delete": fk.on_delete,
                }
                for fk in self.foreign_keys.values()
            ],
            "uniques": [
                {"name": u.name, "columns": list(u.column_names)} for u in self.uniques
            ],
            "checks": [
                {"name": c.name, "columns": list(c.column_names), "expression": c.expression}
                for c in self.checks
            ],
            "indexes": [
                {
                    "name": i.name,
                    "columns": list(i.column_names),
                    "is_unique": i.is_unique,
                    "is_primary": i.is_primary,
                }
                for i in self.indexes
            ],
        }
