"""Constraint resolution over constraint catalog rows.

Rows come from a single query joining constraints, their columns, and the
(optional) referenced constraint and columns at the same position. Each
row is tagged with a constraint type:

    P  primary key
    R  foreign key (references another constraint)
    U  unique
    C  check

Some catalogs report other tags with a referenced constraint filled in,
so the tag alone decides what a row is.
"""

import logging
from collections import OrderedDict
from typing import Dict, List, Tuple

from .errors import AmbiguousPrimaryKeyError, InconsistentForeignKeyError
from .models import (
    CheckConstraint,
    ConstraintSet,
    ForeignKeyConstraint,
    PrimaryKeyConstraint,
    UniqueConstraint,
)
from .rows import Row
from .type_mappers import parse_facet

logger = logging.getLogger(__name__)

PRIMARY = "P"
FOREIGN = "R"
UNIQUE = "U"
CHECK = "C"

CONSTRAINT_TYPES = (PRIMARY, FOREIGN, UNIQUE, CHECK)


def group_constraint_rows(rows: List[Row]) -> "OrderedDict[Tuple[str, str], List[Row]]":
    """Group rows by (type, name), each group ordered by position.

    Rows with an unknown type tag are dropped.
    """
    groups: "OrderedDict[Tuple[str, str], List[Row]]" = OrderedDict()
    for row in rows:
        constraint_type = row.get("CONSTRAINT_TYPE")
        if constraint_type not in CONSTRAINT_TYPES:
            logger.debug(
                "Skipping constraint row %s with type %r",
                row.get("CONSTRAINT_NAME"),
                constraint_type,
            )
            continue
        groups.setdefault((constraint_type, row["CONSTRAINT_NAME"]), []).append(row)

    for group in groups.values():
        group.sort(key=lambda r: parse_facet(r.get("POSITION"), "position") or 0)
    return groups


def _build_foreign_key(table_name: str, name: str, group: List[Row]) -> ForeignKeyConstraint:
    # A referenced constraint the session cannot see leaves the joined
    # columns NULL; the foreign key is kept with an unknown target.
    first = group[0]
    foreign_schema = first.get("FOREIGN_TABLE_SCHEMA")
    foreign_table = first.get("FOREIGN_TABLE_NAME")

    for row in group[1:]:
        if row.get("FOREIGN_TABLE_SCHEMA") != foreign_schema or row.get("FOREIGN_TABLE_NAME") != foreign_table:
            raise InconsistentForeignKeyError(
                table_name,
                name,
                {
                    "expected": f"{foreign_schema}.{foreign_table}",
                    "found": f"{row.get('FOREIGN_TABLE_SCHEMA')}.{row.get('FOREIGN_TABLE_NAME')}",
                },
            )

    if foreign_table is None:
        logger.debug("Referenced side of foreign key %s on %s is not visible", name, table_name)

    return ForeignKeyConstraint(
        name=name,
        column_names=tuple(r["COLUMN_NAME"] for r in group),
        foreign_schema_name=foreign_schema,
        foreign_table_name=foreign_table,
        foreign_column_names=tuple(r.get("FOREIGN_COLUMN_NAME") for r in group),
        on_delete=first.get("ON_DELETE"),
        on_update=None,
    )


def resolve_constraints(table_name: str, rows: List[Row]) -> ConstraintSet:
    """Classify normalized constraint rows into a ConstraintSet.

    Args:
        table_name: Table the rows belong to (for error messages)
        rows: Rows with upper-case keys

    Returns:
        ConstraintSet with primary key, foreign keys, uniques and checks

    Raises:
        AmbiguousPrimaryKeyError: if more than one primary key group exists
        InconsistentForeignKeyError: if rows of one foreign key reference different tables
    """
    groups = group_constraint_rows(rows)

    primary_keys: List[PrimaryKeyConstraint] = []
    foreign_keys: List[ForeignKeyConstraint] = []
    uniques: List[UniqueConstraint] = []
    checks: List[CheckConstraint] = []

    for (constraint_type, name), group in groups.items():
        column_names = tuple(r["COLUMN_NAME"] for r in group)
        if constraint_type == PRIMARY:
            primary_keys.append(PrimaryKeyConstraint(name=name, column_names=column_names))
        elif constraint_type == FOREIGN:
            foreign_keys.append(_build_foreign_key(table_name, name, group))
        elif constraint_type == UNIQUE:
            uniques.append(UniqueConstraint(name=name, column_names=column_names))
        else:
            checks.append(CheckConstraint(
                name=name,
                column_names=column_names,
                expression=group[0].get("CHECK_EXPR"),
            ))

    if len(primary_keys) > 1:
        raise AmbiguousPrimaryKeyError(table_name, [pk.name for pk in primary_keys])

    return ConstraintSet(
        primary_key=primary_keys[0] if primary_keys else None,
        foreign_keys=tuple(foreign_keys),
        uniques=tuple(uniques),
        checks=tuple(checks),
    )


def group_index_rows(rows: List[Row]) -> Dict[str, List[Row]]:
    """Group index rows by index name, keeping catalog order."""
    groups: Dict[str, List[Row]] = OrderedDict()
    for row in rows:
        groups.setdefault(row["INDEX_NAME"], []).append(row)
    return groups
