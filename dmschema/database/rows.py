"""Catalog row key-case normalization.

Drivers may return column labels upper-case, lower-case, or as written in
the query. The introspector decides the convention once per session and
normalizes every row to upper-case keys with the function built here.
"""

from enum import Enum
from typing import Any, Callable, Dict, List

Row = Dict[str, Any]


class RowCase(str, Enum):
    """Key case convention of rows returned by the driver."""
    UPPER = "upper"
    LOWER = "lower"
    NATURAL = "natural"


def _identity(row: Row) -> Row:
    return row


def _to_upper(row: Row) -> Row:
    return {key.upper(): value for key, value in row.items()}


def make_row_normalizer(case: RowCase) -> Callable[[Row], Row]:
    """Return a function that gives rows upper-case keys.

    Catalog queries label their columns in upper case, so rows from an
    upper-case or natural-case driver are already canonical.
    """
    if RowCase(case) == RowCase.LOWER:
        return _to_upper
    return _identity


def normalize_rows(rows: List[Row], normalizer: Callable[[Row], Row]) -> List[Row]:
    return [normalizer(row) for row in rows]
