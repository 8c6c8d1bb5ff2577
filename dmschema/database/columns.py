"""Column descriptor construction from catalog rows."""

from typing import Any, Optional

from .models import Column, GENERATED_EXPRESSION, PortableType
from .rows import Row
from .type_mappers import TypeMapper


def strip_default_literal(value: Optional[str]) -> Optional[str]:
    """Remove one pair of surrounding single quotes, or trim whitespace."""
    if value is None:
        return None
    if len(value) > 2 and value.startswith("'") and value.endswith("'"):
        return value[1:-1]
    return value.strip()


def extract_default(column_type: PortableType, raw_default: Optional[str], type_mapper: TypeMapper) -> Any:
    """Turn the catalog's DATA_DEFAULT text into a default value.

    CURRENT_TIMESTAMP on a timestamp column becomes a generated expression.
    Any other default mentioning "timestamp" is treated as absent, which also
    drops string literals that happen to contain the word. An unquoted NULL
    means no default.
    """
    if column_type == PortableType.TIMESTAMP and raw_default == "CURRENT_TIMESTAMP":
        return GENERATED_EXPRESSION
    if raw_default is None:
        return None
    raw_default = str(raw_default)
    if "timestamp" in raw_default.lower():
        return None
    if raw_default.strip().upper() == "NULL":
        return None
    return type_mapper.typecast(column_type, strip_default_literal(raw_default))


def _flag(value: Any) -> bool:
    return str(value) == "1"


def build_column(row: Row, type_mapper: TypeMapper) -> Column:
    """Create a Column from a normalized columns-query row."""
    db_type = row["DATA_TYPE"]
    mapped = type_mapper.map_type(
        db_type, row.get("DATA_PRECISION"), row.get("DATA_SCALE"), row.get("DATA_LENGTH")
    )
    is_primary_key = _flag(row.get("IS_PRIMARY_KEY"))

    default_value = None
    if not is_primary_key:
        default_value = extract_default(mapped.type, row.get("DATA_DEFAULT"), type_mapper)

    comment = row.get("COLUMN_COMMENT")
    return Column(
        name=row["COLUMN_NAME"],
        type=mapped.type,
        db_type=db_type,
        size=mapped.size,
        precision=mapped.precision,
        scale=mapped.scale,
        allow_null=row.get("NULLABLE") == "Y",
        is_primary_key=is_primary_key,
        auto_increment=_flag(row.get("IS_INCREMENT")),
        default_value=default_value,
        comment="" if comment is None else comment,
    )
