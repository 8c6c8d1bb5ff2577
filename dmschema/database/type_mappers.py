"""Database-specific type mapping strategies."""

from abc import ABC, abstractmethod
from typing import Any, NamedTuple, Optional

from .errors import MalformedFacetError
from .models import GeneratedExpression, PortableType


class MappedType(NamedTuple):
    """Result of mapping a raw catalog type."""
    type: PortableType
    size: Optional[int]
    precision: Optional[int]
    scale: Optional[int]


def parse_facet(value: Any, facet: str = "facet") -> Optional[int]:
    """Parse a numeric catalog facet.

    Blank or missing values mean the facet is absent. Drivers that stringify
    fetches return text, others return ints directly.

    Raises:
        MalformedFacetError: if the text is not an integer
    """
    if value is None:
        return None
    if isinstance(value, bool):
        raise MalformedFacetError(facet, value)
    if isinstance(value, int):
        return value
    text = str(value).strip()
    if text == "":
        return None
    try:
        return int(text)
    except ValueError:
        raise MalformedFacetError(facet, value) from None


class TypeMapper(ABC):
    """Abstract base class for database type mapping."""

    @abstractmethod
    def to_portable_type(self, db_type: str, scale: Optional[int]) -> PortableType:
        """Convert a raw database type to a portable type category."""
        pass

    def map_type(self, db_type: str, precision: Any, scale: Any, length: Any) -> MappedType:
        """Map a raw type and its facets to (type, size, precision, scale).

        Args:
            db_type: Raw type name from the catalog
            precision: Total number of digits
            scale: Digits right of the decimal separator
            length: Length for character types

        Returns:
            MappedType tuple
        """
        size = parse_facet(length, "length")
        precision = parse_facet(precision, "precision")
        scale = parse_facet(scale, "scale")
        return MappedType(self.to_portable_type(db_type, scale), size, precision, scale)

    def typecast(self, portable_type: PortableType, value: Any) -> Any:
        """Convert a catalog literal to the value for its portable type.

        Numeric defaults the database evaluates itself (sequence calls,
        arithmetic) do not parse as numbers and come back as a
        GeneratedExpression holding the text.
        """
        if value is None:
            return None
        if value == "" and portable_type not in (
            PortableType.STRING, PortableType.TEXT, PortableType.BINARY
        ):
            return None
        if portable_type == PortableType.INTEGER:
            try:
                return int(value)
            except (TypeError, ValueError):
                return GeneratedExpression(str(value))
        if portable_type == PortableType.DOUBLE:
            try:
                return float(value)
            except (TypeError, ValueError):
                return GeneratedExpression(str(value))
        if portable_type == PortableType.BINARY:
            return value
        return str(value)


class DamengTypeMapper(TypeMapper):
    """Type mapper for DM (Dameng) catalog types.

    Checks run in a fixed order and the first match wins, so a type name
    containing both NUMBER and TIMESTAMP is numeric.
    """

    def to_portable_type(self, db_type: str, scale: Optional[int]) -> PortableType:
        """Convert a DM type to a portable type."""
        if "FLOAT" in db_type or "DOUBLE" in db_type:
            return PortableType.DOUBLE
        elif "NUMBER" in db_type:
            if scale is not None and scale > 0:
                return PortableType.DECIMAL
            return PortableType.INTEGER
        elif "INTEGER" in db_type:
            return PortableType.INTEGER
        elif "BLOB" in db_type:
            return PortableType.BINARY
        elif "CLOB" in db_type:
            return PortableType.TEXT
        elif "TIMESTAMP" in db_type:
            return PortableType.TIMESTAMP
        return PortableType.STRING
