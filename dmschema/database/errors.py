"""Error types raised during catalog introspection."""

from typing import Optional, Dict, Any


class SchemaError(Exception):
    """Base exception for introspection errors."""

    def __init__(self, message: str, code: str = "SCHEMA_ERROR", details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to a dictionary for JSON output."""
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class CatalogQueryFailedError(SchemaError):
    """A catalog query failed (connectivity, syntax, timeout)."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="CATALOG_QUERY_FAILED", details=details)


class IntegrityError(CatalogQueryFailedError):
    """The database rejected a statement because of a constraint violation."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details=details)
        self.code = "INTEGRITY_ERROR"


class MalformedFacetError(SchemaError):
    """Numeric catalog metadata could not be parsed."""

    def __init__(self, facet: str, value: Any):
        super().__init__(
            f"Malformed {facet} value: {value!r}",
            code="MALFORMED_FACET",
            details={"facet": facet, "value": str(value)},
        )
        self.facet = facet
        self.value = value


class AmbiguousPrimaryKeyError(SchemaError):
    """The catalog reports more than one primary key for a table."""

    def __init__(self, table_name: str, constraint_names: list):
        super().__init__(
            f"Table {table_name} has more than one primary key: {', '.join(constraint_names)}",
            code="AMBIGUOUS_PRIMARY_KEY",
            details={"table": table_name, "constraints": list(constraint_names)},
        )


class InconsistentForeignKeyError(SchemaError):
    """Rows of one foreign key disagree about the referenced table."""

    def __init__(self, table_name: str, constraint_name: str, details: Optional[Dict[str, Any]] = None):
        error_details = details or {}
        error_details["table"] = table_name
        error_details["constraint"] = constraint_name
        super().__init__(
            f"Foreign key {constraint_name} on {table_name} has inconsistent referenced columns",
            code="INCONSISTENT_FOREIGN_KEY",
            details=error_details,
        )


class UnsupportedOperationError(SchemaError):
    """The dialect does not support the requested operation."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="UNSUPPORTED_OPERATION", details=details)


class IntrospectionCancelledError(SchemaError):
    """Introspection was cancelled before all catalog queries ran."""

    def __init__(self, table_name: str, stage: str):
        super().__init__(
            f"Introspection of {table_name} cancelled before {stage}",
            code="INTROSPECTION_CANCELLED",
            details={"table": table_name, "stage": stage},
        )
