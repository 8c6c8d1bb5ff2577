"""Query execution against the catalog connection."""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from .errors import CatalogQueryFailedError, IntegrityError
from .rows import Row, RowCase, make_row_normalizer

logger = logging.getLogger(__name__)


class QueryExecutor(ABC):
    """Runs parameterized SQL and reports session facts.

    Introspectors only read through this interface; connection pooling,
    statement preparation and transactions belong to implementations.
    """

    @abstractmethod
    def execute(self, sql: str, params: Optional[Dict[str, Any]] = None) -> List[Row]:
        """Execute a query and return rows as dictionaries.

        Raises:
            CatalogQueryFailedError: if the query cannot be run
        """
        pass

    @abstractmethod
    def session_identity(self) -> str:
        """Return the authenticated user name, or an empty string."""
        pass

    def active_row_case(self) -> RowCase:
        """Return the key case convention of rows returned by execute()."""
        return RowCase.NATURAL

    def last_insert_id(self) -> str:
        """Return the last identity value inserted in this session scope."""
        rows = self.execute("SELECT SCOPE_IDENTITY() AS LAST_ID")
        if not rows:
            return ""
        value = make_row_normalizer(self.active_row_case())(rows[0]).get("LAST_ID")
        return "" if value is None else str(value)

    def release_savepoint(self, name: str) -> None:
        """Release a savepoint. DM has no RELEASE SAVEPOINT, so nothing happens."""
        logger.debug("Ignoring release of savepoint %s", name)


class DBAPIExecutor(QueryExecutor):
    """Executor over a DB-API 2.0 connection (e.g. dmPython)."""

    # If the left part is found in a driver error, the right error class is raised
    EXCEPTION_MAP = {
        "ORA-00001: unique constraint": IntegrityError,
    }

    def __init__(
        self,
        connection,
        user: Optional[str] = None,
        row_case: RowCase = RowCase.NATURAL,
        driver_error: type = Exception,
    ):
        """Initialize the executor.

        Args:
            connection: Open DB-API connection
            user: Authenticated user name (session identity)
            row_case: How the driver cases column labels
            driver_error: Base exception class of the driver module
        """
        self._connection = connection
        self._user = user or ""
        self._row_case = RowCase(row_case)
        self._driver_error = driver_error

    @property
    def is_active(self) -> bool:
        return self._connection is not None

    def _convert_error(self, error: Exception, sql: str) -> CatalogQueryFailedError:
        message = str(error)
        for fragment, error_class in self.EXCEPTION_MAP.items():
            if fragment in message:
                return error_class(message, details={"sql": sql})
        return CatalogQueryFailedError(message, details={"sql": sql})

    def _apply_case(self, label: str) -> str:
        if self._row_case == RowCase.LOWER:
            return label.lower()
        if self._row_case == RowCase.UPPER:
            return label.upper()
        return label

    def execute(self, sql: str, params: Optional[Dict[str, Any]] = None) -> List[Row]:
        """Execute a query with named parameters and return dict rows."""
        if self._connection is None:
            raise CatalogQueryFailedError("DB connection is not active.")

        cursor = self._connection.cursor()
        try:
            cursor.execute(sql, params or {})
            if cursor.description is None:
                return []
            labels = [self._apply_case(d[0]) for d in cursor.description]
            return [dict(zip(labels, row)) for row in cursor.fetchall()]
        except self._driver_error as e:
            raise self._convert_error(e, sql) from e
        finally:
            cursor.close()

    def session_identity(self) -> str:
        return self._user

    def active_row_case(self) -> RowCase:
        return self._row_case

    def close(self):
        """Close the underlying connection."""
        if self._connection is not None:
            self._connection.close()
            self._connection = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


def connect_dm(
    host: str,
    port: int,
    user: str,
    password: Optional[str],
    row_case: RowCase = RowCase.NATURAL,
) -> DBAPIExecutor:
    """Connect to a DM server with the dmPython driver."""
    try:
        import dmPython
    except ImportError:
        raise ImportError(
            "dmPython is required to connect to DM. "
            "Install it with: pip install dmPython"
        )

    logger.debug("Connecting to DM at %s:%s as %s", host, port, user)
    try:
        connection = dmPython.connect(
            user=user,
            password=password,
            server=host,
            port=port,
        )
    except dmPython.Error as e:
        raise CatalogQueryFailedError(
            f"Cannot connect to DM at {host}:{port}: {e}",
            details={"host": host, "port": port},
        ) from e

    return DBAPIExecutor(connection, user=user, row_case=row_case, driver_error=dmPython.Error)
