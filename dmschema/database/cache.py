"""In-memory cache of introspected tables."""

import logging
import threading
from typing import Dict, List, Optional

from .base import DatabaseIntrospector
from .models import Table

logger = logging.getLogger(__name__)


class SchemaCache:
    """Memoizes Table descriptors by resolved full name.

    Missing tables are not cached, so a table created later is found on
    the next lookup.
    """

    def __init__(self, introspector: DatabaseIntrospector):
        self.introspector = introspector
        self._tables: Dict[str, Table] = {}
        self._lock = threading.Lock()

    def _key(self, name: str) -> str:
        return self.introspector.resolve_table_name(name).full_name

    def get_table_schema(self, name: str, refresh: bool = False) -> Optional[Table]:
        """Get a table, loading it on first use or when refresh is set."""
        key = self._key(name)
        if not refresh:
            with self._lock:
                cached = self._tables.get(key)
            if cached is not None:
                return cached

        table = self.introspector.load_table(name)
        with self._lock:
            if table is None:
                self._tables.pop(key, None)
            else:
                self._tables[key] = table
        return table

    def get_table_schemas(self, schema: str = "", refresh: bool = False) -> List[Table]:
        """Get every table of a schema through the cache."""
        tables = []
        for table_name in self.introspector.get_tables(schema):
            qualified = f"{schema}.{table_name}" if schema else table_name
            table = self.get_table_schema(qualified, refresh=refresh)
            if table is not None:
                tables.append(table)
        return tables

    def refresh_table(self, name: str) -> Optional[Table]:
        """Drop a table from the cache and load it again."""
        logger.debug("Refreshing cached schema of %s", name)
        return self.get_table_schema(name, refresh=True)

    def clear(self):
        """Forget every cached table."""
        with self._lock:
            self._tables.clear()

    def __contains__(self, name: str) -> bool:
        key = self._key(name)
        with self._lock:
            return key in self._tables

    def __len__(self) -> int:
        with self._lock:
            return len(self._tables)
