"""DM (Dameng) catalog introspector."""

import logging
from typing import Dict, List, Optional

from .base import DatabaseIntrospector
from .columns import build_column
from .constraints import group_index_rows, resolve_constraints
from .errors import UnsupportedOperationError
from .executor import QueryExecutor
from .models import Column, ConstraintSet, Index, ResolvedName, Table
from .type_mappers import DamengTypeMapper

logger = logging.getLogger(__name__)


SCHEMAS_SQL = """
SELECT "u"."USERNAME" AS "USERNAME"
FROM "DBA_USERS" "u"
WHERE "u"."DEFAULT_TABLESPACE" NOT IN ('SYSTEM', 'SYSAUX')
ORDER BY "u"."USERNAME" ASC
"""

OWN_TABLES_SQL = """
SELECT TABLE_NAME FROM USER_TABLES
UNION ALL
SELECT VIEW_NAME AS TABLE_NAME FROM USER_VIEWS
UNION ALL
SELECT MVIEW_NAME AS TABLE_NAME FROM USER_MVIEWS
ORDER BY TABLE_NAME
"""

SCHEMA_TABLES_SQL = """
SELECT OBJECT_NAME AS TABLE_NAME
FROM ALL_OBJECTS
WHERE
    OBJECT_TYPE IN ('TABLE', 'VIEW', 'MATERIALIZED VIEW')
    AND OWNER = :schemaName
ORDER BY OBJECT_NAME
"""

COLUMNS_SQL = """
SELECT
    A.COLUMN_NAME,
    A.DATA_TYPE,
    A.DATA_PRECISION,
    A.DATA_SCALE,
    (
      CASE A.CHAR_USED WHEN 'C' THEN A.CHAR_LENGTH
        ELSE A.DATA_LENGTH
      END
    ) AS DATA_LENGTH,
    A.NULLABLE,
    A.DATA_DEFAULT,
    COM.COMMENTS AS COLUMN_COMMENT,
    (CASE WHEN C.INFO2 = 1 THEN '1' ELSE '0' END) AS IS_INCREMENT,
    (CASE WHEN D.COLUMN_NAME IS NULL THEN '0' ELSE '1' END) AS IS_PRIMARY_KEY
FROM ALL_TAB_COLUMNS A
    INNER JOIN ALL_OBJECTS B ON B.OWNER = A.OWNER AND LTRIM(B.OBJECT_NAME) = LTRIM(A.TABLE_NAME)
    LEFT JOIN ALL_COL_COMMENTS COM
        ON A.OWNER = COM.OWNER AND A.TABLE_NAME = COM.TABLE_NAME AND A.COLUMN_NAME = COM.COLUMN_NAME
    LEFT JOIN (
        SELECT SC.NAME AS COL_NAME, SC.INFO2
        FROM SYSCOLUMNS SC
        INNER JOIN SYSOBJECTS SO ON SO.ID = SC.ID
        INNER JOIN SYSOBJECTS SS ON SS.ID = SO.SCHID
        WHERE SC.INFO2 = 1 AND SO.NAME = :tableName AND SS.NAME = :schemaName
    ) C ON C.COL_NAME = A.COLUMN_NAME
    LEFT JOIN (
        SELECT COL.COLUMN_NAME
        FROM ALL_CONSTRAINTS CON
        INNER JOIN ALL_CONS_COLUMNS COL
            ON COL.OWNER = CON.OWNER AND COL.CONSTRAINT_NAME = CON.CONSTRAINT_NAME
        WHERE CON.CONSTRAINT_TYPE = 'P' AND CON.OWNER = :schemaName AND COL.TABLE_NAME = :tableName
    ) D ON D.COLUMN_NAME = A.COLUMN_NAME
WHERE
    A.OWNER = :schemaName
    AND B.OBJECT_TYPE IN ('TABLE', 'VIEW', 'MATERIALIZED VIEW')
    AND B.OBJECT_NAME = :tableName
ORDER BY A.COLUMN_ID
"""

# The type filter stays out of the WHERE clause; see constraints.py.
CONSTRAINTS_SQL = """
SELECT
    /*+ PUSH_PRED("uccol") PUSH_PRED("fuc") PUSH_PRED("fuccol") */
    "uc"."CONSTRAINT_NAME" AS "CONSTRAINT_NAME",
    "uc"."CONSTRAINT_TYPE" AS "CONSTRAINT_TYPE",
    "uccol"."COLUMN_NAME" AS "COLUMN_NAME",
    "uccol"."POSITION" AS "POSITION",
    "uc"."R_CONSTRAINT_NAME" AS "R_CONSTRAINT_NAME",
    "fuc"."OWNER" AS "FOREIGN_TABLE_SCHEMA",
    "fuc"."TABLE_NAME" AS "FOREIGN_TABLE_NAME",
    "fuccol"."COLUMN_NAME" AS "FOREIGN_COLUMN_NAME",
    "uc"."DELETE_RULE" AS "ON_DELETE",
    "uc"."SEARCH_CONDITION" AS "CHECK_EXPR",
    "uccol"."TABLE_NAME" AS "TABLE_NAME"
FROM "ALL_CONSTRAINTS" "uc"
INNER JOIN "ALL_CONS_COLUMNS" "uccol"
    ON "uccol"."OWNER" = "uc"."OWNER" AND "uccol"."CONSTRAINT_NAME" = "uc"."CONSTRAINT_NAME"
LEFT JOIN "ALL_CONSTRAINTS" "fuc"
    ON "fuc"."OWNER" = "uc"."R_OWNER" AND "fuc"."CONSTRAINT_NAME" = "uc"."R_CONSTRAINT_NAME"
LEFT JOIN "ALL_CONS_COLUMNS" "fuccol"
    ON "fuccol"."OWNER" = "fuc"."OWNER"
    AND "fuccol"."CONSTRAINT_NAME" = "fuc"."CONSTRAINT_NAME"
    AND "fuccol"."POSITION" = "uccol"."POSITION"
WHERE "uc"."OWNER" = :schemaName AND "uc"."TABLE_NAME" = :tableName
ORDER BY "uc"."CONSTRAINT_NAME" ASC, "uccol"."POSITION" ASC
"""

INDEXES_SQL = """
SELECT
    "ui"."INDEX_NAME" AS "INDEX_NAME",
    "uicol"."COLUMN_NAME" AS "COLUMN_NAME",
    CASE "ui"."UNIQUENESS" WHEN 'UNIQUE' THEN 1 ELSE 0 END AS "INDEX_IS_UNIQUE",
    CASE WHEN "uc"."CONSTRAINT_NAME" IS NOT NULL THEN 1 ELSE 0 END AS "INDEX_IS_PRIMARY"
FROM "SYS"."ALL_INDEXES" "ui"
LEFT JOIN "SYS"."ALL_IND_COLUMNS" "uicol"
    ON "uicol"."INDEX_OWNER" = "ui"."OWNER" AND "uicol"."INDEX_NAME" = "ui"."INDEX_NAME"
LEFT JOIN "SYS"."ALL_CONSTRAINTS" "uc"
    ON "uc"."OWNER" = "ui"."TABLE_OWNER"
    AND "uc"."CONSTRAINT_NAME" = "ui"."INDEX_NAME"
    AND "uc"."CONSTRAINT_TYPE" = 'P'
WHERE "ui"."TABLE_OWNER" = :schemaName AND "ui"."TABLE_NAME" = :tableName
ORDER BY "ui"."INDEX_NAME" ASC, "uicol"."COLUMN_POSITION" ASC
"""

UNIQUE_INDEXES_SQL = """
SELECT
    DIC.INDEX_NAME,
    DIC.COLUMN_NAME
FROM ALL_INDEXES DI
    INNER JOIN ALL_IND_COLUMNS DIC ON DI.TABLE_NAME = DIC.TABLE_NAME AND DI.INDEX_NAME = DIC.INDEX_NAME
WHERE
    DI.UNIQUENESS = 'UNIQUE'
    AND DIC.TABLE_OWNER = :schemaName
    AND DIC.TABLE_NAME = :tableName
ORDER BY DIC.TABLE_NAME, DIC.INDEX_NAME, DIC.COLUMN_POSITION
"""

SEQUENCE_SQL = """
SELECT
    UD.REFERENCED_NAME AS SEQUENCE_NAME
FROM USER_DEPENDENCIES UD
    JOIN USER_TRIGGERS UT ON (UT.TRIGGER_NAME = UD.NAME)
WHERE
    UT.TABLE_NAME = :tableName
    AND UD.TYPE = 'TRIGGER'
    AND UD.REFERENCED_TYPE = 'SEQUENCE'
"""


def _truthy(value) -> bool:
    return str(value) == "1"


class DamengIntrospector(DatabaseIntrospector):
    """Introspects tables through the DM data dictionary views."""

    EXCLUDED_SCHEMAS = {'SYS', 'SYSDBA', 'SYSAUDITOR', 'SYSSSO', 'CTISYS'}

    def __init__(self, executor: QueryExecutor, default_schema: Optional[str] = None):
        super().__init__(executor, default_schema=default_schema)
        self._type_mapper = DamengTypeMapper()

    @staticmethod
    def _params(resolved: ResolvedName) -> Dict[str, str]:
        return {"schemaName": resolved.schema_name, "tableName": resolved.name}

    def get_schemas(self) -> List[str]:
        """Get schemas owned by users outside the system tablespaces."""
        rows = self._query(SCHEMAS_SQL)
        schemas = [row["USERNAME"] for row in rows]
        return [s for s in schemas if s not in self.EXCLUDED_SCHEMAS]

    def get_tables(self, schema: str = "") -> List[str]:
        """Get tables, views and materialized views.

        With no schema the session user's own objects are listed.
        """
        if schema == "":
            rows = self._query(OWN_TABLES_SQL)
        else:
            rows = self._query(SCHEMA_TABLES_SQL, {"schemaName": schema})
        return [row["TABLE_NAME"] for row in rows]

    def find_columns(self, resolved: ResolvedName) -> Optional[List[Column]]:
        rows = self._query(COLUMNS_SQL, self._params(resolved))
        if not rows:
            return None
        logger.debug("Found %d columns for %s", len(rows), resolved.full_name)
        return [build_column(row, self._type_mapper) for row in rows]

    def find_constraints(self, resolved: ResolvedName) -> ConstraintSet:
        rows = self._query(CONSTRAINTS_SQL, self._params(resolved))
        return resolve_constraints(resolved.full_name, rows)

    def find_indexes(self, resolved: ResolvedName) -> List[Index]:
        rows = self._query(INDEXES_SQL, self._params(resolved))
        indexes = []
        for name, group in group_index_rows(rows).items():
            indexes.append(Index(
                name=name,
                column_names=tuple(r["COLUMN_NAME"] for r in group if r.get("COLUMN_NAME") is not None),
                is_unique=_truthy(group[0].get("INDEX_IS_UNIQUE")),
                is_primary=_truthy(group[0].get("INDEX_IS_PRIMARY")),
            ))
        return indexes

    def find_sequence_name(self, table_name: str) -> Optional[str]:
        rows = self._query(SEQUENCE_SQL, {"tableName": table_name})
        if not rows:
            return None
        return rows[0]["SEQUENCE_NAME"]

    def find_unique_indexes(self, table: Table) -> Dict[str, List[str]]:
        """Get all unique indexes of a table.

        Returns:
            Mapping of index name to its ordered column names
        """
        rows = self._query(UNIQUE_INDEXES_SQL, {
            "schemaName": table.schema_name,
            "tableName": table.name,
        })
        result: Dict[str, List[str]] = {}
        for row in rows:
            result.setdefault(row["INDEX_NAME"], []).append(row["COLUMN_NAME"])
        return result

    def get_table_default_values(self, name: str):
        raise UnsupportedOperationError(
            "DM does not support default value constraints.",
            details={"table": name},
        )
