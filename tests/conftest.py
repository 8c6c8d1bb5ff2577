"""Shared pytest fixtures for dmschema tests."""

import pytest

from dmschema.database import DamengIntrospector
from tests.fixtures.fake_executor import (
    COLUMNS,
    CONSTRAINTS,
    INDEXES,
    SEQUENCE,
    FakeExecutor,
    column_row,
    constraint_row,
    index_row,
)


@pytest.fixture
def executor():
    """Create an empty FakeExecutor logged in as 'admin'."""
    return FakeExecutor(user="admin")


@pytest.fixture
def orders_executor():
    """FakeExecutor describing an ORDERS table in the ADMIN schema.

    ORDERS(ID pk + sequence, CUSTOMER_ID/REGION fk -> SALES.CUSTOMERS,
    CODE unique, STATUS check, CREATED_AT timestamp default).
    """
    fake = FakeExecutor(user="admin")
    fake.add_response(COLUMNS, [
        column_row("ID", "NUMBER", precision="10", scale="0", length="22",
                   nullable="N", default="1", is_increment="1", is_primary_key="1"),
        column_row("CUSTOMER_ID", "INTEGER", precision="10", scale="0", length="4", nullable="N"),
        column_row("REGION", "VARCHAR2", length="20", default="'EU'"),
        column_row("CODE", "VARCHAR2", length="12", comment="Order code"),
        column_row("STATUS", "CHAR", length="1", default="'N'"),
        column_row("TOTAL", "NUMBER", precision="12", scale="2", length="22", default=" 0.00 "),
        column_row("CREATED_AT", "TIMESTAMP", length="8", default="CURRENT_TIMESTAMP"),
    ])
    fake.add_response(CONSTRAINTS, [
        constraint_row("FK_ORDERS_CUSTOMER", "R", "CUSTOMER_ID", 1,
                       foreign_schema="SALES", foreign_table="CUSTOMERS",
                       foreign_column="ID", on_delete="CASCADE", r_constraint="PK_CUSTOMERS"),
        constraint_row("FK_ORDERS_CUSTOMER", "R", "REGION", 2,
                       foreign_schema="SALES", foreign_table="CUSTOMERS",
                       foreign_column="REGION", on_delete="CASCADE", r_constraint="PK_CUSTOMERS"),
        constraint_row("CK_ORDERS_STATUS", "C", "STATUS", 1, check_expr="STATUS IN ('N', 'P')"),
        constraint_row("PK_ORDERS", "P", "ID", 1),
        constraint_row("UQ_ORDERS_CODE", "U", "CODE", 1),
    ])
    fake.add_response(INDEXES, [
        index_row("IDX_ORDERS_REGION", "REGION"),
        index_row("IDX_ORDERS_REGION", "CUSTOMER_ID"),
        index_row("PK_ORDERS", "ID", unique=1, primary=1),
        index_row("UQ_ORDERS_CODE", "CODE", unique=1),
    ])
    fake.add_response(SEQUENCE, [{"SEQUENCE_NAME": "SEQ_ORDERS"}])
    return fake


@pytest.fixture
def introspector(orders_executor):
    """DamengIntrospector over the ORDERS catalog."""
    return DamengIntrospector(orders_executor)
