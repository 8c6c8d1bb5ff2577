"""Tests for the dmschema command line interface."""

import json

import pytest
from typer.testing import CliRunner

from dmschema import main
from dmschema.database import CatalogQueryFailedError, DamengIntrospector
from tests.fixtures.fake_executor import (
    COLUMNS,
    CONSTRAINTS,
    OWN_TABLES,
    SCHEMA_TABLES,
    SCHEMAS,
    column_row,
    constraint_row,
)

runner = CliRunner()


@pytest.fixture
def use_executor(monkeypatch):
    """Make the CLI introspect through the given FakeExecutor."""

    def _use(fake):
        monkeypatch.setattr(main, "open_introspector", lambda: DamengIntrospector(fake))
        return fake

    return _use


class TestDescribe:

    def test_json_output(self, use_executor, orders_executor):
        use_executor(orders_executor)
        result = runner.invoke(main.app, ["describe", "ORDERS", "--json"])

        assert result.exit_code == 0, result.output
        described = json.loads(result.output)
        assert described["full_name"] == "ORDERS"
        assert described["primary_key"] == ["ID"]
        assert described["sequence_name"] == "SEQ_ORDERS"
        assert [c["name"] for c in described["columns"]][:2] == ["ID", "CUSTOMER_ID"]
        created = [c for c in described["columns"] if c["name"] == "CREATED_AT"][0]
        assert created["default_value"] == {"expression": "CURRENT_TIMESTAMP"}
        assert described["foreign_keys"][0]["foreign_columns"] == ["ID", "REGION"]

    def test_table_output(self, use_executor, orders_executor):
        use_executor(orders_executor)
        result = runner.invoke(main.app, ["describe", "ORDERS"])

        assert result.exit_code == 0, result.output
        assert "ORDERS" in result.output
        assert "PK_ORDERS" in result.output
        assert "SEQ_ORDERS" in result.output
        assert orders_executor.closed is True

    def test_hidden_foreign_key_target(self, use_executor, executor):
        executor.add_response(COLUMNS, [column_row("CUST_ID", "INTEGER")])
        executor.add_response(CONSTRAINTS, [
            constraint_row("FK_CUST", "R", "CUST_ID", r_constraint="PK_CUST"),
        ])
        use_executor(executor)
        result = runner.invoke(main.app, ["describe", "ORDERS"])

        assert result.exit_code == 0, result.output
        assert "FK_CUST" in result.output
        assert "not visible" in result.output

    def test_not_found(self, use_executor, executor):
        use_executor(executor)
        result = runner.invoke(main.app, ["describe", "MISSING"])

        assert result.exit_code == 1
        assert "Table not found" in result.output

    def test_query_failure(self, use_executor, executor):
        executor.add_response(COLUMNS, CatalogQueryFailedError("network down"))
        use_executor(executor)
        result = runner.invoke(main.app, ["describe", "ORDERS"])

        assert result.exit_code == 1
        assert "network down" in result.output

    def test_query_failure_json(self, use_executor, executor):
        executor.add_response(COLUMNS, CatalogQueryFailedError("network down"))
        use_executor(executor)
        result = runner.invoke(main.app, ["describe", "ORDERS", "--json"])

        assert result.exit_code == 1
        assert json.loads(result.output)["error"]["code"] == "CATALOG_QUERY_FAILED"


class TestListing:

    def test_schemas(self, use_executor, executor):
        executor.add_response(SCHEMAS, [{"USERNAME": "HR"}, {"USERNAME": "SYS"}])
        use_executor(executor)
        result = runner.invoke(main.app, ["schemas"])

        assert result.exit_code == 0, result.output
        assert "HR" in result.output

    def test_own_tables(self, use_executor, executor):
        executor.add_response(OWN_TABLES, [{"TABLE_NAME": "ORDERS"}])
        use_executor(executor)
        result = runner.invoke(main.app, ["tables"])

        assert result.exit_code == 0, result.output
        assert "ORDERS" in result.output

    def test_schema_tables(self, use_executor, executor):
        executor.add_response(SCHEMA_TABLES, [{"TABLE_NAME": "EMPLOYEES"}])
        use_executor(executor)
        result = runner.invoke(main.app, ["tables", "--schema", "HR"])

        assert result.exit_code == 0, result.output
        assert "EMPLOYEES" in result.output
        assert executor.calls[0]["params"] == {"schemaName": "HR"}

    def test_no_tables(self, use_executor, executor):
        use_executor(executor)
        result = runner.invoke(main.app, ["tables"])
        assert "No tables found" in result.output


def test_config_command():
    result = runner.invoke(main.app, ["config"])
    assert result.exit_code == 0
    assert "Current Configuration" in result.output
