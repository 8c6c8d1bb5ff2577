"""dmschema - Main entry point."""

import json
import logging
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table as RichTable

from .config import settings
from .database import (
    DamengIntrospector,
    DatabaseIntrospector,
    GeneratedExpression,
    SchemaError,
    connect_dm,
)

app = typer.Typer(
    name="dmschema",
    help="Inspect tables, keys and indexes in a DM database catalog",
    add_completion=False,
)

console = Console()


def open_introspector() -> DatabaseIntrospector:
    """Connect with the configured settings and return an introspector."""
    executor = connect_dm(
        host=settings.host,
        port=settings.port,
        user=settings.user,
        password=settings.password,
        row_case=settings.row_case,
    )
    return DamengIntrospector(executor, default_schema=settings.default_schema)


def _fail(message: str):
    console.print(f"[red]{escape(message)}[/red]")
    raise typer.Exit(1)


def _format_default(value) -> str:
    if value is None:
        return ""
    if isinstance(value, GeneratedExpression):
        return f"[italic]{value.expression}[/italic]"
    return escape(repr(value))


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log catalog queries"),
):
    """
    dmschema - Inspect a DM database catalog.

    Examples:

        dmschema schemas

        dmschema tables --schema HR

        dmschema describe HR.EMPLOYEES
    """
    level = logging.DEBUG if verbose else getattr(logging, settings.log_level.upper(), logging.WARNING)
    logging.basicConfig(level=level)


@app.command()
def config():
    """Show current configuration."""
    console.print("[bold]Current Configuration[/bold]")
    console.print(f"  Server: {settings.host}:{settings.port}")
    console.print(f"  User: {settings.user}")
    console.print(f"  Password configured: {'Yes' if settings.password else 'No'}")
    console.print(f"  Default Schema: {settings.default_schema or 'From user'}")
    console.print(f"  Row Case: {settings.row_case.value}")


@app.command("schemas")
def list_schemas():
    """List user schemas."""
    try:
        with open_introspector() as introspector:
            schemas = introspector.get_schemas()
    except SchemaError as e:
        _fail(f"Error listing schemas: {e.message}")

    if not schemas:
        console.print("[yellow]No schemas found.[/yellow]")
        return

    table = RichTable(title="Schemas")
    table.add_column("Schema", style="cyan")
    for schema in schemas:
        table.add_row(schema)
    console.print(table)


@app.command("tables")
def list_tables(
    schema: Optional[str] = typer.Option(None, "--schema", "-s", help="Schema to list (default: your own)"),
):
    """List tables, views and materialized views."""
    try:
        with open_introspector() as introspector:
            names = introspector.get_tables(schema or "")
    except SchemaError as e:
        _fail(f"Error listing tables: {e.message}")

    if not names:
        console.print("[yellow]No tables found.[/yellow]")
        return

    table = RichTable(title=f"Tables in {schema}" if schema else "Tables")
    table.add_column("Table", style="cyan")
    for name in names:
        table.add_row(name)
    console.print(table)


@app.command("describe")
def describe(
    name: str = typer.Argument(..., help="Table name, optionally as SCHEMA.TABLE"),
    as_json: bool = typer.Option(False, "--json", help="Print the description as JSON"),
):
    """Describe a table's columns, keys and indexes."""
    try:
        with open_introspector() as introspector:
            described = introspector.load_table(name)
    except SchemaError as e:
        if as_json:
            console.print_json(json.dumps({"error": e.to_dict()}))
            raise typer.Exit(1)
        _fail(f"Error describing {name}: {e.message}")

    if described is None:
        _fail(f"Table not found: {name}")

    if as_json:
        console.print_json(json.dumps(described.to_dict()))
        return

    columns = RichTable(title=f"Table {described.full_name}")
    columns.add_column("Column", style="cyan")
    columns.add_column("Type", style="green")
    columns.add_column("DB Type")
    columns.add_column("Size")
    columns.add_column("Null")
    columns.add_column("PK")
    columns.add_column("Default")
    columns.add_column("Comment")
    for column in described.columns.values():
        columns.add_row(
            column.name,
            column.type.value,
            column.db_type,
            "" if column.size is None else str(column.size),
            "Y" if column.allow_null else "N",
            "Y" if column.is_primary_key else "",
            _format_default(column.default_value),
            escape(column.comment),
        )
    console.print(columns)

    lines = []
    if described.primary_key:
        lines.append(f"Primary key: {', '.join(described.primary_key)}")
    if described.sequence_name:
        lines.append(f"Sequence: {described.sequence_name}")
    for fk in described.foreign_keys.values():
        if fk.foreign_table_name is None:
            target = "(not visible)"
        else:
            referenced = ", ".join(c or "?" for c in fk.foreign_column_names)
            target = f"{fk.foreign_schema_name}.{fk.foreign_table_name}({referenced})"
        lines.append(f"Foreign key {fk.name}: ({', '.join(fk.column_names)}) -> {target}")
    for unique in described.uniques:
        lines.append(f"Unique {unique.name}: ({', '.join(unique.column_names)})")
    for check in described.checks:
        lines.append(f"Check {check.name}: {check.expression}")
    for index in described.indexes:
        flags = [flag for flag, on in (("primary", index.is_primary), ("unique", index.is_unique)) if on]
        suffix = f" ({', '.join(flags)})" if flags else ""
        lines.append(f"Index {index.name}: ({', '.join(index.column_names)}){suffix}")

    if lines:
        console.print(Panel(escape("\n".join(lines)), title="Constraints", expand=False))


if __name__ == "__main__":
    app()
