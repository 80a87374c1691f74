"""CLI commands for suave_db."""

from __future__ import annotations

import importlib
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from suave_db.errors import ConfigurationError
from suave_db.map import default_registry
from suave_db.map.type_map import TypeMap

console = Console()


def _load_type_map(target: str) -> TypeMap:
    """Resolve ``module:Class`` and build its type map, exiting on failure."""
    module_name, _, attr = target.partition(":")
    if not module_name or not attr:
        console.print(f"[bold red]Error:[/bold red] Expected MODULE:Class, got {target!r}")
        raise typer.Exit(code=1)

    try:
        obj = importlib.import_module(module_name)
        for part in attr.split("."):
            obj = getattr(obj, part)
    except (ImportError, AttributeError) as e:
        console.print(f"[bold red]Error:[/bold red] Cannot load {target}: {escape(str(e))}")
        raise typer.Exit(code=1)

    try:
        return default_registry.get(obj)
    except ConfigurationError as e:
        console.print(f"[bold red]Mapping error:[/bold red] {escape(str(e))}")
        raise typer.Exit(code=1)


def _flags(field_map) -> str:
    flags = []
    if field_map.is_required:
        flags.append("required")
    if field_map.is_read_only:
        flags.append("read-only")
    if field_map.is_date_stamp:
        flags.append("date stamp" + (" (insert only)" if not field_map.stamp_on_update else ""))
    if field_map.is_soft_delete:
        flags.append(f"soft delete {field_map.inserted_value!r}/{field_map.deleted_value!r}")
    return ", ".join(flags)


def describe_command(
    target: Annotated[str, typer.Argument(help="Record type as MODULE:Class")],
    as_json: Annotated[
        bool, typer.Option("--json", help="Print the mapping as JSON")
    ] = False,
) -> None:
    """
    Show how a record type maps onto its table.

    Lists every mapped field with its column, key role and flags.
    """
    from suave_db.models.schemas import TypeMapResponse

    type_map = _load_type_map(target)

    if as_json:
        response = TypeMapResponse.from_type_map(type_map)
        console.print_json(response.model_dump_json())
        return

    table = Table(title=escape(f"{type_map.name} → {type_map.table_identifier}"))
    table.add_column("Field", style="cyan")
    table.add_column("Column", style="magenta")
    table.add_column("Type")
    table.add_column("Key", style="green")
    table.add_column("Editable")
    table.add_column("Flags", style="yellow")

    for field_map in type_map.fields.values():
        table.add_row(
            field_map.field,
            field_map.column,
            getattr(field_map.python_type, "__name__", str(field_map.python_type)),
            field_map.key_type.value if field_map.is_key else "",
            "✓" if field_map.is_updateable else "",
            _flags(field_map),
        )

    console.print(table)
    sort = ", ".join(f"{f.field} {order.sql}" for f, order in type_map.default_sort)
    console.print(f"Default sort: {sort or '(none)'}")


def sql_command(
    target: Annotated[str, typer.Argument(help="Record type as MODULE:Class")],
    dialect: Annotated[
        str, typer.Option("--dialect", "-d", help="SQL dialect (tsql or sqlite)")
    ] = "tsql",
) -> None:
    """
    Print the statements generated for a record type.

    Shows the cached statements plus an update over every updateable field.
    """
    from suave_db.sql import get_builder

    type_map = _load_type_map(target)
    try:
        builder = get_builder(dialect)
    except ValueError as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(code=1)

    builder.build_select_all(type_map)
    builder.build_count(type_map)
    builder.build_insert(type_map)
    if type_map.all_keys:
        builder.build_select_by_key(type_map)
        builder.build_delete_by_key(type_map)
    if type_map.sequential_key is not None:
        builder.build_next_id(type_map)

    table = Table(title=f"{type_map.name} ({builder.dialect})")
    table.add_column("Statement", style="cyan")
    table.add_column("SQL")
    for kind, sql in builder.cached_statements(type_map).items():
        if sql:
            table.add_row(kind, escape(sql))
    if type_map.updateable_fields:
        properties = {f.field: None for f in type_map.updateable_fields}
        table.add_row("update", escape(builder.build_update(type_map, properties)))

    console.print(table)
