"""Main CLI entry point for colmapper."""

import json
import typing
from enum import Enum
from pathlib import Path
from typing import Annotated, Any, TypeVar

import typer
from rich.console import Console
from rich.table import Table

from colmapper import __version__
from colmapper.cli.helpers import configure_logging, handle_error, serialize_for_json
from colmapper.config.settings import get_settings
from colmapper.core.schema import TableDef
from colmapper.core.services import MappingService

# Console instances for stdout/stderr
console = Console()
err_console = Console(stderr=True)


class OutputFormat(str, Enum):
    """Output format options."""

    json = "json"
    table = "table"


class TableOutputFormat(str, Enum):
    """Output format options for table definitions."""

    json = "json"
    table = "table"
    cql = "cql"


FormatT = TypeVar("FormatT", OutputFormat, TableOutputFormat)


app = typer.Typer(
    name="colmapper",
    help="Map classes to wide-column tables by naming convention.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"colmapper {__version__}")
        raise typer.Exit()


def _type_label(tp: Any) -> str:
    if tp is None:
        return ""
    if isinstance(tp, type) and not typing.get_args(tp):
        return tp.__qualname__
    return repr(tp).replace("typing.", "")


def _resolve_format(format: FormatT | None, choices: type[FormatT]) -> FormatT:
    """Use the configured default format when none is given."""
    if format is not None:
        return format
    return choices(get_settings().default_format)


def output_result(
    data: Any,
    format: OutputFormat | TableOutputFormat,
    columns: list[str] | None = None,
) -> None:
    """Output data in the specified format.

    Lists of rows are shown as a table with ``columns`` as headers, which
    defaults to the keys of the first row.
    """
    if format.value == "json":
        console.print_json(json.dumps(serialize_for_json(data)))
    elif isinstance(data, list):
        table = Table()
        for key in columns or (list(data[0]) if data else []):
            table.add_column(key)
        for row in data:
            table.add_row(*[str(v) if v is not None else "" for v in row.values()])
        console.print(table)
    elif isinstance(data, dict):
        table = Table(show_header=False)
        table.add_column("Key", style="bold")
        table.add_column("Value")
        for key, value in data.items():
            table.add_row(key, str(value) if value is not None else "")
        console.print(table)
    else:
        console.print(data)


def _table_rows(table_def: TableDef) -> list[dict[str, str]]:
    return [
        {"column": column.name, "role": column.role.value, "type": column.type.cql()}
        for column in table_def.columns
    ]


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-v",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """colmapper - naming convention based object to column mapping."""
    configure_logging(get_settings())


@app.command("new-table")
def new_table(
    target: Annotated[str, typer.Argument(help="Class to map, as module:ClassName.")],
    keyspace: Annotated[str, typer.Option("--keyspace", "-k", help="Keyspace name.")],
    table_name: Annotated[str, typer.Option("--table", "-t", help="Table name.")],
    partition_key: Annotated[
        str | None,
        typer.Option(
            "--partition-key",
            "-p",
            help="Property to use as partition key (default: first mappable property).",
        ),
    ] = None,
    format: Annotated[
        TableOutputFormat | None,
        typer.Option("--format", "-f", help="Output format (default: COLMAPPER_DEFAULT_FORMAT)."),
    ] = None,
) -> None:
    """Describe a new table able to store objects of a class."""
    format = _resolve_format(format, TableOutputFormat)
    try:
        service = MappingService()
        table_def = service.new_table(target, keyspace, table_name, partition_key=partition_key)
    except Exception as e:
        code = handle_error(e)
        raise typer.Exit(code) from None

    if format == TableOutputFormat.cql:
        console.print(table_def.cql() + ";", markup=False, highlight=False, soft_wrap=True)
    elif format == TableOutputFormat.table:
        output_result(_table_rows(table_def), format, columns=["column", "role", "type"])
    else:
        output_result(table_def, format)


@app.command("column-map")
def column_map(
    target: Annotated[str, typer.Argument(help="Class to map, as module:ClassName.")],
    schema_file: Annotated[
        Path, typer.Option("--schema", "-s", help="Path to table schema YAML.")
    ],
    mapping_file: Annotated[
        Path | None,
        typer.Option("--mapping", "-m", help="Path to mapping YAML with overrides and aliases."),
    ] = None,
    format: Annotated[
        OutputFormat | None,
        typer.Option("--format", "-f", help="Output format (default: COLMAPPER_DEFAULT_FORMAT)."),
    ] = None,
) -> None:
    """Show which columns back the constructor parameters and accessors of a class."""
    format = _resolve_format(format, OutputFormat)
    try:
        service = MappingService()
        table_def, result = service.column_map(target, schema_file, mapping_file)
    except Exception as e:
        code = handle_error(e)
        raise typer.Exit(code) from None

    if format == OutputFormat.table:
        rows = [
            {"member": f"constructor[{i}]", "column": name}
            for i, name in enumerate(result.constructor)
        ]
        rows += [{"member": f"get {k}", "column": v} for k, v in result.getters.items()]
        rows += [{"member": f"set {k}", "column": v} for k, v in result.setters.items()]
        output_result(rows, format, columns=["member", "column"])
    else:
        output_result(
            {
                "table": f"{table_def.keyspace_name}.{table_def.table_name}",
                **result.to_dict(),
            },
            format,
        )


@app.command("shape")
def shape(
    target: Annotated[str, typer.Argument(help="Class to inspect, as module:ClassName.")],
    format: Annotated[
        OutputFormat | None,
        typer.Option("--format", "-f", help="Output format (default: COLMAPPER_DEFAULT_FORMAT)."),
    ] = None,
) -> None:
    """Show the constructor parameters, getters and setters of a class."""
    format = _resolve_format(format, OutputFormat)
    try:
        service = MappingService()
        object_shape = service.get_shape(target)
    except Exception as e:
        code = handle_error(e)
        raise typer.Exit(code) from None

    members = [
        {"kind": kind, "name": spec.name, "type": _type_label(spec.type)}
        for kind, specs in (
            ("constructor", object_shape.constructor_params),
            ("getter", object_shape.getters),
            ("setter", object_shape.setters),
        )
        for spec in specs
    ]
    if format == OutputFormat.table:
        output_result(members, format, columns=["kind", "name", "type"])
    else:
        output_result(
            {
                "type_name": object_shape.type_name,
                "members": members,
                "root_getters": sorted(object_shape.root_getters),
            },
            format,
        )


if __name__ == "__main__":
    app()
