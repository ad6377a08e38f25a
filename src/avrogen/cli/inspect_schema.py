"""List the named types of an Avro JSON schema."""
import argparse
from textwrap import dedent

from rich.box import SIMPLE
from rich.console import Console
from rich.table import Table

from avrogen.errors import AvrogenError
from avrogen.schema import Enum, Fixed, NamedSchemaNode, Record, Schema
from avrogen.schema.avsc import parse_schema_file


def describe(node: NamedSchemaNode) -> tuple[str, str]:
    """Return the kind of ``node`` and a short summary of its contents."""
    if isinstance(node, Record):
        return "record", ", ".join(field.name for field in node.fields) or "-"
    if isinstance(node, Enum):
        return "enum", ", ".join(node.symbols)
    if isinstance(node, Fixed):
        return "fixed", f"{node.size} bytes"
    return type(node).__name__.lower(), "-"


def create_types_table(schema: Schema) -> Table:
    table = Table(show_header=True, header_style="bold", box=SIMPLE, border_style="dim")
    table.add_column("Name", no_wrap=True)
    table.add_column("Kind", justify="center")
    table.add_column("Contents")
    table.add_column("Doc", style="dim")

    for name, node in schema.names.items():
        kind, contents = describe(node)
        table.add_row(name, kind, contents, (node.doc or "").splitlines()[0] if node.doc else "")
    return table


def _run_inspect(args: argparse.Namespace) -> None:
    console = Console()
    try:
        schema = parse_schema_file(args.input)
    except (AvrogenError, OSError) as e:
        Console(stderr=True).print(
            f"Failed to parse schema: {e}", style="bold red", markup=False, highlight=False, soft_wrap=True
        )
        raise SystemExit(1) from e

    console.print(f"\n[bold blue]{args.input}[/bold blue]\n", highlight=False)
    if not schema.names:
        console.print("[dim]Named types: none[/dim]")
        return
    console.print(f"[dim]Named types: {len(schema.names)}[/dim]")
    console.print(create_types_table(schema))


def add_parser(subparsers) -> None:
    parser = subparsers.add_parser(
        "inspect",
        help="List the named types of an Avro schema.",
        description=dedent("""
            Parse an Avro JSON schema (*.avsc) and list its records, enums and
            fixed types with their fields, symbols or sizes.
        """),
    )
    parser.add_argument("input", help="Path to the schema file (*.avsc)")
    parser.set_defaults(func=_run_inspect)
