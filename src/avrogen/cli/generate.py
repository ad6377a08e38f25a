"""Generate a C++ header from an Avro JSON schema."""
import argparse
import logging
import sys
from pathlib import Path
from textwrap import dedent

from rich.console import Console

from avrogen.codegen.context import CodeGenOptions
from avrogen.codegen.generator import generate_header
from avrogen.codegen.guard import read_guard
from avrogen.errors import AvrogenError, AvscError
from avrogen.schema.avsc import AvscSchemaDecoder, parse_schema_file

logger = logging.getLogger(__name__)


def normalize_include_prefix(prefix: str) -> str:
    """``-`` means no prefix, anything else is used as a directory."""
    if prefix == '-' or not prefix:
        return ''
    if not prefix.endswith('/'):
        return prefix + '/'
    return prefix


def generate(
    input_path: str | Path | None,
    output_path: str | Path | None,
    *,
    namespace: str = '',
    include_prefix: str = 'avro',
    union_typedefs: bool = True,
) -> str:
    """Compile the schema at ``input_path`` and write the header to ``output_path``.

    Reads the schema from stdin when ``input_path`` is ``None`` and returns the
    header text without writing a file when ``output_path`` is ``None``. An
    existing output file's include guard is reused. The file is only written
    once generation has succeeded.
    """
    if input_path is not None:
        schema = parse_schema_file(input_path)
    else:
        try:
            text = sys.stdin.read()
        except UnicodeDecodeError as e:
            raise AvscError(f'Invalid JSON schema: {e}') from e
        schema = AvscSchemaDecoder().parse(text)

    options = CodeGenOptions(
        namespace=namespace,
        schema_file=str(input_path) if input_path is not None else '',
        header_file=str(output_path) if output_path is not None else '',
        guard=read_guard(output_path) if output_path is not None else '',
        include_prefix=normalize_include_prefix(include_prefix),
        union_typedefs=union_typedefs,
    )
    if options.guard:
        logger.debug(f'Reusing include guard {options.guard}')
    header = generate_header(schema, options)

    if output_path is not None:
        Path(output_path).write_text(header, encoding='utf-8')
        logger.info(f'Wrote {output_path}')
    return header


def _run_generate(args: argparse.Namespace) -> None:
    console = Console(stderr=True)
    try:
        header = generate(
            args.input,
            args.output,
            namespace=args.namespace,
            include_prefix=args.include_prefix,
            union_typedefs=not args.no_union_typedef,
        )
    except (AvrogenError, OSError) as e:
        console.print(
            f"Failed to parse or compile schema: {e}",
            style="bold red",
            markup=False,
            highlight=False,
            soft_wrap=True,
        )
        raise SystemExit(1) from e

    if args.output is None:
        sys.stdout.write(header)


def add_parser(subparsers) -> None:
    parser = subparsers.add_parser(
        "generate",
        help="Generate a C++ header from an Avro schema.",
        description=dedent("""
            Generate C++ type declarations and avro::codec_traits
            specializations for an Avro JSON schema (*.avsc).

            Structurally identical unions are emitted once and shared. When the
            output file already exists its include guard is kept, so
            regenerating an unchanged schema gives identical output.
        """),
    )
    parser.add_argument("-i", "--input", help="Input schema file, stdin if omitted.")
    parser.add_argument("-o", "--output", help="Output header file, stdout if omitted.")
    parser.add_argument(
        "-n", "--namespace", default="", help="C++ namespace for the generated code."
    )
    parser.add_argument(
        "-p", "--include-prefix",
        default="avro",
        help="Prefix for the runtime include headers, - for none (default: avro).",
    )
    parser.add_argument(
        "-U", "--no-union-typedef",
        action="store_true",
        help="Do not generate typedefs for unions in records.",
    )
    parser.set_defaults(func=_run_generate)
