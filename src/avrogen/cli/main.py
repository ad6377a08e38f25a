import argparse
import logging

from rich.console import Console

from avrogen import __version__
from avrogen.cli import generate, inspect_schema


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="avrogen",
        description=(
            "Command line interface for avrogen. Generates C++ types and Avro "
            "codec traits from Avro JSON schemas."
        ),
    )
    parser.add_argument(
        "-V", "--version", action="store_true", help="Print the version and exit."
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging."
    )
    parser.set_defaults(func=lambda args: parser.print_help())

    subparsers = parser.add_subparsers(dest="command")
    generate.add_parser(subparsers)
    inspect_schema.add_parser(subparsers)

    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)
    if args.version:
        Console().print(__version__, highlight=False)
        return
    args.func(args)


if __name__ == "__main__":
    main()
