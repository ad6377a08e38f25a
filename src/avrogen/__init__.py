from importlib.metadata import version

__version__ = version("pyavrogen")

from .codegen.context import CodeGenOptions
from .codegen.generator import CodeGen, generate_header
from .schema.avsc import AvscSchemaDecoder, parse_schema_file

__all__ = [
    'AvscSchemaDecoder',
    'CodeGen',
    'CodeGenOptions',
    '__version__',
    'generate_header',
    'parse_schema_file',
]
