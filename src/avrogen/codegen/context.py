from __future__ import annotations

from dataclasses import dataclass
from typing import TextIO

from avrogen.codegen.deferred import PendingAccessor, PendingConstructor
from avrogen.codegen.identifiers import decorate
from avrogen.codegen.unions import UnionRegistry
from avrogen.errors import UnsupportedSchemaNodeError
from avrogen.schema import (
    Array,
    Enum,
    Fixed,
    Map,
    NamedReference,
    Primitive,
    Record,
    SchemaNode,
    Union,
    resolve
)

# C++ type used for each Avro primitive
PRIMITIVE_CPP_TYPES = {
    'null': 'avro::null',
    'boolean': 'bool',
    'int': 'int32_t',
    'long': 'int64_t',
    'float': 'float',
    'double': 'double',
    'string': 'std::string',
    'bytes': 'std::vector<uint8_t>',
}


@dataclass
class CodeGenOptions:
    """Settings for one run of the code generator.

    Args:
        namespace: C++ namespace wrapping the generated types, empty for none.
        schema_file: Path of the source schema, feeds generated union names.
        header_file: Path of the generated header, feeds a synthesized guard.
        guard: Include guard to reuse, empty to synthesize one.
        include_prefix: Prefix for the runtime headers, e.g. ``avro/``.
        union_typedefs: Emit ``<field>_t`` typedefs for union fields in records.
    """
    namespace: str = ''
    schema_file: str = ''
    header_file: str = ''
    guard: str = ''
    include_prefix: str = 'avro/'
    union_typedefs: bool = True


class EmissionContext:
    """All mutable state of a single compilation.

    A context is used for exactly one schema; nothing in it is shared between
    compilations.
    """

    def __init__(self, out: TextIO, options: CodeGenOptions):
        self.out = out
        self.options = options
        self.done: dict[SchemaNode, str] = {}
        self.doing: set[SchemaNode] = set()
        self.unions = UnionRegistry(options.schema_file)
        self.pending_accessors: list[PendingAccessor] = []
        self.pending_constructors: list[PendingConstructor] = []
        self.codec_done: set[SchemaNode] = set()
        self.in_namespace = False

    def write(self, text: str) -> None:
        self.out.write(text)

    def fullname(self, name: str) -> str:
        if not self.options.namespace:
            return name
        return f'{self.options.namespace}::{name}'

    def cpp_type_of(self, node: SchemaNode) -> str:
        """C++ spelling of ``node``'s type, qualified when outside the namespace."""
        if isinstance(node, Primitive) and node.type in PRIMITIVE_CPP_TYPES:
            return PRIMITIVE_CPP_TYPES[node.type]
        if isinstance(node, (Record, Enum)):
            name = decorate(node.name)
            return name if self.in_namespace else self.fullname(name)
        if isinstance(node, Array):
            return f'std::vector<{self.cpp_type_of(node.items)} >'
        if isinstance(node, Map):
            return f'std::map<std::string, {self.cpp_type_of(node.values)} >'
        if isinstance(node, Fixed):
            return f'std::array<uint8_t, {node.size}>'
        if isinstance(node, NamedReference):
            return self.cpp_type_of(resolve(node))
        if isinstance(node, Union):
            return self.fullname(self.done[node])
        raise UnsupportedSchemaNodeError(f'Unsupported schema node: {type(node).__name__}')
