from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Union as TypingUnion

from avrogen.errors import UnresolvedReferenceError

# Avro primitive type names
# https://avro.apache.org/docs/current/specification/#primitive-types
PRIMITIVE_TYPES = (
    'null',
    'boolean',
    'int',
    'long',
    'float',
    'double',
    'string',
    'bytes',
)


# Nodes compare and hash by identity: a record shared between several fields is
# a single node, while two unions that merely look alike are two nodes.
@dataclass(eq=False)
class SchemaNode(ABC):
    ...


@dataclass(eq=False)
class Primitive(SchemaNode):
    type: str

    @classmethod
    def is_primitive(cls, type: str) -> bool:
        return type in PRIMITIVE_TYPES


@dataclass(eq=False)
class NamedSchemaNode(SchemaNode):
    name: str
    namespace: str | None = None
    doc: str | None = None

    @property
    def fullname(self) -> str:
        if self.namespace:
            return f'{self.namespace}.{self.name}'
        return self.name


@dataclass(eq=False)
class Fixed(NamedSchemaNode):
    size: int = 0


@dataclass(eq=False)
class Field:
    name: str
    type: SchemaNode
    doc: str | None = None
    default: Any = None


@dataclass(eq=False)
class Record(NamedSchemaNode):
    fields: list[Field] = field(default_factory=list)


@dataclass(eq=False)
class Enum(NamedSchemaNode):
    symbols: list[str] = field(default_factory=list)


@dataclass(eq=False)
class Array(SchemaNode):
    items: SchemaNode


@dataclass(eq=False)
class Map(SchemaNode):
    values: SchemaNode


@dataclass(eq=False)
class Union(SchemaNode):
    branches: list[SchemaNode]


@dataclass(eq=False)
class NamedReference(SchemaNode):
    name: str
    # Excluded from repr, cycles close through it
    target: SchemaNode | None = field(default=None, repr=False)


def resolve(node: SchemaNode) -> SchemaNode:
    """Follow ``NamedReference`` links until a concrete node is reached."""
    seen: set[int] = set()
    while isinstance(node, NamedReference):
        if node.target is None:
            raise UnresolvedReferenceError(f'Unresolved reference to {node.name!r}')
        if id(node) in seen:
            raise UnresolvedReferenceError(f'Reference cycle through {node.name!r}')
        seen.add(id(node))
        node = node.target
    return node


def doc_of(node: SchemaNode) -> str | None:
    """Documentation string carried by ``node``, if it is a named type."""
    node = resolve(node)
    if isinstance(node, NamedSchemaNode):
        return node.doc
    return None


@dataclass
class Schema:
    root: SchemaNode
    names: dict[str, NamedSchemaNode] = field(default_factory=dict)


class SchemaDecoder(ABC):
    @abstractmethod
    def parse(self, schema: TypingUnion[str, bytes, Any]) -> Schema:
        """Decode a schema document into a schema graph."""
        ...  # pragma: no cover


__all__ = [
    'PRIMITIVE_TYPES',
    'Array',
    'Enum',
    'Field',
    'Fixed',
    'Map',
    'NamedReference',
    'NamedSchemaNode',
    'Primitive',
    'Record',
    'Schema',
    'SchemaDecoder',
    'SchemaNode',
    'Union',
    'doc_of',
    'resolve',
]
