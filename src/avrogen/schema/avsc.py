"""Parse Avro JSON schema documents (``.avsc``) into a schema graph.

Only the parts of a schema that affect generated code are kept: names,
namespaces, documentation, field order, enum symbols and fixed sizes.
Attributes such as ``aliases``, ``order`` or ``logicalType`` are ignored.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from avrogen.errors import AvscError
from avrogen.schema import (
    Array,
    Enum,
    Field,
    Fixed,
    Map,
    NamedReference,
    NamedSchemaNode,
    Primitive,
    Record,
    Schema,
    SchemaDecoder,
    SchemaNode,
    Union
)

logger = logging.getLogger(__name__)

_NAMED_TYPES = ('record', 'error', 'enum', 'fixed')


class AvscSchemaDecoder(SchemaDecoder):
    def parse(self, schema: str | bytes | Any) -> Schema:
        if isinstance(schema, (str, bytes)):
            try:
                schema = json.loads(schema)
            except (json.JSONDecodeError, UnicodeDecodeError) as e:
                raise AvscError(f'Invalid JSON schema: {e}') from e

        names: dict[str, NamedSchemaNode] = {}
        root = self._parse_node(schema, None, names)
        logger.debug(f'Parsed schema with {len(names)} named types')
        return Schema(root, names)

    def _split_name(self, name: str, namespace: str | None) -> tuple[str, str | None]:
        if '.' in name:
            space, _, simple = name.rpartition('.')
            return simple, space or None
        return name, namespace

    def _lookup(self, name: str, namespace: str | None, names: dict[str, NamedSchemaNode]) -> SchemaNode:
        candidates = [name]
        if '.' not in name and namespace:
            candidates.insert(0, f'{namespace}.{name}')
        for candidate in candidates:
            if candidate in names:
                return NamedReference(candidate, target=names[candidate])
        raise AvscError(f'Unknown type: {name}')

    def _require(self, obj: dict[str, Any], key: str, kind: str) -> Any:
        if key not in obj:
            raise AvscError(f'{kind} is missing required attribute "{key}"')
        return obj[key]

    def _register(self, node: NamedSchemaNode, names: dict[str, NamedSchemaNode]) -> None:
        if node.fullname in names:
            raise AvscError(f'Duplicate definition of {node.fullname}')
        names[node.fullname] = node

    def _parse_node(self, obj: Any, namespace: str | None, names: dict[str, NamedSchemaNode]) -> SchemaNode:
        if isinstance(obj, str):
            if Primitive.is_primitive(obj):
                return Primitive(obj)
            return self._lookup(obj, namespace, names)

        if isinstance(obj, list):
            return Union([self._parse_node(branch, namespace, names) for branch in obj])

        if not isinstance(obj, dict):
            raise AvscError(f'Invalid schema element: {obj!r}')

        type_name = self._require(obj, 'type', 'Schema')
        if isinstance(type_name, (dict, list)):
            return self._parse_node(type_name, namespace, names)
        if not isinstance(type_name, str):
            raise AvscError(f'Invalid type attribute: {type_name!r}')

        if Primitive.is_primitive(type_name):
            return Primitive(type_name)
        if type_name == 'array':
            return Array(self._parse_node(self._require(obj, 'items', 'Array'), namespace, names))
        if type_name == 'map':
            return Map(self._parse_node(self._require(obj, 'values', 'Map'), namespace, names))
        if type_name not in _NAMED_TYPES:
            return self._lookup(type_name, namespace, names)

        raw_name = self._require(obj, 'name', type_name.capitalize())
        if not isinstance(raw_name, str) or not raw_name:
            raise AvscError(f'Invalid name for {type_name}: {raw_name!r}')
        name, space = self._split_name(raw_name, obj.get('namespace', namespace))
        doc = obj.get('doc')

        if type_name == 'enum':
            symbols = self._require(obj, 'symbols', 'Enum')
            if not isinstance(symbols, list) or not symbols:
                raise AvscError(f'Enum {raw_name} must declare at least one symbol')
            if not all(isinstance(s, str) for s in symbols):
                raise AvscError(f'Enum {raw_name} symbols must be strings')
            enum = Enum(name, space, doc, symbols=list(symbols))
            self._register(enum, names)
            return enum

        if type_name == 'fixed':
            size = self._require(obj, 'size', 'Fixed')
            if not isinstance(size, int) or isinstance(size, bool) or size < 0:
                raise AvscError(f'Fixed {raw_name} has invalid size {size!r}')
            fixed = Fixed(name, space, doc, size=size)
            self._register(fixed, names)
            return fixed

        # Registered before the fields are parsed so they can refer back to it.
        record = Record(name, space, doc)
        self._register(record, names)
        raw_fields = self._require(obj, 'fields', 'Record')
        if not isinstance(raw_fields, list):
            raise AvscError(f'Fields of record {raw_name} must be a list')
        for raw_field in raw_fields:
            if not isinstance(raw_field, dict):
                raise AvscError(f'Invalid field in record {raw_name}: {raw_field!r}')
            field_name = self._require(raw_field, 'name', 'Field')
            field_type = self._parse_node(self._require(raw_field, 'type', 'Field'), space, names)
            record.fields.append(
                Field(field_name, field_type, raw_field.get('doc'), raw_field.get('default'))
            )
        return record


def parse_schema_file(path: str | Path) -> Schema:
    """Read and parse the ``.avsc`` document at ``path``."""
    return AvscSchemaDecoder().parse(Path(path).read_bytes())


__all__ = ['AvscSchemaDecoder', 'parse_schema_file']
