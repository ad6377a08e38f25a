import json

import pytest

from avrogen.errors import AvscError, SchemaError, UnresolvedReferenceError
from avrogen.schema import (
    Array,
    Enum,
    Fixed,
    Map,
    NamedReference,
    Primitive,
    Record,
    Union,
    resolve
)
from avrogen.schema.avsc import AvscSchemaDecoder, parse_schema_file


def test_parse_primitive_name():
    schema = AvscSchemaDecoder().parse('"string"')
    assert isinstance(schema.root, Primitive)
    assert schema.root.type == "string"
    assert schema.names == {}


def test_parse_primitive_object_ignores_logical_type():
    schema = AvscSchemaDecoder().parse({"type": "long", "logicalType": "timestamp-millis"})
    assert isinstance(schema.root, Primitive)
    assert schema.root.type == "long"


def test_parse_record_fields_in_order():
    text = json.dumps({
        "type": "record",
        "name": "Point",
        "namespace": "geo",
        "doc": "A point",
        "fields": [
            {"name": "x", "type": "double", "doc": "x coordinate"},
            {"name": "y", "type": "double", "default": 0.0},
        ],
    })
    schema = AvscSchemaDecoder().parse(text)

    record = schema.root
    assert isinstance(record, Record)
    assert record.name == "Point"
    assert record.namespace == "geo"
    assert record.fullname == "geo.Point"
    assert record.doc == "A point"
    assert [f.name for f in record.fields] == ["x", "y"]
    assert record.fields[0].doc == "x coordinate"
    assert record.fields[1].default == 0.0
    assert schema.names == {"geo.Point": record}


def test_parse_enum_fixed_array_map_union():
    schema = AvscSchemaDecoder().parse({
        "type": "record",
        "name": "All",
        "fields": [
            {"name": "color", "type": {"type": "enum", "name": "Color", "symbols": ["RED", "GREEN"]}},
            {"name": "hash", "type": {"type": "fixed", "name": "MD5", "size": 16}},
            {"name": "tags", "type": {"type": "array", "items": "string"}},
            {"name": "attrs", "type": {"type": "map", "values": "int"}},
            {"name": "maybe", "type": ["null", "string"]},
        ],
    })
    fields = {f.name: f.type for f in schema.root.fields}

    assert isinstance(fields["color"], Enum)
    assert fields["color"].symbols == ["RED", "GREEN"]
    assert isinstance(fields["hash"], Fixed)
    assert fields["hash"].size == 16
    assert isinstance(fields["tags"], Array)
    assert fields["tags"].items.type == "string"
    assert isinstance(fields["attrs"], Map)
    assert fields["attrs"].values.type == "int"
    assert isinstance(fields["maybe"], Union)
    assert [b.type for b in fields["maybe"].branches] == ["null", "string"]
    assert set(schema.names) == {"All", "Color", "MD5"}


def test_self_reference_resolves_to_same_record():
    schema = AvscSchemaDecoder().parse({
        "type": "record",
        "name": "Node",
        "namespace": "list",
        "fields": [
            {"name": "value", "type": "int"},
            {"name": "next", "type": ["null", "Node"]},
        ],
    })
    node = schema.root
    ref = node.fields[1].type.branches[1]
    assert isinstance(ref, NamedReference)
    assert ref.name == "list.Node"
    assert resolve(ref) is node


def test_reference_to_earlier_definition_is_shared():
    schema = AvscSchemaDecoder().parse({
        "type": "record",
        "name": "Pair",
        "fields": [
            {"name": "a", "type": {"type": "record", "name": "Item", "fields": []}},
            {"name": "b", "type": "Item"},
        ],
    })
    a, b = (f.type for f in schema.root.fields)
    assert resolve(b) is a


def test_dotted_name_sets_namespace():
    schema = AvscSchemaDecoder().parse({
        "type": "enum", "name": "com.example.Suit", "symbols": ["SPADES"],
    })
    assert schema.root.name == "Suit"
    assert schema.root.namespace == "com.example"


def test_nested_type_inherits_namespace():
    schema = AvscSchemaDecoder().parse({
        "type": "record",
        "name": "Outer",
        "namespace": "ns",
        "fields": [
            {"name": "inner", "type": {"type": "record", "name": "Inner", "fields": []}},
            {"name": "again", "type": "ns.Inner"},
        ],
    })
    assert "ns.Inner" in schema.names


def test_invalid_json_raises():
    with pytest.raises(AvscError, match="Invalid JSON"):
        AvscSchemaDecoder().parse("{not json")


def test_unknown_type_raises():
    with pytest.raises(AvscError, match="Unknown type: Missing"):
        AvscSchemaDecoder().parse({
            "type": "record", "name": "R", "fields": [{"name": "m", "type": "Missing"}],
        })


def test_missing_attribute_raises():
    with pytest.raises(AvscError, match='missing required attribute "items"'):
        AvscSchemaDecoder().parse({"type": "array"})


def test_duplicate_definition_raises():
    with pytest.raises(AvscError, match="Duplicate definition of E"):
        AvscSchemaDecoder().parse([
            {"type": "enum", "name": "E", "symbols": ["A"]},
            {"type": "enum", "name": "E", "symbols": ["B"]},
        ])


def test_empty_enum_raises():
    with pytest.raises(AvscError):
        AvscSchemaDecoder().parse({"type": "enum", "name": "E", "symbols": []})


def test_avsc_error_is_schema_error():
    assert issubclass(AvscError, SchemaError)


def test_unresolved_reference_raises():
    with pytest.raises(UnresolvedReferenceError):
        resolve(NamedReference("nowhere"))


def test_parse_schema_file(tmp_path):
    path = tmp_path / "point.avsc"
    path.write_text(json.dumps({"type": "fixed", "name": "Id", "size": 4}))
    schema = parse_schema_file(path)
    assert isinstance(schema.root, Fixed)
    assert schema.root.size == 4


def test_non_utf8_bytes_raise():
    with pytest.raises(AvscError, match="Invalid JSON"):
        AvscSchemaDecoder().parse(b'{"type": "enum", "name": "\xff", "symbols": ["A"]}')


def test_parse_schema_file_non_utf8(tmp_path):
    path = tmp_path / "bad.avsc"
    path.write_bytes(b'{"type": "\xff"}')
    with pytest.raises(AvscError, match="Invalid JSON"):
        parse_schema_file(path)
