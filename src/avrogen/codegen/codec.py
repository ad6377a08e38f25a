"""Emit ``avro::codec_traits`` specializations for the generated types.

Runs after :class:`~avrogen.codegen.types.TypeEmitter` over the same graph and
reuses its memo for union names. Enum indices and union discriminants are the
zero based declaration positions, matching the Avro binary encoding; out of
range values throw ``avro::Exception`` and are never clamped.
"""
from __future__ import annotations

import logging

from avrogen.codegen.context import EmissionContext
from avrogen.codegen.identifiers import decorate
from avrogen.codegen.types import branch_name_of, is_null
from avrogen.errors import CodeGenError, UnsupportedSchemaNodeError
from avrogen.schema import (
    Array,
    Enum,
    Fixed,
    Map,
    Primitive,
    Record,
    SchemaNode,
    Union,
    resolve
)

logger = logging.getLogger(__name__)


class CodecEmitter:
    def __init__(self, ctx: EmissionContext):
        self._ctx = ctx

    def emit_codec(self, node: SchemaNode) -> None:
        """Emit codec traits for ``node`` and every type it depends on."""
        node = resolve(node)
        if isinstance(node, (Primitive, Fixed)):
            # Handled by the runtime's own codec_traits
            return
        if isinstance(node, (Array, Map)):
            self.emit_codec(node.items if isinstance(node, Array) else node.values)
            return
        if isinstance(node, Record):
            if node not in self._ctx.codec_done:
                self._ctx.codec_done.add(node)
                self._emit_record(node)
            return
        if isinstance(node, Enum):
            if node not in self._ctx.codec_done:
                self._ctx.codec_done.add(node)
                self._emit_enum(node)
            return
        if isinstance(node, Union):
            self._emit_union(node)
            return
        raise UnsupportedSchemaNodeError(f'Unsupported schema node: {type(node).__name__}')

    def _emit_enum(self, node: Enum) -> None:
        if not node.symbols:
            raise CodeGenError(f'Enum {node.fullname} has no symbols')
        fn = self._ctx.fullname(decorate(node.name))
        last = decorate(node.symbols[-1])
        self._ctx.write(
            f"template<> struct codec_traits<{fn}> {{\n"
            f"    static void encode(Encoder& e, {fn} v) {{\n"
            f"        if (v > {fn}::{last})\n"
            "        {\n"
            "            std::ostringstream error;\n"
            f"            error << \"enum value \" << static_cast<unsigned>(v) << \" is out of bound for {fn}"
            " and cannot be encoded\";\n"
            "            throw avro::Exception(error.str());\n"
            "        }\n"
            "        e.encodeEnum(static_cast<size_t>(v));\n"
            "    }\n"
            f"    static void decode(Decoder& d, {fn}& v) {{\n"
            "        size_t index = d.decodeEnum();\n"
            f"        if (index > static_cast<size_t>({fn}::{last}))\n"
            "        {\n"
            "            std::ostringstream error;\n"
            f"            error << \"enum value \" << index << \" is out of bound for {fn}"
            " and cannot be decoded\";\n"
            "            throw avro::Exception(error.str());\n"
            "        }\n"
            f"        v = static_cast<{fn}>(index);\n"
            "    }\n"
            "};\n\n"
        )
        logger.debug(f'Emitted codec traits for enum {fn}')

    def _emit_record(self, node: Record) -> None:
        for field in node.fields:
            self.emit_codec(field.type)

        ctx = self._ctx
        fn = ctx.fullname(decorate(node.name))
        members = [decorate(field.name) for field in node.fields]
        ctx.write(f"template<> struct codec_traits<{fn}> {{\n")

        if not members:
            # Resolving decoders expect fieldOrder() even for records without fields
            ctx.write(
                f"    static void encode(Encoder&, const {fn}&) {{}}\n"
                f"    static void decode(Decoder& d, {fn}&) {{\n"
                "        if (avro::ResolvingDecoder *rd = dynamic_cast<avro::ResolvingDecoder *>(&d)) {\n"
                "            rd->fieldOrder();\n"
                "        }\n"
                "    }\n"
                "};\n"
            )
            logger.debug(f'Emitted codec traits for empty record {fn}')
            return

        ctx.write(f"    static void encode(Encoder& e, const {fn}& v) {{\n")
        for member in members:
            ctx.write(f"        avro::encode(e, v.{member});\n")
        ctx.write(
            "    }\n"
            f"    static void decode(Decoder& d, {fn}& v) {{\n"
            "        if (avro::ResolvingDecoder *rd =\n"
            "            dynamic_cast<avro::ResolvingDecoder *>(&d)) {\n"
            "            const std::vector<size_t> fo = rd->fieldOrder();\n"
            "            for (std::vector<size_t>::const_iterator it = fo.begin();\n"
            "                it != fo.end(); ++it) {\n"
            "                switch (*it) {\n"
        )
        for i, member in enumerate(members):
            ctx.write(
                f"                case {i}:\n"
                f"                    avro::decode(d, v.{member});\n"
                "                    break;\n"
            )
        ctx.write(
            "                default:\n"
            "                    break;\n"
            "                }\n"
            "            }\n"
            "        } else {\n"
        )
        for member in members:
            ctx.write(f"            avro::decode(d, v.{member});\n")
        ctx.write(
            "        }\n"
            "    }\n"
            "};\n\n"
        )
        logger.debug(f'Emitted codec traits for record {fn}')

    def _emit_union(self, node: Union) -> None:
        ctx = self._ctx
        if node not in ctx.done:
            raise CodeGenError('Union codec requested before its type was emitted')
        fn = ctx.fullname(ctx.done[node])
        if ctx.unions.traits_emitted(fn):
            return

        for branch in node.branches:
            self.emit_codec(branch)
        # A branch may have led back to this union and emitted it already.
        if ctx.unions.traits_emitted(fn):
            return

        count = len(node.branches)
        ctx.write(
            f"template<> struct codec_traits<{fn}> {{\n"
            f"    static void encode(Encoder& e, {fn} v) {{\n"
            "        e.encodeUnionIndex(v.idx());\n"
            "        switch (v.idx()) {\n"
        )
        for i, branch in enumerate(node.branches):
            ctx.write(f"        case {i}:\n")
            if is_null(branch):
                ctx.write("            e.encodeNull();\n")
            else:
                ctx.write(f"            avro::encode(e, v.get_{branch_name_of(branch)}());\n")
            ctx.write("            break;\n")
        ctx.write(
            "        }\n"
            "    }\n"
            f"    static void decode(Decoder& d, {fn}& v) {{\n"
            "        size_t n = d.decodeUnionIndex();\n"
            f"        if (n >= {count}) {{ throw avro::Exception(\"Union index too big\"); }}\n"
            "        switch (n) {\n"
        )
        for i, branch in enumerate(node.branches):
            ctx.write(f"        case {i}:\n")
            if is_null(branch):
                ctx.write(
                    "            d.decodeNull();\n"
                    "            v.set_null();\n"
                )
            else:
                ctx.write(
                    "            {\n"
                    f"                {ctx.cpp_type_of(branch)} vv;\n"
                    "                avro::decode(d, vv);\n"
                    f"                v.set_{branch_name_of(branch)}(std::move(vv));\n"
                    "            }\n"
                )
            ctx.write("            break;\n")
        ctx.write(
            "        }\n"
            "    }\n"
            "};\n\n"
        )
        ctx.unions.mark_traits_emitted(fn)
        logger.debug(f'Emitted codec traits for union {fn}')
