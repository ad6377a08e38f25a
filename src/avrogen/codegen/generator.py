"""Generate a C++ header with types and codec traits for an Avro schema."""
from __future__ import annotations

import io
import logging
import random
from typing import TextIO

from avrogen import __version__
from avrogen.codegen import deferred
from avrogen.codegen.codec import CodecEmitter
from avrogen.codegen.context import CodeGenOptions, EmissionContext
from avrogen.codegen.guard import make_guard
from avrogen.codegen.types import TypeEmitter
from avrogen.schema import Schema, SchemaNode

logger = logging.getLogger(__name__)

_LICENSE_HEADER = """\
/**
 * Licensed to the Apache Software Foundation (ASF) under one
 * or more contributor license agreements.  See the NOTICE file
 * distributed with this work for additional information
 * regarding copyright ownership.  The ASF licenses this file
 * to you under the Apache License, Version 2.0 (the
 * "License"); you may not use this file except in compliance
 * with the License.  You may obtain a copy of the License at
 *
 *     https://www.apache.org/licenses/LICENSE-2.0
 *
 * Unless required by applicable law or agreed to in writing, software
 * distributed under the License is distributed on an "AS IS" BASIS,
 * WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
 * See the License for the specific language governing permissions and
 * limitations under the License.
 */

"""


class CodeGen:
    """Writes one complete header per :meth:`generate` call to ``out``.

    Each call works on a fresh :class:`EmissionContext`, so a single
    ``CodeGen`` can be reused for several schemas without sharing state
    between them.

    Args:
        out: Stream receiving the generated text.
        options: Namespace, file names, guard and include settings.
        rng: Random source for synthesized guards.
    """

    def __init__(self, out: TextIO, options: CodeGenOptions, rng: random.Random | None = None):
        self._out = out
        self._options = options
        self._rng = rng

    def guard(self) -> str:
        if self._options.guard:
            return self._options.guard
        return make_guard(self._options.header_file, self._rng)

    def generate(self, schema: Schema | SchemaNode) -> None:
        root = schema.root if isinstance(schema, Schema) else schema
        options = self._options
        ctx = EmissionContext(self._out, options)

        ctx.write(_LICENSE_HEADER)
        ctx.write(f'/* This code was generated by avrogen {__version__}. Do not edit.*/\n\n')

        guard = self.guard()
        ctx.write(f'#ifndef {guard}\n')
        ctx.write(f'#define {guard}\n\n\n')

        prefix = options.include_prefix
        ctx.write(
            '#include <sstream>\n'
            '#include <any>\n'
            '#include <utility>\n'
            f'#include "{prefix}Specific.hh"\n'
            f'#include "{prefix}Encoder.hh"\n'
            f'#include "{prefix}Decoder.hh"\n'
            '\n'
        )

        if options.namespace:
            ctx.write(f'namespace {options.namespace} {{\n')
            ctx.in_namespace = True

        TypeEmitter(ctx).emit_type(root)
        deferred.flush(ctx)

        if options.namespace:
            ctx.in_namespace = False
            ctx.write('}\n')

        ctx.write('namespace avro {\n')
        CodecEmitter(ctx).emit_codec(root)
        ctx.write('}\n')
        ctx.write('#endif\n')
        self._out.flush()
        logger.debug(f'Generated {len(ctx.done)} types for {options.schema_file or "<stdin>"}')


def generate_header(
    schema: Schema | SchemaNode,
    options: CodeGenOptions | None = None,
    rng: random.Random | None = None,
) -> str:
    """Return the generated header for ``schema`` as a string."""
    out = io.StringIO()
    CodeGen(out, options or CodeGenOptions(), rng).generate(schema)
    return out.getvalue()
