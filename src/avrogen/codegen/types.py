"""Emit C++ declarations for every type reachable from a schema root.

Traversal is depth first and memoised on node identity, so each record, enum
and union is declared exactly once, and always after the types it uses. A
cycle can only close through a named reference to a record; when the walk
reaches a record that is still being expanded, or re-enters such an array,
map or union, the record is produced in declaration form (``struct Name;``)
instead.
"""
from __future__ import annotations

import logging

from avrogen.codegen.context import EmissionContext
from avrogen.codegen.deferred import PendingAccessor, PendingConstructor
from avrogen.codegen.identifiers import decorate
from avrogen.errors import CodeGenError, UnsupportedSchemaNodeError
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
    doc_of,
    resolve
)

logger = logging.getLogger(__name__)

# Name used for union accessors (get_<name>/set_<name>) of unnamed branches
_BRANCH_NAMES = {
    'null': 'null',
    'boolean': 'bool',
    'int': 'int',
    'long': 'long',
    'float': 'float',
    'double': 'double',
    'string': 'string',
    'bytes': 'bytes',
}


def branch_name_of(node: SchemaNode) -> str:
    """Accessor name of a union branch holding ``node``."""
    if isinstance(node, Primitive) and node.type in _BRANCH_NAMES:
        return _BRANCH_NAMES[node.type]
    if isinstance(node, (Record, Enum, Fixed)):
        return decorate(node.name)
    if isinstance(node, Array):
        return 'array'
    if isinstance(node, Map):
        return 'map'
    if isinstance(node, NamedReference):
        return branch_name_of(resolve(node))
    raise UnsupportedSchemaNodeError(f'Unsupported union branch: {type(node).__name__}')


def is_null(node: SchemaNode) -> bool:
    node = resolve(node)
    return isinstance(node, Primitive) and node.type == 'null'


def doc_comment(doc: str | None, indent: str = '') -> str:
    """Render ``doc`` as ``//`` comment lines.

    A line ending in a backslash would continue the comment onto the next
    source line, so ``(backslash)`` is appended to such lines.
    """
    if not doc:
        return ''
    lines = doc.split('\n')
    if lines[-1] == '':
        lines.pop()

    out = []
    for line in lines:
        line = line.replace('\r', '')
        if not line:
            out.append(f'{indent}//\n')
            continue
        if line.rstrip(' \t\n\v\f\r').endswith('\\'):
            line += '(backslash)'
        out.append(f'{indent}// {line}\n')
    return ''.join(out)


class TypeEmitter:
    def __init__(self, ctx: EmissionContext):
        self._ctx = ctx

    def emit_type(self, node: SchemaNode) -> str:
        """Return the C++ type name of ``node``, declaring it on first use."""
        node = resolve(node)
        if (existing := self._ctx.done.get(node)) is not None:
            return existing
        if isinstance(node, Record) and node in self._ctx.doing:
            return self.emit_declaration(node)
        result = self._emit(node)
        self._ctx.done[node] = result
        return result

    def _emit(self, node: SchemaNode) -> str:
        if isinstance(node, (Primitive, Fixed)):
            return self._ctx.cpp_type_of(node)
        if isinstance(node, Array):
            return f'std::vector<{self._element_type(node, node.items)} >'
        if isinstance(node, Map):
            return f'std::map<std::string, {self._element_type(node, node.values)} >'
        if isinstance(node, Record):
            return self._emit_record(node)
        if isinstance(node, Enum):
            return self._emit_enum(node)
        if isinstance(node, Union):
            return self.emit_union(node)
        raise UnsupportedSchemaNodeError(f'Unsupported schema node: {type(node).__name__}')

    def _element_type(self, container: SchemaNode, element: SchemaNode) -> str:
        if container in self._ctx.doing:
            return self.emit_declaration(element)
        self._ctx.doing.add(container)
        result = self.emit_type(element)
        self._ctx.doing.discard(container)
        return result

    def emit_declaration(self, node: SchemaNode) -> str:
        """Return the type name of ``node`` usable before its full definition."""
        node = resolve(node)
        if isinstance(node, (Primitive, Fixed)):
            return self._ctx.cpp_type_of(node)
        if isinstance(node, Array):
            return f'std::vector<{self.emit_declaration(node.items)} >'
        if isinstance(node, Map):
            return f'std::map<std::string, {self.emit_declaration(node.values)} >'
        if isinstance(node, Record):
            if (existing := self._ctx.done.get(node)) is not None:
                return existing
            name = self._ctx.cpp_type_of(node)
            self._ctx.write(f'struct {name};\n')
            return name
        if isinstance(node, (Enum, Union)):
            return self.emit_type(node)
        raise UnsupportedSchemaNodeError(f'Unsupported schema node: {type(node).__name__}')

    def _emit_enum(self, node: Enum) -> str:
        name = decorate(node.name)
        ctx = self._ctx
        ctx.write(doc_comment(node.doc))
        ctx.write(f'enum class {name}: unsigned {{\n')
        for symbol in node.symbols:
            ctx.write(f'    {decorate(symbol)},\n')
        ctx.write('};\n\n')
        logger.debug(f'Declared enum {node.fullname} as {name}')
        return name

    def _emit_record(self, node: Record) -> str:
        ctx = self._ctx
        ctx.doing.add(node)
        try:
            types = [self.emit_type(field.type) for field in node.fields]
        finally:
            ctx.doing.discard(node)

        name = decorate(node.name)
        ctx.write(doc_comment(node.doc))
        ctx.write(f'struct {name} {{\n')
        if ctx.options.union_typedefs:
            for i, field in enumerate(node.fields):
                if isinstance(field.type, Union):
                    ctx.write(f'    typedef {types[i]} {field.name}_t;\n')
                    types[i] = f'{field.name}_t'
                if isinstance(field.type, Array) and isinstance(field.type.items, Union):
                    ctx.write(f'    typedef {types[i]}::value_type {field.name}_item_t;\n')

        for field, field_type in zip(node.fields, types):
            ctx.write(doc_comment(field.doc or doc_of(field.type), '    '))
            ctx.write(f'    {field_type} {decorate(field.name)};\n')

        ctx.write(f'    {name}()')
        if node.fields:
            ctx.write(' :')
        ctx.write('\n')
        initializers = [
            f'        {decorate(field.name)}({field_type}())'
            for field, field_type in zip(node.fields, types)
        ]
        if initializers:
            ctx.write(',\n'.join(initializers) + '\n')
        ctx.write('        { }\n')
        ctx.write('};\n\n')
        logger.debug(f'Declared record {node.fullname} as {name}')
        return name

    def emit_union(self, node: Union) -> str:
        """Declare the struct for ``node`` unless an identical union already exists."""
        ctx = self._ctx
        if not node.branches:
            raise CodeGenError('Union must have at least one branch')

        if node in ctx.doing:
            types = [self.emit_declaration(branch) for branch in node.branches]
        else:
            ctx.doing.add(node)
            types = [self.emit_type(branch) for branch in node.branches]
            ctx.doing.discard(node)
        names = [branch_name_of(branch) for branch in node.branches]

        if (existing := ctx.done.get(node)) is not None:
            return existing
        if (existing := ctx.unions.lookup(types)) is not None:
            logger.debug(f'Reusing {existing} for union of {types}')
            return existing
        result = ctx.unions.assign(types)

        ctx.write(
            f'struct {result} {{\n'
            'private:\n'
            '    size_t idx_;\n'
            '    std::any value_;\n'
            'public:\n'
            '    /** enum representing union branches as returned by the idx() function */\n'
            '    enum class Branch: size_t {\n'
        )
        used: set[str] = set()
        for i, branch_name in enumerate(names):
            branch_name = decorate(branch_name)
            if branch_name in used:
                postfix = 2
                while f'{branch_name}_{postfix}' in used:
                    postfix += 1
                branch_name = f'{branch_name}_{postfix}'
            used.add(branch_name)
            ctx.write(f'        {branch_name} = {i},\n')
        ctx.write('    };\n')
        ctx.write('    size_t idx() const { return idx_; }\n')
        ctx.write('    Branch branch() const { return static_cast<Branch>(idx_); }\n')

        for i, branch in enumerate(node.branches):
            if is_null(branch):
                ctx.write(
                    '    bool is_null() const {\n'
                    f'        return (idx_ == {i});\n'
                    '    }\n'
                    '    void set_null() {\n'
                    f'        idx_ = {i};\n'
                    '        value_ = std::any();\n'
                    '    }\n'
                )
                continue
            branch_type = types[i]
            branch_name = names[i]
            ctx.write(
                f'    const {branch_type}& get_{branch_name}() const;\n'
                f'    {branch_type}& get_{branch_name}();\n'
                f'    void set_{branch_name}(const {branch_type}& v);\n'
                f'    void set_{branch_name}({branch_type}&& v);\n'
            )
            ctx.pending_accessors.append(PendingAccessor(result, branch_type, branch_name, i))

        ctx.write(f'    {result}();\n')
        ctx.pending_constructors.append(
            PendingConstructor(result, types[0], not is_null(node.branches[0]))
        )
        ctx.write('};\n\n')
        logger.debug(f'Declared union {result} with branches {names}')
        return result


__all__ = ['TypeEmitter', 'branch_name_of', 'doc_comment', 'is_null']
