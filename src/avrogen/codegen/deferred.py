"""Union member definitions that can only be written once every type is declared.

A union may hold a record that is still only forward declared at the point the
union struct is written, so its accessor and constructor bodies are queued and
written after the whole graph has been traversed.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from avrogen.codegen.context import EmissionContext

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PendingAccessor:
    union_name: str
    type: str
    name: str
    index: int


@dataclass(frozen=True, slots=True)
class PendingConstructor:
    union_name: str
    type: str
    init_value: bool


def accessor_definitions(entry: PendingAccessor) -> str:
    """Const and mutable getters plus copy and move setters for one branch."""
    sn = f' {entry.union_name}::'
    check = (
        f"    if (idx_ != {entry.index}) {{\n"
        f"        throw avro::Exception(\"Invalid type for union {entry.union_name}\");\n"
        f"    }}\n"
    )
    return (
        "inline\n"
        f"const {entry.type}&{sn}get_{entry.name}() const {{\n"
        f"{check}"
        f"    return *std::any_cast<{entry.type} >(&value_);\n"
        "}\n\n"
        "inline\n"
        f"{entry.type}&{sn}get_{entry.name}() {{\n"
        f"{check}"
        f"    return *std::any_cast<{entry.type} >(&value_);\n"
        "}\n\n"
        "inline\n"
        f"void{sn}set_{entry.name}(const {entry.type}& v) {{\n"
        f"    idx_ = {entry.index};\n"
        "    value_ = v;\n"
        "}\n\n"
        "inline\n"
        f"void{sn}set_{entry.name}({entry.type}&& v) {{\n"
        f"    idx_ = {entry.index};\n"
        "    value_ = std::move(v);\n"
        "}\n\n"
    )


def constructor_definition(entry: PendingConstructor) -> str:
    init = f", value_({entry.type}())" if entry.init_value else ""
    return f"inline {entry.union_name}::{entry.union_name}() : idx_(0){init} {{ }}\n"


def flush(ctx: EmissionContext) -> None:
    """Write every queued accessor, then every queued constructor, in queue order."""
    logger.debug(
        f'Flushing {len(ctx.pending_accessors)} union accessors and '
        f'{len(ctx.pending_constructors)} union constructors'
    )
    for accessor in ctx.pending_accessors:
        ctx.write(accessor_definitions(accessor))
    for constructor in ctx.pending_constructors:
        ctx.write(constructor_definition(constructor))
    ctx.pending_accessors.clear()
    ctx.pending_constructors.clear()
