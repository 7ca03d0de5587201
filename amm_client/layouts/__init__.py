"""Byte layouts of pool accounts and program instructions."""

from .registry import (
    INSTRUCTION_LAYOUTS,
    POOL_SCHEMAS,
    AccountSlotSpec,
    FieldKind,
    FieldSpec,
    InstructionLayout,
    PoolKind,
    SchemaDescriptor,
    instruction_layout_for,
    instruction_layout_for_tag,
    pool_schema_for,
    pool_schema_for_kind,
)

__all__ = [
    "INSTRUCTION_LAYOUTS",
    "POOL_SCHEMAS",
    "AccountSlotSpec",
    "FieldKind",
    "FieldSpec",
    "InstructionLayout",
    "PoolKind",
    "SchemaDescriptor",
    "instruction_layout_for",
    "instruction_layout_for_tag",
    "pool_schema_for",
    "pool_schema_for_kind",
]
