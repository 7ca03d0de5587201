"""Layout registry: byte layouts for pool accounts and instruction payloads.

This is the only place that knows field offsets, widths and instruction tags.
The decoder, encoder and route builder all look layouts up here, so a layout
change is a one-line table edit.

Pool account schemas are selected by byte length alone:

    57  native pool, no fee
    89  regular pool, no fee
    137 regular pool, with fee
    169 native pool, with fee (native mint stored ahead of the token mint)

Instruction payloads are a one-byte tag followed by the declared fields,
little-endian, at fixed widths.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from construct import (
    Bytes,
    Const,
    Construct,
    Flag,
    Int8ul,
    Int32ul,
    Int64ul,
    PrefixedArray,
    Struct,
)

from amm_client.constants import FEE_AWARE_FEE_BPS
from amm_client.errors import UnrecognizedSchema


class FieldKind(str, Enum):
    """Wire type of a layout field."""

    U8 = "u8"
    BOOL = "bool"
    U64 = "u64"
    PUBKEY = "pubkey"
    # u32 little-endian count followed by that many 32-byte keys
    PUBKEY_VEC = "pubkey_vec"


# Fixed widths in bytes; PUBKEY_VEC is variable
FIELD_WIDTHS: dict[FieldKind, int] = {
    FieldKind.U8: 1,
    FieldKind.BOOL: 1,
    FieldKind.U64: 8,
    FieldKind.PUBKEY: 32,
}

_CONSTRUCTS: dict[FieldKind, Construct] = {
    FieldKind.U8: Int8ul,
    FieldKind.BOOL: Flag,
    FieldKind.U64: Int64ul,
    FieldKind.PUBKEY: Bytes(32),
    FieldKind.PUBKEY_VEC: PrefixedArray(Int32ul, Bytes(32)),
}


@dataclass(frozen=True)
class FieldSpec:
    """A named field at a fixed offset."""

    name: str
    kind: FieldKind
    offset: int
    # None for variable-width fields
    width: int | None

    @property
    def end(self) -> int | None:
        """Offset one past the field's last byte (None if variable width)."""
        if self.width is None:
            return None
        return self.offset + self.width


def _layout_fields(*declared: tuple[str, FieldKind], start: int = 0) -> tuple[FieldSpec, ...]:
    """Lay out fields back to back, computing offsets from declaration order."""
    specs: list[FieldSpec] = []
    offset = start
    for i, (name, kind) in enumerate(declared):
        width = FIELD_WIDTHS.get(kind)
        if width is None and i != len(declared) - 1:
            raise ValueError(f"Variable-width field '{name}' must be last")
        specs.append(FieldSpec(name=name, kind=kind, offset=offset, width=width))
        offset += width or 0
    return tuple(specs)


def _struct_for(fields: tuple[FieldSpec, ...], tag: int | None = None) -> Struct:
    """Build a construct Struct matching the field list."""
    subcons = [f.name / _CONSTRUCTS[f.kind] for f in fields]
    if tag is not None:
        subcons.insert(0, "tag" / Const(tag, Int8ul))
    return Struct(*subcons)


# --- Pool account schemas ---


class PoolKind(str, Enum):
    """Historical pool account schema versions."""

    NATIVE_NO_FEE = "native_no_fee"
    REGULAR_NO_FEE = "regular_no_fee"
    REGULAR_WITH_FEE = "regular_with_fee"
    NATIVE_WITH_FEE = "native_with_fee"


@dataclass(frozen=True)
class SchemaDescriptor:
    """Byte layout of one pool account schema version."""

    kind: PoolKind
    length: int
    fields: tuple[FieldSpec, ...]
    # Schema-level constant, never stored on-chain
    fee_bps: int
    is_native: bool
    struct: Struct = field(repr=False, compare=False)

    @property
    def has_fee(self) -> bool:
        return self.fee_bps > 0

    def get_field(self, name: str) -> FieldSpec:
        """Look up a field by name.

        Raises:
            KeyError: If the schema has no such field
        """
        for spec in self.fields:
            if spec.name == name:
                return spec
        raise KeyError(f"{self.kind.value} has no field '{name}'")


def _schema(
    kind: PoolKind, fee_bps: int, is_native: bool, *declared: tuple[str, FieldKind]
) -> SchemaDescriptor:
    fields = _layout_fields(*declared)
    last = fields[-1]
    length = last.offset + (last.width or 0)
    return SchemaDescriptor(
        kind=kind,
        length=length,
        fields=fields,
        fee_bps=fee_bps,
        is_native=is_native,
        struct=_struct_for(fields),
    )


_NATIVE_BASE = (
    ("token_mint", FieldKind.PUBKEY),
    ("bump", FieldKind.U8),
    ("sol_reserve", FieldKind.U64),
    ("token_reserve", FieldKind.U64),
    ("total_lp_supply", FieldKind.U64),
)

_REGULAR_BASE = (
    ("token_a", FieldKind.PUBKEY),
    ("token_b", FieldKind.PUBKEY),
    ("bump", FieldKind.U8),
    ("reserve_a", FieldKind.U64),
    ("reserve_b", FieldKind.U64),
    ("total_lp_supply", FieldKind.U64),
)

POOL_SCHEMAS: dict[int, SchemaDescriptor] = {
    schema.length: schema
    for schema in (
        _schema(PoolKind.NATIVE_NO_FEE, 0, True, *_NATIVE_BASE),
        _schema(PoolKind.REGULAR_NO_FEE, 0, False, *_REGULAR_BASE),
        _schema(
            PoolKind.REGULAR_WITH_FEE,
            FEE_AWARE_FEE_BPS,
            False,
            *_REGULAR_BASE,
            ("fee_collected_a", FieldKind.U64),
            ("fee_collected_b", FieldKind.U64),
            ("fee_treasury", FieldKind.PUBKEY),
        ),
        _schema(
            PoolKind.NATIVE_WITH_FEE,
            FEE_AWARE_FEE_BPS,
            True,
            ("native_mint", FieldKind.PUBKEY),
            *_NATIVE_BASE,
            ("fee_collected_sol", FieldKind.U64),
            ("fee_collected_token", FieldKind.U64),
            ("fee_treasury", FieldKind.PUBKEY),
            ("token_mint_repeat", FieldKind.PUBKEY),
        ),
    )
}

_SCHEMAS_BY_KIND: dict[PoolKind, SchemaDescriptor] = {s.kind: s for s in POOL_SCHEMAS.values()}


def pool_schema_for(byte_length: int) -> SchemaDescriptor:
    """Select a pool schema by account byte length.

    Raises:
        UnrecognizedSchema: If no schema has this length
    """
    schema = POOL_SCHEMAS.get(byte_length)
    if schema is None:
        raise UnrecognizedSchema(byte_length)
    return schema


def pool_schema_for_kind(kind: PoolKind) -> SchemaDescriptor:
    """Look up a pool schema by version."""
    return _SCHEMAS_BY_KIND[kind]


# --- Instruction layouts ---


@dataclass(frozen=True)
class AccountSlotSpec:
    """One position in an instruction's account list."""

    role: str
    is_signer: bool = False
    is_writable: bool = False


def _slot(role: str, flags: str = "") -> AccountSlotSpec:
    """Shorthand: flags is any combination of 's' (signer) and 'w' (writable)."""
    return AccountSlotSpec(role=role, is_signer="s" in flags, is_writable="w" in flags)


@dataclass(frozen=True)
class InstructionLayout:
    """Wire layout of one program instruction.

    Attributes:
        name: Operation name
        tag: Discriminator byte written at offset 0
        fields: Payload fields following the tag
        account_slots: Fixed account list (for multihop: the leading slots)
        hop_slots: Slot group repeated once per hop, in pool order
    """

    name: str
    tag: int
    fields: tuple[FieldSpec, ...]
    account_slots: tuple[AccountSlotSpec, ...]
    struct: Struct = field(repr=False, compare=False)
    hop_slots: tuple[AccountSlotSpec, ...] = ()

    @property
    def is_multihop(self) -> bool:
        return bool(self.hop_slots)

    @property
    def fixed_size(self) -> int | None:
        """Payload size in bytes, or None when a field is variable width."""
        if any(f.width is None for f in self.fields):
            return None
        return 1 + sum(f.width or 0 for f in self.fields)

    def account_count(self, hop_count: int = 0) -> int:
        return len(self.account_slots) + len(self.hop_slots) * hop_count


def _instruction(
    name: str,
    tag: int,
    fields: tuple[tuple[str, FieldKind], ...],
    slots: tuple[AccountSlotSpec, ...],
    hop_slots: tuple[AccountSlotSpec, ...] = (),
) -> InstructionLayout:
    specs = _layout_fields(*fields, start=1)
    return InstructionLayout(
        name=name,
        tag=tag,
        fields=specs,
        account_slots=slots,
        hop_slots=hop_slots,
        struct=_struct_for(specs, tag=tag),
    )


_U64 = FieldKind.U64

_REGULAR_LIQUIDITY_HEAD = (
    _slot("pool", "w"),
    _slot("token_a"),
    _slot("token_b"),
    _slot("vault_a", "w"),
    _slot("vault_b", "w"),
    _slot("lp_mint", "w"),
)

_MULTIHOP_HEAD = (
    _slot("user", "s"),
    _slot("token_program"),
    _slot("user_input", "w"),
)

_MULTIHOP_HOP = (
    _slot("pool", "w"),
    _slot("token_a"),
    _slot("token_b"),
    _slot("vault_a", "w"),
    _slot("vault_b", "w"),
    _slot("intermediate", "w"),
    _slot("output", "w"),
)

_NATIVE_SWAP_SLOTS = (
    _slot("pool", "w"),
    _slot("token_mint"),
    _slot("pool_token_vault", "w"),
    _slot("user", "sw"),
    _slot("user_token", "w"),
    _slot("token_program"),
    _slot("system_program"),
)

_NATIVE_LIQUIDITY_SLOTS = (
    _slot("pool", "w"),
    _slot("token_mint"),
    _slot("pool_token_vault", "w"),
    _slot("lp_mint", "w"),
    _slot("user", "sw"),
    _slot("user_token", "w"),
    _slot("user_lp", "w"),
    _slot("token_program"),
    _slot("system_program"),
)

INSTRUCTION_LAYOUTS: dict[str, InstructionLayout] = {
    layout.name: layout
    for layout in (
        _instruction(
            "InitPool",
            0,
            (("amount_a", _U64), ("amount_b", _U64)),
            (
                *_REGULAR_LIQUIDITY_HEAD,
                _slot("user", "sw"),
                _slot("user_token_a", "w"),
                _slot("user_token_b", "w"),
                _slot("user_lp", "w"),
                _slot("token_program"),
                _slot("system_program"),
                _slot("rent"),
                _slot("associated_token_program"),
            ),
        ),
        _instruction(
            "AddLiquidity",
            1,
            (("amount_a", _U64), ("amount_b", _U64)),
            (
                *_REGULAR_LIQUIDITY_HEAD,
                _slot("user_token_a", "w"),
                _slot("user_token_b", "w"),
                _slot("user_lp", "w"),
                _slot("user", "s"),
                _slot("token_program"),
            ),
        ),
        _instruction(
            "RemoveLiquidity",
            2,
            (("lp_amount", _U64),),
            (
                *_REGULAR_LIQUIDITY_HEAD,
                _slot("user_lp", "w"),
                _slot("user_token_a", "w"),
                _slot("user_token_b", "w"),
                _slot("user", "s"),
                _slot("token_program"),
            ),
        ),
        _instruction(
            "Swap",
            3,
            (("amount_in", _U64), ("direction_a_to_b", FieldKind.BOOL)),
            (
                _slot("pool", "w"),
                _slot("token_a"),
                _slot("token_b"),
                _slot("vault_a", "w"),
                _slot("vault_b", "w"),
                _slot("user_in", "w"),
                _slot("user_out", "w"),
                _slot("user", "s"),
                _slot("token_program"),
            ),
        ),
        _instruction(
            "MultihopSwap",
            4,
            (("amount_in", _U64), ("minimum_amount_out", _U64)),
            _MULTIHOP_HEAD,
            _MULTIHOP_HOP,
        ),
        _instruction(
            "MultihopSwapWithPath",
            5,
            (
                ("amount_in", _U64),
                ("minimum_amount_out", _U64),
                ("token_path", FieldKind.PUBKEY_VEC),
            ),
            _MULTIHOP_HEAD,
            _MULTIHOP_HOP,
        ),
        _instruction("GetPoolInfo", 6, (), (_slot("pool"),)),
        _instruction("FindPoolsByToken", 8, (("token", FieldKind.PUBKEY),), ()),
        _instruction(
            "GetSwapQuote",
            9,
            (("amount_in", _U64), ("token_in", FieldKind.PUBKEY)),
            (_slot("pool"),),
        ),
        _instruction(
            "InitNativeSOLPool",
            11,
            (("amount_sol", _U64), ("amount_token", _U64)),
            (
                _slot("pool", "w"),
                _slot("token_mint"),
                _slot("user", "sw"),
                _slot("user_token", "w"),
                _slot("user_lp", "w"),
                _slot("lp_mint", "w"),
                _slot("system_program"),
                _slot("token_program"),
                _slot("rent"),
            ),
        ),
        _instruction(
            "SwapNativeSOLToToken",
            12,
            (("amount_in", _U64), ("minimum_amount_out", _U64)),
            _NATIVE_SWAP_SLOTS,
        ),
        _instruction(
            "SwapTokenToNativeSOL",
            13,
            (("amount_in", _U64), ("minimum_amount_out", _U64)),
            _NATIVE_SWAP_SLOTS,
        ),
        _instruction(
            "AddLiquidityNativeSOL",
            14,
            (("amount_sol", _U64), ("amount_token", _U64)),
            _NATIVE_LIQUIDITY_SLOTS,
        ),
        _instruction(
            "RemoveLiquidityNativeSOL",
            15,
            (("lp_amount", _U64),),
            _NATIVE_LIQUIDITY_SLOTS,
        ),
    )
}

_LAYOUTS_BY_TAG: dict[int, InstructionLayout] = {
    layout.tag: layout for layout in INSTRUCTION_LAYOUTS.values()
}


def instruction_layout_for(name: str) -> InstructionLayout:
    """Look up an instruction layout by operation name.

    An unknown name is a programming error, not bad input.

    Raises:
        KeyError: If no instruction has this name
    """
    return INSTRUCTION_LAYOUTS[name]


def instruction_layout_for_tag(tag: int) -> InstructionLayout:
    """Look up an instruction layout by discriminator byte.

    Raises:
        KeyError: If no instruction has this tag
    """
    return _LAYOUTS_BY_TAG[tag]


__all__ = [
    "FieldKind",
    "FieldSpec",
    "FIELD_WIDTHS",
    "PoolKind",
    "SchemaDescriptor",
    "POOL_SCHEMAS",
    "pool_schema_for",
    "pool_schema_for_kind",
    "AccountSlotSpec",
    "InstructionLayout",
    "INSTRUCTION_LAYOUTS",
    "instruction_layout_for",
    "instruction_layout_for_tag",
]
