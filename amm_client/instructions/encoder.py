"""Instruction encoder.

Builds program instruction payloads from a named operation, its field values
and account addresses supplied by role. Byte layout and account order both
come from the layout registry; callers never position anything themselves.

Usage:
    payload = encode(
        "Swap",
        {"amount_in": 1_000_000, "direction_a_to_b": True},
        {"pool": pool, "token_a": mint_a, ...},
    )
    ix = payload.to_instruction()
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

import structlog
from construct import ConstructError
from solders.instruction import AccountMeta, Instruction
from solders.pubkey import Pubkey

from amm_client.config import DEFAULT_CONFIG, ProgramConfig
from amm_client.constants import U8_MAX
from amm_client.errors import (
    DecodeError,
    FieldOverflow,
    InvalidAccount,
    MissingAccount,
    MissingField,
    Truncated,
)
from amm_client.layouts.registry import (
    AccountSlotSpec,
    FieldKind,
    FieldSpec,
    InstructionLayout,
    instruction_layout_for,
    instruction_layout_for_tag,
)
from amm_client.models.types import U64_MAX, to_pubkey

logger = structlog.get_logger()

# Maximum number of keys a length-prefixed key vector can hold
U32_MAX = 2**32 - 1

AccountRef = Pubkey | str


@dataclass(frozen=True)
class InstructionPayload:
    """An encoded instruction, ready to hand to a transaction submitter."""

    operation: str
    tag: int
    data: bytes
    accounts: tuple[AccountMeta, ...]
    program_id: Pubkey

    @property
    def account_keys(self) -> list[Pubkey]:
        return [meta.pubkey for meta in self.accounts]

    def to_instruction(self) -> Instruction:
        """Convert to a solders Instruction."""
        return Instruction(self.program_id, self.data, list(self.accounts))


@dataclass(frozen=True)
class DecodedInstruction:
    """An instruction payload parsed back into named fields."""

    layout: InstructionLayout
    fields: dict[str, Any]

    @property
    def operation(self) -> str:
        return self.layout.name


def _field_value(spec: FieldSpec, value: Any) -> Any:
    """Validate a field value and convert it to what construct builds."""
    if spec.kind is FieldKind.BOOL:
        if not isinstance(value, bool):
            raise FieldOverflow(spec.name, value)
        return value

    if spec.kind in (FieldKind.U8, FieldKind.U64):
        limit = U8_MAX if spec.kind is FieldKind.U8 else U64_MAX
        if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= limit:
            raise FieldOverflow(spec.name, value)
        return value

    if spec.kind is FieldKind.PUBKEY:
        return _pubkey_bytes(spec.name, value)

    if spec.kind is FieldKind.PUBKEY_VEC:
        if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
            raise FieldOverflow(spec.name, value)
        if len(value) > U32_MAX:
            raise FieldOverflow(spec.name, len(value))
        return [_pubkey_bytes(spec.name, key) for key in value]

    raise TypeError(f"Unhandled field kind: {spec.kind}")


def _pubkey_bytes(field: str, value: Any) -> bytes:
    try:
        return bytes(to_pubkey(value))
    except (TypeError, ValueError) as err:
        raise FieldOverflow(field, value) from err


def _account_meta(
    slot: AccountSlotSpec,
    accounts: Mapping[str, AccountRef | None],
    hop: int | None = None,
) -> AccountMeta:
    address = accounts.get(slot.role)
    if address is None:
        raise MissingAccount(slot.role, hop=hop)
    try:
        pubkey = to_pubkey(address)
    except (TypeError, ValueError) as err:
        raise InvalidAccount(slot.role, address, hop=hop) from err
    return AccountMeta(pubkey, slot.is_signer, slot.is_writable)


def check_fields(operation: str, fields: Mapping[str, Any]) -> None:
    """Validate the supplied field values of an operation without encoding.

    Fields not present in fields are skipped.

    Raises:
        KeyError: If operation is not a known instruction
        FieldOverflow: If a value does not fit its declared width
    """
    for spec in instruction_layout_for(operation).fields:
        if spec.name in fields:
            _field_value(spec, fields[spec.name])


def encode(
    operation: str,
    fields: Mapping[str, Any],
    accounts: Mapping[str, AccountRef | None],
    *,
    hops: Sequence[Mapping[str, AccountRef | None]] | None = None,
    config: ProgramConfig = DEFAULT_CONFIG,
) -> InstructionPayload:
    """Encode an instruction payload and its ordered account list.

    Args:
        operation: Instruction name, e.g. "Swap" or "MultihopSwap"
        fields: Field values by name
        accounts: Account addresses by role
        hops: For multihop instructions, one role map per hop in pool order
        config: Supplies the program id

    Returns:
        InstructionPayload with data bytes and AccountMeta list

    Raises:
        KeyError: If operation is not a known instruction
        MissingField: If a declared field has no value
        FieldOverflow: If a value does not fit its declared width
        MissingAccount: If a required role has no address
        InvalidAccount: If a role address is not a valid public key
    """
    layout = instruction_layout_for(operation)

    values: dict[str, Any] = {}
    for spec in layout.fields:
        if spec.name not in fields:
            raise MissingField(spec.name)
        values[spec.name] = _field_value(spec, fields[spec.name])
    data = layout.struct.build(values)

    metas = [_account_meta(slot, accounts) for slot in layout.account_slots]
    if layout.is_multihop:
        if not hops:
            raise MissingAccount(layout.hop_slots[0].role, hop=0)
        for index, hop_accounts in enumerate(hops):
            metas.extend(_account_meta(slot, hop_accounts, hop=index) for slot in layout.hop_slots)
    elif hops:
        raise ValueError(f"{operation} does not take per-hop accounts")

    logger.debug(
        "instruction_encoded",
        operation=operation,
        tag=layout.tag,
        data_len=len(data),
        account_count=len(metas),
    )
    return InstructionPayload(
        operation=operation,
        tag=layout.tag,
        data=data,
        accounts=tuple(metas),
        program_id=config.program_id,
    )


def decode_instruction_data(data: bytes) -> DecodedInstruction:
    """Parse instruction data back into its layout and field values.

    Raises:
        DecodeError: If the tag is unknown or the data is malformed
        Truncated: If fixed-width data is shorter than its layout
    """
    if not data:
        raise Truncated("tag", needed=1, available=0)
    try:
        layout = instruction_layout_for_tag(data[0])
    except KeyError as err:
        raise DecodeError(f"Unknown instruction tag {data[0]}") from err

    for spec in layout.fields:
        if spec.end is not None and spec.end > len(data):
            raise Truncated(spec.name, needed=spec.end, available=len(data))
    try:
        parsed = layout.struct.parse(data)
    except ConstructError as err:
        raise DecodeError(f"Malformed {layout.name} data: {err}") from err

    values: dict[str, Any] = {}
    for spec in layout.fields:
        raw = parsed[spec.name]
        if spec.kind is FieldKind.PUBKEY:
            values[spec.name] = Pubkey.from_bytes(raw)
        elif spec.kind is FieldKind.PUBKEY_VEC:
            values[spec.name] = [Pubkey.from_bytes(key) for key in raw]
        else:
            values[spec.name] = raw
    return DecodedInstruction(layout=layout, fields=values)


__all__ = [
    "AccountRef",
    "InstructionPayload",
    "DecodedInstruction",
    "check_fields",
    "encode",
    "decode_instruction_data",
]
