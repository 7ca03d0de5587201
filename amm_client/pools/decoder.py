"""Pool account decoder.

Turns raw account bytes into PoolRecord values. The schema is chosen by byte
length through the layout registry; field offsets come from the registry too,
so nothing here knows where a field lives.
"""

from __future__ import annotations

import structlog
from solders.pubkey import Pubkey

from amm_client.config import DEFAULT_CONFIG, ProgramConfig
from amm_client.errors import Truncated, UnrecognizedSchema
from amm_client.layouts.registry import (
    PoolKind,
    SchemaDescriptor,
    pool_schema_for,
    pool_schema_for_kind,
)
from amm_client.models.pool import PoolRecord

logger = structlog.get_logger()


def _check_fits(schema: SchemaDescriptor, data: bytes) -> None:
    """Raise Truncated for the first field whose bytes are missing."""
    available = len(data)
    for spec in schema.fields:
        end = spec.end
        if end is not None and end > available:
            raise Truncated(spec.name, needed=end, available=available)


def _to_record(
    schema: SchemaDescriptor,
    data: bytes,
    address: Pubkey | None,
    config: ProgramConfig,
) -> PoolRecord:
    parsed = schema.struct.parse(data)

    if schema.is_native:
        token_mint = Pubkey.from_bytes(parsed.token_mint)
        if schema.kind is PoolKind.NATIVE_WITH_FEE:
            native_mint = Pubkey.from_bytes(parsed.native_mint)
            repeat = Pubkey.from_bytes(parsed.token_mint_repeat)
            if repeat != token_mint:
                logger.warning(
                    "native_pool_mint_mismatch",
                    pool=str(address) if address else None,
                    token_mint=str(token_mint),
                    token_mint_repeat=str(repeat),
                )
        else:
            native_mint = config.native_mint
        token_a, token_b = native_mint, token_mint
        reserve_a, reserve_b = parsed.sol_reserve, parsed.token_reserve
    else:
        token_a = Pubkey.from_bytes(parsed.token_a)
        token_b = Pubkey.from_bytes(parsed.token_b)
        reserve_a, reserve_b = parsed.reserve_a, parsed.reserve_b

    fee_collected_a: int | None = None
    fee_collected_b: int | None = None
    fee_treasury: Pubkey | None = None
    token_mint_repeat: Pubkey | None = None
    if schema.kind is PoolKind.REGULAR_WITH_FEE:
        fee_collected_a = parsed.fee_collected_a
        fee_collected_b = parsed.fee_collected_b
        fee_treasury = Pubkey.from_bytes(parsed.fee_treasury)
    elif schema.kind is PoolKind.NATIVE_WITH_FEE:
        fee_collected_a = parsed.fee_collected_sol
        fee_collected_b = parsed.fee_collected_token
        fee_treasury = Pubkey.from_bytes(parsed.fee_treasury)
        token_mint_repeat = repeat

    record = PoolRecord(
        kind=schema.kind,
        token_a=token_a,
        token_b=token_b,
        bump=parsed.bump,
        reserve_a=reserve_a,
        reserve_b=reserve_b,
        total_lp_supply=parsed.total_lp_supply,
        fee_bps=schema.fee_bps,
        fee_collected_a=fee_collected_a,
        fee_collected_b=fee_collected_b,
        fee_treasury=fee_treasury,
        token_mint_repeat=token_mint_repeat,
        address=address,
    )
    logger.debug(
        "pool_decoded",
        kind=schema.kind.value,
        pool=str(address) if address else None,
        reserve_a=reserve_a,
        reserve_b=reserve_b,
    )
    return record


def decode_pool(
    data: bytes,
    address: Pubkey | None = None,
    *,
    config: ProgramConfig = DEFAULT_CONFIG,
) -> PoolRecord:
    """Decode pool account bytes, selecting the schema by byte length.

    Args:
        data: Raw account data
        address: Pool account address, carried into the record
        config: Supplies the native mint for native pools that do not store it

    Returns:
        Decoded PoolRecord

    Raises:
        UnrecognizedSchema: If len(data) is not a known schema length
        Truncated: If a declared field extends past the buffer
    """
    schema = pool_schema_for(len(data))
    _check_fits(schema, data)
    return _to_record(schema, bytes(data), address, config)


def decode_pool_as(
    kind: PoolKind,
    data: bytes,
    address: Pubkey | None = None,
    *,
    config: ProgramConfig = DEFAULT_CONFIG,
) -> PoolRecord:
    """Decode bytes that are expected to hold a specific schema version.

    Raises:
        Truncated: If the buffer is shorter than the schema, naming the
            first field that does not fit
        UnrecognizedSchema: If the buffer is longer than the schema
    """
    schema = pool_schema_for_kind(kind)
    _check_fits(schema, data)
    if len(data) != schema.length:
        raise UnrecognizedSchema(len(data))
    return _to_record(schema, bytes(data), address, config)


def encode_pool(record: PoolRecord) -> bytes:
    """Serialize a PoolRecord back into its schema's account bytes."""
    schema = pool_schema_for_kind(record.kind)
    if schema.is_native:
        values = {
            "token_mint": bytes(record.token_b),
            "sol_reserve": record.reserve_a,
            "token_reserve": record.reserve_b,
        }
        if schema.kind is PoolKind.NATIVE_WITH_FEE:
            values["native_mint"] = bytes(record.token_a)
            values["token_mint_repeat"] = bytes(record.token_mint_repeat or record.token_b)
            values["fee_collected_sol"] = record.fee_collected_a or 0
            values["fee_collected_token"] = record.fee_collected_b or 0
            values["fee_treasury"] = bytes(record.fee_treasury or Pubkey.default())
    else:
        values = {
            "token_a": bytes(record.token_a),
            "token_b": bytes(record.token_b),
            "reserve_a": record.reserve_a,
            "reserve_b": record.reserve_b,
        }
        if schema.kind is PoolKind.REGULAR_WITH_FEE:
            values["fee_collected_a"] = record.fee_collected_a or 0
            values["fee_collected_b"] = record.fee_collected_b or 0
            values["fee_treasury"] = bytes(record.fee_treasury or Pubkey.default())
    values["bump"] = record.bump
    values["total_lp_supply"] = record.total_lp_supply
    return schema.struct.build(values)


__all__ = ["decode_pool", "decode_pool_as", "encode_pool"]
