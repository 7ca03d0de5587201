"""Program derived addresses for pools, vaults and LP mints.

Pool, vault and LP mint accounts are never stored; they are re-derived from
fixed seeds and the program id on demand.
"""

from __future__ import annotations

from dataclasses import dataclass

from solders.pubkey import Pubkey

from amm_client.config import DEFAULT_CONFIG, ProgramConfig
from amm_client.constants import (
    LP_MINT_SEED,
    NATIVE_LP_MINT_SEED,
    NATIVE_POOL_SEED,
    NATIVE_VAULT_SEED,
    POOL_SEED,
    VAULT_SEED,
)
from amm_client.models.pool import PoolRecord


def find_pool_address(
    token_a: Pubkey, token_b: Pubkey, config: ProgramConfig = DEFAULT_CONFIG
) -> tuple[Pubkey, int]:
    """Derive a regular pool address and bump from its mints (order matters)."""
    return Pubkey.find_program_address(
        [POOL_SEED, bytes(token_a), bytes(token_b)], config.program_id
    )


def find_lp_mint_address(
    pool: Pubkey, config: ProgramConfig = DEFAULT_CONFIG
) -> tuple[Pubkey, int]:
    return Pubkey.find_program_address([LP_MINT_SEED, bytes(pool)], config.program_id)


def find_vault_address(
    pool: Pubkey, mint: Pubkey, config: ProgramConfig = DEFAULT_CONFIG
) -> tuple[Pubkey, int]:
    return Pubkey.find_program_address(
        [VAULT_SEED, bytes(pool), bytes(mint)], config.program_id
    )


def find_native_pool_address(
    token_mint: Pubkey, config: ProgramConfig = DEFAULT_CONFIG
) -> tuple[Pubkey, int]:
    """Derive a native pool address and bump from its SPL token mint."""
    return Pubkey.find_program_address(
        [NATIVE_POOL_SEED, bytes(token_mint)], config.program_id
    )


def find_native_lp_mint_address(
    pool: Pubkey, config: ProgramConfig = DEFAULT_CONFIG
) -> tuple[Pubkey, int]:
    return Pubkey.find_program_address(
        [NATIVE_LP_MINT_SEED, bytes(pool)], config.program_id
    )


def find_native_vault_address(
    pool: Pubkey, token_mint: Pubkey, config: ProgramConfig = DEFAULT_CONFIG
) -> tuple[Pubkey, int]:
    return Pubkey.find_program_address(
        [NATIVE_VAULT_SEED, bytes(pool), bytes(token_mint)], config.program_id
    )


def get_associated_token_address(
    owner: Pubkey, mint: Pubkey, config: ProgramConfig = DEFAULT_CONFIG
) -> Pubkey:
    """Derive the associated token account of owner for mint."""
    address, _ = Pubkey.find_program_address(
        [bytes(owner), bytes(config.token_program_id), bytes(mint)],
        config.associated_token_program_id,
    )
    return address


@dataclass(frozen=True)
class PoolAddresses:
    """Derived accounts of one pool.

    For native pools vault_a is None: the native reserve is held in the pool
    account itself and vault_b is the token vault.
    """

    pool: Pubkey
    lp_mint: Pubkey
    vault_a: Pubkey | None
    vault_b: Pubkey
    bump: int


def regular_pool_addresses(
    token_a: Pubkey,
    token_b: Pubkey,
    config: ProgramConfig = DEFAULT_CONFIG,
    pool: Pubkey | None = None,
) -> PoolAddresses:
    derived, bump = find_pool_address(token_a, token_b, config)
    pool = pool if pool is not None else derived
    lp_mint, _ = find_lp_mint_address(pool, config)
    vault_a, _ = find_vault_address(pool, token_a, config)
    vault_b, _ = find_vault_address(pool, token_b, config)
    return PoolAddresses(pool=pool, lp_mint=lp_mint, vault_a=vault_a, vault_b=vault_b, bump=bump)


def native_pool_addresses(
    token_mint: Pubkey,
    config: ProgramConfig = DEFAULT_CONFIG,
    pool: Pubkey | None = None,
) -> PoolAddresses:
    derived, bump = find_native_pool_address(token_mint, config)
    pool = pool if pool is not None else derived
    lp_mint, _ = find_native_lp_mint_address(pool, config)
    vault, _ = find_native_vault_address(pool, token_mint, config)
    return PoolAddresses(pool=pool, lp_mint=lp_mint, vault_a=None, vault_b=vault, bump=bump)


def pool_addresses_for(
    record: PoolRecord, config: ProgramConfig = DEFAULT_CONFIG
) -> PoolAddresses:
    """Derive the vault and LP mint accounts of a decoded pool.

    The record's own address is used as the pool account when known.
    """
    if record.is_native:
        return native_pool_addresses(record.token_mint, config, record.address)
    return regular_pool_addresses(record.token_a, record.token_b, config, record.address)


__all__ = [
    "PoolAddresses",
    "find_pool_address",
    "find_lp_mint_address",
    "find_vault_address",
    "find_native_pool_address",
    "find_native_lp_mint_address",
    "find_native_vault_address",
    "get_associated_token_address",
    "regular_pool_addresses",
    "native_pool_addresses",
    "pool_addresses_for",
]
