"""Typed instruction builders.

Each builder derives the pool, vault, LP mint and associated token accounts
an operation needs and hands them to the encoder by role. User token
accounts default to the user's associated token accounts; pass explicit
addresses to override.
"""

from __future__ import annotations

from solders.pubkey import Pubkey

from amm_client.addresses import (
    get_associated_token_address,
    native_pool_addresses,
    pool_addresses_for,
    regular_pool_addresses,
)
from amm_client.config import DEFAULT_CONFIG, ProgramConfig
from amm_client.errors import TokenNotInPool
from amm_client.instructions.encoder import InstructionPayload, encode
from amm_client.models.pool import PoolRecord


def _ata(owner: Pubkey, mint: Pubkey, override: Pubkey | None, config: ProgramConfig) -> Pubkey:
    if override is not None:
        return override
    return get_associated_token_address(owner, mint, config)


# --- Regular pools ---


def init_pool(
    token_a: Pubkey,
    token_b: Pubkey,
    amount_a: int,
    amount_b: int,
    user: Pubkey,
    *,
    config: ProgramConfig = DEFAULT_CONFIG,
) -> InstructionPayload:
    """Create a pool for (token_a, token_b) seeded with an initial deposit."""
    addresses = regular_pool_addresses(token_a, token_b, config)
    return encode(
        "InitPool",
        {"amount_a": amount_a, "amount_b": amount_b},
        {
            "pool": addresses.pool,
            "token_a": token_a,
            "token_b": token_b,
            "vault_a": addresses.vault_a,
            "vault_b": addresses.vault_b,
            "lp_mint": addresses.lp_mint,
            "user": user,
            "user_token_a": get_associated_token_address(user, token_a, config),
            "user_token_b": get_associated_token_address(user, token_b, config),
            "user_lp": get_associated_token_address(user, addresses.lp_mint, config),
            "token_program": config.token_program_id,
            "system_program": config.system_program_id,
            "rent": config.rent_sysvar_id,
            "associated_token_program": config.associated_token_program_id,
        },
        config=config,
    )


def _liquidity_accounts(
    pool: PoolRecord, user: Pubkey, config: ProgramConfig
) -> dict[str, Pubkey | None]:
    addresses = pool_addresses_for(pool, config)
    return {
        "pool": addresses.pool,
        "token_a": pool.token_a,
        "token_b": pool.token_b,
        "vault_a": addresses.vault_a,
        "vault_b": addresses.vault_b,
        "lp_mint": addresses.lp_mint,
        "user_token_a": get_associated_token_address(user, pool.token_a, config),
        "user_token_b": get_associated_token_address(user, pool.token_b, config),
        "user_lp": get_associated_token_address(user, addresses.lp_mint, config),
        "user": user,
        "token_program": config.token_program_id,
    }


def add_liquidity(
    pool: PoolRecord,
    amount_a: int,
    amount_b: int,
    user: Pubkey,
    *,
    config: ProgramConfig = DEFAULT_CONFIG,
) -> InstructionPayload:
    """Deposit up to (amount_a, amount_b); the program takes them at pool ratio."""
    return encode(
        "AddLiquidity",
        {"amount_a": amount_a, "amount_b": amount_b},
        _liquidity_accounts(pool, user, config),
        config=config,
    )


def remove_liquidity(
    pool: PoolRecord,
    lp_amount: int,
    user: Pubkey,
    *,
    config: ProgramConfig = DEFAULT_CONFIG,
) -> InstructionPayload:
    return encode(
        "RemoveLiquidity",
        {"lp_amount": lp_amount},
        _liquidity_accounts(pool, user, config),
        config=config,
    )


def swap(
    pool: PoolRecord,
    token_in: Pubkey,
    amount_in: int,
    user: Pubkey,
    *,
    user_in: Pubkey | None = None,
    user_out: Pubkey | None = None,
    config: ProgramConfig = DEFAULT_CONFIG,
) -> InstructionPayload:
    """Swap amount_in of token_in through a regular pool.

    Raises:
        TokenNotInPool: If token_in is neither side of the pool
    """
    token_out = pool.get_token_out(token_in)
    addresses = pool_addresses_for(pool, config)
    return encode(
        "Swap",
        {"amount_in": amount_in, "direction_a_to_b": token_in == pool.token_a},
        {
            "pool": addresses.pool,
            "token_a": pool.token_a,
            "token_b": pool.token_b,
            "vault_a": addresses.vault_a,
            "vault_b": addresses.vault_b,
            "user_in": _ata(user, token_in, user_in, config),
            "user_out": _ata(user, token_out, user_out, config),
            "user": user,
            "token_program": config.token_program_id,
        },
        config=config,
    )


# --- Read-only queries ---


def get_pool_info(
    pool_address: Pubkey, *, config: ProgramConfig = DEFAULT_CONFIG
) -> InstructionPayload:
    return encode("GetPoolInfo", {}, {"pool": pool_address}, config=config)


def get_swap_quote(
    pool_address: Pubkey,
    token_in: Pubkey,
    amount_in: int,
    *,
    config: ProgramConfig = DEFAULT_CONFIG,
) -> InstructionPayload:
    """Ask the program itself for a quote (the answer arrives in program logs)."""
    return encode(
        "GetSwapQuote",
        {"amount_in": amount_in, "token_in": token_in},
        {"pool": pool_address},
        config=config,
    )


def find_pools_by_token(
    token: Pubkey, *, config: ProgramConfig = DEFAULT_CONFIG
) -> InstructionPayload:
    return encode("FindPoolsByToken", {"token": token}, {}, config=config)


# --- Native pools ---


def init_native_pool(
    token_mint: Pubkey,
    amount_sol: int,
    amount_token: int,
    user: Pubkey,
    *,
    config: ProgramConfig = DEFAULT_CONFIG,
) -> InstructionPayload:
    """Create a native/token pool seeded with an initial deposit."""
    addresses = native_pool_addresses(token_mint, config)
    return encode(
        "InitNativeSOLPool",
        {"amount_sol": amount_sol, "amount_token": amount_token},
        {
            "pool": addresses.pool,
            "token_mint": token_mint,
            "user": user,
            "user_token": get_associated_token_address(user, token_mint, config),
            "user_lp": get_associated_token_address(user, addresses.lp_mint, config),
            "lp_mint": addresses.lp_mint,
            "system_program": config.system_program_id,
            "token_program": config.token_program_id,
            "rent": config.rent_sysvar_id,
        },
        config=config,
    )


def _native_accounts(
    token_mint: Pubkey, user: Pubkey, config: ProgramConfig
) -> dict[str, Pubkey]:
    addresses = native_pool_addresses(token_mint, config)
    return {
        "pool": addresses.pool,
        "token_mint": token_mint,
        "pool_token_vault": addresses.vault_b,
        "lp_mint": addresses.lp_mint,
        "user": user,
        "user_token": get_associated_token_address(user, token_mint, config),
        "user_lp": get_associated_token_address(user, addresses.lp_mint, config),
        "token_program": config.token_program_id,
        "system_program": config.system_program_id,
    }


def swap_native_to_token(
    token_mint: Pubkey,
    amount_in: int,
    minimum_amount_out: int,
    user: Pubkey,
    *,
    config: ProgramConfig = DEFAULT_CONFIG,
) -> InstructionPayload:
    return encode(
        "SwapNativeSOLToToken",
        {"amount_in": amount_in, "minimum_amount_out": minimum_amount_out},
        _native_accounts(token_mint, user, config),
        config=config,
    )


def swap_token_to_native(
    token_mint: Pubkey,
    amount_in: int,
    minimum_amount_out: int,
    user: Pubkey,
    *,
    config: ProgramConfig = DEFAULT_CONFIG,
) -> InstructionPayload:
    return encode(
        "SwapTokenToNativeSOL",
        {"amount_in": amount_in, "minimum_amount_out": minimum_amount_out},
        _native_accounts(token_mint, user, config),
        config=config,
    )


def swap_native(
    pool: PoolRecord,
    token_in: Pubkey,
    amount_in: int,
    minimum_amount_out: int,
    user: Pubkey,
    *,
    config: ProgramConfig = DEFAULT_CONFIG,
) -> InstructionPayload:
    """Swap through a native pool, choosing the direction from token_in.

    Raises:
        TokenNotInPool: If token_in is neither the native mint nor the pool's token
    """
    if token_in == pool.token_a:
        return swap_native_to_token(
            pool.token_mint, amount_in, minimum_amount_out, user, config=config
        )
    if token_in == pool.token_b:
        return swap_token_to_native(
            pool.token_mint, amount_in, minimum_amount_out, user, config=config
        )
    raise TokenNotInPool(token_in, pool.address)


def add_liquidity_native(
    token_mint: Pubkey,
    amount_sol: int,
    amount_token: int,
    user: Pubkey,
    *,
    config: ProgramConfig = DEFAULT_CONFIG,
) -> InstructionPayload:
    return encode(
        "AddLiquidityNativeSOL",
        {"amount_sol": amount_sol, "amount_token": amount_token},
        _native_accounts(token_mint, user, config),
        config=config,
    )


def remove_liquidity_native(
    token_mint: Pubkey,
    lp_amount: int,
    user: Pubkey,
    *,
    config: ProgramConfig = DEFAULT_CONFIG,
) -> InstructionPayload:
    return encode(
        "RemoveLiquidityNativeSOL",
        {"lp_amount": lp_amount},
        _native_accounts(token_mint, user, config),
        config=config,
    )


__all__ = [
    "init_pool",
    "add_liquidity",
    "remove_liquidity",
    "swap",
    "get_pool_info",
    "get_swap_quote",
    "find_pools_by_token",
    "init_native_pool",
    "swap_native_to_token",
    "swap_token_to_native",
    "swap_native",
    "add_liquidity_native",
    "remove_liquidity_native",
]
