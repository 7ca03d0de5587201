"""Decoded pool account state."""

from __future__ import annotations

from dataclasses import dataclass

from solders.pubkey import Pubkey

from amm_client.errors import TokenNotInPool
from amm_client.layouts.registry import PoolKind


@dataclass(frozen=True)
class PoolRecord:
    """Snapshot of one pool account, decoded from raw bytes.

    Native pools are normalized onto the same shape as regular pools:
    token_a is the native mint and reserve_a the native reserve, token_b is
    the SPL token mint and reserve_b the token reserve.

    Records are never cached or mutated; a fresh decode yields a fresh
    record.
    """

    kind: PoolKind
    token_a: Pubkey
    token_b: Pubkey
    bump: int
    reserve_a: int
    reserve_b: int
    total_lp_supply: int
    # Fee in basis points, a constant of the schema version
    fee_bps: int = 0
    # Only set for fee-aware schemas
    fee_collected_a: int | None = None
    fee_collected_b: int | None = None
    fee_treasury: Pubkey | None = None
    # Trailing copy of the token mint in the 169-byte native layout
    token_mint_repeat: Pubkey | None = None
    # Pool account the bytes were read from, if known
    address: Pubkey | None = None

    @property
    def is_native(self) -> bool:
        return self.kind in (PoolKind.NATIVE_NO_FEE, PoolKind.NATIVE_WITH_FEE)

    @property
    def has_fee(self) -> bool:
        return self.kind in (PoolKind.REGULAR_WITH_FEE, PoolKind.NATIVE_WITH_FEE)

    @property
    def token_mint(self) -> Pubkey:
        """The SPL token mint of a native pool (token_b)."""
        return self.token_b

    @property
    def mints(self) -> tuple[Pubkey, ...]:
        """Mints that appear in the pool account itself."""
        if self.is_native:
            return (self.token_b,)
        return (self.token_a, self.token_b)

    def has_token(self, token: Pubkey) -> bool:
        return token == self.token_a or token == self.token_b

    def get_reserves(self, token_in: Pubkey) -> tuple[int, int]:
        """Get reserves ordered as (reserve_in, reserve_out).

        Raises:
            TokenNotInPool: If token_in is neither side of the pool
        """
        if token_in == self.token_a:
            return self.reserve_a, self.reserve_b
        elif token_in == self.token_b:
            return self.reserve_b, self.reserve_a
        else:
            raise TokenNotInPool(token_in, self.address)

    def get_token_out(self, token_in: Pubkey) -> Pubkey:
        """Get the output token for a given input token.

        Raises:
            TokenNotInPool: If token_in is neither side of the pool
        """
        if token_in == self.token_a:
            return self.token_b
        elif token_in == self.token_b:
            return self.token_a
        else:
            raise TokenNotInPool(token_in, self.address)


__all__ = ["PoolRecord"]
