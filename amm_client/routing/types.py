"""Type definitions for routing module."""

from __future__ import annotations

from dataclasses import dataclass

from solders.instruction import AccountMeta
from solders.pubkey import Pubkey

from amm_client.amm.base import SwapQuote
from amm_client.errors import InvalidPath
from amm_client.instructions.encoder import InstructionPayload
from amm_client.models.pool import PoolRecord


@dataclass(frozen=True)
class RouteHop:
    """A single swap step of a route."""

    pool: PoolRecord
    input_token: Pubkey
    output_token: Pubkey
    quote: SwapQuote
    # Derived accounts the instruction needs; vaults are None on the native side
    pool_address: Pubkey | None = None
    vault_in: Pubkey | None = None
    vault_out: Pubkey | None = None

    @property
    def amount_in(self) -> int:
        return self.quote.amount_in

    @property
    def amount_out(self) -> int:
        return self.quote.amount_out

    @property
    def vaults(self) -> tuple[Pubkey | None, Pubkey | None]:
        """Vault addresses in pool order (vault_a, vault_b)."""
        if self.quote.direction.is_a_to_b:
            return self.vault_in, self.vault_out
        return self.vault_out, self.vault_in


@dataclass(frozen=True)
class Route:
    """Ordered hops whose outputs feed the next hop's input."""

    hops: tuple[RouteHop, ...]

    def __post_init__(self) -> None:
        if not self.hops:
            raise InvalidPath("Route needs at least one hop")
        for prev, nxt in zip(self.hops, self.hops[1:]):
            if prev.output_token != nxt.input_token:
                raise InvalidPath(
                    f"Hop output {prev.output_token} does not feed next input {nxt.input_token}"
                )

    @property
    def token_path(self) -> list[Pubkey]:
        return [self.hops[0].input_token] + [hop.output_token for hop in self.hops]

    @property
    def amount_in(self) -> int:
        return self.hops[0].amount_in

    @property
    def amount_out(self) -> int:
        return self.hops[-1].amount_out

    @property
    def is_multihop(self) -> bool:
        return len(self.hops) > 1


@dataclass(frozen=True)
class BuiltRoute:
    """A quoted route together with its encoded instruction."""

    route: Route
    minimum_amount_out: int
    payload: InstructionPayload

    @property
    def accounts(self) -> tuple[AccountMeta, ...]:
        return self.payload.accounts

    @property
    def expected_amount_out(self) -> int:
        return self.route.amount_out


__all__ = ["RouteHop", "Route", "BuiltRoute"]
