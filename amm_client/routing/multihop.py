"""Multi-hop route building.

Turns a token path and a set of decoded pools into a chained quote and a
single multihop swap instruction:

1. Validate the whole path first: every consecutive pair must be served by
   exactly one supplied pool.
2. Quote hop by hop, feeding each hop's output into the next hop's input.
3. Reject the route if the final output is below the caller's minimum.
4. Lay out accounts as [user, token_program, user_input] followed by seven
   slots per hop, reusing one account reference for each intermediate token.
5. Encode MultihopSwap for two-hop routes and MultihopSwapWithPath otherwise.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence

import structlog
from solders.pubkey import Pubkey

from amm_client.addresses import get_associated_token_address, pool_addresses_for
from amm_client.amm.constant_product import ConstantProductAMM, constant_product
from amm_client.config import DEFAULT_CONFIG, ProgramConfig
from amm_client.errors import AmbiguousPool, InvalidPath, NoPoolForPair, SlippageExceeded
from amm_client.instructions.encoder import AccountRef, check_fields, encode
from amm_client.models.pool import PoolRecord
from amm_client.models.types import to_pubkey
from amm_client.routing.types import BuiltRoute, Route, RouteHop

logger = structlog.get_logger()


class MultihopRouteBuilder:
    """Builds chained quotes and MultihopSwap instructions.

    The builder holds no state between calls; each call works on the pool
    snapshot it is given.
    """

    def __init__(
        self,
        config: ProgramConfig = DEFAULT_CONFIG,
        amm: ConstantProductAMM = constant_product,
    ) -> None:
        self.config = config
        self.amm = amm

    def resolve_pools(
        self, token_path: Sequence[Pubkey], pools: Sequence[PoolRecord]
    ) -> list[PoolRecord]:
        """Match each consecutive pair of the path to its pool.

        Raises:
            InvalidPath: If the path has fewer than two tokens or repeats a
                token back to back
            NoPoolForPair: If no pool serves a pair
            AmbiguousPool: If more than one distinct pool serves a pair
        """
        if len(token_path) < 2:
            raise InvalidPath(f"Token path needs at least 2 tokens, got {len(token_path)}")

        resolved: list[PoolRecord] = []
        for token_in, token_out in zip(token_path, token_path[1:]):
            if token_in == token_out:
                raise InvalidPath(f"Token path repeats {token_in} back to back")
            candidates: list[PoolRecord] = []
            for pool in pools:
                if pool.has_token(token_in) and pool.has_token(token_out) and pool not in candidates:
                    candidates.append(pool)
            if not candidates:
                raise NoPoolForPair(token_in, token_out)
            if len(candidates) > 1:
                raise AmbiguousPool(token_in, token_out, len(candidates))
            resolved.append(candidates[0])
        return resolved

    def quote_route(
        self,
        token_path: Sequence[Pubkey],
        pools: Sequence[PoolRecord],
        amount_in: int,
    ) -> Route:
        """Chain quotes along token_path.

        Each hop is quoted on its own with the previous hop's output as input;
        there is no closed form across hops.

        Raises:
            InvalidPath, NoPoolForPair, AmbiguousPool: From path validation,
                before any quoting happens
        """
        resolved = self.resolve_pools(token_path, pools)

        hops: list[RouteHop] = []
        amount = amount_in
        for pool, token_in, token_out in zip(resolved, token_path, token_path[1:]):
            hop_quote = self.amm.quote(pool, token_in, amount)
            addresses = pool_addresses_for(pool, self.config)
            vault_in, vault_out = addresses.vault_a, addresses.vault_b
            if not hop_quote.direction.is_a_to_b:
                vault_in, vault_out = vault_out, vault_in
            hops.append(
                RouteHop(
                    pool=pool,
                    input_token=token_in,
                    output_token=token_out,
                    quote=hop_quote,
                    pool_address=addresses.pool,
                    vault_in=vault_in,
                    vault_out=vault_out,
                )
            )
            amount = hop_quote.amount_out

        return Route(hops=tuple(hops))

    def build(
        self,
        token_path: Sequence[Pubkey],
        pools: Sequence[PoolRecord],
        amount_in: int,
        minimum_amount_out: int,
        user: AccountRef,
        token_accounts: Mapping[Pubkey, AccountRef] | None = None,
        *,
        with_path: bool = False,
    ) -> BuiltRoute:
        """Quote a route and encode its multihop swap instruction.

        Args:
            token_path: Mints from input to output
            pools: Candidate pool snapshots, any order
            amount_in: Raw input amount
            minimum_amount_out: Reject the route below this final output
            user: Wallet that signs and owns the token accounts
            token_accounts: User token account per mint; mints not listed use
                the user's associated token account
            with_path: Encode MultihopSwapWithPath, carrying the token path.
                Routes of other than two hops always use it.

        Returns:
            BuiltRoute with the chained quote and encoded payload

        Raises:
            InvalidPath: If the path is malformed or routes through a native pool
            NoPoolForPair: If a consecutive pair has no pool
            AmbiguousPool: If a consecutive pair has several pools
            SlippageExceeded: If the final output is below minimum_amount_out
            FieldOverflow: If an amount does not fit in a u64
        """
        fields: dict[str, object] = {
            "amount_in": amount_in,
            "minimum_amount_out": minimum_amount_out,
        }
        check_fields("MultihopSwap", fields)

        route = self.quote_route(token_path, pools, amount_in)

        for hop in route.hops:
            if hop.pool.is_native:
                raise InvalidPath(
                    f"Native pool {hop.pool.address} cannot be routed through MultihopSwap"
                )

        if route.amount_out < minimum_amount_out:
            logger.warning(
                "route_slippage_exceeded",
                hops=len(route.hops),
                amount_in=amount_in,
                amount_out=route.amount_out,
                minimum_amount_out=minimum_amount_out,
            )
            raise SlippageExceeded(minimum_amount_out, route.amount_out)

        owner = to_pubkey(user)
        overrides = token_accounts or {}
        # One reference per mint, so intermediate slots alias the same account
        user_accounts: dict[Pubkey, Pubkey] = {}
        for mint in token_path:
            if mint not in user_accounts:
                supplied = overrides.get(mint)
                user_accounts[mint] = (
                    to_pubkey(supplied)
                    if supplied is not None
                    else get_associated_token_address(owner, mint, self.config)
                )

        head = {
            "user": owner,
            "token_program": self.config.token_program_id,
            "user_input": user_accounts[token_path[0]],
        }
        hop_accounts = []
        last = len(route.hops) - 1
        for index, hop in enumerate(route.hops):
            vault_a, vault_b = hop.vaults
            if index < last:
                intermediate = output = user_accounts[hop.output_token]
            else:
                intermediate = user_accounts[hop.input_token]
                output = user_accounts[hop.output_token]
            hop_accounts.append(
                {
                    "pool": hop.pool_address,
                    "token_a": hop.pool.token_a,
                    "token_b": hop.pool.token_b,
                    "vault_a": vault_a,
                    "vault_b": vault_b,
                    "intermediate": intermediate,
                    "output": output,
                }
            )

        operation = "MultihopSwap"
        # Tag 4 always executes exactly two hops
        if with_path or len(route.hops) != 2:
            operation = "MultihopSwapWithPath"
            fields["token_path"] = list(token_path)

        payload = encode(operation, fields, head, hops=hop_accounts, config=self.config)

        logger.info(
            "route_built",
            operation=operation,
            hops=len(route.hops),
            amount_in=amount_in,
            amount_out=route.amount_out,
            minimum_amount_out=minimum_amount_out,
        )
        return BuiltRoute(route=route, minimum_amount_out=minimum_amount_out, payload=payload)


# Default builder using the deployed program ids
default_route_builder = MultihopRouteBuilder()


__all__ = ["MultihopRouteBuilder", "default_route_builder"]
