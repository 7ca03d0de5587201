"""Constant product (x * y = k) swap quotes.

Quotes use integer arithmetic only. A pool's fee, when its schema carries
one, is taken off the input before the constant product formula:

    amount_in_effective = amount_in * (10000 - fee_bps) // 10000
    amount_out = amount_in_effective * reserve_out // (reserve_in + amount_in_effective)
"""

from __future__ import annotations

from solders.pubkey import Pubkey

from amm_client.amm.base import AMM, SwapDirection, SwapQuote
from amm_client.constants import BPS_DENOMINATOR, RATE_SCALE
from amm_client.models.pool import PoolRecord
from amm_client.safe_int import S


class ConstantProductAMM(AMM):
    """Constant product AMM math.

    Formula: amount_out = (in_eff * res_out) / (res_in + in_eff)
    where in_eff = in * (10000 - fee_bps) / 10000.

    Intermediate products go through SafeInt on unbounded ints, so they never
    wrap even though amounts and reserves are u64.
    """

    def apply_fee(self, amount_in: int, fee_bps: int = 0) -> int:
        """Reduce an input amount by the pool fee (rounded down)."""
        return (S(amount_in) * S(BPS_DENOMINATOR - fee_bps) // S(BPS_DENOMINATOR)).value

    def get_amount_out(
        self,
        amount_in: int,
        reserve_in: int,
        reserve_out: int,
        fee_bps: int = 0,
    ) -> int:
        """Calculate output amount using the constant product formula.

        Args:
            amount_in: Input token amount
            reserve_in: Reserve of input token in pool
            reserve_out: Reserve of output token in pool
            fee_bps: Pool fee in basis points (0 for no-fee schemas)

        Returns:
            Output token amount; 0 when amount_in or reserve_in is 0
        """
        if amount_in <= 0 or reserve_in <= 0:
            return 0

        amount_in_effective = S(self.apply_fee(amount_in, fee_bps))
        numerator = amount_in_effective * S(reserve_out)
        denominator = S(reserve_in) + amount_in_effective

        return (numerator // denominator).value

    def get_amount_in(
        self,
        amount_out: int,
        reserve_in: int,
        reserve_out: int,
        fee_bps: int = 0,
    ) -> int | None:
        """Calculate required input for a desired output.

        Formula: in_eff = ceil(res_in * out / (res_out - out)), then the fee
        is grossed back up with a ceiling division.

        Returns:
            Required input amount, or None if amount_out cannot be reached
            (it would drain the reserve, or the pool is empty)
        """
        if amount_out <= 0:
            return 0
        if reserve_in <= 0 or reserve_out <= 0 or amount_out >= reserve_out:
            return None

        amount_in_effective = (S(reserve_in) * S(amount_out)).ceiling_div(
            S(reserve_out) - S(amount_out)
        )
        amount_in = (amount_in_effective * S(BPS_DENOMINATOR)).ceiling_div(
            S(BPS_DENOMINATOR - fee_bps)
        )

        return amount_in.value

    def price_impact_bps(self, amount_in: int, reserve_in: int) -> int:
        """Input size relative to the input reserve, in basis points."""
        if reserve_in <= 0:
            return 0
        return (S(amount_in) * S(BPS_DENOMINATOR) // S(reserve_in)).value

    def quote(self, pool: PoolRecord, token_in: Pubkey, amount_in: int) -> SwapQuote:
        """Quote a swap of amount_in of token_in through pool.

        Args:
            pool: Decoded pool snapshot
            token_in: Mint being sold; selects the swap direction
            amount_in: Raw input amount (u64)

        Returns:
            SwapQuote with the predicted output and informational metrics

        Raises:
            TokenNotInPool: If token_in is neither side of the pool
            U64Overflow: If amount_in does not fit in u64
        """
        amount_in = S(amount_in).to_u64()
        reserve_in, reserve_out = pool.get_reserves(token_in)
        direction = SwapDirection.A_TO_B if token_in == pool.token_a else SwapDirection.B_TO_A

        if amount_in == 0 or reserve_in == 0:
            amount_out = 0
        else:
            amount_out = self.get_amount_out(amount_in, reserve_in, reserve_out, pool.fee_bps)

        effective_rate = 0
        if amount_in > 0:
            effective_rate = (S(amount_out) * S(RATE_SCALE) // S(amount_in)).value

        return SwapQuote(
            amount_in=amount_in,
            amount_out=amount_out,
            token_in=token_in,
            token_out=pool.get_token_out(token_in),
            direction=direction,
            reserve_in=reserve_in,
            reserve_out=reserve_out,
            fee_bps=pool.fee_bps,
            amount_in_after_fee=self.apply_fee(amount_in, pool.fee_bps),
            price_impact_bps=self.price_impact_bps(amount_in, reserve_in),
            effective_rate=effective_rate,
            pool_address=pool.address,
        )

    def quote_exact_output(
        self, pool: PoolRecord, token_in: Pubkey, amount_out: int
    ) -> SwapQuote | None:
        """Quote the cheapest swap that yields at least amount_out.

        Returns:
            SwapQuote for the required input, or None if the pool cannot
            provide amount_out
        """
        reserve_in, reserve_out = pool.get_reserves(token_in)
        amount_in = self.get_amount_in(amount_out, reserve_in, reserve_out, pool.fee_bps)
        if amount_in is None or not S(amount_in).is_u64():
            return None
        return self.quote(pool, token_in, amount_in)


# Singleton instance
constant_product = ConstantProductAMM()


def quote(pool: PoolRecord, token_in: Pubkey, amount_in: int) -> SwapQuote:
    """Quote a swap through pool using the shared engine."""
    return constant_product.quote(pool, token_in, amount_in)


__all__ = ["ConstantProductAMM", "constant_product", "quote"]
