"""Liquidity deposit and withdrawal predictions.

Mirrors the program's rules so callers can size add/remove liquidity
instructions before sending them:

- Deposits keep the pool ratio. If the offered B amount exceeds what A
  requires, only the required B is taken; otherwise A is scaled down to
  match B. The excess is refunded by the program.
- LP minted is isqrt(a * b) for the first deposit and
  a * total_lp_supply // reserve_a afterwards.
- Withdrawals pay out lp_amount * reserve // total_lp_supply of each side.
"""

from __future__ import annotations

from dataclasses import dataclass

from amm_client.models.pool import PoolRecord
from amm_client.safe_int import S


@dataclass(frozen=True)
class DepositQuote:
    """Predicted outcome of adding liquidity."""

    amount_a: int
    amount_b: int
    lp_minted: int
    refund_a: int
    refund_b: int


@dataclass(frozen=True)
class WithdrawalQuote:
    """Predicted outcome of removing liquidity."""

    lp_amount: int
    amount_a: int
    amount_b: int


def quote_deposit(pool: PoolRecord, amount_a: int, amount_b: int) -> DepositQuote:
    """Predict the amounts taken and LP minted for a deposit.

    Args:
        pool: Pool snapshot (amount_a is on the token_a side)
        amount_a: Maximum amount of token_a offered
        amount_b: Maximum amount of token_b offered

    Returns:
        DepositQuote with the ratio-adjusted amounts
    """
    sa, sb = S(amount_a), S(amount_b)
    reserve_a, reserve_b = S(pool.reserve_a), S(pool.reserve_b)

    if reserve_a > 0 and reserve_b > 0:
        required_b = sa * reserve_b // reserve_a
        if required_b <= sb:
            final_a, final_b = sa, required_b
        else:
            final_a, final_b = sb * reserve_a // reserve_b, sb
    else:
        final_a, final_b = sa, sb

    if pool.total_lp_supply == 0:
        lp_minted = (final_a * final_b).isqrt()
    elif reserve_a == 0:
        lp_minted = S.zero()
    else:
        lp_minted = final_a * S(pool.total_lp_supply) // reserve_a

    return DepositQuote(
        amount_a=final_a.to_u64(),
        amount_b=final_b.to_u64(),
        lp_minted=lp_minted.to_u64(),
        refund_a=(sa - final_a).value,
        refund_b=(sb - final_b).value,
    )


def quote_withdrawal(pool: PoolRecord, lp_amount: int) -> WithdrawalQuote:
    """Predict the amounts returned for burning lp_amount LP tokens.

    Raises:
        ValueError: If lp_amount exceeds the pool's LP supply
    """
    if lp_amount > pool.total_lp_supply:
        raise ValueError(
            f"LP amount {lp_amount} exceeds total supply {pool.total_lp_supply}"
        )
    if pool.total_lp_supply == 0:
        return WithdrawalQuote(lp_amount=lp_amount, amount_a=0, amount_b=0)

    supply = S(pool.total_lp_supply)
    return WithdrawalQuote(
        lp_amount=lp_amount,
        amount_a=(S(lp_amount) * S(pool.reserve_a) // supply).to_u64(),
        amount_b=(S(lp_amount) * S(pool.reserve_b) // supply).to_u64(),
    )


__all__ = ["DepositQuote", "WithdrawalQuote", "quote_deposit", "quote_withdrawal"]
