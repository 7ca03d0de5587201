"""Constant product AMM math."""

from amm_client.amm.base import AMM, SwapDirection, SwapQuote
from amm_client.amm.constant_product import ConstantProductAMM, constant_product, quote
from amm_client.amm.liquidity import (
    DepositQuote,
    WithdrawalQuote,
    quote_deposit,
    quote_withdrawal,
)

__all__ = [
    # Base classes
    "AMM",
    "SwapDirection",
    "SwapQuote",
    # Constant product
    "ConstantProductAMM",
    "constant_product",
    "quote",
    # Liquidity
    "DepositQuote",
    "WithdrawalQuote",
    "quote_deposit",
    "quote_withdrawal",
]
