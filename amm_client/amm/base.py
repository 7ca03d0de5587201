"""Base types for AMM quote math."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum

from solders.pubkey import Pubkey


class SwapDirection(str, Enum):
    """Which side of the pool the input token is on."""

    A_TO_B = "a_to_b"
    B_TO_A = "b_to_a"

    @property
    def is_a_to_b(self) -> bool:
        return self is SwapDirection.A_TO_B


@dataclass(frozen=True)
class SwapQuote:
    """Predicted result of swapping through one pool.

    Quotes are advisory: reserves can move before the transaction executes,
    and the program re-validates everything.
    """

    amount_in: int
    amount_out: int
    token_in: Pubkey
    token_out: Pubkey
    direction: SwapDirection
    reserve_in: int
    reserve_out: int
    fee_bps: int
    amount_in_after_fee: int
    # Informational only
    price_impact_bps: int
    effective_rate: int
    pool_address: Pubkey | None = None


class AMM(ABC):
    """Abstract base class for AMM quote math."""

    @abstractmethod
    def get_amount_out(
        self,
        amount_in: int,
        reserve_in: int,
        reserve_out: int,
        fee_bps: int = 0,
    ) -> int:
        """Calculate output amount for a given input."""
        ...

    @abstractmethod
    def get_amount_in(
        self,
        amount_out: int,
        reserve_in: int,
        reserve_out: int,
        fee_bps: int = 0,
    ) -> int | None:
        """Calculate required input for a desired output."""
        ...


__all__ = ["AMM", "SwapDirection", "SwapQuote"]
