"""Test helpers module for shared test utilities.

This module consolidates common test utilities to reduce duplication:
- constants: Mints, wallets, pool accounts and common amounts
- factories: Pool account byte packers and PoolRecord factories
"""

from tests.helpers.constants import (
    MINT_A,
    MINT_B,
    MINT_C,
    MINT_D,
    MINT_E,
    ONE,
    POOL_AB,
    POOL_BC,
    POOL_CD,
    POOL_NATIVE,
    TREASURY,
    USER,
    key,
)
from tests.helpers.factories import (
    NATIVE,
    make_native_pool,
    make_pool,
    native_pool_bytes,
    regular_pool_bytes,
)

__all__ = [
    # Constants
    "MINT_A",
    "MINT_B",
    "MINT_C",
    "MINT_D",
    "MINT_E",
    "NATIVE",
    "ONE",
    "POOL_AB",
    "POOL_BC",
    "POOL_CD",
    "POOL_NATIVE",
    "TREASURY",
    "USER",
    "key",
    # Factories
    "make_pool",
    "make_native_pool",
    "regular_pool_bytes",
    "native_pool_bytes",
]
