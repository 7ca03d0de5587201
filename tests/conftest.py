"""Pytest configuration and fixtures."""

from dataclasses import dataclass, field

import pytest
from solders.instruction import Instruction
from solders.pubkey import Pubkey

from amm_client.config import ProgramConfig
from amm_client.models.pool import PoolRecord
from tests.helpers import (
    MINT_A,
    MINT_B,
    MINT_C,
    MINT_D,
    ONE,
    POOL_AB,
    POOL_BC,
    POOL_CD,
    make_pool,
)


@pytest.fixture
def config() -> ProgramConfig:
    """Default program configuration."""
    return ProgramConfig()


@pytest.fixture
def pool_ab() -> PoolRecord:
    """A/B pool, no fee: 2 A against 3 B."""
    return make_pool(MINT_A, MINT_B, 2 * ONE, 3 * ONE, address=POOL_AB)


@pytest.fixture
def pool_bc() -> PoolRecord:
    """B/C pool with the 30 bps fee: 5 B against 4 C."""
    return make_pool(MINT_B, MINT_C, 5 * ONE, 4 * ONE, fee_bps=30, address=POOL_BC)


@pytest.fixture
def pool_cd() -> PoolRecord:
    """C/D pool stored in D/C order, no fee."""
    return make_pool(MINT_D, MINT_C, 10 * ONE, 10 * ONE, address=POOL_CD)


# =============================================================================
# Mock collaborators
# =============================================================================


class MockAccountFetcher:
    """In-memory AccountFetcher.

    Usage:
        fetcher = MockAccountFetcher({POOL_AB: data})
        data = await fetcher.get_account_data(POOL_AB)  # None if unknown
    """

    def __init__(self, accounts: dict[Pubkey, bytes] | None = None) -> None:
        self.accounts = accounts or {}
        self.calls: list[Pubkey] = []  # Track calls for assertions

    async def get_account_data(self, address: Pubkey) -> bytes | None:
        self.calls.append(address)
        return self.accounts.get(address)


@dataclass
class MockSubmitter:
    """TransactionSubmitter that records instructions and returns a fixed signature."""

    signature: str = "5" * 88
    submitted: list[list[Instruction]] = field(default_factory=list)

    async def submit(self, instructions: list[Instruction]) -> str:
        self.submitted.append(list(instructions))
        return self.signature


@pytest.fixture
def mock_fetcher() -> MockAccountFetcher:
    return MockAccountFetcher()


@pytest.fixture
def mock_submitter() -> MockSubmitter:
    return MockSubmitter()
