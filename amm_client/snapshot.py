"""Collaborator interfaces and consistent pool snapshots.

Fetching account bytes and submitting transactions belong to the host
application. This module only declares what it expects from them and
gathers the pool accounts of a route concurrently into one snapshot.
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from typing import Protocol, runtime_checkable

import structlog
from solders.instruction import Instruction
from solders.pubkey import Pubkey

from amm_client.config import DEFAULT_CONFIG, ProgramConfig
from amm_client.errors import AccountNotFound
from amm_client.instructions.encoder import InstructionPayload
from amm_client.models.pool import PoolRecord
from amm_client.pools.decoder import decode_pool

logger = structlog.get_logger()


@runtime_checkable
class AccountFetcher(Protocol):
    """Reads raw account data from the ledger."""

    async def get_account_data(self, address: Pubkey) -> bytes | None:
        """Return the account's data, or None if the account does not exist."""
        ...


@runtime_checkable
class TransactionSubmitter(Protocol):
    """Signs and sends instructions as one transaction."""

    async def submit(self, instructions: Sequence[Instruction]) -> str:
        """Return the transaction signature, or raise on failure."""
        ...


async def fetch_pool(
    fetcher: AccountFetcher,
    address: Pubkey,
    *,
    config: ProgramConfig = DEFAULT_CONFIG,
) -> PoolRecord:
    """Fetch and decode one pool account.

    Raises:
        AccountNotFound: If the fetcher returns no data
        DecodeError: If the bytes match no pool schema
    """
    data = await fetcher.get_account_data(address)
    if data is None:
        raise AccountNotFound(address)
    return decode_pool(data, address, config=config)


async def fetch_pool_snapshot(
    fetcher: AccountFetcher,
    addresses: Sequence[Pubkey],
    *,
    config: ProgramConfig = DEFAULT_CONFIG,
) -> dict[Pubkey, PoolRecord]:
    """Fetch all pool accounts concurrently and decode them as one snapshot.

    Any missing or undecodable account fails the whole snapshot; a route
    must never be built from a partial view.

    Returns:
        Pool records keyed by address, in the order requested
    """
    unique = list(dict.fromkeys(addresses))
    records = await asyncio.gather(*(fetch_pool(fetcher, a, config=config) for a in unique))
    logger.debug("pool_snapshot_fetched", pool_count=len(records))
    return dict(zip(unique, records))


async def submit_payloads(
    submitter: TransactionSubmitter, payloads: Sequence[InstructionPayload]
) -> str:
    """Hand encoded payloads to the submitter as a single transaction."""
    signature = await submitter.submit([payload.to_instruction() for payload in payloads])
    logger.info(
        "transaction_submitted",
        operations=[payload.operation for payload in payloads],
        signature=signature,
    )
    return signature


__all__ = [
    "AccountFetcher",
    "TransactionSubmitter",
    "fetch_pool",
    "fetch_pool_snapshot",
    "submit_payloads",
]
