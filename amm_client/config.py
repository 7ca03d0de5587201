"""Program configuration for the AMM client."""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from solders.pubkey import Pubkey

from amm_client.constants import (
    AMM_PROGRAM_ID,
    ASSOCIATED_TOKEN_PROGRAM_ID,
    DEFAULT_RPC_URL,
    NATIVE_MINT,
    RENT_SYSVAR_ID,
    SYSTEM_PROGRAM_ID,
    TOKEN_PROGRAM_ID,
)


@dataclass(frozen=True)
class ProgramConfig:
    """Addresses of the programs and sysvars the AMM interacts with.

    The config is passed explicitly into the decoder, builders and route
    builder, so tests and alternate deployments can swap ids without any
    global state.

    Attributes:
        program_id: The AMM program
        token_program_id: SPL token program used by pool vaults and LP mints
        associated_token_program_id: Program owning associated token accounts
        system_program_id: System program
        rent_sysvar_id: Rent sysvar account
        native_mint: Mint that stands in for the native coin in native pools
        rpc_url: Ledger RPC endpoint handed to the account fetcher
    """

    program_id: Pubkey = field(default_factory=lambda: Pubkey.from_string(AMM_PROGRAM_ID))
    token_program_id: Pubkey = field(
        default_factory=lambda: Pubkey.from_string(TOKEN_PROGRAM_ID)
    )
    associated_token_program_id: Pubkey = field(
        default_factory=lambda: Pubkey.from_string(ASSOCIATED_TOKEN_PROGRAM_ID)
    )
    system_program_id: Pubkey = field(
        default_factory=lambda: Pubkey.from_string(SYSTEM_PROGRAM_ID)
    )
    rent_sysvar_id: Pubkey = field(default_factory=lambda: Pubkey.from_string(RENT_SYSVAR_ID))
    native_mint: Pubkey = field(default_factory=lambda: Pubkey.from_string(NATIVE_MINT))
    rpc_url: str = DEFAULT_RPC_URL

    @classmethod
    def from_env(cls) -> ProgramConfig:
        """Build a config from environment variables, falling back to defaults.

        Environment variables:
        - AMM_PROGRAM_ID
        - AMM_TOKEN_PROGRAM_ID
        - AMM_ATA_PROGRAM_ID
        - AMM_NATIVE_MINT
        - AMM_RPC_URL
        """
        return cls(
            program_id=Pubkey.from_string(os.environ.get("AMM_PROGRAM_ID", AMM_PROGRAM_ID)),
            token_program_id=Pubkey.from_string(
                os.environ.get("AMM_TOKEN_PROGRAM_ID", TOKEN_PROGRAM_ID)
            ),
            associated_token_program_id=Pubkey.from_string(
                os.environ.get("AMM_ATA_PROGRAM_ID", ASSOCIATED_TOKEN_PROGRAM_ID)
            ),
            native_mint=Pubkey.from_string(os.environ.get("AMM_NATIVE_MINT", NATIVE_MINT)),
            rpc_url=os.environ.get("AMM_RPC_URL", DEFAULT_RPC_URL),
        )


# Default configuration instance
DEFAULT_CONFIG = ProgramConfig()
