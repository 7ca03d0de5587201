"""Protocol constants for the GorbChain AMM.

Centralizes well-known program ids, seeds and arithmetic parameters.
"""

from amm_client.models.types import is_valid_address

# Basis point denominator for fee and price impact math
BPS_DENOMINATOR = 10_000

# Fee charged by fee-aware pool schemas (0.3%)
FEE_AWARE_FEE_BPS = 30

# Scale for the informational effective rate (amount_out per amount_in)
RATE_SCALE = 10**9

# Maximum value of an on-chain u8 field
U8_MAX = 2**8 - 1


def _validate_program_address(name: str, address: str) -> str:
    """Validate and return a base58 program or mint address.

    Args:
        name: Name of the address (for error messages)
        address: The address to validate

    Returns:
        The validated address

    Raises:
        ValueError: If the address is not a valid 32-byte base58 key
    """
    if not is_valid_address(address):
        raise ValueError(f"Invalid {name} address: {address} (must be base58, 32 bytes)")
    return address


# Deployed program ids on GorbChain
# All addresses are validated at import time to catch typos early
AMM_PROGRAM_ID = _validate_program_address(
    "AMM program", "aBfrRgukSYDMgdyQ8y1XNEk4w5u7Ugtz5fPHFnkStJX"
)
TOKEN_PROGRAM_ID = _validate_program_address(
    "token program", "G22oYgZ6LnVcy7v8eSNi2xpNk1NcZiPD8CVKSTut7oZ6"
)
ASSOCIATED_TOKEN_PROGRAM_ID = _validate_program_address(
    "associated token program", "GoATGVNeSXerFerPqTJ8hcED1msPWHHLxao2vwBYqowm"
)
SYSTEM_PROGRAM_ID = _validate_program_address(
    "system program", "11111111111111111111111111111111"
)
RENT_SYSVAR_ID = _validate_program_address(
    "rent sysvar", "SysvarRent111111111111111111111111111111111"
)
NATIVE_MINT = _validate_program_address(
    "native mint", "So11111111111111111111111111111111111111112"
)

DEFAULT_RPC_URL = "https://rpc.gorbchain.xyz"

# PDA seed prefixes used by the on-chain program
POOL_SEED = b"pool"
LP_MINT_SEED = b"mint"
VAULT_SEED = b"vault"
NATIVE_POOL_SEED = b"native_sol_pool"
NATIVE_LP_MINT_SEED = b"native_sol_lp_mint"
NATIVE_VAULT_SEED = b"native_sol_vault"
