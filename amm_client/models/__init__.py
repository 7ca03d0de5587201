"""Data models for the AMM client.

Only the shared validated types are re-exported here; import PoolRecord from
amm_client.models.pool and the API bodies from amm_client.models.api.
"""

from amm_client.models.types import U64, Address, Base64Data, is_valid_address, to_pubkey

__all__ = [
    "Address",
    "Base64Data",
    "U64",
    "is_valid_address",
    "to_pubkey",
]
