"""Pool account decoding and pool management.

Provides the decoder for on-chain pool accounts and PoolSet for indexing
decoded pools by token pair.
"""

from .decoder import decode_pool, decode_pool_as, encode_pool
from .registry import PoolSet

__all__ = [
    "PoolSet",
    "decode_pool",
    "decode_pool_as",
    "encode_pool",
]
