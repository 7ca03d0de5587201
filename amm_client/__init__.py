"""GorbChain AMM client - pool decoding, swap quotes and instruction encoding."""

from amm_client.amm.constant_product import quote
from amm_client.config import DEFAULT_CONFIG, ProgramConfig
from amm_client.instructions.encoder import InstructionPayload, encode
from amm_client.models.pool import PoolRecord
from amm_client.pools.decoder import decode_pool
from amm_client.routing.multihop import MultihopRouteBuilder

__version__ = "0.1.0"
__all__ = [
    "DEFAULT_CONFIG",
    "InstructionPayload",
    "MultihopRouteBuilder",
    "PoolRecord",
    "ProgramConfig",
    "decode_pool",
    "encode",
    "quote",
    "__version__",
]
