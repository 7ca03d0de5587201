"""Program instruction encoding."""

from amm_client.instructions.encoder import (
    DecodedInstruction,
    InstructionPayload,
    decode_instruction_data,
    encode,
)

__all__ = [
    "DecodedInstruction",
    "InstructionPayload",
    "decode_instruction_data",
    "encode",
]
