"""Shared type definitions for AMM client models.

These types are used by the API models and by the address helpers.
"""

import base64
import binascii
from typing import Annotated, Any

from pydantic import BeforeValidator, Field
from solders.pubkey import Pubkey

# Maximum u64 value
U64_MAX = 2**64 - 1


def validate_u64(value: Any) -> str:
    """Validate that a value is a valid u64 decimal string.

    Args:
        value: Value to validate (string or int)

    Returns:
        Valid u64 as decimal string

    Raises:
        ValueError: If value is not a non-negative integer within u64 range
    """
    # Accept int directly (bool is an int subclass but never an amount)
    if isinstance(value, int) and not isinstance(value, bool):
        if value < 0:
            raise ValueError(f"U64 cannot be negative: {value}")
        if value > U64_MAX:
            raise ValueError(f"U64 overflow: {value} > 2^64-1")
        return str(value)

    if not isinstance(value, str):
        raise ValueError(f"U64 must be string or int, got {type(value).__name__}")

    try:
        int_value = int(value)
    except ValueError as err:
        raise ValueError(f"U64 must be a decimal integer string: '{value}'") from err

    if int_value < 0:
        raise ValueError(f"U64 cannot be negative: {value}")
    if int_value > U64_MAX:
        raise ValueError(f"U64 overflow: {value} > 2^64-1")

    return value


def validate_address(value: Any) -> str:
    """Validate a base58 account address.

    Raises:
        ValueError: If value does not decode to a 32-byte key
    """
    if not isinstance(value, str):
        raise ValueError(f"Address must be a base58 string, got {type(value).__name__}")
    if not is_valid_address(value):
        raise ValueError(f"Invalid address: '{value}'")
    return value


def validate_base64(value: Any) -> str:
    """Validate a base64 encoded byte string (account data as returned by RPC).

    Raises:
        ValueError: If value is not valid base64
    """
    if not isinstance(value, str):
        raise ValueError(f"Account data must be a base64 string, got {type(value).__name__}")
    try:
        base64.b64decode(value, validate=True)
    except binascii.Error as err:
        raise ValueError(f"Account data is not valid base64: {err}") from err
    return value


# 64-bit unsigned integer as decimal string (validated)
U64 = Annotated[
    str,
    BeforeValidator(validate_u64),
    Field(description="64-bit unsigned integer as decimal string"),
]

# Base64 encoded raw bytes
Base64Data = Annotated[
    str,
    BeforeValidator(validate_base64),
    Field(description="Base64 encoded bytes"),
]

# Base58 encoded 32-byte account key
Address = Annotated[
    str,
    BeforeValidator(validate_address),
    Field(description="Base58 encoded account address"),
]


def is_valid_address(address: str) -> bool:
    """Check if a string is a valid base58 account address.

    Args:
        address: String to check

    Returns:
        True if the string parses as a 32-byte public key
    """
    try:
        Pubkey.from_string(address)
    except ValueError:
        return False
    return True


def to_pubkey(address: "str | Pubkey") -> Pubkey:
    """Convert an address string (or an existing key) to a Pubkey.

    Raises:
        ValueError: If the string is not a valid base58 key
    """
    if isinstance(address, Pubkey):
        return address
    return Pubkey.from_string(address)


__all__ = [
    "U64_MAX",
    "U64",
    "Address",
    "Base64Data",
    "validate_u64",
    "validate_base64",
    "validate_address",
    "is_valid_address",
    "to_pubkey",
]
