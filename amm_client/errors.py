"""AMM client error classes.

Every error carries the structured context (pair, field, role) that caused
it, so callers can report the exact fault without parsing messages.
"""

from __future__ import annotations

from typing import Any


class AmmClientError(Exception):
    """Base error for AMM client operations."""

    pass


# --- Pool account decoding ---


class DecodeError(AmmClientError):
    """Pool account bytes could not be decoded."""

    pass


class UnrecognizedSchema(DecodeError):
    """Byte length does not match any known pool schema."""

    def __init__(self, length: int) -> None:
        self.length = length
        super().__init__(f"No pool schema is {length} bytes long")


class Truncated(DecodeError):
    """Buffer ends before a field declared by the schema."""

    def __init__(self, field: str, needed: int, available: int) -> None:
        self.field = field
        self.needed = needed
        self.available = available
        super().__init__(
            f"Field '{field}' needs {needed} bytes but buffer has {available}"
        )


# --- Quoting ---


class QuoteError(AmmClientError):
    """A swap quote could not be computed."""

    pass


class TokenNotInPool(QuoteError):
    """Input token is neither side of the pool."""

    def __init__(self, token: Any, pool: Any = None) -> None:
        self.token = token
        self.pool = pool
        location = f" {pool}" if pool is not None else ""
        super().__init__(f"Token {token} not in pool{location}")


# --- Routing ---


class RouteError(AmmClientError):
    """A multi-hop route could not be built."""

    pass


class InvalidPath(RouteError):
    """Token path is too short or otherwise malformed."""

    pass


class NoPoolForPair(RouteError):
    """No supplied pool serves a consecutive pair of the token path."""

    def __init__(self, token_in: Any, token_out: Any) -> None:
        self.token_in = token_in
        self.token_out = token_out
        super().__init__(f"No pool for pair {token_in} -> {token_out}")


class AmbiguousPool(RouteError):
    """More than one supplied pool serves the same consecutive pair."""

    def __init__(self, token_in: Any, token_out: Any, count: int) -> None:
        self.token_in = token_in
        self.token_out = token_out
        self.count = count
        super().__init__(f"{count} pools serve pair {token_in} -> {token_out}")


class SlippageExceeded(RouteError):
    """Predicted output is below the caller's minimum."""

    def __init__(self, minimum: int, actual: int) -> None:
        self.minimum = minimum
        self.actual = actual
        super().__init__(f"Expected at least {minimum} but route yields {actual}")


# --- Instruction encoding ---


class EncodeError(AmmClientError):
    """An instruction payload could not be encoded."""

    pass


class MissingAccount(EncodeError):
    """No address was supplied for a required account role."""

    def __init__(self, role: str, hop: int | None = None) -> None:
        self.role = role
        self.hop = hop
        where = f" (hop {hop})" if hop is not None else ""
        super().__init__(f"Missing account for role '{role}'{where}")


class MissingField(EncodeError):
    """No value was supplied for a declared instruction field."""

    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(f"Missing value for field '{field}'")


class FieldOverflow(EncodeError):
    """Field value does not fit its declared width."""

    def __init__(self, field: str, value: Any) -> None:
        self.field = field
        self.value = value
        super().__init__(f"Value {value!r} does not fit field '{field}'")


class InvalidAccount(EncodeError):
    """A role address is not a valid public key."""

    def __init__(self, role: str, address: Any, hop: int | None = None) -> None:
        self.role = role
        self.address = address
        self.hop = hop
        where = f" (hop {hop})" if hop is not None else ""
        super().__init__(f"Invalid address {address!r} for role '{role}'{where}")


# --- Collaborators ---


class AccountNotFound(AmmClientError):
    """The ledger returned no data for an account."""

    def __init__(self, address: Any) -> None:
        self.address = address
        super().__init__(f"Account {address} not found")


__all__ = [
    "AmmClientError",
    "DecodeError",
    "UnrecognizedSchema",
    "Truncated",
    "QuoteError",
    "TokenNotInPool",
    "RouteError",
    "InvalidPath",
    "NoPoolForPair",
    "AmbiguousPool",
    "SlippageExceeded",
    "EncodeError",
    "MissingAccount",
    "InvalidAccount",
    "MissingField",
    "FieldOverflow",
    "AccountNotFound",
]
