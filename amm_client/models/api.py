"""Pydantic models for the quote API request/response bodies."""

from __future__ import annotations

import base64

from pydantic import BaseModel, Field

from amm_client.amm.base import SwapQuote
from amm_client.instructions.encoder import InstructionPayload
from amm_client.layouts.registry import PoolKind
from amm_client.models.pool import PoolRecord
from amm_client.models.types import U64, Address, Base64Data


class PoolAccount(BaseModel):
    """Raw pool account as returned by the ledger RPC."""

    address: Address | None = Field(default=None, description="Pool account address")
    data: Base64Data = Field(description="Account data, base64 encoded")

    @property
    def raw(self) -> bytes:
        return base64.b64decode(self.data)


class DecodeRequest(BaseModel):
    """Decode one pool account."""

    pool: PoolAccount


class PoolResponse(BaseModel):
    """Decoded pool state."""

    kind: PoolKind
    address: Address | None = None
    token_a: Address = Field(alias="tokenA")
    token_b: Address = Field(alias="tokenB")
    reserve_a: U64 = Field(alias="reserveA")
    reserve_b: U64 = Field(alias="reserveB")
    total_lp_supply: U64 = Field(alias="totalLpSupply")
    fee_bps: int = Field(alias="feeBps")
    fee_collected_a: U64 | None = Field(default=None, alias="feeCollectedA")
    fee_collected_b: U64 | None = Field(default=None, alias="feeCollectedB")
    fee_treasury: Address | None = Field(default=None, alias="feeTreasury")

    model_config = {"populate_by_name": True}

    @classmethod
    def from_record(cls, record: PoolRecord) -> PoolResponse:
        return cls(
            kind=record.kind,
            address=str(record.address) if record.address else None,
            token_a=str(record.token_a),
            token_b=str(record.token_b),
            reserve_a=record.reserve_a,
            reserve_b=record.reserve_b,
            total_lp_supply=record.total_lp_supply,
            fee_bps=record.fee_bps,
            fee_collected_a=record.fee_collected_a,
            fee_collected_b=record.fee_collected_b,
            fee_treasury=str(record.fee_treasury) if record.fee_treasury else None,
        )


class QuoteRequest(BaseModel):
    """Quote a single-pool swap."""

    pool: PoolAccount
    token_in: Address = Field(alias="tokenIn")
    amount_in: U64 = Field(alias="amountIn")

    model_config = {"populate_by_name": True}


class QuoteResponse(BaseModel):
    """Predicted single-pool swap."""

    token_in: Address = Field(alias="tokenIn")
    token_out: Address = Field(alias="tokenOut")
    amount_in: U64 = Field(alias="amountIn")
    amount_out: U64 = Field(alias="amountOut")
    direction: str
    fee_bps: int = Field(alias="feeBps")
    price_impact_bps: int = Field(alias="priceImpactBps")
    effective_rate: str = Field(
        alias="effectiveRate", description="amountOut per amountIn, scaled by 1e9"
    )

    model_config = {"populate_by_name": True}

    @classmethod
    def from_quote(cls, quote: SwapQuote) -> QuoteResponse:
        return cls(
            token_in=str(quote.token_in),
            token_out=str(quote.token_out),
            amount_in=quote.amount_in,
            amount_out=quote.amount_out,
            direction=quote.direction.value,
            fee_bps=quote.fee_bps,
            price_impact_bps=quote.price_impact_bps,
            effective_rate=str(quote.effective_rate),
        )


class AccountMetaResponse(BaseModel):
    pubkey: Address
    is_signer: bool = Field(alias="isSigner")
    is_writable: bool = Field(alias="isWritable")

    model_config = {"populate_by_name": True}


class InstructionResponse(BaseModel):
    """Encoded instruction, ready for the caller to sign and submit."""

    operation: str
    program_id: Address = Field(alias="programId")
    data: Base64Data
    accounts: list[AccountMetaResponse]

    model_config = {"populate_by_name": True}

    @classmethod
    def from_payload(cls, payload: InstructionPayload) -> InstructionResponse:
        return cls(
            operation=payload.operation,
            program_id=str(payload.program_id),
            data=base64.b64encode(payload.data).decode("ascii"),
            accounts=[
                AccountMetaResponse(
                    pubkey=str(meta.pubkey),
                    is_signer=meta.is_signer,
                    is_writable=meta.is_writable,
                )
                for meta in payload.accounts
            ],
        )


class RouteRequest(BaseModel):
    """Quote (and optionally encode) a multi-hop route."""

    token_path: list[Address] = Field(alias="tokenPath", min_length=2)
    pools: list[PoolAccount] = Field(min_length=1)
    amount_in: U64 = Field(alias="amountIn")
    minimum_amount_out: U64 = Field(default="0", alias="minimumAmountOut")
    user: Address | None = Field(
        default=None, description="Signer wallet; when set the instruction is encoded"
    )
    with_path: bool = Field(default=False, alias="withPath")

    model_config = {"populate_by_name": True}


class RouteResponse(BaseModel):
    """Chained quote for a route."""

    token_path: list[Address] = Field(alias="tokenPath")
    hops: list[QuoteResponse]
    amount_in: U64 = Field(alias="amountIn")
    amount_out: U64 = Field(alias="amountOut")
    instruction: InstructionResponse | None = None

    model_config = {"populate_by_name": True}


class ErrorResponse(BaseModel):
    """Domain error reported to API callers."""

    error: str
    detail: str


__all__ = [
    "PoolAccount",
    "DecodeRequest",
    "PoolResponse",
    "QuoteRequest",
    "QuoteResponse",
    "AccountMetaResponse",
    "InstructionResponse",
    "RouteRequest",
    "RouteResponse",
    "ErrorResponse",
]
