"""API endpoints for pool decoding, quotes and routes."""

import structlog
from fastapi import APIRouter, Depends
from solders.pubkey import Pubkey

from amm_client.amm.constant_product import constant_product
from amm_client.config import ProgramConfig
from amm_client.models.api import (
    DecodeRequest,
    ErrorResponse,
    InstructionResponse,
    PoolAccount,
    PoolResponse,
    QuoteRequest,
    QuoteResponse,
    RouteRequest,
    RouteResponse,
)
from amm_client.models.pool import PoolRecord
from amm_client.pools.decoder import decode_pool
from amm_client.routing.multihop import MultihopRouteBuilder

logger = structlog.get_logger()

router = APIRouter()

_config: ProgramConfig | None = None


def get_config() -> ProgramConfig:
    """Dependency provider for the program configuration.

    Read from the environment once, on first use. Override in tests:
        app.dependency_overrides[get_config] = lambda: test_config
    """
    global _config
    if _config is None:
        _config = ProgramConfig.from_env()
    return _config


def get_route_builder(config: ProgramConfig = Depends(get_config)) -> MultihopRouteBuilder:
    """Dependency provider for the route builder."""
    return MultihopRouteBuilder(config)


def _decode(account: PoolAccount, config: ProgramConfig) -> PoolRecord:
    address = Pubkey.from_string(account.address) if account.address else None
    return decode_pool(account.raw, address, config=config)


@router.post(
    "/decode", response_model_exclude_none=True, responses={422: {"model": ErrorResponse}}
)
async def decode(
    request: DecodeRequest,
    config: ProgramConfig = Depends(get_config),
) -> PoolResponse:
    """Decode a pool account.

    Error Handling:
        - Invalid request schema: 422 Validation Error (Pydantic)
        - Unknown account length: 422 with error "UnrecognizedSchema"
    """
    record = _decode(request.pool, config)
    return PoolResponse.from_record(record)


@router.post("/quote", responses={422: {"model": ErrorResponse}})
async def quote(
    request: QuoteRequest,
    config: ProgramConfig = Depends(get_config),
) -> QuoteResponse:
    """Quote a swap through a single pool."""
    record = _decode(request.pool, config)
    swap_quote = constant_product.quote(
        record, Pubkey.from_string(request.token_in), int(request.amount_in)
    )
    logger.info(
        "quote_computed",
        kind=record.kind.value,
        amount_in=swap_quote.amount_in,
        amount_out=swap_quote.amount_out,
    )
    return QuoteResponse.from_quote(swap_quote)


@router.post(
    "/route", response_model_exclude_none=True, responses={422: {"model": ErrorResponse}}
)
async def route(
    request: RouteRequest,
    config: ProgramConfig = Depends(get_config),
    builder: MultihopRouteBuilder = Depends(get_route_builder),
) -> RouteResponse:
    """Quote a multi-hop route; encode its instruction when a user is given.

    Error Handling:
        - Missing pool for a pair: 422 with error "NoPoolForPair"
        - Output below minimumAmountOut: 422 with error "SlippageExceeded"
    """
    pools = [_decode(account, config) for account in request.pools]
    token_path = [Pubkey.from_string(token) for token in request.token_path]
    amount_in = int(request.amount_in)

    logger.info(
        "route_requested",
        hops=len(token_path) - 1,
        pool_count=len(pools),
        amount_in=amount_in,
    )

    instruction = None
    if request.user is not None:
        built = builder.build(
            token_path,
            pools,
            amount_in,
            int(request.minimum_amount_out),
            Pubkey.from_string(request.user),
            with_path=request.with_path,
        )
        quoted = built.route
        instruction = InstructionResponse.from_payload(built.payload)
    else:
        quoted = builder.quote_route(token_path, pools, amount_in)

    return RouteResponse(
        token_path=[str(token) for token in quoted.token_path],
        hops=[QuoteResponse.from_quote(hop.quote) for hop in quoted.hops],
        amount_in=quoted.amount_in,
        amount_out=quoted.amount_out,
        instruction=instruction,
    )
