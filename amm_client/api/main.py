"""FastAPI application exposing pool decoding, quotes and route building.

The service is stateless: callers post the raw pool account bytes they
fetched, and get back decoded state, quotes or encoded instructions. It never
talks to the ledger itself.
"""

import os

import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from amm_client.api.endpoints import router
from amm_client.errors import AmmClientError

logger = structlog.get_logger()

# Configuration from environment variables with sensible defaults
HOST = os.environ.get("AMM_API_HOST", "0.0.0.0")
PORT = int(os.environ.get("AMM_API_PORT", "8000"))
DEBUG = os.environ.get("AMM_API_DEBUG", "false").lower() in ("true", "1", "yes")

# Maximum request body size (1 MB); pool accounts are a few hundred bytes
MAX_REQUEST_SIZE = 1024 * 1024

app = FastAPI(
    title="GorbChain AMM client",
    description="Pool decoding, swap quotes and instruction encoding for the GorbChain AMM",
    version="0.1.0",
)


@app.middleware("http")
async def limit_request_size(request: Request, call_next):  # type: ignore[no-untyped-def]
    """Reject requests with body larger than MAX_REQUEST_SIZE."""
    content_length = request.headers.get("content-length")
    if content_length and int(content_length) > MAX_REQUEST_SIZE:
        return JSONResponse(status_code=413, content={"detail": "Request too large"})
    return await call_next(request)


@app.exception_handler(AmmClientError)
async def amm_error_handler(request: Request, exc: AmmClientError) -> JSONResponse:
    """Report domain errors (bad bytes, missing pools, slippage) as 422."""
    logger.warning(
        "request_rejected",
        path=request.url.path,
        error=type(exc).__name__,
        detail=str(exc),
    )
    return JSONResponse(
        status_code=422,
        content={"error": type(exc).__name__, "detail": str(exc)},
    )


app.include_router(router)


@app.get("/health")
async def health() -> dict[str, object]:
    """Health check endpoint."""
    return {"status": "ok"}


def run() -> None:
    """Run the API server.

    Configuration via environment variables:
    - AMM_API_HOST: Host to bind to (default: 0.0.0.0)
    - AMM_API_PORT: Port to bind to (default: 8000)
    - AMM_API_DEBUG: Enable debug/reload mode (default: false)
    """
    uvicorn.run(
        "amm_client.api.main:app",
        host=HOST,
        port=PORT,
        reload=DEBUG,
    )


if __name__ == "__main__":
    run()
