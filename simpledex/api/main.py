"""FastAPI application for the exchange.

Note: authentication and rate limiting are not implemented at the application
level; callers are identified by the addresses in the request body.
"""

import logging
import os

import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from simpledex import __version__
from simpledex.api.endpoints import router
from simpledex.errors import (
    DexError,
    InsufficientLiquidity,
    InvalidPair,
    LedgerError,
    SlippageExceeded,
    ZeroAmount,
)
from simpledex.models.api import ErrorResponse
from simpledex.safe_int import SafeIntError

# Configuration from environment variables with sensible defaults
HOST = os.environ.get("SIMPLEDEX_HOST", "0.0.0.0")
PORT = int(os.environ.get("SIMPLEDEX_PORT", "8000"))
DEBUG = os.environ.get("SIMPLEDEX_DEBUG", "false").lower() in ("true", "1", "yes")
LOG_LEVEL = os.environ.get("SIMPLEDEX_LOG_LEVEL", "INFO").upper()

logger = structlog.get_logger()

# Conflicts with current pool/ledger state vs. malformed requests
_CONFLICT_ERRORS = (LedgerError, InsufficientLiquidity)
_INVALID_ERRORS = (InvalidPair, ZeroAmount, SlippageExceeded)


def configure_logging(level: str = LOG_LEVEL) -> None:
    """Configure structlog for console output at the given level name."""
    log_level = getattr(logging, level, logging.INFO)
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
    )


def status_for(error: Exception) -> int:
    """HTTP status code for an exchange error."""
    if isinstance(error, _CONFLICT_ERRORS):
        return 409
    if isinstance(error, _INVALID_ERRORS):
        return 422
    return 400


app = FastAPI(
    title="SimpleDEX",
    description="Constant-product pool accounting engine",
    version=__version__,
)


def _error_response(status: int, exc: Exception) -> JSONResponse:
    body = ErrorResponse(error=type(exc).__name__, detail=str(exc))
    return JSONResponse(status_code=status, content=body.model_dump())


@app.exception_handler(DexError)
async def dex_error_handler(request: Request, exc: DexError) -> JSONResponse:
    """Report a refused operation with its error class name."""
    status = status_for(exc)
    logger.info("request_rejected", path=request.url.path, error=type(exc).__name__, status=status)
    return _error_response(status, exc)


@app.exception_handler(SafeIntError)
async def arithmetic_error_handler(request: Request, exc: SafeIntError) -> JSONResponse:
    """Amounts outside uint256 are client errors."""
    logger.info("request_rejected", path=request.url.path, error=type(exc).__name__)
    return _error_response(422, exc)


app.include_router(
    router,
    responses={
        400: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)


@app.get("/health")
async def health() -> dict[str, object]:
    """Health check endpoint."""
    return {"status": "ok", "version": __version__}


def run() -> None:
    """Run the exchange API server.

    Configuration via environment variables:
    - SIMPLEDEX_HOST: Host to bind to (default: 0.0.0.0)
    - SIMPLEDEX_PORT: Port to bind to (default: 8000)
    - SIMPLEDEX_DEBUG: Enable debug/reload mode (default: false)
    - SIMPLEDEX_LOG_LEVEL: Log level name (default: INFO)
    - SIMPLEDEX_FEE_BPS, SIMPLEDEX_ADDRESS: see DexConfig.from_env
    """
    configure_logging(LOG_LEVEL)
    uvicorn.run(
        "simpledex.api.main:app",
        host=HOST,
        port=PORT,
        reload=DEBUG,
    )


if __name__ == "__main__":
    run()
