"""FastAPI application entry point."""

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded

from api.routes import game, house, players, stats
from config import config
from core.errors import (
    DeckExhausted,
    InsolventHouse,
    InsufficientBet,
    InsufficientReserve,
    LedgerError,
    NoActiveSession,
    NotOwner,
    SessionAlreadyOpen,
)

logging.basicConfig(
    level=config.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
# The state machine library reports every dealer transition at INFO
logging.getLogger("transitions").setLevel(logging.WARNING)
logger = logging.getLogger(__name__)

# Ledger error → HTTP status
ERROR_STATUS: dict[type[LedgerError], int] = {
    InsufficientBet: 400,
    NotOwner: 403,
    NoActiveSession: 404,
    SessionAlreadyOpen: 409,
    InsufficientReserve: 409,
    DeckExhausted: 500,
    InsolventHouse: 503,
}

# Initialize rate limiter
limiter = Limiter(
    key_func=get_remote_address,
    enabled=config.rate_limit.enabled,
    default_limits=[f"{config.rate_limit.requests_per_minute}/minute"],
)


def _rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Handle rate limit exceeded errors."""
    return JSONResponse(
        status_code=429,
        content={"detail": f"Rate limit exceeded: {exc.detail}"},
    )


def _ledger_error_handler(request: Request, exc: LedgerError) -> JSONResponse:
    """Translate core errors into HTTP responses."""
    status_code = ERROR_STATUS.get(type(exc), 400)
    if status_code >= 500:
        logger.error("%s on %s: %s", type(exc).__name__, request.url.path, exc)
    return JSONResponse(
        status_code=status_code,
        content={"detail": str(exc), "error": type(exc).__name__},
    )


def _value_error_handler(request: Request, exc: ValueError) -> JSONResponse:
    """Invalid arguments that slipped past request validation."""
    return JSONResponse(status_code=400, content={"detail": str(exc)})


app = FastAPI(
    title="Blackjack Escrow",
    description="Escrowed single-deck blackjack with a solvency-checked house ledger",
    version="0.1.0",
)

# Add rate limiter to app state and exception handlers
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_exception_handler(LedgerError, _ledger_error_handler)
app.add_exception_handler(ValueError, _value_error_handler)

# CORS middleware with configurable origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.cors.allowed_origins,
    allow_credentials=config.cors.allow_credentials,
    allow_methods=config.cors.allow_methods,
    allow_headers=config.cors.allow_headers,
)


@app.get("/api/health")
@limiter.limit(f"{config.rate_limit.requests_per_minute}/minute")
async def health_check(request: Request) -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy"}


# Include routers
app.include_router(players.router, prefix="/api/players", tags=["players"])
app.include_router(game.router, prefix="/api/game", tags=["game"])
app.include_router(house.router, prefix="/api/house", tags=["house"])
app.include_router(stats.router, prefix="/api/stats", tags=["stats"])
