"""FastAPI application entry point."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from backend.app.api.routes.health import router as health_router
from backend.app.api.routes.leaderboard import router as leaderboard_router
from backend.app.core.errors import normalize_unknown_error
from backend.app.core.logging import log_event, setup_logging
from backend.app.core.settings import settings
from backend.app.services.scoring_config import load_scoring_weights

setup_logging(level=getattr(logging, settings.log_level.upper(), logging.INFO))
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    log_event(logger, "info", "app_start", title=_app.title)
    logger.info("config_loaded: %s", settings.safe_dump())
    # Weights are re-read per request; this surfaces a broken file at startup.
    load_scoring_weights()
    if not settings.is_provider_configured:
        logger.warning("RAPIDAPI_KEY is not set; leaderboard requests will return 503")
    yield
    logger.info("leaderboard API shutting down")


app = FastAPI(
    title="LinkedIn Leaderboard API",
    version="0.1.0",
    description="Ranks the people who engage with a LinkedIn creator's recent posts.",
    lifespan=lifespan,
)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log the failure and answer with a generic message, never the exception text."""
    error = normalize_unknown_error(exc, operation=f"{request.method} {request.url.path}")
    return JSONResponse(status_code=error.http_status, content={"detail": error.user_message})


app.include_router(health_router, tags=["health"])
app.include_router(leaderboard_router, prefix="/api", tags=["leaderboard"])
