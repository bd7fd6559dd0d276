"""
FastAPI application factory and configuration.

This module creates the FastAPI application instance and its lifespan.
The lifespan owns every long-lived resource of the process: the shared
HTTP client, the registration service and the Discord bot, which runs
as a task on the same event loop as the HTTP server.
"""

import asyncio
import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request

from src.adapters.discord import DiscordNotifier, SellerBot
from src.api.dependencies import build_registration_service
from src.api.errors import register_error_handlers
from src.api.models import HealthResponse
from src.api.v1 import router as v1_router
from src.config.settings import get_settings

logger = logging.getLogger(__name__)

# OpenAPI tags for documentation grouping
tags_metadata = [
    {
        "name": "v1",
        "description": "Seller onboarding API v1 - Hooks for the automation platform",
    },
]


def _log_bot_exit(task: asyncio.Task) -> None:
    if task.cancelled():
        return
    error = task.exception()
    if error is not None:
        logger.error("Discord bot stopped with an error", exc_info=error)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    FastAPI lifespan context manager.

    Manages application startup and shutdown:
    - Creates the shared HTTP client and the registration service
    - Starts the Discord bot on startup
    - Closes the bot and the HTTP client on shutdown
    """
    settings = get_settings()

    logger.info("Starting application...")
    client = httpx.AsyncClient(timeout=settings.http_timeout_seconds)

    bot = SellerBot(settings)
    service = build_registration_service(settings, client, DiscordNotifier(bot))
    bot.service = service

    # Store in app state for dependency injection
    app.state.service = service
    app.state.bot = bot

    bot_task: asyncio.Task | None = None
    if settings.discord_token:
        logger.info("Connecting to Discord...")
        bot_task = asyncio.create_task(bot.start(settings.discord_token))
        bot_task.add_done_callback(_log_bot_exit)
    else:
        logger.warning("DISCORD_TOKEN is not set, the bot will not connect")

    logger.info("Application startup complete")

    yield

    # Shutdown
    logger.info("Shutting down application...")
    await bot.close()
    if bot_task is not None:
        await asyncio.gather(bot_task, return_exceptions=True)
    await client.aclose()
    logger.info("HTTP client closed")


app = FastAPI(
    title="seller-onboarding",
    description="Discord seller registration bot - health and automation hooks",
    version="0.1.0",
    openapi_tags=tags_metadata,
    lifespan=lifespan,
)

register_error_handlers(app)

# Root mount: the Make scenario posts to /notify-existing-seller
app.include_router(v1_router, prefix="/v1")
app.include_router(v1_router, include_in_schema=False)


@app.get("/health", response_model=HealthResponse)
async def health_check(request: Request) -> HealthResponse:
    """
    Health check endpoint.

    Returns 200 OK while the process is up; reports whether the Discord
    gateway connection is ready and how many registrations are in flight.
    """
    bot = getattr(request.app.state, "bot", None)
    service = getattr(request.app.state, "service", None)
    return HealthResponse(
        status="healthy",
        discord="ready" if bot is not None and bot.is_ready() else "connecting",
        active_sessions=len(service.sessions) if service is not None else 0,
    )
