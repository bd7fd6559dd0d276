"""
Process entry point.

Configures logging and serves the FastAPI application with uvicorn; the
application lifespan starts the Discord bot on the same event loop.
"""

import logging

import uvicorn

from src.config.settings import get_settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def main() -> None:
    settings = get_settings()
    logging.basicConfig(level=settings.log_level.upper(), format=LOG_FORMAT)
    # discord.py logs every gateway event at DEBUG
    logging.getLogger("discord").setLevel(max(logging.INFO, logging.getLogger().level))

    uvicorn.run(
        "src.api.main:app",
        host="0.0.0.0",
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
