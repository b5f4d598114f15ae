"""FastAPI application entry point."""

from __future__ import annotations

import logging

from dotenv import load_dotenv
from fastapi import FastAPI

from common.cli_helpers import setup_logging
from common.config import Config, get_config, set_config
from news_api.errors import register_exception_handlers
from news_api.routers import articles, health, internal, profile, topics

load_dotenv()

logger = logging.getLogger(__name__)


def create_app(config: Config | None = None) -> FastAPI:
    """Build the application; config loads lazily from CONFIG_ENV unless given."""
    if config is not None:
        set_config(config)

    app = FastAPI(
        title="PulseReader API",
        description="Personalized news articles with sentiment and topic metadata",
        version="1.0.0",
    )
    register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(articles.router)
    app.include_router(topics.router)
    app.include_router(profile.router)
    app.include_router(internal.router)

    @app.get("/")
    def root():
        """API root - returns basic info."""
        return {
            "name": "PulseReader API",
            "version": "1.0.0",
            "docs": "/docs",
        }

    return app


app = create_app()


def main():
    """Run the API server."""
    import uvicorn

    config = get_config()
    setup_logging(config.log_level)
    uvicorn.run(
        "news_api.main:app",
        host=config.server.host,
        port=config.server.port,
    )


if __name__ == "__main__":
    main()
