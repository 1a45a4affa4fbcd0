"""FastAPI application factory."""

from typing import Optional

from fastapi import FastAPI

from job_feed.config import AppConfig
from job_feed.feed import FeedService, build_feed_service
from job_feed.utils.logging_config import setup_logging

from .routes import router


def create_app(service: Optional[FeedService] = None, config: Optional[AppConfig] = None) -> FastAPI:
    """Build the API around an existing service, or one wired from config.

    When wiring from config, logging is configured here as well, so the
    factory can be served directly by uvicorn.
    """
    if service is None:
        config = config or AppConfig()
        setup_logging(config.log_dir, config.log_level)
        service = build_feed_service(config)

    app = FastAPI(title="Job Feed")
    app.state.service = service
    app.include_router(router)
    return app
