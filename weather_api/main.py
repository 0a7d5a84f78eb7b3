from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import httpx
import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from weather_api.api.router import build_router
from weather_api.core.clients import (
    CwaForecastClient,
    HttpClientConfig,
    create_httpx_client,
)
from weather_api.core.config import Settings, load_settings
from weather_api.core.exceptions import install_exception_handlers
from weather_api.observability import setup_observability, shutdown_observability

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    *,
    http_client: Optional[httpx.AsyncClient] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Process configuration; loaded from the environment when omitted.
        http_client: Outbound client to use instead of creating one. The caller
            keeps ownership and closes it.
    """
    settings = settings or load_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        client = http_client or create_httpx_client(
            HttpClientConfig(timeout_seconds=settings.cwa.timeout_seconds)
        )
        app.state.upstream = CwaForecastClient(client, settings.cwa)
        if not settings.cwa.api_key:
            logger.warning("CWA_API_KEY is not set; /api/weather/all will return 500")
        logger.info(
            "Server running",
            extra={
                "host": settings.http.host,
                "port": settings.http.port,
                "environment": settings.identity.environment,
            },
        )
        try:
            yield
        finally:
            if http_client is None:
                await client.aclose()

    app = FastAPI(
        title="CWA Weather API",
        version=settings.identity.service_version or "0.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings

    setup_observability(app, identity=settings.identity, obs=settings.obs)

    install_exception_handlers(app)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors.allow_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(build_router())

    return app


def run() -> None:
    """Console entrypoint: serve the app with uvicorn."""
    settings = load_settings()
    try:
        uvicorn.run(
            create_app(settings),
            host=settings.http.host,
            port=settings.http.port,
            log_config=None,
        )
    finally:
        # providers are process-wide, flush them only when the process is done
        shutdown_observability()


if __name__ == "__main__":
    run()
