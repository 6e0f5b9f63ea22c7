"""Main FastAPI application for the weather display service."""

import asyncio
import logging
import os
import traceback
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles

from weather_display.api.endpoints import router as weather_router
from weather_display.config import HOST, PORT, DEBUG
from weather_display.logging_config import configure_logging
from weather_display.weather.service import WeatherService

# Configure logging
configure_logging(logging.DEBUG if DEBUG else logging.INFO)
logger = logging.getLogger(__name__)

STATIC_PATH = os.path.join(os.path.dirname(os.path.abspath(__file__)), "static")


def _log_startup_result(task: asyncio.Task) -> None:
    if task.cancelled():
        return
    if task.exception() is not None:
        logger.error(f"Initial weather fetch failed: {task.exception()!r}")
        return
    logger.info(f"Initial weather state: {task.result().status}")


def create_app(service: Optional[WeatherService] = None) -> FastAPI:
    """Create and configure FastAPI application.

    Args:
        service: Weather service to expose (creates the configured one if None)

    Returns:
        Configured FastAPI application instance
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Application lifespan manager."""
        weather_service = service
        startup_fetch: Optional[asyncio.Task] = None
        try:
            if weather_service is None:
                weather_service = WeatherService()
            app.state.weather_service = weather_service

            # Serve requests while the default location loads
            logger.info("Starting Weather Display Service")
            startup_fetch = asyncio.create_task(weather_service.start())
            startup_fetch.add_done_callback(_log_startup_result)
            app.state.startup_fetch = startup_fetch
            yield
        except Exception as e:
            logger.error(f"Startup error: {e}")
            logger.error(traceback.format_exc())
            raise
        finally:
            logger.info("Shutting down Weather Display Service")
            if startup_fetch is not None and not startup_fetch.done():
                startup_fetch.cancel()
                await asyncio.gather(startup_fetch, return_exceptions=True)
            if weather_service is not None:
                await weather_service.aclose()

    app = FastAPI(
        title="Weather Display Service",
        description="Single-page display of current weather conditions",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(weather_router)

    app.mount("/static", StaticFiles(directory=STATIC_PATH), name="static")

    # Serve the web interface
    @app.get("/", tags=["root"])
    async def root():
        """Root endpoint serving the web interface."""
        return FileResponse(os.path.join(STATIC_PATH, "index.html"))

    @app.get("/api", tags=["root"])
    async def api_info() -> dict:
        """API information endpoint.

        Returns:
            Basic service information
        """
        return {
            "message": "Weather Display Service",
            "docs": "/docs",
            "weather": "/weather",
            "search": "/weather/search",
            "locations": "/weather/locations",
            "health": "/weather/health"
        }

    return app


# Create app instance for uvicorn
app = create_app()


def main() -> None:
    """Main entry point for the application."""
    logger.info(f"Starting server on {HOST}:{PORT}")
    uvicorn.run(
        app,
        host=HOST,
        port=PORT,
        log_level="info" if not DEBUG else "debug"
    )


if __name__ == "__main__":
    main()
