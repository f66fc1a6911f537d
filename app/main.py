"""Application entry point and bootstrap.

This module initializes all application components, wires dependencies,
and provides the main entry point for running the media API.
"""

import asyncio
import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, HTTPException, Request
from fastapi.exception_handlers import http_exception_handler

from app.config import MediaConfig
from app.dao import MediaCommentDAO, MediaRecordDAO
from app.database import Database
from app.logging_filters import install_uvicorn_access_log_filters
from app.routers import create_media_router, create_signature_router
from app.security.auth_context import USER_ID_HEADER
from app.services import MediaService, SigningService

logger = logging.getLogger(__name__)


def configure_logging(config: MediaConfig | None = None) -> None:
    """Configure root logging once for the process."""
    level = (config.log_level if config else "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    # Suppress per-request logs from the HTTP client
    logging.getLogger("httpx").setLevel(logging.WARNING)


class Application:
    """Main application container.

    Manages the database, DAOs, services and the FastAPI app.
    """

    def __init__(self, config: MediaConfig, database: Database | None = None) -> None:
        """Initialize the application with configuration.

        Args:
            config: Application configuration.
            database: Optional pre-built database (tests pass an in-memory one).
        """
        self.config = config
        self.database: Database | None = database
        self.fastapi_app: FastAPI | None = None

        self.media_dao: MediaRecordDAO | None = None
        self.comment_dao: MediaCommentDAO | None = None
        self.signing_service: SigningService | None = None
        self.media_service: MediaService | None = None

    async def setup(self) -> None:
        """Initialize database, DAOs and services."""
        logger.info("Setting up application components...")

        if self.database is None:
            self.database = Database(self.config.database_url)
        if self.config.auto_create_tables:
            await self.database.init_db()
            logger.info("Database initialized (auto_create_tables=true)")
        else:
            logger.info(
                "Database initialized (auto_create_tables=false; relying on Alembic migrations)"
            )

        self.media_dao = MediaRecordDAO(self.database)
        self.comment_dao = MediaCommentDAO(self.database)

        self.signing_service = SigningService(self.config)
        self.media_service = MediaService(self.media_dao, self.comment_dao)
        logger.info("Services initialized")

        missing = self.config.missing_cloudinary_settings()
        if missing:
            logger.warning(
                "Cloudinary settings missing (%s); signature requests will fail",
                ", ".join(missing),
            )

    def create_fastapi_app(self) -> FastAPI:
        """Create and configure the FastAPI application.

        Returns:
            Configured FastAPI application.
        """

        @asynccontextmanager
        async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
            logger.info("FastAPI application starting...")
            yield
            logger.info("FastAPI application shutting down...")

        self.fastapi_app = FastAPI(
            title="Seafarer Media",
            description="Signed direct uploads and media records",
            version="1.0.0",
            lifespan=lifespan,
        )
        install_routes(self.fastapi_app, self)
        return self.fastapi_app

    async def shutdown(self) -> None:
        """Close database connections."""
        logger.info("Initiating graceful shutdown...")
        if self.database:
            await self.database.close()
            logger.info("Database connection closed")
        logger.info("Graceful shutdown complete")


def install_routes(fastapi_app: FastAPI, application: Application) -> None:
    """Register routers, error logging and the health check on `fastapi_app`."""

    @fastapi_app.exception_handler(HTTPException)
    async def _http_exception_handler(request: Request, exc: HTTPException):
        if exc.status_code in (401, 403):
            logger.warning(
                "%s %s denied (%s) for user %r: %s",
                request.method,
                request.url.path,
                exc.status_code,
                request.headers.get(USER_ID_HEADER),
                exc.detail,
            )
        return await http_exception_handler(request, exc)

    # The signature routes must be matched before /api/{content_type}.
    if application.signing_service:
        fastapi_app.include_router(
            create_signature_router(application.signing_service, application.config)
        )
        logger.info("Signature router registered")

    if application.media_service:
        fastapi_app.include_router(create_media_router(application.media_service))
        logger.info("Media router registered")

    @fastapi_app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy"}


# Global application instance
_app: Application | None = None


def get_application() -> Application:
    """Get the global application instance.

    Raises:
        RuntimeError: If application not initialized.
    """
    if _app is None:
        raise RuntimeError("Application not initialized")
    return _app


async def create_app(
    config: MediaConfig | None = None,
    database: Database | None = None,
) -> Application:
    """Create and set up the application.

    Args:
        config: Optional configuration. If not provided, loads from
                config.json with environment variable overrides.
        database: Optional database to use instead of `config.database_url`.

    Returns:
        Initialized Application instance with its FastAPI app created.
    """
    global _app

    if config is None:
        config = MediaConfig.from_json_file()

    _app = Application(config, database=database)
    await _app.setup()
    _app.create_fastapi_app()

    return _app


async def main(reload: bool = False) -> None:
    """Run the API until shutdown is requested.

    Args:
        reload: Enable hot reload during development.
    """
    import uvicorn

    config = MediaConfig.from_json_file()
    configure_logging(config)
    logger.info("Starting Seafarer Media...")

    app = await create_app(config)
    try:
        logger.info(
            "Application running. API available at http://%s:%d",
            config.api_host,
            config.api_port,
        )
        uvicorn_config = uvicorn.Config(
            app.fastapi_app,
            host=config.api_host,
            port=config.api_port,
            log_level=config.log_level.lower(),
            reload=reload,
        )
        # Configure Uvicorn logging first, then quiet health checks.
        uvicorn_config.load()
        install_uvicorn_access_log_filters()

        server = uvicorn.Server(uvicorn_config)
        await server.serve()
    except Exception as e:
        logger.exception("Application error: %s", e)
        raise
    finally:
        await app.shutdown()


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Run the Seafarer Media API")
    parser.add_argument("--reload", action="store_true", help="Enable hot reload")
    args = parser.parse_args()

    asyncio.run(main(reload=args.reload))
