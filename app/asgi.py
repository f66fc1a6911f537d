"""ASGI entry point for uvicorn with hot reload support.

Usage:
    uvicorn app.asgi:app --reload --host 0.0.0.0 --port 8742
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI

from app.config import MediaConfig
from app.logging_filters import install_uvicorn_access_log_filters
from app.main import Application, configure_logging, install_routes

# Global application instance for lifespan management
_application: Application | None = None


@asynccontextmanager
async def lifespan(fastapi_app: FastAPI) -> AsyncGenerator[None, None]:
    """Manage application lifespan for ASGI server."""
    global _application

    config = MediaConfig.from_json_file()
    configure_logging(config)
    install_uvicorn_access_log_filters()
    _application = Application(config)
    await _application.setup()
    install_routes(fastapi_app, _application)

    yield

    await _application.shutdown()
    _application = None


app = FastAPI(
    title="Seafarer Media",
    description="Signed direct uploads and media records",
    version="1.0.0",
    lifespan=lifespan,
)
