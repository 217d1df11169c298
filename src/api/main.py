"""FastAPI application entry point for the line sorter."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI

from src import __version__
from src.api.dependencies.line_sorter import get_sorter_config
from src.api.middleware.logging_middleware import LoggingMiddleware
from src.api.routes.health import router as health_router
from src.api.routes.history import router as history_router
from src.api.routes.queue import router as queue_router
from src.api.routes.sorter_settings import router as sorter_settings_router
from src.bootstrap.database import close_database_engine
from src.bootstrap.logging import configure_logging


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    config = get_sorter_config()
    configure_logging(config)
    structlog.get_logger().info(
        "line_sorter_started",
        version=__version__,
        storage_backend=config.storage_backend,
    )
    yield
    await close_database_engine()


app = FastAPI(
    title="Line Sorter API",
    description="Team line queue with deduplication, claims and history",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(LoggingMiddleware)

app.include_router(health_router)
app.include_router(queue_router)
app.include_router(history_router)
app.include_router(sorter_settings_router)
