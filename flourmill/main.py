"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from flourmill.config import get_settings
from flourmill.infrastructure.database import Base, engine
from flourmill.infrastructure.logging.log_config import setup_logging
from flourmill.presentation.api.v1.router import router as api_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan — configure logging and prepare the record store."""
    settings = get_settings()
    setup_logging()

    if settings.record_backend == "remote":
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Record store: database tables ready")
    else:
        Path(settings.local_storage_dir).mkdir(parents=True, exist_ok=True)
        logger.info(
            "Record store: local key '%s' in %s",
            settings.local_storage_key,
            settings.local_storage_dir,
        )

    yield

    await engine.dispose()


def create_app() -> FastAPI:
    """Factory function that builds and configures the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_title,
        version=settings.app_version,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "flourmill.main:app",
        host="0.0.0.0",
        port=8020,
        reload=True,
    )
