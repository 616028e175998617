"""FastAPI application entry point."""

import logging
import typing as t
from contextlib import asynccontextmanager

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from expirycal.core.config import SETTINGS
from expirycal.core.database import ASYNC_SESSION_MAKER, close_db, init_db
from expirycal.core.globals import OPENAPI_TAGS
from expirycal.routers import api_router
from expirycal.services import (
    CalendarPipeline,
    DatabaseItemSource,
    SnapshotSink,
)
from expirycal.services.calendar_refresh import refresh_calendar_task

logging.basicConfig(
    level=logging.DEBUG if SETTINGS.debug else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
LOGGER: logging.Logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(application: FastAPI) -> t.AsyncGenerator[None, None]:
    """Application lifespan events.

    Args:
        application (FastAPI): The FastAPI application instance.
    """
    LOGGER.info("Starting Expirycal API...")
    await init_db()

    pipeline = CalendarPipeline(
        DatabaseItemSource(ASYNC_SESSION_MAKER),
        SnapshotSink(),
        SETTINGS.aggregation_config(),
    )
    application.state.pipeline = pipeline

    scheduler: AsyncIOScheduler = AsyncIOScheduler()
    scheduler.add_job(
        refresh_calendar_task,
        trigger=IntervalTrigger(
            minutes=SETTINGS.calendar_refresh_interval_minutes
        ),
        args=[pipeline],
        id="calendar_refresh",
        name="Rebuild the expiry calendar",
        replace_existing=True,
    )
    scheduler.start()
    LOGGER.info(
        "Calendar refresh scheduled to run every %d minutes",
        SETTINGS.calendar_refresh_interval_minutes,
    )

    await refresh_calendar_task(pipeline)

    yield

    LOGGER.info("Shutting down Expirycal...")
    pipeline.provider.cancel()
    scheduler.shutdown(wait=False)
    await close_db()
    LOGGER.info("Cleanup complete")


APPLICATION: FastAPI = FastAPI(
    title=SETTINGS.app_name,
    description="Expirycal - Expiry calendar for your food inventory",
    version=SETTINGS.app_version,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    openapi_tags=OPENAPI_TAGS,
)

APPLICATION.add_middleware(
    CORSMiddleware,
    allow_origins=SETTINGS.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

APPLICATION.include_router(api_router)


@APPLICATION.get("/health", tags=["Health"])
async def health_check() -> t.Dict[str, str]:
    """Health check endpoint for monitoring.

    Returns:
        t.Dict[str, str]: A dictionary indicating the health status.
    """
    return {"status": "healthy"}
