"""
TVmaze Backend API - FastAPI application.

Provides endpoints for:
- Browsing ingested shows (with cast) page by page
- Health checks

The app also owns the process lifecycle of the key-value store and the
background ingestion scheduler.
"""
from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.routers import shows
from tvmaze_backend.db.store import FileKeyValueStore
from tvmaze_backend.ingestion.scheduler import IngestionScheduler, build_ingestion_cycle
from tvmaze_backend.settings import load_settings

logger = logging.getLogger(__name__)


def get_cors_origins() -> list[str]:
    """
    Get CORS allowed origins from environment.
    Set CORS_ALLOW_ORIGINS as comma-separated list of origins.
    """
    origins_str = os.getenv("CORS_ALLOW_ORIGINS", "")
    if not origins_str:
        return []
    return [origin.strip() for origin in origins_str.split(",") if origin.strip()]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown events."""
    # Startup
    settings = load_settings()
    store = FileKeyValueStore(settings.data_dir)
    store.init()
    app.state.store = store

    scheduler: IngestionScheduler | None = None
    if settings.ingestion_enabled:
        logger.info("Loading dataset, it might take a while before all cast data is available...")
        cycle = build_ingestion_cycle(settings, store)
        scheduler = IngestionScheduler(cycle, interval_seconds=settings.poll_interval_seconds)
        scheduler.start()
    else:
        logger.info("Ingestion disabled; serving stored shows only")
    yield
    # Shutdown
    logger.info("Shutting down TVmaze Backend API...")
    if scheduler is not None and not scheduler.stop(timeout=5.0):
        # The cycle thread still writes to the store; it dies with the process.
        logger.warning("Leaving store open for the running ingestion cycle")
        return
    store.close()


app = FastAPI(
    title="TVmaze Shows API",
    description="Paged read API over shows and cast ingested from TVmaze",
    version="0.1.0",
    lifespan=lifespan,
)

cors_origins = get_cors_origins()
allow_credentials = len(cors_origins) > 0

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins if cors_origins else ["*"],
    allow_credentials=allow_credentials,
    allow_methods=["GET", "OPTIONS"],
    allow_headers=["*"],
)

app.include_router(shows.router)


@app.get("/")
def root():
    """Health check endpoint."""
    return {"status": "ok", "service": "tvmaze-backend"}


@app.get("/health")
def health():
    """Health check endpoint."""
    return {"status": "healthy"}
