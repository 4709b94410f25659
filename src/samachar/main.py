"""Samachar application entry point."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from samachar import __version__
from samachar.api import pipeline
from samachar.config import get_settings
from samachar.core import (
    ArticlePipeline,
    ArticleStore,
    CycleOrchestrator,
    get_orchestrator,
    set_orchestrator,
)
from samachar.fetcher import ContentEnricher, FeedFetcher
from samachar.llm import RewriteEngine, create_providers
from samachar.models.database import async_session_maker, close_db, init_db
from samachar.scheduler import create_scheduler, shutdown_scheduler
from samachar.sources import iter_sources

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifecycle."""
    app_settings = get_settings()

    logger.info("Initialising database...")
    await init_db(app_settings.database_url)
    store = ArticleStore(async_session_maker())

    fetcher = FeedFetcher(app_settings)
    enricher = ContentEnricher(app_settings)
    rewriter = RewriteEngine(create_providers(app_settings))
    if not rewriter.providers:
        logger.warning("No AI providers configured, every article will use the fallback template")

    orchestrator = CycleOrchestrator(
        app_settings,
        fetcher,
        ArticlePipeline(store, enricher, rewriter),
        store,
    )
    set_orchestrator(orchestrator)

    logger.info("Starting scheduler...")
    create_scheduler(app_settings, orchestrator)

    logger.info("Samachar started")
    yield

    logger.info("Shutting down...")
    await shutdown_scheduler()
    set_orchestrator(None)
    await fetcher.close()
    await enricher.close()
    await rewriter.close()
    await close_db()
    logger.info("Samachar stopped")


app = FastAPI(
    title="Samachar",
    description="Hindi news ingestion and AI rewrite pipeline",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(pipeline.router)


@app.get("/")
async def root() -> dict:
    """Service info."""
    return {
        "name": "Samachar",
        "version": __version__,
        "description": "Hindi news rewriter",
    }


@app.get("/health")
async def health() -> dict:
    """Health check with pipeline summary."""
    app_settings = get_settings()
    orchestrator = get_orchestrator()
    return {
        "status": "ok",
        "state": orchestrator.state.value if orchestrator else None,
        "providers": orchestrator.pipeline.rewriter.provider_names if orchestrator else [],
        "poll_minutes": app_settings.poll_minutes,
        "process_count": app_settings.process_count,
        "sources": len(iter_sources()),
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "samachar.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
