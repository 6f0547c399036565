"""
Review Dispatch Service - FastAPI Application

Distributes regional review events to reviewers under time-bounded leases and
reconciles completed reviews with each region's system of record.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import make_asgi_app

from review_dispatch.api.middleware import RequestIDMiddleware
from review_dispatch.api.routes import events, health, internal
from review_dispatch.config import get_settings
from review_dispatch.db.client import close_db, close_db_pool, get_db_pool, init_db
from review_dispatch.events import (
    AssignmentService,
    RegionalAuthorityClient,
    RequeueService,
    ReviewService,
)
from review_dispatch.identity import TeamDirectory
from review_dispatch.jobs import RequeueScheduler
from review_dispatch.kernel.http.errors import register_exception_handlers
from review_dispatch.kernel.logging import configure_logging

configure_logging()

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan - startup and shutdown."""
    settings = get_settings()

    logger.info(
        "Starting Review Dispatch Service",
        version="0.1.0",
        environment=settings.environment,
        lease_ttl_minutes=settings.lease_ttl_minutes,
    )

    await init_db()
    pool = await get_db_pool()
    logger.info("PostgreSQL connection initialized")

    regional_urls = settings.resolved_regional_api_urls()
    app.state.assignment_service = AssignmentService(pool, default_batch_size=settings.default_batch_size)
    app.state.review_service = ReviewService(
        pool,
        RegionalAuthorityClient(regional_urls, timeout_seconds=settings.regional_api_timeout_seconds),
    )
    app.state.requeue_service = RequeueService(pool, lease_ttl=settings.lease_ttl_minutes)
    app.state.team_directory = TeamDirectory(default_batch_size=settings.default_batch_size)
    logger.info("Regional endpoints configured", regions=sorted(regional_urls))

    scheduler: RequeueScheduler | None = None
    if settings.environment == "test":
        logger.info("Skipping lease sweep scheduler in test environment")
    elif settings.requeue_scheduler_enabled:
        scheduler = RequeueScheduler(
            app.state.requeue_service,
            interval_seconds=settings.requeue_interval_seconds,
        )
        await scheduler.start()
    else:
        logger.info("Lease sweep scheduler disabled in API process")

    yield

    logger.info("Shutting down Review Dispatch Service")
    if scheduler is not None:
        await scheduler.shutdown()
    await close_db_pool()
    await close_db()


app = FastAPI(
    title="Review Dispatch API",
    description="Lease-based distribution of regional review events",
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

register_exception_handlers(app)

# Request ID tracking
app.add_middleware(RequestIDMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID"],
)

# Prometheus metrics endpoint
metrics_app = make_asgi_app()
app.mount("/metrics", metrics_app)

# Include routers
app.include_router(health.router, tags=["Health"])
app.include_router(events.router, prefix="/api/v1", tags=["Events"])
app.include_router(internal.router, prefix="/api/v1", tags=["Internal"])


@app.get("/")
async def root():
    return {"message": "Event Distribution & Review Service is running!"}
