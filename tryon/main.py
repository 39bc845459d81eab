"""
Try-On API - Virtual Try-On Job Service
FastAPI Backend Entry Point

Run with: uvicorn tryon.main:create_app --factory
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from tryon.api import jobs, products, results, uploads
from tryon.core.config import Settings, get_settings
from tryon.core.context import AppContext, build_context

logger = logging.getLogger(__name__)

VERSION = "0.1.0"


def configure_logging(level: str = "INFO"):
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    ctx: AppContext = app.state.context
    logger.info(
        f"Starting {ctx.settings.APP_NAME} | trigger={ctx.trigger.name} "
        f"catalog={len(ctx.store.catalog)} items storage={ctx.storage.backend}"
    )
    yield
    logger.info(f"Shutting down {ctx.settings.APP_NAME}...")
    await ctx.close()


def create_app(settings: Optional[Settings] = None, context: Optional[AppContext] = None) -> FastAPI:
    """Build the FastAPI application around an explicit AppContext."""
    settings = settings or (context.settings if context else get_settings())
    configure_logging(settings.LOG_LEVEL)

    app = FastAPI(
        title=settings.APP_NAME,
        description="Asynchronous virtual try-on jobs: upload a photo, pick garments, poll for the result.",
        version=VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.context = context or build_context(settings)

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routers
    app.include_router(uploads.router, prefix="/api", tags=["Uploads"])
    app.include_router(products.router, prefix="/api/products", tags=["Products"])
    app.include_router(jobs.router, prefix="/api", tags=["Jobs"])
    app.include_router(results.router, prefix="/api/results", tags=["Results"])

    @app.get("/health", tags=["Health"])
    def health_check():
        """
        Health check endpoint for monitoring.
        Reports storage, Redis (rq transport only) and jobs stuck in a
        non-terminal state for longer than STUCK_JOB_THRESHOLD_SECONDS.
        """
        ctx: AppContext = app.state.context
        report = {
            "status": "healthy",
            "version": VERSION,
            "trigger": ctx.trigger.describe(),
            "services": {},
            "jobs": {},
        }

        storage_status = ctx.storage.health_check()
        report["services"]["storage"] = {"backend": ctx.storage.backend, "status": storage_status}
        if storage_status != "ok":
            report["status"] = "degraded"

        if ctx.redis is not None:
            redis_status = ctx.redis.health_check()
            if redis_status.get("connected"):
                report["services"]["redis"] = "ok"
            else:
                report["services"]["redis"] = f"error: {redis_status.get('error', 'not connected')}"
                report["status"] = "degraded"

        stale = ctx.jobs.find_stale(ctx.settings.STUCK_JOB_THRESHOLD_SECONDS)
        report["jobs"] = {
            "total": len(ctx.store.jobs),
            "in_flight": ctx.jobs.pending_tasks,
            "stale": len(stale),
            "stale_ids": [j.id for j in stale[:20]],
        }
        if stale:
            logger.warning(f"{len(stale)} job(s) stuck in a non-terminal state: {[j.id for j in stale[:5]]}")
        return report

    @app.get("/", tags=["Root"])
    def root():
        return {
            "message": f"{settings.APP_NAME} - Virtual Try-On Job Service",
            "docs": "/docs",
            "health": "/health",
        }

    return app


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("tryon.main:create_app", factory=True, host="0.0.0.0", port=8000)
