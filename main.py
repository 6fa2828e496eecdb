from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api.router import api_router
from app.core.config import settings
from app.core.database import init_db
from app.domain.exceptions import (
    EntityNotFoundError,
    CheckInConflictError,
    DomainValidationError,
)
from app.core.logging_config import configure_logging
from app.services.scheduler import get_scheduler_orchestrator, get_nudge_workflow_scheduler

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    FastAPI lifespan event handler.

    Manages storage setup, scheduler infrastructure and workflow registration.
    """
    # Configure logging (reduce noise from polling endpoints)
    configure_logging()

    logger.info("FastAPI application starting up...")

    if settings.AUTO_CREATE_TABLES:
        init_db()
        logger.info("Database tables ready")

    # Start idle check + ping timers (unless disabled via ENABLE_BACKGROUND_JOBS=false)
    scheduler = None
    if settings.ENABLE_BACKGROUND_JOBS:
        scheduler = get_scheduler_orchestrator()

        idle_check = get_nudge_workflow_scheduler()
        await idle_check.register()
        logger.info(f"Idle check registered ({settings.IDLE_CHECK_INTERVAL_SECONDS}s interval)")

        await scheduler.start()
        logger.info("Scheduler started (all background jobs enabled)")
    else:
        logger.info("Background jobs DISABLED (ENABLE_BACKGROUND_JOBS=false)")

    yield  # Application runs

    # Shutdown: Stop scheduler if it was started
    logger.info("FastAPI application shutting down...")
    if scheduler:
        await scheduler.stop()
        logger.info("Scheduler orchestrator stopped")


app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    openapi_url=f"{settings.API_PREFIX}/openapi.json",
    lifespan=lifespan,
)


# Domain exception → HTTP response mapping
@app.exception_handler(EntityNotFoundError)
async def entity_not_found_handler(request: Request, exc: EntityNotFoundError):
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(CheckInConflictError)
async def checkin_conflict_handler(request: Request, exc: CheckInConflictError):
    return JSONResponse(status_code=409, content={"detail": str(exc)})


@app.exception_handler(DomainValidationError)
async def domain_validation_handler(request: Request, exc: DomainValidationError):
    return JSONResponse(status_code=400, content={"detail": str(exc)})


# Set up CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.BACKEND_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API router
app.include_router(api_router, prefix=settings.API_PREFIX)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Task Nudge API",
        "version": settings.VERSION,
        "docs": "/docs"
    }


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn

    # Access logs go through the polling-endpoint filter installed in lifespan
    log_config = uvicorn.config.LOGGING_CONFIG.copy()
    log_config["loggers"]["uvicorn.access"] = {
        "handlers": [],
        "level": "INFO",
        "propagate": False
    }

    uvicorn.run(
        "main:app",
        host="127.0.0.1",
        port=8000,
        reload=False,
        log_config=log_config
    )
