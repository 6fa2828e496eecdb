from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.orm import Session
from datetime import datetime, timezone

from app.core.database import get_db
from app.services.scheduler import get_scheduler_orchestrator

router = APIRouter()


@router.get("/health")
async def health_check(db: Session = Depends(get_db)):
    """
    Full health check endpoint.

    Verifies database connectivity and reports whether the scheduler
    (idle tick + ping timers) is running.

    Returns:
        dict: Health status with timestamp and component checks
    """
    try:
        db.execute(text("SELECT 1"))
        db_status = "connected"
    except Exception as e:
        db_status = f"error: {str(e)}"

    return {
        "status": "healthy" if db_status == "connected" else "degraded",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "checks": {
            "database": db_status,
            "scheduler": "running" if get_scheduler_orchestrator().is_running else "stopped",
        }
    }


@router.get("/healthz")
async def healthz():
    """
    Simple liveness check.

    Returns healthy if application is running.
    """
    return {"status": "healthy"}
