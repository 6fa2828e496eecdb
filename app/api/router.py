"""Main API router aggregation."""

from fastapi import APIRouter

from app.api.routes import activity, checkins, health, scheduler, workspaces

api_router = APIRouter()

api_router.include_router(health.router, tags=["health"])
api_router.include_router(activity.router, tags=["activity"])
api_router.include_router(workspaces.router, tags=["workspaces"])
api_router.include_router(checkins.router, tags=["checkins"])
api_router.include_router(scheduler.router, tags=["scheduler"])
