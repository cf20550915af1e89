"""API router aggregation for all application endpoints."""

from fastapi import APIRouter

from routes.health import router as health_router
from routes.summarize import router as summarize_router
from routes.webhook import router as webhook_router

api_router = APIRouter()
api_router.include_router(health_router, tags=["health"])
api_router.include_router(summarize_router, tags=["summarize"])
api_router.include_router(webhook_router, tags=["webhook"])
