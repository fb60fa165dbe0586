"""Health check and welcome routes"""

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

from adapters import mongo_adapter
from app.config import settings

router = APIRouter(tags=["Health"])


@router.get("/", response_class=PlainTextResponse)
async def welcome():
    return "Welcome to the HealthyBites Server."


@router.get(settings.api_prefix or "/api", response_class=PlainTextResponse)
async def api_welcome():
    return "Welcome to the HealthyBites API."


@router.get("/health-check")
async def health_check():
    """Basic health check endpoint, reporting whether MongoDB answers a ping"""
    database_up = await mongo_adapter.ping()
    return {
        "status": "ok",
        "service": settings.app_name,
        "version": settings.app_version,
        "database": "up" if database_up else "down",
    }
