"""Health check endpoint for API monitoring."""

from fastapi import APIRouter, Depends

from link_summarizer.settings import AppSettings, get_settings

from .schema import HealthResponse

router = APIRouter()

API_VERSION = "1.0.0"


@router.get("/health", response_model=HealthResponse)
async def health_check(settings: AppSettings = Depends(get_settings)):
    return HealthResponse(
        status="healthy",
        message=f"{settings.api_title} is running",
        version=API_VERSION,
        configuration=settings.to_public_config(),
    )
