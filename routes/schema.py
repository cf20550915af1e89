"""Request and Response models for the API"""

from datetime import UTC, datetime

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    status: str = Field(description="Service status")
    message: str = Field(description="Human-readable message")
    version: str
    configuration: dict[str, str | int | float | bool]
    timestamp: str = Field(default_factory=lambda: datetime.now(UTC).isoformat())


class WebhookResponse(BaseModel):
    ok: bool = Field(description="True when the signature verified and events were accepted")
