"""
Health API endpoint
"""

from datetime import datetime, timezone

from fastapi import APIRouter
from pydantic import BaseModel

from mockprep.config.settings import get_settings

router = APIRouter()


class HealthResponse(BaseModel):
    status: str
    timestamp: str
    gemini: str


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Liveness check reporting whether the Gemini key is configured."""
    return HealthResponse(
        status="OK",
        timestamp=datetime.now(timezone.utc).isoformat(),
        gemini="configured" if get_settings().gemini_configured else "missing",
    )
