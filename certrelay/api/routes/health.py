from datetime import datetime, timezone

from fastapi import APIRouter

from certrelay.api.schemas import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse, tags=["health"])
async def health_check():
    return HealthResponse(status="ok", timestamp=datetime.now(timezone.utc).isoformat())
