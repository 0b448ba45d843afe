"""Health check router."""

from fastapi import APIRouter, Request

from candidate_tracker.schemas.candidate import HealthResponse
from candidate_tracker.utils.time import utc_timestamp

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request):
    """Liveness endpoint; does not touch the database."""
    app_name = request.app.state.settings.APP_NAME
    return HealthResponse(
        message=f"{app_name} API is running",
        timestamp=utc_timestamp(),
    )
