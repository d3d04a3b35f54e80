"""
Favorites API Backend: Health Check Route
==========================================

What:  Liveness probe for the hosting platform and the keep-alive job.
Why:   Answers as long as the process is up, whatever the database state,
       so a database outage never gets the instance restarted in a loop.
"""

from fastapi import APIRouter

from favorites_api.schemas.favorite import HealthResponse

router = APIRouter(prefix="/api", tags=["Health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check() -> HealthResponse:
    return HealthResponse(success=True)
