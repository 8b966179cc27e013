"""Health check endpoint with database connectivity check.

Reachable without authentication so orchestrators can check it.
"""

from datetime import UTC, datetime

from fastapi import APIRouter, Response, status

from wishlist.core import check_db_connection
from wishlist.schemas.health import HealthResponse

router = APIRouter(tags=["health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={
        status.HTTP_200_OK: {"description": "Service is healthy"},
        status.HTTP_503_SERVICE_UNAVAILABLE: {"description": "Service is unhealthy"},
    },
)
async def health_check(response: Response) -> HealthResponse:
    """
    Health check endpoint.

    Returns 503 if the database is unavailable.
    """
    db_healthy = await check_db_connection()

    if not db_healthy:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    return HealthResponse(
        status="healthy" if db_healthy else "unhealthy",
        timestamp=datetime.now(UTC),
        database="connected" if db_healthy else "disconnected",
    )
