"""
Health check route for the HaulOps backend.

This endpoint is PUBLIC and does not touch Supabase; it only reports that
the API process is up.
"""

from fastapi import APIRouter

from haulops.schemas.health import HealthResponse
from haulops.utils.logging import get_logger

logger = get_logger(__name__)

# Create router with no prefix (mounted at root level in main.py)
router = APIRouter(tags=["system"])


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check endpoint",
    description=(
        "Public health check endpoint. "
        "Returns a simple status indicator for monitoring and load balancing."
    ),
    status_code=200,
)
async def health_check() -> HealthResponse:
    """
    Public health check endpoint.

    Example response:
        {
            "status": "ok",
            "service": "haulops-backend"
        }
    """
    logger.debug("Health check endpoint called")

    return HealthResponse(status="ok")
