"""Health Probe — liveness endpoint for container orchestration.

Invariants:
    - GET /health always returns 200 if the process is up
    - Exempt from the API key check; never touches the store
"""

from fastapi import APIRouter, status

from appstore_gateway import __version__

router = APIRouter(prefix="/health", tags=["health"])


@router.get("", status_code=status.HTTP_200_OK)
async def health_check():
    """Basic liveness probe. Returns 200 if the process is up."""
    return {
        "status": "healthy",
        "service": "appstore-gateway",
        "version": __version__,
    }
