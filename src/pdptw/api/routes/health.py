"""Health endpoints."""

from __future__ import annotations

from fastapi import APIRouter, status

from ...services.geometry.osrm_client import check_health

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Simple health check endpoint that doesn't require any dependencies."""
    return {"status": "ok"}


@router.get("/health/osrm", status_code=status.HTTP_200_OK)
async def health_osrm() -> dict:
    """Check OSRM service health."""
    healthy = await check_health()
    return {"service": "osrm", "healthy": healthy}
