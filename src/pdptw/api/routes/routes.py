"""Route geometry and timeline endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Request, status

from ...schemas.routing import GeometryRequest, GeometryResponse, TimelineRequest, TimelineResponse
from ...services.routing.service import build_timelines, resolve_geometry

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/routes", tags=["routes"])


@router.post("/geometry", response_model=GeometryResponse, status_code=status.HTTP_200_OK)
async def geometry(payload: GeometryRequest, request: Request) -> GeometryResponse:
    try:
        return await resolve_geometry(payload, request.app.state.resolver)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except Exception as exc:
        logger.exception(f"Error resolving route geometry: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to resolve route geometry: {str(exc)}",
        ) from exc


@router.post("/timeline", response_model=TimelineResponse, status_code=status.HTTP_200_OK)
def timeline(payload: TimelineRequest) -> TimelineResponse:
    try:
        return build_timelines(payload)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except Exception as exc:
        logger.exception(f"Error building timelines: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to build timelines: {str(exc)}",
        ) from exc
