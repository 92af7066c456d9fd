"""Instance endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status

from ...parsing import parse_instance
from ...schemas.instances import InstanceModel, InstanceTextRequest, TimeMatrixResponse
from ...services.routing.service import describe_instance, generate_time_matrix

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/instances", tags=["instances"])


@router.post("/parse", response_model=InstanceModel, status_code=status.HTTP_200_OK)
def parse(payload: InstanceTextRequest) -> InstanceModel:
    try:
        return describe_instance(parse_instance(payload.text))
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc


@router.post("/time-matrix", response_model=TimeMatrixResponse, status_code=status.HTTP_200_OK)
async def time_matrix(payload: InstanceTextRequest) -> TimeMatrixResponse:
    """Fill in a travel-time matrix for the instance and return it re-serialised with EDGES."""
    try:
        return await generate_time_matrix(payload.text)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except Exception as exc:
        logger.exception(f"Error generating time matrix: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to generate time matrix: {str(exc)}",
        ) from exc
