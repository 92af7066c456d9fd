"""Solution endpoints."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, status

from ...schemas.instances import SolutionModel, SolutionTextRequest
from ...services.routing.service import describe_solution, load_solution

router = APIRouter(prefix="/solutions", tags=["solutions"])


@router.post("/parse", response_model=SolutionModel, status_code=status.HTTP_200_OK)
def parse(payload: SolutionTextRequest) -> SolutionModel:
    try:
        _, solution = load_solution(payload)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return describe_solution(solution)
