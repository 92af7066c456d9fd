"""Geometry cache endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Request, status

from ...schemas.routing import CacheStatsModel

router = APIRouter(prefix="/cache", tags=["cache"])


@router.get("/stats", response_model=CacheStatsModel, status_code=status.HTTP_200_OK)
def cache_stats(request: Request) -> CacheStatsModel:
    stats = request.app.state.cache.stats()
    return CacheStatsModel(
        entries=stats.entries,
        size_kb=stats.size_kb,
        hits=stats.hits,
        misses=stats.misses,
        hit_rate=stats.hit_rate,
    )


@router.delete("", status_code=status.HTTP_200_OK)
def clear_cache(request: Request) -> dict:
    """Drop every cached geometry, in memory and on disk."""
    request.app.state.cache.clear()
    return {"status": "cleared"}
