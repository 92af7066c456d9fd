"""FastAPI application entry point."""

from __future__ import annotations

from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.routes import cache, health, instances, routes, solutions
from .config import settings
from .persistence.filesystem import JsonFileStore, KeyValueStore
from .services.geometry import GeometryCache, OSRMClient, RouteGeometryResolver
from .services.geometry.resolver import RoutingProvider


def create_app(
    store: Optional[KeyValueStore] = None,
    provider: Optional[RoutingProvider] = None,
) -> FastAPI:
    app = FastAPI(title=settings.app_name)
    if settings.frontend_allowed_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=list(settings.frontend_allowed_origins),
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    geometry_cache = GeometryCache(store if store is not None else JsonFileStore())
    geometry_cache.load()
    app.state.cache = geometry_cache
    app.state.resolver = RouteGeometryResolver(geometry_cache, provider if provider is not None else OSRMClient())

    @app.get("/")
    def root():
        return {
            "service": settings.app_name,
            "status": "running",
            "api_prefix": settings.api_prefix,
            "health": f"{settings.api_prefix}/health",
            "docs": "/docs",
        }

    app.include_router(health.router, prefix=settings.api_prefix)
    app.include_router(instances.router, prefix=settings.api_prefix)
    app.include_router(solutions.router, prefix=settings.api_prefix)
    app.include_router(routes.router, prefix=settings.api_prefix)
    app.include_router(cache.router, prefix=settings.api_prefix)
    return app


app = create_app()
