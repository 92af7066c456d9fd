"""Application configuration and settings management."""

from pathlib import Path
from typing import Any, Literal

import json
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="PDPTW_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "PDPTW Route Viewer API"
    api_prefix: str = "/api"
    data_root: Path = Field(default=Path("data"), description="Root directory for cache and exported reports.")
    cache_file: Path = Field(
        default=Path("data/routing_cache.json"),
        description="JSON file backing the durable key-value store.",
    )
    cache_storage_key: str = Field(
        default="pdptw_routing_cache",
        description="Key under which the geometry cache is persisted.",
    )
    cache_save_interval: int = Field(default=10, ge=1)
    osrm_base_url: str = Field(
        default="https://router.project-osrm.org",
        description="Base URL for the OSRM routing service (e.g., http://localhost:5000).",
    )
    routing_profile: Literal["walking", "driving", "cycling"] = Field(
        default="walking",
        description="Travel profile requested from the routing provider.",
    )
    osrm_timeout_seconds: float = Field(default=20.0, gt=0.0)
    osrm_max_retries: int = Field(default=2, ge=0)
    osrm_backoff_seconds: float = Field(default=0.5, ge=0.0)
    osrm_max_coordinates_per_request: int = Field(default=80, ge=2)
    resolve_deadline_seconds: float = Field(
        default=60.0,
        gt=0.0,
        description="Upper bound on one routing provider call, retries included, before falling back to straight lines.",
    )
    average_speed_kmh: float = Field(
        default=30.0,
        gt=0.0,
        description="Assumed average speed when a travel time has to be derived from coordinates.",
    )
    time_units_per_hour: float = Field(
        default=1.0,
        gt=0.0,
        description="How many instance time units make one hour (1.0 keeps timelines in hours).",
    )
    matrix_fallback_speed_kmh: float = Field(default=50.0, gt=0.0)
    route_palette: tuple[str, ...] = Field(
        default=(
            "#3775b2",
            "#b1b945",
            "#45b940",
            "#953fbb",
            "#64d65f",
            "#396ced",
            "#7e54d4",
            "#529d21",
            "#da68e2",
            "#8dc74e",
        ),
    )
    frontend_allowed_origins: tuple[str, ...] = Field(
        default=(
            "http://localhost:3000",
            "http://127.0.0.1:3000",
            "http://localhost:5173",
            "http://127.0.0.1:5173",
        ),
        description="Permitted web origins for browser clients (CORS).",
    )

    @field_validator("data_root", "cache_file", mode="before")
    @classmethod
    def _expand_path(cls, value: Any) -> Path:
        path_value = value if isinstance(value, Path) else Path(str(value))
        return path_value.expanduser().resolve()

    @field_validator("frontend_allowed_origins", "route_palette", mode="before")
    @classmethod
    def _parse_str_tuple_from_env(cls, value: Any) -> tuple[str, ...]:
        """Parse string tuple from environment variable (comma-separated or JSON array)."""
        if isinstance(value, tuple):
            return value
        if isinstance(value, list):
            return tuple(str(item) for item in value)
        if isinstance(value, str):
            try:
                parsed = json.loads(value)
                if isinstance(parsed, list):
                    return tuple(str(item) for item in parsed)
            except (json.JSONDecodeError, TypeError):
                pass
            if "," in value:
                return tuple(item.strip() for item in value.split(",") if item.strip())
            if value.strip():
                return (value.strip(),)
        return tuple()


settings = Settings()
