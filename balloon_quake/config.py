"""Application configuration loaded from environment variables."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    app_name: str = "balloon-quake"
    debug: bool = False
    log_level: str = "INFO"

    # Refresh cadence
    refresh_interval_seconds: float = 300.0
    lookback_hours: int = Field(default=24, ge=1, le=24)

    # Upstream sources
    wind_base_url: str = "https://a.windbornesystems.com/treasure"
    earthquake_url: str = (
        "https://earthquake.usgs.gov/earthquakes/feed/v1.0/summary/all_day.geojson"
    )
    frame_timeout_seconds: float = 10.0
    earthquake_timeout_seconds: float = 8.0

    # Query surface
    earthquake_preview_limit: int = 10
    inquiry_log_limit: int = Field(default=1000, ge=1)
    allowed_origins: str = ""
    client_build_dir: str = "client/build"
    dataset_note: str = (
        "The USGS real-time earthquake GeoJSON feed is unauthenticated, global, "
        "and adds high-impact geophysical context to the balloon constellation."
    )

    model_config = {"env_prefix": "BALLOON_QUAKE_"}

    @property
    def origins(self) -> list[str]:
        """Comma-separated ``allowed_origins`` as a list; ``["*"]`` when unset."""
        parsed = [o.strip() for o in self.allowed_origins.split(",") if o.strip()]
        return parsed or ["*"]


settings = Settings()
