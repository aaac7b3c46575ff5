"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    api_base_url: str
    api_token: str | None = None
    request_timeout_seconds: float = 15
    update_password: str = "72991"
    page_size_options: str = "5,10,20,50"
    default_page_size: int = 5
    photo_max_size_kb: float = 2
    photo_max_edge_px: int = 1600
    states_cache_ttl_seconds: int = 300
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_page_size_options(raw: str | None) -> list[int]:
    """Parse the selectable page sizes from env."""
    if raw is None:
        return [5]
    sizes: set[int] = set()
    for chunk in raw.split(","):
        value = chunk.strip()
        if not value.isdigit():
            continue
        size = int(value)
        if size > 0:
            sizes.add(size)
    return sorted(sizes) or [5]
