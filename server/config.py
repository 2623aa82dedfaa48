"""
Runtime settings for the RepoRadar API.

Everything comes from environment variables; a .env file next to the server
directory is loaded first so local development works without exporting anything.
"""

import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

env_path = os.path.join(os.path.dirname(os.path.abspath(__file__)), ".env")
load_dotenv(env_path)


DEFAULT_ALLOWED_ORIGINS = (
    "http://localhost:3000",
    "http://localhost:5173",
    "http://localhost:8080",
)


@dataclass(frozen=True)
class Settings:
    github_token: str | None
    github_api_url: str
    gemini_api_key: str | None
    gemini_model: str
    http_timeout: float
    scan_timeout: float
    content_fetch_concurrency: int
    scan_rate_limit: str
    allowed_origins: tuple[str, ...]


def _optional(name: str) -> str | None:
    value = os.getenv(name, "").strip()
    return value or None


def load_settings() -> Settings:
    """Build settings from the current environment."""
    origins = os.getenv("ALLOWED_ORIGINS")
    if origins:
        allowed_origins = tuple(o.strip() for o in origins.split(",") if o.strip())
    else:
        allowed_origins = DEFAULT_ALLOWED_ORIGINS

    return Settings(
        github_token=_optional("GITHUB_TOKEN"),
        github_api_url=os.getenv("GITHUB_API_URL", "https://api.github.com").rstrip("/"),
        gemini_api_key=_optional("GEMINI_API_KEY"),
        gemini_model=os.getenv("GEMINI_MODEL", "gemini-2.0-flash"),
        http_timeout=float(os.getenv("HTTP_TIMEOUT_SECONDS", "30")),
        scan_timeout=float(os.getenv("SCAN_TIMEOUT_SECONDS", "120")),
        content_fetch_concurrency=max(1, int(os.getenv("CONTENT_FETCH_CONCURRENCY", "5"))),
        scan_rate_limit=os.getenv("SCAN_RATE_LIMIT", "10/minute"),
        allowed_origins=allowed_origins,
    )


@lru_cache
def get_settings() -> Settings:
    return load_settings()
