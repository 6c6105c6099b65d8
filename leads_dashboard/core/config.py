"""Application configuration helpers."""

import logging
import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

MISSING_BASE_URL = "API Base URL not defined"


class ConfigError(RuntimeError):
    """Raised when mandatory configuration is missing."""


@dataclass(frozen=True)
class Settings:
    api_base_url: str
    request_timeout: float = 30.0
    max_retries: int = 3
    dashboard_port: int = 8080
    export_row_limit: int = 10000


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings from environment variables with sensible defaults."""
    load_dotenv()

    api_base_url = os.getenv("SCRAPE_API_BASE_URL", "").strip().rstrip("/")
    request_timeout = float(os.getenv("SCRAPE_API_TIMEOUT", "30"))
    max_retries = int(os.getenv("SCRAPE_API_MAX_RETRIES", "3"))
    dashboard_port = int(os.getenv("DASHBOARD_PORT", "8080"))
    export_row_limit = int(os.getenv("EXPORT_ROW_LIMIT", "10000"))

    if not api_base_url:
        logger.warning("SCRAPE_API_BASE_URL is not set; scrape API requests will fail.")

    return Settings(
        api_base_url=api_base_url,
        request_timeout=request_timeout,
        max_retries=max_retries,
        dashboard_port=dashboard_port,
        export_row_limit=export_row_limit,
    )


def require_api_base_url() -> str:
    """Return the configured API host or raise before any request is built."""
    base_url = get_settings().api_base_url
    if not base_url:
        raise ConfigError(MISSING_BASE_URL)
    return base_url
