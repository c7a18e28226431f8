"""Application configuration helpers."""

import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv

from fetcher.core.errors import ConfigurationError

logger = logging.getLogger(__name__)

API_KEY_ALIASES = ("GOOGLE_API_KEY", "GOOGLE_PLACES_API_KEY", "PLACES_API_KEY", "API_KEY")
API_VERSIONS = {"classic", "modern"}


@dataclass(frozen=True)
class Settings:
    google_api_key: str
    limit_per_city: int = 20
    skip_existing: bool = True
    min_results: int = 0
    city_limit: int = 0
    service_limit: int = 0
    service_filter: Optional[str] = None
    sleep_ms: int = 250
    details_sleep_ms: int = 150
    max_pages: int = 2
    retries: int = 3
    retry_delay_ms: int = 1500
    output_dir: str = "src/data/fl"
    api_version: str = "classic"
    request_timeout: float = 10.0
    log_level: str = "INFO"


def _get_api_key() -> str:
    for name in API_KEY_ALIASES:
        value = (os.getenv(name) or "").strip()
        if value:
            return value
    raise ConfigurationError(f"Missing Google API key; set one of {', '.join(API_KEY_ALIASES)}.")


def _get_int(name: str, default: int, minimum: int = 0) -> int:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from exc
    if value < minimum:
        raise ConfigurationError(f"{name} must be >= {minimum}, got {value}")
    return value


def _get_float(name: str, default: float) -> float:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from exc
    if value <= 0:
        raise ConfigurationError(f"{name} must be positive, got {value}")
    return value


def _get_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in {"1", "true", "yes"}


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load, validate and cache settings from environment variables."""
    load_dotenv()

    google_api_key = _get_api_key()
    service_filter = (os.getenv("SERVICE_FILTER") or "").strip().lower() or None
    api_version = (os.getenv("PLACES_API_VERSION") or "classic").strip().lower()
    if api_version not in API_VERSIONS:
        raise ConfigurationError(f"PLACES_API_VERSION must be one of {sorted(API_VERSIONS)}, got {api_version!r}")

    min_results = _get_int("MIN_RESULTS", 0)
    skip_existing = _get_bool("SKIP_EXISTING", True)
    if min_results and not skip_existing:
        logger.warning("MIN_RESULTS=%d has no effect while SKIP_EXISTING is off; every file is rewritten.", min_results)

    return Settings(
        google_api_key=google_api_key,
        limit_per_city=_get_int("LIMIT_PER_CITY", 20, minimum=1),
        skip_existing=skip_existing,
        min_results=min_results,
        city_limit=_get_int("CITY_LIMIT", 0),
        service_limit=_get_int("SERVICE_LIMIT", 0),
        service_filter=service_filter,
        sleep_ms=_get_int("SLEEP_MS", 250),
        details_sleep_ms=_get_int("DETAILS_SLEEP_MS", 150),
        max_pages=_get_int("MAX_PAGES", 2, minimum=1),
        retries=_get_int("RETRIES", 3, minimum=1),
        retry_delay_ms=_get_int("RETRY_DELAY_MS", 1500),
        output_dir=(os.getenv("OUTPUT_DIR") or "src/data/fl").strip(),
        api_version=api_version,
        request_timeout=_get_float("REQUEST_TIMEOUT", 10.0),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").strip().upper(),
    )
