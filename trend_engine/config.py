"""Runtime settings, read from the environment (and an optional ``.env`` file)."""
from __future__ import annotations

import logging
import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

DEFAULT_REQUEST_TIMEOUT = 8.0
DEFAULT_SOURCE_DELAY = 1.0
DEFAULT_CACHE_TTL = 30 * 60.0

_FALSY = {"0", "false", "no", "off"}


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning(f"⚠️ Ignoring {name}={raw!r}: not a number, using {default}")
        return default
    if value < 0:
        logger.warning(f"⚠️ Ignoring {name}={raw!r}: must be non-negative, using {default}")
        return default
    return value


class Settings(BaseModel):
    """Knobs for the trend pipeline.

    Missing API credentials are a normal state: the corresponding source is
    simply skipped.
    """

    serpapi_key: str | None = Field(None, description="SerpAPI key for the Google Trends source")
    twitter_bearer_token: str | None = Field(None, description="Bearer token for the X/Twitter trends API")
    geo: str = Field("US", description="Region passed to Google Trends")
    request_timeout: float = Field(DEFAULT_REQUEST_TIMEOUT, ge=0, description="Per-request abort timeout (seconds)")
    source_delay: float = Field(DEFAULT_SOURCE_DELAY, ge=0, description="Pause between sequential fallback sources (seconds)")
    cache_ttl_seconds: float = Field(DEFAULT_CACHE_TTL, ge=0, description="TTL for cached trend lists")
    social_fallback: bool = Field(True, description="Synthesize social trends when the social API is unavailable")

    model_config = {
        "frozen": True,
    }

    @classmethod
    def from_env(cls) -> "Settings":
        load_dotenv()
        return cls(
            serpapi_key=os.getenv("SERPAPI_KEY") or os.getenv("SERPAPI_API_KEY") or None,
            twitter_bearer_token=os.getenv("TWITTER_BEARER_TOKEN") or None,
            geo=os.getenv("TRENDWISE_GEO") or "US",
            request_timeout=_env_float("TRENDWISE_REQUEST_TIMEOUT", DEFAULT_REQUEST_TIMEOUT),
            source_delay=_env_float("TRENDWISE_SOURCE_DELAY", DEFAULT_SOURCE_DELAY),
            cache_ttl_seconds=_env_float("TRENDWISE_CACHE_TTL", DEFAULT_CACHE_TTL),
            social_fallback=(os.getenv("TRENDWISE_SOCIAL_FALLBACK", "").strip().lower() not in _FALSY),
        )
