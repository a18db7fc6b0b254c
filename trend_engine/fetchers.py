"""Network fetchers for the live trend sources.

Fetchers degrade instead of failing: a timeout, non-2xx response or network
error is logged and the source counts as empty for this call. There is no
retry; the next aggregation simply tries again.
"""
from __future__ import annotations

import asyncio
import logging
import random
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Awaitable, Callable, Dict, List, Optional, Sequence

import httpx

from .config import Settings
from .fallback import synthesize_fallback_trends, synthesize_social_trends
from .models import SerpErrorResponse, TrendRecord
from .parsers import (
    parse_github_trending,
    parse_reddit_hot,
    parse_reddit_technology,
    parse_reddit_worldnews,
    parse_serpapi_related_queries,
    parse_serpapi_trending,
    parse_syndication_feed,
    parse_twitter_trends,
)

logger = logging.getLogger(__name__)

USER_AGENTS = [
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:109.0) Gecko/20100101 Firefox/119.0",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10.15; rv:109.0) Gecko/20100101 Firefox/119.0",
]

DEFAULT_ACCEPT = "application/json, text/html, */*"
ACCEPT_LANGUAGE = "en-US,en;q=0.9"

SERPAPI_URL = "https://serpapi.com/search.json"
SERPAPI_MIN_TRENDS = 5
POPULAR_TOPICS = [
    "technology",
    "artificial intelligence",
    "climate change",
    "health",
    "entertainment",
    "business",
    "science",
]

GITHUB_LOOKBACK_DAYS = 30
GOOGLE_TRENDS_RSS_URL = "https://trends.google.com/trending/rss?geo={geo}"

TWITTER_TREND_ENDPOINTS = [
    ("Twitter Worldwide", "https://api.twitter.com/1.1/trends/place.json?id=1"),
    ("Twitter United States", "https://api.twitter.com/1.1/trends/place.json?id=23424977"),
    ("Twitter United Kingdom", "https://api.twitter.com/1.1/trends/place.json?id=23424975"),
]

Sleep = Callable[[float], Awaitable[None]]


def random_user_agent() -> str:
    """Return a user-agent string picked at random from :data:`USER_AGENTS`."""
    return random.choice(USER_AGENTS)


def build_headers(accept: str = DEFAULT_ACCEPT, extra: Optional[Dict[str, str]] = None) -> Dict[str, str]:
    headers = {
        "User-Agent": random_user_agent(),
        "Accept": accept,
        "Accept-Language": ACCEPT_LANGUAGE,
    }
    if extra:
        headers.update(extra)
    return headers


@dataclass(frozen=True)
class FeedSource:
    """One external endpoint plus the parser for its payload."""

    name: str
    url: str
    parser: Callable[[str], List[TrendRecord]]
    headers: Optional[Dict[str, str]] = None


async def fetch_source(
    client: httpx.AsyncClient,
    source: FeedSource,
    *,
    timeout: float = 8.0,
) -> List[TrendRecord]:
    """GET *source* once and parse it; any failure yields an empty list."""
    try:
        response = await asyncio.wait_for(
            client.get(source.url, headers=build_headers(extra=source.headers), timeout=timeout),
            timeout=timeout,
        )
        if not response.is_success:
            logger.warning(f"✗ {source.name} returned HTTP {response.status_code}")
            return []
        trends = source.parser(response.text)
    except asyncio.TimeoutError:
        logger.warning(f"✗ {source.name} timed out after {timeout:.0f}s")
        return []
    except Exception as e:
        logger.warning(f"✗ {source.name} failed: {str(e) or type(e).__name__}")
        return []

    if trends:
        logger.info(f"✓ Fetched {len(trends)} trends from {source.name}")
    return trends


async def fetch_first_available(
    client: httpx.AsyncClient,
    sources: Sequence[FeedSource],
    *,
    timeout: float = 8.0,
    delay: float = 1.0,
    sleep: Sleep = asyncio.sleep,
) -> List[TrendRecord]:
    """Try *sources* one after another and return the first non-empty result.

    Requests are deliberately sequential with a fixed *delay* between
    attempts to stay under the public endpoints' rate limits.
    """
    for position, source in enumerate(sources):
        if position and delay:
            await sleep(delay)
        trends = await fetch_source(client, source, timeout=timeout)
        if trends:
            return trends
    return []


def default_alternative_sources(today: Optional[date] = None, geo: str = "US") -> List[FeedSource]:
    """Public, unauthenticated sources used when SerpAPI yields nothing."""
    today = today or date.today()
    created_after = (today - timedelta(days=GITHUB_LOOKBACK_DAYS)).isoformat()
    return [
        FeedSource("Reddit Hot", "https://www.reddit.com/hot.json?limit=25", parse_reddit_hot),
        FeedSource("Reddit r/Technology", "https://www.reddit.com/r/technology/hot.json?limit=15", parse_reddit_technology),
        FeedSource("Reddit r/WorldNews", "https://www.reddit.com/r/worldnews/hot.json?limit=10", parse_reddit_worldnews),
        FeedSource(
            "GitHub Trending",
            f"https://api.github.com/search/repositories?q=created:>{created_after}&sort=stars&order=desc&per_page=10",
            parse_github_trending,
        ),
        FeedSource("Google Trends RSS", GOOGLE_TRENDS_RSS_URL.format(geo=geo), parse_syndication_feed),
    ]


def _log_serpapi_error(message: str) -> None:
    logger.error(f"❌ SerpAPI error: {message}")
    lowered = message.lower()
    if "invalid api key" in lowered:
        logger.info("🔑 Invalid SerpAPI key. Please check your SERPAPI_KEY environment variable.")
    elif "credits" in lowered:
        logger.info("💳 SerpAPI credits exhausted. Consider upgrading your plan or wait for credit refresh.")
    elif "quota" in lowered:
        logger.info("📊 SerpAPI quota exceeded. Please wait or upgrade your plan.")


class SearchTrendsFetcher:
    """Google Trends via SerpAPI, backed by a tier of public feeds."""

    name = "Search Trends"

    def __init__(
        self,
        settings: Settings,
        alternative_sources: Optional[Sequence[FeedSource]] = None,
        sleep: Sleep = asyncio.sleep,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.settings = settings
        self._clock = clock
        self.alternative_sources = (
            list(alternative_sources)
            if alternative_sources is not None
            else default_alternative_sources(geo=settings.geo)
        )
        self._sleep = sleep

    async def _serpapi_get(self, client: httpx.AsyncClient, params: Dict[str, str]) -> Optional[str]:
        query = {**params, "api_key": self.settings.serpapi_key or ""}
        timeout = self.settings.request_timeout
        try:
            response = await asyncio.wait_for(
                client.get(SERPAPI_URL, params=query, headers=build_headers(accept="application/json"), timeout=timeout),
                timeout=timeout,
            )
        except Exception as e:
            logger.warning(f"✗ SerpAPI request failed: {str(e) or type(e).__name__}")
            return None

        try:
            error = SerpErrorResponse.model_validate_json(response.text).error
        except ValueError:
            error = None
        if not response.is_success or error:
            _log_serpapi_error(error or f"HTTP {response.status_code}")
            return None
        return response.text

    async def fetch_serpapi(self, client: httpx.AsyncClient) -> List[TrendRecord]:
        if not self.settings.serpapi_key:
            logger.info("⚠️ SerpAPI key not configured; skipping Google Trends and using alternative sources.")
            return []

        logger.info("📡 Fetching Google Trends via SerpAPI...")
        body = await self._serpapi_get(client, {"engine": "google_trends_trending_now", "geo": self.settings.geo})
        trends = parse_serpapi_trending(body) if body is not None else []

        if body is not None and len(trends) < SERPAPI_MIN_TRENDS:
            topic = random.choice(POPULAR_TOPICS)
            related_body = await self._serpapi_get(
                client, {"engine": "google_trends", "q": topic, "geo": self.settings.geo}
            )
            if related_body is not None:
                trends.extend(parse_serpapi_related_queries(related_body, [t.title for t in trends]))

        if trends:
            logger.info(f"✓ Successfully fetched {len(trends)} Google Trends via SerpAPI")
        return trends

    async def fetch(self, client: httpx.AsyncClient) -> List[TrendRecord]:
        trends = await self.fetch_serpapi(client)
        if trends:
            return trends

        logger.info("Trying alternative trending sources...")
        trends = await fetch_first_available(
            client,
            self.alternative_sources,
            timeout=self.settings.request_timeout,
            delay=self.settings.source_delay,
            sleep=self._sleep,
        )
        if trends:
            return trends

        logger.warning("All trending sources failed; using fallback trends")
        return synthesize_fallback_trends(self._clock() if self._clock else None)


class SocialTrendsFetcher:
    """X/Twitter trends for a few WOEIDs, tried in order."""

    name = "Social Trends"

    def __init__(self, settings: Settings, sleep: Sleep = asyncio.sleep, clock: Optional[Callable[[], datetime]] = None):
        self.settings = settings
        self._sleep = sleep
        self._clock = clock

    def _sources(self) -> List[FeedSource]:
        auth = {"Authorization": f"Bearer {self.settings.twitter_bearer_token}"}
        return [FeedSource(name, url, parse_twitter_trends, headers=auth) for name, url in TWITTER_TREND_ENDPOINTS]

    def _fallback(self) -> List[TrendRecord]:
        if not self.settings.social_fallback:
            return []
        logger.info("Using synthesized social trends")
        return synthesize_social_trends(self._clock() if self._clock else None)

    async def fetch(self, client: httpx.AsyncClient) -> List[TrendRecord]:
        if not self.settings.twitter_bearer_token:
            logger.info("⚠️ Twitter bearer token not configured; skipping social trends.")
            return self._fallback()

        logger.info("📡 Fetching Twitter trends...")
        trends = await fetch_first_available(
            client,
            self._sources(),
            timeout=self.settings.request_timeout,
            delay=self.settings.source_delay,
            sleep=self._sleep,
        )
        if trends:
            return trends

        logger.warning("All Twitter API endpoints failed")
        return self._fallback()
