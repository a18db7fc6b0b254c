"""Trend aggregation: merge live sources, supplement, de-duplicate, rank.

``get_all_trending_topics()`` is the public entry point. It never raises:
every failure mode degrades to data, ending at the synthesized fallback list.
"""
from __future__ import annotations

import asyncio
import logging
import re
from datetime import datetime
from typing import Callable, Iterable, List, Optional, Protocol, Sequence

import httpx

from .config import Settings
from .fallback import synthesize_fallback_trends
from .fetchers import SearchTrendsFetcher, SocialTrendsFetcher
from .models import TrendRecord

logger = logging.getLogger(__name__)

MIN_LIVE_TRENDS = 8
SUPPLEMENT_TARGET = 12
MAX_TRENDS = 15

# Near-duplicate heuristic: both normalized titles longer than
# SIMILARITY_MIN_TITLE_LENGTH, and at least SIMILARITY_MIN_SHARED_WORDS words
# of the newer title (longer than SIMILARITY_MIN_WORD_LENGTH) found inside the
# kept one.
SIMILARITY_MIN_TITLE_LENGTH = 15
SIMILARITY_MIN_WORD_LENGTH = 3
SIMILARITY_MIN_SHARED_WORDS = 2

_NON_ALNUM = re.compile(r"[^a-z0-9\s]")
_WHITESPACE = re.compile(r"\s+")


class TrendFetcher(Protocol):
    name: str

    async def fetch(self, client: httpx.AsyncClient) -> List[TrendRecord]:
        ...


def normalize_title(title: str) -> str:
    """Lowercase, drop non-alphanumerics and collapse whitespace."""
    return _WHITESPACE.sub(" ", _NON_ALNUM.sub("", title.lower())).strip()


def is_near_duplicate(candidate: str, kept: str) -> bool:
    """Return True when *candidate* repeats the already-kept title *kept*.

    Both titles must be normalized. Each word of *candidate* longer than
    ``SIMILARITY_MIN_WORD_LENGTH`` counts when it occurs anywhere in *kept*,
    so "stock" matches "stocks" and a repeated word counts every time.
    """
    if candidate == kept:
        return True
    if len(candidate) <= SIMILARITY_MIN_TITLE_LENGTH or len(kept) <= SIMILARITY_MIN_TITLE_LENGTH:
        return False
    shared = [
        word for word in candidate.split(" ")
        if len(word) > SIMILARITY_MIN_WORD_LENGTH and word in kept
    ]
    return len(shared) >= SIMILARITY_MIN_SHARED_WORDS


def deduplicate_trends(trends: Iterable[TrendRecord]) -> List[TrendRecord]:
    """Drop near-duplicates, keeping the first occurrence of each trend."""
    kept_titles: List[str] = []
    unique: List[TrendRecord] = []
    for trend in trends:
        normalized = normalize_title(trend.title)
        if any(is_near_duplicate(normalized, seen) for seen in kept_titles):
            continue
        kept_titles.append(normalized)
        unique.append(trend)
    return unique


def rank_trends(trends: Iterable[TrendRecord], limit: int = MAX_TRENDS) -> List[TrendRecord]:
    """Sort by score (stable, highest first) and keep the top *limit*."""
    return sorted(trends, key=lambda trend: trend.trend_score, reverse=True)[:limit]


class TrendAggregator:
    """Runs the live fetchers concurrently and turns their output into one list."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        *,
        fetchers: Optional[Sequence[TrendFetcher]] = None,
        clock: Callable[[], datetime] = datetime.now,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.settings = settings or Settings.from_env()
        self.clock = clock
        self.transport = transport
        self.fetchers: List[TrendFetcher] = (
            list(fetchers)
            if fetchers is not None
            else [
                SearchTrendsFetcher(self.settings, clock=clock),
                SocialTrendsFetcher(self.settings, clock=clock),
            ]
        )

    def fallback_trends(self) -> List[TrendRecord]:
        return synthesize_fallback_trends(self.clock())

    async def _fetch_all(self) -> List[TrendRecord]:
        async with httpx.AsyncClient(transport=self.transport, follow_redirects=True) as client:
            results = await asyncio.gather(
                *(fetcher.fetch(client) for fetcher in self.fetchers),
                return_exceptions=True,
            )

        all_trends: List[TrendRecord] = []
        success_count = 0
        for fetcher, result in zip(self.fetchers, results):
            if isinstance(result, BaseException):
                logger.warning(f"✗ {fetcher.name} failed: {result}")
            elif not result:
                logger.info(f"✗ {fetcher.name}: no trends returned")
            else:
                all_trends.extend(result)
                success_count += 1
                logger.info(f"✓ Fetched {len(result)} {fetcher.name} trends")

        logger.info(f"{success_count}/{len(self.fetchers)} sources successful")
        return all_trends

    async def get_all_trending_topics(self) -> List[TrendRecord]:
        """Return at most 15 unique trends, highest score first. Never raises."""
        try:
            logger.info("📡 Fetching trending topics from all sources...")
            all_trends = await self._fetch_all()

            if len(all_trends) < MIN_LIVE_TRENDS:
                needed = SUPPLEMENT_TARGET - len(all_trends)
                supplement = self.fallback_trends()[:needed]
                all_trends.extend(supplement)
                logger.info(f"Added {len(supplement)} fallback trends")

            if not all_trends:
                logger.info("No trends fetched from external sources, using all fallback trends")
                all_trends = self.fallback_trends()

            unique_trends = rank_trends(deduplicate_trends(all_trends))
            logger.info(f"✓ Returning {len(unique_trends)} unique trending topics")
            return unique_trends
        except Exception:
            logger.exception("Error aggregating trending topics; using fallback trends")
            return self.fallback_trends()


async def get_all_trending_topics(settings: Optional[Settings] = None) -> List[TrendRecord]:
    """Aggregate trends with default fetchers built from *settings* (or the environment)."""
    return await TrendAggregator(settings).get_all_trending_topics()
