"""Pydantic data models used across the trend engine."""
from __future__ import annotations

from enum import Enum
from typing import List, NamedTuple

from pydantic import BaseModel, Field

from .keywords import extract_keywords


class TrendSource(str, Enum):
    """Provenance tag attached to every trend record."""

    SEARCH_TRENDS = "search-trends"
    SOCIAL = "social"
    SYNTHESIZED = "synthesized"


class TrendRecord(BaseModel):
    """A single normalized trending topic."""

    title: str = Field(..., min_length=1, description="Human-readable headline, e.g. 'Quantum Computing Commercial Applications'")
    keywords: List[str] = Field(..., min_length=1, description="Up to five salient lowercase tokens derived from the title")
    category: str = Field(..., description="Source-provided or synthesized label ('Technology', 'Breaking', ...)")
    source: TrendSource = Field(..., description="Where the record came from")
    trend_score: int = Field(..., ge=0, le=100, serialization_alias="trendScore", description="Rank-decay heuristic 0-100")

    model_config = {
        "frozen": True,
    }


def make_record(
    title: str,
    category: str,
    source: TrendSource,
    trend_score: int,
    keyword_text: str | None = None,
) -> TrendRecord:
    """Build a :class:`TrendRecord`, falling back to the title as sole keyword."""
    keywords = extract_keywords(keyword_text if keyword_text is not None else title)
    return TrendRecord(
        title=title,
        keywords=keywords or [title],
        category=category,
        source=source,
        trend_score=trend_score,
    )


class ScoreCurve(NamedTuple):
    """Rank-based decay ``max(base - step * index, floor)``."""

    base: int
    step: int
    floor: int

    def score(self, index: int) -> int:
        return max(self.base - self.step * index, self.floor)


# ---------------------------------------------------------------------------
# Third-party feed shapes. Every field is optional so that a partial payload
# still validates; parsers skip entries that lack what they need.
# ---------------------------------------------------------------------------


class SerpErrorResponse(BaseModel):
    error: str | None = None


class SerpCategory(BaseModel):
    name: str | None = None


class SerpTrendingSearch(BaseModel):
    query: str | None = None
    categories: List[SerpCategory] | None = None


class SerpTrendingNowResponse(BaseModel):
    trending_searches: List[SerpTrendingSearch] | None = None
    daily_search_trends: List[SerpTrendingSearch] | None = None
    realtime_search_trends: List[SerpTrendingSearch] | None = None


class SerpRelatedQuery(BaseModel):
    query: str | None = None


class SerpRelatedQueries(BaseModel):
    top: List[SerpRelatedQuery] | None = None
    rising: List[SerpRelatedQuery] | None = None


class SerpTrendsResponse(BaseModel):
    related_queries: SerpRelatedQueries | None = None


class RedditPost(BaseModel):
    title: str | None = None
    ups: float | None = None
    subreddit: str | None = None


class RedditChild(BaseModel):
    data: RedditPost | None = None


class RedditListingData(BaseModel):
    children: List[RedditChild] | None = None


class RedditListing(BaseModel):
    data: RedditListingData | None = None


class GitHubRepo(BaseModel):
    name: str | None = None
    description: str | None = None


class GitHubSearchResponse(BaseModel):
    items: List[GitHubRepo] | None = None


class TwitterTrend(BaseModel):
    name: str | None = None


class TwitterTrendsPlace(BaseModel):
    trends: List[TwitterTrend] | None = None
