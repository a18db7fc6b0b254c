"""Parsers turning raw trend-source payloads into :class:`TrendRecord` lists.

Every parser takes the raw response body as text and returns a (possibly
empty) list. Parsers never raise: a malformed payload is logged and treated
as "no trends" so that one broken source cannot take down the pipeline.
"""
from __future__ import annotations

import logging
import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from typing import Iterable, List, Optional

from pydantic import TypeAdapter, ValidationError

from .models import (
    GitHubSearchResponse,
    RedditListing,
    ScoreCurve,
    SerpTrendingNowResponse,
    SerpTrendingSearch,
    SerpTrendsResponse,
    TrendRecord,
    TrendSource,
    TwitterTrendsPlace,
    make_record,
)

logger = logging.getLogger(__name__)

# Relative source authority. These constants drive ranking across sources,
# so they are tuned per feed rather than shared.
SERP_TRENDING_CURVE = ScoreCurve(95, 3, 70)
SERP_DAILY_CURVE = ScoreCurve(90, 3, 65)
SERP_REALTIME_CURVE = ScoreCurve(88, 3, 60)
SERP_RISING_CURVE = ScoreCurve(85, 2, 55)
SERP_TOP_CURVE = ScoreCurve(80, 2, 50)
GITHUB_CURVE = ScoreCurve(80, 3, 60)
SYNDICATION_CURVE = ScoreCurve(95, 5, 60)
TWITTER_CURVE = ScoreCurve(90, 4, 45)

SERP_MAX_ITEMS = 10
SERP_RISING_MAX_ITEMS = 5
SERP_TOP_MAX_ITEMS = 3
SERP_TOP_UNTIL = 8
GITHUB_MAX_ITEMS = 5
GITHUB_MAX_TITLE_LENGTH = 100
SYNDICATION_MAX_ITEMS = 10
TWITTER_MAX_ITEMS = 10
# RSS <item> titles naming the feed itself are boilerplate.
SYNDICATION_ITEM_EXCLUDED_WORDS = ("trends",)

_CDATA_OPEN = re.compile(r"^<!\[CDATA\[")
_CDATA_CLOSE = re.compile(r"\]\]>$")

_TWITTER_PLACES = TypeAdapter(List[TwitterTrendsPlace])


@dataclass(frozen=True)
class RedditFeed:
    """Per-subreddit parsing rules."""

    name: str
    max_items: int
    min_upvotes: int
    curve: ScoreCurve
    category: Optional[str] = None  # None -> use the post's subreddit


REDDIT_HOT = RedditFeed("Reddit Hot", max_items=8, min_upvotes=100, curve=ScoreCurve(90, 5, 60))
REDDIT_TECHNOLOGY = RedditFeed(
    "Reddit r/Technology", max_items=6, min_upvotes=50, curve=ScoreCurve(85, 4, 55), category="Technology"
)
REDDIT_WORLDNEWS = RedditFeed(
    "Reddit r/WorldNews", max_items=5, min_upvotes=200, curve=ScoreCurve(88, 4, 65), category="World News"
)


# ---------------------------------------------------------------------------
# SerpAPI (Google Trends)
# ---------------------------------------------------------------------------

_SERP_TIERS = (
    ("trending_searches", SERP_TRENDING_CURVE, "Trending"),
    ("daily_search_trends", SERP_DAILY_CURVE, "Daily Trends"),
    ("realtime_search_trends", SERP_REALTIME_CURVE, "Realtime Trends"),
)


def _serp_records(entries: Iterable[SerpTrendingSearch], curve: ScoreCurve, default_category: str) -> List[TrendRecord]:
    records: List[TrendRecord] = []
    for index, entry in enumerate(list(entries)[:SERP_MAX_ITEMS]):
        if not entry.query:
            continue
        category = default_category
        if entry.categories and entry.categories[0].name:
            category = entry.categories[0].name
        records.append(make_record(entry.query, category, TrendSource.SEARCH_TRENDS, curve.score(index)))
    return records


def parse_serpapi_trending(raw: str) -> List[TrendRecord]:
    """Parse a ``google_trends_trending_now`` response.

    ``trending_searches`` is preferred; the daily and realtime lists are only
    consulted, in that order, when the previous one produced nothing.
    """
    try:
        payload = SerpTrendingNowResponse.model_validate_json(raw)
        for key, curve, default_category in _SERP_TIERS:
            records = _serp_records(getattr(payload, key) or [], curve, default_category)
            if records:
                return records
        return []
    except ValidationError as e:
        logger.error(f"Error parsing SerpAPI trending response: {e}")
        return []


def parse_serpapi_related_queries(raw: str, existing_titles: Iterable[str] = ()) -> List[TrendRecord]:
    """Parse rising/top related queries from a ``google_trends`` explore response.

    Queries already contained in one of *existing_titles* are skipped. Top
    queries are only added while the combined list is still short.
    """
    try:
        payload = SerpTrendsResponse.model_validate_json(raw)
        related = payload.related_queries
        if related is None:
            return []

        seen = [title.lower() for title in existing_titles]
        records: List[TrendRecord] = []

        def _is_known(query: str) -> bool:
            needle = query.lower()
            return any(needle in title for title in seen)

        for index, item in enumerate((related.rising or [])[:SERP_RISING_MAX_ITEMS]):
            if item.query and not _is_known(item.query):
                records.append(
                    make_record(item.query, "Rising Searches", TrendSource.SEARCH_TRENDS, SERP_RISING_CURVE.score(index))
                )
                seen.append(item.query.lower())

        if related.top and len(seen) < SERP_TOP_UNTIL:
            for index, item in enumerate(related.top[:SERP_TOP_MAX_ITEMS]):
                if item.query and not _is_known(item.query):
                    records.append(
                        make_record(item.query, "Related Searches", TrendSource.SEARCH_TRENDS, SERP_TOP_CURVE.score(index))
                    )
                    seen.append(item.query.lower())

        return records
    except ValidationError as e:
        logger.error(f"Error parsing SerpAPI related queries: {e}")
        return []


# ---------------------------------------------------------------------------
# Reddit / GitHub JSON feeds
# ---------------------------------------------------------------------------


def parse_reddit_listing(raw: str, feed: RedditFeed = REDDIT_HOT) -> List[TrendRecord]:
    """Parse a Reddit ``hot.json`` listing according to *feed*'s rules."""
    try:
        listing = RedditListing.model_validate_json(raw)
        children = (listing.data.children if listing.data else None) or []

        records: List[TrendRecord] = []
        for index, child in enumerate(children[: feed.max_items]):
            post = child.data
            if post is None or not post.title or (post.ups or 0) <= feed.min_upvotes:
                continue
            category = feed.category or post.subreddit or "General"
            records.append(make_record(post.title, category, TrendSource.SEARCH_TRENDS, feed.curve.score(index)))
        return records
    except ValidationError as e:
        logger.error(f"Error parsing {feed.name} listing: {e}")
        return []


def parse_reddit_hot(raw: str) -> List[TrendRecord]:
    return parse_reddit_listing(raw, REDDIT_HOT)


def parse_reddit_technology(raw: str) -> List[TrendRecord]:
    return parse_reddit_listing(raw, REDDIT_TECHNOLOGY)


def parse_reddit_worldnews(raw: str) -> List[TrendRecord]:
    return parse_reddit_listing(raw, REDDIT_WORLDNEWS)


def parse_github_trending(raw: str) -> List[TrendRecord]:
    """Parse a GitHub repository search response into ``name: description`` titles."""
    try:
        response = GitHubSearchResponse.model_validate_json(raw)
        records: List[TrendRecord] = []
        for index, repo in enumerate((response.items or [])[:GITHUB_MAX_ITEMS]):
            if not repo.name or not repo.description:
                continue
            title = f"{repo.name}: {repo.description}"
            if len(title) > GITHUB_MAX_TITLE_LENGTH:
                title = title[: GITHUB_MAX_TITLE_LENGTH - 3] + "..."
            records.append(
                make_record(
                    title,
                    "Technology",
                    TrendSource.SEARCH_TRENDS,
                    GITHUB_CURVE.score(index),
                    keyword_text=f"{repo.name} {repo.description}",
                )
            )
        return records
    except ValidationError as e:
        logger.error(f"Error parsing GitHub trending: {e}")
        return []


# ---------------------------------------------------------------------------
# RSS / Atom
# ---------------------------------------------------------------------------


def _local_name(tag: str) -> str:
    """Strip an ElementTree ``{namespace}`` prefix."""
    return tag.rsplit("}", 1)[-1]


def _child_text(element: ET.Element, name: str) -> str:
    for child in element:
        if _local_name(child.tag) == name:
            return "".join(child.itertext())
    return ""


def _clean_title(text: str) -> str:
    text = text.strip()
    return _CDATA_CLOSE.sub("", _CDATA_OPEN.sub("", text)).strip()


def _syndication_records(elements: List[ET.Element], excluded: Iterable[str]) -> List[TrendRecord]:
    excluded = tuple(excluded)
    records: List[TrendRecord] = []
    for index, element in enumerate(elements[:SYNDICATION_MAX_ITEMS]):
        title = _clean_title(_child_text(element, "title"))
        if not title or any(word in title.lower() for word in excluded):
            continue
        records.append(make_record(title, "Trending", TrendSource.SEARCH_TRENDS, SYNDICATION_CURVE.score(index)))
    return records


def parse_syndication_feed(raw: str, brand: str = "google") -> List[TrendRecord]:
    """Parse RSS ``<item>`` titles, falling back to Atom ``<entry>`` titles.

    Titles mentioning the feed's own *brand* are dropped, and so are RSS item
    titles containing "trends"; both are feed boilerplate rather than trends.
    """
    try:
        root = ET.fromstring(raw)
        brand = brand.lower()
        items = [el for el in root.iter() if _local_name(el.tag) == "item"]
        records = _syndication_records(items, (brand, *SYNDICATION_ITEM_EXCLUDED_WORDS))
        if not records:
            entries = [el for el in root.iter() if _local_name(el.tag) == "entry"]
            records = _syndication_records(entries, (brand,))
        return records
    except (ET.ParseError, ValueError) as e:
        logger.error(f"Error parsing syndication feed: {e}")
        return []


# ---------------------------------------------------------------------------
# X / Twitter
# ---------------------------------------------------------------------------


def _is_meaningful_twitter_trend(name: str) -> bool:
    return (
        not name.startswith("#")
        and len(name) > 3
        and not name.isdigit()
        and "twitter" not in name.lower()
    )


def parse_twitter_trends(raw: str) -> List[TrendRecord]:
    """Parse a v1.1 ``trends/place.json`` response (a one-element list)."""
    try:
        places = _TWITTER_PLACES.validate_json(raw)
        if not places:
            return []

        records: List[TrendRecord] = []
        for index, trend in enumerate((places[0].trends or [])[:TWITTER_MAX_ITEMS]):
            name = (trend.name or "").strip()
            if not _is_meaningful_twitter_trend(name):
                continue
            records.append(make_record(name, "Social Media", TrendSource.SOCIAL, TWITTER_CURVE.score(index)))
        return records
    except ValidationError as e:
        logger.error(f"Error parsing Twitter trends data: {e}")
        return []
