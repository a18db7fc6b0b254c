"""Framework-agnostic handler for the ``/api/trends`` endpoint.

The trend core returns the full ranked list; source filtering and the limit
are applied here, after the fact.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from .aggregator import TrendAggregator
from .cache import TrendCache, make_cache_key
from .models import TrendRecord

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 10
ALL_SOURCES = "all"
CACHE_CONTROL = "public, s-maxage=300, stale-while-revalidate=60"


@dataclass
class TrendsResponse:
    status_code: int
    body: Dict[str, Any]
    headers: Dict[str, str] = field(default_factory=dict)
    trends: List[TrendRecord] = field(default_factory=list)


def parse_limit(raw: Any, default: int = DEFAULT_LIMIT) -> int:
    """Coerce a query-string limit to a non-negative int."""
    try:
        limit = int(str(raw).strip())
    except (TypeError, ValueError):
        return default
    return max(limit, 0)


def filter_trends(trends: List[TrendRecord], source: str, limit: int) -> List[TrendRecord]:
    if source != ALL_SOURCES:
        trends = [trend for trend in trends if trend.source.value == source]
    return trends[:limit]


async def get_trends_response(
    source: Optional[str] = ALL_SOURCES,
    limit: Any = DEFAULT_LIMIT,
    *,
    aggregator: TrendAggregator,
    cache: Optional[TrendCache[List[TrendRecord]]] = None,
    now: Optional[datetime] = None,
) -> TrendsResponse:
    """Build the JSON body returned for a trends request."""
    source = source or ALL_SOURCES
    timestamp = (now or datetime.now(timezone.utc)).isoformat()
    try:
        max_items = parse_limit(limit)
        logger.info(f"Fetching trends - Source: {source}, Limit: {max_items}")

        if cache is not None:
            trends = await cache.get_or_fetch(make_cache_key("trends", {}), aggregator.get_all_trending_topics)
        else:
            trends = await aggregator.get_all_trending_topics()

        selected = filter_trends(trends, source, max_items)
        logger.info(f"Returning {len(selected)} trending topics")
        return TrendsResponse(
            status_code=200,
            body={
                "trends": [trend.model_dump(mode="json", by_alias=True) for trend in selected],
                "total": len(selected),
                "source": source,
                "timestamp": timestamp,
                "success": True,
            },
            headers={"Cache-Control": CACHE_CONTROL},
            trends=selected,
        )
    except Exception as e:
        logger.exception("Error in trends API")
        return TrendsResponse(
            status_code=500,
            body={
                "error": "Failed to fetch trending topics",
                "details": str(e) or "Unknown error occurred",
                "timestamp": timestamp,
                "success": False,
            },
        )
