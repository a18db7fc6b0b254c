"""TrendWise trend engine.

Aggregates trending topics from search, social and public feed sources into a
bounded, de-duplicated, ranked list of :class:`TrendRecord` objects, falling
back to synthesized contextual trends when live sources are unavailable.
"""

from .aggregator import TrendAggregator, deduplicate_trends, get_all_trending_topics
from .config import Settings
from .fallback import synthesize_fallback_trends, synthesize_social_trends
from .keywords import extract_keywords
from .models import TrendRecord, TrendSource

__all__ = [
    "Settings",
    "TrendAggregator",
    "TrendRecord",
    "TrendSource",
    "deduplicate_trends",
    "extract_keywords",
    "get_all_trending_topics",
    "synthesize_fallback_trends",
    "synthesize_social_trends",
]

__version__ = "0.1.0"
