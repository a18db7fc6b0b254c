#!/usr/bin/env python3

"""
Trending Topics Fetcher - Aggregate trends from all sources and save a snapshot.
"""

import argparse
import asyncio
import json
import logging
import sys
from datetime import datetime
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from trend_engine.aggregator import TrendAggregator
from trend_engine.api import ALL_SOURCES, get_trends_response
from trend_engine.config import Settings
from trend_engine.models import TrendSource
from trend_engine.report import save_snapshot

logging.basicConfig(level=logging.INFO, format="%(asctime)s | %(levelname)s | %(message)s")
logger = logging.getLogger(__name__)

SOURCE_CHOICES = [ALL_SOURCES] + [source.value for source in TrendSource]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Fetch trending topics and save a CSV + text report")
    parser.add_argument("--source", choices=SOURCE_CHOICES, default=ALL_SOURCES,
                        help="Only keep trends from this source.")
    parser.add_argument("--limit", type=int, default=15,
                        help="Maximum number of trends to keep (default: 15).")
    parser.add_argument("--output-dir", type=Path, default=Path("data"),
                        help="Directory for the CSV and report (default: data/).")
    parser.add_argument("--offline", action="store_true",
                        help="Skip live sources and use synthesized trends only.")
    parser.add_argument("--json", dest="as_json", action="store_true",
                        help="Print the response body as JSON instead of writing files.")
    return parser


def build_aggregator(offline: bool) -> TrendAggregator:
    settings = Settings.from_env()
    if offline:
        # No fetchers: the aggregator goes straight to synthesized trends.
        return TrendAggregator(settings, fetchers=[])
    return TrendAggregator(settings)


async def run(args: argparse.Namespace) -> int:
    aggregator = build_aggregator(args.offline)
    response = await get_trends_response(args.source, args.limit, aggregator=aggregator)

    if response.status_code != 200:
        logger.error(f"❌ Trend fetch failed: {response.body.get('details')}")
        return 1

    if args.as_json:
        print(json.dumps(response.body, indent=2))
        return 0

    trends = response.trends
    timestamp = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
    save_snapshot(trends, args.output_dir, timestamp)
    logger.info(f"🎉 Saved {len(trends)} trending topics")
    return 0


def main() -> None:
    """Main execution function."""
    args = build_parser().parse_args()
    logger.info(f"🚀 Starting trend fetch (source={args.source}, limit={args.limit}, offline={args.offline})")
    sys.exit(asyncio.run(run(args)))


if __name__ == "__main__":
    main()
