import json

import pytest

from trend_engine.models import TrendSource
from trend_engine.parsers import (
    parse_github_trending,
    parse_reddit_hot,
    parse_reddit_technology,
    parse_reddit_worldnews,
    parse_serpapi_related_queries,
    parse_serpapi_trending,
    parse_syndication_feed,
    parse_twitter_trends,
)


def _reddit(posts: list[dict]) -> str:
    return json.dumps({"kind": "Listing", "data": {"children": [{"kind": "t3", "data": p} for p in posts]}})


def _scores(records) -> list[int]:
    return [r.trend_score for r in records]


# ---------------------------------------------------------------------------
# SerpAPI
# ---------------------------------------------------------------------------


def test_serpapi_trending_searches() -> None:
    raw = json.dumps(
        {
            "trending_searches": [
                {"query": "world series", "categories": [{"id": 17, "name": "Sports"}]},
                {"query": "northern lights"},
                {"query": None},
                {"query": "mortgage rates", "categories": []},
            ]
        }
    )
    records = parse_serpapi_trending(raw)
    assert [r.title for r in records] == ["world series", "northern lights", "mortgage rates"]
    assert [r.category for r in records] == ["Sports", "Trending", "Trending"]
    # Scores follow the position in the payload, including skipped entries.
    assert _scores(records) == [95, 92, 86]
    assert all(r.source is TrendSource.SEARCH_TRENDS for r in records)


def test_serpapi_score_floor() -> None:
    raw = json.dumps({"trending_searches": [{"query": f"topic {i}"} for i in range(15)]})
    records = parse_serpapi_trending(raw)
    assert len(records) == 10
    assert records[-1].trend_score == 70
    assert _scores(records) == sorted(_scores(records), reverse=True)


def test_serpapi_falls_back_to_daily_then_realtime() -> None:
    daily = json.dumps({"trending_searches": [], "daily_search_trends": [{"query": "eclipse"}]})
    records = parse_serpapi_trending(daily)
    assert [(r.title, r.category, r.trend_score) for r in records] == [("eclipse", "Daily Trends", 90)]

    realtime = json.dumps({"daily_search_trends": [{"query": None}], "realtime_search_trends": [{"query": "earthquake"}]})
    records = parse_serpapi_trending(realtime)
    assert [(r.title, r.category, r.trend_score) for r in records] == [("earthquake", "Realtime Trends", 88)]


def test_serpapi_related_queries_skip_known_titles() -> None:
    raw = json.dumps(
        {
            "related_queries": {
                "rising": [{"query": "chatgpt"}, {"query": "gemini ai"}, {"query": "ai act"}],
                "top": [{"query": "ai stocks"}],
            }
        }
    )
    records = parse_serpapi_related_queries(raw, existing_titles=["ChatGPT outage"])
    assert [(r.title, r.category, r.trend_score) for r in records] == [
        ("gemini ai", "Rising Searches", 83),
        ("ai act", "Rising Searches", 81),
        ("ai stocks", "Related Searches", 80),
    ]


def test_serpapi_related_top_only_while_short() -> None:
    raw = json.dumps({"related_queries": {"top": [{"query": "weather radar"}]}})
    existing = [f"existing {i}" for i in range(8)]
    assert parse_serpapi_related_queries(raw, existing_titles=existing) == []


# ---------------------------------------------------------------------------
# Reddit
# ---------------------------------------------------------------------------


def test_reddit_hot_filters_low_engagement_and_uses_subreddit() -> None:
    raw = _reddit(
        [
            {"title": "Massive solar flare hits Earth", "ups": 5400, "subreddit": "space"},
            {"title": "Low effort post", "ups": 100},
            {"title": "Nobody knows the subreddit", "ups": 2000},
        ]
    )
    records = parse_reddit_hot(raw)
    assert [(r.title, r.category, r.trend_score) for r in records] == [
        ("Massive solar flare hits Earth", "space", 90),
        ("Nobody knows the subreddit", "General", 80),
    ]


def test_reddit_hot_takes_at_most_eight() -> None:
    raw = _reddit([{"title": f"Post number {i}", "ups": 1000} for i in range(20)])
    records = parse_reddit_hot(raw)
    assert len(records) == 8
    assert _scores(records) == [90, 85, 80, 75, 70, 65, 60, 60]


def test_reddit_technology_and_worldnews_rules() -> None:
    tech = parse_reddit_technology(_reddit([{"title": "New chip", "ups": 51}, {"title": "Old chip", "ups": 50}]))
    assert [(r.title, r.category, r.trend_score) for r in tech] == [("New chip", "Technology", 85)]

    world = parse_reddit_worldnews(
        _reddit([{"title": f"Headline {i}", "ups": 201} for i in range(7)])
    )
    assert len(world) == 5
    assert {r.category for r in world} == {"World News"}
    assert _scores(world) == [88, 84, 80, 76, 72]


# ---------------------------------------------------------------------------
# GitHub
# ---------------------------------------------------------------------------


def test_github_scenario() -> None:
    records = parse_github_trending(json.dumps({"items": [{"name": "foo", "description": "bar baz"}]}))
    assert len(records) == 1
    record = records[0]
    assert record.title == "foo: bar baz"
    assert record.trend_score == 80
    assert record.category == "Technology"
    assert record.keywords == ["foo", "bar", "baz"]


def test_github_truncates_long_titles_and_skips_incomplete_repos() -> None:
    raw = json.dumps(
        {
            "items": [
                {"name": "no-description", "description": None},
                {"name": "verbose", "description": "x" * 200},
            ]
        }
    )
    records = parse_github_trending(raw)
    assert len(records) == 1
    assert len(records[0].title) == 100
    assert records[0].title.endswith("...")
    assert records[0].trend_score == 77


# ---------------------------------------------------------------------------
# RSS / Atom
# ---------------------------------------------------------------------------

RSS = """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0"><channel>
  <title>Daily Search Trends</title>
  <item><title><![CDATA[Taylor Swift]]></title></item>
  <item><title>Google Pixel 9 review</title></item>
  <item><title>&lt;![CDATA[Solar Eclipse]]&gt;</title></item>
</channel></rss>"""

ATOM = """<?xml version="1.0" encoding="UTF-8"?>
<feed xmlns="http://www.w3.org/2005/Atom">
  <title>Trends</title>
  <entry><title>Mars Rover Discovery</title></entry>
  <entry><title>Google I/O recap</title></entry>
</feed>"""


def test_rss_items_strip_cdata_and_brand() -> None:
    records = parse_syndication_feed(RSS)
    assert [(r.title, r.trend_score) for r in records] == [("Taylor Swift", 95), ("Solar Eclipse", 85)]
    assert all(r.category == "Trending" for r in records)


def test_atom_entries_used_when_no_items() -> None:
    records = parse_syndication_feed(ATOM)
    assert [(r.title, r.trend_score) for r in records] == [("Mars Rover Discovery", 95)]


def test_rss_custom_brand() -> None:
    records = parse_syndication_feed(RSS, brand="taylor")
    assert [r.title for r in records] == ["Google Pixel 9 review", "Solar Eclipse"]


def test_rss_items_drop_feed_boilerplate_titles() -> None:
    raw = """<rss><channel>
  <item><title>Daily Search Trends for Monday</title></item>
  <item><title>Northern Lights Forecast</title></item>
</channel></rss>"""
    records = parse_syndication_feed(raw)
    assert [(r.title, r.trend_score) for r in records] == [("Northern Lights Forecast", 90)]


def test_atom_entries_keep_titles_mentioning_trends() -> None:
    raw = """<feed xmlns="http://www.w3.org/2005/Atom">
  <entry><title>Fashion Trends Autumn</title></entry>
</feed>"""
    assert [r.title for r in parse_syndication_feed(raw)] == ["Fashion Trends Autumn"]


# ---------------------------------------------------------------------------
# Twitter
# ---------------------------------------------------------------------------


def test_twitter_filters_noise() -> None:
    raw = json.dumps(
        [
            {
                "trends": [
                    {"name": "#MondayMotivation"},
                    {"name": "123456"},
                    {"name": "abc"},
                    {"name": "Twitter Blue"},
                    {"name": "Champions League", "tweet_volume": 120000},
                ],
                "locations": [{"name": "Worldwide", "woeid": 1}],
            }
        ]
    )
    records = parse_twitter_trends(raw)
    assert [(r.title, r.category, r.source, r.trend_score) for r in records] == [
        ("Champions League", "Social Media", TrendSource.SOCIAL, 74)
    ]


# ---------------------------------------------------------------------------
# Robustness
# ---------------------------------------------------------------------------

MALFORMED = [
    "",
    "{",
    "[]",
    "null",
    '{"data": "oops"}',
    '{"items": {"name": 1}}',
    '{"trending_searches": "nope"}',
    "<rss><item>",
    "not even close",
]

ALL_PARSERS = [
    parse_serpapi_trending,
    parse_serpapi_related_queries,
    parse_reddit_hot,
    parse_reddit_technology,
    parse_reddit_worldnews,
    parse_github_trending,
    parse_syndication_feed,
    parse_twitter_trends,
]


@pytest.mark.parametrize("parser", ALL_PARSERS, ids=lambda p: p.__name__)
@pytest.mark.parametrize("raw", MALFORMED)
def test_parsers_never_raise_on_malformed_input(parser, raw: str) -> None:
    assert parser(raw) == []


@pytest.mark.parametrize("parser", ALL_PARSERS, ids=lambda p: p.__name__)
def test_parsers_handle_empty_shapes(parser) -> None:
    for raw in ('{"data": {"children": []}}', '{"items": []}', '[{"trends": []}]', "<rss><channel/></rss>"):
        assert parser(raw) == []
