"""Synthesized trends used when live sources are unavailable.

Both synthesizers are pure functions of the instant they are given: the same
``now`` always produces the same list, while the hour, weekday and month pick
which contextual titles lead it.
"""
from __future__ import annotations

from datetime import datetime
from typing import List

from .models import ScoreCurve, TrendRecord, TrendSource, make_record

FALLBACK_CURVE = ScoreCurve(85, 2, 45)
SOCIAL_FALLBACK_CURVE = ScoreCurve(80, 3, 45)
FALLBACK_MAX_ITEMS = 15
SOCIAL_FALLBACK_MAX_ITEMS = 10

TECH_TRENDS = [
    "AI Agent Automation Tools 2025",
    "Quantum Computing Commercial Applications",
    "Advanced Autonomous Vehicle Deployment",
    "Next-Generation Battery Technology",
    "Smart City Infrastructure Integration",
    "Decentralized Social Media Platforms",
    "Extended Reality (XR) Workplace Solutions",
    "AI-Powered Cybersecurity Systems",
    "Sustainable Tech Manufacturing",
    "Edge Computing Expansion",
]

CURRENT_EVENTS_TRENDS = [
    "Climate Technology Solutions",
    "Mental Health App Innovations",
    "Renewable Energy Smart Grids",
    "Space Technology Commercialization",
    "Personalized Medicine AI",
    "Sustainable Fashion Technology",
]

MORNING_TRENDS = [
    "Morning Productivity AI Tools",
    "Global Market Analysis Platforms",
    "Remote Work Collaboration Software",
]
AFTERNOON_TRENDS = [
    "Business Process Automation",
    "Industry Digital Transformation",
    "Professional AI Development Tools",
]
EVENING_TRENDS = [
    "Streaming Technology Innovations",
    "Gaming AI Integration",
    "Social Media Algorithm Updates",
]

WINTER_TRENDS = [
    "Holiday Tech Gift Trends 2025",
    "Year-End Software Security Updates",
    "New Year Digital Wellness Tools",
]
SPRING_TRENDS = [
    "Spring Startup Innovations",
    "Tech Conference Announcements",
    "Beta Product Launches",
]
SUMMER_TRENDS = [
    "Summer Tech Education Programs",
    "Mobile App Development Trends",
    "Outdoor Smart Technology",
]
AUTUMN_TRENDS = [
    "Back-to-School EdTech Solutions",
    "Educational AI Platforms",
    "Student Technology Accessibility",
]

SOCIAL_MEDIA_TRENDS = [
    "Content Creator Economy Growth",
    "Social Media Algorithm Updates",
    "Influencer Marketing Strategies",
    "Live Streaming Technology",
    "Digital Community Building",
    "User Generated Content Trends",
    "Social Commerce Integration",
    "Brand Engagement Analytics",
    "Viral Content Patterns",
    "Social Media Privacy Updates",
]
WEEKEND_SOCIAL_TRENDS = ["Weekend Entertainment Trends", "Leisure Technology Apps", "Social Gaming Platforms"]
WEEKDAY_SOCIAL_TRENDS = ["Professional Networking", "Business Communication Tools", "Productivity Social Apps"]
MORNING_SOCIAL_TRENDS = ["Morning Social Media Habits", "Global News Discussions", "Trending Breakfast Topics"]
AFTERNOON_SOCIAL_TRENDS = ["Afternoon Social Engagement", "Work-Life Balance Discussions", "Industry Network Updates"]
EVENING_SOCIAL_TRENDS = ["Evening Entertainment Buzz", "Prime Time Social Trends", "Late Night Community Talks"]


def _time_of_day_trends(hour: int) -> List[str]:
    if hour < 8:
        return MORNING_TRENDS
    if hour < 17:
        return AFTERNOON_TRENDS
    return EVENING_TRENDS


def _seasonal_trends(month: int) -> List[str]:
    """Pick the seasonal bucket for a 1-based *month*."""
    if month == 12 or month <= 2:
        return WINTER_TRENDS
    if month <= 5:
        return SPRING_TRENDS
    if month <= 8:
        return SUMMER_TRENDS
    return AUTUMN_TRENDS


def _fallback_category(index: int) -> str:
    if index < 3:
        return "Breaking"
    if index < 6:
        return "Technology"
    if index < 9:
        return "Innovation"
    return "Trending"


def synthesize_fallback_trends(now: datetime | None = None) -> List[TrendRecord]:
    """Return contextual search-style trends for *now* (defaults to local time)."""
    now = now or datetime.now()
    topics = [
        *_time_of_day_trends(now.hour),
        *_seasonal_trends(now.month),
        *CURRENT_EVENTS_TRENDS[:3],
        *TECH_TRENDS[:5],
    ][:FALLBACK_MAX_ITEMS]

    return [
        make_record(topic, _fallback_category(index), TrendSource.SYNTHESIZED, FALLBACK_CURVE.score(index))
        for index, topic in enumerate(topics)
    ]


def synthesize_social_trends(now: datetime | None = None) -> List[TrendRecord]:
    """Return contextual social-media trends for *now*, each suffixed with the year."""
    now = now or datetime.now()

    day_trends = WEEKEND_SOCIAL_TRENDS if now.weekday() >= 5 else WEEKDAY_SOCIAL_TRENDS
    if now.hour < 12:
        time_trends = MORNING_SOCIAL_TRENDS
    elif now.hour < 18:
        time_trends = AFTERNOON_SOCIAL_TRENDS
    else:
        time_trends = EVENING_SOCIAL_TRENDS

    topics = [*day_trends, *time_trends, *SOCIAL_MEDIA_TRENDS[:6]][:SOCIAL_FALLBACK_MAX_ITEMS]

    # Keywords come from the bare topic so the year never crowds them out.
    return [
        make_record(
            f"{topic} {now.year}",
            "Social Media",
            TrendSource.SYNTHESIZED,
            SOCIAL_FALLBACK_CURVE.score(index),
            keyword_text=topic,
        )
        for index, topic in enumerate(topics)
    ]
