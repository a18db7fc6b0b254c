"""Tabular export and plain-text reporting for aggregated trends."""
from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Iterable, Tuple

import pandas as pd

from .models import TrendRecord

logger = logging.getLogger(__name__)

COLUMNS = ["rank", "title", "category", "source", "trend_score", "keywords"]


def trends_to_frame(trends: Iterable[TrendRecord]) -> pd.DataFrame:
    """Flatten trend records into a ranked DataFrame."""
    rows = [
        {
            "rank": rank,
            "title": trend.title,
            "category": trend.category,
            "source": trend.source.value,
            "trend_score": trend.trend_score,
            "keywords": ", ".join(trend.keywords),
        }
        for rank, trend in enumerate(trends, start=1)
    ]
    return pd.DataFrame(rows, columns=COLUMNS)


def generate_trends_report(df: pd.DataFrame, timestamp: str) -> str:
    """Generate a plain-text report of an aggregated trend list."""
    total_topics = len(df)

    report_lines = [
        "=" * 80,
        f"TRENDING TOPICS REPORT - {timestamp}",
        "=" * 80,
        "",
        "📊 OVERVIEW:",
        f"  • Total Topics: {total_topics:,}",
    ]

    if total_topics == 0:
        report_lines.extend(["", "No trending topics available.", "=" * 80])
        return "\n".join(report_lines)

    report_lines.extend([
        f"  • Average Trend Score: {df['trend_score'].mean():.1f}/100",
        f"  • Sources: {', '.join(sorted(df['source'].unique()))}",
        "",
        "📡 SOURCE BREAKDOWN:",
    ])

    for source, count in df["source"].value_counts().items():
        percentage = (count / total_topics) * 100
        report_lines.append(f"  • {source}: {count} topics ({percentage:.1f}%)")

    report_lines.extend([
        "",
        "📈 CATEGORY BREAKDOWN:",
    ])

    for category, count in df["category"].value_counts().head(10).items():
        avg_score = df[df["category"] == category]["trend_score"].mean()
        report_lines.append(f"  • {category}: {count} topics - Avg score: {avg_score:.0f}")

    report_lines.extend([
        "",
        "🔝 TOP TOPICS:",
    ])

    for _, topic in df.head(10).iterrows():
        report_lines.append(
            f"  • #{topic['rank']}: {topic['title']} "
            f"({topic['category']}, {topic['source']}, Score: {topic['trend_score']})"
        )
        report_lines.append(f"    Keywords: {topic['keywords']}")

    report_lines.extend([
        "",
        "🔍 NOTES:",
        "  • Scores are rank-based per source and not comparable to search volume",
        "  • Near-duplicate titles are merged, keeping the first occurrence",
        "  • 'synthesized' topics are generated when live sources are unavailable",
        "",
        f"Report generated at: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}",
        "=" * 80,
    ])

    return "\n".join(report_lines)


def save_snapshot(trends: Iterable[TrendRecord], output_dir: Path, timestamp: str) -> Tuple[Path, Path]:
    """Write ``trends_<ts>.csv`` and ``trends_report_<ts>.txt`` into *output_dir*."""
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    df = trends_to_frame(trends)
    csv_path = output_dir / f"trends_{timestamp}.csv"
    report_path = output_dir / f"trends_report_{timestamp}.txt"

    df.to_csv(csv_path, index=False)
    logger.info(f"💾 Trends saved: {csv_path}")

    report_path.write_text(generate_trends_report(df, timestamp), encoding="utf-8")
    logger.info(f"💾 Report saved: {report_path}")
    return csv_path, report_path
