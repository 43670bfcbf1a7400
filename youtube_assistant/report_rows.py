"""Display rows for the search report grid.

Turns enriched videos and the analysis summary into plain cell values.
Numbers get thousands separators, dates become YYYY.MM.DD, and Sheets
output can carry HYPERLINK / IMAGE formulas.
"""

from __future__ import annotations

import re
from typing import List, Optional

from youtube_assistant.analytics_engine import DURATION_PATTERN, parse_timestamp
from youtube_assistant.models import AnalysisSummary, EnrichedVideo

REPORT_HEADERS = [
    "Category", "Thumbnail", "Video Title", "Views", "Description",
    "Channel Name", "Subscribers", "Upload Date", "Tags", "Hashtags",
    "Likes", "Like Rate (%)", "Comment Rate (%)", "Engagement Rate (%)",
    "Comments", "Duration", "Content Type", "Performance Score",
    "Views/Day", "High Engagement", "Captions Available",
]

SUMMARY_TITLE = "=== CONTENT ANALYSIS ==="
NOT_ENOUGH_DATA = "Not enough data"
DESCRIPTION_PREVIEW_LENGTH = 100
SHEET_NAME_MAX_LENGTH = 100

_UNSAFE_CHARS = re.compile(r"[/\\?*\[\]:]")
FORMULA_PREFIXES = ("=", "+", "-", "@")


def format_number(number) -> str:
    return f"{int(round(float(number or 0))):,}"


def format_date(published_at, zone=None) -> str:
    parsed = parse_timestamp(published_at)
    if parsed is None:
        return ""
    return parsed.astimezone(zone).strftime("%Y.%m.%d")


def format_duration(duration_code) -> str:
    """PT1H2M3S -> 1:02:03, PT4M13S -> 04:13; unparseable codes -> 0:00."""
    if not isinstance(duration_code, str):
        return "0:00"
    match = DURATION_PATTERN.fullmatch(duration_code.strip())
    if not match:
        return "0:00"

    hours, minutes, seconds = (int(group or 0) for group in match.groups())
    prefix = f"{hours}:" if hours else ""
    return f"{prefix}{minutes:02d}:{seconds:02d}"


def truncate_description(description: Optional[str], max_length: int = DESCRIPTION_PREVIEW_LENGTH) -> str:
    description = description or ""
    if len(description) > max_length:
        return f"{description[:max_length]}..."
    return description


def safe_title(title: str) -> str:
    return _UNSAFE_CHARS.sub("-", title or "").replace('"', "'")


def sanitize_sheet_name(name: str) -> str:
    return _UNSAFE_CHARS.sub("-", (name or "")[:SHEET_NAME_MAX_LENGTH])


def quote_formula_text(value):
    """Prefix an apostrophe so Sheets keeps user text like '=cmd' or '-1 tip' literal."""
    if isinstance(value, str) and value.startswith(FORMULA_PREFIXES):
        return f"'{value}"
    return value


def video_url(video_id: str) -> str:
    return f"https://www.youtube.com/watch?v={video_id}"


def build_video_row(video: EnrichedVideo, use_formulas: bool = False, zone=None) -> list:
    record = video.record
    engagement = video.engagement

    def text(value):
        return quote_formula_text(value) if use_formulas else value

    if use_formulas:
        title_cell = f'=HYPERLINK("{video_url(record.video_id)}", "{safe_title(record.title)}")'
        thumbnail_cell = f'=IMAGE("{record.thumbnail_url}", 4, 120, 90)' if record.thumbnail_url else "No thumbnail"
    else:
        title_cell = record.title
        thumbnail_cell = record.thumbnail_url or "No thumbnail"

    if video.subscriber_count is not None:
        subscribers = format_number(video.subscriber_count)
    else:
        subscribers = "No subscriber data"

    return [
        text(record.category),
        thumbnail_cell,
        title_cell,
        format_number(record.view_count),
        text(truncate_description(record.description)),
        text(record.channel_title),
        subscribers,
        format_date(record.published_at, zone),
        text(", ".join(record.tags)),
        ", ".join(video.hashtags),
        format_number(record.like_count),
        f"{engagement.like_rate:.2f}%" if record.view_count > 0 else "No views",
        f"{engagement.comment_rate:.2f}%" if record.comment_count > 0 else "No comments",
        f"{engagement.engagement_rate:.2f}%",
        format_number(record.comment_count),
        format_duration(record.duration_code),
        video.duration.bucket,
        video.performance_score,
        format_number(video.velocity.views_per_day),
        "Yes" if engagement.is_high_engagement else "No",
        "Yes" if record.has_captions else "No",
    ]


def build_summary_rows(summary: AnalysisSummary, use_formulas: bool = False) -> List[list]:
    """Closing report section, one value per row."""
    # a leading apostrophe keeps Sheets from reading the title as a formula
    title = f"'{SUMMARY_TITLE}" if use_formulas else SUMMARY_TITLE
    rows = [
        [title],
        [f"Best Upload Day: {summary.best_upload_day or NOT_ENOUGH_DATA}"],
        [f"Best Upload Time: {summary.best_upload_hour or NOT_ENOUGH_DATA}"],
        [f"Trending Videos: {len(summary.trending_videos)} of {summary.video_count}"],
        [f"Average Engagement Rate: {summary.average_engagement_rate:.2f}%"],
        [f"Median Views: {format_number(summary.median_views)}"],
    ]

    if summary.suggestions:
        rows.append(["Content Opportunities:"])
        rows.extend([f"• {suggestion}"] for suggestion in summary.suggestions)

    return rows
