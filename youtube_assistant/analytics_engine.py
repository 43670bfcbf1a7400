"""
YouTube Analytics Engine
Turns raw search-result statistics into scored, classified, aggregated insights.

Per-video derivations:
1. Duration parsing & content classification (Shorts / Mid-form / Long-form)
2. Hashtag extraction
3. Engagement metrics (engagement, like and comment rates)
4. View velocity since publish time
5. Performance score (0-100)

Dataset-level derivations:
6. Trending content
7. Upload day/hour patterns
8. Content gaps and suggestions

Every function is a pure transformation of its arguments. Malformed upstream
data degrades to a safe default (0 seconds, 0% rates, "Unknown") instead of
raising. The current time is always passed in by the caller.
"""

from __future__ import annotations

import math
import re
from collections import Counter
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional, Sequence

import numpy as np
from dateutil import parser as dateparser

from youtube_assistant.config import DEFAULT_ANALYTICS_CONFIG, AnalyticsConfig
from youtube_assistant.models import (
    LONG_FORM,
    MID_FORM,
    SHORTS,
    UNKNOWN,
    AnalysisSummary,
    ContentGaps,
    DurationDistribution,
    DurationInfo,
    EngagementMetrics,
    EnrichedVideo,
    UploadPatterns,
    VelocityMetrics,
    VideoRecord,
)

# Content-type boundaries in seconds; the upper bound of each bucket is inclusive.
SHORTS_MAX_SECONDS = 60
MID_FORM_MAX_SECONDS = 600

# Performance score weights
ENGAGEMENT_WEIGHT = 0.4
LIKE_RATIO_WEIGHT = 0.3
COMMENT_RATIO_WEIGHT = 0.2
VIEW_BONUS = 0.1
VIEW_BONUS_MIN_VIEWS = 1000
SHORTS_DURATION_FACTOR = 0.8
LONG_DURATION_SECONDS = 1200
LONG_DURATION_FACTOR = 0.9

DAY_NAMES = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]

DURATION_PATTERN = re.compile(r"PT(?:(\d+)H)?(?:(\d+)M)?(?:(\d+)S)?")
HASHTAG_PATTERN = re.compile(r"#[\w\u0590-\u05ff]+", re.ASCII)


def coerce_count(value) -> int:
    """Coerce an API statistic to a non-negative integer; anything unusable is 0."""
    if value is None or isinstance(value, bool):
        return 0
    try:
        number = int(value)
    except (TypeError, ValueError, OverflowError):
        try:
            number = int(float(value))
        except (TypeError, ValueError, OverflowError):
            return 0
    return max(number, 0)


def parse_timestamp(value) -> Optional[datetime]:
    """Parse a publish timestamp into an aware datetime (naive values are UTC)."""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        try:
            parsed = dateparser.isoparse(value.strip())
        except (ValueError, OverflowError):
            return None
    else:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


# ===== DURATION =====

def _parse_duration(duration_code) -> Optional[int]:
    if not isinstance(duration_code, str):
        return None
    match = DURATION_PATTERN.fullmatch(duration_code.strip())
    if not match:
        return None

    hours = int(match.group(1) or 0)
    minutes = int(match.group(2) or 0)
    seconds = int(match.group(3) or 0)
    return hours * 3600 + minutes * 60 + seconds


def duration_seconds(duration_code) -> int:
    """
    Parse a compact duration code to seconds.
    Example: PT2M30S = 150 seconds. Absent or malformed codes are 0.
    """
    parsed = _parse_duration(duration_code)
    return parsed if parsed is not None else 0


def classify_duration(seconds: int) -> str:
    if seconds <= SHORTS_MAX_SECONDS:
        return SHORTS
    if seconds <= MID_FORM_MAX_SECONDS:
        return MID_FORM
    return LONG_FORM


def duration_info(duration_code) -> DurationInfo:
    parsed = _parse_duration(duration_code)
    if parsed is None:
        return DurationInfo(total_seconds=0, bucket=UNKNOWN)
    return DurationInfo(total_seconds=parsed, bucket=classify_duration(parsed))


# ===== TEXT =====

def extract_hashtags(title: Optional[str], description: Optional[str]) -> List[str]:
    """Unique lower-cased hashtags from title and description, first-seen order."""
    text = f"{title or ''} {description or ''}"
    hashtags = []
    for tag in HASHTAG_PATTERN.findall(text):
        tag = tag.lower()
        if tag not in hashtags:
            hashtags.append(tag)
    return hashtags


# ===== ENGAGEMENT =====

def calculate_engagement_rate(views, likes, comments) -> float:
    """Engagement rate (%) = (likes + comments) / views * 100."""
    views = coerce_count(views)
    if views == 0:
        return 0.0
    return (coerce_count(likes) + coerce_count(comments)) / views * 100


def calculate_engagement_metrics(
    view_count,
    like_count,
    comment_count,
    duration_secs: int = 0,
    config: AnalyticsConfig = DEFAULT_ANALYTICS_CONFIG,
) -> EngagementMetrics:
    views = coerce_count(view_count)
    likes = coerce_count(like_count)
    comments = coerce_count(comment_count)
    if views == 0:
        return EngagementMetrics()

    engagement_rate = calculate_engagement_rate(views, likes, comments)
    is_high = engagement_rate > config.high_engagement_threshold
    if config.high_engagement_shorts_only:
        is_high = is_high and duration_secs <= SHORTS_MAX_SECONDS

    return EngagementMetrics(
        engagement_rate=engagement_rate,
        like_rate=likes / views * 100,
        comment_rate=comments / views * 100,
        views_per_second=views / duration_secs if duration_secs > 0 else 0.0,
        is_high_engagement=is_high,
    )


def calculate_velocity_metrics(view_count, published_at, now: datetime) -> VelocityMetrics:
    """Views per hour/day since publishing. Future or unparseable timestamps give zeros."""
    published = parse_timestamp(published_at)
    current = parse_timestamp(now)
    if published is None or current is None:
        return VelocityMetrics()

    hours_elapsed = (current - published).total_seconds() / 3600
    if hours_elapsed <= 0:
        return VelocityMetrics()

    views = coerce_count(view_count)
    days_elapsed = hours_elapsed / 24
    return VelocityMetrics(
        views_per_hour=views / hours_elapsed,
        views_per_day=views / days_elapsed,
        hours_elapsed=hours_elapsed,
        days_elapsed=days_elapsed,
    )


def generate_performance_score(
    view_count,
    like_count,
    comment_count,
    subscriber_count=0,
    duration_secs: int = 0,
) -> int:
    """
    Overall performance score (0-100).

    Formula: (min(ER/10, 1) × 0.4 + min(likes/views × 100, 1) × 0.3
              + min(comments/views × 50, 1) × 0.2 + 0.1 if views > 1000)
             × duration factor × 100

    Duration factor is 0.8 for Shorts (<= 60s), 0.9 above 20 minutes, else 1.0.
    subscriber_count is accepted but does not affect the score.
    """
    views = coerce_count(view_count)
    likes = coerce_count(like_count)
    comments = coerce_count(comment_count)

    normalized_engagement = min(calculate_engagement_rate(views, likes, comments) / 10, 1)
    like_ratio = min(likes / views * 100, 1) if views > 0 else 0
    comment_ratio = min(comments / views * 50, 1) if views > 0 else 0
    view_bonus = VIEW_BONUS if views > VIEW_BONUS_MIN_VIEWS else 0

    if duration_secs <= SHORTS_MAX_SECONDS:
        duration_factor = SHORTS_DURATION_FACTOR
    elif duration_secs > LONG_DURATION_SECONDS:
        duration_factor = LONG_DURATION_FACTOR
    else:
        duration_factor = 1.0

    raw_score = (
        normalized_engagement * ENGAGEMENT_WEIGHT
        + like_ratio * LIKE_RATIO_WEIGHT
        + comment_ratio * COMMENT_RATIO_WEIGHT
        + view_bonus
    ) * duration_factor * 100

    # half-up rounding
    return int(math.floor(min(raw_score, 100) + 0.5))


def enrich_video(
    record: VideoRecord,
    now: datetime,
    subscriber_count: Optional[int] = None,
    config: AnalyticsConfig = DEFAULT_ANALYTICS_CONFIG,
) -> EnrichedVideo:
    info = duration_info(record.duration_code)
    return EnrichedVideo(
        record=record,
        duration=info,
        engagement=calculate_engagement_metrics(
            record.view_count, record.like_count, record.comment_count, info.total_seconds, config
        ),
        velocity=calculate_velocity_metrics(record.view_count, record.published_at, now),
        hashtags=tuple(extract_hashtags(record.title, record.description)),
        performance_score=generate_performance_score(
            record.view_count,
            record.like_count,
            record.comment_count,
            subscriber_count or 0,
            info.total_seconds,
        ),
        subscriber_count=subscriber_count,
    )


# ===== DATASET ANALYSIS =====

def identify_trending_content(videos: Iterable, config: AnalyticsConfig = DEFAULT_ANALYTICS_CONFIG) -> list:
    """Videos whose engagement rate meets the trending threshold, input order kept."""
    return [
        video for video in videos
        if calculate_engagement_rate(video.view_count, video.like_count, video.comment_count)
        >= config.trending_threshold
    ]


def _mode(counts: Dict[int, int]) -> Optional[int]:
    # max() keeps the first maximum, so ties go to the lowest key
    if not counts:
        return None
    return max(sorted(counts), key=lambda key: counts[key])


def analyze_upload_patterns(videos: Iterable, config: AnalyticsConfig = DEFAULT_ANALYTICS_CONFIG) -> UploadPatterns:
    """
    Find best days and hours to upload.

    Days are indexed 0=Sunday..6=Saturday in the configured zone. Videos with
    unparseable timestamps are skipped; with no usable timestamps the best
    day and hour are None.
    """
    day_counts = Counter()
    hour_counts = Counter()

    for video in videos:
        published = parse_timestamp(video.published_at)
        if published is None:
            continue
        local = published.astimezone(config.timezone)
        day_counts[local.isoweekday() % 7] += 1
        hour_counts[local.hour] += 1

    day_distribution = {day: day_counts[day] for day in sorted(day_counts)}
    hour_distribution = {hour: hour_counts[hour] for hour in sorted(hour_counts)}
    best_day = _mode(day_distribution)
    best_hour = _mode(hour_distribution)

    return UploadPatterns(
        best_upload_day=DAY_NAMES[best_day] if best_day is not None else None,
        best_upload_hour=f"{best_hour}:00" if best_hour is not None else None,
        day_distribution=day_distribution,
        hour_distribution=hour_distribution,
    )


def generate_content_suggestions(
    durations: DurationDistribution,
    underrepresented_categories: Sequence[str],
    search_query: str,
    config: AnalyticsConfig = DEFAULT_ANALYTICS_CONFIG,
) -> List[str]:
    suggestions = []

    if durations.shorts < durations.mid_form * config.shorts_gap_ratio:
        suggestions.append(f'Consider creating Shorts content about "{search_query}" - underrepresented format')
    if durations.long_form < durations.mid_form * config.long_form_gap_ratio:
        suggestions.append(f'Opportunity for in-depth long-form content on "{search_query}"')

    for category in underrepresented_categories:
        suggestions.append(f'Low competition in {category} for "{search_query}"')

    return suggestions


def identify_content_gaps(
    videos: Sequence,
    search_query: str,
    config: AnalyticsConfig = DEFAULT_ANALYTICS_CONFIG,
) -> ContentGaps:
    """Category and duration distributions, underrepresented categories, suggestions."""
    categories: Dict[str, int] = {}
    shorts = mid_form = long_form = 0

    for video in videos:
        category = video.category or UNKNOWN
        categories[category] = categories.get(category, 0) + 1

        seconds = video.duration_seconds
        if seconds <= SHORTS_MAX_SECONDS:
            shorts += 1
        elif seconds <= MID_FORM_MAX_SECONDS:
            mid_form += 1
        else:
            long_form += 1

    total_videos = len(videos)
    underrepresented = [
        category for category, count in categories.items()
        if total_videos > 0 and count / total_videos < config.underrepresented_share
    ]
    durations = DurationDistribution(shorts=shorts, mid_form=mid_form, long_form=long_form)

    return ContentGaps(
        category_distribution=categories,
        duration_distribution=durations,
        underrepresented_categories=underrepresented,
        suggestions=generate_content_suggestions(durations, underrepresented, search_query, config),
    )


def analyze_dataset(
    videos: Sequence[EnrichedVideo],
    search_query: str,
    config: AnalyticsConfig = DEFAULT_ANALYTICS_CONFIG,
) -> AnalysisSummary:
    """Fold a dataset of enriched videos into a fresh AnalysisSummary."""
    videos = list(videos)
    patterns = analyze_upload_patterns(videos, config)
    gaps = identify_content_gaps(videos, search_query, config)

    engagement_rates = [video.engagement.engagement_rate for video in videos]
    views = [video.view_count for video in videos]
    scores = [video.performance_score for video in videos]

    return AnalysisSummary(
        best_upload_day=patterns.best_upload_day,
        best_upload_hour=patterns.best_upload_hour,
        day_distribution=patterns.day_distribution,
        hour_distribution=patterns.hour_distribution,
        category_distribution=gaps.category_distribution,
        duration_distribution=gaps.duration_distribution,
        underrepresented_categories=gaps.underrepresented_categories,
        suggestions=gaps.suggestions,
        trending_videos=identify_trending_content(videos, config),
        video_count=len(videos),
        average_engagement_rate=float(np.mean(engagement_rates)) if engagement_rates else 0.0,
        median_views=float(np.median(views)) if views else 0.0,
        average_performance_score=float(np.mean(scores)) if scores else 0.0,
        high_engagement_count=sum(1 for video in videos if video.engagement.is_high_engagement),
    )
