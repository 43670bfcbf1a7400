"""Data model for search results and the analytics derived from them."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

SHORTS = "Shorts"
MID_FORM = "Mid-form"
LONG_FORM = "Long-form"
UNKNOWN = "Unknown"


@dataclass(frozen=True)
class VideoRecord:
    video_id: str
    title: str = ""
    description: str = ""
    channel_id: str = ""
    channel_title: str = ""
    category: str = UNKNOWN
    duration_code: Optional[str] = None
    published_at: Optional[str] = None
    view_count: int = 0
    like_count: int = 0
    comment_count: int = 0
    tags: Tuple[str, ...] = ()
    has_captions: bool = False
    thumbnail_url: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.video_id,
            "title": self.title,
            "description": self.description,
            "channelId": self.channel_id,
            "channelTitle": self.channel_title,
            "category": self.category,
            "duration": self.duration_code,
            "publishedAt": self.published_at,
            "tags": list(self.tags),
            "hasCaptions": self.has_captions,
            "thumbnailUrl": self.thumbnail_url,
            "statistics": {
                "viewCount": self.view_count,
                "likeCount": self.like_count,
                "commentCount": self.comment_count,
            },
        }


@dataclass(frozen=True)
class DurationInfo:
    total_seconds: int
    bucket: str

    @property
    def is_shorts(self) -> bool:
        return self.bucket == SHORTS


@dataclass(frozen=True)
class EngagementMetrics:
    engagement_rate: float = 0.0
    like_rate: float = 0.0
    comment_rate: float = 0.0
    views_per_second: float = 0.0
    is_high_engagement: bool = False


@dataclass(frozen=True)
class VelocityMetrics:
    views_per_hour: float = 0.0
    views_per_day: float = 0.0
    hours_elapsed: float = 0.0
    days_elapsed: float = 0.0


@dataclass(frozen=True)
class EnrichedVideo:
    """A fetched video together with every per-video derivation."""

    record: VideoRecord
    duration: DurationInfo
    engagement: EngagementMetrics
    velocity: VelocityMetrics
    hashtags: Tuple[str, ...]
    performance_score: int
    subscriber_count: Optional[int] = None

    # Aggregate analyzers read these flat attributes.
    @property
    def video_id(self) -> str:
        return self.record.video_id

    @property
    def view_count(self) -> int:
        return self.record.view_count

    @property
    def like_count(self) -> int:
        return self.record.like_count

    @property
    def comment_count(self) -> int:
        return self.record.comment_count

    @property
    def published_at(self) -> Optional[str]:
        return self.record.published_at

    @property
    def category(self) -> str:
        return self.record.category

    @property
    def duration_seconds(self) -> int:
        return self.duration.total_seconds

    def to_dict(self) -> dict:
        data = self.record.to_dict()
        data.update({
            "durationSeconds": self.duration.total_seconds,
            "contentType": self.duration.bucket,
            "engagementRate": self.engagement.engagement_rate,
            "likeRate": self.engagement.like_rate,
            "commentRate": self.engagement.comment_rate,
            "viewsPerSecond": self.engagement.views_per_second,
            "isHighEngagement": self.engagement.is_high_engagement,
            "viewsPerHour": self.velocity.views_per_hour,
            "viewsPerDay": self.velocity.views_per_day,
            "hoursElapsed": self.velocity.hours_elapsed,
            "daysElapsed": self.velocity.days_elapsed,
            "hashtags": list(self.hashtags),
            "performanceScore": self.performance_score,
            "subscriberCount": self.subscriber_count,
        })
        return data


@dataclass(frozen=True)
class DurationDistribution:
    shorts: int = 0
    mid_form: int = 0
    long_form: int = 0

    @property
    def total(self) -> int:
        return self.shorts + self.mid_form + self.long_form

    def to_dict(self) -> dict:
        return {"shorts": self.shorts, "midForm": self.mid_form, "longForm": self.long_form}


@dataclass
class UploadPatterns:
    best_upload_day: Optional[str]
    best_upload_hour: Optional[str]
    day_distribution: Dict[int, int]
    hour_distribution: Dict[int, int]


@dataclass
class ContentGaps:
    category_distribution: Dict[str, int]
    duration_distribution: DurationDistribution
    underrepresented_categories: List[str]
    suggestions: List[str]


@dataclass
class AnalysisSummary:
    best_upload_day: Optional[str]
    best_upload_hour: Optional[str]
    day_distribution: Dict[int, int]
    hour_distribution: Dict[int, int]
    category_distribution: Dict[str, int]
    duration_distribution: DurationDistribution
    underrepresented_categories: List[str]
    suggestions: List[str]
    trending_videos: List[EnrichedVideo] = field(default_factory=list)
    video_count: int = 0
    average_engagement_rate: float = 0.0
    median_views: float = 0.0
    average_performance_score: float = 0.0
    high_engagement_count: int = 0

    def to_dict(self) -> dict:
        return {
            "bestUploadDay": self.best_upload_day,
            "bestUploadHour": self.best_upload_hour,
            # JSON object keys are strings
            "dayDistribution": {str(k): v for k, v in self.day_distribution.items()},
            "hourDistribution": {str(k): v for k, v in self.hour_distribution.items()},
            "categoryDistribution": dict(self.category_distribution),
            "durationDistribution": self.duration_distribution.to_dict(),
            "underrepresentedCategories": list(self.underrepresented_categories),
            "suggestions": list(self.suggestions),
            "trendingVideos": [
                {
                    "id": video.video_id,
                    "title": video.record.title,
                    "engagementRate": round(video.engagement.engagement_rate, 2),
                    "views": video.view_count,
                }
                for video in self.trending_videos
            ],
            "summary": {
                "videoCount": self.video_count,
                "averageEngagementRate": round(self.average_engagement_rate, 2),
                "medianViews": round(self.median_views, 1),
                "averagePerformanceScore": round(self.average_performance_score, 1),
                "highEngagementCount": self.high_engagement_count,
                "trendingCount": len(self.trending_videos),
            },
        }
