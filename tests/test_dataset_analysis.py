import unittest
from datetime import datetime, timezone

from dateutil import tz

from youtube_assistant.analytics_engine import (
    analyze_dataset,
    analyze_upload_patterns,
    calculate_engagement_rate,
    enrich_video,
    identify_content_gaps,
    identify_trending_content,
)
from youtube_assistant.config import AnalyticsConfig
from youtube_assistant.models import VideoRecord

NOW = datetime(2025, 2, 1, tzinfo=timezone.utc)
UTC_CONFIG = AnalyticsConfig(timezone=timezone.utc)


def _video(
    video_id,
    duration="PT5M",
    published_at="2025-01-06T15:00:00Z",
    views=1000,
    likes=10,
    comments=0,
    category="Education",
):
    record = VideoRecord(
        video_id=video_id,
        title=f"Video {video_id}",
        category=category,
        duration_code=duration,
        published_at=published_at,
        view_count=views,
        like_count=likes,
        comment_count=comments,
    )
    return enrich_video(record, NOW, config=UTC_CONFIG)


class TrendingTests(unittest.TestCase):
    def test_threshold_is_inclusive_and_order_kept(self):
        videos = [
            _video("a", views=100, likes=5),
            _video("b", views=100, likes=1),
            _video("c", views=100, likes=2),
            _video("d", views=0, likes=0),
        ]
        trending = identify_trending_content(videos)
        self.assertEqual([v.video_id for v in trending], ["a", "c"])

    def test_custom_threshold(self):
        videos = [_video("a", views=100, likes=5), _video("b", views=100, likes=3)]
        trending = identify_trending_content(videos, AnalyticsConfig(trending_threshold=4.0))
        self.assertEqual([v.video_id for v in trending], ["a"])

    def test_metrics_and_trending_agree(self):
        videos = [_video(str(i), views=1000, likes=i * 3, comments=i) for i in range(10)]
        trending_ids = {v.video_id for v in identify_trending_content(videos)}
        for video in videos:
            self.assertEqual(
                video.engagement.engagement_rate,
                calculate_engagement_rate(video.view_count, video.like_count, video.comment_count),
            )
            self.assertEqual(video.video_id in trending_ids, video.engagement.engagement_rate >= 2.0)


class UploadPatternTests(unittest.TestCase):
    def test_best_day_and_hour(self):
        videos = [
            _video("a", published_at="2025-01-06T15:00:00Z"),  # Monday
            _video("b", published_at="2025-01-13T15:30:00Z"),  # Monday
            _video("c", published_at="2025-01-08T09:00:00Z"),  # Wednesday
        ]
        patterns = analyze_upload_patterns(videos, UTC_CONFIG)
        self.assertEqual(patterns.best_upload_day, "Monday")
        self.assertEqual(patterns.best_upload_hour, "15:00")
        self.assertEqual(patterns.day_distribution, {1: 2, 3: 1})
        self.assertEqual(patterns.hour_distribution, {9: 1, 15: 2})

    def test_three_mondays_beat_one_tuesday(self):
        videos = [
            _video("a", published_at="2025-01-06T10:00:00Z"),
            _video("b", published_at="2025-01-13T11:00:00Z"),
            _video("c", published_at="2025-01-20T12:00:00Z"),
            _video("d", published_at="2025-01-07T10:00:00Z"),  # Tuesday
        ]
        patterns = analyze_upload_patterns(videos, UTC_CONFIG)
        self.assertEqual(patterns.best_upload_day, "Monday")
        self.assertEqual(patterns.day_distribution, {1: 3, 2: 1})

    def test_ties_go_to_lowest_index(self):
        videos = [
            _video("a", published_at="2025-01-11T10:00:00Z"),  # Saturday
            _video("b", published_at="2025-01-05T08:00:00Z"),  # Sunday
        ]
        patterns = analyze_upload_patterns(videos, UTC_CONFIG)
        self.assertEqual(patterns.best_upload_day, "Sunday")
        self.assertEqual(patterns.best_upload_hour, "8:00")

    def test_empty_dataset(self):
        patterns = analyze_upload_patterns([], UTC_CONFIG)
        self.assertIsNone(patterns.best_upload_day)
        self.assertIsNone(patterns.best_upload_hour)
        self.assertEqual(patterns.day_distribution, {})
        self.assertEqual(patterns.hour_distribution, {})

    def test_unparseable_timestamps_are_skipped(self):
        videos = [
            _video("a", published_at="not a date"),
            _video("b", published_at=None),
            _video("c", published_at="2025-01-10T20:00:00Z"),  # Friday
        ]
        patterns = analyze_upload_patterns(videos, UTC_CONFIG)
        self.assertEqual(patterns.best_upload_day, "Friday")
        self.assertEqual(sum(patterns.day_distribution.values()), 1)

    def test_configured_timezone(self):
        config = AnalyticsConfig(timezone=tz.gettz("America/New_York"))
        patterns = analyze_upload_patterns([_video("a", published_at="2025-01-06T02:00:00Z")], config)
        self.assertEqual(patterns.best_upload_day, "Sunday")
        self.assertEqual(patterns.best_upload_hour, "21:00")


class ContentGapTests(unittest.TestCase):
    def test_suggestions_in_rule_order(self):
        videos = [_video(str(i), duration="PT5M") for i in range(10)]
        videos.append(_video("g", duration="PT5M", category="Gaming"))

        gaps = identify_content_gaps(videos, "python tips")

        self.assertEqual(gaps.category_distribution, {"Education": 10, "Gaming": 1})
        self.assertEqual(gaps.duration_distribution.mid_form, 11)
        self.assertEqual(gaps.underrepresented_categories, ["Gaming"])
        self.assertEqual(gaps.suggestions, [
            'Consider creating Shorts content about "python tips" - underrepresented format',
            'Opportunity for in-depth long-form content on "python tips"',
            'Low competition in Gaming for "python tips"',
        ])

    def test_ten_percent_share_is_not_underrepresented(self):
        videos = [_video(str(i)) for i in range(9)] + [_video("g", category="Gaming")]
        gaps = identify_content_gaps(videos, "q")
        self.assertEqual(gaps.underrepresented_categories, [])

    def test_balanced_durations_have_no_format_suggestions(self):
        videos = (
            [_video(f"s{i}", duration="PT30S") for i in range(3)]
            + [_video(f"m{i}", duration="PT5M") for i in range(4)]
            + [_video(f"l{i}", duration="PT25M") for i in range(3)]
        )
        gaps = identify_content_gaps(videos, "q")
        self.assertEqual(gaps.suggestions, [])
        self.assertEqual(gaps.duration_distribution.to_dict(), {"shorts": 3, "midForm": 4, "longForm": 3})

    def test_empty_dataset(self):
        gaps = identify_content_gaps([], "q")
        self.assertEqual(gaps.category_distribution, {})
        self.assertEqual(gaps.duration_distribution.total, 0)
        self.assertEqual(gaps.underrepresented_categories, [])
        self.assertEqual(gaps.suggestions, [])

    def test_distributions_sum_to_dataset_size(self):
        videos = [
            _video("a", duration="PT1M"),
            _video("b", duration="PT1M1S"),
            _video("c", duration="PT10M"),
            _video("d", duration="PT10M1S"),
            _video("e", duration=None, category="Music"),
        ]
        gaps = identify_content_gaps(videos, "q")
        self.assertEqual(gaps.duration_distribution.to_dict(), {"shorts": 2, "midForm": 2, "longForm": 1})
        self.assertEqual(gaps.duration_distribution.total, len(videos))
        self.assertEqual(sum(gaps.category_distribution.values()), len(videos))

    def test_deterministic(self):
        videos = [_video(str(i), category=["Education", "Music", "Gaming"][i % 3]) for i in range(12)]
        self.assertEqual(identify_content_gaps(videos, "q"), identify_content_gaps(videos, "q"))


class AnalyzeDatasetTests(unittest.TestCase):
    def test_summary(self):
        videos = [
            _video("a", views=1000, likes=50, comments=10, published_at="2025-01-06T15:00:00Z"),
            _video("b", views=3000, likes=15, comments=0, published_at="2025-01-13T15:00:00Z"),
            _video("c", views=2000, likes=30, comments=10, published_at="2025-01-08T09:00:00Z"),
        ]
        summary = analyze_dataset(videos, "python tips", UTC_CONFIG)

        self.assertEqual(summary.video_count, 3)
        self.assertEqual(summary.best_upload_day, "Monday")
        self.assertEqual([v.video_id for v in summary.trending_videos], ["a", "c"])
        self.assertEqual(summary.median_views, 2000.0)
        self.assertAlmostEqual(summary.average_engagement_rate, (6.0 + 0.5 + 2.0) / 3)
        self.assertEqual(summary.high_engagement_count, 1)

        data = summary.to_dict()
        self.assertEqual(data["dayDistribution"], {"1": 2, "3": 1})
        self.assertEqual(data["summary"]["trendingCount"], 2)
        self.assertEqual(data["summary"]["videoCount"], 3)
        self.assertEqual(data["trendingVideos"][0]["id"], "a")

    def test_empty_dataset(self):
        summary = analyze_dataset([], "q", UTC_CONFIG)
        self.assertEqual(summary.video_count, 0)
        self.assertIsNone(summary.best_upload_day)
        self.assertEqual(summary.trending_videos, [])
        self.assertEqual(summary.average_engagement_rate, 0.0)
        self.assertEqual(summary.median_views, 0.0)


if __name__ == "__main__":
    unittest.main()
