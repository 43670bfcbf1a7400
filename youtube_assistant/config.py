"""Configuration for the YouTube search assistant."""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import tzinfo
from typing import Optional

from dateutil import tz
from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return float(raw)


@dataclass(frozen=True)
class AnalyticsConfig:
    """Tunable constants of the analytics engine.

    trending_threshold: minimum engagement rate (%) for a video to count as
        trending; inclusive.
    high_engagement_threshold: engagement rate (%) a video must exceed to be
        flagged as high engagement.
    high_engagement_shorts_only: restrict the high-engagement flag to Shorts.
    underrepresented_share: category share below which a category is reported
        as a content gap.
    shorts_gap_ratio / long_form_gap_ratio: fractions of the mid-form count
        under which Shorts / long-form content is suggested.
    timezone: zone used to bucket upload days and hours; None means the host's
        local time.
    """

    trending_threshold: float = 2.0
    high_engagement_threshold: float = 2.0
    high_engagement_shorts_only: bool = False
    underrepresented_share: float = 0.1
    shorts_gap_ratio: float = 0.3
    long_form_gap_ratio: float = 0.2
    timezone: Optional[tzinfo] = None


DEFAULT_ANALYTICS_CONFIG = AnalyticsConfig()


@dataclass(frozen=True)
class AppConfig:
    youtube_api_key: str
    max_results: int
    output_folder: str
    settings_path: str
    google_credentials_path: str
    google_token_path: str
    export_to_sheets: bool
    report_timezone: str

    trending_threshold: float
    high_engagement_threshold: float
    high_engagement_shorts_only: bool

    daily_quota: int
    quota_warning_ratio: float

    @staticmethod
    def from_env() -> "AppConfig":
        return AppConfig(
            youtube_api_key=os.getenv("YOUTUBE_API_KEY", ""),
            max_results=int(os.getenv("MAX_RESULTS", "25")),
            output_folder=os.getenv("OUTPUT_FOLDER", ".tmp/youtube_searches"),
            settings_path=os.getenv("SETTINGS_PATH", ".tmp/assistant_settings.json"),
            google_credentials_path=os.getenv("GOOGLE_CREDENTIALS_PATH", "credentials.json"),
            google_token_path=os.getenv("GOOGLE_TOKEN_PATH", "token.json"),
            export_to_sheets=_env_bool("EXPORT_TO_SHEETS", False),
            report_timezone=os.getenv("REPORT_TIMEZONE", ""),
            trending_threshold=_env_float("TRENDING_THRESHOLD", 2.0),
            high_engagement_threshold=_env_float("HIGH_ENGAGEMENT_THRESHOLD", 2.0),
            high_engagement_shorts_only=_env_bool("HIGH_ENGAGEMENT_SHORTS_ONLY", False),
            daily_quota=int(os.getenv("DAILY_QUOTA", "10000")),
            quota_warning_ratio=_env_float("QUOTA_WARNING_RATIO", 0.8),
        )

    def analytics_config(self) -> AnalyticsConfig:
        zone = None
        if self.report_timezone.strip():
            zone = tz.gettz(self.report_timezone.strip())
            if zone is None:
                raise ValueError(f"Unknown REPORT_TIMEZONE: {self.report_timezone}")
        return AnalyticsConfig(
            trending_threshold=self.trending_threshold,
            high_engagement_threshold=self.high_engagement_threshold,
            high_engagement_shorts_only=self.high_engagement_shorts_only,
            timezone=zone,
        )
