"""Search-and-analyze pipeline wiring the fetcher, engine and exporters."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Dict, Optional

from youtube_assistant.analytics_engine import analyze_dataset, enrich_video
from youtube_assistant.config import DEFAULT_ANALYTICS_CONFIG, AnalyticsConfig
from youtube_assistant.export_to_excel import ExcelExporter
from youtube_assistant.models import AnalysisSummary
from youtube_assistant.settings_store import SettingsStore, record_quota_usage
from youtube_assistant.youtube_search_videos import (
    MAX_RESULTS_LIMIT,
    YouTubeSearchFetcher,
    query_slug,
)

PROGRESS_BAR_CELLS = 20


def validate_search_query(query) -> str:
    query = str(query or "").strip()
    if not query:
        raise ValueError("Search term required. Examples: 'JavaScript tutorial', 'cooking recipes'.")
    return query


def validate_max_results(max_results) -> int:
    try:
        value = int(max_results)
    except (TypeError, ValueError):
        value = 0
    if value < 1 or value > MAX_RESULTS_LIMIT:
        raise ValueError(f"Invalid result count: enter a number between 1 and {MAX_RESULTS_LIMIT}.")
    return value


def progress_line(fetched: int, requested: int) -> str:
    percent = round(fetched / requested * 100) if requested else 100
    filled = min(percent // 5, PROGRESS_BAR_CELLS)
    bar = "█" * filled + "░" * (PROGRESS_BAR_CELLS - filled)
    return f"🔄 Progress: {bar} {percent}% ({fetched}/{requested})"


def _emit(logger: Optional[Callable[[str], None]], message: str) -> None:
    if logger:
        logger(message)


def extract_summary_metrics(analysis: Dict) -> Dict:
    summary = analysis.get("summary", {})
    return {
        "videos_analyzed": int(summary.get("videoCount", 0)),
        "trending_videos": int(summary.get("trendingCount", 0)),
        "high_engagement_videos": int(summary.get("highEngagementCount", 0)),
        "average_engagement_rate": float(summary.get("averageEngagementRate", 0.0)),
        "best_upload_day": analysis.get("bestUploadDay"),
        "best_upload_hour": analysis.get("bestUploadHour"),
        "suggestions": len(analysis.get("suggestions", [])),
    }


def run_search_analysis(
    query: str,
    api_key: Optional[str],
    output_folder: str,
    max_results: int = 25,
    config: AnalyticsConfig = DEFAULT_ANALYTICS_CONFIG,
    now: Optional[datetime] = None,
    settings_store: Optional[SettingsStore] = None,
    daily_quota: int = 10000,
    quota_warning_ratio: float = 0.8,
    sheets_exporter=None,
    fetcher=None,
    logger: Optional[Callable[[str], None]] = None,
) -> Dict:
    """Fetch, analyze and export one search; returns paths and summary metadata."""
    query = validate_search_query(query)
    max_results = validate_max_results(max_results)
    if fetcher is None:
        if not api_key:
            raise ValueError("API Key is not configured. Please set up your API Key first.")
        fetcher = YouTubeSearchFetcher(api_key)
        _emit(logger, "🔑 Validating API key...")
        if not fetcher.validate_api_key():
            raise ValueError("Invalid API key. Please check your YouTube API key configuration.")

    now = now or datetime.now(timezone.utc)
    output_dir = Path(output_folder) / query_slug(query)
    output_dir.mkdir(parents=True, exist_ok=True)

    _emit(logger, f"🔄 Initializing YouTube data fetch for \"{query}\"...")

    records = []
    enriched = []
    subscriber_counts: Dict[str, int] = {}
    for batch in fetcher.iter_search_batches(query, max_results):
        subscriber_counts.update(batch.subscriber_counts)
        for record in batch.videos[:max_results - len(enriched)]:
            records.append(record)
            enriched.append(enrich_video(record, now, subscriber_counts.get(record.channel_id), config))
        _emit(logger, progress_line(len(enriched), max_results))

    raw_data_path = Path(fetcher.save_data(query, records, subscriber_counts, output_dir))
    _emit(logger, f"Raw data saved: {raw_data_path}")

    summary: AnalysisSummary = analyze_dataset(enriched, query, config)
    analysis_data = summary.to_dict()
    analysis_data["query"] = query
    analysis_data["analyzedAt"] = now.isoformat()
    analysis_data["videos"] = [video.to_dict() for video in enriched]

    analysis_path = output_dir / "analysis.json"
    with analysis_path.open("w", encoding="utf-8") as analysis_file:
        json.dump(analysis_data, analysis_file, indent=2, ensure_ascii=False)
    _emit(logger, f"Analysis saved: {analysis_path}")

    excel_path = ExcelExporter(query, enriched, summary, config.timezone).export(output_dir / "search_report.xlsx")
    _emit(logger, f"Excel report saved: {excel_path}")

    sheets_url = None
    if sheets_exporter is not None:
        sheets_url = sheets_exporter.export(query, enriched, summary, config.timezone)
        _emit(logger, f"Google Sheets report: {sheets_url}")

    quota_warning = None
    if settings_store is not None:
        quota_warning = record_quota_usage(
            settings_store, fetcher.quota_used, now.date(), daily_quota, quota_warning_ratio
        )
        if quota_warning:
            _emit(logger, f"⚠️ {quota_warning}")

    _emit(logger, f"✅ Completed! Analyzed {len(enriched)} videos for \"{query}\"")

    return {
        "query": query,
        "raw_data_path": str(raw_data_path),
        "analysis_path": str(analysis_path),
        "excel_path": str(excel_path),
        "sheets_url": sheets_url,
        "summary": extract_summary_metrics(analysis_data),
        "quota_used": fetcher.quota_used,
        "quota_warning": quota_warning,
    }
