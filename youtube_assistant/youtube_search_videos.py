#!/usr/bin/env python3
"""
YouTube Search Fetcher
Searches YouTube Data API v3 for videos matching a term and collects
video details plus channel subscriber counts.

Usage:
    python3 -m youtube_assistant.youtube_search_videos "SEARCH TERM" [MAX_RESULTS]
"""

import json
import re
import sys
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterator, List

from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from youtube_assistant.analytics_engine import coerce_count
from youtube_assistant.config import AppConfig
from youtube_assistant.models import UNKNOWN, VideoRecord

# YouTube caps search/videos/channels page size at 50
PAGE_SIZE = 50
MAX_RESULTS_LIMIT = 200

# Approximate quota cost per request type (units)
SEARCH_COST = 100
LIST_COST = 1

QUOTA_REASONS = {"quotaExceeded", "dailyLimitExceeded"}

CATEGORY_NAMES = {
    "1": "Film & Animation",
    "2": "Autos & Vehicles",
    "10": "Music",
    "15": "Pets & Animals",
    "17": "Sports",
    "19": "Travel & Events",
    "20": "Gaming",
    "22": "People & Blogs",
    "23": "Comedy",
    "24": "Entertainment",
    "25": "News & Politics",
    "26": "Howto & Style",
    "27": "Education",
    "28": "Science & Technology",
}


class YouTubeApiError(Exception):
    """Raised when the YouTube API rejects a request."""

    def __init__(self, message, status=None, reason=None):
        super().__init__(message)
        self.status = status
        self.reason = reason


def query_slug(query) -> str:
    """Filesystem-safe folder name for a search term."""
    slug = re.sub(r"[^\w-]+", "_", query.strip().lower(), flags=re.ASCII).strip("_")
    return slug[:80] or "search"


def get_category_name(category_id) -> str:
    return CATEGORY_NAMES.get(str(category_id or ""), UNKNOWN)


def video_record_from_item(item: dict) -> VideoRecord:
    """Map a videos.list item onto a VideoRecord, defaulting missing fields."""
    snippet = item.get("snippet", {})
    statistics = item.get("statistics", {})
    content_details = item.get("contentDetails", {})
    thumbnail = snippet.get("thumbnails", {}).get("high", {})

    return VideoRecord(
        video_id=item.get("id", ""),
        title=snippet.get("title", ""),
        description=snippet.get("description", "") or "",
        channel_id=snippet.get("channelId", ""),
        channel_title=snippet.get("channelTitle", ""),
        category=get_category_name(snippet.get("categoryId")),
        duration_code=content_details.get("duration"),
        published_at=snippet.get("publishedAt"),
        view_count=coerce_count(statistics.get("viewCount")),
        like_count=coerce_count(statistics.get("likeCount")),
        comment_count=coerce_count(statistics.get("commentCount")),
        tags=tuple(snippet.get("tags", [])),
        has_captions=str(content_details.get("caption", "")).lower() == "true",
        thumbnail_url=thumbnail.get("url"),
    )


def _error_reason(error: HttpError) -> str:
    try:
        payload = json.loads(error.content)
        return payload["error"]["errors"][0].get("reason", "")
    except (ValueError, KeyError, IndexError, TypeError):
        return ""


def translate_http_error(error: HttpError) -> YouTubeApiError:
    status = error.resp.status
    reason = _error_reason(error)

    if status == 403 and reason in QUOTA_REASONS:
        message = "Daily API quota exceeded. Please try again tomorrow or upgrade your quota."
    elif status == 401 or reason == "keyInvalid":
        message = "Invalid API key. Please check your YouTube API key configuration."
    elif status == 403:
        message = "API access forbidden. Please check your API key permissions."
    elif status == 429:
        message = "Rate limit exceeded. Please try again later."
    else:
        message = f"YouTube API error: {error}"
    return YouTubeApiError(message, status=status, reason=reason)


@dataclass
class SearchBatch:
    videos: List[VideoRecord]
    subscriber_counts: Dict[str, int] = field(default_factory=dict)


class YouTubeSearchFetcher:
    def __init__(self, api_key):
        """Initialize YouTube API client"""
        self.youtube = build('youtube', 'v3', developerKey=api_key)
        self.quota_used = 0
        self.request_count = 0

    def _execute(self, request, cost):
        try:
            response = request.execute()
        except HttpError as e:
            raise translate_http_error(e) from e
        self.quota_used += cost
        self.request_count += 1
        return response

    def validate_api_key(self):
        """
        Check the key with a minimal search request.

        Quota and rate-limit errors say nothing about the key, so they are
        raised as YouTubeApiError instead of returning False.
        """
        try:
            self.youtube.search().list(part='snippet', q='test', maxResults=1).execute()
        except HttpError as e:
            error = translate_http_error(e)
            if error.status == 429 or error.reason in QUOTA_REASONS:
                raise error from e
            return False
        self.quota_used += SEARCH_COST
        self.request_count += 1
        return True

    def search_page(self, query, batch_size, page_token=None):
        request = self.youtube.search().list(
            part='snippet',
            q=query,
            type='video',
            maxResults=batch_size,
            pageToken=page_token or None
        )
        return self._execute(request, SEARCH_COST)

    def fetch_video_details(self, video_ids):
        if not video_ids:
            return []
        request = self.youtube.videos().list(
            part='snippet,statistics,contentDetails',
            id=','.join(video_ids)
        )
        response = self._execute(request, LIST_COST)
        return [video_record_from_item(item) for item in response.get('items', [])]

    def fetch_subscriber_counts(self, channel_ids):
        """Map channel id -> subscriber count; hidden counts are left out."""
        if not channel_ids:
            return {}
        request = self.youtube.channels().list(
            part='statistics',
            id=','.join(channel_ids)
        )
        response = self._execute(request, LIST_COST)

        counts = {}
        for channel in response.get('items', []):
            statistics = channel.get('statistics', {})
            if statistics.get('hiddenSubscriberCount') or 'subscriberCount' not in statistics:
                continue
            counts[channel['id']] = coerce_count(statistics['subscriberCount'])
        return counts

    def iter_search_batches(self, query, max_results) -> Iterator[SearchBatch]:
        """
        Page through search results for a query.

        Each page costs one search, one videos.list and one channels.list
        request. Stops when max_results videos were fetched, the API has no
        further page, or a page comes back empty.
        """
        total_fetched = 0
        page_token = None

        while total_fetched < max_results:
            batch_size = min(PAGE_SIZE, max_results - total_fetched)
            search_data = self.search_page(query, batch_size, page_token)
            items = search_data.get('items', [])
            if not items:
                break

            video_ids = [item['id']['videoId'] for item in items if item.get('id', {}).get('videoId')]
            channel_ids = list(dict.fromkeys(
                item['snippet']['channelId'] for item in items if item.get('snippet', {}).get('channelId')
            ))

            videos = self.fetch_video_details(video_ids)
            subscriber_counts = self.fetch_subscriber_counts(channel_ids)
            total_fetched += len(videos)
            yield SearchBatch(videos=videos, subscriber_counts=subscriber_counts)

            page_token = search_data.get('nextPageToken')
            if not page_token:
                break

    def fetch_search_results(self, query, max_results):
        videos = []
        subscriber_counts = {}
        for batch in self.iter_search_batches(query, max_results):
            videos.extend(batch.videos)
            subscriber_counts.update(batch.subscriber_counts)
        return videos[:max_results], subscriber_counts

    def save_data(self, query, videos, subscriber_counts, output_dir):
        """Save fetched data to JSON file"""
        output_path = Path(output_dir)
        output_path.mkdir(parents=True, exist_ok=True)

        data = {
            'query': query,
            'videos': [video.to_dict() for video in videos],
            'subscriberCounts': subscriber_counts,
            'metadata': {
                'fetchedAt': time.strftime('%Y-%m-%dT%H:%M:%SZ', time.gmtime()),
                'videoCount': len(videos),
                'quotaUsed': self.quota_used,
                'requestCount': self.request_count
            }
        }

        output_file = output_path / 'raw_data.json'
        with open(output_file, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2, ensure_ascii=False)

        return str(output_file)


def main():
    """Main execution function"""
    if len(sys.argv) not in (2, 3):
        print("❌ Error: Missing search term")
        print("\nUsage:")
        print("  python3 -m youtube_assistant.youtube_search_videos \"SEARCH TERM\" [MAX_RESULTS]")
        sys.exit(1)

    config = AppConfig.from_env()
    query = sys.argv[1]
    max_results = int(sys.argv[2]) if len(sys.argv) == 3 else config.max_results

    if not config.youtube_api_key:
        print("❌ Error: YOUTUBE_API_KEY not found in .env file")
        sys.exit(1)

    try:
        print("🚀 YouTube Search Fetcher")
        print("=" * 50)
        print(f"Search term: {query}")
        print(f"Max results: {max_results}")
        print()

        fetcher = YouTubeSearchFetcher(config.youtube_api_key)
        videos, subscriber_counts = fetcher.fetch_search_results(query, max_results)
        output_file = fetcher.save_data(query, videos, subscriber_counts, Path(config.output_folder) / query_slug(query))

        print("=" * 50)
        print("✅ SUCCESS!")
        print(f"📁 Data saved to: {output_file}")
        print(f"📊 Videos fetched: {len(videos)}")
        print(f"💰 API quota used: ~{fetcher.quota_used} units")

    except YouTubeApiError as e:
        print(f"❌ YouTube API Error: {e}")
        sys.exit(1)
    except Exception as e:
        print(f"❌ Error: {e}")
        sys.exit(1)


if __name__ == '__main__':
    main()
