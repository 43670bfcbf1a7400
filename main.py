import sys

from youtube_assistant.config import AppConfig
from youtube_assistant.export_to_sheets import SheetsExporter
from youtube_assistant.pipeline import run_search_analysis
from youtube_assistant.settings_store import SettingsStore
from youtube_assistant.youtube_search_videos import YouTubeApiError


def error_suggestions(message):
    """Hints shown under a failed run, keyed off the error text."""
    lowered = message.lower()
    if "quota" in lowered:
        return [
            "Try again tomorrow (quota resets daily)",
            "Reduce the number of results requested",
            "Consider upgrading your API quota in Google Cloud Console",
        ]
    if "api key" in lowered:
        return [
            "Check that your API key is correct",
            "Ensure YouTube Data API v3 is enabled",
            "Verify API key restrictions in Google Cloud Console",
        ]
    if "rate limit" in lowered:
        return [
            "Wait a few minutes before trying again",
            "Reduce the number of results requested",
        ]
    return [
        "Check your internet connection",
        "Verify your search term is valid",
        "Try with fewer results",
    ]


def main():
    if len(sys.argv) not in (2, 3):
        print("Usage: python3 main.py \"SEARCH TERM\" [MAX_RESULTS]")
        sys.exit(1)

    config = AppConfig.from_env()
    query = sys.argv[1]
    max_results = sys.argv[2] if len(sys.argv) == 3 else config.max_results

    store = SettingsStore(config.settings_path)
    try:
        api_key = store.get_api_key()
    except ValueError as e:
        print(f"❌ Error: {e}")
        print("   Fix or delete the settings file, then store your API key again.")
        sys.exit(1)
    if not api_key:
        print("❌ API Key is not configured.")
        print("   Run: python3 -m youtube_assistant.settings_store \"YOUR_API_KEY\"")
        sys.exit(1)

    sheets_exporter = None
    if config.export_to_sheets:
        sheets_exporter = SheetsExporter(config.google_credentials_path, config.google_token_path)

    print(f"\n🚀 YouTube Search Assistant: \"{query}\"")
    try:
        result = run_search_analysis(
            query,
            api_key,
            config.output_folder,
            max_results=max_results,
            config=config.analytics_config(),
            settings_store=store,
            daily_quota=config.daily_quota,
            quota_warning_ratio=config.quota_warning_ratio,
            sheets_exporter=sheets_exporter,
            logger=print,
        )
    except (YouTubeApiError, ValueError, FileNotFoundError) as e:
        print(f"❌ Error: {e}")
        print("\nSuggestions:")
        for suggestion in error_suggestions(str(e)):
            print(f"  • {suggestion}")
        sys.exit(1)

    summary = result["summary"]
    print("\n" + "=" * 50)
    print(f"📊 Videos analyzed: {summary['videos_analyzed']}")
    print(f"🔥 Trending videos: {summary['trending_videos']}")
    print(f"💬 Average engagement rate: {summary['average_engagement_rate']:.2f}%")
    print(f"📅 Best upload day: {summary['best_upload_day'] or 'Not enough data'}")
    print(f"⏰ Best upload time: {summary['best_upload_hour'] or 'Not enough data'}")
    print(f"📁 Excel report: {result['excel_path']}")
    if result["sheets_url"]:
        print(f"🔗 Google Sheets: {result['sheets_url']}")
    print(f"💰 API quota used: ~{result['quota_used']} units")
    print("\n✅ Search Analysis Complete!")


if __name__ == "__main__":
    main()
