#!/usr/bin/env python3
"""
Settings Store
Small JSON-file key/value store holding the YouTube API key and daily
quota usage between runs.

Usage:
    python3 -m youtube_assistant.settings_store "YOUR_API_KEY"
"""

from __future__ import annotations

import json
import os
import sys
from datetime import date
from pathlib import Path
from typing import Any, Optional

from youtube_assistant.config import AppConfig

API_KEY_SETTING = "apiKey"
API_KEY_PLACEHOLDER = "YOUR_API_KEY_HERE"


class SettingsStore:
    def __init__(self, path):
        self.path = Path(path)

    def _load(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            with self.path.open("r", encoding="utf-8") as settings_file:
                data = json.load(settings_file)
        except json.JSONDecodeError as e:
            raise ValueError(f"Settings file is not valid JSON: {self.path} ({e})") from e
        if not isinstance(data, dict):
            raise ValueError(f"Settings file must hold a JSON object: {self.path}")
        return data

    def _save(self, data: dict) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("w", encoding="utf-8") as settings_file:
            json.dump(data, settings_file, indent=2, ensure_ascii=False)

    def get(self, key: str, default: Any = None) -> Any:
        return self._load().get(key, default)

    def set(self, key: str, value: Any) -> None:
        data = self._load()
        data[key] = value
        self._save(data)

    def get_api_key(self) -> Optional[str]:
        """Stored API key, else YOUTUBE_API_KEY; None when neither is usable."""
        stored = self.get(API_KEY_SETTING)
        if stored is not None and not isinstance(stored, str):
            raise ValueError(f"Stored API key must be a string, found {type(stored).__name__}.")
        api_key = (stored or os.getenv("YOUTUBE_API_KEY", "")).strip()
        if not api_key or api_key == API_KEY_PLACEHOLDER:
            return None
        return api_key

    def set_api_key(self, api_key: str) -> None:
        api_key = (api_key or "").strip()
        if not api_key:
            raise ValueError("Please enter a valid API key.")
        self.set(API_KEY_SETTING, api_key)


def record_quota_usage(
    store: SettingsStore,
    units: int,
    today: date,
    daily_quota: int = 10000,
    warning_ratio: float = 0.8,
) -> Optional[str]:
    """
    Add units to today's quota usage.

    Returns a warning message once usage passes warning_ratio of the daily
    quota, otherwise None.
    """
    usage_key = f"quota_usage_{today.isoformat()}"
    new_usage = int(store.get(usage_key, 0)) + units
    store.set(usage_key, new_usage)

    if new_usage <= daily_quota * warning_ratio:
        return None

    remaining = daily_quota - new_usage
    return (
        f"Quota Warning: You've used approximately {round(new_usage / daily_quota * 100)}% "
        f"of your daily API quota. Estimated remaining quota: {remaining} units. "
        "Consider reducing result counts or waiting until tomorrow for quota reset."
    )


def main():
    """Store an API key for later runs"""
    if len(sys.argv) != 2:
        print("❌ Error: Missing API key")
        print("\nUsage:")
        print("  python3 -m youtube_assistant.settings_store \"YOUR_API_KEY\"")
        sys.exit(1)

    config = AppConfig.from_env()
    store = SettingsStore(config.settings_path)

    try:
        store.set_api_key(sys.argv[1])
    except ValueError as e:
        print(f"❌ Error: {e}")
        sys.exit(1)

    print(f"✅ API key has been configured successfully ({store.path})")


if __name__ == "__main__":
    main()
