import os
import tempfile
import unittest
from datetime import date
from pathlib import Path
from unittest import mock

from youtube_assistant.settings_store import SettingsStore, record_quota_usage


class SettingsStoreTests(unittest.TestCase):
    def setUp(self):
        self._tmpdir = tempfile.TemporaryDirectory()
        self.store = SettingsStore(Path(self._tmpdir.name) / "settings.json")

    def tearDown(self):
        self._tmpdir.cleanup()

    def test_missing_api_key(self):
        with mock.patch.dict(os.environ, {}, clear=True):
            self.assertIsNone(self.store.get_api_key())

    def test_placeholder_counts_as_missing(self):
        self.store.set("apiKey", "YOUR_API_KEY_HERE")
        with mock.patch.dict(os.environ, {}, clear=True):
            self.assertIsNone(self.store.get_api_key())

    def test_stored_key_wins_over_env(self):
        self.store.set_api_key("  stored-key  ")
        with mock.patch.dict(os.environ, {"YOUTUBE_API_KEY": "env-key"}, clear=True):
            self.assertEqual(self.store.get_api_key(), "stored-key")

    def test_env_fallback(self):
        with mock.patch.dict(os.environ, {"YOUTUBE_API_KEY": "env-key"}, clear=True):
            self.assertEqual(self.store.get_api_key(), "env-key")

    def test_blank_key_rejected(self):
        with self.assertRaises(ValueError):
            self.store.set_api_key("   ")

    def test_corrupt_file_raises_value_error(self):
        self.store.path.write_text("{not json", encoding="utf-8")
        with self.assertRaises(ValueError) as ctx:
            self.store.get_api_key()
        self.assertIn("not valid JSON", str(ctx.exception))

    def test_non_object_file_raises_value_error(self):
        self.store.path.write_text("[1, 2]", encoding="utf-8")
        with self.assertRaises(ValueError):
            self.store.get("apiKey")

    def test_non_string_key_raises_value_error(self):
        self.store.set("apiKey", 12345)
        with self.assertRaises(ValueError):
            self.store.get_api_key()

    def test_values_persist(self):
        self.store.set("maxResults", 50)
        reopened = SettingsStore(self.store.path)
        self.assertEqual(reopened.get("maxResults"), 50)
        self.assertEqual(reopened.get("missing", "default"), "default")


class QuotaUsageTests(unittest.TestCase):
    def test_warning_after_threshold(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            store = SettingsStore(Path(tmpdir) / "settings.json")
            today = date(2025, 1, 6)

            self.assertIsNone(record_quota_usage(store, 7000, today))
            warning = record_quota_usage(store, 1500, today)

            self.assertIn("85%", warning)
            self.assertIn("1500 units", warning)
            self.assertEqual(store.get("quota_usage_2025-01-06"), 8500)

    def test_usage_is_tracked_per_day(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            store = SettingsStore(Path(tmpdir) / "settings.json")
            record_quota_usage(store, 7000, date(2025, 1, 6))
            self.assertIsNone(record_quota_usage(store, 7000, date(2025, 1, 7)))
            self.assertEqual(store.get("quota_usage_2025-01-07"), 7000)


if __name__ == "__main__":
    unittest.main()
