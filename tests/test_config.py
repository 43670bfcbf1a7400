import os
import unittest
from unittest import mock

from youtube_assistant.config import AppConfig


class ConfigTests(unittest.TestCase):
    def test_defaults(self):
        with mock.patch.dict(os.environ, {}, clear=True):
            config = AppConfig.from_env()
        self.assertEqual(config.max_results, 25)
        self.assertEqual(config.output_folder, ".tmp/youtube_searches")
        self.assertEqual(config.trending_threshold, 2.0)
        self.assertEqual(config.daily_quota, 10000)
        self.assertEqual(config.quota_warning_ratio, 0.8)
        self.assertFalse(config.export_to_sheets)
        self.assertIsNone(config.analytics_config().timezone)

    def test_overrides(self):
        env = {
            "MAX_RESULTS": "50",
            "EXPORT_TO_SHEETS": "yes",
            "TRENDING_THRESHOLD": "3.5",
            "HIGH_ENGAGEMENT_THRESHOLD": "5",
            "HIGH_ENGAGEMENT_SHORTS_ONLY": "true",
            "REPORT_TIMEZONE": "UTC",
        }
        with mock.patch.dict(os.environ, env, clear=True):
            config = AppConfig.from_env()
        analytics = config.analytics_config()
        self.assertEqual(config.max_results, 50)
        self.assertTrue(config.export_to_sheets)
        self.assertEqual(analytics.trending_threshold, 3.5)
        self.assertEqual(analytics.high_engagement_threshold, 5.0)
        self.assertTrue(analytics.high_engagement_shorts_only)
        self.assertIsNotNone(analytics.timezone)

    def test_unknown_timezone(self):
        with mock.patch.dict(os.environ, {"REPORT_TIMEZONE": "Nowhere/Special"}, clear=True):
            config = AppConfig.from_env()
        with self.assertRaises(ValueError):
            config.analytics_config()


if __name__ == "__main__":
    unittest.main()
