"""Tests for config lookups, the session cache, and history persistence.

Ensures malformed config data is safely normalized on load.
"""

from __future__ import annotations

import json
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from gtagshopper import config
from gtagshopper.navigation import PANE_SECONDARY, NavigationPosition


class ReadConfigTests(unittest.TestCase):
    def test_defaults_when_config_missing(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with mock.patch("gtagshopper.config.CONFIG_PATH", Path(tmp) / "missing.json"):
                self.assertEqual(config.read_config(config.KEY_HISTORY_SIZE), 50)
                self.assertEqual(config.read_config(config.KEY_MULTIPLE_RESULTS_ACTION), config.ACTION_PRESENT_CHOICES)
                self.assertFalse(config.read_config(config.KEY_SHOW_ELAPSED_TIME))
                self.assertEqual(config.read_config("unknown", "fallback"), "fallback")

    def test_malformed_json_falls_back_to_defaults(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "config.json"
            config_path.write_text("{not json", encoding="utf-8")
            with mock.patch("gtagshopper.config.CONFIG_PATH", config_path):
                self.assertEqual(config.load_config(), {})
                self.assertEqual(config.read_config(config.KEY_HISTORY_SIZE), 50)

    def test_values_are_validated_against_default_types(self) -> None:
        data = {
            config.KEY_HISTORY_SIZE: True,
            config.KEY_MULTIPLE_RESULTS_ACTION: "explode",
            config.KEY_SHOW_ELAPSED_TIME: "yes",
            config.KEY_GLOBAL_COMMAND: "  ",
        }
        self.assertEqual(config.read_config(config.KEY_HISTORY_SIZE, data=data), 50)
        self.assertEqual(config.read_config(config.KEY_MULTIPLE_RESULTS_ACTION, data=data), config.ACTION_PRESENT_CHOICES)
        self.assertFalse(config.read_config(config.KEY_SHOW_ELAPSED_TIME, data=data))
        self.assertEqual(config.read_config(config.KEY_GLOBAL_COMMAND, data=data), "global")

    def test_valid_values_are_returned(self) -> None:
        data = {
            config.KEY_HISTORY_SIZE: 7,
            config.KEY_MULTIPLE_RESULTS_ACTION: " take_first ",
            config.KEY_SHOW_ELAPSED_TIME: True,
        }
        self.assertEqual(config.read_config(config.KEY_HISTORY_SIZE, data=data), 7)
        self.assertEqual(config.read_config(config.KEY_MULTIPLE_RESULTS_ACTION, data=data), config.ACTION_TAKE_FIRST)
        self.assertTrue(config.read_config(config.KEY_SHOW_ELAPSED_TIME, data=data))

    def test_negative_history_size_is_rejected(self) -> None:
        self.assertEqual(config.read_config(config.KEY_HISTORY_SIZE, data={config.KEY_HISTORY_SIZE: -3}), 50)


class ConfigCacheTests(unittest.TestCase):
    def test_cache_reads_once_until_invalidated(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "config.json"
            with mock.patch("gtagshopper.config.CONFIG_PATH", config_path):
                config.save_config({config.KEY_HISTORY_SIZE: 5})
                cache = config.ConfigCache()
                self.assertEqual(cache.history_size, 5)

                config.save_config({config.KEY_HISTORY_SIZE: 9})
                self.assertEqual(cache.history_size, 5)

                cache.invalidate()
                self.assertEqual(cache.history_size, 9)


class HistoryPersistenceTests(unittest.TestCase):
    def test_history_round_trip(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            history_path = Path(tmp) / "history.json"
            positions = [
                NavigationPosition((Path(tmp) / "a.c").resolve(), 3, 1),
                NavigationPosition((Path(tmp) / "b.c").resolve(), 0, 0, PANE_SECONDARY),
            ]
            with mock.patch("gtagshopper.config.HISTORY_PATH", history_path):
                config.save_history(positions)
                self.assertEqual(config.load_history(), positions)

    def test_load_history_drops_invalid_entries(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            history_path = Path(tmp) / "history.json"
            history_path.write_text(
                json.dumps(
                    {
                        "entries": [
                            {"path": "/tmp/a.c", "line": -5, "column": True},
                            {"path": 42, "line": 1},
                            "bad-shape",
                            {"line": 3},
                        ]
                    }
                ),
                encoding="utf-8",
            )
            with mock.patch("gtagshopper.config.HISTORY_PATH", history_path):
                loaded = config.load_history()

        self.assertEqual(len(loaded), 1)
        self.assertEqual((loaded[0].line, loaded[0].column), (0, 0))

    def test_missing_history_file_is_empty(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with mock.patch("gtagshopper.config.HISTORY_PATH", Path(tmp) / "none.json"):
                self.assertEqual(config.load_history(), [])


if __name__ == "__main__":
    unittest.main()
