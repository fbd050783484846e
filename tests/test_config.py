"""
Unit tests for schedule configuration and persisted settings.
"""

import json
import tempfile
import unittest
from pathlib import Path

from cineplanner.config import (
    DEFAULT_HALLS,
    ScheduleConfig,
    check_config,
    load_settings,
    save_settings,
    validate_window,
)
from cineplanner.errors import ConfigError


class TestValidateWindow(unittest.TestCase):
    def test_valid(self) -> None:
        self.assertEqual(validate_window(9, 23), [])
        self.assertEqual(validate_window(0, 24), [])

    def test_invalid(self) -> None:
        for start, end in [(23, 9), (9, 9), (-1, 10), (9, 25), (24, 24), ("9", 23), (True, 23)]:
            self.assertTrue(validate_window(start, end), (start, end))

    def test_check_config(self) -> None:
        check_config(ScheduleConfig())
        with self.assertRaises(ConfigError):
            check_config(ScheduleConfig(halls=()))
        with self.assertRaises(ConfigError):
            check_config(ScheduleConfig(halls=("A", "A")))
        with self.assertRaises(ConfigError):
            check_config(ScheduleConfig(start_hour=20, end_hour=10))


class TestCatalog(unittest.TestCase):
    def test_find_catalog_movie_is_case_insensitive(self) -> None:
        entry = ScheduleConfig().find_catalog_movie("oppenheimer")
        self.assertIsNotNone(entry)
        assert entry is not None
        self.assertEqual(entry.duration, 180)
        self.assertIsNone(ScheduleConfig().find_catalog_movie("Not a movie"))


class TestSettings(unittest.TestCase):
    def test_missing_file_gives_defaults(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            config = load_settings(Path(d) / "missing.json")
        self.assertEqual((config.start_hour, config.end_hour), (9, 23))
        self.assertEqual(config.halls, DEFAULT_HALLS)
        self.assertIsNone(config.remote_url)

    def test_save_and_load_roundtrip(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            p = Path(d) / "nested" / "settings.json"
            save_settings(ScheduleConfig(halls=("A", "B"), start_hour=10, end_hour=24), p)
            config = load_settings(p)
            data = json.loads(p.read_text(encoding="utf-8"))
        self.assertEqual((config.start_hour, config.end_hour), (10, 24))
        self.assertEqual(config.halls, ("A", "B"))
        self.assertEqual(data["end_hour"], 24)

    def test_corrupt_file_gives_defaults(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            p = Path(d) / "settings.json"
            p.write_text("[[[", encoding="utf-8")
            with self.assertLogs("cineplanner.config", level="WARNING"):
                config = load_settings(p)
        self.assertEqual(config, ScheduleConfig())

    def test_invalid_window_is_kept_and_reported(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            p = Path(d) / "settings.json"
            p.write_text(json.dumps({"start_hour": 22, "end_hour": 8}), encoding="utf-8")
            with self.assertLogs("cineplanner.config", level="WARNING"):
                config = load_settings(p)
        self.assertEqual((config.start_hour, config.end_hour), (22, 8))

    def test_invalid_halls_are_ignored(self) -> None:
        for halls in (["A", "A"], ["A", " "]):
            with tempfile.TemporaryDirectory() as d:
                p = Path(d) / "settings.json"
                p.write_text(json.dumps({"halls": halls, "start_hour": 10}), encoding="utf-8")
                with self.assertLogs("cineplanner.config", level="WARNING"):
                    config = load_settings(p)
            self.assertEqual(config.halls, DEFAULT_HALLS, halls)
            self.assertEqual(config.start_hour, 10)
            check_config(config)


if __name__ == "__main__":
    unittest.main()
