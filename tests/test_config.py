import json
import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from leadradar.config import DedupeSettings, load_postings, load_settings_file, settings_from_env
from leadradar.core.dedupe import Deduplicator


class SettingsFromEnvTests(unittest.TestCase):
    def test_defaults(self):
        with mock.patch.dict(os.environ, {}, clear=True):
            settings = settings_from_env()
        self.assertEqual(settings, DedupeSettings())
        self.assertEqual(settings.title_threshold, 0.9)
        self.assertEqual(settings.similarity_threshold, 0.85)
        self.assertTrue(settings.dedupe_enabled)
        self.assertEqual(settings.retention_days, 90)

    def test_env_overrides(self):
        env = {
            "LEADRADAR_TITLE_THRESHOLD": "0.8",
            "LEADRADAR_SIMILARITY_THRESHOLD": "0.7",
            "LEADRADAR_DEDUPE_ENABLED": "false",
            "LEADRADAR_RETENTION_DAYS": "30",
        }
        with mock.patch.dict(os.environ, env, clear=True):
            settings = settings_from_env()
        self.assertEqual(settings.title_threshold, 0.8)
        self.assertEqual(settings.similarity_threshold, 0.7)
        self.assertFalse(settings.dedupe_enabled)
        self.assertEqual(settings.retention_days, 30)

    def test_only_explicit_off_values_disable_dedupe(self):
        for raw in ("", "enabled", "yes", "TRUE"):
            with mock.patch.dict(os.environ, {"LEADRADAR_DEDUPE_ENABLED": raw}, clear=True):
                self.assertTrue(settings_from_env().dedupe_enabled, raw)
        for raw in ("0", "false", " Off ", "no"):
            with mock.patch.dict(os.environ, {"LEADRADAR_DEDUPE_ENABLED": raw}, clear=True):
                self.assertFalse(settings_from_env().dedupe_enabled, raw)

    def test_out_of_range_threshold_rejected(self):
        with mock.patch.dict(os.environ, {"LEADRADAR_TITLE_THRESHOLD": "1.2"}, clear=True):
            with self.assertRaises(ValueError):
                settings_from_env()

    def test_unparsable_values_rejected(self):
        with mock.patch.dict(os.environ, {"LEADRADAR_SIMILARITY_THRESHOLD": "high"}, clear=True):
            with self.assertRaises(ValueError):
                settings_from_env()
        with mock.patch.dict(os.environ, {"LEADRADAR_RETENTION_DAYS": "soon"}, clear=True):
            with self.assertRaises(ValueError):
                settings_from_env()

    def test_detector_from_settings(self):
        detector = Deduplicator.from_settings(DedupeSettings(title_threshold=0.75, similarity_threshold=0.6))
        self.assertEqual(detector.title_threshold, 0.75)
        self.assertEqual(detector.similarity_threshold, 0.6)


class FileLoadingTests(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.dir = Path(self.tmp.name)

    def tearDown(self):
        self.tmp.cleanup()

    def test_yaml_settings_override_base(self):
        path = self.dir / "dedupe.yaml"
        path.write_text("title_threshold: 0.95\ndedupe_enabled: 'no'\nretention_days: 14\nunknown_key: 1\n", encoding="utf-8")
        settings = load_settings_file(path, base=DedupeSettings())
        self.assertEqual(settings.title_threshold, 0.95)
        self.assertEqual(settings.similarity_threshold, 0.85)
        self.assertFalse(settings.dedupe_enabled)
        self.assertEqual(settings.retention_days, 14)

    def test_yaml_settings_validated(self):
        path = self.dir / "bad.yaml"
        path.write_text("similarity_threshold: 3\n", encoding="utf-8")
        with self.assertRaises(ValueError):
            load_settings_file(path, base=DedupeSettings())

    def test_yaml_must_be_mapping(self):
        path = self.dir / "list.yaml"
        path.write_text("- 0.9\n- 0.85\n", encoding="utf-8")
        with self.assertRaises(ValueError):
            load_settings_file(path, base=DedupeSettings())

    def test_empty_yaml_keeps_base(self):
        path = self.dir / "empty.yaml"
        path.write_text("", encoding="utf-8")
        base = DedupeSettings(title_threshold=0.7)
        self.assertEqual(load_settings_file(path, base=base), base)

    def test_load_postings_shapes(self):
        rows = [{"id": "1", "title": "a"}, {"id": "2", "title": "b"}]
        array = self.dir / "array.json"
        array.write_text(json.dumps(rows), encoding="utf-8")
        wrapped = self.dir / "wrapped.json"
        wrapped.write_text(json.dumps({"leads": rows, "lastUpdated": "2026-01-01"}), encoding="utf-8")
        single = self.dir / "single.json"
        single.write_text(json.dumps(rows[0]), encoding="utf-8")
        scalar = self.dir / "scalar.json"
        scalar.write_text("7", encoding="utf-8")

        self.assertEqual(load_postings(array), rows)
        self.assertEqual(load_postings(wrapped), rows)
        self.assertEqual(load_postings(single), [rows[0]])
        self.assertEqual(load_postings(scalar), [])


if __name__ == "__main__":
    unittest.main()
