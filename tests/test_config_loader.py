import json
import tempfile
import unittest
from pathlib import Path

from vc_change_engine.config.loader import CONFIG_FILENAME, DEFAULT_CONFIG, ConfigError, load_config


class TestConfigLoader(unittest.TestCase):
    """Tests for the configuration loader."""

    def _write(self, root: Path, content) -> None:
        text = content if isinstance(content, str) else json.dumps(content)
        (root / CONFIG_FILENAME).write_text(text, encoding="utf-8")

    def test_missing_file_returns_defaults(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            self.assertEqual(load_config(Path(tmp)), DEFAULT_CONFIG)

    def test_defaults_are_not_shared(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config = load_config(Path(tmp))
            config["remote"] = "upstream"
            self.assertEqual(DEFAULT_CONFIG["remote"], "origin")

    def test_file_values_override_defaults(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            self._write(root, {"remote": "upstream", "similarity_threshold": 0.6, "log_level": "DEBUG"})
            config = load_config(root)
            self.assertEqual(config["remote"], "upstream")
            self.assertEqual(config["similarity_threshold"], 0.6)
            self.assertEqual(config["log_level"], "debug")
            self.assertEqual(config["git_timeout"], 30)
            self.assertFalse(config["auto_approve"])

    def test_unknown_keys_are_ignored(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            self._write(root, {"model": "llama3", "auto_approve": True})
            config = load_config(root)
            self.assertNotIn("model", config)
            self.assertTrue(config["auto_approve"])

    def test_invalid_json(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            self._write(root, "{invalid}")
            with self.assertRaises(ConfigError):
                load_config(root)

    def test_root_must_be_object(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            self._write(root, [1, 2, 3])
            with self.assertRaises(ConfigError):
                load_config(root)

    def test_invalid_values(self) -> None:
        bad_values = [
            {"remote": ""},
            {"remote": 5},
            {"similarity_threshold": "high"},
            {"similarity_threshold": 1.5},
            {"similarity_threshold": True},
            {"git_timeout": 0},
            {"git_timeout": "30"},
            {"log_level": "verbose"},
            {"auto_approve": "yes"},
        ]
        for data in bad_values:
            with self.subTest(data=data), tempfile.TemporaryDirectory() as tmp:
                root = Path(tmp)
                self._write(root, data)
                with self.assertRaises(ConfigError):
                    load_config(root)

    def test_threshold_bounds_are_inclusive(self) -> None:
        for value in (0, 1):
            with self.subTest(value=value), tempfile.TemporaryDirectory() as tmp:
                root = Path(tmp)
                self._write(root, {"similarity_threshold": value})
                self.assertEqual(load_config(root)["similarity_threshold"], value)


if __name__ == "__main__":
    unittest.main()
