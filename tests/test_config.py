from __future__ import annotations

import json
import tempfile
import unittest
from pathlib import Path
from unittest import mock

import jumpnav
from jumpnav import config
from jumpnav.config import ConfigError


class ConfigSetupTests(unittest.TestCase):
    def test_defaults(self) -> None:
        resolved = config.setup()
        self.assertFalse(resolved.options.wrap_edges)
        self.assertFalse(resolved.options.root_only)
        self.assertEqual(resolved.options.default_view, "preview")
        self.assertEqual(resolved.options.count_timeout_ms, 1000)
        self.assertEqual(resolved.options.log_level, "off")
        self.assertEqual(resolved.mappings, config.DEFAULT_MAPPINGS)
        self.assertIsNone(resolved.window)

    def test_overrides_merge_over_defaults(self) -> None:
        resolved = config.setup({"options": {"wrap_edges": True}, "mappings": {"stop": "q"}})
        self.assertTrue(resolved.options.wrap_edges)
        self.assertEqual(resolved.options.default_view, "preview")
        self.assertEqual(resolved.mappings["stop"], "q")
        self.assertEqual(resolved.mappings["choose"], "<CR>")

    def test_window_config_may_be_mapping_or_callable(self) -> None:
        self.assertEqual(config.setup({"window": {"config": {"width": 30}}}).window, {"width": 30})

        def factory() -> dict[str, int]:
            return {"height": 5}

        self.assertIs(config.setup({"window": {"config": factory}}).window, factory)

    def test_invalid_values_raise_config_error(self) -> None:
        bad_configs = [
            "not a mapping",
            {"options": {"wrap_edges": "yes"}},
            {"options": {"count_timeout_ms": True}},
            {"options": {"count_timeout_ms": "1000"}},
            {"options": {"default_view": "grid"}},
            {"options": {"log_level": "loud"}},
            {"options": {"unknown": 1}},
            {"mappings": {"explode": "q"}},
            {"mappings": {"stop": 27}},
            {"window": {"config": 12}},
            {"window": {"config": {"width": "wide"}}},
            {"window": {"config": {"row": True}}},
            {"window": {"config": {"border": 1}}},
        ]
        for bad in bad_configs:
            with self.subTest(bad=bad):
                with self.assertRaises(ConfigError):
                    config.setup(bad)

    def test_config_error_is_a_value_error(self) -> None:
        self.assertTrue(issubclass(ConfigError, ValueError))


class ConfigFileTests(unittest.TestCase):
    def test_load_uses_config_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "config.json"
            config_path.write_text(json.dumps({"options": {"default_view": "list"}}), encoding="utf-8")
            with mock.patch("jumpnav.config.CONFIG_PATH", config_path):
                self.assertEqual(config.load().options.default_view, "list")

    def test_missing_or_malformed_file_is_empty(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "config.json"
            with mock.patch("jumpnav.config.CONFIG_PATH", config_path):
                self.assertEqual(config.load_config_file(), {})
                config_path.write_text("[1, 2]", encoding="utf-8")
                self.assertEqual(config.load_config_file(), {})
                config_path.write_text("{oops", encoding="utf-8")
                self.assertEqual(config.load().mappings, config.DEFAULT_MAPPINGS)

    def test_current_config_loads_file_on_first_use(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "config.json"
            config_path.write_text(json.dumps({"options": {"wrap_edges": True}}), encoding="utf-8")
            with mock.patch("jumpnav.config.CONFIG_PATH", config_path), mock.patch("jumpnav._current_config", None):
                self.assertTrue(jumpnav.current_config().options.wrap_edges)
                self.assertIs(jumpnav.current_config(), jumpnav._current_config)


if __name__ == "__main__":
    unittest.main()
