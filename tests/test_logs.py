from __future__ import annotations

import logging
import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from jumpnav import logs


class LogsTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.path = Path(self._tmp.name) / "state" / "jumpnav.log"
        patcher = mock.patch.dict(os.environ, {}, clear=False)
        patcher.start()
        os.environ.pop(logs.ENV_LEVEL, None)
        self.addCleanup(patcher.stop)

    def tearDown(self) -> None:
        logs.configure("off")
        self._tmp.cleanup()

    def test_resolve_level_prefers_environment(self) -> None:
        self.assertEqual(logs.resolve_level(None), "off")
        self.assertEqual(logs.resolve_level("DEBUG"), "debug")
        self.assertEqual(logs.resolve_level("chatty"), "off")
        os.environ[logs.ENV_LEVEL] = "trace"
        self.assertEqual(logs.resolve_level("error"), "trace")

    def test_off_writes_nothing(self) -> None:
        self.assertEqual(logs.configure("off", path=self.path), "off")
        logging.getLogger("jumpnav.test").error("nope")
        self.assertFalse(self.path.exists())

    def test_file_handler_receives_records_at_level(self) -> None:
        self.assertEqual(logs.configure("info", path=self.path), "info")
        logger = logging.getLogger("jumpnav.test")
        logger.debug("hidden detail")
        logger.info("navigator opened")

        logs.configure("off")
        text = self.path.read_text(encoding="utf-8")
        self.assertIn("navigator opened", text)
        self.assertNotIn("hidden detail", text)
        self.assertIn("[INFO ", text)

    def test_trace_level(self) -> None:
        logs.configure("trace", path=self.path)
        logs.trace(logging.getLogger("jumpnav.test"), "step %d", 3)

        logs.configure("off")
        self.assertIn("TRACE", self.path.read_text(encoding="utf-8"))
        self.assertIn("step 3", self.path.read_text(encoding="utf-8"))

    def test_reconfigure_replaces_handler(self) -> None:
        logs.configure("debug", path=self.path)
        logs.configure("debug", path=self.path)
        file_handlers = [h for h in logging.getLogger("jumpnav").handlers if isinstance(h, logging.FileHandler)]
        self.assertEqual(len(file_handlers), 1)


if __name__ == "__main__":
    unittest.main()
