"""Tests for AnnoQ logger configuration."""

import logging
import sys
import tempfile
import unittest
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from AnnoQ.utils.log import configure_logging, log, resolve_level


class TestConfigureLogging(unittest.TestCase):
    def tearDown(self) -> None:
        for handler in list(log.handlers):
            handler.close()
        log.handlers.clear()
        log.setLevel(logging.NOTSET)
        log.propagate = True

    def test_console_only(self) -> None:
        configure_logging(level="warning")
        self.assertEqual(len(log.handlers), 1)
        self.assertEqual(log.level, logging.WARNING)
        self.assertFalse(log.propagate)

    def test_file_handler_writes_debug_records(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            configure_logging(level="ERROR", action="region", log_to_file=True, log_dir=tmp)
            log.debug("probe %d", 7)
            for handler in log.handlers:
                handler.flush()
                handler.close()

            files = list((Path(tmp) / "region").glob("region_*.log"))
            self.assertEqual(len(files), 1)
            self.assertIn("[DEBG] probe 7", files[0].read_text(encoding="utf-8"))

    def test_reconfigure_replaces_handlers(self) -> None:
        configure_logging(level="INFO")
        configure_logging(level="DEBUG")
        self.assertEqual(len(log.handlers), 1)

    def test_unknown_level_defaults_to_info(self) -> None:
        self.assertEqual(resolve_level("loud"), logging.INFO)
        self.assertEqual(resolve_level(None), logging.INFO)


if __name__ == "__main__":
    unittest.main()
