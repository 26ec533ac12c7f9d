import logging

import pytest

from deepscan.logging.logger import Log


class TestLog:
    def test_messages_go_to_deepscan_logger(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.INFO, logger="deepscan"):
            Log.info("Stored upload 'photo.jpg'")
            Log.warning("Origin blocked: https://evil.example")

        assert [(r.name, r.levelname, r.getMessage()) for r in caplog.records] == [
            ("deepscan", "INFO", "Stored upload 'photo.jpg'"),
            ("deepscan", "WARNING", "Origin blocked: https://evil.example"),
        ]

    def test_exception_attaches_traceback(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.ERROR, logger="deepscan"):
            try:
                raise RuntimeError("boom")
            except RuntimeError:
                Log.exception("[ERROR] POST /api/analyze: boom")

        record = caplog.records[-1]
        assert record.levelname == "ERROR"
        assert record.exc_info is not None
        assert record.exc_info[0] is RuntimeError

    def test_configure_adds_one_handler(self) -> None:
        Log.configure("debug")
        Log.configure("info")

        logger = logging.getLogger("deepscan")
        assert len(logger.handlers) == 1
        assert logger.level == logging.INFO
