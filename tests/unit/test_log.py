"""
Unit tests for logging setup and access-log lines.
"""

import logging
from pathlib import Path

import pytest

from minihttpd.config import ServerConfig
from minihttpd.log import RequestLog, log_request, setup_logging, teardown_logging


@pytest.fixture
def log_config(tmp_path: Path) -> ServerConfig:
    return ServerConfig(
        error_log=str(tmp_path / "error_log"),
        access_log=str(tmp_path / "access_log"),
        log_level="INFO",
    )


class TestRequestLog:

    def test_to_text(self):
        entry = RequestLog(
            client_ip="127.0.0.1",
            method="GET",
            uri="/index.html",
            status_code=200,
            content_length=11,
            duration_ms=0.4219,
            timestamp="19/Oct/2026:10:55:36 +0000",
        )

        assert entry.to_text() == (
            '127.0.0.1 - - [19/Oct/2026:10:55:36 +0000] "GET /index.html" 200 11 0.42ms'
        )

    def test_log_request_emits_line(self, caplog):
        with caplog.at_level(logging.INFO, logger="minihttpd.access"):
            entry = log_request("10.0.0.1", "UNKNOWN", "/", 404, 13, 1.0)

        assert entry.status_code == 404
        assert entry.to_text() in caplog.text
        assert '"UNKNOWN /" 404 13' in caplog.text


class TestSetupLogging:

    def test_attaches_file_handlers(self, log_config: ServerConfig, tmp_path: Path):
        handlers = setup_logging(log_config)
        try:
            assert len(handlers) == 2

            log_request("127.0.0.1", "GET", "/index.html", 200, 11, 0.5)
            logging.getLogger("minihttpd.core.handler").warning("read failed")
            logging.getLogger("minihttpd.core.handler").info("not an error")
        finally:
            teardown_logging(handlers)

        access = (tmp_path / "access_log").read_text()
        errors = (tmp_path / "error_log").read_text()

        assert access.startswith("127.0.0.1 - - [")
        assert '"GET /index.html" 200 11' in access
        assert "read failed" in errors
        assert "[WARNING]" in errors
        assert "not an error" not in errors
        # access lines stay out of the error log
        assert "/index.html" not in errors

    def test_teardown_detaches(self, log_config: ServerConfig, tmp_path: Path):
        handlers = setup_logging(log_config)
        teardown_logging(handlers)

        log_request("127.0.0.1", "GET", "/after", 200, 0, 0.1)

        assert "/after" not in (tmp_path / "access_log").read_text()
        for handler in handlers:
            assert handler not in logging.getLogger("minihttpd").handlers
            assert handler not in logging.getLogger("minihttpd.access").handlers

    def test_unopenable_log_is_skipped(self, tmp_path: Path, caplog):
        config = ServerConfig(
            error_log=str(tmp_path / "missing-dir" / "error_log"),
            access_log=str(tmp_path / "access_log"),
            log_level="INFO",
        )

        with caplog.at_level(logging.WARNING, logger="minihttpd"):
            handlers = setup_logging(config)
        teardown_logging(handlers)

        assert len(handlers) == 1
        assert "Cannot open error log" in caplog.text

    def test_empty_paths_disable_files(self):
        handlers = setup_logging(ServerConfig(error_log="", access_log=""))
        teardown_logging(handlers)

        assert handlers == []
