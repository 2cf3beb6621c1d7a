"""
=============================================================================
LOGGING
=============================================================================

Logging setup for the server process, and the access-log line format.

=============================================================================
LOGGERS
=============================================================================

    minihttpd.*          Module loggers (logging.getLogger(__name__))
                         → stderr, and errorLog for WARNING and above

    minihttpd.access     One line per served request
                         → stderr, and accessLog

ACCESS LOG FORMAT (Apache-style, readable by the usual log tools):

    127.0.0.1 - - [19/Oct/2026:10:55:36 +0000] "GET /index.html" 200 11 0.42ms
    ─────┬───       ─────────────┬──────────── ────────┬──────── ─┬─ ─┬ ──┬───
       Client               Timestamp            Method / URI  Status │ Duration
                                                                  Body size

=============================================================================
"""

import logging
import time
from dataclasses import dataclass
from typing import List

from .config import ServerConfig


PACKAGE_LOGGER = "minihttpd"
ACCESS_LOGGER = "minihttpd.access"

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

access_logger = logging.getLogger(ACCESS_LOGGER)


@dataclass
class RequestLog:
    """Structured access-log entry for one request."""

    client_ip: str
    method: str
    uri: str
    status_code: int
    content_length: int
    duration_ms: float
    timestamp: str

    def to_text(self) -> str:
        """Format as an Apache-style access log line."""
        return (
            f'{self.client_ip} - - [{self.timestamp}] '
            f'"{self.method} {self.uri}" {self.status_code} '
            f'{self.content_length} {self.duration_ms:.2f}ms'
        )


def log_request(
    client_ip: str,
    method: str,
    uri: str,
    status_code: int,
    content_length: int,
    duration_ms: float,
) -> RequestLog:
    """Emit one access-log line and return the entry."""
    entry = RequestLog(
        client_ip=client_ip,
        method=method,
        uri=uri,
        status_code=status_code,
        content_length=content_length,
        duration_ms=duration_ms,
        timestamp=time.strftime("%d/%b/%Y:%H:%M:%S %z"),
    )
    access_logger.info(entry.to_text())
    return entry


def setup_logging(config: ServerConfig) -> List[logging.Handler]:
    """
    Configure logging for a server run.

    Console output goes through logging.basicConfig (a no-op if the
    application already configured the root logger). The errorLog and
    accessLog files get their own FileHandlers; a file that cannot be
    opened is reported and skipped, the server still starts.

    Args:
        config: Server configuration (log level and log file paths).

    Returns:
        The file handlers that were attached, for teardown_logging().
    """
    level = getattr(logging, config.log_level.upper(), logging.INFO)

    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
    logging.getLogger(PACKAGE_LOGGER).setLevel(level)
    # Access lines are recorded whatever the diagnostic level is
    access_logger.setLevel(logging.INFO)

    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
    handlers: List[logging.Handler] = []

    error_handler = _open_file_handler(config.error_log, "error")
    if error_handler:
        error_handler.setLevel(logging.WARNING)
        error_handler.setFormatter(formatter)
        logging.getLogger(PACKAGE_LOGGER).addHandler(error_handler)
        handlers.append(error_handler)

    access_handler = _open_file_handler(config.access_log, "access")
    if access_handler:
        # The line already carries its own timestamp
        access_handler.setFormatter(logging.Formatter("%(message)s"))
        access_logger.addHandler(access_handler)
        handlers.append(access_handler)

    return handlers


def teardown_logging(handlers: List[logging.Handler]) -> None:
    """Detach and close handlers returned by setup_logging()."""
    for handler in handlers:
        logging.getLogger(PACKAGE_LOGGER).removeHandler(handler)
        access_logger.removeHandler(handler)
        handler.close()


def _open_file_handler(path: str, kind: str):
    """Open a FileHandler, or log why not and return None."""
    if not path:
        return None
    try:
        return logging.FileHandler(path, encoding="utf-8")
    except OSError as e:
        logging.getLogger(PACKAGE_LOGGER).warning(f"Cannot open {kind} log {path}: {e}")
        return None
