"""
=============================================================================
SERVER CONFIGURATION
=============================================================================

Settings for the server, and the loader for its JSON configuration file.

=============================================================================
CONFIGURATION FILE
=============================================================================

Read once at startup, by default from /etc/http-server/conf.json:

    {
        "port": 8080,
        "serverRoot": "/srv/www/",
        "errorLog": "/var/log/minihttpd/error_log",
        "accessLog": "/var/log/minihttpd/access_log",
        "logLevel": "INFO"
    }

Every key is optional. Unknown keys are ignored.

A broken configuration is NOT fatal:

    ┌─────────────────────────────────────────────────────────────────────┐
    │   Problem                         Outcome                           │
    ├─────────────────────────────────────────────────────────────────────┤
    │   file missing / unreadable       error on stderr, defaults used    │
    │   invalid JSON                    error on stderr, defaults used    │
    │   not a JSON object               error on stderr, defaults used    │
    │   bad value (e.g. port "abc")     error on stderr, defaults used    │
    └─────────────────────────────────────────────────────────────────────┘

Note the trailing slash on the default serverRoot: request URIs start with
"/" and are appended to it as-is, so "/var/www/html/" + "/index.html"
gives "/var/www/html//index.html", which the OS treats as the same file.

=============================================================================
"""

import json
import logging
from dataclasses import dataclass, fields, replace
from typing import Any, Dict


logger = logging.getLogger(__name__)


DEFAULT_CONFIG_PATH = "/etc/http-server/conf.json"


@dataclass
class ServerConfig:
    """
    Configuration for the HTTP server.

    The first five fields can come from the JSON file; the rest are set in
    code (tests use them to bind to localhost on a free port).
    """

    # ─────────────────────────────────────────────────────────────────────
    # FROM THE CONFIGURATION FILE
    # ─────────────────────────────────────────────────────────────────────

    port: int = 80
    """Port to listen on. 80 needs root on Unix; use 8080 for development."""

    server_root: str = "/var/www/html/"
    """Document root. Request URIs are appended to it verbatim."""

    error_log: str = "/var/log/error_log"
    """File receiving WARNING and above from the minihttpd loggers."""

    access_log: str = "/var/log/access_log"
    """File receiving one line per served request."""

    log_level: str = "INFO"
    """Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)."""

    # ─────────────────────────────────────────────────────────────────────
    # CODE-ONLY SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    host: str = "0.0.0.0"
    """Address to bind. "0.0.0.0" listens on every IPv4 interface."""

    backlog: int = 5
    """Pending connections the OS queues before refusing new ones."""

    buffer_size: int = 4096
    """Bytes requested per recv() call while reading a request."""

    def validate(self) -> None:
        """
        Validate configuration values.

        Raises:
            ValueError: On the first invalid value found.
        """
        if not 0 < self.port < 65536:
            raise ValueError(f"Invalid port: {self.port}. Must be 1-65535.")

        if self.backlog < 0:
            raise ValueError("backlog must be >= 0")

        if self.buffer_size < 1:
            raise ValueError("buffer_size must be >= 1")

        if self.log_level.upper() not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Invalid log level: {self.log_level}")

    def to_dict(self) -> Dict[str, Any]:
        """All settings as a plain dict (used for the startup log)."""
        return {f.name: getattr(self, f.name) for f in fields(self)}


# JSON key → (ServerConfig field, converter)
_FILE_KEYS = {
    "port": ("port", int),
    "serverRoot": ("server_root", str),
    "errorLog": ("error_log", str),
    "accessLog": ("access_log", str),
    "logLevel": ("log_level", str),
}


def load_config(path: str = DEFAULT_CONFIG_PATH) -> ServerConfig:
    """
    Load configuration from a JSON file.

    Never raises: on any problem the error is logged and a default
    ServerConfig is returned.

    Args:
        path: Path to the JSON configuration file.

    Returns:
        The loaded configuration, or the defaults.
    """
    defaults = ServerConfig()

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        logger.error(f"Could not open configuration file {path}: {e}")
        return defaults
    except ValueError as e:
        # json.JSONDecodeError and UnicodeDecodeError are both ValueErrors
        logger.error(f"Error parsing configuration file {path}: {e}")
        return defaults

    if not isinstance(data, dict):
        logger.error(f"Error parsing configuration file {path}: expected a JSON object")
        return defaults

    try:
        config = replace(defaults, **_convert(data))
        config.validate()
    except (TypeError, ValueError) as e:
        logger.error(f"Invalid configuration in {path}: {e}")
        return defaults

    logger.info(
        f"Configuration loaded from {path}: port={config.port} "
        f"server_root={config.server_root} error_log={config.error_log} "
        f"access_log={config.access_log}"
    )
    return config


def _convert(data: Dict[str, Any]) -> Dict[str, Any]:
    """Map recognised JSON keys to ServerConfig field values."""
    values = {}
    for key, (field_name, convert) in _FILE_KEYS.items():
        if key not in data:
            continue
        value = data[key]
        # json gives bools for true/false, which int() would happily accept
        if convert is int and isinstance(value, bool):
            raise ValueError(f"{key} must be an integer, got {value!r}")
        if convert is str and not isinstance(value, str):
            raise ValueError(f"{key} must be a string, got {value!r}")
        values[field_name] = convert(value)
    return values
