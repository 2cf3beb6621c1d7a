"""
=============================================================================
MAIN HTTP SERVER
=============================================================================

Ties configuration, logging and the listener loop together.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   HTTPServer(config_path)                                            │
    │       └──► load_config()          JSON file → ServerConfig           │
    │                                                                      │
    │   start_listening()                                                  │
    │       ├──► setup_logging()        console + errorLog/accessLog       │
    │       └──► SocketServer.start(ConnectionHandler(server_root))        │
    │                 └──► accept → handle → close → accept → ...          │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

import logging
from typing import Optional

from .config import DEFAULT_CONFIG_PATH, ServerConfig, load_config
from .core import ConnectionHandler, SocketServer
from .log import setup_logging, teardown_logging


logger = logging.getLogger(__name__)


class HTTPServer:
    """
    Static file HTTP/1.1 server.

    Usage:
        server = HTTPServer("/etc/http-server/conf.json")
        server.start_listening()     # blocks until SIGINT/SIGTERM

        # or without a configuration file
        server = HTTPServer(config=ServerConfig(port=8080, server_root="./public"))
    """

    def __init__(
        self,
        config_path: str = DEFAULT_CONFIG_PATH,
        config: Optional[ServerConfig] = None,
    ):
        """
        Initialize the HTTP server.

        Args:
            config_path: JSON configuration file. Problems with it are
                         reported and the defaults are used.
            config: Ready-made configuration; when given, config_path is
                    not read.
        """
        self.config = config if config is not None else load_config(config_path)

        self._socket_server = SocketServer(self.config)
        self._handler = ConnectionHandler(self.config.server_root)

    @property
    def socket_server(self) -> SocketServer:
        return self._socket_server

    def start_listening(self):
        """
        Start the server (blocking).

        Raises:
            OSError: If the listening socket cannot be set up.
        """
        log_handlers = setup_logging(self.config)
        try:
            # load_config() ran before any handler was attached
            settings = " ".join(f"{k}={v}" for k, v in self.config.to_dict().items())
            logger.info(f"Configuration: {settings}")
            logger.info(
                f"Serving {self.config.server_root} on port {self.config.port} "
                f"(error log: {self.config.error_log}, access log: {self.config.access_log})"
            )
            self._socket_server.start(self._handler)
        finally:
            teardown_logging(log_handlers)

    def shutdown(self):
        """Stop accepting connections once the current one is finished."""
        self._socket_server.shutdown()
