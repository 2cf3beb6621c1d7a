"""
=============================================================================
MINIHTTPD - Minimal Static File HTTP/1.1 Server
=============================================================================

Serves files from a document root over raw sockets, one connection at a
time.

    GET /index.html HTTP/1.1           HTTP/1.1 200 OK
    Host: example.com          ──►     Content-Type: text/html
                                       Content-Length: 11

                                       hello world

=============================================================================
PACKAGE STRUCTURE
=============================================================================

    minihttpd/
    ├── __init__.py          # This file - package exports
    ├── __main__.py          # CLI entry point (python -m minihttpd)
    ├── server.py            # HTTPServer: config + logging + listener
    ├── config.py            # ServerConfig and the JSON loader
    ├── log.py               # Logging setup and access log lines
    ├── core/
    │   ├── socket_server.py # Listening socket, sequential accept loop
    │   ├── connection.py    # One client socket: read, send, close
    │   └── handler.py       # One request: parse, resolve file, respond
    └── http/
        ├── request.py       # bytes → Request
        ├── response.py      # Response → bytes
        ├── status_codes.py  # Status code → reason phrase
        └── mime_types.py    # File suffix → Content-Type

=============================================================================
QUICK START
=============================================================================

    from minihttpd import HTTPServer, ServerConfig

    server = HTTPServer(config=ServerConfig(port=8080, server_root="./public"))
    server.start_listening()

=============================================================================
"""

__version__ = "1.0.0"

from .server import HTTPServer
from .config import ServerConfig, load_config

__all__ = ["HTTPServer", "ServerConfig", "load_config", "__version__"]
