"""
=============================================================================
CORE NETWORKING COMPONENTS
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   SocketServer ──accept()──► Connection ──► ConnectionHandler        │
    │   (listen loop)              (client I/O)    (read, parse, respond,  │
    │                                               close)                 │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Everything runs on one thread. SocketServer calls the handler directly and
waits for it to return before accepting the next connection.

=============================================================================
"""

from .socket_server import SocketServer, ListenerState
from .connection import Connection, ConnectionState
from .handler import ConnectionHandler

__all__ = [
    "SocketServer",       # Listening socket + sequential accept loop
    "ListenerState",      # Lifecycle of the listening socket
    "Connection",         # Wrapper for one client socket
    "ConnectionState",    # Lifecycle of a client connection
    "ConnectionHandler",  # Serves one request per connection
]
