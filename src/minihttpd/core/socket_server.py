"""
=============================================================================
LISTENER LOOP
=============================================================================

Owns the listening socket and hands accepted connections, one at a time,
to a connection handler.

=============================================================================
SOCKET LIFECYCLE (Server Side)
=============================================================================

    1. socket()    Create a TCP socket
    2. bind()      Reserve IP:PORT ("0.0.0.0" = every interface)
    3. listen()    Let the OS queue incoming connections (backlog)
    4. accept()    Take one queued connection → new client socket
    5. close()     Release the listening socket on shutdown

=============================================================================
STATE MACHINE
=============================================================================

    CREATED ──► BOUND ──► LISTENING ──► ACCEPTING ◄─┐
       │          │           │             │        │ next connection
       │          │           │             └────────┘
       ▼          ▼           ▼             │
     FAILED ◄─────┴───────────┘             ▼ shutdown()
                                         STOPPED

Setup failures (socket/bind/listen) are fatal: the error is logged, the
socket closed, and the OSError re-raised. The accept loop never starts.

Once ACCEPTING, nothing a single client does can stop the loop:

- accept() fails      → logged, try again
- handler raises      → logged, next connection

=============================================================================
ONE CONNECTION AT A TIME
=============================================================================

The handler runs synchronously inside the loop. Connection N is read,
answered and closed before accept() is called for connection N+1; others
wait in the OS backlog meanwhile. A slow client stalls everyone behind it.

=============================================================================
"""

import socket
import signal
import logging
import threading
from enum import Enum
from typing import Optional, Callable, Tuple

from ..config import ServerConfig
from .connection import Connection


logger = logging.getLogger(__name__)


# How often accept() wakes up to check for shutdown
ACCEPT_POLL_INTERVAL = 1.0


class ListenerState(Enum):
    """Lifecycle states of the listening socket."""
    CREATED = "created"
    BOUND = "bound"
    LISTENING = "listening"
    ACCEPTING = "accepting"
    STOPPED = "stopped"
    FAILED = "failed"


class SocketServer:
    """
    Sequential TCP accept loop.

    Usage:
        def handle_connection(conn: Connection):
            ...

        server = SocketServer(config)
        server.start(handle_connection)  # Blocks until shutdown()
    """

    def __init__(self, config: ServerConfig):
        """
        Initialize the socket server.

        Args:
            config: Server configuration (host, port, backlog, buffer_size).

        Note: The socket is created lazily in start().
        """
        self.config = config
        self.state = ListenerState.CREATED

        self._socket: Optional[socket.socket] = None
        self._running = False

        # Set once the loop has exited and the socket is closed
        self._stopped_event = threading.Event()

        self._original_handlers: dict = {}

    @property
    def is_running(self) -> bool:
        """Check if the accept loop is running."""
        return self._running

    @property
    def address(self) -> Tuple[str, int]:
        """The bound (ip, port), or the configured one before binding."""
        if self._socket is not None:
            return self._socket.getsockname()[:2]
        return (self.config.host, self.config.port)

    def start(self, connection_handler: Callable[[Connection], None]):
        """
        Bind, listen and run the accept loop.

        BLOCKS until shutdown() is called.

        Args:
            connection_handler: Called with each accepted Connection. It
                                owns the connection and must close it.

        Raises:
            OSError: If the socket cannot be created, bound or put into
                     listening mode.
        """
        self._setup_socket()

        self._running = True
        self._stopped_event.clear()
        self._setup_signals()

        host, port = self.address
        logger.info(f"Server listening on {host}:{port}")

        try:
            self._accept_loop(connection_handler)
        finally:
            self._cleanup()

    def _setup_socket(self):
        """Run the socket → bind → listen steps, or fail with FAILED."""
        try:
            self._socket = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        except OSError as e:
            logger.error(f"Could not create socket: {e}")
            self.state = ListenerState.FAILED
            raise

        try:
            # Restarting right after a stop would otherwise hit
            # "Address already in use" while old sockets sit in TIME_WAIT
            self._socket.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)

            self._socket.bind((self.config.host, self.config.port))
            self.state = ListenerState.BOUND
        except OSError as e:
            logger.error(f"Could not bind to {self.config.host}:{self.config.port}: {e}")
            self._fail()
            raise

        try:
            self._socket.listen(self.config.backlog)
            self.state = ListenerState.LISTENING
        except OSError as e:
            logger.error(f"Could not listen on port {self.config.port}: {e}")
            self._fail()
            raise

        # Lets the loop notice shutdown() without a connection arriving
        self._socket.settimeout(ACCEPT_POLL_INTERVAL)

    def _fail(self):
        self.state = ListenerState.FAILED
        self._socket.close()
        self._socket = None

    def _accept_loop(self, connection_handler: Callable[[Connection], None]):
        """
        Accept and handle connections until shutdown().

        ┌─────────────────────────────────────────────────────────────────┐
        │   while running:                                                 │
        │       accept()            (1 s timeout → check running again)   │
        │       Connection(...)                                            │
        │       connection_handler(conn)   ← runs to completion here      │
        └─────────────────────────────────────────────────────────────────┘
        """
        self.state = ListenerState.ACCEPTING

        while self._running:
            try:
                client_socket, client_address = self._socket.accept()
            except socket.timeout:
                continue
            except OSError as e:
                if not self._running:
                    break
                logger.error(f"Could not accept client connection: {e}")
                continue

            logger.debug(f"Accepted connection from {client_address[0]}:{client_address[1]}")

            conn = Connection(
                socket=client_socket,
                address=client_address,
                buffer_size=self.config.buffer_size,
            )

            try:
                connection_handler(conn)
            except Exception as e:
                logger.exception(f"[{conn.id}] Unhandled error: {e}")
                conn.close()

    def shutdown(self):
        """
        Ask the accept loop to stop.

        Safe from another thread or a signal handler, and safe to call more
        than once. The connection being served (if any) is finished first.
        """
        logger.info("Shutting down socket server...")
        self._running = False

    def wait_for_shutdown(self, timeout: Optional[float] = None) -> bool:
        """
        Wait until the loop has exited and the socket is closed.

        Returns:
            True if stopped, False on timeout.
        """
        return self._stopped_event.wait(timeout)

    # =========================================================================
    # SIGNALS
    # =========================================================================

    def _setup_signals(self):
        """
        Turn SIGINT (Ctrl+C) and SIGTERM into a clean shutdown().

        Python only allows installing signal handlers from the main thread;
        when started from any other thread (tests, embedding) this is
        skipped and the caller is expected to call shutdown() itself.
        """
        if threading.current_thread() is not threading.main_thread():
            return

        def shutdown_handler(signum, frame):
            signal_name = signal.Signals(signum).name
            logger.info(f"Received {signal_name}, initiating shutdown...")
            self.shutdown()

        self._original_handlers[signal.SIGTERM] = signal.signal(signal.SIGTERM, shutdown_handler)
        self._original_handlers[signal.SIGINT] = signal.signal(signal.SIGINT, shutdown_handler)

    def _restore_signals(self):
        for sig, handler in self._original_handlers.items():
            signal.signal(sig, handler)
        self._original_handlers.clear()

    def _cleanup(self):
        """Restore signal handlers and close the listening socket."""
        self._running = False
        self._restore_signals()

        if self._socket:
            try:
                self._socket.close()
            except OSError:
                pass  # Already closed
            self._socket = None

        self.state = ListenerState.STOPPED
        self._stopped_event.set()
        logger.info("Socket server stopped")
