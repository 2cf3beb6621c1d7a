"""
=============================================================================
CONNECTION MANAGEMENT
=============================================================================

Wraps an accepted client socket with the three operations the server needs:
read one request, send one response, close.

=============================================================================
TCP IS A BYTE STREAM, NOT A MESSAGE PROTOCOL!
=============================================================================

TCP does not preserve message boundaries. A client that sends

    GET /index.html HTTP/1.1\r\nHost: x\r\n\r\n

in one write may be received as several recv() chunks:

    recv() → b"GET /index.ht"
    recv() → b"ml HTTP/1.1\r\nHost: x\r\n"
    recv() → b"\r\n"

So we accumulate chunks until the header terminator \r\n\r\n shows up
somewhere in the buffer, or the client closes its side.

=============================================================================
KNOWN LIMITATIONS
=============================================================================

- No maximum size: a client that never sends \r\n\r\n can make the buffer
  grow without bound.
- No timeout: a silent client blocks the (single-threaded) server until it
  closes the connection.
- Body bytes are only those that arrived with the headers; Content-Length
  is not consulted.

=============================================================================
CONNECTION STATE MACHINE
=============================================================================

    NEW ──────► READING ──────► PROCESSING ──────► WRITING
     │             │                │                  │
     └─────────────┴────────────────┴──────────────────┴──► CLOSED

=============================================================================
"""

import socket
import time
import logging
import uuid
from enum import Enum
from dataclasses import dataclass, field


logger = logging.getLogger(__name__)


HEADER_TERMINATOR = b"\r\n\r\n"


class ConnectionState(Enum):
    """Connection lifecycle states, for logging and debugging."""
    NEW = "new"                # Just accepted
    READING = "reading"        # Accumulating request bytes
    PROCESSING = "processing"  # Request read, response being built
    WRITING = "writing"        # Sending response bytes
    CLOSED = "closed"          # Socket released


@dataclass
class Connection:
    """
    One accepted client connection.

    Owned by exactly one handler call: the accept loop creates it, the
    handler reads, writes and closes it, and nothing keeps a reference
    afterwards.

    Attributes:
        socket: The client socket returned by accept().
        address: Client's (ip, port) tuple.
        id: Short random identifier for log lines.
        state: Current connection state.
        created_at: Timestamp when the connection was accepted.
        buffer_size: Bytes requested per recv() call.
    """

    socket: socket.socket
    address: tuple
    id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])
    state: ConnectionState = ConnectionState.NEW
    created_at: float = field(default_factory=time.time)
    buffer_size: int = 4096

    def __post_init__(self):
        # Plain blocking I/O: no timeout on client sockets
        self.socket.settimeout(None)

    @property
    def client_ip(self) -> str:
        """Get the client IP address."""
        return self.address[0] if self.address else "-"

    @property
    def age(self) -> float:
        """Get connection age in seconds."""
        return time.time() - self.created_at

    # =========================================================================
    # READING
    # =========================================================================

    def read_request(self) -> bytes:
        """
        Read from the socket until the header terminator or end of stream.

        ┌─────────────────────────────────────────────────────────────────┐
        │   buffer = b""                                                   │
        │   loop:                                                          │
        │       chunk = recv(buffer_size)                                  │
        │       chunk empty?              → stop (peer closed)             │
        │       buffer += chunk                                            │
        │       b"\\r\\n\\r\\n" in buffer?     → stop (headers complete)       │
        └─────────────────────────────────────────────────────────────────┘

        Returns:
            Everything read so far. May be empty or incomplete if the peer
            closed early; the parser copes with both.

        Raises:
            OSError: On socket errors other than a reset by the peer.
        """
        self.state = ConnectionState.READING
        buffer = b""

        while True:
            chunk = self._recv()
            if not chunk:
                break

            buffer += chunk

            if HEADER_TERMINATOR in buffer:
                break

        logger.debug(f"[{self.id}] Read {len(buffer)} bytes from {self.client_ip}")
        self.state = ConnectionState.PROCESSING
        return buffer

    def _recv(self) -> bytes:
        """
        Receive one chunk.

        Returns:
            Received bytes, or empty bytes if the client disconnected.
        """
        try:
            return self.socket.recv(self.buffer_size)
        except (ConnectionResetError, BrokenPipeError):
            # Client disconnected abruptly
            return b""

    # =========================================================================
    # WRITING
    # =========================================================================

    def send_response(self, data: bytes) -> None:
        """
        Send a complete response.

        sendall() keeps writing until every byte is out; a plain send()
        may write only part of the buffer.

        Raises:
            OSError: If the client went away mid-write.
        """
        self.state = ConnectionState.WRITING
        self.socket.sendall(data)

    # =========================================================================
    # CLOSING
    # =========================================================================

    def close(self):
        """
        Close the connection. Safe to call more than once.

        1. shutdown(SHUT_WR): send FIN, the client sees end-of-stream
        2. drain: unread request bytes left in the kernel buffer would turn
           close() into a RST, which can destroy the response in flight.
           Non-blocking: only bytes already buffered are read, so a peer
           that keeps its socket open never stalls the accept loop.
        3. close(): release the file descriptor
        """
        if self.state == ConnectionState.CLOSED:
            return

        try:
            self.socket.shutdown(socket.SHUT_WR)
        except OSError:
            pass  # Peer already gone

        try:
            self.socket.setblocking(False)
            while self.socket.recv(1024):
                pass
        except OSError:
            pass  # BlockingIOError: nothing more buffered

        try:
            self.socket.close()
        except OSError:
            pass

        self.state = ConnectionState.CLOSED
        logger.debug(f"[{self.id}] Connection closed after {self.age * 1000:.2f}ms")

    def __enter__(self):
        """
        Context manager entry.

            with conn:
                raw = conn.read_request()
                conn.send_response(data)
            # closed here, on every exit path
        """
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False  # Don't suppress exceptions
