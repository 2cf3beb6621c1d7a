"""
=============================================================================
HTTP RESPONSE BUILDER
=============================================================================

Accumulates a status code, headers and a body, then serializes them into
the bytes written back to the client.

=============================================================================
HTTP RESPONSE ANATOMY
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                     HTTP RESPONSE STRUCTURE                         │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   HTTP/1.1 200 OK\r\n              ← STATUS LINE (always HTTP/1.1)  │
    │   Content-Type: text/html\r\n      ← HEADERS (dict order)           │
    │   Content-Length: 11\r\n                                            │
    │   \r\n                             ← EMPTY LINE (separator)         │
    │   hello world                      ← BODY (raw bytes, no trailer)   │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Nothing is added behind the caller's back: no Date, no Server, and no
Content-Length unless send_file() (or the caller) put one there. A 404
produced for a missing file therefore has no headers at all; the client
reads the body until the connection closes.

=============================================================================
BUILDER USAGE
=============================================================================

    response = Response()
    response.set_status_code(200)
    if not response.send_file("/var/www/html/index.html"):
        ...                        # already a 404 with a short text body
    sock.sendall(response.to_bytes())

=============================================================================
"""

import logging
from typing import Dict, Union

from .mime_types import get_content_type
from .status_codes import HTTPStatus, get_status_message


logger = logging.getLogger(__name__)


NOT_FOUND_BODY = b"404 Not Found"
HTTP_VERSION = "HTTP/1.1"


class Response:
    """
    Mutable HTTP response, one per connection.

    The reason phrase is derived, never stored on its own: assigning
    status_code (directly or through set_status_code) recomputes
    status_message from the fixed phrase table.

    Attributes:
        status_code: Numeric status, 200 until told otherwise.
        status_message: Read-only phrase matching status_code.
        headers: Header name → value. No case folding, last write wins.
        body: Raw body bytes.
    """

    def __init__(self):
        self.headers: Dict[str, str] = {}
        self.body: bytes = b""
        self.status_code = HTTPStatus.OK

    @property
    def status_code(self) -> int:
        return self._status_code

    @status_code.setter
    def status_code(self, code: int):
        self._status_code = int(code)
        self._status_message = get_status_message(self._status_code)

    @property
    def status_message(self) -> str:
        return self._status_message

    @property
    def status_line(self) -> str:
        """Status line without its CRLF, e.g. "HTTP/1.1 404 Not Found"."""
        return f"{HTTP_VERSION} {self._status_code} {self._status_message}"

    # =========================================================================
    # BUILDER METHODS
    # =========================================================================

    def set_status_code(self, code: int) -> "Response":
        """
        Set the status code and its phrase.

        No range validation: 999 is accepted and reads "Unknown Status".

        Returns:
            Self for method chaining
        """
        self.status_code = code
        return self

    def add_header(self, name: str, value: str) -> "Response":
        """
        Insert or replace a header.

        Returns:
            Self for method chaining
        """
        self.headers[name] = value
        return self

    def set_body(self, content: Union[str, bytes]) -> "Response":
        """
        Replace the body.

        Strings are encoded to UTF-8, bytes are kept as they are.

        Returns:
            Self for method chaining
        """
        if isinstance(content, str):
            self.body = content.encode("utf-8")
        else:
            self.body = bytes(content)
        return self

    def send_file(self, path: str) -> bool:
        """
        Load a file from disk into this response.

        =====================================================================
        ON SUCCESS
        =====================================================================

            body            ← the whole file, read in binary mode
            Content-Type    ← from the suffix table (case-sensitive)
            Content-Length  ← len(body) in decimal
            status_code     ← untouched (set 200 yourself beforehand)

        =====================================================================
        ON FAILURE
        =====================================================================

        Anything that stops the file from being opened or read (missing
        file, directory, permission denied, a NUL byte in the path) turns
        this response into a 404 with body "404 Not Found". The response
        stays usable.

        =====================================================================

        Args:
            path: Filesystem path to read.

        Returns:
            True if the file was loaded, False otherwise.
        """
        try:
            with open(path, "rb") as f:
                content = f.read()
        except (OSError, ValueError) as e:
            # ValueError: open() rejects paths with an embedded NUL byte
            logger.debug(f"Cannot read {path!r}: {e}")
            self.set_status_code(HTTPStatus.NOT_FOUND)
            self.set_body(NOT_FOUND_BODY)
            return False

        self.set_body(content)
        self.add_header("Content-Type", get_content_type(path))
        self.add_header("Content-Length", str(len(self.body)))
        return True

    # =========================================================================
    # SERIALIZATION
    # =========================================================================

    def to_bytes(self) -> bytes:
        """
        Serialize the response for socket.sendall().

            HTTP/1.1 {code} {message}\\r\\n
            {name}: {value}\\r\\n        (one per header, dict order)
            \\r\\n
            {body}

        Header order follows the dict and is not part of the contract.

        Returns:
            Complete HTTP response as bytes
        """
        lines = [self.status_line]
        for name, value in self.headers.items():
            lines.append(f"{name}: {value}")
        head = "\r\n".join(lines) + "\r\n\r\n"
        return head.encode("utf-8") + self.body

    def __bytes__(self) -> bytes:
        return self.to_bytes()

    def __repr__(self) -> str:
        return (
            f"Response(status_code={self._status_code}, "
            f"headers={self.headers!r}, body_length={len(self.body)})"
        )
