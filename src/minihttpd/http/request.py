"""
=============================================================================
HTTP REQUEST PARSER
=============================================================================

Turns the raw bytes read from a client socket into a Request object.

=============================================================================
HTTP REQUEST ANATOMY
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                     HTTP REQUEST STRUCTURE                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   GET /index.html HTTP/1.1\r\n       ← REQUEST LINE                 │
    │   ─┬─ ─────┬───── ────┬───                                          │
    │    │       │          │                                              │
    │  Method   URI      Version (read, then ignored)                     │
    │                                                                      │
    │   Host: localhost\r\n                ← HEADERS                      │
    │   User-Agent: curl/8.0\r\n                                          │
    │                                                                      │
    │   \r\n                               ← TERMINATOR (line == "\r")    │
    │                                                                      │
    │   name=value\n                       ← BODY (everything left)       │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
A FORGIVING PARSER
=============================================================================

This parser NEVER raises. Whatever arrives on the socket, the server still
answers with a well-formed HTTP response, so every field degrades to a
harmless default instead:

    Input                         Result
    ─────────────────────────     ──────────────────────────────────────
    b""                           UNKNOWN method, uri "", no headers
    b"BOGUS / HTTP/1.1\r\n..."    UNKNOWN method, uri "/"
    b"GET\r\n\r\n"                GET, uri ""
    b"X-No-Colon\r\n"             header line silently skipped
    b"\xff\xfe..."                decoded with U+FFFD replacements

What it does NOT do (on purpose, the server is minimal):
- no percent-decoding or normalisation of the URI
- no case folding of header names ("Host" and "host" are different keys)
- no Content-Length handling; the body is simply "whatever is left"

=============================================================================
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List


# ASCII whitespace only; str.split() would also break on NBSP, \x1c-\x1f, ...
_REQUEST_LINE_SEPARATOR = re.compile(r"[ \t\r\n\v\f]+")


class Method(Enum):
    """
    HTTP request methods.

    Anything that is not an exact, case-sensitive match for one of the
    standard names becomes UNKNOWN ("get" is UNKNOWN, not GET).
    """
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"
    OPTIONS = "OPTIONS"
    HEAD = "HEAD"
    TRACE = "TRACE"
    CONNECT = "CONNECT"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def from_token(cls, token: str) -> "Method":
        """Map a request-line token to a Method, falling back to UNKNOWN."""
        try:
            return cls(token)
        except ValueError:
            return cls.UNKNOWN


@dataclass(frozen=True)
class Request:
    """
    A parsed HTTP request.

    Immutable once built: one Request is created per connection and thrown
    away when the connection closes.

    Attributes:
        method: Request method, UNKNOWN if unrecognised or missing.
        uri: Second token of the request line, verbatim.
        headers: Header name → value, names exactly as the client wrote them.
        body: Everything after the blank line, as text.
    """

    method: Method = Method.UNKNOWN
    uri: str = ""
    headers: Dict[str, str] = field(default_factory=dict)
    body: str = ""

    def get_header(self, name: str, default: str = "") -> str:
        """Get a header value by its exact (case-sensitive) name."""
        return self.headers.get(name, default)


class RequestParser:
    """
    Parses raw HTTP request bytes into Request objects.

    ==========================================================================
    PARSING ALGORITHM
    ==========================================================================

        raw bytes
            │
            ▼  decode (UTF-8, invalid bytes replaced)
        text
            │
            ▼  split at "\n" (each line may keep its trailing "\r")
        lines
            │
            ├──► line 0          → method, uri (version discarded)
            ├──► lines until "\r" → headers  "Name: value"
            └──► the rest        → body (joined back with "\n")

    ==========================================================================
    """

    HEADER_TERMINATOR_LINE = "\r"
    TRIM_CHARS = " \t"

    def parse(self, raw: bytes) -> Request:
        """
        Parse raw request bytes.

        Total over all inputs: malformed, truncated or empty data gives a
        Request with default fields rather than an exception.

        Args:
            raw: Bytes accumulated from the socket.

        Returns:
            The parsed Request.
        """
        lines = self._split_lines(raw)
        if not lines:
            return Request()

        method, uri = self._parse_request_line(lines[0])

        # ─────────────────────────────────────────────────────────────────
        # HEADERS: up to the "\r" line left over from the blank CRLF
        # ─────────────────────────────────────────────────────────────────
        index = 1
        header_lines = []
        while index < len(lines) and lines[index] != self.HEADER_TERMINATOR_LINE:
            header_lines.append(lines[index])
            index += 1
        headers = self._parse_headers(header_lines)

        # Skip the terminator itself; whatever follows is the body
        body = "\n".join(lines[index + 1:])

        return Request(method=method, uri=uri, headers=headers, body=body)

    def _split_lines(self, raw: bytes) -> List[str]:
        """
        Decode and split into lines the way a line reader would.

        A trailing "\n" ends the last line; it does not start a new empty
        one, which is what trims the body's final newline.
        """
        text = raw.decode("utf-8", errors="replace")
        lines = text.split("\n")
        if lines[-1] == "":
            lines.pop()
        return lines

    def _parse_request_line(self, line: str) -> tuple[Method, str]:
        """
        Split the request line on runs of ASCII whitespace.

        Returns:
            (method, uri). Missing tokens leave UNKNOWN / "".
        """
        tokens = [t for t in _REQUEST_LINE_SEPARATOR.split(line) if t]
        method = Method.from_token(tokens[0]) if tokens else Method.UNKNOWN
        uri = tokens[1] if len(tokens) > 1 else ""
        return method, uri

    def _parse_headers(self, lines: List[str]) -> Dict[str, str]:
        """
        Parse "Name: value" lines.

        The name is everything before the first colon, untouched. The value
        loses its line-ending "\r" and then surrounding spaces and tabs.
        Lines with no colon are skipped; later duplicates overwrite earlier
        ones.
        """
        headers: Dict[str, str] = {}
        for line in lines:
            if line.endswith("\r"):
                line = line[:-1]
            name, colon, value = line.partition(":")
            if not colon:
                continue
            headers[name] = value.strip(self.TRIM_CHARS)
        return headers


def parse_request(raw: bytes) -> Request:
    """
    Convenience function to parse a request.

    Example:
        request = parse_request(b"GET /index.html HTTP/1.1\\r\\n\\r\\n")
        request.uri  # '/index.html'
    """
    return RequestParser().parse(raw)
