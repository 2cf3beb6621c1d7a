"""
=============================================================================
CONNECTION HANDLER
=============================================================================

Serves exactly one request on one accepted connection, then closes it.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    Per-Connection Sequence                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   1. conn.read_request()        bytes until \r\n\r\n or EOF          │
    │   2. RequestParser.parse()      bytes → Request (never raises)       │
    │   3. Response(), status 200     optimistic default                   │
    │   4. server_root + request.uri  plain string concatenation           │
    │   5. response.send_file()       200 + file, or 404                   │
    │   6. conn.send_response()       response.to_bytes()                  │
    │   7. conn.close()               always, no keep-alive                │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Unknown methods are not rejected: "BOGUS /index.html" is served like a GET.

The file path is NOT sanitised. "/../../etc/passwd" is appended to the
document root like any other URI, so anything readable by the server
process can be fetched. Run it against a root you are happy to expose, as
a user that can read nothing else.

=============================================================================
"""

import logging
import time

from ..http.request import Request, RequestParser
from ..http.response import Response, NOT_FOUND_BODY
from ..http.status_codes import HTTPStatus
from ..log import log_request
from .connection import Connection


logger = logging.getLogger(__name__)


class ConnectionHandler:
    """
    Callable that handles one connection from read to close.

    Holds only the document root and a stateless parser: every call builds
    its own Request and Response, so one handler can serve any number of
    connections, one after the other.

    Usage:
        handler = ConnectionHandler("/var/www/html/")
        server.start(handler)      # SocketServer calls handler(conn)
    """

    def __init__(self, server_root: str):
        """
        Args:
            server_root: Document root. Keep a trailing slash or not, the
                         URI is appended without adding one.
        """
        self.server_root = server_root
        self._parser = RequestParser()

    def __call__(self, conn: Connection) -> None:
        self.handle(conn)

    def handle(self, conn: Connection) -> None:
        """
        Serve one request on conn and close it.

        Socket errors are logged and end the connection; they are not
        raised, so the accept loop carries on with the next client.
        """
        start_time = time.time()

        with conn:
            try:
                raw_request = conn.read_request()
            except OSError as e:
                logger.error(f"[{conn.id}] Read failed from {conn.client_ip}: {e}")
                return

            request = self._parser.parse(raw_request)
            response = self.build_response(request)

            try:
                conn.send_response(response.to_bytes())
            except OSError as e:
                logger.error(f"[{conn.id}] Send failed to {conn.client_ip}: {e}")
                return

            log_request(
                client_ip=conn.client_ip,
                method=request.method.value,
                uri=request.uri,
                status_code=response.status_code,
                content_length=len(response.body),
                duration_ms=(time.time() - start_time) * 1000,
            )

    def build_response(self, request: Request) -> Response:
        """
        Resolve the request URI against the document root.

        Returns:
            A 200 response carrying the file, or a 404.
        """
        response = Response()
        response.set_status_code(HTTPStatus.OK)

        file_path = self.server_root + request.uri
        logger.debug(f"Trying: {file_path}")

        if not response.send_file(file_path):
            # Explicit 404, independent of send_file()'s own failure path
            response.set_status_code(HTTPStatus.NOT_FOUND)
            response.set_body(NOT_FOUND_BODY)

        return response
