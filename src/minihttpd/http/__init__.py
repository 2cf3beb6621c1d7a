"""
=============================================================================
HTTP PROTOCOL LAYER
=============================================================================

Pure protocol code: no sockets, no threads, no configuration.

    request.py       bytes    → Request
    response.py      Response → bytes  (plus file loading for 200/404)
    status_codes.py  status code → reason phrase
    mime_types.py    file path → Content-Type

=============================================================================
"""

from .request import Method, Request, RequestParser, parse_request
from .response import Response, NOT_FOUND_BODY
from .status_codes import HTTPStatus, get_status_message
from .mime_types import get_content_type

__all__ = [
    # Request parsing
    "Method",
    "Request",
    "RequestParser",
    "parse_request",

    # Response building
    "Response",
    "NOT_FOUND_BODY",

    # Status codes
    "HTTPStatus",
    "get_status_message",

    # Content types
    "get_content_type",
]
