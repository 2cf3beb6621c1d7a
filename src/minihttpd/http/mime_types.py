"""
=============================================================================
CONTENT-TYPE DETECTION
=============================================================================

Maps a file path to the Content-Type header sent with it.

The table is deliberately small and the match is a plain, CASE-SENSITIVE
suffix test on the path string:

    index.html   → text/html
    logo.png     → image/png
    logo.PNG     → application/octet-stream   (no lowercase folding!)
    app.js       → text/plain
    archive.tgz  → application/octet-stream   (fallback)

Order matters only for readability here: no suffix in the table is a
suffix of another one.

=============================================================================
"""

from typing import List, Tuple


# (suffix, content type), checked top to bottom with str.endswith()
CONTENT_TYPES: List[Tuple[str, str]] = [
    (".html", "text/html"),
    (".htm", "text/html"),
    (".css", "text/css"),
    (".js", "text/plain"),
    (".png", "image/png"),
    (".jpg", "image/jpeg"),
    (".jpeg", "image/jpeg"),
    (".gif", "image/gif"),
    (".txt", "text/plain"),
]

# "I don't know what this is, treat as binary"
DEFAULT_CONTENT_TYPE = "application/octet-stream"


def get_content_type(path: str) -> str:
    """
    Get the Content-Type for a file path.

    Args:
        path: File path or name. Only its ending is inspected.

    Returns:
        The content type from CONTENT_TYPES, or DEFAULT_CONTENT_TYPE.

    Examples:
        >>> get_content_type("/var/www/html/style.css")
        'text/css'
        >>> get_content_type("photo.JPG")
        'application/octet-stream'
    """
    for suffix, content_type in CONTENT_TYPES:
        if path.endswith(suffix):
            return content_type
    return DEFAULT_CONTENT_TYPE
