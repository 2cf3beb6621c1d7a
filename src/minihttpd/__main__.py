"""
=============================================================================
CLI ENTRY POINT
=============================================================================

    # Configuration from /etc/http-server/conf.json
    python -m minihttpd

    # Configuration from somewhere else
    python -m minihttpd ./conf.json

Runs until Ctrl+C / SIGTERM. Exits with status 1 if the listening socket
cannot be set up (port in use, port < 1024 without root, ...).

=============================================================================
"""

import argparse
import sys

from . import __version__
from .config import DEFAULT_CONFIG_PATH
from .server import HTTPServer


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="minihttpd",
        description="Minimal static file HTTP/1.1 server",
    )

    parser.add_argument(
        "config_path",
        nargs="?",
        default=DEFAULT_CONFIG_PATH,
        help=f"JSON configuration file (default: {DEFAULT_CONFIG_PATH})",
    )

    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"minihttpd {__version__}",
    )

    args = parser.parse_args(argv)

    server = HTTPServer(args.config_path)

    try:
        server.start_listening()
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
