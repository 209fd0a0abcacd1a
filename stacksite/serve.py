from __future__ import annotations

import functools
import http.server
import socketserver
from pathlib import Path

from .log import get_logger

logger = get_logger("serve")


def make_server(directory: Path, port: int) -> socketserver.TCPServer:
    handler = functools.partial(http.server.SimpleHTTPRequestHandler, directory=str(directory))
    return socketserver.TCPServer(("", port), handler)


def serve_directory(directory: Path, port: int) -> None:
    with make_server(directory, port) as httpd:
        print(f"Serving {directory} at http://localhost:{port}")
        print("Press Ctrl+C to stop")
        try:
            httpd.serve_forever()
        except KeyboardInterrupt:
            print("\nServer stopped.")
