"""
Pytest configuration for fluent_http tests.

This file contains shared fixtures and configuration
for all tests in the project.
"""

import json
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Dict, List, Optional, Tuple

import pytest

from fluent_http.network.mock import MockNetworkBackend


def build_response(
    status: int = 200,
    body: bytes = b"",
    headers: Optional[List[Tuple[str, str]]] = None,
    reason: str = "OK",
    close: bool = False,
    version: str = "1.1",
) -> bytes:
    """Build raw HTTP response bytes for the mock backend."""
    lines = [f"HTTP/{version} {status} {reason}"]
    names = set()
    for name, value in headers or []:
        lines.append(f"{name}: {value}")
        names.add(name.lower())
    if "content-length" not in names and "transfer-encoding" not in names:
        lines.append(f"Content-Length: {len(body)}")
    if close:
        lines.append("Connection: close")
    head = "\r\n".join(lines) + "\r\n\r\n"
    return head.encode("latin-1") + body


@pytest.fixture
def make_response():
    """Factory for raw HTTP response bytes."""
    return build_response


@pytest.fixture
def mock_backend():
    """Create a fresh in-memory network backend."""
    return MockNetworkBackend()


@pytest.fixture
def sample_headers() -> Dict[str, str]:
    """Sample headers for testing."""
    return {
        "Content-Type": "application/json",
        "Authorization": "Bearer token123",
        "Accept": "*/*",
    }


class EchoHandler(BaseHTTPRequestHandler):
    """
    Request handler used by the local test server.

    ``/echo`` returns the request body as is, ``/close`` does the same and
    asks the client to close the connection, and every other path returns
    a JSON description of the request.
    """

    protocol_version = "HTTP/1.1"

    def _handle(self) -> None:
        length = int(self.headers.get("Content-Length") or 0)
        body = self.rfile.read(length) if length else b""

        if self.path.startswith("/echo") or self.path.startswith("/close"):
            payload = body
            content_type = self.headers.get("Content-Type") or "application/octet-stream"
        else:
            payload = json.dumps({
                "method": self.command,
                "path": self.path,
                "user_agent": self.headers.get("User-Agent"),
                "content_length": self.headers.get("Content-Length"),
                "content_type": self.headers.get("Content-Type"),
                "body": body.decode("utf-8", errors="replace"),
                "client_port": self.client_address[1],
            }).encode()
            content_type = "application/json; charset=utf-8"

        self.send_response(200)
        self.send_header("Content-Type", content_type)
        self.send_header("Content-Length", str(len(payload)))
        if self.path.startswith("/close"):
            self.send_header("Connection", "close")
            self.close_connection = True
        self.end_headers()
        self.wfile.write(payload)

    do_GET = _handle
    do_POST = _handle
    do_PUT = _handle
    do_DELETE = _handle

    def log_message(self, format, *args) -> None:
        pass


@pytest.fixture
def echo_server():
    """Run a local HTTP/1.1 echo server and yield its base URL."""
    server = ThreadingHTTPServer(("127.0.0.1", 0), EchoHandler)
    server.daemon_threads = True
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()

    host, port = server.server_address[:2]
    yield f"http://{host}:{port}"

    server.shutdown()
    server.server_close()
    thread.join(timeout=5)
