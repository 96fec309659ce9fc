"""
Mock network implementations for testing.

This module provides mock implementations of NetworkStream and NetworkBackend
that can be used for unit testing without requiring actual network connections.
"""

from typing import Optional, Dict, Any, List, Set, Tuple
from .stream import NetworkStream
from .backend import NetworkBackend
from ..exceptions import DialError, TLSError


class MockNetworkStream(NetworkStream):
    """
    Mock network stream for testing.

    This implementation simulates a network stream in memory,
    allowing tests to verify network behavior without actual I/O.
    """

    def __init__(self, data: bytes = b""):
        """
        Initialize the mock stream.

        Args:
            data: Initial data to be available for reading.
        """
        self._data = data
        self._position = 0
        self._closed = False
        self._extra_info: Dict[str, Any] = {}
        self._write_buffer: List[bytes] = []
        self.read_error: Optional[Exception] = None
        self.write_error: Optional[Exception] = None

    def read(self, max_bytes: Optional[int] = None) -> bytes:
        """
        Read data from the mock stream.

        Raises:
            RuntimeError: If the stream is closed.
        """
        if self._closed:
            raise RuntimeError("Stream is closed")

        if self.read_error is not None:
            raise self.read_error

        if self._position >= len(self._data):
            return b""

        if max_bytes is None:
            result = self._data[self._position:]
            self._position = len(self._data)
        else:
            end = min(self._position + max_bytes, len(self._data))
            result = self._data[self._position:end]
            self._position = end

        return result

    def write(self, data: bytes) -> None:
        """
        Write data to the mock stream.

        Raises:
            RuntimeError: If the stream is closed.
        """
        if self._closed:
            raise RuntimeError("Stream is closed")

        if self.write_error is not None:
            raise self.write_error

        self._write_buffer.append(data)

    def close(self) -> None:
        """Close the mock stream."""
        self._closed = True

    def get_extra_info(self, name: str) -> Optional[Any]:
        return self._extra_info.get(name)

    @property
    def is_closed(self) -> bool:
        """Check if the mock stream is closed."""
        return self._closed

    @property
    def written_data(self) -> bytes:
        """Get all data that was written to the stream."""
        return b"".join(self._write_buffer)

    def set_extra_info(self, name: str, value: Any) -> None:
        self._extra_info[name] = value

    def add_data(self, data: bytes) -> None:
        """Add data to be available for reading."""
        self._data += data


class MockNetworkBackend(NetworkBackend):
    """
    Mock network backend for testing.

    Every ``connect_tcp`` call creates a fresh MockNetworkStream seeded with
    the response data registered for that endpoint, so tests can tell a
    reused connection from a new one by identity.
    """

    def __init__(self):
        """Initialize the mock backend."""
        self._responses: Dict[Tuple[str, int], bytes] = {}
        self._unreachable: Set[Tuple[str, int]] = set()
        self._untrusted: Set[str] = set()
        self.streams: List[MockNetworkStream] = []
        self.tls_hostnames: List[str] = []
        self.connect_calls: List[Tuple[str, int]] = []

    def add_response(self, host: str, port: int, data: bytes) -> None:
        """
        Register raw response bytes served by new connections to an endpoint.

        Calling this repeatedly for the same endpoint appends, which is how
        tests script several responses on one persistent connection.
        """
        key = (host, port)
        self._responses[key] = self._responses.get(key, b"") + data

    def refuse(self, host: str, port: int) -> None:
        """Make connections to an endpoint fail with DialError."""
        self._unreachable.add((host, port))

    def reject_certificate(self, hostname: str) -> None:
        """Make TLS handshakes for a hostname fail with TLSError."""
        self._untrusted.add(hostname)

    def connect_tcp(self, host: str, port: int) -> MockNetworkStream:
        """
        Create a mock TCP connection.

        Args:
            host: The hostname to connect to.
            port: The port number to connect to.

        Returns:
            A MockNetworkStream representing the connection.
        """
        key = (host, port)
        self.connect_calls.append(key)

        if key in self._unreachable:
            raise DialError(f"cannot connect to {host}:{port}: connection refused")

        stream = MockNetworkStream(self._responses.get(key, b""))
        stream.set_extra_info("socket", len(self.streams))
        stream.set_extra_info("peername", (host, port))
        stream.set_extra_info("sockname", ("127.0.0.1", 12345))
        self.streams.append(stream)

        return stream

    def connect_tls(
        self,
        stream: MockNetworkStream,
        server_hostname: str,
    ) -> MockNetworkStream:
        """
        Mark a mock stream as TLS protected.

        The same stream object is returned so the seeded response data
        stays readable.
        """
        self.tls_hostnames.append(server_hostname)

        if server_hostname in self._untrusted:
            stream.close()
            raise TLSError(f"certificate is not valid for {server_hostname!r}")

        stream.set_extra_info("ssl_object", True)
        stream.set_extra_info("server_hostname", server_hostname)

        return stream

    @property
    def connection_count(self) -> int:
        """Number of TCP connections opened so far."""
        return len(self.streams)

    def reset(self) -> None:
        """Reset all mock connections and scripted responses."""
        self._responses.clear()
        self._unreachable.clear()
        self._untrusted.clear()
        self.streams.clear()
        self.tls_hostnames.clear()
        self.connect_calls.clear()
