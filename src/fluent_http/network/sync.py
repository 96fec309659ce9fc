"""
Blocking socket backend for fluent_http.

This module provides the default NetworkBackend, built on the standard
``socket`` and ``ssl`` modules. Every call blocks the calling thread
until it completes or fails.
"""

import logging
import socket
import ssl
from typing import Any, Optional

from .backend import NetworkBackend
from .stream import NetworkStream
from .utils import create_ssl_context
from ..exceptions import DialError, TLSError

logger = logging.getLogger(__name__)


class SyncNetworkStream(NetworkStream):
    """NetworkStream over a connected (optionally TLS wrapped) socket."""

    DEFAULT_READ_SIZE = 65536

    def __init__(self, sock: socket.socket) -> None:
        self._sock = sock
        self._closed = False

    def read(self, max_bytes: Optional[int] = None) -> bytes:
        if self._closed:
            raise RuntimeError("Stream is closed")
        return self._sock.recv(max_bytes or self.DEFAULT_READ_SIZE)

    def write(self, data: bytes) -> None:
        if self._closed:
            raise RuntimeError("Stream is closed")
        if data:
            self._sock.sendall(data)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            self._sock.close()
        except OSError as e:
            logger.warning(f"Error closing socket: {e}")

    def get_extra_info(self, name: str) -> Optional[Any]:
        if name == "socket":
            return self._sock
        if name == "ssl_object":
            return self._sock if isinstance(self._sock, ssl.SSLSocket) else None
        try:
            if name == "peername":
                return self._sock.getpeername()
            if name == "sockname":
                return self._sock.getsockname()
        except OSError:
            return None
        return None

    @property
    def is_closed(self) -> bool:
        return self._closed


class SyncNetworkBackend(NetworkBackend):
    """
    Default blocking network backend.

    TCP connections are opened with ``socket.create_connection`` and
    upgraded to TLS with a context that uses the system trust store.
    """

    def __init__(self, ssl_context: Optional[ssl.SSLContext] = None) -> None:
        self._ssl_context = ssl_context

    def connect_tcp(self, host: str, port: int) -> SyncNetworkStream:
        try:
            sock = socket.create_connection((host, port))
        except OSError as e:
            raise DialError(f"cannot connect to {host}:{port}: {e}", cause=e) from e

        sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)
        logger.debug(f"TCP connection established to {host}:{port}")
        return SyncNetworkStream(sock)

    def connect_tls(
        self,
        stream: NetworkStream,
        server_hostname: str,
    ) -> SyncNetworkStream:
        sock = stream.get_extra_info("socket")
        if sock is None:
            raise TLSError("stream has no underlying socket")

        if self._ssl_context is None:
            self._ssl_context = create_ssl_context()

        try:
            tls_sock = self._ssl_context.wrap_socket(
                sock, server_hostname=server_hostname
            )
        except (ssl.SSLError, ssl.CertificateError) as e:
            stream.close()
            raise TLSError(
                f"handshake with {server_hostname} failed: {e}", cause=e
            ) from e
        except OSError as e:
            stream.close()
            raise TLSError(
                f"connection to {server_hostname} lost during handshake: {e}",
                cause=e,
            ) from e

        logger.debug(
            f"TLS established with {server_hostname} ({tls_sock.version()})"
        )
        return SyncNetworkStream(tls_sock)
