"""
Network backend interface for fluent_http.

This module defines the NetworkBackend interface that provides
abstractions for creating TCP connections and upgrading them to TLS.
"""

from abc import ABC, abstractmethod
from .stream import NetworkStream


class NetworkBackend(ABC):
    """
    Interface for network backend implementations.

    The transport opener only talks to this interface, which lets tests
    swap the real socket backend for an in-memory one.
    """

    @abstractmethod
    def connect_tcp(self, host: str, port: int) -> NetworkStream:
        """
        Connect to a TCP endpoint.

        Args:
            host: The hostname or IP address to connect to.
            port: The port number to connect to.

        Returns:
            A NetworkStream representing the TCP connection.

        Raises:
            DialError: If the connection fails.
        """
        pass

    @abstractmethod
    def connect_tls(
        self,
        stream: NetworkStream,
        server_hostname: str,
    ) -> NetworkStream:
        """
        Upgrade a TCP stream to TLS.

        The handshake uses the system trust store and verifies that the
        presented certificate matches ``server_hostname``.

        Args:
            stream: The existing TCP NetworkStream to upgrade.
            server_hostname: Hostname used for SNI and certificate verification.

        Returns:
            A NetworkStream representing the TLS connection.

        Raises:
            TLSError: If the handshake or hostname verification fails.
        """
        pass
