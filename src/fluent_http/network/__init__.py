"""
Network backend components for fluent_http.

This module provides the low-level networking abstractions:
network streams, the backends that create them, and helpers
for URL and host handling.
"""

from .backend import NetworkBackend
from .stream import NetworkStream
from .sync import SyncNetworkBackend, SyncNetworkStream
from .mock import MockNetworkBackend, MockNetworkStream
from .utils import (
    DEFAULT_PORTS,
    create_ssl_context,
    default_port,
    format_host_header,
    has_port,
    normalize_host,
    parse_url,
    strip_port,
)

__all__ = [
    "NetworkBackend",
    "NetworkStream",
    "SyncNetworkBackend",
    "SyncNetworkStream",
    "MockNetworkBackend",
    "MockNetworkStream",
    "DEFAULT_PORTS",
    "create_ssl_context",
    "default_port",
    "format_host_header",
    "has_port",
    "normalize_host",
    "parse_url",
    "strip_port",
]
