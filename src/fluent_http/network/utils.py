"""
Network utilities for fluent_http.

This module provides helpers for URL parsing, host/port handling
and SSL context setup.
"""

import ssl
from typing import Optional, Tuple
from urllib.parse import urlsplit

from ..exceptions import URLParseError

DEFAULT_PORTS = {
    "http": 80,
    "https": 443,
}


def has_port(host: str) -> bool:
    """
    Check whether a network location carries an explicit port.

    A colon inside an IPv6 bracket segment does not count, so
    ``[::1]`` has no port while ``[::1]:8080`` does.
    """
    return host.rfind(":") > host.rfind("]")


def strip_port(host: str) -> str:
    """
    Remove a trailing ``:port`` suffix from a network location.

    Args:
        host: Network location such as ``example.com:8443`` or ``[::1]:80``

    Returns:
        The host portion, brackets kept for IPv6 literals
    """
    if has_port(host):
        return host[:host.rfind(":")]
    return host


def default_port(scheme: str) -> int:
    """
    Get the conventional port for a scheme.

    Raises:
        URLParseError: If the scheme is not http or https
    """
    try:
        return DEFAULT_PORTS[scheme]
    except KeyError:
        raise URLParseError(f"unsupported scheme {scheme!r}") from None


def parse_url(url: str) -> Tuple[str, str, str, Optional[int], str]:
    """
    Parse URL into components.

    Args:
        url: URL string to parse

    Returns:
        Tuple of (scheme, host, hostname, port, target) where ``host`` is the
        network location as written (port included when present),
        ``hostname`` is the bare host used for DNS and certificate checks,
        ``port`` is the explicit port or None and ``target`` is the path
        plus query sent on the request line.

    Raises:
        URLParseError: If URL is malformed or the scheme is unsupported
    """
    if not isinstance(url, str) or not url:
        raise URLParseError(f"invalid URL {url!r}")

    try:
        parsed = urlsplit(url)
        port = parsed.port
    except ValueError as e:
        raise URLParseError(f"{url!r}: {e}", cause=e) from e

    scheme = parsed.scheme.lower()
    if scheme not in DEFAULT_PORTS:
        raise URLParseError(f"unsupported scheme in {url!r}")

    host = parsed.netloc.rpartition("@")[2]
    hostname = parsed.hostname or ""
    if not hostname:
        raise URLParseError(f"no hostname found in {url!r}")

    target = parsed.path or "/"
    if parsed.query:
        target += "?" + parsed.query

    return scheme, host, hostname, port, target


def format_host_header(host: str, port: int, scheme: str) -> str:
    """
    Format host header for HTTP requests.

    Args:
        host: Hostname (IPv6 literals without brackets)
        port: Port number
        scheme: URL scheme

    Returns:
        Formatted host header string
    """
    if ":" in host:
        host = f"[{host}]"
    if port == DEFAULT_PORTS.get(scheme):
        return host
    return f"{host}:{port}"


def create_ssl_context(cafile: Optional[str] = None) -> ssl.SSLContext:
    """
    Create an SSL context that verifies certificates and hostnames.

    Args:
        cafile: Optional CA bundle; the system trust store is used when None

    Returns:
        Configured SSL context
    """
    context = ssl.create_default_context(cafile=cafile)
    context.verify_mode = ssl.CERT_REQUIRED
    context.check_hostname = True

    context.options |= ssl.OP_NO_COMPRESSION
    context.minimum_version = ssl.TLSVersion.TLSv1_2

    context.set_alpn_protocols(["http/1.1"])

    return context


def normalize_host(host: str) -> str:
    """
    Normalize hostname for consistent comparison.

    Args:
        host: Hostname to normalize

    Returns:
        Normalized hostname
    """
    # Remove trailing dots (common in DNS)
    host = host.rstrip('.')

    return host.lower()
