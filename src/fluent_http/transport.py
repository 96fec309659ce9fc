"""
Transport opener for fluent_http.

Turns a parsed URL into a ready HTTP11Connection: a TCP connection for
``http`` URLs, a TCP connection upgraded to verified TLS for ``https``.
"""

import logging
from typing import Optional

from .config import ClientConfig
from .http11 import HTTP11Connection
from .http_primitives import URL
from .network import NetworkBackend, SyncNetworkBackend
from .network.utils import strip_port

logger = logging.getLogger(__name__)


def open_connection(
    url: URL,
    backend: Optional[NetworkBackend] = None,
    config: Optional[ClientConfig] = None,
    reusable: bool = True,
) -> HTTP11Connection:
    """
    Open a transport connection to the host named by ``url``.

    When the URL has no explicit port the conventional port of its scheme
    is used (80 for http, 443 for https). For https the certificate is
    verified against the URL host with any port suffix removed.

    Args:
        url: Parsed URL with a non-empty host
        backend: Network backend; a blocking socket backend when None
        config: Client configuration; defaults when None
        reusable: Whether the connection may carry more than one exchange

    Returns:
        A new HTTP11Connection. The caller owns it and must close it.

    Raises:
        DialError: If the TCP connection cannot be established
        TLSError: If TLS negotiation or hostname verification fails
    """
    backend = backend or SyncNetworkBackend()
    config = config or ClientConfig()

    port = url.effective_port
    stream = backend.connect_tcp(url.hostname, port)

    if url.is_secure:
        server_hostname = strip_port(url.host).strip("[]")
        stream = backend.connect_tls(stream, server_hostname)

    logger.debug(f"Opened {url.scheme} connection to {url.hostname}:{port}")
    return HTTP11Connection(
        stream,
        reusable=reusable,
        read_chunk_size=config.read_chunk_size,
    )
