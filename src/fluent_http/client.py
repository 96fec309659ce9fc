"""
Request execution for fluent_http.

``execute`` performs a single-shot exchange over a fresh connection.
``Client`` keeps one connection open and reuses it while requests keep
going to the same host. Both paths share ``_exchange``.
"""

import logging
import sys
from typing import Dict, Optional

from .config import ClientConfig
from .exceptions import PersistentEOFError
from .http11 import HTTP11Connection, dump_request
from .http_primitives import URL, Body, Request, Response
from .network import NetworkBackend, SyncNetworkBackend
from .network.utils import normalize_host
from .transport import open_connection

logger = logging.getLogger(__name__)


def _dump(request: Request) -> None:
    sys.stdout.write(dump_request(request).decode("latin-1"))
    sys.stdout.write("\n")
    sys.stdout.flush()


def _exchange(
    connection: HTTP11Connection,
    request: Request,
    tolerate_persistent_eof: bool,
) -> Response:
    """
    Write one request and read one response on ``connection``.

    With ``tolerate_persistent_eof`` the persistent-EOF sentinel is treated
    as success and its response returned; otherwise it propagates.
    """
    connection.write_request(request)
    try:
        return connection.read_response()
    except PersistentEOFError as e:
        if not tolerate_persistent_eof:
            raise
        logger.debug("Server will close the connection after this response")
        return e.response


def execute(
    raw_url: str,
    request: Request,
    backend: Optional[NetworkBackend] = None,
    config: Optional[ClientConfig] = None,
) -> Response:
    """
    Send ``request`` to ``raw_url`` over a new connection.

    The connection is used for this exchange only and is closed once the
    response body has been read or the response closed.

    Raises:
        URLParseError: If ``raw_url`` is malformed
        DialError: If the connection cannot be established
        TLSError: If TLS negotiation or hostname verification fails
        WriteError: If the request cannot be sent
        ReadError: If the response cannot be read
    """
    config = config or ClientConfig()

    request.url = URL.parse(raw_url)
    if config.debug:
        _dump(request)

    connection = open_connection(request.url, backend, config, reusable=False)
    return _exchange(connection, request, tolerate_persistent_eof=True)


class Client:
    """
    HTTP client holding one persistent connection.

    The cached connection is reused while consecutive requests target the
    same host; a request to another host closes it and opens a new one.
    Instances are not safe for concurrent use.
    """

    def __init__(
        self,
        backend: Optional[NetworkBackend] = None,
        config: Optional[ClientConfig] = None,
    ):
        """
        Initialize the client.

        Args:
            backend: Network backend to use; blocking sockets when None
            config: Client configuration; defaults when None
        """
        self._backend = backend or SyncNetworkBackend()
        self._config = config or ClientConfig()
        self._connection: Optional[HTTP11Connection] = None
        self._last_url: Optional[URL] = None

    def request(
        self,
        raw_url: str,
        method: str,
        headers: Optional[Dict[str, str]] = None,
        body: Optional[Body] = None,
    ) -> Response:
        """
        Make an HTTP request, reusing the cached connection when possible.

        Args:
            raw_url: Absolute http or https URL
            method: HTTP method (GET, POST, PUT or DELETE)
            headers: Optional mapping of header name to value
            body: Optional text or bytes body

        Returns:
            The HTTP response. Read or close its body before the next
            request, otherwise the next request drains it first.

        Raises:
            URLParseError: If ``raw_url`` is malformed
            DialError: If a new connection cannot be established
            TLSError: If TLS negotiation or hostname verification fails
            WriteError: If the request cannot be sent
            ReadError: If the response cannot be read, including
                PersistentEOFError, which carries the complete response
        """
        url = URL.parse(raw_url)
        request = Request.create(
            method,
            url,
            headers=headers,
            body=body,
            user_agent=self._config.user_agent,
        )

        if self._needs_new_connection(url):
            self._replace_connection(url)
        else:
            logger.debug(f"Reusing connection to {url.host}")
        self._last_url = url

        if self._config.debug:
            _dump(request)

        try:
            return _exchange(self._connection, request, tolerate_persistent_eof=False)
        except PersistentEOFError:
            # The response now owns the connection and closes it when done.
            self._connection = None
            raise

    def _needs_new_connection(self, url: URL) -> bool:
        if self._connection is None or self._connection.is_closed:
            return True
        cached = (self._last_url.scheme, normalize_host(self._last_url.host))
        return cached != (url.scheme, normalize_host(url.host))

    def _replace_connection(self, url: URL) -> None:
        if self._connection is not None:
            logger.debug(f"Closing connection to {self._last_url.host}")
            self._connection.close()
            self._connection = None

        self._connection = open_connection(url, self._backend, self._config)

    @property
    def connection(self) -> Optional[HTTP11Connection]:
        """The cached connection, if any."""
        return self._connection

    @property
    def last_url(self) -> Optional[URL]:
        """The URL of the most recent request."""
        return self._last_url

    @property
    def config(self) -> ClientConfig:
        return self._config

    def close(self) -> None:
        """Close the cached connection."""
        if self._connection is not None:
            self._connection.close()
            self._connection = None

    def __enter__(self) -> "Client":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
