"""
Fluent request builder for fluent_http.

Example::

    from fluent_http import get, post

    html = get("http://example.com/search").set_param("q", "a b").as_string()
    post("http://example.com/login").set_param("user", "bob").as_response()

Every terminal call (``as_string``, ``as_bytes``, ``as_file``,
``as_response``) finalizes the accumulated state and performs one
single-shot exchange.
"""

import logging
import os
from typing import Dict, Optional, Tuple, Union
from urllib.parse import quote

from .client import execute
from .config import ClientConfig
from .http_primitives import FORM_CONTENT_TYPE, Body, Request, Response
from .network import NetworkBackend
from .streams import copy_stream

logger = logging.getLogger(__name__)


def encode_params(params: Dict[str, str]) -> str:
    """
    Percent-encode parameters as ``key=value`` pairs joined by ``&``.

    Spaces become ``%20``; pairs keep insertion order.
    """
    return "&".join(
        f"{quote(str(key), safe='')}={quote(str(value), safe='')}"
        for key, value in params.items()
    )


class RequestBuilder:
    """
    Accumulates headers, parameters and a body for one request.

    Mutators return the builder itself so calls can be chained. Params are
    kept apart from headers: on GET they go into the query string, on POST
    they become a form-encoded body unless a body was set explicitly.
    """

    def __init__(
        self,
        method: str,
        url: str,
        config: Optional[ClientConfig] = None,
        backend: Optional[NetworkBackend] = None,
    ):
        self._config = config or ClientConfig()
        self._backend = backend
        self._url = url
        self._request = Request(method=method, user_agent=self._config.user_agent)
        self._params: Dict[str, str] = {}

    def set_header(self, key: str, value: str) -> "RequestBuilder":
        """Insert or replace a request header."""
        self._request.set_header(key, value)
        return self

    def set_param(self, key: str, value: str) -> "RequestBuilder":
        """Insert or replace a query or form parameter."""
        self._params[key] = value
        return self

    def set_body(self, data: Body) -> "RequestBuilder":
        """
        Set the request body from text or bytes.

        Raises:
            TypeError: If ``data`` is neither text nor bytes
        """
        self._request.set_body(data)
        return self

    def finalize(self) -> Tuple[str, Request]:
        """
        Compute the URL and request that a terminal call would send.

        The builder itself is left untouched, so finalizing twice yields
        the same result.
        """
        url = self._url
        request = self._request.copy()
        encoded = encode_params(self._params) if self._params else ""

        if request.method == "GET" and encoded:
            separator = "&" if "?" in url else "?"
            url = f"{url}{separator}{encoded}"
        elif request.method == "POST" and not request.has_body and encoded:
            request.set_body(encoded)
            if not request.has_header("Content-Type"):
                request.set_header("Content-Type", FORM_CONTENT_TYPE)

        return url, request

    def as_response(self) -> Response:
        """Send the request and return the response with its body unread."""
        url, request = self.finalize()
        logger.debug(f"{request.method} {url}")
        return execute(url, request, backend=self._backend, config=self._config)

    def as_bytes(self) -> bytes:
        """Send the request and return the whole body. b"" when there is none."""
        with self.as_response() as response:
            return response.read()

    def as_string(self) -> str:
        """Send the request and return the body decoded as text."""
        with self.as_response() as response:
            return response.text()

    def as_file(self, filename: Union[str, os.PathLike]) -> None:
        """
        Send the request and write the whole body to ``filename``.

        The file is created or truncated before the request is sent and
        closed on every path. Bytes already written are kept if the
        transfer fails part way.
        """
        with open(filename, "wb") as f:
            with self.as_response() as response:
                copied = copy_stream(response.stream, f)
        logger.debug(f"Wrote {copied} bytes to {filename}")

    @property
    def method(self) -> str:
        return self._request.method

    @property
    def url(self) -> str:
        return self._url

    @property
    def headers(self) -> Dict[str, str]:
        return dict(self._request.headers)

    @property
    def params(self) -> Dict[str, str]:
        return dict(self._params)


def get(
    url: str,
    config: Optional[ClientConfig] = None,
    backend: Optional[NetworkBackend] = None,
) -> RequestBuilder:
    """Start building a GET request."""
    return RequestBuilder("GET", url, config=config, backend=backend)


def post(
    url: str,
    config: Optional[ClientConfig] = None,
    backend: Optional[NetworkBackend] = None,
) -> RequestBuilder:
    """Start building a POST request."""
    return RequestBuilder("POST", url, config=config, backend=backend)


def put(
    url: str,
    config: Optional[ClientConfig] = None,
    backend: Optional[NetworkBackend] = None,
) -> RequestBuilder:
    """Start building a PUT request."""
    return RequestBuilder("PUT", url, config=config, backend=backend)


def delete(
    url: str,
    config: Optional[ClientConfig] = None,
    backend: Optional[NetworkBackend] = None,
) -> RequestBuilder:
    """Start building a DELETE request."""
    return RequestBuilder("DELETE", url, config=config, backend=backend)
