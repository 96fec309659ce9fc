"""
fluent_http - small synchronous HTTP/1.1 client

A fluent request builder (get/post/put/delete) and a persistent
connection client on top of h11.
"""

from .config import __version__, DEFAULT_USER_AGENT, ClientConfig

__author__ = "Developer"
__email__ = "dev@example.com"

# Import main components for easy access
from .http_primitives import URL, Request, Response
from .http11 import HTTP11Connection, ConnectionState, dump_request
from .transport import open_connection
from .client import Client, execute
from .builder import RequestBuilder, get, post, put, delete, encode_params
from .streams import ResponseStream, read_stream_to_bytes, copy_stream
from .exceptions import (
    FluentHTTPError,
    URLParseError,
    DialError,
    TLSError,
    WriteError,
    ReadError,
    PersistentEOFError,
    StreamError,
)

__all__ = [
    "__version__",
    "DEFAULT_USER_AGENT",
    "ClientConfig",
    "URL",
    "Request",
    "Response",
    "HTTP11Connection",
    "ConnectionState",
    "dump_request",
    "open_connection",
    "Client",
    "execute",
    "RequestBuilder",
    "get",
    "post",
    "put",
    "delete",
    "encode_params",
    "ResponseStream",
    "read_stream_to_bytes",
    "copy_stream",
    "FluentHTTPError",
    "URLParseError",
    "DialError",
    "TLSError",
    "WriteError",
    "ReadError",
    "PersistentEOFError",
    "StreamError",
]
