"""
HTTP primitives for fluent_http.

This module defines the core data structures for URLs, requests and
responses. URLs and responses are immutable; a Request is mutable so
that the fluent builder can accumulate state on it before dispatch.
"""

from typing import (
    Dict,
    Iterator,
    List,
    NamedTuple,
    Optional,
    Tuple,
    Union,
    TYPE_CHECKING,
)
from dataclasses import dataclass, field

from .config import DEFAULT_USER_AGENT
from .network.utils import default_port, format_host_header, parse_url
from .streams import read_stream_to_bytes

if TYPE_CHECKING:
    from .streams import ResponseStream  # noqa: F401


# Type aliases for better readability
Headers = List[Tuple[bytes, bytes]]
Body = Union[str, bytes]
StatusCode = int

SUPPORTED_METHODS = ("GET", "POST", "PUT", "DELETE")

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


def encode_body(data: Body) -> bytes:
    """
    Normalise request body content to bytes.

    Text is encoded as UTF-8; bytes-like content is copied as is.

    Raises:
        TypeError: If ``data`` is neither text nor bytes
    """
    if isinstance(data, str):
        return data.encode("utf-8")
    if isinstance(data, (bytes, bytearray, memoryview)):
        return bytes(data)
    raise TypeError(
        f"body must be str or bytes, not {type(data).__name__}"
    )


def _to_bytes(value: Union[str, bytes]) -> bytes:
    if isinstance(value, bytes):
        return value
    return value.encode("latin-1")


class URL(NamedTuple):
    """Immutable representation of a parsed http or https URL."""
    scheme: str
    host: str
    hostname: str
    port: Optional[int]
    target: str
    raw: str

    @classmethod
    def parse(cls, raw: str) -> "URL":
        """
        Parse a raw URL string.

        Raises:
            URLParseError: If the URL is malformed or not http/https
        """
        scheme, host, hostname, port, target = parse_url(raw)
        return cls(
            scheme=scheme,
            host=host,
            hostname=hostname,
            port=port,
            target=target,
            raw=raw,
        )

    @property
    def is_secure(self) -> bool:
        return self.scheme == "https"

    @property
    def effective_port(self) -> int:
        """The explicit port, or the conventional one for the scheme."""
        if self.port is not None:
            return self.port
        return default_port(self.scheme)

    @property
    def host_header(self) -> str:
        return format_host_header(self.hostname, self.effective_port, self.scheme)


@dataclass
class Request:
    """
    Mutable HTTP request representation.

    Header names are unique; setting an existing name replaces its value.
    The ``user_agent`` is sent unless a ``User-Agent`` header overrides it.
    """

    method: str
    url: Optional[URL] = None
    headers: Dict[str, str] = field(default_factory=dict)
    user_agent: str = DEFAULT_USER_AGENT
    body: Optional[bytes] = None
    content_length: Optional[int] = None

    def __post_init__(self) -> None:
        """Validate request data after initialization."""
        if not isinstance(self.method, str):
            raise ValueError("method must be str")

        self.method = self.method.upper()
        if self.method not in SUPPORTED_METHODS:
            raise ValueError(
                f"unsupported method {self.method!r}, "
                f"expected one of {', '.join(SUPPORTED_METHODS)}"
            )

        if not isinstance(self.headers, dict):
            raise ValueError("headers must be a dict")

    @classmethod
    def create(
        cls,
        method: str,
        url: Optional[Union[str, URL]] = None,
        headers: Optional[Dict[str, str]] = None,
        body: Optional[Body] = None,
        user_agent: str = DEFAULT_USER_AGENT,
    ) -> "Request":
        """
        Create a Request with proper type conversion.

        Args:
            method: HTTP method (GET, POST, PUT or DELETE)
            url: Optional URL string or parsed URL
            headers: Optional mapping of header name to value
            body: Optional text or bytes body
            user_agent: Fallback User-Agent when no header provides one

        Returns:
            New Request instance
        """
        if isinstance(url, str):
            url = URL.parse(url)

        request = cls(
            method=method,
            url=url,
            headers=dict(headers) if headers else {},
            user_agent=user_agent,
        )

        header_agent = request.get_header("User-Agent")
        if header_agent:
            request.user_agent = header_agent

        if body is not None:
            request.set_body(body)

        return request

    def set_header(self, name: str, value: str) -> "Request":
        """Insert or replace a header."""
        self.headers[name] = value
        return self

    def get_header(self, name: str) -> Optional[str]:
        """Get a header value by name (case-insensitive)."""
        name_lower = name.lower()
        for header_name, header_value in self.headers.items():
            if header_name.lower() == name_lower:
                return header_value
        return None

    def has_header(self, name: str) -> bool:
        return self.get_header(name) is not None

    def set_body(self, data: Body) -> "Request":
        """
        Set the body and its content length.

        Raises:
            TypeError: If ``data`` is neither text nor bytes
        """
        self.body = encode_body(data)
        self.content_length = len(self.body)
        return self

    @property
    def has_body(self) -> bool:
        return self.body is not None

    @property
    def effective_user_agent(self) -> str:
        return self.get_header("User-Agent") or self.user_agent

    def copy(self) -> "Request":
        """Create an independent copy of this request."""
        return Request(
            method=self.method,
            url=self.url,
            headers=dict(self.headers),
            user_agent=self.user_agent,
            body=self.body,
            content_length=self.content_length,
        )

    def wire_headers(self) -> Headers:
        """
        Render the headers sent on the wire.

        Host and User-Agent come first and may be overridden by headers of
        the same name. Content-Length always follows the body. The
        remaining headers keep insertion order.

        Raises:
            ValueError: If the request has no URL yet
        """
        if self.url is None:
            raise ValueError("request has no URL")

        reserved = {"host", "user-agent", "content-length"}
        headers: Headers = [
            (b"Host", _to_bytes(self.get_header("Host") or self.url.host_header)),
            (b"User-Agent", _to_bytes(self.effective_user_agent)),
        ]

        if self.body is not None:
            length = self.content_length if self.content_length is not None else len(self.body)
            headers.append((b"Content-Length", str(length).encode()))

        for name, value in self.headers.items():
            if name.lower() not in reserved:
                headers.append((_to_bytes(name), _to_bytes(value)))

        return headers


@dataclass(frozen=True)
class Response:
    """
    Immutable HTTP response representation.

    The status line and headers are fixed once received; the body is
    exposed through ``stream``, which the response owns and which the
    caller must drain or close.
    """

    status_code: StatusCode
    headers: Headers = field(default_factory=list)
    stream: Optional["ResponseStream"] = None
    reason: bytes = b""
    http_version: bytes = b"1.1"

    def __post_init__(self) -> None:
        """Validate response data after initialization."""
        if not isinstance(self.status_code, int):
            raise ValueError("status_code must be int")

        if not isinstance(self.headers, list):
            raise ValueError("headers must be a list")

        for name, value in self.headers:
            if not isinstance(name, bytes) or not isinstance(value, bytes):
                raise ValueError("header names and values must be bytes")

    @classmethod
    def create(
        cls,
        status_code: StatusCode,
        headers: Optional[Headers] = None,
        stream: Optional["ResponseStream"] = None,
        reason: bytes = b"",
        http_version: bytes = b"1.1",
    ) -> "Response":
        """
        Create a Response with proper validation.

        Args:
            status_code: HTTP status code
            headers: Optional list of (name, value) header tuples
            stream: Optional stream for the response body
            reason: Reason phrase from the status line
            http_version: Protocol version from the status line

        Returns:
            New Response instance
        """
        return cls(
            status_code=status_code,
            headers=headers if headers is not None else [],
            stream=stream,
            reason=reason,
            http_version=http_version,
        )

    def get_header(self, name: Union[str, bytes]) -> Optional[bytes]:
        """Get a header value by name (case-insensitive)."""
        if isinstance(name, str):
            name = name.encode()

        name_lower = name.lower()
        for header_name, header_value in self.headers:
            if header_name.lower() == name_lower:
                return header_value

        return None

    def has_header(self, name: Union[str, bytes]) -> bool:
        """Check if a header exists (case-insensitive)."""
        return self.get_header(name) is not None

    @property
    def charset(self) -> Optional[str]:
        """The charset parameter of the Content-Type header, if any."""
        content_type = self.get_header("content-type")
        if content_type is None:
            return None

        for param in content_type.decode("latin-1").split(";")[1:]:
            key, _, value = param.strip().partition("=")
            if key.lower() == "charset" and value:
                return value.strip('"\'')
        return None

    def iter_bytes(self) -> Iterator[bytes]:
        """Iterate over the body chunks as they arrive."""
        if self.stream is None:
            return iter(())
        return iter(self.stream)

    def read(self) -> bytes:
        """Read the whole body. Returns b"" when there is no body."""
        return read_stream_to_bytes(self.stream)

    def text(self) -> str:
        """Read the whole body and decode it with the response charset."""
        data = self.read()
        try:
            return data.decode(self.charset or "utf-8", errors="replace")
        except LookupError:
            return data.decode("utf-8", errors="replace")

    def close(self) -> None:
        """Close the body stream, releasing the connection."""
        if self.stream is not None:
            self.stream.close()

    def __enter__(self) -> "Response":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
