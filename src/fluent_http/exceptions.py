"""
Custom exceptions for fluent_http.

This module defines the exception hierarchy used throughout
the library. Errors are grouped by where they originate: URL
parsing, connection establishment, sending the request, reading
the response and draining the response body.
"""

from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .http_primitives import Response


class FluentHTTPError(Exception):
    """Base exception for all fluent_http errors."""

    def __init__(self, message: str, cause: Optional[Exception] = None) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause


class URLParseError(FluentHTTPError):
    """Raised when a raw URL string cannot be parsed or uses an unsupported scheme."""

    def __init__(self, message: str, cause: Optional[Exception] = None) -> None:
        super().__init__(f"URL parse error: {message}", cause)


class DialError(FluentHTTPError):
    """Raised when a transport connection cannot be established."""

    def __init__(self, message: str, cause: Optional[Exception] = None) -> None:
        super().__init__(f"Dial error: {message}", cause)


class TLSError(DialError):
    """Raised when TLS negotiation or certificate hostname verification fails."""

    def __init__(self, message: str, cause: Optional[Exception] = None) -> None:
        FluentHTTPError.__init__(self, f"TLS error: {message}", cause)


class WriteError(FluentHTTPError):
    """Raised when the request cannot be written to the connection."""

    def __init__(self, message: str, cause: Optional[Exception] = None) -> None:
        super().__init__(f"Write error: {message}", cause)


class ReadError(FluentHTTPError):
    """Raised when a response cannot be read from the connection."""

    def __init__(self, message: str, cause: Optional[Exception] = None) -> None:
        super().__init__(f"Read error: {message}", cause)


class PersistentEOFError(ReadError):
    """
    Raised when the server will close the connection after this response.

    The response itself is complete and valid; it is carried on the
    ``response`` attribute so callers can still consume it.
    """

    def __init__(self, response: "Response") -> None:
        super().__init__("connection will not persist beyond this response")
        self.response = response


class StreamError(FluentHTTPError):
    """Raised when there's an error draining a response body."""

    def __init__(self, message: str, cause: Optional[Exception] = None) -> None:
        super().__init__(f"Stream error: {message}", cause)
