"""
Unit tests for custom exceptions.

Tests the exception hierarchy to ensure proper error handling
and cause tracking.
"""

import pytest

from fluent_http.exceptions import (
    FluentHTTPError,
    URLParseError,
    DialError,
    TLSError,
    WriteError,
    ReadError,
    PersistentEOFError,
    StreamError,
)
from fluent_http.http_primitives import Response


class TestFluentHTTPError:
    """Test base FluentHTTPError class."""

    def test_basic_creation(self) -> None:
        """Test creating basic FluentHTTPError."""
        error = FluentHTTPError("Test error message")
        assert str(error) == "Test error message"
        assert error.message == "Test error message"
        assert error.cause is None

    def test_with_cause(self) -> None:
        """Test creating FluentHTTPError with cause."""
        original_error = ValueError("Original error")
        error = FluentHTTPError("Test error message", cause=original_error)
        assert str(error) == "Test error message"
        assert error.cause == original_error


class TestErrorMessages:
    """Test the message prefix of each error origin."""

    @pytest.mark.parametrize(
        "error_class, prefix",
        [
            (URLParseError, "URL parse error"),
            (DialError, "Dial error"),
            (TLSError, "TLS error"),
            (WriteError, "Write error"),
            (ReadError, "Read error"),
            (StreamError, "Stream error"),
        ],
    )
    def test_prefix(self, error_class, prefix) -> None:
        """Test that every error names where it came from."""
        cause = OSError("boom")
        error = error_class("something failed", cause=cause)
        assert str(error) == f"{prefix}: something failed"
        assert error.cause is cause

    def test_tls_error_has_single_prefix(self) -> None:
        """Test that TLSError does not inherit the dial prefix."""
        error = TLSError("bad certificate")
        assert "Dial error" not in str(error)

    def test_persistent_eof_carries_response(self) -> None:
        """Test that the persistent-EOF sentinel keeps its response."""
        response = Response.create(200)
        error = PersistentEOFError(response)
        assert error.response is response
        assert "will not persist" in str(error)


class TestExceptionHierarchy:
    """Test exception hierarchy and inheritance."""

    def test_inheritance(self) -> None:
        """Test that all exceptions inherit from FluentHTTPError."""
        for error_class in (
            URLParseError,
            DialError,
            TLSError,
            WriteError,
            ReadError,
            PersistentEOFError,
            StreamError,
        ):
            assert issubclass(error_class, FluentHTTPError)

    def test_tls_is_dial_error(self) -> None:
        """Test that TLS failures are transport establishment failures."""
        assert issubclass(TLSError, DialError)

    def test_persistent_eof_is_read_error(self) -> None:
        """Test that the sentinel can be caught as a ReadError."""
        with pytest.raises(ReadError):
            raise PersistentEOFError(Response.create(204))
