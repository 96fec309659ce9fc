"""
Tests for the transport opener.
"""

import pytest

from fluent_http.config import ClientConfig
from fluent_http.exceptions import DialError, TLSError
from fluent_http.http11 import HTTP11Connection
from fluent_http.http_primitives import URL, Request
from fluent_http.transport import open_connection


class TestOpenConnection:
    """Test opening plain and TLS connections."""

    def test_plain_default_port(self, mock_backend) -> None:
        """Test that http URLs without a port dial port 80."""
        connection = open_connection(URL.parse("http://example.test/x"), mock_backend)

        assert isinstance(connection, HTTP11Connection)
        assert mock_backend.connect_calls == [("example.test", 80)]
        assert mock_backend.tls_hostnames == []
        assert connection.stream is mock_backend.streams[0]

    def test_plain_explicit_port(self, mock_backend) -> None:
        """Test that an explicit port is honoured."""
        open_connection(URL.parse("http://example.test:8080/"), mock_backend)
        assert mock_backend.connect_calls == [("example.test", 8080)]

    def test_tls_default_port(self, mock_backend) -> None:
        """Test that https URLs dial 443 and verify the host."""
        connection = open_connection(URL.parse("https://secure.test/"), mock_backend)

        assert mock_backend.connect_calls == [("secure.test", 443)]
        assert mock_backend.tls_hostnames == ["secure.test"]
        assert connection.stream.get_extra_info("ssl_object") is True

    def test_tls_hostname_without_port(self, mock_backend) -> None:
        """Test that the verified hostname has its port stripped."""
        open_connection(URL.parse("https://secure.test:8443/"), mock_backend)

        assert mock_backend.connect_calls == [("secure.test", 8443)]
        assert mock_backend.tls_hostnames == ["secure.test"]

    def test_tls_ipv6(self, mock_backend) -> None:
        """Test the verified hostname for IPv6 literals."""
        open_connection(URL.parse("https://[::1]:8443/"), mock_backend)
        assert mock_backend.connect_calls == [("::1", 8443)]
        assert mock_backend.tls_hostnames == ["::1"]

    def test_dial_error(self, mock_backend) -> None:
        """Test that connect failures propagate as DialError."""
        mock_backend.refuse("down.test", 80)
        with pytest.raises(DialError):
            open_connection(URL.parse("http://down.test/"), mock_backend)

    def test_tls_error(self, mock_backend) -> None:
        """Test that certificate failures propagate as TLSError."""
        mock_backend.reject_certificate("evil.test")
        with pytest.raises(TLSError):
            open_connection(URL.parse("https://evil.test/"), mock_backend)

    def test_reusable_flag(self, mock_backend, make_response) -> None:
        """Test single-use connections close after their response."""
        mock_backend.add_response("example.test", 80, make_response(200, b"x"))
        url = URL.parse("http://example.test/")
        connection = open_connection(url, mock_backend, ClientConfig(), reusable=False)

        connection.write_request(Request.create("GET", url))
        connection.read_response().read()
        assert connection.is_closed
