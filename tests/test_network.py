"""
Tests for network interfaces, helpers and backend implementations.
"""

import socket
from urllib.parse import urlsplit

import pytest

from fluent_http.exceptions import DialError, TLSError, URLParseError
from fluent_http.network import (
    NetworkStream,
    NetworkBackend,
    MockNetworkStream,
    MockNetworkBackend,
    SyncNetworkBackend,
    SyncNetworkStream,
)
from fluent_http.network.utils import (
    create_ssl_context,
    default_port,
    format_host_header,
    has_port,
    normalize_host,
    parse_url,
    strip_port,
)


class TestHostHelpers:
    """Test host and port helpers."""

    @pytest.mark.parametrize(
        "host, expected",
        [
            ("example.com", False),
            ("example.com:8080", True),
            ("[::1]", False),
            ("[::1]:443", True),
            ("[fe80::1%25en0]", False),
        ],
    )
    def test_has_port(self, host, expected) -> None:
        """Test port detection outside IPv6 brackets."""
        assert has_port(host) is expected

    def test_strip_port(self) -> None:
        """Test removing a port suffix."""
        assert strip_port("example.com:8443") == "example.com"
        assert strip_port("example.com") == "example.com"
        assert strip_port("[::1]:80") == "[::1]"
        assert strip_port("[::1]") == "[::1]"

    def test_default_port(self) -> None:
        """Test numeric default ports."""
        assert default_port("http") == 80
        assert default_port("https") == 443
        with pytest.raises(URLParseError):
            default_port("gopher")

    def test_format_host_header(self) -> None:
        """Test Host header formatting."""
        assert format_host_header("example.com", 443, "https") == "example.com"
        assert format_host_header("example.com", 80, "https") == "example.com:80"
        assert format_host_header("::1", 80, "http") == "[::1]"

    def test_normalize_host(self) -> None:
        """Test host normalisation."""
        assert normalize_host("Example.COM.") == "example.com"

    def test_parse_url(self) -> None:
        """Test URL component extraction."""
        assert parse_url("https://user:pw@Example.com:8443/a?b=c#frag") == (
            "https",
            "Example.com:8443",
            "example.com",
            8443,
            "/a?b=c",
        )

    def test_create_ssl_context(self) -> None:
        """Test that the TLS context verifies peers."""
        import ssl

        context = create_ssl_context()
        assert context.verify_mode == ssl.CERT_REQUIRED
        assert context.check_hostname is True


class TestMockNetworkStream:
    """Test cases for MockNetworkStream."""

    def test_read_write_basic(self) -> None:
        """Test basic read and write operations."""
        stream = MockNetworkStream()

        stream.write(b"hello world")
        assert stream.written_data == b"hello world"

        stream.add_data(b"hello world")
        assert stream.read(5) == b"hello"
        assert stream.read() == b" world"
        assert stream.read() == b""

    def test_closed_stream(self) -> None:
        """Test operations on a closed stream."""
        stream = MockNetworkStream(b"data")
        stream.close()
        assert stream.is_closed

        with pytest.raises(RuntimeError, match="Stream is closed"):
            stream.read()
        with pytest.raises(RuntimeError, match="Stream is closed"):
            stream.write(b"x")

    def test_injected_errors(self) -> None:
        """Test scripted read and write failures."""
        stream = MockNetworkStream(b"data")
        stream.read_error = OSError("reset")
        stream.write_error = OSError("broken pipe")

        with pytest.raises(OSError, match="reset"):
            stream.read()
        with pytest.raises(OSError, match="broken pipe"):
            stream.write(b"x")

    def test_extra_info(self) -> None:
        """Test extra info storage."""
        stream = MockNetworkStream()
        stream.set_extra_info("peername", ("example.com", 80))
        assert stream.get_extra_info("peername") == ("example.com", 80)
        assert stream.get_extra_info("missing") is None


class TestMockNetworkBackend:
    """Test cases for MockNetworkBackend."""

    def test_interface(self) -> None:
        """Test that the mocks implement the interfaces."""
        assert isinstance(MockNetworkBackend(), NetworkBackend)
        assert isinstance(MockNetworkStream(), NetworkStream)

    def test_new_stream_per_connect(self, mock_backend) -> None:
        """Test that every connect creates a distinct stream."""
        mock_backend.add_response("example.com", 80, b"abc")

        first = mock_backend.connect_tcp("example.com", 80)
        second = mock_backend.connect_tcp("example.com", 80)

        assert first is not second
        assert first.read() == b"abc"
        assert second.read() == b"abc"
        assert mock_backend.connection_count == 2
        assert mock_backend.connect_calls == [("example.com", 80), ("example.com", 80)]

    def test_add_response_appends(self, mock_backend) -> None:
        """Test scripting several responses for one endpoint."""
        mock_backend.add_response("example.com", 80, b"one")
        mock_backend.add_response("example.com", 80, b"two")
        assert mock_backend.connect_tcp("example.com", 80).read() == b"onetwo"

    def test_refuse(self, mock_backend) -> None:
        """Test simulated connection failures."""
        mock_backend.refuse("down.test", 80)
        with pytest.raises(DialError, match="down.test:80"):
            mock_backend.connect_tcp("down.test", 80)

    def test_connect_tls(self, mock_backend) -> None:
        """Test the TLS upgrade keeps the stream readable."""
        mock_backend.add_response("secure.test", 443, b"payload")
        stream = mock_backend.connect_tcp("secure.test", 443)
        tls_stream = mock_backend.connect_tls(stream, "secure.test")

        assert tls_stream is stream
        assert tls_stream.get_extra_info("ssl_object") is True
        assert tls_stream.read() == b"payload"
        assert mock_backend.tls_hostnames == ["secure.test"]

    def test_reject_certificate(self, mock_backend) -> None:
        """Test simulated certificate failures."""
        mock_backend.reject_certificate("evil.test")
        stream = mock_backend.connect_tcp("evil.test", 443)
        with pytest.raises(TLSError):
            mock_backend.connect_tls(stream, "evil.test")
        assert stream.is_closed

    def test_reset(self, mock_backend) -> None:
        """Test resetting the backend."""
        mock_backend.add_response("example.com", 80, b"abc")
        mock_backend.connect_tcp("example.com", 80)
        mock_backend.reset()
        assert mock_backend.connection_count == 0
        assert mock_backend.connect_tcp("example.com", 80).read() == b""


class TestSyncNetworkBackend:
    """Test the blocking socket backend against a local server."""

    def test_connect_and_exchange(self, echo_server) -> None:
        """Test a raw exchange over a real socket."""
        parts = urlsplit(echo_server)
        stream = SyncNetworkBackend().connect_tcp(parts.hostname, parts.port)
        try:
            assert isinstance(stream, SyncNetworkStream)
            assert stream.get_extra_info("peername")[1] == parts.port
            assert stream.get_extra_info("ssl_object") is None

            stream.write(
                b"GET /info HTTP/1.1\r\nHost: test\r\nConnection: close\r\n\r\n"
            )
            data = b""
            while True:
                chunk = stream.read()
                if not chunk:
                    break
                data += chunk
            assert data.startswith(b"HTTP/1.1 200")
        finally:
            stream.close()
        assert stream.is_closed

    def test_connection_refused(self) -> None:
        """Test that an unreachable endpoint raises DialError."""
        sock = socket.socket()
        sock.bind(("127.0.0.1", 0))
        port = sock.getsockname()[1]
        sock.close()

        with pytest.raises(DialError) as exc_info:
            SyncNetworkBackend().connect_tcp("127.0.0.1", port)
        assert isinstance(exc_info.value.cause, OSError)

    def test_tls_requires_socket(self) -> None:
        """Test that TLS cannot be started on a stream without a socket."""
        with pytest.raises(TLSError):
            SyncNetworkBackend().connect_tls(MockNetworkStream(), "example.com")
