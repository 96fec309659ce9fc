"""
HTTP/1.1 connection implementation for fluent_http.

This module implements the HTTP11Connection class that carries
request/response exchanges over a NetworkStream, using h11 for
message framing.
"""

import logging
import time
from typing import Optional, Dict, Any
from enum import Enum

import h11

from .http_primitives import Request, Response
from .streams import ResponseStream
from .network.stream import NetworkStream
from .exceptions import (
    FluentHTTPError,
    PersistentEOFError,
    ReadError,
    WriteError,
)

logger = logging.getLogger(__name__)


class ConnectionState(Enum):
    """States of an HTTP/1.1 connection."""
    NEW = "new"           # Connection created, not yet used
    ACTIVE = "active"     # Connection handling a request
    IDLE = "idle"         # Connection available for reuse
    CLOSED = "closed"     # Connection closed, cannot be reused


def dump_request(request: Request) -> bytes:
    """
    Serialize a request, headers and body, exactly as it is sent.

    A throwaway h11 connection does the framing so the dump matches
    the wire bytes.
    """
    conn = h11.Connection(h11.CLIENT)
    parts = [
        conn.send(
            h11.Request(
                method=request.method,
                target=request.url.target,
                headers=request.wire_headers(),
            )
        )
    ]
    if request.body:
        parts.append(conn.send(h11.Data(data=request.body)))
    parts.append(conn.send(h11.EndOfMessage()))
    return b"".join(part for part in parts if part)


class HTTP11Connection:
    """
    HTTP/1.1 connection manager.

    This class manages a single HTTP/1.1 connection over a NetworkStream.
    ``write_request`` and ``read_response`` are separate steps; the
    response body is read lazily through the returned ResponseStream.

    A reusable connection goes back to IDLE once a response body has been
    fully read. A connection created with ``reusable=False`` is closed as
    soon as its first response is done with.
    """

    DEFAULT_READ_CHUNK_SIZE = 65536  # 64KB chunks

    def __init__(
        self,
        stream: NetworkStream,
        reusable: bool = True,
        read_chunk_size: Optional[int] = None,
    ):
        """
        Initialize HTTP/1.1 connection.

        Args:
            stream: The NetworkStream to use for communication
            reusable: Whether the connection may carry more than one exchange
            read_chunk_size: Maximum bytes read from the stream per call
        """
        self._stream = stream
        self._h11_connection = h11.Connection(h11.CLIENT)
        self._state = ConnectionState.NEW
        self._reusable = reusable
        self._read_chunk_size = read_chunk_size or self.DEFAULT_READ_CHUNK_SIZE
        self._pending: Optional[ResponseStream] = None
        self._current_request: Optional[Request] = None

        # Metrics
        self._request_count = 0
        self._bytes_sent = 0
        self._bytes_received = 0
        self._errors_count = 0
        self._last_request_time: Optional[float] = None

        logger.debug("HTTP/1.1 connection initialized")

    def write_request(self, request: Request) -> None:
        """
        Send a complete request: head, body and end of message.

        If the previous response body on this connection was left unread,
        it is drained first so the connection can move to the next cycle.

        Raises:
            WriteError: If the connection is unusable or sending fails
        """
        if self._pending is not None:
            pending, self._pending = self._pending, None
            try:
                pending.read()
            except FluentHTTPError as e:
                raise WriteError(f"previous response could not be drained: {e}", cause=e) from e

        if self._state == ConnectionState.CLOSED:
            raise WriteError("connection is closed")

        if self._state == ConnectionState.ACTIVE:
            raise WriteError("connection is busy")

        self._state = ConnectionState.ACTIVE
        self._request_count += 1
        self._last_request_time = time.time()
        self._current_request = request

        try:
            self._send_event(
                h11.Request(
                    method=request.method,
                    target=request.url.target,
                    headers=request.wire_headers(),
                )
            )
            if request.body:
                self._send_event(h11.Data(data=request.body))
            self._send_event(h11.EndOfMessage())
        except h11.LocalProtocolError as e:
            self._fail(e)
            raise WriteError(f"invalid request: {e}", cause=e) from e
        except (OSError, RuntimeError) as e:
            self._fail(e)
            raise WriteError(str(e), cause=e) from e
        except Exception as e:
            self._fail(e)
            raise WriteError(f"request could not be encoded: {e}", cause=e) from e

    def read_response(self) -> Response:
        """
        Read the status line and headers of exactly one response.

        Returns:
            The response, with its body available as a ResponseStream

        Raises:
            ReadError: If the response cannot be read
            PersistentEOFError: If the server announced that it will close
                the connection after this response; the complete response
                is attached to the exception
        """
        if self._state != ConnectionState.ACTIVE:
            raise ReadError("no request in flight")

        try:
            while True:
                event = self._next_event()

                if isinstance(event, h11.InformationalResponse):
                    continue

                if isinstance(event, h11.Response):
                    break

                if isinstance(event, h11.ConnectionClosed) or event is h11.PAUSED:
                    raise ReadError("connection closed by server")
        except h11.RemoteProtocolError as e:
            self._fail(e)
            raise ReadError(f"malformed response: {e}", cause=e) from e
        except (OSError, RuntimeError) as e:
            self._fail(e)
            raise ReadError(str(e), cause=e) from e
        except ReadError as e:
            self._fail(e)
            raise

        headers = list(event.headers.raw_items())
        stream = ResponseStream(
            connection=self,
            content_length=self._get_content_length(headers),
            chunked=self._is_chunked(headers),
        )
        self._pending = stream

        response = Response.create(
            status_code=event.status_code,
            headers=headers,
            stream=stream,
            reason=event.reason,
            http_version=event.http_version,
        )

        request = self._current_request
        logger.debug(
            f"Request {self._request_count}: {request.method} {request.url.target} "
            f"-> {response.status_code}"
        )

        if self._server_will_close(event):
            raise PersistentEOFError(response)

        return response

    def _send_event(self, event: h11.Event) -> None:
        data = self._h11_connection.send(event)
        if data:
            self._stream.write(data)
            self._bytes_sent += len(data)

    def _next_event(self) -> h11.Event:
        """Get the next h11 event, reading from the stream as needed."""
        while True:
            event = self._h11_connection.next_event()
            if event is not h11.NEED_DATA:
                return event

            data = self._stream.read(self._read_chunk_size)
            self._bytes_received += len(data)
            # An empty read tells h11 the peer closed the connection.
            self._h11_connection.receive_data(data)

    def _receive_body_chunk(self) -> Optional[bytes]:
        """
        Receive a chunk of response body.

        Returns:
            Chunk of data or None if end of body
        """
        try:
            while True:
                event = self._next_event()

                if isinstance(event, h11.Data):
                    return bytes(event.data)

                if isinstance(event, h11.EndOfMessage):
                    return None

                if isinstance(event, h11.ConnectionClosed):
                    raise ReadError("connection closed before end of body")
        except h11.RemoteProtocolError as e:
            raise ReadError(f"malformed response body: {e}", cause=e) from e
        except (OSError, RuntimeError) as e:
            raise ReadError(str(e), cause=e) from e

    def _get_content_length(self, headers: list) -> Optional[int]:
        for name, value in headers:
            if name.lower() == b"content-length":
                try:
                    return int(value)
                except ValueError:
                    return None
        return None

    def _is_chunked(self, headers: list) -> bool:
        for name, value in headers:
            if name.lower() == b"transfer-encoding" and value.lower() == b"chunked":
                return True
        return False

    def _server_will_close(self, event: h11.Response) -> bool:
        """
        Check whether the server announced the end of the connection.

        True for ``Connection: close`` and for HTTP/1.0 responses that do
        not ask for keep-alive.
        """
        tokens = set()
        for name, value in event.headers:
            if name == b"connection":
                tokens.update(token.strip() for token in value.lower().split(b","))

        if b"close" in tokens:
            return True
        return event.http_version == b"1.0" and b"keep-alive" not in tokens

    def _response_closed(self) -> None:
        """
        Called when the response body is fully consumed or closed early.
        """
        self._pending = None
        if self._state != ConnectionState.ACTIVE:
            return

        if self._reusable and self._can_reuse_connection():
            self._h11_connection.start_next_cycle()
            self._state = ConnectionState.IDLE
            logger.debug("Connection returned to idle")
        else:
            self.close()

    def _can_reuse_connection(self) -> bool:
        return (
            self._h11_connection.our_state is h11.DONE
            and self._h11_connection.their_state is h11.DONE
        )

    def _fail(self, error: Exception) -> None:
        self._errors_count += 1
        logger.error(f"Request {self._request_count} failed: {error}")
        self.close()

    def close(self) -> None:
        """
        Close the connection and cleanup resources.
        """
        if self._state != ConnectionState.CLOSED:
            self._state = ConnectionState.CLOSED
            self._stream.close()
            logger.debug(f"Connection closed after {self._request_count} requests")

    @property
    def stream(self) -> NetworkStream:
        return self._stream

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def is_closed(self) -> bool:
        """Check if connection is closed."""
        return self._state == ConnectionState.CLOSED

    @property
    def is_idle(self) -> bool:
        """Check if connection is idle and available for reuse."""
        return self._state == ConnectionState.IDLE

    @property
    def metrics(self) -> Dict[str, Any]:
        """
        Get connection metrics.

        Returns:
            Dictionary with connection metrics
        """
        return {
            "request_count": self._request_count,
            "bytes_sent": self._bytes_sent,
            "bytes_received": self._bytes_received,
            "errors_count": self._errors_count,
            "last_request_time": self._last_request_time,
            "state": self._state.value,
        }
