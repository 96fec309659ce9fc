"""
Response body streaming for fluent_http.

Reading a ResponseStream pulls body chunks from the connection on demand.
Once the body is exhausted, or the stream is closed early, the owning
connection is notified so it can be reused or shut down.
"""

from typing import BinaryIO, Iterable, Optional, TYPE_CHECKING

from .exceptions import StreamError

if TYPE_CHECKING:
    from .http11 import HTTP11Connection  # Forward reference


class ResponseStream:
    """
    Stream for HTTP response bodies.

    Iterating yields body chunks as bytes. The stream is single pass:
    once exhausted it yields nothing further.
    """

    def __init__(
        self,
        connection: "HTTP11Connection",
        content_length: Optional[int] = None,
        chunked: bool = False,
    ) -> None:
        """
        Initialize ResponseStream.

        Args:
            connection: The HTTP11Connection that owns this stream
            content_length: Optional content length announced by the server
            chunked: Whether response uses chunked transfer encoding
        """
        if content_length is not None and content_length < 0:
            raise ValueError("content_length must be non-negative")

        self._connection = connection
        self._content_length = content_length
        self._chunked = chunked
        self._closed = False
        self._exhausted = False
        self._bytes_read = 0

    def __iter__(self) -> "ResponseStream":
        return self

    def __next__(self) -> bytes:
        if self._exhausted:
            raise StopIteration

        if self._closed:
            raise StreamError("Cannot read from closed stream")

        try:
            chunk = self._connection._receive_body_chunk()
        except Exception as e:
            self.close()
            if isinstance(e, StreamError):
                raise
            raise StreamError(f"Error reading from stream: {e}", cause=e) from e

        if chunk is None:
            self._exhausted = True
            self.close()
            raise StopIteration

        self._bytes_read += len(chunk)
        return chunk

    def read(self) -> bytes:
        """Read the rest of the stream and return it as bytes."""
        return b"".join(self)

    def close(self) -> None:
        """Close the stream and hand the connection back to its owner."""
        if not self._closed:
            self._closed = True
            self._connection._response_closed()

    @property
    def content_length(self) -> Optional[int]:
        return self._content_length

    @property
    def chunked(self) -> bool:
        return self._chunked

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def exhausted(self) -> bool:
        """True once the whole body has been received."""
        return self._exhausted

    @property
    def bytes_read(self) -> int:
        return self._bytes_read


def read_stream_to_bytes(stream: Optional[Iterable[bytes]]) -> bytes:
    """
    Read entire stream and return as bytes.

    Args:
        stream: Iterable of bytes, or None for an absent body

    Returns:
        All bytes from the stream concatenated
    """
    if stream is None:
        return b""
    return b"".join(stream)


def copy_stream(stream: Optional[Iterable[bytes]], destination: BinaryIO) -> int:
    """
    Copy every chunk of ``stream`` into a binary file object.

    Bytes already written stay written if the copy fails part way.

    Returns:
        Number of bytes copied

    Raises:
        StreamError: If reading the stream or writing the destination fails
    """
    if stream is None:
        return 0

    copied = 0
    for chunk in stream:
        try:
            destination.write(chunk)
        except OSError as e:
            raise StreamError(f"Error writing body to destination: {e}", cause=e) from e
        copied += len(chunk)
    return copied
