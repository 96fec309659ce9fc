"""
Client configuration for fluent_http.

Settings are carried explicitly by every builder and client instead
of living in module-level mutable state.
"""

from dataclasses import dataclass

__version__ = "0.1.0"

DEFAULT_USER_AGENT = f"fluent_http/{__version__}"


@dataclass(frozen=True)
class ClientConfig:
    """
    Immutable settings shared by the executor, the client and the builder.

    Attributes:
        debug: When True, the outgoing request (headers and body) is
               written to standard output before it is sent.
        user_agent: User-Agent sent when no ``User-Agent`` header is given.
        read_chunk_size: Maximum number of bytes read from the network
                         in a single call.
    """

    DEFAULT_READ_CHUNK_SIZE = 65536  # 64KB chunks

    debug: bool = False
    user_agent: str = DEFAULT_USER_AGENT
    read_chunk_size: int = DEFAULT_READ_CHUNK_SIZE

    def __post_init__(self) -> None:
        if not self.user_agent:
            raise ValueError("user_agent must not be empty")
        if self.read_chunk_size <= 0:
            raise ValueError("read_chunk_size must be positive")
