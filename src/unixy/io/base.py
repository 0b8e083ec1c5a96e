"""Base protocols and shared types for the socket I/O layer."""

from typing import Protocol, runtime_checkable

from .address import Address


@runtime_checkable
class Connection(Protocol):
    """One physical stream connection. ``socket.socket`` satisfies it as-is."""

    def send(self, data: bytes) -> int:
        ...

    def recv(self, bufsize: int) -> bytes:
        ...

    def recv_into(self, buffer, nbytes: int = 0) -> int:
        ...

    def setblocking(self, flag: bool) -> None:
        ...

    def fileno(self) -> int:
        ...

    def close(self) -> None:
        ...


@runtime_checkable
class Transport(Protocol):
    """Opens physical connections to a socket address."""

    def connect(self, address: Address, timeout_ms: int) -> Connection:
        """Return a connected ``Connection`` or raise ``ConnectError``."""
        ...


@runtime_checkable
class ByteReader(Protocol):
    """Protocol for synchronous random-access byte readers."""

    bytes_fetched: int  # running total

    def fetch(self, start: int, length: int) -> bytes:
        """Return exactly `length` bytes starting at absolute offset `start`.
        If not enough data can be fetched → raise IOError.
        """
        ...
