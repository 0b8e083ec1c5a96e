from __future__ import annotations
import enum
import os
from dataclasses import dataclass


class Direction(enum.Enum):
    READ = "read"
    WRITE = "write"

    @classmethod
    def from_mode(cls, mode: str | Direction) -> Direction:
        """Map an open() style mode string onto a stream direction."""
        if isinstance(mode, Direction):
            return mode
        if mode in ("r", "rb", "read"):
            return cls.READ
        if mode in ("w", "wb", "write"):
            return cls.WRITE
        raise InvalidArgumentError(f"Unsupported mode {mode!r}")


class Whence(enum.IntEnum):
    SET = os.SEEK_SET
    CUR = os.SEEK_CUR
    END = os.SEEK_END
    SIZE = 0x10000      # query total size, position untouched


class StreamState(enum.Enum):
    UNOPENED = "unopened"
    OPEN = "open"
    CLOSED = "closed"


@dataclass(slots=True)
class Session:
    direction: Direction
    id: int | None = None       # minted on first negotiation, then fixed

    @property
    def assigned(self) -> bool:
        return self.id is not None


class UnixYError(IOError):
    """Base class for all unix-y stream failures."""
    pass


class ConnectError(UnixYError):
    """Raised when the socket address is unreachable or the connect times out."""
    pass


class ConnectionClosedError(UnixYError):
    """Raised when the peer stops accepting bytes in the middle of a send."""
    pass


class UnexpectedEofError(UnixYError):
    """Raised when the peer closes the control connection mid-reply."""
    pass


class ReadOverflowError(UnixYError):
    """Raised when a control reply exceeds the line framing cap."""
    pass


class ProtocolViolationError(UnixYError):
    """Raised when the server answers a transfer command with anything but ``ok``."""

    def __init__(self, reply: str):
        super().__init__(f"Expected 'ok' from server, got {reply!r}")
        self.reply = reply


class InvalidArgumentError(UnixYError, ValueError):
    """Raised for a bad whence, an unparseable stat reply or a bad target."""
    pass


class InvalidDirectionError(UnixYError):
    """Raised when reading a write-mode stream or writing a read-mode one."""
    pass


class EndOfStream(UnixYError, EOFError):
    """Raised when a data connection delivers zero bytes."""
    pass


class StreamClosedError(UnixYError, ValueError):
    """Raised for I/O on a stream that is not open."""
    pass
