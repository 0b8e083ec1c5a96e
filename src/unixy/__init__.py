"""unixy - a client for session-oriented byte streams over local sockets."""

from .core.config import StreamOptions, DEFAULT_TIMEOUT_MS                  # re-export
from .core.model import (
    Direction, Whence, StreamState, Session,
    UnixYError, ConnectError, ConnectionClosedError, UnexpectedEofError,
    ReadOverflowError, ProtocolViolationError, InvalidArgumentError,
    InvalidDirectionError, EndOfStream, StreamClosedError,
)
from .core.session_ids import SessionIdAllocator, DEFAULT_ALLOCATOR        # singleton
from .stream import UnixYStream, open_stream
from .reader import StreamByteReader, open_reader
from .aio import AsyncUnixYStream, open_stream_async


__all__ = [
    "open_stream", "open_stream_async", "open_reader",
    "UnixYStream", "AsyncUnixYStream", "StreamByteReader",
    "StreamOptions", "DEFAULT_TIMEOUT_MS",
    "Direction", "Whence", "StreamState", "Session",
    "SessionIdAllocator", "DEFAULT_ALLOCATOR",
    "UnixYError", "ConnectError", "ConnectionClosedError", "UnexpectedEofError",
    "ReadOverflowError", "ProtocolViolationError", "InvalidArgumentError",
    "InvalidDirectionError", "EndOfStream", "StreamClosedError",
]
