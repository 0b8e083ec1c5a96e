"""Line framing for the unix-y control protocol.

Every command is a single ASCII line terminated by ``\\n``. Replies are read
back one byte at a time so that nothing beyond the terminator is consumed from
the control connection; a reply longer than ``REPLY_LINE_MAX`` bytes means the
two sides are out of step and is reported as ``ReadOverflowError``.
"""

from __future__ import annotations

from .core.model import (
    ConnectionClosedError,
    Direction,
    InvalidArgumentError,
    ProtocolViolationError,
    ReadOverflowError,
    UnexpectedEofError,
)
from .io.base import Connection

REPLY_LINE_MAX = 50
LINE_END = b"\n"
OK_REPLY = "ok"
STAT_LINE = b"stat\n"

INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1


def new_session_line(direction: Direction, session_id: int) -> bytes:
    return f"new_session {direction.value} {session_id}\n".encode("ascii")


def run_session_line(session_id: int) -> bytes:
    return f"run_session {session_id}\n".encode("ascii")


def transfer_line(direction: Direction, offset: int) -> bytes:
    """Announce the offset the next data connection will start at."""
    return f"{direction.value} {offset}\n".encode("ascii")


def send_all(conn: Connection, data: bytes) -> None:
    """Send every byte of `data`, retrying short sends.

    A send that accepts zero bytes means the peer is gone. Socket errors
    propagate unchanged.
    """
    view = memoryview(data)
    sent = 0
    while sent < len(view):
        n = conn.send(view[sent:])
        if n == 0:
            raise ConnectionClosedError("Stream closed by peer during send")
        sent += n


def read_reply(conn: Connection, limit: int = REPLY_LINE_MAX) -> str:
    """Read one ``\\n``-terminated reply line, without the terminator."""
    buf = bytearray()
    for _ in range(limit):
        byte = conn.recv(1)
        if not byte:
            raise UnexpectedEofError("Control connection closed while reading reply")
        if byte == LINE_END:
            return buf.decode("ascii", errors="replace")
        buf += byte
    raise ReadOverflowError(f"Reply exceeded {limit} bytes without a line terminator")


def expect_ok(reply: str) -> None:
    if reply != OK_REPLY:
        raise ProtocolViolationError(reply)


def parse_stat_reply(reply: str) -> int:
    """Parse a ``stat`` reply as a signed 64-bit decimal size."""
    text = reply.strip()
    digits = text[1:] if text[:1] in ("-", "+") else text
    if not (digits.isascii() and digits.isdigit()):
        raise InvalidArgumentError(f"Unparseable stat reply {reply!r}")
    size = int(text, 10)
    if not INT64_MIN <= size <= INT64_MAX:
        raise InvalidArgumentError(f"Stat reply out of range {reply!r}")
    return size
