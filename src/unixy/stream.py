"""Session-backed byte stream over a unix-y socket."""

from __future__ import annotations

import logging

from .core.config import DEFAULT_READ_SIZE, StreamOptions
from .core.model import (
    Direction,
    EndOfStream,
    InvalidArgumentError,
    InvalidDirectionError,
    ProtocolViolationError,
    ReadOverflowError,
    Session,
    StreamClosedError,
    StreamState,
    UnixYError,
    Whence,
)
from .core.session_ids import SessionIdAllocator
from .io import default_transport
from .io.address import Address, parse_address
from .io.base import Connection, Transport
from .negotiator import negotiate
from .protocol import STAT_LINE, expect_ok, parse_stat_reply, read_reply, send_all, transfer_line

logger = logging.getLogger(__name__)


class UnixYStream:
    """Readable or writable byte stream addressed by a local socket target.

    One control connection lives as long as the stream and carries the
    ``read``/``write``/``stat`` commands. Payload moves over a separate data
    connection that is opened lazily at the current position and dropped
    whenever a seek moves the position. Not safe for concurrent use.
    """

    def __init__(
        self,
        target: str,
        mode: str | Direction = "r",
        *,
        options: StreamOptions | None = None,
        transport: Transport | None = None,
        allocator: SessionIdAllocator | None = None,
    ):
        self.target = target
        self.options = options or StreamOptions()
        self._transport = transport or default_transport()
        self._allocator = allocator
        self._session = Session(direction=Direction.from_mode(mode))
        self._address: Address | None = None
        self._control: Connection | None = None
        self._data: Connection | None = None
        self._pos = 0
        self._state = StreamState.UNOPENED
        self._broken: UnixYError | None = None

    # ------------------------------------------------------------------ #
    @property
    def state(self) -> StreamState:
        return self._state

    @property
    def session(self) -> Session:
        return self._session

    @property
    def direction(self) -> Direction:
        return self._session.direction

    @property
    def address(self) -> Address | None:
        return self._address

    @property
    def position(self) -> int:
        return self._pos

    @property
    def has_data_connection(self) -> bool:
        return self._data is not None

    @property
    def closed(self) -> bool:
        return self._state is not StreamState.OPEN

    def readable(self) -> bool:
        return self.direction is Direction.READ

    def writable(self) -> bool:
        return self.direction is Direction.WRITE

    def seekable(self) -> bool:
        return True

    # ------------------------------------------------------------------ #
    def open(self) -> UnixYStream:
        """Connect the control connection and create the server session."""
        if self._state is not StreamState.UNOPENED:
            raise InvalidArgumentError(f"Stream is already {self._state.value}")

        address = parse_address(self.target)
        self._control = self._connect(address)
        self._address = address
        self._data = None
        self._pos = 0
        self._state = StreamState.OPEN
        return self

    def _connect(self, address: Address) -> Connection:
        return negotiate(
            self._transport,
            address,
            self._session,
            timeout_ms=self.options.connect_timeout_ms,
            allocator=self._allocator,
        )

    def _check_open(self) -> None:
        if self._state is not StreamState.OPEN:
            raise StreamClosedError(f"I/O operation on {self._state.value} stream")

    def _check_usable(self) -> None:
        self._check_open()
        if self._broken is not None:
            raise StreamClosedError(f"Stream unusable after protocol error: {self._broken}") from self._broken

    def _mark_broken(self, err: UnixYError) -> None:
        # the control connection may still hold part of the bad reply
        logger.error("Stream %s unusable: %s", self.target, err)
        self._broken = err

    def _ensure_data_connection(self) -> Connection:
        """Return the data connection for the current position, opening one if needed."""
        if self._data is not None:
            return self._data

        logger.info("cmd: %s %d", self.direction.value, self._pos)
        send_all(self._control, transfer_line(self.direction, self._pos))
        try:
            reply = read_reply(self._control)
        except ReadOverflowError as e:
            self._mark_broken(e)
            raise
        try:
            expect_ok(reply)
        except ProtocolViolationError as e:
            logger.critical("Not ok %s", reply)
            self._mark_broken(e)
            raise

        self._data = self._connect(self._address)
        return self._data

    # ------------------------------------------------------------------ #
    def readinto(self, buffer) -> int:
        """Receive once into `buffer`; a short read is a valid result.

        Raises ``EndOfStream`` when the server has no more bytes to send.
        """
        self._check_usable()
        if self.direction is not Direction.READ:
            logger.critical("Invalid state: not in reading mode")
            raise InvalidDirectionError("Stream was opened for writing")

        conn = self._ensure_data_connection()
        n = conn.recv_into(buffer, len(buffer))
        if n == 0:
            raise EndOfStream(f"End of stream at offset {self._pos}")
        self._pos += n
        return n

    def read(self, size: int = -1) -> bytes:
        """Return up to `size` bytes from one receive, or b"" at end of stream."""
        if size is None or size < 0:
            size = DEFAULT_READ_SIZE
        if size == 0:
            self._check_usable()
            return b""

        buf = bytearray(size)
        try:
            n = self.readinto(buf)
        except EndOfStream:
            return b""
        return bytes(buf[:n])

    def write(self, data) -> int:
        """Send once from `data`; returns how many bytes the socket accepted."""
        self._check_usable()
        if self.direction is not Direction.WRITE:
            logger.critical("Invalid state: in reading mode")
            raise InvalidDirectionError("Stream was opened for reading")

        conn = self._ensure_data_connection()
        n = conn.send(data)
        self._pos += n
        return n

    def stat(self) -> int:
        """Ask the server for the current size of the stream."""
        self._check_usable()
        logger.info("cmd: stat")
        send_all(self._control, STAT_LINE)
        logger.info("reading stat reply")
        try:
            reply = read_reply(self._control)
        except ReadOverflowError as e:
            self._mark_broken(e)
            raise
        logger.info("rep: stat %s", reply)
        return parse_stat_reply(reply)

    def seek(self, offset: int, whence: int = Whence.SET) -> int:
        """Move the stream position, or report the size for ``Whence.SIZE``.

        The data connection survives a seek that lands on the current
        position; any other target drops it so the next read or write
        reopens at the new offset.
        """
        self._check_usable()
        try:
            whence = Whence(whence)
        except ValueError:
            logger.critical("Invalid whence %s", whence)
            raise InvalidArgumentError(f"Invalid whence {whence!r}") from None

        size = -1
        if whence in (Whence.END, Whence.SIZE):
            size = self.stat()
        if whence is Whence.SIZE:
            return size

        if whence is Whence.SET:
            logger.info("SEEK_SET %d %d", self._pos, offset)
            new_pos = offset
        elif whence is Whence.CUR:
            logger.info("SEEK_CUR %d %d", self._pos, offset)
            new_pos = self._pos + offset
        else:
            logger.info("SEEK_END %d %d %d", self._pos, offset, size)
            if size < 0:
                raise InvalidArgumentError(f"Server reported negative size {size}")
            new_pos = size + offset

        if new_pos < 0:
            raise InvalidArgumentError(f"Negative seek position {new_pos}")

        if self._data is not None and new_pos != self._pos:
            self._drop_data_connection()

        self._pos = new_pos
        return new_pos

    def tell(self) -> int:
        return self._pos

    def fileno(self) -> int:
        """Descriptor of the control connection, for select/poll integration."""
        self._check_open()
        return self._control.fileno()

    # ------------------------------------------------------------------ #
    def _drop_data_connection(self) -> None:
        conn, self._data = self._data, None
        logger.debug("Close %d", conn.fileno())
        conn.close()

    def close(self) -> None:
        """Release the data connection (best effort) and the control connection."""
        if self._state is not StreamState.OPEN:
            return
        self._state = StreamState.CLOSED

        if self._data is not None:
            try:
                self._drop_data_connection()
            except OSError as e:
                logger.warning("Failed to close data connection: %s", e)

        control, self._control = self._control, None
        logger.debug("Close %d", control.fileno())
        control.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def __repr__(self) -> str:
        return (f"<UnixYStream target={self.target!r} mode={self.direction.value} "
                f"session={self._session.id} pos={self._pos} state={self._state.value}>")


def open_stream(target: str, mode: str | Direction = "r", **kwargs) -> UnixYStream:
    """Create a stream and connect it to the server."""
    return UnixYStream(target, mode, **kwargs).open()
