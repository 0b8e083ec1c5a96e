"""Random-access byte reader on top of a read-mode unix-y stream."""

from .core.model import Direction, EndOfStream, InvalidDirectionError, Whence
from .stream import UnixYStream, open_stream
from .io.base import ByteReader


class StreamByteReader:
    """Serve exact byte windows from a read-mode stream.

    Consecutive fetches that continue where the previous one stopped reuse the
    open data connection; any other start offset makes the stream reconnect.
    """

    def __init__(self, stream: UnixYStream):
        if stream.direction is not Direction.READ:
            raise InvalidDirectionError("StreamByteReader needs a read-mode stream")
        self.stream = stream
        self.bytes_fetched = 0
        self.requests_made = 0

    @property
    def size(self) -> int:
        """Return the total size of the source in bytes."""
        return self.stream.seek(0, Whence.SIZE)

    def fetch(self, start: int, length: int) -> bytes:
        """Return exactly `length` bytes starting at absolute offset `start`."""
        self.requests_made += 1

        if start < 0:
            raise IOError("Start offset cannot be negative")

        if length <= 0:
            raise IOError("Length must be positive")

        self.stream.seek(start, Whence.SET)

        buf = bytearray(length)
        view = memoryview(buf)
        got = 0
        while got < length:
            try:
                got += self.stream.readinto(view[got:])
            except EndOfStream:
                raise IOError(f"Not enough data: requested {length} bytes at offset {start}, "
                              f"but stream ended after {got} bytes")

        self.bytes_fetched += got
        return bytes(buf)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def close(self):
        """Close the underlying stream."""
        self.stream.close()


def open_reader(target: str, **kwargs) -> StreamByteReader:
    """Open a read-mode stream on `target` and wrap it in a byte reader."""
    return StreamByteReader(open_stream(target, Direction.READ, **kwargs))


__all__ = ["ByteReader", "StreamByteReader", "open_reader"]
