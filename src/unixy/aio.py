"""Asynchronous facade - thin wrapper running a blocking stream in worker threads."""

import asyncio

from .core.model import Direction, Whence
from .stream import UnixYStream


class AsyncUnixYStream:
    """Awaitable version of ``UnixYStream``; still one caller at a time."""

    def __init__(self, stream: UnixYStream):
        self._sync_stream = stream

    @property
    def stream(self) -> UnixYStream:
        return self._sync_stream

    @property
    def position(self) -> int:
        return self._sync_stream.position

    @property
    def closed(self) -> bool:
        return self._sync_stream.closed

    def tell(self) -> int:
        return self._sync_stream.tell()

    def fileno(self) -> int:
        return self._sync_stream.fileno()

    async def read(self, size: int = -1) -> bytes:
        return await asyncio.to_thread(self._sync_stream.read, size)

    async def readinto(self, buffer) -> int:
        return await asyncio.to_thread(self._sync_stream.readinto, buffer)

    async def write(self, data) -> int:
        return await asyncio.to_thread(self._sync_stream.write, data)

    async def seek(self, offset: int, whence: int = Whence.SET) -> int:
        return await asyncio.to_thread(self._sync_stream.seek, offset, whence)

    async def stat(self) -> int:
        return await asyncio.to_thread(self._sync_stream.stat)

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self):
        """Close the underlying sync stream."""
        await asyncio.to_thread(self._sync_stream.close)


async def open_stream_async(target: str, mode: str | Direction = "r", **kwargs) -> AsyncUnixYStream:
    """Create and connect a stream without blocking the event loop."""
    stream = UnixYStream(target, mode, **kwargs)
    await asyncio.to_thread(stream.open)
    return AsyncUnixYStream(stream)
