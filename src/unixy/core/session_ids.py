from __future__ import annotations
import threading


class SessionIdAllocator:
    """Process-wide counter minting fresh session ids for new streams."""

    def __init__(self, start: int = 1) -> None:
        if start < 1:
            raise ValueError("Session ids must be positive")
        self._lock = threading.Lock()
        self._last = start - 1

    def next_id(self) -> int:
        with self._lock:
            self._last += 1
            return self._last

    def peek(self) -> int:
        """Return the most recently minted id (start - 1 before the first)."""
        with self._lock:
            return self._last


# singleton shared by every stream that is not handed its own allocator
DEFAULT_ALLOCATOR = SessionIdAllocator()
