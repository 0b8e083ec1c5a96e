from __future__ import annotations
from dataclasses import dataclass

DEFAULT_TIMEOUT_MS = 3000
DEFAULT_READ_SIZE = 64 * 1024


@dataclass(frozen=True, slots=True)
class StreamOptions:
    # connect phase only; any negative value means "use the default"
    timeout_ms: int = -1

    @property
    def connect_timeout_ms(self) -> int:
        return DEFAULT_TIMEOUT_MS if self.timeout_ms < 0 else self.timeout_ms
