"""Default AF_UNIX transport built on the socket module."""

import logging
import socket

from ..core.model import ConnectError
from .address import Address
from .base import Connection

logger = logging.getLogger(__name__)


class UnixSocketTransport:
    """Connects SOCK_STREAM sockets to a local address with a connect timeout."""

    def connect(self, address: Address, timeout_ms: int) -> Connection:
        try:
            sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        except OSError as e:
            raise ConnectError(f"Cannot create socket: {e}") from e

        sock.settimeout(timeout_ms / 1000.0)
        try:
            sock.connect(address.sockaddr)
        except OSError as e:
            logger.debug("Close %d", sock.fileno())
            sock.close()
            raise ConnectError(f"Cannot connect to {address}: {e}") from e
        return sock
