"""Socket I/O layer for unixy - addresses, connections and the default transport."""

# Re-export these for import convenience
from .address import Address, parse_address
from .base import ByteReader, Connection, Transport
from .transport import UnixSocketTransport


def default_transport() -> Transport:
    """Transport used by streams that are not handed one explicitly."""
    return UnixSocketTransport()
