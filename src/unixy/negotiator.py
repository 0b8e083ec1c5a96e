"""Connect-and-handshake, shared by the control and every data connection."""

from __future__ import annotations

import logging

from .core.model import ConnectError, Session
from .core.session_ids import DEFAULT_ALLOCATOR, SessionIdAllocator
from .io.address import Address
from .io.base import Connection, Transport
from .protocol import new_session_line, run_session_line, send_all

logger = logging.getLogger(__name__)


def negotiate(
    transport: Transport,
    address: Address,
    session: Session,
    *,
    timeout_ms: int,
    allocator: SessionIdAllocator | None = None,
) -> Connection:
    """Open one connection to `address` and bind it to `session`.

    The first connection of a session mints an id and sends ``new_session``;
    later ones resume with ``run_session``. Neither line is acknowledged by
    the server. Whether the returned connection carries commands or payload
    is up to the caller.
    """
    logger.debug("Opening new connection")
    try:
        conn = transport.connect(address, timeout_ms)
    except ConnectError:
        raise
    except OSError as e:
        raise ConnectError(f"Cannot connect to {address}: {e}") from e

    try:
        # connect timeout only; everything after this blocks
        conn.setblocking(True)
    except OSError:
        logger.error("Close %d because setblocking failed", conn.fileno())
        conn.close()
        raise

    if session.assigned:
        logger.info("Run session %d", session.id)
        line = run_session_line(session.id)
    else:
        session.id = (allocator or DEFAULT_ALLOCATOR).next_id()
        logger.info("Create session %s %d", session.direction.value, session.id)
        line = new_session_line(session.direction, session.id)

    try:
        send_all(conn, line)
    except OSError:
        logger.error("Close %d because %s failed", conn.fileno(), line.split()[0].decode())
        conn.close()
        raise

    logger.debug("Opened connection %d", conn.fileno())
    return conn
