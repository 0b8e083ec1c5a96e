"""Target string → AF_UNIX socket address."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..core.model import InvalidArgumentError

logger = logging.getLogger(__name__)

URL_PREFIX = "unix-y:"
ABSTRACT_MARKER = "0"

# struct sockaddr_un on Linux: sa_family_t followed by char sun_path[108]
SUN_PATH_OFFSET = 2
SUN_PATH_MAX = 108
SOCKADDR_UN_SIZE = SUN_PATH_OFFSET + SUN_PATH_MAX


@dataclass(frozen=True, slots=True)
class Address:
    target: str
    abstract: bool
    sockaddr: str | bytes     # value handed to socket.connect()
    length: int               # effective connect length of the sockaddr_un

    def __str__(self) -> str:
        return self.target


def parse_address(target: str) -> Address:
    """Parse a stream target into a filesystem or abstract-namespace address.

    A leading ``unix-y:`` prefix is dropped. Targets starting with ``0`` name
    an abstract socket: the marker becomes the leading NUL byte and nothing
    is created on the filesystem.
    """
    if target.startswith(URL_PREFIX):
        target = target[len(URL_PREFIX):]
    if not target:
        raise InvalidArgumentError("Empty socket target")

    # bounded copy into sun_path leaves room for the terminating NUL;
    # the limit is in bytes, and a multibyte character cut in half is dropped
    raw = target.encode("utf-8")
    if len(raw) > SUN_PATH_MAX - 1:
        target = raw[:SUN_PATH_MAX - 1].decode("utf-8", errors="ignore")
    logger.debug("Open file name %s", target)

    if target.startswith(ABSTRACT_MARKER):
        name = target[len(ABSTRACT_MARKER):]
        logger.debug("Detect abstract domain socket %s", name)
        return Address(
            target=target,
            abstract=True,
            sockaddr=b"\0" + name.encode("utf-8"),
            length=len(target.encode("utf-8")) + SUN_PATH_OFFSET,
        )

    return Address(target=target, abstract=False, sockaddr=target, length=SOCKADDR_UN_SIZE)
