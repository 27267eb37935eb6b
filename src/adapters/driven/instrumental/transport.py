"""TCP transport for the Instrumental collector."""

import asyncio
import logging
import socket
from collections.abc import Awaitable, Callable
from typing import Any

__all__ = [
    "ConnectionFactory",
    "PERFORMANCE_PREFERENCES",
    "TRAFFIC_CLASS",
    "apply_socket_options",
    "open_tcp_connection",
]

logger = logging.getLogger(__name__)

IPTOS_RELIABILITY = 0x04
IPTOS_LOWDELAY = 0x10
TRAFFIC_CLASS = IPTOS_RELIABILITY | IPTOS_LOWDELAY

# (connection time, latency, bandwidth): latency first, then connection time
PERFORMANCE_PREFERENCES = (0, 2, 1)

Streams = tuple[asyncio.StreamReader, asyncio.StreamWriter]
ConnectionFactory = Callable[[int, tuple[Any, ...]], Awaitable[Streams]]


def apply_socket_options(sock: socket.socket) -> None:
    """Tune a fresh socket for small, latency-sensitive writes.

    Sets TCP_NODELAY and SO_KEEPALIVE. The IP type-of-service byte is
    best-effort: platforms or address families that reject it are logged
    and ignored. Performance preferences have no socket-level equivalent
    and are only logged.

    Args:
        sock: Unconnected stream socket.
    """
    sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)
    sock.setsockopt(socket.SOL_SOCKET, socket.SO_KEEPALIVE, 1)

    try:
        sock.setsockopt(socket.IPPROTO_IP, socket.IP_TOS, TRAFFIC_CLASS)
    except (AttributeError, OSError) as e:
        logger.debug(f"Traffic class not applied: {e}")

    logger.debug(f"Performance preferences {PERFORMANCE_PREFERENCES} are advisory only")


async def open_tcp_connection(
    family: int,
    address: tuple[Any, ...],
    *,
    socket_factory: Callable[[int, int], socket.socket] = socket.socket,
) -> Streams:
    """Connect to a resolved address and wrap the socket in asyncio streams.

    Args:
        family: Address family of ``address`` (AF_INET or AF_INET6).
        address: Resolved socket address.
        socket_factory: Creates the socket; replaceable in tests.

    Returns:
        Reader and writer bound to the connected socket.

    Raises:
        OSError: If the connection cannot be established.
    """
    loop = asyncio.get_running_loop()
    sock = socket_factory(family, socket.SOCK_STREAM)
    try:
        apply_socket_options(sock)
        sock.setblocking(False)
        await loop.sock_connect(sock, address)
        return await asyncio.open_connection(sock=sock)
    except BaseException:
        sock.close()
        raise
