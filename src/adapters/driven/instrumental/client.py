"""Instrumental line-protocol client over a persistent TCP connection."""

import asyncio
import ipaddress
import logging
import os
import platform
import socket
import time
from types import TracebackType
from typing import Any

from src.adapters.driven.instrumental.transport import ConnectionFactory, open_tcp_connection
from src.core.formatting import sanitize_name, sanitize_value
from src.core.units import TimeUnit, to_whole_seconds
from src.ports.sender import (
    AlreadyConnectedError,
    MetricType,
    ProtocolError,
    SenderPort,
    UnknownHostError,
)

__all__ = ["InstrumentalClient", "CLIENT_VERSION", "DEFAULT_PORT", "READ_TIMEOUT_SEC"]

logger = logging.getLogger(__name__)

CLIENT_VERSION = "python/instrumental-reporter/1.0.0"
DEFAULT_PORT = 8000
READ_TIMEOUT_SEC = 5.0


class InstrumentalClient(SenderPort):
    """Sender speaking the Instrumental text protocol.

    Features:
    - hello/authenticate handshake before any metric line.
    - Name and value sanitization for the whitespace-delimited protocol.
    - Failure counter over connect attempts and writes.
    - Async context manager that connects on entry and closes on exit.

    Not thread-safe; one report cycle at a time.
    """

    def __init__(
        self,
        api_key: str,
        host: str,
        port: int = DEFAULT_PORT,
        *,
        address: tuple[str, int] | None = None,
        connection_factory: ConnectionFactory = open_tcp_connection,
        read_timeout_sec: float = READ_TIMEOUT_SEC,
    ) -> None:
        """Initialize the client without connecting.

        Args:
            api_key: Project token used in the authenticate step.
            host: Collector hostname.
            port: Collector port.
            address: Pre-resolved (ip, port); skips DNS when given.
            connection_factory: Opens the streams for a resolved address.
            read_timeout_sec: Maximum wait for each handshake reply.
        """
        self.api_key = api_key
        self.host = host
        self.port = port
        self.address = address
        self.read_timeout_sec = read_timeout_sec
        self._connection_factory = connection_factory
        self._reader: asyncio.StreamReader | None = None
        self._writer: asyncio.StreamWriter | None = None
        self._connected = False
        self._failures = 0

    async def __aenter__(self) -> "InstrumentalClient":
        """Connect and return self."""
        await self.connect()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        """Close the connection."""
        await self.close()

    def __repr__(self) -> str:
        return f"InstrumentalClient(host={self.host!r}, port={self.port}, connected={self._connected})"

    @property
    def failures(self) -> int:
        """Number of failed connection attempts and writes."""
        return self._failures

    def is_connected(self) -> bool:
        """Return True once the handshake has succeeded."""
        return self._connected

    async def connect(self) -> None:
        """Open the connection and run the handshake.

        Raises:
            AlreadyConnectedError: If already connected.
            UnknownHostError: If the host cannot be resolved.
            ProtocolError: If hello or authenticate is rejected.
            OSError: On any other network fault.
        """
        if self._connected:
            raise AlreadyConnectedError("Already connected")

        if self._writer is not None:
            # Left over from a rejected authenticate or a failed write
            self._writer.close()
            self._reader = self._writer = None

        try:
            family, address = await self._resolve()
            self._reader, self._writer = await self._connection_factory(family, address)
            await self._handshake()
        except OSError as e:
            self._failures += 1
            logger.warning(f"Unable to connect to Instrumental at {self.host}:{self.port}: {e}")
            raise

        self._connected = True
        logger.info(f"Connected to Instrumental at {self.host}:{self.port}")

    async def send(self, kind: MetricType, name: str, value: str, timestamp: int) -> None:
        """Write one ``<kind> <name> <value> <timestamp>`` line.

        Args:
            kind: Metric kind.
            name: Metric name, sanitized before writing.
            value: Formatted value, sanitized before writing.
            timestamp: Unix timestamp in seconds.

        Raises:
            OSError: If not connected or the write fails.
        """
        line = f"{MetricType(kind).value} {sanitize_name(name)} {sanitize_value(value)} {timestamp}"
        await self._write_metric_line(line)

    async def notice(
        self,
        description: str,
        duration: float = 0,
        unit: TimeUnit = TimeUnit.SECONDS,
        timestamp: int | None = None,
    ) -> None:
        """Write an annotation line (deploys, restarts, incidents).

        Args:
            description: Free text; line breaks are turned into spaces.
            duration: Length of the event in ``unit``; 0 for an instant.
            unit: Unit of ``duration``.
            timestamp: Unix seconds; defaults to now.

        Raises:
            OSError: If not connected or the write fails.
        """
        start = int(time.time()) if timestamp is None else timestamp
        text = description.replace("\r", " ").replace("\n", " ")
        await self._write_metric_line(f"notice {start} {to_whole_seconds(duration, unit)} {text}")

    async def flush(self) -> None:
        """Wait until written lines have been handed to the socket.

        Raises:
            OSError: If the connection broke.
        """
        if self._writer is None:
            return
        try:
            await self._writer.drain()
        except OSError:
            self._connected = False
            raise

    async def close(self) -> None:
        """Close the writer and with it the socket.

        Safe to call when never connected or already closed.
        """
        writer = self._writer
        self._reader = self._writer = None
        self._connected = False
        if writer is None:
            return

        writer.close()
        await writer.wait_closed()
        logger.debug(f"Disconnected from Instrumental at {self.host}:{self.port}")

    async def _resolve(self) -> tuple[int, tuple[Any, ...]]:
        """Return (family, socket address) for the configured endpoint."""
        host, port = self.host, self.port
        if self.address is not None:
            host, port = self.address[0], self.address[1]
            try:
                ip = ipaddress.ip_address(host)
            except ValueError:
                # Hostname in place of an IP literal: resolve it below
                pass
            else:
                family = socket.AF_INET6 if ip.version == 6 else socket.AF_INET
                return family, self.address

        loop = asyncio.get_running_loop()
        try:
            infos = await loop.getaddrinfo(host, port, type=socket.SOCK_STREAM)
        except socket.gaierror as e:
            raise UnknownHostError(host) from e

        family, _, _, _, address = infos[0]
        return family, address

    async def _handshake(self) -> None:
        """Run hello then authenticate, one reply line per step."""
        await self._write_line(
            f"hello version {CLIENT_VERSION}"
            f" hostname {sanitize_value(socket.gethostname())}"
            f" pid {os.getpid()}"
            f" runtime {sanitize_value('python/' + platform.python_version())}"
            f" platform {sanitize_value(platform.platform())}"
        )
        if not await self._read_ok():
            writer = self._writer
            self._reader = self._writer = None
            if writer is not None:
                writer.close()
            raise ProtocolError("hello failed")

        await self._write_line(f"authenticate {self.api_key}")
        if not await self._read_ok():
            # Connection stays referenced; caller is expected to close()
            raise ProtocolError("authenticate failed")

    async def _read_ok(self) -> bool:
        """Read one reply line and check that it starts with ``ok``."""
        assert self._reader is not None
        try:
            reply = await asyncio.wait_for(self._reader.readline(), timeout=self.read_timeout_sec)
        except asyncio.TimeoutError:
            logger.debug(f"No handshake reply within {self.read_timeout_sec}s")
            return False
        return reply.startswith(b"ok")

    async def _write_line(self, line: str) -> None:
        assert self._writer is not None
        self._writer.write(f"{line}\n".encode())
        await self._writer.drain()

    async def _write_metric_line(self, line: str) -> None:
        """Write a post-handshake line, counting failures."""
        try:
            if not self._connected or self._writer is None:
                raise ConnectionError("Not connected to Instrumental")
            await self._write_line(line)
        except OSError:
            self._failures += 1
            self._connected = False
            raise
