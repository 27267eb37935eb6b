"""Sender port definition (interface, metric kinds and errors)."""

from __future__ import annotations

from enum import Enum
from typing import Protocol

__all__ = [
    "AlreadyConnectedError",
    "InstrumentalError",
    "MetricType",
    "ProtocolError",
    "SenderPort",
    "UnknownHostError",
]


class MetricType(str, Enum):
    """Metric kind written as the first token of a data line."""

    GAUGE = "gauge"
    INCREMENT = "increment"


class InstrumentalError(Exception):
    """Base class for errors raised by a sender."""


class AlreadyConnectedError(InstrumentalError, RuntimeError):
    """connect() was called on a sender that is already connected."""


class UnknownHostError(InstrumentalError, OSError):
    """The backend hostname could not be resolved.

    The message is exactly the unresolvable hostname.
    """


class ProtocolError(InstrumentalError, OSError):
    """A handshake step was rejected by the backend."""


class SenderPort(Protocol):
    """Interface for shipping metric lines to a monitoring backend.

    Core calls these operations once per report cycle; adapters own the
    transport. Connection-phase and write-phase faults surface as OSError
    subclasses, misuse as AlreadyConnectedError.
    """

    async def connect(self) -> None:
        """Open the connection and complete the handshake.

        Raises:
            AlreadyConnectedError: If already connected.
            UnknownHostError: If the host cannot be resolved.
            ProtocolError: If a handshake step is rejected.
            OSError: On any other network fault.
        """
        ...

    async def send(self, kind: MetricType, name: str, value: str, timestamp: int) -> None:
        """Write one metric line.

        Args:
            kind: Metric kind.
            name: Metric name (sanitized by the sender).
            value: Formatted value (sanitized by the sender).
            timestamp: Unix timestamp in seconds.
        """
        ...

    async def flush(self) -> None:
        """Push buffered lines to the wire."""
        ...

    def is_connected(self) -> bool:
        """Return True once the handshake has succeeded."""
        ...

    async def close(self) -> None:
        """Close the connection; safe to call when not connected."""
        ...

    @property
    def failures(self) -> int:
        """Number of failed connection attempts and sends so far."""
        ...
