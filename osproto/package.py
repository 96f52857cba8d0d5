"""Framed packages: a one-byte header followed by a length-prefixed payload."""

from __future__ import annotations

import enum
import logging
import socket
import struct
from dataclasses import dataclass, field

from osproto.payload import Payload
from osproto.runtime import SOCKET_LOGGER_NAME

_logger = logging.getLogger(SOCKET_LOGGER_NAME)

# Header byte (signed 8-bit) followed by the payload size (unsigned 32-bit).
_FRAME_PREFIX = struct.Struct("<bI")


class Header(enum.IntEnum):
    """Operation codes carried in the first byte of every package."""

    # Handshake
    PORT_TYPE_HEADER = 0
    # Kernel <==> CPU
    PROCESS_DISPATCH_HEADER = enum.auto()
    PROCESS_EVICTION_HEADER = enum.auto()
    KERNEL_INTERRUPT_HEADER = enum.auto()
    # Kernel <==> Memory
    PROCESS_CREATE_HEADER = enum.auto()
    PROCESS_DESTROY_HEADER = enum.auto()
    # Kernel <==> Input/Output
    INTERFACE_DATA_REQUEST_HEADER = enum.auto()
    IO_OPERATION_DISPATCH_HEADER = enum.auto()
    IO_OPERATION_FINISHED_HEADER = enum.auto()
    # CPU <==> Memory
    INSTRUCTION_REQUEST = enum.auto()
    READ_REQUEST = enum.auto()
    WRITE_REQUEST = enum.auto()
    COPY_REQUEST = enum.auto()
    RESIZE_REQUEST = enum.auto()
    FRAME_ACCESS = enum.auto()
    FRAME_REQUEST = enum.auto()
    PAGE_SIZE_REQUEST = enum.auto()
    # Input/Output <==> Memory
    IO_FS_WRITE_MEMORY = enum.auto()
    IO_FS_READ_MEMORY = enum.auto()
    IO_STDIN_WRITE_MEMORY = enum.auto()
    IO_STDOUT_READ_MEMORY = enum.auto()


class ConnectionClosedError(ConnectionError):
    """Raised when the peer closes the connection before a read completes."""


def receive_exact(sock: socket.socket, size: int) -> bytes:
    """Read exactly ``size`` bytes from ``sock``.

    Raises :class:`ConnectionClosedError` if the peer shuts down first.
    """
    chunks = bytearray()
    while len(chunks) < size:
        chunk = sock.recv(size - len(chunks))
        if not chunk:
            _logger.warning(
                "recv: peer closed the connection after %d of %d bytes",
                len(chunks),
                size,
            )
            raise ConnectionClosedError(
                f"connection closed after {len(chunks)} of {size} bytes"
            )
        chunks.extend(chunk)
    return bytes(chunks)


@dataclass
class Package:
    """A header together with the payload it carries."""

    header: Header
    payload: Payload = field(default_factory=Payload)

    def encode(self) -> bytes:
        """Return the wire form of the package."""
        body = bytes(self.payload)
        return _FRAME_PREFIX.pack(int(self.header), len(body)) + body

    def send(self, sock: socket.socket) -> None:
        """Write the whole package to ``sock``."""
        try:
            sock.sendall(self.encode())
        except OSError as error:
            _logger.warning("send: %s", error)
            raise

    @classmethod
    def receive(cls, sock: socket.socket) -> "Package":
        """Read one whole package from ``sock``.

        Raises :class:`ConnectionClosedError` on an early close and
        :class:`ValueError` when the header byte is not a known header.
        """
        raw_header, size = _FRAME_PREFIX.unpack(
            receive_exact(sock, _FRAME_PREFIX.size)
        )
        body = receive_exact(sock, size)
        try:
            header = Header(raw_header)
        except ValueError:
            _logger.warning("recv: unknown header value %d", raw_header)
            raise
        return cls(header, Payload(body))