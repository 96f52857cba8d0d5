"""Growable byte payload with queue-like operations at both ends."""

from __future__ import annotations

from typing import Union

BytesLike = Union[bytes, bytearray, memoryview]

#: Payload sizes travel on the wire as an unsigned 32-bit integer.
MAX_PAYLOAD_SIZE = 0xFFFFFFFF


class PayloadError(ValueError):
    """Raised when a payload operation cannot be carried out."""


class Payload:
    """A byte stream that grows at either end and is consumed from either end."""

    __slots__ = ("_stream",)

    def __init__(self, data: BytesLike = b"") -> None:
        self._stream = bytearray()
        self.append(data)

    def _check_growth(self, extra: int) -> None:
        if len(self._stream) + extra > MAX_PAYLOAD_SIZE:
            raise PayloadError(
                f"payload would exceed {MAX_PAYLOAD_SIZE} bytes"
            )

    def _check_take(self, size: int) -> None:
        if size < 0:
            raise PayloadError(f"cannot remove a negative number of bytes: {size}")
        if size > len(self._stream):
            raise PayloadError(
                f"cannot remove {size} bytes from a payload of {len(self._stream)}"
            )

    def append(self, data: BytesLike) -> None:
        """Add bytes at the end of the payload."""
        data = bytes(data)
        if not data:
            return
        self._check_growth(len(data))
        self._stream.extend(data)

    def prepend(self, data: BytesLike) -> None:
        """Add bytes at the start of the payload."""
        data = bytes(data)
        if not data:
            return
        self._check_growth(len(data))
        self._stream[:0] = data

    def shift(self, size: int) -> bytes:
        """Remove and return the first ``size`` bytes."""
        self._check_take(size)
        taken = bytes(self._stream[:size])
        del self._stream[:size]
        return taken

    def truncate(self, size: int) -> bytes:
        """Remove and return the last ``size`` bytes."""
        self._check_take(size)
        if size == 0:
            return b""
        taken = bytes(self._stream[-size:])
        del self._stream[-size:]
        return taken

    def __len__(self) -> int:
        return len(self._stream)

    def __bytes__(self) -> bytes:
        return bytes(self._stream)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Payload):
            return self._stream == other._stream
        if isinstance(other, (bytes, bytearray, memoryview)):
            return self._stream == bytes(other)
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Payload({bytes(self._stream)!r})"