"""Wire encoding of the scalar, text and nested-payload fields inside packages."""

from __future__ import annotations

import enum
import logging
import struct
from typing import Optional

from osproto.codes import deserialize_enum, serialize_enum
from osproto.package import Header
from osproto.payload import Payload
from osproto.runtime import SERIALIZE_LOGGER_NAME

_logger = logging.getLogger(SERIALIZE_LOGGER_NAME)

_RETURN_VALUE = struct.Struct("<b")
_SIZE = struct.Struct("<I")
_STRING_LENGTH = struct.Struct("<I")
_PAYLOAD_SIZE = struct.Struct("<I")


class PortType(enum.IntEnum):
    """Identity a module announces during the handshake."""

    KERNEL = 0
    CPU = enum.auto()
    CPU_DISPATCH = enum.auto()
    CPU_INTERRUPT = enum.auto()
    MEMORY = enum.auto()
    IO = enum.auto()
    TO_BE_IDENTIFIED = enum.auto()

    def label(self) -> str:
        """Return the human-readable name of the port."""
        return _PORT_LABELS[self]


_PORT_LABELS = {
    PortType.KERNEL: "Kernel",
    PortType.CPU: "CPU",
    PortType.CPU_DISPATCH: "CPU (Dispatch)",
    PortType.CPU_INTERRUPT: "CPU (Interrupt)",
    PortType.MEMORY: "Memoria",
    PortType.IO: "Entrada/Salida",
    PortType.TO_BE_IDENTIFIED: "A identificar",
}


def _pack(fmt: struct.Struct, value: int, what: str) -> bytes:
    try:
        return fmt.pack(value)
    except struct.error:
        raise ValueError(f"{what} out of range: {value}") from None


def port_type_serialize(payload: Payload, port_type: PortType) -> None:
    """Append a port type as one signed byte."""
    serialize_enum(payload, PortType(port_type))


def port_type_deserialize(payload: Payload) -> PortType:
    """Take a port type from the front of ``payload``."""
    return deserialize_enum(payload, PortType)


def return_value_serialize(payload: Payload, value: int) -> None:
    """Append a return value as a signed 8-bit integer."""
    payload.append(_pack(_RETURN_VALUE, value, "return value"))
    _logger.info("return value: %d", value)


def return_value_deserialize(payload: Payload) -> int:
    """Take a signed 8-bit return value from the front of ``payload``."""
    (value,) = _RETURN_VALUE.unpack(payload.shift(_RETURN_VALUE.size))
    _logger.info("return value: %d", value)
    return value


def subheader_serialize(payload: Payload, header: Header) -> None:
    """Append a header nested inside a payload."""
    serialize_enum(payload, Header(header))


def subheader_deserialize(payload: Payload) -> Header:
    """Take a nested header from the front of ``payload``."""
    return deserialize_enum(payload, Header)


def size_serialize(payload: Payload, size: int) -> None:
    """Append a size as an unsigned 32-bit integer."""
    payload.append(_pack(_SIZE, size, "size"))
    _logger.info("size: %d", size)


def size_deserialize(payload: Payload) -> int:
    """Take an unsigned 32-bit size from the front of ``payload``."""
    (size,) = _SIZE.unpack(payload.shift(_SIZE.size))
    _logger.info("size: %d", size)
    return size


def text_serialize(payload: Payload, text: Optional[str]) -> None:
    """Append a text as its length (terminator included) and NUL-terminated bytes.

    ``None`` is written as a length of zero with no bytes following.
    """
    if text is None:
        payload.append(_STRING_LENGTH.pack(0))
    else:
        if "\0" in text:
            raise ValueError("text must not contain NUL characters")
        raw = text.encode("utf-8") + b"\0"
        payload.append(_pack(_STRING_LENGTH, len(raw), "text length"))
        payload.append(raw)
    _logger.info("text: %s", text if text is not None else "(nil)")


def text_deserialize(payload: Payload) -> Optional[str]:
    """Take a text from the front of ``payload``; a zero length gives ``None``."""
    (length,) = _STRING_LENGTH.unpack(payload.shift(_STRING_LENGTH.size))
    if length == 0:
        text = None
    else:
        raw = payload.shift(length)
        text = raw.split(b"\0", 1)[0].decode("utf-8")
    _logger.info("text: %s", text if text is not None else "(nil)")
    return text


def subpayload_serialize(payload: Payload, source: Payload) -> None:
    """Append a nested payload as its size followed by its bytes."""
    body = bytes(source)
    payload.append(_pack(_PAYLOAD_SIZE, len(body), "payload size"))
    payload.append(body)
    _logger.info("payload: size %d", len(body))


def subpayload_deserialize(payload: Payload) -> Payload:
    """Take a nested payload from the front of ``payload``."""
    (size,) = _PAYLOAD_SIZE.unpack(payload.shift(_PAYLOAD_SIZE.size))
    nested = Payload(payload.shift(size))
    _logger.info("payload: size %d", size)
    return nested