"""Enumerations exchanged between modules and their one-byte wire encoding."""

from __future__ import annotations

import enum
import logging
import struct
from typing import Type, TypeVar

from osproto.payload import Payload
from osproto.runtime import SERIALIZE_LOGGER_NAME

_logger = logging.getLogger(SERIALIZE_LOGGER_NAME)

# Enumeration values travel as a signed 8-bit integer.
_ENUM_VALUE = struct.Struct("<b")

E = TypeVar("E", bound=enum.IntEnum)


class CpuOpcode(enum.IntEnum):
    """Instructions the CPU understands."""

    SET = 0
    MOV_IN = enum.auto()
    MOV_OUT = enum.auto()
    SUM = enum.auto()
    SUB = enum.auto()
    JNZ = enum.auto()
    RESIZE = enum.auto()
    COPY_STRING = enum.auto()
    WAIT = enum.auto()
    SIGNAL = enum.auto()
    IO_GEN_SLEEP = enum.auto()
    IO_STDIN_READ = enum.auto()
    IO_STDOUT_WRITE = enum.auto()
    IO_FS_CREATE = enum.auto()
    IO_FS_DELETE = enum.auto()
    IO_FS_TRUNCATE = enum.auto()
    IO_FS_WRITE = enum.auto()
    IO_FS_READ = enum.auto()
    EXIT = enum.auto()

    def mnemonic(self) -> str:
        """Return the instruction's name as written in a program."""
        return self.name

    @classmethod
    def from_mnemonic(cls, mnemonic: str) -> "CpuOpcode":
        """Return the opcode written as ``mnemonic``; raise ValueError if unknown."""
        try:
            return cls[mnemonic]
        except KeyError:
            raise ValueError(f"unknown instruction: {mnemonic!r}") from None


class EvictionReason(enum.IntEnum):
    """Why a process left the CPU."""

    UNEXPECTED_ERROR = 0
    OUT_OF_MEMORY = enum.auto()
    EXIT = enum.auto()  # only for the EXIT syscall
    KILL_KERNEL_INTERRUPT = enum.auto()
    SYSCALL = enum.auto()  # every syscall but EXIT
    QUANTUM_KERNEL_INTERRUPT = enum.auto()


class IoType(enum.IntEnum):
    """Kinds of input/output interface."""

    GENERIC = 0
    STDIN = enum.auto()
    STDOUT = enum.auto()
    DIALFS = enum.auto()


class KernelInterrupt(enum.IntEnum):
    """Interrupts the kernel can send to the CPU."""

    NONE = 0
    QUANTUM = enum.auto()
    KILL = enum.auto()


def serialize_enum(payload: Payload, value: enum.IntEnum) -> None:
    """Append ``value`` to ``payload`` as a single signed byte."""
    payload.append(_ENUM_VALUE.pack(int(value)))
    _logger.info("%s: %s", type(value).__name__, value.name)


def deserialize_enum(payload: Payload, enum_type: Type[E]) -> E:
    """Take one byte from the front of ``payload`` and decode it as ``enum_type``.

    Raises :class:`ValueError` if the byte is not a member of ``enum_type``.
    """
    (raw,) = _ENUM_VALUE.unpack(payload.shift(_ENUM_VALUE.size))
    value = enum_type(raw)
    _logger.info("%s: %s", enum_type.__name__, value.name)
    return value