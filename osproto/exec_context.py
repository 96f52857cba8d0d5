"""Execution context of a process: identifiers, quantum and CPU registers."""

from __future__ import annotations

import enum
import logging
import struct
from dataclasses import dataclass, field

from osproto.payload import Payload
from osproto.runtime import SERIALIZE_LOGGER_NAME

_logger = logging.getLogger(SERIALIZE_LOGGER_NAME)

#: Largest process identifier (PIDs travel as unsigned 16-bit integers).
PID_MAX = 0xFFFF

# PID (u16), PC (u32), quantum (i64), AX..DX (u8 each), EAX..DI (u32 each).
_EXEC_CONTEXT = struct.Struct("<HIq4B10I")

_REGISTER_NAMES = (
    "AX", "BX", "CX", "DX",
    "EAX", "EBX", "ECX", "EDX",
    "RAX", "RBX", "RCX", "RDX",
    "SI", "DI",
)


class ExitReason(enum.IntEnum):
    """Why a process finished."""

    UNEXPECTED_ERROR = 0
    SUCCESS = enum.auto()
    INVALID_RESOURCE = enum.auto()
    INVALID_INTERFACE = enum.auto()
    OUT_OF_MEMORY = enum.auto()
    INTERRUPTED_BY_USER = enum.auto()


@dataclass
class CpuRegisters:
    """General-purpose registers: four 8-bit ones and ten 32-bit ones."""

    AX: int = 0
    BX: int = 0
    CX: int = 0
    DX: int = 0
    EAX: int = 0
    EBX: int = 0
    ECX: int = 0
    EDX: int = 0
    RAX: int = 0
    RBX: int = 0
    RCX: int = 0
    RDX: int = 0
    SI: int = 0
    DI: int = 0

    def values(self) -> tuple[int, ...]:
        """Return the register values in wire order."""
        return tuple(getattr(self, name) for name in _REGISTER_NAMES)


@dataclass
class ExecContext:
    """What the CPU needs to run a process and hands back when it stops."""

    pid: int = 0
    pc: int = 0
    quantum: int = 0
    cpu_registers: CpuRegisters = field(default_factory=CpuRegisters)

    def serialize(self, payload: Payload) -> None:
        """Append this context to ``payload``.

        Raises :class:`ValueError` if a field does not fit its wire width.
        """
        try:
            raw = _EXEC_CONTEXT.pack(
                self.pid, self.pc, self.quantum, *self.cpu_registers.values()
            )
        except struct.error as error:
            raise ValueError(f"execution context out of range: {error}") from None
        payload.append(raw)
        self._log()

    @classmethod
    def deserialize(cls, payload: Payload) -> "ExecContext":
        """Take an execution context from the front of ``payload``."""
        pid, pc, quantum, *registers = _EXEC_CONTEXT.unpack(
            payload.shift(_EXEC_CONTEXT.size)
        )
        context = cls(
            pid, pc, quantum, CpuRegisters(**dict(zip(_REGISTER_NAMES, registers)))
        )
        context._log()
        return context

    def _log(self) -> None:
        lines = [
            "t_Exec_Context:",
            f"* PID: {self.pid}",
            f"* PC: {self.pc}",
            f"* quantum: {self.quantum}",
        ]
        lines.extend(
            f"* {name}: {value}"
            for name, value in zip(_REGISTER_NAMES, self.cpu_registers.values())
        )
        _logger.info("\n".join(lines))