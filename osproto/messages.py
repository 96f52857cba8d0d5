"""Typed messages exchanged between modules, each sent as one package."""

from __future__ import annotations

import logging
import socket
import struct
from typing import Optional, Tuple

from osproto.codes import (
    EvictionReason,
    IoType,
    KernelInterrupt,
    deserialize_enum,
    serialize_enum,
)
from osproto.exec_context import ExecContext
from osproto.fields import (
    PortType,
    port_type_deserialize,
    port_type_serialize,
    return_value_deserialize,
    return_value_serialize,
    subpayload_deserialize,
    subpayload_serialize,
    text_deserialize,
    text_serialize,
)
from osproto.package import Header, Package
from osproto.payload import Payload
from osproto.runtime import SOCKET_LOGGER_NAME

_logger = logging.getLogger(SOCKET_LOGGER_NAME)

_PID = struct.Struct("<H")
_PC = struct.Struct("<I")


class UnexpectedHeaderError(ValueError):
    """Raised when a received package carries a header other than the expected one."""

    def __init__(self, expected: Header, received: Header) -> None:
        super().__init__(
            f"expected header {expected.name}, received {received.name}"
        )
        self.expected = expected
        self.received = received


def _pack(fmt: struct.Struct, value: int, what: str) -> bytes:
    try:
        return fmt.pack(value)
    except struct.error:
        raise ValueError(f"{what} out of range: {value}") from None


def _append_pid(payload: Payload, pid: int) -> None:
    payload.append(_pack(_PID, pid, "pid"))


def _shift_pid(payload: Payload) -> int:
    (pid,) = _PID.unpack(payload.shift(_PID.size))
    return pid


def _receive_expected(sock: socket.socket, expected: Header) -> Package:
    package = Package.receive(sock)
    if package.header != expected:
        _logger.error(
            "invalid header: expected %s, received %s",
            expected.name,
            package.header.name,
        )
        raise UnexpectedHeaderError(expected, package.header)
    return package


# Handshake


def send_port_type(port_type: PortType, sock: socket.socket) -> None:
    """Announce this side's port type."""
    package = Package(Header.PORT_TYPE_HEADER)
    port_type_serialize(package.payload, port_type)
    package.send(sock)


def receive_port_type(sock: socket.socket) -> PortType:
    """Receive the peer's port type."""
    package = _receive_expected(sock, Header.PORT_TYPE_HEADER)
    return port_type_deserialize(package.payload)


# General use


def send_header(header: Header, sock: socket.socket) -> None:
    """Send a package that carries only a header."""
    Package(Header(header)).send(sock)


def receive_expected_header(expected_header: Header, sock: socket.socket) -> None:
    """Receive a package and check that it carries ``expected_header``."""
    _receive_expected(sock, expected_header)


def send_text_with_header(
    header: Header, text: Optional[str], sock: socket.socket
) -> None:
    """Send a text under ``header``."""
    package = Package(Header(header))
    text_serialize(package.payload, text)
    package.send(sock)


def receive_text_with_expected_header(
    expected_header: Header, sock: socket.socket
) -> Optional[str]:
    """Receive a text sent under ``expected_header``."""
    package = _receive_expected(sock, expected_header)
    return text_deserialize(package.payload)


def send_return_value_with_header(
    header: Header, return_value: int, sock: socket.socket
) -> None:
    """Send a signed 8-bit return value under ``header``."""
    package = Package(Header(header))
    return_value_serialize(package.payload, return_value)
    package.send(sock)


def receive_return_value_with_expected_header(
    expected_header: Header, sock: socket.socket
) -> int:
    """Receive a return value sent under ``expected_header``."""
    package = _receive_expected(sock, expected_header)
    return return_value_deserialize(package.payload)


# Kernel - Memory


def send_process_create(
    pid: int, instructions_path: Optional[str], flag_relative_path: int, sock: socket.socket
) -> None:
    """Ask memory to create a process from an instructions file."""
    package = Package(Header.PROCESS_CREATE_HEADER)
    _append_pid(package.payload, pid)
    text_serialize(package.payload, instructions_path)
    return_value_serialize(package.payload, flag_relative_path)
    package.send(sock)


def send_process_destroy(pid: int, sock: socket.socket) -> None:
    """Ask memory to destroy a process."""
    package = Package(Header.PROCESS_DESTROY_HEADER)
    _append_pid(package.payload, pid)
    package.send(sock)


# Kernel - CPU


def send_process_dispatch(exec_context: ExecContext, sock: socket.socket) -> None:
    """Hand an execution context to the CPU."""
    package = Package(Header.PROCESS_DISPATCH_HEADER)
    exec_context.serialize(package.payload)
    package.send(sock)


def receive_process_dispatch(sock: socket.socket) -> ExecContext:
    """Receive an execution context dispatched by the kernel."""
    package = _receive_expected(sock, Header.PROCESS_DISPATCH_HEADER)
    return ExecContext.deserialize(package.payload)


def send_process_eviction(
    exec_context: ExecContext,
    eviction_reason: EvictionReason,
    syscall_instruction: Payload,
    sock: socket.socket,
) -> None:
    """Return a process to the kernel with the reason it left the CPU."""
    package = Package(Header.PROCESS_EVICTION_HEADER)
    exec_context.serialize(package.payload)
    serialize_enum(package.payload, EvictionReason(eviction_reason))
    subpayload_serialize(package.payload, syscall_instruction)
    package.send(sock)


def receive_process_eviction(
    sock: socket.socket,
) -> Tuple[ExecContext, EvictionReason, Payload]:
    """Receive an evicted process: its context, the reason and the syscall payload."""
    package = _receive_expected(sock, Header.PROCESS_EVICTION_HEADER)
    exec_context = ExecContext.deserialize(package.payload)
    reason = deserialize_enum(package.payload, EvictionReason)
    syscall_instruction = subpayload_deserialize(package.payload)
    return exec_context, reason, syscall_instruction


def send_kernel_interrupt(
    kind: KernelInterrupt, pid: int, sock: socket.socket
) -> None:
    """Send an interrupt for process ``pid`` to the CPU."""
    package = Package(Header.KERNEL_INTERRUPT_HEADER)
    serialize_enum(package.payload, KernelInterrupt(kind))
    _append_pid(package.payload, pid)
    package.send(sock)


def receive_kernel_interrupt(sock: socket.socket) -> Tuple[KernelInterrupt, int]:
    """Receive an interrupt and the pid it targets."""
    package = _receive_expected(sock, Header.KERNEL_INTERRUPT_HEADER)
    kind = deserialize_enum(package.payload, KernelInterrupt)
    pid = _shift_pid(package.payload)
    return kind, pid


# Kernel - Input/Output


def send_interface_data(
    interface_name: Optional[str], io_type: IoType, sock: socket.socket
) -> None:
    """Announce an interface's name and type."""
    package = Package(Header.INTERFACE_DATA_REQUEST_HEADER)
    text_serialize(package.payload, interface_name)
    serialize_enum(package.payload, IoType(io_type))
    package.send(sock)


def receive_interface_data(sock: socket.socket) -> Tuple[Optional[str], IoType]:
    """Receive an interface's name and type."""
    package = _receive_expected(sock, Header.INTERFACE_DATA_REQUEST_HEADER)
    name = text_deserialize(package.payload)
    io_type = deserialize_enum(package.payload, IoType)
    return name, io_type


def send_io_operation_dispatch(
    pid: int, io_operation: Payload, sock: socket.socket
) -> None:
    """Hand an input/output operation for ``pid`` to an interface."""
    package = Package(Header.IO_OPERATION_DISPATCH_HEADER)
    _append_pid(package.payload, pid)
    subpayload_serialize(package.payload, io_operation)
    package.send(sock)


def receive_io_operation_dispatch(sock: socket.socket) -> Tuple[int, Payload]:
    """Receive an input/output operation and the pid it belongs to."""
    package = _receive_expected(sock, Header.IO_OPERATION_DISPATCH_HEADER)
    pid = _shift_pid(package.payload)
    io_operation = subpayload_deserialize(package.payload)
    return pid, io_operation


def send_io_operation_finished(
    pid: int, return_value: int, sock: socket.socket
) -> None:
    """Report that the operation of ``pid`` finished with ``return_value``."""
    package = Package(Header.IO_OPERATION_FINISHED_HEADER)
    _append_pid(package.payload, pid)
    return_value_serialize(package.payload, return_value)
    package.send(sock)


def receive_io_operation_finished(sock: socket.socket) -> Tuple[int, int]:
    """Receive the pid and return value of a finished operation."""
    package = _receive_expected(sock, Header.IO_OPERATION_FINISHED_HEADER)
    pid = _shift_pid(package.payload)
    return_value = return_value_deserialize(package.payload)
    return pid, return_value


# CPU - Memory


def send_instruction_request(pid: int, pc: int, sock: socket.socket) -> None:
    """Ask memory for the instruction at ``pc`` of process ``pid``."""
    package = Package(Header.INSTRUCTION_REQUEST)
    _append_pid(package.payload, pid)
    package.payload.append(_pack(_PC, pc, "program counter"))
    package.send(sock)