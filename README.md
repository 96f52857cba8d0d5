# osproto

Building blocks for the processes of a simulated operating system (kernel,
CPU, memory and I/O interfaces) that talk to each other over TCP: a byte
payload, framed packages, field codecs, typed messages and socket helpers.

## Modules

- `osproto.payload`: `Payload`, a growable byte buffer with `append`,
  `prepend`, `shift` (remove and return bytes from the front) and `truncate`
  (remove and return bytes from the back). Taking more bytes than it holds, or
  a negative count, raises `PayloadError`; it never grows beyond 2**32 - 1
  bytes.
- `osproto.package`: `Header` (the operation codes) and `Package`, a header
  together with a payload. On the wire a package is one signed header byte, a
  little-endian 32-bit payload size and the payload bytes. `Package.encode`
  gives those bytes, `Package.send(sock)` writes them and
  `Package.receive(sock)` reads one package back. `receive_exact(sock, size)`
  reads an exact number of bytes and raises `ConnectionClosedError` if the
  peer closes first; an unknown header byte raises `ValueError`.
- `osproto.codes`: the enumerations `CpuOpcode` (with `mnemonic()` and
  `CpuOpcode.from_mnemonic(name)`), `EvictionReason`, `IoType` and
  `KernelInterrupt`, and `serialize_enum` / `deserialize_enum`, which write
  and read any of them as one signed byte.
- `osproto.fields`: `PortType` (with `label()`) and serialize/deserialize
  pairs for port types, signed 8-bit return values, nested headers, unsigned
  32-bit sizes, text (length including a NUL terminator, then the UTF-8
  bytes; `None` is written as length zero) and nested payloads
  (size followed by bytes).
- `osproto.exec_context`: `ExecContext` (pid, pc, quantum and
  `CpuRegisters`) with `serialize(payload)` and
  `ExecContext.deserialize(payload)`; also `ExitReason` and `PID_MAX`.
- `osproto.listcodec`: `list_serialize` and `list_deserialize`, a 32-bit
  element count followed by each element, with a codec you pass in.
- `osproto.messages`: one function for each message, such as
  `send_process_dispatch` / `receive_process_dispatch`,
  `send_process_eviction` / `receive_process_eviction`,
  `send_kernel_interrupt` / `receive_kernel_interrupt`,
  `send_interface_data` / `receive_interface_data`, the I/O operation
  dispatch and finished pairs, the handshake pair `send_port_type` /
  `receive_port_type`, and generic header, text and return-value messages.
  `send_process_create`, `send_process_destroy` and
  `send_instruction_request` have no receiving counterpart here. Receiving a
  package with another header raises `UnexpectedHeaderError`.
- `osproto.network`: `Connection` and `Server` records;
  `connect_to_server(connection, retry_delay)` connects and performs the port
  type handshake, retrying until both succeed; `server_start(server,
  retry_delay)` binds and listens, retrying until it succeeds;
  `client_start_try`, `server_start_try` make a single attempt and return
  `None` on failure; `server_accept` waits for a client.
- `osproto.arguments`: `Arguments(max_argc)` splits console lines into
  whitespace-separated words with `use(line)`, keeping them in `argv`, and
  raises `TooManyArgumentsError` past the limit; `clear()` empties it.
  `strip_whitespaces` trims both ends of a string.
- `osproto.runtime`: `initialize_loggers` / `finish_loggers` set up and tear
  down the minimal, module, socket and serialize loggers (each to its own file
  and to standard output); `DrainOngoingSync` coordinates threads that use a
  resource with requests to drain it; `find_by_condition`,
  `remove_by_condition`, `add_unless_any` and `pointers_match` search lists
  with a two-argument condition.

## Example

```python
import socket

from osproto.exec_context import ExecContext
from osproto.messages import receive_process_dispatch, send_process_dispatch

left, right = socket.socketpair()
send_process_dispatch(ExecContext(pid=7, pc=3), left)
context = receive_process_dispatch(right)
assert context.pid == 7
```

## What it does not do

This is a library only. It has no command to run and contains none of the
kernel, CPU, memory or I/O processes themselves, no scheduler and no reading
of configuration files; those are for the programs that use it.

## Installing and testing

```
pip install .
pip install ".[test]"
pytest
```