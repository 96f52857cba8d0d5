import socket

import pytest

from osproto.package import ConnectionClosedError, Header, Package, receive_exact
from osproto.payload import Payload


@pytest.fixture
def pair():
    left, right = socket.socketpair()
    left.settimeout(5)
    right.settimeout(5)
    yield left, right
    left.close()
    right.close()


def test_encode_wire_bytes():
    package = Package(Header.PROCESS_DESTROY_HEADER, Payload(b"\x01\x02"))
    assert package.encode() == b"\x05\x02\x00\x00\x00\x01\x02"


def test_encode_length_is_prefix_plus_payload():
    data = b"abcdefgh"
    package = Package(Header.READ_REQUEST, Payload(data))
    encoded = package.encode()
    assert len(encoded) == 5 + len(data)
    assert encoded.endswith(data)
    assert encoded[0] == int(Header.READ_REQUEST)


def test_default_payload_is_empty():
    package = Package(Header.PORT_TYPE_HEADER)
    assert len(package.payload) == 0
    assert package.encode()[1:] == b"\x00\x00\x00\x00"


def test_send_receive_round_trip(pair):
    left, right = pair
    sent = Package(Header.IO_OPERATION_DISPATCH_HEADER, Payload(b"hello world"))
    sent.send(left)
    received = Package.receive(right)
    assert received.header is Header.IO_OPERATION_DISPATCH_HEADER
    assert bytes(received.payload) == b"hello world"


def test_round_trip_empty_payload(pair):
    left, right = pair
    Package(Header.PAGE_SIZE_REQUEST).send(left)
    received = Package.receive(right)
    assert received == Package(Header.PAGE_SIZE_REQUEST)


def test_several_packages_in_sequence(pair):
    left, right = pair
    headers = [Header.FRAME_ACCESS, Header.COPY_REQUEST, Header.IO_STDOUT_READ_MEMORY]
    for index, header in enumerate(headers):
        Package(header, Payload(bytes([index]) * (index + 1))).send(left)
    for index, header in enumerate(headers):
        received = Package.receive(right)
        assert received.header is header
        assert bytes(received.payload) == bytes([index]) * (index + 1)


def test_receive_on_closed_connection(pair):
    left, right = pair
    left.close()
    with pytest.raises(ConnectionClosedError):
        Package.receive(right)


def test_receive_truncated_payload(pair):
    left, right = pair
    encoded = Package(Header.WRITE_REQUEST, Payload(b"abcdef")).encode()
    left.sendall(encoded[:-2])
    left.close()
    with pytest.raises(ConnectionClosedError):
        Package.receive(right)


def test_receive_unknown_header(pair):
    left, right = pair
    left.sendall(bytes([len(Header)]) + b"\x00\x00\x00\x00")
    with pytest.raises(ValueError):
        Package.receive(right)


def test_receive_exact_joins_pieces(pair):
    left, right = pair
    left.sendall(b"ab")
    left.sendall(b"cd")
    left.sendall(b"ef")
    assert receive_exact(right, 6) == b"abcdef"


def test_receive_exact_zero(pair):
    _, right = pair
    assert receive_exact(right, 0) == b""


@pytest.mark.parametrize(
    "header, wire_byte",
    [
        (Header.PORT_TYPE_HEADER, 0),
        (Header.PROCESS_DISPATCH_HEADER, 1),
        (Header.IO_OPERATION_FINISHED_HEADER, 8),
        (Header.WRITE_REQUEST, 11),
        (Header.COPY_REQUEST, 12),
        (Header.RESIZE_REQUEST, 13),
        (Header.PAGE_SIZE_REQUEST, 16),
        (Header.IO_STDOUT_READ_MEMORY, 20),
    ],
)
def test_header_wire_byte_matches_declaration(header, wire_byte):
    assert Package(header).encode()[0] == wire_byte