"""Client and server sockets with retrying connection and handshake."""

from __future__ import annotations

import logging
import socket
import time
from dataclasses import dataclass
from typing import Optional, Union

from osproto.fields import PortType
from osproto.messages import receive_port_type, send_port_type
from osproto.runtime import SOCKET_LOGGER_NAME

_logger = logging.getLogger(SOCKET_LOGGER_NAME)

RETRY_CONNECTION_IN_SECONDS = 10
MAX_CONNECTION_ATTEMPTS = 10

Port = Union[str, int]


@dataclass
class Connection:
    """A client's link to a server of a known type."""

    client_type: PortType
    server_type: PortType
    ip: str
    port: Port
    sock: Optional[socket.socket] = None


@dataclass
class Server:
    """A listening endpoint and the kind of clients it serves."""

    server_type: PortType
    clients_type: PortType
    port: Port
    listener: Optional[socket.socket] = None


def client_start_try(ip: str, port: Port) -> Optional[socket.socket]:
    """Try each address of ``ip``:``port`` once; return a connected socket or None."""
    try:
        candidates = socket.getaddrinfo(
            ip, port, socket.AF_UNSPEC, socket.SOCK_STREAM
        )
    except socket.gaierror as error:
        _logger.warning("getaddrinfo: %s", error)
        return None

    for family, socktype, proto, _, address in candidates:
        try:
            sock = socket.socket(family, socktype, proto)
        except OSError as error:
            _logger.warning("socket: %s", error)
            continue
        try:
            sock.connect(address)
        except OSError as error:
            _logger.warning("connect: %s", error)
            sock.close()
            continue
        return sock
    return None


def connect_to_server(
    connection: Connection, retry_delay: float = RETRY_CONNECTION_IN_SECONDS
) -> socket.socket:
    """Connect and handshake with the server, retrying until both succeed.

    The connected socket is stored in ``connection.sock`` and returned.
    """
    server_label = connection.server_type.label()
    _logger.debug("connection thread for server %s started", server_label)
    while True:
        _logger.info(
            "connecting to server %s at IP: %s - port: %s...",
            server_label, connection.ip, connection.port,
        )
        sock = client_start_try(connection.ip, connection.port)
        if sock is None:
            _logger.warning(
                "could not connect to server %s at IP: %s - port: %s; "
                "retrying in %s seconds",
                server_label, connection.ip, connection.port, retry_delay,
            )
            time.sleep(retry_delay)
            continue

        _logger.debug(
            "connected to server %s at IP: %s - port: %s",
            server_label, connection.ip, connection.port,
        )
        try:
            send_port_type(connection.client_type, sock)
            peer_type = receive_port_type(sock)
        except (OSError, ValueError) as error:
            _logger.warning(
                "handshake with server %s failed (%s); retrying in %s seconds",
                server_label, error, retry_delay,
            )
            sock.close()
            time.sleep(retry_delay)
            continue

        if peer_type != connection.server_type:
            _logger.warning(
                "handshake from server %s not recognised (got %s); "
                "retrying in %s seconds",
                server_label, peer_type.label(), retry_delay,
            )
            sock.close()
            time.sleep(retry_delay)
            continue

        _logger.debug("handshake OK with server %s", server_label)
        connection.sock = sock
        return sock


def server_start_try(port: Port) -> Optional[socket.socket]:
    """Try to bind and listen on ``port``; return the listener or None."""
    try:
        candidates = socket.getaddrinfo(
            None, port, socket.AF_UNSPEC, socket.SOCK_STREAM, 0, socket.AI_PASSIVE
        )
    except socket.gaierror as error:
        _logger.warning("getaddrinfo: %s", error)
        return None

    for family, socktype, proto, _, address in candidates:
        try:
            sock = socket.socket(family, socktype, proto)
        except OSError as error:
            _logger.warning("socket: %s", error)
            continue
        try:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            sock.bind(address)
        except OSError as error:
            _logger.warning("bind: %s", error)
            sock.close()
            continue
        try:
            sock.listen(socket.SOMAXCONN)
        except OSError as error:
            _logger.warning("listen: %s", error)
            sock.close()
            return None
        return sock
    return None


def server_start(
    server: Server, retry_delay: float = RETRY_CONNECTION_IN_SECONDS
) -> socket.socket:
    """Start listening for ``server``, retrying until it succeeds."""
    label = server.server_type.label()
    while True:
        _logger.info("starting server %s on port: %s...", label, server.port)
        listener = server_start_try(server.port)
        if listener is not None:
            break
        _logger.warning(
            "could not start server %s on port: %s; retrying in %s seconds",
            label, server.port, retry_delay,
        )
        time.sleep(retry_delay)
    server.listener = listener
    _logger.debug("server %s listening on port: %s", label, server.port)
    return listener


def server_accept(listener: socket.socket) -> socket.socket:
    """Block until a client connects and return its socket."""
    try:
        client, _ = listener.accept()
    except OSError as error:
        _logger.warning("accept: %s", error)
        raise
    return client