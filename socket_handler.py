"""Low-level socket setup, read and write utilities."""

from __future__ import annotations

import socket
from typing import Protocol

from config import LISTEN_BACKLOG, RECV_BUFFER_SIZE


class ListenerError(Exception):
    """Base class for socket errors raised by the server."""


class ListenerSetupError(ListenerError):
    """Raised when the listening socket cannot be created, configured, bound or put in listen mode."""

    def __init__(self, stage: str, message: str) -> None:
        super().__init__(f"{stage}: {message}")
        self.stage = stage


class SocketBackend(Protocol):
    """Socket operations used by the accept loop and connection handler."""

    def create(self) -> socket.socket: ...

    def set_reuse_address(self, sock: socket.socket) -> None: ...

    def bind(self, sock: socket.socket, host: str, port: int) -> None: ...

    def listen(self, sock: socket.socket, backlog: int) -> None: ...

    def accept(self, sock: socket.socket) -> tuple[socket.socket, tuple[str, int]]: ...

    def send(self, sock: socket.socket, payload: bytes) -> None: ...

    def receive(self, sock: socket.socket, size: int) -> bytes: ...

    def close(self, sock: socket.socket) -> None: ...


class StdlibSocketBackend:
    """SocketBackend on top of the standard socket module."""

    def create(self) -> socket.socket:
        return socket.socket(socket.AF_INET, socket.SOCK_STREAM)

    def set_reuse_address(self, sock: socket.socket) -> None:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)

    def bind(self, sock: socket.socket, host: str, port: int) -> None:
        sock.bind((host, port))

    def listen(self, sock: socket.socket, backlog: int) -> None:
        sock.listen(backlog)

    def accept(self, sock: socket.socket) -> tuple[socket.socket, tuple[str, int]]:
        return sock.accept()

    def send(self, sock: socket.socket, payload: bytes) -> None:
        sock.sendall(payload)

    def receive(self, sock: socket.socket, size: int) -> bytes:
        return sock.recv(size)

    def close(self, sock: socket.socket) -> None:
        sock.close()


def open_listener(
    backend: SocketBackend,
    host: str,
    port: int,
    backlog: int = LISTEN_BACKLOG,
) -> socket.socket:
    """Create a bound, listening socket or raise ListenerSetupError.

    A socket that was created before the failing step is closed before the
    error propagates.
    """
    try:
        sock = backend.create()
    except OSError as exc:
        raise ListenerSetupError("socket", str(exc)) from exc

    stage = "setsockopt"
    try:
        backend.set_reuse_address(sock)
        stage = "bind"
        backend.bind(sock, host, port)
        stage = "listen"
        backend.listen(sock, backlog)
    except (OSError, OverflowError) as exc:
        backend.close(sock)
        raise ListenerSetupError(stage, str(exc)) from exc
    return sock


def read_request_bytes(
    backend: SocketBackend,
    client_socket: socket.socket,
    size: int = RECV_BUFFER_SIZE,
) -> bytes:
    """Read at most ``size`` bytes in a single receive call.

    Returns b"" when the peer closed the connection. Socket errors propagate
    to the caller.
    """
    return backend.receive(client_socket, size)


def write_response(backend: SocketBackend, client_socket: socket.socket, payload: bytes) -> int:
    """Write the complete response payload in one send call."""
    backend.send(client_socket, payload)
    return len(payload)
