"""HTTP request model and request-line reader."""

from __future__ import annotations

import logging
import os
import socket
from dataclasses import dataclass

from config import RECV_BUFFER_SIZE
from socket_handler import SocketBackend, read_request_bytes

logger = logging.getLogger(__name__)

DEFAULT_PATH = "/"


@dataclass(slots=True)
class HTTPRequest:
    method: str
    path: str
    http_version: str

    @classmethod
    def from_bytes(cls, raw: bytes) -> "HTTPRequest":
        """Parse the request line of raw bytes.

        Never raises: a request line with fewer than three tokens is treated
        as a request for ``/``. Method and version are kept as sent. Tokens
        are split on ASCII whitespace only, and the path is decoded with the
        filesystem encoding so it names the same bytes on disk.
        """
        first_line = raw.split(b"\n", 1)[0]
        tokens = first_line.split()
        if len(tokens) < 3:
            return cls(method="", path=DEFAULT_PATH, http_version="")

        method, path, http_version = tokens[:3]
        return cls(
            method=method.decode("iso-8859-1"),
            path=os.fsdecode(path),
            http_version=http_version.decode("iso-8859-1"),
        )


def read_request(
    backend: SocketBackend,
    client_socket: socket.socket,
    size: int = RECV_BUFFER_SIZE,
) -> tuple[HTTPRequest | None, int]:
    """Read one request from a freshly accepted connection.

    Returns ``(None, 0)`` when the peer closed the connection before sending
    anything. Receive errors propagate.
    """
    raw = read_request_bytes(backend, client_socket, size)
    if not raw:
        return None, 0
    if len(raw) == size:
        logger.debug("Request filled the %s byte receive buffer; trailing bytes ignored", size)
    return HTTPRequest.from_bytes(raw), len(raw)
