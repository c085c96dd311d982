"""Main server entry point and connection lifecycle orchestration."""

from __future__ import annotations

import argparse
import json
import logging
import socket
import time

from config import (
    ACCEPT_POLL_SECS,
    CONTENT_ROOT,
    DEFAULT_DOCUMENT,
    HOST,
    LISTEN_BACKLOG,
    LOG_FORMAT,
    PORT,
    RECV_BUFFER_SIZE,
)
from handlers.static_files import serve_static
from metrics import MetricsRegistry
from request import HTTPRequest, read_request
from response import HTTPResponse
from socket_handler import (
    ListenerSetupError,
    SocketBackend,
    StdlibSocketBackend,
    open_listener,
    write_response,
)

logger = logging.getLogger(__name__)


class HTTPServer:
    """Sequential static file server: one connection is served at a time."""

    def __init__(
        self,
        host: str = HOST,
        port: int = PORT,
        *,
        content_root: str = CONTENT_ROOT,
        default_document: str = DEFAULT_DOCUMENT,
        backlog: int = LISTEN_BACKLOG,
        recv_buffer_size: int = RECV_BUFFER_SIZE,
        backend: SocketBackend | None = None,
        log_format: str = LOG_FORMAT,
    ) -> None:
        self.host = host
        self.port = port
        self.content_root = content_root
        self.default_document = default_document
        self.backlog = backlog
        self.recv_buffer_size = recv_buffer_size
        self.backend = backend or StdlibSocketBackend()
        self.log_format = log_format

        self._running = False
        self.metrics = MetricsRegistry()

    def start(self) -> None:
        """Bind, listen and serve connections until stop() is called.

        Raises ListenerSetupError if the listening socket cannot be set up;
        no socket is left open in that case.
        """
        server_socket = open_listener(self.backend, self.host, self.port, self.backlog)
        try:
            # Lets stop() interrupt a pending accept.
            server_socket.settimeout(ACCEPT_POLL_SECS)
            self._running = True
            self.port = server_socket.getsockname()[1]
            logger.info("Server is running on port %s", self.port)
            self._accept_loop(server_socket)
        finally:
            self._running = False
            self.backend.close(server_socket)

    def stop(self) -> None:
        self._running = False

    def _accept_loop(self, server_socket: socket.socket) -> None:
        while self._running:
            logger.info("Waiting for connections...")
            accepted = self._accept(server_socket)
            if accepted is None:
                continue
            client_socket, address = accepted
            self._handle_client(client_socket, address)

    def _accept(
        self, server_socket: socket.socket
    ) -> tuple[socket.socket, tuple[str, int]] | None:
        while self._running:
            try:
                return self.backend.accept(server_socket)
            except socket.timeout:
                continue
            except OSError as exc:
                if not self._running:
                    return None
                self.metrics.record_accept_error(exc.__class__.__name__)
                logger.warning("accept failed: %s", exc)
                return None
        return None

    def _handle_client(self, client_socket: socket.socket, address: tuple[str, int]) -> None:
        started_at = time.perf_counter()
        self.metrics.connection_opened()
        try:
            try:
                request, bytes_in = read_request(
                    self.backend, client_socket, self.recv_buffer_size
                )
            except OSError as exc:
                self.metrics.record_read_error(exc.__class__.__name__)
                logger.warning("receive from %s failed: %s", address[0], exc)
                return

            if request is None:
                self.metrics.record_empty_read()
                logger.debug("client %s closed the connection without a request", address[0])
                return

            response = serve_static(
                request,
                content_root=self.content_root,
                default_document=self.default_document,
            )
            try:
                bytes_sent = write_response(self.backend, client_socket, response.to_bytes())
            except OSError as exc:
                self.metrics.record_write_error(exc.__class__.__name__)
                logger.warning("send to %s failed: %s", address[0], exc)
                bytes_sent = 0

            self._record_and_log(
                address=address,
                request=request,
                response=response,
                bytes_in=bytes_in,
                bytes_out=bytes_sent,
                started_at=started_at,
            )
        except Exception:
            logger.exception("Unhandled error while serving %s", address[0])
        finally:
            try:
                self.backend.close(client_socket)
            except OSError as exc:
                logger.warning("close of %s failed: %s", address[0], exc)
            self.metrics.connection_closed()

    def _record_and_log(
        self,
        *,
        address: tuple[str, int],
        request: HTTPRequest,
        response: HTTPResponse,
        bytes_in: int,
        bytes_out: int,
        started_at: float,
    ) -> None:
        duration_ms = (time.perf_counter() - started_at) * 1000
        self.metrics.record_response(
            status_code=response.status_code,
            duration_ms=duration_ms,
            bytes_in=bytes_in,
            bytes_sent=bytes_out,
        )
        event = {
            "client": address[0],
            "method": request.method or "-",
            "path": request.path,
            "status": response.status_code,
            "bytes_in": bytes_in,
            "bytes_out": bytes_out,
            "latency_ms": round(duration_ms, 3),
        }
        if self.log_format == "json":
            logger.info(json.dumps(event, sort_keys=True))
            return

        logger.info(
            "client=%s method=%s path=%s status=%s bytes_in=%s bytes_out=%s duration_ms=%.2f",
            event["client"],
            event["method"],
            event["path"],
            event["status"],
            event["bytes_in"],
            event["bytes_out"],
            duration_ms,
        )


def _port(value: str) -> int:
    try:
        port = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid port number: {value!r}") from exc
    if not 0 <= port <= 65535:
        raise argparse.ArgumentTypeError(f"port out of range: {port}")
    return port


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Serve static files over HTTP")
    parser.add_argument("port", type=_port)
    parser.add_argument("--host", default=HOST)
    parser.add_argument("--root", default=CONTENT_ROOT, help="content root directory")
    parser.add_argument("--default-document", default=DEFAULT_DOCUMENT)
    parser.add_argument("--log-format", choices=["plain", "json"], default=LOG_FORMAT)
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(level=logging.INFO)
    server = HTTPServer(
        host=args.host,
        port=args.port,
        content_root=args.root,
        default_document=args.default_document,
        log_format=args.log_format,
    )
    try:
        server.start()
    except ListenerSetupError as exc:
        logger.error("Cannot start server: %s", exc)
        return 1
    except KeyboardInterrupt:
        server.stop()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
