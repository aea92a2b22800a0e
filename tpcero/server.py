"""Server: accepts one client and logs every message and package it sends."""

from __future__ import annotations

import argparse
import logging
import socket
import struct
import sys

from .protocol import OpCode, decode_values, recv_exact

PORT = 4444
_INT = struct.Struct("<i")
_logger = logging.getLogger("Servidor")


class ClientDisconnected(ConnectionError):
    """The client closed the connection."""


def start_server(host: str | None = None, port: int = PORT) -> socket.socket:
    """Return an IPv4 socket listening on ``host``:``port``."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    try:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        if hasattr(socket, "SO_REUSEPORT"):
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEPORT, 1)
        sock.bind((host or "", port))
        sock.listen(socket.SOMAXCONN)
    except OSError:
        sock.close()
        raise
    _logger.debug("Listo para escuchar a mi cliente")
    return sock


def wait_client(server_sock: socket.socket) -> socket.socket:
    """Accept one client and return its socket."""
    client, _ = server_sock.accept()
    _logger.info("Se conecto un cliente!")
    return client


def receive_operation(sock: socket.socket) -> int:
    """Read the next operation code; close and raise ClientDisconnected on EOF."""
    try:
        data = recv_exact(sock, _INT.size)
    except OSError as exc:
        sock.close()
        raise ClientDisconnected("el cliente se desconecto") from exc
    (code,) = _INT.unpack(data)
    return code


def receive_buffer(sock: socket.socket) -> bytes:
    """Read a size-prefixed payload."""
    try:
        (size,) = _INT.unpack(recv_exact(sock, _INT.size))
        if size < 0:
            raise ValueError(f"negative payload size {size}")
        return recv_exact(sock, size)
    except ConnectionError as exc:
        raise ClientDisconnected("el cliente se desconecto") from exc


def receive_message(sock: socket.socket) -> str:
    """Read and log a text message."""
    message = receive_buffer(sock).split(b"\0", 1)[0].decode("utf-8", errors="replace")
    _logger.info("Me llego el mensaje %s", message)
    return message


def receive_packet(sock: socket.socket) -> list[str]:
    """Read a package and return its values."""
    return decode_values(receive_buffer(sock))


def serve_client(
    sock: socket.socket, logger: logging.Logger | None = None
) -> list[tuple[OpCode, str | list[str]]]:
    """Handle frames until the client disconnects; return what was received."""
    log = logger or _logger
    received: list[tuple[OpCode, str | list[str]]] = []
    while True:
        try:
            code = receive_operation(sock)
            if code == OpCode.MESSAGE:
                received.append((OpCode.MESSAGE, receive_message(sock)))
            elif code == OpCode.PACKAGE:
                values = receive_packet(sock)
                log.info("Me llegaron los siguientes valores:\n")
                for value in values:
                    log.info("%s", value)
                received.append((OpCode.PACKAGE, values))
            else:
                log.warning("Operacion desconocida. No quieras meter la pata")
        except ClientDisconnected:
            log.error("el cliente se desconecto. Terminando servidor")
            return received


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="tpcero-server")
    parser.add_argument("--port", type=int, default=PORT)
    parser.add_argument("--log", default="log.log")
    args = parser.parse_args(argv)

    formatter = logging.Formatter("[%(levelname)s] %(asctime)s %(name)s: %(message)s")
    handlers = [logging.FileHandler(args.log, encoding="utf-8"), logging.StreamHandler()]
    for handler in handlers:
        handler.setFormatter(formatter)
        _logger.addHandler(handler)
    _logger.setLevel(logging.DEBUG)
    try:
        with start_server(None, args.port) as server_sock:
            _logger.info("Servidor listo para recibir al cliente")
            with wait_client(server_sock) as client:
                serve_client(client, _logger)
        return 1
    finally:
        for handler in handlers:
            _logger.removeHandler(handler)
            handler.close()


if __name__ == "__main__":
    sys.exit(main())