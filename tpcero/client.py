"""Client: reads its configuration, logs, and sends a message and a package."""

from __future__ import annotations

import argparse
import logging
import socket
import sys
from collections.abc import Callable, Iterable

from .protocol import OpCode, Packet, encode_message

_LOG_FORMAT = "[%(levelname)s] %(asctime)s %(name)s/(%(process)d): %(message)s"


class ConfigError(Exception):
    """The configuration file could not be read or lacks a required key."""


def start_logger(path: str = "tp0.log") -> logging.Logger:
    """Return the client logger, writing INFO and above to ``path`` and stderr."""
    logger = logging.getLogger("cliente")
    _close_logger(logger)
    logger.setLevel(logging.INFO)
    formatter = logging.Formatter(_LOG_FORMAT)
    for handler in (logging.FileHandler(path, encoding="utf-8"), logging.StreamHandler()):
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    return logger


def _close_logger(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


def load_config(path: str = "cliente.config") -> dict[str, str]:
    """Read ``KEY=VALUE`` lines, ignoring blanks and ``#`` comments."""
    try:
        with open(path, encoding="utf-8") as handle:
            lines = handle.read().splitlines()
    except OSError as exc:
        raise ConfigError(f"No se pudo abrir el archivo {path}") from exc
    config: dict[str, str] = {}
    for line in lines:
        if not line.strip() or line.lstrip().startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        config[key.strip()] = value.strip()
    return config


def read_console(logger: logging.Logger, reader: Callable[[str], str] | None = None) -> str:
    """Read one line from the console, log it and return it."""
    read = reader if reader is not None else input
    try:
        line = read(">")
    except EOFError:
        line = ""
    logger.info("%s", line)
    return line


def create_connection(ip: str, port: str | int) -> socket.socket:
    """Open a TCP connection over IPv4; raise ConnectionError on failure."""
    try:
        family, socktype, proto, _, address = socket.getaddrinfo(
            ip, port, socket.AF_INET, socket.SOCK_STREAM
        )[0]
        sock = socket.socket(family, socktype, proto)
    except OSError as exc:
        raise ConnectionError(f"No se pudo conectar con el servidor: {exc}") from exc
    try:
        sock.connect(address)
    except OSError as exc:
        sock.close()
        raise ConnectionError(f"No se pudo conectar con el servidor: {exc}") from exc
    return sock


def send_message(message: str, sock: socket.socket) -> None:
    """Send a single text message frame."""
    sock.sendall(encode_message(message))


def send_packet(packet: Packet, sock: socket.socket) -> None:
    """Send a package frame."""
    sock.sendall(packet.serialize())


def build_packet(lines: Iterable[str]) -> Packet:
    """Return a package holding every line given."""
    packet = Packet(OpCode.PACKAGE)
    for line in lines:
        packet.add(line)
    return packet


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="tpcero-client")
    parser.add_argument("--config", default="cliente.config")
    parser.add_argument("--log", default="tp0.log")
    args = parser.parse_args(argv)

    logger = start_logger(args.log)
    try:
        logger.info("Hola soy un logger")
        try:
            config = load_config(args.config)
        except ConfigError as exc:
            print(exc, file=sys.stderr)
            return 1

        value = config.get("CLAVE")
        ip = config.get("IP")
        port = config.get("PUERTO")
        logger.info("Valor: %s", value)
        logger.info("IP: %s", ip)
        logger.info("Puerto: %s", port)

        read_console(logger)

        missing = [key for key, item in (("CLAVE", value), ("IP", ip), ("PUERTO", port)) if item is None]
        if missing:
            print(f"Faltan claves en {args.config}: {', '.join(missing)}", file=sys.stderr)
            return 1

        try:
            sock = create_connection(ip, port)
        except ConnectionError as exc:
            print(exc, file=sys.stderr)
            return 1

        with sock:
            send_message(value, sock)
            try:
                line = input("Enviar mensaje al servidor: ")
            except EOFError:
                line = ""
            send_packet(build_packet([line]), sock)
        return 0
    finally:
        _close_logger(logger)


if __name__ == "__main__":
    sys.exit(main())